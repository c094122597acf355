"""Authenticated identities given to the game. The Microsoft, Xbox Live and XSTS token
exchange producing them is done outside of this library, only the resulting record is
modeled here.
"""


class AuthSession:
    """An abstract class for defining authentication sessions. These sessions are then
    provided as an argument for starting the game. They provide all information such as
    access player's token, username or UUID.
    """

    user_type = "msa"

    def __init__(self) -> None:
        self.access_token = ""
        self.username = ""
        self.uuid = ""
        self.client_id = ""

    def format_token_argument(self, legacy: bool) -> str:
        """Format the token for the game's command line. Modern versions uses the format
        `token:{access_token}:{uuid}` and legacy versions uses `{access_token}`.

        :param legacy: True to enable legacy formatting, used by older versions.
        :return: The formatted token.
        """
        return f"token:{self.access_token}:{self.uuid}" if legacy else self.access_token

    def get_xuid(self) -> str:
        """Getter specific to Microsoft, but common to auth sessions because it's used for
        Minecraft's command line arguments.
        """
        return ""

    def __repr__(self) -> str:
        return f"<{self.__class__.__name__} {self.username} ({self.uuid})>"


class MicrosoftAuthSession(AuthSession):
    """Session of a Microsoft account owning the game.
    """

    def __init__(self, username: str, uuid: str, access_token: str, *,
        xuid: str = "",
        client_id: str = ""
    ) -> None:
        super().__init__()
        self.username = username
        self.uuid = uuid
        self.access_token = access_token
        self.xuid = xuid
        self.client_id = client_id

    def get_xuid(self) -> str:
        return self.xuid


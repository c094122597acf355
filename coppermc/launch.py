"""Resolution of the game's command line from a parsed version metadata. Conditional
arguments are filtered by rules and every `${name}` placeholder is replaced by the
value computed from the launch options.
"""

from pathlib import Path
import platform
import os
import re

from .rule import PredicateContext, QuickPlay, interpret_rule, minecraft_os, minecraft_arch
from .manifest import Manifest, Argument, LegacyArguments
from .util import jvm_bin_filename, sanitize_version_name
from .auth import AuthSession
from . import LAUNCHER_NAME, LAUNCHER_VERSION

from typing import Optional, Iterator, Dict, List, Tuple, Any, Callable


class Context:
    """Context of the game's installation and runtime. This defines various directories
    where versions, assets and libraries are stored, as well as a bin directory for
    temporary runtime files, and also a working directory from where the game will run.
    Nothing is installed by this library, these directories are given to the game.
    """

    def __init__(self,
        main_dir: Optional[Path] = None,
        work_dir: Optional[Path] = None
    ) -> None:
        """Construct a Minecraft installation context.

        Note that these paths can perfectly be relative paths, they are computed to
        absolute paths when given to the game.

        :param main_dir: The main directory where versions, assets and libraries are
        installed. If not specified this path will be set the usual `.minecraft`.
        :param work_dir: The working directory from where the game is run, the game stores
        thing like saves, resource packs, options and mods if relevant. This defaults to
        `main_dir` if not specified.
        """

        main_dir = get_minecraft_dir() if main_dir is None else main_dir
        self.work_dir = main_dir if work_dir is None else work_dir
        self.versions_dir = main_dir / "versions"
        self.assets_dir = main_dir / "assets"
        self.libraries_dir = main_dir / "libraries"
        self.bin_dir = self.work_dir / "bin"

    def version_dir(self, version: str) -> Path:
        return self.versions_dir / version

    def metadata_file(self, version: str) -> Path:
        """Return the path of the metadata file of the given version.
        """
        return self.version_dir(version) / f"{version}.json"

    def jar_file(self, version: str) -> Path:
        """Return the path of the JAR file of the given version.
        """
        return self.version_dir(version) / f"{version}.jar"


class Watcher:
    """Base class for a watcher of the resolution process.
    """

    def handle(self, event: Any) -> None:
        """Called when the watcher can handle the given event. Default implementation
        does nothing.
        """


class WatcherGroup(Watcher):
    """A group of watcher that is itself a watcher, its functions dispatches events to
    all watchers.
    """

    def __init__(self) -> None:
        self.inner: List[Watcher] = []

    def add(self, watcher: Watcher) -> None:
        self.inner.append(watcher)

    def remove(self, watcher: Watcher) -> None:
        self.inner.remove(watcher)

    def handle(self, event: Any) -> None:
        for watcher in self.inner:
            watcher.handle(event)


class SimpleWatcher(Watcher):
    """A watcher that dispatches events to a handler registered for the event's type.
    """

    def __init__(self, handlers: Dict[type, Callable[[Any], None]]) -> None:
        self.handlers = handlers

    def handle(self, event: Any) -> None:
        handler = self.handlers.get(type(event))
        if handler is not None:
            handler(event)


class ResolvingEvent:
    """Event triggered when the arguments of a version start being resolved.
    """
    __slots__ = "version", "generation"
    def __init__(self, version: str, generation: int) -> None:
        self.version = version
        self.generation = generation

class FeaturesEvent:
    """Event triggered when features for the version has been computed. Only enabled
    features are given as list of features.
    """
    __slots__ = "features",
    def __init__(self, features: List[str]) -> None:
        self.features = features

class ResolvedEvent:
    """Event triggered when the arguments have been resolved.
    """
    __slots__ = "jvm_count", "game_count", "legacy"
    def __init__(self, jvm_count: int, game_count: int, legacy: bool) -> None:
        self.jvm_count = jvm_count
        self.game_count = game_count
        self.legacy = legacy


class LaunchOptions:
    """Everything needed to resolve the command line of a version, apart from its
    metadata. The class path is computed by the caller, usually after libraries have
    been downloaded, and is given as a precomputed string.
    """

    def __init__(self, context: Context, auth_session: AuthSession, version_name: str, *,
        is_snapshot: bool = False,
        natives_dir: Optional[Path] = None,
        classpath: str = "",
        assets_index_name: Optional[str] = None,
        demo: bool = False,
        resolution: Optional[Tuple[int, int]] = None,
        quick_play: Optional[QuickPlay] = None,
        quick_play_path: Optional[Path] = None,
        launcher_name: str = LAUNCHER_NAME,
        launcher_version: str = LAUNCHER_VERSION,
        jvm_path: Optional[Path] = None,
        ram_size: Optional[Tuple[str, str]] = None,
    ) -> None:
        self.context = context
        self.auth_session = auth_session
        self.version_name = version_name
        self.is_snapshot = is_snapshot
        self.natives_dir = natives_dir
        self.classpath = classpath
        self.assets_index_name = assets_index_name
        self.demo = demo
        self.resolution = resolution
        self.quick_play = quick_play
        self.quick_play_path = quick_play_path
        self.launcher_name = launcher_name
        self.launcher_version = launcher_version
        self.jvm_path = jvm_path
        self.ram_size = ram_size

    def predicate_context(self, *,
        os_name: Optional[str] = None,
        arch: Optional[str] = None,
        os_version: Optional[str] = None
    ) -> PredicateContext:
        """Build the predicate context for these options, host facts that are not
        given are read from the running host.
        """
        return PredicateContext(
            minecraft_os if os_name is None else os_name,
            minecraft_arch if arch is None else arch,
            platform.version() if os_version is None else os_version,
            demo=self.demo,
            quick_play=self.quick_play,
            custom_resolution=self.resolution is not None,
            quick_plays_support=self.quick_play_path is not None)

    def args_replacements(self, manifest: Manifest) -> Dict[str, str]:
        """Compute the value of every placeholder supported in game and JVM arguments.
        Placeholders without any data available are replaced by an empty string.
        """

        auth_session = self.auth_session
        assets_index_name = self.assets_index_name or manifest.get_asset_index_name()

        replacements = {
            # Game
            "auth_player_name": auth_session.username,
            "version_name": sanitize_version_name(self.version_name),
            "game_directory": str(self.context.work_dir.absolute()),
            "assets_root": str(self.context.assets_dir.absolute()),
            "assets_index_name": sanitize_version_name(assets_index_name),
            "auth_uuid": auth_session.uuid,
            "auth_access_token": auth_session.format_token_argument(False),
            "auth_xuid": auth_session.get_xuid(),
            "clientid": auth_session.client_id,
            "user_type": auth_session.user_type,
            "version_type": "snapshot" if self.is_snapshot else "release",
            "resolution_width": "",
            "resolution_height": "",
            "quickPlayPath": "" if self.quick_play_path is None else str(self.quick_play_path.absolute()),
            "quickPlaySingleplayer": "",
            "quickPlayMultiplayer": "",
            "quickPlayRealms": "",
            # Game (legacy)
            "auth_session": auth_session.format_token_argument(True),
            "game_assets": str(self.context.assets_dir.absolute()),
            "user_properties": "{}",
            # JVM
            "natives_directory": "" if self.natives_dir is None else str(self.natives_dir.absolute()),
            "launcher_name": self.launcher_name,
            "launcher_version": self.launcher_version,
            "library_directory": str(self.context.libraries_dir.absolute()),
            "classpath_separator": os.pathsep,
            "classpath": self.classpath,
        }

        if self.quick_play is not None:
            self.quick_play.add_args_replacements(replacements)

        if self.resolution is not None:
            replacements["resolution_width"] = str(self.resolution[0])
            replacements["resolution_height"] = str(self.resolution[1])

        return replacements


class ResolvedCommandLine:
    """The resolved command line of the game, the JVM arguments, the main class and the
    game arguments are kept apart.
    """

    def __init__(self, jvm_args: List[str], main_class: str, game_args: List[str], *,
        jvm_path: Optional[Path] = None,
        ram_size: Optional[Tuple[str, str]] = None
    ) -> None:
        self.jvm_args = jvm_args
        self.main_class = main_class
        self.game_args = game_args
        self.jvm_path = jvm_path
        self.ram_size = ram_size

    @property
    def jvm_line(self) -> str:
        return " ".join(self.jvm_args)

    @property
    def game_line(self) -> str:
        return " ".join(self.game_args)

    def command(self) -> List[str]:
        """Return the full list of arguments to give to the process launcher, starting
        with the JVM executable.
        """
        args = [jvm_bin_filename if self.jvm_path is None else str(self.jvm_path)]
        if self.ram_size is not None:
            args.append(f"-Xms{self.ram_size[0]}")
            args.append(f"-Xmx{self.ram_size[1]}")
        args.extend(self.jvm_args)
        args.append(self.main_class)
        args.extend(self.game_args)
        return args

    def __repr__(self) -> str:
        return f"<ResolvedCommandLine jvm: {len(self.jvm_args)}, main class: {self.main_class}, game: {len(self.game_args)}>"


def resolve_arguments(manifest: Manifest, options: LaunchOptions,
    ctx: Optional[PredicateContext] = None, *,
    watcher: Optional[Watcher] = None
) -> ResolvedCommandLine:
    """Resolve the command line of the given version metadata.

    Legacy arguments are split on whitespace before placeholders are substituted, so
    a value containing spaces, like a game directory, stays a single argument.

    :param manifest: The parsed version metadata, of any generation.
    :param options: The launch options giving values of the placeholders.
    :param ctx: The context rules are evaluated against, defaults to the context built
    by the options for the running host.
    :param watcher: Optional watcher notified of the resolution steps.
    :raises UnsupportedPredicateError: If a rule of an included argument cannot be
    interpreted.
    :raises MissingLegacyArgumentsError: If the metadata has no arguments at all.
    """

    watcher = watcher or Watcher()
    if ctx is None:
        ctx = options.predicate_context()

    watcher.handle(ResolvingEvent(manifest.id, manifest.version))
    watcher.handle(FeaturesEvent(ctx.enabled_features()))

    replacements = options.args_replacements(manifest)
    jvm_args: List[str] = []
    game_args: List[str] = []

    arguments = manifest.get_arguments()
    if isinstance(arguments, LegacyArguments):
        # Rules didn't exist for legacy arguments, and there were no JVM arguments.
        game_args.extend(arguments.text.split())
    else:
        interpret_args(arguments.jvm, ctx, jvm_args, "metadata: /arguments/jvm")
        interpret_args(arguments.game, ctx, game_args, "metadata: /arguments/game")

    resolved = ResolvedCommandLine(
        list(replace_list_vars(jvm_args, replacements)),
        manifest.get_main_class(),
        list(replace_list_vars(game_args, replacements)),
        jvm_path=options.jvm_path,
        ram_size=options.ram_size)

    watcher.handle(ResolvedEvent(len(resolved.jvm_args), len(resolved.game_args), isinstance(arguments, LegacyArguments)))
    return resolved


def interpret_args(args: List[Argument], ctx: PredicateContext, dst: List[str], path: str) -> None:
    """Common function for interpreting a list of arguments, whose may be conditional
    under some rules. Arguments whose rules fail are omitted entirely.
    """

    for i, arg in enumerate(args):
        if isinstance(arg, str):
            dst.append(arg)
        elif interpret_rule(arg.rules, ctx, f"{path}/{i}/rules"):
            dst.extend(arg.values())


_VAR_PATTERN = re.compile(r"\$\{([^}]*)\}")


def replace_vars(text: str, replacements: Dict[str, str]) -> str:
    """Replace all variables of the form `${foo}` in a string. Variables missing from
    the replacements are left untouched.
    """
    return _VAR_PATTERN.sub(lambda match: replacements.get(match.group(1), match.group(0)), text)


def replace_list_vars(text_list: List[str], replacements: Dict[str, str]) -> Iterator[str]:
    """Call `replace_vars` on multiple texts in a list with the same replacements.
    """
    return (replace_vars(elt, replacements) for elt in text_list)


def get_minecraft_dir() -> Path:
    """Internal function to get the default directory for installing
    and running Minecraft.
    """
    home = Path.home()
    return {
        "Windows": home.joinpath("AppData", "Roaming", ".minecraft"),
        "Darwin": home.joinpath("Library", "Application Support", "minecraft"),
    }.get(platform.system(), home / ".minecraft")

"""Rules interpretation for version metadata. Rules guard conditional arguments and
libraries, they are evaluated against a `PredicateContext` that snapshots the facts of
the host and of the launch being prepared.
"""

import platform
import re

from typing import Optional, Dict, List, Any, Iterable


# Name of the OS as used by Minecraft.
minecraft_os = {
    "Linux": "linux",
    "Windows": "windows",
    "Darwin": "osx",
}.get(platform.system())

# Name of the processor's architecture as used by Minecraft.
minecraft_arch = {
    "i386": "x86",
    "i686": "x86",
    "x86": "x86",
    "x86_64": "x86_64",
    "amd64": "x86_64",
    "arm64": "arm64",
    "aarch64": "arm64",
    "armv7l": "arm32",
    "armv6l": "arm32",
}.get(platform.machine().lower())

# The OS names and architectures that rules are allowed to reference.
KNOWN_OS_NAMES = ("windows", "osx", "linux")
KNOWN_ARCHS = ("x86", "x86_64", "arm32", "arm64")

# The only OS version constraint found in metadata, it targets Windows 10 and later.
WINDOWS_10_VERSION = "^10\\."

FEATURE_DEMO_USER = "is_demo_user"
FEATURE_CUSTOM_RESOLUTION = "has_custom_resolution"
FEATURE_QUICK_PLAYS_SUPPORT = "has_quick_plays_support"
FEATURE_QUICK_PLAY_SINGLEPLAYER = "is_quick_play_singleplayer"
FEATURE_QUICK_PLAY_MULTIPLAYER = "is_quick_play_multiplayer"
FEATURE_QUICK_PLAY_REALMS = "is_quick_play_realms"

KNOWN_FEATURES = (
    FEATURE_DEMO_USER,
    FEATURE_CUSTOM_RESOLUTION,
    FEATURE_QUICK_PLAYS_SUPPORT,
    FEATURE_QUICK_PLAY_SINGLEPLAYER,
    FEATURE_QUICK_PLAY_MULTIPLAYER,
    FEATURE_QUICK_PLAY_REALMS,
)


class QuickPlay:
    """Base class for quick play launch methods for the game.
    Note that these quick play types may not be supported by the game.
    """

    feature: str

    def add_args_replacements(self, args_replacements: Dict[str, str]) -> None:
        raise NotImplementedError

class QuickPlaySingleplayer(QuickPlay):
    """Quick play mode to launch a singleplayer level given its name.
    """

    feature = FEATURE_QUICK_PLAY_SINGLEPLAYER

    def __init__(self, level_name: str) -> None:
        self.level_name = level_name

    def add_args_replacements(self, args_replacements: Dict[str, str]) -> None:
        args_replacements["quickPlaySingleplayer"] = self.level_name

    def __repr__(self) -> str:
        return f"<QuickPlaySingleplayer {self.level_name}>"

class QuickPlayMultiplayer(QuickPlay):
    """Quick play mode to automatically connect to a given server when launching game.
    """

    feature = FEATURE_QUICK_PLAY_MULTIPLAYER

    def __init__(self, host: str, port: int = 25565) -> None:
        self.host = host
        self.port = port

    def add_args_replacements(self, args_replacements: Dict[str, str]) -> None:
        args_replacements["quickPlayMultiplayer"] = f"{self.host}:{self.port}"

    def __repr__(self) -> str:
        return f"<QuickPlayMultiplayer {self.host}:{self.port}>"

class QuickPlayRealms(QuickPlay):
    """Quick play mode to automatically connection to a given realm when launching game.
    """

    feature = FEATURE_QUICK_PLAY_REALMS

    def __init__(self, realm: str) -> None:
        self.realm = realm

    def add_args_replacements(self, args_replacements: Dict[str, str]) -> None:
        args_replacements["quickPlayRealms"] = self.realm

    def __repr__(self) -> str:
        return f"<QuickPlayRealms {self.realm}>"


class PredicateContext:
    """Immutable snapshot of the facts rules are evaluated against. The host facts are
    read once, usually through `from_host`, so that rule evaluation never queries the
    running system by itself.
    """

    __slots__ = "os_name", "arch", "os_version", "demo", "quick_play", \
        "custom_resolution", "quick_plays_support"

    def __init__(self,
        os_name: Optional[str],
        arch: Optional[str],
        os_version: Optional[str] = None, *,
        demo: bool = False,
        quick_play: Optional[QuickPlay] = None,
        custom_resolution: bool = False,
        quick_plays_support: bool = False,
    ) -> None:
        """Construct a predicate context.

        :param os_name: The Minecraft name of the host OS (`windows`, `osx`, `linux`),
        or none if the host isn't known by Minecraft.
        :param arch: The Minecraft name of the host architecture (`x86`, `x86_64`,
        `arm32`, `arm64`), or none if unknown.
        :param os_version: The host OS version string, only used to check Windows
        versions.
        :param demo: True if the player is launching the demo.
        :param quick_play: The quick play mode requested for this launch, if any.
        :param custom_resolution: True if a custom window resolution is requested.
        :param quick_plays_support: True if the launcher provides a quick play log
        path to the game.
        """
        object.__setattr__(self, "os_name", os_name)
        object.__setattr__(self, "arch", arch)
        object.__setattr__(self, "os_version", os_version)
        object.__setattr__(self, "demo", demo)
        object.__setattr__(self, "quick_play", quick_play)
        object.__setattr__(self, "custom_resolution", custom_resolution)
        object.__setattr__(self, "quick_plays_support", quick_plays_support)

    @classmethod
    def from_host(cls, **kwargs) -> "PredicateContext":
        """Construct a context for the running host, the keyword arguments are the
        launch facts accepted by the constructor.
        """
        return cls(minecraft_os, minecraft_arch, platform.version(), **kwargs)

    def __setattr__(self, name: str, value: Any) -> None:
        raise AttributeError(f"predicate context is immutable, cannot set '{name}'")

    def __delattr__(self, name: str) -> None:
        raise AttributeError(f"predicate context is immutable, cannot delete '{name}'")

    def __repr__(self) -> str:
        return f"<PredicateContext os: {self.os_name}, arch: {self.arch}, features: {self.enabled_features()}>"

    def is_windows_10_or_later(self) -> bool:
        """Return true if the host is running Windows 10 or any later version.
        """
        if self.os_name != "windows" or self.os_version is None:
            return False
        match = re.match(r"\s*(\d+)", self.os_version)
        return match is not None and int(match.group(1)) >= 10

    def arch_bits(self) -> Optional[int]:
        """Return the pointer width of the host architecture, used by legacy native
        classifiers like `natives-windows-${arch}`.
        """
        return {
            "x86": 32,
            "arm32": 32,
            "x86_64": 64,
            "arm64": 64,
        }.get(self.arch or "")

    def features(self) -> Dict[str, bool]:
        """Return the value of every known feature for this context.
        """
        quick_play_feature = None if self.quick_play is None else self.quick_play.feature
        return {
            FEATURE_DEMO_USER: self.demo,
            FEATURE_CUSTOM_RESOLUTION: self.custom_resolution,
            FEATURE_QUICK_PLAYS_SUPPORT: self.quick_plays_support,
            FEATURE_QUICK_PLAY_SINGLEPLAYER: quick_play_feature == FEATURE_QUICK_PLAY_SINGLEPLAYER,
            FEATURE_QUICK_PLAY_MULTIPLAYER: quick_play_feature == FEATURE_QUICK_PLAY_MULTIPLAYER,
            FEATURE_QUICK_PLAY_REALMS: quick_play_feature == FEATURE_QUICK_PLAY_REALMS,
        }

    def enabled_features(self) -> List[str]:
        """Return the names of the features enabled in this context.
        """
        return [feature for feature, enabled in self.features().items() if enabled]


class UnsupportedPredicateError(Exception):
    """Raised when a rule references an action, OS, architecture, OS version or
    feature that cannot be interpreted. The `disallow` action is also reported through
    this error.
    """

    ACTION = "action"
    OS_NAME = "os_name"
    OS_ARCH = "os_arch"
    OS_VERSION = "os_version"
    FEATURE = "feature"

    def __init__(self, kind: str, value: Any, path: str = "") -> None:
        self.kind = kind
        self.value = value
        self.path = path

    def __str__(self) -> str:
        prefix = f"{self.path}: " if len(self.path) else ""
        return f"{prefix}unsupported {self.kind} {self.value!r}"


def interpret_rule(rules: Optional[Iterable[Any]], ctx: PredicateContext, path: str = "rules") -> bool:
    """Common function to interpret rules and determine if the condition is met. Every
    rule of the list must pass, an absent list of rules always passes.

    A rule is any object with `action`, `os` and `features` attributes, the two latter
    being optional, this is how metadata models of every generation are shaped.
    """

    if rules is None:
        return True

    for i, rule in enumerate(rules):
        if not interpret_single_rule(rule, ctx, f"{path}/{i}"):
            return False

    return True


def interpret_single_rule(rule: Any, ctx: PredicateContext, path: str) -> bool:
    """Interpret a single rule, the predicate is fully checked before being matched so
    that an unsupported predicate fails the same way on every host.
    """

    if rule.action != "allow":
        raise UnsupportedPredicateError(UnsupportedPredicateError.ACTION, rule.action, f"{path}/action")

    rule_os = getattr(rule, "os", None)
    rule_features = getattr(rule, "features", None)

    expected_features = {} if rule_features is None else rule_features.expected()
    for feat_name in expected_features.keys():
        if feat_name not in KNOWN_FEATURES:
            raise UnsupportedPredicateError(UnsupportedPredicateError.FEATURE, feat_name, f"{path}/features")

    if rule_os is not None and not interpret_rule_os(rule_os, ctx, f"{path}/os"):
        return False

    features = ctx.features()
    for feat_name, feat_expected in expected_features.items():
        if features[feat_name] != feat_expected:
            return False

    return True


def interpret_rule_os(rule_os: Any, ctx: PredicateContext, path: str) -> bool:
    """Common function to interpret a rule constraint on the running OS. Absent fields
    match any host.
    """

    os_name = rule_os.name
    if os_name is not None and os_name not in KNOWN_OS_NAMES:
        raise UnsupportedPredicateError(UnsupportedPredicateError.OS_NAME, os_name, f"{path}/name")

    os_arch = getattr(rule_os, "arch", None)
    if os_arch is not None and os_arch not in KNOWN_ARCHS:
        raise UnsupportedPredicateError(UnsupportedPredicateError.OS_ARCH, os_arch, f"{path}/arch")

    os_version = rule_os.version
    if os_version is not None and (os_name != "windows" or os_version != WINDOWS_10_VERSION):
        raise UnsupportedPredicateError(UnsupportedPredicateError.OS_VERSION, os_version, f"{path}/version")

    if os_name is not None and os_name != ctx.os_name:
        return False
    if os_arch is not None and os_arch != ctx.arch:
        return False
    if os_version is not None and not ctx.is_windows_10_or_later():
        return False

    return True

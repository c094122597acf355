"""Version metadata model. Mojang's version metadata went through several schema
generations, each of them is described here by a strict pydantic model and all of them
share the same accessor surface used by the arguments resolver.

Generations are tried from the newest to the oldest, the first one that validates is
kept. Models forbid unknown keys, so a document never loses a field by being parsed
with an older generation. Feature names of argument rules are the exception, unknown
ones are kept and left to the rules interpreter.
"""

from datetime import datetime
from pathlib import Path
import json

from pydantic import BaseModel, ConfigDict, ValidationError
from pydantic import StrictStr, StrictInt, StrictBool
from pydantic_core import PydanticSerializationError

from .rule import PredicateContext, interpret_rule
from .util import LibrarySpecifier, from_iso_date

from typing import ClassVar, Optional, Union, List, Dict, Tuple, Iterator, Any, Literal


DEFAULT_JAVA_MAJOR_VERSION = 8

VersionType = Literal["release", "snapshot", "old_alpha", "old_beta"]
RuleAction = Literal["allow", "disallow"]


class MetadataModel(BaseModel):
    """Base of all version metadata models, unknown keys are rejected.
    """
    model_config = ConfigDict(extra="forbid")


class Download(MetadataModel):
    sha1: StrictStr
    size: StrictInt
    url: StrictStr

class Artifact(MetadataModel):
    path: Optional[StrictStr] = None
    sha1: StrictStr
    size: StrictInt
    url: StrictStr

class AssetIndex(MetadataModel):
    id: StrictStr
    sha1: StrictStr
    size: StrictInt
    totalSize: StrictInt
    url: StrictStr

class JavaVersion(MetadataModel):
    component: StrictStr
    majorVersion: StrictInt

class LoggingFile(MetadataModel):
    id: StrictStr
    sha1: StrictStr
    size: StrictInt
    url: StrictStr

class LoggingClient(MetadataModel):
    argument: StrictStr
    file: LoggingFile
    type: StrictStr

class Logging(MetadataModel):
    client: LoggingClient


# Downloads of the game's archives, each generation has a closed set of keys.

class DownloadsV1(MetadataModel):
    client: Download
    server: Optional[Download] = None
    windows_server: Optional[Download] = None

class DownloadsV2(MetadataModel):
    client: Download
    server: Optional[Download] = None

class DownloadsV4(MetadataModel):
    client: Download
    server: Optional[Download] = None
    client_mappings: Download
    server_mappings: Optional[Download] = None


# Rules

class LegacyRuleOs(MetadataModel):
    name: Optional[StrictStr] = None
    version: Optional[StrictStr] = None

class LegacyRule(MetadataModel):
    """Rule found on libraries of legacy metadata, it only constrains the OS.
    """
    action: RuleAction
    os: Optional[LegacyRuleOs] = None

class RuleOs(MetadataModel):
    name: Optional[StrictStr] = None
    version: Optional[StrictStr] = None
    arch: Optional[StrictStr] = None

class LibraryRule(MetadataModel):
    action: RuleAction
    os: Optional[RuleOs] = None

class Features(MetadataModel):
    """Features expected by an argument rule. Unknown feature names are kept, so that
    the rules interpreter can reject them.
    """
    model_config = ConfigDict(extra="allow")

    is_demo_user: Optional[StrictBool] = None
    has_custom_resolution: Optional[StrictBool] = None
    has_quick_plays_support: Optional[StrictBool] = None
    is_quick_play_singleplayer: Optional[StrictBool] = None
    is_quick_play_multiplayer: Optional[StrictBool] = None
    is_quick_play_realms: Optional[StrictBool] = None

    def expected(self) -> Dict[str, bool]:
        """Return the mapping of features constrained by the rule to their expected
        value, unspecified features are ignored.
        """
        return {name: value for name, value in self.model_dump().items() if value is not None}

class ArgumentRule(MetadataModel):
    action: RuleAction
    os: Optional[RuleOs] = None
    features: Optional[Features] = None


# Arguments

class ConditionalArgument(MetadataModel):
    """An argument that is only included if all of its rules pass, its value can be
    a single string or a list of strings.
    """
    rules: List[ArgumentRule]
    value: Union[StrictStr, List[StrictStr]]

    def values(self) -> List[str]:
        return [self.value] if isinstance(self.value, str) else list(self.value)

Argument = Union[StrictStr, ConditionalArgument]

class Arguments(MetadataModel):
    game: List[Union[StrictStr, ConditionalArgument]]
    jvm: List[Union[StrictStr, ConditionalArgument]]


class LegacyArguments:
    """Single string of game arguments, used before structured arguments.
    """

    __slots__ = "text",

    def __init__(self, text: str) -> None:
        self.text = text

    def __eq__(self, other) -> bool:
        return isinstance(other, LegacyArguments) and self.text == other.text

    def __repr__(self) -> str:
        return f"<LegacyArguments {self.text!r}>"

class StructuredArguments:
    """Game and JVM arguments lists, each argument being plain or conditional.
    """

    __slots__ = "game", "jvm"

    def __init__(self, game: List[Argument], jvm: List[Argument]) -> None:
        self.game = game
        self.jvm = jvm

    def __eq__(self, other) -> bool:
        return isinstance(other, StructuredArguments) and \
            (self.game, self.jvm) == (other.game, other.jvm)

    def __repr__(self) -> str:
        return f"<StructuredArguments game: {len(self.game)}, jvm: {len(self.jvm)}>"


# Libraries

class LibraryDownloads(MetadataModel):
    artifact: Optional[Artifact] = None
    classifiers: Optional[Dict[StrictStr, Artifact]] = None

class LibraryExtract(MetadataModel):
    exclude: List[StrictStr]

class Library(MetadataModel):
    """A library of the game. Old libraries with native code give a mapping from OS
    name to the classifier of their native artifact, newer metadata give native
    artifacts as separate libraries guarded by rules.
    """

    name: StrictStr
    url: Optional[StrictStr] = None
    downloads: Optional[LibraryDownloads] = None
    natives: Optional[Dict[StrictStr, StrictStr]] = None
    extract: Optional[LibraryExtract] = None
    rules: Optional[List[LibraryRule]] = None

    def specifier(self) -> LibrarySpecifier:
        return LibrarySpecifier.from_str(self.name)

    def applies(self, ctx: PredicateContext, path: str = "rules") -> bool:
        """Return true if the library is used for the given context.
        """
        return interpret_rule(self.rules, ctx, path)

    def is_native(self) -> bool:
        """Return true if the library provides native code that should be extracted
        before running the game rather than added to the class path.
        """
        if self.natives is not None:
            return True
        classifier = self.specifier().classifier
        return classifier is not None and classifier.startswith("natives-")

    def native_classifier(self, ctx: PredicateContext) -> Optional[str]:
        """Return the classifier of the native artifact for the given context, this is
        only defined for libraries with a natives mapping. The `${arch}` variable of
        the classifier is replaced by the pointer width of the host.
        """
        if self.natives is None:
            return None
        classifier = self.natives.get(ctx.os_name or "")
        if classifier is None:
            return None
        bits = ctx.arch_bits()
        if bits is not None:
            classifier = classifier.replace("${arch}", str(bits))
        return classifier

    def resolve(self, ctx: PredicateContext) -> Optional[Tuple[LibrarySpecifier, Optional[Artifact]]]:
        """Resolve the specifier and the downloadable artifact of this library for the
        given context. None is returned if the library has a natives mapping but no
        native classifier for the host.
        """
        spec = self.specifier()
        if self.natives is not None:
            classifier = self.native_classifier(ctx)
            if classifier is None:
                return None
            spec = spec.with_classifier(classifier)
            classifiers = None if self.downloads is None else self.downloads.classifiers
            return spec, None if classifiers is None else classifiers.get(classifier)
        return spec, None if self.downloads is None else self.downloads.artifact

class LegacyLibrary(Library):
    rules: Optional[List[LegacyRule]] = None


# Manifest generations

class Manifest(MetadataModel):
    """Common fields and accessor surface of every generation of version metadata.
    The required Java version is only known by generations that declare it.
    """

    version: ClassVar[int]

    id: StrictStr
    type: VersionType
    time: StrictStr
    releaseTime: StrictStr
    mainClass: StrictStr
    libraries: List[Library]
    assets: Optional[StrictStr] = None
    assetIndex: Optional[AssetIndex] = None
    minimumLauncherVersion: Optional[StrictInt] = None

    def get_arguments(self) -> Union[LegacyArguments, StructuredArguments]:
        raise NotImplementedError

    def get_java_version(self) -> Optional[JavaVersion]:
        return None

    def get_libraries(self) -> List[Library]:
        return list(self.libraries)

    def libraries_for(self, ctx: PredicateContext) -> Iterator[Library]:
        """Iterate over the libraries that apply to the given context.
        """
        for i, library in enumerate(self.libraries):
            if library.applies(ctx, f"metadata: /libraries/{i}/rules"):
                yield library

    def java_major_version(self) -> int:
        """Return the major version of Java required by this version, metadata that
        predates this information are known to run on Java 8.
        """
        java_version = self.get_java_version()
        if java_version is None:
            return DEFAULT_JAVA_MAJOR_VERSION
        return java_version.majorVersion

    def get_main_class(self) -> str:
        return self.mainClass

    def get_asset_index_name(self) -> str:
        if self.assetIndex is not None:
            return self.assetIndex.id
        if self.assets is not None:
            return self.assets
        return self.id

    def get_release_date(self) -> datetime:
        return from_iso_date(self.releaseTime)

    def is_snapshot(self) -> bool:
        return self.type == "snapshot"


class LegacyManifest(Manifest):
    """Generations with a single string of game arguments and no JVM arguments. Mojang
    later added the Java version and compliance level to these old metadata, so both
    are accepted.
    """

    minecraftArguments: Optional[StrictStr] = None
    libraries: List[LegacyLibrary]
    javaVersion: Optional[JavaVersion] = None
    complianceLevel: Optional[StrictInt] = None

    def get_arguments(self) -> Union[LegacyArguments, StructuredArguments]:
        if self.minecraftArguments is None:
            raise MissingLegacyArgumentsError(self.id)
        return LegacyArguments(self.minecraftArguments)

    def get_java_version(self) -> Optional[JavaVersion]:
        return self.javaVersion


class StructuredManifest(Manifest):
    """Generations with structured, possibly conditional, game and JVM arguments.
    """

    arguments: Arguments
    logging: Logging

    def get_arguments(self) -> Union[LegacyArguments, StructuredArguments]:
        return StructuredArguments(list(self.arguments.game), list(self.arguments.jvm))


class MappedManifest(StructuredManifest):
    """Structured generations that give the obfuscation mappings of the game.
    """

    downloads: DownloadsV4


class ManifestV1(LegacyManifest):
    """Legacy arguments, no logging configuration, the windows server may be given."""
    version: ClassVar[int] = 1
    downloads: Optional[DownloadsV1] = None

class ManifestV2(LegacyManifest):
    """Legacy arguments with logging configuration."""
    version: ClassVar[int] = 2
    logging: Logging
    downloads: Optional[DownloadsV2] = None

class ManifestV3(StructuredManifest):
    """Structured arguments, no mappings."""
    version: ClassVar[int] = 3
    downloads: Optional[DownloadsV2] = None
    javaVersion: Optional[JavaVersion] = None
    complianceLevel: Optional[StrictInt] = None

    def get_java_version(self) -> Optional[JavaVersion]:
        return self.javaVersion

class ManifestV4(MappedManifest):
    """Obfuscation mappings, the Java version is not given."""
    version: ClassVar[int] = 4
    complianceLevel: Optional[StrictInt] = None

class ManifestV5(MappedManifest):
    """Obfuscation mappings and required Java version, no compliance level."""
    version: ClassVar[int] = 5
    javaVersion: JavaVersion

    def get_java_version(self) -> Optional[JavaVersion]:
        return self.javaVersion

class ManifestV6(ManifestV5):
    """Required Java version and compliance level."""
    version: ClassVar[int] = 6
    complianceLevel: StrictInt


ManifestVersion = Union[ManifestV1, ManifestV2, ManifestV3, ManifestV4, ManifestV5, ManifestV6]

# Generations in the order they are tried when parsing.
MANIFEST_GENERATIONS = (ManifestV6, ManifestV5, ManifestV4, ManifestV3, ManifestV2, ManifestV1)


def parse_manifest(data: Any) -> ManifestVersion:
    """Parse a decoded JSON version metadata, the newest generation that accepts the
    document is returned. Its generation number is the `version` class attribute.

    :raises UnrecognizedManifestError: If no generation accepts the document.
    """

    errors: Dict[int, str] = {}
    for model in MANIFEST_GENERATIONS:
        try:
            return model.model_validate(data)
        except ValidationError as error:
            errors[model.version] = str(error)

    raise UnrecognizedManifestError(errors)


def parse_manifest_json(text: Union[str, bytes]) -> ManifestVersion:
    """Parse a version metadata from its raw JSON text.
    """
    try:
        data = json.loads(text)
    except json.JSONDecodeError as error:
        raise UnrecognizedManifestError({}, f"invalid json: {error}") from error
    return parse_manifest(data)


def accepting_versions(data: Any) -> List[int]:
    """Return the generation numbers of every model that accepts the document, from
    the newest to the oldest. The parser picks the first one.
    """
    accepted = []
    for model in MANIFEST_GENERATIONS:
        try:
            model.model_validate(data)
        except ValidationError:
            continue
        accepted.append(model.version)
    return accepted


def serialize_manifest(manifest: Manifest) -> dict:
    """Serialize a parsed metadata back to its JSON-compatible form, with exactly the
    fields that were parsed.
    """
    try:
        return manifest.model_dump(mode="json", exclude_unset=True)
    except PydanticSerializationError as error:
        raise AssertionError(f"failed to serialize metadata of {manifest.id}") from error


def dump_manifest(manifest: Manifest, *, indent: Optional[int] = None) -> str:
    return json.dumps(serialize_manifest(manifest), indent=indent)


def read_manifest_file(file: Path) -> ManifestVersion:
    """Read and parse a version metadata file.
    """
    with file.open("rb") as fp:
        return parse_manifest_json(fp.read())


def write_manifest_file(manifest: Manifest, file: Path) -> None:
    """Write the metadata file of the version, parent directories are created.
    """
    file.parent.mkdir(parents=True, exist_ok=True)
    with file.open("wt") as fp:
        fp.write(dump_manifest(manifest))


# Version catalog, as given by Mojang's "version_manifest_v2.json".

class CatalogModel(BaseModel):
    model_config = ConfigDict(extra="allow")

class LatestVersions(CatalogModel):
    release: StrictStr
    snapshot: StrictStr

class VersionEntry(CatalogModel):
    id: StrictStr
    type: VersionType
    url: StrictStr
    time: Optional[StrictStr] = None
    releaseTime: StrictStr
    sha1: Optional[StrictStr] = None
    complianceLevel: Optional[StrictInt] = None

    def is_snapshot(self) -> bool:
        return self.type == "snapshot"

    def get_release_date(self) -> datetime:
        return from_iso_date(self.releaseTime)

class VersionCatalog(CatalogModel):
    """The catalog of every version known by Mojang, fetching it is left to the
    caller, this model only parses the decoded document.
    """

    latest: LatestVersions
    versions: List[VersionEntry]

    def is_alias(self, version: str) -> bool:
        return version in ("release", "snapshot")

    def filter_latest(self, version: str) -> Tuple[str, bool]:
        """Resolve the given version if it's an alias to the latest release or
        snapshot, the boolean is true if the version was an alias.
        """
        if version == "release":
            return self.latest.release, True
        elif version == "snapshot":
            return self.latest.snapshot, True
        return version, False

    def get_version(self, version: str) -> Optional[VersionEntry]:
        """Get a version entry from its id, aliases are resolved.
        """
        version, _alias = self.filter_latest(version)
        for entry in self.versions:
            if entry.id == version:
                return entry
        return None

    def latest_release(self) -> Optional[VersionEntry]:
        return self.get_version("release")

    def latest_snapshot(self) -> Optional[VersionEntry]:
        return self.get_version("snapshot")


def parse_catalog(data: Any) -> VersionCatalog:
    """Parse a decoded version catalog, pydantic's `ValidationError` is raised if the
    document is invalid.
    """
    return VersionCatalog.model_validate(data)


class UnrecognizedManifestError(Exception):
    """Raised when a version metadata matches no schema generation. The validation
    error message of each generation is kept.
    """

    def __init__(self, errors: Dict[int, str], reason: Optional[str] = None) -> None:
        self.errors = errors
        self.reason = reason

    def __str__(self) -> str:
        if self.reason is not None:
            return f"unrecognized version metadata: {self.reason}"
        versions = ", ".join(f"v{version}" for version in self.errors.keys())
        return f"unrecognized version metadata, rejected by generations {versions}"


class MissingLegacyArgumentsError(Exception):
    """Raised when a legacy version metadata has no game arguments string.
    """

    def __init__(self, version: str) -> None:
        self.version = version

    def __str__(self) -> str:
        return f"version {self.version} has neither structured nor legacy arguments"

"""CLI languages management.
"""

from coppermc.rule import UnsupportedPredicateError

from typing import Optional


def get_raw(key: str, kwargs: Optional[dict]) -> str:
    """Get a message translated using the given keyword formatting arguments.

    :param key: The key of the message to translate.
    :param kwargs: The keyword formatting dictionary.
    :return: Translated message, or the key itself if not found.
    """
    try:
        return lang[key].format_map(kwargs or {})
    except KeyError:
        return key


def get(key: str, **kwargs) -> str:
    """Get a message translated using the given keyword formatting arguments.

    :param key: The key of the message to translate.
    :return: Translated message, or the key itself if not found.
    """
    return get_raw(key, kwargs)


lang = {
    # Args root
    "args": "Copper resolves the command line of Minecraft versions from their "
        "metadata file, whatever generation of the metadata format it uses.",
    "args.main_dir": "Set the main directory where libraries, assets and versions are "
        "installed, defaults to the standard .minecraft directory.",
    "args.work_dir": "Set the working directory where the game run, it defaults to the "
        "main directory.",
    "args.output": "Set the output format of the launcher, defaults to human-color.",
    "args.verbose": "Enable verbose output, resolution steps are printed.",
    # Args common
    "args.common.file": "Path to the version metadata file.",
    # Args detect
    "args.detect": "Detect the generation of a version metadata file.",
    # Args search
    "args.search": "Search versions in a version catalog file.",
    "args.search.file": "Path to a version catalog file (version_manifest_v2.json).",
    # Args args
    "args.args": "Resolve the JVM and game arguments of a version metadata file.",
    "args.args.full": "Print the full command instead of the JVM and game lines.",
    "args.args.demo": "Resolve arguments for the demo mode.",
    "args.args.resolution": "Set a custom window resolution, format is <width>x<height>.",
    "args.args.resolution.invalid": "Invalid resolution '{given}', expected <width>x<height>.",
    "args.args.username": "Username of the Microsoft account, defaults to Player.",
    "args.args.uuid": "UUID of the Microsoft account, without dashes.",
    "args.args.token": "Minecraft access token of the Microsoft account.",
    "args.args.server": "Quick play multiplayer server to join.",
    "args.args.server_port": "Port of the quick play multiplayer server, defaults to 25565.",
    "args.args.singleplayer": "Quick play singleplayer level to open.",
    "args.args.realm": "Quick play realm to join.",
    "args.args.quick_play_path": "Path where the game logs quick play sessions.",
    "args.args.snapshot": "Flag the version type as snapshot.",
    "args.args.classpath": "Precomputed class path, defaults to the libraries of the "
        "version found in the main directory.",
    "args.args.natives_dir": "Directory of the extracted native libraries.",
    "args.args.jvm": "Path of the Java executable.",
    "args.args.ram": "Memory sizes given to the JVM, format is <min>:<max> or <size>.",
    "args.args.ram.invalid": "Invalid memory sizes '{given}', expected <min>:<max>.",
    "args.args.os": "Override the OS name used to evaluate rules.",
    "args.args.arch": "Override the architecture used to evaluate rules.",
    "args.args.os_version": "Override the OS version used to evaluate rules.",
    # Common errors
    "error.os": "An OS error occurred: {message}",
    "error.manifest.unrecognized": "Unrecognized version metadata: {message}",
    "error.manifest.missing_arguments": "Version {version} has no arguments.",
    f"error.predicate.{UnsupportedPredicateError.ACTION}": "Unsupported rule action '{value}' at {path}.",
    f"error.predicate.{UnsupportedPredicateError.OS_NAME}": "Unsupported OS name '{value}' at {path}.",
    f"error.predicate.{UnsupportedPredicateError.OS_ARCH}": "Unsupported architecture '{value}' at {path}.",
    f"error.predicate.{UnsupportedPredicateError.OS_VERSION}": "Unsupported OS version '{value}' at {path}.",
    f"error.predicate.{UnsupportedPredicateError.FEATURE}": "Unsupported feature '{value}' at {path}.",
    "echo": "{echo}",
    # Command detect
    "detect.generation": "Version {version} uses metadata generation {generation}",
    "detect.java": "Requires Java {major_version}",
    "detect.main_class": "Main class: {main_class}",
    # Command search
    "search.type": "Type",
    "search.name": "Identifier",
    "search.release_date": "Release date",
    "search.flags": "Flags",
    "search.flags.latest": "latest",
    "search.not_found": "No version found",
    # Command args
    "args.resolving": "Resolving version {version} (generation {generation})...",
    "args.features": "Features: {features}",
    "args.resolved": "Resolved {jvm_count} JVM and {game_count} game arguments",
    "args.resolved.legacy": "Resolved {game_count} legacy game arguments",
}

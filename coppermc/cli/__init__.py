"""Main entry point of the coppermc command line.
"""

import json
import sys
import os

from .parse import register_arguments, RootNs, DetectNs, SearchNs, ArgsNs
from .output import Output, HumanOutput, MachineOutput
from .lang import get as _

from coppermc.manifest import Manifest, LegacyManifest, MissingLegacyArgumentsError, \
    UnrecognizedManifestError, read_manifest_file, parse_catalog
from coppermc.rule import PredicateContext, QuickPlay, QuickPlayMultiplayer, \
    QuickPlaySingleplayer, QuickPlayRealms, UnsupportedPredicateError
from coppermc.launch import Context, LaunchOptions, SimpleWatcher, ResolvingEvent, \
    FeaturesEvent, ResolvedEvent, resolve_arguments
from coppermc.auth import MicrosoftAuthSession

from typing import cast, Optional, List, Union, Dict, Callable, Any


EXIT_OK = 0
EXIT_FAILURE = 1

CommandHandler = Callable[[Any], Any]
CommandTree = Dict[str, Union[CommandHandler, "CommandTree"]]


def main(args: Optional[List[str]] = None):
    """Main entry point of the CLI. This function parses the input arguments and try to
    find a command handler to dispatch to. These command handlers are specified by the
    `get_command_handlers` function.
    """

    parser = register_arguments()
    ns: RootNs = cast(RootNs, parser.parse_args(sys.argv[1:] if args is None else args))

    # Setup common objects in the namespace.
    ns.out = get_output(ns.out_kind)
    ns.context = Context(ns.main_dir, ns.work_dir)

    handler = get_command_handlers().get(ns.subcommand)
    if handler is None:
        parser.print_help()
        sys.exit(EXIT_FAILURE)

    cmd(handler, ns)


def get_output(kind: str) -> Output:
    """Internal function that construct the output depending on its kind.
    The kind is constrained by choices set to the arguments parser.
    """

    if kind == "human-color":
        return HumanOutput(True)
    elif kind == "human":
        return HumanOutput(False)
    elif kind == "machine":
        return MachineOutput()
    else:
        raise ValueError()


def get_command_handlers() -> CommandTree:
    """Internal function returns the tree of command handlers for each subcommand
    of the CLI argument parser.
    """

    return {
        "detect": cmd_detect,
        "search": cmd_search,
        "args": cmd_args,
    }


def cmd(handler: CommandHandler, ns: RootNs):
    """Generic command handler that launch the given handler with the given namespace,
    it handles error in order to pretty print them.
    """

    try:
        handler(ns)
        sys.exit(EXIT_OK)

    except UnrecognizedManifestError as error:
        ns.out.task("FAILED", "error.manifest.unrecognized", message=str(error))

    except MissingLegacyArgumentsError as error:
        ns.out.task("FAILED", "error.manifest.missing_arguments", version=error.version)

    except UnsupportedPredicateError as error:
        ns.out.task("FAILED", f"error.predicate.{error.kind}", value=error.value, path=error.path)

    except ValueError as error:
        ns.out.task("FAILED", None)
        for arg in error.args:
            ns.out.task(None, "echo", echo=arg)

    except OSError as error:
        ns.out.task("FAILED", "error.os", message=str(error))

    sys.exit(EXIT_FAILURE)


def cmd_detect(ns: DetectNs):

    manifest = read_manifest_file(ns.file)

    ns.out.task("OK", "detect.generation", version=manifest.id, generation=manifest.version)
    ns.out.task("INFO", "detect.java", major_version=manifest.java_major_version())
    ns.out.task("INFO", "detect.main_class", main_class=manifest.get_main_class())


def cmd_search(ns: SearchNs):

    with ns.file.open("rb") as fp:
        catalog = parse_catalog(json.load(fp))

    search = ns.input
    if search is not None:
        search, alias = catalog.filter_latest(search)
    else:
        alias = False

    latest = (catalog.latest.release, catalog.latest.snapshot)

    rows = []
    for entry in catalog.versions:
        if search is None or (alias and search == entry.id) or (not alias and search in entry.id):
            rows.append((
                entry.type,
                entry.id,
                entry.get_release_date().strftime("%c"),
                _("search.flags.latest") if entry.id in latest else ""))

    if not rows:
        ns.out.task("FAILED", "search.not_found")
        sys.exit(EXIT_FAILURE)

    ns.out.table((
        _("search.type"),
        _("search.name"),
        _("search.release_date"),
        _("search.flags")), rows)


def cmd_args(ns: ArgsNs):

    manifest = read_manifest_file(ns.file)

    session = MicrosoftAuthSession(ns.username, ns.uuid, ns.token)
    options = LaunchOptions(ns.context, session, manifest.id,
        is_snapshot=ns.snapshot or manifest.is_snapshot(),
        natives_dir=ns.natives_dir,
        demo=ns.demo,
        resolution=ns.resolution,
        quick_play=get_quick_play(ns),
        quick_play_path=ns.quick_play_path,
        jvm_path=ns.jvm,
        ram_size=ns.ram)

    ctx = options.predicate_context(os_name=ns.os, arch=ns.arch, os_version=ns.os_version)

    if ns.classpath is not None:
        options.classpath = ns.classpath
    else:
        options.classpath = default_classpath(manifest, ctx, ns.context)

    watcher = None
    if ns.verbose:
        watcher = SimpleWatcher({
            ResolvingEvent: lambda e: ns.out.task("INFO", "args.resolving", version=e.version, generation=e.generation),
            FeaturesEvent: lambda e: ns.out.task("INFO", "args.features", features=", ".join(e.features)),
            ResolvedEvent: lambda e: ns.out.task("OK", "args.resolved.legacy" if e.legacy else "args.resolved", jvm_count=e.jvm_count, game_count=e.game_count),
        })

    resolved = resolve_arguments(manifest, options, ctx, watcher=watcher)

    if ns.full:
        ns.out.value("command", " ".join(resolved.command()))
    else:
        ns.out.value("jvm", resolved.jvm_line)
        ns.out.value("main_class", resolved.main_class)
        ns.out.value("game", resolved.game_line)


def get_quick_play(ns: ArgsNs) -> Optional[QuickPlay]:
    """Internal function to select the quick play mode requested, only one can be
    used and the multiplayer server is preferred.
    """
    if ns.server is not None:
        return QuickPlayMultiplayer(ns.server, ns.server_port or 25565)
    elif ns.singleplayer is not None:
        return QuickPlaySingleplayer(ns.singleplayer)
    elif ns.realm is not None:
        return QuickPlayRealms(ns.realm)
    return None


def default_classpath(manifest: Manifest, ctx: PredicateContext, context: Context) -> str:
    """Compute the class path of a version from the standard layout of the libraries
    directory, native libraries are excluded. Legacy versions expect the game's JAR
    to come first, newer ones expect it last.
    """

    class_path: List[str] = []
    for library in manifest.libraries_for(ctx):
        if library.is_native():
            continue
        resolved = library.resolve(ctx)
        if resolved is not None:
            spec, _artifact = resolved
            class_path.append(str((context.libraries_dir / spec.file_path()).absolute()))

    jar_path = str(context.jar_file(manifest.id).absolute())
    if isinstance(manifest, LegacyManifest):
        class_path.insert(0, jar_path)
    else:
        class_path.append(jar_path)

    return os.pathsep.join(class_path)

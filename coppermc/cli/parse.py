from argparse import ArgumentParser, HelpFormatter, ArgumentTypeError
from pathlib import Path

from ..launch import Context

from .output import Output
from .lang import get as _

from typing import Optional, Type, Tuple, List


# The following classes are only used for type checking and represent a typed namespace
# as produced by the arguments registered to the argument parser.

class RootNs:
    main_dir: Optional[Path]
    work_dir: Optional[Path]
    out_kind: str
    verbose: int
    # Initialized by main function after argument parsing.
    out: Output
    context: Context

class DetectNs(RootNs):
    file: Path

class SearchNs(RootNs):
    file: Path
    input: Optional[str]

class ArgsNs(RootNs):
    file: Path
    full: bool
    demo: bool
    resolution: Optional[Tuple[int, int]]
    username: str
    uuid: str
    token: str
    server: Optional[str]
    server_port: Optional[int]
    singleplayer: Optional[str]
    realm: Optional[str]
    quick_play_path: Optional[Path]
    snapshot: bool
    classpath: Optional[str]
    natives_dir: Optional[Path]
    jvm: Optional[Path]
    ram: Optional[Tuple[str, str]]
    os: Optional[str]
    arch: Optional[str]
    os_version: Optional[str]


def register_arguments() -> ArgumentParser:
    parser = ArgumentParser(allow_abbrev=False, prog="coppermc", description=_("args"))
    parser.add_argument("--main-dir", help=_("args.main_dir"), type=Path)
    parser.add_argument("--work-dir", help=_("args.work_dir"), type=Path)
    parser.add_argument("--output", help=_("args.output"), dest="out_kind", choices=get_outputs(), default="human-color")
    parser.add_argument("-v", dest="verbose", help=_("args.verbose"), action="count", default=0)
    register_subcommands(parser.add_subparsers(title="subcommands", dest="subcommand"))
    return parser


def register_subcommands(subparsers):
    register_detect_arguments(subparsers.add_parser("detect", help=_("args.detect")))
    register_search_arguments(subparsers.add_parser("search", help=_("args.search")))
    register_args_arguments(subparsers.add_parser("args", help=_("args.args")))


def register_detect_arguments(parser: ArgumentParser):
    parser.add_argument("file", type=Path, help=_("args.common.file"))


def register_search_arguments(parser: ArgumentParser):
    parser.add_argument("file", type=Path, help=_("args.search.file"))
    parser.add_argument("input", nargs="?")


def register_args_arguments(parser: ArgumentParser):
    parser.formatter_class = new_help_formatter_class(40)
    parser.add_argument("--full", help=_("args.args.full"), action="store_true")
    parser.add_argument("--demo", help=_("args.args.demo"), action="store_true")
    parser.add_argument("--resolution", help=_("args.args.resolution"), type=resolution_from_str)
    parser.add_argument("-u", "--username", help=_("args.args.username"), metavar="NAME", default="Player")
    parser.add_argument("-i", "--uuid", help=_("args.args.uuid"), default="0" * 32)
    parser.add_argument("--token", help=_("args.args.token"), default="")
    parser.add_argument("-s", "--server", help=_("args.args.server"))
    parser.add_argument("-p", "--server-port", type=int, help=_("args.args.server_port"), metavar="PORT")
    parser.add_argument("--singleplayer", help=_("args.args.singleplayer"), metavar="LEVEL")
    parser.add_argument("--realm", help=_("args.args.realm"))
    parser.add_argument("--quick-play-path", help=_("args.args.quick_play_path"), type=Path, metavar="PATH")
    parser.add_argument("--snapshot", help=_("args.args.snapshot"), action="store_true")
    parser.add_argument("--classpath", help=_("args.args.classpath"))
    parser.add_argument("--natives-dir", help=_("args.args.natives_dir"), type=Path, metavar="PATH")
    parser.add_argument("--jvm", help=_("args.args.jvm"), type=Path)
    parser.add_argument("--ram", help=_("args.args.ram"), type=ram_from_str, metavar="MIN:MAX")
    parser.add_argument("--os", help=_("args.args.os"), choices=["windows", "osx", "linux"])
    parser.add_argument("--arch", help=_("args.args.arch"), choices=["x86", "x86_64", "arm32", "arm64"])
    parser.add_argument("--os-version", help=_("args.args.os_version"), metavar="VERSION")
    parser.add_argument("file", type=Path, help=_("args.common.file"))


def new_help_formatter_class(max_help_position: int) -> Type[HelpFormatter]:

    class CustomHelpFormatter(HelpFormatter):
        def __init__(self, prog):
            super().__init__(prog, max_help_position=max_help_position)

    return CustomHelpFormatter


def get_outputs() -> List[str]:
    return ["human-color", "human", "machine"]


def resolution_from_str(s: str) -> Tuple[int, int]:
    parts = s.split("x")
    if len(parts) == 2:
        try:
            return (int(parts[0]), int(parts[1]))
        except ValueError:
            pass
    raise ArgumentTypeError(_("args.args.resolution.invalid", given=s))


def ram_from_str(s: str) -> Tuple[str, str]:
    parts = s.split(":")
    if len(parts) == 1 and len(parts[0]):
        return (parts[0], parts[0])
    elif len(parts) == 2 and len(parts[0]) and len(parts[1]):
        return (parts[0], parts[1])
    raise ArgumentTypeError(_("args.args.ram.invalid", given=s))

# Copyright 2026 dcmpix authors. See LICENSE file for details.
"""dcmpix command line interface program

Each subcommand is a module within dcmpix.cli, which
defines an add_subparser(subparsers) function to set argparse
attributes, and calls set_defaults(func=callback_function)

"""

import argparse
from importlib.metadata import entry_points
from pathlib import Path
import re
import sys
from typing import Any, Callable, Dict, List, Optional, Tuple

from dcmpix import dcmread
from dcmpix.dataset import Dataset, FileDataset
from dcmpix.errors import DicomError, InvalidDicomError


subparsers: Optional[argparse._SubParsersAction] = None

# A DICOM keyword or a hex tag in the form (gggg,eeee)
re_kywd_or_tag = r"^(\w+|\([0-9A-Fa-f]{4},[0-9A-Fa-f]{4}\))$"
re_match_tag = r"^\(([0-9A-Fa-f]{4}),([0-9A-Fa-f]{4})\)$"

filespec_help = (
    "File specification, in format filename[::element]. "
    "If `element` is given, use only that data element within the file. "
    "Examples: "
    "path/to/your_file.dcm, "
    "your_file.dcm::StudyDate, "
    "your_file.dcm::(0028,0010)"
)


def filespec_parts(filespec: str) -> Tuple[str, str]:
    """Parse the filespec format into filename, element

    Note that ':' can also exist in valid filename, e.g. r'c:\\temp\\test.dcm'
    """
    filename, sep, element = filespec.rpartition("::")
    if not sep:
        return element, ""

    return filename, element


def read_file(filename: str, force: bool = True) -> FileDataset:
    """Return the data set in the file `filename`.

    Raises
    ------
    argparse.ArgumentTypeError
        If the file can't be found or parsed.
    """
    try:
        buffer = Path(filename).read_bytes()
    except FileNotFoundError:
        raise argparse.ArgumentTypeError(f"File '{filename}' not found")
    except OSError as e:
        raise argparse.ArgumentTypeError(f"Error reading '{filename}': {e}")

    try:
        return dcmread(buffer, force=force)
    except (DicomError, InvalidDicomError) as e:
        raise argparse.ArgumentTypeError(f"Error reading '{filename}': {e}")


def filespec_parser(filespec: str) -> List[Tuple[Dataset, Any]]:
    """Utility to return a dataset and an optional data element within it

    Note: this is used as an argparse 'type' for adding parsing arguments.

    Parameters
    ----------
    filespec: str
        A filename with an optional data element, in format
        ``<filename>[::<element>]``. The element is a DICOM keyword or a
        DICOM tag in the format (gggg,eeee).

    Returns
    -------
    List[Tuple[Dataset, Any]]
        Matching pairs of (dataset, data element). This is usually a single
        pair.

    Raises
    ------
    argparse.ArgumentTypeError
        If the filename does not exist, or if the optional element is not a
        valid keyword or tag or is not in the dataset
    """
    filename, element = filespec_parts(filespec)

    # Check element syntax first to avoid unnecessary load of file
    if element and not re.match(re_kywd_or_tag, element):
        raise argparse.ArgumentTypeError(
            f"Component '{element}' is not valid syntax for a data element"
        )

    ds = read_file(filename)
    if not element:
        return [(ds, None)]

    key: Any = element
    match = re.match(re_match_tag, element)
    if match:
        key = "".join(match.groups())

    try:
        elem = ds[key]
    except KeyError:
        raise argparse.ArgumentTypeError(
            f"'{element}' is not in the parent object"
        )

    return [(ds, elem)]


def help_command(args: argparse.Namespace) -> None:
    if subparsers is None:
        print("No subcommands are available")
        return

    subcommands: List[str] = list(subparsers.choices.keys())
    if args.subcommand and args.subcommand in subcommands:
        subparsers.choices[args.subcommand].print_help()
    else:
        print("Use dcmpix help [subcommand] to show help for a subcommand")
        subcommands.remove("help")
        print(f"Available subcommands: {', '.join(subcommands)}")


SubCommandType = Dict[str, Callable[[argparse._SubParsersAction], None]]


def get_subcommands() -> SubCommandType:
    """Return the built-in subcommands plus any registered by other
    packages under the ``dcmpix_subcommands`` entry point group."""
    from dcmpix.cli import info, show

    subcommands: SubCommandType = {
        "show": show.add_subparser,
        "info": info.add_subparser,
    }
    for entry_point in entry_points(group="dcmpix_subcommands"):
        if entry_point.name not in subcommands:
            subcommands[entry_point.name] = entry_point.load()

    return subcommands


def main(args: Optional[List[str]] = None) -> None:
    """Entry point for 'dcmpix' command line interface

    Parameters
    ----------
    args : List[str], optional
        Command-line arguments to parse.  If ``None``, then :attr:`sys.argv`
        is used.
    """
    global subparsers

    py_version = sys.version.split()[0]

    parser = argparse.ArgumentParser(
        prog="dcmpix",
        description=f"dcmpix command line utilities (Python {py_version})",
    )
    subparsers = parser.add_subparsers(help="subcommand help")

    help_parser = subparsers.add_parser(
        "help", help="display help for subcommands"
    )
    help_parser.add_argument(
        "subcommand", nargs="?", help="Subcommand to show help for"
    )
    help_parser.set_defaults(func=help_command)

    # Get subcommands to register themselves as a subparser
    for subcommand in get_subcommands().values():
        subcommand(subparsers)

    ns = parser.parse_args(args)
    if not vars(ns):
        parser.print_help()
    else:
        ns.func(ns)

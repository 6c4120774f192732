# Copyright 2026 dcmpix authors. See LICENSE file for details.
"""dcmpix command line interface program for `dcmpix show`"""

from typing import Any, Callable, List, Optional, Union

from dcmpix.cli.main import filespec_help, filespec_parser
from dcmpix.dataset import Dataset


def add_subparser(subparsers):
    subparser = subparsers.add_parser(
        "show", description="Display all or part of a DICOM file"
    )
    subparser.add_argument(
        "filespec",
        help=filespec_help,
        type=filespec_parser
    )
    subparser.add_argument(
        "-t", "--top", help="Only show top level", action="store_true"
    )
    subparser.add_argument(
        "-q",
        "--quiet",
        help="Only show basic information",
        action="store_true",
    )

    subparser.set_defaults(func=do_command)


def do_command(args):
    ds, element = args.filespec[0]
    if not element:
        element = ds

    if args.quiet and isinstance(element, Dataset):
        show_quiet(element)
    elif args.top and isinstance(element, Dataset):
        print(element.top())
    else:
        print(str(element))


def transfer_syntax_name(ds: Dataset) -> Optional[str]:
    tsyntax = getattr(ds, 'transfer_syntax', None)
    if tsyntax is None:
        return None
    return f"Transfer Syntax: {tsyntax.name}"


def quiet_image(ds: Dataset) -> Optional[str]:
    if "Rows" not in ds or "Columns" not in ds:
        return None

    signed = "signed" if ds.get("PixelRepresentation") == 1 else "unsigned"
    return (
        f"Image: {ds.Rows}x{ds.Columns} "
        f"{ds.get('PhotometricInterpretation', 'N/A')}, "
        f"{ds.get('NumberOfFrames', 1)} frame(s), "
        f"{ds.get('BitsStored', 'N/A')} of "
        f"{ds.get('BitsAllocated', 'N/A')} bits {signed}"
    )


def quiet_display(ds: Dataset) -> List[str]:
    """Return the Modality LUT and VOI LUT attributes that affect how the
    image is displayed."""
    lines = []
    if "RescaleSlope" in ds or "RescaleIntercept" in ds:
        lines.append(
            f"Rescale: slope {ds.get('RescaleSlope', 1)}, "
            f"intercept {ds.get('RescaleIntercept', 0)}"
        )
    if "WindowCenter" in ds and "WindowWidth" in ds:
        lines.append(
            f"Window: center {ds.WindowCenter}, width {ds.WindowWidth}"
        )
    for keyword in ("ModalityLUTSequence", "VOILUTSequence"):
        if keyword in ds:
            lines.append(f"{keyword}: present")

    return lines


# Items to show in quiet mode
# Item can be a callable or a DICOM keyword
quiet_items: List[Union[str, Callable[[Dataset], Any]]] = [
    transfer_syntax_name,
    "SOPClassUID",
    "Modality",
    "PatientName",
    "PatientID",
    quiet_image,
    quiet_display,
]


def show_quiet(ds: Dataset) -> None:
    for item in quiet_items:
        if not callable(item):
            print(f"{item}: {ds.get(item, 'N/A')}")
            continue

        result = item(ds)
        if isinstance(result, str):
            result = [result]
        for line in result or []:
            print(line)

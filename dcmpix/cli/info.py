# Copyright 2026 dcmpix authors. See LICENSE file for details.
"""dcmpix command line interface program for `dcmpix info`"""

from typing import List

from dcmpix.cli.main import read_file
from dcmpix.dataset import FileDataset
from dcmpix.diagnostics import CollectingSink
from dcmpix.errors import DicomError
from dcmpix.jpeg import debug_jpeg
from dcmpix.pixels import ImageInfo, decode_frame
from dcmpix.pixels.payload import extract_pixel_payload
from dcmpix.tag import PixelDataTag


def add_subparser(subparsers):
    subparser = subparsers.add_parser(
        "info",
        description=(
            "Display the transfer syntax and image description of a DICOM "
            "file and check that each frame of pixel data can be decoded"
        ),
    )
    subparser.add_argument("filename", help="The DICOM file", type=read_file)
    subparser.add_argument(
        "-j",
        "--jpeg",
        help="Show the JPEG markers of each compressed frame",
        action="store_true",
    )

    subparser.set_defaults(func=do_command)


def do_command(args):
    for line in describe(args.filename, args.jpeg):
        print(line)


def describe(ds: FileDataset, show_jpeg: bool = False) -> List[str]:
    """Return a description of the pixel data in `ds`."""
    tsyntax = ds.transfer_syntax
    lines = [f"Transfer Syntax: {tsyntax.name} ({tsyntax.uid})"]

    if PixelDataTag not in ds:
        lines.append("No Pixel Data")
        return lines

    try:
        info = ImageInfo.from_dataset(ds)
    except DicomError as exc:
        lines.append(f"Invalid image description: {exc}")
        return lines

    lines.append(
        f"Image: {info.columns}x{info.rows}, {info.number_of_frames} "
        f"frame(s), {info.samples_per_pixel} sample(s) per pixel, "
        f"{info.bits_allocated} bits allocated, {info.bits_stored} bits "
        f"stored, {'signed' if info.is_signed else 'unsigned'}, "
        f"{info.photometric_interpretation}"
    )

    if show_jpeg and tsyntax.is_encapsulated and not tsyntax.is_rle:
        try:
            payload = extract_pixel_payload(
                ds, tsyntax, info.number_of_frames, CollectingSink()
            )
        except DicomError as exc:
            lines.append(f"Unable to read the encapsulated frames: {exc}")
        else:
            for index, frame in enumerate(payload.frames):
                lines.append(f"Frame {index} JPEG markers:")
                lines.extend(f"  {s}" for s in debug_jpeg(frame))

    for index in range(info.number_of_frames):
        sink = CollectingSink()
        try:
            frame = decode_frame(ds, index, sink=sink)
        except DicomError as exc:
            name = type(exc).__name__
            lines.append(f"Frame {index}: FAILED ({name}: {exc})")
            continue

        line = f"Frame {index}: OK, {len(frame.samples)} samples"
        if sink.codes:
            line += f" ({', '.join(str(c) for c in sink.codes)})"
        lines.append(line)

    return lines

# Copyright 2026 dcmpix authors. See LICENSE file for details.
"""Decode single frames of *Pixel Data*, dispatching on the transfer
syntax."""

from typing import Iterator, Optional, TYPE_CHECKING

import numpy as np

from dcmpix.config import logger
from dcmpix.diagnostics import DiagnosticSink
from dcmpix.errors import (
    FrameDecodeError, MissingPixelData, UnsupportedEncoding
)
from dcmpix.jpeg.baseline import decode_baseline
from dcmpix.pixels.imageinfo import DecodedFrame, ImageInfo
from dcmpix.pixels.native import decode_native_frame
from dcmpix.pixels.payload import extract_pixel_payload
from dcmpix.pixels.processing import to_rgba
from dcmpix.pixels.rle import decode_rle_frame
from dcmpix.uid import (
    ExplicitVRBigEndian, ExplicitVRLittleEndian, TRANSFER_SYNTAXES,
    TransferSyntax
)

if TYPE_CHECKING:  # pragma: no cover
    from dcmpix.dataset import Dataset


def _transfer_syntax(
    ds: "Dataset", transfer_syntax: Optional[TransferSyntax]
) -> TransferSyntax:
    """Return the transfer syntax the pixel data in `ds` is encoded with."""
    if transfer_syntax is not None:
        return transfer_syntax

    tsyntax = getattr(ds, 'transfer_syntax', None)
    if tsyntax is not None:
        return tsyntax

    # A data set that wasn't read from a file, assume native pixel data
    if ds.is_little_endian is False:
        return TRANSFER_SYNTAXES[ExplicitVRBigEndian]

    return TRANSFER_SYNTAXES[ExplicitVRLittleEndian]


def _check_supported(tsyntax: TransferSyntax) -> None:
    if tsyntax.is_encapsulated and not (
        tsyntax.is_rle or tsyntax.is_jpeg_baseline
    ):
        raise UnsupportedEncoding(
            f"Unable to decode pixel data with a transfer syntax UID of "
            f"'{tsyntax.uid}' ({tsyntax.name}), only native, RLE Lossless "
            "and JPEG Baseline (Process 1) pixel data can be decoded"
        )


def _check_jpeg_frame(frame: DecodedFrame, info: ImageInfo) -> None:
    if (frame.height, frame.width) != (info.rows, info.columns):
        raise FrameDecodeError(
            f"The JPEG frame is {frame.width} x {frame.height} pixels but the "
            f"data set has {info.columns} 'Columns' and {info.rows} 'Rows'"
        )

    if frame.samples_per_pixel != info.samples_per_pixel:
        raise FrameDecodeError(
            f"The JPEG frame has {frame.samples_per_pixel} component(s) but "
            f"the data set has a 'Samples per Pixel' of "
            f"{info.samples_per_pixel}"
        )


def decode_frame(
    ds: "Dataset",
    index: int = 0,
    transfer_syntax: Optional[TransferSyntax] = None,
    sink: Optional[DiagnosticSink] = None,
) -> DecodedFrame:
    """Return the decoded samples of a single frame of *Pixel Data*.

    Each call is independent of every other, a failure to decode one frame
    doesn't affect the others.

    Parameters
    ----------
    ds : dataset.Dataset
        The data set containing the pixel data and the *Image Pixel*
        elements.
    index : int, optional
        The index of the frame to decode, default ``0``.
    transfer_syntax : uid.TransferSyntax, optional
        The transfer syntax of the pixel data. If not used then the transfer
        syntax `ds` was read with is used.
    sink : callable, optional
        Receives diagnostic events raised while decoding.

    Returns
    -------
    DecodedFrame
        The frame's flat, row-major, pixel interleaved samples.

    Raises
    ------
    UnsupportedEncoding
        If the transfer syntax is compressed with a method other than RLE
        Lossless or JPEG Baseline.
    MissingPixelData
        If there's no pixel data or no frame `index`.
    FrameDecodeError
        If the frame can't be decoded.
    InvalidImageInfo
        If the *Image Pixel* elements are missing or invalid.
    """
    tsyntax = _transfer_syntax(ds, transfer_syntax)
    _check_supported(tsyntax)
    info = ImageInfo.from_dataset(ds)

    logger.debug(
        f"Decoding frame {index} of {info.number_of_frames} using "
        f"'{tsyntax.name}'"
    )

    if not tsyntax.is_encapsulated:
        payload = extract_pixel_payload(ds, tsyntax, sink=sink)
        return decode_native_frame(
            payload.data, index, info, tsyntax.is_little_endian
        )

    payload = extract_pixel_payload(
        ds, tsyntax, info.number_of_frames, sink
    )
    if not 0 <= index < payload.nr_frames:
        raise MissingPixelData(
            f"There is no frame {index}, the pixel data has "
            f"{payload.nr_frames} frame(s)"
        )

    src = payload.frames[index]
    if tsyntax.is_rle:
        return decode_rle_frame(src, info, sink)

    arr = decode_baseline(src, sink)
    # Three component frames are always RGB after decoding
    pi = 'RGB' if arr.ndim == 3 and arr.shape[2] == 3 else None
    frame = DecodedFrame(arr.shape[1], arr.shape[0], arr.ravel(), pi)
    _check_jpeg_frame(frame, info)

    return frame


def iter_frames(
    ds: "Dataset",
    transfer_syntax: Optional[TransferSyntax] = None,
    sink: Optional[DiagnosticSink] = None,
) -> Iterator[DecodedFrame]:
    """Yield the decoded frames of *Pixel Data* in order.

    Parameters
    ----------
    ds : dataset.Dataset
        The data set containing the pixel data.
    transfer_syntax : uid.TransferSyntax, optional
        The transfer syntax of the pixel data, see :func:`decode_frame`.
    sink : callable, optional
        Receives diagnostic events raised while decoding.

    Yields
    ------
    DecodedFrame
        The decoded frames.
    """
    info = ImageInfo.from_dataset(ds)
    for index in range(info.number_of_frames):
        yield decode_frame(ds, index, transfer_syntax, sink)


def render_frame(
    ds: "Dataset",
    index: int = 0,
    transfer_syntax: Optional[TransferSyntax] = None,
    sink: Optional[DiagnosticSink] = None,
) -> np.ndarray:
    """Return a single frame of *Pixel Data* decoded and converted to 8-bit
    RGBA.

    Parameters
    ----------
    ds : dataset.Dataset
        The data set containing the pixel data.
    index : int, optional
        The index of the frame to render, default ``0``.
    transfer_syntax : uid.TransferSyntax, optional
        The transfer syntax of the pixel data, see :func:`decode_frame`.
    sink : callable, optional
        Receives diagnostic events raised while decoding.

    Returns
    -------
    numpy.ndarray
        The flat ``uint8`` RGBA values, ``Rows * Columns * 4`` long.
    """
    frame = decode_frame(ds, index, transfer_syntax, sink)
    return to_rgba(frame, ImageInfo.from_dataset(ds), ds)

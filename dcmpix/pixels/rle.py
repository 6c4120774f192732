# Copyright 2026 dcmpix authors. See LICENSE file for details.
"""Use Python to decode RLE Lossless encoded *Pixel Data*."""

from struct import unpack
import warnings
from typing import List, Optional

import numpy as np

from dcmpix import config
from dcmpix.diagnostics import Diagnostic, DiagnosticEvent, DiagnosticSink
from dcmpix.errors import InvalidRLEData, UnsupportedBitDepth
from dcmpix.misc import warn_and_log
from dcmpix.pixels.imageinfo import DecodedFrame, ImageInfo
from dcmpix.pixels.native import mask_unused_bits


def decode_rle_frame(
    src: bytes,
    info: ImageInfo,
    sink: Optional[DiagnosticSink] = None,
) -> DecodedFrame:
    """Decodes a single frame of RLE encoded data.

    Each frame may contain up to 15 segments of encoded data, one for each
    byte of each sample.

    Parameters
    ----------
    src : bytes
        The RLE frame data.
    info : ImageInfo
        The image description.
    sink : callable, optional
        Receives a diagnostic event if a segment is longer than expected.
        If not used the padding is logged to the ``dcmpix`` logger instead.
        A ``UserWarning`` is issued either way.

    Returns
    -------
    DecodedFrame
        The frame's samples, pixel interleaved.

    Raises
    ------
    UnsupportedBitDepth
        If *Bits Allocated* isn't 8 or 16.
    InvalidRLEData
        If the header doesn't match the image or a segment decodes to too
        few bytes.

    References
    ----------
    DICOM Standard, Part 5, :dcm:`Annex G<part05/chapter_G.html>`
    """
    nr_bits = info.bits_allocated
    if nr_bits not in (8, 16):
        raise UnsupportedBitDepth(
            f"Unable to decode RLE encoded pixel data with {nr_bits} bits "
            "allocated"
        )

    if len(src) < 64:
        raise InvalidRLEData(
            f"The RLE frame is {len(src)} bytes long, too short for the "
            "64 byte header"
        )

    # Parse the RLE Header
    offsets = _rle_parse_header(src[:64])
    nr_segments = len(offsets)

    # Check that the actual number of segments is as expected
    nr_samples = info.samples_per_pixel
    bytes_per_sample = nr_bits // 8
    if nr_segments != nr_samples * bytes_per_sample:
        raise InvalidRLEData(
            "The number of RLE segments in the pixel data doesn't match the "
            f"expected amount ({nr_segments} vs. "
            f"{nr_samples * bytes_per_sample} segments)"
        )

    # Ensure the last segment gets decoded
    offsets.append(len(src))
    if any(b < a for a, b in zip(offsets, offsets[1:])) or offsets[0] < 64:
        raise InvalidRLEData(
            f"The RLE header has invalid segment offsets: {offsets[:-1]}"
        )

    # Segments are ordered most significant byte first:
    #  Segment: 0     | 1     | 2     | 3     | 4     | 5
    #           R MSB | R LSB | G MSB | G LSB | B MSB | B LSB
    #  A segment contains only the MSB or LSB parts of all the sample pixels
    nr_pixels = info.rows * info.columns
    planes = np.empty((nr_samples, bytes_per_sample, nr_pixels), dtype='u1')
    for ii in range(nr_segments):
        segment = _rle_decode_segment(src[offsets[ii]:offsets[ii + 1]])

        # Check that the number of decoded bytes is correct
        actual_length = len(segment)
        if actual_length < nr_pixels:
            raise InvalidRLEData(
                "The amount of decoded RLE segment data doesn't match the "
                f"expected amount ({actual_length} vs. {nr_pixels} bytes)"
            )
        elif actual_length != nr_pixels:
            msg = (
                "The decoded RLE segment contains non-conformant padding "
                f"- {actual_length} vs. {nr_pixels} bytes expected"
            )
            if sink is None:
                warn_and_log(msg)
            else:
                warnings.warn(msg)
                sink(DiagnosticEvent(Diagnostic.RLE_PADDING, msg))

        sample, byte = divmod(ii, bytes_per_sample)
        planes[sample, byte] = np.frombuffer(
            bytes(segment[:nr_pixels]), dtype='u1'
        )

    if bytes_per_sample == 1:
        arr = planes[:, 0, :]
    else:
        msb, lsb = planes[:, 0, :], planes[:, 1, :]
        if config.rle_segment_order == '<':
            msb, lsb = lsb, msb
        arr = (msb.astype('u2') << 8) | lsb

    # (samples, pixels) -> pixel interleaved
    arr = np.ascontiguousarray(arr.T).ravel()
    return DecodedFrame(info.columns, info.rows, mask_unused_bits(arr, info))


def _rle_decode_segment(src: bytes) -> bytearray:
    """Return a single segment of decoded RLE data as bytearray.

    Each run starts with a header byte ``n``:

    * ``0 <= n <= 127``: copy the next ``n + 1`` bytes literally
    * ``129 <= n <= 255``: repeat the next byte ``257 - n`` times
    * ``n == 128``: no operation

    Parameters
    ----------
    src : bytes
        The segment data to be decoded.

    Returns
    -------
    bytearray
        The decoded segment.
    """
    result = bytearray()
    pos = 0
    result_extend = result.extend
    length = len(src)

    while pos < length:
        # header_byte is N + 1
        header_byte = src[pos] + 1
        pos += 1
        if header_byte > 129:
            # Extend by copying the next byte (-N + 1) times
            # however since using uint8 instead of int8 this will be
            # (256 - N + 1) times
            result_extend(src[pos:pos + 1] * (258 - header_byte))
            pos += 1
        elif header_byte < 129:
            # Extend by literally copying the next (N + 1) bytes
            result_extend(src[pos:pos + header_byte])
            pos += header_byte

    return result


def _rle_parse_header(header: bytes) -> List[int]:
    """Return a list of byte offsets for the segments in RLE data.

    **RLE Header Format**

    The RLE Header contains the number of segments for the image and the
    starting offset of each segment. Each of these numbers is represented as
    an unsigned long stored in little-endian. The RLE Header is 16 long words
    in length (i.e. 64 bytes) which allows it to describe a compressed image
    with up to 15 segments. All unused segment offsets shall be set to zero.

    Parameters
    ----------
    header : bytes
        The RLE header data (i.e. the first 64 bytes of an RLE frame).

    Returns
    -------
    list of int
        The byte offsets for each segment in the RLE data.

    Raises
    ------
    InvalidRLEData
        If there are more than 15 segments or if the header is not 64 bytes
        long.
    """
    if len(header) != 64:
        raise InvalidRLEData("The RLE header can only be 64 bytes long")

    nr_segments = unpack("<L", header[:4])[0]
    if nr_segments > 15:
        raise InvalidRLEData(
            "The RLE header specifies an invalid number of segments "
            f"({nr_segments})"
        )

    return list(unpack(f"<{nr_segments}L", header[4:4 * (nr_segments + 1)]))

# Copyright 2026 dcmpix authors. See LICENSE file for details.
"""Decode baseline (Process 1) JPEG codestreams.

The decoder follows ISO/IEC 10918-1, Annex F: Huffman coded DC differences
and AC run/size pairs, dequantization, the inverse zig-zag, an 8x8 inverse
DCT and, for three component frames, conversion from YCbCr to RGB.
"""

import logging
import math
from typing import List, Optional, Tuple

import numpy as np

from dcmpix.diagnostics import (
    Diagnostic, DiagnosticEvent, DiagnosticSink, default_sink
)
from dcmpix.errors import (
    FrameDecodeError, InvalidHuffmanCode, UnsupportedEncoding
)
from dcmpix.jpeg.huffman import HuffmanTable
from dcmpix.jpeg.jpeg10918 import JPEGHeader, parse_jpeg_header


# The position in the 8x8 block of each zig-zag ordered coefficient
ZIGZAG = np.array([
    0, 1, 8, 16, 9, 2, 3, 10,
    17, 24, 32, 25, 18, 11, 4, 5,
    12, 19, 26, 33, 40, 48, 41, 34,
    27, 20, 13, 6, 7, 14, 21, 28,
    35, 42, 49, 56, 57, 50, 43, 36,
    29, 22, 15, 23, 30, 37, 44, 51,
    58, 59, 52, 45, 38, 31, 39, 46,
    53, 60, 61, 54, 47, 55, 62, 63,
])


def _idct_matrix() -> np.ndarray:
    """Return the 8x8 DCT basis, ``C[u, x] = a(u) cos((2x + 1) u pi / 16)``.
    """
    arr = np.empty((8, 8), dtype=np.float64)
    for u in range(8):
        alpha = math.sqrt(1 / 8) if u == 0 else math.sqrt(2 / 8)
        for x in range(8):
            arr[u, x] = alpha * math.cos((2 * x + 1) * u * math.pi / 16)

    return arr


_IDCT = _idct_matrix()
_RGB_IDS = (0x52, 0x47, 0x42)  # 'R', 'G', 'B'


class BitReader:
    """Read the entropy-coded segment of a scan one bit at a time.

    Stuffed zero bytes following ``0xFF`` are removed. When a marker is
    reached the reader supplies zero bits until :meth:`restart` moves past
    an RSTn marker.

    Parameters
    ----------
    src : bytes
        The JPEG codestream.
    offset : int
        The offset of the first byte of the entropy-coded segment.
    """

    def __init__(self, src: bytes, offset: int) -> None:
        self.src = src
        self.pos = offset
        self.bits = 0
        self.nr_bits = 0
        self.exhausted = False

    def _fill(self) -> None:
        src = self.src
        byte = 0
        if self.pos < len(src):
            byte = src[self.pos]
            if byte == 0xFF:
                if src[self.pos + 1:self.pos + 2] == b"\x00":
                    self.pos += 2
                else:
                    # A marker, leave it for restart() and pad with zeros
                    byte = 0
                    self.exhausted = True
            else:
                self.pos += 1
        else:
            self.exhausted = True

        self.bits = byte
        self.nr_bits = 8

    def read_bit(self) -> int:
        """Return the next bit."""
        if self.nr_bits == 0:
            self._fill()

        self.nr_bits -= 1
        return (self.bits >> self.nr_bits) & 1

    def receive(self, length: int) -> int:
        """Return the next `length` bits as an unsigned int."""
        value = 0
        for _ in range(length):
            value = (value << 1) | self.read_bit()

        return value

    def receive_extend(self, length: int) -> int:
        """Return the next `length` bits as a signed coefficient value
        (Section F.2.2.1, *EXTEND*)."""
        value = self.receive(length)
        if value < 1 << (length - 1):
            value -= (1 << length) - 1

        return value

    def decode(self, table: HuffmanTable) -> int:
        """Return the next Huffman coded symbol.

        Raises
        ------
        InvalidHuffmanCode
            If no code in `table` matches within 16 bits.
        """
        codes = table.codes
        code = 0
        for length in range(1, 17):
            code = (code << 1) | self.read_bit()
            if (length, code) in codes:
                return codes[(length, code)]

        raise InvalidHuffmanCode(
            f"No matching Huffman code found before offset {self.pos}"
        )

    def restart(self) -> None:
        """Discard the remaining bits and skip past the next RSTn marker."""
        self.bits = 0
        self.nr_bits = 0
        self.exhausted = False
        src = self.src
        while self.pos + 1 < len(src):
            if src[self.pos] == 0xFF and 0xD0 <= src[self.pos + 1] <= 0xD7:
                self.pos += 2
                return

            self.pos += 1


def idct_8x8(coefficients: np.ndarray) -> np.ndarray:
    """Return the level shifted and clamped inverse DCT of an 8x8 block.

    The transform is separable and is applied as a row pass followed by a
    column pass.

    Parameters
    ----------
    coefficients : numpy.ndarray
        The dequantized coefficients in natural (row-major) order, shaped
        (8, 8).

    Returns
    -------
    numpy.ndarray
        The ``uint8`` samples.
    """
    rows = coefficients @ _IDCT
    block = _IDCT.T @ rows
    return np.clip(np.round(block + 128), 0, 255).astype(np.uint8)


def _decode_block(
    reader: BitReader,
    dc_table: HuffmanTable,
    ac_table: HuffmanTable,
    quant: np.ndarray,
    predictor: int,
) -> Tuple[np.ndarray, int]:
    """Return the samples of one 8x8 block and the updated DC predictor."""
    zz = np.zeros(64, dtype=np.int32)

    # Section F.2.2.1, the DC difference
    size = reader.decode(dc_table)
    if size > 11:
        raise InvalidHuffmanCode(f"Invalid DC difference category {size}")
    if size:
        predictor += reader.receive_extend(size)
    zz[0] = predictor

    # Section F.2.2.2, the AC coefficients
    k = 1
    while k < 64:
        rs = reader.decode(ac_table)
        run, size = rs >> 4, rs & 0x0F
        if size == 0:
            if run != 15:
                # EOB
                break

            # ZRL, a run of 16 zeros
            k += 16
            continue

        k += run
        if k > 63:
            raise InvalidHuffmanCode(
                "An AC coefficient run extends past the end of the block"
            )
        zz[k] = reader.receive_extend(size)
        k += 1

    coefficients = np.zeros(64, dtype=np.float64)
    coefficients[ZIGZAG] = zz * quant

    return idct_8x8(coefficients.reshape(8, 8)), predictor


def _tables(
    header: JPEGHeader
) -> List[Tuple[HuffmanTable, HuffmanTable, np.ndarray]]:
    """Return the (DC table, AC table, quantization table) of each scan
    component."""
    tables = []
    for sc in header.scan_components:
        component = header.components[sc.index]
        try:
            tables.append((
                header.dc_tables[sc.td],
                header.ac_tables[sc.ta],
                np.asarray(
                    header.quantization_tables[component.tq], dtype=np.int32
                ),
            ))
        except KeyError as exc:
            raise FrameDecodeError(
                f"The JPEG table {exc} used by component {component.id} is "
                "missing"
            ) from exc

    return tables


def ycbcr_to_rgb(arr: np.ndarray) -> np.ndarray:
    """Return full-range YCbCr samples converted to ``uint8`` RGB.

    Parameters
    ----------
    arr : numpy.ndarray
        The samples with the Y, Cb and Cr components in the last axis.

    Returns
    -------
    numpy.ndarray
        The RGB samples, with the same shape as `arr`.
    """
    ycbcr = arr.astype(np.float64)
    y = ycbcr[..., 0]
    cb = ycbcr[..., 1] - 128.0
    cr = ycbcr[..., 2] - 128.0

    rgb = np.empty_like(ycbcr)
    rgb[..., 0] = y + 1.402 * cr
    rgb[..., 1] = y - 0.344136 * cb - 0.714136 * cr
    rgb[..., 2] = y + 1.772 * cb

    return np.clip(np.round(rgb), 0, 255).astype(np.uint8)


def decode_baseline(
    src: bytes, sink: Optional[DiagnosticSink] = None
) -> np.ndarray:
    """Return the decoded samples of a baseline JPEG codestream.

    Parameters
    ----------
    src : bytes
        A complete JPEG (ISO/IEC 10918-1) codestream with a SOF0 frame.
    sink : callable, optional
        Receives a diagnostic event if the scan data ends early, defaults
        to logging the event to the ``dcmpix`` logger.

    Returns
    -------
    numpy.ndarray
        The ``uint8`` samples, shaped (rows, columns) for a single component
        and (rows, columns, components) otherwise. Three component frames
        are converted from YCbCr to RGB unless the component IDs are
        ``'R'``, ``'G'`` and ``'B'``.

    Raises
    ------
    UnsupportedEncoding
        If the codestream isn't 8-bit baseline or uses more than one scan.
    InvalidHuffmanCode
        If the scan data contains an invalid code.
    """
    src = bytes(src)
    sink = default_sink(sink)
    header = parse_jpeg_header(src, sink)
    if header.precision != 8:
        raise UnsupportedEncoding(
            f"Unable to decode baseline JPEG with a precision of "
            f"{header.precision} bits"
        )

    components = header.components
    if len(header.scan_components) != len(components):
        raise UnsupportedEncoding(
            "Unable to decode JPEG codestreams with more than one scan"
        )

    if header.width == 0 or header.height == 0:
        raise FrameDecodeError(
            f"Invalid JPEG frame size {header.width} x {header.height}"
        )

    h_max = max(c.h for c in components)
    v_max = max(c.v for c in components)
    if len(components) == 1:
        # A single component scan is non-interleaved, one block per MCU
        h_max = v_max = 1
        components = [components[0]._replace(h=1, v=1)]

    for c in components:
        if h_max % c.h or v_max % c.v:
            raise UnsupportedEncoding(
                f"Unable to upsample JPEG component {c.id} with sampling "
                f"factors {c.h}x{c.v}"
            )

    mcus_x = math.ceil(header.width / (8 * h_max))
    mcus_y = math.ceil(header.height / (8 * v_max))
    planes = [
        np.zeros((mcus_y * c.v * 8, mcus_x * c.h * 8), dtype=np.uint8)
        for c in components
    ]

    reader = BitReader(src, header.scan_offset)
    tables = _tables(header)
    order = [sc.index for sc in header.scan_components]
    predictors = [0] * len(components)
    interval = header.restart_interval
    for mcu in range(mcus_x * mcus_y):
        if interval and mcu and mcu % interval == 0:
            reader.restart()
            predictors = [0] * len(components)

        mcu_y, mcu_x = divmod(mcu, mcus_x)
        for (dc, ac, quant), index in zip(tables, order):
            c = components[index]
            plane = planes[index]
            for v in range(c.v):
                for h in range(c.h):
                    block, predictors[index] = _decode_block(
                        reader, dc, ac, quant, predictors[index]
                    )
                    y = (mcu_y * c.v + v) * 8
                    x = (mcu_x * c.h + h) * 8
                    plane[y:y + 8, x:x + 8] = block

    if reader.exhausted:
        sink(DiagnosticEvent(
            Diagnostic.JPEG_MARKER,
            "The JPEG scan data ended before all MCUs were decoded",
            offset=reader.pos,
            level=logging.WARNING,
        ))

    rows, columns = header.height, header.width
    upsampled = []
    for c, plane in zip(components, planes):
        plane = plane.repeat(v_max // c.v, axis=0).repeat(h_max // c.h, axis=1)
        upsampled.append(plane[:rows, :columns])

    if len(upsampled) == 1:
        return upsampled[0]

    arr = np.stack(upsampled, axis=-1)
    if len(upsampled) == 3 and header.component_ids != _RGB_IDS:
        arr = ycbcr_to_rgb(arr)

    return arr

# Copyright 2026 dcmpix authors. See LICENSE file for details.
"""Parse the marker segments of JPEG (ISO/IEC 10918-1) codestreams."""

from dataclasses import dataclass, field
import logging
from struct import Struct
from typing import Dict, List, NamedTuple, Optional, Tuple

from dcmpix import config
from dcmpix.config import logger
from dcmpix.diagnostics import (
    Diagnostic, DiagnosticEvent, DiagnosticSink, default_sink
)
from dcmpix.errors import (
    DicomError, FrameDecodeError, TruncatedStream, UnsupportedEncoding
)
from dcmpix.filebase import ByteCursor
from dcmpix.jpeg.huffman import HuffmanTable, build_huffman_table


_UNPACK_UINT = Struct(">H").unpack_from
_UNPACK_QUANT16 = Struct(">64H").unpack_from

# The 64 quantization values of a DQT table, in zig-zag order
QuantizationTable = Tuple[int, ...]

SOI = b"\xFF\xD8"
EOI = b"\xFF\xD9"
SOS = b"\xFF\xDA"
DQT = b"\xFF\xDB"
DHT = b"\xFF\xC4"
DRI = b"\xFF\xDD"
SOF0 = b"\xFF\xC0"

_sof_markers = [bytes([255, x]) for x in range(192, 208)]
_sof_markers.remove(b"\xFF\xC4")
_sof_markers.remove(b"\xFF\xC8")
_sof_markers.remove(b"\xFF\xCC")
_SOF_MARKERS = {x for x in _sof_markers}
_SOF_NAMES = {
    0xC1: "extended sequential",
    0xC2: "progressive",
    0xC3: "lossless",
    0xC5: "differential sequential",
    0xC6: "differential progressive",
    0xC7: "differential lossless",
    0xC9: "extended sequential, arithmetic coding",
    0xCA: "progressive, arithmetic coding",
    0xCB: "lossless, arithmetic coding",
    0xCD: "differential sequential, arithmetic coding",
    0xCE: "differential progressive, arithmetic coding",
    0xCF: "differential lossless, arithmetic coding",
}
_MARKER_NAMES = {
    0xC0: "SOF0",
    0xC4: "DHT",
    0xCC: "DAC",
    0xD8: "SOI",
    0xD9: "EOI",
    0xDA: "SOS",
    0xDB: "DQT",
    0xDD: "DRI",
    0xFE: "COM",
}


class ComponentSpec(NamedTuple):
    """A frame component from the SOF segment."""
    id: int
    h: int
    v: int
    tq: int


class ScanComponent(NamedTuple):
    """A scan component from the SOS segment, `index` is the position of the
    matching frame component."""
    index: int
    td: int
    ta: int


@dataclass
class JPEGHeader:
    """The tables and parameters needed to decode a baseline scan.

    Attributes
    ----------
    precision : int
        The sample precision in bits.
    height : int
        The number of lines.
    width : int
        The number of samples per line.
    components : list of ComponentSpec
        The frame components, in SOF order.
    quantization_tables : dict
        The 64 quantization values in zig-zag order, keyed by table ID.
    dc_tables, ac_tables : dict
        The :class:`~dcmpix.jpeg.huffman.HuffmanTable` for each table ID.
    restart_interval : int
        The number of MCUs between restart markers, ``0`` for none.
    scan_components : list of ScanComponent
        The components coded in the scan, in SOS order.
    scan_offset : int
        The offset of the first byte of entropy-coded data.
    """
    precision: int = 0
    height: int = 0
    width: int = 0
    components: List[ComponentSpec] = field(default_factory=list)
    quantization_tables: Dict[int, QuantizationTable] = field(
        default_factory=dict
    )
    dc_tables: Dict[int, HuffmanTable] = field(default_factory=dict)
    ac_tables: Dict[int, HuffmanTable] = field(default_factory=dict)
    restart_interval: int = 0
    scan_components: List[ScanComponent] = field(default_factory=list)
    scan_offset: int = 0

    @property
    def component_ids(self) -> Tuple[int, ...]:
        return tuple(c.id for c in self.components)


def _as_str(src: bytes, cutoff: int = 32) -> str:
    """Return bytes as a formatted str."""
    s = " ".join([f"{b:02X}" for b in src[:cutoff]])

    if len(src) > cutoff:
        s += " ..."

    return s


def _marker_name(marker: bytes) -> str:
    code = marker[1]
    if code in _MARKER_NAMES:
        return _MARKER_NAMES[code]
    if 0xE0 <= code <= 0xEF:
        return f"APP{code - 0xE0}"
    if 0xD0 <= code <= 0xD7:
        return f"RST{code - 0xD0}"
    if marker in _SOF_MARKERS:
        return f"SOF{code - 0xC0}"

    return f"FF {code:02X}"


def _find_marker(src: bytes, idx: int = 0) -> Tuple[bytes, int]:
    """Find and return the next JPEG segment marker.

    This function will only work if `idx` is before the SOS marker.

    Parameters
    ----------
    src : bytes
        The JPEG codestream to search.
    idx : int
        The starting offset for the search.

    Returns
    -------
    Tuple[bytes, int]
        If a marker was found, its value and offset.

    Raises
    ------
    FrameDecodeError
        If there's no marker at `idx`.
    TruncatedStream
        If no markers were found before the end of the data.
    """
    if idx >= len(src):
        raise TruncatedStream(
            f"The JPEG codestream ended at offset {idx} before the SOS marker"
        )

    # ISO/IEC 10918-1, Section B.1.1.2:
    #   Any marker may optionally be preceded by any number of 0xFF fill bytes
    if src[idx] != 255:
        raise FrameDecodeError(f"No JPEG marker found at offset {idx}")

    msg = f"No JPEG markers found after offset {idx}"

    eof = len(src) - 1
    while src[idx] == 255 and idx != eof:
        if src[idx + 1] == 255:
            idx += 1
            continue

        break

    if idx == eof:
        raise TruncatedStream(msg)

    return src[idx:idx + 2], idx


def _segment(src: bytes, idx: int) -> bytes:
    """Return the contents of the marker segment starting at `idx`."""
    if idx + 4 > len(src):
        raise TruncatedStream(
            f"The JPEG marker segment at offset {idx} is truncated"
        )

    length = _UNPACK_UINT(src, idx + 2)[0]
    if length < 2 or idx + 2 + length > len(src):
        raise TruncatedStream(
            f"The JPEG marker segment at offset {idx} has a length of "
            f"{length} bytes but only {len(src) - idx - 2} bytes remain"
        )

    return src[idx + 4:idx + 2 + length]


def _split_byte(value: int) -> Tuple[int, int]:
    """Return the high and low nibbles of `value`."""
    return value >> 4, value & 0x0F


def _parse_sof(header: JPEGHeader, segment: bytes) -> None:
    # Parse SOF frame header - Section B.2.2
    # SOF | Lf | P |  Y |  X | Nf | Components |
    #  16 | 16 | 8 | 16 | 16 |  8 |     Nf * 3 | bits
    if len(segment) < 6 or len(segment) < 6 + 3 * segment[5]:
        raise TruncatedStream("The JPEG SOF segment is truncated")

    cursor = ByteCursor(segment)
    header.precision = cursor.read_u8()
    header.height = cursor.read_u16(little=False)
    header.width = cursor.read_u16(little=False)
    nr_components = cursor.read_u8()

    header.components = []
    for _ in range(nr_components):
        # Ci | Hi | Vi | Tqi
        #  8 |  4 |  4 |   8 | bits
        c_id, sampling, tq = cursor.read_bytes(3)
        h_samples, v_samples = _split_byte(sampling)
        if not (1 <= h_samples <= 4 and 1 <= v_samples <= 4):
            raise FrameDecodeError(
                f"Invalid sampling factors {h_samples}x{v_samples} for JPEG "
                f"component {c_id}"
            )
        header.components.append(
            ComponentSpec(c_id, h_samples, v_samples, tq)
        )


def _parse_dqt(header: JPEGHeader, segment: bytes) -> None:
    # Section B.2.4.1, a segment may contain several tables
    idx = 0
    while idx < len(segment):
        precision, table_id = _split_byte(segment[idx])
        idx += 1
        # Pq is 0 for 8-bit values and 1 for 16-bit values
        nr_bytes = 64 * (precision + 1)
        if idx + nr_bytes > len(segment):
            raise TruncatedStream("The JPEG DQT segment is truncated")

        if precision == 0:
            values = tuple(segment[idx:idx + 64])
        else:
            values = _UNPACK_QUANT16(segment, idx)

        idx += nr_bytes

        header.quantization_tables[table_id] = values


def _parse_dht(header: JPEGHeader, segment: bytes) -> None:
    # Section B.2.4.2, a segment may contain several tables
    idx = 0
    while idx < len(segment):
        table_class, table_id = _split_byte(segment[idx])
        counts = list(segment[idx + 1:idx + 17])
        nr_symbols = sum(counts)
        symbols = list(segment[idx + 17:idx + 17 + nr_symbols])
        if len(counts) != 16 or len(symbols) != nr_symbols:
            raise TruncatedStream("The JPEG DHT segment is truncated")

        idx += 17 + nr_symbols
        table = build_huffman_table(counts, symbols)
        if table_class == 0:
            header.dc_tables[table_id] = table
        else:
            header.ac_tables[table_id] = table


def _parse_sos(header: JPEGHeader, segment: bytes) -> None:
    # Section B.2.3
    # SOS | Ls | Ns | Components | Ss | Se | Ah Al |
    #  16 | 16 |  8 |     Ns * 2 |  8 |  8 |     8 | bits
    if not header.components:
        raise FrameDecodeError(
            "The JPEG SOS marker was found before the SOF marker"
        )

    nr_components = segment[0] if segment else 0
    if len(segment) < 4 + 2 * nr_components:
        raise TruncatedStream("The JPEG SOS segment is truncated")

    ids = header.component_ids
    cursor = ByteCursor(segment)
    cursor.skip(1)
    header.scan_components = []
    for _ in range(nr_components):
        c_id = cursor.read_u8()
        tables = cursor.read_u8()
        if c_id not in ids:
            raise FrameDecodeError(
                f"The JPEG scan references an unknown component {c_id}"
            )
        td, ta = _split_byte(tables)
        header.scan_components.append(ScanComponent(ids.index(c_id), td, ta))


def parse_jpeg_header(
    src: bytes, sink: Optional[DiagnosticSink] = None
) -> JPEGHeader:
    """Return the tables and frame parameters of a baseline JPEG codestream.

    The marker segments are parsed up to and including the first SOS
    marker, whose end marks the start of the entropy-coded scan data.

    Parameters
    ----------
    src : bytes
        The JPEG (ISO/IEC 10918-1) codestream to be parsed.
    sink : callable, optional
        Receives a diagnostic event for each skipped marker segment,
        defaults to logging the event to the ``dcmpix`` logger.

    Returns
    -------
    JPEGHeader
        The parsed header.

    Raises
    ------
    UnsupportedEncoding
        If the SOF marker isn't SOF0 (baseline DCT).
    FrameDecodeError
        If the codestream doesn't start with SOI or ends before SOS.
    TruncatedStream
        If a marker segment is longer than the available data.
    """
    if src[:2] != SOI:
        raise FrameDecodeError(
            "No SOI (FF D8) marker found at the start of the codestream"
        )

    sink = default_sink(sink)
    header = JPEGHeader()
    marker, idx = _find_marker(src, 2)
    while True:
        if config.debugging:
            logger.debug(f"{idx:08x}: {_marker_name(marker)} marker")

        if marker == EOI:
            raise FrameDecodeError(
                "The JPEG codestream ended before the SOS marker"
            )

        if marker in _SOF_MARKERS and marker != SOF0:
            name = _SOF_NAMES[marker[1]]
            raise UnsupportedEncoding(
                f"Unable to decode JPEG codestreams with a {name} "
                f"({_marker_name(marker)}) frame, only baseline (SOF0) is "
                "supported"
            )

        segment = _segment(src, idx)
        if marker == SOF0:
            _parse_sof(header, segment)
        elif marker == DQT:
            _parse_dqt(header, segment)
        elif marker == DHT:
            _parse_dht(header, segment)
        elif marker == DRI:
            if len(segment) < 2:
                raise TruncatedStream("The JPEG DRI segment is truncated")
            header.restart_interval = _UNPACK_UINT(segment, 0)[0]
        elif marker == SOS:
            _parse_sos(header, segment)
            header.scan_offset = idx + 4 + len(segment)
            return header
        else:
            sink(DiagnosticEvent(
                Diagnostic.JPEG_MARKER,
                f"Skipped the {_marker_name(marker)} marker segment",
                offset=idx,
                level=logging.DEBUG,
            ))

        marker, idx = _find_marker(src, idx + 4 + len(segment))


def debug_jpeg(src: bytes) -> List[str]:
    """Return JPEG debugging information.

    Parameters
    ----------
    src : bytes
        The JPEG codestream.

    Returns
    -------
    list of str
    """
    if len(src) < 2:
        return ["Insufficient data for JPEG codestream"]

    if src[:2] != SOI:
        return [
            "No SOI (FF D8) marker found at the start of the codestream",
            f"  {_as_str(src, 16)}",
        ]

    s = ["SOI (FF D8) marker found"]
    try:
        header = parse_jpeg_header(src)
    except DicomError as exc:
        s.append(f"Unable to parse the codestream: {exc}")
        return s

    s.append("SOF0 segment found")
    s.append(f"  Precision: {header.precision}")
    s.append(f"  Rows: {header.height}")
    s.append(f"  Columns: {header.width}")
    s.append("  Components:")
    for c in header.components:
        s.append(
            f"    ID: 0x{c.id:02X}, subsampling h{c.h} v{c.v}, "
            f"quantization table {c.tq}"
        )

    s.append(
        "DQT table(s): "
        + ", ".join(str(k) for k in sorted(header.quantization_tables))
    )
    s.append(
        f"DHT table(s): {len(header.dc_tables)} DC, "
        f"{len(header.ac_tables)} AC"
    )
    if header.restart_interval:
        s.append(f"Restart interval: {header.restart_interval} MCUs")

    s.append(f"SOS scan data starts at offset {header.scan_offset}")

    return s

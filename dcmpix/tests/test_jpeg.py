# Copyright 2026 dcmpix authors. See LICENSE file for details.
"""Unit tests for the dcmpix.jpeg package."""

import logging

import numpy as np
import pytest

from dcmpix.diagnostics import Diagnostic
from dcmpix.errors import (
    FrameDecodeError, InvalidHuffmanCode, TruncatedStream, UnsupportedEncoding
)
from dcmpix.jpeg import build_huffman_table, debug_jpeg, parse_jpeg_header
from dcmpix.jpeg.baseline import (
    BitReader, decode_baseline, idct_8x8, ycbcr_to_rgb
)
from dcmpix.jpeg.huffman import HuffmanTable
from dcmpix.jpeg.jpeg10918 import _find_marker, _split_byte

from _builder import build_jpeg


# Two 8x8 blocks, DC differences of +8 and -8
SCAN_16x8 = b"\x60\x5C"
APP0 = b"\xFF\xE0\x00\x06JFIF"


class TestBuildHuffmanTable:
    """Tests for huffman.build_huffman_table()"""

    def test_single_code(self):
        """Test a single 2-bit code is all zeros."""
        table = build_huffman_table([0, 1] + [0] * 14, [0x05])
        assert {(2, 0): 0x05} == table.codes
        assert {"00": 0x05} == table.as_bit_strings()
        assert (2, 0) in table
        assert (1, 0) not in table
        assert 1 == len(table)

    def test_luminance_dc(self):
        """Test the example luminance DC table from Annex K."""
        counts = [0, 1, 5, 1, 1, 1, 1, 1, 1] + [0] * 7
        table = build_huffman_table(counts, list(range(12)))
        codes = table.as_bit_strings()
        assert 0 == codes["00"]
        assert 1 == codes["010"]
        assert 5 == codes["110"]
        assert 6 == codes["1110"]
        assert 11 == codes["111111110"]
        assert 12 == len(table)

    def test_equality(self):
        """Test tables with the same codes are equal."""
        a = build_huffman_table([0, 2] + [0] * 14, [0, 4])
        b = HuffmanTable({(2, 0): 0, (2, 1): 4})
        assert a == b
        assert a != HuffmanTable({})
        assert "HuffmanTable({'00': 0, '01': 4})" == repr(a)

    def test_bad_counts_length(self):
        """Test an exception is raised if there aren't 16 counts."""
        msg = "A Huffman table requires 16 code length counts, got 15"
        with pytest.raises(FrameDecodeError, match=msg):
            build_huffman_table([0] * 15, [])

    def test_counts_symbols_mismatch(self):
        """Test an exception is raised if the symbols are missing."""
        msg = "describe 2 codes but 1 symbols are available"
        with pytest.raises(FrameDecodeError, match=msg):
            build_huffman_table([0, 2] + [0] * 14, [0])

    def test_overflow(self):
        """Test an exception is raised for more codes than fit."""
        msg = "overflow the 1-bit code space"
        with pytest.raises(FrameDecodeError, match=msg):
            build_huffman_table([3] + [0] * 15, [0, 1, 2])


class TestFindMarker:
    """Tests for jpeg10918._find_marker()"""

    def test_marker(self):
        """Test finding a marker."""
        assert (b"\xFF\xD8", 0) == _find_marker(b"\xFF\xD8\x00")

    def test_fill_bytes(self):
        """Test 0xFF fill bytes before a marker are skipped."""
        assert (b"\xFF\xDB", 2) == _find_marker(b"\xFF\xFF\xFF\xDB\x00")

    def test_no_marker(self):
        """Test an exception is raised if not at a marker."""
        msg = "No JPEG marker found at offset 1"
        with pytest.raises(FrameDecodeError, match=msg):
            _find_marker(b"\xFF\x00\xFF", 1)

    def test_only_fill(self):
        """Test an exception is raised if the data ends in fill bytes."""
        msg = "No JPEG markers found after offset 0"
        with pytest.raises(TruncatedStream, match=msg):
            _find_marker(b"\xFF\xFF\xFF")

    def test_past_end(self):
        """Test an exception is raised if starting after the data."""
        msg = "The JPEG codestream ended at offset 2 before the SOS marker"
        with pytest.raises(TruncatedStream, match=msg):
            _find_marker(b"\xFF\xD8", 2)


def test_split_byte():
    """Test _split_byte()"""
    assert (2, 1) == _split_byte(0x21)
    assert (0, 15) == _split_byte(0x0F)
    assert (15, 0) == _split_byte(0xF0)


class TestParseJPEGHeader:
    """Tests for jpeg10918.parse_jpeg_header()"""

    def test_baseline(self):
        """Test parsing a baseline codestream."""
        src = build_jpeg(16, 8, SCAN_16x8)
        header = parse_jpeg_header(src)
        assert 8 == header.precision
        assert 8 == header.height
        assert 16 == header.width
        assert (1, ) == header.component_ids
        assert 1 == header.components[0].h
        assert 16 == header.quantization_tables[0][0]
        assert 1 == header.quantization_tables[0][63]
        assert {"00": 0, "01": 4} == header.dc_tables[0].as_bit_strings()
        assert {"00": 0} == header.ac_tables[0].as_bit_strings()
        assert 0 == header.restart_interval
        assert 1 == len(header.scan_components)
        assert len(src) - 4 == header.scan_offset

    def test_restart_interval(self):
        """Test the DRI segment is parsed."""
        src = build_jpeg(16, 8, SCAN_16x8, restart_interval=1)
        assert 1 == parse_jpeg_header(src).restart_interval

    def test_three_components(self):
        """Test parsing a three component frame."""
        src = build_jpeg(
            16, 8, b"", components=[(1, 2, 1), (2, 1, 1), (3, 1, 1)]
        )
        header = parse_jpeg_header(src)
        assert (1, 2, 3) == header.component_ids
        assert (2, 1) == (header.components[0].h, header.components[0].v)
        assert [0, 1, 2] == [sc.index for sc in header.scan_components]

    def test_skipped_marker(self, sink):
        """Test unused marker segments are reported to the sink."""
        src = build_jpeg(16, 8, SCAN_16x8, extra=APP0)
        header = parse_jpeg_header(src, sink)
        assert 16 == header.width
        assert [Diagnostic.JPEG_MARKER] == sink.codes
        event = sink.events[0]
        assert "Skipped the APP0 marker segment" == event.message
        assert 2 == event.offset
        assert logging.DEBUG == event.level

    def test_skipped_marker_logged(self, caplog):
        """Test unused marker segments are logged if no sink is used."""
        src = build_jpeg(16, 8, SCAN_16x8, extra=APP0)
        with caplog.at_level(logging.DEBUG, logger="dcmpix"):
            parse_jpeg_header(src)

        assert "JPEG_MARKER" in caplog.text
        assert "Skipped the APP0 marker segment" in caplog.text

    def test_no_soi(self):
        """Test an exception is raised if there's no SOI marker."""
        msg = r"No SOI \(FF D8\) marker found"
        with pytest.raises(FrameDecodeError, match=msg):
            parse_jpeg_header(b"\x00\x01\x02\x03")

    def test_eoi_before_sos(self):
        """Test an exception is raised if EOI is found first."""
        msg = "The JPEG codestream ended before the SOS marker"
        with pytest.raises(FrameDecodeError, match=msg):
            parse_jpeg_header(b"\xFF\xD8\xFF\xD9")

    def test_progressive(self):
        """Test an exception is raised for a non-baseline frame."""
        src = build_jpeg(16, 8, SCAN_16x8, sof=b"\xFF\xC2")
        msg = r"Unable to decode JPEG codestreams with a progressive \(SOF2\)"
        with pytest.raises(UnsupportedEncoding, match=msg):
            parse_jpeg_header(src)

    def test_truncated_segment(self):
        """Test an exception is raised for a truncated marker segment."""
        msg = "The JPEG marker segment at offset 2 has a length of 67 bytes"
        with pytest.raises(TruncatedStream, match=msg):
            parse_jpeg_header(b"\xFF\xD8\xFF\xDB\x00\x43\x00\x01")

    def test_sos_before_sof(self):
        """Test an exception is raised if SOS comes before SOF."""
        src = b"\xFF\xD8\xFF\xDA\x00\x08\x01\x01\x00\x00\x3F\x00"
        msg = "The JPEG SOS marker was found before the SOF marker"
        with pytest.raises(FrameDecodeError, match=msg):
            parse_jpeg_header(src)

    def test_unknown_scan_component(self):
        """Test an exception is raised if the scan uses an unknown
        component."""
        src = bytearray(build_jpeg(16, 8, SCAN_16x8))
        # Change the component ID in the SOS segment
        idx = src.index(b"\xFF\xDA")
        src[idx + 5] = 9
        msg = "The JPEG scan references an unknown component 9"
        with pytest.raises(FrameDecodeError, match=msg):
            parse_jpeg_header(bytes(src))


class TestDebugJPEG:
    """Tests for jpeg10918.debug_jpeg()"""

    def test_baseline(self):
        """Test the output for a baseline codestream."""
        src = build_jpeg(16, 8, SCAN_16x8, restart_interval=2)
        s = debug_jpeg(src)
        assert "SOI (FF D8) marker found" == s[0]
        assert "SOF0 segment found" == s[1]
        assert "  Rows: 8" in s
        assert "  Columns: 16" in s
        assert "    ID: 0x01, subsampling h1 v1, quantization table 0" in s
        assert "DHT table(s): 1 DC, 1 AC" in s
        assert "Restart interval: 2 MCUs" in s
        assert f"SOS scan data starts at offset {len(src) - 4}" == s[-1]

    def test_insufficient_data(self):
        """Test the output for too little data."""
        assert ["Insufficient data for JPEG codestream"] == debug_jpeg(b"\xFF")

    def test_no_soi(self):
        """Test the output if there's no SOI marker."""
        s = debug_jpeg(b"\x00\x01\x02")
        assert 2 == len(s)
        assert "  00 01 02" == s[1]

    def test_unparseable(self):
        """Test parsing errors are included in the output."""
        s = debug_jpeg(b"\xFF\xD8\xFF\xD9")
        assert "SOI (FF D8) marker found" == s[0]
        assert s[1].startswith("Unable to parse the codestream: ")


class TestBitReader:
    """Tests for baseline.BitReader"""

    def test_receive(self):
        """Test reading bits most significant first."""
        reader = BitReader(b"\xA5\x0F", 0)
        assert 1 == reader.read_bit()
        assert 0 == reader.read_bit()
        assert 0b100101 == reader.receive(6)
        assert 0x0F == reader.receive(8)
        assert not reader.exhausted

    def test_offset(self):
        """Test starting part way through the data."""
        reader = BitReader(b"\x00\x80", 1)
        assert 1 == reader.read_bit()

    def test_stuffed_zero(self):
        """Test the zero byte after 0xFF is removed."""
        reader = BitReader(b"\xFF\x00\x80", 0)
        assert 0xFF == reader.receive(8)
        assert 1 == reader.read_bit()
        assert not reader.exhausted

    def test_marker_pads_zeros(self):
        """Test zero bits are returned at a marker."""
        reader = BitReader(b"\xFF\xD9", 0)
        assert 0 == reader.receive(8)
        assert reader.exhausted

    def test_end_pads_zeros(self):
        """Test zero bits are returned at the end of the data."""
        reader = BitReader(b"", 0)
        assert 0 == reader.receive(16)
        assert reader.exhausted

    def test_receive_extend(self):
        """Test EXTEND for negative and positive values."""
        reader = BitReader(b"\x78\x40", 0)
        assert -8 == reader.receive_extend(4)
        assert 8 == reader.receive_extend(4)
        assert -1 == reader.receive_extend(1)
        assert 1 == reader.receive_extend(1)

    def test_restart(self):
        """Test restart() skips to after the RSTn marker."""
        reader = BitReader(b"\xAA\xFF\xD3\x55", 0)
        assert 1 == reader.read_bit()
        reader.restart()
        assert 3 == reader.pos
        assert 0x55 == reader.receive(8)

    def test_decode(self):
        """Test decoding Huffman coded symbols."""
        table = build_huffman_table([0, 2] + [0] * 14, [0x00, 0x04])
        reader = BitReader(b"\x40", 0)
        assert 0x04 == reader.decode(table)
        assert 0x00 == reader.decode(table)

    def test_decode_invalid(self):
        """Test an exception is raised if no code matches."""
        table = build_huffman_table([0, 1] + [0] * 14, [0x00])
        reader = BitReader(b"\xFF\x00\xFF\x00", 0)
        with pytest.raises(InvalidHuffmanCode, match="No matching Huffman"):
            reader.decode(table)


class TestIDCT:
    """Tests for baseline.idct_8x8()"""

    def test_zeros(self):
        """Test all zero coefficients give mid-gray."""
        out = idct_8x8(np.zeros((8, 8)))
        assert np.uint8 == out.dtype
        assert np.array_equal(np.full((8, 8), 128), out)

    def test_dc(self):
        """Test a DC only block is flat."""
        coefficients = np.zeros((8, 8))
        coefficients[0, 0] = 128
        assert np.array_equal(np.full((8, 8), 144), idct_8x8(coefficients))

    def test_clamped(self):
        """Test the output is clamped to 0 and 255."""
        coefficients = np.zeros((8, 8))
        coefficients[0, 0] = 8000
        assert 255 == idct_8x8(coefficients).min()
        coefficients[0, 0] = -8000
        assert 0 == idct_8x8(coefficients).max()

    def test_horizontal_frequency(self):
        """Test a first order horizontal coefficient varies along rows."""
        coefficients = np.zeros((8, 8))
        coefficients[0, 1] = 100
        out = idct_8x8(coefficients).astype(int)
        assert (out[:, 0] == out[0, 0]).all()
        assert out[0, 0] > out[0, 7]


def test_ycbcr_to_rgb():
    """Test YCbCr to RGB conversion."""
    arr = np.asarray([[128, 128, 128], [0, 128, 255], [255, 0, 128]], "u1")
    rgb = ycbcr_to_rgb(arr)
    assert np.uint8 == rgb.dtype
    assert [128, 128, 128] == rgb[0].tolist()
    assert [178, 0, 0] == rgb[1].tolist()
    assert [255, 255, 28] == rgb[2].tolist()


class TestDecodeBaseline:
    """Tests for baseline.decode_baseline()"""

    def test_single_component(self):
        """Test decoding a two block grayscale frame."""
        arr = decode_baseline(build_jpeg(16, 8, SCAN_16x8))
        assert (8, 16) == arr.shape
        assert np.uint8 == arr.dtype
        assert (arr[:, :8] == 144).all()
        assert (arr[:, 8:] == 128).all()

    def test_cropped(self):
        """Test the output is cropped to the frame size."""
        arr = decode_baseline(build_jpeg(13, 5, SCAN_16x8))
        assert (5, 13) == arr.shape
        assert (arr[:, 8:] == 128).all()

    def test_restart_interval(self):
        """Test the DC predictor is reset at a restart marker."""
        src = build_jpeg(16, 8, b"\x60\xFF\xD0\x5C", restart_interval=1)
        arr = decode_baseline(src)
        assert (arr[:, :8] == 144).all()
        assert (arr[:, 8:] == 112).all()

    def test_ycbcr(self):
        """Test a three component frame is converted to RGB."""
        src = build_jpeg(
            8, 8, b"\x60\x00", components=[(1, 1, 1), (2, 1, 1), (3, 1, 1)]
        )
        arr = decode_baseline(src)
        assert (8, 8, 3) == arr.shape
        assert (arr == 144).all()

    def test_rgb_component_ids(self):
        """Test frames with R, G and B component IDs aren't converted."""
        src = build_jpeg(
            8, 8, b"\x60\x00",
            components=[(0x52, 1, 1), (0x47, 1, 1), (0x42, 1, 1)]
        )
        arr = decode_baseline(src)
        assert [144, 128, 128] == arr[0, 0].tolist()

    def test_subsampled(self):
        """Test chroma components are upsampled."""
        src = build_jpeg(
            16, 8, b"\x60\x00\x00",
            components=[(1, 2, 1), (2, 1, 1), (3, 1, 1)]
        )
        arr = decode_baseline(src)
        assert (8, 16, 3) == arr.shape
        assert (arr == 144).all()

    def test_scan_ends_early(self, sink):
        """Test missing scan data is decoded as zeros and reported."""
        arr = decode_baseline(build_jpeg(16, 8, b""), sink)
        assert (arr == 128).all()
        assert [Diagnostic.JPEG_MARKER] == sink.codes
        assert logging.WARNING == sink.events[0].level

    def test_scan_ends_early_logged(self, caplog):
        """Test missing scan data is logged if no sink is used."""
        with caplog.at_level(logging.WARNING, logger="dcmpix"):
            decode_baseline(build_jpeg(16, 8, b""))

        assert "JPEG_MARKER" in caplog.text
        assert "scan data ended before all MCUs were decoded" in caplog.text

    def test_invalid_code(self):
        """Test an exception is raised for an invalid Huffman code."""
        src = build_jpeg(16, 8, b"\xFF\x00\xFF\x00")
        with pytest.raises(InvalidHuffmanCode):
            decode_baseline(src)

    def test_precision(self):
        """Test an exception is raised for 12-bit samples."""
        src = bytearray(build_jpeg(16, 8, SCAN_16x8))
        src[src.index(b"\xFF\xC0") + 4] = 12
        msg = "Unable to decode baseline JPEG with a precision of 12 bits"
        with pytest.raises(UnsupportedEncoding, match=msg):
            decode_baseline(bytes(src))

    def test_zero_size(self):
        """Test an exception is raised for a frame with no lines."""
        msg = r"Invalid JPEG frame size 16 x 0"
        with pytest.raises(FrameDecodeError, match=msg):
            decode_baseline(build_jpeg(16, 0, SCAN_16x8))

    def test_progressive(self):
        """Test an exception is raised for a progressive frame."""
        with pytest.raises(UnsupportedEncoding):
            decode_baseline(build_jpeg(16, 8, SCAN_16x8, sof=b"\xFF\xC2"))

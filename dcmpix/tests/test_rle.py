# Copyright 2026 dcmpix authors. See LICENSE file for details.
"""Tests for the dcmpix.pixels.rle module."""

import numpy as np
import pytest

from dcmpix.diagnostics import Diagnostic
from dcmpix.errors import InvalidRLEData, UnsupportedBitDepth
from dcmpix.pixels.imageinfo import ImageInfo
from dcmpix.pixels.rle import (
    decode_rle_frame, _rle_decode_segment, _rle_parse_header
)

from _builder import rle_frame, ul


class TestDecodeSegment:
    """Tests for rle._rle_decode_segment()"""

    def test_literal(self):
        """Test a literal run."""
        assert b"abc" == _rle_decode_segment(b"\x02abc")

    def test_replicate(self):
        """Test a replicate run."""
        assert b"\x07\x07\x07" == _rle_decode_segment(b"\xFE\x07")
        assert b"\x01" * 128 == _rle_decode_segment(b"\x81\x01")

    def test_noop(self):
        """Test the no-op header byte is skipped."""
        assert b"ab\x05\x05" == _rle_decode_segment(b"\x80\x01ab\x80\xFF\x05")

    def test_empty(self):
        """Test decoding no data."""
        assert b"" == _rle_decode_segment(b"")


class TestParseHeader:
    """Tests for rle._rle_parse_header()"""

    def test_offsets(self):
        """Test the segment offsets are returned."""
        header = ul(3, 64, 70, 80) + b"\x00" * 48
        assert [64, 70, 80] == _rle_parse_header(header)

    def test_no_segments(self):
        """Test a header with no segments."""
        assert [] == _rle_parse_header(b"\x00" * 64)

    def test_bad_length(self):
        """Test an exception is raised if the header isn't 64 bytes."""
        msg = "The RLE header can only be 64 bytes long"
        with pytest.raises(InvalidRLEData, match=msg):
            _rle_parse_header(b"\x00" * 63)

    def test_too_many_segments(self):
        """Test an exception is raised for more than 15 segments."""
        msg = r"specifies an invalid number of segments \(16\)"
        with pytest.raises(InvalidRLEData, match=msg):
            _rle_parse_header(ul(16) + b"\x00" * 60)


class TestDecodeFrame:
    """Tests for rle.decode_rle_frame()"""

    def test_8bit(self):
        """Test decoding 8-bit monochrome data."""
        info = ImageInfo(2, 2, 8)
        frame = decode_rle_frame(rle_frame([b"\x01\x02\x03\x04"]), info)
        assert (2, 2) == (frame.width, frame.height)
        assert np.uint8 == frame.samples.dtype
        assert [1, 2, 3, 4] == frame.samples.tolist()

    def test_8bit_rgb(self):
        """Test the segments of each sample are interleaved."""
        info = ImageInfo(1, 2, 8, samples_per_pixel=3,
                         photometric_interpretation='RGB')
        src = rle_frame([b"\x0A\x0B", b"\x14\x15", b"\x1E\x1F"])
        frame = decode_rle_frame(src, info)
        assert [10, 20, 30, 11, 21, 31] == frame.samples.tolist()
        assert 3 == frame.samples_per_pixel

    def test_16bit(self):
        """Test the most significant byte segment comes first."""
        info = ImageInfo(1, 2, 16)
        frame = decode_rle_frame(rle_frame([b"\x01\x02", b"\x03\x04"]), info)
        assert np.uint16 == frame.samples.dtype
        assert [0x0103, 0x0204] == frame.samples.tolist()

    def test_16bit_lsb_first(self, lsb_first_rle):
        """Test the segment order can be swapped."""
        info = ImageInfo(1, 2, 16)
        frame = decode_rle_frame(rle_frame([b"\x01\x02", b"\x03\x04"]), info)
        assert [0x0301, 0x0402] == frame.samples.tolist()

    def test_16bit_signed(self):
        """Test signed samples are sign extended from bits stored."""
        info = ImageInfo(1, 2, 16, bits_stored=12, pixel_representation=1)
        frame = decode_rle_frame(rle_frame([b"\x0F\x07", b"\xFF\xFF"]), info)
        assert np.int16 == frame.samples.dtype
        assert [-1, 2047] == frame.samples.tolist()

    def test_replicate_runs(self):
        """Test a segment made of replicate runs."""
        info = ImageInfo(4, 4, 8)
        src = rle_frame([b"\xF1\x09"], encode=False)
        frame = decode_rle_frame(src, info)
        assert [9] * 16 == frame.samples.tolist()

    def test_unsupported_bits(self):
        """Test an exception is raised for 12 bits allocated."""
        msg = "Unable to decode RLE encoded pixel data with 12 bits allocated"
        with pytest.raises(UnsupportedBitDepth, match=msg):
            decode_rle_frame(rle_frame([b"\x00"]), ImageInfo(1, 1, 12))

    def test_short_header(self):
        """Test an exception is raised for data shorter than the header."""
        msg = "The RLE frame is 10 bytes long, too short for the 64 byte"
        with pytest.raises(InvalidRLEData, match=msg):
            decode_rle_frame(b"\x00" * 10, ImageInfo(1, 1, 8))

    def test_segment_count(self):
        """Test an exception is raised for the wrong number of segments."""
        info = ImageInfo(1, 1, 8, samples_per_pixel=3,
                         photometric_interpretation='RGB')
        msg = r"expected amount \(1 vs. 3 segments\)"
        with pytest.raises(InvalidRLEData, match=msg):
            decode_rle_frame(rle_frame([b"\x00"]), info)

    def test_bad_offsets(self):
        """Test an exception is raised if an offset is inside the header."""
        src = ul(1, 10) + b"\x00" * 56 + b"\x00\x01"
        msg = r"The RLE header has invalid segment offsets: \[10\]"
        with pytest.raises(InvalidRLEData, match=msg):
            decode_rle_frame(src, ImageInfo(1, 1, 8))

    def test_short_segment(self):
        """Test an exception is raised if a segment is too short."""
        msg = r"expected amount \(1 vs. 4 bytes\)"
        with pytest.raises(InvalidRLEData, match=msg):
            decode_rle_frame(rle_frame([b"\x01"]), ImageInfo(2, 2, 8))

    def test_padded_segment(self, sink):
        """Test a warning is issued if a segment has extra data."""
        src = rle_frame([b"\x01\x02\x03\x04\x00"])
        msg = "non-conformant padding - 5 vs. 4 bytes expected"
        with pytest.warns(UserWarning, match=msg):
            frame = decode_rle_frame(src, ImageInfo(2, 2, 8), sink)

        assert [1, 2, 3, 4] == frame.samples.tolist()
        assert [Diagnostic.RLE_PADDING] == sink.codes

# Copyright 2026 dcmpix authors. See LICENSE file for details.
"""Tests for the dcmpix.pixels.native and dcmpix.pixels.imageinfo
modules."""

import numpy as np
import pytest

from dcmpix import dcmread
from dcmpix.errors import (
    InvalidImageInfo, MissingPixelData, TruncatedStream, UnsupportedBitDepth
)
from dcmpix.pixels.imageinfo import DecodedFrame, ImageInfo
from dcmpix.pixels.native import (
    decode_native_frame, interleave_planes, mask_unused_bits, unpack_8bit,
    unpack_10bit, unpack_12bit, unpack_16bit
)

from _builder import elem, image_elements, part10, pixel_data, text


def _pack_10bit(*values):
    """Return 10-bit `values` packed most significant bit first."""
    packed = 0
    for value in values:
        packed = (packed << 10) | value
    nr_bits = 10 * len(values)
    padding = -nr_bits % 8
    return (packed << padding).to_bytes((nr_bits + padding) // 8, 'big')


class TestUnpack:
    """Tests for the unpack_*() functions"""

    def test_8bit(self):
        """Test unpacking 8-bit samples."""
        assert [0, 127, 255] == unpack_8bit(b"\x00\x7F\xFF").tolist()
        arr = unpack_8bit(b"\x00\x7F\xFF", signed=True)
        assert [0, 127, -1] == arr.tolist()

    def test_16bit(self):
        """Test unpacking 16-bit samples in either byte order."""
        assert [0x0201, 0x0403] == unpack_16bit(b"\x01\x02\x03\x04").tolist()
        arr = unpack_16bit(b"\x01\x02\x03\x04", is_little_endian=False)
        assert [0x0102, 0x0304] == arr.tolist()
        assert arr.dtype.isnative

    def test_16bit_signed(self):
        """Test unpacking signed 16-bit samples."""
        arr = unpack_16bit(b"\xFF\xFF\x00\x80", signed=True)
        assert [-1, -32768] == arr.tolist()

    def test_16bit_odd_length(self):
        """Test a trailing odd byte is ignored."""
        assert [0x0201] == unpack_16bit(b"\x01\x02\x03").tolist()

    def test_12bit(self):
        """Test unpacking two 12-bit samples from 3 bytes."""
        arr = unpack_12bit(b"\x12\x34\x56")
        assert np.uint16 == arr.dtype
        assert [0x123, 0x456] == arr.tolist()

    def test_12bit_incomplete(self):
        """Test an incomplete trailing group is ignored."""
        assert [0x123, 0x456] == unpack_12bit(b"\x12\x34\x56\x78").tolist()

    def test_10bit(self):
        """Test unpacking four 10-bit samples from 5 bytes."""
        data = _pack_10bit(1, 2, 1023, 512)
        assert 5 == len(data)
        assert [1, 2, 1023, 512] == unpack_10bit(data).tolist()

    def test_10bit_partial(self):
        """Test the number of samples is floor(bits / 10)."""
        data = _pack_10bit(5, 6, 7)
        assert 4 == len(data)
        assert [5, 6, 7] == unpack_10bit(data).tolist()


class TestMaskUnusedBits:
    """Tests for native.mask_unused_bits()"""

    def test_unsigned(self):
        """Test the bits above bits stored are cleared."""
        info = ImageInfo(1, 2, 16, bits_stored=12)
        arr = np.asarray([0xF123, 0x0FFF], dtype="u2")
        assert [0x123, 0xFFF] == mask_unused_bits(arr, info).tolist()

    def test_signed(self):
        """Test signed samples are sign extended."""
        info = ImageInfo(1, 3, 16, bits_stored=12, pixel_representation=1)
        arr = np.asarray([0x0FFF, 0x07FF, 0xF800], dtype="u2")
        out = mask_unused_bits(arr, info)
        assert np.int16 == out.dtype
        assert [-1, 2047, -2048] == out.tolist()

    def test_unchanged(self):
        """Test the samples are returned as-is if all bits are used."""
        info = ImageInfo(1, 2, 8)
        arr = np.asarray([1, 255], dtype="u1")
        assert mask_unused_bits(arr, info) is arr


def test_interleave_planes():
    """Test planar configuration 1 samples are pixel interleaved."""
    arr = np.asarray([1, 2, 3, 4, 5, 6])
    assert [1, 3, 5, 2, 4, 6] == interleave_planes(arr, 3).tolist()
    assert interleave_planes(arr, 1) is arr


class TestDecodeNativeFrame:
    """Tests for native.decode_native_frame()"""

    def test_8bit_frames(self):
        """Test each frame of multi-frame 8-bit data."""
        info = ImageInfo(2, 2, 8, number_of_frames=2)
        data = bytes(range(8))
        frame = decode_native_frame(data, 1, info)
        assert [4, 5, 6, 7] == frame.samples.tolist()
        assert [[4, 5], [6, 7]] == frame.as_array().tolist()

    def test_16bit_big_endian(self):
        """Test big endian 16-bit samples."""
        info = ImageInfo(1, 2, 16)
        frame = decode_native_frame(b"\x01\x02\x03\x04", 0, info, False)
        assert [0x0102, 0x0304] == frame.samples.tolist()

    def test_12bit_frames(self):
        """Test 12-bit frames that share a byte."""
        info = ImageInfo(1, 3, 12, number_of_frames=2)
        data = b"\x00\x10\x02\x00\x30\x04\x00\x50\x06"
        assert [1, 2, 3] == decode_native_frame(data, 0, info).samples.tolist()
        assert [4, 5, 6] == decode_native_frame(data, 1, info).samples.tolist()

    def test_10bit(self):
        """Test 10-bit samples."""
        info = ImageInfo(1, 3, 10, number_of_frames=2)
        data = _pack_10bit(1, 2, 3, 4, 5, 6)
        assert [4, 5, 6] == decode_native_frame(data, 1, info).samples.tolist()

    def test_planar_configuration(self):
        """Test planar configuration 1 RGB samples are interleaved."""
        info = ImageInfo(1, 2, 8, samples_per_pixel=3,
                         photometric_interpretation='RGB',
                         planar_configuration=1)
        frame = decode_native_frame(b"\x01\x02\x03\x04\x05\x06", 0, info)
        assert [1, 3, 5, 2, 4, 6] == frame.samples.tolist()
        assert 3 == frame.samples_per_pixel
        assert (1, 2, 3) == frame.as_array().shape

    def test_bad_index(self):
        """Test an exception is raised for a missing frame."""
        info = ImageInfo(2, 2, 8)
        msg = r"There is no frame 1, the pixel data has 1 frame\(s\)"
        with pytest.raises(MissingPixelData, match=msg):
            decode_native_frame(bytes(4), 1, info)

    def test_truncated(self):
        """Test an exception is raised if the data is too short."""
        info = ImageInfo(2, 2, 16)
        msg = "The pixel data is 6 bytes long but 8 bytes are needed"
        with pytest.raises(TruncatedStream, match=msg):
            decode_native_frame(bytes(6), 0, info)

    def test_unsupported_bits(self):
        """Test an exception is raised for 32 bits allocated."""
        msg = "with a 'Bits Allocated' value of 32"
        with pytest.raises(UnsupportedBitDepth, match=msg):
            decode_native_frame(bytes(16), 0, ImageInfo(2, 2, 32))


class TestImageInfo:
    """Tests for imageinfo.ImageInfo"""

    def test_defaults(self):
        """Test the dependent default values."""
        info = ImageInfo(2, 3, 16)
        assert 16 == info.bits_stored
        assert 15 == info.high_bit
        assert 1 == info.samples_per_pixel
        assert "MONOCHROME2" == info.photometric_interpretation
        assert 2 == info.bytes_per_sample
        assert np.dtype("u2") == info.dtype
        assert 96 == info.frame_length
        assert 6 == info.pixels_per_frame

    def test_signed_dtype(self):
        """Test the dtype of signed samples."""
        info = ImageInfo(1, 1, 8, pixel_representation=1)
        assert info.is_signed
        assert np.dtype("i1") == info.dtype

    @pytest.mark.parametrize(
        "kwargs, msg",
        [
            ({"rows": 0}, "The image size is invalid"),
            ({"bits_stored": 17}, r"'Bits Stored' \(17\) must be greater"),
            ({"pixel_representation": 2}, "must be 0 or 1, not 2"),
            ({"number_of_frames": 0}, "must be at least 1, not 0"),
        ],
    )
    def test_invalid(self, kwargs, msg):
        """Test invalid values raise an exception."""
        values = {"rows": 2, "columns": 2, "bits_allocated": 16}
        values.update(kwargs)
        with pytest.raises(InvalidImageInfo, match=msg):
            ImageInfo(**values)

    def test_from_dataset(self):
        """Test creating from the Image Pixel elements."""
        data = image_elements(
            3, 4, 16, bits_stored=12, pixel_representation=1,
            number_of_frames=2, photometric='monochrome1',
        )
        ds = dcmread(part10(data + pixel_data(bytes(48))))
        info = ImageInfo.from_dataset(ds)
        assert (3, 4) == (info.rows, info.columns)
        assert 16 == info.bits_allocated
        assert 12 == info.bits_stored
        assert 11 == info.high_bit
        assert info.is_signed
        assert 2 == info.number_of_frames
        assert "MONOCHROME1" == info.photometric_interpretation

    def test_zero_frames(self):
        """Test a 'Number of Frames' of 0 is treated as 1."""
        data = image_elements(2, 2, 8, number_of_frames=0)
        ds = dcmread(part10(data))
        assert 1 == ImageInfo.from_dataset(ds).number_of_frames

    def test_missing_required(self):
        """Test an exception is raised if 'Rows' is missing."""
        ds = dcmread(part10(elem(0x00280011, 'US', b"\x02\x00")))
        msg = "The data set is missing the required 'Rows' element"
        with pytest.raises(InvalidImageInfo, match=msg):
            ImageInfo.from_dataset(ds)

    def test_invalid_value(self):
        """Test an exception is raised for a non-numeric value."""
        # An explicit VR of CS keeps the value as text
        data = image_elements(2, 2, 8) + elem(0x00280008, 'CS', text("A"))
        ds = dcmread(part10(data))
        msg = "'NumberOfFrames' has an invalid value"
        with pytest.raises(InvalidImageInfo, match=msg):
            ImageInfo.from_dataset(ds)


class TestDecodedFrame:
    """Tests for imageinfo.DecodedFrame"""

    def test_monochrome(self):
        """Test a single sample per pixel frame."""
        frame = DecodedFrame(3, 2, np.arange(6))
        assert 1 == frame.samples_per_pixel
        assert (2, 3) == frame.as_array().shape
        assert frame.photometric_interpretation is None

    def test_color(self):
        """Test a three samples per pixel frame."""
        frame = DecodedFrame(2, 2, np.arange(12), 'RGB')
        assert 3 == frame.samples_per_pixel
        assert [3, 4, 5] == frame.as_array()[0, 1].tolist()

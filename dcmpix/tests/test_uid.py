# Copyright 2026 dcmpix authors. See LICENSE file for details.
"""Tests for the dcmpix.uid module."""

import pytest

from dcmpix.diagnostics import CollectingSink, Diagnostic
from dcmpix.uid import (
    UID, DeflatedExplicitVRLittleEndian, ExplicitVRBigEndian,
    ExplicitVRLittleEndian, ImplicitVRLittleEndian, JPEG2000,
    JPEGBaseline8Bit, RLELossless, TRANSFER_SYNTAXES, get_transfer_syntax
)


class TestUID:
    """Test DICOM UIDs"""

    def test_padding(self):
        """Test trailing NUL padding and spaces are removed."""
        assert "1.2.840.10008.1.2.1" == UID("1.2.840.10008.1.2.1\x00")
        assert "1.2.3" == UID(" 1.2.3 ")

    def test_bad_type(self):
        """Test a non-str raises an exception."""
        with pytest.raises(TypeError, match="from a string"):
            UID(b"1.2.3")

    def test_transfer_syntax_properties(self):
        """Test the properties of transfer syntax UIDs."""
        assert ImplicitVRLittleEndian.is_implicit_VR
        assert ImplicitVRLittleEndian.is_little_endian
        assert not ExplicitVRBigEndian.is_little_endian
        assert not ExplicitVRLittleEndian.is_encapsulated
        assert JPEGBaseline8Bit.is_encapsulated
        assert DeflatedExplicitVRLittleEndian.is_deflated
        assert not RLELossless.is_deflated

    def test_not_transfer_syntax(self):
        """Test the properties raise for other UIDs."""
        uid = UID("1.2.840.10008.5.1.4.1.1.7")
        assert not uid.is_transfer_syntax
        with pytest.raises(ValueError, match="UID is not a transfer syntax"):
            uid.is_little_endian

    def test_name(self):
        """Test UID.name."""
        assert "JPEG Baseline (Process 1)" == JPEGBaseline8Bit.name
        assert "1.2.3.4" == UID("1.2.3.4").name

    def test_private(self):
        """Test UID.is_private."""
        assert not RLELossless.is_private
        assert UID("1.2.3.4").is_private


class TestTransferSyntax:
    """Tests for the TransferSyntax encodings"""

    def test_flags(self):
        """Test the encoding flags."""
        ts = TRANSFER_SYNTAXES[ExplicitVRBigEndian]
        assert not ts.is_little_endian
        assert ts.is_explicit_VR
        assert not ts.is_implicit_VR
        assert not ts.is_encapsulated

    def test_compression(self):
        """Test the compression properties."""
        assert TRANSFER_SYNTAXES[RLELossless].is_rle
        assert TRANSFER_SYNTAXES[JPEGBaseline8Bit].is_jpeg_baseline
        assert TRANSFER_SYNTAXES[JPEG2000].is_jpeg2000
        assert not TRANSFER_SYNTAXES[JPEG2000].is_rle

    def test_all_known(self):
        """Test the uncompressed syntaxes aren't encapsulated."""
        native = [ts for ts in TRANSFER_SYNTAXES.values()
                  if not ts.is_encapsulated]
        assert 4 == len(native)


class TestGetTransferSyntax:
    """Tests for uid.get_transfer_syntax()"""

    def test_known(self, sink):
        """Test a known transfer syntax, including NUL padding."""
        ts = get_transfer_syntax("1.2.840.10008.1.2\x00", sink)
        assert ImplicitVRLittleEndian == ts.uid
        assert [] == sink.codes

    def test_unknown(self, sink):
        """Test an unknown UID is reported and explicit VR LE used."""
        ts = get_transfer_syntax("1.2.3.4", sink)
        assert ExplicitVRLittleEndian == ts.uid
        assert [Diagnostic.UNKNOWN_TRANSFER_SYNTAX] == sink.codes
        assert "'1.2.3.4'" in sink.events[0].message

    def test_missing(self, sink):
        """Test a missing UID is reported."""
        ts = get_transfer_syntax(None, sink)
        assert ExplicitVRLittleEndian == ts.uid
        assert [Diagnostic.UNKNOWN_TRANSFER_SYNTAX] == sink.codes

    def test_empty_sink_used(self):
        """Test events go to an empty collecting sink."""
        sink = CollectingSink()
        get_transfer_syntax("1.2.3.4", sink)
        assert [Diagnostic.UNKNOWN_TRANSFER_SYNTAX] == sink.codes

    def test_bytes(self, sink):
        """Test an undecoded value is read as ISO 8859-1."""
        ts = get_transfer_syntax(b"1.2.840.10008.1.2\x00", sink)
        assert ImplicitVRLittleEndian == ts.uid
        assert [] == sink.codes

        ts = get_transfer_syntax(b"1.2.3.\xE9", sink)
        assert ExplicitVRLittleEndian == ts.uid
        assert [Diagnostic.UNKNOWN_TRANSFER_SYNTAX] == sink.codes

    def test_multiple_values(self, sink):
        """Test only the first of multiple values is used."""
        ts = get_transfer_syntax(("1.2.840.10008.1.2", "1.2.3"), sink)
        assert ImplicitVRLittleEndian == ts.uid
        assert [] == sink.codes

        ts = get_transfer_syntax((), sink)
        assert ExplicitVRLittleEndian == ts.uid
        assert [Diagnostic.UNKNOWN_TRANSFER_SYNTAX] == sink.codes

    @pytest.mark.parametrize("value", [12, 1.5, [None]])
    def test_other_types(self, value, sink):
        """Test values that can't be a UID are treated as unknown."""
        ts = get_transfer_syntax(value, sink)
        assert ExplicitVRLittleEndian == ts.uid
        assert [Diagnostic.UNKNOWN_TRANSFER_SYNTAX] == sink.codes

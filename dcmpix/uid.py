# Copyright 2026 dcmpix authors. See LICENSE file for details.
"""Transfer syntax UIDs and the properties of their encodings"""

from typing import Any, Dict, NamedTuple, Optional, Type, TypeVar

from dcmpix.diagnostics import (
    Diagnostic, DiagnosticEvent, DiagnosticSink, default_sink
)


_UID = TypeVar("_UID", bound="UID")


class UID(str):
    """Human friendly UIDs as a Python :class:`str` subclass.

    Examples
    --------

    >>> from dcmpix.uid import UID
    >>> uid = UID('1.2.840.10008.1.2.4.50')
    >>> uid.is_implicit_VR
    False
    >>> uid.is_little_endian
    True
    >>> uid.name
    'JPEG Baseline (Process 1)'
    """
    def __new__(cls: Type[_UID], val: str) -> _UID:
        if isinstance(val, str):
            # UI values are padded with a trailing NUL to even length
            return super().__new__(cls, val.strip().rstrip('\x00'))

        raise TypeError("A UID must be created from a string")

    @property
    def is_transfer_syntax(self) -> bool:
        """Return ``True`` if a known transfer syntax UID."""
        return str(self) in TRANSFER_SYNTAXES

    def _syntax(self) -> "TransferSyntax":
        if self.is_transfer_syntax:
            return TRANSFER_SYNTAXES[self]

        raise ValueError('UID is not a transfer syntax.')

    @property
    def is_implicit_VR(self) -> bool:
        """Return ``True`` if an implicit VR transfer syntax UID."""
        return not self._syntax().is_explicit_VR

    @property
    def is_little_endian(self) -> bool:
        """Return ``True`` if a little endian transfer syntax UID."""
        return self._syntax().is_little_endian

    @property
    def is_encapsulated(self) -> bool:
        """Return ``True`` if an encapsulated transfer syntax UID."""
        return self._syntax().is_encapsulated

    @property
    def is_deflated(self) -> bool:
        """Return ``True`` if a deflated transfer syntax UID."""
        return self._syntax().is_deflated

    @property
    def name(self) -> str:
        """Return the transfer syntax name, or the UID itself if unknown."""
        if self.is_transfer_syntax:
            return TRANSFER_SYNTAXES[self].name

        return str(self)

    @property
    def is_private(self) -> bool:
        """Return ``True`` if the UID isn't an officially registered DICOM
        UID.
        """
        return self[:14] != '1.2.840.10008.'


# Pre-defined Transfer Syntax UIDs (for convenience)
ImplicitVRLittleEndian = UID('1.2.840.10008.1.2')
"""1.2.840.10008.1.2"""
ExplicitVRLittleEndian = UID('1.2.840.10008.1.2.1')
"""1.2.840.10008.1.2.1"""
DeflatedExplicitVRLittleEndian = UID('1.2.840.10008.1.2.1.99')
"""1.2.840.10008.1.2.1.99"""
ExplicitVRBigEndian = UID('1.2.840.10008.1.2.2')
"""1.2.840.10008.1.2.2"""
JPEGBaseline8Bit = UID('1.2.840.10008.1.2.4.50')
"""1.2.840.10008.1.2.4.50"""
JPEGExtended12Bit = UID('1.2.840.10008.1.2.4.51')
"""1.2.840.10008.1.2.4.51"""
JPEGLosslessP14 = UID('1.2.840.10008.1.2.4.57')
"""1.2.840.10008.1.2.4.57"""
JPEGLosslessSV1 = UID('1.2.840.10008.1.2.4.70')
"""1.2.840.10008.1.2.4.70"""
JPEGLSLossless = UID('1.2.840.10008.1.2.4.80')
"""1.2.840.10008.1.2.4.80"""
JPEGLSNearLossless = UID('1.2.840.10008.1.2.4.81')
"""1.2.840.10008.1.2.4.81"""
JPEG2000Lossless = UID('1.2.840.10008.1.2.4.90')
"""1.2.840.10008.1.2.4.90"""
JPEG2000 = UID('1.2.840.10008.1.2.4.91')
"""1.2.840.10008.1.2.4.91"""
JPEG2000MCLossless = UID('1.2.840.10008.1.2.4.92')
"""1.2.840.10008.1.2.4.92"""
JPEG2000MC = UID('1.2.840.10008.1.2.4.93')
"""1.2.840.10008.1.2.4.93"""
RLELossless = UID('1.2.840.10008.1.2.5')
"""1.2.840.10008.1.2.5"""


class TransferSyntax(NamedTuple):
    """The encoding rules a transfer syntax UID stands for."""
    uid: UID
    name: str
    is_little_endian: bool
    is_explicit_VR: bool
    is_encapsulated: bool
    is_deflated: bool = False

    @property
    def is_implicit_VR(self) -> bool:
        return not self.is_explicit_VR

    @property
    def is_jpeg_baseline(self) -> bool:
        return self.uid == JPEGBaseline8Bit

    @property
    def is_rle(self) -> bool:
        return self.uid == RLELossless

    @property
    def is_jpeg2000(self) -> bool:
        return self.uid in JPEG2000TransferSyntaxes


def _ts(
    uid: UID, name: str, little: bool = True, explicit: bool = True,
    encapsulated: bool = True, deflated: bool = False
) -> TransferSyntax:
    return TransferSyntax(uid, name, little, explicit, encapsulated, deflated)


TRANSFER_SYNTAXES: Dict[str, TransferSyntax] = {
    ts.uid: ts for ts in (
        _ts(
            ImplicitVRLittleEndian, "Implicit VR Little Endian",
            explicit=False, encapsulated=False
        ),
        _ts(
            ExplicitVRLittleEndian, "Explicit VR Little Endian",
            encapsulated=False
        ),
        _ts(
            DeflatedExplicitVRLittleEndian,
            "Deflated Explicit VR Little Endian",
            encapsulated=False, deflated=True
        ),
        _ts(
            ExplicitVRBigEndian, "Explicit VR Big Endian",
            little=False, encapsulated=False
        ),
        _ts(JPEGBaseline8Bit, "JPEG Baseline (Process 1)"),
        _ts(JPEGExtended12Bit, "JPEG Extended (Process 2 and 4)"),
        _ts(
            JPEGLosslessP14,
            "JPEG Lossless, Non-Hierarchical (Process 14)"
        ),
        _ts(
            JPEGLosslessSV1,
            "JPEG Lossless, Non-Hierarchical, First-Order Prediction "
            "(Process 14 [Selection Value 1])"
        ),
        _ts(JPEGLSLossless, "JPEG-LS Lossless Image Compression"),
        _ts(
            JPEGLSNearLossless,
            "JPEG-LS Lossy (Near-Lossless) Image Compression"
        ),
        _ts(JPEG2000Lossless, "JPEG 2000 Image Compression (Lossless Only)"),
        _ts(JPEG2000, "JPEG 2000 Image Compression"),
        _ts(
            JPEG2000MCLossless,
            "JPEG 2000 Part 2 Multi-component Image Compression "
            "(Lossless Only)"
        ),
        _ts(
            JPEG2000MC,
            "JPEG 2000 Part 2 Multi-component Image Compression"
        ),
        _ts(RLELossless, "RLE Lossless"),
    )
}
"""The transfer syntaxes that can be parsed, keyed by UID."""

JPEG2000TransferSyntaxes = [
    JPEG2000Lossless, JPEG2000, JPEG2000MCLossless, JPEG2000MC
]
"""JPEG 2000 (ISO/IEC 15444-1) transfer syntaxes."""


def _uid_text(value: Any) -> Optional[str]:
    """Return the text of a decoded (0002,0010) value, or ``None`` if it
    can't be a UID."""
    if isinstance(value, (tuple, list)):
        value = value[0] if value else None

    # Elements with an unknown VR are left undecoded
    if isinstance(value, (bytes, bytearray)):
        value = bytes(value).decode('latin-1')

    return value if isinstance(value, str) else None


def get_transfer_syntax(
    uid: Any, sink: Optional[DiagnosticSink] = None
) -> TransferSyntax:
    """Return the :class:`TransferSyntax` for `uid`.

    Parameters
    ----------
    uid : str, bytes, tuple or None
        The (0002,0010) *Transfer Syntax UID* value. Undecoded ``bytes``
        are read as ISO 8859-1 and only the first of multiple values is
        used; any other type is treated as unknown.
    sink : callable, optional
        Receives a :attr:`~dcmpix.diagnostics.Diagnostic.UNKNOWN_TRANSFER_SYNTAX`
        event if `uid` isn't recognized.

    Returns
    -------
    TransferSyntax
        The matching transfer syntax. An unknown or missing `uid` gives
        *Explicit VR Little Endian*, uncompressed.
    """
    text = _uid_text(uid)
    if text is not None:
        uid = UID(text)
        if uid in TRANSFER_SYNTAXES:
            return TRANSFER_SYNTAXES[uid]

    sink = default_sink(sink)
    sink(DiagnosticEvent(
        Diagnostic.UNKNOWN_TRANSFER_SYNTAX,
        f"Unknown transfer syntax '{uid}', assuming "
        "'Explicit VR Little Endian'",
    ))

    return TRANSFER_SYNTAXES[ExplicitVRLittleEndian]

# Copyright 2026 dcmpix authors. See LICENSE file for details.
"""Module for dcmpix exception classes

Errors fall into three families:

* :class:`StructuralError` - the byte stream cannot be parsed further. The
  current data set is aborted and the error propagates to the caller.
* :class:`FrameDecodeError` - a single frame of pixel data cannot be
  decoded. Only that frame's decode call fails.
* :class:`InvalidImageInfo` - the image description elements are
  inconsistent.
"""


class InvalidDicomError(Exception):
    """Exception that is raised when the the buffer does not appear to be
    DICOM.

    Usually raised when the "DICM" prefix is not present at position 128 in
    the buffer.

    To force reading the buffer (because maybe it is a DICOM data set without
    a header), use ``dcmread(..., force=True)``.
    """

    def __init__(self, *args):
        if not args:
            args = ('The specified buffer is not a valid DICOM file.', )
        Exception.__init__(self, *args)


class DicomError(Exception):
    """Base class for parse and decode errors."""


class StructuralError(DicomError):
    """The data set's tag-length-value structure is broken."""


class OutOfBounds(StructuralError, IndexError):
    """A read or seek went past the end of the buffer."""


class TruncatedStream(StructuralError, EOFError):
    """A declared length runs past the end of the available bytes."""


class MalformedSequence(StructuralError):
    """An item or delimiter appeared where it is not allowed."""


class DuplicateTag(StructuralError):
    """A tag appeared twice in the same data set."""


class FrameDecodeError(DicomError):
    """A frame of pixel data could not be decoded."""


class UnsupportedBitDepth(FrameDecodeError):
    """The (0028,0100) *Bits Allocated* value is not supported."""


class UnsupportedEncoding(FrameDecodeError, NotImplementedError):
    """The pixel data is compressed with a method that can't be decoded."""


class InvalidHuffmanCode(FrameDecodeError):
    """No Huffman code matched within 16 bits of the JPEG entropy data."""


class InvalidRLEData(FrameDecodeError):
    """The RLE header or a segment is inconsistent with the image."""


class MissingPixelData(FrameDecodeError):
    """The data set has no (7FE0,0010) *Pixel Data* element, or the
    requested frame doesn't exist."""


class MissingPaletteLUT(FrameDecodeError):
    """A *PALETTE COLOR* image has no usable palette descriptors or data."""


class InvalidImageInfo(DicomError, ValueError):
    """The *Image Pixel* module elements are missing or inconsistent."""

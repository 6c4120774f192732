# Copyright 2026 dcmpix authors. See LICENSE file for details.
"""Hold the ByteCursor class, which does basic bounds-checked reads of an
in-memory DICOM buffer."""

from struct import Struct
from typing import Tuple, Union

from dcmpix.errors import OutOfBounds


Buffer = Union[bytes, bytearray, memoryview]

_UINT16 = {True: Struct("<H"), False: Struct(">H")}
_UINT32 = {True: Struct("<L"), False: Struct(">L")}
_TAG = {True: Struct("<HH"), False: Struct(">HH")}


class ByteCursor:
    """A read position over a fixed, immutable byte buffer.

    Every read is bounds-checked and raises
    :class:`~dcmpix.errors.OutOfBounds` instead of returning short data.

    Parameters
    ----------
    buffer : bytes, bytearray or memoryview
        The data to read. :class:`bytes` and :class:`bytearray` are wrapped,
        not copied.
    """

    def __init__(self, buffer: Buffer) -> None:
        if isinstance(buffer, memoryview):
            buffer = buffer.tobytes()

        self._data = buffer
        self._view = memoryview(buffer)
        self._pos = 0

    def __len__(self) -> int:
        return len(self._view)

    def _require(self, nr_bytes: int) -> int:
        """Check that `nr_bytes` can be read and return the current offset."""
        if nr_bytes < 0:
            raise ValueError("Can't read a negative number of bytes")

        start = self._pos
        if start + nr_bytes > len(self._view):
            raise OutOfBounds(
                f"Unable to read {nr_bytes} bytes at offset 0x{start:x}, "
                f"only {len(self._view) - start} bytes remain"
            )

        self._pos = start + nr_bytes
        return start

    def read_u8(self) -> int:
        """Return the next byte as an unsigned int."""
        return self._view[self._require(1)]

    def read_u16(self, little: bool = True) -> int:
        """Return an unsigned short in the given byte order."""
        return _UINT16[little].unpack_from(self._view, self._require(2))[0]

    def read_u32(self, little: bool = True) -> int:
        """Return an unsigned long in the given byte order."""
        return _UINT32[little].unpack_from(self._view, self._require(4))[0]

    def read_tag(self, little: bool = True) -> Tuple[int, int]:
        """Return the (group, element) pair of the next tag."""
        return _TAG[little].unpack_from(self._view, self._require(4))

    def read_bytes(self, length: int) -> bytes:
        """Return the next `length` bytes."""
        start = self._require(length)
        return self._view[start:start + length].tobytes()

    def read_fixed_text(self, length: int) -> str:
        """Return the next `length` bytes as latin-1 text with any trailing
        NUL padding removed."""
        return self.read_bytes(length).rstrip(b"\x00").decode("latin-1")

    def seek(self, offset: int) -> None:
        """Move the cursor to absolute `offset`."""
        if not 0 <= offset <= len(self._view):
            raise OutOfBounds(
                f"Unable to seek to offset 0x{offset:x} in a buffer of "
                f"{len(self._view)} bytes"
            )
        self._pos = offset

    def skip(self, length: int) -> None:
        """Move the cursor forward by `length` bytes."""
        self._require(length)

    def position(self) -> int:
        """Return the current offset."""
        return self._pos

    def length(self) -> int:
        """Return the total size of the buffer."""
        return len(self._view)

    def remaining(self) -> int:
        """Return the number of bytes after the current offset."""
        return len(self._view) - self._pos

    def find(self, needle: bytes, start: int) -> int:
        """Return the offset of the first `needle` at or after `start`, or
        ``-1`` if not found. The cursor is not moved."""
        return self._data.find(needle, start)

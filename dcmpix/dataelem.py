# Copyright 2026 dcmpix authors. See LICENSE file for details.
"""Define the DataElement class.

A DataElement has a tag,
              a value representation (VR),
              a declared length,
              a value kind,
              and a value.
"""
from enum import Enum
from typing import Any, List, NamedTuple, Optional, Tuple, Union

from dcmpix.datadict import (
    dictionary_has_tag, dictionary_description, dictionary_keyword
)
from dcmpix.tag import Tag, BaseTag


UNDEFINED_LENGTH = 0xFFFFFFFF


class ValueKind(str, Enum):
    """The closed set of value types an element may hold."""

    EMPTY = "EMPTY"
    BYTES = "BYTES"
    TEXT = "TEXT"
    SIGNED = "SIGNED"
    UNSIGNED = "UNSIGNED"
    FLOAT = "FLOAT"
    SEQUENCE = "SEQUENCE"
    FRAGMENTS = "FRAGMENTS"


class FragmentList(NamedTuple):
    """The items of an encapsulated (7FE0,0010) *Pixel Data* element.

    Attributes
    ----------
    offset_table : bytes
        The value of the first item, the Basic Offset Table. May be empty.
    fragments : list of bytes
        The remaining items, in stream order.
    """
    offset_table: bytes
    fragments: List[bytes]

    def __len__(self) -> int:
        return len(self.fragments)


class DataElement:
    """Contain a parsed DICOM Element.

    Elements are created by :class:`~dcmpix.filereader.DataSetParser` and are
    not changed after parsing.

    Attributes
    ----------
    descripWidth : int
        For string display, this is the maximum width of the description
        field (default ``35``).
    is_undefined_length : bool
        Indicates whether the length field for the element was ``0xFFFFFFFF``
        (ie undefined).
    kind : ValueKind
        The type of :attr:`value`.
    length : int
        The length declared in the encoded element.
    maxBytesToDisplay : int
        For string display, elements with values containing data which is
        longer than this value will display ``"Array of # bytes"``
        (default ``16``).
    tag : dcmpix.tag.BaseTag
        The element's tag.
    value
        ``None`` for :attr:`ValueKind.EMPTY`, otherwise :class:`bytes`,
        :class:`str`, :class:`int`, :class:`float`, a :class:`tuple` of
        these for multi-valued elements, a :class:`list` of
        :class:`~dcmpix.dataset.Dataset` for **SQ** or a
        :class:`FragmentList` for encapsulated pixel data.
    value_tell : int or None
        The byte offset to the start of the encoded element value.
    VR : str
        The element's Value Representation.
    """

    descripWidth = 35
    maxBytesToDisplay = 16

    def __init__(
        self,
        tag: Union[int, str, Tuple[int, int]],
        VR: str,
        value: Any,
        kind: ValueKind,
        length: Optional[int] = None,
        value_tell: Optional[int] = None,
    ) -> None:
        if not isinstance(tag, BaseTag):
            tag = Tag(tag)
        self.tag = tag
        self.VR = VR
        self.value = value
        self.kind = kind
        self.length = length if length is not None else _value_length(value)
        self.value_tell = value_tell

    @property
    def is_undefined_length(self) -> bool:
        return self.length == UNDEFINED_LENGTH

    @property
    def is_empty(self) -> bool:
        """Return ``True`` if the element has no value."""
        return self.kind == ValueKind.EMPTY

    @property
    def VM(self) -> int:
        """Return the value multiplicity of the element as :class:`int`."""
        if self.value is None:
            return 0

        if isinstance(self.value, tuple):
            return len(self.value)

        return 1

    @property
    def name(self) -> str:
        """Return the DICOM dictionary name for the element as :class:`str`.
        """
        if dictionary_has_tag(self.tag):
            return dictionary_description(self.tag)

        if self.tag.is_group_length:
            return "Group Length"

        if self.tag.is_private_creator:
            return "Private Creator"

        if self.tag.is_private:
            return "Private tag data"

        return ""

    @property
    def keyword(self) -> str:
        """Return the element's keyword (if known) as :class:`str`."""
        if dictionary_has_tag(self.tag):
            return dictionary_keyword(self.tag)

        return ''

    @property
    def repval(self) -> str:
        """Return a :class:`str` representation of the element's value."""
        if self.kind == ValueKind.SEQUENCE:
            return f"<Sequence, length {len(self.value)}>"

        if self.kind == ValueKind.FRAGMENTS:
            return f"<Encapsulated, {len(self.value)} fragment(s)>"

        if self.kind == ValueKind.BYTES:
            if len(self.value) > self.maxBytesToDisplay:
                return f"Array of {len(self.value)} bytes"

            return repr(self.value)

        if self.VM > self.maxBytesToDisplay:
            return f"Array of {self.VM} elements"

        if isinstance(self.value, tuple):
            return repr(list(self.value))

        return repr(self.value) if self.value is not None else ''

    def __str__(self) -> str:
        """Return :class:`str` representation of the element."""
        return (
            f"({self.tag}) {self.name[:self.descripWidth]:<{self.descripWidth}}"
            f" {self.VR}: {self.repval}"
        )

    def __repr__(self) -> str:
        return str(self)

    def __eq__(self, other: Any) -> bool:
        if not isinstance(other, DataElement):
            return NotImplemented

        return (
            self.tag == other.tag
            and self.VR == other.VR
            and self.kind == other.kind
            and self.value == other.value
        )

    __hash__ = None  # type: ignore


def _value_length(value: Any) -> int:
    if isinstance(value, (bytes, str)):
        return len(value)

    return 0


# The first and third values of the following elements are always US
#   even if the VR is SS (PS3.3 C.7.6.3.1.5, C.11.1, C.11.2).
# (0028,1101-1103) RGB Palette Color LUT Descriptor
# (0028,3002) LUT Descriptor
_LUT_DESCRIPTOR_TAGS = (0x00281101, 0x00281102, 0x00281103, 0x00283002)

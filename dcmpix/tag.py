# Copyright 2026 dcmpix authors. See LICENSE file for details.
"""DICOM (group, element) tags.

A tag is kept as a single 32-bit :class:`int` with the group number in the
upper 16 bits and the element number in the lower 16 bits.
"""
from typing import Tuple, Any, Union, TypeVar, Optional


T = TypeVar("T", int, str)

_MAX_TAG = 0xFFFFFFFF


def _check_range(value: int) -> int:
    if value > _MAX_TAG:
        raise OverflowError(
            f"Tags are limited to 32-bit length; tag {value!r}"
        )
    if value < 0:
        raise ValueError("Tags must be positive.")

    return value


def _from_pair(pair: Tuple[Any, ...]) -> int:
    """Return the combined value of a (group, element) pair of ints or hex
    strings."""
    if len(pair) != 2:
        raise ValueError("Tag must be created using an int or 2-tuple")

    group, element = pair
    if type(group) is not type(element) or not isinstance(group, (int, str)):
        raise ValueError(
            "Both arguments for Tag must be the same type, either "
            "string or int."
        )

    if isinstance(group, str):
        group, element = int(group, 16), int(element, 16)

    if not (0 <= group <= 0xFFFF and 0 <= element <= 0xFFFF):
        raise OverflowError(
            "Groups and elements of tags must each be <=2 byte integers"
        )

    return group << 16 | element


def _from_str(value: str) -> int:
    """Return the value of a hex string or a DICOM keyword."""
    if ',' in value:
        return _from_pair(tuple(s.strip() for s in value.split(',')))

    try:
        return _check_range(int(value, 16))
    except ValueError:
        pass

    from dcmpix.datadict import tag_for_keyword

    tag = tag_for_keyword(value)
    if tag is None:
        raise ValueError(f"'{value}' is not a valid int or DICOM keyword")

    return tag


def Tag(arg: Union[T, Tuple[T, T]], arg2: Optional[T] = None) -> "BaseTag":
    """Create a :class:`BaseTag`.

    Accepts any of

    * ``Tag(0x00280010)`` or ``Tag(0x0028, 0x0010)``
    * ``Tag('0x00280010')``, ``Tag('00280010')`` or ``Tag('0028,0010')``
    * ``Tag((0x28, 0x10))`` or ``Tag(('0x28', '0x10'))``
    * ``Tag("Rows")``

    Parameters
    ----------
    arg : int or str or 2-tuple
        The combined tag value, a hex string, a DICOM keyword, a
        (group, element) pair or, when `arg2` is used, the group number.
    arg2 : int or str, optional
        The element number when `arg` is the group number.

    Returns
    -------
    BaseTag
    """
    if isinstance(arg, BaseTag):
        return arg

    if arg2 is not None:
        return BaseTag(_from_pair((arg, arg2)))

    if isinstance(arg, (tuple, list)):
        return BaseTag(_from_pair(tuple(arg)))

    if isinstance(arg, str):
        return BaseTag(_from_str(arg))

    return BaseTag(_check_range(arg))


class BaseTag(int):
    """A DICOM element (group, element) tag stored as an :class:`int`.

    Compares equal to anything :func:`Tag` would convert to the same value.
    """
    def __eq__(self, other: Any) -> bool:
        if not isinstance(other, int):
            try:
                other = Tag(other)
            except (ValueError, OverflowError, TypeError):
                return False

        return int(self) == int(other)

    def __ne__(self, other: Any) -> bool:
        return not self == other

    __hash__ = int.__hash__

    def __str__(self) -> str:
        return f"{self.group:04X},{self.element:04X}"

    def __repr__(self) -> str:
        return f"({self})"

    @property
    def group(self) -> int:
        return self >> 16

    @property
    def element(self) -> int:
        return self & 0xFFFF

    @property
    def is_private(self) -> bool:
        """Return ``True`` if the tag has an odd group number."""
        return self.group % 2 == 1

    @property
    def is_private_creator(self) -> bool:
        """Return ``True`` for private tags that reserve a block of
        elements, (gggg,0010) to (gggg,00FF)."""
        return self.is_private and 0x0010 <= self.element <= 0x00FF

    @property
    def is_group_length(self) -> bool:
        return self.element == 0

    @property
    def is_delimiter(self) -> bool:
        """Return ``True`` for the group FFFE item and delimitation tags,
        which are encoded without a VR."""
        return self.group == 0xFFFE


def TupleTag(group_elem: Tuple[int, int]) -> BaseTag:
    """Return a :class:`BaseTag` from a (group, element) pair that is known
    to be in range."""
    return BaseTag(group_elem[0] << 16 | group_elem[1])


# Part 5, Section 7.5
ItemTag = TupleTag((0xFFFE, 0xE000))
ItemDelimiterTag = TupleTag((0xFFFE, 0xE00D))
SequenceDelimiterTag = TupleTag((0xFFFE, 0xE0DD))

PixelDataTag = TupleTag((0x7FE0, 0x0010))

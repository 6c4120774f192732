# Copyright 2026 dcmpix authors. See LICENSE file for details.
"""Functions for converting values of DICOM
   data elements to proper python types
"""

import re
from struct import unpack, calcsize
from typing import Any, Callable, Dict, Optional, Tuple, Union

from dcmpix.dataelem import ValueKind, _LUT_DESCRIPTOR_TAGS
from dcmpix.tag import TupleTag


_CONTROL_CHARS = re.compile('[\x00-\x08\x0E-\x1F]')


def convert_numbers(
    byte_string: bytes, is_little_endian: bool, struct_format: str
) -> Union[int, float, Tuple[Union[int, float], ...]]:
    """Return a decoded numerical VR value.

    Given an encoded DICOM Element value, use `struct_format` and the
    endianness of the data to decode it.

    Parameters
    ----------
    byte_string : bytes
        The encoded numerical VR element value.
    is_little_endian : bool
        ``True`` if the value is encoded as little endian, ``False`` otherwise.
    struct_format : str
        The format of the numerical data encoded in `byte_string`. Should be a
        valid format for :func:`struct.unpack()` without the endianness.

    Returns
    -------
    value
        If `byte_string` encodes a single value then it will be returned.
    tuple
        If `byte_string` encodes multiple values then a tuple of the decoded
        values will be returned.

    Raises
    ------
    ValueError
        If the length of `byte_string` isn't a multiple of the size of a
        single value.
    """
    endianChar = '><'[is_little_endian]

    # "=" means use 'standard' size
    bytes_per_value = calcsize("=" + struct_format)
    length = len(byte_string)

    if length % bytes_per_value != 0:
        raise ValueError(
            f"Expected the value length ({length}) to be a multiple of "
            f"{bytes_per_value}"
        )

    nr_values = length // bytes_per_value
    value = unpack(f"{endianChar}{nr_values}{struct_format}", byte_string)
    if len(value) == 1:
        return value[0]

    return value


def convert_ATvalue(
    byte_string: bytes, is_little_endian: bool, struct_format: Optional[str]
) -> Any:
    """Return a decoded 'AT' value as one or a tuple of
    :class:`~dcmpix.tag.BaseTag`."""
    if len(byte_string) % 4 != 0:
        raise ValueError(
            f"Expected the 'AT' value length ({len(byte_string)}) to be a "
            "multiple of 4"
        )

    fmt = "<HH" if is_little_endian else ">HH"
    tags = tuple(
        TupleTag(unpack(fmt, byte_string[offset:offset + 4]))
        for offset in range(0, len(byte_string), 4)
    )
    if len(tags) == 1:
        return tags[0]

    return tags


def convert_OBvalue(
    byte_string: bytes, is_little_endian: bool, struct_format: Optional[str]
) -> bytes:
    """Return encoded 'OB' value as :class:`bytes`.

    No byte swapping will be performed.
    """
    return bytes(byte_string)


def _decode_text(byte_string: bytes) -> str:
    text = bytes(byte_string).decode('latin-1')
    # trailing padding is not significant
    text = text.rstrip(' \x00')
    if _CONTROL_CHARS.search(text):
        raise ValueError("The value contains control characters")

    return text


def _split(text: str) -> Union[str, Tuple[str, ...]]:
    values = tuple(s.strip(' ') for s in text.split('\\'))
    if len(values) == 1:
        return values[0]

    return values


def convert_string(
    byte_string: bytes, is_little_endian: bool, struct_format: Optional[str]
) -> Union[str, Tuple[str, ...]]:
    """Return a decoded string VR value.

    String VRs may be multi-valued, with each value separated by a
    backslash. Leading and trailing spaces of each value are removed.
    """
    return _split(_decode_text(byte_string))


def convert_single_string(
    byte_string: bytes, is_little_endian: bool, struct_format: Optional[str]
) -> str:
    """Return decoded text, ignoring backslashes.

    Used for 'LT', 'ST', 'UT' and 'UR' which are always single valued.
    """
    return _decode_text(byte_string)


def convert_IS_string(
    byte_string: bytes, is_little_endian: bool, struct_format: Optional[str]
) -> Union[int, Tuple[int, ...]]:
    """Return a decoded 'IS' value."""
    values = _split(_decode_text(byte_string))
    if isinstance(values, str):
        return int(values)

    return tuple(int(v) for v in values)


def convert_DS_string(
    byte_string: bytes, is_little_endian: bool, struct_format: Optional[str]
) -> Union[float, Tuple[float, ...]]:
    """Return a decoded 'DS' value."""
    values = _split(_decode_text(byte_string))
    if isinstance(values, str):
        return float(values)

    return tuple(float(v) for v in values)


def convert_value(
    VR: str,
    byte_string: bytes,
    is_little_endian: bool,
    tag: Optional[int] = None,
) -> Tuple[ValueKind, Any]:
    """Return encoded element value using the appropriate decoder.

    Parameters
    ----------
    VR : str
        The element's VR, which must be in :data:`converters`.
    byte_string : bytes
        The encoded element value.
    is_little_endian : bool
        ``True`` if the value is encoded as little endian, ``False``
        otherwise.
    tag : int, optional
        The element's tag, used for the LUT descriptors whose first and third
        values are always unsigned.

    Returns
    -------
    tuple of (ValueKind, value)
        The kind of value and the value decoded using the appropriate
        decoder. Empty values, including text values that are all padding,
        give ``(ValueKind.EMPTY, None)``.

    Raises
    ------
    NotImplementedError
        If `VR` has no converter.
    ValueError
        If the value can't be decoded for `VR`.
    """
    if VR not in converters:
        raise NotImplementedError(f"Unknown Value Representation '{VR}'")

    if len(byte_string) == 0:
        return ValueKind.EMPTY, None

    kind, converter, num_format = converters[VR]
    value = converter(byte_string, is_little_endian, num_format)

    if kind == ValueKind.TEXT and value == '':
        return ValueKind.EMPTY, None

    if (
        VR == 'SS'
        and tag in _LUT_DESCRIPTOR_TAGS
        and isinstance(value, tuple)
        and len(value) == 3
    ):
        # (0028,1101-1103), (0028,3002): first and third values are US
        value = (value[0] & 0xFFFF, value[1], value[2] & 0xFFFF)

    return kind, value


_Converter = Callable[[bytes, bool, Optional[str]], Any]

# converters map a VR to the kind of its values, the function
# to read the value(s) and, for convert_numbers, the struct_format
# (struct_format in python struct module style)
converters: Dict[str, Tuple[ValueKind, _Converter, Optional[str]]] = {
    'AE': (ValueKind.TEXT, convert_string, None),
    'AS': (ValueKind.TEXT, convert_string, None),
    'AT': (ValueKind.UNSIGNED, convert_ATvalue, None),
    'CS': (ValueKind.TEXT, convert_string, None),
    'DA': (ValueKind.TEXT, convert_string, None),
    'DS': (ValueKind.FLOAT, convert_DS_string, None),
    'DT': (ValueKind.TEXT, convert_string, None),
    'FD': (ValueKind.FLOAT, convert_numbers, 'd'),
    'FL': (ValueKind.FLOAT, convert_numbers, 'f'),
    'IS': (ValueKind.SIGNED, convert_IS_string, None),
    'LO': (ValueKind.TEXT, convert_string, None),
    'LT': (ValueKind.TEXT, convert_single_string, None),
    'OB': (ValueKind.BYTES, convert_OBvalue, None),
    'OD': (ValueKind.BYTES, convert_OBvalue, None),
    'OF': (ValueKind.BYTES, convert_OBvalue, None),
    'OL': (ValueKind.BYTES, convert_OBvalue, None),
    'OV': (ValueKind.BYTES, convert_OBvalue, None),
    'OW': (ValueKind.BYTES, convert_OBvalue, None),
    'PN': (ValueKind.TEXT, convert_string, None),
    'SH': (ValueKind.TEXT, convert_string, None),
    'SL': (ValueKind.SIGNED, convert_numbers, 'l'),
    'SS': (ValueKind.SIGNED, convert_numbers, 'h'),
    'ST': (ValueKind.TEXT, convert_single_string, None),
    'SV': (ValueKind.SIGNED, convert_numbers, 'q'),
    'TM': (ValueKind.TEXT, convert_string, None),
    'UC': (ValueKind.TEXT, convert_string, None),
    'UI': (ValueKind.TEXT, convert_string, None),
    'UL': (ValueKind.UNSIGNED, convert_numbers, 'L'),
    'UN': (ValueKind.BYTES, convert_OBvalue, None),
    'UR': (ValueKind.TEXT, convert_single_string, None),
    'US': (ValueKind.UNSIGNED, convert_numbers, 'H'),
    'UT': (ValueKind.TEXT, convert_single_string, None),
    'UV': (ValueKind.UNSIGNED, convert_numbers, 'Q'),
}

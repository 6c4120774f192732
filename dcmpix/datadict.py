# Copyright 2026 dcmpix authors. See LICENSE file for details.
"""Lookups in the DICOM data dictionary."""

from typing import Dict, NamedTuple, Optional

from dcmpix.config import logger
from dcmpix.tag import Tag, BaseTag

from dcmpix._dicom_dict import DicomDictionary


class DictionaryEntry(NamedTuple):
    VR: str
    VM: str
    name: str
    is_retired: str
    keyword: str


def get_entry(tag: int) -> DictionaryEntry:
    """Return the data dictionary entry for `tag`.

    Parameters
    ----------
    tag : int
        The element's tag.

    Returns
    -------
    DictionaryEntry
        The (VR, VM, name, is_retired, keyword) of the element.

    Raises
    ------
    KeyError
        If the tag is not in the data dictionary.
    """
    tag = Tag(tag)
    entry = DicomDictionary.get(tag)
    if entry is None:
        raise KeyError(f"Tag {tag} not found in DICOM dictionary")

    return DictionaryEntry(*entry)


def dictionary_VR(tag: int) -> str:
    """Return the dictionary VR for `tag`, which may be ambiguous such as
    ``'US or SS'``.

    Raises
    ------
    KeyError
        If the tag is not in the data dictionary.
    """
    return get_entry(tag).VR


def dictionary_description(tag: int) -> str:
    return get_entry(tag).name


def dictionary_keyword(tag: int) -> str:
    return get_entry(tag).keyword


def dictionary_has_tag(tag: int) -> bool:
    return tag in DicomDictionary


def lookup_VR(tag: int) -> str:
    """Return the VR used to decode `tag` when the encoding doesn't carry
    one (implicit VR).

    Parameters
    ----------
    tag : int
        The element's tag.

    Returns
    -------
    str
        The dictionary VR, ``'UL'`` for group length elements, ``'LO'`` for
        private creators or ``'UN'`` if the tag is unknown.
    """
    if tag in DicomDictionary:
        return dictionary_VR(tag)

    tag = BaseTag(tag)
    if tag.is_group_length:
        return 'UL'

    if tag.is_private_creator:
        return 'LO'

    return 'UN'


logger.debug("Building the keyword to tag lookup")
_KEYWORDS: Dict[str, int] = {
    entry[4]: tag for tag, entry in DicomDictionary.items()
}


def tag_for_keyword(keyword: str) -> Optional[int]:
    """Return the tag for the DICOM `keyword` or ``None`` if the keyword
    isn't in the data dictionary."""
    return _KEYWORDS.get(keyword)

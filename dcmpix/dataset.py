# Copyright 2026 dcmpix authors. See LICENSE file for details.
"""Define the Dataset and FileDataset classes.

The Dataset class represents the DICOM Dataset while the FileDataset class
adds the preamble, file meta information and transfer syntax of a DICOM
Part 10 buffer.

Datasets hold the elements in the order they were parsed. Once the parser
has finished a data set or sequence item it calls :meth:`Dataset.freeze`
and no further elements may be added.
"""
from typing import (
    Any, Dict, Iterator, ItemsView, KeysView, List, Optional, ValuesView,
    TYPE_CHECKING
)

from dcmpix.datadict import tag_for_keyword
from dcmpix.dataelem import DataElement, ValueKind
from dcmpix.errors import DuplicateTag
from dcmpix.tag import Tag, BaseTag

if TYPE_CHECKING:  # pragma: no cover
    from dcmpix.uid import TransferSyntax


class Dataset:
    """An ordered collection of :class:`~dcmpix.dataelem.DataElement`
    keyed by tag.

    Examples
    --------

    Elements can be accessed by tag or, for elements in the dictionary,
    by keyword:

    >>> ds[0x00280010].value
    512
    >>> ds['Rows'].value
    512
    >>> ds.Rows
    512

    Iterating over a :class:`Dataset` yields its elements in the order they
    were parsed. Sequence items are nested :class:`Dataset` instances in
    the element's value.

    Attributes
    ----------
    indent_chars : str
        For string display, the characters used to indent nested Sequences.
        Default is ``"   "``.
    is_little_endian : bool or None
        ``True`` if the dataset was parsed as little endian, ``False`` if
        big endian and ``None`` if not parsed.
    is_implicit_VR : bool or None
        ``True`` if the dataset was parsed as implicit VR, ``False`` if
        explicit VR and ``None`` if not parsed.
    """
    indent_chars = "   "

    def __init__(
        self,
        is_little_endian: Optional[bool] = None,
        is_implicit_VR: Optional[bool] = None,
    ) -> None:
        self._dict: Dict[BaseTag, DataElement] = {}
        self._frozen = False
        self.is_little_endian = is_little_endian
        self.is_implicit_VR = is_implicit_VR

    def add(self, data_element: DataElement) -> None:
        """Add an element to the :class:`Dataset`.

        Parameters
        ----------
        data_element : dataelem.DataElement
            The :class:`~dcmpix.dataelem.DataElement` to add.

        Raises
        ------
        DuplicateTag
            If an element with the same tag is already present.
        TypeError
            If the dataset has been frozen.
        """
        if self._frozen:
            raise TypeError("Elements can't be added to a frozen Dataset")

        tag = data_element.tag
        if tag in self._dict:
            raise DuplicateTag(
                f"The tag ({tag}) appears more than once in the data set"
            )

        self._dict[tag] = data_element

    def freeze(self) -> "Dataset":
        """Prevent any further elements being added and return the
        dataset."""
        self._frozen = True
        return self

    @property
    def is_frozen(self) -> bool:
        return self._frozen

    def _tag(self, key: Any) -> Optional[BaseTag]:
        if isinstance(key, str):
            tag = tag_for_keyword(key)
            if tag is not None:
                return Tag(tag)

        try:
            return Tag(key)
        except (ValueError, OverflowError, TypeError):
            return None

    def __contains__(self, name: Any) -> bool:
        """Return ``True`` if the element with tag or keyword `name` is in
        the :class:`Dataset`."""
        tag = self._tag(name)
        return tag is not None and tag in self._dict

    def __getitem__(self, key: Any) -> DataElement:
        """Return the element corresponding to the tag or keyword `key`.

        Raises
        ------
        KeyError
            If the element is not in the :class:`Dataset`.
        """
        tag = self._tag(key)
        if tag is None or tag not in self._dict:
            raise KeyError(key)

        return self._dict[tag]

    def get(self, key: Any, default: Any = None) -> Any:
        """Return the value of the element with tag or keyword `key`, or
        `default` if the element is missing or has no value."""
        try:
            elem = self[key]
        except KeyError:
            return default

        if elem.kind == ValueKind.EMPTY:
            return default

        return elem.value

    def __getattr__(self, name: str) -> Any:
        """Return the value of the element with keyword `name`."""
        if name.startswith('_'):
            raise AttributeError(name)

        tag = tag_for_keyword(name)
        if tag is not None and tag in self._dict:
            return self._dict[tag].value

        raise AttributeError(
            f"'{type(self).__name__}' object has no attribute '{name}'"
        )

    def __iter__(self) -> Iterator[DataElement]:
        """Iterate through the top-level of the Dataset, yielding
        DataElements in the order they were added."""
        yield from self._dict.values()

    def __len__(self) -> int:
        return len(self._dict)

    def keys(self) -> KeysView[BaseTag]:
        return self._dict.keys()

    def values(self) -> ValuesView[DataElement]:
        return self._dict.values()

    def items(self) -> ItemsView[BaseTag, DataElement]:
        return self._dict.items()

    def group_dataset(self, group: int) -> List[DataElement]:
        """Return the elements in `group`."""
        return [elem for tag, elem in self._dict.items() if tag.group == group]

    def __eq__(self, other: Any) -> bool:
        if not isinstance(other, Dataset):
            return NotImplemented

        return list(self._dict.items()) == list(other._dict.items())

    __hash__ = None  # type: ignore

    def _pretty_str(
        self, indent: int = 0, top_level_only: bool = False
    ) -> str:
        """Return a string of the DataElements in the Dataset, with indented
        levels.

        Parameters
        ----------
        indent : int, optional
            The indent level offset (default ``0``).
        top_level_only : bool, optional
            When True, only create a string for the top level elements, i.e.
            exclude elements within any Sequences (default ``False``).

        Returns
        -------
        str
            A string representation of the Dataset.
        """
        strings = []
        indent_str = self.indent_chars * indent
        nextindent_str = self.indent_chars * (indent + 1)

        for elem in self:
            if elem.kind == ValueKind.SEQUENCE:
                strings.append(
                    f"{indent_str}({elem.tag})  {elem.name}   "
                    f"{len(elem.value)} item(s) ---- "
                )
                if top_level_only:
                    continue

                for item in elem.value:
                    strings.append(item._pretty_str(indent + 1))
                    strings.append(nextindent_str + "---------")
            else:
                strings.append(indent_str + str(elem))

        return "\n".join(strings)

    def __str__(self) -> str:
        return self._pretty_str()

    def top(self) -> str:
        """Return a :class:`str` representation of the top level elements."""
        return self._pretty_str(top_level_only=True)

    def __repr__(self) -> str:
        return str(self)


class FileDataset(Dataset):
    """A :class:`Dataset` read from a DICOM Part 10 buffer.

    Attributes
    ----------
    preamble : bytes or None
        The 128-byte DICOM preamble, if available.
    file_meta : Dataset
        The File Meta Information, group ``0x0002`` elements.
    transfer_syntax : uid.TransferSyntax
        The transfer syntax the main data set was encoded with.
    """

    def __init__(
        self,
        dataset: Dataset,
        preamble: Optional[bytes],
        file_meta: Dataset,
        transfer_syntax: "TransferSyntax",
    ) -> None:
        super().__init__(
            is_little_endian=transfer_syntax.is_little_endian,
            is_implicit_VR=transfer_syntax.is_implicit_VR,
        )
        self._dict = dataset._dict
        self._frozen = dataset.is_frozen
        self.preamble = preamble
        self.file_meta = file_meta
        self.transfer_syntax = transfer_syntax

    def _pretty_str(
        self, indent: int = 0, top_level_only: bool = False
    ) -> str:
        if indent or not len(self.file_meta):
            return super()._pretty_str(indent, top_level_only)

        strings = ["Dataset.file_meta -------------------------------"]
        strings.append(self.file_meta._pretty_str())
        strings.append("-------------------------------------------------")
        strings.append(super()._pretty_str(0, top_level_only))
        return "\n".join(strings)

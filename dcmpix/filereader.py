# Copyright 2026 dcmpix authors. See LICENSE file for details.
"""Parse DICOM Part 10 buffers into Dataset objects"""

from enum import Enum
import logging
from typing import Callable, List, NamedTuple, Optional, Union
import zlib

from dcmpix import config
from dcmpix.config import logger
from dcmpix.datadict import lookup_VR
from dcmpix.dataelem import (
    DataElement, ValueKind, UNDEFINED_LENGTH
)
from dcmpix.dataset import Dataset, FileDataset
from dcmpix.diagnostics import (
    Diagnostic, DiagnosticEvent, DiagnosticSink, default_sink
)
from dcmpix.encaps import read_item_stream
from dcmpix.errors import (
    InvalidDicomError, MalformedSequence, TruncatedStream
)
from dcmpix.filebase import Buffer, ByteCursor
from dcmpix.tag import (
    BaseTag, ItemTag, ItemDelimiterTag, PixelDataTag, SequenceDelimiterTag,
    TupleTag
)
from dcmpix.uid import (
    ExplicitVRLittleEndian, ImplicitVRLittleEndian, TransferSyntax,
    TRANSFER_SYNTAXES, get_transfer_syntax
)
from dcmpix.values import convert_value
from dcmpix.vr import EXPLICIT_VR_LENGTH_32, STANDARD_VR, resolve_ambiguous_VR


def bytes2hex(byte_string: bytes) -> str:
    """Return a hex dump of `byte_string`, as used in debugging output."""
    return " ".join(f"{b:02x}" for b in byte_string)


class ParseStatus(Enum):
    """What :meth:`DataSetParser.next_element` found."""

    ELEMENT = 0
    """An element header, the cursor is positioned at its value."""
    DELIMITER = 1
    """An (FFFE,E000) *Item*, (FFFE,E00D) *Item Delimitation Item* or
    (FFFE,E0DD) *Sequence Delimitation Item* tag and its 32-bit length."""
    END_OF_STREAM = 2
    """Fewer than 8 bytes remain before the end of the current level."""


class ParseResult(NamedTuple):
    """The outcome of reading one element header."""
    status: ParseStatus
    tag: Optional[BaseTag] = None
    VR: Optional[str] = None
    length: int = 0
    offset: int = 0
    value_tell: int = 0


END_OF_STREAM = ParseResult(ParseStatus.END_OF_STREAM)


class _DatasetFrame:
    """A data set, or sequence item, being parsed."""

    def __init__(
        self, dataset: Dataset, end: Optional[int], limit: int,
        is_implicit_VR: bool, offset: int = 0,
    ) -> None:
        self.dataset = dataset
        # `end` is None for undefined length items
        self.end = end
        self.limit = limit
        self.is_implicit_VR = is_implicit_VR
        self.offset = offset


class _SequenceFrame:
    """The items of an SQ element being parsed."""

    def __init__(
        self, header: ParseResult, end: Optional[int], limit: int,
        is_implicit_VR: bool,
    ) -> None:
        self.header = header
        self.items: List[Dataset] = []
        self.end = end
        self.limit = limit
        self.is_implicit_VR = is_implicit_VR


_Frame = Union[_DatasetFrame, _SequenceFrame]
StopWhen = Callable[[BaseTag], bool]


class DataSetParser:
    """Parse the tag-length-value encoded elements of a DICOM buffer.

    Nested sequences are parsed with an explicit stack rather than by
    recursion. Every level pushed onto the stack consumes at least the 8
    bytes of its header, so parsing always terminates.

    Examples
    --------

    >>> parser = DataSetParser(data)
    >>> file_meta = parser.parse_file_meta()
    >>> parser.transfer_syntax.name
    'Explicit VR Little Endian'
    >>> ds = parser.parse_dataset()

    Parameters
    ----------
    buffer : bytes, bytearray or memoryview
        The encoded data.
    transfer_syntax : uid.TransferSyntax, optional
        The encoding of the main data set. If not given it's taken from
        the File Meta Information by :meth:`parse_file_meta`.
    sink : callable, optional
        Receives a :class:`~dcmpix.diagnostics.DiagnosticEvent` for each
        recoverable problem. Defaults to
        :class:`~dcmpix.diagnostics.LoggingSink`.
    """

    def __init__(
        self,
        buffer: Buffer,
        transfer_syntax: Optional[TransferSyntax] = None,
        sink: Optional[DiagnosticSink] = None,
    ) -> None:
        self.cursor = ByteCursor(buffer)
        self.transfer_syntax = transfer_syntax
        self.sink = default_sink(sink)
        self.is_little_endian = True

    def _report(
        self, code: Diagnostic, msg: str, offset: Optional[int] = None,
        tag: Optional[int] = None, level: int = logging.WARNING
    ) -> None:
        self.sink(DiagnosticEvent(code, msg, offset, tag, level))

    def parse_file_meta(self, offset: int = 132) -> Dataset:
        """Return the File Meta Information group elements.

        The group is always encoded as Explicit VR Little Endian. Parsing
        stops at the first element that isn't in group ``0x0002``, which
        is left for :meth:`parse_dataset`.

        Parameters
        ----------
        offset : int, optional
            The offset of the first group ``0x0002`` element, default ``132``
            (after the preamble and ``'DICM'`` prefix).

        Returns
        -------
        dataset.Dataset
            The File Meta elements. The parser's :attr:`transfer_syntax` is
            set from (0002,0010) *Transfer Syntax UID* if it wasn't given.
        """
        self.cursor.seek(offset)
        start = offset
        self.is_little_endian = True
        file_meta = self._parse(
            is_implicit_VR=False,
            stop_when=lambda tag: tag.group != 0x0002,
        )

        if 'FileMetaInformationGroupLength' in file_meta:
            # the value counts from the end of the group length element
            actual = self.cursor.position() - (start + 12)
            expected = file_meta.get('FileMetaInformationGroupLength')
            if expected != actual:
                logger.info(
                    "(0002,0000) 'File Meta Information Group Length' value "
                    "doesn't match the actual File Meta Information length "
                    f"({expected} vs {actual} bytes)"
                )

        if self.transfer_syntax is None:
            self.transfer_syntax = get_transfer_syntax(
                file_meta.get('TransferSyntaxUID'), self.sink
            )

        return file_meta

    def parse_dataset(self, offset: Optional[int] = None) -> Dataset:
        """Return the data set that runs from `offset` to the end of the
        buffer.

        Parameters
        ----------
        offset : int, optional
            Where the data set starts, defaults to the current position.

        Returns
        -------
        dataset.Dataset
            The parsed and frozen data set.

        Raises
        ------
        StructuralError
            If the element structure is broken.
        """
        if offset is not None:
            self.cursor.seek(offset)

        if self.transfer_syntax is None:
            self.transfer_syntax = get_transfer_syntax(None, self.sink)

        ts = self.transfer_syntax
        if ts.is_deflated:
            remainder = self.cursor.read_bytes(self.cursor.remaining())
            logger.debug("Inflating the deflated data set")
            try:
                inflated = zlib.decompress(remainder, -zlib.MAX_WBITS)
            except zlib.error as exc:
                raise TruncatedStream(
                    f"Unable to inflate the deflated data set: {exc}"
                ) from exc

            self.cursor = ByteCursor(inflated)

        self.is_little_endian = ts.is_little_endian
        return self._parse(is_implicit_VR=ts.is_implicit_VR)

    def next_element(
        self, limit: int, is_implicit_VR: bool
    ) -> ParseResult:
        """Read the next element header.

        Parameters
        ----------
        limit : int
            The offset the current level ends at.
        is_implicit_VR : bool
            ``True`` if the element has no VR field.

        Returns
        -------
        ParseResult
            An element header, a delimiter or the end of stream marker.

        Raises
        ------
        TruncatedStream
            If an explicit VR header with a 32-bit length is cut short.
        """
        cursor = self.cursor
        little = self.is_little_endian
        offset = cursor.position()
        if limit - offset < 8:
            return END_OF_STREAM

        tag = TupleTag(cursor.read_tag(little))
        if tag.is_delimiter:
            length = cursor.read_u32(little)
            return ParseResult(
                ParseStatus.DELIMITER, tag, None, length, offset,
                cursor.position()
            )

        if is_implicit_VR:
            VR = None
            length = cursor.read_u32(little)
        else:
            VR = cursor.read_fixed_text(2)
            if VR in EXPLICIT_VR_LENGTH_32:
                if limit - cursor.position() < 6:
                    raise TruncatedStream(
                        f"The element header at offset 0x{offset:x} is "
                        "truncated"
                    )
                cursor.skip(2)
                length = cursor.read_u32(little)
            else:
                length = cursor.read_u16(little)

        if config.debugging:
            value_tell = cursor.position()
            cursor.seek(offset)
            raw = cursor.read_bytes(value_tell - offset)
            msg = f"{offset:08x}: {bytes2hex(raw)}"
            msg = f"{msg:<47}  ({tag.group:04x}, {tag.element:04x})"
            if VR:
                msg += f" {VR} "
            if length != UNDEFINED_LENGTH:
                msg += f" Length: {length}"
            else:
                msg += " Length: Undefined length (FFFFFFFF)"
            logger.debug(msg)

        return ParseResult(
            ParseStatus.ELEMENT, tag, VR, length, offset, cursor.position()
        )

    def _parse(
        self, is_implicit_VR: bool, stop_when: Optional[StopWhen] = None
    ) -> Dataset:
        """Parse from the current position to the end of the buffer, or
        until `stop_when` returns ``True`` for a top-level tag."""
        root = _DatasetFrame(
            Dataset(self.is_little_endian, is_implicit_VR),
            end=None,
            limit=self.cursor.length(),
            is_implicit_VR=is_implicit_VR,
            offset=self.cursor.position(),
        )
        stack: List[_Frame] = [root]
        while stack:
            frame = stack[-1]
            if isinstance(frame, _SequenceFrame):
                self._step_sequence(frame, stack)
            else:
                self._step_dataset(frame, stack, stop_when)

        return root.dataset

    def _finish_dataset(self, stack: List[_Frame]) -> None:
        frame = stack.pop()
        assert isinstance(frame, _DatasetFrame)
        if frame.end is not None and self.cursor.position() < frame.end:
            self.cursor.seek(frame.end)

        frame.dataset.freeze()
        if stack:
            parent = stack[-1]
            assert isinstance(parent, _SequenceFrame)
            parent.items.append(frame.dataset)
            if config.debugging:
                logger.debug(
                    f"{self.cursor.position():08x}: Finished sequence item"
                )

    def _finish_sequence(self, stack: List[_Frame]) -> None:
        frame = stack.pop()
        assert isinstance(frame, _SequenceFrame)
        if frame.end is not None and self.cursor.position() < frame.end:
            self.cursor.seek(frame.end)

        header = frame.header
        elem = DataElement(
            header.tag, 'SQ', frame.items, ValueKind.SEQUENCE,
            header.length, header.value_tell
        )
        parent = stack[-1]
        assert isinstance(parent, _DatasetFrame)
        parent.dataset.add(elem)

    def _step_sequence(
        self, frame: _SequenceFrame, stack: List[_Frame]
    ) -> None:
        """Read the next item, or the end, of a sequence."""
        cursor = self.cursor
        limit = frame.end if frame.end is not None else frame.limit
        result = self.next_element(limit, frame.is_implicit_VR)

        if result.status == ParseStatus.END_OF_STREAM:
            if frame.end is None:
                self._report(
                    Diagnostic.MISSING_DELIMITER,
                    "The sequence has no Sequence Delimitation Item",
                    offset=cursor.position(), tag=frame.header.tag,
                )
                cursor.seek(limit)
            self._finish_sequence(stack)
            return

        if result.status == ParseStatus.ELEMENT:
            raise MalformedSequence(
                f"Expected an Item in the sequence ({frame.header.tag}), "
                f"found ({result.tag}) at offset 0x{result.offset:x}"
            )

        tag, length = result.tag, result.length
        if tag == SequenceDelimiterTag:
            if config.debugging:
                logger.debug(f"{result.offset:08x}: End of Sequence")
            if length != 0:
                self._report(
                    Diagnostic.NONZERO_DELIMITER_LENGTH,
                    f"Expected 0x00000000 after delimiter, found "
                    f"0x{length:x}",
                    offset=result.offset + 4,
                )
            self._finish_sequence(stack)
            return

        if tag == ItemDelimiterTag:
            self._report(
                Diagnostic.MISSING_DELIMITER,
                "Found an Item Delimitation Item outside of an item",
                offset=result.offset, tag=frame.header.tag,
            )
            return

        # Item
        if config.debugging:
            logger.debug(
                f"{result.offset:08x}: Found Item tag (start of item)"
            )
        dataset = Dataset(self.is_little_endian, frame.is_implicit_VR)
        if length == UNDEFINED_LENGTH:
            stack.append(_DatasetFrame(
                dataset, None, limit, frame.is_implicit_VR, result.offset
            ))
            return

        item_end = cursor.position() + length
        self._check_end(item_end, limit, result)
        stack.append(_DatasetFrame(
            dataset, item_end, item_end, frame.is_implicit_VR, result.offset
        ))

    def _check_end(
        self, end: int, limit: int, result: ParseResult
    ) -> None:
        if end > self.cursor.length():
            raise TruncatedStream(
                f"The length of ({result.tag}) at offset "
                f"0x{result.offset:x} is {result.length} bytes but only "
                f"{self.cursor.length() - result.value_tell} bytes remain"
            )

        if end > limit:
            raise MalformedSequence(
                f"The length of ({result.tag}) at offset "
                f"0x{result.offset:x} runs past the end of its parent"
            )

    def _step_dataset(
        self,
        frame: _DatasetFrame,
        stack: List[_Frame],
        stop_when: Optional[StopWhen],
    ) -> None:
        """Read the next element of a data set or item."""
        cursor = self.cursor
        result = self.next_element(frame.limit, frame.is_implicit_VR)
        is_root = len(stack) == 1

        if result.status == ParseStatus.END_OF_STREAM:
            if frame.end is None and not is_root:
                self._report(
                    Diagnostic.MISSING_DELIMITER,
                    "The item has no Item Delimitation Item",
                    offset=cursor.position(),
                )
            self._finish_dataset(stack)
            return

        tag = result.tag
        if result.status == ParseStatus.DELIMITER:
            if tag == ItemTag:
                raise MalformedSequence(
                    f"Found an Item tag at offset 0x{result.offset:x} "
                    "outside of a sequence"
                )

            if tag == ItemDelimiterTag:
                if frame.end is None and not is_root:
                    self._finish_dataset(stack)
                else:
                    self._report(
                        Diagnostic.MISSING_DELIMITER,
                        "Ignoring an unexpected Item Delimitation Item",
                        offset=result.offset,
                    )
                return

            # Sequence Delimiter
            if not is_root:
                # Let the enclosing sequence consume it
                self._report(
                    Diagnostic.MISSING_DELIMITER,
                    "The item ended with a Sequence Delimitation Item",
                    offset=result.offset,
                )
                cursor.seek(result.offset)
                frame.end = None
            self._finish_dataset(stack)
            return

        if is_root and stop_when is not None and stop_when(tag):
            cursor.seek(result.offset)
            self._finish_dataset(stack)
            return

        VR = self._element_VR(result, frame)
        result = result._replace(VR=VR)
        dataset = frame.dataset

        if result.length == UNDEFINED_LENGTH:
            self._undefined_length(result, frame, stack)
            return

        self._check_end(result.value_tell + result.length, frame.limit, result)
        if VR == 'SQ':
            if result.length == 0:
                dataset.add(DataElement(
                    tag, VR, [], ValueKind.SEQUENCE, 0, result.value_tell
                ))
                return

            end = result.value_tell + result.length
            stack.append(
                _SequenceFrame(result, end, end, frame.is_implicit_VR)
            )
            return

        dataset.add(self._read_value(result))

    def _element_VR(self, result: ParseResult, frame: _DatasetFrame) -> str:
        """Return the VR to use for the element."""
        tag = result.tag
        if result.VR is None:
            pixel_rep = frame.dataset.get(0x00280103)
            return resolve_ambiguous_VR(lookup_VR(tag), tag, pixel_rep)

        if result.VR in STANDARD_VR:
            return result.VR

        self._report(
            Diagnostic.UNSUPPORTED_VR,
            f"Unknown VR {result.VR!r}, using 'UN'",
            offset=result.offset, tag=tag,
        )
        return 'UN'

    def _undefined_length(
        self, result: ParseResult, frame: _DatasetFrame, stack: List[_Frame]
    ) -> None:
        """Handle an element with an undefined length."""
        cursor = self.cursor
        tag, VR = result.tag, result.VR
        if tag == PixelDataTag:
            if config.debugging:
                logger.debug(
                    f"{cursor.position():08x}: Reading encapsulated pixel "
                    "data"
                )
            fragments = read_item_stream(
                cursor, self.is_little_endian, self.sink
            )
            frame.dataset.add(DataElement(
                tag, VR, fragments, ValueKind.FRAGMENTS, result.length,
                result.value_tell
            ))
            return

        is_implicit_VR = frame.is_implicit_VR
        if VR != 'SQ':
            # Look ahead to see if it consists of items and is thus a SQ
            next_tag = None
            if frame.limit - cursor.position() >= 4:
                next_tag = TupleTag(cursor.read_tag(self.is_little_endian))
                cursor.seek(result.value_tell)

            if next_tag == ItemTag:
                self._report(
                    Diagnostic.IMPLICIT_SEQUENCE,
                    f"Parsing the undefined length '{VR}' element as a "
                    "sequence",
                    offset=result.offset, tag=tag, level=logging.INFO,
                )
                result = result._replace(VR='SQ')
                # Undefined length UN sequences are implicit VR
                if VR == 'UN' and self.is_little_endian:
                    is_implicit_VR = True

        if result.VR == 'SQ':
            if config.debugging:
                logger.debug(
                    f"{cursor.position():08x}: Reading/parsing undefined "
                    "length sequence"
                )
            stack.append(
                _SequenceFrame(result, None, frame.limit, is_implicit_VR)
            )
            return

        # Skip to the next Sequence Delimiter, if any
        delimiter = (b'\xFE\xFF\xDD\xE0' if self.is_little_endian
                     else b'\xFF\xFE\xE0\xDD')
        position = cursor.find(delimiter, cursor.position())
        if 0 <= position <= frame.limit - 8:
            cursor.seek(position + 8)
            msg = "Skipped the undefined length value"
        else:
            msg = "No Sequence Delimitation Item found for the value"
        self._report(
            Diagnostic.UNDEFINED_LENGTH_ELEMENT,
            f"{msg} of ({tag}) with VR '{VR}'",
            offset=result.offset, tag=tag,
        )
        frame.dataset.add(DataElement(
            tag, VR, None, ValueKind.EMPTY, result.length, result.value_tell
        ))

    def _read_value(self, result: ParseResult) -> DataElement:
        """Return the element for a defined length value."""
        tag, VR, length = result.tag, result.VR, result.length
        raw = self.cursor.read_bytes(length)
        if config.debugging:
            dotdot = "..." if length > 12 else "   "
            displayed = raw[:12]
            logger.debug(
                f"{result.value_tell:08x}: {bytes2hex(displayed):<34} "
                f"{dotdot} {displayed!r} {dotdot}"
            )

        if tag == PixelDataTag:
            kind = ValueKind.BYTES if raw else ValueKind.EMPTY
            return DataElement(
                tag, VR, raw or None, kind, length, result.value_tell
            )

        try:
            kind, value = convert_value(VR, raw, self.is_little_endian, tag)
        except ValueError as exc:
            if config.enforce_valid_values:
                raise

            self._report(
                Diagnostic.VALUE_DECODE_FAILED,
                f"Unable to decode the value with VR '{VR}': {exc}",
                offset=result.value_tell, tag=tag,
            )
            kind, value = ValueKind.EMPTY, None

        return DataElement(tag, VR, value, kind, length, result.value_tell)


def read_preamble(
    buffer: Buffer, force: bool
) -> Optional[bytes]:
    """Return the 128-byte DICOM preamble in `buffer` if present.

    Parameters
    ----------
    buffer : bytes
        The buffer to read the preamble from.
    force : bool
        Flag to force reading of a buffer even if no header is found.

    Returns
    -------
    preamble : bytes or None
        The 128-byte DICOM preamble will be returned if the appropriate prefix
        ('DICM') is found at byte offset 128. Returns ``None`` if the 'DICM'
        prefix is not found and `force` is ``True``.

    Raises
    ------
    InvalidDicomError
        If `force` is ``False`` and no appropriate header information found.
    """
    logger.debug("Reading File Meta Information preamble...")
    cursor = ByteCursor(buffer)
    if len(cursor) >= 132:
        preamble = cursor.read_bytes(128)
        if cursor.read_fixed_text(4) == "DICM":
            logger.debug("00000080: 'DICM' prefix found")
            return preamble

    if force:
        logger.info(
            "Buffer is not conformant with the DICOM File Format: 'DICM' "
            "prefix is missing from the File Meta Information header "
            "or the header itself is missing. Assuming no header and "
            "continuing."
        )
        return None

    raise InvalidDicomError(
        "Buffer is missing DICOM File Meta Information header or the 'DICM' "
        "prefix is missing from the header. Use force=True to force reading."
    )


def _guess_transfer_syntax(buffer: Buffer, offset: int) -> TransferSyntax:
    """Return the likely encoding of a data set with no File Meta
    Information."""
    vr = bytes(buffer[offset + 4:offset + 6])
    try:
        is_explicit = vr.decode('latin-1') in STANDARD_VR
    except UnicodeDecodeError:
        is_explicit = False

    uid = ExplicitVRLittleEndian if is_explicit else ImplicitVRLittleEndian
    return TRANSFER_SYNTAXES[uid]


def read_file_meta_info(
    buffer: Buffer, sink: Optional[DiagnosticSink] = None
) -> Dataset:
    """Read and return the DICOM File Meta Information only."""
    read_preamble(buffer, False)
    return DataSetParser(buffer, sink=sink).parse_file_meta()


def read_dataset(
    buffer: Buffer,
    transfer_syntax: TransferSyntax,
    sink: Optional[DiagnosticSink] = None,
) -> Dataset:
    """Return the data set encoded in `buffer`, which has no preamble or
    File Meta Information.

    Parameters
    ----------
    buffer : bytes
        The encoded data set.
    transfer_syntax : uid.TransferSyntax
        The encoding of the data set.
    sink : callable, optional
        Receives diagnostic events.
    """
    return DataSetParser(buffer, transfer_syntax, sink).parse_dataset(0)


def dcmread(
    buffer: Buffer,
    force: bool = False,
    sink: Optional[DiagnosticSink] = None,
) -> FileDataset:
    """Read and parse a DICOM Part 10 buffer.

    Parameters
    ----------
    buffer : bytes, bytearray or memoryview
        The complete contents of a DICOM file.
    force : bool, optional
        If ``False`` (default), raises an
        :class:`~dcmpix.errors.InvalidDicomError` if the ``'DICM'`` prefix
        is missing. If ``True`` then the data set is read anyway, guessing
        the transfer syntax if there's no File Meta Information.
    sink : callable, optional
        Receives a :class:`~dcmpix.diagnostics.DiagnosticEvent` for each
        recoverable problem found.

    Returns
    -------
    FileDataset
        The parsed data set.

    Raises
    ------
    InvalidDicomError
        If `force` is ``False`` and the buffer is not a DICOM file.
    StructuralError
        If the element structure is broken.

    Examples
    --------

    >>> with open('CT_small.dcm', 'rb') as f:
    ...     ds = dcmread(f.read())
    >>> ds.PatientName
    'CompressedSamples^CT1'
    """
    preamble = read_preamble(buffer, force)
    offset = 132 if preamble is not None else 0
    parser = DataSetParser(buffer, sink=sink)

    # Without a preamble there may still be File Meta Information
    file_meta = Dataset(True, False)
    if preamble is not None or bytes(buffer[0:2]) == b'\x02\x00':
        file_meta = parser.parse_file_meta(offset)
        offset = parser.cursor.position()

    if preamble is None and not len(file_meta):
        parser.transfer_syntax = _guess_transfer_syntax(buffer, offset)
        logger.debug(
            f"No File Meta Information, assuming "
            f"'{parser.transfer_syntax.name}'"
        )

    dataset = parser.parse_dataset(offset)
    return FileDataset(dataset, preamble, file_meta, parser.transfer_syntax)

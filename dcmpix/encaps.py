# Copyright 2026 dcmpix authors. See LICENSE file for details.
"""Functions for working with encapsulated (compressed) pixel data."""

import logging
from struct import unpack
from typing import Iterator, List, Optional, Tuple

from dcmpix.dataelem import FragmentList, UNDEFINED_LENGTH
from dcmpix.diagnostics import (
    Diagnostic, DiagnosticEvent, DiagnosticSink, default_sink
)
from dcmpix.errors import (
    FrameDecodeError, MalformedSequence, TruncatedStream
)
from dcmpix.filebase import Buffer, ByteCursor
from dcmpix.tag import ItemTag, SequenceDelimiterTag, TupleTag


# Functions for parsing encapsulated data
def read_item_stream(
    cursor: ByteCursor,
    is_little_endian: bool = True,
    sink: Optional[DiagnosticSink] = None,
) -> FragmentList:
    """Return the items of an encapsulated *Pixel Data* value.

    **Encapsulation**

    The encoded pixel data stream is fragmented into one or more Items. The
    stream may represent a single or multi-frame image.

    Each *Data Stream Fragment* shall have tag of (fffe,e000), followed by a 4
    byte *Item Length* field encoding the explicit number of bytes in the Item.

    The first Item in the Sequence of Items shall be a 'Basic Offset Table',
    however the Basic Offset Table item value is not required to be present.

    The Sequence of Items is terminated by a Sequence Delimiter Item with tag
    (fffe,e0dd) and an Item Length field of value ``0x00000000``.

    Parameters
    ----------
    cursor : filebase.ByteCursor
        Positioned at the tag of the first item, the Basic Offset Table.
        After returning it will be positioned after the Sequence Delimiter.
    is_little_endian : bool, optional
        The byte order of the item tags and lengths, default ``True``.
    sink : callable, optional
        Receives a diagnostic event if the stream ends without a Sequence
        Delimiter.

    Returns
    -------
    FragmentList
        The Basic Offset Table value and the fragments.

    Raises
    ------
    MalformedSequence
        If the stream contains an item with an undefined length or a tag
        other than (FFFE,E000) or (FFFE,E0DD).
    TruncatedStream
        If an item's length runs past the end of the buffer.

    References
    ----------
    DICOM Standard Part 5, Annex A.4
    """
    items: List[bytes] = []
    while True:
        if cursor.remaining() < 8:
            default_sink(sink)(DiagnosticEvent(
                Diagnostic.MISSING_DELIMITER,
                "The encapsulated pixel data has no Sequence Delimiter "
                "item",
                offset=cursor.position(),
            ))
            cursor.seek(cursor.length())
            break

        offset = cursor.position()
        tag = TupleTag(cursor.read_tag(is_little_endian))
        length = cursor.read_u32(is_little_endian)

        if tag == ItemTag:
            if length == UNDEFINED_LENGTH:
                raise MalformedSequence(
                    f"Undefined item length at offset 0x{offset:x} when "
                    "parsing the encapsulated pixel data fragments"
                )

            if length > cursor.remaining():
                raise TruncatedStream(
                    f"The item at offset 0x{offset:x} has a length of "
                    f"{length} bytes but only {cursor.remaining()} bytes "
                    "remain"
                )

            items.append(cursor.read_bytes(length))
        elif tag == SequenceDelimiterTag:
            if length != 0:
                default_sink(sink)(DiagnosticEvent(
                    Diagnostic.NONZERO_DELIMITER_LENGTH,
                    f"Expected 0x00000000 after delimiter, found 0x{length:x}",
                    offset=offset + 4,
                ))
            break
        else:
            raise MalformedSequence(
                f"Unexpected tag '{tag}' at offset 0x{offset:x} when parsing "
                "the encapsulated pixel data fragment items"
            )

    if not items:
        return FragmentList(b'', [])

    return FragmentList(items[0], items[1:])


def parse_item_stream(data: Buffer) -> FragmentList:
    """Return the items of an encapsulated *Pixel Data* value that was read
    as a single value.

    Parameters
    ----------
    data : bytes
        The value of the (7FE0,0010) *Pixel Data* element, starting with the
        Basic Offset Table item. The Sequence Delimiter item may or may not
        be present.

    Returns
    -------
    FragmentList
        The Basic Offset Table value and the fragments.
    """
    cursor = ByteCursor(data)
    items: List[bytes] = []
    while cursor.remaining() >= 8:
        offset = cursor.position()
        tag = TupleTag(cursor.read_tag())
        length = cursor.read_u32()
        if tag == SequenceDelimiterTag:
            break

        if tag != ItemTag or length == UNDEFINED_LENGTH:
            raise MalformedSequence(
                f"Unexpected item '{tag}' with length 0x{length:x} at offset "
                f"0x{offset:x} in the encapsulated pixel data"
            )

        if length > cursor.remaining():
            raise TruncatedStream(
                f"The item at offset 0x{offset:x} has a length of {length} "
                f"bytes but only {cursor.remaining()} bytes remain"
            )

        items.append(cursor.read_bytes(length))

    if not items:
        return FragmentList(b'', [])

    return FragmentList(items[0], items[1:])


def get_frame_offsets(offset_table: bytes) -> List[int]:
    """Return a list of the fragment offsets from the Basic Offset Table.

    **Basic Offset Table**

    For multi-frame images with more than one frame, the Basic Offset Table
    should have a value containing concatenated 32-bit unsigned integer values
    that are the byte offsets to the first byte of the Item tag of the first
    fragment of each frame as measured from the first byte of the first item
    tag following the Basic Offset Table Item.

    Parameters
    ----------
    offset_table : bytes
        The value of the Basic Offset Table item, may be empty.

    Returns
    -------
    list of int
        The byte offsets to the first fragment of each frame. Empty if the
        Basic Offset Table has no value.

    Raises
    ------
    ValueError
        If the length of the table isn't a multiple of 4 or the offsets
        aren't increasing.
    """
    length = len(offset_table)
    if length % 4:
        raise ValueError(
            "The length of the Basic Offset Table item is not a multiple of 4"
        )

    offsets = list(unpack(f"<{length // 4}L", offset_table))
    if any(b <= a for a, b in zip(offsets, offsets[1:])):
        raise ValueError("The Basic Offset Table offsets are not increasing")

    return offsets


def _fragment_starts(fragments: List[bytes]) -> Iterator[Tuple[int, bytes]]:
    """Yield the offset of each fragment's item tag from the first one."""
    position = 0
    for fragment in fragments:
        yield position, fragment
        position += len(fragment) + 8


def _ends_with_eoi(fragment: bytes) -> bool:
    # the last fragment of a frame may be padded to even length
    return fragment.rstrip(b'\x00')[-2:] == b'\xFF\xD9'


def generate_frames(
    fragments: FragmentList,
    nr_frames: Optional[int] = None,
    sink: Optional[DiagnosticSink] = None,
) -> List[bytes]:
    """Return the encapsulated frames, joining fragments where a frame was
    split over more than one item.

    Parameters
    ----------
    fragments : dataelem.FragmentList
        The parsed items of the *Pixel Data* element.
    nr_frames : int, optional
        The value of (0028,0008) *Number of Frames*, if known.
    sink : callable, optional
        Receives a diagnostic event when the frame boundaries had to be
        inferred.

    Returns
    -------
    list of bytes
        One entry per frame, in stream order.

    Raises
    ------
    FrameDecodeError
        If there are more fragments than frames and the frame boundaries
        can't be determined.
    """
    items = list(fragments.fragments)
    if not items:
        return []

    if nr_frames is None or len(items) <= nr_frames:
        return items

    sink = default_sink(sink)
    try:
        offsets = get_frame_offsets(fragments.offset_table)
    except ValueError as exc:
        sink(DiagnosticEvent(Diagnostic.FRAGMENT_GROUPING, str(exc)))
        offsets = []

    if offsets:
        frames: List[List[bytes]] = [[] for _ in offsets]
        for position, fragment in _fragment_starts(items):
            index = sum(1 for start in offsets if start <= position) - 1
            frames[max(index, 0)].append(fragment)

        return [b''.join(frame) for frame in frames]

    if nr_frames == 1:
        return [b''.join(items)]

    # No offset table: JPEG frames end with an EOI marker
    sink(DiagnosticEvent(
        Diagnostic.FRAGMENT_GROUPING,
        f"{len(items)} fragments for {nr_frames} frames and no Basic Offset "
        "Table, using the JPEG EOI marker to find the frame boundaries",
        level=logging.INFO,
    ))
    joined: List[bytes] = []
    current: List[bytes] = []
    for fragment in items:
        current.append(fragment)
        if _ends_with_eoi(fragment):
            joined.append(b''.join(current))
            current = []

    if current or len(joined) != nr_frames:
        raise FrameDecodeError(
            f"Unable to determine the frame boundaries of {len(items)} "
            f"fragments for {nr_frames} frames"
        )

    return joined

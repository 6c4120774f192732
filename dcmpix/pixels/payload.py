# Copyright 2026 dcmpix authors. See LICENSE file for details.
"""Locate the encoded pixel data of a data set."""

from typing import NamedTuple, Optional, Tuple, TYPE_CHECKING

from dcmpix.dataelem import FragmentList, ValueKind
from dcmpix.diagnostics import DiagnosticSink
from dcmpix.encaps import generate_frames, parse_item_stream
from dcmpix.errors import MissingPixelData
from dcmpix.tag import PixelDataTag

if TYPE_CHECKING:  # pragma: no cover
    from dcmpix.dataset import Dataset
    from dcmpix.uid import TransferSyntax


class PixelPayload(NamedTuple):
    """The encoded (7FE0,0010) *Pixel Data* of a data set.

    Attributes
    ----------
    is_encapsulated : bool
        ``True`` for compressed pixel data.
    data : bytes
        The native pixel data, empty if encapsulated.
    fragments : tuple of bytes
        The encapsulated fragments, excluding the Basic Offset Table.
    offset_table : bytes
        The Basic Offset Table value, may be empty.
    frames : tuple of bytes
        The encapsulated frames, after grouping fragments that belong to
        the same frame.
    """
    is_encapsulated: bool
    data: bytes = b''
    fragments: Tuple[bytes, ...] = ()
    offset_table: bytes = b''
    frames: Tuple[bytes, ...] = ()

    @property
    def nr_frames(self) -> int:
        """Return the number of encapsulated frames."""
        return len(self.frames)


def extract_pixel_payload(
    ds: "Dataset",
    transfer_syntax: "TransferSyntax",
    nr_frames: Optional[int] = None,
    sink: Optional[DiagnosticSink] = None,
) -> PixelPayload:
    """Return the encoded pixel data in `ds`.

    Parameters
    ----------
    ds : dataset.Dataset
        The data set containing the (7FE0,0010) *Pixel Data* element.
    transfer_syntax : uid.TransferSyntax
        The transfer syntax `ds` was encoded with.
    nr_frames : int, optional
        The number of frames in the pixel data, used to group fragments
        into frames.
    sink : callable, optional
        Receives a diagnostic event if the frame boundaries had to be
        inferred.

    Returns
    -------
    PixelPayload
        The native pixel data or the encapsulated frames.

    Raises
    ------
    MissingPixelData
        If there's no *Pixel Data* element or it has no value.
    """
    if PixelDataTag not in ds:
        raise MissingPixelData(
            "The data set has no (7FE0,0010) 'Pixel Data' element"
        )

    elem = ds[PixelDataTag]
    if elem.kind == ValueKind.EMPTY:
        raise MissingPixelData("The (7FE0,0010) 'Pixel Data' element is empty")

    if elem.kind == ValueKind.FRAGMENTS:
        fragments: FragmentList = elem.value
    elif transfer_syntax.is_encapsulated:
        # A defined length value that holds the item stream
        fragments = parse_item_stream(elem.value)
    else:
        return PixelPayload(False, data=elem.value)

    return PixelPayload(
        True,
        fragments=tuple(fragments.fragments),
        offset_table=fragments.offset_table,
        frames=tuple(generate_frames(fragments, nr_frames, sink)),
    )

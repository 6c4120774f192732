# Copyright 2026 dcmpix authors. See LICENSE file for details.
"""The description of an image's pixel data and a decoded frame."""

from dataclasses import dataclass
from typing import Any, Optional, TYPE_CHECKING

import numpy as np

from dcmpix.errors import InvalidImageInfo
from dcmpix.pixels.enums import PhotometricInterpretation as PI

if TYPE_CHECKING:  # pragma: no cover
    from dcmpix.dataset import Dataset


def _as_int(value: Any, name: str) -> int:
    # IS and multi-valued elements
    if isinstance(value, tuple):
        value = value[0]
    try:
        return int(value)
    except (TypeError, ValueError):
        raise InvalidImageInfo(f"'{name}' has an invalid value: {value!r}")


@dataclass(frozen=True)
class ImageInfo:
    """The *Image Pixel* module elements needed to decode pixel data.

    Attributes
    ----------
    rows : int
        (0028,0010) *Rows*.
    columns : int
        (0028,0011) *Columns*.
    samples_per_pixel : int
        (0028,0002) *Samples per Pixel*, default ``1``.
    photometric_interpretation : str
        (0028,0004) *Photometric Interpretation*, default ``'MONOCHROME2'``.
    bits_allocated : int
        (0028,0100) *Bits Allocated*.
    bits_stored : int
        (0028,0101) *Bits Stored*, default `bits_allocated`.
    high_bit : int
        (0028,0102) *High Bit*, default ``bits_stored - 1``.
    pixel_representation : int
        (0028,0103) *Pixel Representation*, ``0`` for unsigned (default) or
        ``1`` for signed.
    planar_configuration : int
        (0028,0006) *Planar Configuration*, default ``0``.
    number_of_frames : int
        (0028,0008) *Number of Frames*, default ``1``.
    """
    rows: int
    columns: int
    bits_allocated: int
    samples_per_pixel: int = 1
    photometric_interpretation: str = PI.MONOCHROME2.value
    bits_stored: Optional[int] = None
    high_bit: Optional[int] = None
    pixel_representation: int = 0
    planar_configuration: int = 0
    number_of_frames: int = 1

    def __post_init__(self) -> None:
        # Fill in the dependent defaults
        if self.bits_stored is None:
            object.__setattr__(self, 'bits_stored', self.bits_allocated)
        if self.high_bit is None:
            object.__setattr__(self, 'high_bit', self.bits_stored - 1)

        if self.rows * self.columns * self.samples_per_pixel <= 0:
            raise InvalidImageInfo(
                f"The image size is invalid: {self.rows} rows, "
                f"{self.columns} columns and {self.samples_per_pixel} "
                "samples per pixel"
            )

        if not 0 < self.bits_stored <= self.bits_allocated:
            raise InvalidImageInfo(
                f"'Bits Stored' ({self.bits_stored}) must be greater than 0 "
                f"and no more than 'Bits Allocated' ({self.bits_allocated})"
            )

        if self.pixel_representation not in (0, 1):
            raise InvalidImageInfo(
                "'Pixel Representation' must be 0 or 1, not "
                f"{self.pixel_representation}"
            )

        if self.number_of_frames < 1:
            raise InvalidImageInfo(
                "'Number of Frames' must be at least 1, not "
                f"{self.number_of_frames}"
            )

    @classmethod
    def from_dataset(cls, ds: "Dataset") -> "ImageInfo":
        """Return the :class:`ImageInfo` for the *Image Pixel* elements in
        `ds`.

        Raises
        ------
        InvalidImageInfo
            If a required element is missing or the values are inconsistent.
        """
        required = {}
        for keyword in ('Rows', 'Columns', 'BitsAllocated'):
            value = ds.get(keyword)
            if value is None:
                raise InvalidImageInfo(
                    f"The data set is missing the required '{keyword}' "
                    "element"
                )
            required[keyword] = _as_int(value, keyword)

        optional = {}
        for keyword, attr in (
            ('SamplesPerPixel', 'samples_per_pixel'),
            ('BitsStored', 'bits_stored'),
            ('HighBit', 'high_bit'),
            ('PixelRepresentation', 'pixel_representation'),
            ('PlanarConfiguration', 'planar_configuration'),
            ('NumberOfFrames', 'number_of_frames'),
        ):
            value = ds.get(keyword)
            if value is not None:
                optional[attr] = _as_int(value, keyword)

        pi = ds.get('PhotometricInterpretation')
        if isinstance(pi, tuple):
            pi = pi[0]
        if pi:
            optional['photometric_interpretation'] = pi.strip().upper()

        # Some writers use 0 for a single frame
        if optional.get('number_of_frames') == 0:
            optional['number_of_frames'] = 1

        return cls(
            rows=required['Rows'],
            columns=required['Columns'],
            bits_allocated=required['BitsAllocated'],
            **optional,
        )

    @property
    def is_signed(self) -> bool:
        return self.pixel_representation == 1

    @property
    def bytes_per_sample(self) -> int:
        """Return the number of bytes used to hold a decoded sample."""
        return 1 if self.bits_allocated <= 8 else 2

    @property
    def pixels_per_frame(self) -> int:
        return self.rows * self.columns

    @property
    def samples_per_frame(self) -> int:
        return self.rows * self.columns * self.samples_per_pixel

    @property
    def frame_length(self) -> int:
        """Return the length of a native frame in bits."""
        return self.samples_per_frame * self.bits_allocated

    @property
    def dtype(self) -> np.dtype:
        """Return the dtype of the decoded samples."""
        kind = 'i' if self.is_signed else 'u'
        return np.dtype(f"{kind}{self.bytes_per_sample}")


@dataclass(frozen=True)
class DecodedFrame:
    """The samples of a single decoded frame.

    Attributes
    ----------
    width : int
        The number of columns.
    height : int
        The number of rows.
    samples : numpy.ndarray
        The flat, row-major, pixel interleaved samples with
        ``width * height * samples_per_pixel`` entries.
    photometric_interpretation : str or None
        The color space of `samples` if it differs from the data set's
        *Photometric Interpretation*, such as ``'RGB'`` for a JPEG frame
        that was converted from YCbCr while decoding.
    """
    width: int
    height: int
    samples: np.ndarray
    photometric_interpretation: Optional[str] = None

    @property
    def samples_per_pixel(self) -> int:
        return len(self.samples) // (self.width * self.height)

    def as_array(self) -> np.ndarray:
        """Return the samples shaped as (rows, columns) or
        (rows, columns, samples)."""
        spp = self.samples_per_pixel
        if spp == 1:
            return self.samples.reshape(self.height, self.width)

        return self.samples.reshape(self.height, self.width, spp)

# Copyright 2026 dcmpix authors. See LICENSE file for details.
"""Enumerated values used when converting pixel data to RGBA."""

from enum import Enum, unique


@unique
class PhotometricInterpretation(str, Enum):
    """Values for (0028,0004) *Photometric Interpretation* that can be
    converted to RGBA."""

    # Part 3, C.7.6.3.1.2
    MONOCHROME1 = "MONOCHROME1"
    MONOCHROME2 = "MONOCHROME2"
    PALETTE_COLOR = "PALETTE COLOR"
    RGB = "RGB"
    YBR_FULL = "YBR_FULL"
    YBR_FULL_422 = "YBR_FULL_422"
    YBR_ICT = "YBR_ICT"
    YBR_RCT = "YBR_RCT"
    YBR_PARTIAL_422 = "YBR_PARTIAL_422"  # Retired
    YBR_PARTIAL_420 = "YBR_PARTIAL_420"  # Retired

    def __str__(self) -> str:
        return str.__str__(self)

    @property
    def is_monochrome(self) -> bool:
        return self in (
            PhotometricInterpretation.MONOCHROME1,
            PhotometricInterpretation.MONOCHROME2,
        )

    @property
    def is_ybr(self) -> bool:
        return self.value.startswith("YBR")

    @property
    def samples_per_pixel(self) -> int:
        """Return the number of samples a pixel has in this color space."""
        if self.is_monochrome or self.value == "PALETTE COLOR":
            return 1

        return 3

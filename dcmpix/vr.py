# Copyright 2026 dcmpix authors. See LICENSE file for details.
"""Value Representation (VR) configuration."""

from enum import Enum, unique
from typing import Optional

from dcmpix._dicom_dict import DicomDictionary


@unique
class VR(str, Enum):
    """DICOM Data Element's Value Representation (VR)"""
    # Standard VRs from Table 6.2-1 in Part 5
    AE = "AE"
    AS = "AS"
    AT = "AT"
    CS = "CS"
    DA = "DA"
    DS = "DS"
    DT = "DT"
    FD = "FD"
    FL = "FL"
    IS = "IS"
    LO = "LO"
    LT = "LT"
    OB = "OB"
    OD = "OD"
    OF = "OF"
    OL = "OL"
    OW = "OW"
    OV = "OV"
    PN = "PN"
    SH = "SH"
    SL = "SL"
    SQ = "SQ"
    SS = "SS"
    ST = "ST"
    SV = "SV"
    TM = "TM"
    UC = "UC"
    UI = "UI"
    UL = "UL"
    UN = "UN"
    UR = "UR"
    US = "US"
    UT = "UT"
    UV = "UV"
    # Ambiguous VRs from Tables 6-1, 7-1 and 8-1 in Part 6
    US_SS_OW = "US or SS or OW"
    US_SS = "US or SS"
    US_OW = "US or OW"
    OB_OW = "OB or OW"

    def __str__(self) -> str:
        return str.__str__(self)


AMBIGUOUS_VR = {vr for vr in VR if " or " in vr}
STANDARD_VR = set(VR) - AMBIGUOUS_VR

# Every VR used by the data dictionary must be known
_unknown = {entry[0] for entry in DicomDictionary.values()} - set(VR)
if _unknown - {"NONE"}:
    raise RuntimeError(
        f"Unknown dictionary VR(s): {', '.join(sorted(_unknown))}"
    )


# Explicit VRs with a 16-bit length field, Part 5 Table 7.1-2. The
# remaining explicit VRs have 2 reserved bytes and a 32-bit length
EXPLICIT_VR_LENGTH_16 = {
    VR.AE, VR.AS, VR.AT, VR.CS, VR.DA, VR.DS, VR.DT, VR.FL, VR.FD, VR.IS,
    VR.LO, VR.LT, VR.PN, VR.SH, VR.SL, VR.SS, VR.ST, VR.TM, VR.UI, VR.UL,
    VR.US,
}
EXPLICIT_VR_LENGTH_32 = STANDARD_VR - EXPLICIT_VR_LENGTH_16


def resolve_ambiguous_VR(
    VR_: str, tag: int, pixel_representation: Optional[int] = None
) -> str:
    """Return a single VR for a dictionary VR like ``'US or SS'``.

    Parameters
    ----------
    VR_ : str
        The VR from the data dictionary.
    tag : int
        The element's tag.
    pixel_representation : int, optional
        The value of (0028,0103) *Pixel Representation* in the data set
        being parsed, if already read.

    Returns
    -------
    str
        For ``'US or SS'`` this is ``'SS'`` when the pixel data is signed and
        ``'US'`` otherwise. ``'OB or OW'`` gives ``'OW'`` and
        ``'US or OW'``/``'US or SS or OW'`` give ``'US'``, except for
        (7FE0,0010) *Pixel Data* which is always ``'OW'``. Non-ambiguous
        VRs are returned unchanged.
    """
    if VR_ not in AMBIGUOUS_VR:
        return VR_

    if VR_ == VR.US_SS:
        return 'SS' if pixel_representation == 1 else 'US'

    if VR_ == VR.OB_OW or tag == 0x7FE00010:
        return 'OW'

    return 'US'

# Copyright 2026 dcmpix authors. See LICENSE file for details.
"""Pixel data processing functions, turning decoded samples into RGBA."""

from typing import Any, Tuple, TYPE_CHECKING

import numpy as np

from dcmpix import config
from dcmpix.dataelem import ValueKind
from dcmpix.errors import InvalidImageInfo, MissingPaletteLUT
from dcmpix.jpeg.baseline import ycbcr_to_rgb
from dcmpix.pixels.enums import PhotometricInterpretation as PI
from dcmpix.pixels.imageinfo import DecodedFrame, ImageInfo

if TYPE_CHECKING:  # pragma: no cover
    from dcmpix.dataelem import DataElement
    from dcmpix.dataset import Dataset


_PALETTE = {
    'red': ('RedPaletteColorLookupTableDescriptor',
            'RedPaletteColorLookupTableData'),
    'green': ('GreenPaletteColorLookupTableDescriptor',
              'GreenPaletteColorLookupTableData'),
    'blue': ('BluePaletteColorLookupTableDescriptor',
             'BluePaletteColorLookupTableData'),
}


def _select(value: Any, index: int) -> float:
    """Return item `index` of a multi-valued element value."""
    if isinstance(value, (tuple, list)):
        return float(value[min(index, len(value) - 1)])

    return float(value)


def _lut_descriptor(value: Any) -> Tuple[int, int, int]:
    """Return the (entries, first mapped value, bits) of a LUT descriptor."""
    if not isinstance(value, (tuple, list)) or len(value) != 3:
        raise InvalidImageInfo(
            f"A LUT descriptor must have 3 values, got '{value}'"
        )

    nr_entries, first_map, nr_bits = (int(v) for v in value)
    # 0 is used for 2**16 entries
    return nr_entries or 2**16, first_map, nr_bits


def _lut_data(
    elem: "DataElement", nr_entries: int, is_little_endian: bool
) -> np.ndarray:
    """Return the entries of a LUT data element as an array."""
    if elem.kind == ValueKind.BYTES:
        data = elem.value
        if len(data) == nr_entries:
            # 8-bit entries packed into an OW value
            return np.frombuffer(data, dtype='u1')

        dtype = '<u2' if is_little_endian else '>u2'
        return np.frombuffer(data[:len(data) - len(data) % 2], dtype=dtype)

    if elem.kind in (ValueKind.UNSIGNED, ValueKind.SIGNED):
        value = elem.value
        if not isinstance(value, tuple):
            value = (value, )
        return np.asarray(value, dtype='i8')

    return np.zeros(0, dtype='u2')


def invert_monochrome(arr: np.ndarray, bits_stored: int) -> np.ndarray:
    """Return MONOCHROME1 samples inverted so that higher values are
    brighter, ``(2**bits_stored - 1) - value``."""
    return ((1 << bits_stored) - 1) - arr.astype(np.float64)


def scale_to_8bit(arr: np.ndarray, bits: int) -> np.ndarray:
    """Return `arr` linearly scaled from `bits` bits to ``uint8``."""
    if bits == 8 and arr.dtype == np.uint8:
        return arr

    max_in = (1 << bits) - 1
    out = np.round(arr.astype(np.float64) / max_in * 255)
    return np.clip(out, 0, 255).astype(np.uint8)


def apply_modality_lut(arr: np.ndarray, ds: "Dataset") -> np.ndarray:
    """Apply the rescale operation in `ds` to `arr`.

    Parameters
    ----------
    arr : numpy.ndarray
        The samples to rescale.
    ds : dataset.Dataset
        A data set that may contain (0028,1052) *Rescale Intercept* and
        (0028,1053) *Rescale Slope*.

    Returns
    -------
    numpy.ndarray
        ``arr * slope + intercept`` as ``float64``, or `arr` unchanged if
        neither element is present.
    """
    slope = ds.get('RescaleSlope')
    intercept = ds.get('RescaleIntercept')
    if slope is None and intercept is None:
        return arr

    slope = 1.0 if slope is None else _select(slope, 0)
    intercept = 0.0 if intercept is None else _select(intercept, 0)

    return arr.astype(np.float64) * slope + intercept


def linear_window(
    arr: np.ndarray, center: float, width: float
) -> np.ndarray:
    """Return `arr` mapped to ``uint8`` by a linear VOI window.

    Values at or below ``center - 0.5 - (width - 1) / 2`` give 0, values above
    ``center - 0.5 + (width - 1) / 2`` give 255 and values in between are
    scaled linearly. `width` is floored at 1.

    References
    ----------
    * DICOM Standard, Part 3, :dcm:`Annex C.11.2.1.2.1
      <part03/sect_C.11.2.html#sect_C.11.2.1.2.1>`
    """
    width = max(width, 1)
    y_min = center - 0.5 - (width - 1) / 2
    y_max = center - 0.5 + (width - 1) / 2

    values = arr.astype(np.float64)
    scaled = np.round((values - y_min) / max(y_max - y_min, 1) * 255)
    out = np.where(
        values <= y_min, 0, np.where(values > y_max, 255, scaled)
    )

    return np.clip(out, 0, 255).astype(np.uint8)


def apply_windowing(
    arr: np.ndarray, ds: "Dataset", index: int = 0
) -> np.ndarray:
    """Apply the (0028,1050) *Window Center* and (0028,1051) *Window
    Width* in `ds` to `arr`.

    Parameters
    ----------
    arr : numpy.ndarray
        The monochrome samples, after any rescale operation.
    ds : dataset.Dataset
        The data set containing the window elements.
    index : int, optional
        When the elements have multiple values, the index of the window to
        use (default ``0``).

    Returns
    -------
    numpy.ndarray
        The ``uint8`` windowed samples. If the window elements are absent
        then the range of values in `arr` is used as the window.
    """
    center = ds.get('WindowCenter')
    width = ds.get('WindowWidth')
    if center is not None and width is not None:
        return linear_window(
            arr, _select(center, index), _select(width, index)
        )

    if arr.size == 0:
        return np.zeros(0, dtype=np.uint8)

    # Map the smallest value to 0 and the largest to 255
    y_min = float(arr.min())
    y_max = float(arr.max())
    width = y_max - y_min + 1
    return linear_window(arr, (y_min + y_max) / 2 + 0.5, width)


def apply_voi_lut(
    arr: np.ndarray, ds: "Dataset", index: int = 0
) -> np.ndarray:
    """Apply the (0028,3010) *VOI LUT Sequence* in `ds` to `arr`.

    Parameters
    ----------
    arr : numpy.ndarray
        The monochrome samples, after any rescale operation.
    ds : dataset.Dataset
        The data set containing the *VOI LUT Sequence*.
    index : int, optional
        The index of the sequence item to use (default ``0``).

    Returns
    -------
    numpy.ndarray
        The ``uint8`` samples. Values outside the LUT give 0 and the LUT
        entries are scaled from the descriptor's bit depth to 8 bits.
    """
    items = ds.get('VOILUTSequence')
    if not items:
        raise InvalidImageInfo("The data set has no 'VOI LUT Sequence'")

    item = items[min(index, len(items) - 1)]
    nr_entries, first_map, nr_bits = _lut_descriptor(
        item.get('LUTDescriptor')
    )
    if 'LUTData' not in item:
        raise InvalidImageInfo("The 'VOI LUT Sequence' item has no 'LUT Data'")

    lut = _lut_data(
        item['LUTData'], nr_entries, item.is_little_endian is not False
    )[:nr_entries]

    idx = np.round(arr.astype(np.float64) - first_map).astype(np.int64)
    valid = (idx >= 0) & (idx < len(lut))
    out = np.zeros(idx.shape, dtype=np.float64)
    out[valid] = lut[idx[valid]]

    return scale_to_8bit(out, nr_bits or 16)


def apply_color_lut(arr: np.ndarray, ds: "Dataset") -> np.ndarray:
    """Apply the *Palette Color Lookup Tables* in `ds` to `arr`.

    Parameters
    ----------
    arr : numpy.ndarray
        The palette indices.
    ds : dataset.Dataset
        The data set containing the red, green and blue *Palette Color
        Lookup Table Descriptor* and *Palette Color Lookup Table Data*.

    Returns
    -------
    numpy.ndarray
        The ``uint8`` RGB values, shaped (len(arr), 3). Indices are clamped
        to the table and entries wider than 8 bits are shifted to 8 bits.

    Raises
    ------
    MissingPaletteLUT
        If any descriptor or data element is missing.
    """
    is_little_endian = ds.is_little_endian is not False
    out = np.empty((arr.size, 3), dtype=np.uint8)
    for ii, (color, (desc_kw, data_kw)) in enumerate(_PALETTE.items()):
        if ds.get(desc_kw) is None or ds.get(data_kw) is None:
            raise MissingPaletteLUT(
                f"Unable to apply the palette color LUT as the {color} "
                "descriptor or data element is missing"
            )

        nr_entries, first_map, nr_bits = _lut_descriptor(ds.get(desc_kw))
        lut = _lut_data(ds[data_kw], nr_entries, is_little_endian)
        if lut.size == 0:
            raise MissingPaletteLUT(f"The {color} palette color LUT is empty")

        lut = lut[:nr_entries].astype(np.int64)
        if nr_bits > 8:
            lut >>= nr_bits - 8

        idx = np.clip(arr.astype(np.int64) - first_map, 0, len(lut) - 1)
        out[:, ii] = np.clip(lut[idx], 0, 255)

    return out


def convert_ybr_to_rgb(arr: np.ndarray) -> np.ndarray:
    """Return full-range YCbCr samples converted to ``uint8`` RGB.

    Parameters
    ----------
    arr : numpy.ndarray
        The samples with the Y, Cb and Cr components in the last axis.

    Returns
    -------
    numpy.ndarray
        The RGB samples, with the same shape as `arr`.

    References
    ----------
    * DICOM Standard, Part 3, :dcm:`Annex C.7.6.3.1.2
      <part03/sect_C.7.6.3.html#sect_C.7.6.3.1.2>`
    """
    return ycbcr_to_rgb(arr)


def _monochrome(
    samples: np.ndarray,
    info: ImageInfo,
    ds: "Dataset",
    index: int,
) -> np.ndarray:
    """Return the ``uint8`` gray levels for monochrome samples."""
    arr = samples
    if info.photometric_interpretation == PI.MONOCHROME1:
        arr = invert_monochrome(samples, info.bits_stored)

    if config.apply_rescale:
        arr = apply_modality_lut(arr, ds)

    has_window = 'WindowCenter' in ds and 'WindowWidth' in ds
    if ds.get('VOILUTSequence') and (config.prefer_voi_lut or not has_window):
        return apply_voi_lut(arr, ds, index)

    return apply_windowing(arr, ds, index)


def to_rgba(
    frame: DecodedFrame,
    info: ImageInfo,
    ds: "Dataset",
    index: int = 0,
) -> np.ndarray:
    """Return a decoded frame converted to 8-bit RGBA.

    Parameters
    ----------
    frame : DecodedFrame
        The decoded samples.
    info : ImageInfo
        The image description of the pixel data.
    ds : dataset.Dataset
        The data set the frame belongs to, used for the windowing, VOI LUT,
        rescale and palette elements.
    index : int, optional
        The index of the window or VOI LUT to use when there are
        alternatives (default ``0``).

    Returns
    -------
    numpy.ndarray
        The flat, row-major ``uint8`` RGBA values, ``rows * columns * 4``
        long. Alpha is always 255.

    Raises
    ------
    MissingPaletteLUT
        If the *Photometric Interpretation* is ``PALETTE COLOR`` and the
        lookup tables are missing.
    InvalidImageInfo
        If the *Photometric Interpretation* isn't supported or doesn't match
        the number of samples.
    """
    value = frame.photometric_interpretation or info.photometric_interpretation
    try:
        pi = PI(value)
    except ValueError:
        raise InvalidImageInfo(f"Unable to convert a '{value}' image to RGBA")

    spp = frame.samples_per_pixel
    if spp != pi.samples_per_pixel:
        raise InvalidImageInfo(
            f"A '{pi}' image must have {pi.samples_per_pixel} sample(s) per "
            f"pixel, not {spp}"
        )

    nr_pixels = frame.width * frame.height
    samples = frame.samples[:nr_pixels * spp]
    rgba = np.full((nr_pixels, 4), 255, dtype=np.uint8)
    if pi == PI.PALETTE_COLOR:
        rgba[:, :3] = apply_color_lut(samples, ds)
    elif pi.is_monochrome:
        gray = _monochrome(samples, info, ds, index)
        rgba[:, 0] = rgba[:, 1] = rgba[:, 2] = gray
    elif pi.is_ybr:
        rgba[:, :3] = convert_ybr_to_rgb(samples.reshape(nr_pixels, 3))
    else:
        bits = 8 if frame.photometric_interpretation else info.bits_stored
        rgba[:, :3] = scale_to_8bit(samples.reshape(nr_pixels, 3), bits)

    return rgba.ravel()

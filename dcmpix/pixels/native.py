# Copyright 2026 dcmpix authors. See LICENSE file for details.
"""Unpack native (uncompressed) pixel data into sample arrays.

**Supported Bits Allocated**

+---------+----------------------------------------------------+
| Bits    | Sample layout                                      |
+=========+====================================================+
| 8       | One byte per sample                                |
+---------+----------------------------------------------------+
| 10      | Four samples in every 5 bytes, most significant    |
|         | bit first                                          |
+---------+----------------------------------------------------+
| 12      | Two samples in every 3 bytes, most significant     |
|         | bit first                                          |
+---------+----------------------------------------------------+
| 16      | Two bytes per sample in the transfer syntax's byte |
|         | order                                              |
+---------+----------------------------------------------------+
"""

import numpy as np

from dcmpix.errors import (
    MissingPixelData, TruncatedStream, UnsupportedBitDepth
)
from dcmpix.filebase import Buffer
from dcmpix.pixels.imageinfo import DecodedFrame, ImageInfo


def unpack_8bit(data: Buffer, signed: bool = False) -> np.ndarray:
    """Return 8-bit samples as ``uint8``, or ``int8`` if `signed`."""
    return np.frombuffer(data, dtype='i1' if signed else 'u1')


def unpack_16bit(
    data: Buffer, is_little_endian: bool = True, signed: bool = False
) -> np.ndarray:
    """Return 16-bit samples in native byte order.

    A trailing odd byte is ignored.
    """
    nr_bytes = len(data) - len(data) % 2
    byteorder = "<" if is_little_endian else ">"
    dtype = np.dtype(f"{byteorder}{'i' if signed else 'u'}2")
    arr = np.frombuffer(data[:nr_bytes], dtype=dtype)
    return arr.astype(dtype.newbyteorder('='))


def unpack_12bit(data: Buffer) -> np.ndarray:
    """Return the ``uint16`` samples of packed 12-bit data.

    Every 3 bytes ``b0 b1 b2`` hold two samples::

        s0 = (b0 << 4) | (b1 >> 4)
        s1 = ((b1 & 0x0F) << 8) | b2

    Incomplete trailing groups are ignored, giving
    ``floor(len(data) / 3) * 2`` samples.
    """
    nr_groups = len(data) // 3
    arr = np.frombuffer(data, dtype='u1', count=nr_groups * 3)
    arr = arr.reshape(-1, 3).astype('u2')

    out = np.empty((nr_groups, 2), dtype='u2')
    out[:, 0] = (arr[:, 0] << 4) | (arr[:, 1] >> 4)
    out[:, 1] = ((arr[:, 1] & 0x0F) << 8) | arr[:, 2]
    return out.ravel()


def unpack_10bit(data: Buffer) -> np.ndarray:
    """Return the ``uint16`` samples of packed 10-bit data.

    Samples are packed most significant bit first, so every 5 bytes hold
    four samples. The result has ``floor(len(data) * 8 / 10)`` samples.
    """
    nr_samples = len(data) * 8 // 10
    arr = np.frombuffer(data, dtype='u1')
    # Pad to a whole number of 40-bit groups
    padding = -len(arr) % 5
    if padding:
        arr = np.concatenate([arr, np.zeros(padding, dtype='u1')])

    groups = arr.reshape(-1, 5).astype('u8')
    packed = (
        (groups[:, 0] << 32) | (groups[:, 1] << 24) | (groups[:, 2] << 16)
        | (groups[:, 3] << 8) | groups[:, 4]
    )
    shifts = np.array([30, 20, 10, 0], dtype='u8')
    out = (packed[:, None] >> shifts) & 0x3FF
    return out.ravel()[:nr_samples].astype('u2')


def mask_unused_bits(arr: np.ndarray, info: ImageInfo) -> np.ndarray:
    """Return `arr` with the bits above *Bits Stored* cleared or, for
    signed data, set to the sign bit.

    Parameters
    ----------
    arr : numpy.ndarray
        The unpacked samples.
    info : ImageInfo
        The image description.

    Returns
    -------
    numpy.ndarray
        The samples with ``info.dtype``.
    """
    bits_stored = info.bits_stored
    container = arr.dtype.itemsize * 8
    if bits_stored >= container and arr.dtype == info.dtype:
        return arr

    mask = (1 << bits_stored) - 1
    values = arr.astype('i8') & mask
    if info.is_signed:
        sign_bit = 1 << (bits_stored - 1)
        values = np.where(
            values & sign_bit, values - (1 << bits_stored), values
        )

    return values.astype(info.dtype)


def interleave_planes(arr: np.ndarray, samples_per_pixel: int) -> np.ndarray:
    """Return planar configuration 1 samples (R1R2...G1G2...B1B2...)
    reordered to planar configuration 0 (R1G1B1R2G2B2...)."""
    if samples_per_pixel == 1:
        return arr

    return arr.reshape(samples_per_pixel, -1).T.ravel()


_UNPACKERS = {10: unpack_10bit, 12: unpack_12bit}


def decode_native_frame(
    data: Buffer, index: int, info: ImageInfo, is_little_endian: bool = True
) -> DecodedFrame:
    """Return the samples of a single frame of native pixel data.

    Parameters
    ----------
    data : bytes
        The value of the (7FE0,0010) *Pixel Data* element.
    index : int
        The index of the frame, starting at ``0``.
    info : ImageInfo
        The image description.
    is_little_endian : bool, optional
        The byte order of 16-bit samples, default ``True``.

    Returns
    -------
    DecodedFrame
        The frame's samples, pixel interleaved.

    Raises
    ------
    MissingPixelData
        If `index` isn't a valid frame index.
    TruncatedStream
        If the pixel data is too short to contain the frame.
    UnsupportedBitDepth
        If *Bits Allocated* isn't 8, 10, 12 or 16.
    """
    bits = info.bits_allocated
    if bits not in (8, 10, 12, 16):
        raise UnsupportedBitDepth(
            f"Unable to decode native pixel data with a 'Bits Allocated' "
            f"value of {bits}"
        )

    if not 0 <= index < info.number_of_frames:
        raise MissingPixelData(
            f"There is no frame {index}, the pixel data has "
            f"{info.number_of_frames} frame(s)"
        )

    nr_samples = info.samples_per_frame
    end_bit = (index + 1) * info.frame_length
    nr_bytes = -(-end_bit // 8)
    if len(data) < nr_bytes:
        raise TruncatedStream(
            f"The pixel data is {len(data)} bytes long but {nr_bytes} bytes "
            f"are needed to decode frame {index}"
        )

    if bits == 8:
        start = index * nr_samples
        arr = unpack_8bit(data[start:start + nr_samples], info.is_signed)
    elif bits == 16:
        start = index * nr_samples * 2
        arr = unpack_16bit(
            data[start:start + nr_samples * 2], is_little_endian,
            info.is_signed
        )
    else:
        # Frames may start part way through a byte, and an odd number of
        #   12-bit samples ends part way through a 3 byte group
        chunk = bytes(data[:nr_bytes])
        if bits == 12:
            chunk += b"\x00" * (-nr_bytes % 3)
        start = index * nr_samples
        arr = _UNPACKERS[bits](chunk)[start:start + nr_samples]

    arr = mask_unused_bits(arr, info)
    if info.planar_configuration == 1:
        arr = interleave_planes(arr, info.samples_per_pixel)

    return DecodedFrame(info.columns, info.rows, arr)

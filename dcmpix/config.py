# Copyright 2026 dcmpix authors. See LICENSE file for details.
"""dcmpix configuration options."""

# doc strings following items are picked up by sphinx for documentation

import logging


enforce_valid_values = False
"""Raise exceptions for values that cannot be decoded for their VR.

If ``False`` (default) an element whose value does not match its VR is kept
with an empty value and a diagnostic event is reported instead.
"""

rle_segment_order = '>'
"""The order of the byte segments of a multi-byte RLE sample.

``'>'`` (default) for the most significant byte first, as required by
the DICOM Standard, Part 5, Annex G. ``'<'`` for data written by
non-conformant encoders that store the least significant byte first.
"""

apply_rescale = True
"""Apply the Modality LUT (Rescale Slope and Intercept) to monochrome
images before the VOI LUT or windowing operation.

Default ``True``.
"""

prefer_voi_lut = True
"""If a dataset contains both a *VOI LUT Sequence* and *Window Center* /
*Window Width* then use the LUT. ``False`` to use windowing instead.

Default ``True``.
"""

debugging: bool
"""Set by :func:`~dcmpix.config.debug`. When ``True`` every element read
is logged to the ``'dcmpix'`` logger."""

# Logging system and debug function to change logging level
logger = logging.getLogger('dcmpix')
logger.addHandler(logging.NullHandler())


def debug(debug_on=True, default_handler=True):
    """Turn on/off debugging of DICOM parsing and pixel decoding.

    When debugging is on, the buffer offset and details about the elements
    read at that offset are logged to the 'dcmpix' logger using Python's
    :mod:`logging` module.

    Parameters
    ----------
    debug_on : bool, optional
        If ``True`` (default) then turn on debugging, ``False`` to turn off.
    default_handler : bool, optional
        If ``True`` (default) then use :class:`logging.StreamHandler` as the
        handler for log messages.
    """
    global logger, debugging

    if default_handler:
        handler = logging.StreamHandler()
        formatter = logging.Formatter("%(message)s")
        handler.setFormatter(formatter)
        logger.addHandler(handler)

    if debug_on:
        logger.setLevel(logging.DEBUG)
        debugging = True
    else:
        logger.setLevel(logging.WARNING)
        debugging = False


# force level=WARNING, in case logging default is set differently
debug(False, False)

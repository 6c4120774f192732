# Copyright 2026 dcmpix authors. See LICENSE file for details.
"""dcmpix package -- parse DICOM data sets and decode their pixel data.

-----------
Quick Start
-----------

1. Read a DICOM file and look at its elements::

    from dcmpix import dcmread
    with open("file1.dcm", "rb") as f:
        ds = dcmread(f.read())
    print(ds.PatientName)

2. Decode a frame of pixel data and convert it to 8-bit RGBA::

    from dcmpix.pixels import render_frame
    rgba = render_frame(ds, 0)

3. Collect the problems found in malformed files instead of logging them::

    from dcmpix.diagnostics import CollectingSink
    sink = CollectingSink()
    ds = dcmread(data, sink=sink)

"""

from dcmpix import config
from dcmpix.dataelem import DataElement
from dcmpix.dataset import Dataset, FileDataset
from dcmpix.filereader import dcmread
from dcmpix.tag import Tag

from ._version import (
    __version__,
    __version_info__,
    __dicom_version__,
)

__all__ = [
    "DataElement",
    "Dataset",
    "FileDataset",
    "Tag",
    "config",
    "dcmread",
    "__version__",
    "__version_info__",
    "__dicom_version__",
]

"""Pure python package for DICOM pixel data decoding."""
import re
from typing import cast, Match


__version__: str = '0.4.0'

result = cast(Match[str], re.match(r'(\d+\.\d+\.\d+).*', __version__))
__version_info__ = tuple(result.group(1).split('.'))


# DICOM Standard version used for _dicom_dict and the transfer syntax table
__dicom_version__: str = '2021d'

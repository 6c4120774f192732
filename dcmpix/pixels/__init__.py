# Copyright 2026 dcmpix authors. See LICENSE file for details.

from dcmpix.pixels.decoder import decode_frame, iter_frames, render_frame
from dcmpix.pixels.imageinfo import DecodedFrame, ImageInfo
from dcmpix.pixels.processing import to_rgba

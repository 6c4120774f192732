# Copyright 2026 dcmpix authors. See LICENSE file for details.
"""Baseline JPEG (ISO/IEC 10918-1, Process 1) support."""

from dcmpix.jpeg.baseline import decode_baseline
from dcmpix.jpeg.huffman import HuffmanTable, build_huffman_table
from dcmpix.jpeg.jpeg10918 import (
    ComponentSpec, JPEGHeader, QuantizationTable, ScanComponent, debug_jpeg,
    parse_jpeg_header
)

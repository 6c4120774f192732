# Copyright 2026 dcmpix authors. See LICENSE file for details.
"""Fixtures used in different tests."""

import pytest

from dcmpix import config
from dcmpix.diagnostics import CollectingSink


@pytest.fixture
def enforce_valid_values():
    value = config.enforce_valid_values
    config.enforce_valid_values = True
    yield
    config.enforce_valid_values = value


@pytest.fixture
def lsb_first_rle():
    value = config.rle_segment_order
    config.rle_segment_order = '<'
    yield
    config.rle_segment_order = value


@pytest.fixture
def no_rescale():
    value = config.apply_rescale
    config.apply_rescale = False
    yield
    config.apply_rescale = value


@pytest.fixture
def prefer_windowing():
    value = config.prefer_voi_lut
    config.prefer_voi_lut = False
    yield
    config.prefer_voi_lut = value


@pytest.fixture
def debugging():
    config.debug(True, default_handler=False)
    yield
    config.debug(False, default_handler=False)


@pytest.fixture
def sink():
    return CollectingSink()

# SPDX-FileCopyrightText: 2020 Lukas Schrangl <lukas.schrangl@tuwien.ac.at>
#
# SPDX-License-Identifier: BSD-3-Clause

import numpy as np
import pytest

from nonmax import window
from nonmax.exceptions import InvalidConfiguration


def test_square():
    """window.SquareWindow"""
    np.testing.assert_array_equal(window.SquareWindow(1),
                                  np.ones((3, 3), dtype=bool))
    np.testing.assert_array_equal(window.SquareWindow(0), [[True]])


def test_circle():
    """window.CircleWindow"""
    e = [[False, False, True, False, False],
         [False, True, True, True, False],
         [True, True, True, True, True],
         [False, True, True, True, False],
         [False, False, True, False, False]]
    np.testing.assert_array_equal(window.CircleWindow(2), e)


def test_footprint():
    """window.window_footprint"""
    np.testing.assert_array_equal(window.window_footprint("circle", 3),
                                  window.CircleWindow(3))
    np.testing.assert_array_equal(window.window_footprint("square", 2),
                                  window.SquareWindow(2))
    with pytest.raises(InvalidConfiguration):
        window.window_footprint("triangle", 2)


def test_raster_before():
    """window.raster_before"""
    np.testing.assert_array_equal(
        window.raster_before(window.SquareWindow(1)),
        [[True, True, True], [True, False, False], [False, False, False]])
    np.testing.assert_array_equal(
        window.raster_before(window.CircleWindow(2)),
        [[False, False, True, False, False],
         [False, True, True, True, False],
         [True, True, False, False, False],
         [False, False, False, False, False],
         [False, False, False, False, False]])
    np.testing.assert_array_equal(
        window.raster_before(window.SquareWindow(0)), [[False]])

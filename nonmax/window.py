# SPDX-FileCopyrightText: 2020 Lukas Schrangl <lukas.schrangl@tuwien.ac.at>
#
# SPDX-License-Identifier: BSD-3-Clause

"""Comparison windows for local maximum search

A window is a boolean array of shape ``(2 * radius + 1, 2 * radius + 1)``
whose center corresponds to the pixel under test. All pixels where the
window is `True` (except for the center) are competitors of the tested
pixel.
"""
import numpy as np

from .exceptions import InvalidConfiguration


class SquareWindow(np.ndarray):
    """Boolean array representing a square comparison window

    True for all offsets :math:`x, y` with :math:`|x| <= r` and
    :math:`|y| <= r`.

    Examples
    --------
    >>> SquareWindow(1)
    array([[ True,  True,  True],
           [ True,  True,  True],
           [ True,  True,  True]])
    """
    def __new__(cls, radius: int) -> np.ndarray:
        """Parameters
        ----------
        radius
            Half width of the window. The shape of the created array is
            ``(2*radius+1, 2*radius+1)``.
        """
        return np.ones((2 * radius + 1,) * 2, dtype=bool)


class CircleWindow(np.ndarray):
    """Boolean array representing a circular comparison window

    True for all offsets :math:`x, y` where :math:`x^2 + y^2 <= r^2`.

    Examples
    --------
    >>> CircleWindow(2)
    array([[False, False,  True, False, False],
           [False,  True,  True,  True, False],
           [ True,  True,  True,  True,  True],
           [False,  True,  True,  True, False],
           [False, False,  True, False, False]])
    """
    def __new__(cls, radius: int) -> np.ndarray:
        """Parameters
        ----------
        radius
            Circle radius. The shape of the created array is
            ``(2*radius+1, 2*radius+1)``.
        """
        obj = np.arange(-radius, radius+1)**2
        return (obj[np.newaxis, :] + obj[:, np.newaxis]) <= radius**2


windows = {"square": SquareWindow, "circle": CircleWindow}
"""Map of window names to window classes"""


def window_footprint(kind: str, radius: int) -> np.ndarray:
    """Create a comparison window by name

    Parameters
    ----------
    kind
        One of the keys of :py:data:`windows`, i.e. "square" or "circle".
    radius
        Half width of the window

    Returns
    -------
    Boolean array of shape ``(2*radius+1, 2*radius+1)``
    """
    try:
        cls = windows[kind]
    except KeyError:
        raise InvalidConfiguration(f"Unknown window: {kind}")
    return cls(radius)


def raster_before(footprint: np.ndarray) -> np.ndarray:
    """Mark window entries which precede the center in raster order

    Competitors with the same value as the tested pixel only beat it if
    they come first in raster order (row by row, left to right).

    Parameters
    ----------
    footprint
        Comparison window

    Returns
    -------
    Boolean array of the same shape as `footprint`. True for all entries
    of `footprint` that are either in a row above the center or left of
    the center in the same row.
    """
    r = footprint.shape[0] // 2
    before = np.zeros_like(footprint, dtype=bool)
    before[:r, :] = True
    before[r, :r] = True
    return before & footprint

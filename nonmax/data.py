# SPDX-FileCopyrightText: 2020 Lukas Schrangl <lukas.schrangl@tuwien.ac.at>
#
# SPDX-License-Identifier: BSD-3-Clause

"""Data structures passed to and returned by the extractors

:py:class:`IntensityMap` holds the per-pixel feature intensity (e.g. a corner
response) and :py:class:`PointSet` holds pixel coordinates, either candidate
locations or extracted features.

Attributes
----------
SENTINEL : numpy.float32
    Intensity value marking pixels which are to be ignored. Setting found
    features to this value (see :py:meth:`IntensityMap.suppress`) excludes
    them from subsequent extraction passes.
"""
import logging

import numpy as np
import pandas as pd

from . import config
from .exceptions import OutOfBounds, ResourceExhausted


_logger = logging.getLogger(__name__)

SENTINEL = np.finfo(np.float32).max


class IntensityMap(object):
    """2D feature intensity image

    Pixels are addressed by ``(x, y)`` coordinates, i.e. ``imap[x, y]`` is
    ``imap.data[y, x]``. A pixel is valid unless its value is
    :py:data:`SENTINEL` or it is masked out by :py:attr:`mask`. Invalid
    pixels are neither reported as features nor compete with their
    neighbors.

    Examples
    --------
    >>> imap = IntensityMap(np.zeros((4, 5)))
    >>> imap.width, imap.height
    (5, 4)
    >>> imap[3, 1] = 2.
    >>> imap.data[1, 3]
    2.0
    """
    def __init__(self, data, mask=None):
        """Parameters
        ----------
        data : array-like
            Intensity values. This is converted to ``numpy.float32``. If it
            is already a float32 array, no copy is made so that changes by
            the caller are reflected. If it is a writable float64 array,
            :py:meth:`suppress` also writes to it.
        mask : array-like of bool or None, optional
            If given, only pixels where `mask` is True are valid. Defaults
            to None.
        """
        orig = data
        data = np.asarray(data, dtype=np.float32)
        if data.ndim != 2:
            raise ValueError("Intensity map has to be two-dimensional")
        self.data = data
        """Intensity values, indexed ``[y, x]``"""
        self._copied = not (isinstance(orig, np.ndarray) and
                            np.may_share_memory(orig, data))
        # float arrays of at least single precision can hold SENTINEL
        self._source = None
        if (self._copied and isinstance(orig, np.ndarray) and
                orig.dtype.kind == "f" and orig.dtype.itemsize >= 4 and
                orig.flags.writeable):
            self._source = orig
        if mask is not None:
            mask = np.asarray(mask, dtype=bool)
            if mask.shape != data.shape:
                raise ValueError("`mask` and `data` have different shapes")
        self.mask = mask
        """Boolean validity mask or None"""

    @property
    def writes_through(self):
        """Whether :py:meth:`suppress` changes the array passed to the
        constructor

        False if `data` was not an array, but e.g. a list, if it was an
        integer array, or if it is read-only.
        """
        if not self.data.flags.writeable:
            return False
        return not self._copied or self._source is not None

    @property
    def shape(self):
        return self.data.shape

    @property
    def width(self):
        return self.data.shape[1]

    @property
    def height(self):
        return self.data.shape[0]

    @property
    def valid(self):
        """Boolean array, True for pixels that are not excluded"""
        ret = self.data != SENTINEL
        if self.mask is not None:
            ret &= self.mask
        return ret

    def check_bounds(self, x, y):
        """Raise :py:class:`OutOfBounds` if ``(x, y)`` is not in the image"""
        if not (0 <= x < self.width and 0 <= y < self.height):
            raise OutOfBounds((x, y), (self.width, self.height))

    def __getitem__(self, key):
        x, y = key
        self.check_bounds(x, y)
        return self.data[y, x]

    def __setitem__(self, key, value):
        x, y = key
        self.check_bounds(x, y)
        self.data[y, x] = value

    def is_valid(self, x, y):
        """Check whether a single pixel takes part in extraction

        Parameters
        ----------
        x, y : int
            Pixel coordinates

        Returns
        -------
        bool
            False if the pixel is set to :py:data:`SENTINEL` or masked.
        """
        self.check_bounds(x, y)
        if self.mask is not None and not self.mask[y, x]:
            return False
        return self.data[y, x] != SENTINEL

    def suppress(self, points):
        """Exclude pixels from subsequent extraction

        Sets the pixels to :py:data:`SENTINEL`.

        Parameters
        ----------
        points : PointSet or array-like
            Pixels to suppress. Each row holds x and y coordinates.
        """
        coords = _as_coords(points)
        if not len(coords):
            return
        out = ((coords[:, 0] < 0) | (coords[:, 0] >= self.width) |
               (coords[:, 1] < 0) | (coords[:, 1] >= self.height))
        if out.any():
            raise OutOfBounds(coords[np.argmax(out)],
                              (self.width, self.height))
        self.data[coords[:, 1], coords[:, 0]] = SENTINEL
        if self._source is not None:
            self._source[coords[:, 1], coords[:, 0]] = SENTINEL

    def __repr__(self):
        return f"IntensityMap(width={self.width}, height={self.height})"


class PointSet(object):
    """Ordered, append-only collection of integer pixel coordinates

    Storage is a ``(n, 2)`` array, each row holding x and y. It is grown as
    needed.

    Attributes
    ----------
    initial_size : int
        Number of rows to allocate initially. Defaults to 100.
    max_size : int
        Maximum number of points. Appending beyond this raises
        :py:class:`ResourceExhausted`. Defaults to 100000000.
    """
    initial_size = 100
    max_size = 100000000

    def __init__(self, points=None):
        """Parameters
        ----------
        points : iterable of (x, y) or None, optional
            Initial content. Defaults to None.
        """
        self._data = np.empty((self.initial_size, 2), dtype=np.int64)
        self._len = 0
        if points is not None:
            self.extend(points)

    def _reserve(self, n):
        if n > self.max_size:
            raise ResourceExhausted(
                f"Cannot store {n} points (maximum is {self.max_size})")
        if n <= len(self._data):
            return
        new_size = min(max(n, 2 * len(self._data)), self.max_size)
        _logger.debug("Growing point storage from %d to %d",
                      len(self._data), new_size)
        try:
            new_data = np.empty((new_size, 2), dtype=np.int64)
        except MemoryError as e:
            raise ResourceExhausted(
                f"Failed to allocate storage for {new_size} points") from e
        new_data[:self._len] = self._data[:self._len]
        self._data = new_data

    def append(self, x, y):
        """Append a single point

        Parameters
        ----------
        x, y : int
            Coordinates
        """
        if int(x) != x or int(y) != y:
            raise ValueError("Point coordinates have to be integers")
        self._reserve(self._len + 1)
        self._data[self._len] = (x, y)
        self._len += 1

    def extend(self, points):
        """Append multiple points, keeping their order

        Parameters
        ----------
        points : PointSet or array-like
            Each row holds x and y coordinates.
        """
        coords = _as_coords(points)
        n = len(coords)
        self._reserve(self._len + n)
        self._data[self._len:self._len+n] = coords
        self._len += n

    def clear(self):
        """Remove all points. Allocated storage is kept."""
        self._len = 0

    def to_array(self):
        """Get a copy of the coordinates as ``(n, 2)`` array (x, y)"""
        return self._data[:self._len].copy()

    @config.set_columns
    def to_dataframe(self, columns={}):
        """Get the coordinates as :py:class:`pandas.DataFrame`

        Parameters
        ----------
        columns : dict, optional
            Override default column names as defined in
            :py:attr:`config.columns`. Only the "coords" key is used.

        Returns
        -------
        pandas.DataFrame
            One row per point
        """
        return pd.DataFrame(self._data[:self._len],
                            columns=columns["coords"])

    def __len__(self):
        return self._len

    def __iter__(self):
        for x, y in self._data[:self._len]:
            yield int(x), int(y)

    def __getitem__(self, key):
        return self._data[:self._len][key]

    def __eq__(self, other):
        if not isinstance(other, PointSet):
            return NotImplemented
        return np.array_equal(self.to_array(), other.to_array())

    def __repr__(self):
        return f"PointSet({self.to_array().tolist()})"


def _as_coords(points):
    """Convert a PointSet or array-like to a ``(n, 2)`` int64 array

    Raises
    ------
    ValueError
        Wrong shape or non-integer coordinates
    """
    if isinstance(points, PointSet):
        return points._data[:points._len]
    coords = np.asarray(points)
    if coords.size == 0:
        return np.empty((0, 2), dtype=np.int64)
    if coords.ndim != 2 or coords.shape[1] != 2:
        raise ValueError("Points need to be given as (n, 2) array")
    if coords.dtype.kind not in "iu":
        if (coords.dtype.kind != "f" or
                not np.all(np.isfinite(coords) & (coords % 1 == 0))):
            raise ValueError("Point coordinates have to be integers")
    return coords.astype(np.int64, copy=False)

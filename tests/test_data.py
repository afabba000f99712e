# SPDX-FileCopyrightText: 2020 Lukas Schrangl <lukas.schrangl@tuwien.ac.at>
#
# SPDX-License-Identifier: BSD-3-Clause

import numpy as np
import pandas as pd
import pytest

from nonmax import data
from nonmax.exceptions import OutOfBounds, ResourceExhausted


class TestIntensityMap:
    @pytest.fixture
    def imap(self):
        return data.IntensityMap(np.arange(12, dtype=np.float32).reshape(
            (3, 4)))

    def test_shape(self, imap):
        """data.IntensityMap: size properties"""
        assert imap.width == 4
        assert imap.height == 3
        assert imap.shape == (3, 4)

    def test_getitem(self, imap):
        """data.IntensityMap: read pixels"""
        assert imap[0, 0] == 0.
        assert imap[3, 1] == 7.
        for xy in [(4, 0), (0, 3), (-1, 0)]:
            with pytest.raises(OutOfBounds):
                imap[xy]

    def test_setitem(self, imap):
        """data.IntensityMap: write pixels"""
        imap[1, 2] = 100.
        assert imap.data[2, 1] == 100.
        with pytest.raises(OutOfBounds):
            imap[1, 3] = 1.

    def test_no_copy(self):
        """data.IntensityMap: float32 data are not copied"""
        a = np.zeros((2, 2), dtype=np.float32)
        imap = data.IntensityMap(a)
        a[0, 1] = 3.
        assert imap[1, 0] == 3.

        b = np.zeros((2, 2), dtype=int)
        imap = data.IntensityMap(b)
        assert imap.data.dtype == np.float32

    def test_not_2d(self):
        """data.IntensityMap: wrong number of dimensions"""
        with pytest.raises(ValueError):
            data.IntensityMap(np.zeros(3))
        with pytest.raises(ValueError):
            data.IntensityMap(np.zeros((2, 2)), np.ones((3, 3), dtype=bool))

    def test_valid(self, imap):
        """data.IntensityMap: sentinel and mask"""
        imap[1, 1] = data.SENTINEL
        exp = np.ones((3, 4), dtype=bool)
        exp[1, 1] = False
        np.testing.assert_array_equal(imap.valid, exp)
        assert not imap.is_valid(1, 1)
        assert imap.is_valid(2, 1)

        mask = np.ones((3, 4), dtype=bool)
        mask[2, 3] = False
        masked = data.IntensityMap(imap.data, mask)
        exp[2, 3] = False
        np.testing.assert_array_equal(masked.valid, exp)
        assert not masked.is_valid(3, 2)
        # mask is not modified
        assert mask[1, 1]

    def test_suppress(self, imap):
        """data.IntensityMap.suppress"""
        imap.suppress(data.PointSet([(0, 0), (3, 2)]))
        assert imap.data[0, 0] == data.SENTINEL
        assert imap.data[2, 3] == data.SENTINEL
        assert imap.valid.sum() == 10
        imap.suppress([])
        assert imap.valid.sum() == 10
        with pytest.raises(OutOfBounds):
            imap.suppress([(4, 0)])

    def test_writes_through(self):
        """data.IntensityMap.writes_through"""
        a = np.zeros((2, 2), dtype=np.float32)
        assert data.IntensityMap(a).writes_through
        assert data.IntensityMap(a.astype(np.float64)).writes_through
        assert not data.IntensityMap(a.astype(int)).writes_through
        assert not data.IntensityMap(a.astype(np.float16)).writes_through
        assert not data.IntensityMap(a.tolist()).writes_through
        a.flags.writeable = False
        assert not data.IntensityMap(a).writes_through

    def test_suppress_float64(self):
        """data.IntensityMap.suppress: write back to float64 array"""
        a = np.ones((3, 4))
        imap = data.IntensityMap(a)
        imap.suppress([(3, 1)])
        assert imap.data[1, 3] == data.SENTINEL
        assert a[1, 3] == data.SENTINEL
        assert (a == data.SENTINEL).sum() == 1


class TestPointSet:
    def test_append(self):
        """data.PointSet: append, len, iter, getitem"""
        p = data.PointSet()
        assert len(p) == 0
        p.append(1, 2)
        p.append(5, 0)
        assert len(p) == 2
        assert list(p) == [(1, 2), (5, 0)]
        np.testing.assert_array_equal(p[1], [5, 0])
        np.testing.assert_array_equal(p.to_array(), [[1, 2], [5, 0]])

    def test_grow(self):
        """data.PointSet: storage growth"""
        p = data.PointSet()
        n = 3 * data.PointSet.initial_size + 7
        for i in range(n):
            p.append(i, 2 * i)
        p.extend(np.column_stack([np.arange(n), np.zeros(n)]))
        assert len(p) == 2 * n
        np.testing.assert_array_equal(p[:n, 0], np.arange(n))
        np.testing.assert_array_equal(p[:n, 1], 2 * np.arange(n))
        np.testing.assert_array_equal(p[n:, 0], np.arange(n))

    def test_extend(self):
        """data.PointSet.extend"""
        p = data.PointSet([(0, 0)])
        p.extend(data.PointSet([(1, 1), (2, 3)]))
        p.extend([])
        np.testing.assert_array_equal(p.to_array(),
                                      [[0, 0], [1, 1], [2, 3]])
        with pytest.raises(ValueError):
            p.extend([1, 2, 3])

    def test_non_integer(self):
        """data.PointSet: reject non-integer coordinates"""
        p = data.PointSet()
        with pytest.raises(ValueError):
            p.append(1.5, 0)
        with pytest.raises(ValueError):
            p.extend([(1.5, 2)])
        with pytest.raises(ValueError):
            p.extend(np.array([[np.nan, 2.]]))
        with pytest.raises(ValueError):
            data.PointSet([(0, 0.25)])
        assert len(p) == 0
        p.append(1., 2.)
        p.extend(np.array([[3., 4.]]))
        np.testing.assert_array_equal(p.to_array(), [[1, 2], [3, 4]])

    def test_clear(self):
        """data.PointSet.clear"""
        p = data.PointSet([(0, 0), (1, 1)])
        p.clear()
        assert len(p) == 0
        p.append(4, 4)
        assert list(p) == [(4, 4)]

    def test_to_array_copy(self):
        """data.PointSet.to_array: returns a copy"""
        p = data.PointSet([(0, 0)])
        a = p.to_array()
        a[0, 0] = 10
        assert list(p) == [(0, 0)]

    def test_to_dataframe(self):
        """data.PointSet.to_dataframe"""
        p = data.PointSet([(1, 2), (3, 4)])
        pd.testing.assert_frame_equal(
            p.to_dataframe(),
            pd.DataFrame({"x": [1, 3], "y": [2, 4]}, dtype=np.int64))
        df = p.to_dataframe(columns={"coords": ["col", "row"]})
        assert list(df.columns) == ["col", "row"]

    def test_eq(self):
        """data.PointSet: equality"""
        assert data.PointSet([(1, 2)]) == data.PointSet([(1, 2)])
        assert data.PointSet([(1, 2)]) != data.PointSet([(2, 1)])

    def test_max_size(self):
        """data.PointSet: exceeding the maximum size"""
        class SmallPointSet(data.PointSet):
            initial_size = 2
            max_size = 3

        p = SmallPointSet([(0, 0), (1, 1), (2, 2)])
        with pytest.raises(ResourceExhausted):
            p.append(3, 3)
        with pytest.raises(ResourceExhausted):
            SmallPointSet(np.zeros((4, 2)))

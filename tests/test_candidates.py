# SPDX-FileCopyrightText: 2020 Lukas Schrangl <lukas.schrangl@tuwien.ac.at>
#
# SPDX-License-Identifier: BSD-3-Clause

import numpy as np

from nonmax import border, candidates, data, find


class TestThresholdCandidates:
    def test_candidates(self):
        """candidates.threshold_candidates"""
        img = np.zeros((4, 5))
        img[3, 1] = 2.
        img[0, 4] = 3.
        img[1, 1] = 1.
        img[2, 2] = data.SENTINEL
        c = candidates.threshold_candidates(img, 1.)
        assert isinstance(c, data.PointSet)
        np.testing.assert_array_equal(c.to_array(), [[4, 0], [1, 3]])

    def test_rect(self):
        """candidates.threshold_candidates: restrict to rectangle"""
        img = np.ones((5, 5))
        c = candidates.threshold_candidates(
            data.IntensityMap(img), 0., border.processing_rect(5, 5, 1))
        assert len(c) == 9
        np.testing.assert_array_equal(c[0], [1, 1])
        np.testing.assert_array_equal(c[-1], [3, 3])


class TestDilationCandidates:
    def test_plateau(self):
        """candidates.dilation_candidates: plateaus are kept"""
        img = np.zeros((5, 6))
        img[2, 2:4] = 5.
        img[2, 1] = 3.
        c = candidates.dilation_candidates(img, 1, 1.)
        np.testing.assert_array_equal(c.to_array(), [[2, 2], [3, 2]])

    def test_sentinel(self):
        """candidates.dilation_candidates: sentinel does not suppress"""
        img = np.zeros((5, 5))
        img[2, 2] = 5.
        img[2, 3] = data.SENTINEL
        c = candidates.dilation_candidates(img, 1, 1.)
        np.testing.assert_array_equal(c.to_array(), [[2, 2]])

    def test_circle(self):
        """candidates.dilation_candidates: circular window"""
        img = np.zeros((9, 9))
        img[3, 3] = 10.
        img[5, 5] = 5.
        c = candidates.dilation_candidates(img, 2, 1., window="square")
        np.testing.assert_array_equal(c.to_array(), [[3, 3]])
        c = candidates.dilation_candidates(img, 2, 1., window="circle")
        np.testing.assert_array_equal(c.to_array(), [[3, 3], [5, 5]])

    def test_superset(self):
        """candidates.dilation_candidates: contains all maxima"""
        rs = np.random.RandomState(3)
        img = rs.randint(0, 4, (20, 20)).astype(float)
        c = candidates.dilation_candidates(img, 2, 0.)
        ex = find.DenseBorderExtractor(threshold=0., search_radius=2,
                                       engine="python")
        maxima = ex.process(img, None, data.PointSet())
        c_set = set(c)
        assert len(maxima)
        assert len(c) > len(maxima)
        assert all(m in c_set for m in maxima)

# SPDX-FileCopyrightText: 2020 Lukas Schrangl <lukas.schrangl@tuwien.ac.at>
#
# SPDX-License-Identifier: BSD-3-Clause

"""numba accelerated local maximum search

Provides the same functions as the pure python engine in
:py:mod:`find`, i.e. :py:func:`dense_maxima` and
:py:func:`candidate_maxima`.
"""
import logging

import numba
import numpy as np


_logger = logging.getLogger(__name__)

max_num_peaks = 10000
"""Initial size of the output array for the dense search"""


def dense_maxima(data, valid, footprint, before, rect, threshold):
    """numba accelerated version of :py:func:`find.dense_maxima`"""
    max_cnt = max(min(max_num_peaks, rect.area), 1)
    # Start with max_num_peaks, but if that is not enough, increase the
    # array. There cannot be more maxima than pixels in `rect`.
    while True:
        idx_of_max = np.empty((max_cnt, 2), dtype=np.int64)
        num_peaks = _numba_dense_maxima(
            idx_of_max, data, valid, footprint, before, rect.x0, rect.y0,
            rect.x1, rect.y1, threshold)
        if num_peaks >= 0:
            break
        max_cnt = min(max_cnt * 10, rect.area)
        _logger.debug("Too many maxima, retrying with room for %d", max_cnt)
    return idx_of_max[:num_peaks]


def candidate_maxima(data, valid, footprint, before, rect, threshold,
                     candidates):
    """numba accelerated version of :py:func:`find.candidate_maxima`"""
    idx_of_max = np.empty((len(candidates), 2), dtype=np.int64)
    num_peaks = _numba_candidate_maxima(
        idx_of_max, data, valid, footprint, before, rect.x0, rect.y0,
        rect.x1, rect.y1, threshold, np.ascontiguousarray(candidates))
    return idx_of_max[:num_peaks]


@numba.jit(nopython=True, nogil=True, cache=True)
def _is_local_max(data, valid, footprint, before, x, y, threshold):
    """Test a single pixel

    Parameters
    ----------
    data : numpy.ndarray
        2D intensity image, indexed ``[y, x]``
    valid : numpy.ndarray
        Boolean array, False for pixels to ignore
    footprint : numpy.ndarray
        Boolean comparison window
    before : numpy.ndarray
        Part of `footprint` which precedes the center in raster order
    x, y : int
        Pixel coordinates
    threshold : float
        Pixel value has to be greater than this.

    Returns
    -------
    bool
        Whether the pixel is a local maximum
    """
    if not valid[y, x]:
        return False
    pix_val = data[y, x]
    if not pix_val > threshold:
        return False

    r = footprint.shape[0] // 2
    for k in range(-r, r+1):
        yy = y + k
        if yy < 0 or yy >= data.shape[0]:
            continue
        for l in range(-r, r+1):
            xx = x + l
            if xx < 0 or xx >= data.shape[1]:
                continue
            if k == 0 and l == 0:
                continue
            if not footprint[k+r, l+r] or not valid[yy, xx]:
                continue
            other = data[yy, xx]
            if other > pix_val:
                return False
            # equal values: the pixel coming first in raster order wins
            if other == pix_val and before[k+r, l+r]:
                return False
    return True


@numba.jit(nopython=True, nogil=True, cache=True)
def _numba_dense_maxima(idx_of_max, data, valid, footprint, before, x0, y0,
                        x1, y1, threshold):
    """Scan all pixels in ``[x0, x1) x [y0, y1)``

    Parameters
    ----------
    idx_of_max : numpy.ndarray
        Preallocated max_number x 2 array for output. Each row will contain
        the x and y coordinates of a local maximum. If more than max_number
        local maxima are found, a negative value is returned.
    data, valid, footprint, before, threshold
        See :py:func:`_is_local_max`.
    x0, y0, x1, y1 : int
        Rectangle to search

    Returns
    -------
    int
        Number of local maxima found. If the number of maxima is greater than
        the length of `idx_of_max`, return -1.
    """
    cnt = 0
    max_cnt = len(idx_of_max)

    for y in range(y0, y1):
        for x in range(x0, x1):
            if not _is_local_max(data, valid, footprint, before, x, y,
                                 threshold):
                continue
            if cnt >= max_cnt:
                return -1
            idx_of_max[cnt, 0] = x
            idx_of_max[cnt, 1] = y
            cnt += 1
    return cnt


@numba.jit(nopython=True, nogil=True, cache=True)
def _numba_candidate_maxima(idx_of_max, data, valid, footprint, before, x0,
                            y0, x1, y1, threshold, candidates):
    """Test candidate pixels within ``[x0, x1) x [y0, y1)``

    Candidates have to lie within the image. Those outside of the
    rectangle are skipped, as are repeated candidates.

    Returns
    -------
    int
        Number of local maxima written to `idx_of_max`, which has to have at
        least as many rows as `candidates`.
    """
    seen = np.zeros(data.shape, dtype=np.bool_)
    cnt = 0

    for i in range(len(candidates)):
        x = candidates[i, 0]
        y = candidates[i, 1]
        if x < x0 or x >= x1 or y < y0 or y >= y1:
            continue
        if seen[y, x]:
            continue
        seen[y, x] = True
        if not _is_local_max(data, valid, footprint, before, x, y,
                             threshold):
            continue
        idx_of_max[cnt, 0] = x
        idx_of_max[cnt, 1] = y
        cnt += 1
    return cnt

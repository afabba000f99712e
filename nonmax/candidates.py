# SPDX-FileCopyrightText: 2020 Lukas Schrangl <lukas.schrangl@tuwien.ac.at>
#
# SPDX-License-Identifier: BSD-3-Clause

"""Cheap pre-filters producing candidate lists

The candidate extractors (:py:class:`find.CandidateExtractor` and
:py:class:`find.CandidateBorderExtractor`) only test pixels that are
passed to them. The functions in this module create such lists.
"""
import numpy as np
from scipy import ndimage

from .data import IntensityMap, PointSet
from .window import window_footprint


def _masked_data(data, valid):
    """Replace invalid pixels by -inf so that they never win a comparison"""
    return np.where(valid, data, -np.inf)


def _dilation_mask(work, footprint):
    """True where a pixel is not exceeded by any pixel in its window"""
    dil = ndimage.grey_dilation(work, footprint=footprint, mode="constant",
                                cval=-np.inf)
    return work >= dil


def _to_points(mask, rect):
    if rect is not None:
        sub = np.zeros_like(mask)
        sub[rect.y0:rect.y1, rect.x0:rect.x1] = \
            mask[rect.y0:rect.y1, rect.x0:rect.x1]
        mask = sub
    # np.nonzero returns row-major, i.e. raster, order
    y, x = np.nonzero(mask)
    return PointSet(np.column_stack([x, y]))


def threshold_candidates(intensity, threshold, rect=None):
    """Get all valid pixels above threshold

    Parameters
    ----------
    intensity : IntensityMap or array-like
        Feature intensity
    threshold : float
        Only pixels with values greater than this are returned.
    rect : border.Rect or None, optional
        Only return pixels within this rectangle. If `None`, use the whole
        image.

    Returns
    -------
    PointSet
        Candidates in raster order
    """
    if not isinstance(intensity, IntensityMap):
        intensity = IntensityMap(intensity)
    return _to_points(intensity.valid & (intensity.data > threshold), rect)


def dilation_candidates(intensity, search_radius, threshold,
                        window="square", rect=None):
    """Get pixels that are not exceeded by any neighbor

    Uses grey dilation, which is fast, but does not resolve plateaus of
    equal values. The result is therefore a superset of the local maxima.

    Parameters
    ----------
    intensity : IntensityMap or array-like
        Feature intensity
    search_radius : int
        Half width of the comparison window
    threshold : float
        Only pixels with values greater than this are returned.
    window : {"square", "circle"}, optional
        Shape of the comparison window. Defaults to "square".
    rect : border.Rect or None, optional
        Only return pixels within this rectangle. If `None`, use the whole
        image.

    Returns
    -------
    PointSet
        Candidates in raster order
    """
    if not isinstance(intensity, IntensityMap):
        intensity = IntensityMap(intensity)
    valid = intensity.valid
    work = _masked_data(intensity.data, valid)
    mask = (_dilation_mask(work, window_footprint(window, search_radius)) &
            valid & (work > threshold))
    return _to_points(mask, rect)

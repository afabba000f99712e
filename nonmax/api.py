# SPDX-FileCopyrightText: 2020 Lukas Schrangl <lukas.schrangl@tuwien.ac.at>
#
# SPDX-License-Identifier: BSD-3-Clause

"""API for local maximum feature extraction

Provides the standard :py:func:`extract` and :py:func:`batch` functions.
"""
import numpy as np

from . import config
from .data import IntensityMap, PointSet
from .find import create_extractor
from .make_batch import make_batch, make_batch_threaded


@config.set_columns
@config.use_defaults
def extract(intensity, threshold=None, search_radius=None, ignore_border=None,
            candidates=None, detect_border=False, window=None, engine=None,
            columns={}):
    """Extract local maxima from a feature intensity image

    Parameters
    ----------
    intensity : IntensityMap or array-like
        Feature intensity image, e.g. a corner response
    threshold : float or None, optional
        Features need to have a greater intensity. If `None`, use
        ``config.rc["threshold"]``.
    search_radius : int or None, optional
        Half width of the comparison window. If `None`, use
        ``config.rc["search_radius"]``.
    ignore_border : int or None, optional
        Do not report features within this distance from the image edges. If
        `None`, use ``config.rc["ignore_border"]``.
    candidates : PointSet or array-like or None, optional
        If given, only test these pixels (each row holds x and y). Defaults
        to None.
    detect_border : bool, optional
        If True, also report features whose comparison window is clipped by
        the image edges. Defaults to False.
    window : {"square", "circle"} or None, optional
        Comparison window shape. If `None`, use ``config.rc["window"]``.

    Returns
    -------
    pandas.DataFrame([x, y, intensity])
        One row per feature. If `intensity` has a `frame_no` attribute, a
        `frame` column with this information will also be appended.

    Other parameters
    ----------------
    engine : {"python", "numba"}, optional
        Which engine to use for calculations. "numba" is much faster than
        "python". If `None`, use ``config.rc["engine"]``.
    columns : dict, optional
        Override default column names as defined in
        :py:attr:`config.columns`. Relevant names are `coords`, `intensity`,
        and `time`.
    """
    imap = intensity if isinstance(intensity, IntensityMap) else \
        IntensityMap(intensity)
    ex = create_extractor(candidates is not None, detect_border, engine,
                          threshold=threshold, search_radius=search_radius,
                          ignore_border=ignore_border, window=window)
    found = ex.process(imap, candidates, PointSet())

    ret = found.to_dataframe(columns=columns)
    coords = found.to_array()
    ret[columns["intensity"]] = imap.data[coords[:, 1], coords[:, 0]].astype(
        float)

    frame_no = getattr(intensity, "frame_no", None)
    if frame_no is not None:
        ret[columns["time"]] = np.full(len(ret), frame_no, dtype=int)
    return ret


batch = make_batch(extract)
batch_threaded = make_batch_threaded(extract)

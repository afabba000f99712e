# SPDX-FileCopyrightText: 2020 Lukas Schrangl <lukas.schrangl@tuwien.ac.at>
#
# SPDX-License-Identifier: BSD-3-Clause

"""Extract point features as local maxima of an intensity image

A pixel is a feature if it

- is valid, i.e. not set to :py:data:`data.SENTINEL` and not masked,
- has an intensity greater than the threshold, and
- is not exceeded by any valid pixel within the comparison window. If a
  neighbor has the same intensity, the pixel coming first in raster order
  (smallest y, then smallest x) wins, so that only one feature per plateau
  is reported.

There are four extractors, which differ in whether they scan the whole image
or only a list of candidate pixels and whether they evaluate pixels whose
comparison window is clipped by the image edge:

========================== =============== =================
class                      uses_candidates can_detect_border
========================== =============== =================
DenseExtractor             False           False
DenseBorderExtractor       False           True
CandidateExtractor         True            False
CandidateBorderExtractor   True            True
========================== =============== =================

Each can use the "numba" (default) or the "python" engine.


Examples
--------

>>> img = np.zeros((5, 5))
>>> img[2, 2] = 10.
>>> ex = DenseExtractor(threshold=1., search_radius=1)
>>> ex.process(img, None, PointSet())
PointSet([[2, 2]])
"""
import collections
import logging

import numpy as np

from .border import BorderPolicy
from .candidates import _dilation_mask, _masked_data
from .config import use_defaults
from .data import IntensityMap, PointSet, _as_coords
from .exceptions import InvalidConfiguration, OutOfBounds
from .window import raster_before, window_footprint, windows
from . import find_numba


_logger = logging.getLogger(__name__)


class ExtractorConfig(collections.namedtuple(
        "ExtractorConfig", ["threshold", "ignore_border", "search_radius",
                            "window", "suppress_found"])):
    """Immutable extractor parameters

    Attributes
    ----------
    threshold : float
        Features need to have a greater intensity.
    ignore_border : int
        Pixels within this distance from the image edges are not reported.
        They are still used as neighbors.
    search_radius : int
        Half width of the comparison window
    window : {"square", "circle"}
        Shape of the comparison window
    suppress_found : bool
        If True, set found features to :py:data:`data.SENTINEL` in the
        intensity image after extraction.
    """
    __slots__ = ()

    @use_defaults
    def __new__(cls, threshold=None, ignore_border=None, search_radius=None,
                window=None, suppress_found=False):
        if int(ignore_border) != ignore_border or ignore_border < 0:
            raise InvalidConfiguration(
                "`ignore_border` has to be a non-negative integer")
        if int(search_radius) != search_radius or search_radius < 0:
            raise InvalidConfiguration(
                "`search_radius` has to be a non-negative integer")
        if window not in windows:
            raise InvalidConfiguration(f"Unknown window: {window}")
        return super().__new__(cls, float(threshold), int(ignore_border),
                               int(search_radius), window,
                               bool(suppress_found))

    def replace(self, **changes):
        """Get a copy with some parameters changed

        Parameters
        ----------
        **changes
            New parameter values

        Returns
        -------
        ExtractorConfig
            Validated new configuration
        """
        params = self._asdict()
        params.update(changes)
        return type(self)(**params)


def dense_maxima(data, valid, footprint, before, rect, threshold):
    """Find all local maxima within a rectangle

    Parameters
    ----------
    data : numpy.ndarray
        2D intensity image, indexed ``[y, x]``
    valid : numpy.ndarray
        Boolean array, False for pixels to ignore
    footprint : numpy.ndarray
        Boolean comparison window
    before : numpy.ndarray
        Part of `footprint` which precedes the center in raster order, see
        :py:func:`window.raster_before`
    rect : border.Rect
        Pixels to test
    threshold : float
        Minimum (exclusive) feature intensity

    Returns
    -------
    numpy.ndarray
        ``(n, 2)`` array of x and y coordinates in raster order
    """
    work = _masked_data(data, valid)
    # grey dilation removes everything with a greater neighbor. Plateaus
    # are resolved below.
    is_cand = _dilation_mask(work, footprint) & valid & (work > threshold)
    y, x = np.nonzero(is_cand[rect.y0:rect.y1, rect.x0:rect.x1])
    candidates = np.column_stack([x + rect.x0, y + rect.y0])

    r = footprint.shape[0] // 2
    is_max = np.empty(len(candidates), dtype=bool)
    # using the for loop is somewhat faster than np.apply_along_axis
    for cnt, (i, j) in enumerate(candidates):
        roi, roi_before = _window_at(work, before, r, i, j)
        is_max[cnt] = not (roi[roi_before] == work[j, i]).any()
    return candidates[is_max].astype(np.int64)


def candidate_maxima(data, valid, footprint, before, rect, threshold,
                     candidates):
    """Test candidate pixels for being local maxima

    Parameters
    ----------
    data, valid, footprint, before, rect, threshold
        See :py:func:`dense_maxima`.
    candidates : numpy.ndarray
        ``(n, 2)`` array of x and y coordinates within the image. Those
        outside of `rect` are skipped. Repeated entries are only tested once.

    Returns
    -------
    numpy.ndarray
        ``(n, 2)`` array of x and y coordinates in the order of `candidates`
    """
    work = _masked_data(data, valid)
    r = footprint.shape[0] // 2
    seen = np.zeros(data.shape, dtype=bool)
    ret = []
    for i, j in candidates:
        if not rect.contains(i, j) or seen[j, i]:
            continue
        seen[j, i] = True
        pix_val = work[j, i]
        if not (valid[j, i] and pix_val > threshold):
            continue
        roi, roi_fp = _window_at(work, footprint, r, i, j)
        if (roi[roi_fp] > pix_val).any():
            continue
        roi, roi_before = _window_at(work, before, r, i, j)
        if (roi[roi_before] == pix_val).any():
            continue
        ret.append((i, j))
    return np.array(ret, dtype=np.int64).reshape((-1, 2))


def _window_at(image, footprint, r, x, y):
    """Cut the window around ``(x, y)``, clipped at the image edges

    Returns
    -------
    roi : numpy.ndarray
        Part of `image`
    footprint : numpy.ndarray
        Part of `footprint` matching `roi`
    """
    y0 = max(y - r, 0)
    y1 = min(y + r + 1, image.shape[0])
    x0 = max(x - r, 0)
    x1 = min(x + r + 1, image.shape[1])
    return (image[y0:y1, x0:x1],
            footprint[y0-y+r:y1-y+r, x0-x+r:x1-x+r])


engines = {
    "python": (dense_maxima, candidate_maxima),
    "numba": (find_numba.dense_maxima, find_numba.candidate_maxima)}
"""Map of engine name to ``(dense, candidate)`` search functions"""


class Extractor(object):
    """Base class for local maximum extractors

    Do not use directly, but one of the subclasses
    :py:class:`DenseExtractor`, :py:class:`DenseBorderExtractor`,
    :py:class:`CandidateExtractor`, :py:class:`CandidateBorderExtractor`
    or :py:func:`create_extractor`.

    Attributes
    ----------
    uses_candidates : bool
        Whether a candidate list has to be passed to :py:meth:`process`
    can_detect_border : bool
        Whether pixels whose comparison window extends beyond the image edge
        can be reported. In that case, only the part of the window within
        the image is used.
    """
    uses_candidates = False
    can_detect_border = False

    @use_defaults
    def __init__(self, config=None, engine=None, **kwargs):
        """Parameters
        ----------
        config : ExtractorConfig or None, optional
            Parameters. If `None`, create from `kwargs`.
        engine : {"numba", "python"} or None, optional
            Which implementation to use. If `None`, use
            ``config.rc["engine"]``.
        **kwargs
            Passed to :py:class:`ExtractorConfig` or, if `config` is given,
            to :py:meth:`ExtractorConfig.replace`.
        """
        if config is None:
            config = ExtractorConfig(**kwargs)
        elif kwargs:
            config = config.replace(**kwargs)
        try:
            self._dense, self._candidate = engines[engine]
        except KeyError:
            raise ValueError("Unknown engine: " + str(engine))
        self.config = config
        self.engine = engine
        self.border_policy = BorderPolicy(self.can_detect_border)

    @property
    def threshold(self):
        return self.config.threshold

    @property
    def ignore_border(self):
        return self.config.ignore_border

    @property
    def search_radius(self):
        return self.config.search_radius

    @property
    def window(self):
        return self.config.window

    @property
    def suppress_found(self):
        return self.config.suppress_found

    def with_config(self, **changes):
        """Create an extractor of the same kind with changed parameters

        Parameters
        ----------
        **changes
            Parameters to change, e.g. ``threshold=10.``

        Returns
        -------
        Extractor
            New instance
        """
        return type(self)(self.config.replace(**changes), engine=self.engine)

    def process(self, intensity, candidates, output, config=None):
        """Extract features

        Parameters
        ----------
        intensity : IntensityMap or array-like
            Feature intensity image. If `suppress_found` is set, found
            features are overwritten with :py:data:`data.SENTINEL`. In that
            case, arrays need to be writable float32 or float64 arrays,
            otherwise the caller would not see the change.
        candidates : PointSet or array-like or None
            Pixels to test. Has to be given if and only if
            :py:attr:`uses_candidates` is True.
        output : PointSet
            Found features are appended.
        config : ExtractorConfig or None, optional
            Use these parameters instead of :py:attr:`config` for this
            call. Defaults to None.

        Returns
        -------
        PointSet
            `output`

        Raises
        ------
        InvalidConfiguration
            `candidates` was (not) passed where it should (not) be, the
            image is too small for `ignore_border` and `search_radius`, or
            `suppress_found` is set, but the image cannot be modified.
        OutOfBounds
            A candidate lies outside of the image.
        ResourceExhausted
            `output` cannot hold all features.
        """
        if config is None:
            config = self.config
        if self.uses_candidates and candidates is None:
            raise InvalidConfiguration(
                f"{type(self).__name__} requires candidates")
        if not self.uses_candidates and candidates is not None:
            raise InvalidConfiguration(
                f"{type(self).__name__} does not use candidates")
        if not isinstance(intensity, IntensityMap):
            intensity = IntensityMap(intensity)
            if config.suppress_found and not intensity.writes_through:
                raise InvalidConfiguration(
                    "Found features cannot be suppressed in the intensity "
                    "image. Pass a writable floating point array or an "
                    "IntensityMap.")
        elif config.suppress_found and not intensity.data.flags.writeable:
            raise InvalidConfiguration("Intensity map is read-only")

        rect = self.border_policy.evaluation_rect(
            intensity.width, intensity.height, config.ignore_border,
            config.search_radius)
        footprint = window_footprint(config.window, config.search_radius)
        found = self._find(intensity, candidates, footprint,
                           raster_before(footprint), rect, config.threshold)

        output.extend(found)
        if config.suppress_found:
            intensity.suppress(found)
        _logger.debug("%s found %d features", type(self).__name__,
                      len(found))
        return output

    def _find(self, intensity, candidates, footprint, before, rect,
              threshold):
        raise NotImplementedError("_find() needs to be implemented")

    def __repr__(self):
        return f"{type(self).__name__}({self.config!r}, engine=" \
               f"{self.engine!r})"


class DenseExtractor(Extractor):
    """Test every pixel of the image

    Pixels whose comparison window does not fit into the image are skipped.
    """
    def _find(self, intensity, candidates, footprint, before, rect,
              threshold):
        return self._dense(intensity.data, intensity.valid, footprint,
                           before, rect, threshold)


class DenseBorderExtractor(DenseExtractor):
    """Test every pixel of the image, clipping windows at the image edges"""
    can_detect_border = True


class CandidateExtractor(Extractor):
    """Test only pixels from a candidate list

    The neighbors are still taken from the whole image. Pixels whose
    comparison window does not fit into the image are skipped.
    """
    uses_candidates = True

    def _find(self, intensity, candidates, footprint, before, rect,
              threshold):
        coords = _as_coords(candidates)
        out = ((coords[:, 0] < 0) | (coords[:, 0] >= intensity.width) |
               (coords[:, 1] < 0) | (coords[:, 1] >= intensity.height))
        if out.any():
            raise OutOfBounds(tuple(coords[np.argmax(out)]),
                              (intensity.width, intensity.height))
        return self._candidate(intensity.data, intensity.valid, footprint,
                               before, rect, threshold, coords)


class CandidateBorderExtractor(CandidateExtractor):
    """Test only candidate pixels, clipping windows at the image edges"""
    can_detect_border = True


def create_extractor(use_candidates=False, detect_border=False, engine=None,
                     **kwargs):
    """Create an extractor instance

    Parameters
    ----------
    use_candidates : bool, optional
        Whether to only test pixels from a candidate list. Defaults to False.
    detect_border : bool, optional
        Whether to evaluate pixels whose comparison window is clipped by the
        image edges. Defaults to False.
    engine : {"numba", "python"} or None, optional
        Which implementation to use. If `None`, use ``config.rc["engine"]``.
    **kwargs
        Passed to :py:class:`ExtractorConfig`.

    Returns
    -------
    Extractor
        Instance of one of :py:class:`DenseExtractor`,
        :py:class:`DenseBorderExtractor`, :py:class:`CandidateExtractor`,
        or :py:class:`CandidateBorderExtractor`
    """
    if use_candidates:
        cls = CandidateBorderExtractor if detect_border else \
            CandidateExtractor
    else:
        cls = DenseBorderExtractor if detect_border else DenseExtractor
    return cls(engine=engine, **kwargs)

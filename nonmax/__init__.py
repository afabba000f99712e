# SPDX-FileCopyrightText: 2020 Lukas Schrangl <lukas.schrangl@tuwien.ac.at>
#
# SPDX-License-Identifier: BSD-3-Clause

"""Point feature extraction by local maximum search
================================================

Feature detectors (corner detectors, blob detectors, ...) typically compute
a per-pixel response, the feature intensity, and then need a small set of
discrete peak locations. This package finds pixels that are not exceeded by
any neighbor within a given radius and whose intensity lies above a
threshold.

- :py:mod:`nonmax.find` provides extractor classes, which either scan the
  whole image or only a list of candidate pixels.
- :py:mod:`nonmax.candidates` contains fast pre-filters producing candidate
  lists.
- :py:func:`extract`, :py:func:`batch`, and :py:func:`batch_threaded` are
  convenience functions returning :py:class:`pandas.DataFrame`.

Pixels can be excluded by setting them to :py:data:`SENTINEL` (or by passing
a mask to :py:class:`IntensityMap`). This allows for removing features found
in a previous pass.


Examples
--------

>>> img = np.zeros((5, 5))
>>> img[2, 2] = 10.
>>> extract(img, threshold=1.)
   x  y  intensity
0  2  2       10.0

Use an extractor object to extract features from several images with the
same parameters:

>>> ex = DenseExtractor(threshold=1., search_radius=2, window="circle")
>>> features = PointSet()
>>> ex.process(img, None, features)
PointSet([[2, 2]])


Programming reference
---------------------

.. autofunction:: extract
.. autofunction:: batch
.. autofunction:: batch_threaded
.. autoclass:: IntensityMap
    :members:
.. autoclass:: PointSet
    :members:
"""
from . import config  # noqa: F401
from .api import extract, batch, batch_threaded  # noqa: F401
from .border import BorderPolicy, Rect, processing_rect  # noqa: F401
from .candidates import dilation_candidates, threshold_candidates  # noqa: F401
from .data import SENTINEL, IntensityMap, PointSet  # noqa: F401
from .exceptions import (  # noqa: F401
    ExtractionError, InvalidConfiguration, OutOfBounds, ResourceExhausted)
from .find import (  # noqa: F401
    ExtractorConfig, Extractor, DenseExtractor, DenseBorderExtractor,
    CandidateExtractor, CandidateBorderExtractor, create_extractor)

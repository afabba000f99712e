# SPDX-FileCopyrightText: 2020 Lukas Schrangl <lukas.schrangl@tuwien.ac.at>
#
# SPDX-License-Identifier: BSD-3-Clause

"""Functions to generate batch processing functions from extract

Turn extraction functions (that process a single frame) into "batch"
processing functions that process a sequence of intensity images
"""
import multiprocessing
from concurrent.futures import ThreadPoolExecutor

import pandas as pd

from . import config


num_cpus = multiprocessing.cpu_count()


def _concat_frames(all_features):
    frame_col = config.columns["time"]
    for i, df in enumerate(all_features):
        if frame_col not in df.columns:
            df[frame_col] = i
    if not all_features:
        raise ValueError("Empty `frames`")
    return pd.concat(all_features, ignore_index=True)


def make_batch(extract_func):
    """Turn a single image ``extract`` function into a batch function

    This is the single-threaded version.

    Parameters
    ----------
    extract_func : callable
        Will be called on every image. The images are passed as the first
        parameter.

    Returns
    -------
    callable
        Batch version of `extract_func`
    """
    def batch(frames, *args, **kwargs):
        """Process an image stack using :py:func:`{fname}`

        Apply :py:func:`{fname}` to each image in ``frames``. The image is
        passed as the first argument. For details on function parameters, see
        the :py:func:`{fname}` documentation.

        Parameters
        ----------
        frames : iterable of images
            Iterable of array-like objects that represent intensity images
        *args
            Positional arguments passed to :py:func:`{fname}`
        **kwargs
            Keyword arguments passed to :py:func:`{fname}`

        Returns
        -------
        pandas.DataFrame
            Concatenation of DataFrames returned by the individual
            :py:func:`{fname}` calls. Additionally, there is a "frame"
            column specifying the frame number.
        """
        return _concat_frames([extract_func(img, *args, **kwargs)
                               for img in frames])

    batch.__doc__ = batch.__doc__.format(fname=extract_func.__name__)
    return batch


def make_batch_threaded(extract_func):
    """Turn a single image ``extract`` function into a batch function

    This is the multi-threaded version. It is only faster if
    `extract_func` releases the GIL, as the numba engine does.

    Parameters
    ----------
    extract_func : callable
        Will be called on every image. The images are passed as the first
        parameter.

    Returns
    -------
    callable
        Batch version of `extract_func`
    """
    def batch(frames, *args, **kwargs):
        """Process an image stack using :py:func:`{fname}`

        Apply :py:func:`{fname}` to each image in ``frames`` using a thread
        pool. The image is passed as the first argument. For details on
        function parameters, see the :py:func:`{fname}` documentation.

        Parameters
        ----------
        frames : iterable of images
            Iterable of array-like objects that represent intensity images
        *args
            Positional arguments passed to :py:func:`{fname}`
        **kwargs
            Keyword arguments passed to :py:func:`{fname}`

        Returns
        -------
        pandas.DataFrame
            Concatenation of DataFrames returned by the individual
            :py:func:`{fname}` calls. Additionally, there is a "frame"
            column specifying the frame number.

        Other parameters
        ----------------
        num_threads : int
            Number of CPU threads to use. Defaults to the number of CPUs.
        """
        num_threads = kwargs.pop("num_threads", num_cpus)

        def func(frame):
            return extract_func(frame, *args, **kwargs)

        with ThreadPoolExecutor(max_workers=num_threads) as e:
            all_features = list(e.map(func, frames))
        return _concat_frames(all_features)

    batch.__doc__ = batch.__doc__.format(fname=extract_func.__name__)
    return batch

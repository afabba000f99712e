# SPDX-FileCopyrightText: 2020 Lukas Schrangl <lukas.schrangl@tuwien.ac.at>
#
# SPDX-License-Identifier: BSD-3-Clause

"""Mechanism for getting and setting default function parameters
=============================================================

Feature extraction functions take a number of parameters (threshold, search
radius, ...) which are usually the same for a whole analysis. The
:py:mod:`nonmax.config` module contains function decorators that provide
sensible default values, which can be changed by the user.
:py:func:`use_defaults` reads :py:attr:`rc` and :py:func:`set_columns`
reads :py:attr:`columns`, which holds the :py:class:`pandas.DataFrame`
column names used when returning features.


Examples
--------

>>> @use_defaults
... def f(search_radius=None):
...     return search_radius
>>> f()
1
>>> rc["search_radius"] = 3
>>> f()
3

>>> @set_columns
... def get_coords(data, columns={}):
...     return data[columns["coords"]]


Programming reference
---------------------

.. autofunction:: set_columns
.. autofunction:: use_defaults
.. autodata:: columns
.. autodata:: rc
"""
import inspect
import functools


rc = dict(
    threshold=0.,
    search_radius=1,
    ignore_border=0,
    window="square",
    engine="numba")
"""Global config dictionary"""


columns = dict(
    coords=["x", "y"],
    intensity="intensity",
    time="frame")
"""Default column names in :py:class:`pandas.DataFrame`"""


def use_defaults(func):
    """Decorator to apply default values to functions

    If any function argument whose name is a key in :py:attr:`rc` is `None`,
    set its value to what is specified in :py:attr:`rc`.

    Parameters
    ----------
    func : function
        Function to be decorated

    Returns
    -------
    function
        Modified function
    """
    sig = inspect.signature(func)

    @functools.wraps(func)
    def wrapper(*args, **kwargs):
        ba = sig.bind(*args, **kwargs)
        ba.apply_defaults()
        for name, value in ba.arguments.items():
            if value is None and name in rc:
                ba.arguments[name] = rc[name]
        return func(*ba.args, **ba.kwargs)

    wrapper.__signature__ = sig
    return wrapper


def set_columns(func):
    """Decorator to set default column names for DataFrames

    Use this on functions that accept a dict as the `columns` argument.
    Values from :py:attr:`columns` will be added for any key not present in
    the dict argument.

    Parameters
    ----------
    func : function
        Function to be decorated

    Returns
    -------
    function
        Modified function
    """
    sig = inspect.signature(func)

    @functools.wraps(func)
    def wrapper(*args, **kwargs):
        ba = sig.bind(*args, **kwargs)
        ba.apply_defaults()
        cols = columns.copy()
        cols.update(ba.arguments["columns"])
        ba.arguments["columns"] = cols
        return func(*ba.args, **ba.kwargs)

    wrapper.__signature__ = sig
    return wrapper

# SPDX-FileCopyrightText: 2020 Lukas Schrangl <lukas.schrangl@tuwien.ac.at>
#
# SPDX-License-Identifier: BSD-3-Clause

"""Determine which part of an image is searched for features

The processing rectangle is the image minus the ignored border. Depending on
the extractor, pixels within the processing rectangle may still be skipped
if their comparison window does not fit into the image, see
:py:class:`BorderPolicy`.
"""
import collections

from .exceptions import InvalidConfiguration


class Rect(collections.namedtuple("Rect", ["x0", "y0", "x1", "y1"])):
    """Half-open rectangle ``[x0, x1) x [y0, y1)``"""
    __slots__ = ()

    @property
    def width(self):
        return max(self.x1 - self.x0, 0)

    @property
    def height(self):
        return max(self.y1 - self.y0, 0)

    @property
    def area(self):
        return self.width * self.height

    def contains(self, x, y):
        """Check whether a pixel lies within the rectangle

        Parameters
        ----------
        x, y : int
            Pixel coordinates

        Returns
        -------
        bool
            True if the pixel is inside.
        """
        return self.x0 <= x < self.x1 and self.y0 <= y < self.y1


def processing_rect(width, height, ignore_border):
    """Get the image rectangle minus the ignored border

    Parameters
    ----------
    width, height : int
        Image size
    ignore_border : int
        Number of pixels from each edge which are not processed

    Returns
    -------
    Rect
        ``[ignore_border, width - ignore_border) x
        [ignore_border, height - ignore_border)``

    Raises
    ------
    InvalidConfiguration
        `ignore_border` is negative or no pixel remains.
    """
    if ignore_border < 0:
        raise InvalidConfiguration("`ignore_border` must not be negative")
    if 2 * ignore_border >= width or 2 * ignore_border >= height:
        raise InvalidConfiguration(
            f"Ignored border of {ignore_border} pixels leaves nothing of "
            f"{width}x{height} image")
    return Rect(ignore_border, ignore_border, width - ignore_border,
                height - ignore_border)


class BorderPolicy(object):
    """Which pixels of the processing rectangle can be evaluated

    Attributes
    ----------
    can_detect_border : bool
        If True, comparison windows are clipped at the image edges, so
        every pixel of the processing rectangle is evaluated. If False,
        only pixels whose full window lies within the image are evaluated.
    """
    def __init__(self, can_detect_border=False):
        """Parameters
        ----------
        can_detect_border : bool, optional
            Set :py:attr:`can_detect_border`. Defaults to False.
        """
        self.can_detect_border = can_detect_border

    def evaluation_rect(self, width, height, ignore_border, search_radius):
        """Get the rectangle of pixels that are tested as maxima

        Parameters
        ----------
        width, height : int
            Image size
        ignore_border : int
            Number of pixels from each edge which are not processed
        search_radius : int
            Half width of the comparison window

        Returns
        -------
        Rect
            Pixels to evaluate

        Raises
        ------
        InvalidConfiguration
            No pixel can be evaluated with the given border and radius.
        """
        rect = processing_rect(width, height, ignore_border)
        if self.can_detect_border or search_radius <= ignore_border:
            return rect
        if 2 * search_radius >= width or 2 * search_radius >= height:
            raise InvalidConfiguration(
                f"Search radius of {search_radius} pixels leaves nothing of "
                f"{width}x{height} image")
        return Rect(search_radius, search_radius, width - search_radius,
                    height - search_radius)

    def __repr__(self):
        return f"BorderPolicy(can_detect_border={self.can_detect_border})"

# SPDX-FileCopyrightText: 2020 Lukas Schrangl <lukas.schrangl@tuwien.ac.at>
#
# SPDX-License-Identifier: BSD-3-Clause

"""Collection of exception classes"""


class ExtractionError(Exception):
    """Base class for errors raised during feature extraction"""
    pass


class InvalidConfiguration(ExtractionError, ValueError):
    """Extractor configuration is not usable

    E.g. the ignored border or the search radius do not leave any pixel of
    the image to be processed, or a candidate list was passed to an
    extractor which does not use one (or vice versa).
    """
    pass


class OutOfBounds(ExtractionError, IndexError):
    """A coordinate lies outside of the image

    Attributes
    ----------
    coords
        Offending ``(x, y)`` coordinates
    shape
        Shape of the image
    """
    def __init__(self, coords, shape, text=None):
        """Parameters
        ----------
        coords : tuple of int
            Set the :py:attr:`coords` attribute.
        shape : tuple of int
            Set the :py:attr:`shape` attribute.
        text : str, optional
            What to display when converting the exception to a str
        """
        if text is None:
            text = f"Coordinates {tuple(coords)} outside of image of shape " \
                   f"{tuple(shape)}"
        super().__init__(text)
        self.coords = coords
        self.shape = shape


class ResourceExhausted(ExtractionError, MemoryError):
    """Storage for found features could not be grown"""
    pass

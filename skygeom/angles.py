# Copyright European Space Agency, 2013

"""
Adapters between angle literals and the plain radian values consumed by
the coordinate types.

Parsing of sexagesimal strings is done by :class:`astropy.coordinates.Angle`.
The conversion to radians is computed as ``hours/12*pi`` and
``degrees/180*pi`` so that round literals like ``'12h'`` or ``'90:0:0'``
give exactly the same values as literals written with :data:`numpy.pi`.
"""

import numpy as np
from astropy.coordinates import Angle
import astropy.units as u

def hms(text):
    """
    Parse an hour angle literal, e.g. ``'12h30m00s'`` or ``'12:30:00'``.

    :rtype: float, radians
    """
    hours = np.float64(Angle(text, unit=u.hourangle).hour)
    return hours / 12.0 * np.pi

def dms(text):
    """
    Parse a degree literal, e.g. ``'-47d30m00s'`` or ``'90:0:0'``.

    :rtype: float, radians
    """
    degrees = np.float64(Angle(text, unit=u.deg).degree)
    return degrees / 180.0 * np.pi

def to_radians(value):
    """
    Return `value` in radians.

    Plain numbers are taken to be radians already and are returned unchanged,
    astropy quantities (e.g. :class:`~astropy.coordinates.Angle`) are converted.
    """
    if isinstance(value, u.Quantity):
        return value.to_value(u.rad)
    return value

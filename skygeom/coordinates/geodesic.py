# Copyright European Space Agency, 2013

"""
This module contains functions for great circle calculations on the
celestial sphere: angular separation, position angle and offsets.

All functions accept coordinates of any frame and representation.
The second coordinate is converted into the frame of the first one,
and the calculation is done in the wider of the two precisions.
"""

import logging

import numpy as np

from skygeom.angles import to_radians
from skygeom.coordinates import numeric
from skygeom.coordinates.coords import BaseCoords, CartesianCoords, convert, spherical
from skygeom.coordinates.transform import cartesian_to_spherical

def _pair(c1, c2):
    """
    Return c1 and c2 as spherical coordinates in the frame of c1
    and the promoted precision.
    """
    if not isinstance(c1, BaseCoords) or not isinstance(c2, BaseCoords):
        raise TypeError('Expected two coordinates, got ' + type(c1).__name__ + ' and ' + type(c2).__name__)
    s1 = spherical(c1)
    dtype = numeric.promote(c1.dtype, c2.dtype)
    s1 = convert(type(s1), s1, dtype)
    s2 = convert(type(s1), c2, dtype)
    return s1, s2

def _separation(lon1, lat1, lon2, lat2):
    # Vincenty formula, accurate for small separations and antipodes
    sdlon = np.sin(lon2 - lon1)
    cdlon = np.cos(lon2 - lon1)
    slat1 = np.sin(lat1)
    clat1 = np.cos(lat1)
    slat2 = np.sin(lat2)
    clat2 = np.cos(lat2)

    num1 = clat2 * sdlon
    num2 = clat1 * slat2 - slat1 * clat2 * cdlon
    denominator = slat1 * slat2 + clat1 * clat2 * cdlon
    return np.arctan2(np.hypot(num1, num2), denominator)

def _position_angle(lon1, lat1, lon2, lat2, dtype):
    dlon = lon2 - lon1
    slat1 = np.sin(lat1)
    clat1 = np.cos(lat1)
    slat2 = np.sin(lat2)
    clat2 = np.cos(lat2)

    y = np.sin(dlon) * clat2
    x = clat1 * slat2 - slat1 * clat2 * np.cos(dlon)
    return numeric.mod2pi(np.arctan2(y, x), dtype)

def separation(c1, c2):
    """
    Return the great circle angle between two coordinates.

    :param c1: any coordinate
    :param c2: any coordinate, converted into the frame of `c1`
    :rtype: numpy scalar in radians, [0, pi]
    """
    s1, s2 = _pair(c1, c2)
    return _separation(s1.lon, s1.lat, s2.lon, s2.lat)

def position_angle(c1, c2):
    """
    Return the position angle of `c2` as seen from `c1`.

    The angle is measured from the local north direction of `c1`,
    increasing towards increasing longitude (east). For identical
    coordinates the direction is undefined and 0 is returned.

    :param c1: any coordinate
    :param c2: any coordinate, converted into the frame of `c1`
    :rtype: numpy scalar in radians, [0, 2pi)
    """
    s1, s2 = _pair(c1, c2)
    return _position_angle(s1.lon, s1.lat, s2.lon, s2.lat, s1.dtype)

def offset(c1, c2OrSeparation, positionAngle=None):
    """
    Solve the inverse or direct geodesic problem on the sphere.

    ``offset(c1, c2)`` returns the tuple ``(separation, position_angle)``
    of `c2` relative to `c1`.

    ``offset(c1, separation, position_angle)`` returns the coordinate
    reached when travelling `separation` radians from `c1` with the initial
    bearing `position_angle`. The result has the frame, representation and
    precision of `c1` and its longitude is in [0, 2pi). Starting on a pole,
    the position angle is measured relative to the meridian of the
    longitude of `c1`.

    Both directions are inverse to each other::

        convert(type(c2), offset(c1, *offset(c1, c2))) ~= c2

    :param c1: any coordinate
    :param c2OrSeparation: coordinate, or separation in radians
    :param positionAngle: position angle in radians, only for the direct problem
    """
    if positionAngle is None:
        if not isinstance(c2OrSeparation, BaseCoords):
            raise TypeError('offset() requires a coordinate, or a separation and a position angle')
        s1, s2 = _pair(c1, c2OrSeparation)
        return (_separation(s1.lon, s1.lat, s2.lon, s2.lat),
                _position_angle(s1.lon, s1.lat, s2.lon, s2.lat, s1.dtype))

    if isinstance(c2OrSeparation, BaseCoords):
        raise TypeError('offset() takes either a coordinate or a separation and a position angle, not both')
    if not isinstance(c1, BaseCoords):
        raise TypeError('Expected a coordinate, got ' + type(c1).__name__)

    s1 = spherical(c1)
    dtype = s1.dtype
    sep = numeric.cast(to_radians(c2OrSeparation), dtype)
    pa = numeric.cast(to_radians(positionAngle), dtype)

    slat = np.sin(s1.lat)
    clat = np.cos(s1.lat)
    slon = np.sin(s1.lon)
    clon = np.cos(s1.lon)
    if abs(clat) < numeric.pole_tolerance(dtype):
        logging.debug('offset() starting at a pole, using the meridian of the start longitude')

    # Walk along the great circle through the start vector and the local
    # direction given by the position angle. The north and east unit vectors
    # are taken at the start longitude, which also defines them on the poles.
    start = np.array([clat*clon, clat*slon, slat], dtype)
    north = np.array([-slat*clon, -slat*slon, clat], dtype)
    east = np.array([-slon, clon, 0], dtype)
    vec = np.cos(sep)*start + np.sin(sep)*(np.cos(pa)*north + np.sin(pa)*east)

    lat, lon = cartesian_to_spherical(vec[0], vec[1], vec[2], with_radius=False)
    result = type(s1)(lon, lat, dtype=dtype)
    if isinstance(c1, CartesianCoords):
        return result._as_cartesian()
    return result

# Copyright European Space Agency, 2013

"""
Small-angle projection of coordinates onto the plane tangent to the
sphere at an origin coordinate.

The offset is in radians along the local east (increasing longitude)
and north directions of the origin. The longitude difference is scaled
by cos(lat) of the origin, i.e. this is a flat-sky approximation
which is only meaningful close to the origin.
"""

import numpy as np

from skygeom.coordinates import numeric
from skygeom.coordinates.coords import BaseCoords, SkyCoords, convert, spherical,\
    vectors_close
from skygeom.util.decorators import lazy_property


class ProjectedCoords(BaseCoords):
    """
    A position given as offset from an origin in its tangent plane.

    :param SkyCoords origin: spherical origin coordinate, its frame is the frame of the projection
    :param offset: (east, north) offset in radians
    """

    def __init__(self, origin, offset):
        if not isinstance(origin, SkyCoords):
            raise TypeError('The origin must be a spherical coordinate, got ' + type(origin).__name__)
        offset = np.asarray(offset)
        if offset.shape != (2,):
            raise ValueError('The offset needs exactly 2 components, got shape ' + str(offset.shape))
        dtype = origin.dtype
        offset = np.array(offset, dtype)
        offset.setflags(write=False)
        object.__setattr__(self, '_origin', origin)
        object.__setattr__(self, '_offset', offset)
        object.__setattr__(self, '_dtype', dtype)

    @property
    def origin(self):
        return self._origin

    @property
    def offset(self):
        """
        The read-only (east, north) offset in radians, shape (2,).
        """
        return self._offset

    @property
    def frame(self):
        return self._origin.frame

    @lazy_property
    def _spherical(self):
        return unproject(self)

    def _as_spherical(self):
        return self._spherical

    def _as_cartesian(self):
        return self._spherical._as_cartesian()

    def _as_vector(self):
        return self._spherical._as_vector()

    def isclose(self, other, rtol=None, atol=0.0):
        """
        Approximate equality.

        Two projected coordinates are compared by origin and offset,
        anything else by the unprojected position, see :func:`~skygeom.coordinates.coords.isclose`.
        """
        if not isinstance(other, ProjectedCoords):
            return BaseCoords.isclose(self, other, rtol=rtol, atol=atol)
        if not self._origin.isclose(other._origin, rtol=rtol, atol=atol):
            return False
        if rtol is None:
            rtol = 0.0 if atol > 0 else numeric.default_rtol(self.dtype, other.dtype)
        dtype = numeric.promote(self.dtype, other.dtype)
        return vectors_close(self._offset.astype(dtype), other._offset.astype(dtype), rtol, atol)

    def __eq__(self, other):
        if type(other) is not type(self):
            return NotImplemented
        return bool(self._origin == other._origin and np.array_equal(self._offset, other._offset))

    def __hash__(self):
        return hash((type(self), self._origin) + tuple(self._offset.tolist()))

    def __reduce__(self):
        return ProjectedCoords, (self._origin, self._offset)

    def __repr__(self):
        return 'ProjectedCoords(origin=%r, offset=(%s, %s))' % (self._origin, self._offset[0], self._offset[1])


def project(originCoords, coords):
    """
    Project `coords` onto the tangent plane at `originCoords`.

    `coords` is converted into the frame of the origin. Both are brought
    to the wider of the two precisions.

    :rtype: ProjectedCoords
    """
    if not isinstance(originCoords, BaseCoords) or not isinstance(coords, BaseCoords):
        raise TypeError('Expected two coordinates, got ' + type(originCoords).__name__ +
                        ' and ' + type(coords).__name__)
    o = spherical(originCoords)
    dtype = numeric.promote(o.dtype, coords.dtype)
    o = convert(type(o), o, dtype)
    c = convert(type(o), coords, dtype)
    dlon = numeric.wrap_pi(c.lon - o.lon, dtype)
    dlat = c.lat - o.lat
    return ProjectedCoords(o, [dlon * np.cos(o.lat), dlat])

def origin(projected):
    """
    Return the origin of a :class:`ProjectedCoords`.
    """
    return projected.origin

def unproject(projected):
    """
    Return the spherical position of a :class:`ProjectedCoords`
    in the frame of its origin, the inverse of :func:`project`.
    """
    o = projected.origin
    dx, dy = projected.offset
    lat = o.lat + dy
    lon = o.lon + dx / np.cos(o.lat)
    return type(o)(lon, lat, dtype=projected.dtype)

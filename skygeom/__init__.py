"""
The skygeom package represents positions on the celestial sphere in the
ICRS, Galactic and FK5 reference frames, converts them between frames,
representations and floating point precisions, and performs great circle
calculations on them.

The :mod:`skygeom.coordinates` package contains the implementation.
The most commonly used names are imported here::

    from skygeom import ICRSCoords, GalCoords, FK5Coords, separation

    c = ICRSCoords(1.2, 0.3)
    g = GalCoords(c)
    separation(c, FK5Coords[1975](1.2, 0.31))

The :mod:`skygeom.angles` module converts sexagesimal angle literals
(parsed by astropy) into the radian values taken by the coordinate types.
"""

from ._version import __version__, __version_info__

from skygeom.coordinates.frames import ConfigurationError, Frame, ICRS, GALACTIC, fk5
from skygeom.coordinates.coords import SkyCoords, ICRSCoords, GalCoords, FK5Coords,\
    CartesianCoords, convert, convert_many, spherical, cartesian, lon, lat, isclose
from skygeom.coordinates.geodesic import separation, position_angle, offset
from skygeom.coordinates.projection import ProjectedCoords, project, origin, unproject
from skygeom.angles import hms, dms

__all__ = ['ConfigurationError', 'Frame', 'ICRS', 'GALACTIC', 'fk5',
           'SkyCoords', 'ICRSCoords', 'GalCoords', 'FK5Coords', 'CartesianCoords',
           'convert', 'convert_many', 'spherical', 'cartesian', 'lon', 'lat', 'isclose',
           'separation', 'position_angle', 'offset',
           'ProjectedCoords', 'project', 'origin', 'unproject',
           'hms', 'dms']

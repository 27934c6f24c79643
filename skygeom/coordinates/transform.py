# Copyright European Space Agency, 2013

"""
This module contains array algorithms to convert directions between
spherical and cartesian representations and between reference frames.

The functions work on plain numpy arrays (or scalars) of any floating
point precision and are used by the coordinate value types of
:mod:`skygeom.coordinates.coords`. They can also be used directly for
converting many positions at once.
"""

import numpy as np

from skygeom.coordinates import numeric
from skygeom.coordinates.frames import rotation

def spherical_to_cartesian(r, lat, lon, astuple=True):
    """
    Convert spherical to cartesian coordinates.

    The precision of the result is the promoted precision of `lat` and `lon`.

    :type r: scalar, ndarray or None (=1)
    :param lat: latitude(s) in radians
    :param lon: longitude(s) in radians
    :param astuple: if False, return a single array with x,y,z in the last axis
    :rtype: tuple (x,y,z) of ndarray's with shape as input
    """
    lat = np.asarray(lat)
    lon = np.asarray(lon)
    dtype = numeric.infer_dtype(lat, lon)
    lat = lat.astype(dtype, copy=False)
    lon = lon.astype(dtype, copy=False)

    coslat = np.cos(lat)
    z = np.sin(lat)
    if r is not None:
        r = np.asarray(r).astype(dtype, copy=False)
        coslat = coslat * r
        z = z * r
    x = (coslat * np.cos(lon)).astype(dtype, copy=False)
    y = (coslat * np.sin(lon)).astype(dtype, copy=False)
    z = np.array(np.broadcast_to(z, x.shape), dtype)

    if astuple:
        return x[()], y[()], z[()]
    else:
        return np.stack([x, y, z], axis=-1)

def cartesian_to_spherical(x, y, z, with_radius=True):
    """
    Convert cartesian to spherical coordinates.

    The vectors don't need to be normalized. Longitudes are returned
    in [0, 2pi), latitudes in [-pi/2, pi/2]. The zero vector maps to (0,0).

    :rtype: tuple (r,lat,lon) or (lat,lon) of ndarray's with shape as input
    """
    x = np.asarray(x)
    y = np.asarray(y)
    z = np.asarray(z)
    dtype = numeric.infer_dtype(x, y, z)
    x = x.astype(dtype, copy=False)
    y = y.astype(dtype, copy=False)
    z = z.astype(dtype, copy=False)

    xy = x*x + y*y
    lat = np.arctan2(z, np.sqrt(xy))
    lon = np.arctan2(y, x)

    # wrap into [0, 2pi)
    twopi = numeric.two_pi(dtype)
    lon = np.where(lon < 0, lon + twopi, lon)
    lon = np.where(lon >= twopi, lon - twopi, lon)

    if with_radius:
        r = np.sqrt(xy + z*z)
        return r[()], lat[()], lon[()]
    else:
        return lat[()], lon[()]

def rotate(matrix, vecs):
    """
    Apply a rotation matrix to one or many cartesian vectors.

    :param matrix: shape (3,3)
    :param vecs: shape (3,) or (n,3)
    :rtype: ndarray with shape of `vecs`
    """
    vecs = np.asarray(vecs)
    assert vecs.shape[-1] == 3
    return np.einsum('ij,...j->...i', matrix, vecs)

def frame_to_frame(fromFrame, toFrame, lats, lons, dtype=None):
    """
    Convert spherical coordinates from one reference frame into another.

    :param Frame fromFrame: see :mod:`skygeom.coordinates.frames`
    :param Frame toFrame:
    :param lats: latitude(s) in radians
    :param lons: longitude(s) in radians
    :param dtype: working precision, by default the precision of the inputs
    :rtype: tuple (lats, lons) in radians, longitudes in [0, 2pi)
    :raises ConfigurationError: if a frame is not supported
    """
    lats = np.asarray(lats)
    lons = np.asarray(lons)
    if dtype is None:
        dtype = numeric.infer_dtype(lats, lons)
    dtype = numeric.as_dtype(dtype)
    mat = rotation(fromFrame, toFrame, dtype)
    vecs = spherical_to_cartesian(None, lats.astype(dtype), lons.astype(dtype), astuple=False)
    x, y, z = np.moveaxis(rotate(mat, vecs), -1, 0)
    return cartesian_to_spherical(x, y, z, with_radius=False)

# Copyright European Space Agency, 2013

"""
Catalog of the supported celestial reference frames and the rotation
matrices between them.

All matrices are passive rotations, i.e. they transform the cartesian
components of a fixed direction from one frame into another::

    vec_to = rotation(from_frame, to_frame).dot(vec_from)

ICRS is used as the hub frame: every frame knows its rotation from ICRS,
and any other pair is composed from two of those.
Matrices are computed once in extended precision (:data:`numpy.longdouble`)
and cached. The cached arrays are read-only.
"""

import logging
from collections import namedtuple
from functools import lru_cache
from numbers import Real

import numpy as np

from skygeom.coordinates import numeric

class ConfigurationError(Exception):
    """
    Raised when a rotation is requested for a frame or equinox which is not supported.
    """

Frame = namedtuple('Frame', ['name', 'equinox'])

ICRS = Frame('icrs', None)
GALACTIC = Frame('galactic', None)

J2000 = 2000.0

# matrices are computed in this precision and cast when applied
_MATRIX_DTYPE = np.dtype(np.longdouble)

# ICRS to FK5 J2000 frame bias, in milliarcseconds (USNO Circular 179, section 3.5)
FRAME_BIAS_ETA0 = -19.9
FRAME_BIAS_XI0 = 9.1
FRAME_BIAS_DA0 = -22.9

# North galactic pole and longitude of the north celestial pole in FK5 J2000, in degrees.
# These are the values used by astropy, chosen for best self-consistency
# between FK5 -> Galactic and FK5 -> FK4 -> Galactic.
GALACTIC_NGP_RA = '192.8594812065348'
GALACTIC_NGP_DEC = '27.12825118085622'
GALACTIC_LON0 = '122.9319185680026'

# IAU 2006 precession angles (Capitaine et al. 2003), polynomial coefficients
# in arcseconds for Julian centuries since J2000, highest order first
PRECESSION_ZETA = ('-0.0000003173', '-0.000005971', '0.01801828', '0.2988499', '2306.083227', '2.650545')
PRECESSION_Z = ('-0.0000002904', '-0.000028596', '0.01826837', '1.0927348', '2306.077181', '-2.650545')
PRECESSION_THETA = ('-0.0000001274', '-0.000007089', '-0.04182264', '-0.4294934', '2004.191903', '0')

def _ld(value):
    # string constants keep all given digits in long double
    return _MATRIX_DTYPE.type(value)

def _deg(value):
    return _ld(value) * numeric.pi(_MATRIX_DTYPE) / _ld(180)

def _arcsec(value):
    return _deg(value) / _ld(3600)

def rotation_matrix(angle, axis):
    """
    Return the matrix of a passive rotation by `angle` around a coordinate axis.

    :param angle: in radians; the precision of `angle` is the precision of the matrix
    :param str axis: 'x', 'y', or 'z'
    :rtype: ndarray of shape (3,3)
    """
    i = 'xyz'.index(axis)
    a1 = (i + 1) % 3
    a2 = (i + 2) % 3
    angle = np.asarray(angle)
    dtype = numeric.promote(angle.dtype) if np.issubdtype(angle.dtype, np.floating) else numeric.DEFAULT_DTYPE
    c = np.cos(angle.astype(dtype))
    s = np.sin(angle.astype(dtype))
    mat = np.zeros((3,3), dtype)
    mat[i,i] = 1
    mat[a1,a1] = c
    mat[a2,a2] = c
    mat[a1,a2] = s
    mat[a2,a1] = -s
    return mat

def matrix_product(*matrices):
    """
    Multiply the given matrices from left to right.
    """
    mat = matrices[0]
    for m in matrices[1:]:
        mat = np.dot(mat, m)
    return mat

def _readonly(mat):
    mat.setflags(write=False)
    return mat

ICRS_TO_FK5J2000 = _readonly(matrix_product(
    rotation_matrix(-_deg(FRAME_BIAS_ETA0) / _ld(3600000), 'x'),
    rotation_matrix(_deg(FRAME_BIAS_XI0) / _ld(3600000), 'y'),
    rotation_matrix(_deg(FRAME_BIAS_DA0) / _ld(3600000), 'z')))

FK5J2000_TO_GAL = _readonly(matrix_product(
    rotation_matrix(_deg(180) - _deg(GALACTIC_LON0), 'z'),
    rotation_matrix(_deg(90) - _deg(GALACTIC_NGP_DEC), 'y'),
    rotation_matrix(_deg(GALACTIC_NGP_RA), 'z')))

ICRS_TO_GAL = _readonly(np.dot(FK5J2000_TO_GAL, ICRS_TO_FK5J2000))

def _check_equinox(equinox):
    if isinstance(equinox, (bool, np.bool_)) or not isinstance(equinox, Real):
        raise ConfigurationError('Equinox must be a real number (Julian year), got ' + repr(equinox))
    if not np.isfinite(equinox):
        raise ConfigurationError('Equinox must be finite, got ' + repr(equinox))
    return float(equinox)

def fk5(equinox):
    """
    Return the FK5 frame for the given Julian equinox, e.g. ``fk5(2000)``.

    :raises ConfigurationError: if the equinox is not a finite real number
    """
    return Frame('fk5', _check_equinox(equinox))

@lru_cache(maxsize=None)
def precession_matrix(equinox):
    """
    Precession matrix from the mean equator and equinox of J2000
    to the mean equator and equinox of the given Julian epoch.

    Uses the IAU 2006 expressions of Capitaine et al. (2003)
    as written in USNO Circular 179.

    :param equinox: Julian year, e.g. 1975
    :rtype: read-only long double ndarray of shape (3,3)
    """
    equinox = _check_equinox(equinox)
    t = (_ld(repr(equinox)) - _ld(J2000)) / _ld(100)
    zeta = _arcsec(np.polyval([_ld(c) for c in PRECESSION_ZETA], t))
    z = _arcsec(np.polyval([_ld(c) for c in PRECESSION_Z], t))
    theta = _arcsec(np.polyval([_ld(c) for c in PRECESSION_THETA], t))
    logging.debug('Computing precession matrix J2000 -> J' + str(equinox))
    return _readonly(matrix_product(
        rotation_matrix(-z, 'z'),
        rotation_matrix(theta, 'y'),
        rotation_matrix(-zeta, 'z')))

def _from_icrs_icrs(frame):
    return np.identity(3, _MATRIX_DTYPE)

def _from_icrs_galactic(frame):
    return ICRS_TO_GAL

def _from_icrs_fk5(frame):
    return np.dot(precession_matrix(frame.equinox), ICRS_TO_FK5J2000)

# frame name -> (takes equinox, function returning the ICRS -> frame matrix)
_FRAMES = {
    'icrs': (False, _from_icrs_icrs),
    'galactic': (False, _from_icrs_galactic),
    'fk5': (True, _from_icrs_fk5),
}

def check_frame(frame):
    """
    Validate a frame and return it as :class:`Frame`.

    :raises ConfigurationError: for unknown frames and missing, superfluous or invalid equinoxes
    """
    if not isinstance(frame, Frame):
        raise ConfigurationError('Not a reference frame: ' + repr(frame))
    try:
        needsEquinox, _ = _FRAMES[frame.name]
    except KeyError:
        raise ConfigurationError('Unsupported reference frame: ' + repr(frame.name)) from None
    if needsEquinox:
        if frame.equinox is None:
            raise ConfigurationError('The ' + frame.name + ' frame requires an equinox')
        return Frame(frame.name, _check_equinox(frame.equinox))
    if frame.equinox is not None:
        raise ConfigurationError('The ' + frame.name + ' frame does not take an equinox')
    return frame

def frame_name(frame):
    """
    Human readable name, e.g. 'ICRS', 'Galactic', 'FK5(J1975)'.
    """
    frame = check_frame(frame)
    if frame.name == 'fk5':
        return 'FK5(J%g)' % frame.equinox
    return {'icrs': 'ICRS', 'galactic': 'Galactic'}[frame.name]

@lru_cache(maxsize=None)
def _icrs_to(frame):
    _, fn = _FRAMES[frame.name]
    return _readonly(np.array(fn(frame), _MATRIX_DTYPE))

@lru_cache(maxsize=None)
def _rotation(fromFrame, toFrame):
    if fromFrame == toFrame:
        return _readonly(np.identity(3, _MATRIX_DTYPE))
    logging.debug('Computing rotation matrix ' + frame_name(fromFrame) + ' -> ' + frame_name(toFrame))
    # R(A->B) = R(ICRS->B) R(A->ICRS), R(A->ICRS) = R(ICRS->A)^T
    return _readonly(np.dot(_icrs_to(toFrame), _icrs_to(fromFrame).T))

def rotation(fromFrame, toFrame, dtype=None):
    """
    Return the rotation matrix which transforms cartesian vectors
    of `fromFrame` into `toFrame`.

    :param Frame fromFrame:
    :param Frame toFrame:
    :param dtype: precision of the returned matrix, long double if None
    :rtype: read-only ndarray of shape (3,3)
    :raises ConfigurationError: if one of the frames is not supported
    """
    mat = _rotation(check_frame(fromFrame), check_frame(toFrame))
    if dtype is None:
        return mat
    return _readonly(mat.astype(numeric.as_dtype(dtype)))

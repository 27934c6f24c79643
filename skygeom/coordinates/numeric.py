# Copyright European Space Agency, 2013

"""
Scalar helpers shared by all coordinate types, generic over the numpy
floating point types.

Every function takes or infers a numpy floating dtype (float16, float32,
float64 or longdouble) and computes its constants in that type, e.g. pi
for long double is not the double precision value widened.
"""

from functools import lru_cache

import numpy as np

DEFAULT_DTYPE = np.dtype(np.float64)

def as_dtype(dtype):
    """
    Return `dtype` as :class:`numpy.dtype`, making sure it is a floating type.

    :param dtype: anything accepted by :class:`numpy.dtype`, or None for the default
    :raises TypeError: if the dtype is not a real floating point type
    """
    if dtype is None:
        return DEFAULT_DTYPE
    dtype = np.dtype(dtype)
    if not np.issubdtype(dtype, np.floating):
        raise TypeError('Unsupported precision ' + str(dtype) + ', a floating point type is required')
    return dtype

def promote(*dtypes):
    """
    Return the widest of the given floating dtypes.
    """
    return as_dtype(np.result_type(*[as_dtype(d) for d in dtypes]))

def infer_dtype(*values):
    """
    Return the precision to use for the given values.

    Plain Python numbers don't carry a precision and are ignored,
    numpy floating scalars and arrays are promoted.
    If none of the values has a precision, :data:`DEFAULT_DTYPE` is returned.
    """
    dtypes = []
    for value in values:
        if isinstance(value, (np.floating, np.ndarray)) and np.issubdtype(value.dtype, np.floating):
            dtypes.append(value.dtype)
    if not dtypes:
        return DEFAULT_DTYPE
    return promote(*dtypes)

def cast(value, dtype):
    """
    Convert a scalar to a numpy scalar of the given dtype.
    """
    return as_dtype(dtype).type(value)

@lru_cache(maxsize=None)
def pi(dtype):
    t = as_dtype(dtype).type
    return np.arctan2(t(0), t(-1))

@lru_cache(maxsize=None)
def half_pi(dtype):
    return pi(dtype) / as_dtype(dtype).type(2)

@lru_cache(maxsize=None)
def two_pi(dtype):
    return pi(dtype) * as_dtype(dtype).type(2)

def eps(dtype):
    return np.finfo(as_dtype(dtype)).eps

def default_rtol(*dtypes):
    """
    Default relative tolerance for comparing values of the given precisions,
    the square root of the machine epsilon of the narrowest one.
    """
    if not dtypes:
        dtypes = (DEFAULT_DTYPE,)
    return max(np.sqrt(np.float64(eps(d))) for d in dtypes)

def pole_tolerance(dtype):
    """
    Values of cos(lat) below this count as lying on a pole, for diagnostics.
    """
    return np.sqrt(eps(dtype))

def mod2pi(x, dtype=None):
    """
    Reduce an angle into [0, 2pi).

    Values which are already in range are returned unchanged. Small negative
    values which would round to exactly 2pi are mapped to 0.
    """
    if dtype is None:
        dtype = infer_dtype(x)
    x = cast(x, dtype)
    twopi = two_pi(dtype)
    if 0 <= x < twopi:
        return x
    r = np.mod(x, twopi)
    if r >= twopi:
        r = r - twopi
    return cast(r, dtype)

def wrap_pi(x, dtype=None):
    """
    Reduce an angle into (-pi, pi].
    """
    if dtype is None:
        dtype = infer_dtype(x)
    x = cast(x, dtype)
    p = pi(dtype)
    if -p < x <= p:
        return x
    r = np.mod(x + p, two_pi(dtype)) - p
    if r <= -p:
        r = r + two_pi(dtype)
    return cast(r, dtype)

def normalize_lonlat(lon, lat, dtype):
    """
    Bring a longitude/latitude pair into its canonical range.

    The latitude ends up in [-pi/2, pi/2]; points given beyond a pole are
    folded over it, which moves the longitude by pi. The longitude ends up
    in [0, 2pi). Values already in range are kept bit-exact.

    :rtype: tuple (lon, lat) of numpy scalars of `dtype`
    """
    dtype = as_dtype(dtype)
    lon = cast(lon, dtype)
    lat = cast(lat, dtype)
    hp = half_pi(dtype)
    if np.isfinite(lat) and not (-hp <= lat <= hp):
        lat = wrap_pi(lat, dtype)
        if lat > hp:
            lat = pi(dtype) - lat
            lon = lon + pi(dtype)
        elif lat < -hp:
            lat = -pi(dtype) - lat
            lon = lon + pi(dtype)
    if np.isfinite(lon):
        lon = mod2pi(lon, dtype)
    return cast(lon, dtype), cast(lat, dtype)

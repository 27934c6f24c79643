# Copyright European Space Agency, 2013

"""
Value types for positions on the celestial sphere and the conversion
between reference frames and representations.

A position is either spherical (:class:`ICRSCoords`, :class:`GalCoords`,
``FK5Coords[equinox]``) or cartesian (``CartesianCoords[ICRSCoords]`` etc.).
Both kinds are immutable and tagged with their reference frame. Their
precision is a numpy floating dtype (float32, float64, longdouble, ...)
stored with the value.

>>> c = ICRSCoords(np.pi, 0.5)
>>> g = GalCoords(c)                    # same as convert(GalCoords, c)
>>> c32 = c.astype(np.float32)
>>> v = cartesian(c)                    # CartesianCoords[ICRSCoords]
"""

import numpy as np

from skygeom.angles import to_radians
from skygeom.coordinates import numeric
from skygeom.coordinates.frames import ConfigurationError, Frame, ICRS, GALACTIC,\
    fk5, check_frame, rotation
from skygeom.coordinates.transform import spherical_to_cartesian,\
    cartesian_to_spherical, rotate
from skygeom.util.decorators import lazy_property


class BaseCoords(object):
    """
    Behaviour shared by all coordinate value types.

    Subclasses implement :meth:`_as_spherical`, :meth:`_as_cartesian`
    and :meth:`_as_vector` and provide the `frame` and `dtype` attributes.
    """
    frame = None

    def __setattr__(self, name, value):
        raise AttributeError(type(self).__name__ + ' objects are immutable')

    def __delattr__(self, name):
        raise AttributeError(type(self).__name__ + ' objects are immutable')

    @property
    def dtype(self):
        """
        The precision of the stored values, a floating :class:`numpy.dtype`.
        """
        return self._dtype

    def _as_spherical(self):
        raise NotImplementedError

    def _as_cartesian(self):
        raise NotImplementedError

    def _as_vector(self):
        """
        Unit vector in the own frame and precision, shape (3,).
        """
        raise NotImplementedError

    def transform_to(self, target, dtype=None):
        """
        Convert to another frame and/or representation, see :func:`convert`.
        """
        return convert(target, self, dtype)

    def astype(self, dtype):
        """
        Return the same coordinate in another precision.
        """
        return convert(type(self), self, dtype)

    def isclose(self, other, rtol=None, atol=0.0):
        """
        Approximate equality, see :func:`isclose`.
        """
        if not isinstance(other, BaseCoords):
            raise TypeError('Cannot compare ' + type(self).__name__ + ' with ' + type(other).__name__)
        dtype = numeric.promote(self.dtype, other.dtype)
        if rtol is None:
            rtol = 0.0 if atol > 0 else numeric.default_rtol(self.dtype, other.dtype)
        va = _unit(self._as_vector().astype(dtype))
        vb = _unit(other._as_vector().astype(dtype))
        if other.frame != self.frame:
            vb = rotate(rotation(other.frame, self.frame, dtype), vb)
        return vectors_close(va, vb, rtol, atol)


def _unit(vec):
    # cartesian values may hold vectors of any length
    norm = np.sqrt(np.sum(vec*vec))
    if norm == 0:
        return vec
    return vec / norm

def vectors_close(a, b, rtol, atol):
    """
    Return whether ``|a-b| <= max(atol, rtol*max(|a|,|b|))``, with euclidean norms.
    """
    a = np.asarray(a)
    b = np.asarray(b)
    diff = a - b
    d = np.sqrt(np.sum(diff*diff))
    na = np.sqrt(np.sum(a*a))
    nb = np.sqrt(np.sum(b*b))
    return bool(d <= max(atol, rtol * max(na, nb)))


class SkyCoords(BaseCoords):
    """
    Base class of spherical coordinates.

    Subclasses define the reference frame in the `frame` class attribute
    and the names of the two angles in `_names`, e.g. ``('ra', 'dec')``.
    Angles are in radians, the longitude is stored in [0, 2pi) and the
    latitude in [-pi/2, pi/2]. A latitude beyond a pole is folded
    back over the pole.

    Constructing with a single coordinate argument converts it into this frame.

    :param lon: longitude in radians, or any coordinate to convert
    :param lat: latitude in radians
    :param dtype: precision, by default the promoted precision of numpy float inputs,
                  or float64 for plain Python numbers
    """
    _names = ('lon', 'lat')

    def __init__(self, lon, lat=None, dtype=None):
        if self.frame is None:
            raise ConfigurationError(type(self).__name__ + ' has no reference frame' +
                                     (', use e.g. FK5Coords[2000]' if issubclass(type(self), FK5Coords) else ''))
        if lat is None:
            if not isinstance(lon, BaseCoords):
                raise TypeError(type(self).__name__ + ' requires a longitude and a latitude, or a coordinate to convert')
            other = convert(type(self), lon, dtype)
            lon, lat, dtype = other._lon, other._lat, other._dtype
        else:
            lon = to_radians(lon)
            lat = to_radians(lat)
            if dtype is None:
                dtype = numeric.infer_dtype(lon, lat)
            dtype = numeric.as_dtype(dtype)
            lon, lat = numeric.normalize_lonlat(lon, lat, dtype)
        object.__setattr__(self, '_lon', lon)
        object.__setattr__(self, '_lat', lat)
        object.__setattr__(self, '_dtype', dtype)

    @property
    def lon(self):
        """
        Longitude in radians, [0, 2pi).
        """
        return self._lon

    @property
    def lat(self):
        """
        Latitude in radians, [-pi/2, pi/2].
        """
        return self._lat

    @lazy_property
    def _vector(self):
        vec = spherical_to_cartesian(None, self._lat, self._lon, astuple=False)
        vec.setflags(write=False)
        return vec

    def _as_vector(self):
        return self._vector

    def _as_spherical(self):
        return self

    def _as_cartesian(self):
        return CartesianCoords[type(self)](self._vector, dtype=self._dtype)

    def replace(self, **fields):
        """
        Return a copy with some fields replaced, e.g. ``c.replace(ra=1.5)``.

        Fields can be given by their frame-specific names or as `lon` and `lat`.
        """
        lon, lat = self._lon, self._lat
        for name, value in fields.items():
            if name in ('lon', self._names[0]):
                lon = value
            elif name in ('lat', self._names[1]):
                lat = value
            else:
                raise TypeError(type(self).__name__ + ' has no field ' + repr(name))
        return type(self)(lon, lat, dtype=self._dtype)

    __replace__ = replace

    def __eq__(self, other):
        if type(other) is not type(self):
            return NotImplemented
        return bool(self._dtype == other._dtype and
                    self._lon == other._lon and
                    self._lat == other._lat)

    def __hash__(self):
        return hash((type(self), self._dtype, self._lon, self._lat))

    def __reduce__(self):
        return _restore, (_class_key(type(self)), (self._lon, self._lat), self._dtype)

    def __repr__(self):
        dtype = '' if self._dtype == numeric.DEFAULT_DTYPE else ', dtype=' + self._dtype.name
        return '%s(%s=%s, %s=%s%s)' % (type(self).__name__,
                                        self._names[0], self._lon,
                                        self._names[1], self._lat, dtype)


class ICRSCoords(SkyCoords):
    """
    International Celestial Reference System, right ascension and declination.
    """
    frame = ICRS
    _names = ('ra', 'dec')
    ra = SkyCoords.lon
    dec = SkyCoords.lat


class GalCoords(SkyCoords):
    """
    Galactic coordinates, galactic longitude and latitude.
    """
    frame = GALACTIC
    _names = ('l', 'b')
    l = SkyCoords.lon
    b = SkyCoords.lat


class FK5Coords(SkyCoords):
    """
    FK5 coordinates, right ascension and declination referred to the mean
    equator and equinox of a Julian epoch.

    The equinox is part of the type: ``FK5Coords[2000]`` and ``FK5Coords[1975]``
    are different classes, and the bare :class:`FK5Coords` can't be instantiated.

    >>> c = FK5Coords[1975](1.0, 0.2)
    >>> c.equinox
    1975.0
    """
    equinox = None
    _names = ('ra', 'dec')
    ra = SkyCoords.lon
    dec = SkyCoords.lat

    _classes = {}

    def __class_getitem__(cls, equinox):
        frame = fk5(equinox)
        try:
            return FK5Coords._classes[frame.equinox]
        except KeyError:
            pass
        name = 'FK5Coords[%g]' % frame.equinox
        sub = type(name, (FK5Coords,), {
            '__module__': __name__,
            '__qualname__': name,
            '__doc__': FK5Coords.__doc__,
            'frame': frame,
            'equinox': frame.equinox,
        })
        return FK5Coords._classes.setdefault(frame.equinox, sub)


class CartesianCoords(BaseCoords):
    """
    A direction as cartesian vector in the frame of a spherical coordinate type.

    Use ``CartesianCoords[ICRSCoords]``, ``CartesianCoords[FK5Coords[2000]]``
    etc., the bare :class:`CartesianCoords` can't be instantiated.
    The vector is stored as given, i.e. it is not normalized. Conversions
    into spherical coordinates don't depend on its length.

    :param x: x component, a sequence of three components, or any coordinate to convert
    :param y: y component
    :param z: z component
    :param dtype: precision, inferred from the inputs if None
    """
    coords_class = None

    _classes = {}

    def __class_getitem__(cls, coordsClass):
        if not (isinstance(coordsClass, type) and issubclass(coordsClass, SkyCoords)) \
           or coordsClass.frame is None:
            raise TypeError('CartesianCoords must be parameterized with a spherical coordinate class '
                            'with reference frame, got ' + repr(coordsClass))
        try:
            return CartesianCoords._classes[coordsClass]
        except KeyError:
            pass
        name = 'CartesianCoords[%s]' % coordsClass.__name__
        sub = type(name, (CartesianCoords,), {
            '__module__': __name__,
            '__qualname__': name,
            'coords_class': coordsClass,
            'frame': coordsClass.frame,
        })
        return CartesianCoords._classes.setdefault(coordsClass, sub)

    def __init__(self, x, y=None, z=None, dtype=None):
        if self.coords_class is None:
            raise TypeError('Use CartesianCoords[<spherical class>], e.g. CartesianCoords[ICRSCoords]')
        if y is None and z is None:
            if isinstance(x, BaseCoords):
                other = convert(type(self), x, dtype)
                vec, dtype = other._vec, other._dtype
            else:
                vec = np.asarray(x)
        else:
            vec = np.asarray([x, y, z])
        if vec.shape != (3,):
            raise ValueError('Cartesian coordinates need exactly 3 components, got shape ' + str(vec.shape))
        if dtype is None:
            dtype = numeric.infer_dtype(vec)
        dtype = numeric.as_dtype(dtype)
        vec = np.array(vec, dtype)
        vec.setflags(write=False)
        object.__setattr__(self, '_vec', vec)
        object.__setattr__(self, '_dtype', dtype)

    @property
    def vec(self):
        """
        The read-only vector, shape (3,).
        """
        return self._vec

    @property
    def x(self):
        return self._vec[0]

    @property
    def y(self):
        return self._vec[1]

    @property
    def z(self):
        return self._vec[2]

    def _as_vector(self):
        return self._vec

    @lazy_property
    def _spherical(self):
        lat, lon = cartesian_to_spherical(self._vec[0], self._vec[1], self._vec[2], with_radius=False)
        return self.coords_class(lon, lat, dtype=self._dtype)

    def _as_spherical(self):
        return self._spherical

    def _as_cartesian(self):
        return self

    def replace(self, **fields):
        """
        Return a copy with the vector or single components replaced,
        e.g. ``c.replace(vec=[1,0,0])`` or ``c.replace(z=0)``.
        """
        vec = list(self._vec)
        for name, value in fields.items():
            if name == 'vec':
                vec = list(np.asarray(value))
            elif name in ('x', 'y', 'z'):
                vec['xyz'.index(name)] = value
            else:
                raise TypeError(type(self).__name__ + ' has no field ' + repr(name))
        return type(self)(vec, dtype=self._dtype)

    __replace__ = replace

    def __eq__(self, other):
        if type(other) is not type(self):
            return NotImplemented
        return bool(self._dtype == other._dtype and np.array_equal(self._vec, other._vec))

    def __hash__(self):
        return hash((type(self), self._dtype) + tuple(self._vec.tolist()))

    def __reduce__(self):
        return _restore, (_class_key(type(self)), (self._vec,), self._dtype)

    def __repr__(self):
        dtype = '' if self._dtype == numeric.DEFAULT_DTYPE else ', dtype=' + self._dtype.name
        return '%s(x=%s, y=%s, z=%s%s)' % (type(self).__name__,
                                            self._vec[0], self._vec[1], self._vec[2], dtype)


def _class_key(cls):
    """
    A picklable key for coordinate classes. Classes created by
    ``FK5Coords[...]`` and ``CartesianCoords[...]`` can't be found by name
    and are described by their parameters instead.
    """
    if issubclass(cls, CartesianCoords) and cls.coords_class is not None:
        return (CartesianCoords, _class_key(cls.coords_class))
    if issubclass(cls, FK5Coords) and cls.equinox is not None:
        return (FK5Coords, cls.equinox)
    return cls

def _class_from_key(key):
    if isinstance(key, tuple):
        base, param = key
        return base[_class_from_key(param)]
    return key

def _restore(key, args, dtype):
    return _class_from_key(key)(*args, dtype=dtype)


def coords_class(frame):
    """
    Return the spherical coordinate class of a reference frame.

    :param Frame frame: see :mod:`skygeom.coordinates.frames`
    :raises ConfigurationError: if the frame is not supported
    """
    frame = check_frame(frame)
    if frame.name == 'fk5':
        return FK5Coords[frame.equinox]
    return {'icrs': ICRSCoords, 'galactic': GalCoords}[frame.name]

def _target_class(target):
    if isinstance(target, Frame):
        return coords_class(target)
    if isinstance(target, type) and issubclass(target, (SkyCoords, CartesianCoords)):
        if target.frame is None:
            if issubclass(target, CartesianCoords):
                raise TypeError('Use CartesianCoords[<spherical class>] as conversion target')
            raise ConfigurationError(target.__name__ + ' has no reference frame')
        return target
    raise TypeError('Conversion target must be a coordinate class or frame, got ' + repr(target))

def convert(target, coords, dtype=None):
    """
    Convert a coordinate into another frame, representation and/or precision.

    If `coords` already is of the target class and precision it is returned itself.
    Within the same frame only the representation or precision changes.
    Otherwise the cartesian vector is rotated into the target frame.
    The rotation is done in the wider of the source and target precision.

    :param target: spherical class (e.g. `GalCoords`), cartesian class
                   (e.g. ``CartesianCoords[GalCoords]``) or :class:`Frame`
    :param coords: any coordinate value
    :param dtype: target precision, by default the precision of `coords`
    :raises ConfigurationError: if a frame is not supported
    """
    target = _target_class(target)
    if not isinstance(coords, BaseCoords):
        raise TypeError('Cannot convert ' + type(coords).__name__ + ' to ' + target.__name__)
    dtype = coords.dtype if dtype is None else numeric.as_dtype(dtype)
    if type(coords) is target and coords.dtype == dtype:
        return coords

    if coords.frame == target.frame:
        if issubclass(target, SkyCoords):
            s = coords._as_spherical()
            return target(s.lon, s.lat, dtype=dtype)
        return target(coords._as_vector(), dtype=dtype)

    work = numeric.promote(coords.dtype, dtype)
    vec = rotate(rotation(coords.frame, target.frame, work), coords._as_vector().astype(work))
    if issubclass(target, CartesianCoords):
        return target(vec, dtype=dtype)
    lat, lon = cartesian_to_spherical(vec[0], vec[1], vec[2], with_radius=False)
    return target(lon, lat, dtype=dtype)

def convert_many(target, coords, dtype=None):
    """
    Convert a sequence of coordinates, see :func:`convert`.

    Coordinates of the same frame and precision are rotated together
    with a single matrix product.

    :rtype: list
    """
    target = _target_class(target)
    coords = list(coords)
    result = [None] * len(coords)
    groups = {}
    for i, c in enumerate(coords):
        if not isinstance(c, BaseCoords):
            raise TypeError('Cannot convert ' + type(c).__name__ + ' to ' + target.__name__)
        if c.frame == target.frame:
            result[i] = convert(target, c, dtype)
        else:
            groups.setdefault((c.frame, c.dtype), []).append(i)

    for (frame, srcDtype), indices in groups.items():
        outDtype = srcDtype if dtype is None else numeric.as_dtype(dtype)
        work = numeric.promote(srcDtype, outDtype)
        vecs = np.array([coords[i]._as_vector() for i in indices], work)
        vecs = rotate(rotation(frame, target.frame, work), vecs)
        if issubclass(target, CartesianCoords):
            for i, vec in zip(indices, vecs):
                result[i] = target(vec, dtype=outDtype)
        else:
            lats, lons = cartesian_to_spherical(vecs[:,0], vecs[:,1], vecs[:,2], with_radius=False)
            for i, lon, lat in zip(indices, lons, lats):
                result[i] = target(lon, lat, dtype=outDtype)
    return result

def spherical(coords):
    """
    Return the spherical representation in the own frame.
    Spherical coordinates are returned unchanged.
    """
    return coords._as_spherical()

def cartesian(coords):
    """
    Return the cartesian representation in the own frame.
    Cartesian coordinates are returned unchanged.
    """
    return coords._as_cartesian()

def lon(coords):
    """
    Longitude in radians of any coordinate in its own frame.
    """
    return spherical(coords).lon

def lat(coords):
    """
    Latitude in radians of any coordinate in its own frame.
    """
    return spherical(coords).lat

def isclose(a, b, rtol=None, atol=0.0):
    """
    Return whether two coordinates describe approximately the same direction.

    `b` is converted into the frame of `a` and the two unit vectors are compared
    with ``|a-b| <= max(atol, rtol*max(|a|,|b|))``. Comparing vectors makes the
    test independent of the longitude wrap at 0/2pi and of the longitude
    near the poles.

    :param rtol: relative tolerance, by default the square root of the machine epsilon
                 of the narrower precision (or 0 if `atol` is given)
    :param atol: absolute tolerance
    """
    return a.isclose(b, rtol=rtol, atol=atol)

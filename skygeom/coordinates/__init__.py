"""
This package contains the coordinate value types for the supported
reference frames (:mod:`~skygeom.coordinates.coords`), the catalog of
frames and the rotations between them (:mod:`~skygeom.coordinates.frames`),
array conversions between spherical and cartesian representations
(:mod:`~skygeom.coordinates.transform`), great circle calculations
(:mod:`~skygeom.coordinates.geodesic`), and tangent plane projections
(:mod:`~skygeom.coordinates.projection`).

All modules are generic over the numpy floating point types, see
:mod:`~skygeom.coordinates.numeric`.
"""

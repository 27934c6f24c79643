# Copyright European Space Agency, 2013

import unittest

import numpy as np
from numpy.testing import assert_almost_equal

from skygeom.coordinates import numeric

DTYPES = [np.float32, np.float64, np.longdouble]

class Test(unittest.TestCase):

    def testConstants(self):
        for dtype in DTYPES:
            p = numeric.pi(dtype)
            self.assertEqual(p.dtype, np.dtype(dtype))
            self.assertEqual(numeric.half_pi(dtype).dtype, np.dtype(dtype))
            self.assertEqual(numeric.two_pi(dtype), 2 * p)
            assert_almost_equal(float(p), np.pi, 6)
        self.assertEqual(numeric.pi(np.float64), np.pi)
        self.assertEqual(numeric.half_pi(np.float64), np.pi / 2)

    def testLongDoublePi(self):
        p = numeric.pi(np.longdouble)
        self.assertLess(abs(p - np.longdouble(np.pi)), 1e-15)
        if np.finfo(np.longdouble).eps < np.finfo(np.float64).eps:
            # more digits than the double precision value
            self.assertLess(abs(np.sin(p)), abs(np.sin(np.longdouble(np.pi))))

    def testTolerances(self):
        self.assertEqual(numeric.default_rtol(np.float64), np.sqrt(np.finfo(np.float64).eps))
        self.assertEqual(numeric.default_rtol(np.float64, np.float32),
                         np.sqrt(np.float64(np.finfo(np.float32).eps)))
        self.assertLess(numeric.pole_tolerance(np.float64), numeric.pole_tolerance(np.float32))

    def testDtypes(self):
        self.assertEqual(numeric.as_dtype(None), np.dtype(np.float64))
        self.assertEqual(numeric.as_dtype('float32'), np.dtype(np.float32))
        with self.assertRaises(TypeError):
            numeric.as_dtype(np.int64)
        with self.assertRaises(TypeError):
            numeric.as_dtype(np.complex128)

        self.assertEqual(numeric.promote(np.float32, np.longdouble), np.dtype(np.longdouble))
        self.assertEqual(numeric.promote(np.float32, np.float32), np.dtype(np.float32))

        self.assertEqual(numeric.infer_dtype(1, 2.0), np.dtype(np.float64))
        self.assertEqual(numeric.infer_dtype(1.0, np.float32(2)), np.dtype(np.float32))
        self.assertEqual(numeric.infer_dtype(np.float32(1), np.float64(2)), np.dtype(np.float64))
        self.assertEqual(numeric.infer_dtype(np.zeros(3, np.longdouble)), np.dtype(np.longdouble))
        self.assertEqual(numeric.infer_dtype(np.zeros(3, int)), np.dtype(np.float64))

    def testMod2pi(self):
        self.assertEqual(numeric.mod2pi(1.0), 1.0)
        self.assertEqual(numeric.mod2pi(0.0), 0.0)
        # rounds to 2pi, must not end up outside [0, 2pi)
        self.assertEqual(numeric.mod2pi(-1e-20), 0.0)
        assert_almost_equal(numeric.mod2pi(3 * np.pi), np.pi)
        assert_almost_equal(numeric.mod2pi(-np.pi / 2), 3 * np.pi / 2)
        self.assertEqual(numeric.mod2pi(-np.pi), np.pi)
        self.assertEqual(numeric.mod2pi(np.float32(-1), np.float32).dtype, np.dtype(np.float32))
        for dtype in DTYPES:
            twopi = numeric.two_pi(dtype)
            r = numeric.mod2pi(-numeric.eps(dtype), dtype)
            self.assertTrue(0 <= r < twopi)

    def testWrapPi(self):
        self.assertEqual(numeric.wrap_pi(np.pi), np.pi)
        self.assertEqual(numeric.wrap_pi(-np.pi), np.pi)
        self.assertEqual(numeric.wrap_pi(1e-5), 1e-5)
        assert_almost_equal(numeric.wrap_pi(3 * np.pi / 2), -np.pi / 2)
        assert_almost_equal(numeric.wrap_pi(-3 * np.pi / 2), np.pi / 2)
        assert_almost_equal(numeric.wrap_pi(2 * np.pi - 1e-3), -1e-3)

    def testNormalizeInRange(self):
        lon, lat = numeric.normalize_lonlat(0.5, 0.3, np.float64)
        self.assertEqual(lon, 0.5)
        self.assertEqual(lat, 0.3)

        lon, lat = numeric.normalize_lonlat(np.pi, np.pi / 2, np.float64)
        self.assertEqual(lon, np.pi)
        self.assertEqual(lat, np.pi / 2)

        lon, lat = numeric.normalize_lonlat(-0.5, 0.0, np.float64)
        assert_almost_equal(lon, 2 * np.pi - 0.5)

    def testNormalizeOverPole(self):
        lon, lat = numeric.normalize_lonlat(1.0, 2.0, np.float64)
        assert_almost_equal(lat, np.pi - 2)
        assert_almost_equal(lon, 1 + np.pi)

        lon, lat = numeric.normalize_lonlat(-0.5, -2.0, np.float64)
        assert_almost_equal(lat, 2 - np.pi)
        assert_almost_equal(lon, np.pi - 0.5)

        # over the north pole and on to the southern hemisphere
        lon, lat = numeric.normalize_lonlat(0.0, 4.0, np.float64)
        assert_almost_equal(lat, np.pi - 4.0)
        assert_almost_equal(lon, np.pi)

    def testNormalizeDtype(self):
        for dtype in DTYPES:
            lon, lat = numeric.normalize_lonlat(7.0, -2.0, dtype)
            self.assertEqual(lon.dtype, np.dtype(dtype))
            self.assertEqual(lat.dtype, np.dtype(dtype))
            self.assertTrue(-numeric.half_pi(dtype) <= lat <= numeric.half_pi(dtype))
            self.assertTrue(0 <= lon < numeric.two_pi(dtype))

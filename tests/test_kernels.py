import unittest

import numpy as np

from rect_som import ConfigurationError
from rect_som.distance import (
    euclidean_distance,
    get_distance_function,
    squared_euclidean_distance,
)
from rect_som.neighbourhood import expon, gaussian, get_neighbourhood_function, sinc


class TestNeighbourhoodKernels(unittest.TestCase):

    def test_unit_at_center(self):
        for kernel in (gaussian, sinc, expon):
            for radius in (0.01, 0.5, 1.0, 3.7, 250.0):
                self.assertEqual(float(kernel(0, 0, radius)), 1.0)

    def test_gaussian_value(self):
        self.assertAlmostEqual(float(gaussian(3, 4, 2.0)), np.exp(-25.0 / 8.0))

    def test_expon_value(self):
        self.assertAlmostEqual(float(expon(3, 4, 2.0)), np.exp(-2.5))

    def test_sinc_value(self):
        d = 5.0 / 4.0
        self.assertAlmostEqual(float(sinc(3, 4, 2.0)), np.sin(d) / d)

    def test_sinc_goes_negative(self):
        # sin(d) < 0 for pi < d < 2 pi
        self.assertLess(float(sinc(8, 0, 1.0)), 0.0)

    def test_non_increasing_with_distance(self):
        distances = np.arange(0, 20)
        for kernel in (gaussian, expon):
            values = kernel(distances, np.zeros_like(distances), 3.0)
            self.assertTrue(np.all(np.diff(values) <= 0))

    def test_broadcast_over_offsets(self):
        dx = np.array([-1, 0, 1, 0])
        dy = np.array([0, 0, 0, 2])
        with np.errstate(all="raise"):
            values = sinc(dx, dy, 1.0)
        self.assertEqual(values.shape, (4,))
        self.assertEqual(values[1], 1.0)
        self.assertEqual(values[0], values[2])

    def test_lookup_by_name(self):
        self.assertIs(get_neighbourhood_function("gaussian"), gaussian)
        self.assertIs(get_neighbourhood_function("sinc"), sinc)
        self.assertIs(get_neighbourhood_function("sinc_sq"), sinc)
        self.assertIs(get_neighbourhood_function("expon"), expon)
        with self.assertRaises(ConfigurationError):
            get_neighbourhood_function("bubble")


class TestDistanceFunctions(unittest.TestCase):

    def test_squared_euclidean(self):
        self.assertEqual(squared_euclidean_distance([1.0, 2.0], [4.0, 6.0]), 25.0)
        self.assertEqual(squared_euclidean_distance([1.0, 2.0], [1.0, 2.0]), 0.0)

    def test_euclidean(self):
        self.assertEqual(euclidean_distance([1.0, 2.0], [4.0, 6.0]), 5.0)

    def test_broadcast_over_cells(self):
        cells = np.array([[0.0, 0.0], [1.0, 1.0], [3.0, 0.0]])
        np.testing.assert_array_equal(squared_euclidean_distance(cells, [1.0, 0.0]), [1.0, 1.0, 4.0])

    def test_lookup_by_name(self):
        self.assertIs(get_distance_function("sq_euclidean"), squared_euclidean_distance)
        self.assertIs(get_distance_function("euclidean"), euclidean_distance)
        with self.assertRaises(ConfigurationError):
            get_distance_function("manhattan")


if __name__ == "__main__":
    unittest.main()

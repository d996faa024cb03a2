# tests/test_matrix3.py

import unittest
import math
import numpy as np
from glmath import (
    Matrix3,
    Vector2,
    Vector3,
    DivideByZeroError,
    NotInvertibleError,
    SizeMismatchError,
)


class TestMatrix3Algebra(unittest.TestCase):
    def setUp(self):
        self.m = Matrix3(2, 0, 1, 1, 3, 0, 0, 1, 4)

    def test_determinant_matches_numpy(self):
        grid = self.m.to_flat_array().reshape(3, 3).T
        self.assertAlmostEqual(self.m.determinant(), np.linalg.det(grid), places=10)

    def test_invert_round_trip(self):
        inverse = self.m.invert(inplace=False)
        self.assertTrue((self.m @ inverse).equals_epsilon(Matrix3(), 1e-12))
        self.assertTrue(Matrix3.get_inverse(inverse).equals_epsilon(self.m, 1e-12))

    def test_singular_leaves_matrix_untouched(self):
        m = Matrix3(1, 2, 3, 2, 4, 6, 0, 1, 1)
        self.assertEqual(m.determinant(), 0.0)
        with self.assertRaises(NotInvertibleError):
            m.invert()
        self.assertEqual(m.to_list(), [1.0, 2.0, 3.0, 2.0, 4.0, 6.0, 0.0, 1.0, 1.0])

    def test_fast_product_matches_numpy(self):
        a = Matrix3(*range(1, 10))
        b = Matrix3(*range(9, 0, -1))
        ga = a.to_flat_array().reshape(3, 3).T
        gb = b.to_flat_array().reshape(3, 3).T
        expected = (ga @ gb).T.ravel()
        np.testing.assert_array_equal((a @ b).elements, expected)

    def test_product_receiver_may_alias(self):
        a = Matrix3(*range(1, 10))
        expected = a @ a
        a.multiply_matrices(a, a)
        self.assertTrue(a.equals(expected))


class TestMatrix3Transforms(unittest.TestCase):
    def test_translation_moves_points_not_directions(self):
        m = Matrix3().make_translation(1, 2)
        self.assertEqual(m.transform_point(Vector2(0, 0)).to_list(), [1.0, 2.0])
        self.assertEqual(m.transform_direction(Vector2(5, 5)).to_list(), [5.0, 5.0])

    def test_transform_point_homogeneous_divide(self):
        m = Matrix3()
        m.set(2, 2, 2.0)
        self.assertEqual(m.transform_point(Vector2(4, 6)).to_list(), [2.0, 3.0])

    def test_transform_point_w_zero(self):
        m = Matrix3()
        m.set(2, 2, 0.0)
        with self.assertRaises(DivideByZeroError):
            m.transform_point(Vector2(1, 1))

    def test_rotation_z(self):
        m = Matrix3().make_rotation_z(math.pi / 2)
        np.testing.assert_allclose(m.transform_direction(Vector2(1, 0)).elements, [0, 1], atol=1e-12)
        np.testing.assert_allclose(m.transform_point(Vector2(0, 1)).elements, [-1, 0], atol=1e-12)

    def test_scale(self):
        m = Matrix3().make_translation(5, 5).make_scale(2, 3)
        # builders reset to identity first
        self.assertEqual(m.transform_point(Vector2(1, 1)).to_list(), [2.0, 3.0])

    def test_transform_vector(self):
        m = Matrix3(*range(1, 10))
        v = m.transform_vector(Vector3(1, 0, 0))
        self.assertIsInstance(v, Vector3)
        self.assertEqual(v.to_list(), [1.0, 2.0, 3.0])

    def test_transform_size_mismatch(self):
        m = Matrix3()
        with self.assertRaises(SizeMismatchError):
            m.transform_point(Vector3(1, 1, 1))
        with self.assertRaises(SizeMismatchError):
            m.transform_direction(Vector3(1, 1, 1))
        with self.assertRaises(SizeMismatchError):
            m.transform_vector(Vector2(1, 1))


if __name__ == "__main__":
    unittest.main()

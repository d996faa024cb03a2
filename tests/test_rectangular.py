# tests/test_rectangular.py

import unittest
import numpy as np
from glmath import (
    Matrix2,
    Matrix2x3,
    Matrix2x4,
    Matrix3,
    Matrix3x2,
    Matrix3x4,
    Matrix4,
    Matrix4x2,
    Matrix4x3,
    Matrix,
    SquareMatrix,
    Vector3,
    Vector4,
    IncompatibleDimensionsError,
    ResultSizeMismatchError,
)


class TallMatrix(Matrix):
    __slots__ = ()
    ROWS = 5
    COLUMNS = 2


class OtherMatrix3(SquareMatrix):
    __slots__ = ()
    ROWS = 3
    COLUMNS = 3


SHAPES = [
    # class, columns, rows, transpose class
    (Matrix2x3, 2, 3, Matrix3x2),
    (Matrix3x2, 3, 2, Matrix2x3),
    (Matrix2x4, 2, 4, Matrix4x2),
    (Matrix4x2, 4, 2, Matrix2x4),
    (Matrix3x4, 3, 4, Matrix4x3),
    (Matrix4x3, 4, 3, Matrix3x4),
]


class TestRectangularMatrices(unittest.TestCase):
    def test_shapes(self):
        for cls, columns, rows, _ in SHAPES:
            m = cls()
            self.assertEqual((m.columns, m.rows, m.size), (columns, rows, columns * rows))

    def test_transpose_pairs(self):
        for cls, columns, rows, transpose_cls in SHAPES:
            m = cls.from_flat_array(np.arange(columns * rows, dtype=float))
            t = m.transpose()
            self.assertIsInstance(t, transpose_cls)
            for col in range(columns):
                for row in range(rows):
                    self.assertEqual(t.get(row, col), m.get(col, row))
            self.assertTrue(t.transpose().equals(m))

    def test_products_pick_matching_class(self):
        a = Matrix3x4.from_flat_array(np.arange(12, dtype=float))
        b = Matrix4x3.from_flat_array(np.arange(12, dtype=float))
        self.assertIsInstance(a @ b, Matrix4)
        self.assertIsInstance(b @ a, Matrix3)
        self.assertIsInstance(Matrix2x3() @ Matrix3x2(), Matrix3)
        self.assertIsInstance(Matrix4x2() @ Matrix2x4(), Matrix2)

    def test_rectangular_by_rectangular(self):
        self.assertIsInstance(Matrix3x4() @ Matrix2x3(), Matrix2x4)
        self.assertIsInstance(Matrix4x2() @ Matrix3x4(), Matrix3x2)
        self.assertIsInstance(Matrix2x3() @ Matrix4x2(), Matrix4x3)

    def test_product_type_ignores_other_declared_classes(self):
        # OtherMatrix3 has the 3x3 shape too, but the product keeps Matrix3
        self.assertIsInstance(Matrix2x3() @ Matrix3x2(), Matrix3)
        self.assertIsInstance(OtherMatrix3() @ Matrix4x3(), Matrix4x3)

    def test_product_without_result_class(self):
        with self.assertRaises(ResultSizeMismatchError):
            TallMatrix() @ Matrix3x2()
        with self.assertRaises(IncompatibleDimensionsError):
            Matrix3x4() @ Matrix3x4()

    def test_product_matches_numpy(self):
        a = Matrix3x4.from_flat_array(np.linspace(-1, 1, 12))
        b = Matrix4x3.from_flat_array(np.linspace(2, -3, 12))
        ga = a.to_flat_array().reshape(3, 4).T
        gb = b.to_flat_array().reshape(4, 3).T
        np.testing.assert_allclose((a @ b).elements, (ga @ gb).T.ravel(), atol=1e-12)

    def test_transform_vector(self):
        # 3 columns, 4 rows: maps a Vector3 to a Vector4
        m = Matrix3x4()
        v = m @ Vector3(1, 2, 3)
        self.assertIsInstance(v, Vector4)
        self.assertEqual(v.to_list(), [1.0, 2.0, 3.0, 0.0])


if __name__ == "__main__":
    unittest.main()

# tests/test_matrix.py

import unittest
import copy
import math
import pickle
import numpy as np
from glmath import (
    Matrix,
    Matrix2,
    Matrix2x3,
    Matrix3,
    Matrix3x2,
    Matrix4,
    Matrix4x3,
    SquareMatrix,
    Vector2,
    Vector3,
    IncompatibleDimensionsError,
    IndexOutOfBoundsError,
    InvalidEpsilonError,
    NonFiniteValueError,
    NonSquareMatrixError,
    ResultSizeMismatchError,
    SizeMismatchError,
    TransposeTypeError,
)


class NoTransposeMatrix(Matrix):
    __slots__ = ()
    ROWS = 2
    COLUMNS = 5


class TestMatrixConstruction(unittest.TestCase):
    def test_empty_constructor_is_identity(self):
        np.testing.assert_array_equal(Matrix3().elements, np.eye(3).ravel())
        np.testing.assert_array_equal(Matrix4().elements, np.eye(4).ravel())

    def test_rectangular_identity(self):
        # 2 columns, 3 rows: ones at (0,0) and (1,1)
        m = Matrix2x3()
        self.assertEqual(m.to_list(), [1.0, 0.0, 0.0, 0.0, 1.0, 0.0])

    def test_column_major_constructor(self):
        m = Matrix2x3(1, 2, 3, 4, 5, 6)
        self.assertEqual((m.rows, m.columns, m.size), (3, 2, 6))
        self.assertEqual(m.get(0, 2), 3.0)
        self.assertEqual(m.get(1, 0), 4.0)

    def test_wrong_element_count(self):
        with self.assertRaises(SizeMismatchError):
            Matrix3(1, 2, 3)
        with self.assertRaises(SizeMismatchError):
            Matrix2(*range(5))

    def test_base_class_has_no_shape(self):
        with self.assertRaises(TypeError):
            Matrix()

    def test_zero_and_identity(self):
        self.assertTrue(np.all(Matrix4.zero().elements == 0.0))
        self.assertTrue(Matrix4.identity().equals(Matrix4()))

    def test_from_flat_array(self):
        data = np.arange(20, dtype=np.float32)
        m = Matrix3.from_flat_array(data, offset=4)
        self.assertEqual(m.to_list(), [float(i) for i in range(4, 13)])
        with self.assertRaises(SizeMismatchError):
            Matrix4.from_flat_array(data, offset=5)


class TestMatrixAccess(unittest.TestCase):
    def test_get_set_column_major(self):
        m = Matrix3.zero()
        self.assertIs(m.set(2, 0, 7.0), m)
        # column 2, row 0
        self.assertEqual(m.elements[6], 7.0)
        self.assertEqual(m.get(2, 0), 7.0)

    def test_out_of_bounds(self):
        m = Matrix2x3()
        for col, row in ((2, 0), (0, 3), (-1, 0), (0, -1)):
            with self.assertRaises(IndexOutOfBoundsError):
                m.get(col, row)
            with self.assertRaises(IndexOutOfBoundsError):
                m.set(col, row, 1.0)

    def test_copy(self):
        m = Matrix2()
        m.copy(Matrix2(1, 2, 3, 4))
        self.assertEqual(m.to_list(), [1.0, 2.0, 3.0, 4.0])
        with self.assertRaises(SizeMismatchError):
            m.copy(Matrix3())

    def test_make_identity_resets(self):
        m = Matrix3(*range(9))
        self.assertIs(m.make_identity(), m)
        self.assertTrue(m.equals(Matrix3()))


class TestMatrixArithmetic(unittest.TestCase):
    def test_add_subtract(self):
        a = Matrix2(1, 2, 3, 4)
        b = Matrix2(10, 20, 30, 40)
        self.assertEqual((a + b).to_list(), [11.0, 22.0, 33.0, 44.0])
        self.assertEqual((b - a).to_list(), [9.0, 18.0, 27.0, 36.0])
        self.assertEqual(a.to_list(), [1.0, 2.0, 3.0, 4.0])
        self.assertIs(a.add(b), a)

    def test_add_shape_mismatch(self):
        with self.assertRaises(SizeMismatchError):
            Matrix3().add(Matrix4())
        with self.assertRaises(SizeMismatchError):
            Matrix2x3().subtract(Matrix3x2())

    def test_scalar_multiply(self):
        m = Matrix2(1, 2, 3, 4)
        self.assertEqual((m * 2).to_list(), [2.0, 4.0, 6.0, 8.0])
        self.assertEqual((0.5 * m).to_list(), [0.5, 1.0, 1.5, 2.0])
        self.assertEqual((-m).to_list(), [-1.0, -2.0, -3.0, -4.0])

    def test_rectangular_product(self):
        a = Matrix2x3(1, 2, 3, 4, 5, 6)
        b = Matrix3x2(1, 0, 0, 1, 1, 1)
        ab = a @ b
        self.assertIsInstance(ab, Matrix3)
        self.assertEqual(ab.to_list(), [1.0, 2.0, 3.0, 4.0, 5.0, 6.0, 5.0, 7.0, 9.0])
        ba = b @ a
        self.assertIsInstance(ba, Matrix2)
        self.assertEqual(ba.to_list(), [4.0, 5.0, 10.0, 11.0])

    def test_product_dimension_errors(self):
        a = Matrix2x3()
        with self.assertRaises(IncompatibleDimensionsError):
            Matrix3().multiply_matrices(a, a)
        with self.assertRaises(ResultSizeMismatchError):
            Matrix4().multiply_matrices(a, Matrix3x2())

    def test_identity_is_neutral(self):
        a = Matrix4x3(*range(12))
        self.assertTrue((Matrix3() @ a).equals(a))
        self.assertTrue((a @ Matrix4()).equals(a))

    def test_multiply_post_multiplies(self):
        a = Matrix3(*range(1, 10))
        b = Matrix3(2, 0, 0, 0, 3, 0, 1, 1, 1)
        expected = a @ b
        self.assertIs(a.multiply(b), a)
        self.assertTrue(a.equals(expected))

    def test_matrix_times_vector(self):
        m = Matrix2x3(1, 2, 3, 4, 5, 6)
        v = m @ Vector2(1, 1)
        self.assertIsInstance(v, Vector3)
        self.assertEqual(v.to_list(), [5.0, 7.0, 9.0])
        with self.assertRaises(SizeMismatchError):
            m @ Vector3(1, 1, 1)


class TestTranspose(unittest.TestCase):
    def test_rectangular_transpose_type(self):
        m = Matrix2x3(1, 2, 3, 4, 5, 6)
        t = m.transpose()
        self.assertIsInstance(t, Matrix3x2)
        for col in range(m.columns):
            for row in range(m.rows):
                self.assertEqual(t.get(row, col), m.get(col, row))
        self.assertTrue(t.transpose().equals(m))

    def test_transpose_does_not_mutate_by_default(self):
        m = Matrix3(*range(9))
        t = m.transpose()
        self.assertIsNot(t, m)
        self.assertEqual(m.to_list(), [float(i) for i in range(9)])
        self.assertEqual(t.get(0, 1), m.get(1, 0))

    def test_square_transpose_inplace(self):
        m = Matrix3(*range(9))
        original = m.clone()
        self.assertIs(m.transpose(inplace=True), m)
        self.assertTrue(m.equals(original.transpose()))

    def test_rectangular_cannot_transpose_inplace(self):
        with self.assertRaises(NonSquareMatrixError):
            Matrix2x3().transpose(inplace=True)

    def test_undeclared_transpose_type(self):
        with self.assertRaises(TransposeTypeError):
            NoTransposeMatrix().transpose()
        with self.assertRaises(TransposeTypeError):
            NoTransposeMatrix.transpose_type()

    def test_square_classes_declare_themselves(self):
        self.assertIs(Matrix2.transpose_type(), Matrix2)
        self.assertIs(Matrix4.transpose_type(), Matrix4)
        self.assertIs(Matrix2x3.transpose_type(), Matrix3x2)
        self.assertIsNone(Matrix.TRANSPOSE_TYPE)


class TestMatrixComparison(unittest.TestCase):
    def test_equals(self):
        self.assertTrue(Matrix3().equals(Matrix3()))
        self.assertFalse(Matrix3().equals(Matrix4()))
        self.assertTrue(Matrix2(1, 2, 3, 4) == Matrix2(1, 2, 3, 4))
        self.assertFalse(Matrix2() == [1, 0, 0, 1])

    def test_equals_epsilon(self):
        a = Matrix2(1, 2, 3, 4)
        b = Matrix2(1, 2, 3, 4.000001)
        self.assertFalse(a.equals(b))
        self.assertTrue(a.equals_epsilon(b))
        self.assertFalse(a.equals_epsilon(b, 0.0))
        with self.assertRaises(InvalidEpsilonError):
            a.equals_epsilon(b, -1.0)

    def test_nan_never_equal(self):
        m = Matrix2(math.nan, 0, 0, 1)
        self.assertFalse(m.equals(m))
        self.assertFalse(m.equals_epsilon(m, 10.0))


class TestMatrixConversions(unittest.TestCase):
    def test_round_and_truncate(self):
        m = Matrix2(0.5, -0.5, 1.7, -1.7)
        self.assertEqual(m.round(inplace=False).to_list(), [1.0, 0.0, 2.0, -2.0])
        self.assertEqual(m.truncate(inplace=False).to_list(), [0.0, 0.0, 1.0, -1.0])
        self.assertEqual(m.to_uint(inplace=False).to_list(), [0.0, 0.0, 1.0, 0.0])
        self.assertIsInstance(m.floor(inplace=False), Matrix2)

    def test_non_finite_rejected(self):
        m = Matrix2(math.inf, 0, 0, 1)
        with self.assertRaises(NonFiniteValueError):
            m.round()
        self.assertEqual(m.get(0, 0), math.inf)

    def test_integer_predicates(self):
        self.assertTrue(Matrix3().is_unsigned_integer())
        self.assertFalse(Matrix3(*([0.5] * 9)).is_integer())


class TestMatrixExport(unittest.TestCase):
    def test_to_flat_array_is_column_major_copy(self):
        m = Matrix4().make_translation(1, 2, 3)
        out = m.to_flat_array(dtype=np.float32)
        self.assertEqual(out.dtype, np.float32)
        np.testing.assert_array_equal(out[12:15], [1, 2, 3])
        out[12] = 100
        self.assertEqual(m.get(3, 0), 1.0)

    def test_write_to_packs_several(self):
        buffer = np.zeros(8)
        Matrix2(1, 2, 3, 4).write_to(buffer)
        Matrix2(5, 6, 7, 8).write_to(buffer, 4)
        np.testing.assert_array_equal(buffer, np.arange(1, 9))

    def test_copy_pickle(self):
        m = Matrix3x2(*range(6))
        for dup in (copy.copy(m), copy.deepcopy(m), pickle.loads(pickle.dumps(m))):
            self.assertIsInstance(dup, Matrix3x2)
            self.assertTrue(dup.equals(m))
            dup.set(0, 0, 42.0)
            self.assertEqual(m.get(0, 0), 0.0)

    def test_repr(self):
        self.assertEqual(repr(Matrix2()), "Matrix2(1.0, 0.0, 0.0, 1.0)")


class TestSquareMatrixBase(unittest.TestCase):
    def test_subclass_with_explicit_transpose_type_keeps_it(self):
        class Custom(SquareMatrix):
            __slots__ = ()
            ROWS = 2
            COLUMNS = 2
            TRANSPOSE_TYPE = Matrix2

        self.assertIs(Custom.transpose_type(), Matrix2)
        self.assertIsInstance(Custom(1, 2, 3, 4).transpose(), Matrix2)


if __name__ == "__main__":
    unittest.main()

from __future__ import annotations

import importlib.util
import math
import unittest


JAX_AVAILABLE = importlib.util.find_spec("jax") is not None


@unittest.skipUnless(JAX_AVAILABLE, "jax is required for array-model tests")
class ArrayAttributeTests(unittest.TestCase):
    def test_derived_attributes_hold_for_every_kind_and_shape(self) -> None:
        from ndjax import Array
        from ndjax.dtypes import ALL_TYPES

        shapes = [(1,), (5,), (2, 3), (3, 1, 4), (2, 0, 3), (0,)]
        for kind in ALL_TYPES:
            for shape in shapes:
                with self.subTest(kind=kind.name, shape=shape):
                    arr = Array(shape, kind)
                    self.assertEqual(arr.shape, shape)
                    self.assertEqual(arr.ndim, len(shape))
                    self.assertEqual(arr.size, math.prod(shape))
                    self.assertIs(arr.dtype, kind)
                    self.assertEqual(arr.itemsize, kind.itemsize)
                    self.assertEqual(arr.nbytes, arr.itemsize * arr.size)
                    self.assertEqual(int(arr.buffer.shape[0]), arr.size)

    def test_shape_accepts_int_and_resolves_dtype_designators(self) -> None:
        from ndjax import Array, int16

        arr = Array(4, "i2")
        self.assertEqual(arr.shape, (4,))
        self.assertIs(arr.dtype, int16)

    def test_row_major_strides(self) -> None:
        from ndjax import Array

        self.assertEqual(Array((2, 3, 4)).strides, (12, 4, 1))
        self.assertEqual(Array((5,)).strides, (1,))
        self.assertEqual(Array((3, 0)).strides, (0, 1))

    def test_invalid_shapes_are_rejected(self) -> None:
        from ndjax import Array
        from ndjax.errors import InvalidShapeError

        for shape in ((), [], (-1,), (2, -3), (2.5,), ("3",), "3", (True,)):
            with self.subTest(shape=shape):
                with self.assertRaises(InvalidShapeError):
                    Array(shape)

    def test_oversized_allocation_fails(self) -> None:
        from ndjax import Array, float64
        from ndjax.errors import AllocationError

        with self.assertRaises(AllocationError):
            Array((10**10, 10**10), float64)

    def test_backend_exhaustion_becomes_allocation_error(self) -> None:
        from ndjax import empty, zeros
        from ndjax.errors import AllocationError

        # Under the default byte limit, so the backend is what refuses.
        for build in (zeros, empty):
            with self.subTest(build=build.__name__):
                with self.assertRaises(AllocationError):
                    build((2**31, 2**28))

    def test_out_of_memory_from_backend_is_reported(self) -> None:
        from unittest import mock

        import jax
        from ndjax import Array, array, full
        from ndjax.errors import AllocationError

        exhausted = jax.errors.JaxRuntimeError("RESOURCE_EXHAUSTED: Out of memory allocating 64 bytes")
        cases = [
            ("jax.numpy.full", MemoryError(), lambda: full((2, 4), 1.5)),
            ("jax.numpy.full", exhausted, lambda: full((2, 4), 1.5)),
            ("jax.numpy.empty", MemoryError(), lambda: Array((2, 4))),
            ("jax.numpy.asarray", exhausted, lambda: array([1.0, 2.0])),
        ]
        for target, error, build in cases:
            with self.subTest(target=target, error=type(error).__name__):
                with mock.patch(target, side_effect=error):
                    with self.assertRaises(AllocationError):
                        build()

    def test_other_backend_errors_propagate(self) -> None:
        from unittest import mock

        import jax
        from ndjax import full
        from ndjax.errors import AllocationError

        failure = jax.errors.JaxRuntimeError("INTERNAL: device lost")
        with mock.patch("jax.numpy.full", side_effect=failure):
            with self.assertRaises(jax.errors.JaxRuntimeError) as caught:
                full(3, 1.0)
        self.assertNotIsInstance(caught.exception, AllocationError)

    def test_allocation_error_is_memory_error(self) -> None:
        from ndjax.errors import AllocationError, NDError

        self.assertTrue(issubclass(AllocationError, MemoryError))
        self.assertTrue(issubclass(AllocationError, NDError))

    def test_buffer_length_must_match_shape(self) -> None:
        import jax.numpy as jnp
        from ndjax import Array
        from ndjax.errors import ShapeMismatchError

        with self.assertRaises(ShapeMismatchError):
            Array((2, 2), buffer=jnp.zeros((5,)))

    def test_buffer_is_converted_to_dtype(self) -> None:
        import jax.numpy as jnp
        from ndjax import Array, int32

        arr = Array((2, 2), int32, buffer=jnp.asarray([1.0, 2.0, 3.0, 4.0]))
        self.assertEqual(arr.buffer.dtype, jnp.int32)
        self.assertEqual(arr.tolist(), [[1, 2], [3, 4]])


@unittest.skipUnless(JAX_AVAILABLE, "jax is required for array-model tests")
class ArrayConversionTests(unittest.TestCase):
    def test_tolist_and_flat_follow_row_major_order(self) -> None:
        from ndjax import arange

        arr = arange(6)
        self.assertEqual(arr.tolist(), [0, 1, 2, 3, 4, 5])

        from ndjax import Array

        grid = Array((2, 3), "int64", buffer=arr.buffer)
        self.assertEqual(grid.tolist(), [[0, 1, 2], [3, 4, 5]])
        self.assertEqual(list(grid.flat), [0, 1, 2, 3, 4, 5])
        self.assertEqual(list(grid), [[0, 1, 2], [3, 4, 5]])
        self.assertEqual(len(grid), 2)

    def test_to_jax_has_shape_and_dtype(self) -> None:
        import jax.numpy as jnp
        from ndjax import array

        arr = array([[1, 2, 3], [4, 5, 6]], dtype="float32")
        out = arr.to_jax()
        self.assertEqual(out.shape, (2, 3))
        self.assertEqual(out.dtype, jnp.float32)

    def test_astype_truncates_and_returns_new_array(self) -> None:
        from ndjax import array, float64, int8

        src = array([1.9, -1.9, 300.0])
        out = src.astype(int8)
        self.assertIs(out.dtype, int8)
        self.assertEqual(out.tolist(), [1, -1, 44])
        self.assertIs(src.dtype, float64)
        self.assertEqual(src.tolist(), [1.9, -1.9, 300.0])

    def test_copy_is_independent(self) -> None:
        from ndjax import zeros

        src = zeros((2, 2))
        dup = src.copy()
        dup[0, 0] = 5
        self.assertEqual(src[0, 0], 0.0)
        self.assertEqual(dup[0, 0], 5.0)

    def test_fill_coerces_value(self) -> None:
        from ndjax import empty

        arr = empty((2, 3), "int16")
        arr.fill(7.8)
        self.assertEqual(arr.tolist(), [[7, 7, 7], [7, 7, 7]])
        self.assertEqual(arr.shape, (2, 3))

    def test_repr_includes_values_and_dtype(self) -> None:
        from ndjax import array

        self.assertEqual(repr(array([[1, 2], [3, 4]])), "Array([[1, 2], [3, 4]], dtype=int64)")
        self.assertEqual(str(array([True, False])), "[True, False]")

    def test_repr_summarizes_large_arrays(self) -> None:
        from ndjax import arange

        text = repr(arange(5000))
        self.assertTrue(text.startswith("Array([0, 1, 2, ..., 4997, 4998, 4999]"))
        self.assertTrue(text.endswith("dtype=int64)"))


if __name__ == "__main__":
    unittest.main()

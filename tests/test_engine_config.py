from __future__ import annotations

import importlib.util
import sys
import unittest


JAX_AVAILABLE = importlib.util.find_spec("jax") is not None


@unittest.skipUnless(JAX_AVAILABLE, "jax is required for engine-config tests")
class EngineConfigTests(unittest.TestCase):
    def test_defaults_with_empty_environment(self) -> None:
        from ndjax.config import EngineConfig

        cfg = EngineConfig.from_env({})
        self.assertEqual(cfg.default_seed, 0)
        self.assertEqual(cfg.max_allocation_bytes, sys.maxsize)
        self.assertEqual(cfg.print_threshold, 1000)

    def test_values_are_parsed(self) -> None:
        from ndjax.config import EngineConfig

        cfg = EngineConfig.from_env(
            {
                "NDJAX_DEFAULT_SEED": "17",
                "NDJAX_MAX_ALLOCATION_BYTES": " 4096 ",
                "NDJAX_PRINT_THRESHOLD": "10",
            }
        )
        self.assertEqual(cfg, EngineConfig(default_seed=17, max_allocation_bytes=4096, print_threshold=10))

    def test_blank_values_fall_back_to_defaults(self) -> None:
        from ndjax.config import EngineConfig

        self.assertEqual(EngineConfig.from_env({"NDJAX_DEFAULT_SEED": "  "}).default_seed, 0)

    def test_malformed_values_name_the_variable(self) -> None:
        from ndjax.config import EngineConfig

        cases = [
            {"NDJAX_DEFAULT_SEED": "abc"},
            {"NDJAX_DEFAULT_SEED": "-1"},
            {"NDJAX_MAX_ALLOCATION_BYTES": "1.5"},
            {"NDJAX_PRINT_THRESHOLD": "0"},
        ]
        for env in cases:
            (name,) = env
            with self.subTest(env=env):
                with self.assertRaises(ValueError) as ctx:
                    EngineConfig.from_env(env)
                self.assertIn(name, str(ctx.exception))

    def test_package_import_enables_64_bit_kinds(self) -> None:
        import jax.numpy as jnp
        import ndjax

        self.assertEqual(ndjax.zeros(2, dtype="int64").buffer.dtype, jnp.int64)
        self.assertEqual(ndjax.zeros(2, dtype="float64").buffer.dtype, jnp.float64)


if __name__ == "__main__":
    unittest.main()

"""Unit tests for common/settings.py."""

import importlib
import os
import unittest

import common.settings

_VARS = ('SETTLERS_SEED', 'SETTLERS_BANK_SIZE')


class TestSettings(unittest.TestCase):
    """Tests for shared engine settings."""

    def setUp(self) -> None:
        self._backup = {name: os.environ.pop(name, None) for name in _VARS}

    def tearDown(self) -> None:
        for name, value in self._backup.items():
            os.environ.pop(name, None)
            if value is not None:
                os.environ[name] = value
        importlib.reload(common.settings)

    def test_defaults(self) -> None:
        """Without env vars the seed is unset and the bank holds 19 cards."""
        importlib.reload(common.settings)
        self.assertIsNone(common.settings.SEED)
        self.assertEqual(common.settings.BANK_SIZE, 19)

    def test_seed_reads_from_env(self) -> None:
        """SETTLERS_SEED is parsed as an integer."""
        os.environ['SETTLERS_SEED'] = '1234'
        importlib.reload(common.settings)
        self.assertEqual(common.settings.SEED, 1234)

    def test_bank_size_reads_from_env(self) -> None:
        """SETTLERS_BANK_SIZE overrides the per-resource bank supply."""
        os.environ['SETTLERS_BANK_SIZE'] = '5'
        importlib.reload(common.settings)
        self.assertEqual(common.settings.BANK_SIZE, 5)


if __name__ == '__main__':
    unittest.main()

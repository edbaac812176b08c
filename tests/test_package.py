"""
Test Suite for Package Initialization

Top-level exports and the logging banner.
"""

import importlib
import logging

import market_signals


class TestPackage:
    """Test the package root"""

    def test_version(self):
        assert market_signals.__version__ == "1.0.0"

    def test_top_level_exports(self):
        """Test every name in __all__ is importable from the root"""
        for name in market_signals.__all__:
            assert hasattr(market_signals, name), name

    def test_version_banner(self, caplog):
        """Test initialization logs the engine, Numba and NumPy versions"""
        with caplog.at_level(logging.INFO, logger="market_signals"):
            importlib.reload(market_signals)

        assert f"Market Signal Engine v{market_signals.__version__} initialized" in caplog.text
        assert "Numba" in caplog.text
        assert "NumPy" in caplog.text

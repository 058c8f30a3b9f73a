"""PYUSD on Stellar: classic and SAC client tools."""

__version__ = "0.1.0"

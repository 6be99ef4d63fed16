# src/__init__.py — v1
"""qalamseed: resumable two-phase verse analysis generator."""

from qalamseed.version import __version__

__all__ = ["__version__"]

"""
Core infrastructure shared by the renderer packages.

Currently holds the loguru-based logging setup.
"""

__version__ = "1.0.0"

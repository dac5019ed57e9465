"""reflectutil - Reflection helpers for Python classes and instances."""

from importlib.metadata import PackageNotFoundError, version

try:
    __version__ = version("reflectutil")
except PackageNotFoundError:
    __version__ = "(local)"

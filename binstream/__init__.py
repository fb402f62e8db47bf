"""Binstream - Deterministic big-endian binary stream codecs."""

from importlib.metadata import PackageNotFoundError, version

try:
    __version__ = version("binstream")
except PackageNotFoundError:
    __version__ = "(local)"

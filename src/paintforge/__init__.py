"""PaintForge - deterministic procedural animation and painterly compositing."""

from importlib.metadata import PackageNotFoundError, version

try:
    __version__ = version("paintforge")
except PackageNotFoundError:
    __version__ = "unknown"

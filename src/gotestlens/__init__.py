#
# src/gotestlens/__init__.py
#
"""
gotestlens: run `go test -json`, classify the results and annotate failures.
"""

from importlib.metadata import PackageNotFoundError, version

try:
    __version__ = version("gotestlens")
except PackageNotFoundError:
    __version__ = "0.0.0-dev"

__all__ = ["__version__"]

# 🔼⚙️

#
# config/__init__.py
#
"""
Configuration handling sub-package for gotestlens.

Exports the loading function and core configuration models.
"""

from .loader import load_config
from .models import GlobalConfig, GotestlensConfig, RunConfig, split_args

__all__ = [
    "GlobalConfig",
    "GotestlensConfig",
    "RunConfig",
    "load_config",
    "split_args",
]

# 🔼⚙️

#
# src/gotestlens/runtime/__init__.py
#
from .orchestrator import TestRunOrchestrator

__all__ = ["TestRunOrchestrator"]

# 🔼⚙️

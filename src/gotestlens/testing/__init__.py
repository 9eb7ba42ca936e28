#
# src/gotestlens/testing/__init__.py
#
"""
Test execution sub-package for gotestlens.
"""
from .factory import build_go_test_command, get_test_runner
from .protocols import ChunkCallback, TestRunner, TestRunResult
from .subprocess_runner import SubprocessTestRunner

__all__ = [
    "ChunkCallback",
    "SubprocessTestRunner",
    "TestRunResult",
    "TestRunner",
    "build_go_test_command",
    "get_test_runner",
]

# 🔼⚙️

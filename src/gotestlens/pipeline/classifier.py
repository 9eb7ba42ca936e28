# src/gotestlens/pipeline/classifier.py

"""
Heuristic detection of panics and sanitizer errors in raw test output.

Both checks look at a single output fragment only. A signature split across
two fragments is not detected.
"""

from enum import Enum

PANIC_PREFIX = "panic: runtime error:"
ERROR_MARKER = "==ERROR:"


class Classification(Enum):
    PANIC = "panicked"
    ERROR = "errored"


def classify_output(fragment: str) -> Classification | None:
    """Returns the failure signature found in `fragment`, if any."""
    if fragment.startswith(PANIC_PREFIX):
        return Classification.PANIC
    if ERROR_MARKER in fragment:
        return Classification.ERROR
    return None

# 🔼⚙️

# src/gotestlens/pipeline/annotations.py

"""
Extracts `file.go:line` annotations from the raw output of a failing test.

A line mentioning `name.go:123` opens an annotation; the lines that follow
it (stack context, expected/actual values) are appended to its text until
the next such line. Runner noise is skipped and a panic ends the scan, since
panics are reported as a whole elsewhere.
"""

import re
from collections.abc import Iterable

from attrs import define, field, validators

FILE_LINE_PATTERN = re.compile(r"(\w+\.go):(\d+)")
NOISE_PREFIXES = ("=== RUN", "--- FAIL")
PANIC_MARKER = "panic:"


@define(frozen=True, slots=True)
class Annotation:
    file: str
    line: int = field(validator=validators.ge(1))
    text: str


def extract_annotations(output: Iterable[str]) -> list[Annotation]:
    annotations: list[Annotation] = []
    current: tuple[str, int] | None = None
    text_parts: list[str] = []

    def close() -> None:
        if current is not None:
            annotations.append(Annotation(file=current[0], line=current[1], text="".join(text_parts)))

    for raw in output:
        stripped = raw.strip()
        if stripped.startswith(NOISE_PREFIXES):
            continue
        if stripped.startswith(PANIC_MARKER):
            break

        match = FILE_LINE_PATTERN.search(stripped)
        if match and int(match.group(2)) >= 1:
            close()
            current = (match.group(1), int(match.group(2)))
            text_parts = [raw]
        elif current is not None:
            text_parts.append(raw)

    close()
    return [
        Annotation(file=a.file, line=a.line, text=a.text.strip())
        for a in annotations
    ]

# 🔼⚙️

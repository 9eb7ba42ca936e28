#
# src/gotestlens/pipeline/__init__.py
#
"""
Streaming classification and annotation pipeline for `go test -json` output.

raw bytes -> LineFramer -> decode_event -> ResultAggregator -> Reporter
"""
from .aggregator import Diagnostic, ResultAggregator, TestRecord, make_test_key
from .annotations import Annotation, extract_annotations
from .classifier import Classification, classify_output
from .events import TestEvent, decode_event, parse_float_or_default
from .framer import LineFramer, frame_lines
from .report import LocatedAnnotation, MessageLevel, Report, ReportBlock, ReportMessage, Verdict
from .reporter import Reporter
from .resolver import GoListPathResolver, PathResolver

__all__ = [
    "Annotation",
    "Classification",
    "Diagnostic",
    "GoListPathResolver",
    "LineFramer",
    "LocatedAnnotation",
    "MessageLevel",
    "PathResolver",
    "Report",
    "ReportBlock",
    "ReportMessage",
    "Reporter",
    "ResultAggregator",
    "TestEvent",
    "TestRecord",
    "Verdict",
    "classify_output",
    "decode_event",
    "extract_annotations",
    "frame_lines",
    "make_test_key",
    "parse_float_or_default",
]

# 🔼⚙️

"""
CAPL Formatter - Rule-based source formatter for CAPL (CANoe/CANalyzer) code

This package provides:
- FormatterConfig, the immutable settings shared by every formatting run
- FormatterEngine, which applies text rules, indentation and comment reflow
- format_file, the single-file entry point used by the caplfmt batch runner
"""

from .engine import FormatterEngine, format_file
from .errors import FormatError
from .models import FormatResult, FormatterConfig

__all__ = [
    "FormatterEngine",
    "FormatterConfig",
    "FormatResult",
    "FormatError",
    "format_file",
]

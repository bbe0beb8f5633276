"""
caplfmt - Batch formatter for CAPL (CANoe/CANalyzer) sources

This package provides:
- Settings resolution (caplfmt.toml discovery, config file, CLI overrides)
- Expansion of a file, directory or glob into candidate files
- Concurrent in-place formatting with per-file failure isolation
- Per-file status lines and a batch summary
"""

__version__ = "0.1.0"

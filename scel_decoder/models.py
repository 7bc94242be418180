#!/usr/bin/env python3
"""
Configuration for the SCEL converter.

This module contains the config dataclass and enums used by the converter.
"""

import yaml
from dataclasses import dataclass
from enum import Enum
from typing import Dict


# =============================================================================
# Constants
# =============================================================================

DEFAULT_INPUT_DIR = "."
DEFAULT_EXTENSION = "scel"
DEFAULT_OUTPUT_PATH = "result.txt"


# =============================================================================
# Enums
# =============================================================================

class OutputFormat(Enum):
    """Output line layouts."""
    WORDS = "words"   # One word per line
    IBUS = "ibus"     # "word pinyin count" per line


class ErrorPolicy(Enum):
    """What to do with a file that fails to decode."""
    SKIP = "skip"     # Log and continue with the next file
    ABORT = "abort"   # Stop the run


# =============================================================================
# Data Classes
# =============================================================================

@dataclass
class ConverterConfig:
    """Configuration for the converter."""
    # Input
    input_dir: str = DEFAULT_INPUT_DIR
    extension: str = DEFAULT_EXTENSION

    # Output
    output_path: str = DEFAULT_OUTPUT_PATH
    output_format: OutputFormat = OutputFormat.WORDS
    pinyin_separator: str = ""

    # Decoding
    on_error: ErrorPolicy = ErrorPolicy.SKIP
    strict_utf16: bool = False

    # Logging
    log_level: str = "INFO"
    log_file: str = ""

    @classmethod
    def from_dict(cls, data: Dict) -> "ConverterConfig":
        """Build a config from a parsed YAML mapping."""
        data = data or {}
        inp = data.get("input", {}) or {}
        out = data.get("output", {}) or {}
        dec = data.get("decoding", {}) or {}
        log = data.get("logging", {}) or {}

        return cls(
            input_dir=inp.get("directory", DEFAULT_INPUT_DIR),
            extension=inp.get("extension", DEFAULT_EXTENSION),
            output_path=out.get("path", DEFAULT_OUTPUT_PATH),
            output_format=OutputFormat(out.get("format", OutputFormat.WORDS.value)),
            pinyin_separator=out.get("pinyin_separator", ""),
            on_error=ErrorPolicy(dec.get("on_error", ErrorPolicy.SKIP.value)),
            strict_utf16=dec.get("strict_utf16", False),
            log_level=log.get("level", "INFO"),
            log_file=log.get("file", "") or "",
        )

    @classmethod
    def from_yaml(cls, path: str) -> "ConverterConfig":
        """Load configuration from YAML file."""
        with open(path, "r", encoding="utf-8") as f:
            data = yaml.safe_load(f)

        return cls.from_dict(data)

    def to_dict(self) -> Dict:
        """Convert config to dictionary."""
        return {
            "input": {
                "directory": self.input_dir,
                "extension": self.extension,
            },
            "output": {
                "path": self.output_path,
                "format": self.output_format.value,
                "pinyin_separator": self.pinyin_separator,
            },
            "decoding": {
                "on_error": self.on_error.value,
                "strict_utf16": self.strict_utf16,
            },
            "logging": {
                "level": self.log_level,
                "file": self.log_file,
            },
        }

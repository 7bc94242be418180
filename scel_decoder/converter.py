#!/usr/bin/env python3
"""
SCEL Converter

Walks a directory of .scel files, decodes each one and writes the collected
words to a single output file.

Flow:
    input_dir/*.scel
        │
        ├── read whole file
        ▼
    ScelDictionary.decode()
        │
        ├── header strings -> log
        ▼
    entries (appended once the file decoded completely)
        │
        ▼
    write_entries() -> output_path

I/O errors always abort the run. Malformed files are skipped or abort the
run depending on `ConverterConfig.on_error`.
"""

import logging
import sys
from dataclasses import dataclass, field
from pathlib import Path
from typing import List, Optional, Tuple

from .models import ConverterConfig, ErrorPolicy
from .scel import ChineseEntry, ScelDictionary, ScelFormatError
from .writer import write_entries


logger = logging.getLogger(__name__)

LOG_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"


def setup_logging(level: str = "INFO", log_file: Optional[str] = None):
    """Configure logging for the converter."""
    handlers = [logging.StreamHandler(sys.stdout)]
    if log_file:
        handlers.append(logging.FileHandler(log_file, encoding="utf-8"))

    logging.basicConfig(
        level=getattr(logging, level.upper(), logging.INFO),
        format=LOG_FORMAT,
        handlers=handlers,
    )


@dataclass
class ConversionResult:
    """Outcome of a directory conversion."""
    entries: List[ChineseEntry] = field(default_factory=list)
    processed: List[Path] = field(default_factory=list)
    skipped: List[Tuple[Path, str]] = field(default_factory=list)
    lines_written: int = 0

    @property
    def words(self) -> List[str]:
        return [entry.word for entry in self.entries]


class ScelConverter:
    """Decodes every dictionary file of a directory into one word list."""

    def __init__(self, config: Optional[ConverterConfig] = None):
        self.config = config or ConverterConfig()

    def find_files(self) -> List[Path]:
        """
        List input files with the configured extension, sorted by name.

        Raises:
            OSError: If the input directory cannot be listed.
        """
        suffix = "." + self.config.extension.lstrip(".").lower()
        files = [
            path
            for path in Path(self.config.input_dir).iterdir()
            if path.is_file() and path.suffix.lower() == suffix
        ]
        return sorted(files)

    def decode_file(self, path: Path) -> ScelDictionary:
        """Read and decode one file without reporting."""
        data = Path(path).read_bytes()
        return ScelDictionary.decode(
            data,
            strict=self.config.strict_utf16,
            pinyin_separator=self.config.pinyin_separator,
        )

    def convert_file(self, path: Path) -> ScelDictionary:
        """
        Decode one file and log its header.

        Raises:
            OSError: If the file cannot be read.
            ScelFormatError: If the file is malformed.
        """
        dictionary = self.decode_file(path)
        header = dictionary.header

        logger.info("-" * 60)
        logger.info(f"Source file:  {path}")
        logger.info(f"Name:         {header.name}")
        logger.info(f"Category:     {header.category}")
        logger.info(f"Description:  {header.description}")
        logger.info(f"Sample:       {header.sample}")
        logger.info(f"Entries:      {len(dictionary.entries)}")
        return dictionary

    def convert_directory(self) -> ConversionResult:
        """Decode every input file, in order."""
        result = ConversionResult()
        files = self.find_files()
        logger.info(f"Found {len(files)} .{self.config.extension} files in {self.config.input_dir}")

        for path in files:
            try:
                dictionary = self.convert_file(path)
            except ScelFormatError as e:
                if self.config.on_error == ErrorPolicy.ABORT:
                    raise
                logger.warning(f"Skipping {path}: {e}")
                result.skipped.append((path, str(e)))
                continue

            result.entries.extend(dictionary.entries)
            result.processed.append(path)

        return result

    def run(self) -> ConversionResult:
        """Convert the input directory and write the output file."""
        result = self.convert_directory()
        result.lines_written = write_entries(
            self.config.output_path,
            result.entries,
            self.config.output_format,
        )
        return result

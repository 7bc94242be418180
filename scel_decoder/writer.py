#!/usr/bin/env python3
"""
Output writer for decoded dictionary entries.
"""

import logging
from pathlib import Path
from typing import Iterable

from .models import OutputFormat
from .scel import ChineseEntry


logger = logging.getLogger(__name__)


def format_entry(entry: ChineseEntry, fmt: OutputFormat = OutputFormat.WORDS) -> str:
    """Render one entry as a single line (without newline)."""
    if fmt == OutputFormat.IBUS:
        return f"{entry.word} {entry.pinyin} {entry.count}"
    return entry.word


def write_entries(
    path: str,
    entries: Iterable[ChineseEntry],
    fmt: OutputFormat = OutputFormat.WORDS,
) -> int:
    """
    Write entries to a UTF-8 text file, one newline-terminated line each.

    Args:
        path: Output file. Parent directories are created.
        entries: Entries in output order.
        fmt: Line layout.

    Returns:
        Number of lines written.
    """
    out = Path(path)
    out.parent.mkdir(parents=True, exist_ok=True)

    lines = 0
    with open(out, "w", encoding="utf-8", newline="\n") as f:
        for entry in entries:
            f.write(format_entry(entry, fmt) + "\n")
            lines += 1

    logger.info(f"Wrote {lines} lines to {out}")
    return lines

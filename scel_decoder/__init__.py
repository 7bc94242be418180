"""
SCEL Dictionary Decoder

Decode Sogou cell dictionaries (.scel) into plain word lists.

Architecture:
    ScelConverter (directory driver)
        │
        ├── reads each *.scel file whole
        ▼
    ScelDictionary.decode(buffer)
        │
        ├── parse_header()        0x0130 - 0x1540  name/category/description/sample
        ├── parse_pinyin_table()  0x1540 - 0x2628  index -> syllable
        └── parse_entries()       0x2628 - EOF     (count, pinyin, word)
        ▼
    write_entries() -> result.txt

Usage:
    from scel_decoder import ScelConverter, ConverterConfig, decode_scel

    with open("example.scel", "rb") as f:
        dictionary = decode_scel(f.read())
    print(dictionary.header.name, len(dictionary.words))

    config = ConverterConfig(input_dir="dicts", output_path="words.txt")
    result = ScelConverter(config).run()
"""

from .converter import ConversionResult, ScelConverter, setup_logging
from .models import ConverterConfig, ErrorPolicy, OutputFormat
from .scel import (
    ByteReader,
    ChineseEntry,
    CodeUnitKind,
    ScelDictionary,
    ScelError,
    ScelFormatError,
    ScelHeader,
    decode_scel,
    decode_utf16le,
    parse_entries,
    parse_header,
    parse_pinyin_table,
    resolve_pinyin,
)
from .writer import format_entry, write_entries

__version__ = "0.1.0"
__all__ = [
    # Converter
    "ScelConverter",
    "ConversionResult",
    "setup_logging",
    # Config
    "ConverterConfig",
    "ErrorPolicy",
    "OutputFormat",
    # Format
    "ByteReader",
    "ChineseEntry",
    "CodeUnitKind",
    "ScelDictionary",
    "ScelHeader",
    "ScelError",
    "ScelFormatError",
    "decode_scel",
    "decode_utf16le",
    "parse_entries",
    "parse_header",
    "parse_pinyin_table",
    "resolve_pinyin",
    # Output
    "format_entry",
    "write_entries",
]

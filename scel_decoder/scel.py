#!/usr/bin/env python3
"""
SCEL Dictionary Format

This module decodes the Sogou cell dictionary container (.scel) into a list
of words with their pinyin and frequency count.

File Layout:
    [PREAMBLE] [HEADER FIELDS] [PINYIN TABLE] [WORD TABLE]

    0x0000 - 0x0130:  Preamble (signature, checksums; not decoded)
    0x0130 - 0x0338:  Dictionary name        (UTF-16LE, zero padded)
    0x0338 - 0x0540:  Dictionary category    (UTF-16LE, zero padded)
    0x0540 - 0x0D40:  Description            (UTF-16LE, zero padded)
    0x0D40 - 0x1540:  Sample words           (UTF-16LE, zero padded)
    0x1540 - 0x2628:  Pinyin table           (fixed size, 0x10E8 bytes)
    0x2628 - EOF:     Word table             (variable)

Pinyin Table Record:
    Bytes 0-1:   Pinyin index (uint16)
    Bytes 2-3:   Syllable length L in bytes (uint16)
    Bytes 4+:    Syllable (L bytes, UTF-16LE)

Word Table Record (homophone group):
    Bytes 0-1:   same - number of words sharing this pinyin (uint16)
    Bytes 2-3:   pinyin_len in bytes (uint16)
    Bytes 4+:    pinyin_len bytes of uint16 pinyin indices
    Then, repeated `same` times:
        uint16   word_len
        bytes    word (word_len bytes, UTF-16LE)
        uint16   ext_len
        bytes    ext (ext_len bytes, first 2 bytes = frequency count)

All integers are little-endian.
"""

import logging
import struct
from dataclasses import dataclass, field
from enum import IntEnum
from typing import Dict, List, Optional, Tuple


logger = logging.getLogger(__name__)


# =============================================================================
# Constants
# =============================================================================

# Header field ranges
NAME_OFFSET = 0x130
CATEGORY_OFFSET = 0x338
DESCRIPTION_OFFSET = 0x540
SAMPLE_OFFSET = 0xD40

# Table ranges
PINYIN_TABLE_OFFSET = 0x1540
WORD_TABLE_OFFSET = 0x2628
PINYIN_TABLE_SIZE = WORD_TABLE_OFFSET - PINYIN_TABLE_OFFSET  # 0x10E8

# Smallest buffer the header reader accepts
MIN_FILE_SIZE = PINYIN_TABLE_OFFSET

# (attribute, start, end) for each header field
HEADER_FIELDS: Tuple[Tuple[str, int, int], ...] = (
    ("name", NAME_OFFSET, CATEGORY_OFFSET),
    ("category", CATEGORY_OFFSET, DESCRIPTION_OFFSET),
    ("description", DESCRIPTION_OFFSET, SAMPLE_OFFSET),
    ("sample", SAMPLE_OFFSET, PINYIN_TABLE_OFFSET),
)

# Emitted for code units that are not a standalone scalar value
REPLACEMENT_CHAR = "?"

SURROGATE_MIN = 0xD800
SURROGATE_MAX = 0xDFFF


# =============================================================================
# Errors
# =============================================================================

class ScelError(Exception):
    """Base class for SCEL decoding errors."""


class ScelFormatError(ScelError, ValueError):
    """The buffer does not hold a well-formed SCEL structure."""


# =============================================================================
# Enums
# =============================================================================

class CodeUnitKind(IntEnum):
    """How a single UTF-16 code unit is treated by the decoder."""
    PADDING = 0       # Zero unit, skipped
    SCALAR = 1        # Valid scalar value, appended as is
    SUBSTITUTED = 2   # Lone surrogate, replaced


# =============================================================================
# Byte Decoder
# =============================================================================

def classify_code_unit(unit: int) -> CodeUnitKind:
    """Classify a 16-bit code unit."""
    if unit == 0:
        return CodeUnitKind.PADDING
    if SURROGATE_MIN <= unit <= SURROGATE_MAX:
        return CodeUnitKind.SUBSTITUTED
    return CodeUnitKind.SCALAR


def decode_utf16le(data: bytes, strict: bool = False) -> str:
    """
    Decode a run of little-endian UTF-16 code units.

    Zero code units are padding and are skipped wherever they appear. A
    trailing odd byte is dropped. Each remaining unit is mapped to one
    character; surrogate pairs are NOT combined, so a character outside the
    Basic Multilingual Plane decodes as two REPLACEMENT_CHAR.

    Args:
        data: Raw bytes.
        strict: Raise ScelFormatError on a surrogate unit instead of
            substituting REPLACEMENT_CHAR.

    Returns:
        Decoded text.
    """
    count = len(data) // 2
    if count == 0:
        return ""

    chars = []
    for unit in struct.unpack_from(f"<{count}H", data):
        kind = classify_code_unit(unit)
        if kind == CodeUnitKind.PADDING:
            continue
        if kind == CodeUnitKind.SUBSTITUTED:
            if strict:
                raise ScelFormatError(f"Unpaired surrogate code unit 0x{unit:04X}")
            chars.append(REPLACEMENT_CHAR)
        else:
            chars.append(chr(unit))
    return "".join(chars)


# =============================================================================
# Cursor
# =============================================================================

class ByteReader:
    """
    Bounds-checked forward cursor over a range of an immutable buffer.

    Positions are relative to `start`. Every read checks that it fits before
    `end`; a read that does not fit raises ScelFormatError and leaves the
    cursor where it was.
    """

    U16 = struct.Struct("<H")

    def __init__(self, data: bytes, start: int = 0, end: Optional[int] = None):
        if end is None:
            end = len(data)
        if start < 0 or start > end or end > len(data):
            raise ScelFormatError(
                f"Range [0x{start:X}, 0x{end:X}) outside buffer of {len(data)} bytes"
            )
        self._data = data
        self._start = start
        self._end = end
        self._pos = start

    @property
    def position(self) -> int:
        """Cursor position relative to the start of the range."""
        return self._pos - self._start

    @property
    def remaining(self) -> int:
        return self._end - self._pos

    def __len__(self) -> int:
        return self._end - self._start

    def at_end(self) -> bool:
        return self._pos >= self._end

    def _require(self, size: int, what: str):
        if size > self.remaining:
            raise ScelFormatError(
                f"{what}: need {size} bytes at offset 0x{self._pos:X}, "
                f"only {self.remaining} left"
            )

    def read_u16(self, what: str = "uint16") -> int:
        """Read one little-endian uint16."""
        self._require(2, what)
        (value,) = self.U16.unpack_from(self._data, self._pos)
        self._pos += 2
        return value

    def peek_u16(self, what: str = "uint16") -> int:
        """Read one little-endian uint16 without advancing."""
        self._require(2, what)
        (value,) = self.U16.unpack_from(self._data, self._pos)
        return value

    def read_bytes(self, size: int, what: str = "bytes") -> bytes:
        """Read `size` raw bytes."""
        self._require(size, what)
        chunk = self._data[self._pos : self._pos + size]
        self._pos += size
        return chunk

    def skip(self, size: int, what: str = "skip"):
        """Advance without reading."""
        self._require(size, what)
        self._pos += size

    def view(self, start: int, end: Optional[int] = None) -> "ByteReader":
        """
        Return a new reader over [start, end) of this reader's range.

        Offsets are relative to this reader's start; `end` defaults to the
        end of this range.
        """
        abs_start = self._start + start
        abs_end = self._end if end is None else self._start + end
        if abs_end > self._end:
            raise ScelFormatError(
                f"View [0x{abs_start:X}, 0x{abs_end:X}) exceeds range end 0x{self._end:X}"
            )
        return ByteReader(self._data, abs_start, abs_end)


# =============================================================================
# Data Classes
# =============================================================================

@dataclass
class ScelHeader:
    """Descriptive header strings of a dictionary."""
    name: str = ""
    category: str = ""
    description: str = ""
    sample: str = ""


@dataclass(frozen=True)
class ChineseEntry:
    """One word of the word table."""
    count: int    # Frequency count (uint16)
    pinyin: str   # Concatenated pinyin syllables
    word: str


@dataclass
class ScelDictionary:
    """A fully decoded SCEL buffer."""
    header: ScelHeader = field(default_factory=ScelHeader)
    pinyin_table: Dict[int, str] = field(default_factory=dict)
    entries: List[ChineseEntry] = field(default_factory=list)

    @property
    def words(self) -> List[str]:
        return [entry.word for entry in self.entries]

    @classmethod
    def decode(
        cls,
        data: bytes,
        strict: bool = False,
        pinyin_separator: str = "",
    ) -> "ScelDictionary":
        """
        Decode a whole SCEL buffer.

        The header is validated first, so a buffer shorter than
        MIN_FILE_SIZE is rejected before the tables are touched.

        Raises:
            ScelFormatError: On any truncated or overrunning field.
        """
        header = parse_header(data, strict=strict)

        buffer = ByteReader(data)
        if len(buffer) < WORD_TABLE_OFFSET:
            raise ScelFormatError(
                f"Pinyin table: buffer of {len(data)} bytes ends before 0x{WORD_TABLE_OFFSET:X}"
            )

        pinyin_table = parse_pinyin_table(
            buffer.view(PINYIN_TABLE_OFFSET, WORD_TABLE_OFFSET), strict=strict
        )
        entries = parse_entries(
            buffer.view(WORD_TABLE_OFFSET),
            pinyin_table,
            strict=strict,
            separator=pinyin_separator,
        )
        return cls(header=header, pinyin_table=pinyin_table, entries=entries)


# =============================================================================
# Parsers
# =============================================================================

def _as_reader(data) -> ByteReader:
    return data if isinstance(data, ByteReader) else ByteReader(data)


def parse_header(data: bytes, strict: bool = False) -> ScelHeader:
    """
    Decode the four fixed-width header fields.

    Raises:
        ScelFormatError: If the buffer is shorter than MIN_FILE_SIZE.
    """
    if len(data) < MIN_FILE_SIZE:
        raise ScelFormatError(
            f"Header: file is {len(data)} bytes, minimum is 0x{MIN_FILE_SIZE:X} ({MIN_FILE_SIZE})"
        )

    values = {
        attr: decode_utf16le(data[start:end], strict=strict)
        for attr, start, end in HEADER_FIELDS
    }
    return ScelHeader(**values)


def parse_pinyin_table(data, strict: bool = False) -> Dict[int, str]:
    """
    Parse the pinyin table region into an index -> syllable map.

    Args:
        data: The table region, as bytes or a ByteReader view.

    Returns:
        Map of pinyin index to syllable. Duplicate indices keep the last one.
    """
    reader = _as_reader(data)
    table: Dict[int, str] = {}

    while not reader.at_end():
        index = reader.read_u16("Pinyin table index")
        length = reader.read_u16("Pinyin table length")
        raw = reader.read_bytes(length, f"Pinyin syllable {index}")
        table[index] = decode_utf16le(raw, strict=strict)

    logger.debug(f"Pinyin table: {len(table)} syllables")
    return table


def resolve_pinyin(index_bytes: bytes, table: Dict[int, str], separator: str = "") -> str:
    """
    Join the syllables referenced by a run of uint16 pinyin indices.

    Indices missing from the table are skipped.
    """
    count = len(index_bytes) // 2
    if count == 0:
        return ""

    indices = struct.unpack_from(f"<{count}H", index_bytes)
    return separator.join(table[i] for i in indices if i in table)


def parse_entries(
    data,
    table: Dict[int, str],
    strict: bool = False,
    separator: str = "",
) -> List[ChineseEntry]:
    """
    Parse the word table into entries, in physical order.

    Args:
        data: The word table region, as bytes or a ByteReader view.
        table: Pinyin table from parse_pinyin_table().
        strict: Passed to decode_utf16le().
        separator: Joins pinyin syllables.

    Returns:
        One entry per word. Every word of a homophone group shares the
        group's pinyin string.

    Raises:
        ScelFormatError: If any length-prefixed field runs past the end.
    """
    reader = _as_reader(data)
    entries: List[ChineseEntry] = []
    groups = 0

    while not reader.at_end():
        same = reader.read_u16("Word group size")
        pinyin_len = reader.read_u16("Word group pinyin length")
        pinyin = resolve_pinyin(
            reader.read_bytes(pinyin_len, "Word group pinyin indices"),
            table,
            separator=separator,
        )

        for _ in range(same):
            word_len = reader.read_u16("Word length")
            word = decode_utf16le(reader.read_bytes(word_len, "Word text"), strict=strict)

            ext_len = reader.read_u16("Word ext length")
            count = reader.peek_u16("Word frequency count")
            reader.skip(ext_len, "Word ext block")

            entries.append(ChineseEntry(count=count, pinyin=pinyin, word=word))
        groups += 1

    logger.debug(f"Word table: {groups} groups, {len(entries)} words")
    return entries


def decode_scel(data: bytes, strict: bool = False, pinyin_separator: str = "") -> ScelDictionary:
    """Shorthand for ScelDictionary.decode()."""
    return ScelDictionary.decode(data, strict=strict, pinyin_separator=pinyin_separator)

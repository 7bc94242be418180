"""
Synthetic SCEL buffer builders shared by the tests.
"""

import struct

import pytest

from scel_decoder.scel import (
    CATEGORY_OFFSET,
    DESCRIPTION_OFFSET,
    NAME_OFFSET,
    PINYIN_TABLE_OFFSET,
    PINYIN_TABLE_SIZE,
    SAMPLE_OFFSET,
)


def utf16(text: str) -> bytes:
    return text.encode("utf-16-le")


def pinyin_record(index: int, syllable: str) -> bytes:
    raw = utf16(syllable)
    return struct.pack("<HH", index, len(raw)) + raw


def pinyin_region(records) -> bytes:
    """
    Build the fixed-size pinyin table region.

    The unused tail is filled by one filler record (index 0xFFFF, all-zero
    syllable) so the region stays well formed.
    """
    body = b"".join(pinyin_record(index, syllable) for index, syllable in records)
    filler = PINYIN_TABLE_SIZE - len(body)
    assert filler >= 4, "pinyin records do not fit the region"
    return body + struct.pack("<HH", 0xFFFF, filler - 4) + b"\x00" * (filler - 4)


def word_group(indices, words) -> bytes:
    """
    Build one homophone group.

    Args:
        indices: Pinyin indices shared by the group.
        words: (word, count) or (word, count, extra_ext_bytes) tuples.
    """
    index_bytes = struct.pack(f"<{len(indices)}H", *indices)
    data = struct.pack("<HH", len(words), len(index_bytes)) + index_bytes
    for item in words:
        word, count = item[0], item[1]
        extra = item[2] if len(item) > 2 else b""
        raw = utf16(word)
        ext = struct.pack("<H", count) + extra
        data += struct.pack("<H", len(raw)) + raw + struct.pack("<H", len(ext)) + ext
    return data


def header_region(name="", category="", description="", sample="") -> bytes:
    buf = bytearray(PINYIN_TABLE_OFFSET)
    for text, start, end in (
        (name, NAME_OFFSET, CATEGORY_OFFSET),
        (category, CATEGORY_OFFSET, DESCRIPTION_OFFSET),
        (description, DESCRIPTION_OFFSET, SAMPLE_OFFSET),
        (sample, SAMPLE_OFFSET, PINYIN_TABLE_OFFSET),
    ):
        raw = utf16(text)
        assert len(raw) <= end - start
        buf[start : start + len(raw)] = raw
    return bytes(buf)


def build_scel(header=None, pinyin=(), groups=()) -> bytes:
    """Assemble a complete buffer from header strings, pinyin records and groups."""
    return (
        header_region(**(header or {}))
        + pinyin_region(pinyin)
        + b"".join(word_group(indices, words) for indices, words in groups)
    )


@pytest.fixture
def sample_scel() -> bytes:
    """A small dictionary with two homophone groups."""
    return build_scel(
        header={
            "name": "网络流行新词",
            "category": "网络",
            "description": "测试词库",
            "sample": "你好 世界",
        },
        pinyin=[(1, "ni"), (2, "hao"), (3, "shi"), (4, "jie")],
        groups=[
            ([1, 2], [("你好", 100), ("拟好", 7, b"\x00" * 8)]),
            ([3, 4], [("世界", 42)]),
        ],
    )

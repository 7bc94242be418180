#!/usr/bin/env python3
"""
Converter, writer and CLI tests.
"""

import logging

import pytest

from conftest import build_scel
from scel_decoder.cli import main
from scel_decoder.converter import ScelConverter
from scel_decoder.models import ConverterConfig, ErrorPolicy, OutputFormat
from scel_decoder.scel import ChineseEntry, ScelFormatError
from scel_decoder.writer import format_entry, write_entries


def make_dir(tmp_path, sample_scel, with_bad=False):
    """Populate tmp_path with two good dictionaries and some noise."""
    second = build_scel(
        header={"name": "城市"},
        pinyin=[(7, "bei"), (8, "jing")],
        groups=[([7, 8], [("北京", 9)])],
    )
    (tmp_path / "b_city.scel").write_bytes(second)
    (tmp_path / "a_net.SCEL").write_bytes(sample_scel)
    (tmp_path / "notes.txt").write_text("not a dictionary", encoding="utf-8")
    if with_bad:
        (tmp_path / "c_bad.scel").write_bytes(b"\x00" * 100)
    return tmp_path


def make_config(tmp_path, **kwargs) -> ConverterConfig:
    return ConverterConfig(
        input_dir=str(tmp_path),
        output_path=str(tmp_path / "out" / "result.txt"),
        **kwargs,
    )


# =============================================================================
# Converter
# =============================================================================

def test_find_files_filters_and_sorts(tmp_path, sample_scel):
    make_dir(tmp_path, sample_scel, with_bad=True)
    files = ScelConverter(make_config(tmp_path)).find_files()
    assert [f.name for f in files] == ["a_net.SCEL", "b_city.scel", "c_bad.scel"]


def test_convert_directory_keeps_file_order(tmp_path, sample_scel):
    make_dir(tmp_path, sample_scel)
    result = ScelConverter(make_config(tmp_path)).convert_directory()

    assert result.words == ["你好", "拟好", "世界", "北京"]
    assert [p.name for p in result.processed] == ["a_net.SCEL", "b_city.scel"]
    assert result.skipped == []


def test_convert_directory_skips_malformed_file(tmp_path, sample_scel, caplog):
    make_dir(tmp_path, sample_scel, with_bad=True)
    caplog.set_level(logging.INFO, logger="scel_decoder")

    result = ScelConverter(make_config(tmp_path)).convert_directory()

    assert result.words == ["你好", "拟好", "世界", "北京"]
    assert len(result.skipped) == 1
    assert result.skipped[0][0].name == "c_bad.scel"
    assert "Header" in result.skipped[0][1]
    assert "Skipping" in caplog.text


def test_convert_directory_aborts_on_malformed_file(tmp_path, sample_scel):
    make_dir(tmp_path, sample_scel, with_bad=True)
    config = make_config(tmp_path, on_error=ErrorPolicy.ABORT)
    with pytest.raises(ScelFormatError):
        ScelConverter(config).convert_directory()


def test_convert_directory_drops_whole_truncated_file(tmp_path, sample_scel):
    (tmp_path / "cut.scel").write_bytes(sample_scel[:-1])
    result = ScelConverter(make_config(tmp_path)).convert_directory()
    assert result.entries == []
    assert len(result.skipped) == 1


def test_convert_file_logs_header(tmp_path, sample_scel, caplog):
    path = tmp_path / "a.scel"
    path.write_bytes(sample_scel)
    caplog.set_level(logging.INFO, logger="scel_decoder")

    ScelConverter(make_config(tmp_path)).convert_file(path)

    assert str(path) in caplog.text
    assert "网络流行新词" in caplog.text
    assert "测试词库" in caplog.text


def test_missing_input_dir_raises(tmp_path):
    config = ConverterConfig(input_dir=str(tmp_path / "missing"))
    with pytest.raises(OSError):
        ScelConverter(config).convert_directory()


def test_run_writes_output(tmp_path, sample_scel):
    make_dir(tmp_path, sample_scel)
    config = make_config(tmp_path)
    result = ScelConverter(config).run()

    assert result.lines_written == 4
    text = (tmp_path / "out" / "result.txt").read_text(encoding="utf-8")
    assert text == "你好\n拟好\n世界\n北京\n"


def test_run_with_empty_directory(tmp_path):
    result = ScelConverter(make_config(tmp_path)).run()
    assert result.lines_written == 0
    assert (tmp_path / "out" / "result.txt").read_text(encoding="utf-8") == ""


# =============================================================================
# Writer
# =============================================================================

def test_format_entry():
    entry = ChineseEntry(count=5, pinyin="ceshi", word="测试")
    assert format_entry(entry) == "测试"
    assert format_entry(entry, OutputFormat.IBUS) == "测试 ceshi 5"


def test_write_entries_ibus(tmp_path):
    path = tmp_path / "ibus.txt"
    entries = [ChineseEntry(1, "ni'hao", "你好"), ChineseEntry(2, "shi'jie", "世界")]
    assert write_entries(str(path), entries, OutputFormat.IBUS) == 2
    assert path.read_text(encoding="utf-8") == "你好 ni'hao 1\n世界 shi'jie 2\n"


# =============================================================================
# CLI
# =============================================================================

def test_cli_converts_directory(tmp_path, sample_scel, capsys):
    make_dir(tmp_path, sample_scel)
    output = tmp_path / "words.txt"

    main(["-i", str(tmp_path), "-o", str(output), "-f", "ibus"])

    lines = output.read_text(encoding="utf-8").splitlines()
    assert lines[0] == "你好 nihao 100"
    assert len(lines) == 4
    assert "CONVERSION COMPLETE" in capsys.readouterr().out


def test_cli_abort_on_error_exits_nonzero(tmp_path, sample_scel, capsys):
    make_dir(tmp_path, sample_scel, with_bad=True)
    with pytest.raises(SystemExit) as exc:
        main(["-i", str(tmp_path), "-o", str(tmp_path / "r.txt"), "--abort-on-error"])
    assert exc.value.code == 1
    assert "Error:" in capsys.readouterr().out


def test_cli_info(tmp_path, sample_scel, capsys):
    path = tmp_path / "a.scel"
    path.write_bytes(sample_scel)

    with pytest.raises(SystemExit) as exc:
        main(["--info", str(path)])
    assert exc.value.code == 0

    out = capsys.readouterr().out
    assert "网络流行新词" in out
    assert "Entries:     3" in out


def test_cli_missing_config(tmp_path, capsys):
    with pytest.raises(SystemExit) as exc:
        main(["-c", str(tmp_path / "nope.yaml")])
    assert exc.value.code == 1
    assert "Config file not found" in capsys.readouterr().out

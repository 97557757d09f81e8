"""Tests for dataset loading and word selection."""
import bz2
import logging
import random

import pytest

from toki_typer.dataset import (
    BUNDLED_DATASET,
    WordData,
    build_entries,
    filter_words,
    load_words,
    parse_words,
    sample_words,
)
from toki_typer.errors import DatasetError


def test_parse_skips_malformed_records(sample_toml, caplog):
    with caplog.at_level(logging.WARNING):
        words = parse_words(sample_toml)
    assert [w.word for w in words] == ["toki", "pona", "kin", "kapesi", "nimisin", "two words"]
    assert "Skipped 1 malformed" in caplog.text


def test_parse_defaults():
    words = parse_words('[[words]]\nword = "a"\nusage_category = "core"\n')
    assert words == [WordData(id="a", word="a", usage_category="core")]


def test_parse_rejects_bad_toml():
    with pytest.raises(DatasetError):
        parse_words("[[words]\nword = ")


def test_parse_requires_words_array():
    with pytest.raises(DatasetError):
        parse_words('title = "no words here"\n')


def test_load_plain_and_compressed(tmp_path, sample_toml):
    plain = tmp_path / "words.toml"
    plain.write_text(sample_toml, encoding="utf-8")
    packed = tmp_path / "words.toml.bz2"
    packed.write_bytes(bz2.compress(sample_toml.encode("utf-8")))

    assert load_words(plain) == load_words(packed)


def test_load_missing_file(tmp_path):
    with pytest.raises(DatasetError):
        load_words(tmp_path / "nope.toml")


def test_load_corrupt_bz2(tmp_path):
    path = tmp_path / "words.toml.bz2"
    path.write_bytes(b"not bz2 at all")
    with pytest.raises(DatasetError):
        load_words(path)


def test_bundled_dataset_has_core_words():
    words = load_words()
    assert BUNDLED_DATASET.exists()
    core = filter_words(words)
    assert len(core) >= 40
    assert all(w.usage_category == "core" and w.definitions for w in core)


def test_filter_words(sample_toml):
    words = parse_words(sample_toml)
    assert [w.word for w in filter_words(words)] == ["toki", "pona"]
    assert [w.word for w in filter_words(words, include_deprecated=True)] == [
        "toki",
        "pona",
        "kapesi",
    ]
    assert [w.word for w in filter_words(words, categories=["common"])] == ["kin"]


def test_sample_caps_and_shuffles():
    words = [WordData(id=str(i), word=f"w{i}", usage_category="core", definitions="d") for i in range(100)]
    picked = sample_words(words, 40, random.Random(3))
    assert len(picked) == 40
    assert len(set(picked)) == 40
    assert picked != words[:40]


def test_sample_shorter_than_limit():
    words = [WordData(id="a", word="a", usage_category="core", definitions="d")]
    assert sample_words(words, 40) == words


def test_build_entries(sample_toml):
    entries = build_entries(parse_words(sample_toml), seed=1)
    assert sorted(e.target for e in entries) == ["pona", "toki"]
    prompts = {e.target: e.prompt for e in entries}
    assert prompts["toki"] == "core: verb: to communicate"
    assert all(e.input == [] and e.elapsed == 0.0 and e.timer_start is None for e in entries)


def test_build_entries_seed_is_repeatable():
    words = load_words()
    first = [e.target for e in build_entries(words, seed=7)]
    second = [e.target for e in build_entries(words, seed=7)]
    assert first == second
    assert len(first) == 40


def test_build_entries_with_no_eligible_words(sample_toml):
    assert build_entries(parse_words(sample_toml), categories=["obscure"]) == []

from __future__ import annotations

import bz2
import logging
import random
import tomllib
from dataclasses import dataclass
from pathlib import Path
from typing import Dict, Iterable, List, Optional, Sequence, Union

from toki_typer.config import CATEGORIES, MAX_WORDS
from toki_typer.errors import DatasetError
from toki_typer.session import WordEntry

logger = logging.getLogger(__name__)

BUNDLED_DATASET = Path(__file__).resolve().parent / "data" / "words.toml"


@dataclass(frozen=True)
class WordData:
    id: str
    word: str
    usage_category: str
    deprecated: bool = False
    definitions: Optional[str] = None
    commentary: Optional[str] = None

    @property
    def prompt(self) -> str:
        return f"{self.usage_category}: {self.definitions or ''}"


def parse_record(row: Dict[str, object]) -> Optional[WordData]:
    """Return a WordData, or None when a required field is missing or malformed."""
    word = row.get("word")
    category = row.get("usage_category")
    if not isinstance(word, str) or not word:
        return None
    if category not in CATEGORIES:
        return None
    definitions = row.get("definitions")
    commentary = row.get("commentary")
    return WordData(
        id=str(row.get("id", word)),
        word=word,
        usage_category=str(category),
        deprecated=bool(row.get("deprecated", False)),
        definitions=definitions if isinstance(definitions, str) else None,
        commentary=commentary if isinstance(commentary, str) else None,
    )


def parse_words(document: str) -> List[WordData]:
    try:
        data = tomllib.loads(document)
    except tomllib.TOMLDecodeError as exc:
        raise DatasetError(f"invalid TOML: {exc}") from exc

    rows = data.get("words")
    if not isinstance(rows, list):
        raise DatasetError("dataset has no [[words]] array")

    out: List[WordData] = []
    skipped = 0
    for row in rows:
        record = parse_record(row) if isinstance(row, dict) else None
        if record is None:
            skipped += 1
            continue
        out.append(record)
    if skipped:
        logger.warning("Skipped %d malformed dataset records", skipped)
    return out


def load_words(path: Optional[Union[str, Path]] = None) -> List[WordData]:
    """
    Read a TOML word list. Paths ending in .bz2 are decompressed first.
    Without a path the dataset shipped with the package is used.
    """
    path = Path(path) if path else BUNDLED_DATASET
    try:
        raw = path.read_bytes()
        if path.suffix == ".bz2":
            raw = bz2.decompress(raw)
        document = raw.decode("utf-8")
    except (OSError, ValueError) as exc:
        raise DatasetError(f"cannot read dataset {path}: {exc}") from exc

    words = parse_words(document)
    logger.info("Loaded %d words from %s", len(words), path)
    return words


# ---------------------------
# Selection
# ---------------------------

def filter_words(
    words: Iterable[WordData],
    categories: Sequence[str] = ("core",),
    include_deprecated: bool = False,
) -> List[WordData]:
    wanted = set(categories)
    return [
        w
        for w in words
        if w.usage_category in wanted
        and (include_deprecated or not w.deprecated)
        and w.definitions
        and not any(c.isspace() for c in w.word)
    ]


def sample_words(
    words: Sequence[WordData],
    limit: int = MAX_WORDS,
    rng: Optional[random.Random] = None,
) -> List[WordData]:
    rng = rng or random.Random()
    picked = list(words)
    rng.shuffle(picked)
    return picked[: max(0, limit)]


def build_entries(
    words: Iterable[WordData],
    categories: Sequence[str] = ("core",),
    limit: int = MAX_WORDS,
    include_deprecated: bool = False,
    seed: Optional[int] = None,
) -> List[WordEntry]:
    eligible = filter_words(words, categories, include_deprecated)
    picked = sample_words(eligible, limit, random.Random(seed))
    logger.info("Selected %d of %d eligible words", len(picked), len(eligible))
    return [WordEntry(target=w.word, prompt=w.prompt) for w in picked]

"""Test configuration."""
from typing import Callable, List

import pytest

from toki_typer.session import KeyEvent, KeyKind, Session, WordEntry


class FakeClock:
    """Monotonic clock that only moves when told to."""

    def __init__(self, start: float = 100.0) -> None:
        self.now = start

    def __call__(self) -> float:
        return self.now

    def advance(self, seconds: float) -> None:
        self.now += seconds


def keys(text: str) -> List[KeyEvent]:
    """Spell out key events; ' ' is the boundary key and '<' is backspace."""
    out = []
    for ch in text:
        if ch == " ":
            out.append(KeyEvent(KeyKind.BOUNDARY))
        elif ch == "<":
            out.append(KeyEvent(KeyKind.BACKSPACE))
        else:
            out.append(KeyEvent(KeyKind.CHAR, ch))
    return out


@pytest.fixture
def clock() -> FakeClock:
    return FakeClock()


@pytest.fixture
def make_session(clock: FakeClock) -> Callable[..., Session]:
    def factory(*targets: str) -> Session:
        entries = [WordEntry(target=t, prompt=f"core: {t}") for t in targets]
        return Session(entries, clock=clock)

    return factory


SAMPLE_TOML = """
[[words]]
id = "toki"
word = "toki"
usage_category = "core"
deprecated = false
definitions = "verb: to communicate"

[[words]]
id = "pona"
word = "pona"
usage_category = "core"
definitions = "adjective: good, simple"

[[words]]
id = "kin"
word = "kin"
usage_category = "common"
definitions = "particle: too, also"

[[words]]
id = "kapesi"
word = "kapesi"
usage_category = "core"
deprecated = true
definitions = "adjective: brown"

[[words]]
id = "nimisin"
word = "nimisin"
usage_category = "core"

[[words]]
id = "broken"
usage_category = "core"
definitions = "missing its word"

[[words]]
id = "two words"
word = "two words"
usage_category = "core"
definitions = "has a space"
"""


@pytest.fixture
def sample_toml() -> str:
    return SAMPLE_TOML

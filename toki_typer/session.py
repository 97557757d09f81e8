from __future__ import annotations

import enum
import logging
import time
from dataclasses import dataclass, field
from typing import Callable, Iterable, List, NamedTuple, Optional, Protocol, Sequence

from toki_typer.diff import Glyph, diff_line

logger = logging.getLogger(__name__)

Clock = Callable[[], float]

DEFAULT_ABORT_KEYS = ("escape", "ctrl+c", "ctrl+q")


# ---------------------------
# Key events
# ---------------------------

class KeyKind(enum.Enum):
    CHAR = "char"
    BACKSPACE = "backspace"
    BOUNDARY = "boundary"
    ABORT = "abort"
    OTHER = "other"


class KeyEvent(NamedTuple):
    kind: KeyKind
    char: str = ""


def classify_key(
    key: str,
    character: Optional[str] = None,
    is_printable: bool = False,
    abort_keys: Sequence[str] = DEFAULT_ABORT_KEYS,
) -> KeyEvent:
    """
    Reduce a terminal key (textual naming: "space", "backspace", "ctrl+c", "a")
    to the handful of classes the exercise understands.
    """
    if key in abort_keys:
        return KeyEvent(KeyKind.ABORT)
    if key == "space":
        return KeyEvent(KeyKind.BOUNDARY)
    if key in ("backspace", "ctrl+h"):
        return KeyEvent(KeyKind.BACKSPACE)
    if is_printable and character and len(character) == 1 and not character.isspace():
        return KeyEvent(KeyKind.CHAR, character)
    return KeyEvent(KeyKind.OTHER)


# ---------------------------
# Word entry + input state machine
# ---------------------------

@dataclass
class WordEntry:
    target: str
    prompt: str = ""
    input: List[str] = field(default_factory=list)
    timer_start: Optional[float] = None
    elapsed: float = 0.0

    @property
    def active(self) -> bool:
        return self.timer_start is not None

    @property
    def typed(self) -> str:
        return "".join(self.input)

    def start_timer(self, now: float) -> None:
        if self.timer_start is None:
            self.timer_start = now

    def stop_timer(self, now: float) -> None:
        if self.timer_start is None:
            return
        self.elapsed += max(0.0, now - self.timer_start)
        self.timer_start = None


def handle_key(entry: WordEntry, event: KeyEvent, now: float) -> int:
    """
    Apply one key event to ``entry`` and return the cursor delta (-1, 0 or +1).

    Abort is not handled here; the session checks for it before any entry is
    touched.
    """
    if event.kind is KeyKind.BOUNDARY:
        # Commits regardless of correctness. An idle word commits with no time.
        entry.stop_timer(now)
        return 1

    if event.kind is KeyKind.BACKSPACE:
        if entry.input:
            entry.input.pop()
            return 0
        entry.stop_timer(now)
        return -1

    if event.kind is KeyKind.CHAR:
        entry.start_timer(now)
        entry.input.append(event.char)
        return 0

    return 0


# ---------------------------
# Session
# ---------------------------

class SessionState(enum.Enum):
    RUNNING = "running"
    COMPLETED = "completed"
    ABORTED = "aborted"


class Page(enum.Enum):
    GAME = "game"
    RESULTS = "results"


class ResultsView(Protocol):
    """Receives a finished session. Rendering results is left to the caller."""

    def show(self, session: "Session") -> None: ...


class Frame(NamedTuple):
    prompt: str
    glyphs: List[Glyph]


class Session:
    """Ordered word entries plus the cursor selecting the one being typed."""

    def __init__(self, words: Iterable[WordEntry], clock: Clock = time.monotonic) -> None:
        self.words: List[WordEntry] = list(words)
        self.index = 0
        self.clock = clock
        self.state = SessionState.RUNNING
        if not self.words:
            logger.info("Session built with no eligible words, completing immediately")
            self.state = SessionState.COMPLETED

    @property
    def finished(self) -> bool:
        return self.state is not SessionState.RUNNING

    @property
    def current(self) -> Optional[WordEntry]:
        if self.index < len(self.words):
            return self.words[self.index]
        return None

    @property
    def page(self) -> Page:
        return Page.RESULTS if self.state is SessionState.COMPLETED else Page.GAME

    @property
    def total_elapsed(self) -> float:
        return sum(w.elapsed for w in self.words)

    def frame(self) -> Frame:
        current = self.current
        prompt = current.prompt if current is not None else ""
        return Frame(prompt, diff_line(self.words))

    def abort(self) -> None:
        if self.finished:
            return
        self.state = SessionState.ABORTED
        logger.info("Session aborted at word %d/%d", self.index, len(self.words))

    def dispatch(self, event: KeyEvent) -> SessionState:
        if self.finished:
            return self.state
        if event.kind is KeyKind.ABORT:
            self.abort()
            return self.state

        entry = self.words[self.index]
        if event.kind is KeyKind.BACKSPACE and not entry.input and self.index == 0:
            # Nothing before the first word.
            return self.state

        delta = handle_key(entry, event, self.clock())
        if delta:
            self.index += delta
            logger.debug("Cursor moved to %d (%r, %.3fs)", self.index, entry.target, entry.elapsed)

        if self.index == len(self.words):
            self.state = SessionState.COMPLETED
            logger.info(
                "Session completed: %d words in %.2fs", len(self.words), self.total_elapsed
            )
        return self.state


def run_session(
    session: Session,
    next_event: Callable[[], KeyEvent],
    render: Callable[[Frame], None],
) -> SessionState:
    """Blocking render/input/advance loop for frontends that can wait on a key."""
    while not session.finished:
        render(session.frame())
        session.dispatch(next_event())
    return session.state

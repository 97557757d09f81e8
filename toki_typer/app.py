from __future__ import annotations

import logging
from typing import List, Optional

from rich.text import Text
from textual import events, work
from textual.app import App, ComposeResult
from textual.containers import Container
from textual.widgets import Static

from toki_typer.config import Settings
from toki_typer.dataset import build_entries, load_words
from toki_typer.diff import to_text
from toki_typer.errors import DatasetError
from toki_typer.session import (
    Clock,
    KeyKind,
    Page,
    ResultsView,
    Session,
    SessionState,
    WordEntry,
    classify_key,
)

logger = logging.getLogger(__name__)


# ---------------------------
# UI widgets
# ---------------------------

class StatsBar(Static):
    """Word counter and elapsed time."""
    pass


class PromptView(Static):
    """Definition of the word being typed."""
    pass


class DiffView(Static):
    """Every word of the session, diffed against what was typed."""
    pass


class HelpBar(Static):
    """Help / controls."""
    pass


# ---------------------------
# App
# ---------------------------

class TypingApp(App):
    CSS = """
    Screen {
        background: transparent;
    }

    #root {
        height: 100%;
        padding: 1 2;
    }

    StatsBar {
        background: #0f172a;
        border: round #1f2937;
        padding: 0 2;
        height: 3;
    }

    HelpBar {
        background: #0f172a;
        border: round #1f2937;
        padding: 0 2;
        height: 3;
    }

    PromptView {
        background: #0b1220;
        border: round #1f2937;
        padding: 1 2;
        height: 8;
    }

    DiffView {
        background: #111827;
        border: round #1f2937;
        padding: 1 2;
        height: 1fr;
    }
    """

    TITLE = "toki-typer"
    SUB_TITLE = "nimi li kama"

    BINDINGS = [
        ("ctrl+q", "quit", "Quit"),
        ("ctrl+t", "cycle_theme", "Theme"),
    ]

    def __init__(
        self,
        settings: Optional[Settings] = None,
        entries: Optional[List[WordEntry]] = None,
        clock: Optional[Clock] = None,
        results_view: Optional[ResultsView] = None,
    ) -> None:
        super().__init__()
        self.settings = settings or Settings()
        self.palettes = self.settings.themes
        self.theme_name = self.settings.theme_name
        self.palette = self.settings.palette
        self.results_view = results_view
        self._preloaded = entries
        self._session_clock = clock
        self.session: Optional[Session] = None
        self.page = Page.GAME

    def compose(self) -> ComposeResult:
        with Container(id="root"):
            self.stats_bar = StatsBar()
            self.prompt_view = PromptView()
            self.diff_view = DiffView()
            self.help_bar = HelpBar()
            yield self.stats_bar
            yield self.prompt_view
            yield self.diff_view
            yield self.help_bar

    def on_mount(self) -> None:
        self.apply_theme()
        self._render_all()
        if self._preloaded is not None:
            self.start_session(self._preloaded)
        else:
            self.load_entries()

    # ---------------------------
    # Session lifecycle
    # ---------------------------

    @work(thread=True, exclusive=True)
    def load_entries(self) -> None:
        try:
            words = load_words(self.settings.dataset)
        except DatasetError as exc:
            logger.error("Could not load dataset: %s", exc)
            self.call_from_thread(self.exit, None, 1, str(exc))
            return
        entries = build_entries(
            words,
            categories=self.settings.categories,
            limit=self.settings.max_words,
            include_deprecated=self.settings.include_deprecated,
            seed=self.settings.seed,
        )
        self.call_from_thread(self.start_session, entries)

    def start_session(self, entries: List[WordEntry]) -> None:
        if self._session_clock is not None:
            self.session = Session(entries, clock=self._session_clock)
        else:
            self.session = Session(entries)
        logger.info("Session started with %d words", len(self.session.words))
        self._render_all()
        if self.session.finished:
            self._finish()

    def _finish(self) -> None:
        session = self.session
        if session is None:
            return
        self.page = session.page
        if self.page is Page.RESULTS and self.results_view is not None:
            self.results_view.show(session)
        self.exit(session)

    # ---------------------------
    # Input
    # ---------------------------

    def on_key(self, event: events.Key) -> None:
        if self.session is None or self.session.finished:
            return
        key_event = classify_key(
            event.key,
            event.character,
            event.is_printable,
            self.settings.abort_keys,
        )
        if key_event.kind is KeyKind.OTHER:
            return
        event.stop()
        state = self.session.dispatch(key_event)
        if state is SessionState.RUNNING:
            self._render_all()
        else:
            self._finish()

    async def action_quit(self) -> None:
        if self.session is not None and not self.session.finished:
            self.session.abort()
            self._finish()
            return
        self.exit(self.session)

    def action_cycle_theme(self) -> None:
        self.theme_name = self._cycle_value(self.theme_name, list(self.palettes.keys()))
        self.palette = self.palettes[self.theme_name]
        self.apply_theme()
        self._render_all()

    def _cycle_value(self, current: str, options: List[str]) -> str:
        if current not in options:
            return options[0]
        idx = options.index(current)
        return options[(idx + 1) % len(options)]

    # ---------------------------
    # Rendering
    # ---------------------------

    def apply_theme(self) -> None:
        palette = self.palette
        self.screen.styles.background = palette["screen_bg"]
        self.stats_bar.styles.background = palette["stats_bg"]
        self.help_bar.styles.background = palette["stats_bg"]
        self.prompt_view.styles.background = palette["prompt_bg"]
        self.diff_view.styles.background = palette["card_bg"]
        border_def = (("round", palette["border"]),)
        self.stats_bar.styles.border = border_def
        self.help_bar.styles.border = border_def
        self.prompt_view.styles.border = border_def
        self.diff_view.styles.border = border_def

    def _render_all(self) -> None:
        self._render_stats()
        self._render_frame()
        self._render_help()

    def _render_frame(self) -> None:
        theme = self.palette
        if self.session is None:
            self.prompt_view.update(Text("Loading words…", style=theme["muted"]))
            self.diff_view.update(Text())
            return
        frame = self.session.frame()
        self.prompt_view.update(Text(frame.prompt, style=theme["title"]))
        self.diff_view.update(to_text(frame.glyphs, theme))

    def _render_stats(self) -> None:
        theme = self.palette
        text = Text()
        if self.session is None:
            text.append("Loading…", style=theme["muted"])
            self.stats_bar.update(text)
            return

        session = self.session
        total = len(session.words)
        position = min(session.index + 1, total)
        text.append("Word ", style=theme["muted"])
        text.append(f"{position}/{total}", style=f"bold {theme['title']}")
        text.append("   ", style=theme["muted"])
        text.append("Time ", style=theme["muted"])
        text.append(f"{session.total_elapsed:.1f}s", style=f"bold {theme['title']}")
        self.stats_bar.update(text)

    def _render_help(self) -> None:
        theme = self.palette
        text = Text()
        text.append("Space next word", style=theme["hint"])
        text.append("  ", style=theme["muted"])
        text.append("Backspace erase / previous word", style=theme["hint"])
        text.append("  ", style=theme["muted"])
        text.append("Ctrl+T theme", style=theme["hint"])
        text.append("  ", style=theme["muted"])
        text.append("Esc / Ctrl+Q quit", style=theme["hint"])
        self.help_bar.update(text)

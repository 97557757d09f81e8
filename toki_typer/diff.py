from __future__ import annotations

import enum
from itertools import zip_longest
from typing import TYPE_CHECKING, Dict, Iterable, List, NamedTuple, Sequence

from rich.text import Text

if TYPE_CHECKING:
    from toki_typer.session import WordEntry

PLACEHOLDER = "_"
SEPARATOR = " "


class GlyphStyle(enum.Enum):
    DEFAULT = "default"
    ERROR = "error"
    SURPLUS = "surplus"


class Glyph(NamedTuple):
    char: str
    style: GlyphStyle


def diff_word(target: str, typed: Sequence[str]) -> List[Glyph]:
    """
    Character-aligned comparison of one word.

    Mismatches show the target's character, over-typing shows the typed
    character, untyped positions show a placeholder. One separator closes
    the word.
    """
    glyphs: List[Glyph] = []
    for want, got in zip_longest(target, typed):
        if want is not None and got is not None:
            style = GlyphStyle.DEFAULT if want == got else GlyphStyle.ERROR
            glyphs.append(Glyph(want, style))
        elif got is not None:
            glyphs.append(Glyph(got, GlyphStyle.SURPLUS))
        else:
            glyphs.append(Glyph(PLACEHOLDER, GlyphStyle.DEFAULT))
    glyphs.append(Glyph(SEPARATOR, GlyphStyle.DEFAULT))
    return glyphs


def diff_line(entries: Iterable["WordEntry"]) -> List[Glyph]:
    line: List[Glyph] = []
    for entry in entries:
        line.extend(diff_word(entry.target, entry.input))
    return line


# ---------------------------
# Rich conversion
# ---------------------------

def glyph_styles(palette: Dict[str, str]) -> Dict[GlyphStyle, str]:
    return {
        GlyphStyle.DEFAULT: palette.get("text", ""),
        GlyphStyle.ERROR: f"{palette.get('bad', 'red')} underline",
        GlyphStyle.SURPLUS: palette.get("surplus", "bright_yellow"),
    }


def to_text(glyphs: Iterable[Glyph], palette: Dict[str, str]) -> Text:
    styles = glyph_styles(palette)
    muted = palette.get("muted", "")
    text = Text()
    run: List[str] = []
    run_style = ""

    def flush() -> None:
        if run:
            text.append("".join(run), style=run_style)
            run.clear()

    for glyph in glyphs:
        style = styles[glyph.style]
        if glyph.style is GlyphStyle.DEFAULT and glyph.char == PLACEHOLDER:
            style = muted or style
        if style != run_style:
            flush()
            run_style = style
        run.append(glyph.char)
    flush()
    return text

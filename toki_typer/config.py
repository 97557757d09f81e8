from __future__ import annotations

import json
import logging
import os
import sys
from dataclasses import dataclass, field, fields
from pathlib import Path
from typing import Dict, List, Optional

from toki_typer.errors import ConfigError

logger = logging.getLogger(__name__)

APP_NAME = "toki-typer"
CATEGORIES = ["core", "common", "uncommon", "obscure", "sandbox"]
LOG_LEVELS = ["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"]
MAX_WORDS = 40


# ---------------------------
# Locations
# ---------------------------

def _default_data_dir() -> Path:
    """
    Local-only storage (logs):
    - macOS: ~/Library/Application Support/toki-typer
    - Linux: $XDG_DATA_HOME/toki-typer or ~/.local/share/toki-typer
    """
    home = Path.home()
    if sys.platform == "darwin":
        return home / "Library" / "Application Support" / APP_NAME
    xdg = os.environ.get("XDG_DATA_HOME")
    if xdg:
        return Path(xdg) / APP_NAME
    return home / ".local" / "share" / APP_NAME


def _default_config_dir() -> Path:
    home = Path.home()
    if sys.platform == "darwin":
        return home / "Library" / "Application Support" / APP_NAME
    xdg = os.environ.get("XDG_CONFIG_HOME")
    if xdg:
        return Path(xdg) / APP_NAME
    return home / ".config" / APP_NAME


CONFIG_PATH = _default_config_dir() / f"{APP_NAME}.config.json"
LOG_PATH = _default_data_dir() / f"{APP_NAME}.log"


# ---------------------------
# Themes
# ---------------------------

THEMES: Dict[str, Dict[str, str]] = {
    "slate": {
        "screen_bg": "transparent",
        "card_bg": "#111827",
        "stats_bg": "#0f172a",
        "prompt_bg": "#0b1220",
        "border": "#1f2937",
        "title": "#e5e7eb",
        "muted": "#64748b",
        "hint": "#93c5fd",
        "text": "#cbd5e1",
        "bad": "#fca5a5",
        "surplus": "#fde68a",
    },
    "ember": {
        "screen_bg": "transparent",
        "card_bg": "#1f140f",
        "stats_bg": "#21140e",
        "prompt_bg": "#1a1210",
        "border": "#3b1d14",
        "title": "#fef3c7",
        "muted": "#d6a08a",
        "hint": "#fbbf24",
        "text": "#f3e8e1",
        "bad": "#f87171",
        "surplus": "#fcd34d",
    },
    "mint": {
        "screen_bg": "transparent",
        "card_bg": "#0b1f24",
        "stats_bg": "#0b1c22",
        "prompt_bg": "#0a1b1f",
        "border": "#12323a",
        "title": "#d1fae5",
        "muted": "#7dd3c7",
        "hint": "#5eead4",
        "text": "#c7f9f1",
        "bad": "#fb7185",
        "surplus": "#fef08a",
    },
}


# ---------------------------
# Settings
# ---------------------------

@dataclass
class Profile:
    """Reserved for per-user options. None are recognized yet."""


@dataclass
class Settings:
    dataset: Optional[str] = None
    categories: List[str] = field(default_factory=lambda: ["core"])
    max_words: int = MAX_WORDS
    include_deprecated: bool = False
    seed: Optional[int] = None
    theme: str = "slate"
    abort_keys: List[str] = field(default_factory=lambda: ["escape", "ctrl+c", "ctrl+q"])
    log_level: str = "INFO"
    log_file: Optional[str] = str(LOG_PATH)
    profile: Profile = field(default_factory=Profile)
    themes: Dict[str, Dict[str, str]] = field(default_factory=lambda: dict(THEMES))

    def validate(self) -> None:
        """Raise ConfigError if a value cannot be used."""
        if self.max_words < 0:
            raise ConfigError("max_words must not be negative")
        unknown = [c for c in self.categories if c not in CATEGORIES]
        if unknown:
            raise ConfigError(f"unknown usage categories: {', '.join(unknown)}")
        if not self.categories:
            raise ConfigError("at least one usage category is required")
        if self.theme not in self.themes:
            raise ConfigError(f"unknown theme {self.theme!r}")
        if self.log_level.upper() not in LOG_LEVELS:
            raise ConfigError(f"unknown log level {self.log_level!r}")

    @property
    def theme_name(self) -> str:
        return self.theme if self.theme in self.themes else "slate"

    @property
    def palette(self) -> Dict[str, str]:
        return self.themes[self.theme_name]


def load_config(path: Optional[Path] = None) -> Dict[str, object]:
    path = path or CONFIG_PATH
    if not path.exists():
        return {}
    try:
        data = json.loads(path.read_text(encoding="utf-8"))
    except (OSError, ValueError) as exc:
        logger.warning("Ignoring unreadable config %s: %s", path, exc)
        return {}
    if not isinstance(data, dict):
        logger.warning("Ignoring config %s: top level is not an object", path)
        return {}
    return data


def settings_from_config(config: Dict[str, object]) -> Settings:
    """
    Build Settings from a decoded config file. Bad values fall back to the
    default for that key instead of failing the whole file.
    """
    settings = Settings()

    extra_themes = config.get("themes")
    if isinstance(extra_themes, dict):
        for name, colors in extra_themes.items():
            if isinstance(colors, dict):
                settings.themes[name] = {**settings.themes.get("slate", {}), **colors}

    theme = str(config.get("theme", settings.theme))
    if theme in settings.themes:
        settings.theme = theme

    dataset = config.get("dataset")
    if isinstance(dataset, str) and dataset:
        settings.dataset = dataset

    categories = config.get("categories")
    if isinstance(categories, list):
        known = [str(c) for c in categories if c in CATEGORIES]
        if known:
            settings.categories = known

    try:
        max_words = int(config.get("max_words", settings.max_words))
        if max_words >= 0:
            settings.max_words = max_words
    except (TypeError, ValueError):
        logger.warning("Ignoring invalid max_words %r", config.get("max_words"))

    if isinstance(config.get("include_deprecated"), bool):
        settings.include_deprecated = bool(config["include_deprecated"])

    seed = config.get("seed")
    if isinstance(seed, int) and not isinstance(seed, bool):
        settings.seed = seed

    abort_keys = config.get("abort_keys")
    if isinstance(abort_keys, list) and abort_keys:
        settings.abort_keys = [str(k) for k in abort_keys]

    level = str(config.get("log_level", settings.log_level)).upper()
    if level in LOG_LEVELS:
        settings.log_level = level

    if "log_file" in config:
        log_file = config["log_file"]
        settings.log_file = str(log_file) if log_file else None

    profile = config.get("profile")
    if isinstance(profile, dict):
        recognized = {f.name for f in fields(Profile)}
        ignored = sorted(k for k in profile if k not in recognized)
        if ignored:
            logger.info("Ignoring unrecognized profile options: %s", ", ".join(ignored))

    return settings


def load_settings(path: Optional[Path] = None) -> Settings:
    return settings_from_config(load_config(path))

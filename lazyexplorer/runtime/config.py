"""Persistent JSON settings for the file browser.

Stores theme, favorites, hidden-file preference, sort order, last visited
path, and view mode. Settings are an explicit value loaded at startup and
saved on demand. All access is defensive: malformed or missing config falls
back to defaults field by field.
"""

from __future__ import annotations

import json
import os
from dataclasses import dataclass, replace
from pathlib import Path

from platformdirs import user_config_dir, user_desktop_dir, user_documents_dir, user_downloads_dir

from ..file_tree_model import SORT_BY_NAME, SORT_COLUMNS

APP_NAME = "lazyexplorer"
CONFIG_FILENAME = "config.json"
DEFAULT_CONFIG_PATH = Path(user_config_dir(APP_NAME, appauthor=False)) / CONFIG_FILENAME
CONFIG_PATH = DEFAULT_CONFIG_PATH

DEFAULT_THEME = "mocha"
VIEW_MODES = ("list", "grid")


@dataclass(frozen=True)
class ExplorerSettings:
    """Browser preferences persisted between sessions."""

    theme: str
    favorites: tuple[Path, ...]
    show_hidden: bool
    sort_column: str
    sort_descending: bool
    last_path: Path
    view_mode: str

    def to_dict(self) -> dict[str, object]:
        return {
            "theme": self.theme,
            "favorites": [str(path) for path in self.favorites],
            "show_hidden": self.show_hidden,
            "sort_column": self.sort_column,
            "sort_descending": self.sort_descending,
            "last_path": str(self.last_path),
            "view_mode": self.view_mode,
        }


def _default_favorites() -> tuple[Path, ...]:
    candidates = [
        Path.cwd(),
        Path.home(),
        Path(user_desktop_dir()),
        Path(user_documents_dir()),
        Path(user_downloads_dir()),
    ]
    favorites: list[Path] = []
    for candidate in candidates:
        if candidate not in favorites:
            favorites.append(candidate)
    return tuple(favorites)


def default_settings() -> ExplorerSettings:
    return ExplorerSettings(
        theme=DEFAULT_THEME,
        favorites=_default_favorites(),
        show_hidden=False,
        sort_column=SORT_BY_NAME,
        sort_descending=False,
        last_path=Path.cwd(),
        view_mode=VIEW_MODES[0],
    )


def load_config(path: Path | None = None) -> dict[str, object]:
    """Load the persisted JSON config object.

    Returns an empty dict when the file is missing, unreadable, malformed, or
    does not decode to a top-level JSON object.
    """
    config_path = path if path is not None else CONFIG_PATH
    try:
        data = json.loads(config_path.read_text(encoding="utf-8"))
    except Exception:
        return {}
    return data if isinstance(data, dict) else {}


def save_config(data: dict[str, object], path: Path | None = None) -> None:
    """Persist config data as pretty-printed JSON.

    Any filesystem/serialization error is ignored to keep runtime behavior
    non-fatal when config cannot be written.
    """
    config_path = path if path is not None else CONFIG_PATH
    try:
        config_path.parent.mkdir(parents=True, exist_ok=True)
        config_path.write_text(json.dumps(data, indent=2) + "\n", encoding="utf-8")
    except Exception:
        pass


def _coerce_str(value: object, allowed: tuple[str, ...] | None, default: str) -> str:
    if not isinstance(value, str) or not value.strip():
        return default
    stripped = value.strip()
    if allowed is not None and stripped not in allowed:
        return default
    return stripped


def _coerce_bool(value: object, default: bool) -> bool:
    return value if isinstance(value, bool) else default


def _coerce_favorites(value: object, default: tuple[Path, ...]) -> tuple[Path, ...]:
    if not isinstance(value, list):
        return default
    return tuple(Path(item) for item in value if isinstance(item, str) and item)


def load_settings(path: Path | None = None) -> ExplorerSettings:
    """Load settings, substituting defaults for missing or invalid fields.

    A stored ``last_path`` that is no longer a directory falls back to the
    current working directory.
    """
    data = load_config(path)
    defaults = default_settings()

    last_path = defaults.last_path
    raw_last_path = data.get("last_path")
    if isinstance(raw_last_path, str) and raw_last_path and os.path.isdir(raw_last_path):
        last_path = Path(raw_last_path)

    return ExplorerSettings(
        theme=_coerce_str(data.get("theme"), None, defaults.theme),
        favorites=_coerce_favorites(data.get("favorites"), defaults.favorites),
        show_hidden=_coerce_bool(data.get("show_hidden"), defaults.show_hidden),
        sort_column=_coerce_str(data.get("sort_column"), SORT_COLUMNS, defaults.sort_column),
        sort_descending=_coerce_bool(data.get("sort_descending"), defaults.sort_descending),
        last_path=last_path,
        view_mode=_coerce_str(data.get("view_mode"), VIEW_MODES, defaults.view_mode),
    )


def save_settings(settings: ExplorerSettings, path: Path | None = None) -> None:
    """Persist ``settings``; write failures are ignored."""
    save_config(settings.to_dict(), path)


def toggle_favorite(settings: ExplorerSettings, favorite: Path) -> ExplorerSettings:
    """Return new settings with ``favorite`` added, or removed when already present."""
    if favorite in settings.favorites:
        favorites = tuple(path for path in settings.favorites if path != favorite)
    else:
        favorites = settings.favorites + (favorite,)
    return replace(settings, favorites=favorites)


__all__ = [
    "APP_NAME",
    "CONFIG_PATH",
    "ExplorerSettings",
    "default_settings",
    "load_config",
    "save_config",
    "load_settings",
    "save_settings",
    "toggle_favorite",
]

"""Settings dataclass and persistence helpers for the markedtext CLI."""

from __future__ import annotations

import json
import logging
import os
from dataclasses import asdict, dataclass, fields, replace
from pathlib import Path
from typing import Any, Dict, Mapping

from ..codec.grammar import POINT, RANGE_CLOSE, RANGE_OPEN, MarkedTextGrammar
from ..utils.offsets import normalize_encoding

__all__ = ["Settings", "SettingsStore"]

LOGGER = logging.getLogger(__name__)
_SETTINGS_DIR = Path.home() / ".markedtext"
_DEFAULT_SETTINGS_PATH = _SETTINGS_DIR / "settings.json"
_SETTINGS_VERSION = 1
_ENV_OVERRIDES: Mapping[str, str] = {
    "MARKEDTEXT_OPEN_MARKER": "open_marker",
    "MARKEDTEXT_CLOSE_MARKER": "close_marker",
    "MARKEDTEXT_POINT_MARKER": "point_marker",
    "MARKEDTEXT_OFFSET_ENCODING": "offset_encoding",
}
_BOOL_ENV_OVERRIDES: Mapping[str, str] = {
    "MARKEDTEXT_INDICATE_CURSORS": "indicate_cursors",
    "MARKEDTEXT_DEBUG_LOGGING": "debug_logging",
}
_TRUE_VALUES = {"1", "true", "yes", "on", "debug"}
_BOOL_FIELDS: tuple[str, ...] = ("indicate_cursors", "debug_logging")


@dataclass(slots=True)
class Settings:
    """User-configurable defaults for parsing and rendering marked text."""

    open_marker: str = RANGE_OPEN
    close_marker: str = RANGE_CLOSE
    point_marker: str = POINT
    indicate_cursors: bool = False
    offset_encoding: str = "utf-32"
    debug_logging: bool = False

    def grammar(self) -> MarkedTextGrammar:
        """Return the grammar described by the configured markers."""

        return MarkedTextGrammar(
            open=self.open_marker,
            close=self.close_marker,
            point=self.point_marker,
        )


class SettingsStore:
    """Persistence adapter for :class:`Settings`."""

    def __init__(self, path: Path | None = None) -> None:
        self._path = path or _DEFAULT_SETTINGS_PATH

    @property
    def path(self) -> Path:
        return self._path

    def load(self, *, overrides: Mapping[str, Any] | None = None) -> Settings:
        """Load settings from disk, then apply CLI and environment overrides."""

        payload = self._read_payload()
        settings = Settings()
        if payload:
            data = _filter_fields(payload)
            try:
                settings = Settings(**data)
            except TypeError as exc:
                LOGGER.warning("Settings payload contained unexpected data: %s", exc)
                settings = Settings()
        LOGGER.debug("Settings loaded from %s: %s", self._path, sorted(payload))

        if overrides:
            settings = self._apply_overrides(settings, overrides, source="CLI")

        settings = self._apply_env_overrides(settings)
        return _validated(settings)

    def save(self, settings: Settings) -> Path:
        """Persist settings to disk with atomic file writes."""

        payload = asdict(settings)
        payload["version"] = _SETTINGS_VERSION
        body = json.dumps(payload, indent=2, sort_keys=True, ensure_ascii=False)
        self._path.parent.mkdir(parents=True, exist_ok=True)
        tmp_path = self._path.with_suffix(".tmp")
        tmp_path.write_text(body, encoding="utf-8")
        tmp_path.replace(self._path)
        LOGGER.debug("Settings saved to %s", self._path)
        return self._path

    def _read_payload(self) -> Dict[str, Any]:
        if not self._path.exists():
            return {}
        try:
            payload = json.loads(self._path.read_text(encoding="utf-8"))
        except FileNotFoundError:
            return {}
        except json.JSONDecodeError as exc:
            LOGGER.warning("Settings file %s is not valid JSON: %s", self._path, exc)
            return {}
        if not isinstance(payload, dict):
            LOGGER.warning("Settings file %s does not contain an object", self._path)
            return {}
        return payload

    def _apply_overrides(
        self,
        settings: Settings,
        overrides: Mapping[str, Any],
        *,
        source: str = "runtime",
    ) -> Settings:
        allowed = {field.name for field in fields(Settings)}
        filtered = {key: value for key, value in overrides.items() if key in allowed and value is not None}
        if filtered:
            LOGGER.debug("Applying %s settings overrides: %s", source, sorted(filtered))
            settings = replace(settings, **filtered)
        return settings

    def _apply_env_overrides(self, settings: Settings) -> Settings:
        overrides: Dict[str, Any] = {}
        for env_name, field_name in _ENV_OVERRIDES.items():
            value = os.environ.get(env_name)
            if value is not None:
                overrides[field_name] = value
        for env_name, field_name in _BOOL_ENV_OVERRIDES.items():
            value = os.environ.get(env_name)
            if value is not None:
                overrides[field_name] = value.strip().lower() in _TRUE_VALUES
        if overrides:
            settings = self._apply_overrides(settings, overrides, source="environment")
        return settings


def _filter_fields(payload: Mapping[str, Any]) -> Dict[str, Any]:
    allowed = {field.name for field in fields(Settings)}
    return {key: value for key, value in payload.items() if key in allowed}


def _validated(settings: Settings) -> Settings:
    # grammar() raises ValueError on bad markers
    settings.grammar()
    flags = {name: _coerce_bool(name, getattr(settings, name)) for name in _BOOL_FIELDS}
    return replace(settings, offset_encoding=normalize_encoding(settings.offset_encoding), **flags)


def _coerce_bool(name: str, value: Any) -> bool:
    if isinstance(value, bool):
        return value
    if isinstance(value, str):
        return value.strip().lower() in _TRUE_VALUES
    raise ValueError(f"Setting {name} must be a boolean, got {value!r}")

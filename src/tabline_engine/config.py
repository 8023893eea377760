"""Typed tabline configuration, defaults and validation."""

from __future__ import annotations

import re
from dataclasses import dataclass, field, fields, replace
from typing import Any, Dict, Iterable, Mapping, Optional, Tuple

from tabline_engine.errors import InvalidConfig


@dataclass(frozen=True, slots=True)
class StyleConfig:
    active_bg_blend: float = 0.12
    inactive_fg_blend: float = 0.5
    separator_opacity: float = 0.3
    padding: str = "  "
    corner_radius: bool = True


@dataclass(frozen=True, slots=True)
class TablineConfig:
    """Immutable configuration; replaced wholesale by each ``setup`` call."""

    enabled: bool = True
    separator: str = "│"
    close: str = "×"
    modified: str = "●"
    hide_misc: bool = True
    min_visible: int = 3
    max_visible: int = 10
    style: StyleConfig = field(default_factory=StyleConfig)


DEFAULT_CONFIG = TablineConfig()


@dataclass(frozen=True, slots=True)
class ConfigCorrection:
    """One rejected field and the value used in its place."""

    key: str
    value: Any
    fallback: Any
    reason: str

    def as_error(self) -> InvalidConfig:
        return InvalidConfig(self.key, self.value, self.reason)

    @property
    def message(self) -> str:
        if self.fallback is None:
            return f"{self.key}: {self.reason}, ignoring"
        return f"{self.key} {self.reason}, using {self.fallback!r}"


@dataclass(frozen=True, slots=True)
class ConfigResult:
    config: TablineConfig
    corrections: Tuple[ConfigCorrection, ...] = ()

    @property
    def ok(self) -> bool:
        return not self.corrections


_CAMEL_RE = re.compile(r"(?<!^)(?=[A-Z])")

_TOP_LEVEL_TYPES: Dict[str, type] = {
    "enabled": bool,
    "separator": str,
    "close": str,
    "modified": str,
    "hide_misc": bool,
    "min_visible": int,
    "max_visible": int,
}

_STYLE_TYPES: Dict[str, type] = {
    "active_bg_blend": float,
    "inactive_fg_blend": float,
    "separator_opacity": float,
    "padding": str,
    "corner_radius": bool,
}


def normalize_key(key: str) -> str:
    """``minVisible`` -> ``min_visible``; snake_case passes through."""

    return _CAMEL_RE.sub("_", key).lower()


def _coerce(expected: type, value: Any) -> Tuple[bool, Any]:
    if expected is bool:
        return isinstance(value, bool), value
    if isinstance(value, bool):
        return False, value
    if expected is int:
        if isinstance(value, int):
            return True, value
        if isinstance(value, float) and value.is_integer():
            return True, int(value)
        return False, value
    if expected is float:
        if isinstance(value, (int, float)):
            return True, float(value)
        return False, value
    return isinstance(value, expected), value


def _type_name(expected: type) -> str:
    return "number" if expected in (int, float) else expected.__name__


def validate_config(
    options: Optional[Mapping[str, Any]] = None,
    *,
    base: TablineConfig = DEFAULT_CONFIG,
) -> ConfigResult:
    """Merge ``options`` over ``base`` and report every field that was rejected.

    Wrong-typed fields keep the ``base`` value. ``min_visible`` below 1 and
    negative ``max_visible`` fall back to the defaults. Blend factors outside
    ``[0, 1]`` keep the ``base`` value. Nothing here mutates engine state.
    """

    corrections: list[ConfigCorrection] = []
    top: Dict[str, Any] = {}
    style_changes: Dict[str, Any] = {}

    for raw_key, value in (options or {}).items():
        key = normalize_key(str(raw_key))
        if key == "style":
            if not isinstance(value, Mapping):
                corrections.append(
                    ConfigCorrection("style", value, None, "must be a table")
                )
                continue
            style_changes.update(
                _validate_style(value, base.style, corrections)
            )
            continue

        expected = _TOP_LEVEL_TYPES.get(key)
        if expected is None:
            corrections.append(ConfigCorrection(key, value, None, "unknown option"))
            continue

        fallback = getattr(base, key)
        ok, coerced = _coerce(expected, value)
        if not ok:
            corrections.append(
                ConfigCorrection(
                    key, value, fallback, f"must be a {_type_name(expected)}"
                )
            )
            continue
        if key == "min_visible" and coerced < 1:
            corrections.append(
                ConfigCorrection(
                    key, value, DEFAULT_CONFIG.min_visible, "must be >= 1"
                )
            )
            coerced = DEFAULT_CONFIG.min_visible
        elif key == "max_visible" and coerced < 0:
            corrections.append(
                ConfigCorrection(
                    key, value, DEFAULT_CONFIG.max_visible, "must be >= 0"
                )
            )
            coerced = DEFAULT_CONFIG.max_visible
        top[key] = coerced

    style = replace(base.style, **style_changes) if style_changes else base.style
    config = replace(base, style=style, **top)
    if 0 < config.max_visible < config.min_visible:
        corrections.append(
            ConfigCorrection(
                "max_visible",
                config.max_visible,
                config.min_visible,
                "must be 0 or >= min_visible",
            )
        )
        config = replace(config, max_visible=config.min_visible)
    return ConfigResult(config=config, corrections=tuple(corrections))


def _validate_style(
    options: Mapping[str, Any],
    base: StyleConfig,
    corrections: list[ConfigCorrection],
) -> Dict[str, Any]:
    changes: Dict[str, Any] = {}
    for raw_key, value in options.items():
        key = normalize_key(str(raw_key))
        label = f"style.{key}"
        expected = _STYLE_TYPES.get(key)
        if expected is None:
            corrections.append(ConfigCorrection(label, value, None, "unknown option"))
            continue
        fallback = getattr(base, key)
        ok, coerced = _coerce(expected, value)
        if not ok:
            corrections.append(
                ConfigCorrection(
                    label, value, fallback, f"must be a {_type_name(expected)}"
                )
            )
            continue
        if expected is float and not 0.0 <= coerced <= 1.0:
            corrections.append(
                ConfigCorrection(label, value, fallback, "must be within [0, 1]")
            )
            continue
        changes[key] = coerced
    return changes


def config_to_dict(config: TablineConfig) -> Dict[str, Any]:
    data = {f.name: getattr(config, f.name) for f in fields(config)}
    data["style"] = {f.name: getattr(config.style, f.name) for f in fields(config.style)}
    return data


def _parse_scalar(raw: str) -> Any:
    if raw == "true":
        return True
    if raw == "false":
        return False
    try:
        return int(raw)
    except ValueError:
        pass
    try:
        return float(raw)
    except ValueError:
        return raw


def parse_command_args(args: Iterable[str]) -> Dict[str, Any]:
    """Turn ``key=value`` command arguments into setup options.

    ``true``/``false`` become bools, numeric strings become numbers and a
    dotted key such as ``style.padding`` lands in the nested table. Tokens
    that are not a single ``key=value`` pair are skipped.
    """

    options: Dict[str, Any] = {}
    for arg in args:
        key, sep, raw = arg.partition("=")
        if not sep or not key or not raw or "=" in raw:
            continue
        value = _parse_scalar(raw)
        head, dot, tail = key.partition(".")
        if dot:
            nested = options.setdefault(head, {})
            if isinstance(nested, dict):
                nested[tail] = value
        else:
            options[key] = value
    return options


__all__ = [
    "StyleConfig",
    "TablineConfig",
    "DEFAULT_CONFIG",
    "ConfigCorrection",
    "ConfigResult",
    "normalize_key",
    "validate_config",
    "config_to_dict",
    "parse_command_args",
]

from __future__ import annotations

import re
from dataclasses import dataclass, fields, replace
from pathlib import Path

from forest.constants import Vec2


class ConfigError(ValueError):
    pass


@dataclass(frozen=True)
class GameConfig:
    """Session configuration. Immutable once the session starts."""

    viewport_width: float = 1024
    viewport_height: float = 768
    character_size: float = 64
    # World units per tick at the 60 Hz reference rate.
    movement_speed: float = 2.5
    world_width: float = 5000
    world_height: float = 5000
    chunk_size: int = 500
    render_distance: int = 2
    # In-game hours added per real second.
    time_scale: float = 0.1
    solid_trees: bool = True

    def __post_init__(self) -> None:
        for name in ("viewport_width", "viewport_height", "character_size", "world_width", "world_height"):
            if getattr(self, name) <= 0:
                raise ConfigError(f"{name} must be positive")
        if self.chunk_size <= 0:
            raise ConfigError("chunk_size must be positive")
        if self.render_distance < 0:
            raise ConfigError("render_distance must not be negative")
        if self.movement_speed < 0:
            raise ConfigError("movement_speed must not be negative")
        if self.character_size > min(self.world_width, self.world_height):
            raise ConfigError("character_size does not fit inside the world")

    @property
    def world_center(self) -> Vec2:
        return self.world_width / 2, self.world_height / 2

    def with_overrides(self, **overrides) -> GameConfig:
        return replace(self, **overrides)


_CAMEL_BOUNDARY = re.compile(r"(?<!^)(?=[A-Z])")
_FIELD_TYPES = {f.name: f.type for f in fields(GameConfig)}


def _normalize_key(key: str) -> str:
    return _CAMEL_BOUNDARY.sub("_", key.strip()).lower()


def _parse_bool(value: str) -> bool:
    lowered = value.strip().lower()
    if lowered in {"1", "true", "yes", "on"}:
        return True
    if lowered in {"0", "false", "no", "off"}:
        return False
    raise ConfigError(f"expected a boolean, got {value!r}")


def _parse_value(name: str, value: str) -> float | int | bool:
    kind = _FIELD_TYPES[name]
    try:
        if kind == "bool":
            return _parse_bool(value)
        if kind == "int":
            return int(value)
        return float(value)
    except ValueError as exc:
        if isinstance(exc, ConfigError):
            raise
        raise ConfigError(f"{name}: cannot parse {value!r} as {kind}") from exc


def parse_game_config(text: str, base: GameConfig | None = None) -> GameConfig:
    """Build a config from ``key = value`` lines.

    Keys may be snake_case (``chunk_size``) or camelCase (``chunkSize``).
    Blank lines and ``#`` comments are ignored. Keys not present keep the
    value from ``base`` (or the defaults).
    """
    overrides: dict[str, float | int | bool] = {}
    for lineno, line in enumerate(text.splitlines(), start=1):
        line = line.strip()
        if not line or line.startswith("#"):
            continue
        if "=" not in line:
            raise ConfigError(f"line {lineno}: expected 'key = value'")
        key, value = line.split("=", 1)
        name = _normalize_key(key)
        if name not in _FIELD_TYPES:
            raise ConfigError(f"line {lineno}: unknown setting {key.strip()!r}")
        overrides[name] = _parse_value(name, value.strip())
    return replace(base or GameConfig(), **overrides)


def load_game_config(path: str | Path, base: GameConfig | None = None) -> GameConfig:
    path = Path(path)
    try:
        text = path.read_text(encoding="utf-8")
    except OSError as exc:
        raise ConfigError(f"cannot read config file {path}: {exc}") from exc
    return parse_game_config(text, base)

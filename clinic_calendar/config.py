"""Configuration management for the clinic calendar."""

from dataclasses import MISSING, Field, asdict, dataclass, field, fields
from pathlib import Path
from typing import Any, Optional

import tomlkit as toml

from .model import GridConfig, LayoutConfig


@dataclass
class StyleConfig:
    """Card colouring and SVG canvas settings."""
    unavailable_kind: str = "Unavailable"
    panchkarma_marker: str = "Panchkarma"
    cosmetology_markers: list[str] = field(default_factory=lambda: ["Cosmetology"])
    column_width_px: int = 160
    time_gutter_px: int = 64
    header_height_px: int = 48


@dataclass
class LoggingConfig:
    """Logging configuration."""
    level: str = "INFO"
    format: str = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"
    file: Optional[str] = None


@dataclass
class CalendarConfig:
    """Complete calendar configuration."""
    layout: LayoutConfig = field(default_factory=LayoutConfig)
    grid: GridConfig = field(default_factory=GridConfig)
    style: StyleConfig = field(default_factory=StyleConfig)
    logging: LoggingConfig = field(default_factory=LoggingConfig)

    @classmethod
    def from_file(cls, path: Path) -> "CalendarConfig":
        """Load configuration from a TOML file; a missing file gives the defaults."""
        if isinstance(path, str):
            path = Path(path)

        if not path.exists():
            return cls()

        with open(path, "r", encoding="utf-8") as f:
            data = toml.load(f).unwrap()

        unknown = set(data) - {f.name for f in fields(cls)}
        if unknown:
            raise ValueError(f"{path}: unknown section(s): {', '.join(sorted(unknown))}")

        return cls(
            layout=_section(path, "layout", LayoutConfig, data.get("layout", {})),
            grid=_section(path, "grid", GridConfig, data.get("grid", {})),
            style=_section(path, "style", StyleConfig, data.get("style", {})),
            logging=_section(path, "logging", LoggingConfig, data.get("logging", {})),
        )

    def to_file(self, path: Path) -> None:
        """Save configuration to a TOML file."""
        if isinstance(path, str):
            path = Path(path)

        path.parent.mkdir(parents=True, exist_ok=True)

        doc = toml.document()
        doc.add(toml.comment("Clinic calendar layout and rendering settings"))
        for name in ("layout", "grid", "style", "logging"):
            table = toml.table()
            for key, value in asdict(getattr(self, name)).items():
                # TOML has no null; unset optionals are simply left out.
                if value is not None:
                    table.add(key, value)
            doc.add(name, table)

        with open(path, "w", encoding="utf-8") as f:
            toml.dump(doc, f)


def _section(path: Path, name: str, klass: type, raw: Any) -> Any:
    if not isinstance(raw, dict):
        raise ValueError(f"{path}: [{name}] must be a table")
    defaults = {f.name: _field_default(f) for f in fields(klass)}
    unknown = set(raw) - set(defaults)
    if unknown:
        raise ValueError(f"{path}: [{name}] has unknown key(s): {', '.join(sorted(unknown))}")
    for key, value in raw.items():
        expected = _expected_type(defaults[key])
        if not _matches(value, expected):
            raise ValueError(f"{path}: [{name}].{key} must be {expected}, got {value!r}")
    return klass(**raw)


def _field_default(f: Field) -> Any:
    if f.default_factory is not MISSING:
        return f.default_factory()
    return None if f.default is MISSING else f.default


def _expected_type(default: Any) -> str:
    # Optional fields default to None and take a string when set.
    if default is None or isinstance(default, str):
        return "a string"
    if isinstance(default, bool):
        return "a boolean"
    if isinstance(default, int):
        return "an integer"
    if isinstance(default, float):
        return "a number"
    return "a list of strings"


def _matches(value: Any, expected: str) -> bool:
    if expected == "a string":
        return isinstance(value, str)
    if expected == "a boolean":
        return isinstance(value, bool)
    if isinstance(value, bool):
        return False
    if expected == "an integer":
        return isinstance(value, int)
    if expected == "a number":
        return isinstance(value, (int, float))
    return isinstance(value, list) and all(isinstance(item, str) for item in value)

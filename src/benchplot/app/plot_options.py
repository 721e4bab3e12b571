"""Plot options: the user-facing configuration of one benchplot run.

PlotOptions mirrors the command-line flags and is what gets persisted by
OptionsConfig. It holds plain strings, lists and dicts only; build_plot turns
it into a PlotConfig and Plot.
"""

from __future__ import annotations

from dataclasses import dataclass, field, fields
from typing import Any, Optional

from benchplot.errors import ConfigError
from benchplot.plot.aes import Aes
from benchplot.plot.stats import Assumption
from benchplot.plot.transform import get_transform
from benchplot.plot.units import UnitClass, UnitMetadata
from benchplot.utils.logging import get_logger

logger = get_logger(__name__)

TERMS = ("", "png")
DEFAULT_LOG_BASE = 10


@dataclass
class PlotOptions:
    """Configuration for building and rendering one plot.

    Projection strings are field lists such as "goos,goarch" or one of the
    special names .unit, .value and .residue.
    """
    x: str = "name"
    y: str = ".value"
    color: str = ".residue"
    row: str = ".unit"
    col: str = ""
    ignore: str = ""                   # fields excluded from .residue
    filter: dict[str, str] = field(default_factory=dict)  # field -> required value
    units: list[str] = field(default_factory=list)        # empty: keep every unit
    log_scale: dict[str, int] = field(default_factory=dict)  # aes name -> base
    transforms: list[str] = field(default_factory=list)
    confidence: float = 0.95
    unit_metadata: dict[str, dict[str, str]] = field(default_factory=dict)
    term: str = ""                     # gnuplot terminal: "" for code, "png"

    def projection(self, aes: Aes) -> str:
        """Projection string bound to aes."""
        return getattr(self, aes.short_name)

    def validate(self) -> None:
        """Check option values that can be checked without data.

        Raises:
            ConfigError: On a bad log-scale entry, transform name, confidence,
                terminal or unit metadata.
        """
        for name, base in self.log_scale.items():
            if Aes.from_name(name) is None:
                raise ConfigError(f"unknown aesthetic {name!r} in log_scale")
            if base < 0 or base == 1:
                raise ConfigError(f"bad log-scale base {base} for {name}")
        for name in self.transforms:
            get_transform(name)
        if not 0 < self.confidence < 1:
            raise ConfigError(f"confidence must be in (0, 1), got {self.confidence}")
        if self.term not in TERMS:
            raise ConfigError(f"unknown output type {self.term!r}")
        self.unit_metadata_map()

    def unit_metadata_map(self) -> dict[str, UnitMetadata]:
        """unit_metadata as UnitMetadata objects.

        Raises:
            ConfigError: On an unknown assumption or unit class.
        """
        out: dict[str, UnitMetadata] = {}
        for unit, meta in self.unit_metadata.items():
            try:
                assumption = Assumption(meta.get("assumption", Assumption.NOTHING.value))
                cls_name = meta.get("unit_class")
                unit_class = UnitClass(cls_name) if cls_name else None
            except ValueError as e:
                raise ConfigError(f"bad metadata for unit {unit!r}: {e}") from e
            out[unit] = UnitMetadata(unit=unit, assumption=assumption, unit_class=unit_class)
        return out

    def to_dict(self) -> dict[str, Any]:
        """Serialize PlotOptions to a JSON-friendly dictionary."""
        return {
            "x": self.x,
            "y": self.y,
            "color": self.color,
            "row": self.row,
            "col": self.col,
            "ignore": self.ignore,
            "filter": dict(self.filter),
            "units": list(self.units),
            "log_scale": dict(self.log_scale),
            "transforms": list(self.transforms),
            "confidence": self.confidence,
            "unit_metadata": {u: dict(m) for u, m in self.unit_metadata.items()},
            "term": self.term,
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "PlotOptions":
        """Deserialize PlotOptions from a dictionary.

        Missing keys take their defaults; unknown keys are ignored with a warning.
        """
        known = {f.name for f in fields(cls)}
        for key in data:
            if key not in known:
                logger.warning(f"Unknown key '{key}' in plot options, ignoring")

        d = cls()
        filter_raw = data.get("filter")
        log_scale_raw = data.get("log_scale")
        meta_raw = data.get("unit_metadata")
        return cls(
            x=str(data.get("x", d.x)),
            y=str(data.get("y", d.y)),
            color=str(data.get("color", d.color)),
            row=str(data.get("row", d.row)),
            col=str(data.get("col", d.col)),
            ignore=str(data.get("ignore", d.ignore)),
            filter={str(k): str(v) for k, v in filter_raw.items()} if isinstance(filter_raw, dict) else {},
            units=[str(u) for u in data.get("units") or []],
            log_scale={str(k): int(v) for k, v in log_scale_raw.items()} if isinstance(log_scale_raw, dict) else {},
            transforms=[str(t) for t in data.get("transforms") or []],
            confidence=float(data.get("confidence", d.confidence)),
            unit_metadata={str(u): dict(m) for u, m in meta_raw.items()} if isinstance(meta_raw, dict) else {},
            term=str(data.get("term", d.term)),
        )


def split_list(s: Optional[str]) -> list[str]:
    """Split a comma-separated list, dropping empty items."""
    if not s:
        return []
    return [p.strip() for p in s.split(",") if p.strip()]


def parse_log_scale(s: str) -> dict[str, int]:
    """Parse "x,y:2" into {"x": 10, "y": 2}.

    Raises:
        ConfigError: On an unknown aesthetic or a non-integer base.
    """
    out: dict[str, int] = {}
    for opt in split_list(s):
        name, sep, base_str = opt.partition(":")
        if Aes.from_name(name) is None:
            raise ConfigError(f"unknown option {name} in log-scale={s}")
        base = DEFAULT_LOG_BASE
        if sep:
            try:
                base = int(base_str)
            except ValueError:
                raise ConfigError(f"bad base {base_str} in log-scale={s}") from None
        out[name] = base
    return out


def parse_filter(s: str) -> dict[str, str]:
    """Parse "goos=linux,n=8" into {"goos": "linux", "n": "8"}.

    Raises:
        ConfigError: If an item has no '='.
    """
    out: dict[str, str] = {}
    for item in split_list(s):
        name, sep, value = item.partition("=")
        if not sep or not name.strip():
            raise ConfigError(f"bad filter {item!r}, want field=value")
        out[name.strip()] = value.strip()
    return out

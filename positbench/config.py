import dataclasses
from dataclasses import dataclass, field, fields as dataclass_fields
from pathlib import Path
from typing import Any, Dict, List, Optional, Tuple

import yaml

from tools.helpers import _coerce_value

from .formats import available_formats


def _read_yaml(path: str) -> dict:
    try:
        with open(path, "r", encoding="utf-8") as f:
            return yaml.safe_load(f) or {}
    except FileNotFoundError as e:
        raise FileNotFoundError(f"Config file not found: {path}") from e


@dataclass(frozen=True)
class Regime:
    a: float
    b: float
    label: str

    @staticmethod
    def parse(item: Any, index: int) -> "Regime":
        # accepts {a, b, label} mappings or [a, b, label] sequences
        if isinstance(item, Regime):
            return item
        if isinstance(item, dict):
            unknown = set(item) - {"a", "b", "label"}
            if unknown:
                raise ValueError(f"regimes[{index}] has unknown key(s): {sorted(unknown)}")
            try:
                a, b = item["a"], item["b"]
            except KeyError as e:
                raise ValueError(f"regimes[{index}] is missing {e}") from None
            label = item.get("label") or f"regime{index}"
        elif isinstance(item, (list, tuple)) and len(item) in (2, 3):
            a, b = item[0], item[1]
            label = item[2] if len(item) == 3 else f"regime{index}"
        else:
            raise ValueError(f"regimes[{index}] must be a mapping with keys a, b, label or a [a, b, label] list")
        try:
            return Regime(a=float(a), b=float(b), label=str(label))
        except (TypeError, ValueError):
            raise ValueError(f"regimes[{index}] fill values must be numbers, got a={a!r} b={b!r}") from None


def _parse_size(item: Any, index: int) -> Tuple[int, int]:
    # an int n means an n x n matrix
    if isinstance(item, int) and not isinstance(item, bool):
        rows = cols = item
    elif isinstance(item, (list, tuple)) and len(item) == 2:
        rows, cols = item
    else:
        raise ValueError(f"sizes[{index}] must be an int or a [rows, cols] pair, got {item!r}")
    if not isinstance(rows, int) or not isinstance(cols, int) or rows <= 0 or cols <= 0:
        raise ValueError(f"sizes[{index}] must be positive integers, got {item!r}")
    if rows != cols:
        raise ValueError(f"sizes[{index}] must be square for the matrix product, got {rows}x{cols}")
    return rows, cols


DEFAULT_SIZES: List[Tuple[int, int]] = [(n, n) for n in range(10, 51, 10)]
DEFAULT_REGIMES: List[Regime] = [
    Regime(1.0, 2.0, "baseline"),
    Regime(1.00001, 0.99999, "small differences"),
    Regime(1e-5, 2e-5, "underflow"),
    Regime(1e4, 1e4, "overflow"),
]


@dataclass
class OutputsCfg:
    root: Optional[str] = None  # directory for results.jsonl / results.csv / env.json; None disables files
    summary_table: bool = True


@dataclass
class SweepConfig:
    sizes: List[Tuple[int, int]] = field(default_factory=lambda: list(DEFAULT_SIZES))
    repetitions: int = 5
    regimes: List[Regime] = field(default_factory=lambda: list(DEFAULT_REGIMES))
    narrow: str = "posit32"
    native: str = "float32"
    reference: str = "float64"
    outputs: OutputsCfg = field(default_factory=OutputsCfg)

    def __post_init__(self):
        self.sizes = [_parse_size(s, i) for i, s in enumerate(self.sizes or [])]
        self.regimes = [Regime.parse(r, i) for i, r in enumerate(self.regimes or [])]
        if isinstance(self.outputs, dict):
            unknown = set(self.outputs) - {f.name for f in dataclass_fields(OutputsCfg)}
            if unknown:
                raise ValueError(f"Unknown outputs key(s): {sorted(unknown)}")
            self.outputs = OutputsCfg(**self.outputs)
        self.validate()

    def validate(self) -> None:
        if isinstance(self.repetitions, bool) or not isinstance(self.repetitions, int) or self.repetitions <= 0:
            raise ValueError(f"repetitions must be a positive integer, got {self.repetitions!r}")
        if not self.sizes:
            raise ValueError("sizes must be a non-empty list")
        if not self.regimes:
            raise ValueError("regimes must be a non-empty list")
        known = available_formats()
        for key in ("narrow", "native", "reference"):
            name = getattr(self, key)
            if not isinstance(name, str) or name.lower() not in known:
                raise ValueError(f"{key} must be one of {known}, got {name!r}")

    @staticmethod
    def from_yaml(path: str) -> "SweepConfig":
        d = _read_yaml(path)
        valid_names = {f.name for f in dataclass_fields(SweepConfig)}
        unknown = set(d) - valid_names
        if unknown:
            raise ValueError(f"Unknown config key(s) in {Path(path)}: {sorted(unknown)}")
        return SweepConfig(**d)

    def to_dict(self) -> dict:
        d = dataclasses.asdict(self)
        d["sizes"] = [list(s) for s in self.sizes]
        return d


def apply_cli_overrides(cfg: SweepConfig, override_args: List[str]) -> SweepConfig:
    """
    Apply CLI overrides of the form --key=value or key=value, e.g.
    repetitions=2, narrow=posit16, sizes=[8,16], outputs.root=out.
    Values are coerced to the field type with tools.helpers._coerce_value and
    the result is re-validated.
    """
    field_map = {f.name: f for f in dataclass_fields(SweepConfig)}
    outputs_map = {f.name: f for f in dataclass_fields(OutputsCfg)}
    values: Dict[str, Any] = {f.name: getattr(cfg, f.name) for f in dataclass_fields(SweepConfig)}
    outputs = dataclasses.replace(cfg.outputs)
    for s in override_args:
        if s.startswith("--"):
            s = s[2:]
        if "=" not in s:
            raise ValueError(f"Override must look like key=value, got '{s}'")
        k, v = s.split("=", 1)
        k = k.strip().replace("-", "_")
        if k.startswith("outputs."):
            sub = k.split(".", 1)[1]
            if sub not in outputs_map:
                raise ValueError(f"Unknown override key: {k}")
            setattr(outputs, sub, _coerce_value(v.strip(), outputs_map[sub].type))
            continue
        if k not in field_map or k == "outputs":
            raise ValueError(f"Unknown override key: {k}")
        values[k] = _coerce_value(v.strip(), field_map[k].type)
    values["outputs"] = outputs
    return SweepConfig(**values)


__all__ = [
    "DEFAULT_REGIMES",
    "DEFAULT_SIZES",
    "OutputsCfg",
    "Regime",
    "SweepConfig",
    "apply_cli_overrides",
]

"""Declarative parameter schema.

An effect's parameter contract is a list of ParamDef objects. ParamSchema
wraps the list and derives defaults, bypass values, ranges and the
validate/clamp step applied to presets and CLI overrides.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Any


class ParamType(Enum):
    FLOAT = "float"
    CHOICE = "choice"


@dataclass
class ParamDef:
    key: str
    type: ParamType
    default: Any
    section: str
    label: str = ""
    unit: str = ""
    bypass: Any = None          # if None, uses default
    range: tuple | None = None  # (min, max) for continuous params
    choices: list[str] | None = None  # allowed values for CHOICE type


class ParamSchema:
    """Derives param dicts and validation from a declarative param list."""

    def __init__(self, params: list[ParamDef]):
        self._params = params
        self._by_key: dict[str, ParamDef] = {p.key: p for p in params}

    def default_params(self) -> dict:
        return {p.key: p.default for p in self._params}

    def bypass_params(self) -> dict:
        result = {}
        for p in self._params:
            result[p.key] = p.bypass if p.bypass is not None else p.default
        return result

    def param_ranges(self) -> dict[str, tuple]:
        """Continuous params only (floats with a range)."""
        return {p.key: p.range for p in self._params
                if p.range is not None and p.type != ParamType.CHOICE}

    def validate_and_clamp(self, raw: dict) -> dict:
        """Validate and clamp a raw params dict (e.g. from a preset file).

        Unknown keys are dropped. Values are type-cast and clamped to range;
        values that cannot be cast, and unknown choices, are dropped too.
        """
        result = {}
        for key, value in raw.items():
            p = self._by_key.get(key)
            if p is None:
                continue

            if p.type == ParamType.CHOICE:
                value = str(value)
                if p.choices and value not in p.choices:
                    continue
                result[key] = value
                continue

            try:
                v = float(value)
            except (TypeError, ValueError):
                continue
            if p.range:
                lo, hi = p.range
                v = max(lo, min(hi, v))
            result[key] = v

        return result

    def get(self, key: str) -> ParamDef | None:
        return self._by_key.get(key)

    def __iter__(self):
        return iter(self._params)

    def __len__(self):
        return len(self._params)

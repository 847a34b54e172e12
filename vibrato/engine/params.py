"""Parameter schema for the vibrato.

This is the shared contract between presets, the CLI renderer and manual
scripting. All parameter sources produce a dict in this format. Times are
in seconds and scaled to samples by the engine.
"""

import math

from shared.params import ParamType as T, ParamDef, ParamSchema

SR = 44100


class ConfigError(ValueError):
    """Raised when a vibrato is constructed with impossible settings."""


# ── Schema ────────────────────────────────────────────────────────────

_PARAMS = [
    ParamDef("mod_freq", T.FLOAT, section="lfo", label="Rate", unit="Hz",
             default=5.0, range=(0.0, 20.0)),

    ParamDef("mod_depth", T.FLOAT, section="lfo", label="Depth", unit="s",
             default=0.002, bypass=0.0, range=(0.0, 0.05)),

    ParamDef("waveform", T.CHOICE, section="lfo", label="Shape",
             default="sine", choices=["sine", "triangle"]),

    ParamDef("delay_time", T.FLOAT, section="delay", label="Delay", unit="s",
             default=0.005, bypass=0.0, range=(0.0, 0.5)),
]

SCHEMA = ParamSchema(_PARAMS)
PARAM_RANGES = SCHEMA.param_ranges()


def default_params() -> dict:
    """Gentle 5 Hz vocal-style vibrato."""
    return SCHEMA.default_params()


def bypass_params() -> dict:
    """Zero depth and zero delay: output equals input."""
    return SCHEMA.bypass_params()


def validate_params(raw: dict) -> dict:
    """Merge a raw dict over the defaults after type-casting and clamping."""
    raw = {k: v for k, v in raw.items() if k != "_meta"}
    params = default_params()
    params.update(SCHEMA.validate_and_clamp(raw))
    return params


def check_config(sample_rate, mod_freq, mod_depth, delay_time):
    """Fail fast on settings that would make the engine produce nonsense."""
    for name, value in (("sample_rate", sample_rate), ("mod_freq", mod_freq),
                        ("mod_depth", mod_depth), ("delay_time", delay_time)):
        if not math.isfinite(value):
            raise ConfigError(f"{name} must be finite, got {value}")
    if sample_rate <= 0:
        raise ConfigError(f"sample_rate must be positive, got {sample_rate}")
    if mod_depth < 0:
        raise ConfigError(f"mod_depth must be >= 0, got {mod_depth}")
    if delay_time < 0:
        raise ConfigError(f"delay_time must be >= 0, got {delay_time}")

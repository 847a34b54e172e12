"""Low-frequency oscillator — a phase accumulator driving modulation.

Phase lives in the normalised domain [0, 1) and wraps every period, so it
never grows without bound over long runs.
"""

import math

from numba import njit

# Waveform codes shared with the compiled loops
SINE = 0
TRIANGLE = 1

WAVEFORMS = {"sine": SINE, "triangle": TRIANGLE}


@njit(cache=True)
def lfo_value(phase, waveform):
    """LFO value for a phase in [0, 1). Returns a value in [-1, +1]."""
    if waveform == 1:  # triangle
        if phase < 0.25:
            return phase * 4.0
        elif phase < 0.75:
            return 2.0 - phase * 4.0
        else:
            return phase * 4.0 - 4.0
    return math.sin(2.0 * math.pi * phase)


def waveform_code(name: str) -> int:
    try:
        return WAVEFORMS[name]
    except KeyError:
        raise ValueError(f"unknown waveform {name!r}, expected one of {sorted(WAVEFORMS)}") from None


def phase_increment(sample_rate: float, frequency: float) -> float:
    """Per-sample phase step. Zero or negative frequency holds the phase still."""
    if frequency <= 0.0:
        return 0.0
    return frequency / sample_rate


class Oscillator:
    """Periodic waveform generator, advanced one sample per next() call.

    osc = Oscillator(44100, 5.0)
    m = osc.next()   # sin(0) = 0.0, then phase moves on by 5/44100
    """

    def __init__(self, sample_rate: float, frequency: float, waveform: str = "sine"):
        if not sample_rate > 0:
            raise ValueError(f"sample_rate must be positive, got {sample_rate}")
        self.sample_rate = float(sample_rate)
        self.frequency = float(frequency)
        self.waveform = waveform
        self.waveform_code = waveform_code(waveform)
        self.phase_inc = phase_increment(self.sample_rate, self.frequency)
        self.phase = 0.0

    def next(self) -> float:
        value = lfo_value(self.phase, self.waveform_code)
        self.phase = (self.phase + self.phase_inc) % 1.0
        return value

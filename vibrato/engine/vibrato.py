"""Vibrato — pitch wobble from an LFO-modulated delay read.

Signal flow (per sample):
    1. Next LFO value m in [-1, 1]
    2. Modulated delay d = delay_samples + depth_samples * m, clamped
    3. Write input into the delay line
    4. Linear-interpolated read at d -> output

State (buffer, write cursor, LFO phase) persists between process() calls,
so chunking a stream differently never changes the output.

Until the delay line holds more than max_delay samples of history the
input passes through dry, instead of reading the zeroed buffer.
The switch to the delayed read then replays the first max_delay samples.
"""

import logging
import math
import time

import numpy as np

from primitives.delay_line import DelayLine
from primitives.oscillator import WAVEFORMS, Oscillator
from vibrato.engine.numba_vibrato import process_block
from vibrato.engine.params import SR, ConfigError, check_config

log = logging.getLogger(__name__)

INTERP_MARGIN = 2  # extra slots so the older interpolation neighbour exists


class Vibrato:
    """Stateful vibrato processor.

    vib = Vibrato(44100, mod_freq=5.0, mod_depth=0.002, delay_time=0.005)
    out = vib.process(block)   # same length as block, any length incl. 0
    """

    def __init__(self, sample_rate, mod_freq, mod_depth, delay_time, waveform="sine"):
        check_config(sample_rate, mod_freq, mod_depth, delay_time)
        if waveform not in WAVEFORMS:
            raise ConfigError(f"unknown waveform {waveform!r}, expected one of {sorted(WAVEFORMS)}")
        self.sample_rate = float(sample_rate)
        self.mod_freq = float(mod_freq)
        self.mod_depth = float(mod_depth)
        self.delay_time = float(delay_time)

        self.delay_samples = self.delay_time * self.sample_rate
        self.depth_samples = self.mod_depth * self.sample_rate
        # Zero depth is a plain static delay of a whole number of samples
        self.static_delay = int(round(self.delay_samples))
        if self.depth_samples == 0.0:
            self.max_delay = self.static_delay
        else:
            self.max_delay = math.ceil(self.delay_samples + self.depth_samples)

        self.delay_line = DelayLine(self.max_delay + INTERP_MARGIN)
        self.lfo = Oscillator(self.sample_rate, self.mod_freq, waveform)
        self.max_read = float(self.delay_line.length - 2)

        log.debug("vibrato: delay=%.2f depth=%.2f samples, buffer=%d, lfo %s %.3f Hz",
                  self.delay_samples, self.depth_samples, self.delay_line.length,
                  waveform, self.mod_freq)
        if self.depth_samples > self.delay_samples:
            log.warning("mod_depth (%.4fs) exceeds delay_time (%.4fs); "
                        "the modulated delay will be clamped at 0",
                        self.mod_depth, self.delay_time)

    @classmethod
    def from_params(cls, params: dict, sr=SR):
        return cls(sr, params["mod_freq"], params["mod_depth"], params["delay_time"],
                   params.get("waveform", "sine"))

    @property
    def waveform(self):
        return self.lfo.waveform

    @property
    def primed(self) -> bool:
        """True once the delay line holds enough history for the full delay."""
        return self.delay_line.filled > self.max_delay

    def tick(self, x: float) -> float:
        """Advance by one sample."""
        m = self.lfo.next()
        d = self.delay_samples + self.depth_samples * m
        d = max(0.0, min(self.max_read, d))

        self.delay_line.write(x)
        if not self.primed:
            return float(x)
        if self.depth_samples == 0.0:
            return self.delay_line.read(self.static_delay)
        return self.delay_line.read_linear(d)

    def process(self, block):
        """Process a block of samples.

        A numpy array in gives a float64 array out; any other sequence gives
        a list of floats. Output length always equals input length.
        """
        x = np.ascontiguousarray(block, dtype=np.float64)
        if x.ndim != 1:
            raise ValueError(f"expected a 1-D block of samples, got shape {x.shape}")
        out = np.empty(len(x))

        dl = self.delay_line
        state = np.array([dl.write_idx, dl.filled, self.lfo.phase], dtype=np.float64)
        process_block(x, out, dl.buffer, state,
                      self.delay_samples, self.depth_samples,
                      self.static_delay, self.max_delay,
                      self.lfo.phase_inc, self.lfo.waveform_code)
        dl.write_idx = int(state[0])
        dl.filled = int(state[1])
        self.lfo.phase = float(state[2])

        if isinstance(block, np.ndarray):
            return out
        return out.tolist()

    def __repr__(self):
        return (f"Vibrato(sample_rate={self.sample_rate:g}, mod_freq={self.mod_freq:g}, "
                f"mod_depth={self.mod_depth:g}, delay_time={self.delay_time:g}, "
                f"waveform={self.waveform!r})")


def render_vibrato(input_audio: np.ndarray, params: dict, sr=SR, chunk_size=None) -> np.ndarray:
    """Offline entry point: run a whole buffer through the vibrato.

    Args:
        input_audio: float64 array -- mono (samples,) or multi-channel (samples, channels)
        params: parameter dict (see engine/params.py)
        sr: sample rate of input_audio
        chunk_size: if given, stream each channel through process() in
            blocks of this many samples instead of one call

    Returns:
        output with the same shape as input_audio. Each channel gets its
        own processor; channels never mix.
    """
    if chunk_size is not None and chunk_size <= 0:
        raise ConfigError(f"chunk_size must be positive, got {chunk_size}")
    t0 = time.perf_counter()
    mono = input_audio.ndim == 1
    frames = input_audio[:, None] if mono else input_audio
    output = np.empty(frames.shape, dtype=np.float64)

    for ch in range(frames.shape[1]):
        vib = Vibrato.from_params(params, sr)
        channel = np.ascontiguousarray(frames[:, ch], dtype=np.float64)
        if chunk_size:
            for start in range(0, len(channel), chunk_size):
                end = min(start + chunk_size, len(channel))
                output[start:end, ch] = vib.process(channel[start:end])
        else:
            output[:, ch] = vib.process(channel)

    elapsed = time.perf_counter() - t0
    log.info("rendered %d samples x %d ch in %.3fs", frames.shape[0], frames.shape[1], elapsed)
    return output[:, 0] if mono else output

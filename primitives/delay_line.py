"""Circular buffer delay line — the fundamental DSP building block."""

import numpy as np


class DelayLine:
    """Fixed-length circular buffer with integer and fractional delay reads.

    Usage:
        dl = DelayLine(max_delay=4412)
        dl.write(sample)
        out = dl.read(delay_samples)           # integer delay
        out = dl.read_linear(delay_fractional)  # linear interpolation

    Slots that were never written read back as 0.0.
    """

    def __init__(self, max_delay: int):
        if max_delay < 2:
            raise ValueError(f"max_delay must be >= 2, got {max_delay}")
        self.buffer = np.zeros(max_delay, dtype=np.float64)
        self.length = max_delay
        self.write_idx = 0
        self.filled = 0  # samples written so far, saturates at length

    def write(self, sample: float):
        """Write a sample and advance the write pointer."""
        self.buffer[self.write_idx] = sample
        self.write_idx = (self.write_idx + 1) % self.length
        if self.filled < self.length:
            self.filled += 1

    def read(self, delay: int) -> float:
        """Read a sample from `delay` steps in the past.

        delay=0 returns the most recently written sample.
        delay=1 returns the sample before that, etc.
        """
        idx = (self.write_idx - 1 - delay) % self.length
        return float(self.buffer[idx])

    def read_linear(self, delay: float) -> float:
        """Read with linear interpolation between two adjacent samples.

        `delay` must lie in [0, length - 2] so the older neighbour is still
        in the buffer. A whole-number delay returns the stored sample as is.
        """
        int_delay = int(delay)
        frac = delay - int_delay
        s0 = self.read(int_delay)
        if frac == 0.0:
            return s0
        s1 = self.read(int_delay + 1)
        return s0 + frac * (s1 - s0)

    read_interpolated = read_linear

    def reset(self):
        """Clear the buffer."""
        self.buffer[:] = 0.0
        self.write_idx = 0
        self.filled = 0

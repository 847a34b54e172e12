"""Numba-optimized vibrato inner loop.

Same per-sample algorithm as Vibrato.tick, run on explicit state so a block
can be processed without Python overhead. State is threaded in and out
through `state` = [write_idx, filled, phase]; the delay buffer is updated
in place.
"""

from numba import njit

from primitives.oscillator import lfo_value


@njit(cache=True)
def read_delay_frac(buf, write_idx, delay_frac, buf_len):
    delay_int = int(delay_frac)
    frac = delay_frac - delay_int

    s0 = buf[(write_idx - 1 - delay_int) % buf_len]
    if frac == 0.0:
        return s0
    s1 = buf[(write_idx - 2 - delay_int) % buf_len]
    return s0 + frac * (s1 - s0)


@njit(cache=True)
def process_block(input_audio, output, buf, state,
                  delay_samples, depth_samples, static_delay, max_delay,
                  phase_inc, waveform):
    buf_len = len(buf)
    max_read = buf_len - 2.0
    wi = int(state[0])
    filled = int(state[1])
    phase = state[2]

    for n in range(len(input_audio)):
        x = input_audio[n]

        # --- LFO -> modulated delay ---
        m = lfo_value(phase, waveform)
        phase = (phase + phase_inc) % 1.0
        d = delay_samples + depth_samples * m
        if d < 0.0:
            d = 0.0
        elif d > max_read:
            d = max_read

        # --- Write ---
        buf[wi] = x
        wi = (wi + 1) % buf_len
        if filled < buf_len:
            filled += 1

        # --- Read (dry until the line holds max_delay samples of history) ---
        if filled <= max_delay:
            output[n] = x
        elif depth_samples == 0.0:
            output[n] = buf[(wi - 1 - static_delay) % buf_len]
        else:
            output[n] = read_delay_frac(buf, wi, d, buf_len)

    state[0] = wi
    state[1] = filled
    state[2] = phase

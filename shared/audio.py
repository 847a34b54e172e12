"""Shared audio I/O utilities.

Provides load_wav, save_wav and save_txt used by the CLI renderer. The
engine only ever sees normalised float64 samples; everything about file
formats lives here.
"""

import numpy as np
from scipy.io import wavfile


def load_wav(path):
    """Load a WAV file as normalised float64.

    Returns (audio_array, sample_rate). Integer samples of bit depth b are
    divided by 2^(b-1); 8-bit WAV is unsigned and is re-centred first.
    Audio is mono (samples,) or multi-channel (samples, channels).
    """
    sr, data = wavfile.read(path)
    if data.dtype == np.uint8:
        audio = (data.astype(np.float64) - 128.0) / 128.0
    elif data.dtype == np.int16:
        audio = data.astype(np.float64) / 32768.0
    elif data.dtype == np.int32:
        audio = data.astype(np.float64) / 2147483648.0
    else:
        audio = data.astype(np.float64)
    return audio, sr


def save_wav(path, audio, sr=44100):
    """Save audio to a 16-bit WAV file, clipping to [-1, 1]."""
    out = (np.clip(audio, -1.0, 1.0) * 32767).astype(np.int16)
    wavfile.write(path, sr, out)


def save_txt(path, audio):
    """Write one line per frame, channel values separated by spaces."""
    frames = audio[:, None] if audio.ndim == 1 else audio
    np.savetxt(path, frames, fmt="%.9g", delimiter=" ")

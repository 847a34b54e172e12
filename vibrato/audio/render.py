"""Offline rendering for the Vibrato.

Usage:
    python -m vibrato.audio.render input.wav output.txt [--preset preset.json]

The output format follows the extension: .wav writes a 16-bit WAV, anything
else writes one line per frame with space-separated channel values.
"""

import argparse
import json
import logging
import sys

from shared.audio import load_wav, save_txt, save_wav
from vibrato.engine.params import ConfigError, default_params, validate_params
from vibrato.engine.vibrato import render_vibrato

log = logging.getLogger(__name__)


def load_preset(path):
    """Load a params dict from JSON."""
    with open(path) as f:
        preset = json.load(f)
    if not isinstance(preset, dict):
        raise ValueError(f"{path}: preset must be a JSON object")
    return preset


def build_params(args):
    params = default_params()
    if args.preset:
        params = validate_params(load_preset(args.preset))
        log.info("Loaded preset: %s", args.preset)

    overrides = {}
    if args.mod_freq is not None:
        overrides["mod_freq"] = args.mod_freq
    if args.mod_depth is not None:
        overrides["mod_depth"] = args.mod_depth
    if args.delay_time is not None:
        overrides["delay_time"] = args.delay_time
    if args.waveform is not None:
        overrides["waveform"] = args.waveform
    # CLI values are taken as given; the engine rejects impossible ones
    params.update(overrides)
    return params


def main(argv=None):
    parser = argparse.ArgumentParser(description="Vibrato offline renderer")
    parser.add_argument("input", help="Input WAV file")
    parser.add_argument("output", help="Output file (.wav, or text columns otherwise)")
    parser.add_argument("--preset", help="Preset JSON file")
    parser.add_argument("--mod_freq", type=float, help="LFO rate in Hz")
    parser.add_argument("--mod_depth", type=float, help="Modulation depth in seconds")
    parser.add_argument("--delay_time", type=float, help="Base delay in seconds")
    parser.add_argument("--waveform", choices=["sine", "triangle"])
    parser.add_argument("--chunk_size", type=int,
                        help="Stream through the engine in blocks of this size")
    parser.add_argument("-v", "--verbose", action="store_true")
    args = parser.parse_args(argv)

    logging.basicConfig(level=logging.DEBUG if args.verbose else logging.INFO,
                        format="%(name)s %(levelname)s: %(message)s")

    try:
        params = build_params(args)
        audio, sr = load_wav(args.input)
    except (OSError, ValueError) as e:
        log.error("Cannot read input: %s", e)
        sys.exit(1)

    n = audio.shape[0]
    ch = 1 if audio.ndim == 1 else audio.shape[1]
    log.info("Loaded %s: %d samples, %d Hz, %d ch", args.input, n, sr, ch)

    try:
        output = render_vibrato(audio, params, sr, chunk_size=args.chunk_size)
    except ConfigError as e:
        log.error("Invalid settings: %s", e)
        sys.exit(2)

    try:
        if args.output.lower().endswith(".wav"):
            save_wav(args.output, output, sr)
        else:
            save_txt(args.output, output)
    except OSError as e:
        log.error("Cannot write output: %s", e)
        sys.exit(1)
    log.info("Saved %s", args.output)


if __name__ == "__main__":
    main()

#!/usr/bin/env python3
"""Render a file through the vibrato from the project root.

Usage:
    uv run python main.py input.wav output.txt [--mod_depth 0.002] [--delay_time 0.005]
    uv run python -m vibrato.audio.render input.wav output.wav --preset preset.json
"""

from vibrato.audio.render import main

if __name__ == "__main__":
    main()

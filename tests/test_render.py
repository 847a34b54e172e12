"""Test the offline renderer end to end, from WAV file to output file.

Run: uv run pytest tests/test_render.py
"""

import json
import os
import sys

import numpy as np
import pytest
from scipy.io import wavfile

sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))
from shared.audio import load_wav, save_txt
from vibrato.audio.render import main
from vibrato.engine.params import default_params
from vibrato.engine.vibrato import render_vibrato

SR = 44100


@pytest.fixture
def stereo_wav(tmp_path):
    rng = np.random.default_rng(0)
    data = rng.integers(-20000, 20000, size=(2000, 2)).astype(np.int16)
    path = tmp_path / "in.wav"
    wavfile.write(path, SR, data)
    return path, data


def test_load_wav_normalises_int16(stereo_wav):
    path, data = stereo_wav
    audio, sr = load_wav(path)
    assert sr == SR
    assert audio.shape == (2000, 2)
    assert np.array_equal(audio, data / 32768.0)


def test_load_wav_uint8(tmp_path):
    path = tmp_path / "u8.wav"
    wavfile.write(path, 8000, np.array([0, 128, 255], dtype=np.uint8))
    audio, sr = load_wav(path)
    assert sr == 8000
    assert list(audio) == [-1.0, 0.0, 127 / 128]


def test_save_txt_one_line_per_frame(tmp_path):
    path = tmp_path / "out.txt"
    save_txt(path, np.array([[0.5, -0.25], [0.0, 1.0]]))
    assert path.read_text().splitlines() == ["0.5 -0.25", "0 1"]
    save_txt(path, np.array([0.5, -0.25]))
    assert path.read_text().splitlines() == ["0.5", "-0.25"]


def test_text_output_matches_engine(stereo_wav, tmp_path):
    path, data = stereo_wav
    out = tmp_path / "out.txt"
    main([str(path), str(out), "--mod_depth", "0.001", "--delay_time", "0.002"])

    params = dict(default_params(), mod_depth=0.001, delay_time=0.002)
    expected = render_vibrato(data / 32768.0, params, SR)
    np.testing.assert_allclose(np.loadtxt(out), expected, atol=1e-8)


def test_bypass_settings_copy_input(stereo_wav, tmp_path):
    path, data = stereo_wav
    out = tmp_path / "out.txt"
    main([str(path), str(out), "--mod_depth", "0", "--delay_time", "0", "--chunk_size", "64"])
    np.testing.assert_allclose(np.loadtxt(out), data / 32768.0, atol=1e-8)


def test_wav_output(stereo_wav, tmp_path):
    path, _ = stereo_wav
    out = tmp_path / "out.wav"
    main([str(path), str(out), "--waveform", "triangle"])
    sr, result = wavfile.read(out)
    assert sr == SR
    assert result.shape == (2000, 2)
    assert result.dtype == np.int16


def test_preset_file(stereo_wav, tmp_path):
    path, data = stereo_wav
    preset = tmp_path / "preset.json"
    preset.write_text(json.dumps({"_meta": {"name": "still"}, "mod_depth": 0.0, "delay_time": 0.0}))
    out = tmp_path / "out.txt"
    main([str(path), str(out), "--preset", str(preset)])
    np.testing.assert_allclose(np.loadtxt(out), data / 32768.0, atol=1e-8)


def test_missing_input_exits_1(tmp_path):
    with pytest.raises(SystemExit) as exc:
        main([str(tmp_path / "nope.wav"), str(tmp_path / "out.txt")])
    assert exc.value.code == 1


def test_bad_preset_exits_1(stereo_wav, tmp_path):
    path, _ = stereo_wav
    preset = tmp_path / "preset.json"
    preset.write_text("[1, 2, 3]")
    with pytest.raises(SystemExit) as exc:
        main([str(path), str(tmp_path / "out.txt"), "--preset", str(preset)])
    assert exc.value.code == 1


def test_unwritable_output_exits_1(stereo_wav, tmp_path):
    path, _ = stereo_wav
    with pytest.raises(SystemExit) as exc:
        main([str(path), str(tmp_path / "missing_dir" / "out.txt")])
    assert exc.value.code == 1


def test_invalid_settings_exit_2(stereo_wav, tmp_path):
    path, _ = stereo_wav
    with pytest.raises(SystemExit) as exc:
        main([str(path), str(tmp_path / "out.txt"), "--delay_time", "-1"])
    assert exc.value.code == 2


def test_empty_wav_writes_empty_text(tmp_path):
    path = tmp_path / "empty.wav"
    wavfile.write(path, SR, np.zeros((0, 2), dtype=np.int16))
    out = tmp_path / "out.txt"
    main([str(path), str(out)])
    assert out.read_text() == ""


def test_negative_chunk_size_exits_2(stereo_wav, tmp_path):
    path, _ = stereo_wav
    with pytest.raises(SystemExit) as exc:
        main([str(path), str(tmp_path / "out.txt"), "--chunk_size", "-8"])
    assert exc.value.code == 2


if __name__ == "__main__":
    sys.exit(pytest.main([__file__, "-v"]))

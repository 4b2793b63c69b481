import numpy as np
import PIL.Image
import pytest

import mask
from mandgrid import Mand

SMALL = ["--width", "12", "--height", "9", "--max-iterations", "30", "--backend", "scalar"]


def _expected():
    return Mand(-2.0, 1.0, -1.5, 1.5, width=12, height=9, iterations=30, backend="scalar")


def test_writes_npy(tmp_path):
    output = tmp_path / "mask.npy"
    assert mask.main([*SMALL, "--output", str(output)]) == 0
    saved = np.load(output)
    assert saved.shape == (9, 12)
    np.testing.assert_array_equal(saved, _expected().to_image())


def test_writes_raw_buffer(tmp_path):
    output = tmp_path / "nested" / "mask.raw"
    mask.main([*SMALL, "--output", str(output)])
    assert output.read_bytes() == _expected().pixels().tobytes()


def test_writes_mono_png(tmp_path):
    output = tmp_path / "mask"
    mask.main([*SMALL, "--format", "png", "--output", str(output)])
    written = tmp_path / "mask.png"
    with PIL.Image.open(written) as image:
        assert image.size == (12, 9)
        pixels = np.asarray(image)
    expected = np.where(_expected().to_image() == 1, 0, 255)
    np.testing.assert_array_equal(pixels, expected)


def test_verbose_logging(tmp_path, capsys):
    mask.main([*SMALL, "-v", "--output", str(tmp_path / "mask.npy")])
    out = capsys.readouterr().out
    assert "Grid: 12x9, max iterations 30, backend scalar" in out
    assert "Pixels in set:" in out


def test_quiet_by_default(tmp_path, capsys):
    mask.main([*SMALL, "--output", str(tmp_path / "mask.npy")])
    assert capsys.readouterr().out == ""


@pytest.mark.parametrize(
    "args",
    [
        ["--x-min", "1", "--x-max", "-1"],
        ["--y-min", "2", "--y-max", "0"],
        ["--width", "0"],
        ["--max-iterations", "-5"],
        ["--format", "gif"],
        ["--format", "png", "--output", "mask.npy"],
        ["--output", "mask.bin"],
        ["--backend", "opencl"],
    ],
)
def test_invalid_arguments_exit_with_usage_error(args, tmp_path, monkeypatch):
    monkeypatch.chdir(tmp_path)
    with pytest.raises(SystemExit) as excinfo:
        mask.main([*SMALL, *args])
    assert excinfo.value.code == 2


def test_output_directory_is_rejected(tmp_path):
    with pytest.raises(SystemExit):
        mask.main([*SMALL, "--output", str(tmp_path)])


def test_default_output_path(tmp_path, monkeypatch):
    monkeypatch.chdir(tmp_path)
    mask.main(SMALL)
    assert (tmp_path / "mask.npy").is_file()


def test_library_errors_become_usage_errors(tmp_path, capsys):
    with pytest.raises(SystemExit) as excinfo:
        mask.main([*SMALL, "--x-min", "1", "--x-max", "-1", "--output", str(tmp_path / "mask.npy")])
    assert excinfo.value.code == 2
    assert "min <= max" in capsys.readouterr().err
    assert not (tmp_path / "mask.npy").exists()

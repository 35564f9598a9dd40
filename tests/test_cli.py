import PIL.Image
import pytest

import zoom as cli
from mandelbrot import DEFAULT_VIEWPORT, Viewport, ZoomPlanner


BASE_ARGS = ["--width", "16", "--height", "12", "--backend", "python"]


def test_image_mode_writes_final_frame(tmp_path):
    output = tmp_path / "final.png"
    viewport = cli.main([*BASE_ARGS, "--click", "8,6", "--output", str(output)])
    assert output.exists()
    with PIL.Image.open(output) as image:
        assert image.size == (16, 12)
    assert viewport == ZoomPlanner(16, 12, 0.5).update_after_click(DEFAULT_VIEWPORT, (8, 6))


def test_image_mode_adds_missing_suffix(tmp_path):
    cli.main([*BASE_ARGS, "--output", str(tmp_path / "final")])
    assert (tmp_path / "final.png").exists()


def test_frames_mode_writes_one_frame_per_click(tmp_path):
    frame_dir = tmp_path / "frames"
    cli.main([*BASE_ARGS, "--mode", "frames", "--frame-dir", str(frame_dir), "--click", "8,6", "--click", "2,3"])
    assert sorted(path.name for path in frame_dir.iterdir()) == ["frame000.png", "frame001.png", "frame002.png"]


def test_gif_and_image_share_output_directory(tmp_path):
    cli.main([*BASE_ARGS, "--mode", "gif", "--mode", "image", "--output", str(tmp_path), "--click", "4,4"])
    assert (tmp_path / "movie.gif").exists()
    assert (tmp_path / "frame_final.png").exists()


def test_custom_viewport_and_palette(tmp_path):
    viewport = cli.main([
        *BASE_ARGS,
        "--real-start", "-1", "--real-end", "0", "--imaginary-start", "0", "--imaginary-end", "1",
        "--palette", "random", "--seed", "7", "--member-color", "#102030",
        "--output", str(tmp_path / "custom.png"),
    ])
    assert viewport == Viewport(-1.0, 0.0, 0.0, 1.0)
    assert (tmp_path / "custom.png").exists()


def test_invalid_member_color_falls_back_to_black(tmp_path, capsys):
    cli.main([*BASE_ARGS, "--member-color", "blue", "--output", str(tmp_path / "x.png")])
    assert "defaulting to black" in capsys.readouterr().out


@pytest.mark.parametrize(
    "args",
    [
        ["--mode", "video"],
        ["--click", "nope"],
        ["--scale-factor", "1.5"],
        ["--real-start", "1", "--real-end", "-1"],
        ["--width", "0"],
        ["--max-iterations", "0"],
        ["--frame-dir", "somewhere"],
        ["--output", "wrong.gif"],
        ["--mode", "frames", "--output", "x.png"],
    ],
)
def test_invalid_options_exit_with_usage_error(args):
    with pytest.raises(SystemExit) as excinfo:
        cli.main([*BASE_ARGS, *args])
    assert excinfo.value.code == 2


def test_click_sequence_that_exhausts_precision_is_a_usage_error(tmp_path):
    frame_dir = tmp_path / "frames"
    args = ["--width", "4", "--height", "4", "--backend", "python", "--mode", "frames", "--frame-dir", str(frame_dir)]
    with pytest.raises(SystemExit) as excinfo:
        cli.main(args + ["--click", "2,2"] * 60)
    assert excinfo.value.code == 2
    assert not frame_dir.exists()

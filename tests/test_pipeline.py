from pathlib import Path

from conftest import FakeRunner, write_image

from gifmaker.config import RunConfig
from gifmaker.output.logger import SimpleLogger
from gifmaker.processing.pipeline import GifPipeline


def make_frames(directory: Path, *names: str) -> set[str]:
    for name in names:
        write_image(directory / name)
    return set(names)


def names(directory: Path) -> set[str]:
    return {p.name for p in directory.iterdir()}


def test_successful_run(tmp_path: Path, settings, run_config, logger, capsys):
    originals = make_frames(tmp_path, "b.png", "A.png", "c.png")
    runner = FakeRunner()

    result = GifPipeline(tmp_path, run_config, settings, logger, runner=runner).run()

    assert runner.targets == ["tile.png", "palette.png", "output.gif"]
    # frames carry sequential names while ffmpeg runs
    assert {"000000.png", "000001.png", "000002.png"} <= set(runner.listings[0])
    assert not originals & set(runner.listings[0])
    assert names(tmp_path) == originals | {"output.gif"}
    assert result.file_count == 3
    assert result.output_created
    assert result.exit_code == 0
    assert result.restore.ok
    out = capsys.readouterr().out
    assert "output.gif generated" in out
    assert "tmp file tile.png deleted successfully" in out


def test_corrupt_frame_takes_no_index(tmp_path: Path, settings, run_config, logger):
    make_frames(tmp_path, "a.png", "c.png", "d.png")
    (tmp_path / "b.png").write_bytes(b"broken")
    runner = FakeRunner()

    result = GifPipeline(tmp_path, run_config, settings, logger, runner=runner).run()

    sequential = [n for n in runner.listings[0] if n[0].isdigit()]
    assert sequential == ["000000.png", "000001.png", "000002.png"]
    assert "b.png" in runner.listings[0]
    assert result.file_count == 3


def test_two_valid_one_corrupt(tmp_path: Path, settings, run_config, logger):
    make_frames(tmp_path, "a.png", "c.png")
    (tmp_path / "b.png").write_bytes(b"broken")
    runner = FakeRunner()

    GifPipeline(tmp_path, run_config, settings, logger, runner=runner).run()

    assert [n for n in runner.listings[0] if n[0].isdigit()] == ["000000.png", "000001.png"]


def test_mismatched_sizes_are_all_renamed(tmp_path: Path, settings, run_config, logger):
    write_image(tmp_path / "a.png", width=8, height=8)
    write_image(tmp_path / "b.png", width=4, height=12)
    runner = FakeRunner()

    result = GifPipeline(tmp_path, run_config, settings, logger, runner=runner).run()

    assert [n for n in runner.listings[0] if n[0].isdigit()] == ["000000.png", "000001.png"]
    assert result.exit_code == 0


def test_no_matching_files(tmp_path: Path, settings, run_config, logger, capsys):
    write_image(tmp_path / "a.jpg")
    runner = FakeRunner()

    result = GifPipeline(tmp_path, run_config, settings, logger, runner=runner).run()

    assert runner.calls == []
    assert names(tmp_path) == {"a.jpg"}
    assert result.file_count == 0
    assert result.exit_code == 0
    assert "no files with type 'png' found. Exiting" in capsys.readouterr().out


def test_tile_failure_restores_and_fails(tmp_path: Path, settings, run_config, logger):
    originals = make_frames(tmp_path, "x.png", "y.png")
    runner = FakeRunner(failures={"tile.png": 1})

    result = GifPipeline(tmp_path, run_config, settings, logger, runner=runner).run()

    assert runner.targets == ["tile.png"]
    assert names(tmp_path) == originals
    assert result.palette is None and result.render is None
    assert result.exit_code != 0


def test_palette_failure_skips_render(tmp_path: Path, settings, run_config, logger, capsys):
    originals = make_frames(tmp_path, "x.png", "y.png")
    runner = FakeRunner(failures={"palette.png": 1})

    result = GifPipeline(tmp_path, run_config, settings, logger, runner=runner).run()

    assert runner.targets == ["tile.png", "palette.png"]
    # tile succeeded and is cleaned up; the failed palette step left nothing behind
    assert names(tmp_path) == originals
    assert result.render is None
    assert result.exit_code == 1
    out = capsys.readouterr().out
    assert "palette.png: simulated ffmpeg failure" in out
    assert "tmp file palette.png" not in out


def test_render_failure_still_cleans_up(tmp_path: Path, settings, run_config, logger, capsys):
    originals = make_frames(tmp_path, "x.png", "y.png")
    runner = FakeRunner(failures={"output.gif": 2})

    result = GifPipeline(tmp_path, run_config, settings, logger, runner=runner).run()

    assert names(tmp_path) == originals
    assert not result.output_created
    assert result.exit_code == 1
    assert "output.gif generated" not in capsys.readouterr().out


def test_render_command_uses_frame_rate(tmp_path: Path, settings, logger):
    make_frames(tmp_path, "a.jpg")
    runner = FakeRunner()

    GifPipeline(tmp_path, RunConfig(extension="jpg", frame_rate="12"), settings, logger, runner=runner).run()

    render = runner.calls[-1]
    assert render[render.index("-framerate") + 1] == "12"
    assert render[render.index("-i") + 1] == "%06d.jpg"


def test_undeletable_temp_file_is_reported(tmp_path: Path, settings, run_config, logger, capsys):
    make_frames(tmp_path, "a.png")

    class NoTileRunner(FakeRunner):
        def __call__(self, cmd, *, cwd=None, timeout=None):
            code, out = super().__call__(cmd, cwd=cwd, timeout=timeout)
            if cmd[-1] == "tile.png":
                (Path(cwd) / "tile.png").unlink()
            return code, out

    result = GifPipeline(tmp_path, run_config, settings, logger, runner=NoTileRunner()).run()

    assert result.undeleted == ["tile.png"]
    assert result.exit_code == 0
    assert "File can be deleted manually tile.png" in capsys.readouterr().out


def test_conflicting_sequential_name_aborts(tmp_path: Path, settings, run_config, logger):
    make_frames(tmp_path, "a.png", "b.png")
    (tmp_path / "000001.png").write_bytes(b"not a frame")
    runner = FakeRunner()

    result = GifPipeline(tmp_path, run_config, settings, logger, runner=runner).run()

    assert runner.calls == []
    assert names(tmp_path) == {"a.png", "b.png", "000001.png"}
    assert result.exit_code == 1


def test_quiet_run_prints_nothing(tmp_path: Path, settings, capsys):
    make_frames(tmp_path, "a.png")
    config = RunConfig(verbose=False)

    GifPipeline(tmp_path, config, settings, SimpleLogger(enabled=False), runner=FakeRunner(failures={"tile.png": 1})).run()

    captured = capsys.readouterr()
    assert captured.out == "" and captured.err == ""

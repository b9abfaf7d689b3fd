"""Tests for HostLoop frame driving and the command-line entry point."""

from __future__ import annotations

import json

import pytest

from gridwall.__main__ import build_parser, config_from_args, main
from gridwall.host import FrameStats, HostLoop
from gridwall.placement import GenerationConfig, RecordingEntityFactory, SessionController


pytestmark = pytest.mark.unit


class FakeTime:
    """Clock + sleep pair; sleeping advances the clock."""

    def __init__(self) -> None:
        self.now = 0.0
        self.sleeps: list[float] = []

    def clock(self) -> float:
        return self.now

    def sleep(self, seconds: float) -> None:
        self.sleeps.append(seconds)
        self.now += seconds


def _make_controller(**overrides) -> SessionController:
    config = GenerationConfig(**{"target_count": 12, "grid_radius": 12,
                                 "max_items_per_slice": 3, "seed": 1, **overrides})
    ctrl = SessionController(RecordingEntityFactory(), reference_provider=lambda: (0.0, 0.0),
                             clock=lambda: 0.0)
    ctrl.start_session(config)
    return ctrl


class TestHostLoop:

    def test_runs_until_complete(self):
        ctrl = _make_controller()
        t = FakeTime()
        stats = HostLoop(ctrl, tick_rate_hz=60.0, clock=t.clock, sleep=t.sleep).run()
        assert not ctrl.is_generating()
        assert ctrl.report.placed == 12
        # grid build + 4 slices of 3
        assert stats.frames == 5

    def test_sleeps_out_the_frame_between_ticks(self):
        ctrl = _make_controller()
        t = FakeTime()
        stats = HostLoop(ctrl, tick_rate_hz=50.0, clock=t.clock, sleep=t.sleep).run()
        # no sleep after the final frame
        assert len(t.sleeps) == stats.frames - 1
        assert all(s == pytest.approx(0.02) for s in t.sleeps)

    def test_max_frames_stops_early(self):
        ctrl = _make_controller()
        t = FakeTime()
        stats = HostLoop(ctrl, clock=t.clock, sleep=t.sleep).run(max_frames=2)
        assert stats.frames == 2
        assert ctrl.is_generating()

    def test_rejects_bad_rate(self):
        with pytest.raises(ValueError):
            HostLoop(_make_controller(), tick_rate_hz=0.0)

    def test_frame_stats(self):
        stats = FrameStats(frames=3, work_seconds=[0.001, 0.004, 0.002])
        assert stats.longest_frame == pytest.approx(0.004)
        assert stats.total_work == pytest.approx(0.007)
        assert stats.to_dict()["longest_frame_ms"] == pytest.approx(4.0)


class TestCli:

    def test_args_override_settings(self):
        args = build_parser().parse_args(["--count", "4", "--radius", "9", "--seed", "3"])
        config = config_from_args(args)
        assert config.target_count == 4
        assert config.grid_radius == 9
        assert config.seed == 3

    def test_json_output(self, capsys):
        code = main(["--count", "5", "--radius", "10", "--seed", "2", "--json"])
        assert code == 0
        data = json.loads(capsys.readouterr().out)
        assert data["state"] == "complete"
        assert data["report"]["placed"] == 5
        assert len(data["walls"]) == 5
        assert data["frames"]["frames"] >= 2

    def test_render_output(self, capsys):
        code = main(["--count", "3", "--radius", "6", "--seed", "2", "--render"])
        assert code == 0
        out = capsys.readouterr().out
        assert out.count("#") == 3
        assert "Placed 3/3 walls" in out

    def test_bad_config_exit_code(self):
        assert main(["--radius", "0"]) == 2

"""
Tests for thermo_swarm/experiments/

Experiment configs, colony sampling, YAML loading and the CLI runner.
"""

import matplotlib
matplotlib.use("Agg")

import numpy as np
import pytest

from thermo_swarm.core.agent import HysteresisAgent
from thermo_swarm.experiments.config import DEFAULT_CONFIG_PATH, load_experiments, parse_experiments
from thermo_swarm.experiments.example import (
    BUILTIN_EXAMPLES,
    DEFAULT_EXAMPLE,
    FIXED_EXAMPLE,
    ExperimentConfig,
    make_bees,
    run_example,
)
from thermo_swarm.experiments.run import main, run_with_delays, select_experiments


# ==================== Config Tests ====================

class TestExperimentConfig:
    """Tests for ExperimentConfig."""

    def test_default_config(self):
        config = ExperimentConfig()
        assert config.title == "Unnamed Example"
        assert config.number_of_bees == 100
        assert config.delta_temp == pytest.approx(0.01)
        assert config.end_time == 120.0
        assert config.time_step == 1.0
        assert config.delay == 0
        assert config.start_cooling == {"kind": "normal", "mean": 2.0, "std": 1.0}

    def test_delta_follows_colony_size(self):
        assert ExperimentConfig(number_of_bees=20).delta_temp == pytest.approx(0.05)

    def test_explicit_delta_kept(self):
        assert ExperimentConfig(delta_temp=0.3).delta_temp == 0.3

    def test_empty_colony_has_zero_delta(self):
        assert ExperimentConfig(number_of_bees=0).delta_temp == 0.0

    def test_number_of_bees_must_be_integer(self):
        with pytest.raises(ValueError, match="integer"):
            ExperimentConfig(number_of_bees=100.0)
        with pytest.raises(ValueError):
            ExperimentConfig(number_of_bees=True)

    def test_numpy_integer_bees_accepted(self):
        config = ExperimentConfig(number_of_bees=np.int64(4))
        assert len(make_bees(config)) == 4

    @pytest.mark.parametrize("kwargs", [
        {"number_of_bees": -1},
        {"time_step": 0.0},
        {"delay": -2},
        {"band_margin": -0.1},
    ])
    def test_invalid_values_rejected(self, kwargs):
        with pytest.raises(ValueError):
            ExperimentConfig(**kwargs)

    def test_serialization(self):
        config = ExperimentConfig(title="t", start_cooling=[1.0], delay=4)
        restored = ExperimentConfig.from_dict(config.to_dict())
        assert restored == config

    def test_unknown_field_rejected(self):
        with pytest.raises(ValueError, match="Unknown experiment fields"):
            ExperimentConfig.from_dict({"bees": 3})

    def test_builtins(self):
        assert BUILTIN_EXAMPLES["default"] is DEFAULT_EXAMPLE
        assert FIXED_EXAMPLE.title == "Fixed Distribution"


# ==================== Colony Tests ====================

class TestMakeBees:
    """Tests for colony sampling."""

    def test_fixed_colony(self):
        bees = make_bees(FIXED_EXAMPLE)
        assert len(bees) == 100
        assert all(isinstance(b, HysteresisAgent) for b in bees)
        assert {b.start_cooling for b in bees} == {1.0}
        assert {b.stop_cooling for b in bees} == {0.5}
        assert all(b.delta == pytest.approx(0.01) for b in bees)
        assert len({b.id for b in bees}) == 100

    def test_band_margin_clamps_stop_cooling(self):
        config = ExperimentConfig(start_cooling=0.3, stop_cooling=0.2, number_of_bees=1)
        bee = make_bees(config)[0]
        assert bee.start_cooling == pytest.approx(0.3)
        assert bee.stop_cooling == pytest.approx(-0.2)

    def test_start_cooling_is_absolute(self):
        config = ExperimentConfig(start_cooling=-1.5, stop_cooling=0.0, number_of_bees=1)
        bee = make_bees(config)[0]
        assert bee.start_cooling == 1.5
        assert bee.start_heating == -1.5

    def test_seeded_colony_reproducible(self):
        config = ExperimentConfig(number_of_bees=10, seed=42)
        first = [(b.start_cooling, b.stop_cooling) for b in make_bees(config)]
        second = [(b.start_cooling, b.stop_cooling) for b in make_bees(config)]
        assert first == second

    def test_sampled_thresholds_are_ordered(self):
        bees = make_bees(DEFAULT_EXAMPLE, np.random.default_rng(0))
        for bee in bees:
            assert bee.start_cooling >= 0
            assert bee.stop_cooling <= bee.start_cooling - 0.5 + 1e-12

    def test_each_call_gives_fresh_agents(self):
        first = make_bees(FIXED_EXAMPLE)
        second = make_bees(FIXED_EXAMPLE)
        assert not set(map(id, first)) & set(map(id, second))


# ==================== Run Tests ====================

class TestRunExample:
    """Tests for run_example."""

    def test_fixed_example_shapes(self):
        result = run_example(FIXED_EXAMPLE)
        assert len(result.times) == 120
        assert len(result.external) == 120
        assert len(result.trajectory) == 121
        assert len(result.controlled) == 120
        assert result.controlled[0] == 0.0
        np.testing.assert_array_equal(
            result.controlled, result.trajectory.temperatures[1:121]
        )

    def test_controlled_aligned_with_times(self):
        # Without bees the controlled curve is the external curve, sample for sample
        config = ExperimentConfig(
            number_of_bees=0, end_time=20, driver="sin_1", initial_temperature=0.0
        )
        result = run_example(config)
        assert result.controlled[1] == pytest.approx(result.external[1])
        assert result.controlled[-1] == pytest.approx(result.external[-1])

    def test_empty_colony_follows_external(self):
        config = ExperimentConfig(number_of_bees=0, end_time=60)
        result = run_example(config)
        np.testing.assert_allclose(result.controlled, result.external, atol=1e-9)

    def test_colony_delta_bounded_by_colony_size(self):
        config = ExperimentConfig(
            start_cooling=1.0, stop_cooling=0.5, end_time=40, driver="sin_1",
            driver_amplitude=3.0,
        )
        result = run_example(config)
        bee_deltas = result.trajectory.bee_deltas
        # 100 bees at 0.01 each: the whole colony moves at most 1.0 per step
        assert np.abs(bee_deltas).max() == pytest.approx(1.0)
        assert (bee_deltas < 0).any()
        assert (bee_deltas > 0).any()

    def test_delay_override(self):
        result = run_example(FIXED_EXAMPLE, delay=4)
        assert result.trajectory.delay == 4

    def test_same_seed_different_delays(self):
        config = ExperimentConfig(number_of_bees=30, end_time=60, seed=3)
        results = run_with_delays(config, [0, 5])
        assert [r.trajectory.delay for r in results] == [0, 5]
        assert not np.allclose(
            results[0].trajectory.temperatures, results[1].trajectory.temperatures
        )


# ==================== YAML Tests ====================

class TestLoadExperiments:
    """Tests for YAML experiment definitions."""

    def test_bundled_file(self):
        experiments = load_experiments()
        assert DEFAULT_CONFIG_PATH.exists()
        assert {"default", "fixed", "fixed_delayed"} <= set(experiments)
        assert experiments["fixed_delayed"].delay == 3
        assert experiments["fixed"].start_cooling == {"kind": "fixed", "value": 1.0}

    def test_bundled_experiments_build_colonies(self):
        for config in load_experiments().values():
            assert len(make_bees(config)) == config.number_of_bees

    def test_custom_file(self, tmp_path):
        path = tmp_path / "experiments.yaml"
        path.write_text(
            "tiny:\n"
            "  start_cooling: 1.0\n"
            "  stop_cooling: 0.5\n"
            "  number_of_bees: 4\n"
            "  end_time: 10\n"
        )
        experiments = load_experiments(path)
        assert experiments["tiny"].title == "tiny"
        assert experiments["tiny"].delta_temp == pytest.approx(0.25)

    def test_empty_file(self, tmp_path):
        path = tmp_path / "empty.yaml"
        path.write_text("")
        assert load_experiments(path) == {}

    def test_float_bee_count_rejected(self):
        with pytest.raises(ValueError, match="Invalid experiment 'floaty'"):
            parse_experiments({"floaty": {"number_of_bees": 100.0}})

    def test_invalid_entry(self):
        with pytest.raises(ValueError, match="Invalid experiment 'bad'"):
            parse_experiments({"bad": {"number_of_bees": -5}})

    def test_not_a_mapping(self):
        with pytest.raises(ValueError):
            parse_experiments(["default"])


# ==================== CLI Tests ====================

class TestCli:
    """Tests for the command line runner."""

    def test_select_all_builtins(self):
        assert set(select_experiments([])) == {"default", "fixed"}

    def test_select_unknown(self):
        with pytest.raises(ValueError):
            select_experiments(["nope"])

    def test_main_headless(self, capsys):
        assert main(["fixed", "--no-plot", "--delay", "0", "--delay", "3"]) == 0
        out = capsys.readouterr().out
        assert "Fixed Distribution" in out
        assert "delay=0" in out
        assert "delay=3" in out

    def test_main_unknown_experiment(self):
        assert main(["nope", "--no-plot"]) == 1

    def test_main_negative_delay(self):
        assert main(["fixed", "--no-plot", "--delay", "-1"]) == 1

    def test_main_saves_figures(self, tmp_path):
        assert main(["fixed", "--no-plot", "--save", str(tmp_path)]) == 0
        assert (tmp_path / "fixed.png").exists()

    def test_main_with_config(self, tmp_path):
        path = tmp_path / "experiments.yaml"
        path.write_text("quick:\n  number_of_bees: 5\n  end_time: 5\n  seed: 1\n")
        assert main(["quick", "--config", str(path), "--no-plot"]) == 0

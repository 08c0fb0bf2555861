"""Tests for cornbreeder.simulation: config, program loop, scenarios, snapshots."""

from collections.abc import Callable, Sequence
from pathlib import Path

import numpy as np
import pytest
from numpy.random import Generator

from cornbreeder.__main__ import main
from cornbreeder.analysis.statistics import PopulationStats
from cornbreeder.errors import ConfigurationError, InvalidSelectionError
from cornbreeder.genetics.genome import Genome
from cornbreeder.genetics.loci import LociConfig
from cornbreeder.population.manager import SelectionState
from cornbreeder.population.plant import Plant
from cornbreeder.simulation.config import SimulationConfig
from cornbreeder.simulation.program import BreedingProgram
from cornbreeder.simulation.scenarios import (
    BASELINE_SCENARIO,
    WELCOME_NOTE,
    CannedAnalysisProvider,
    Scenario,
)
from cornbreeder.simulation.snapshots import (
    curves_snapshot,
    plant_snapshot,
    stats_snapshot,
)


class TestSimulationConfig:
    """Tests for YAML config loading."""

    def test_defaults(self) -> None:
        cfg = SimulationConfig()
        assert cfg.seed == 42
        assert cfg.population_size == 40
        assert cfg.genome_length == 30
        assert cfg.disease_threshold == 8.0

    def test_from_yaml(self, tmp_path: Path) -> None:
        yaml_file = tmp_path / "test.yaml"
        yaml_file.write_text(
            "seed: 99\npopulation_size: 12\ngenome_length: 12\n"
            "yield_resistance_loci: [2, 3]\nheight_yield_loci: []\n"
        )
        cfg = SimulationConfig.from_yaml(yaml_file)
        assert cfg.seed == 99
        assert cfg.population_size == 12
        assert cfg.yield_resistance_loci == (2, 3)
        assert cfg.height_yield_loci == ()
        assert cfg.crossover_rate == 0.1

    def test_empty_yaml_uses_defaults(self, tmp_path: Path) -> None:
        yaml_file = tmp_path / "empty.yaml"
        yaml_file.write_text("")
        assert SimulationConfig.from_yaml(yaml_file) == SimulationConfig()

    def test_shipped_default_matches_dataclass(self) -> None:
        shipped = Path(__file__).resolve().parent.parent / "config" / "default.yaml"
        assert SimulationConfig.from_yaml(shipped) == SimulationConfig()

    def test_missing_file(self, tmp_path: Path) -> None:
        with pytest.raises(FileNotFoundError):
            SimulationConfig.from_yaml(tmp_path / "nope.yaml")

    def test_loci_must_be_a_list(self, tmp_path: Path) -> None:
        yaml_file = tmp_path / "bad.yaml"
        yaml_file.write_text("yield_loci: 3\n")
        with pytest.raises(ConfigurationError):
            SimulationConfig.from_yaml(yaml_file)

    def test_default_partition(self) -> None:
        loci = SimulationConfig().loci_config()
        assert loci.yield_loci == tuple(range(10))
        assert loci.resistance_loci == tuple(range(10, 20))
        assert loci.height_loci == tuple(range(20, 30))

    def test_explicit_blocks(self) -> None:
        cfg = SimulationConfig(
            genome_length=4,
            yield_loci=(0, 1),
            resistance_loci=(2, 3),
            height_loci=(),
            yield_resistance_loci=(),
            height_yield_loci=(),
        )
        loci = cfg.loci_config()
        assert loci.yield_loci == (0, 1)
        assert loci.height_loci == ()

    def test_out_of_range_pleiotropy_rejected(self) -> None:
        with pytest.raises(ConfigurationError):
            SimulationConfig(genome_length=9).genetic_model()

    def test_phenotype_model_carries_config(self) -> None:
        cfg = SimulationConfig(disease_threshold=6.0, disease_penalty_rate=1.5)
        model = cfg.phenotype_model()
        assert model.disease_threshold == 6.0
        assert model.disease_penalty_rate == 1.5

    def test_bad_population_size(self) -> None:
        with pytest.raises(ConfigurationError):
            SimulationConfig(population_size=0).genetic_model()

    @pytest.mark.parametrize(
        "overrides",
        [
            {"curve_steps": 0},
            {"selfing_retries": -3},
            {"selection_intensity": 0.0},
            {"selection_intensity": 1.5},
            {"initial_env_variance": 0.1},
            {"initial_env_variance": 9.0},
        ],
    )
    def test_out_of_range_parameters_rejected(
        self,
        overrides: dict[str, float],
    ) -> None:
        with pytest.raises(ConfigurationError):
            SimulationConfig(**overrides).genetic_model()

    def test_zero_selfing_retries_allowed(self) -> None:
        SimulationConfig(selfing_retries=0).genetic_model()

    def test_default_blocks_match_partition(self) -> None:
        loci = SimulationConfig(genome_length=31).loci_config()
        split = LociConfig.partitioned(31)
        assert loci.yield_loci == split.yield_loci
        assert loci.resistance_loci == split.resistance_loci
        assert loci.height_loci == split.height_loci

    def test_partial_blocks_fill_from_partition(self) -> None:
        cfg = SimulationConfig(
            genome_length=12,
            yield_loci=(0, 1),
            height_yield_loci=(),
        )
        loci = cfg.loci_config()
        assert loci.yield_loci == (0, 1)
        assert loci.resistance_loci == (4, 5, 6, 7)
        assert loci.height_loci == (8, 9, 10, 11)

    def test_explicit_blocks_on_short_genome(self) -> None:
        cfg = SimulationConfig(
            genome_length=2,
            yield_loci=(0,),
            resistance_loci=(1,),
            height_loci=(),
            yield_resistance_loci=(),
            height_yield_loci=(),
        )
        assert cfg.loci_config().length == 2


class TestBreedingProgram:
    """Tests for the select / breed / summarise loop."""

    def test_initialises_founders(self, default_config: SimulationConfig) -> None:
        program = BreedingProgram(config=default_config)
        assert program.generation == 1
        assert len(program.population) == default_config.population_size
        assert len(program.history) == 1
        assert program.note == WELCOME_NOTE
        assert program.env_variance == default_config.initial_env_variance

    def test_founder_scenario_matches_founder_environment(self) -> None:
        program = BreedingProgram(config=SimulationConfig(initial_env_variance=2.0))
        assert program.scenario.env_variance == 2.0
        assert program.scenario.env_variance == program.env_variance

    def test_advance(self, default_config: SimulationConfig) -> None:
        program = BreedingProgram(config=default_config)
        stats = program.advance(program.auto_select())
        assert program.generation == 2
        assert stats.generation == 2
        assert program.history[-1] is stats
        assert len(program.population) == default_config.population_size
        assert all(p.generation == 2 for p in program.population)
        assert len(program.realized_h2) == 1

    def test_environment_follows_scenario(
        self,
        default_config: SimulationConfig,
    ) -> None:
        program = BreedingProgram(config=default_config)
        program.advance(program.auto_select())
        assert program.env_variance == program.scenario.env_variance

    def test_rejected_selection_leaves_state(
        self,
        default_config: SimulationConfig,
    ) -> None:
        program = BreedingProgram(config=default_config)
        population = program.population
        history = list(program.history)
        with pytest.raises(InvalidSelectionError):
            program.advance(SelectionState({population[0].id}, 0.1))
        assert program.population is population
        assert program.history == history
        assert program.generation == 1

    def test_history_is_append_only(self, default_config: SimulationConfig) -> None:
        program = BreedingProgram(config=default_config)
        first = program.history[0]
        program.run(3)
        assert program.history[0] is first
        assert [s.generation for s in program.history] == [1, 2, 3, 4]

    def test_determinism(self) -> None:
        """Same seed must produce identical runs."""
        cfg = SimulationConfig(seed=777, population_size=16)
        a = BreedingProgram(config=cfg)
        a.run(5)
        b = BreedingProgram(config=cfg)
        b.run(5)
        assert a.history == b.history
        assert a.population == b.population

    def test_selection_raises_mean_yield(self) -> None:
        cfg = SimulationConfig(
            seed=5,
            population_size=60,
            selection_intensity=0.2,
            genomic_selection=True,
        )
        program = BreedingProgram(config=cfg)
        program.run(8)
        assert program.history[-1].mean_yield > program.history[0].mean_yield

    def test_curves_for_current_population(
        self,
        default_config: SimulationConfig,
    ) -> None:
        program = BreedingProgram(config=default_config)
        selection = program.auto_select()
        curves = program.curves(selection.selected_ids)
        assert curves.differential > 0
        assert len(curves.points) == default_config.curve_steps + 1

    def test_custom_provider(self, default_config: SimulationConfig) -> None:
        class Drought:
            def scenario(self, generation: int, rng: Generator) -> Scenario:
                return Scenario("Drought", 3.5)

            def analyze(
                self,
                history: Sequence[PopulationStats],
                generation: int,
                rng: Generator,
            ) -> str:
                return f"gen {generation}"

        program = BreedingProgram(config=default_config, provider=Drought())
        program.advance(program.auto_select())
        assert program.env_variance == 3.5
        assert program.note == "gen 2"

    def test_provider_does_not_change_genetics(
        self,
        default_config: SimulationConfig,
    ) -> None:
        class Fixed:
            def __init__(self, consume: int) -> None:
                self.consume = consume

            def scenario(self, generation: int, rng: Generator) -> Scenario:
                rng.random(self.consume)
                return Scenario("Fixed", 2.0)

            def analyze(
                self,
                history: Sequence[PopulationStats],
                generation: int,
                rng: Generator,
            ) -> str:
                return ""

        a = BreedingProgram(config=default_config, provider=Fixed(0))
        b = BreedingProgram(config=default_config, provider=Fixed(100))
        a.run(2)
        b.run(2)
        assert a.population == b.population


class TestScenarios:
    """Tests for the canned analysis provider."""

    def test_first_generation_is_baseline(self, rng: Generator) -> None:
        assert CannedAnalysisProvider().scenario(1, rng) == BASELINE_SCENARIO

    def test_later_scenarios_in_range(self, rng: Generator) -> None:
        provider = CannedAnalysisProvider()
        for gen in range(2, 50):
            scenario = provider.scenario(gen, rng)
            assert 0.8 <= scenario.env_variance <= 4.0

    def test_scenario_variance_clamped(self) -> None:
        assert Scenario("Flood", 9.0).env_variance == 4.0
        assert Scenario("Calm", 0.1).env_variance == 0.8

    def test_welcome_note_before_breeding(self, rng: Generator) -> None:
        assert CannedAnalysisProvider().analyze([], 1, rng) == WELCOME_NOTE

    def test_empty_tables_rejected(self) -> None:
        with pytest.raises(ValueError):
            CannedAnalysisProvider(scenarios=())


class TestSnapshots:
    """Tests for rounded visualisation payloads."""

    def test_plant_snapshot_rounds(self, make_plant: Callable[..., Plant]) -> None:
        plant = make_plant(
            "p",
            yield_=10.123456,
            genome=Genome.from_additive([2, 1, 0]),
        )
        snap = plant_snapshot(plant, selected=True)
        assert snap["phenotype"]["yield"] == 10.12
        assert snap["loci"] == [2, 1, 0]
        assert snap["heterozygosity"] == 0.333
        assert snap["is_selected"] is True
        # Engine values keep full precision.
        assert plant.phenotype.yield_ == 10.123456

    def test_stats_snapshot(self, default_config: SimulationConfig) -> None:
        program = BreedingProgram(config=default_config)
        snap = stats_snapshot(program.latest_stats)
        assert snap["generation"] == 1
        assert snap["mean_yield"] == round(program.latest_stats.mean_yield, 2)

    def test_curves_snapshot_without_selection(
        self,
        default_config: SimulationConfig,
    ) -> None:
        program = BreedingProgram(config=default_config)
        snap = curves_snapshot(program.curves())
        assert snap["trait"] == "yield"
        assert snap["selected_mean"] is None
        assert snap["differential"] == 0.0
        assert all(point["selected"] is None for point in snap["data"])


class TestCli:
    """Tests for ``python -m cornbreeder``."""

    def test_runs_and_prints_history(
        self,
        tmp_path: Path,
        capsys: pytest.CaptureFixture[str],
    ) -> None:
        cfg = tmp_path / "cfg.yaml"
        cfg.write_text("population_size: 10\n")
        assert main(["-c", str(cfg), "-g", "3", "--seed", "1"]) == 0
        out = capsys.readouterr().out
        rows = [line for line in out.splitlines() if line.strip()[:1].isdigit()]
        assert len(rows) == 4

    def test_bad_selection_exit_code(self, tmp_path: Path) -> None:
        cfg = tmp_path / "cfg.yaml"
        cfg.write_text("population_size: 4\n")
        # ceil(4 * 0.2) == 1 parent: not enough to breed.
        assert main(["-c", str(cfg), "-g", "1", "--intensity", "0.2"]) == 2

    def test_invalid_config_value_exit_code(
        self,
        tmp_path: Path,
        capsys: pytest.CaptureFixture[str],
    ) -> None:
        cfg = tmp_path / "cfg.yaml"
        cfg.write_text("population_size: 10\ncurve_steps: 0\n")
        assert main(["-c", str(cfg), "-g", "1"]) == 2
        assert "curve_steps" in capsys.readouterr().err

    def test_malformed_loci_exit_code(self, tmp_path: Path) -> None:
        cfg = tmp_path / "cfg.yaml"
        cfg.write_text("yield_loci: 3\n")
        assert main(["-c", str(cfg), "-g", "1"]) == 2


def test_seeded_generators_are_independent_of_numpy_global_state() -> None:
    np.random.seed(0)
    a = BreedingProgram(config=SimulationConfig(population_size=8))
    np.random.seed(1)
    b = BreedingProgram(config=SimulationConfig(population_size=8))
    assert a.population == b.population

"""Config: load breeding-program parameters from YAML files.

Every tunable constant (population size, genome layout, pleiotropic
loci, disease threshold, noise scales, crossover rate) lives in YAML and
is parsed into a typed dataclass here.  Nothing in the engine is
hardwired; ``genetic_model()`` turns the flat config into the validated
objects the engine functions take.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, fields
from pathlib import Path

import yaml

from cornbreeder.errors import ConfigurationError
from cornbreeder.genetics.loci import LociConfig
from cornbreeder.genetics.model import GeneticModel
from cornbreeder.genetics.phenotype import PhenotypeModel
from cornbreeder.simulation.scenarios import MAX_ENV_VARIANCE, MIN_ENV_VARIANCE

logger = logging.getLogger(__name__)


def _loci(value: object) -> tuple[int, ...] | None:
    if value is None:
        return None
    if not isinstance(value, (list, tuple)):
        msg = f"loci must be a list of integers, got {value!r}"
        raise ConfigurationError(msg)
    return tuple(int(v) for v in value)


@dataclass
class SimulationConfig:
    """Top-level breeding-program configuration.

    Attributes:
        seed: RNG seed for deterministic replay.
        population_size: Plants per generation (N).
        genome_length: Loci per genome (L).
        yield_loci: Primary Yield block; None means the first third of L.
        resistance_loci: Primary Resistance block; None means the second third.
        height_loci: Primary Height block; None means the last third.
        yield_resistance_loci: Loci trading yield alleles against resistance.
        height_yield_loci: Loci where height alleles add yield.
        disease_threshold: Resistance below which yield is penalised.
        disease_penalty_rate: Yield lost per unit of resistance shortfall.
        yield_noise_scale: Environmental noise multiplier for yield.
        resistance_noise_scale: Environmental noise multiplier for resistance.
        height_noise_scale: Environmental noise multiplier for height.
        crossover_rate: Adjacent-swap probability during meiosis.
        initial_env_variance: Environmental spread for the founders, within
            the scenario range.
        selection_intensity: Fraction kept by truncation auto-selection.
        genomic_selection: Rank on breeding values instead of phenotypes.
        selfing_retries: Redraws of the second parent to avoid selfing.
        curve_steps: Grid intervals for selection-differential curves.
    """

    seed: int = 42
    population_size: int = 40
    genome_length: int = 30

    # Trait blocks and pleiotropy
    yield_loci: tuple[int, ...] | None = None
    resistance_loci: tuple[int, ...] | None = None
    height_loci: tuple[int, ...] | None = None
    yield_resistance_loci: tuple[int, ...] = (8, 9)
    height_yield_loci: tuple[int, ...] = (20, 21)

    # Disease threshold and environment
    disease_threshold: float = 8.0
    disease_penalty_rate: float = 0.8
    yield_noise_scale: float = 1.0
    resistance_noise_scale: float = 0.5
    height_noise_scale: float = 0.3
    initial_env_variance: float = 2.0

    # Meiosis and mating
    crossover_rate: float = 0.1
    selfing_retries: int = 5

    # Selection
    selection_intensity: float = 0.2
    genomic_selection: bool = False
    curve_steps: int = 50

    @classmethod
    def from_yaml(cls, path: str | Path) -> SimulationConfig:
        """Load configuration from a YAML file.

        Missing keys keep their defaults; unknown keys are logged and
        ignored.

        Args:
            path: Path to the YAML config file.

        Returns:
            A populated SimulationConfig instance.

        Raises:
            FileNotFoundError: If the config file does not exist.
            ConfigurationError: If a loci entry is not a list.
        """
        path = Path(path)
        with path.open("r") as f:
            data = yaml.safe_load(f) or {}

        known = {f.name for f in fields(cls)}
        unknown = sorted(set(data) - known)
        if unknown:
            logger.warning("Ignoring unknown config keys in %s: %s", path, unknown)

        return cls(
            seed=data.get("seed", cls.seed),
            population_size=data.get("population_size", cls.population_size),
            genome_length=data.get("genome_length", cls.genome_length),
            yield_loci=_loci(data.get("yield_loci")),
            resistance_loci=_loci(data.get("resistance_loci")),
            height_loci=_loci(data.get("height_loci")),
            yield_resistance_loci=_loci(
                data.get("yield_resistance_loci", cls.yield_resistance_loci),
            )
            or (),
            height_yield_loci=_loci(
                data.get("height_yield_loci", cls.height_yield_loci),
            )
            or (),
            disease_threshold=data.get("disease_threshold", cls.disease_threshold),
            disease_penalty_rate=data.get(
                "disease_penalty_rate",
                cls.disease_penalty_rate,
            ),
            yield_noise_scale=data.get("yield_noise_scale", cls.yield_noise_scale),
            resistance_noise_scale=data.get(
                "resistance_noise_scale",
                cls.resistance_noise_scale,
            ),
            height_noise_scale=data.get("height_noise_scale", cls.height_noise_scale),
            initial_env_variance=data.get(
                "initial_env_variance",
                cls.initial_env_variance,
            ),
            crossover_rate=data.get("crossover_rate", cls.crossover_rate),
            selfing_retries=data.get("selfing_retries", cls.selfing_retries),
            selection_intensity=data.get(
                "selection_intensity",
                cls.selection_intensity,
            ),
            genomic_selection=data.get("genomic_selection", cls.genomic_selection),
            curve_steps=data.get("curve_steps", cls.curve_steps),
        )

    def loci_config(self) -> LociConfig:
        """Build the trait-to-loci mapping.

        Trait blocks left as None fall back to the equal three-way split
        of ``genome_length``.

        Raises:
            ConfigurationError: If any index falls outside the genome.
        """
        blocks = (self.yield_loci, self.resistance_loci, self.height_loci)
        if any(given is None for given in blocks):
            split = LociConfig.partitioned(
                self.genome_length,
                yield_resistance_loci=(),
                height_yield_loci=(),
            )
            blocks = tuple(
                given if given is not None else default
                for given, default in zip(
                    blocks,
                    (split.yield_loci, split.resistance_loci, split.height_loci),
                    strict=True,
                )
            )
        yield_loci, resistance_loci, height_loci = blocks
        return LociConfig(
            length=self.genome_length,
            yield_loci=yield_loci,
            resistance_loci=resistance_loci,
            height_loci=height_loci,
            yield_resistance_loci=self.yield_resistance_loci,
            height_yield_loci=self.height_yield_loci,
        )

    def phenotype_model(self) -> PhenotypeModel:
        """Build the environmental-noise and disease-threshold model."""
        return PhenotypeModel(
            disease_threshold=self.disease_threshold,
            disease_penalty_rate=self.disease_penalty_rate,
            yield_noise_scale=self.yield_noise_scale,
            resistance_noise_scale=self.resistance_noise_scale,
            height_noise_scale=self.height_noise_scale,
        )

    def genetic_model(self) -> GeneticModel:
        """Build and validate the full GeneticModel.

        Raises:
            ConfigurationError: If any parameter is out of range.
        """
        if self.population_size < 1:
            msg = f"population_size must be >= 1, got {self.population_size}"
            raise ConfigurationError(msg)
        if self.selfing_retries < 0:
            msg = f"selfing_retries must be >= 0, got {self.selfing_retries}"
            raise ConfigurationError(msg)
        if not 0.0 < self.selection_intensity <= 1.0:
            msg = (
                "selection_intensity must be in (0, 1], "
                f"got {self.selection_intensity}"
            )
            raise ConfigurationError(msg)
        if self.curve_steps < 1:
            msg = f"curve_steps must be >= 1, got {self.curve_steps}"
            raise ConfigurationError(msg)
        if not MIN_ENV_VARIANCE <= self.initial_env_variance <= MAX_ENV_VARIANCE:
            msg = (
                f"initial_env_variance must be in [{MIN_ENV_VARIANCE}, "
                f"{MAX_ENV_VARIANCE}], got {self.initial_env_variance}"
            )
            raise ConfigurationError(msg)
        return GeneticModel(
            loci=self.loci_config(),
            phenotype=self.phenotype_model(),
            crossover_rate=self.crossover_rate,
        )

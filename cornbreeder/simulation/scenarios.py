"""Scenarios and breeder's notes: the program's narrative collaborator.

Each generation grows under a *scenario* that sets its environmental
variance (drought and pest outbreaks make phenotypes noisier, so
heritability drops).  After breeding, a short note comments on the
response to selection.

The engine never talks to a provider; :class:`BreedingProgram` receives
one explicitly.  ``CannedAnalysisProvider`` is the offline provider that
picks from fixed tables using the program's seeded generator.
"""

from __future__ import annotations

from collections.abc import Sequence
from dataclasses import dataclass
from typing import TYPE_CHECKING, Protocol

if TYPE_CHECKING:
    from numpy.random import Generator

    from cornbreeder.analysis.statistics import PopulationStats

MIN_ENV_VARIANCE = 0.8
MAX_ENV_VARIANCE = 4.0


@dataclass(frozen=True)
class Scenario:
    """Growing conditions for one generation.

    Attributes:
        description: Short description of the conditions.
        env_variance: Environmental spread, clamped to
            ``[MIN_ENV_VARIANCE, MAX_ENV_VARIANCE]``.
    """

    description: str
    env_variance: float

    def __post_init__(self) -> None:
        """Clamp the variance into the supported range."""
        clamped = min(MAX_ENV_VARIANCE, max(MIN_ENV_VARIANCE, float(self.env_variance)))
        object.__setattr__(self, "env_variance", clamped)


BASELINE_SCENARIO = Scenario("Normal growing conditions - establishing baseline", 1.5)

SCENARIOS: tuple[Scenario, ...] = (
    Scenario("Normal growing conditions", 1.5),
    Scenario("Mild drought stress - reduced water availability", 2.5),
    Scenario("Nitrogen deficiency in soil", 2.2),
    Scenario("Fall Armyworm outbreak detected", 3.0),
    Scenario("Optimal GxE interaction - ideal weather", 1.0),
    Scenario("Heat wave during flowering stage", 2.8),
    Scenario("Heavy rainfall - waterlogging risk", 2.0),
    Scenario("Fungal rust disease pressure", 2.6),
    Scenario("Early frost warning", 3.5),
    Scenario("Excellent pollination conditions", 1.2),
)

WELCOME_NOTE = (
    "This is the founder population. Genetic variance is high. Select the "
    "best plants to begin; remember that Phenotype = Genotype + Environment."
)

NOTES: tuple[str, ...] = (
    "Selection differential appears positive. Monitor variance depletion.",
    "Genetic gain observed. Consider the Bulmer effect on variance reduction.",
    "Phenotypic response noted. Heritability estimates stable.",
    "Progress toward breeding objective. Watch for linkage drag.",
    "Selection intensity adequate. Maintain effective population size.",
    "Favourable allele frequency increasing. Avoid excessive inbreeding.",
    "Response to selection within expected range for h2 estimates.",
    "Truncation selection effective. Consider index selection for multiple traits.",
)


class AnalysisProvider(Protocol):
    """Supplies scenarios and notes to a breeding program."""

    def scenario(self, generation: int, rng: Generator) -> Scenario:
        """Growing conditions for ``generation``."""
        ...

    def analyze(
        self,
        history: Sequence[PopulationStats],
        generation: int,
        rng: Generator,
    ) -> str:
        """A short note on the run so far, ending at ``generation``."""
        ...


class CannedAnalysisProvider:
    """Offline provider drawing from fixed scenario and note tables."""

    def __init__(
        self,
        scenarios: Sequence[Scenario] = SCENARIOS,
        notes: Sequence[str] = NOTES,
    ) -> None:
        """Initialise with the tables to draw from.

        Args:
            scenarios: Candidate scenarios (non-empty).
            notes: Candidate notes (non-empty).

        Raises:
            ValueError: If either table is empty.
        """
        if not scenarios or not notes:
            msg = "scenario and note tables must not be empty"
            raise ValueError(msg)
        self.scenarios = tuple(scenarios)
        self.notes = tuple(notes)

    def scenario(self, generation: int, rng: Generator) -> Scenario:
        """Baseline for the first generation, otherwise a random scenario."""
        if generation <= 1:
            return BASELINE_SCENARIO
        return self.scenarios[int(rng.integers(len(self.scenarios)))]

    def analyze(
        self,
        history: Sequence[PopulationStats],
        generation: int,
        rng: Generator,
    ) -> str:
        """Welcome note before any breeding, then a random canned note."""
        if generation < 2 or len(history) < 2:
            return WELCOME_NOTE
        return self.notes[int(rng.integers(len(self.notes)))]

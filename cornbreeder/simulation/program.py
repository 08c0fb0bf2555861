"""BreedingProgram: the select / breed / summarise loop.

Owns everything the engine functions deliberately do not: the current
population, the generation counter, the append-only stats history, the
current scenario, and the random generators.  One generation advance
follows a fixed order:

1. Resolve the selection to parent plants (at least two).
2. Ask the analysis provider for the next generation's scenario.
3. Breed N offspring under that scenario's environmental variance.
4. Summarise the new population and append it to the history.
5. Swap in the new population and ask the provider for a note.

State is only replaced once steps 1-4 have succeeded, so a rejected
selection leaves the program exactly as it was.
"""

from __future__ import annotations

import logging
from collections.abc import Collection
from dataclasses import dataclass, field, replace

import numpy as np
from numpy.random import Generator

from cornbreeder.analysis.selection import SelectionCurves, build_curves
from cornbreeder.analysis.statistics import (
    PopulationStats,
    realized_heritability,
    summarize,
)
from cornbreeder.errors import InvalidSelectionError
from cornbreeder.genetics.model import GeneticModel
from cornbreeder.genetics.traits import Trait
from cornbreeder.population.manager import (
    Population,
    SelectionState,
    advance_generation,
    create_initial_population,
    parents_from_selection,
    select_top,
)
from cornbreeder.simulation.config import SimulationConfig
from cornbreeder.simulation.scenarios import (
    BASELINE_SCENARIO,
    AnalysisProvider,
    CannedAnalysisProvider,
    Scenario,
)

logger = logging.getLogger(__name__)


@dataclass
class BreedingProgram:
    """Drives a recurrent-selection run generation by generation.

    Attributes:
        config: Loaded breeding-program configuration.
        provider: Source of scenarios and notes.
        model: Validated genetic model built from ``config``.
        rng: Generator for all genetic randomness.
        narrative_rng: Separate generator handed to ``provider``.
        generation: Current generation number (founders are 1).
        population: Current population snapshot.
        history: One PopulationStats per generation, oldest first.
        scenario: Conditions the current population grew under.
        env_variance: Environmental spread of the current population.
        note: Latest note from the provider.
        realized_h2: ``R / S`` per advance, None where ``S`` was 0.
    """

    config: SimulationConfig
    provider: AnalysisProvider = field(default_factory=CannedAnalysisProvider)
    model: GeneticModel = field(init=False)
    rng: Generator = field(init=False, repr=False)
    narrative_rng: Generator = field(init=False, repr=False)
    generation: int = field(init=False, default=1)
    population: Population = field(init=False, default=(), repr=False)
    history: list[PopulationStats] = field(init=False, default_factory=list)
    scenario: Scenario = field(init=False, default=BASELINE_SCENARIO)
    env_variance: float = field(init=False, default=0.0)
    note: str = field(init=False, default="")
    realized_h2: list[float | None] = field(init=False, default_factory=list)

    def __post_init__(self) -> None:
        """Validate the config, seed the generators, and grow the founders."""
        self.model = self.config.genetic_model()
        genetic_seed, narrative_seed = np.random.SeedSequence(self.config.seed).spawn(2)
        self.rng = np.random.default_rng(genetic_seed)
        self.narrative_rng = np.random.default_rng(narrative_seed)

        self.scenario = replace(
            BASELINE_SCENARIO,
            env_variance=self.config.initial_env_variance,
        )
        self.env_variance = self.scenario.env_variance
        self.population = create_initial_population(
            self.config.population_size,
            self.env_variance,
            self.rng,
            self.model,
            generation=self.generation,
        )
        self.history.append(summarize(self.population, self.generation))
        self.note = self.provider.analyze(
            self.history,
            self.generation,
            self.narrative_rng,
        )
        logger.info(
            "Founders ready: n=%d, mean_yield=%.2f",
            len(self.population),
            self.history[-1].mean_yield,
        )

    @property
    def latest_stats(self) -> PopulationStats:
        """Stats of the current generation."""
        return self.history[-1]

    def auto_select(
        self,
        intensity: float | None = None,
        trait: Trait | str = Trait.YIELD,
        *,
        genomic: bool | None = None,
    ) -> SelectionState:
        """Truncation-select the current population.

        Args:
            intensity: Fraction to keep; defaults to the config value.
            trait: Trait to rank on.
            genomic: Rank on breeding values; defaults to the config value.

        Returns:
            The selection.
        """
        return select_top(
            self.population,
            self.config.selection_intensity if intensity is None else intensity,
            trait,
            use_breeding_value=(
                self.config.genomic_selection if genomic is None else genomic
            ),
        )

    def curves(
        self,
        selected_ids: Collection[str] = (),
        trait: Trait | str = Trait.YIELD,
    ) -> SelectionCurves:
        """Selection-differential curves for the current population."""
        return build_curves(
            self.population,
            selected_ids,
            trait,
            steps=self.config.curve_steps,
        )

    def advance(self, selection: SelectionState) -> PopulationStats:
        """Breed the next generation from the selected parents.

        Args:
            selection: Parents chosen from the current population.

        Returns:
            Stats of the new generation.

        Raises:
            InvalidSelectionError: If fewer than two known plants are selected.
        """
        parents = parents_from_selection(self.population, selection)
        if len(parents) < 2:
            msg = f"select at least 2 parents to breed, got {len(parents)}"
            raise InvalidSelectionError(msg)
        differential = self.curves(selection.selected_ids).differential
        next_generation = self.generation + 1
        scenario = self.provider.scenario(next_generation, self.narrative_rng)

        offspring = advance_generation(
            parents,
            self.generation,
            scenario.env_variance,
            self.rng,
            self.model,
            self.config.population_size,
            selfing_retries=self.config.selfing_retries,
        )
        stats = summarize(offspring, next_generation)

        response = stats.mean_yield - self.latest_stats.mean_yield
        self.realized_h2.append(realized_heritability(response, differential))
        self.population = offspring
        self.generation = next_generation
        self.scenario = scenario
        self.env_variance = scenario.env_variance
        self.history.append(stats)
        self.note = self.provider.analyze(
            self.history,
            self.generation,
            self.narrative_rng,
        )

        logger.info(
            "Generation %d (%s): parents=%d, S=%.2f, R=%.2f, mean_yield=%.2f, het=%.3f",
            self.generation,
            scenario.description,
            len(parents),
            differential,
            response,
            stats.mean_yield,
            stats.heterozygosity,
        )
        return stats

    def run(self, generations: int) -> list[PopulationStats]:
        """Advance ``generations`` times using auto-selection.

        Args:
            generations: Number of generations to breed.

        Returns:
            The full stats history.
        """
        for _ in range(generations):
            self.advance(self.auto_select())
        return self.history

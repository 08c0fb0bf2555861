"""Population management: founders, selection, and generation turnover.

A population is a tuple of exactly N plants.  Advancing a generation
never edits the old tuple; it builds a new one from the chosen parents
by random mating.
"""

from __future__ import annotations

import logging
import math
from collections.abc import Iterable, Sequence
from dataclasses import dataclass
from typing import TYPE_CHECKING

from cornbreeder.errors import ConfigurationError, InvalidSelectionError
from cornbreeder.genetics.genome import random_genome
from cornbreeder.genetics.traits import Trait
from cornbreeder.population.cross import cross
from cornbreeder.population.plant import Plant, evaluate_plant, plant_id

if TYPE_CHECKING:
    from numpy.random import Generator

    from cornbreeder.genetics.model import GeneticModel

logger = logging.getLogger(__name__)

Population = tuple[Plant, ...]

DEFAULT_SELFING_RETRIES = 5


@dataclass(frozen=True)
class SelectionState:
    """Which plants the breeder picked, and at what intensity.

    Attributes:
        selected_ids: Ids of the chosen parents.
        intensity: Fraction of the population the breeder aimed to keep.
    """

    selected_ids: frozenset[str] = frozenset()
    intensity: float = 1.0

    def __post_init__(self) -> None:
        """Accept any iterable of ids."""
        object.__setattr__(self, "selected_ids", frozenset(self.selected_ids))

    def __len__(self) -> int:
        return len(self.selected_ids)

    def __contains__(self, item: object) -> bool:
        return item in self.selected_ids


def create_initial_population(
    n: int,
    env_variance: float,
    rng: Generator,
    model: GeneticModel,
    *,
    generation: int = 1,
) -> Population:
    """Build the founder population from random genomes.

    Args:
        n: Population size N.
        env_variance: Environmental spread for the founders.
        rng: Seeded random generator.
        model: Genetic parameters.
        generation: Generation number for the founders.

    Returns:
        A tuple of ``n`` evaluated founders.

    Raises:
        ConfigurationError: If ``n < 1``.
    """
    if n < 1:
        msg = f"population size must be >= 1, got {n}"
        raise ConfigurationError(msg)

    founders = tuple(
        evaluate_plant(
            random_genome(model.genome_length, rng),
            generation,
            env_variance,
            rng,
            model,
            id=plant_id(generation, slot),
        )
        for slot in range(n)
    )
    logger.debug(
        "Founder population: n=%d, loci=%d, env_variance=%.3f",
        n,
        model.genome_length,
        env_variance,
    )
    return founders


def advance_generation(
    parents: Sequence[Plant],
    current_generation: int,
    env_variance: float,
    rng: Generator,
    model: GeneticModel,
    n: int,
    *,
    selfing_retries: int = DEFAULT_SELFING_RETRIES,
) -> Population:
    """Breed the next generation by random mating among ``parents``.

    For each of ``n`` offspring two parents are drawn uniformly with
    replacement.  If both draws hit the same plant, the second parent is
    redrawn up to ``selfing_retries`` times; selfing is therefore rare
    but still possible.

    Args:
        parents: Selected parent plants (at least two).
        current_generation: Generation the parents belong to.
        env_variance: Environmental spread the offspring grow in.
        rng: Seeded random generator.
        model: Genetic parameters.
        n: Number of offspring (the fixed population size N).
        selfing_retries: Maximum redraws of the second parent.

    Returns:
        A tuple of exactly ``n`` offspring, tagged
        ``current_generation + 1``.

    Raises:
        InvalidSelectionError: If fewer than two parents are given.
        ConfigurationError: If ``n < 1``.
    """
    if len(parents) < 2:
        msg = f"select at least 2 parents to breed, got {len(parents)}"
        raise InvalidSelectionError(msg)
    if n < 1:
        msg = f"population size must be >= 1, got {n}"
        raise ConfigurationError(msg)

    generation = current_generation + 1
    k = len(parents)
    offspring: list[Plant] = []
    selfed = 0
    for slot in range(n):
        p1 = parents[int(rng.integers(k))]
        p2 = parents[int(rng.integers(k))]
        attempts = 0
        while p1.id == p2.id and attempts < selfing_retries:
            p2 = parents[int(rng.integers(k))]
            attempts += 1
        if p1.id == p2.id:
            selfed += 1

        offspring.append(
            cross(
                p1,
                p2,
                generation,
                env_variance,
                rng,
                model,
                plant_id=plant_id(generation, slot),
            )
        )

    logger.debug(
        "Generation %d bred from %d parents: n=%d, selfed=%d",
        generation,
        k,
        n,
        selfed,
    )
    return tuple(offspring)


def _ranking_value(plant: Plant, trait: Trait, *, use_breeding_value: bool) -> float:
    source = plant.breeding_value if use_breeding_value else plant.phenotype
    return source.get(trait)


def select_top(
    population: Sequence[Plant],
    intensity: float,
    trait: Trait | str = Trait.YIELD,
    *,
    use_breeding_value: bool = False,
) -> SelectionState:
    """Truncation selection: keep the best ``ceil(N * intensity)`` plants.

    With ``use_breeding_value`` the ranking uses true genetic values
    (genomic selection); otherwise it uses phenotypes, noise included.

    Args:
        population: Plants to rank.
        intensity: Fraction to keep, in ``(0, 1]``.
        trait: Trait to rank on.
        use_breeding_value: Rank by breeding value instead of phenotype.

    Returns:
        The resulting SelectionState.

    Raises:
        InvalidSelectionError: If ``intensity`` is outside ``(0, 1]``.
    """
    if not 0.0 < intensity <= 1.0:
        msg = f"selection intensity must be in (0, 1], got {intensity}"
        raise InvalidSelectionError(msg)

    trait = Trait.parse(trait)
    count = math.ceil(len(population) * intensity)
    ranked = sorted(
        population,
        key=lambda p: _ranking_value(p, trait, use_breeding_value=use_breeding_value),
        reverse=True,
    )
    return SelectionState(
        selected_ids=frozenset(p.id for p in ranked[:count]),
        intensity=intensity,
    )


def parents_from_selection(
    population: Iterable[Plant],
    selection: SelectionState,
) -> list[Plant]:
    """Resolve selected ids to plants, in population order.

    Args:
        population: Current population.
        selection: The breeder's selection.

    Returns:
        The selected plants.

    Raises:
        InvalidSelectionError: If an id is not in ``population``.
    """
    parents = [p for p in population if p.id in selection.selected_ids]
    missing = selection.selected_ids - {p.id for p in parents}
    if missing:
        msg = f"selected ids not in population: {sorted(missing)}"
        raise InvalidSelectionError(msg)
    return parents

"""Crossing two parents into one offspring."""

from __future__ import annotations

from typing import TYPE_CHECKING

from cornbreeder.errors import ConfigurationError
from cornbreeder.genetics.meiosis import fertilize, make_gamete
from cornbreeder.population.plant import Plant, evaluate_plant

if TYPE_CHECKING:
    from numpy.random import Generator

    from cornbreeder.genetics.model import GeneticModel


def cross(
    parent1: Plant,
    parent2: Plant,
    generation: int,
    env_variance: float,
    rng: Generator,
    model: GeneticModel,
    *,
    plant_id: str,
) -> Plant:
    """Produce one offspring from two parents.

    Each parent contributes a gamete; the first parent's becomes the
    maternal set and the second's the paternal set.  The zygote is then
    evaluated like any founder.

    Args:
        parent1: Seed parent.
        parent2: Pollen parent (may be ``parent1`` itself).
        generation: Generation to tag the offspring with.
        env_variance: Environmental spread the offspring grows in.
        rng: Seeded random generator.
        model: Genetic parameters.
        plant_id: Identifier for the offspring.

    Returns:
        The evaluated offspring Plant.

    Raises:
        ConfigurationError: If the parents' genomes differ in length.
    """
    if len(parent1.genome) != len(parent2.genome):
        msg = (
            f"cannot cross {parent1.id} ({len(parent1.genome)} loci) with "
            f"{parent2.id} ({len(parent2.genome)} loci)"
        )
        raise ConfigurationError(msg)

    maternal = make_gamete(parent1.genome, rng, model.crossover_rate)
    paternal = make_gamete(parent2.genome, rng, model.crossover_rate)
    zygote = fertilize(maternal, paternal)
    return evaluate_plant(zygote, generation, env_variance, rng, model, id=plant_id)

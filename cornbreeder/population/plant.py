"""Plant: one evaluated individual in a population snapshot.

A Plant bundles its genome with the breeding value and phenotype that
were computed when it was created.  Plants are frozen; a new generation
is made of new Plant objects, never of edited ones.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING

from cornbreeder.genetics.breeding_value import BreedingValue, compute_breeding_value
from cornbreeder.genetics.phenotype import Phenotype, evaluate_phenotype

if TYPE_CHECKING:
    from numpy.random import Generator

    from cornbreeder.genetics.genome import Genome
    from cornbreeder.genetics.model import GeneticModel

# Plants above this heterozygosity are flagged for the genome view.
HETEROZYGOUS_FLAG_THRESHOLD = 0.4


def plant_id(generation: int, slot: int) -> str:
    """Identifier for the plant in ``slot`` of ``generation``."""
    return f"gen{generation}-{slot:03d}"


@dataclass(frozen=True)
class Plant:
    """An evaluated individual.

    Attributes:
        id: Unique within its population, e.g. ``"gen3-017"``.
        generation: Generation the plant was born in.
        genome: Diploid genome.
        breeding_value: Noise-free genetic values.
        phenotype: Observed values for the environment it grew in.
    """

    id: str
    generation: int
    genome: Genome
    breeding_value: BreedingValue
    phenotype: Phenotype

    @property
    def heterozygosity(self) -> float:
        """Fraction of heterozygous loci."""
        return self.genome.heterozygosity

    @property
    def is_heterozygous(self) -> bool:
        """True if heterozygosity exceeds ``HETEROZYGOUS_FLAG_THRESHOLD``."""
        return self.heterozygosity > HETEROZYGOUS_FLAG_THRESHOLD


def evaluate_plant(
    genome: Genome,
    generation: int,
    env_variance: float,
    rng: Generator,
    model: GeneticModel,
    *,
    id: str,  # noqa: A002
) -> Plant:
    """Compute breeding value and phenotype for a genome and wrap it.

    Args:
        genome: The new individual's genome.
        generation: Generation to tag the plant with.
        env_variance: Environmental spread for this generation.
        rng: Seeded random generator.
        model: Genetic parameters.
        id: Identifier for the plant.

    Returns:
        A frozen Plant.
    """
    breeding_value = compute_breeding_value(genome, model.loci)
    phenotype = evaluate_phenotype(breeding_value, env_variance, rng, model.phenotype)
    return Plant(
        id=id,
        generation=generation,
        genome=genome,
        breeding_value=breeding_value,
        phenotype=phenotype,
    )

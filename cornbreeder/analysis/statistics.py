"""Population statistics: one summary record per generation.

Also estimates heritability two ways:

- :func:`heritability` compares breeding-value and phenotypic variance
  within one population (the model is purely additive, so this is h²).
- :func:`realized_heritability` uses the breeder's equation
  ``R = h² S`` after the fact: response over selection differential.
"""

from __future__ import annotations

from collections.abc import Sequence
from dataclasses import dataclass
from typing import TYPE_CHECKING

import numpy as np

from cornbreeder.genetics.traits import Trait

if TYPE_CHECKING:
    from cornbreeder.population.plant import Plant


@dataclass(frozen=True)
class PopulationStats:
    """Summary of one generation's population.

    Attributes:
        generation: Generation number.
        size: Number of plants.
        mean_yield: Mean yield phenotype.
        var_yield: Population (divide-by-N) variance of yield phenotype.
        max_yield: Best yield phenotype.
        mean_resistance: Mean resistance phenotype.
        mean_height: Mean height phenotype.
        heterozygosity: Mean per-plant fraction of heterozygous loci.
        heritability: ``Var(BV) / Var(P)`` for yield.
    """

    generation: int
    size: int
    mean_yield: float
    var_yield: float
    max_yield: float
    mean_resistance: float
    mean_height: float
    heterozygosity: float
    heritability: float


def _phenotypes(population: Sequence[Plant], trait: Trait) -> np.ndarray:
    return np.array([p.phenotype.get(trait) for p in population], dtype=np.float64)


def heritability(
    population: Sequence[Plant],
    trait: Trait | str = Trait.YIELD,
) -> float:
    """Share of phenotypic variance explained by breeding values.

    Args:
        population: Plants to analyse.
        trait: Trait to analyse.

    Returns:
        ``Var(BV) / Var(P)`` clipped to ``[0, 1]``; 0.0 if the phenotype
        does not vary.
    """
    trait = Trait.parse(trait)
    phenotypic = float(np.var(_phenotypes(population, trait)))
    if phenotypic <= 0.0:
        return 0.0
    genetic = float(np.var([p.breeding_value.get(trait) for p in population]))
    return min(1.0, max(0.0, genetic / phenotypic))


def realized_heritability(response: float, differential: float) -> float | None:
    """Heritability implied by an observed response to selection.

    Args:
        response: Change in mean between parent and offspring generation (R).
        differential: Selection differential applied to the parents (S).

    Returns:
        ``R / S``, or None when no selection pressure was applied.
    """
    if differential == 0:
        return None
    return response / differential


def summarize(population: Sequence[Plant], generation: int) -> PopulationStats:
    """Aggregate a population into a PopulationStats record.

    Args:
        population: The generation's plants (read, never modified).
        generation: Generation number to record.

    Returns:
        The summary record.

    Raises:
        ValueError: If ``population`` is empty.
    """
    if not population:
        msg = "cannot summarize an empty population"
        raise ValueError(msg)

    yields = _phenotypes(population, Trait.YIELD)
    return PopulationStats(
        generation=generation,
        size=len(population),
        mean_yield=float(yields.mean()),
        var_yield=float(yields.var()),
        max_yield=float(yields.max()),
        mean_resistance=float(_phenotypes(population, Trait.RESISTANCE).mean()),
        mean_height=float(_phenotypes(population, Trait.HEIGHT).mean()),
        heterozygosity=float(np.mean([p.heterozygosity for p in population])),
        heritability=heritability(population, Trait.YIELD),
    )

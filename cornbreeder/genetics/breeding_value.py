"""Breeding values: noise-free genetic value computed from a genome.

Purely additive: each trait sums the 0/1/2 dosages over its primary
block, then the two pleiotropic linkages shift Resistance and Yield.
No randomness is involved, so the same genome always yields the same
breeding value.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING

from cornbreeder.errors import ConfigurationError
from cornbreeder.genetics.traits import TraitValues

if TYPE_CHECKING:
    from cornbreeder.genetics.genome import Genome
    from cornbreeder.genetics.loci import LociConfig


@dataclass(frozen=True)
class BreedingValue(TraitValues):
    """Genotype-only trait values (yield/resistance >= 0, height >= floor)."""


def compute_breeding_value(genome: Genome, loci: LociConfig) -> BreedingValue:
    """Map a genome to its per-trait breeding values.

    Steps:

    1. Sum dosages over the Yield, Resistance and Height blocks.
    2. Subtract ``resistance_cost * dosage`` of every Yield-Resistance
       locus from Resistance.
    3. Add ``yield_bonus * dosage`` of every Height-Yield locus to Yield.
    4. Clamp Yield and Resistance at 0; Height becomes
       ``max(height_floor, sum + height_offset)``.

    Args:
        genome: The individual's genome.
        loci: Trait-to-loci mapping and model coefficients.

    Returns:
        The BreedingValue for ``genome``.

    Raises:
        ConfigurationError: If the genome length does not match ``loci``.
    """
    if len(genome) != loci.length:
        msg = f"genome has {len(genome)} loci, loci config expects {loci.length}"
        raise ConfigurationError(msg)

    dosage = genome.additive
    yield_g = float(dosage[list(loci.yield_loci)].sum())
    resistance_g = float(dosage[list(loci.resistance_loci)].sum())
    height_g = float(dosage[list(loci.height_loci)].sum())

    resistance_g -= loci.resistance_cost * float(
        dosage[list(loci.yield_resistance_loci)].sum()
    )
    yield_g += loci.yield_bonus * float(dosage[list(loci.height_yield_loci)].sum())

    return BreedingValue(
        yield_=max(0.0, yield_g),
        resistance=max(0.0, resistance_g),
        height=max(loci.height_floor, height_g + loci.height_offset),
    )

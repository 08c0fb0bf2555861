"""Meiosis and fertilisation.

Gamete formation is a two-step approximation:

1. **Independent assortment**: every locus independently passes on the
   maternal or the paternal allele with probability 0.5.
2. **Adjacent swap recombination**: walking the gamete left to right,
   each neighbouring pair ``(i, i + 1)`` is swapped with probability
   ``crossover_rate``.  Swaps are applied in sequence, so one allele can
   be carried several positions by consecutive swaps.

Step 2 is a teaching simplification, not a map-distance crossover model.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

import numpy as np
from numpy.typing import NDArray

from cornbreeder.errors import ConfigurationError
from cornbreeder.genetics.genome import Genome

if TYPE_CHECKING:
    from numpy.random import Generator

DEFAULT_CROSSOVER_RATE = 0.10


def make_gamete(
    genome: Genome,
    rng: Generator,
    crossover_rate: float = DEFAULT_CROSSOVER_RATE,
) -> NDArray[np.uint8]:
    """Derive one haploid gamete from a diploid genome.

    Args:
        genome: Parent genome.
        rng: Seeded random generator.
        crossover_rate: Probability of swapping each adjacent pair.

    Returns:
        Array of ``len(genome)`` alleles (0/1).

    Raises:
        ConfigurationError: If ``crossover_rate`` is outside ``[0, 1]``.
    """
    if not 0.0 <= crossover_rate <= 1.0:
        msg = f"crossover_rate must be in [0, 1], got {crossover_rate}"
        raise ConfigurationError(msg)

    n = len(genome)
    from_maternal = rng.random(n) < 0.5
    gamete = np.where(from_maternal, genome.maternal, genome.paternal).astype(np.uint8)

    if n > 1:
        swaps = rng.random(n - 1) < crossover_rate
        # Sequential on purpose: a swap at i sees the result of a swap at i - 1.
        for i in np.flatnonzero(swaps):
            gamete[i], gamete[i + 1] = gamete[i + 1], gamete[i]

    return gamete


def fertilize(
    maternal_gamete: NDArray[np.uint8],
    paternal_gamete: NDArray[np.uint8],
) -> Genome:
    """Join two gametes position by position into a zygote genome.

    Args:
        maternal_gamete: Gamete from the first parent.
        paternal_gamete: Gamete from the second parent.

    Returns:
        The zygote Genome.

    Raises:
        ConfigurationError: If the gametes differ in length.
    """
    if len(maternal_gamete) != len(paternal_gamete):
        msg = (
            f"cannot fertilize gametes of different lengths "
            f"({len(maternal_gamete)} != {len(paternal_gamete)})"
        )
        raise ConfigurationError(msg)
    return Genome(maternal=maternal_gamete, paternal=paternal_gamete)

"""Genome: the diploid allele pairs of one individual.

Each locus carries a maternal and a paternal allele, both 0 or 1.  The
*additive* dosage ``maternal + paternal`` (0, 1 or 2) is what trait sums
use; it is always derived from the allele pair and never stored on its
own.  Genomes are immutable: their arrays are flagged read-only and new
genomes only come from :func:`random_genome` (founders) or from
meiosis + fertilisation.
"""

from __future__ import annotations

from collections.abc import Sequence
from dataclasses import dataclass
from typing import TYPE_CHECKING

import numpy as np
from numpy.typing import NDArray

from cornbreeder.errors import ConfigurationError

if TYPE_CHECKING:
    from numpy.random import Generator


def _frozen_alleles(
    values: Sequence[int] | NDArray[np.integer],
    label: str,
) -> NDArray[np.uint8]:
    arr = np.array(values, dtype=np.int64).ravel()
    if arr.size and (arr.min() < 0 or arr.max() > 1):
        msg = f"{label} alleles must be 0 or 1"
        raise ConfigurationError(msg)
    out = arr.astype(np.uint8)
    out.flags.writeable = False
    return out


@dataclass(frozen=True, eq=False)
class Genome:
    """A fixed-length sequence of allele pairs.

    Attributes:
        maternal: Allele inherited from the first (seed) parent, per locus.
        paternal: Allele inherited from the second (pollen) parent, per locus.
    """

    maternal: NDArray[np.uint8]
    paternal: NDArray[np.uint8]

    def __post_init__(self) -> None:
        """Validate allele values and lock both arrays against writes."""
        maternal = _frozen_alleles(self.maternal, "maternal")
        paternal = _frozen_alleles(self.paternal, "paternal")
        if maternal.shape != paternal.shape:
            msg = (
                f"maternal and paternal lengths differ "
                f"({maternal.size} != {paternal.size})"
            )
            raise ConfigurationError(msg)
        object.__setattr__(self, "maternal", maternal)
        object.__setattr__(self, "paternal", paternal)

    @classmethod
    def from_additive(cls, dosages: Sequence[int]) -> Genome:
        """Build a genome from 0/1/2 dosages.

        Dosage 1 is phased as maternal 1, paternal 0.

        Args:
            dosages: Additive value per locus.

        Returns:
            A genome whose :attr:`additive` equals ``dosages``.

        Raises:
            ConfigurationError: If a dosage is not 0, 1 or 2.
        """
        arr = np.asarray(dosages, dtype=np.int64)
        if arr.size and (arr.min() < 0 or arr.max() > 2):
            msg = "additive dosages must be 0, 1 or 2"
            raise ConfigurationError(msg)
        return cls(maternal=(arr >= 1), paternal=(arr == 2))

    def __len__(self) -> int:
        return int(self.maternal.size)

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Genome):
            return NotImplemented
        return bool(
            np.array_equal(self.maternal, other.maternal)
            and np.array_equal(self.paternal, other.paternal)
        )

    def __hash__(self) -> int:
        return hash((self.maternal.tobytes(), self.paternal.tobytes()))

    @property
    def additive(self) -> NDArray[np.int64]:
        """Dosage ``maternal + paternal`` per locus, values in {0, 1, 2}."""
        return self.maternal.astype(np.int64) + self.paternal.astype(np.int64)

    @property
    def heterozygous_loci(self) -> NDArray[np.bool_]:
        """Mask of loci where the two alleles differ."""
        return self.maternal != self.paternal

    @property
    def heterozygosity(self) -> float:
        """Fraction of loci with ``maternal != paternal`` (0.0 when empty)."""
        if len(self) == 0:
            return 0.0
        return float(self.heterozygous_loci.mean())


def random_genome(length: int, rng: Generator) -> Genome:
    """Draw a founder genome with allele frequency 0.5 at every locus.

    Maternal and paternal alleles are independent Bernoulli(0.5) draws,
    so founders start in Hardy-Weinberg proportions.

    Args:
        length: Number of loci.
        rng: Seeded random generator.

    Returns:
        A new random Genome.
    """
    maternal = rng.integers(0, 2, size=length, dtype=np.uint8)
    paternal = rng.integers(0, 2, size=length, dtype=np.uint8)
    return Genome(maternal=maternal, paternal=paternal)

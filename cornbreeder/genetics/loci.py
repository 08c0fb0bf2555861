"""LociConfig: which genome positions drive which trait.

The genome is split into three primary blocks (Yield, Resistance,
Height).  Two small pleiotropic subsets add cross-trait effects:

- **Yield-Resistance** loci cost resistance (a trade-off).
- **Height-Yield** loci add yield (taller plants yield more).

Pleiotropic loci may sit inside any primary block.  Every index is
checked against the genome length when the config is built.
"""

from __future__ import annotations

from collections.abc import Iterable
from dataclasses import dataclass

from cornbreeder.errors import ConfigurationError

DEFAULT_GENOME_LENGTH = 30
DEFAULT_YIELD_RESISTANCE_LOCI = (8, 9)
DEFAULT_HEIGHT_YIELD_LOCI = (20, 21)


def _as_indices(values: Iterable[int]) -> tuple[int, ...]:
    return tuple(int(v) for v in values)


@dataclass(frozen=True)
class LociConfig:
    """Trait-to-loci mapping plus the additive model's coefficients.

    Attributes:
        length: Genome length L.
        yield_loci: Primary Yield block.
        resistance_loci: Primary Resistance block.
        height_loci: Primary Height block.
        yield_resistance_loci: Loci whose dosage is subtracted from
            Resistance (scaled by ``resistance_cost``).
        height_yield_loci: Loci whose dosage is added to Yield (scaled
            by ``yield_bonus``).
        resistance_cost: Resistance lost per dosage unit on a
            Yield-Resistance locus.
        yield_bonus: Yield gained per dosage unit on a Height-Yield locus.
        height_offset: Baseline added to the raw height sum.
        height_floor: Minimum breeding value for height.
    """

    length: int
    yield_loci: tuple[int, ...]
    resistance_loci: tuple[int, ...]
    height_loci: tuple[int, ...] = ()
    yield_resistance_loci: tuple[int, ...] = ()
    height_yield_loci: tuple[int, ...] = ()
    resistance_cost: float = 0.5
    yield_bonus: float = 0.3
    height_offset: float = 10.0
    height_floor: float = 5.0

    def __post_init__(self) -> None:
        """Normalise index sets to tuples and reject out-of-range loci."""
        if self.length < 1:
            msg = f"genome length must be positive, got {self.length}"
            raise ConfigurationError(msg)

        for name in (
            "yield_loci",
            "resistance_loci",
            "height_loci",
            "yield_resistance_loci",
            "height_yield_loci",
        ):
            indices = _as_indices(getattr(self, name))
            bad = [i for i in indices if not 0 <= i < self.length]
            if bad:
                msg = f"{name} has loci {bad} outside [0, {self.length})"
                raise ConfigurationError(msg)
            object.__setattr__(self, name, indices)

    @classmethod
    def partitioned(
        cls,
        length: int = DEFAULT_GENOME_LENGTH,
        *,
        yield_resistance_loci: Iterable[int] = DEFAULT_YIELD_RESISTANCE_LOCI,
        height_yield_loci: Iterable[int] = DEFAULT_HEIGHT_YIELD_LOCI,
        **coefficients: float,
    ) -> LociConfig:
        """Split ``length`` loci into three equal contiguous trait blocks.

        ``L // 3`` loci go to each of Yield, Resistance and Height in that
        order; any remainder loci are left neutral.

        Args:
            length: Genome length L.
            yield_resistance_loci: Trade-off subset.
            height_yield_loci: Synergy subset.
            **coefficients: Overrides for ``resistance_cost``,
                ``yield_bonus``, ``height_offset`` or ``height_floor``.

        Returns:
            A validated LociConfig.

        Raises:
            ConfigurationError: If ``length < 3`` or a pleiotropic index
                falls outside the genome.
        """
        if length < 3:
            msg = f"cannot split {length} loci into three trait blocks"
            raise ConfigurationError(msg)
        block = length // 3
        return cls(
            length=length,
            yield_loci=tuple(range(0, block)),
            resistance_loci=tuple(range(block, 2 * block)),
            height_loci=tuple(range(2 * block, 3 * block)),
            yield_resistance_loci=_as_indices(yield_resistance_loci),
            height_yield_loci=_as_indices(height_yield_loci),
            **coefficients,
        )

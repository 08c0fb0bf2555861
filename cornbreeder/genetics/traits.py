"""Traits: the three quantitative traits every plant carries.

``TraitValues`` is the shared shape of a breeding value and a phenotype:
one float per trait.  Values can be looked up by :class:`Trait` or by
name (``"yield"``, ``"resistance"``, ``"height"``).
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum


class Trait(Enum):
    """Selectable quantitative traits."""

    YIELD = "yield"
    RESISTANCE = "resistance"
    HEIGHT = "height"

    @classmethod
    def parse(cls, value: Trait | str) -> Trait:
        """Accept either a Trait or its name.

        Raises:
            ValueError: If ``value`` names no trait.
        """
        if isinstance(value, Trait):
            return value
        try:
            return cls(value.lower())
        except ValueError:
            names = ", ".join(t.value for t in cls)
            msg = f"unknown trait {value!r} (expected one of: {names})"
            raise ValueError(msg) from None


_ATTRS = {
    Trait.YIELD: "yield_",
    Trait.RESISTANCE: "resistance",
    Trait.HEIGHT: "height",
}


@dataclass(frozen=True)
class TraitValues:
    """One value per trait.

    Attributes:
        yield_: Grain yield (``yield`` is a Python keyword).
        resistance: Disease resistance.
        height: Plant height.
    """

    yield_: float
    resistance: float
    height: float

    def get(self, trait: Trait | str) -> float:
        """Return the value for ``trait``."""
        return float(getattr(self, _ATTRS[Trait.parse(trait)]))

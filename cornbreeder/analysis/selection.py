"""Selection-differential curves.

For one trait, fits an idealised Normal curve to the whole population
and another to the selected parents, sampled on a shared grid.  These
are bell curves parameterised by the observed mean and SD, not
histograms.  The distance between the two means is the selection
differential ``S``.
"""

from __future__ import annotations

import logging
import math
from collections.abc import Collection, Sequence
from dataclasses import dataclass
from typing import TYPE_CHECKING

import numpy as np
from numpy.typing import NDArray

from cornbreeder.genetics.traits import Trait

if TYPE_CHECKING:
    from cornbreeder.population.plant import Plant

logger = logging.getLogger(__name__)

DEFAULT_STEPS = 50
DEFAULT_MIN_STD = 1e-3

_SQRT_2PI = math.sqrt(2.0 * math.pi)


@dataclass(frozen=True)
class CurvePoint:
    """Densities at one x position.

    Attributes:
        x: Trait value.
        population: Population curve density.
        selected: Selected curve density, or None without a selection.
    """

    x: float
    population: float
    selected: float | None


@dataclass(frozen=True)
class SelectionCurves:
    """Population and selected-subset distributions for one trait.

    Attributes:
        trait: Trait the curves describe.
        points: Sampled curve points, ascending in x.
        population_mean: Mean phenotype of the whole population.
        population_std: SD of the population (at least ``min_std``).
        selected_mean: Mean phenotype of the selection, if any.
        selected_std: SD of the selection, if any.
        selected_count: Number of selected plants found in the population.
    """

    trait: Trait
    points: tuple[CurvePoint, ...]
    population_mean: float
    population_std: float
    selected_mean: float | None
    selected_std: float | None
    selected_count: int

    @property
    def differential(self) -> float:
        """Selection differential ``S`` (0.0 when nothing is selected)."""
        if self.selected_mean is None:
            return 0.0
        return self.selected_mean - self.population_mean


def _normal_pdf(x: NDArray[np.float64], mean: float, std: float) -> NDArray[np.float64]:
    return np.exp(-0.5 * ((x - mean) / std) ** 2) / (std * _SQRT_2PI)


def _std_or_floor(values: NDArray[np.float64], min_std: float, label: str) -> float:
    std = float(values.std())
    if std < min_std:
        logger.debug(
            "Degenerate %s distribution (sd=%g); using sd=%g",
            label,
            std,
            min_std,
        )
        return min_std
    return std


def build_curves(
    population: Sequence[Plant],
    selected_ids: Collection[str],
    trait: Trait | str = Trait.YIELD,
    *,
    steps: int = DEFAULT_STEPS,
    min_std: float = DEFAULT_MIN_STD,
) -> SelectionCurves:
    """Build Normal density curves for a population and its selection.

    The grid spans ``[min - 3 sd, max + 3 sd]`` of the population values
    in ``steps`` equal intervals.  A standard deviation below
    ``min_std`` (a fixed population) is replaced by ``min_std``.

    Ids in ``selected_ids`` that match no plant are ignored rather than
    rejected, so a selection made against another generation yields
    ``selected_count == 0`` and ``S == 0``.  Resolve the selection with
    :func:`~cornbreeder.population.manager.parents_from_selection` first
    when unknown ids must be an error.

    Args:
        population: Current population (non-empty).
        selected_ids: Ids of the selected parents; may be empty.
        trait: Trait to plot.
        steps: Number of grid intervals.
        min_std: Smallest SD used for a curve.

    Returns:
        The SelectionCurves.

    Raises:
        ValueError: If ``population`` is empty, ``trait`` is unknown, or
            ``steps``/``min_std`` are not positive.
    """
    trait = Trait.parse(trait)
    if not population:
        msg = "cannot build curves for an empty population"
        raise ValueError(msg)
    if steps < 1 or min_std <= 0:
        msg = f"steps and min_std must be positive, got {steps} and {min_std}"
        raise ValueError(msg)

    values = np.array([p.phenotype.get(trait) for p in population], dtype=np.float64)
    pop_mean = float(values.mean())
    pop_std = _std_or_floor(values, min_std, "population")

    chosen = set(selected_ids)
    sel_values = np.array(
        [p.phenotype.get(trait) for p in population if p.id in chosen],
        dtype=np.float64,
    )
    sel_mean: float | None = None
    sel_std: float | None = None
    if sel_values.size:
        sel_mean = float(sel_values.mean())
        sel_std = _std_or_floor(sel_values, min_std, "selected")

    xs = np.linspace(
        float(values.min()) - 3.0 * pop_std,
        float(values.max()) + 3.0 * pop_std,
        steps + 1,
    )
    pop_density = _normal_pdf(xs, pop_mean, pop_std)
    if sel_mean is not None and sel_std is not None:
        sel_density: list[float | None] = [
            float(v) for v in _normal_pdf(xs, sel_mean, sel_std)
        ]
    else:
        sel_density = [None] * len(xs)

    points = tuple(
        CurvePoint(x=float(x), population=float(p), selected=s)
        for x, p, s in zip(xs, pop_density, sel_density, strict=True)
    )
    return SelectionCurves(
        trait=trait,
        points=points,
        population_mean=pop_mean,
        population_std=pop_std,
        selected_mean=sel_mean,
        selected_std=sel_std,
        selected_count=int(sel_values.size),
    )

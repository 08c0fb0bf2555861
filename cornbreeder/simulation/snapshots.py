"""Snapshot payloads for visualisation collaborators.

The engine keeps full float precision; rounding happens only here, when
values leave the package as plain dicts (genome view, trend charts,
selection-differential chart).
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Any

if TYPE_CHECKING:
    from cornbreeder.analysis.selection import SelectionCurves
    from cornbreeder.analysis.statistics import PopulationStats
    from cornbreeder.genetics.traits import TraitValues
    from cornbreeder.population.plant import Plant

TRAIT_DECIMALS = 2
HETEROZYGOSITY_DECIMALS = 3
DENSITY_DECIMALS = 4


def _traits(values: TraitValues) -> dict[str, float]:
    return {
        "yield": round(values.yield_, TRAIT_DECIMALS),
        "resistance": round(values.resistance, TRAIT_DECIMALS),
        "height": round(values.height, TRAIT_DECIMALS),
    }


def plant_snapshot(plant: Plant, *, selected: bool = False) -> dict[str, Any]:
    """Plant as a dict for the field and genome views."""
    return {
        "id": plant.id,
        "generation": plant.generation,
        "loci": plant.genome.additive.tolist(),
        "maternal": plant.genome.maternal.tolist(),
        "paternal": plant.genome.paternal.tolist(),
        "breeding_value": _traits(plant.breeding_value),
        "phenotype": _traits(plant.phenotype),
        "disease_penalty": round(plant.phenotype.disease_penalty, TRAIT_DECIMALS),
        "heterozygosity": round(plant.heterozygosity, HETEROZYGOSITY_DECIMALS),
        "is_heterozygous": plant.is_heterozygous,
        "is_selected": selected,
    }


def stats_snapshot(stats: PopulationStats) -> dict[str, Any]:
    """One row of the trend chart."""
    return {
        "generation": stats.generation,
        "size": stats.size,
        "mean_yield": round(stats.mean_yield, TRAIT_DECIMALS),
        "var_yield": round(stats.var_yield, TRAIT_DECIMALS),
        "max_yield": round(stats.max_yield, TRAIT_DECIMALS),
        "mean_resistance": round(stats.mean_resistance, TRAIT_DECIMALS),
        "mean_height": round(stats.mean_height, TRAIT_DECIMALS),
        "heterozygosity": round(stats.heterozygosity, HETEROZYGOSITY_DECIMALS),
        "heritability": round(stats.heritability, HETEROZYGOSITY_DECIMALS),
    }


def curves_snapshot(curves: SelectionCurves) -> dict[str, Any]:
    """Data for the selection-differential chart.

    ``selected`` densities are None on every point when nothing is
    selected, so the chart can hide that series.
    """
    return {
        "trait": curves.trait.value,
        "data": [
            {
                "x": round(point.x, TRAIT_DECIMALS),
                "population": round(point.population, DENSITY_DECIMALS),
                "selected": (
                    None
                    if point.selected is None
                    else round(point.selected, DENSITY_DECIMALS)
                ),
            }
            for point in curves.points
        ],
        "mean": round(curves.population_mean, TRAIT_DECIMALS),
        "selected_mean": (
            None
            if curves.selected_mean is None
            else round(curves.selected_mean, TRAIT_DECIMALS)
        ),
        "std_dev": round(curves.population_std, TRAIT_DECIMALS),
        "differential": round(curves.differential, TRAIT_DECIMALS),
    }

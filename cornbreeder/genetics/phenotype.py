"""Phenotypes: what the breeder actually observes in the field.

Phenotype = breeding value + environmental noise, with one cross-trait
effect: the disease-threshold model.  When a plant's realised
resistance falls below the threshold, disease eats into its yield in
proportion to the shortfall.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING

from cornbreeder.errors import ConfigurationError
from cornbreeder.genetics.traits import TraitValues

if TYPE_CHECKING:
    from numpy.random import Generator

    from cornbreeder.genetics.breeding_value import BreedingValue


@dataclass(frozen=True)
class PhenotypeModel:
    """Environmental noise and disease-threshold parameters.

    Attributes:
        disease_threshold: Resistance below which yield is penalised (T).
        disease_penalty_rate: Yield lost per unit of resistance shortfall (k).
        yield_noise_scale: Multiplier on the environmental SD for yield.
        resistance_noise_scale: Multiplier for resistance.
        height_noise_scale: Multiplier for height.
        height_floor: Minimum observable height.
    """

    disease_threshold: float = 8.0
    disease_penalty_rate: float = 0.8
    yield_noise_scale: float = 1.0
    resistance_noise_scale: float = 0.5
    height_noise_scale: float = 0.3
    height_floor: float = 5.0

    def __post_init__(self) -> None:
        """Reject negative rates and noise scales."""
        for name in (
            "disease_penalty_rate",
            "yield_noise_scale",
            "resistance_noise_scale",
            "height_noise_scale",
        ):
            if getattr(self, name) < 0:
                msg = f"{name} must be >= 0, got {getattr(self, name)}"
                raise ConfigurationError(msg)


@dataclass(frozen=True)
class Phenotype(TraitValues):
    """Observed trait values.

    Attributes:
        disease_penalty: Yield removed by the disease-threshold model.
    """

    disease_penalty: float = 0.0


def disease_penalty(resistance: float, model: PhenotypeModel) -> float:
    """Yield lost to disease for a given resistance phenotype.

    Args:
        resistance: Observed resistance.
        model: Threshold and penalty rate.

    Returns:
        ``(T - resistance) * k`` below the threshold, otherwise 0.
    """
    if resistance < model.disease_threshold:
        return (model.disease_threshold - resistance) * model.disease_penalty_rate
    return 0.0


def evaluate_phenotype(
    breeding_value: BreedingValue,
    env_variance: float,
    rng: Generator,
    model: PhenotypeModel,
) -> Phenotype:
    """Add environmental noise and the disease penalty to a breeding value.

    Three standard-normal draws are taken in the order yield, resistance,
    height and scaled by ``env_variance`` times the per-trait scale.  The
    draws happen even when ``env_variance`` is 0 so that the random
    stream stays aligned across runs with different variances.

    Args:
        breeding_value: Genetic values of the plant.
        env_variance: Environmental spread for this generation.
        rng: Seeded random generator.
        model: Noise scales and disease-threshold parameters.

    Returns:
        The plant's Phenotype.

    Raises:
        ConfigurationError: If ``env_variance`` is negative.
    """
    if env_variance < 0:
        msg = f"env_variance must be >= 0, got {env_variance}"
        raise ConfigurationError(msg)

    z_yield, z_resistance, z_height = rng.standard_normal(3)
    yield_e = float(z_yield) * env_variance * model.yield_noise_scale
    resistance_e = float(z_resistance) * env_variance * model.resistance_noise_scale
    height_e = float(z_height) * env_variance * model.height_noise_scale

    resistance = max(0.0, breeding_value.resistance + resistance_e)
    penalty = disease_penalty(resistance, model)

    return Phenotype(
        yield_=max(0.0, breeding_value.yield_ + yield_e - penalty),
        resistance=resistance,
        height=max(model.height_floor, breeding_value.height + height_e),
        disease_penalty=penalty,
    )

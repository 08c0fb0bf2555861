"""Shared fixtures for the CornBreeder test suite."""

from __future__ import annotations

from collections.abc import Callable

import numpy as np
import pytest
from numpy.random import Generator

from cornbreeder.genetics.breeding_value import BreedingValue
from cornbreeder.genetics.genome import Genome
from cornbreeder.genetics.loci import LociConfig
from cornbreeder.genetics.model import GeneticModel
from cornbreeder.genetics.phenotype import Phenotype
from cornbreeder.population.manager import Population, create_initial_population
from cornbreeder.population.plant import Plant, evaluate_plant
from cornbreeder.simulation.config import SimulationConfig


@pytest.fixture
def rng() -> Generator:
    """A deterministic random generator for reproducible tests."""
    return np.random.default_rng(seed=12345)


@pytest.fixture
def default_config() -> SimulationConfig:
    """Default simulation config (no YAML file needed)."""
    return SimulationConfig()


@pytest.fixture
def default_model() -> GeneticModel:
    """Default 30-locus genetic model."""
    return GeneticModel()


@pytest.fixture
def tiny_model() -> GeneticModel:
    """L=4: yield on loci 0-1, resistance on 2-3, no pleiotropy."""
    return GeneticModel(
        loci=LociConfig(length=4, yield_loci=(0, 1), resistance_loci=(2, 3)),
    )


@pytest.fixture
def founders(rng: Generator, default_model: GeneticModel) -> Population:
    """A 20-plant founder population."""
    return create_initial_population(20, 2.0, rng, default_model)


@pytest.fixture
def make_plant() -> Callable[..., Plant]:
    """Factory for plants with hand-set phenotype values."""
    return _make_plant


@pytest.fixture
def clone_population() -> Callable[..., Population]:
    """Factory for populations of identical-genome clones."""
    return _clone_population


def _make_plant(
    plant_id: str,
    *,
    yield_: float = 0.0,
    resistance: float = 10.0,
    height: float = 15.0,
    genome: Genome | None = None,
) -> Plant:
    """Plant with hand-set phenotype values (breeding value mirrors it)."""
    genome = genome if genome is not None else Genome.from_additive([1, 1, 0, 2])
    return Plant(
        id=plant_id,
        generation=1,
        genome=genome,
        breeding_value=BreedingValue(
            yield_=yield_,
            resistance=resistance,
            height=height,
        ),
        phenotype=Phenotype(yield_=yield_, resistance=resistance, height=height),
    )


def _clone_population(
    genome: Genome,
    n: int,
    rng: Generator,
    model: GeneticModel,
    env_variance: float = 0.0,
) -> Population:
    """``n`` evaluated plants sharing one genome."""
    return tuple(
        evaluate_plant(genome, 1, env_variance, rng, model, id=f"clone-{i}")
        for i in range(n)
    )

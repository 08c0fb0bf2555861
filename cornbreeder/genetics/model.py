"""GeneticModel: the full set of genetic parameters for one run."""

from __future__ import annotations

from dataclasses import dataclass, field

from cornbreeder.errors import ConfigurationError
from cornbreeder.genetics.loci import LociConfig
from cornbreeder.genetics.meiosis import DEFAULT_CROSSOVER_RATE
from cornbreeder.genetics.phenotype import PhenotypeModel


@dataclass(frozen=True)
class GeneticModel:
    """Loci layout, phenotype model and recombination rate.

    Attributes:
        loci: Trait-to-loci mapping and additive coefficients.
        phenotype: Noise scales and disease-threshold parameters.
        crossover_rate: Adjacent-swap probability during meiosis.
    """

    loci: LociConfig = field(default_factory=LociConfig.partitioned)
    phenotype: PhenotypeModel = field(default_factory=PhenotypeModel)
    crossover_rate: float = DEFAULT_CROSSOVER_RATE

    def __post_init__(self) -> None:
        """Validate the crossover rate up front."""
        if not 0.0 <= self.crossover_rate <= 1.0:
            msg = f"crossover_rate must be in [0, 1], got {self.crossover_rate}"
            raise ConfigurationError(msg)

    @property
    def genome_length(self) -> int:
        """Number of loci every genome in this model carries."""
        return self.loci.length

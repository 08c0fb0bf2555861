"""Read-only views over a population: summary stats and selection curves."""

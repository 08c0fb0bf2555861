"""Genome, meiosis and the genotype-to-phenotype map."""

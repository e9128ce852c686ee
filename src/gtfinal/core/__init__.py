"""
Core module for gtfinal.

Provides the likelihood index table, the per-sample genotype projector, the
per-record allele/strand aggregator and the strand-bias statistics.
"""

from .aggregator import AlleleStatsAggregator
from .likelihoods import LikelihoodIndexEntry, LikelihoodIndexTable, num_likelihoods
from .projector import GenotypeProjector
from .strand_bias import fisher_strand, strand_odds_ratio

__all__ = [
    "AlleleStatsAggregator",
    "GenotypeProjector",
    "LikelihoodIndexEntry",
    "LikelihoodIndexTable",
    "fisher_strand",
    "num_likelihoods",
    "strand_odds_ratio",
]

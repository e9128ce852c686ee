"""
Data models for gtfinal.

Provides Pydantic models for alleles, genotypes, variant records and
configuration, plus the builders used to rewrite them.
"""

from .builders import GenotypeBuilder, RecordBuilder
from .core import (
    NO_CALL_ALLELE,
    NON_REF_ALLELE,
    SPANNING_DELETION_ALLELE,
    Allele,
    FinalizerConfig,
    SampleGenotype,
    VariantRecord,
    no_call_alleles,
)

__all__ = [
    "NO_CALL_ALLELE",
    "NON_REF_ALLELE",
    "SPANNING_DELETION_ALLELE",
    "Allele",
    "FinalizerConfig",
    "GenotypeBuilder",
    "RecordBuilder",
    "SampleGenotype",
    "VariantRecord",
    "no_call_alleles",
]

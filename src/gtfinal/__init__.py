"""
gtfinal - joint-genotype finalization for merged GVCF records.

This package takes multi-sample variant records produced by merging
per-sample GVCF lines, removes the <NON_REF> placeholder allele, re-calls
every sample from its genotype likelihoods and finalizes the site-level
annotations (QUAL, QD, MQ, AC/AF/AN, FS, SOR and the allele-specific
annotations).

Example usage:
    >>> from gtfinal import RecordFinalizer
    >>> finalized = RecordFinalizer().finalize(merged_record)
"""

__version__ = "0.3.0"

from .engine import RecordFinalizer
from .exceptions import AttributeParseError, BadInputError, GtfinalError
from .models.core import Allele, FinalizerConfig, SampleGenotype, VariantRecord
from .pipeline import Pipeline

__all__ = [
    "__version__",
    "Allele",
    "AttributeParseError",
    "BadInputError",
    "FinalizerConfig",
    "GtfinalError",
    "Pipeline",
    "RecordFinalizer",
    "SampleGenotype",
    "VariantRecord",
]

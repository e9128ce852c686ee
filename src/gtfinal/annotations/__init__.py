"""
Annotation finalization for gtfinal.

Provides the RMS mapping-quality finalizer, the allele-specific reducible
annotations and the registry that dispatches raw fields to them.
"""

from .allele_specific import (
    AlleleSpecificAnnotation,
    AlleleSpecificFisherStrand,
    AlleleSpecificMappingQuality,
    AlleleSpecificQualByDepth,
    AlleleSpecificRankSum,
    AlleleSpecificStrandOddsRatio,
)
from .mapping_quality import finalize_raw_mapping_quality
from .registry import (
    AnnotationRegistry,
    RawAnnotationFinalizer,
    ReducibleAnnotation,
    default_registry,
)

__all__ = [
    "AlleleSpecificAnnotation",
    "AlleleSpecificFisherStrand",
    "AlleleSpecificMappingQuality",
    "AlleleSpecificQualByDepth",
    "AlleleSpecificRankSum",
    "AlleleSpecificStrandOddsRatio",
    "AnnotationRegistry",
    "RawAnnotationFinalizer",
    "ReducibleAnnotation",
    "default_registry",
    "finalize_raw_mapping_quality",
]

"""
Core data models for gtfinal.
"""

import math
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator

from ..config import (
    DEFAULT_PLOIDY,
    DEFAULT_STANDARD_CONFIDENCE,
    INDEL_HETEROZYGOSITY,
    PIPELINE_MAX_ALT_COUNT,
    SNP_HETEROZYGOSITY,
)
from ..utils.attributes import parse_float, parse_int, parse_int_list

PLACEHOLDER_SYMBOLS = frozenset({"<NON_REF>", "<*>"})


class Allele(BaseModel):
    """
    A reference or alternate allele.

    Symbolic alleles (``<DEL>``, ``<NON_REF>``, breakends) have length 0, as
    does the no-call allele ``.``.
    """

    model_config = ConfigDict(frozen=True)

    bases: str = Field(min_length=1)
    is_reference: bool = False

    @classmethod
    def ref(cls, bases: str) -> "Allele":
        return cls(bases=bases, is_reference=True)

    @classmethod
    def alt(cls, bases: str) -> "Allele":
        return cls(bases=bases)

    @model_validator(mode="after")
    def validate_reference(self) -> "Allele":
        if self.is_reference and (self.is_symbolic or self.is_no_call or self.bases == "*"):
            raise ValueError(f"Allele {self.bases} cannot be a reference allele")
        return self

    @property
    def is_no_call(self) -> bool:
        return self.bases == "."

    @property
    def is_symbolic(self) -> bool:
        b = self.bases
        return (b.startswith("<") and b.endswith(">")) or "[" in b or "]" in b

    @property
    def is_placeholder(self) -> bool:
        return self.bases in PLACEHOLDER_SYMBOLS

    @property
    def is_spanning_deletion(self) -> bool:
        return self.bases == "*"

    @property
    def length(self) -> int:
        if self.is_symbolic or self.is_no_call:
            return 0
        return len(self.bases)

    def __str__(self) -> str:
        return self.bases + ("*" if self.is_reference else "")


NON_REF_ALLELE = Allele(bases="<NON_REF>")
NO_CALL_ALLELE = Allele(bases=".")
SPANNING_DELETION_ALLELE = Allele(bases="*")


def no_call_alleles(ploidy: int = DEFAULT_PLOIDY) -> tuple[Allele, ...]:
    return (NO_CALL_ALLELE,) * ploidy


class SampleGenotype(BaseModel):
    """Per-sample call, likelihoods, depths and extended attributes."""

    model_config = ConfigDict(frozen=True)

    sample: str
    alleles: tuple[Allele, ...] = Field(min_length=1)
    pl: tuple[int, ...] | None = None
    ad: tuple[int, ...] | None = None
    gq: int | None = Field(default=None, ge=0)
    attributes: dict[str, Any] = Field(default_factory=dict)

    @field_validator("pl", "ad")
    @classmethod
    def validate_non_negative(cls, v: tuple[int, ...] | None) -> tuple[int, ...] | None:
        if v is not None and any(x < 0 for x in v):
            raise ValueError(f"Values must be non-negative: {v}")
        return v

    @property
    def ploidy(self) -> int:
        return len(self.alleles)

    def allele(self, i: int) -> Allele:
        return self.alleles[i]

    @property
    def has_pl(self) -> bool:
        return self.pl is not None

    @property
    def has_ad(self) -> bool:
        return self.ad is not None

    @property
    def is_no_call(self) -> bool:
        return all(a.is_no_call for a in self.alleles)

    @property
    def is_called(self) -> bool:
        return not any(a.is_no_call for a in self.alleles)

    @property
    def is_het(self) -> bool:
        return self.is_called and len(set(self.alleles)) > 1

    @property
    def is_hom_ref(self) -> bool:
        return self.is_called and all(a.is_reference for a in self.alleles)

    def count_allele(self, allele: Allele) -> int:
        return sum(1 for a in self.alleles if a == allele)

    def has_attribute(self, key: str) -> bool:
        return key in self.attributes

    @property
    def genotype_string(self) -> str:
        return "/".join(a.bases for a in self.alleles)


class VariantRecord(BaseModel):
    """
    One multi-sample variant site.

    ``alleles`` holds the reference first, then the alternates; it is the index
    space for every per-sample PL and AD vector.
    """

    model_config = ConfigDict(frozen=True)

    contig: str
    position: int = Field(ge=1, description="1-based position of the first reference base")
    alleles: tuple[Allele, ...] = Field(min_length=1)
    attributes: dict[str, Any] = Field(default_factory=dict)
    genotypes: tuple[SampleGenotype, ...] = ()
    log10_p_error: float | None = Field(default=None, le=0)
    id: str | None = None

    @model_validator(mode="after")
    def validate_alleles(self) -> "VariantRecord":
        if not self.alleles[0].is_reference:
            raise ValueError(f"First allele must be the reference at {self.locus}")
        if any(a.is_reference for a in self.alleles[1:]):
            raise ValueError(f"Only one reference allele is allowed at {self.locus}")
        if len(set(self.alleles)) != len(self.alleles):
            raise ValueError(f"Duplicate alleles at {self.locus}")
        for a in self.alleles[:-1]:
            if a.is_placeholder:
                raise ValueError(
                    f"The {a.bases} allele must be listed last, but it was not at {self.locus}"
                )
        return self

    @model_validator(mode="after")
    def validate_likelihood_lengths(self) -> "VariantRecord":
        n = len(self.alleles)
        diploid = math.comb(n + DEFAULT_PLOIDY - 1, DEFAULT_PLOIDY)
        for g in self.genotypes:
            if g.pl is None:
                continue
            expected = math.comb(n + g.ploidy - 1, g.ploidy)
            # producers emit the haploid no-call encoding with diploid-sized vectors too
            haploid_no_call = g.ploidy == 1 and (g.alleles[0].is_reference or g.alleles[0].is_no_call)
            if len(g.pl) == expected or (haploid_no_call and len(g.pl) == diploid):
                continue
            raise ValueError(
                f"Sample {g.sample} has {len(g.pl)} PL values at {self.locus}, "
                f"expected {expected} for {n} alleles at ploidy {g.ploidy}"
            )
        return self

    @property
    def locus(self) -> str:
        return f"{self.contig}:{self.position}"

    @property
    def reference(self) -> Allele:
        return self.alleles[0]

    @property
    def alternate_alleles(self) -> tuple[Allele, ...]:
        return self.alleles[1:]

    @property
    def is_variant(self) -> bool:
        return len(self.alleles) > 1

    @property
    def is_biallelic(self) -> bool:
        return len(self.alleles) == 2

    @property
    def is_symbolic(self) -> bool:
        alts = self.alternate_alleles
        return bool(alts) and all(a.is_symbolic for a in alts)

    @property
    def has_genotypes(self) -> bool:
        return len(self.genotypes) > 0

    @property
    def qual(self) -> float | None:
        if self.log10_p_error is None:
            return None
        return -10.0 * self.log10_p_error

    def has_attribute(self, key: str) -> bool:
        return key in self.attributes

    def attribute_as_int(self, key: str, default: int) -> int:
        if key not in self.attributes or self.attributes[key] is None:
            return default
        return parse_int(key, self.attributes[key])

    def attribute_as_float(self, key: str, default: float) -> float:
        if key not in self.attributes or self.attributes[key] is None:
            return default
        return parse_float(key, self.attributes[key])

    def attribute_as_int_list(self, key: str, length: int | None = None) -> list[int] | None:
        if key not in self.attributes or self.attributes[key] is None:
            return None
        return parse_int_list(key, self.attributes[key], length=length)


class FinalizerConfig(BaseModel):
    """
    Configuration for record finalization.
    """

    # Quality gate
    standard_confidence: float = Field(default=DEFAULT_STANDARD_CONFIDENCE, ge=0)
    snp_heterozygosity: float = SNP_HETEROZYGOSITY
    indel_heterozygosity: float = INDEL_HETEROZYGOSITY

    # Likelihood table
    max_alt_count: int = Field(default=PIPELINE_MAX_ALT_COUNT, ge=1)

    # Output size control
    summarize_likelihoods: bool = False
    strip_allele_specific_annotations: bool = False

    @field_validator("snp_heterozygosity", "indel_heterozygosity")
    @classmethod
    def validate_prior(cls, v: float) -> float:
        if not 0 < v <= 1:
            raise ValueError(f"Heterozygosity prior must be in (0, 1], got {v}")
        return v

    @property
    def snp_qual_threshold(self) -> float:
        return self.standard_confidence - 10 * math.log10(self.snp_heterozygosity)

    @property
    def indel_qual_threshold(self) -> float:
        return self.standard_confidence - 10 * math.log10(self.indel_heterozygosity)

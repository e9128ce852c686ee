"""
Mutable builders for the frozen record models.

Finalization rewrites records by copying them into a builder, editing the
builder and calling ``make()``; the input record is never modified.
"""

from typing import Any

from .core import Allele, SampleGenotype, VariantRecord


class GenotypeBuilder:
    """Accumulates edits to a :class:`SampleGenotype`."""

    def __init__(self, genotype: SampleGenotype):
        self.sample = genotype.sample
        self.alleles: tuple[Allele, ...] = genotype.alleles
        self.pl: tuple[int, ...] | None = genotype.pl
        self.ad: tuple[int, ...] | None = genotype.ad
        self.gq: int | None = genotype.gq
        self.attributes: dict[str, Any] = dict(genotype.attributes)

    def set_alleles(self, alleles) -> "GenotypeBuilder":
        self.alleles = tuple(alleles)
        return self

    def set_pl(self, pl) -> "GenotypeBuilder":
        self.pl = None if pl is None else tuple(int(x) for x in pl)
        return self

    def no_pl(self) -> "GenotypeBuilder":
        self.pl = None
        return self

    def set_ad(self, ad) -> "GenotypeBuilder":
        self.ad = None if ad is None else tuple(int(x) for x in ad)
        return self

    def set_gq(self, gq: int | None) -> "GenotypeBuilder":
        self.gq = gq
        return self

    def no_gq(self) -> "GenotypeBuilder":
        self.gq = None
        return self

    def log10_p_error(self, log10_p_error: float) -> "GenotypeBuilder":
        """Set GQ from a log10 error probability."""
        self.gq = int(round(-10 * log10_p_error))
        return self

    def attribute(self, key: str, value: Any) -> "GenotypeBuilder":
        self.attributes[key] = value
        return self

    def make(self) -> SampleGenotype:
        return SampleGenotype(
            sample=self.sample,
            alleles=self.alleles,
            pl=self.pl,
            ad=self.ad,
            gq=self.gq,
            attributes=self.attributes,
        )


class RecordBuilder:
    """Accumulates edits to a :class:`VariantRecord`."""

    def __init__(self, record: VariantRecord):
        self.contig = record.contig
        self.position = record.position
        self.id = record.id
        self.alleles: tuple[Allele, ...] = record.alleles
        self.attributes: dict[str, Any] = dict(record.attributes)
        self.genotypes: tuple[SampleGenotype, ...] = record.genotypes
        self.log10_p_error: float | None = record.log10_p_error

    def attribute(self, key: str, value: Any) -> "RecordBuilder":
        self.attributes[key] = value
        return self

    def rm_attribute(self, key: str) -> "RecordBuilder":
        self.attributes.pop(key, None)
        return self

    def has_attribute(self, key: str) -> bool:
        return key in self.attributes

    def set_alleles(self, alleles) -> "RecordBuilder":
        self.alleles = tuple(alleles)
        return self

    def set_genotypes(self, genotypes) -> "RecordBuilder":
        self.genotypes = tuple(genotypes)
        return self

    def set_log10_p_error(self, log10_p_error: float | None) -> "RecordBuilder":
        self.log10_p_error = log10_p_error
        return self

    def make(self) -> VariantRecord:
        return VariantRecord(
            contig=self.contig,
            position=self.position,
            id=self.id,
            alleles=self.alleles,
            attributes=self.attributes,
            genotypes=self.genotypes,
            log10_p_error=self.log10_p_error,
        )

"""
Record Finalizer: turns one merged multi-sample record into a final call.

The merged record is the equivalent of one GVCF line for all samples,
placeholder allele included. Finalization:
1. Drops sites with no real variation, no depth or too little evidence.
2. Finalizes MQ, QD and QUAL from the merged raw annotations.
3. Removes the placeholder allele and re-calls every sample.
4. Recomputes AC/AF/AN and the strand-bias statistics.
5. Finalizes the remaining raw allele-specific annotations.
"""

import logging

from .annotations.mapping_quality import finalize_raw_mapping_quality
from .annotations.registry import AnnotationRegistry, RawAnnotationFinalizer
from .config import (
    ALLELE_COUNT_KEY,
    ALLELE_FREQUENCY_KEY,
    ALLELE_NUMBER_KEY,
    DEPTH_KEY,
    FISHER_STRAND_KEY,
    QUAL_BY_DEPTH_KEY,
    RAW_QUAL_APPROX_KEY,
    SB_TABLE_KEY,
    STRAND_ODDS_RATIO_KEY,
    VARIANT_DEPTH_KEY,
)
from .core.aggregator import AlleleStatsAggregator
from .core.likelihoods import LikelihoodIndexTable
from .core.projector import GenotypeProjector
from .core.strand_bias import fisher_strand, strand_odds_ratio
from .models.builders import RecordBuilder
from .models.core import FinalizerConfig, SampleGenotype, VariantRecord

logger = logging.getLogger(__name__)


def is_properly_polymorphic(record: VariantRecord) -> bool:
    """False for sites whose only alternates are a spanning deletion or symbolic alleles."""
    alts = record.alternate_alleles
    if not alts:
        return False
    if record.is_biallelic:
        return not (alts[0].is_spanning_deletion or record.is_symbolic)
    if alts[0].is_spanning_deletion and alts[1].is_placeholder:
        return False
    return True


def is_indel_like(record: VariantRecord) -> bool:
    return record.reference.length > 1 or any(a.length > 1 for a in record.alternate_alleles)


def _scalar_if_single(values: list):
    return values[0] if len(values) == 1 else values


class RecordFinalizer:
    """
    Finalizes merged records.

    One instance can be shared by any number of threads: it holds only the
    configuration, the read-only likelihood table and the annotation
    registry. All per-record state lives inside :meth:`finalize`.
    """

    def __init__(
        self,
        config: FinalizerConfig | None = None,
        table: LikelihoodIndexTable | None = None,
        registry: AnnotationRegistry | None = None,
    ):
        self.config = config or FinalizerConfig()
        self.table = table or LikelihoodIndexTable(self.config.max_alt_count)
        self.projector = GenotypeProjector(
            self.table, summarize_likelihoods=self.config.summarize_likelihoods
        )
        self.annotation_finalizer = RawAnnotationFinalizer(
            registry, strip=self.config.strip_allele_specific_annotations
        )
        self.indel_qual_threshold = self.config.indel_qual_threshold
        self.snp_qual_threshold = self.config.snp_qual_threshold

    def passes_quality_gate(self, record: VariantRecord) -> bool:
        if not record.is_variant or not is_properly_polymorphic(record):
            return False
        if record.attribute_as_int(DEPTH_KEY, 0) == 0:
            return False

        if not record.has_attribute(RAW_QUAL_APPROX_KEY):
            logger.warning(
                "Variant at %s will not be output because it is missing the %s key assigned by "
                "the reblocking step; if the input came from reblocked GVCFs, check how the "
                "merge step maps that annotation",
                record.locus,
                RAW_QUAL_APPROX_KEY,
            )
        qual_approx = record.attribute_as_float(RAW_QUAL_APPROX_KEY, 0.0)
        threshold = self.indel_qual_threshold if is_indel_like(record) else self.snp_qual_threshold
        return qual_approx >= threshold

    def finalize(self, record: VariantRecord) -> VariantRecord | None:
        """
        Finalize genotypes and site annotations for one merged record.

        Args:
            record: Merged record, possibly carrying the placeholder allele last.

        Returns:
            The finalized record, or None if the site does not meet reporting thresholds.

        Raises:
            BadInputError: If a called genotype is not diploid.
            AttributeParseError: If a numeric attribute is malformed.
        """
        if not self.passes_quality_gate(record):
            logger.debug("Dropping %s: below reporting thresholds", record.locus)
            return None

        qual_approx = record.attribute_as_float(RAW_QUAL_APPROX_KEY, 0.0)
        builder = RecordBuilder(finalize_raw_mapping_quality(record))

        variant_dp = record.attribute_as_int(VARIANT_DEPTH_KEY, 0)
        if variant_dp > 0:
            builder.attribute(QUAL_BY_DEPTH_KEY, qual_approx / variant_dp)
        else:
            logger.warning("Missing or zero %s at %s; QD not set", VARIANT_DEPTH_KEY, record.locus)
        builder.set_log10_p_error(qual_approx / -10.0)
        # QUAL now carries this
        builder.rm_attribute(RAW_QUAL_APPROX_KEY)

        placeholder_removed = record.alleles[-1].is_placeholder
        target_alleles = record.alleles[:-1] if placeholder_removed else record.alleles

        aggregator = AlleleStatsAggregator(target_alleles)
        genotypes = self._project_genotypes(record, target_alleles, placeholder_removed, aggregator)

        if record.has_genotypes:
            builder.attribute(ALLELE_COUNT_KEY, _scalar_if_single(aggregator.allele_counts()))
            builder.attribute(ALLELE_FREQUENCY_KEY, _scalar_if_single(aggregator.allele_frequencies()))
            builder.attribute(ALLELE_NUMBER_KEY, aggregator.allele_number())
        elif record.has_attribute(SB_TABLE_KEY):
            aggregator.set_strand_table(record.attribute_as_int_list(SB_TABLE_KEY, length=4))

        strand_counts = aggregator.strand_counts()
        builder.attribute(FISHER_STRAND_KEY, fisher_strand(strand_counts))
        builder.attribute(STRAND_ODDS_RATIO_KEY, strand_odds_ratio(strand_counts))
        builder.set_genotypes(genotypes)
        builder.set_alleles(target_alleles)

        self.annotation_finalizer.apply(builder, record)
        return builder.make()

    def _project_genotypes(
        self,
        record: VariantRecord,
        target_alleles,
        placeholder_removed: bool,
        aggregator: AlleleStatsAggregator,
    ) -> list[SampleGenotype]:
        # sequential: every sample writes into the same aggregator
        return [
            self.projector.project(
                g, target_alleles, placeholder_removed, record=record, aggregator=aggregator
            )
            for g in record.genotypes
        ]

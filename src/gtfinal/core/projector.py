"""
Genotype Projector: rewrites one sample's genotype against the finalized
allele list.

For each sample this module:
1. Detects no-calls (including the ploidy-1 encoding some merge producers
   emit for missing data) and rewrites them to ``./.``.
2. Drops the placeholder allele's trailing AD and PL entries.
3. Recomputes GQ and re-derives the call from the truncated likelihoods, or
   replaces the PLs with summary qualities (RGQ/ABGQ/ALTGQ).
4. Feeds the called alleles and per-sample strand counts into the record's
   :class:`AlleleStatsAggregator`.
"""

import logging

import numpy as np

from ..config import (
    DEFAULT_PLOIDY,
    GENOTYPE_QUALITY_BY_ALLELE_BALANCE,
    GENOTYPE_QUALITY_BY_ALT_CONFIDENCE,
    MIN_DP_FORMAT_KEY,
    REFERENCE_GENOTYPE_QUALITY,
    STRAND_BIAS_BY_SAMPLE_KEY,
)
from ..exceptions import BadInputError
from ..models.builders import GenotypeBuilder
from ..models.core import Allele, SampleGenotype, VariantRecord, no_call_alleles
from ..utils.attributes import parse_int_list
from .aggregator import AlleleStatsAggregator
from .likelihoods import (
    LikelihoodIndexTable,
    gq_log10_from_likelihoods,
    is_informative,
    pls_to_log10_likelihoods,
    second_smallest_minus_smallest,
)

logger = logging.getLogger(__name__)


def is_merge_no_call(genotype: SampleGenotype) -> bool:
    """
    Some merge producers report missing data as a haploid ``0`` or ``.``
    instead of a diploid ``./.``.
    """
    return genotype.ploidy == 1 and (
        genotype.allele(0).is_reference or genotype.allele(0).is_no_call
    )


def is_no_call(genotype: SampleGenotype) -> bool:
    """A sample is a no-call for finalization if it uses the haploid encoding or calls the placeholder."""
    if is_merge_no_call(genotype):
        return True
    return any(a.is_placeholder for a in genotype.alleles[:DEFAULT_PLOIDY])


def trim_ad(genotype: SampleGenotype, new_allele_count: int, locus: str) -> tuple[int, ...]:
    """Drop the depth entries of trailing alleles; reads supporting the placeholder are discarded."""
    if len(genotype.ad) < new_allele_count:
        raise BadInputError(
            f"Sample {genotype.sample} has {len(genotype.ad)} AD values at {locus}, "
            f"expected at least {new_allele_count}",
            sample=genotype.sample,
            locus=locus,
        )
    return genotype.ad[:new_allele_count]


def trim_pl(genotype: SampleGenotype, new_pl_size: int) -> tuple[int, ...]:
    return genotype.pl[:new_pl_size]


class GenotypeProjector:
    """
    Projects sample genotypes onto the target allele list of one record.

    The projector itself is stateless apart from the shared, read-only
    :class:`LikelihoodIndexTable`; all accumulation goes into the aggregator
    passed to :meth:`project`.
    """

    def __init__(self, table: LikelihoodIndexTable, summarize_likelihoods: bool = False):
        self.table = table
        self.summarize_likelihoods = summarize_likelihoods
        self.ploidy = table.ploidy

    def project(
        self,
        genotype: SampleGenotype,
        target_alleles: tuple[Allele, ...],
        placeholder_removed: bool,
        *,
        record: VariantRecord,
        aggregator: AlleleStatsAggregator,
    ) -> SampleGenotype:
        """
        Rewrite ``genotype`` against ``target_alleles``.

        Args:
            genotype: Sample genotype from the merged record.
            target_alleles: Record alleles with the placeholder removed.
            placeholder_removed: Whether ``target_alleles`` is shorter than the record's alleles.
            record: The merged record the genotype belongs to.
            aggregator: Receives the called alleles and strand counts.

        Returns:
            The finalized genotype.

        Raises:
            BadInputError: If a called genotype is not diploid.
        """
        if genotype.ploidy != self.ploidy and not is_merge_no_call(genotype):
            raise BadInputError(
                f"This tool assumes diploid genotypes, but sample {genotype.sample} has ploidy "
                f"{genotype.ploidy} at position {record.locus}.",
                sample=genotype.sample,
                locus=record.locus,
            )

        builder = GenotypeBuilder(genotype)
        builder.attributes.pop(MIN_DP_FORMAT_KEY, None)
        no_call = is_no_call(genotype)

        if no_call:
            builder.set_alleles(no_call_alleles(self.ploidy)).no_gq()
        elif placeholder_removed and genotype.has_ad:
            builder.set_ad(trim_ad(genotype, len(target_alleles), record.locus))

        if genotype.has_pl:
            full_length = self.table.likelihood_count(len(record.alleles))
            if no_call and len(genotype.pl) != full_length:
                # a haploid-length vector has no diploid prefix to keep
                builder.no_pl()
            elif self.summarize_likelihoods:
                if no_call:
                    builder.no_pl()
                else:
                    self._summarize_pls(builder, genotype, record)
            else:
                pls = trim_pl(genotype, self.table.likelihood_count(len(target_alleles)))
                builder.set_pl(pls)
                if not no_call:
                    builder.set_gq(second_smallest_minus_smallest(pls, 0))
                    # the stored call may be stale after truncation, so derive it again
                    self._make_genotype_call(builder, pls, target_alleles)

        called = builder.make()

        if genotype.has_attribute(STRAND_BIAS_BY_SAMPLE_KEY):
            sbbs = parse_int_list(
                STRAND_BIAS_BY_SAMPLE_KEY, genotype.attributes[STRAND_BIAS_BY_SAMPLE_KEY], length=4
            )
            aggregator.add_strand_counts(sbbs)

        for allele in called.alleles[: self.ploidy]:
            aggregator.add_allele(allele)

        return called

    def _make_genotype_call(
        self, builder: GenotypeBuilder, pls: tuple[int, ...], alleles_to_use: tuple[Allele, ...]
    ) -> None:
        likelihoods = pls_to_log10_likelihoods(pls)
        if not is_informative(likelihoods):
            builder.set_alleles(no_call_alleles(self.ploidy)).no_gq()
            return

        # argmax returns the first maximum, i.e. the lowest enumeration index on ties
        max_index = int(np.argmax(likelihoods))
        first, second = self.table.allele_pair(len(alleles_to_use), max_index)
        builder.set_alleles((alleles_to_use[first], alleles_to_use[second]))
        if len(alleles_to_use) > 1:
            builder.log10_p_error(gq_log10_from_likelihoods(likelihoods))

    def _summarize_pls(
        self, builder: GenotypeBuilder, genotype: SampleGenotype, record: VariantRecord
    ) -> None:
        """
        Replace the PLs with RGQ, ABGQ and ALTGQ.

        ABGQ is the best non-zero PL among genotypes built from the called
        alleles (for hets) or containing the called allele (for homozygotes).
        ALTGQ is the best PL once one of the called alternate alleles is
        removed from the site.
        """
        pls = np.asarray(genotype.pl, dtype=np.int64)
        builder.attribute(REFERENCE_GENOTYPE_QUALITY, int(pls[0]))
        builder.no_pl()

        if not genotype.is_called:
            return

        entry = self.table.entry(len(record.alleles))
        called_indices = []
        for allele in genotype.alleles:
            if allele not in record.alleles:
                raise BadInputError(
                    f"Sample {genotype.sample} calls allele {allele.bases} which is not in the "
                    f"record at {record.locus}",
                    sample=genotype.sample,
                    locus=record.locus,
                )
            called_indices.append(record.alleles.index(allele))

        if genotype.is_het:
            positions = entry.positions_within(called_indices)
        else:
            positions = entry.positions_with_any(called_indices)
        candidates = [int(pls[i]) for i in positions if pls[i] != 0]
        abgq = min(candidates) if candidates else None

        if genotype.is_hom_ref:
            altgq = abgq
        else:
            alt_candidates = []
            for index in sorted(set(called_indices)):
                if index == 0:
                    continue
                remaining = [i for i in range(len(record.alleles)) if i != index]
                alt_candidates.extend(int(pls[i]) for i in entry.positions_within(remaining))
            altgq = min(alt_candidates) if alt_candidates else None

        if abgq is not None:
            builder.attribute(GENOTYPE_QUALITY_BY_ALLELE_BALANCE, abgq)
        if altgq is not None:
            builder.attribute(GENOTYPE_QUALITY_BY_ALT_CONFIDENCE, altgq)

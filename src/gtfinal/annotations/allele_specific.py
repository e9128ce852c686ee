"""
Allele-specific reducible annotations.

Each class finalizes one raw allele-specific INFO field. Raw values carry one
entry per record allele separated by ``|`` (reference first, placeholder
last); finalized values are lists aligned with the alternate alleles of the
finalized record, with ``None`` where an allele has no data.
"""

import logging
from typing import Any

import numpy as np

from ..config import (
    AS_ALLELE_SEPARATOR,
    AS_BASE_QUAL_RANK_SUM_KEY,
    AS_FISHER_STRAND_KEY,
    AS_MAP_QUAL_RANK_SUM_KEY,
    AS_QUAL_APPROX_KEY,
    AS_QUAL_BY_DEPTH_KEY,
    AS_RAW_BASE_QUAL_RANK_SUM_KEY,
    AS_RAW_MAP_QUAL_RANK_SUM_KEY,
    AS_RAW_READ_POS_RANK_SUM_KEY,
    AS_RAW_RMS_MAPPING_QUALITY_KEY,
    AS_READ_POS_RANK_SUM_KEY,
    AS_RMS_MAPPING_QUALITY_KEY,
    AS_SB_TABLE_KEY,
    AS_STRAND_ODDS_RATIO_KEY,
    AS_VARIANT_DEPTH_KEY,
)
from ..core.strand_bias import fisher_strand, strand_odds_ratio
from ..exceptions import AttributeParseError
from ..models.core import VariantRecord
from ..utils.attributes import parse_float_list, parse_int_list, split_allele_entries
from .mapping_quality import rms_mapping_quality

logger = logging.getLogger(__name__)


class AlleleSpecificAnnotation:
    """Base class: raw-value splitting shared by the allele-specific finalizers."""

    raw_key: str = ""
    key: str = ""

    def accepts(self, raw_value: Any) -> bool:
        return isinstance(raw_value, (str, list, tuple))

    def allele_entries(self, current: VariantRecord, original: VariantRecord) -> list[str]:
        raw = original.attributes[self.raw_key]
        entries = split_allele_entries(self.raw_key, raw, AS_ALLELE_SEPARATOR)
        if len(entries) < len(current.alleles):
            raise AttributeParseError(
                self.raw_key,
                raw,
                f"expected an entry for each of {len(current.alleles)} alleles, found {len(entries)}",
            )
        return entries[: len(current.alleles)]

    def finalize_raw_data(self, current: VariantRecord, original: VariantRecord) -> dict[str, Any]:
        raise NotImplementedError

    def __repr__(self) -> str:
        return f"{type(self).__name__}({self.raw_key} -> {self.key})"


class AlleleSpecificMappingQuality(AlleleSpecificAnnotation):
    """AS_MQ: per-allele RMS mapping quality."""

    raw_key = AS_RAW_RMS_MAPPING_QUALITY_KEY
    key = AS_RMS_MAPPING_QUALITY_KEY

    def finalize_raw_data(self, current: VariantRecord, original: VariantRecord) -> dict[str, Any]:
        entries = self.allele_entries(current, original)
        values: list[float | None] = []
        for i in range(1, len(current.alleles)):
            parts = parse_float_list(self.raw_key, entries[i])
            if not parts:
                values.append(None)
                continue
            if len(parts) > 1:
                depth = parts[1]
            else:
                # read count comes from the finalized allele depths
                depth = sum(g.ad[i] for g in current.genotypes if g.ad is not None and len(g.ad) > i)
            values.append(rms_mapping_quality(parts[0], depth))
        return {self.key: values}


class _AlleleSpecificStrandBiasTest(AlleleSpecificAnnotation):
    """Shared table parsing for AS_FS and AS_SOR."""

    raw_key = AS_SB_TABLE_KEY

    def per_allele_tables(self, current: VariantRecord, original: VariantRecord) -> list[list[int] | None]:
        entries = self.allele_entries(current, original)
        ref_counts = parse_int_list(self.raw_key, entries[0], length=2)
        tables: list[list[int] | None] = []
        for entry in entries[1:]:
            if not entry:
                tables.append(None)
                continue
            tables.append(ref_counts + parse_int_list(self.raw_key, entry, length=2))
        return tables

    def statistic(self, table: list[int]) -> float:
        raise NotImplementedError

    def finalize_raw_data(self, current: VariantRecord, original: VariantRecord) -> dict[str, Any]:
        tables = self.per_allele_tables(current, original)
        return {self.key: [None if t is None else self.statistic(t) for t in tables]}


class AlleleSpecificFisherStrand(_AlleleSpecificStrandBiasTest):
    key = AS_FISHER_STRAND_KEY

    def statistic(self, table: list[int]) -> float:
        return fisher_strand(table)


class AlleleSpecificStrandOddsRatio(_AlleleSpecificStrandBiasTest):
    key = AS_STRAND_ODDS_RATIO_KEY

    def statistic(self, table: list[int]) -> float:
        return strand_odds_ratio(table)


def histogram_median(key: str, entry: str) -> float | None:
    """Weighted median of a flattened ``value,count,value,count`` histogram."""
    numbers = parse_float_list(key, entry)
    if not numbers:
        return None
    if len(numbers) % 2:
        raise AttributeParseError(key, entry, "histogram must hold value,count pairs")
    values = np.asarray(numbers[0::2])
    counts = np.asarray(numbers[1::2])
    if np.any(counts < 0) or np.any(counts != np.round(counts)):
        raise AttributeParseError(key, entry, "histogram counts must be non-negative integers")
    expanded = np.repeat(values, counts.astype(np.int64))
    if expanded.size == 0:
        return None
    return round(float(np.median(expanded)), 3)


class AlleleSpecificRankSum(AlleleSpecificAnnotation):
    """
    Rank-sum tests whose raw form is a per-alternate histogram of per-sample
    Z scores; the finalized value is the histogram median.
    """

    def __init__(self, raw_key: str, key: str):
        self.raw_key = raw_key
        self.key = key

    def finalize_raw_data(self, current: VariantRecord, original: VariantRecord) -> dict[str, Any]:
        entries = self.allele_entries(current, original)
        return {self.key: [histogram_median(self.raw_key, e) for e in entries[1:]]}


class AlleleSpecificQualByDepth(AlleleSpecificAnnotation):
    """AS_QD: per-allele QUALapprox over per-allele variant depth."""

    raw_key = AS_QUAL_APPROX_KEY
    key = AS_QUAL_BY_DEPTH_KEY

    def finalize_raw_data(self, current: VariantRecord, original: VariantRecord) -> dict[str, Any]:
        if not original.has_attribute(AS_VARIANT_DEPTH_KEY):
            logger.warning(
                "%s present without %s at %s; %s not computed",
                self.raw_key,
                AS_VARIANT_DEPTH_KEY,
                original.locus,
                self.key,
            )
            return {}
        quals = self.allele_entries(current, original)
        depth_entries = split_allele_entries(
            AS_VARIANT_DEPTH_KEY, original.attributes[AS_VARIANT_DEPTH_KEY], AS_ALLELE_SEPARATOR
        )
        if len(depth_entries) < len(current.alleles):
            raise AttributeParseError(
                AS_VARIANT_DEPTH_KEY,
                original.attributes[AS_VARIANT_DEPTH_KEY],
                f"expected an entry for each of {len(current.alleles)} alleles",
            )
        values: list[float | None] = []
        for i in range(1, len(current.alleles)):
            qual = parse_float_list(self.raw_key, quals[i])
            depth = parse_float_list(AS_VARIANT_DEPTH_KEY, depth_entries[i])
            if not qual or not depth or depth[0] <= 0:
                values.append(None)
            else:
                values.append(round(qual[0] / depth[0], 2))
        return {self.key: values}


def standard_allele_specific_annotations() -> list[AlleleSpecificAnnotation]:
    return [
        AlleleSpecificMappingQuality(),
        AlleleSpecificFisherStrand(),
        AlleleSpecificStrandOddsRatio(),
        AlleleSpecificRankSum(AS_RAW_MAP_QUAL_RANK_SUM_KEY, AS_MAP_QUAL_RANK_SUM_KEY),
        AlleleSpecificRankSum(AS_RAW_READ_POS_RANK_SUM_KEY, AS_READ_POS_RANK_SUM_KEY),
        AlleleSpecificRankSum(AS_RAW_BASE_QUAL_RANK_SUM_KEY, AS_BASE_QUAL_RANK_SUM_KEY),
        AlleleSpecificQualByDepth(),
    ]

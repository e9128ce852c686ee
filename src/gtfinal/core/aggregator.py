"""Per-record allele tally and strand-bias accumulator."""

from dataclasses import dataclass, field

import numpy as np

from ..config import StrandTableCell
from ..exceptions import AttributeParseError
from ..models.core import Allele


def _empty_strand_table() -> np.ndarray:
    return np.zeros(len(StrandTableCell), dtype=np.int64)


@dataclass
class AlleleStatsAggregator:
    """
    Accumulates called-allele counts and the 2x2 strand table for one record.

    Not thread-safe: every record finalization owns its own instance.
    """

    target_alleles: tuple[Allele, ...]
    counts: dict[Allele, int] = field(default_factory=dict)
    strand_table: np.ndarray = field(default_factory=_empty_strand_table)

    def __post_init__(self):
        self.target_alleles = tuple(self.target_alleles)
        # every target allele is reported, observed or not
        for allele in self.target_alleles:
            self.counts.setdefault(allele, 0)

    def add_allele(self, allele: Allele) -> None:
        if allele.is_no_call:
            return
        self.counts[allele] = self.counts.get(allele, 0) + 1

    def add_strand_counts(self, values) -> None:
        values = np.asarray(values, dtype=np.int64)
        if values.shape != self.strand_table.shape:
            raise AttributeParseError(
                "SB", values.tolist(), f"expected {len(self.strand_table)} strand counts"
            )
        if np.any(values < 0):
            raise AttributeParseError("SB", values.tolist(), "strand counts must be non-negative")
        self.strand_table += values

    def set_strand_table(self, values) -> None:
        self.strand_table = _empty_strand_table()
        self.add_strand_counts(values)

    def allele_number(self) -> int:
        """Total called alleles across the target alleles, reference included."""
        return sum(self.counts[a] for a in self.target_alleles)

    def allele_counts(self) -> list[int]:
        return [self.counts[a] for a in self.target_alleles if not a.is_reference]

    def allele_frequencies(self) -> list[float]:
        an = self.allele_number()
        if an == 0:
            return [0.0 for _ in self.allele_counts()]
        return [ac / an for ac in self.allele_counts()]

    def strand_counts(self) -> list[int]:
        return self.strand_table.tolist()

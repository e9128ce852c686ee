"""
Likelihood Index Table: canonical layout of diploid genotype-likelihood vectors.

For a site with N alleles (reference first) a diploid PL vector has
N * (N + 1) / 2 entries. The entry for the unordered allele pair (j, k) with
j <= k lives at position k * (k + 1) / 2 + j, so the enumeration runs:

    0/0, 0/1, 1/1, 0/2, 1/2, 2/2, 0/3, ...

Because the ordering only ever appends genotypes involving the newest allele,
the vector for the first N - 1 alleles is a prefix of the vector for N
alleles. Dropping a trailing allele is therefore a positional truncation.
"""

from dataclasses import dataclass
from math import comb

import numpy as np

from ..config import DEFAULT_PLOIDY, PIPELINE_MAX_ALT_COUNT, SUM_GL_THRESH_NOCALL

__all__ = [
    "LikelihoodIndexEntry",
    "LikelihoodIndexTable",
    "gq_log10_from_likelihoods",
    "is_informative",
    "num_likelihoods",
    "pls_to_log10_likelihoods",
    "second_smallest_minus_smallest",
]


def num_likelihoods(num_alleles: int, ploidy: int = DEFAULT_PLOIDY) -> int:
    """Number of genotypes for ``num_alleles`` alleles at the given ploidy."""
    if num_alleles < 1:
        raise ValueError(f"num_alleles must be at least 1, got {num_alleles}")
    if ploidy < 1:
        raise ValueError(f"ploidy must be at least 1, got {ploidy}")
    return comb(num_alleles + ploidy - 1, ploidy)


def _enumerate_pairs(num_alleles: int) -> tuple[tuple[int, int], ...]:
    return tuple((j, k) for k in range(num_alleles) for j in range(k + 1))


@dataclass(frozen=True)
class LikelihoodIndexEntry:
    """PL vector length and allele pair for each vector position."""

    num_alleles: int
    length: int
    allele_pairs: tuple[tuple[int, int], ...]

    def positions_within(self, allele_indices) -> list[int]:
        """Positions whose two allele indices both belong to ``allele_indices``."""
        allowed = set(allele_indices)
        return [i for i, (a, b) in enumerate(self.allele_pairs) if a in allowed and b in allowed]

    def positions_with_any(self, allele_indices) -> list[int]:
        """Positions where at least one allele index belongs to ``allele_indices``."""
        wanted = set(allele_indices)
        return [i for i, (a, b) in enumerate(self.allele_pairs) if a in wanted or b in wanted]


class LikelihoodIndexTable:
    """
    Immutable diploid lookup table built once for allele counts up to
    ``max_alt_count + 1``.

    Counts above the precomputed range are answered from the general
    combinatorial formula without being cached, so the table never changes
    after construction and can be shared across threads.
    """

    ploidy = DEFAULT_PLOIDY

    def __init__(self, max_alt_count: int = PIPELINE_MAX_ALT_COUNT):
        if max_alt_count < 1:
            raise ValueError(f"max_alt_count must be at least 1, got {max_alt_count}")
        self.max_alt_count = max_alt_count
        self._entries = tuple(
            self._build_entry(n) for n in range(1, max_alt_count + 2)
        )

    def _build_entry(self, num_alleles: int) -> LikelihoodIndexEntry:
        return LikelihoodIndexEntry(
            num_alleles=num_alleles,
            length=num_likelihoods(num_alleles, self.ploidy),
            allele_pairs=_enumerate_pairs(num_alleles),
        )

    def entry(self, num_alleles: int) -> LikelihoodIndexEntry:
        if num_alleles < 1:
            raise ValueError(f"num_alleles must be at least 1, got {num_alleles}")
        if num_alleles <= len(self._entries):
            return self._entries[num_alleles - 1]
        return self._build_entry(num_alleles)

    def likelihood_count(self, num_alleles: int) -> int:
        if 1 <= num_alleles <= len(self._entries):
            return self._entries[num_alleles - 1].length
        return num_likelihoods(num_alleles, self.ploidy)

    def allele_pair(self, num_alleles: int, index: int) -> tuple[int, int]:
        entry = self.entry(num_alleles)
        if not 0 <= index < entry.length:
            raise IndexError(
                f"PL index {index} out of range for {num_alleles} alleles (length {entry.length})"
            )
        return entry.allele_pairs[index]

    def __len__(self) -> int:
        return len(self._entries)


def pls_to_log10_likelihoods(pls) -> np.ndarray:
    """Phred-scaled likelihoods to log10 likelihoods (``-PL / 10``)."""
    return np.asarray(pls, dtype=np.float64) / -10.0


def is_informative(log10_likelihoods: np.ndarray) -> bool:
    """
    A likelihood vector supports a call when it carries evidence and is not flat.
    """
    if log10_likelihoods is None or len(log10_likelihoods) == 0:
        return False
    if float(np.sum(log10_likelihoods)) >= SUM_GL_THRESH_NOCALL:
        return False
    return bool(np.any(log10_likelihoods != log10_likelihoods[0]))


def second_smallest_minus_smallest(values, default: int = 0) -> int:
    if values is None or len(values) < 2:
        return default
    lowest_two = np.partition(np.asarray(values), 1)[:2]
    return int(lowest_two[1] - lowest_two[0])


def gq_log10_from_likelihoods(log10_likelihoods: np.ndarray) -> float:
    """log10 error probability of calling the most likely genotype: minus its margin over the runner-up."""
    if len(log10_likelihoods) < 2:
        return 0.0
    best, runner_up = np.sort(np.asarray(log10_likelihoods, dtype=np.float64))[::-1][:2]
    return float(runner_up - best)

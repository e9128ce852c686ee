"""
Strand-bias statistics from a 2x2 contingency table.

Tables are flattened as ``[ref_fwd, ref_rev, alt_fwd, alt_rev]``.

**FS** is the Phred-scaled two-sided Fisher exact p-value. Tables with more
than ``2 * TARGET_TABLE_SIZE`` reads are scaled down first so the test stays
sensitive to proportions rather than raw depth.

**SOR** is the symmetric odds ratio with a pseudocount of one per cell.
"""

import math

import numpy as np
from scipy.stats import fisher_exact

from ..config import MIN_PVALUE, TARGET_TABLE_SIZE

__all__ = [
    "decode_strand_table",
    "fisher_strand",
    "fisher_strand_pvalue",
    "normalize_contingency_table",
    "strand_odds_ratio",
]


def decode_strand_table(values) -> np.ndarray:
    table = np.asarray(values, dtype=np.int64)
    if table.size != 4:
        raise ValueError(f"Strand table must have 4 cells, got {table.size}")
    return table.reshape(2, 2)


def normalize_contingency_table(table: np.ndarray) -> np.ndarray:
    total = int(table.sum())
    if total <= TARGET_TABLE_SIZE * 2:
        return table
    norm_factor = total / TARGET_TABLE_SIZE
    return (table / norm_factor).astype(np.int64)


def fisher_strand_pvalue(values) -> float:
    table = normalize_contingency_table(decode_strand_table(values))
    _, pvalue = fisher_exact(table, alternative="two-sided")
    if math.isnan(pvalue):
        return 1.0
    return float(min(pvalue, 1.0))


def fisher_strand(values) -> float:
    pvalue = max(fisher_strand_pvalue(values), MIN_PVALUE)
    # max() keeps a p-value of 1 from producing -0.0
    return round(max(0.0, -10 * math.log10(pvalue)), 3)


def strand_odds_ratio(values) -> float:
    table = decode_strand_table(values).astype(np.float64) + 1.0
    (ref_fw, ref_rv), (alt_fw, alt_rv) = table
    symmetrical_ratio = (ref_fw * alt_rv) / (ref_rv * alt_fw) + (ref_rv * alt_fw) / (ref_fw * alt_rv)
    ref_ratio = min(ref_fw, ref_rv) / max(ref_fw, ref_rv)
    alt_ratio = min(alt_fw, alt_rv) / max(alt_fw, alt_rv)
    sor = math.log(symmetrical_ratio) + math.log(ref_ratio) - math.log(alt_ratio)
    return round(sor, 3)

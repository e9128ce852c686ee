"""Tests for the likelihood index table and PL helpers."""

import numpy as np
import pytest

from gtfinal.core.likelihoods import (
    LikelihoodIndexTable,
    gq_log10_from_likelihoods,
    is_informative,
    num_likelihoods,
    pls_to_log10_likelihoods,
    second_smallest_minus_smallest,
)


@pytest.mark.parametrize(
    "num_alleles, ploidy, expected",
    [(1, 2, 1), (2, 2, 3), (3, 2, 6), (7, 2, 28), (3, 1, 3), (2, 3, 4)],
)
def test_num_likelihoods(num_alleles, ploidy, expected):
    assert num_likelihoods(num_alleles, ploidy) == expected


def test_num_likelihoods_rejects_empty_allele_set():
    with pytest.raises(ValueError):
        num_likelihoods(0)


def test_canonical_enumeration_order(table):
    assert table.entry(3).allele_pairs == ((0, 0), (0, 1), (1, 1), (0, 2), (1, 2), (2, 2))
    assert table.entry(3).length == 6


def test_smaller_allele_sets_are_prefixes(table):
    for k in range(1, 8):
        smaller = table.entry(k).allele_pairs
        larger = table.entry(k + 1).allele_pairs
        assert larger[: len(smaller)] == smaller


def test_table_covers_configured_maximum():
    table = LikelihoodIndexTable(max_alt_count=6)
    assert len(table) == 7
    assert table.likelihood_count(7) == 28


def test_fallback_above_configured_maximum():
    table = LikelihoodIndexTable(max_alt_count=2)
    assert len(table) == 3
    assert table.likelihood_count(5) == 15
    assert table.entry(5).allele_pairs[14] == (4, 4)
    # fallback answers are not cached
    assert len(table) == 3


def test_allele_pair_out_of_range(table):
    with pytest.raises(IndexError):
        table.allele_pair(2, 3)


def test_positions_within_and_with_any(table):
    entry = table.entry(3)
    assert entry.positions_within([0, 1]) == [0, 1, 2]
    assert entry.positions_with_any([2]) == [3, 4, 5]


def test_second_smallest_minus_smallest():
    assert second_smallest_minus_smallest([0, 5, 20]) == 5
    assert second_smallest_minus_smallest([3, 3, 9]) == 0
    assert second_smallest_minus_smallest([7]) == 0
    assert second_smallest_minus_smallest([20, 8, 30, 12]) == 4


def test_is_informative():
    assert is_informative(pls_to_log10_likelihoods([0, 5, 20]))
    assert not is_informative(pls_to_log10_likelihoods([0, 0, 0]))
    assert not is_informative(pls_to_log10_likelihoods([10, 10, 10]))
    assert not is_informative(np.array([]))


def test_gq_log10_is_margin_of_best_genotype():
    assert gq_log10_from_likelihoods(pls_to_log10_likelihoods([0, 5, 20])) == pytest.approx(-0.5)
    assert gq_log10_from_likelihoods(pls_to_log10_likelihoods([20, 8, 30, 12])) == pytest.approx(-0.4)
    assert gq_log10_from_likelihoods(pls_to_log10_likelihoods([3, 3, 9])) == 0.0
    assert gq_log10_from_likelihoods(pls_to_log10_likelihoods([7])) == 0.0

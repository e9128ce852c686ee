"""Pytest configuration and fixtures."""

import sys
from pathlib import Path

import pytest

# Add src directory to path so tests use local code, not installed package
project_root = Path(__file__).parent.parent
src_dir = project_root / "src"
if str(src_dir) not in sys.path:
    sys.path.insert(0, str(src_dir))

from gtfinal.core.aggregator import AlleleStatsAggregator  # noqa: E402
from gtfinal.core.likelihoods import LikelihoodIndexTable  # noqa: E402
from gtfinal.models.core import (  # noqa: E402
    NO_CALL_ALLELE,
    NON_REF_ALLELE,
    Allele,
    SampleGenotype,
    VariantRecord,
)

REF_A = Allele.ref("A")
ALT_T = Allele.alt("T")
ALT_G = Allele.alt("G")
NO_CALL_PAIR = (NO_CALL_ALLELE, NO_CALL_ALLELE)


@pytest.fixture
def ref_a() -> Allele:
    return REF_A


@pytest.fixture
def alt_t() -> Allele:
    return ALT_T


@pytest.fixture
def alt_g() -> Allele:
    return ALT_G


@pytest.fixture
def non_ref() -> Allele:
    return NON_REF_ALLELE


@pytest.fixture(scope="session")
def table() -> LikelihoodIndexTable:
    return LikelihoodIndexTable()


@pytest.fixture
def make_genotype():
    """Factory for sample genotypes; alleles default to an uncalled diploid."""

    def _make(sample="s1", alleles=NO_CALL_PAIR, pl=None, ad=None, gq=None, **attributes):
        return SampleGenotype(
            sample=sample, alleles=tuple(alleles), pl=pl, ad=ad, gq=gq, attributes=attributes
        )

    return _make


@pytest.fixture
def make_record():
    """Factory for merged records at chr1:1000 with REF/ALT/<NON_REF> by default."""

    def _make(alleles=(REF_A, ALT_T, NON_REF_ALLELE), genotypes=(), position=1000, **attributes):
        return VariantRecord(
            contig="chr1",
            position=position,
            alleles=tuple(alleles),
            attributes=attributes,
            genotypes=tuple(genotypes),
        )

    return _make


@pytest.fixture
def make_aggregator():
    def _make(target_alleles=(REF_A, ALT_T)):
        return AlleleStatsAggregator(tuple(target_alleles))

    return _make

"""Tests for batch finalization and the parallel processor."""

import io

import pytest
from rich.console import Console

from gtfinal.exceptions import BadInputError
from gtfinal.models.core import Allele, FinalizerConfig
from gtfinal.parallel import ParallelProcessor, parallel_map
from gtfinal.pipeline import Pipeline


@pytest.fixture
def quiet_console():
    return Console(file=io.StringIO(), force_terminal=False)


@pytest.fixture
def records(make_record, make_genotype, ref_a, alt_t):
    """Ten records at increasing positions; every third one is below the SNP threshold."""
    out = []
    for i in range(10):
        g = make_genotype(sample="s1", pl=(20, 0, 30, 25, 35, 60), ad=(5, 5, 0))
        out.append(
            make_record(
                genotypes=[g],
                position=100 + i,
                DP=10,
                QUALapprox=30 if i % 3 == 0 else 120,
                VarDP=10,
            )
        )
    return out


@pytest.mark.parametrize("n_jobs", [1, 4])
def test_run_keeps_input_order_and_drops_failures(records, quiet_console, n_jobs):
    pipeline = Pipeline(n_jobs=n_jobs, console=quiet_console)

    finalized = pipeline.run(records)

    assert [r.position for r in finalized] == [101, 102, 104, 105, 107, 108]
    assert all(r.attributes["AC"] == 1 for r in finalized)
    output = quiet_console.file.getvalue()
    assert "6" in output
    assert "4" in output


def test_run_with_progress(records, quiet_console):
    pipeline = Pipeline(n_jobs=2, console=quiet_console)
    assert len(pipeline.run(records, show_progress=True)) == 6


def test_run_empty_input(quiet_console):
    pipeline = Pipeline(console=quiet_console)
    assert pipeline.run([]) == []
    assert "No records" in quiet_console.file.getvalue()


def test_bad_input_fails_the_batch(records, make_record, make_genotype, ref_a, quiet_console):
    haploid_alt = make_genotype(sample="bad", alleles=(Allele.alt("T"),))
    broken = make_record(genotypes=[haploid_alt], position=500, DP=10, QUALapprox=120)
    pipeline = Pipeline(n_jobs=2, console=quiet_console)

    with pytest.raises(BadInputError, match="bad"):
        pipeline.run(records + [broken])


def test_finalize_one_uses_config(records, quiet_console):
    pipeline = Pipeline(config=FinalizerConfig(summarize_likelihoods=True), console=quiet_console)
    result = pipeline.finalize_one(records[1])
    assert result.genotypes[0].pl is None
    assert result.genotypes[0].attributes["RGQ"] == 20


def test_parallel_map_preserves_order():
    assert parallel_map(lambda x: x * x, list(range(20)), n_jobs=3, show_progress=False) == [
        x * x for x in range(20)
    ]


@pytest.mark.parametrize("n_jobs", [0, -2])
def test_invalid_job_count(n_jobs):
    with pytest.raises(ValueError):
        ParallelProcessor(n_jobs=n_jobs)


def test_all_cpus():
    assert ParallelProcessor(n_jobs=-1).n_jobs >= 1

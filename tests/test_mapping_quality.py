"""Tests for RMS mapping-quality finalization."""

import pytest

from gtfinal.annotations.mapping_quality import finalize_raw_mapping_quality, rms_mapping_quality
from gtfinal.exceptions import AttributeParseError


def test_rms_mapping_quality():
    assert rms_mapping_quality(360000.0, 100) == 60.0
    assert rms_mapping_quality(1000.0, 0) is None


@pytest.mark.parametrize("raw", [[360000, 100], "360000.00,100", (360000.0, 100.0)])
def test_raw_mq_and_dp(make_record, raw):
    record = make_record(RAW_MQandDP=raw, DP=100)

    finalized = finalize_raw_mapping_quality(record)

    assert finalized.attributes["MQ"] == 60.0
    assert "RAW_MQandDP" not in finalized.attributes
    assert finalized.attributes["DP"] == 100
    # input untouched
    assert "RAW_MQandDP" in record.attributes


def test_legacy_raw_mq_uses_mq_dp(make_record):
    record = make_record(RAW_MQ=90000.0, MQ_DP=25, DP=40)

    finalized = finalize_raw_mapping_quality(record)

    assert finalized.attributes["MQ"] == 60.0
    assert "RAW_MQ" not in finalized.attributes
    assert "MQ_DP" not in finalized.attributes


def test_legacy_raw_mq_falls_back_to_dp(make_record):
    record = make_record(RAW_MQ=250000.0, DP=100)
    assert finalize_raw_mapping_quality(record).attributes["MQ"] == 50.0


def test_zero_reads_leaves_mq_unset(make_record):
    record = make_record(RAW_MQandDP=[0, 0])
    finalized = finalize_raw_mapping_quality(record)
    assert "MQ" not in finalized.attributes
    assert "RAW_MQandDP" not in finalized.attributes


def test_no_raw_mapping_quality(make_record):
    record = make_record(DP=10)
    assert finalize_raw_mapping_quality(record) is record


@pytest.mark.parametrize("raw", ["360000", "360000,100,5", "abc,100"])
def test_malformed_raw_mq_and_dp(make_record, raw):
    record = make_record(RAW_MQandDP=raw)
    with pytest.raises(AttributeParseError):
        finalize_raw_mapping_quality(record)

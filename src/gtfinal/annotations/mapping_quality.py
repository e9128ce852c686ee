"""RMS mapping-quality finalization."""

import logging
import math

from ..config import (
    DEPTH_KEY,
    MAPPING_QUALITY_DEPTH_KEY,
    RAW_MAPPING_QUALITY_KEY,
    RAW_MQ_AND_DP_KEY,
    RMS_MAPPING_QUALITY_KEY,
)
from ..exceptions import AttributeParseError
from ..models.builders import RecordBuilder
from ..models.core import VariantRecord
from ..utils.attributes import parse_float, parse_float_list

logger = logging.getLogger(__name__)


def rms_mapping_quality(sum_of_squares: float, num_reads: float) -> float | None:
    if num_reads <= 0:
        return None
    return round(math.sqrt(sum_of_squares / num_reads), 2)


def finalize_raw_mapping_quality(record: VariantRecord) -> VariantRecord:
    """
    Turn the raw MQ sums on ``record`` into a finalized ``MQ``.

    Two raw encodings are understood: ``RAW_MQandDP`` holding the sum of
    squared mapping qualities and the read count, and the older ``RAW_MQ``
    sum whose read count comes from ``MQ_DP`` (or ``DP`` when that is absent).
    The raw keys are removed from the returned record.
    """
    if record.has_attribute(RAW_MQ_AND_DP_KEY):
        values = parse_float_list(RAW_MQ_AND_DP_KEY, record.attributes[RAW_MQ_AND_DP_KEY])
        if len(values) != 2:
            raise AttributeParseError(
                RAW_MQ_AND_DP_KEY, record.attributes[RAW_MQ_AND_DP_KEY], "expected sum and count"
            )
        builder = RecordBuilder(record).rm_attribute(RAW_MQ_AND_DP_KEY)
        mq = rms_mapping_quality(values[0], values[1])
    elif record.has_attribute(RAW_MAPPING_QUALITY_KEY):
        raw = parse_float(RAW_MAPPING_QUALITY_KEY, record.attributes[RAW_MAPPING_QUALITY_KEY])
        if record.has_attribute(MAPPING_QUALITY_DEPTH_KEY):
            depth = record.attribute_as_float(MAPPING_QUALITY_DEPTH_KEY, 0.0)
        else:
            depth = record.attribute_as_float(DEPTH_KEY, 0.0)
        builder = (
            RecordBuilder(record)
            .rm_attribute(RAW_MAPPING_QUALITY_KEY)
            .rm_attribute(MAPPING_QUALITY_DEPTH_KEY)
        )
        mq = rms_mapping_quality(raw, depth)
    else:
        return record

    if mq is None:
        logger.debug("No reads contributed to MQ at %s; MQ not set", record.locus)
    else:
        builder.attribute(RMS_MAPPING_QUALITY_KEY, mq)
    return builder.make()

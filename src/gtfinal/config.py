"""Attribute keys, defaults and enums shared across gtfinal."""

from enum import IntEnum


class StrandTableCell(IntEnum):
    """Positions in the flattened 2x2 strand-bias table."""

    REF_FORWARD = 0
    REF_REVERSE = 1
    ALT_FORWARD = 2
    ALT_REVERSE = 3


# Calling defaults
DEFAULT_PLOIDY = 2
DEFAULT_STANDARD_CONFIDENCE = 30.0
SNP_HETEROZYGOSITY = 1e-3
INDEL_HETEROZYGOSITY = 1.25e-4
PIPELINE_MAX_ALT_COUNT = 6

# Sum of log10 genotype likelihoods at or above this is treated as uninformative
SUM_GL_THRESH_NOCALL = -0.1

# Strand-bias table normalization
TARGET_TABLE_SIZE = 200
MIN_PVALUE = 1e-320

# Record-level (INFO) keys
DEPTH_KEY = "DP"
RAW_QUAL_APPROX_KEY = "QUALapprox"
VARIANT_DEPTH_KEY = "VarDP"
QUAL_BY_DEPTH_KEY = "QD"
ALLELE_COUNT_KEY = "AC"
ALLELE_FREQUENCY_KEY = "AF"
ALLELE_NUMBER_KEY = "AN"
FISHER_STRAND_KEY = "FS"
STRAND_ODDS_RATIO_KEY = "SOR"
SB_TABLE_KEY = "SB_TABLE"
RAW_MQ_AND_DP_KEY = "RAW_MQandDP"
RAW_MAPPING_QUALITY_KEY = "RAW_MQ"
MAPPING_QUALITY_DEPTH_KEY = "MQ_DP"
RMS_MAPPING_QUALITY_KEY = "MQ"

# Allele-specific keys
AS_RAW_RMS_MAPPING_QUALITY_KEY = "AS_RAW_MQ"
AS_RMS_MAPPING_QUALITY_KEY = "AS_MQ"
AS_SB_TABLE_KEY = "AS_SB_TABLE"
AS_FISHER_STRAND_KEY = "AS_FS"
AS_STRAND_ODDS_RATIO_KEY = "AS_SOR"
AS_RAW_MAP_QUAL_RANK_SUM_KEY = "AS_RAW_MQRankSum"
AS_MAP_QUAL_RANK_SUM_KEY = "AS_MQRankSum"
AS_RAW_READ_POS_RANK_SUM_KEY = "AS_RAW_ReadPosRankSum"
AS_READ_POS_RANK_SUM_KEY = "AS_ReadPosRankSum"
AS_RAW_BASE_QUAL_RANK_SUM_KEY = "AS_RAW_BaseQRankSum"
AS_BASE_QUAL_RANK_SUM_KEY = "AS_BaseQRankSum"
AS_QUAL_APPROX_KEY = "AS_QUALapprox"
AS_VARIANT_DEPTH_KEY = "AS_VarDP"
AS_QUAL_BY_DEPTH_KEY = "AS_QD"

# Per-sample (FORMAT) keys
STRAND_BIAS_BY_SAMPLE_KEY = "SB"
MIN_DP_FORMAT_KEY = "MIN_DP"
REFERENCE_GENOTYPE_QUALITY = "RGQ"
GENOTYPE_QUALITY_BY_ALLELE_BALANCE = "ABGQ"
GENOTYPE_QUALITY_BY_ALT_CONFIDENCE = "ALTGQ"

# Separator between per-allele entries in allele-specific raw annotations
AS_ALLELE_SEPARATOR = "|"

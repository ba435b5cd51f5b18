"""Shared thresholds and unit conversions for faff detection."""

SPEED_THRESHOLD = 0.75  # m/s; samples below this count as "slow"

DEFAULT_GAP_THRESHOLD_MS = 120_000

# Neighbouring periods closer than this are folded together
SLOW_MERGE_TOLERANCE_MS = 60_000
GAP_MERGE_TOLERANCE_MS = 60_000

# Garmin semicircles: 2^31 semicircles == 180 degrees
SEMICIRCLE_TO_DEGREES = 180 / 2**31

MS_PER_SECOND = 1000
MS_PER_MINUTE = 60 * MS_PER_SECOND

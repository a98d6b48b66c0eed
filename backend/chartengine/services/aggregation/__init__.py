"""
Bucket Aggregation Service

Re-buckets a base-resolution OHLCV feed into a coarser display resolution.
"""

from chartengine.services.aggregation.aggregator import (
    aggregate,
    bucket_key,
    validate_interval,
)

__all__ = ["aggregate", "bucket_key", "validate_interval"]

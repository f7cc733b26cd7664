"""
Processing Module
=================

Aggregation of source results and AI curation.
"""

from .aggregator import ContentAggregator
from .curator import ContentCurator, fallback_curation, parse_curation_response

__all__ = [
    'ContentAggregator',
    'ContentCurator',
    'fallback_curation',
    'parse_curation_response',
]

"""
StoryCurator - Content Aggregation & Curation Pipeline
======================================================

Pulls items from feeds and JSON listings, curates them with an AI model
for a learner community, and posts the result to a chat channel.

Main Components:
- Sources: RSS/Atom feeds and JSON listing endpoints
- Processing: concurrent aggregation and AI curation with fallback
- Delivery: Slack Block Kit rendering, Slack/Telegram gateways
- Storage: SQLite ledger of already shared items
"""

__version__ = "1.0.0"
__author__ = "Second Story Development Team"
__description__ = "AI-curated content sharing for learner communities"

from .config.settings import get_settings
from .utils.logging import configure_application_logging, get_logger_for_component
from .utils.exceptions import StoryCuratorError

__all__ = [
    "get_settings",
    "configure_application_logging",
    "get_logger_for_component",
    "StoryCuratorError",
]

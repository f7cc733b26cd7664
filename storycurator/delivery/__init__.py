"""
Delivery Module
===============

Block rendering, messaging gateways and the publisher.
"""

from .block_formatter import BlockFormatter, blocks_to_text, escape_mrkdwn
from .gateway import MessagingGateway, PostResult, SlackGateway, TelegramGateway
from .publisher import Publisher, ShareResult

__all__ = [
    'BlockFormatter',
    'blocks_to_text',
    'escape_mrkdwn',
    'MessagingGateway',
    'PostResult',
    'SlackGateway',
    'TelegramGateway',
    'Publisher',
    'ShareResult',
]

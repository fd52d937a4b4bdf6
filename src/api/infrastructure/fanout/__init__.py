"""Concrete fanout target adapters."""

from infrastructure.fanout.channel_notifier import RedisChannelNotifier
from infrastructure.fanout.search_indexer import HttpSearchIndexer, create_search_client
from infrastructure.fanout.stream_publisher import RedisStreamPublisher

__all__ = [
    "HttpSearchIndexer",
    "RedisChannelNotifier",
    "RedisStreamPublisher",
    "create_search_client",
]

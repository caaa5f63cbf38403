from .digest import aggregate, bucket_filename, partition, render
from .fetcher import FeedFetcher, FetchOutcome, FetchState
from .parser import parse_feed
from .subscriptions import load_channels, parse_outline

__all__ = [
    "FeedFetcher",
    "FetchOutcome",
    "FetchState",
    "aggregate",
    "bucket_filename",
    "load_channels",
    "parse_feed",
    "parse_outline",
    "partition",
    "render",
]

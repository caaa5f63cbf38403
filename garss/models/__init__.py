from .feed import Channel, Entry

__all__ = ["Channel", "Entry"]

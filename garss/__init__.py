"""Fetch syndication feeds listed in an OPML file and render Markdown digests."""

__version__ = "0.1.0"

"""Zero Music - audio library index and byte-range streaming server."""

__version__ = "1.0.0"

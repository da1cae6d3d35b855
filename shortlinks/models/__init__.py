"""
Data models for the link shortener service.
"""

from shortlinks.models.link import LinkRecord, ShortLink, utcnow

__all__ = ["LinkRecord", "ShortLink", "utcnow"]

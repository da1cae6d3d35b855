"""Core module for the link shortener service."""

from shortlinks.core.config import settings

__all__ = ["settings"]

"""Database module for the link shortener service."""
from shortlinks.db.base import create_engine_from_url, create_session_factory
from shortlinks.db.session import transaction_context

__all__ = [
    "create_engine_from_url",
    "create_session_factory",
    "transaction_context",
]

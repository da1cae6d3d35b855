"""Short-code allocation and resolution service."""

__version__ = "0.1.0"

"""Short code generation and validation."""

import secrets
import string
from dataclasses import dataclass
from enum import Enum
from random import Random
from typing import Optional

ALPHABET = string.ascii_letters + string.digits + "_-"


class CodeValidationFailure(str, Enum):
    TOO_SHORT = "too_short"
    TOO_LONG = "too_long"
    INVALID_CHARACTER = "invalid_character"


@dataclass(frozen=True)
class CodeValidationResult:
    """Outcome of checking a custom code against the syntax policy."""
    failure: Optional[CodeValidationFailure] = None
    message: str = ""
    
    @property
    def is_valid(self) -> bool:
        return self.failure is None
    
    def __bool__(self) -> bool:
        return self.is_valid


class CodeGenerator:
    """
    Produces random short codes and validates custom ones.
    
    Random codes are drawn uniformly from ``ALPHABET`` using the injected
    random source, a ``secrets.SystemRandom`` by default. Tests pass a
    seeded ``random.Random`` to make collisions reproducible.
    """
    
    def __init__(
        self,
        length: int = 6,
        min_length: int = 3,
        max_length: int = 32,
        random_source: Optional[Random] = None,
    ):
        if not min_length <= length <= max_length:
            raise ValueError(f"Code length {length} outside [{min_length}, {max_length}]")
        self.length = length
        self.min_length = min_length
        self.max_length = max_length
        self.alphabet = ALPHABET
        self._allowed = frozenset(ALPHABET)
        self._random = random_source or secrets.SystemRandom()
    
    def generate_random(self) -> str:
        """Return a fresh random code of ``self.length`` characters."""
        return "".join(self._random.choice(self.alphabet) for _ in range(self.length))
    
    def validate_custom(self, code: str) -> CodeValidationResult:
        """
        Check a user-supplied code.
        
        Length is checked before the alphabet, so an over-long code with
        bad characters reports TOO_LONG.
        """
        if len(code) < self.min_length:
            return CodeValidationResult(
                CodeValidationFailure.TOO_SHORT,
                f"Custom code must be at least {self.min_length} characters long",
            )
        if len(code) > self.max_length:
            return CodeValidationResult(
                CodeValidationFailure.TOO_LONG,
                f"Custom code must be at most {self.max_length} characters long",
            )
        for char in code:
            if char not in self._allowed:
                return CodeValidationResult(
                    CodeValidationFailure.INVALID_CHARACTER,
                    f"Custom code contains invalid character {char!r}; "
                    f"use letters, digits, '_' and '-' only",
                )
        return CodeValidationResult()

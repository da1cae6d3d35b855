"""Service layer for the link shortener service.

Services orchestrate code generation and link stores and provide the
domain operations consumed by the API layer.
"""

from shortlinks.services.codes import CodeGenerator, CodeValidationFailure, CodeValidationResult
from shortlinks.services.shortener import ShortenerService

__all__ = ["CodeGenerator", "CodeValidationFailure", "CodeValidationResult", "ShortenerService"]

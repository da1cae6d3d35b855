"""HTTP error type for the link API.

Routes raise ``APIError`` and the application's handler renders it as
``{"error": message}`` (plus ``reason`` when one applies).
"""

from typing import Optional

from fastapi import HTTPException


class APIError(HTTPException):
    def __init__(self, status_code: int, message: str, reason: Optional[str] = None, headers=None):
        super().__init__(status_code=status_code, detail=message, headers=headers)
        self.reason = reason

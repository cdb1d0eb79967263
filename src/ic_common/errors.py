"""Unified error codes and custom exceptions.

Error code ranges:
  1xxx: Request validation
  2xxx: Item
  9xxx: System
"""


class AppError(Exception):
    """Base application error."""

    def __init__(
        self,
        code: int,
        message: str,
        http_status: int = 500,
    ) -> None:
        self.code = code
        self.message = message
        self.http_status = http_status
        super().__init__(message)


# --- 1xxx: Request validation ---

class InvalidRequestError(AppError):
    def __init__(self, detail: str) -> None:
        super().__init__(1001, f"Invalid request: {detail}", 400)


# --- 2xxx: Item ---

class ItemNotFoundError(AppError):
    def __init__(self, item_id: int) -> None:
        super().__init__(2001, f"Item not found: {item_id}", 404)


# --- 9xxx: System ---

class InternalError(AppError):
    def __init__(self, detail: str = "Internal server error") -> None:
        super().__init__(9002, detail, 500)

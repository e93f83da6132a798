"""
Exceptions raised by uowkit itself.

Errors coming from SQLAlchemy or the database driver are never wrapped;
they reach the caller with their original type.
"""

from typing import Any, Optional


class UowKitError(Exception):
    """Base error for uowkit."""

    def __init__(
        self,
        message: str,
        details: Optional[dict[str, Any]] = None
    ):
        self.message = message
        self.details = details or {}
        super().__init__(self.message)


class InvalidPageArgumentError(UowKitError, ValueError):
    """Page size or page number outside of the accepted range."""

    def __init__(self, argument: str, message: str):
        self.argument = argument
        super().__init__(message=message, details={"argument": argument})


class PageNotFoundError(UowKitError):
    """The requested page is beyond the last page of the collection."""

    def __init__(self, page_number: int, total_pages: int):
        self.page_number = page_number
        self.total_pages = total_pages
        super().__init__(
            message=f"Not found the page {page_number}, the range of pages is 0 to {total_pages - 1}.",
            details={"page_number": page_number, "total_pages": total_pages}
        )


class DuplicateKeyError(UowKitError, ValueError):
    """The key selector produced the same key twice within one page."""

    def __init__(self, key: Any):
        self.key = key
        super().__init__(
            message=f"Duplicate key {key!r} in paged dictionary",
            details={"key": key}
        )

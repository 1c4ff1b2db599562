"""Error Hierarchy — typed, categorized exceptions for all TagShop failure modes.

Invariants:
    - Every error has a code (str), category (ErrorCategory), severity (ErrorSeverity)
    - Transaction validation errors (400-level) are terminal and leave no mutation behind
    - Adapter errors (500-level) wrap any store/ledger failure or unexpected response shape
    - to_response() produces the REST envelope; no internal details leaked in messages

Design Decisions:
    - Single hierarchy with TagShopError base: FastAPI global handler catches all
    - DatabaseError and LedgerError share AdapterFailureError so the engine can
      treat "a collaborator failed" uniformly
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import Any
from datetime import datetime, timezone


class ErrorSeverity(str, Enum):
    """Error severity for observability and client handling."""
    INFO = "info"
    WARNING = "warning"
    ERROR = "error"
    CRITICAL = "critical"


class ErrorCategory(str, Enum):
    """High-level error categories for routing and handling."""
    VALIDATION = "validation"
    BUSINESS_RULE = "business_rule"
    RESOURCE_NOT_FOUND = "resource_not_found"
    DATABASE = "database"
    EXTERNAL_API = "external_api"
    INTERNAL = "internal"
    CONFLICT = "conflict"


@dataclass
class ErrorContext:
    """Rich context for error observability and debugging."""
    timestamp: datetime = field(default_factory=lambda: datetime.now(timezone.utc))
    identity: str | None = None
    tag_id: int | None = None
    operation: str | None = None
    user_message: str | None = None
    debug_info: dict[str, Any] | None = None


class TagShopError(Exception):
    """Base exception for all TagShop errors."""

    def __init__(
        self,
        message: str,
        code: str,
        category: ErrorCategory,
        severity: ErrorSeverity = ErrorSeverity.ERROR,
        context: ErrorContext | None = None,
        http_status: int = 500,
    ):
        super().__init__(message)
        self.message = message
        self.code = code
        self.category = category
        self.severity = severity
        self.context = context or ErrorContext()
        self.http_status = http_status

    def to_response(self) -> dict:
        """Convert to standardized REST error response."""
        return {
            "error": {
                "code": self.code,
                "message": self.context.user_message or self.message,
                "category": self.category.value,
                "severity": self.severity.value,
                "timestamp": self.context.timestamp.isoformat(),
                "context": {
                    "identity": self.context.identity,
                    "tag_id": self.context.tag_id,
                    "operation": self.context.operation,
                },
            }
        }


# ─── Transaction Errors (400-level) ─────────────────────────────

class InvalidIdentityError(TagShopError):
    """Player name is blank or too long to key the store and ledger."""
    def __init__(self, reason: str, context: ErrorContext | None = None):
        super().__init__(
            f"Invalid player name: {reason}",
            "INVALID_IDENTITY", ErrorCategory.VALIDATION,
            ErrorSeverity.WARNING, context, 400,
        )
        self.reason = reason


class TagNotFoundError(TagShopError):
    """Requested tag id is not in the current catalog."""
    def __init__(self, tag_id: int, context: ErrorContext | None = None):
        super().__init__(
            f"Tag {tag_id} does not exist",
            "TAG_NOT_FOUND", ErrorCategory.RESOURCE_NOT_FOUND,
            ErrorSeverity.WARNING, context, 404,
        )
        self.tag_id = tag_id


class TagAlreadyOwnedError(TagShopError):
    """Player already owns the tag they tried to buy."""
    def __init__(self, tag_id: int, context: ErrorContext | None = None):
        super().__init__(
            f"Tag {tag_id} is already owned",
            "TAG_ALREADY_OWNED", ErrorCategory.CONFLICT,
            ErrorSeverity.WARNING, context, 409,
        )
        self.tag_id = tag_id


class NoTagOwnedError(TagShopError):
    """Sell requested by a player who owns no tag."""
    def __init__(self, context: ErrorContext | None = None):
        super().__init__(
            "Player does not own a tag",
            "NO_TAG_OWNED", ErrorCategory.CONFLICT,
            ErrorSeverity.WARNING, context, 409,
        )


class InsufficientFundsError(TagShopError):
    """Ledger balance is lower than the tag price."""
    def __init__(self, deficit: int, context: ErrorContext | None = None):
        super().__init__(
            f"Insufficient funds: {deficit} more required",
            "INSUFFICIENT_FUNDS", ErrorCategory.BUSINESS_RULE,
            ErrorSeverity.WARNING, context, 402,
        )
        self.deficit = deficit


class CatalogFormatError(TagShopError):
    """A configured catalog entry is not 'displayText:price'."""
    def __init__(self, entry: str, reason: str, context: ErrorContext | None = None):
        super().__init__(
            f"Invalid tag entry {entry!r}: {reason}",
            "CATALOG_FORMAT_ERROR", ErrorCategory.VALIDATION,
            ErrorSeverity.CRITICAL, context, 500,
        )
        self.entry = entry


# ─── Adapter Errors (500-level) ─────────────────────────────────

class AdapterFailureError(TagShopError):
    """A store or ledger call failed or returned an unexpected shape."""
    def __init__(
        self,
        message: str,
        adapter: str,
        operation: str,
        code: str = "ADAPTER_FAILURE",
        category: ErrorCategory = ErrorCategory.EXTERNAL_API,
        context: ErrorContext | None = None,
    ):
        ctx = context or ErrorContext()
        ctx.operation = ctx.operation or operation
        super().__init__(
            f"{adapter} {operation} failed: {message}",
            code, category, ErrorSeverity.CRITICAL, ctx, 503,
        )
        self.adapter = adapter
        self.operation = operation


class DatabaseError(AdapterFailureError):
    """Ownership store operation failed."""
    def __init__(self, message: str, operation: str, context: ErrorContext | None = None):
        super().__init__(
            message, "ownership_store", operation,
            "DATABASE_ERROR", ErrorCategory.DATABASE, context,
        )


class LedgerError(AdapterFailureError):
    """Ledger service call failed."""
    def __init__(
        self,
        message: str,
        operation: str,
        status_code: int | None = None,
        context: ErrorContext | None = None,
    ):
        super().__init__(
            message, "ledger", operation,
            "LEDGER_ERROR", ErrorCategory.EXTERNAL_API, context,
        )
        self.status_code = status_code

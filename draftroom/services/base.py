"""
Base service class with transaction management.

Provides a foundation for all service classes with:
- Transaction context manager for automatic commit/rollback
- Conflict detection and retry for optimistic concurrency
- Custom exception hierarchy for consistent error handling
"""

from contextlib import contextmanager
from functools import wraps
from typing import Any, Callable, Generator, TypeVar

from flask import current_app
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.orm.exc import StaleDataError

from draftroom import db
from draftroom.logger import get_logger

logger = get_logger(__name__)

F = TypeVar('F', bound=Callable[..., Any])


class ServiceError(Exception):
    """Base exception for service layer errors.

    Attributes:
        message: Human-readable error message.
        status_code: HTTP status code for the error response.
    """

    def __init__(self, message: str, status_code: int = 400):
        self.message = message
        self.status_code = status_code
        super().__init__(message)


class NotFoundError(ServiceError):
    """Exception raised when a requested resource is not found."""

    def __init__(self, message: str = "Resource not found"):
        super().__init__(message, 404)


class ValidationError(ServiceError):
    """Exception raised when input validation fails."""

    def __init__(self, message: str):
        super().__init__(message, 400)


class AuthorizationError(ServiceError):
    """Exception raised when authorization fails."""

    def __init__(self, message: str = "Not authorized"):
        super().__init__(message, 403)


class ConflictError(ServiceError):
    """Raised when a concurrent writer committed first; safe to retry."""

    def __init__(self, message: str = "The auction changed while saving. Please try again."):
        super().__init__(message, 409)


class InvalidStateError(ServiceError):
    """Raised when an operation is called in the wrong auction phase."""

    def __init__(self, message: str):
        super().__init__(message, 409)


class DuplicateNameError(ValidationError):
    def __init__(self):
        super().__init__("Auction name already exists, try a different one.")


class WrongPasswordError(AuthorizationError):
    def __init__(self):
        super().__init__("Incorrect password.")


class AuctionFullError(ServiceError):
    def __init__(self):
        super().__init__("Auction is full.", 409)


class EmptyQueueError(ValidationError):
    def __init__(self):
        super().__init__("No players to start the auction.")


class NoActivePlayerError(InvalidStateError):
    def __init__(self):
        super().__init__("No active player.")


class BidTooLowError(ValidationError):
    """Bid under the current minimum; carries the boundary for the UI."""

    def __init__(self, minimum_bid: int):
        self.minimum_bid = minimum_bid
        super().__init__(f"Bid must be at least {minimum_bid}.")


class InsufficientBudgetError(ValidationError):
    def __init__(self):
        super().__init__("Bid exceeds your remaining budget.")


class RosterReserveError(ValidationError):
    """Bid would leave too little budget to fill the remaining roster slots."""

    def __init__(self, max_bid: int):
        self.max_bid = max_bid
        super().__init__(
            "You can't bid that much, you won't have enough left to complete "
            f"your team. Your maximum bid is {max_bid}."
        )


class NotRelistableError(ValidationError):
    def __init__(self):
        super().__init__("Only unsold players can be relisted.")


class BaseService:
    """Base class for all services.

    Provides transaction management and common utilities for service classes.

    Example:
        class AuctionService(BaseService):
            @retry_on_conflict
            def place_bid(self, auction_id: str, client_id: str, amount: int):
                with AuctionLock(auction_id):
                    with self.transaction():
                        # Business logic here
                        # Automatically commits on success, rolls back on exception
                        pass
    """

    @contextmanager
    def transaction(self) -> Generator[None, None, None]:
        """Context manager for database transactions.

        Automatically commits on successful completion and rolls back on any
        exception. Re-raises ServiceError subclasses as-is, turns lost
        optimistic-concurrency races into ConflictError, and wraps other
        exceptions in a generic ServiceError.

        Raises:
            ServiceError: On database errors or unexpected exceptions.
        """
        try:
            yield
            db.session.commit()
        except ServiceError:
            db.session.rollback()
            raise
        except (StaleDataError, IntegrityError) as e:
            db.session.rollback()
            logger.info(f"Write conflict, transaction rolled back: {e}")
            raise ConflictError()
        except SQLAlchemyError as e:
            db.session.rollback()
            logger.error(f"Database error: {e}", exc_info=True)
            raise ServiceError("Database operation failed", 500)
        except Exception as e:
            db.session.rollback()
            logger.error(f"Unexpected error: {e}", exc_info=True)
            raise ServiceError("An unexpected error occurred", 500)

    def flush(self) -> None:
        """Flush pending changes to the database without committing.

        Useful when you need generated IDs before the transaction completes.
        """
        db.session.flush()


def retry_on_conflict(f: F) -> F:
    """
    Decorator re-running a whole service operation after a ConflictError.

    Each attempt re-reads the latest rows, so validation (minimum bid,
    budget, phase) is evaluated against whatever the winning writer
    committed. Gives up after TRANSACTION_MAX_RETRIES attempts.
    """
    @wraps(f)
    def wrapper(*args: Any, **kwargs: Any) -> Any:
        attempts = max(int(current_app.config.get('TRANSACTION_MAX_RETRIES', 5)), 1)
        for attempt in range(1, attempts + 1):
            try:
                return f(*args, **kwargs)
            except ConflictError:
                if attempt == attempts:
                    logger.warning(f"{f.__name__} gave up after {attempts} conflicting attempts")
                    raise
                # The rolled-back session may hold stale identity-map rows
                db.session.expire_all()
    return wrapper  # type: ignore

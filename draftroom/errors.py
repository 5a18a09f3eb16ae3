"""
Centralized error handling for the application.

Every failure reaches the client as
``{"success": false, "error": "<human-readable sentence>"}``; rejected bids
also carry the number the client needs to correct them.
"""

from flask import Flask
from werkzeug.exceptions import HTTPException

from draftroom.logger import get_logger
from draftroom.services.base import BidTooLowError, RosterReserveError, ServiceError
from draftroom.utils import error_response

logger = get_logger(__name__)

HTTP_ERROR_MESSAGES = {
    400: 'Bad request',
    404: 'Resource not found',
    405: 'Method not allowed',
    429: 'Too many requests. Please try again later.',
}


def register_error_handlers(app: Flask) -> None:
    """Register centralized error handlers with the Flask app.

    Args:
        app: Flask application instance.
    """

    @app.errorhandler(ServiceError)
    def handle_service_error(error: ServiceError):
        """Rejected operations: the message is safe to show as-is."""
        logger.info(f"Rejected ({error.status_code}): {error.message}")
        return error_response(error.message, error.status_code)

    @app.errorhandler(BidTooLowError)
    def handle_bid_too_low(error: BidTooLowError):
        logger.info(f"Rejected bid: {error.message}")
        return error_response(error.message, error.status_code, minimum_bid=error.minimum_bid)

    @app.errorhandler(RosterReserveError)
    def handle_roster_reserve(error: RosterReserveError):
        logger.info(f"Rejected bid: {error.message}")
        return error_response(error.message, error.status_code, max_bid=error.max_bid)

    @app.errorhandler(HTTPException)
    def handle_http_error(error: HTTPException):
        message = HTTP_ERROR_MESSAGES.get(error.code, error.description or error.name)
        return error_response(message, error.code or 500)

    @app.errorhandler(Exception)
    def handle_unexpected_error(error: Exception):
        """Log the failure and hide its details from the client."""
        logger.error(f"Unexpected error: {error}", exc_info=True)
        return error_response('An unexpected error occurred', 500)

"""
Centralized logging configuration for the draft room application.

Every record is tagged with the auction and client it concerns when it is
emitted while serving a request, so one draft can be followed through the
log. Production output is one JSON object per line.
"""

import json
import logging
import os
import sys
from datetime import datetime, timezone
from typing import Any, Dict, Optional, Tuple

from draftroom.constants import CLIENT_ID_HEADER

USE_JSON_LOGGING = os.environ.get('FLASK_CONFIG') == 'production'
LOG_LEVEL = getattr(logging, os.environ.get('LOG_LEVEL', 'INFO').upper(), logging.INFO)


def _request_identity() -> Tuple[str, str]:
    """(auction id, client id) of the request being served, '-' when unknown."""
    try:
        from flask import has_request_context, request
    except ImportError:
        return '-', '-'
    if not has_request_context():
        # Automation ticks and socket pushes run outside any request
        return '-', '-'
    auction_id = (request.view_args or {}).get('auction_id') or '-'
    client_id = request.headers.get(CLIENT_ID_HEADER) or '-'
    return auction_id, client_id


class AuctionContextFilter(logging.Filter):
    """Adds ``auction_id`` and ``client_id`` attributes to every record."""

    def filter(self, record: logging.LogRecord) -> bool:
        record.auction_id, record.client_id = _request_identity()
        return True


class JSONFormatter(logging.Formatter):
    """One JSON object per record, for log aggregation in production."""

    def format(self, record: logging.LogRecord) -> str:
        log_data: Dict[str, Any] = {
            'timestamp': datetime.now(timezone.utc).isoformat(),
            'level': record.levelname,
            'logger': record.name,
            'message': record.getMessage(),
            'auction_id': getattr(record, 'auction_id', '-'),
            'client_id': getattr(record, 'client_id', '-'),
        }

        if record.exc_info:
            log_data['exception'] = self.formatException(record.exc_info)

        if hasattr(record, 'audit'):
            log_data['audit'] = record.audit

        return json.dumps(log_data, default=str)


def setup_logger(
    name: str,
    level: int = LOG_LEVEL,
    use_json: Optional[bool] = None
) -> logging.Logger:
    """
    Set up and return a logger with consistent formatting.

    Args:
        name: Logger name (typically __name__ of the calling module)
        level: Logging level (default: LOG_LEVEL from the environment)
        use_json: Force JSON formatting (default: on in production)

    Returns:
        Configured logger instance
    """
    logger = logging.getLogger(name)

    # Avoid adding handlers multiple times
    if logger.handlers:
        return logger

    logger.setLevel(level)
    logger.addFilter(AuctionContextFilter())

    handler = logging.StreamHandler(sys.stdout)
    handler.setLevel(level)

    should_use_json = use_json if use_json is not None else USE_JSON_LOGGING
    if should_use_json:
        formatter = JSONFormatter()
    else:
        formatter = logging.Formatter(
            '[%(asctime)s] %(levelname)s [%(auction_id)s/%(client_id)s] %(name)s: %(message)s',
            datefmt='%Y-%m-%d %H:%M:%S',
        )

    handler.setFormatter(formatter)
    logger.addHandler(handler)
    return logger


def get_logger(name: str) -> logging.Logger:
    """
    Get or create a logger for the given name.

    Example:
        from draftroom.logger import get_logger
        logger = get_logger(__name__)
        logger.info("Auction started")
    """
    return setup_logger(name)


def get_automation_logger() -> logging.Logger:
    """Logger for the background automation driver."""
    return get_logger('draftroom.automation')


def log_audit(
    action: str,
    entity_type: str,
    entity_id: Optional[Any] = None,
    details: Optional[Dict[str, Any]] = None
) -> None:
    """Record a committed state transition on the audit logger.

    Args:
        action: What happened (e.g., 'bid_placed', 'player_sold')
        entity_type: 'auction' or 'participant'
        entity_id: Auction id or client id
        details: Extra fields, kept structured under ``audit`` in JSON output

    Example:
        log_audit('bid_placed', 'auction', auction.id, {
            'bidder_id': client_id,
            'amount': amount
        })
    """
    message = f"AUDIT: {action} on {entity_type}"
    if entity_id:
        message += f" (id={entity_id})"
    if details:
        message += f" - {json.dumps(details, default=str)}"

    get_logger('draftroom.audit').info(message, extra={'audit': {
        'action': action,
        'entity_type': entity_type,
        'entity_id': entity_id,
        **(details or {}),
    }})

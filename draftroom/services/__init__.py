"""
Service layer for business logic.

This module provides service classes that encapsulate the auction state
machine, separating it from HTTP handling in routes and data access in
repositories.
"""

from draftroom.services.base import (
    AuthorizationError,
    BaseService,
    ConflictError,
    InvalidStateError,
    NotFoundError,
    ServiceError,
    ValidationError,
)
from draftroom.services.auction_service import AuctionService, auction_service
from draftroom.services.finalization_service import FinalizationService, finalization_service

__all__ = [
    'BaseService',
    'ServiceError',
    'NotFoundError',
    'ValidationError',
    'AuthorizationError',
    'ConflictError',
    'InvalidStateError',
    'AuctionService',
    'auction_service',
    'FinalizationService',
    'finalization_service',
]

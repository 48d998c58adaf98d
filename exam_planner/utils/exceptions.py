"""Custom exception classes and error handling utilities."""
from typing import Any, Dict, Optional
from fastapi import HTTPException, status
from loguru import logger


class ExamPlannerException(Exception):
    """Base exception for the application."""

    def __init__(self, message: str, details: Optional[Dict[str, Any]] = None):
        self.message = message
        self.details = details or {}
        super().__init__(message)


class ConfigurationError(ExamPlannerException):
    """Plan settings that make scheduling impossible."""
    pass


class ResourceNotFoundError(ExamPlannerException):
    """Plan, subject, topic or session absent or owned by another account."""
    pass


class InvalidOperationError(ExamPlannerException):
    """Request that is well formed but cannot be applied."""
    pass


class PersistenceError(ExamPlannerException):
    """Write failure; the transaction has been rolled back."""
    pass


def handle_configuration_error(error: ConfigurationError) -> HTTPException:
    logger.warning(f"Configuration error: {error.message}")
    return HTTPException(
        status_code=status.HTTP_400_BAD_REQUEST,
        detail=error.message,
    )


def handle_not_found_error(error: ResourceNotFoundError) -> HTTPException:
    logger.info(f"Not found: {error.message}")
    return HTTPException(
        status_code=status.HTTP_404_NOT_FOUND,
        detail=error.message,
    )


def handle_invalid_operation_error(error: InvalidOperationError) -> HTTPException:
    logger.warning(f"Invalid operation: {error.message}")
    return HTTPException(
        status_code=status.HTTP_400_BAD_REQUEST,
        detail={
            "message": error.message,
            "details": error.details
        }
    )


def handle_persistence_error(error: PersistenceError) -> HTTPException:
    """Handle write failures without leaking storage details."""
    logger.error(f"Persistence error: {error.message}")
    return HTTPException(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        detail="Internal error while saving the schedule. Please try again later."
    )


def to_http_exception(error: ExamPlannerException) -> HTTPException:
    """Map a domain exception onto its HTTP response."""
    if isinstance(error, ConfigurationError):
        return handle_configuration_error(error)
    if isinstance(error, ResourceNotFoundError):
        return handle_not_found_error(error)
    if isinstance(error, InvalidOperationError):
        return handle_invalid_operation_error(error)
    return handle_persistence_error(error)

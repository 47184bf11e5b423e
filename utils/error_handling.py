"""
Error handling utilities for consistent error responses and logging.
"""

from functools import wraps
from typing import Callable, Any, Optional
from fastapi import HTTPException
from sqlalchemy.exc import SQLAlchemyError
from logger_config import logger


class VocabdeskError(Exception):
    """Base exception for Vocabdesk application errors."""

    def __init__(self, message: str, code: str = "GENERAL_ERROR", status_code: int = 500):
        self.message = message
        self.code = code
        self.status_code = status_code
        super().__init__(self.message)


class ValidationError(VocabdeskError):
    """Raised when input data is missing or malformed."""

    def __init__(self, message: str):
        super().__init__(message, code="VALIDATION_ERROR", status_code=400)


class InvalidImportFileError(VocabdeskError):
    """Raised when an uploaded import file cannot be read."""

    def __init__(self, message: str):
        super().__init__(message, code="INVALID_IMPORT_FILE", status_code=400)


class DuplicateVocabularyError(VocabdeskError):
    """Raised when an active vocabulary with the same word exists."""

    def __init__(self, word: str):
        self.word = word
        super().__init__(
            f"Vocabulary already exists: {word}",
            code="DUPLICATE_VOCABULARY",
            status_code=409
        )


class TopicNotFoundError(VocabdeskError):
    """Raised when a topic is missing or soft-deleted."""

    def __init__(self, topic_id: Optional[str] = None):
        self.topic_id = topic_id
        message = "Topic not found" + (f": {topic_id}" if topic_id else "")
        super().__init__(message, code="TOPIC_NOT_FOUND", status_code=404)


class VocabularyNotFoundError(VocabdeskError):
    """Raised when a vocabulary is not found."""

    def __init__(self, vocabulary_id: Optional[str] = None):
        message = "Vocabulary not found" + (f" (ID: {vocabulary_id})" if vocabulary_id else "")
        super().__init__(message, code="VOCABULARY_NOT_FOUND", status_code=404)


class DatabaseError(VocabdeskError):
    """Raised when a database operation fails."""

    def __init__(self, message: str = "Database operation failed"):
        super().__init__(message, code="DATABASE_ERROR", status_code=500)


class TranslationBackendError(VocabdeskError):
    """Raised by translation backends; absorbed by the batcher."""

    def __init__(self, message: str = "Translation backend failed"):
        super().__init__(message, code="TRANSLATION_ERROR", status_code=502)


def format_error_response(error: Exception) -> dict:
    """
    Format error as standard API response.

    Args:
        error: Exception to format

    Returns:
        Formatted error dictionary
    """
    if isinstance(error, VocabdeskError):
        return {
            "error": {
                "code": error.code,
                "message": error.message,
                "details": {}
            }
        }
    elif isinstance(error, HTTPException):
        return {
            "error": {
                "code": "HTTP_ERROR",
                "message": error.detail,
                "details": {"status_code": error.status_code}
            }
        }
    else:
        return {
            "error": {
                "code": "INTERNAL_ERROR",
                "message": "An internal error occurred",
                "details": {}
            }
        }


def handle_db_errors(func: Callable) -> Callable:
    """
    Decorator for database error handling.

    Application errors pass through untouched; SQLAlchemy errors
    are converted to DatabaseError.

    Args:
        func: Function to wrap

    Returns:
        Wrapped function
    """
    @wraps(func)
    def wrapper(*args, **kwargs) -> Any:
        try:
            return func(*args, **kwargs)
        except VocabdeskError:
            raise
        except SQLAlchemyError as e:
            logger.error(f"Database error in {func.__name__}: {e}")
            raise DatabaseError(f"Database error: {str(e)}")

    return wrapper

"""
Indexer Console - Custom Exceptions
"""
import structlog

logger = structlog.get_logger('exceptions')


class IndexerConsoleException(Exception):
    """Base exception for the indexer console"""
    def __init__(self, message: str, code: str = "INDEXER_CONSOLE_ERROR"):
        self.message = message
        self.code = code
        super().__init__(message)

    def to_dict(self):
        return {
            'error': True,
            'code': self.code,
            'message': self.message
        }


class ValidationException(IndexerConsoleException):
    """Validation-related exceptions"""
    def __init__(self, message: str):
        super().__init__(message, code="VALIDATION_ERROR")
        logger.warning(f"Validation error: {message}")


class CacheClearFailed(IndexerConsoleException):
    """Any failure of a clear request: error status, transport error or bad payload"""
    def __init__(self, message: str, detail: str = None):
        super().__init__(message, code="CACHE_CLEAR_FAILED")
        self.detail = detail
        logger.error(f"Cache clear failed: {detail or message}")


class IndexerCatalogException(IndexerConsoleException):
    """Indexer list could not be fetched or decoded"""
    def __init__(self, message: str):
        super().__init__(message, code="INDEXER_CATALOG_ERROR")
        logger.error(f"Indexer catalog error: {message}")

# src/reposcope/core/exceptions.py
from typing import Optional, Any


class ReposcopeException(Exception):
    """Base exception for reposcope. None of these are fatal."""
    def __init__(self, message: str, details: Optional[Any] = None):
        super().__init__(message)
        self.details = details


class ConflictError(ReposcopeException):
    """Raised when an add-mode scan overlaps an already scanned path and was not confirmed"""
    def __init__(self, message: str, conflict: Optional[Any] = None):
        super().__init__(message, details=conflict)
        self.conflict = conflict


class LockBusyError(ReposcopeException):
    """Raised when a scan or refresh is requested while another one is in flight"""
    pass


class ScanBackendError(ReposcopeException):
    """Raised when the scan backend fails; prior state stays untouched"""
    def __init__(self, message: str, path: Optional[str] = None, details: Optional[Any] = None):
        super().__init__(message, details)
        self.path = path


class PartialRefreshError(ReposcopeException):
    """Failure of a single scan root during refresh-all. Collected, never raised."""
    def __init__(self, message: str, root: str, details: Optional[Any] = None):
        super().__init__(message, details)
        self.root = root


class InvalidScanRequestError(ReposcopeException):
    """Raised for a scan request that cannot be started (e.g. empty path)"""
    pass


class ConfigurationError(ReposcopeException):
    """Raised when there's a configuration error"""
    pass


class BatchExecutionError(ReposcopeException):
    """Raised when the batch executor fails as a whole"""
    pass

"""
Faultline Exceptions

The decision engine itself never raises: every degenerate configuration
folds into "do not inject". Errors only surface while loading settings.
"""

from datetime import datetime
from typing import Any, Dict, Optional


class FaultlineException(Exception):
    """Base exception for all Faultline-specific errors."""

    def __init__(self, message: str, component: str = "unknown",
                 context: Optional[Dict[str, Any]] = None):
        """Initialize Faultline exception with metadata.

        Args:
            message: Error message
            component: Component where error occurred
            context: Additional context data
        """
        self.message = message
        self.component = component
        self.context = context or {}
        self.timestamp = datetime.now()
        super().__init__(self.message)

    def to_dict(self) -> Dict[str, Any]:
        """Convert exception to structured log format."""
        return {
            "error_type": self.__class__.__name__,
            "message": self.message,
            "component": self.component,
            "context": self.context,
            "timestamp": self.timestamp.isoformat(),
        }


class FaultConfigError(FaultlineException):
    """Raised when fault settings cannot be loaded or validated."""

    def __init__(self, message: str, context: Optional[Dict[str, Any]] = None):
        super().__init__(message, component="config", context=context)

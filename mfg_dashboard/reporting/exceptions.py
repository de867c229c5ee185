"""
Reporting Errors
"""

from typing import Optional


class DashboardQueryError(RuntimeError):
    """A dashboard metric could not be computed from the data store"""

    def __init__(self, message: str, metric: Optional[str] = None):
        super().__init__(message)
        self.metric = metric

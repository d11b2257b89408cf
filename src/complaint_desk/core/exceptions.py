"""Custom exception classes for Complaint Desk.

This module defines application-specific exceptions following Google Python
Style Guide.
"""


class ComplaintDeskError(Exception):
    """Base exception for all Complaint Desk errors."""

    pass


class ComplaintNotFoundError(ComplaintDeskError):
    """Raised when a requested complaint cannot be found."""

    def __init__(self, complaint_id: str):
        """Initialize the exception.

        Args:
            complaint_id: The ID of the complaint that was not found.
        """
        self.complaint_id = complaint_id
        super().__init__(f"Complaint '{complaint_id}' not found")


class ValidationError(ComplaintDeskError):
    """Raised when a required field is missing or malformed."""

    pass


class StorageError(ComplaintDeskError):
    """Raised when local storage cannot be read or written."""

    pass


class AssistantError(ComplaintDeskError):
    """Raised when an external AI collaborator call fails."""

    pass


class ConfigurationError(ComplaintDeskError):
    """Raised when there is a configuration error."""

    pass

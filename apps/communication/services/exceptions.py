"""Domain-specific exceptions for communication services."""


class CommunicationServiceError(Exception):
    """Base exception for communication services."""
    pass


class ContactNotFoundError(CommunicationServiceError):
    pass

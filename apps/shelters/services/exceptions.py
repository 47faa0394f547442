"""Domain-specific exceptions for shelters services."""


class SheltersServiceError(Exception):
    """Base exception for shelters services."""
    pass


class ShelterNotFoundError(SheltersServiceError):
    """Raised when shelter does not exist."""
    pass


class TeamNotFoundError(SheltersServiceError):
    """Raised when team does not exist."""
    pass


class DuplicateTeamError(SheltersServiceError):
    """Raised when a shelter already has a team with this number."""
    pass


class ProfileNotFoundError(SheltersServiceError):
    """Raised when a leader or member profile does not exist."""
    pass

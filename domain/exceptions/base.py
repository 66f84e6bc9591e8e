class DomainError(Exception):
    """Base class for every error surfaced to the user as a message."""

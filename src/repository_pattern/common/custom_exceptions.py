# src/repository_pattern/common/custom_exceptions.py


class RepositoryPatternException(Exception):
    """Base exception for the repository-pattern project."""
    pass


class ConfigException(RepositoryPatternException):
    """Exception related to configuration errors."""
    pass


class DatabaseException(RepositoryPatternException):
    """Exception related to database operations."""
    pass


class StoreUnavailableException(DatabaseException):
    """Raised when a repository cannot resolve its backing collection."""

    def __init__(self, message: str, collection_name: str = ""):
        super().__init__(message)
        self.collection_name = collection_name

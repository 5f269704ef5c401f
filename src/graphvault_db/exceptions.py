"""
Custom exceptions for graphvault_db module.
"""


class StorageError(Exception):
    """Raised when a storage operation fails."""
    pass


class ConnectionError(StorageError):
    """Raised when the SQLite store cannot be opened or is already closed."""
    pass


class SchemaError(StorageError):
    """Raised when schema creation or verification fails."""
    pass


class TransactionError(StorageError):
    """Raised when a batch write fails and has been rolled back."""
    pass

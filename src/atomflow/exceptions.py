"""Custom exceptions for atomflow."""


class AtomflowError(Exception):
    """Base class for atomflow errors."""


class MappingError(AtomflowError):
    """Call-site data could not be mapped onto the callee's parameters."""


class AtomLoadError(AtomflowError):
    """An atoms file is missing, unreadable, or does not match the atom schema."""

"""Exceptions raised by the password core."""


class PasswordError(Exception):
    """Base class for every error the password core raises."""


class ValidationError(PasswordError, ValueError):
    """Malformed or out-of-range input. The message is safe to show to clients."""


class EntropySourceFailure(PasswordError, RuntimeError):
    """The operating system could not supply secure randomness."""

"""Exception hierarchy for carve.

Most public operations absorb kernel failures and return ``None`` (or an
empty list); these exceptions surface only where a caller misused the API.
"""


class CarveError(Exception):
    """Base class for every carve exception."""


class KernelError(CarveError, RuntimeError):
    """A native geometry kernel rejected its input or failed mid-operation."""


class HandleReleasedError(CarveError, RuntimeError):
    """A native handle was used or released after its release."""


class ConfigError(CarveError, ValueError):
    """An options record failed validation."""


__all__ = ['CarveError', 'KernelError', 'HandleReleasedError', 'ConfigError']

from __future__ import annotations


class ACOError(ValueError):
    """Base class for solver input and configuration errors."""


class InvalidInput(ACOError):
    """The point set cannot define a tour (empty, too small or malformed)."""


class InvalidConfig(ACOError):
    """A configuration value is out of its accepted range."""


class DegenerateGeometry(ACOError):
    """Coincident points were met while epsilon clamping is disabled."""

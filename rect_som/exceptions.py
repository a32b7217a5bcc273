"""Exceptions raised by the rect_som package."""


class SOMError(Exception):
    """Base class for all errors raised by this package."""


class ConfigurationError(SOMError, ValueError):
    """Invalid training configuration, grid definition or strategy name."""


class DimensionMismatchError(SOMError, ValueError):
    """A vector does not have the dimensionality of the grid."""

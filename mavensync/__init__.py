"""Mirror released versions between Maven repositories."""

__version__ = "1.0.0"

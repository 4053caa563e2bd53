"""darling installer — interactive setup for the darling package manager."""

__version__ = "0.1.0"

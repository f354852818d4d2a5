"""Organization Manager - multi-tenant organization management backend."""

__version__ = "0.1.0"

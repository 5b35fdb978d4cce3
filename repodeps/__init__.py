"""repodeps - build graphs of inter-dependent git repositories."""

__version__ = "0.1.0"

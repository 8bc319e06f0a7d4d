"""configvault - file-backed JSON configuration store with backup and restore."""

__version__ = "0.1.0"

"""CLI command implementations for configvault."""

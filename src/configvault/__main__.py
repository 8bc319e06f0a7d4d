"""Allow running configvault as `python -m configvault`."""

from configvault.cli import app

if __name__ == "__main__":
    app()

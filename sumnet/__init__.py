"""Add two integers over TCP or UDP with a JSON-message client and server."""

__version__ = "0.1.0"
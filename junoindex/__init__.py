"""Database rows, SQLite validator storage and an HTTP actions endpoint for a blockchain indexer."""

__version__ = "0.1.0"
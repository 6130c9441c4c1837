"""Discover PostgreSQL schemas and write them back as SQL statements."""

__version__ = "0.1.0"
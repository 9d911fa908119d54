"""
Infrastructure adapters for the library bounded context.

Each adapter implements a domain port (ABC) on top of a
SQLAlchemy engine.
"""

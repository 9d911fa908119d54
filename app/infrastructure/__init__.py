"""
Infrastructure layer package.

SQLAlchemy adapters implementing the repository ports
declared in the domain layer.
"""

"""
Shared module package.

Contains cross-cutting concerns used across layers:
- Error handling and mapping
- Security middleware
- Rate limiting
- Logging configuration
- UTC clock helpers
"""

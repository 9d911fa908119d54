"""
Shared error handling package.

Translates library domain errors into JSON error responses.
"""

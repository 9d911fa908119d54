"""
Application layer package.

Use cases for lending, returning and catalogue management.
Each use case is a class with a single ``execute`` method and
receives its repositories through the constructor.
"""

"""
Application layer for the library bounded context.

Use cases coordinate domain entities and ports to fulfill
business operations. Each one reads through the ports, evaluates
the domain rules, mutates entities and only then persists them.
No framework or infrastructure imports allowed.
"""

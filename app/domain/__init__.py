"""
Domain layer package.

Holds the library's business rules: entities, value objects,
loan rules and the repository ports the use cases depend on.
Nothing here imports a framework or performs IO.
"""

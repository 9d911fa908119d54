"""
Library API: backend for a lending library.

Application package root. This is a modular monolith using
hexagonal architecture (ports & adapters) with domain-driven design.

Bounded contexts:
    - library: Books, members, loans, loan rules and overdue fines.

Layers:
    - domain: Pure business logic, entities, value objects, ports (ABCs), errors.
    - application: Use cases, DTOs, orchestration.
    - infrastructure: SQLAlchemy adapters implementing domain ports.
    - interfaces: FastAPI routers, Pydantic schemas, dependency wiring.
    - shared: Cross-cutting concerns (errors, security, logging, clock).
"""

"""
Service layer abstraction.

Each service encapsulates business logic for a domain and talks only to
the document store handle it was constructed with.  API handlers create
services through FastAPI dependencies, so a different store (for
example a ``mongomock`` client in tests) can be injected without
changing any handler.
"""

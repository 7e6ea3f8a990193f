"""
Application package initializer.

The project is organised into layers: ``core`` holds configuration,
logging, the document store handle and the error taxonomy; ``schemas``
holds request payload models; ``services`` holds the business logic for
users, posts and volunteer registrations; ``api`` exposes the services
over HTTP.
"""

from .main import app, create_app  # noqa: F401

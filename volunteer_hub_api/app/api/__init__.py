"""
API package containing the HTTP routes.

``router`` in ``api/router.py`` aggregates the domain routers defined in
``api/endpoints`` and is included by the application factory.
"""

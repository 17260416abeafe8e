# backend/app/routes/__init__.py
"""
HTTP routes.

All application routes live in v1/; main.py mounts the domain routers
under /api/v1 and the operational ones (health, metrics) at the root.
"""

# Routes package init
"""
TechNotes Backend — API Routes Package
========================================

Route Inventory:
    - index.py:   GET  /                 (public service banner)
    - health.py:  GET  /health           (service health check, public)
    - users.py:   GET/POST/PATCH/DELETE /users   (bearer token required)
    - notes.py:   GET/POST/PATCH/DELETE /notes   (bearer token required)

Design Principle:
    Routes are THIN: they unpack the JSON body, call the service, and pick
    the success status code. Error status codes come from the exception
    raised by the service and are rendered by the global handlers in main.py.
    Authentication is applied by BearerAuthMiddleware, not per route.
"""

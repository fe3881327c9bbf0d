# Middleware package init
"""
TechNotes Backend — Middleware Package
========================================

What:  Cross-cutting concerns applied to every request.

Middleware Chain (order matters!):
    Request → [Request ID] → [Logging] → [Bearer Auth] → Route Handler

    Why this order:
    1. Request ID: Generate correlation ID for logging and tracing
    2. Logging: Log every request, including the ones auth rejects
    3. Bearer Auth: Reject unauthenticated calls to /users and /notes
       before any handler or database work happens
"""

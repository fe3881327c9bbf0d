# Services package init
"""
TechNotes Backend — Services Layer
====================================

What:  Business logic layer sitting between routes (HTTP) and database (persistence).
Why:   Separation of concerns. Routes handle HTTP, services handle business rules.

Service Inventory:
    - UserService: User Handler (list, signup, update, delete, username lookup)
    - NoteService: Note Handler (list with usernames, create, update, delete)
    - persistence: id coercion and constraint-aware commit shared by both
"""

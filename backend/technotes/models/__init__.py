"""
TechNotes Backend — ORM Models
================================

Importing this package registers every table with `Base.metadata`
(used by Alembic autogenerate and by the test suite's create_all()).
"""

from technotes.models.user import User
from technotes.models.note import Note

__all__ = ["User", "Note"]

"""
garage_api.db

Persistence package (SQLAlchemy async).

Responsibilities:
- Provide ORM models, engine/session setup, and soft-delete aware repositories.
"""

# Package marker.


# --- Module Notes -----------------------------------------------------------
# Services reach the database only through repositories.

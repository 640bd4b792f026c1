"""
garage_api.services

Service-layer package.

Responsibilities:
- Apply authorization (role + ownership) around every data access.
- Validate payloads and own transaction boundaries.
"""

# Package marker.


# --- Module Notes -----------------------------------------------------------
# Services are plain Python (no FastAPI imports) and take the Principal explicitly.

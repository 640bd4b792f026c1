"""
garage_api

Top-level package for the repair-shop management API (cars, repairs, appointments,
clients, employees and user accounts).

Responsibilities:
- Expose package version metadata.
"""

__all__ = ["__version__"]

__version__ = "0.1.0"


# --- Module Notes -----------------------------------------------------------
# Keep this file minimal to avoid import-time side effects across the codebase.

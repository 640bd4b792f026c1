"""
garage_api.auth

Authentication/authorization package.

Responsibilities:
- JWT issuing and verification.
- The authenticated `Principal` and the role/ownership policy.
- FastAPI auth dependencies.
"""

# Package marker.


# --- Module Notes -----------------------------------------------------------
# `policy` has no I/O and no FastAPI imports so services can call it directly.

"""
Kernel Layer

Foundational components of the SSO service:
- Identity Core (password hashing, token issuance, the Authenticator)
- Storage contracts (User Directory, Application Registry) and their SQL adapter
- Data models (users, applications)

Architectural invariants:
- Plaintext passwords are never logged, persisted, or placed in error messages
- Password hashes never leave the hashing boundary except to and from storage
- Unknown user and wrong password are indistinguishable to callers
"""

from sso.kernel.models import Application, User

__all__ = [
    "Application",
    "User",
]

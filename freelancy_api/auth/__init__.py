# freelancy_api/auth/__init__.py
"""
Authentication and authorization for the Freelancy API.

This package contains:
- identity.py: Verified caller identity (Principal) and per-request context
- firebase.py: Firebase ID token verification
- ownership.py: Pure ownership policy over verified identities
"""
from freelancy_api.auth.identity import Principal, RequestContext

__all__ = ["Principal", "RequestContext"]

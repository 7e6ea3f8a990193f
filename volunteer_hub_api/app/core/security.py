"""
Identity verification hook.

The service does not authenticate callers: ownership checks compare an
email supplied in the request with the email stored on the resource.
All such emails pass through an ``IdentityVerifier`` before they reach
the services, so a real authentication provider (for example one that
checks a Firebase or Google ID token and returns the verified email)
can be plugged in through ``create_app(identity_verifier=...)`` without
touching the service layer.
"""

from typing import Optional, Protocol

from fastapi import Request


class IdentityVerifier(Protocol):
    def verify(self, claimed_email: Optional[str]) -> Optional[str]:
        """Return the email the caller is allowed to act as, or ``None``."""
        ...


class ClaimedEmailVerifier:
    """Trust the email the caller reports about itself."""

    def verify(self, claimed_email: Optional[str]) -> Optional[str]:
        if claimed_email is None:
            return None
        email = claimed_email.strip()
        return email or None


def get_identity_verifier(request: Request) -> IdentityVerifier:
    """FastAPI dependency returning the verifier configured on the app."""
    return request.app.state.identity_verifier

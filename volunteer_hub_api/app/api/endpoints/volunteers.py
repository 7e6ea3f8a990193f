"""
Volunteer registration endpoints.

``POST /api/volunteers`` (and its older alias ``POST
/volunteer-requests``) runs the registration workflow: it rejects full
posts and duplicate signups with 400, otherwise records the
registration and returns the post's remaining capacity.
"""

from typing import Any, Dict, List, Optional

from fastapi import APIRouter, Depends, Query, status

from volunteer_hub_api.app.core.security import IdentityVerifier, get_identity_verifier
from volunteer_hub_api.app.schemas.registration import RegistrationCreate
from volunteer_hub_api.app.services.registration_service import (
    RegistrationService,
    get_registration_service,
)


router = APIRouter()


@router.post("/api/volunteers", response_model=Dict[str, Any], status_code=status.HTTP_201_CREATED)
@router.post("/volunteer-requests", response_model=Dict[str, Any], status_code=status.HTTP_201_CREATED)
def register_volunteer(
    body: RegistrationCreate,
    service: RegistrationService = Depends(get_registration_service),
    verifier: IdentityVerifier = Depends(get_identity_verifier),
) -> Dict[str, Any]:
    """Sign the caller up for a post.

    Responds with ``insertedId`` and ``newVolunteersNeeded``.
    """
    extra = body.model_dump(exclude={"postId", "userId", "userName", "userEmail"})
    return service.register(
        body.postId,
        body.userId,
        body.userName,
        verifier.verify(body.userEmail),
        extra=extra,
    )


@router.get("/api/volunteers", response_model=Dict[str, bool])
def has_registered(
    postId: Optional[str] = Query(None),
    email: Optional[str] = Query(None),
    service: RegistrationService = Depends(get_registration_service),
) -> Dict[str, bool]:
    return {"registered": service.has_registered(postId, email)}


@router.get("/my-volunteer-requests", response_model=List[Dict[str, Any]])
def list_my_volunteer_requests(
    email: Optional[str] = Query(None),
    service: RegistrationService = Depends(get_registration_service),
) -> List[Dict[str, Any]]:
    return service.list_by_volunteer(email)


@router.delete("/volunteer-requests/{request_id}", response_model=Dict[str, Any])
def delete_volunteer_request(
    request_id: str,
    email: Optional[str] = Query(None),
    service: RegistrationService = Depends(get_registration_service),
    verifier: IdentityVerifier = Depends(get_identity_verifier),
) -> Dict[str, Any]:
    """Withdraw the caller's registration; ``email`` must match the volunteer."""
    return service.delete(request_id, verifier.verify(email))

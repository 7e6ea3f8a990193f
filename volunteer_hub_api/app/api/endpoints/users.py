"""
User endpoints.

``POST /users`` is called by the web client after every sign in (email
and password or Google) and either creates the user or refreshes it.
``PATCH /users`` only records the last sign-in time.
"""

from typing import Any, Dict, List

from fastapi import APIRouter, Depends

from volunteer_hub_api.app.schemas.user import UserTouch, UserUpsert
from volunteer_hub_api.app.services.user_service import UserService, get_user_service


router = APIRouter()


@router.post("/users", response_model=Dict[str, Any])
def upsert_user(
    identity: UserUpsert,
    service: UserService = Depends(get_user_service),
) -> Dict[str, Any]:
    """Create the user on first sign in, refresh it afterwards.

    Returns 400 when ``email`` is missing.  For an existing user the
    response carries ``updated`` set to whether the record changed.
    """
    return service.upsert(identity)


@router.get("/users", response_model=List[Dict[str, Any]])
def list_users(service: UserService = Depends(get_user_service)) -> List[Dict[str, Any]]:
    return service.list()


@router.patch("/users", response_model=Dict[str, Any])
def touch_user(
    body: UserTouch,
    service: UserService = Depends(get_user_service),
) -> Dict[str, Any]:
    return service.touch(body.email, body.lastSignInTime)

"""
Post endpoints.

These routes provide CRUD operations for volunteer opportunity posts,
the home page teaser listing, the full listing with title search and
the organizer's own posts.  Ownership is asserted by the caller through
``organizerEmail`` in the update body or the ``email`` query parameter
on delete.
"""

from typing import Any, Dict, List, Optional

from fastapi import APIRouter, Depends, Query, status

from volunteer_hub_api.app.core.config import settings
from volunteer_hub_api.app.core.security import IdentityVerifier, get_identity_verifier
from volunteer_hub_api.app.schemas.post import PostCreate, PostUpdate, VolunteersNeededUpdate
from volunteer_hub_api.app.services.post_service import PostService, get_post_service


router = APIRouter()


@router.post("/posts", response_model=Dict[str, Any], status_code=status.HTTP_201_CREATED)
@router.post("/api/posts", response_model=Dict[str, Any], status_code=status.HTTP_201_CREATED)
def create_post(
    post: PostCreate,
    service: PostService = Depends(get_post_service),
) -> Dict[str, Any]:
    """Create a new post.

    ``volunteersNeeded`` defaults to 1 when omitted.
    """
    return service.create(post.model_dump(exclude_unset=True))


@router.get("/posts", response_model=List[Dict[str, Any]])
def list_posts(
    search: Optional[str] = Query(None),
    sort: Optional[str] = Query(None),
    limit: Optional[int] = Query(None, ge=0),
    service: PostService = Depends(get_post_service),
) -> List[Dict[str, Any]]:
    """List posts.

    - **search**: case-insensitive title substring.
    - **sort**: ``asc`` orders by deadline, ``desc`` reverses it.
    - **limit**: maximum number of posts.
    """
    return service.list(search=search, sort=sort, limit=limit)


@router.get("/api/posts", response_model=List[Dict[str, Any]])
def list_teaser_posts(service: PostService = Depends(get_post_service)) -> List[Dict[str, Any]]:
    """Posts with the nearest deadlines, for the home page."""
    return service.teaser(settings.teaser_limit)


@router.get("/api/posts/all", response_model=List[Dict[str, Any]])
def list_all_posts(
    search: Optional[str] = Query(None),
    sort: Optional[str] = Query("asc"),
    limit: Optional[int] = Query(None, ge=0),
    service: PostService = Depends(get_post_service),
) -> List[Dict[str, Any]]:
    return service.list(search=search, sort=sort, limit=limit)


@router.get("/posts/{post_id}", response_model=Dict[str, Any])
@router.get("/api/posts/{post_id}", response_model=Dict[str, Any])
def get_post(post_id: str, service: PostService = Depends(get_post_service)) -> Dict[str, Any]:
    """Retrieve a single post.

    Returns 400 for a malformed id and 404 when the post does not exist.
    """
    return service.get_by_id(post_id)


@router.put("/posts/{post_id}", response_model=Dict[str, Any])
def update_post(
    post_id: str,
    patch: PostUpdate,
    service: PostService = Depends(get_post_service),
    verifier: IdentityVerifier = Depends(get_identity_verifier),
) -> Dict[str, Any]:
    """Update a post owned by the caller.

    ``organizerEmail`` in the body must match the stored organizer (403
    otherwise).  Returns 400 when nothing would change.
    """
    caller_email = verifier.verify(patch.organizerEmail)
    return service.update(post_id, patch.model_dump(exclude_unset=True), caller_email)


@router.delete("/posts/{post_id}", response_model=Dict[str, Any])
def delete_post(
    post_id: str,
    email: Optional[str] = Query(None),
    service: PostService = Depends(get_post_service),
    verifier: IdentityVerifier = Depends(get_identity_verifier),
) -> Dict[str, Any]:
    return service.delete(post_id, verifier.verify(email))


@router.get("/my-posts", response_model=List[Dict[str, Any]])
def list_my_posts(
    email: Optional[str] = Query(None),
    service: PostService = Depends(get_post_service),
) -> List[Dict[str, Any]]:
    return service.list_by_owner(email)


@router.patch("/posts/{post_id}/volunteer", response_model=Dict[str, Any])
def set_volunteers_needed(
    post_id: str,
    body: VolunteersNeededUpdate,
    service: PostService = Depends(get_post_service),
) -> Dict[str, Any]:
    """Overwrite the remaining capacity of a post (administrative correction)."""
    return service.set_volunteers_needed(post_id, body.volunteersNeeded)

"""Liveness endpoint."""

from fastapi import APIRouter
from fastapi.responses import PlainTextResponse

router = APIRouter()


@router.get("/", response_class=PlainTextResponse)
def root() -> str:
    return "Volunteer server is running"

"""Image endpoints. /search is declared before /{image_id} so it is not taken as an id."""

from typing import Any

from fastapi import APIRouter, Query

from dockmaster.api.auth import CurrentUserDep
from dockmaster.api.deps import AuditLogDep, ImageServiceDep
from dockmaster.schemas.common import MessageResponse
from dockmaster.schemas.images import (
    ImageRecord,
    ImageSearchResponse,
    PullImageRequest,
    PullImageResponse,
)

router = APIRouter()


@router.get("", response_model=list[ImageRecord])
def list_images(images: ImageServiceDep) -> list[ImageRecord]:
    return images.list_images()


@router.get("/search", response_model=ImageSearchResponse)
def search_images(images: ImageServiceDep, q: str = Query(default="")) -> ImageSearchResponse:
    """Local matches plus public registry hits; either side may be empty on failure."""
    return images.search(q)


@router.post("/pull", response_model=PullImageResponse)
def pull_image(
    body: PullImageRequest,
    images: ImageServiceDep,
    current_user: CurrentUserDep,
    audit: AuditLogDep,
) -> PullImageResponse:
    output = images.pull(body.image, body.tag)
    audit.record(
        "info",
        "Image pulled",
        {"image": body.image, "tag": body.tag, "username": current_user.username},
    )
    return PullImageResponse(message="Image pulled successfully", output=output)


@router.get("/{image_id}", response_model=dict[str, Any])
def get_image(image_id: str, images: ImageServiceDep) -> dict[str, Any]:
    return images.inspect(image_id)


@router.get("/{image_id}/inspect", response_model=dict[str, Any])
def inspect_image(image_id: str, images: ImageServiceDep) -> dict[str, Any]:
    return images.inspect(image_id)


@router.delete("/{image_id}", response_model=MessageResponse)
def delete_image(
    image_id: str,
    images: ImageServiceDep,
    current_user: CurrentUserDep,
    audit: AuditLogDep,
    force: bool = False,
) -> MessageResponse:
    images.remove(image_id, force=force)
    audit.record("info", "Image deleted", {"image": image_id, "force": force, "username": current_user.username})
    return MessageResponse(message="Image deleted successfully")

import logging

from fastapi import APIRouter, Depends

from inkwell.models.content_form import (
    PageForm,
    PostForm,
    PreparedPage,
    PreparedPost,
    SlugRequest,
    SlugResponse,
)
from inkwell.routers.deps import READ_ROLES, WRITE_ROLES, require_role
from inkwell.services.content import prepare_page, prepare_post
from inkwell.services.normalizer import generate_slug

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/admin", tags=["Content"])


@router.post(
    "/slug",
    response_model=SlugResponse,
    summary="Derive a URL slug from a title or name",
    dependencies=[Depends(require_role(*READ_ROLES))],
)
async def slug_endpoint(body: SlugRequest) -> SlugResponse:
    return SlugResponse(slug=generate_slug(body.text))


@router.post(
    "/posts/render",
    response_model=PreparedPost,
    response_model_exclude_none=True,
    summary="Validate a post and render its document to sanitized HTML",
    description=(
        "Returns the post exactly as it should be persisted: the normalized "
        "slug, the editable `json_content`, and the sanitized `html_content` "
        "that the public site embeds without further escaping."
    ),
    dependencies=[Depends(require_role(*WRITE_ROLES))],
)
async def render_post(body: PostForm) -> PreparedPost:
    return prepare_post(body)


@router.post(
    "/pages/render",
    response_model=PreparedPage,
    response_model_exclude_none=True,
    summary="Validate a static page and render its document to sanitized HTML",
    dependencies=[Depends(require_role(*WRITE_ROLES))],
)
async def render_page(body: PageForm) -> PreparedPage:
    return prepare_page(body)

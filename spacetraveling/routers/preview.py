import logging
from typing import Optional

from fastapi import APIRouter, Depends, Query
from fastapi.responses import RedirectResponse

from spacetraveling import dependencies as deps
from spacetraveling.settings import settings

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api")


@router.get("/preview")
def enter_preview(
    token: str,
    document_id: Optional[str] = Query(default=None, alias="documentId"),
    repo=Depends(deps.get_posts_repo),
):
    """Start a preview session and jump to the previewed post."""
    location = "/"
    if document_id:
        try:
            doc = repo.get_draft(token, document_id)
            if doc and doc.get("uid"):
                location = f"/post/{doc['uid']}"
        except Exception as e:
            logger.warning(f"Could not resolve preview document {document_id}: {e}")

    response = RedirectResponse(location, status_code=307)
    response.set_cookie(
        settings.PREVIEW_REF_COOKIE, token, httponly=True, samesite="lax"
    )
    if document_id:
        response.set_cookie(
            settings.PREVIEW_DOCUMENT_COOKIE, document_id, httponly=True, samesite="lax"
        )
    else:
        # a new session must not reuse the previous session's document
        response.delete_cookie(settings.PREVIEW_DOCUMENT_COOKIE)
    return response


@router.get("/exit-preview")
def exit_preview():
    response = RedirectResponse("/", status_code=307)
    response.delete_cookie(settings.PREVIEW_REF_COOKIE)
    response.delete_cookie(settings.PREVIEW_DOCUMENT_COOKIE)
    return response

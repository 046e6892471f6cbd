import logging

from fastapi import APIRouter, BackgroundTasks, Depends, HTTPException, Request
from fastapi.responses import HTMLResponse, RedirectResponse

from spacetraveling import dependencies as deps
from spacetraveling.db.prismic import PrismicError
from spacetraveling.rendering import templates
from spacetraveling.schemas.blog import PostPage
from spacetraveling.schemas.preview import PreviewContext
from spacetraveling.services.listing_service import ListingService, ListingState
from spacetraveling.services.page_cache import PageCache
from spacetraveling.services.post_service import PostService, regenerate
from spacetraveling.settings import settings

logger = logging.getLogger(__name__)

router = APIRouter()


@router.get("/", response_class=HTMLResponse)
def home(
    request: Request,
    context: PreviewContext = Depends(deps.get_preview_context),
    service: ListingService = Depends(deps.get_listing_service),
):
    """Home page with the first page of posts."""
    try:
        state = service.initial_state(context)
    except Exception as e:
        logger.error(f"Unexpected error listing posts: {e}")
        raise HTTPException(status_code=500, detail="Failed to retrieve posts")

    return templates.TemplateResponse(
        request,
        "home.html",
        {"state": state, "posts": state.posts, "preview": context.preview},
    )


@router.get("/posts/more", response_class=HTMLResponse)
def load_more_posts(
    request: Request,
    page: str,
    service: ListingService = Depends(deps.get_listing_service),
):
    """Render the page behind a continuation token as a list fragment."""
    try:
        pagination = service.load_next_page(ListingState(), page)
    except PrismicError as e:
        logger.warning(f"Rejected continuation token: {e}")
        raise HTTPException(status_code=400, detail="Invalid continuation token")
    except Exception as e:
        logger.error(f"Unexpected error loading more posts: {e}")
        raise HTTPException(status_code=500, detail="Failed to load more posts")

    return templates.TemplateResponse(
        request,
        "_post_list.html",
        {"posts": pagination.results},
        headers={"X-Next-Page": pagination.next_page or ""},
    )


@router.get("/post/{slug}", response_class=HTMLResponse)
def post_detail(
    slug: str,
    request: Request,
    background_tasks: BackgroundTasks,
    context: PreviewContext = Depends(deps.get_preview_context),
    service: PostService = Depends(deps.get_post_service),
    cache: PageCache = Depends(deps.get_page_cache),
):
    """Post detail page, served from the page cache outside preview."""
    if not context.preview:
        cached, stale = cache.get(slug)
        if cached is not None:
            # render before claiming the refresh so a failure cannot leave it claimed
            response = _render_post(request, cached)
            if stale and cache.begin_refresh(slug):
                background_tasks.add_task(regenerate, slug, service, cache)
            return response

    try:
        page = service.get_post_page(slug, context)
    except Exception as e:
        logger.error(f"Unexpected error retrieving post {slug}: {e}")
        raise HTTPException(status_code=500, detail="Failed to retrieve post")

    if page is None:
        return RedirectResponse("/", status_code=307)

    if not context.preview:
        cache.set(slug, page)
    return _render_post(request, page)


def _render_post(request: Request, page: PostPage):
    cache_control = (
        "private, no-store"
        if page.preview
        else f"s-maxage={settings.REVALIDATE_SECONDS}, stale-while-revalidate"
    )
    return templates.TemplateResponse(
        request,
        "post.html",
        {"page": page, "post": page.post, "preview": page.preview},
        headers={"Cache-Control": cache_control},
    )

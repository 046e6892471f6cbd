from fastapi import Depends, Request

from spacetraveling.db.prismic import PrismicClient
from spacetraveling.repos.posts_repo import PrismicPostsRepo
from spacetraveling.schemas.preview import PreviewContext
from spacetraveling.services.listing_service import ListingService
from spacetraveling.services.page_cache import PageCache, page_cache
from spacetraveling.services.post_service import PostService
from spacetraveling.settings import settings


def get_prismic(request: Request) -> PrismicClient:
    return request.app.state.prismic


def get_posts_repo(client=Depends(get_prismic)):
    return PrismicPostsRepo(client, document_type=settings.POSTS_DOCUMENT_TYPE)


def get_listing_service(repo=Depends(get_posts_repo)):
    return ListingService(
        repo=repo, locale=settings.DATE_LOCALE, page_size=settings.POSTS_PAGE_SIZE
    )


def get_post_service(repo=Depends(get_posts_repo)):
    return PostService(repo=repo, locale=settings.DATE_LOCALE)


def get_page_cache() -> PageCache:
    return page_cache


def get_preview_context(request: Request) -> PreviewContext:
    ref = request.cookies.get(settings.PREVIEW_REF_COOKIE)
    return PreviewContext(
        preview=bool(ref),
        ref=ref or None,
        document_id=request.cookies.get(settings.PREVIEW_DOCUMENT_COOKIE) or None,
    )

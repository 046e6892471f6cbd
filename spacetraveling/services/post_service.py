import logging
import math
import re
from typing import Iterable, List, Optional

from spacetraveling.schemas.blog import (
    Banner,
    ContentBlock,
    NavigationLink,
    Post,
    PostData,
    PostNavigation,
    PostPage,
)
from spacetraveling.schemas.preview import PreviewContext
from spacetraveling.services.page_cache import PageCache
from spacetraveling.services.rich_text import as_text
from spacetraveling.utils import format_publication_date

logger = logging.getLogger(__name__)

WORDS_PER_MINUTE = 200
_PUNCTUATION = re.compile(r"[^\w\s]")


class PostService:
    def __init__(self, repo, locale: str):
        self.repo = repo
        self.locale = locale

    def resolve_document(self, slug: str, context: PreviewContext) -> Optional[dict]:
        """Draft revision while previewing with a ref, published one otherwise."""
        if context.preview and context.ref:
            return self.repo.get_draft(context.ref, context.document_id)
        return self.repo.get_published(slug)

    def resolve_navigation(
        self, document_id: str, context: PreviewContext
    ) -> Optional[PostNavigation]:
        ref = context.draft_ref
        prev_doc = self.repo.get_neighbor(document_id, newest_first=True, ref=ref)
        next_doc = self.repo.get_neighbor(document_id, newest_first=False, ref=ref)
        if not prev_doc and not next_doc:
            return None
        return PostNavigation(
            prev_page=_navigation_link(prev_doc),
            next_page=_navigation_link(next_doc),
        )

    def get_post_page(self, slug: str, context: PreviewContext) -> Optional[PostPage]:
        doc = self.resolve_document(slug, context)
        if not doc:
            logger.info(f"No document found for post {slug}")
            return None

        post = to_post(doc)
        return PostPage(
            post=post,
            published_at=format_publication_date(
                post.first_publication_date, self.locale
            ),
            reading_time=calculate_reading_time(post.data.content),
            navigation=self.resolve_navigation(post.id, context),
            preview=context.preview,
        )

    def static_paths(self, limit: int) -> List[str]:
        return self.repo.recent_uids(limit)


def to_post(doc: dict) -> Post:
    data = doc.get("data") or {}
    banner = data.get("banner") or {}
    return Post(
        id=doc["id"],
        uid=doc.get("uid") or "",
        first_publication_date=doc.get("first_publication_date"),
        data=PostData(
            title=data.get("title"),
            subtitle=data.get("subtitle"),
            author=data.get("author"),
            banner=Banner(url=banner.get("url")),
            content=[
                ContentBlock(heading=block.get("heading"), body=block.get("body") or [])
                for block in data.get("content") or []
            ],
        ),
    )


def calculate_reading_time(content: Iterable[ContentBlock]) -> str:
    words = 0
    for block in content:
        if block.heading:
            words += len(block.heading.split())
        if block.body:
            words += len(_PUNCTUATION.sub("", as_text(block.body)).split())
    return f"{math.ceil(words / WORDS_PER_MINUTE)} min"


def _navigation_link(doc: Optional[dict]) -> Optional[NavigationLink]:
    if not doc:
        return None
    return NavigationLink(
        title=(doc.get("data") or {}).get("title"),
        href=f"/post/{doc.get('uid')}",
    )


def prerender(service: PostService, cache: PageCache, limit: int) -> int:
    """Resolve the most recent posts up front so their first hit is cached."""
    context = PreviewContext()
    rendered = 0
    for slug in service.static_paths(limit):
        page = service.get_post_page(slug, context)
        if page:
            cache.set(slug, page)
            rendered += 1
    logger.info(f"Prerendered {rendered} post pages")
    return rendered


def regenerate(slug: str, service: PostService, cache: PageCache) -> None:
    """Background refresh of a stale cached post page."""
    try:
        page = service.get_post_page(slug, PreviewContext())
        if page is None:
            logger.warning(f"Post {slug} no longer exists, dropping cached page")
            cache.invalidate(slug)
        else:
            cache.set(slug, page)
    except Exception as e:
        logger.error(f"Failed to regenerate post {slug}: {e}")
    finally:
        cache.end_refresh(slug)

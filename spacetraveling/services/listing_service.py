import logging
from typing import Callable, List, Optional

from pydantic import BaseModel, Field

from spacetraveling.schemas.blog import PostPagination, PostSummary, PostSummaryData
from spacetraveling.schemas.preview import PreviewContext
from spacetraveling.utils import format_publication_date

logger = logging.getLogger(__name__)


def normalize_post(doc: dict, locale: str) -> PostSummary:
    data = doc.get("data") or {}
    return PostSummary(
        uid=doc.get("uid"),
        first_publication_date=format_publication_date(
            doc.get("first_publication_date"), locale
        ),
        data=PostSummaryData(
            title=data.get("title"),
            subtitle=data.get("subtitle"),
            author=data.get("author"),
        ),
    )


def normalize_page(response: dict, locale: str) -> PostPagination:
    """Map a CMS search response onto a page of post summaries."""
    return PostPagination(
        results=[normalize_post(doc, locale) for doc in response.get("results") or []],
        next_page=response.get("next_page") or None,
    )


class ListingState(BaseModel):
    """
    Pages shown on the home page, in load order, plus the token for the
    page after the last one. Pages are only ever appended.
    """

    pages: List[PostPagination] = Field(default_factory=list)
    next_page: Optional[str] = None

    @classmethod
    def from_initial(cls, pagination: PostPagination) -> "ListingState":
        if not pagination.results:
            return cls()
        return cls(pages=[pagination], next_page=pagination.next_page)

    @property
    def posts(self) -> List[PostSummary]:
        return [post for page in self.pages for post in page.results]

    @property
    def has_more(self) -> bool:
        return bool(self.next_page)

    def load_next_page(
        self, token: str, fetch_page: Callable[[str], dict], locale: str
    ) -> PostPagination:
        # No in-flight guard: the same token loaded twice is appended twice.
        page = normalize_page(fetch_page(token), locale)
        self.pages.append(page)
        self.next_page = page.next_page
        return page


class ListingService:
    def __init__(self, repo, locale: str, page_size: int):
        self.repo = repo
        self.locale = locale
        self.page_size = page_size

    def initial_state(self, context: PreviewContext) -> ListingState:
        response = self.repo.first_page(self.page_size, ref=context.draft_ref)
        pagination = normalize_page(response, self.locale)
        logger.debug(f"Loaded {len(pagination.results)} posts for the home page")
        return ListingState.from_initial(pagination)

    def load_next_page(self, state: ListingState, token: str) -> PostPagination:
        return state.load_next_page(token, self.repo.next_page, self.locale)

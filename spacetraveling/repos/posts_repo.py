from typing import List, Optional

from spacetraveling.db.prismic import PrismicClient, at
from spacetraveling.settings import settings

NEWEST_FIRST = "[document.first_publication_date desc]"
OLDEST_FIRST = "[document.first_publication_date]"


class PrismicPostsRepo:
    def __init__(self, client: PrismicClient, document_type: str | None = None):
        self.client = client
        self.document_type = document_type or settings.POSTS_DOCUMENT_TYPE

    @property
    def summary_fields(self) -> List[str]:
        return [
            f"{self.document_type}.title",
            f"{self.document_type}.subtitle",
            f"{self.document_type}.author",
        ]

    def first_page(self, page_size: int, ref: Optional[str] = None) -> dict:
        return self.client.query(
            [at("document.type", self.document_type)],
            ref=ref,
            page_size=page_size,
            orderings=NEWEST_FIRST,
            fetch=self.summary_fields,
        )

    def next_page(self, token: str) -> dict:
        return self.client.fetch_page(token)

    def get_published(self, slug: str) -> Optional[dict]:
        return self.client.get_by_uid(self.document_type, slug)

    def get_draft(self, ref: str, document_id: Optional[str] = None) -> Optional[dict]:
        if document_id:
            return self.client.get_by_id(document_id, ref=ref)
        return self.client.get_single(self.document_type, ref=ref)

    def get_neighbor(
        self, document_id: str, *, newest_first: bool, ref: Optional[str] = None
    ) -> Optional[dict]:
        response = self.client.query(
            [at("document.type", self.document_type)],
            ref=ref,
            page_size=1,
            after=document_id,
            orderings=NEWEST_FIRST if newest_first else OLDEST_FIRST,
        )
        results = response.get("results") or []
        return results[0] if results else None

    def recent_uids(self, limit: int) -> List[str]:
        response = self.client.query(
            [at("document.type", self.document_type)],
            page_size=limit,
            orderings=NEWEST_FIRST,
        )
        return [doc["uid"] for doc in response.get("results", []) if doc.get("uid")]

import pytest


def make_post_doc(
    uid: str,
    doc_id: str | None = None,
    title: str = "Title",
    first_publication_date: str | None = "2021-03-25T19:25:28+0000",
    content=None,
    banner_url: str | None = "https://images.prismic.io/banner.png",
) -> dict:
    """CMS document shaped like a `posts` search result."""
    return {
        "id": doc_id or f"id-{uid}",
        "uid": uid,
        "type": "posts",
        "first_publication_date": first_publication_date,
        "data": {
            "title": title,
            "subtitle": f"{title} subtitle",
            "author": "Joseph Oliveira",
            "banner": {"url": banner_url} if banner_url else {},
            "content": content or [],
        },
    }


def make_search_response(docs, next_page: str | None = None) -> dict:
    return {
        "page": 1,
        "results_per_page": len(docs),
        "results_size": len(docs),
        "next_page": next_page,
        "prev_page": None,
        "results": list(docs),
    }


class FakePrismicClient:
    """
    Records every call; answers queries from a queue of canned responses.
    """

    def __init__(self, responses=None, documents=None, pages=None):
        self.endpoint = "https://blog.cdn.prismic.io/api/v2"
        self.responses = list(responses or [])
        self.documents = documents or {}
        self.pages = pages or {}
        self.calls = []

    def query(self, predicates, **kwargs):
        self.calls.append(("query", list(predicates), kwargs))
        if self.responses:
            return self.responses.pop(0)
        return make_search_response([])

    def get_by_uid(self, document_type, uid, ref=None):
        self.calls.append(("get_by_uid", document_type, uid, ref))
        return self.documents.get(uid)

    def get_by_id(self, document_id, ref=None):
        self.calls.append(("get_by_id", document_id, ref))
        return self.documents.get(document_id)

    def get_single(self, document_type, ref=None):
        self.calls.append(("get_single", document_type, ref))
        return next(iter(self.documents.values()), None)

    def fetch_page(self, url):
        self.calls.append(("fetch_page", url))
        return self.pages[url]


class FakeRepo:
    """
    Minimal posts repo stand-in used in service tests.
    """

    def __init__(
        self,
        first=None,
        pages=None,
        published=None,
        drafts=None,
        neighbors=None,
        uids=None,
    ):
        self.first = first or make_search_response([])
        self.pages = pages or {}
        self.published = published or {}
        self.drafts = drafts or {}
        self.neighbors = neighbors or {}
        self.uids = uids or []
        self.calls = []

    def first_page(self, page_size, ref=None):
        self.calls.append(("first_page", page_size, ref))
        return self.first

    def next_page(self, token):
        self.calls.append(("next_page", token))
        return self.pages[token]

    def get_published(self, slug):
        self.calls.append(("get_published", slug))
        return self.published.get(slug)

    def get_draft(self, ref, document_id=None):
        self.calls.append(("get_draft", ref, document_id))
        return self.drafts.get(document_id)

    def get_neighbor(self, document_id, *, newest_first, ref=None):
        self.calls.append(("get_neighbor", document_id, newest_first, ref))
        return self.neighbors.get((document_id, newest_first))

    def recent_uids(self, limit):
        self.calls.append(("recent_uids", limit))
        return self.uids[:limit]


class FakeListingService:
    """
    Minimal listing service stand-in for router tests.
    """

    def __init__(self, state=None, next_page=None, error=None):
        self.state = state
        self.next_page = next_page
        self.error = error
        self.tokens = []

    def initial_state(self, context):
        if self.error:
            raise self.error
        return self.state

    def load_next_page(self, state, token):
        self.tokens.append(token)
        if self.error:
            raise self.error
        state.pages.append(self.next_page)
        state.next_page = self.next_page.next_page
        return self.next_page


class FakePostService:
    """
    Minimal post service stand-in for router tests.
    """

    def __init__(self, pages=None, error=None):
        self.pages = pages or {}
        self.error = error
        self.calls = []

    def get_post_page(self, slug, context):
        self.calls.append((slug, context))
        if self.error:
            raise self.error
        return self.pages.get(slug)


@pytest.fixture
def sample_content():
    return [
        {
            "heading": "A B C",
            "body": [{"type": "paragraph", "text": "D E", "spans": []}],
        }
    ]

import httpx
import pytest

from spacetraveling.db.prismic import PrismicClient, PrismicError, at

ENDPOINT = "https://blog.cdn.prismic.io/api/v2"


def make_client(handler, access_token=""):
    http = httpx.Client(transport=httpx.MockTransport(handler))
    return PrismicClient(ENDPOINT, access_token=access_token, http=http)


def api_handler(search_results=None, requests=None):
    """Serve the API root with a master ref and record search requests."""

    def handler(request: httpx.Request) -> httpx.Response:
        if request.url.path == "/api/v2":
            return httpx.Response(
                200,
                json={
                    "refs": [
                        {"id": "preview", "ref": "preview-ref", "isMasterRef": False},
                        {"id": "master", "ref": "master-ref", "isMasterRef": True},
                    ]
                },
            )
        if requests is not None:
            requests.append(request)
        return httpx.Response(
            200, json={"results": search_results or [], "next_page": None}
        )

    return handler


def test_at_builds_predicate():
    assert at("document.type", "posts") == '[at(document.type, "posts")]'
    assert at("my.posts.uid", 'say "hi"') == '[at(my.posts.uid, "say \\"hi\\"")]'


def test_master_ref_picks_flagged_ref():
    client = make_client(api_handler())
    assert client.master_ref() == "master-ref"


def test_master_ref_raises_when_missing():
    client = make_client(lambda request: httpx.Response(200, json={"refs": []}))
    with pytest.raises(PrismicError):
        client.master_ref()


def test_query_sends_all_options():
    requests = []
    client = make_client(api_handler(requests=requests), access_token="secret")

    client.query(
        [at("document.type", "posts")],
        page_size=1,
        orderings="[document.first_publication_date desc]",
        after="doc-1",
        fetch=["posts.title", "posts.author"],
    )

    params = requests[0].url.params
    assert requests[0].url.path == "/api/v2/documents/search"
    assert params["ref"] == "master-ref"
    assert params["q"] == '[[at(document.type, "posts")]]'
    assert params["pageSize"] == "1"
    assert params["orderings"] == "[document.first_publication_date desc]"
    assert params["after"] == "doc-1"
    assert params["fetch"] == "posts.title,posts.author"
    assert params["access_token"] == "secret"


def test_query_with_explicit_ref_skips_master_lookup():
    seen_paths = []

    def handler(request):
        seen_paths.append(request.url.path)
        return httpx.Response(200, json={"results": []})

    client = make_client(handler)
    client.query([at("document.type", "posts")], ref="draft-ref")

    assert seen_paths == ["/api/v2/documents/search"]


def test_query_omits_unset_options():
    requests = []
    client = make_client(api_handler(requests=requests))

    client.query([at("document.type", "posts")])

    params = requests[0].url.params
    for name in ("pageSize", "orderings", "after", "fetch", "access_token"):
        assert name not in params


def test_get_by_uid_returns_first_result():
    requests = []
    doc = {"id": "1", "uid": "hello"}
    client = make_client(api_handler(search_results=[doc], requests=requests))

    assert client.get_by_uid("posts", "hello") == doc
    assert requests[0].url.params["q"] == (
        '[[at(document.type, "posts")][at(my.posts.uid, "hello")]]'
    )


def test_get_by_id_returns_none_without_results():
    client = make_client(api_handler())
    assert client.get_by_id("missing", ref="draft-ref") is None


def test_get_single_uses_given_ref():
    requests = []
    client = make_client(api_handler(search_results=[{"id": "1"}], requests=requests))

    assert client.get_single("posts", ref="draft-ref") == {"id": "1"}
    assert requests[0].url.params["ref"] == "draft-ref"


def test_fetch_page_requests_url_verbatim():
    seen = []
    token = f"{ENDPOINT}/documents/search?ref=master-ref&page=2&pageSize=1"

    def handler(request):
        seen.append(str(request.url))
        return httpx.Response(200, json={"results": [], "next_page": None})

    client = make_client(handler)
    assert client.fetch_page(token) == {"results": [], "next_page": None}
    assert seen == [token]


def test_fetch_page_rejects_foreign_urls():
    client = make_client(lambda request: httpx.Response(200, json={}))
    with pytest.raises(PrismicError):
        client.fetch_page("https://evil.example.com/api/v2/documents/search")


def test_http_errors_propagate():
    client = make_client(lambda request: httpx.Response(500))
    with pytest.raises(httpx.HTTPStatusError):
        client.master_ref()


class FakeClock:
    def __init__(self):
        self.now = 0.0

    def __call__(self):
        return self.now


def test_master_ref_is_reused_within_ttl():
    root_hits = []

    def handler(request):
        if request.url.path == "/api/v2":
            root_hits.append(request)
            return httpx.Response(
                200, json={"refs": [{"ref": f"ref-{len(root_hits)}", "isMasterRef": True}]}
            )
        return httpx.Response(200, json={"results": []})

    clock = FakeClock()
    http = httpx.Client(transport=httpx.MockTransport(handler))
    client = PrismicClient(ENDPOINT, http=http, ref_ttl_seconds=5.0, clock=clock)

    client.query([at("document.type", "posts")])
    client.query([at("document.type", "posts")])
    assert len(root_hits) == 1
    assert client.master_ref() == "ref-1"

    clock.now = 5.0
    assert client.master_ref() == "ref-2"
    assert len(root_hits) == 2

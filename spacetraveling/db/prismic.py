import logging
import threading
import time
from typing import Any, Callable, Dict, Iterable, List, Optional

import httpx

from spacetraveling.settings import settings

logger = logging.getLogger(__name__)


class PrismicError(Exception):
    """Raised when the CMS answers with something we cannot use."""


def at(path: str, value: str) -> str:
    """Build an `at` predicate, e.g. [at(document.type, "posts")]."""
    escaped = value.replace('"', '\\"')
    return f'[at({path}, "{escaped}")]'


class PrismicClient:
    """
    Thin wrapper around the Prismic REST API (v2).
    Only reads documents; the master ref is reused for ref_ttl_seconds.
    """

    def __init__(
        self,
        endpoint: str,
        access_token: str = "",
        http: httpx.Client | None = None,
        timeout: float = 10.0,
        ref_ttl_seconds: float = 5.0,
        clock: Callable[[], float] = time.monotonic,
    ):
        self.endpoint = endpoint.rstrip("/")
        self.access_token = access_token or None
        self.http = http or httpx.Client(timeout=timeout)
        self.ref_ttl_seconds = ref_ttl_seconds
        self.clock = clock
        self._master_ref: Optional[str] = None
        self._master_ref_at = 0.0
        self._ref_lock = threading.Lock()

    def close(self) -> None:
        self.http.close()

    def master_ref(self) -> str:
        with self._ref_lock:
            if (
                self._master_ref is not None
                and self.clock() - self._master_ref_at < self.ref_ttl_seconds
            ):
                return self._master_ref

        ref = self._fetch_master_ref()
        with self._ref_lock:
            self._master_ref = ref
            self._master_ref_at = self.clock()
        return ref

    def _fetch_master_ref(self) -> str:
        response = self.http.get(self.endpoint, params=self._auth_params())
        response.raise_for_status()
        for ref in response.json().get("refs", []):
            if ref.get("isMasterRef"):
                return ref["ref"]
        raise PrismicError(f"No master ref published at {self.endpoint}")

    def query(
        self,
        predicates: Iterable[str],
        *,
        ref: Optional[str] = None,
        page_size: Optional[int] = None,
        orderings: Optional[str] = None,
        after: Optional[str] = None,
        fetch: Optional[List[str]] = None,
    ) -> Dict[str, Any]:
        params: Dict[str, Any] = {
            "ref": ref or self.master_ref(),
            "q": f"[{''.join(predicates)}]",
        }
        if page_size is not None:
            params["pageSize"] = page_size
        if orderings:
            params["orderings"] = orderings
        if after:
            params["after"] = after
        if fetch:
            params["fetch"] = ",".join(fetch)
        params.update(self._auth_params())

        logger.debug(f"Querying {self.endpoint}/documents/search with {params}")
        response = self.http.get(f"{self.endpoint}/documents/search", params=params)
        response.raise_for_status()
        return response.json()

    def get_by_uid(
        self, document_type: str, uid: str, ref: Optional[str] = None
    ) -> Optional[dict]:
        return self._first(
            self.query(
                [at("document.type", document_type), at(f"my.{document_type}.uid", uid)],
                ref=ref,
                page_size=1,
            )
        )

    def get_by_id(self, document_id: str, ref: Optional[str] = None) -> Optional[dict]:
        return self._first(
            self.query([at("document.id", document_id)], ref=ref, page_size=1)
        )

    def get_single(self, document_type: str, ref: Optional[str] = None) -> Optional[dict]:
        return self._first(
            self.query([at("document.type", document_type)], ref=ref, page_size=1)
        )

    def fetch_page(self, url: str) -> Dict[str, Any]:
        """Fetch a continuation URL exactly as the API handed it out."""
        if not url.startswith(f"{self.endpoint}/"):
            raise PrismicError(f"Continuation URL outside {self.endpoint}: {url}")
        response = self.http.get(url)
        response.raise_for_status()
        return response.json()

    def _auth_params(self) -> Dict[str, str]:
        return {"access_token": self.access_token} if self.access_token else {}

    @staticmethod
    def _first(response: Dict[str, Any]) -> Optional[dict]:
        results = response.get("results") or []
        return results[0] if results else None


def get_prismic_client() -> PrismicClient:
    """
    Create the CMS client from settings.
    Called at runtime to avoid import-time connections.
    """
    return PrismicClient(
        settings.PRISMIC_API_ENDPOINT,
        access_token=settings.PRISMIC_ACCESS_TOKEN,
        timeout=settings.HTTP_TIMEOUT_SECONDS,
        ref_ttl_seconds=settings.PRISMIC_REF_TTL_SECONDS,
    )

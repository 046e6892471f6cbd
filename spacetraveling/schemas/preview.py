from typing import Optional

from pydantic import BaseModel


class PreviewContext(BaseModel):
    """Preview session state for a single request."""

    preview: bool = False
    ref: Optional[str] = None
    document_id: Optional[str] = None

    @property
    def draft_ref(self) -> Optional[str]:
        """Ref to query with, or None to read the published content."""
        return self.ref if self.preview else None

from typing import Any, Dict, List, Optional

from pydantic import BaseModel, Field

# Structured rich text as returned by the CMS: a list of typed nodes.
RichText = List[Dict[str, Any]]


class PostSummaryData(BaseModel):
    title: Optional[str] = None
    subtitle: Optional[str] = None
    author: Optional[str] = None


class PostSummary(BaseModel):
    uid: Optional[str] = None
    first_publication_date: Optional[str] = None
    data: PostSummaryData


class PostPagination(BaseModel):
    results: List[PostSummary] = Field(default_factory=list)
    next_page: Optional[str] = None


class Banner(BaseModel):
    url: Optional[str] = None


class ContentBlock(BaseModel):
    heading: Optional[str] = None
    body: RichText = Field(default_factory=list)


class PostData(PostSummaryData):
    banner: Banner = Field(default_factory=Banner)
    content: List[ContentBlock] = Field(default_factory=list)


class Post(BaseModel):
    id: str
    uid: str
    first_publication_date: Optional[str] = None
    data: PostData


class NavigationLink(BaseModel):
    title: Optional[str] = None
    href: str


class PostNavigation(BaseModel):
    prev_page: Optional[NavigationLink] = None
    next_page: Optional[NavigationLink] = None


class PostPage(BaseModel):
    post: Post
    published_at: Optional[str] = None
    reading_time: str
    navigation: Optional[PostNavigation] = None
    preview: bool = False

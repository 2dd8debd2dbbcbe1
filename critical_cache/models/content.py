"""Models describing the site content that providers derive keys and URLs from."""

from __future__ import annotations

from typing import Dict, List, Literal, Optional

from pydantic import BaseModel, Field


class PostType(BaseModel):
    """A public content type."""

    name: str
    label: Optional[str] = None
    has_archive: bool = False
    archive_url: Optional[str] = None


class Post(BaseModel):
    """A single piece of content with a permalink."""

    id: int
    post_type: str = "post"
    permalink: Optional[str] = None
    title: str = ""
    published_at: Optional[str] = Field(default=None, description="ISO timestamp used to pick recent posts.")


class Term(BaseModel):
    """A taxonomy term with its archive link."""

    taxonomy: str
    slug: str
    link: str
    count: int = 0


class SiteSnapshot(BaseModel):
    """Static view of the content a site exposes to the resolver."""

    site_url: Optional[str] = None
    show_on_front: Literal["posts", "page"] = "posts"
    page_on_front: Optional[int] = None
    page_for_posts: Optional[int] = None
    cornerstone_pages: List[str] = Field(default_factory=list)
    post_types: List[PostType] = Field(default_factory=lambda: [PostType(name="post"), PostType(name="page")])
    posts: List[Post] = Field(default_factory=list)
    taxonomies: List[str] = Field(default_factory=lambda: ["category", "post_tag"])
    terms: List[Term] = Field(default_factory=list)

    def posts_by_id(self) -> Dict[int, Post]:
        return {post.id: post for post in self.posts}

from critical_cache.core.urls import url_hash
from critical_cache.models.content import SiteSnapshot, Term
from critical_cache.providers import default_providers
from critical_cache.services.content_source import StaticContentSource
from critical_cache.services.provider_registry import ProviderRegistry
from critical_cache.services.source_resolver import SourceResolver, cache_bypass_filter

HOME = "https://example.com/"
CORNERSTONE_KEY = f"cornerstone_{url_hash('https://example.com/a')}"


def _by_key(sources):
    return {source.key: source for source in sources}


def test_sources_in_provider_then_group_order(registry):
    sources = SourceResolver(registry, HOME).resolve_sources()
    assert [source.key for source in sources] == [
        CORNERSTONE_KEY,
        "core_front_page",
        "core_posts_page",
        "singular_post",
        "singular_product",
        "archive_product",
        "taxonomy_category",
    ]


def test_cornerstone_url_excluded_from_taxonomy_group():
    content = StaticContentSource(
        SiteSnapshot(
            cornerstone_pages=["/a"],
            post_types=[],
            taxonomies=["category"],
            terms=[
                Term(taxonomy="category", slug="one", link="/a", count=2),
                Term(taxonomy="category", slug="two", link="/b", count=1),
            ],
        ),
        "https://example.com",
    )
    registry = ProviderRegistry(default_providers(content))

    sources = _by_key(SourceResolver(registry, HOME).resolve_sources())

    assert sources["taxonomy_category"].urls == ["https://example.com/b"]
    assert sources[CORNERSTONE_KEY].urls == ["https://example.com/a"]


def test_reserved_urls_never_attributed_to_other_providers(registry):
    sources = SourceResolver(registry, HOME).resolve_sources()
    reserved = {
        url for source in sources if source.key.startswith(("core_", "cornerstone_")) for url in source.urls
    }
    for source in sources:
        if source.key.startswith(("core_", "cornerstone_")):
            continue
        assert reserved.isdisjoint(source.urls), source.key


def test_group_emptied_by_reservation_is_skipped(registry):
    # Every page is the home page, the posts page or a cornerstone page.
    sources = _by_key(SourceResolver(registry, HOME).resolve_sources())
    assert "singular_page" not in sources


def test_records_carry_label_and_success_ratio(registry):
    sources = _by_key(SourceResolver(registry, HOME).resolve_sources())
    assert sources["core_posts_page"].label == "Posts page"
    assert sources["core_posts_page"].success_ratio == 1.0
    assert sources["singular_post"].label == "Single Posts"
    assert sources["singular_post"].success_ratio == 0.5


def test_context_posts_add_post_id_groups(registry, snapshot):
    posts = [snapshot.posts_by_id()[42], snapshot.posts_by_id()[5]]
    sources = _by_key(SourceResolver(registry, HOME).resolve_sources(posts))

    assert sources["post_id_42"].urls == ["https://example.com/answer/"]
    # Post 5 is the cornerstone page, so its URL is reserved.
    assert "post_id_5" not in sources


def test_relative_urls_made_absolute(registry):
    sources = _by_key(SourceResolver(registry, HOME).resolve_sources())
    assert sources["taxonomy_category"].urls == ["https://example.com/b"]
    for source in sources.values():
        assert all(url.startswith("https://") for url in source.urls)


def test_url_filters_apply_after_reservation(registry):
    registry.add_url_filter(cache_bypass_filter("donotcachepage", "s3cret"))
    sources = _by_key(SourceResolver(registry, HOME).resolve_sources())

    assert sources["taxonomy_category"].urls == ["https://example.com/b?donotcachepage=s3cret"]
    assert sources["core_front_page"].urls == ["https://example.com/?donotcachepage=s3cret"]


def test_sources_filter_can_drop_records(registry):
    registry.add_sources_filter(lambda sources: [s for s in sources if not s.key.startswith("taxonomy_")])
    keys = [source.key for source in SourceResolver(registry, HOME).resolve_sources()]
    assert "taxonomy_category" not in keys
    assert keys[0] == CORNERSTONE_KEY

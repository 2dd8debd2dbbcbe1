import pytest

from critical_cache.services.events import CacheEvents
from critical_cache.tasks import page_cache_tasks


@pytest.fixture
def events(invalidator):
    return CacheEvents(invalidator)


@pytest.fixture
def filled_cache(page_cache):
    for url in ["https://example.com/", "https://example.com/blog/", "https://example.com/answer/"]:
        page_cache.put(url, b"<html></html>")
    return page_cache


def test_on_post_changed_purges_permalink(events, filled_cache):
    assert events.on_post_changed(42) == 1
    assert filled_cache.keys() == ["https://example.com/", "https://example.com/blog/"]


def test_on_post_changed_for_deleted_post_is_noop(events, filled_cache):
    assert events.on_post_changed(12345) == 0
    assert len(filled_cache.keys()) == 3


def test_on_home_changed(events, filled_cache):
    assert events.on_home_changed() == 2
    assert filled_cache.keys() == ["https://example.com/answer/"]


def test_on_url_changed(events, filled_cache):
    assert events.on_url_changed("/blog/") == 1


@pytest.mark.parametrize("hook", ["on_content_changed_everywhere", "on_page_output_changed"])
def test_global_events_purge_everything(events, filled_cache, hook):
    assert getattr(events, hook)() == 3
    assert filled_cache.keys() == []


@pytest.mark.parametrize(
    "task, args, hook",
    [
        (page_cache_tasks.purge_all, (), "on_content_changed_everywhere"),
        (page_cache_tasks.purge_home, (), "on_home_changed"),
        (page_cache_tasks.purge_url, ("/blog/",), "on_url_changed"),
        (page_cache_tasks.purge_post, (42,), "on_post_changed"),
        (page_cache_tasks.page_output_changed, (), "on_page_output_changed"),
    ],
)
def test_tasks_dispatch_to_hooks(mocker, task, args, hook):
    events = mocker.Mock()
    getattr(events, hook).return_value = 7
    mocker.patch("critical_cache.tasks.page_cache_tasks.get_cache_events", return_value=events)

    assert task.run(*args) == 7
    getattr(events, hook).assert_called_once_with(*args)

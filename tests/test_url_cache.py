"""Test suite for the recent deep link lists"""

import json

from ardemo.services.cache import RecentURLCache

MUG_URL = (
    "com.oracle.ios.ardemo://mug?url=https%3A%2F%2Fsomeserver.com&token=123"
    "&assetID=CORE456&imageID=CONT789&mugColor=0x123123"
)


def test_store_is_idempotent(recent_urls):
    """Storing the same URL twice keeps a single entry"""
    assert recent_urls.store(MUG_URL) is True
    assert recent_urls.store(MUG_URL) is False

    assert recent_urls.items == [MUG_URL]


def test_store_ignores_empty(recent_urls, url_cache_path):
    """None and empty strings are ignored and nothing is written"""
    assert recent_urls.store(None) is False
    assert recent_urls.store("") is False

    assert len(recent_urls) == 0
    assert not url_cache_path.exists()


def test_insertion_order_and_persistence(recent_urls, url_cache_path):
    """URLs keep insertion order and survive a reload"""
    second = MUG_URL.replace("0x123123", "0x000000")
    recent_urls.store(MUG_URL)
    recent_urls.store(second)

    assert json.loads(url_cache_path.read_text()) == [MUG_URL, second]
    assert RecentURLCache(url_cache_path).items == [MUG_URL, second]


def test_equality_is_not_normalized(recent_urls):
    """URLs that differ only in encoding are distinct entries"""
    recent_urls.store(MUG_URL)
    recent_urls.store(MUG_URL.replace("https%3A%2F%2F", "https://"))

    assert len(recent_urls) == 2


def test_clear(recent_urls, url_cache_path):
    """Clearing empties memory and disk"""
    recent_urls.store(MUG_URL)

    recent_urls.clear()

    assert recent_urls.items == []
    assert json.loads(url_cache_path.read_text()) == []


def test_items_is_a_copy(recent_urls):
    """Mutating the returned list does not change the cache"""
    recent_urls.store(MUG_URL)
    recent_urls.items.append("other://x")

    assert recent_urls.items == [MUG_URL]


def test_invalid_file_loads_empty(url_cache_path):
    """A file that is not a JSON array loads as an empty list"""
    url_cache_path.write_text('{"not": "a list"}')

    assert RecentURLCache(url_cache_path).items == []

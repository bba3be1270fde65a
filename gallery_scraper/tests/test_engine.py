"""End-to-end tests for ListingParser against saved listing pages."""
from concurrent.futures import ThreadPoolExecutor
from pathlib import Path
import warnings

from gallery_scraper import ListingParser, ParseError, parse
from gallery_scraper.models import Category
from gallery_scraper.ports import InMemoryDownloadRegistry, InMemoryFavoritesStore
import pytest

SAMPLES = Path(__file__).resolve().parent.parent / 'samples'


def load_sample(name: str) -> str:
    return (SAMPLES / name).read_text(encoding='utf-8')


def test_no_hits_page():
    result = parse(load_sample('listing_no_hits.html'))
    assert result.page_count == 0
    assert result.records == ()


def test_no_hits_marker_wins_over_other_content():
    html = load_sample('listing_normal.html').replace('</body>', '<p>No hits found</p></body>')
    result = parse(html)
    assert result.page_count == 0
    assert result.records == ()


def test_normal_listing_sample():
    parser = ListingParser(
        favorites=InMemoryFavoritesStore([1002]),
        downloads=InMemoryDownloadRegistry([1001]),
    )
    result = parser.parse(load_sample('listing_normal.html'))

    assert result.page_count == 4
    # the cosplay row has no title cell and is dropped
    assert [r.gid for r in result.records] == [1001, 1002, 1004]

    first, second, fourth = result.records
    assert first.title == '[Circle] Summer Story [English]'
    assert first.token == '0123456789'
    assert first.category == Category.DOUJINSHI
    assert first.rating == 4.0
    assert first.rated is True
    assert first.favorite_slot == 1
    assert first.favorite_name == 'Favorites 1'
    assert first.downloaded is True
    assert first.simple_language == 'EN'
    assert (first.thumbnail_width, first.thumbnail_height) == (200, 283)

    assert second.category == Category.MANGA
    assert second.rating == 2.5
    assert second.rated is False
    assert second.thumbnail_url == 'http://ehgt.org'
    assert second.favorite_slot == -1
    assert second.uploader == 'bob'
    assert second.downloaded is False

    assert fourth.rating == -1.0
    assert fourth.uploader == ''
    assert fourth.posted_date == '2016-04-28 10:00'
    assert fourth.thumbnail_url.startswith('https://ehgt.org/')
    assert fourth.favorite_slot == -2

    assert any('title:missing' in d for d in result.diagnostics)


def test_thumbnail_listing_sample_uses_fallback_layout():
    result = parse(load_sample('listing_thumbnail.html'), favorites=InMemoryFavoritesStore([2002]))

    assert result.page_count == 2
    assert [r.gid for r in result.records] == [2001, 2002]
    tile, bare = result.records
    assert tile.title == 'Spring Garden [Chinese]'
    assert tile.simple_language == 'ZH'
    assert tile.category == Category.MANGA
    assert tile.rating == 5.0
    assert tile.favorite_slot == 0
    assert tile.thumbnail_url.endswith('aaaa0000-1-200-280-jpg_l.jpg')
    assert bare.category == Category.GAME_CG
    assert bare.rating == -1.0
    assert bare.thumbnail_url == ''
    assert bare.favorite_slot == -1


def test_empty_table_returns_empty_fallback_result():
    html = (
        '<table class="ptt"><tr><td>&lt;</td><td>1</td><td>&gt;</td></tr></table>'
        '<table class="itg"><tr><th>Type</th></tr></table>'
    )
    result = parse(html)
    assert result.page_count == 1
    assert result.records == ()


def test_missing_grid_raises():
    html = '<table class="ptt"><tr><td>&lt;</td><td>3</td><td>&gt;</td></tr></table>'
    with pytest.raises(ParseError) as exc:
        parse(html)
    assert exc.value.body == html


def test_grid_without_children_raises():
    html = (
        '<table class="ptt"><tr><td>&lt;</td><td>1</td><td>&gt;</td></tr></table>'
        '<div class="itg"> </div>'
    )
    with pytest.raises(ParseError, match="Can't parse gallery list"):
        parse(html)


def test_missing_pagination_raises():
    with pytest.raises(ParseError):
        parse('<table class="itg"><tr><th>Type</th></tr></table>')


def test_parse_is_idempotent():
    html = load_sample('listing_normal.html')
    parser = ListingParser(favorites=InMemoryFavoritesStore([1002]))
    assert parser.parse(html) == parser.parse(html)


def test_parser_shared_between_threads():
    html = load_sample('listing_normal.html')
    parser = ListingParser()
    expected = parser.parse(html)
    with ThreadPoolExecutor(max_workers=4) as pool:
        results = list(pool.map(parser.parse, [html] * 8))
    assert all(r == expected for r in results)


def test_injected_collaborators_are_used():
    seen = []

    def link_parser(href):
        seen.append(href)
        return None

    result = parse(load_sample('listing_normal.html'), link_parser=link_parser)
    assert result.records == ()
    assert seen


def test_parse_samples_reports_each_page():
    results = ListingParser().parse_samples(SAMPLES)
    by_name = {r['sample']: r for r in results}
    assert set(by_name) == {'listing_no_hits.html', 'listing_normal.html', 'listing_thumbnail.html'}
    assert by_name['listing_normal.html']['result'].page_count == 4
    assert 'error' not in by_name['listing_thumbnail.html']


def test_concurrent_parses_leave_warning_filters_alone():
    html = load_sample('listing_normal.html')
    parser = ListingParser()
    before = list(warnings.filters)
    with ThreadPoolExecutor(max_workers=8) as pool:
        list(pool.map(parser.parse, [html] * 40))
    assert list(warnings.filters) == before

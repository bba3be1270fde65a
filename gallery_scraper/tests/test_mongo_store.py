from types import SimpleNamespace

from gallery_scraper.db import mongo_store
from gallery_scraper.db.mongo_store import MongoDownloadRegistry, MongoFavoritesStore, save_records
from gallery_scraper.engine import ListingParser
from gallery_scraper.models import Category, SummaryRecord
from pymongo.errors import AutoReconnect
import pytest


class FakeCollection:
    """Just enough of a pymongo collection for the store helpers."""

    def __init__(self, docs=(), failures=0):
        self.docs = {d['gid']: dict(d) for d in docs}
        self.failures = failures
        self.indexes = []

    def find_one(self, query, projection=None):
        if self.failures:
            self.failures -= 1
            raise AutoReconnect('flaky')
        return self.docs.get(query['gid'])

    def create_index(self, keys, **kwargs):
        self.indexes.append((keys, kwargs))

    def update_one(self, query, update, upsert=False):
        gid = query['gid']
        existed = gid in self.docs
        self.docs.setdefault(gid, {}).update(update['$set'])
        return SimpleNamespace(
            matched_count=int(existed),
            modified_count=int(existed),
            upserted_id=None if existed else gid,
        )


@pytest.fixture(autouse=True)
def no_backoff(monkeypatch):
    monkeypatch.setattr(mongo_store.time, 'sleep', lambda s: None)


def test_favorites_store_contains():
    store = MongoFavoritesStore(FakeCollection([{'gid': 5}]))
    assert store.contains(5)
    assert not store.contains(6)


def test_download_registry_add_then_contains():
    registry = MongoDownloadRegistry(FakeCollection())
    registry.add(9, state='finished')
    assert registry.contains(9)


def test_lookup_retries_transient_errors():
    store = MongoFavoritesStore(FakeCollection([{'gid': 5}], failures=2))
    assert store.contains(5)


def test_lookup_gives_up_after_retries():
    store = MongoFavoritesStore(FakeCollection([{'gid': 5}], failures=5))
    with pytest.raises(AutoReconnect):
        store.contains(5)


def test_mongo_stores_plug_into_parser():
    html = (
        '<table class="ptt"><tr><td>&lt;</td><td>1</td><td>&gt;</td></tr></table>'
        '<table class="itg"><tr><th>Type</th></tr>'
        '<tr><td><div class="it5"><a href="https://e-hentai.org/g/5/0123456789/">x</a></div></td></tr>'
        '</table>'
    )
    parser = ListingParser(
        favorites=MongoFavoritesStore(FakeCollection([{'gid': 5}])),
        downloads=MongoDownloadRegistry(FakeCollection()),
    )
    record = parser.parse(html).records[0]
    assert record.favorite_slot == -1
    assert record.downloaded is False


def test_save_records_upserts_by_gid():
    coll = FakeCollection()
    records = [
        SummaryRecord(gid=1, token='t1', title='one', category=Category.MANGA),
        SummaryRecord(gid=2, token='t2', title='two'),
    ]
    assert save_records(records, collection=coll) == {'matched_count': 0, 'modified_count': 0, 'upserted_count': 2}
    assert coll.docs[1]['category'] == int(Category.MANGA)
    assert save_records(records[:1], collection=coll)['matched_count'] == 1


def test_save_records_rejects_other_types():
    with pytest.raises(ValueError):
        save_records([{'gid': 1}], collection=FakeCollection())


class FakeClient:
    def __init__(self):
        self.dbs = {}
        self.closed = False

    def __getitem__(self, name):
        return self.dbs.setdefault(name, {})

    def close(self):
        self.closed = True


@pytest.fixture
def fake_client(monkeypatch):
    client = FakeClient()
    db = client[mongo_store.DB_NAME]
    for name in (mongo_store.FAVORITES_COLLECTION, mongo_store.DOWNLOADS_COLLECTION, mongo_store.GALLERIES_COLLECTION):
        db[name] = FakeCollection()
    monkeypatch.setattr(mongo_store, '_client', client)
    return client


def test_ensure_indexes_creates_unique_gid_index(fake_client):
    mongo_store.ensure_indexes()
    db = fake_client[mongo_store.DB_NAME]
    for coll in db.values():
        assert coll.indexes == [([('gid', 1)], {'unique': True, 'name': 'uniq_gid'})]


def test_close_client_drops_cached_client(fake_client):
    mongo_store.close_client()
    assert fake_client.closed
    assert mongo_store._client is None
    # closing twice is harmless
    mongo_store.close_client()

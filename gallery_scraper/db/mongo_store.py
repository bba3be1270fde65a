"""MongoDB storage for local favorites, download state and parsed galleries.

Connection settings come from the `MONGO_URI`, `MONGO_DB` and
`MONGO_*_COLLECTION` environment variables. `MongoFavoritesStore` and
`MongoDownloadRegistry` satisfy the parser's lookup ports; both only
read, and pymongo clients are safe to share between threads.
`save_records()` upserts parsed galleries by `gid`.
"""
from dataclasses import asdict
from typing import Any, Dict, Iterable, Optional
import logging
import os
import time
from functools import wraps

from pymongo import MongoClient, ASCENDING
from pymongo.errors import PyMongoError
from pymongo.write_concern import WriteConcern

from ..models import SummaryRecord

logger = logging.getLogger(__name__)

# Configuration via environment
MONGO_URI = os.environ.get('MONGO_URI', 'mongodb://localhost:27017')
DB_NAME = os.environ.get('MONGO_DB', 'galleries')
FAVORITES_COLLECTION = os.environ.get('MONGO_FAVORITES_COLLECTION', 'local_favorites')
DOWNLOADS_COLLECTION = os.environ.get('MONGO_DOWNLOADS_COLLECTION', 'downloads')
GALLERIES_COLLECTION = os.environ.get('MONGO_GALLERIES_COLLECTION', 'gallery_info')
# Write concern: w=1 by default, can be 'majority' or integer
MONGO_W = os.environ.get('MONGO_WRITE_CONCERN', '1')
# connection timeouts (seconds)
MONGO_SERVER_SELECTION_TIMEOUT = int(os.environ.get('MONGO_SERVER_SELECTION_TIMEOUT', '5'))

_client: Optional[MongoClient] = None


def _write_concern() -> WriteConcern:
    w: Any = int(MONGO_W) if MONGO_W.isdigit() else MONGO_W
    return WriteConcern(w=w)


def _with_retries(retries: int = 3, backoff: float = 0.2):
    def deco(fn):
        @wraps(fn)
        def wrapper(*args, **kwargs):
            last_exc = None
            for attempt in range(1, retries + 1):
                try:
                    return fn(*args, **kwargs)
                except PyMongoError as e:
                    logger.warning('%s failed (attempt %d/%d): %s', fn.__name__, attempt, retries, e)
                    last_exc = e
                    time.sleep(backoff * attempt)
            raise last_exc

        return wrapper

    return deco


def get_client() -> MongoClient:
    """Return a cached `MongoClient` configured with sensible timeouts."""
    global _client
    if _client is None:
        _client = MongoClient(MONGO_URI, serverSelectionTimeoutMS=int(MONGO_SERVER_SELECTION_TIMEOUT * 1000))
    return _client


def get_collection(name: str):
    return get_client()[DB_NAME].get_collection(name, write_concern=_write_concern())


def ensure_indexes():
    """Create unique `gid` indexes on every collection this module uses."""
    db = get_client()[DB_NAME]
    for name in (FAVORITES_COLLECTION, DOWNLOADS_COLLECTION, GALLERIES_COLLECTION):
        try:
            db[name].create_index([('gid', ASCENDING)], unique=True, name='uniq_gid')
        except PyMongoError as e:
            logger.warning('Could not create gid index on %s: %s', name, e)


class MongoIdSet:
    """Membership lookups against a collection of ``{'gid': ...}`` documents."""

    def __init__(self, collection=None, collection_name: Optional[str] = None):
        self._collection = collection
        self._collection_name = collection_name

    @property
    def collection(self):
        if self._collection is None:
            self._collection = get_collection(self._collection_name)
        return self._collection

    @_with_retries(retries=3, backoff=0.2)
    def contains(self, gid: int) -> bool:
        return self.collection.find_one({'gid': gid}, projection={'_id': 1}) is not None

    @_with_retries(retries=3, backoff=0.2)
    def add(self, gid: int, **extra: Any) -> None:
        self.collection.update_one({'gid': gid}, {'$set': dict(extra, gid=gid)}, upsert=True)


class MongoFavoritesStore(MongoIdSet):
    def __init__(self, collection=None):
        super().__init__(collection, FAVORITES_COLLECTION)


class MongoDownloadRegistry(MongoIdSet):
    def __init__(self, collection=None):
        super().__init__(collection, DOWNLOADS_COLLECTION)


def record_document(record: SummaryRecord) -> Dict[str, Any]:
    doc = asdict(record)
    doc['category'] = int(record.category)
    return doc


@_with_retries(retries=3, backoff=0.3)
def save_records(records: Iterable[SummaryRecord], collection=None) -> Dict[str, int]:
    """Upsert parsed galleries keyed by `gid`.

    Returns counts of matched, modified and newly inserted documents.
    """
    coll = collection if collection is not None else get_collection(GALLERIES_COLLECTION)
    matched = modified = upserted = 0
    for record in records:
        if not isinstance(record, SummaryRecord):
            raise ValueError('records must be SummaryRecord instances')
        res = coll.update_one({'gid': record.gid}, {'$set': record_document(record)}, upsert=True)
        matched += int(res.matched_count)
        modified += int(res.modified_count)
        if res.upserted_id is not None:
            upserted += 1
    return {'matched_count': matched, 'modified_count': modified, 'upserted_count': upserted}


def close_client() -> None:
    """Close the cached client; the next `get_client()` reconnects."""
    global _client
    client, _client = _client, None
    if client is not None:
        client.close()
        logger.debug('Closed MongoDB client for %s', MONGO_URI)

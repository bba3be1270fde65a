"""Command line runner that parses saved listing pages.

Each argument is an ``.html`` file or a directory of them. Parsed
results are printed to stdout as JSON, one object per page.

    python -m gallery_scraper.run_scraper samples/ --favorites 123,456
"""
from dataclasses import asdict
from pathlib import Path
from typing import List, Optional
import argparse
import json
import logging
import os
import sys

from .db import mongo_store
from .engine import ListingParser
from .exceptions import ParseError
from .ports import InMemoryDownloadRegistry, InMemoryFavoritesStore
from .utils.site_mapping import ThumbnailUrlNormalizer

logger = logging.getLogger(__name__)


def find_pages(paths: List[str]) -> List[Path]:
    out: List[Path] = []
    for raw in paths:
        p = Path(raw)
        if p.is_dir():
            out.extend(sorted(p.glob('*.html')))
        else:
            out.append(p)
    return out


def _id_list(value: str) -> List[int]:
    try:
        return [int(v) for v in value.split(',') if v.strip()]
    except ValueError:
        raise argparse.ArgumentTypeError(f'expected comma separated gallery ids, got {value!r}')


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description='Parse saved gallery listing pages')
    parser.add_argument('paths', nargs='+', help='HTML files or directories of HTML files')
    parser.add_argument('--favorites', type=_id_list, default=[], help='gallery ids saved in local favorites')
    parser.add_argument('--downloads', type=_id_list, default=[], help='gallery ids with a download entry')
    parser.add_argument('--mongo', action='store_true', help='look up favorites and downloads in MongoDB')
    parser.add_argument('--save', action='store_true', help='upsert parsed galleries to MongoDB')
    parser.add_argument(
        '--thumb-resolution',
        default=os.environ.get('GALLERY_THUMB_RESOLUTION'),
        help='rewrite thumbnail size suffix (e.g. 250, 300)',
    )
    parser.add_argument('-v', '--verbose', action='store_true')
    return parser


def main(argv: Optional[List[str]] = None) -> int:
    args = build_parser().parse_args(argv)
    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.INFO,
        format='%(levelname)s %(name)s: %(message)s',
    )

    if args.mongo:
        favorites = mongo_store.MongoFavoritesStore()
        downloads = mongo_store.MongoDownloadRegistry()
    else:
        favorites = InMemoryFavoritesStore(args.favorites)
        downloads = InMemoryDownloadRegistry(args.downloads)

    listing_parser = ListingParser(
        favorites=favorites,
        downloads=downloads,
        thumb_normalizer=ThumbnailUrlNormalizer(args.thumb_resolution),
    )

    if args.save:
        mongo_store.ensure_indexes()

    failed = 0
    try:
        for page in find_pages(args.paths):
            try:
                result = listing_parser.parse_file(page)
            except ParseError as e:
                logger.error('%s: %s', page.name, e)
                failed += 1
                continue
            except OSError as e:
                logger.error('%s: cannot read page: %s', page, e)
                failed += 1
                continue

            if args.save and result.records:
                counts = mongo_store.save_records(result.records)
                logger.info('%s: saved %s', page.name, counts)

            out = asdict(result)
            out['page'] = str(page)
            print(json.dumps(out, ensure_ascii=False))
    finally:
        if args.mongo or args.save:
            mongo_store.close_client()

    return 1 if failed else 0


if __name__ == '__main__':
    sys.exit(main())

"""Browse and filter the catalog from a terminal."""

from __future__ import annotations

import argparse
import asyncio
import logging
import os
import sys

from dotenv import load_dotenv

from vitrine.ingest import create_source_from_env
from vitrine.logic.browser import CatalogBrowser
from vitrine.logic.catalog import CatalogService
from vitrine.logic.filters import filter_brands
from vitrine.logic.notes import group_notes


def _parse_args(argv: list[str] | None = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(description=__doc__)
    sub = parser.add_subparsers(dest="command", required=True)

    perfumes = sub.add_parser("perfumes", help="list perfumes matching the given filters")
    perfumes.add_argument("--search", default="")
    perfumes.add_argument("--brand", action="append", default=[])
    perfumes.add_argument("--note", action="append", default=[])
    perfumes.add_argument("--family", action="append", default=[])
    perfumes.add_argument("--facets", action="store_true", help="print available filter values")

    perfume = sub.add_parser("perfume", help="show one perfume")
    perfume.add_argument("slug")

    brands = sub.add_parser("brands", help="list brands")
    brands.add_argument("--search", default="")

    brand = sub.add_parser("brand", help="show one brand and its perfumes")
    brand.add_argument("slug")
    return parser.parse_args(argv)


async def _run(args: argparse.Namespace, service: CatalogService) -> int:
    if args.command == "perfumes":
        browser = CatalogBrowser(await service.list_perfumes())
        if args.facets:
            for name, values in browser.facets.as_dict().items():
                print(f"{name}: {', '.join(values) or '-'}")
            return 0
        browser.apply_batch(args.brand, args.note, args.family)
        visible = browser.search(args.search)
        if not visible:
            print("No perfumes match the current filters.")
        for item in visible:
            print(f"{item.slug:<32} {item.name} ({item.brand})")
        return 0
    if args.command == "perfume":
        item = await service.get_perfume(args.slug)
        if item is None:
            print(f"Perfume not found: {args.slug}", file=sys.stderr)
            return 1
        print(f"{item.name} by {item.brand}")
        if item.details.family:
            print(f"Family: {item.details.family}")
        for level, names in group_notes(item.fragrance_notes).items():
            print(f"  {level:<5} {', '.join(names) or '-'}")
        return 0
    if args.command == "brands":
        for item in filter_brands(await service.list_brands(), args.search):
            print(f"{item.slug:<32} {item.name} ({item.perfume_count} perfumes)")
        return 0
    item = await service.get_brand(args.slug)
    if item is None:
        print(f"Brand not found: {args.slug}", file=sys.stderr)
        return 1
    print(f"{item.name} - {item.description}")
    for perfume in await service.perfumes_for_brand(item):
        print(f"  {perfume.slug:<30} {perfume.name}")
    return 0


async def _main(args: argparse.Namespace) -> int:
    service = CatalogService(create_source_from_env())
    try:
        return await _run(args, service)
    finally:
        await service.close()


def main(argv: list[str] | None = None) -> None:
    load_dotenv()
    logging.basicConfig(level=os.environ.get("LOG_LEVEL", "WARNING"))
    sys.exit(asyncio.run(_main(_parse_args(argv))))


if __name__ == "__main__":
    main()

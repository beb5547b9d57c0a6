#!/usr/bin/env python3
"""
Photo browsing script

Drives the gallery fetch loop against a running server from the terminal:
one search, a few "scroll" pages, then the recorded search history.

Usage:
    python scripts/browse_photos.py "sunset" --pages 3 --sort DateTaken
    python scripts/browse_photos.py            # recent photos

Note:
    - The server must be running (uvicorn app.main:app --port 8080)
    - Every scroll page is one Flickr API call
"""

import argparse
import asyncio
import sys
from pathlib import Path

import httpx

# Add parent directory to path to import app modules
sys.path.insert(0, str(Path(__file__).parent.parent))

from app.client.fetch_loop import FetchState, PhotoFetchLoop
from app.schemas.photo import SortOrder


def print_outcome(loop: PhotoFetchLoop, outcome) -> None:
    session = loop.session
    if outcome is None:
        print("  (dropped, a request is already in flight)")
    elif outcome == FetchState.RENDERED:
        print(f"  ✓ page {session.page}: {len(session.gallery)} photos in gallery")
    else:
        print(f"  ✗ page {session.page} {outcome.value}: {session.message}")


async def main(args: argparse.Namespace) -> int:
    print("=" * 60)
    print(f"Search: {args.term or '(recent photos)'}  sort: {args.sort}")
    print("=" * 60)

    async with httpx.AsyncClient(base_url=args.base_url) as client:
        loop = PhotoFetchLoop(client, timeout=args.timeout)

        outcome = await loop.submit_search(args.term, args.sort)
        if loop.session.note:
            print(loop.session.note)
        print_outcome(loop, outcome)

        for _ in range(args.pages - 1):
            if outcome != FetchState.RENDERED:
                break
            outcome = await loop.scroll_near_bottom()
            print_outcome(loop, outcome)

        print("\nPhotos:")
        for photo in loop.session.gallery:
            print(f"  {photo.image_url}  {photo.title}")

        print("\nRecent searches:")
        for term in await loop.load_history():
            print(f"  - {term}")

    return 0 if outcome == FetchState.RENDERED else 1


if __name__ == "__main__":
    parser = argparse.ArgumentParser(description="Browse photos through the search API")
    parser.add_argument("term", nargs="?", default="", help="search text; empty for recent photos")
    parser.add_argument("--pages", type=int, default=1, help="number of pages to load")
    parser.add_argument("--sort", default=SortOrder.RELEVANT.value, choices=[s.value for s in SortOrder])
    parser.add_argument("--base-url", default="http://localhost:8080")
    parser.add_argument("--timeout", type=float, default=10.0)
    sys.exit(asyncio.run(main(parser.parse_args())))

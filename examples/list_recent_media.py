"""List a user's recent Instagram media with the cached fetcher.

Usage:
    export RAGAMINTS_INSTAGRAM_ACCESS_TOKEN=...
    python examples/list_recent_media.py --user someone --count 50
    python examples/list_recent_media.py --user 12345 --count 10 --sequential --include-videos
"""

import argparse
import asyncio
import logging

from ragamints import (
    Cache,
    CacheConfig,
    FileStore,
    InstagramClient,
    PaginatedFetcher,
    RagamintsError,
    RecentMediaOptions,
    Settings,
    for_each_recent_media,
)
from ragamints.instagram import (
    RESOLUTIONS,
    create_media_file_name,
    log_media,
    media_resolution_url,
    resolve_media_id,
    resolve_user_id,
)


async def main(args: argparse.Namespace) -> None:
    settings = Settings()
    cache = Cache(FileStore(settings.cache_dir), CacheConfig(enabled=settings.cache_enabled))
    if args.clear_cache:
        await cache.clear()

    async with InstagramClient(
        settings.require_access_token(), timeout=settings.request_timeout
    ) as client:
        fetcher = PaginatedFetcher(client, cache)
        user_id = await resolve_user_id(fetcher, args.user)
        options = RecentMediaOptions(
            count=args.count,
            min_id=await resolve_media_id(fetcher, args.min_id),
            max_id=await resolve_media_id(fetcher, args.max_id),
            sequential=args.sequential,
            include_videos=args.include_videos,
        )

        async def show(media: dict, options: RecentMediaOptions) -> str:
            name = create_media_file_name(media)
            log_media(media, f"{name} {media_resolution_url(media, args.resolution)}")
            return name

        names = await for_each_recent_media(fetcher, user_id, options, show)
        print(f"\n{len(names)} file name(s) computed")


if __name__ == "__main__":
    parser = argparse.ArgumentParser(description="List recent Instagram media")
    parser.add_argument("-u", "--user", required=True, help="Instagram user ID (or user name)")
    parser.add_argument("-c", "--count", type=int, help="Maximum count of medias")
    parser.add_argument("-m", "--min-id", help="Only medias posted later than this media id/url")
    parser.add_argument("-n", "--max-id", help="Only medias posted earlier than this media id/url")
    parser.add_argument("-s", "--sequential", action="store_true", help="Process sequentially")
    parser.add_argument(
        "-i", "--include-videos", action="store_true", help="Include videos (skipped by default)"
    )
    parser.add_argument(
        "-r",
        "--resolution",
        choices=sorted(RESOLUTIONS.values()),
        help="Resolution of the listed file URLs (highest by default)",
    )
    parser.add_argument("--clear-cache", action="store_true", help="Clear the cache first")
    parser.add_argument("-v", "--verbose", action="store_true", help="Debug logging")
    args = parser.parse_args()

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.INFO,
        format="%(message)s",
    )
    try:
        asyncio.run(main(args))
    except RagamintsError as e:
        raise SystemExit(str(e)) from e

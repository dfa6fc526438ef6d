"""Command-line entry point for the artwork resolver."""

from __future__ import annotations

import argparse
import json
import logging
import sys
import time
from pathlib import Path
from typing import Iterable, List, Optional, Sequence

from .config import ResolverConfig
from .errors import ArtworkError, ConfigurationError
from .images import save_image
from .models import ImageResult, ImageType
from .resolver import ArtworkResolver

logger = logging.getLogger("fanart_resolver.cli")

IMAGE_TYPE_CHOICES = [kind.value for kind in ImageType]


def _ensure_command_prefix(argv: Sequence[str], commands: Iterable[str]) -> Sequence[str]:
    if not argv:
        return argv
    first = argv[0]
    if first in commands or first.startswith("-"):
        return argv
    return ("resolve", *argv)


def _add_common_arguments(parser: argparse.ArgumentParser) -> None:
    parser.add_argument(
        "--language",
        default="en",
        help="Preferred image language (two-letter code)",
    )
    parser.add_argument(
        "--type",
        dest="image_types",
        action="append",
        choices=IMAGE_TYPE_CHOICES,
        help="Restrict results to this image type; may be repeated",
    )
    parser.add_argument(
        "--api-key",
        default=None,
        help="Service API key (defaults to $FANART_API_KEY)",
    )
    parser.add_argument(
        "--personal-api-key",
        default=None,
        help="Personal client key appended to requests (defaults to $FANART_PERSONAL_API_KEY)",
    )
    parser.add_argument(
        "--cache-dir",
        type=Path,
        default=None,
        help="Directory holding cached catalogs (defaults to $FANART_CACHE_DIR)",
    )
    parser.add_argument(
        "--refresh",
        action="store_true",
        help="Ignore the freshness window and re-fetch the catalog",
    )
    parser.add_argument(
        "--verbose",
        action="store_true",
        help="Enable verbose logging",
    )


def _add_resolve_arguments(parser: argparse.ArgumentParser) -> None:
    parser.add_argument("identifiers", nargs="+", help="One or more artist identifiers")
    parser.add_argument(
        "--limit",
        type=int,
        default=None,
        help="Print at most this many images per identifier",
    )
    parser.add_argument(
        "--json",
        action="store_true",
        help="Emit results to STDOUT as JSON",
    )
    _add_common_arguments(parser)


def _add_download_arguments(parser: argparse.ArgumentParser) -> None:
    parser.add_argument("identifier", help="Artist identifier")
    parser.add_argument(
        "--output",
        default="output",
        type=Path,
        help="Directory where the image should be written",
    )
    _add_common_arguments(parser)


def parse_args(argv: Sequence[str] | None = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(
        description="Resolve and rank remote artwork for an artist identifier.",
    )
    subparsers = parser.add_subparsers(dest="command", required=True)

    resolve_parser = subparsers.add_parser(
        "resolve", help="List ranked images for one or more identifiers"
    )
    _add_resolve_arguments(resolve_parser)

    download_parser = subparsers.add_parser(
        "download", help="Download the best-ranked image for an identifier"
    )
    _add_download_arguments(download_parser)

    argv = list(sys.argv[1:] if argv is None else argv)
    argv = list(_ensure_command_prefix(argv, subparsers.choices.keys()))
    return parser.parse_args(argv)


def _configure_logging(verbose: bool, quiet: bool = False) -> None:
    level = logging.DEBUG if verbose else logging.INFO
    if quiet and not verbose:
        level = logging.ERROR
    logging.basicConfig(
        level=level,
        format="%(asctime)s [%(levelname)s] %(message)s",
        datefmt="%Y-%m-%d %H:%M:%S",
        force=True,
    )


def _build_resolver(args: argparse.Namespace) -> ArtworkResolver:
    config = ResolverConfig.from_env(
        cache_root=args.cache_dir,
        api_key=args.api_key,
        personal_api_key=args.personal_api_key,
    )
    return ArtworkResolver(config)


def _image_types(args: argparse.Namespace) -> Optional[List[ImageType]]:
    if not args.image_types:
        return None
    return [ImageType(value) for value in args.image_types]


def _format_result(result: ImageResult) -> str:
    language = result.language or "-"
    popularity = result.popularity if result.popularity is not None else "-"
    return (
        f"{result.image_type.value:<8} {result.width}x{result.height:<5} "
        f"lang={language:<3} likes={popularity:<5} {result.url}"
    )


def _run_resolve(args: argparse.Namespace) -> int:
    _configure_logging(args.verbose, quiet=args.json)
    with _build_resolver(args) as resolver:
        return _resolve_all(resolver, args)


def _resolve_all(resolver: ArtworkResolver, args: argparse.Namespace) -> int:
    overall_start = time.perf_counter()
    payload = {}
    failures = 0
    for identifier in args.identifiers:
        try:
            results = resolver.resolve_images(
                identifier,
                args.language,
                image_types=_image_types(args),
                force_refresh=args.refresh,
            )
        except ArtworkError as exc:
            logger.error("Failed to resolve %s: %s", identifier, exc)
            failures += 1
            continue
        if args.limit is not None:
            results = results[: args.limit]
        payload[identifier] = [result.to_dict() for result in results]
        if not args.json:
            sys.stdout.write(f"{identifier} ({len(results)} images)\n")
            for result in results:
                sys.stdout.write("  " + _format_result(result) + "\n")
    total_elapsed = time.perf_counter() - overall_start

    if args.json:
        json.dump(payload, sys.stdout, indent=2)
        sys.stdout.write("\n")
    sys.stdout.flush()

    logger.info(
        "Finished in %.2fs (%d/%d succeeded, %d failed)",
        total_elapsed,
        len(args.identifiers) - failures,
        len(args.identifiers),
        failures,
    )
    return 1 if failures else 0


def _run_download(args: argparse.Namespace) -> int:
    _configure_logging(args.verbose)
    with _build_resolver(args) as resolver:
        return _download_best(resolver, args)


def _download_best(resolver: ArtworkResolver, args: argparse.Namespace) -> int:
    try:
        results = resolver.resolve_images(
            args.identifier,
            args.language,
            image_types=_image_types(args),
            force_refresh=args.refresh,
        )
    except ArtworkError as exc:
        logger.error("Failed to resolve %s: %s", args.identifier, exc)
        return 1
    if not results:
        logger.error("No images available for %s", args.identifier)
        return 1

    for result in results:
        destination = save_image(
            resolver, result, Path(args.output).resolve(), args.identifier
        )
        if destination:
            sys.stdout.write(f"{destination}\n")
            return 0
    logger.error("None of the %d candidates could be downloaded", len(results))
    return 1


def main(argv: Sequence[str] | None = None) -> int:
    args = parse_args(argv)
    try:
        if args.command == "resolve":
            return _run_resolve(args)
        return _run_download(args)
    except ConfigurationError as exc:
        logger.error("%s", exc)
        return 2


if __name__ == "__main__":
    sys.exit(main())

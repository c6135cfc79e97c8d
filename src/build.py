"""Build entry point: discover posts, build the feed and write rss.xml."""

import argparse
from collections.abc import Sequence
from datetime import UTC, datetime
from typing import Any

from .config import Config
from .documents import DocumentLoader
from .errors import FeedBuildError
from .feed import FeedBuilder
from .logging_config import create_execution_logger, setup_structured_logging
from .rss import RssWriter

LOG_LEVELS = ["DEBUG", "INFO", "WARNING", "ERROR"]


def run_build(config: Config | None = None) -> dict[str, Any]:
    """
    Run one feed build: load documents, build the descriptor, write the feed.

    Any error aborts the build before the feed file is written.

    Args:
        config: Configuration to use (read from the environment when omitted)

    Returns:
        Build metrics

    Raises:
        FeedBuildError: If configuration, content or serialization fails
    """
    execution_id = f"build_{datetime.now(UTC).strftime('%Y%m%d_%H%M%S_%f')}"
    main_logger = create_execution_logger("main", execution_id)
    main_logger.log_execution_start()

    metrics: dict[str, Any] = {
        "execution_id": execution_id,
        "documents_found": 0,
        "items_written": 0,
        "output_path": None,
    }

    try:
        config = config or Config()
        config.logger = create_execution_logger("config", execution_id)
        site_url = config.get_site_url()
        main_logger.info("Configuration initialized", site_url=site_url)

        loader = DocumentLoader(
            config.content_dir,
            base_path=config.content_base_path,
            execution_id=execution_id,
        )
        documents = loader.load()
        metrics["documents_found"] = len(documents)

        builder = FeedBuilder(config.get_feed_config(), execution_id=execution_id)
        descriptor = builder.build_feed(documents, site_url)

        writer = RssWriter(execution_id=execution_id)
        output_path = writer.write(descriptor, config.feed_output)
        metrics["items_written"] = len(descriptor.items)
        metrics["output_path"] = str(output_path)

    except FeedBuildError as e:
        main_logger.error(f"Feed build failed: {e}", error=str(e))
        main_logger.log_execution_end(success=False, metrics=metrics)
        raise

    main_logger.log_metrics(metrics)
    main_logger.log_execution_end(success=True, metrics=metrics)
    return metrics


def parse_args(argv: Sequence[str] | None = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(
        prog="blog-feed", description="Build the blog RSS feed"
    )
    parser.add_argument("--content-dir", help="Directory holding the Markdown posts")
    parser.add_argument("--output", help="Path of the RSS file to write")
    parser.add_argument("--site-url", help="Deployed site URL (overrides SITE_URL)")
    parser.add_argument("--base-path", help="URL prefix for post links")
    parser.add_argument(
        "--log-level",
        help="Overrides LOG_LEVEL",
        choices=LOG_LEVELS,
        type=str.upper,
    )
    return parser.parse_args(argv)


def main(argv: Sequence[str] | None = None) -> int:
    """Command line entry point; returns the process exit code."""
    args = parse_args(argv)
    config = Config()
    log_level = args.log_level or config.log_level.upper()
    if log_level in LOG_LEVELS:
        setup_structured_logging(log_level)
    else:
        setup_structured_logging("INFO")
        config.logger.warning(f"Unknown LOG_LEVEL {config.log_level!r}; using INFO")

    if args.content_dir:
        config.content_dir = args.content_dir
    if args.output:
        config.feed_output = args.output
    if args.site_url:
        config.site_url = args.site_url
    if args.base_path:
        config.content_base_path = args.base_path

    try:
        run_build(config)
    except FeedBuildError:
        return 1
    return 0


if __name__ == "__main__":
    raise SystemExit(main())

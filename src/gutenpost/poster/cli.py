"""CLI for posting a book to Bluesky one episode at a time.

Commands:
    gutenpost post      Post the next episode and advance the reading cursor
    gutenpost preview   Show how the next episode would be split (no posting)
    gutenpost status    Show reading progress

Pipeline:
    fetch → paragraphs → chunks → threads → post → save state

Examples:
    # Post the next episode
    gutenpost post

    # See what would be posted, without credentials
    gutenpost post --dry-run

    # Preview an arbitrary paragraph (0-indexed)
    gutenpost preview --paragraph 120
"""

from __future__ import annotations

import argparse
import logging
import sys
import traceback
from datetime import datetime
from pathlib import Path
from typing import TYPE_CHECKING

from gutenpost.config import load_config

if TYPE_CHECKING:
    from gutenpost.poster.episode import Episode

# =============================================================================
# LOGGING SETUP
# =============================================================================

# Module-level logger
logger = logging.getLogger("gutenpost")


def _setup_logging(log_dir: Path | None = None, verbose: bool = False) -> Path:
    """Configure logging with file and console handlers.

    Args:
        log_dir: Directory for log files (default: ./logs/)
        verbose: If True, set console to DEBUG level

    Returns:
        Path to the log file
    """
    if log_dir is None:
        log_dir = Path("logs")
    log_dir.mkdir(parents=True, exist_ok=True)

    timestamp = datetime.now().strftime("%Y%m%d_%H%M%S")
    log_file = log_dir / f"gutenpost_{timestamp}.log"

    logger.setLevel(logging.DEBUG)

    # File handler - captures everything with full detail
    file_handler = logging.FileHandler(log_file, encoding="utf-8")
    file_handler.setLevel(logging.DEBUG)
    file_formatter = logging.Formatter(
        "%(asctime)s | %(levelname)-8s | %(message)s",
        datefmt="%Y-%m-%d %H:%M:%S",
    )
    file_handler.setFormatter(file_formatter)

    # Console handler - less verbose unless --verbose flag
    console_handler = logging.StreamHandler(sys.stderr)
    console_handler.setLevel(logging.DEBUG if verbose else logging.WARNING)
    console_handler.setFormatter(logging.Formatter("%(levelname)s: %(message)s"))

    logger.handlers.clear()
    logger.addHandler(file_handler)
    logger.addHandler(console_handler)

    logger.info(f"Logging initialized - log file: {log_file}")
    return log_file


def _log_exception(msg: str, exc: Exception) -> None:
    """Log an exception with full traceback to file.

    Args:
        msg: Context message describing what failed
        exc: The exception that was raised
    """
    logger.error(f"{msg}: {type(exc).__name__}: {exc}")
    logger.debug(f"Traceback:\n{traceback.format_exc()}")


def _add_common_arguments(parser: argparse.ArgumentParser) -> None:
    parser.add_argument(
        "--state",
        type=Path,
        default=None,
        help="Path to the progress state file (default: from pyproject.toml)",
    )
    parser.add_argument(
        "--log-dir",
        type=Path,
        default=Path("logs"),
        help="Directory for log files (default: logs/)",
    )
    parser.add_argument(
        "-v",
        "--verbose",
        action="store_true",
        help="Show debug output on the console",
    )


def _create_parser() -> argparse.ArgumentParser:
    """Create argument parser with subcommands."""
    parser = argparse.ArgumentParser(
        prog="gutenpost",
        description="Post a public-domain book to Bluesky, one episode per run",
    )

    subparsers = parser.add_subparsers(dest="command", help="Available commands")

    # =========================================================================
    # POST SUBCOMMAND
    # =========================================================================
    post_parser = subparsers.add_parser(
        "post",
        help="Post the next episode",
        description=(
            "Split the next paragraph (plus any colon continuations) into posts, "
            "group them into threads and post them, then advance the cursor."
        ),
    )
    post_parser.add_argument(
        "--dry-run",
        action="store_true",
        help="Print the posts without posting or saving state",
    )
    post_parser.add_argument(
        "--paragraph",
        type=int,
        metavar="N",
        help="Start at paragraph N (0-indexed) instead of the saved cursor",
    )
    _add_common_arguments(post_parser)

    # =========================================================================
    # PREVIEW SUBCOMMAND
    # =========================================================================
    preview_parser = subparsers.add_parser(
        "preview",
        help="Show how the next episode would be split",
        description="Same output as 'post --dry-run'. Never needs credentials.",
    )
    preview_parser.add_argument(
        "--paragraph",
        type=int,
        metavar="N",
        help="Preview paragraph N (0-indexed) instead of the saved cursor",
    )
    _add_common_arguments(preview_parser)

    # =========================================================================
    # STATUS SUBCOMMAND
    # =========================================================================
    status_parser = subparsers.add_parser(
        "status",
        help="Show reading progress",
    )
    _add_common_arguments(status_parser)

    return parser


def _print_episode(episode: Episode) -> None:
    """Print every paragraph, chunk and thread of an episode."""
    from gutenpost.splitter import count_graphemes

    for offset, (paragraph, chunk_count) in enumerate(
        zip(episode.paragraphs, episode.chunk_counts, strict=True)
    ):
        print(f"\n--- Paragraph {episode.start_index + offset + 1} ---")
        print(f"Original length: {count_graphemes(paragraph)} graphemes")
        print(f"Split into {chunk_count} chunk(s)")

    total = len(episode.chunks)
    print(
        f"\n=== Total: {episode.consumed} paragraph(s), {total} post(s), "
        f"{len(episode.threads)} thread(s) ===\n"
    )

    position = 0
    for thread_number, thread in enumerate(episode.threads, 1):
        print(f"# Thread {thread_number}/{len(episode.threads)} ({len(thread)} post(s))")
        for chunk in thread:
            position += 1
            print(f"[{position}/{total}] ({count_graphemes(chunk)} chars):")
            print(chunk)
            print()


def _run_post_process(args: argparse.Namespace, dry_run: bool) -> int:
    """Post (or preview) the next episode.

    Args:
        args: Parsed command line arguments
        dry_run: If True, print the episode without posting

    Returns:
        Exit code (0 for success, 1 for error, 130 for interrupt)
    """
    from gutenpost.poster.bluesky import BlueskyConfig, BlueskyError, BlueskySession, post
    from gutenpost.poster.episode import build_episode, collect_paragraphs
    from gutenpost.poster.state import advance_state, load_state
    from gutenpost.poster.text_source import TextSource, TextSourceError

    config = load_config()
    state_path: Path = args.state or config.state_path
    source = TextSource(config)

    try:
        state = load_state(state_path)
        start_index: int = args.paragraph if args.paragraph is not None else state.current_paragraph
        total_paragraphs = source.total

        print(f"Starting at paragraph {start_index + 1} of {total_paragraphs}")
        logger.info(f"Starting at paragraph {start_index} (state: {state_path})")

        if start_index >= total_paragraphs:
            print("Reached end of book!")
            return 0

        paragraphs = collect_paragraphs(source, start_index)
        if not paragraphs:
            print(f"Error: Failed to get paragraph {start_index}")
            logger.error(f"No paragraph at index {start_index}")
            return 1

        episode = build_episode(paragraphs, start_index, config.split_config())
        _print_episode(episode)

        if dry_run:
            print("DRY RUN - not posting")
            return 0

        print("Posting to Bluesky...")
        bluesky_config = BlueskyConfig(
            service_url=config.service_url,
            timeout_seconds=config.request_timeout_seconds,
        )
        chunks_posted = 0
        with BlueskySession.from_env(bluesky_config) as session:
            for thread_number, thread in enumerate(episode.threads, 1):
                root = post(session, thread)
                chunks_posted += len(thread)
                # Cursor stops at the first paragraph with unposted chunks
                cursor = episode.start_index + episode.paragraphs_completed(chunks_posted)
                advance_state(state, state_path, root.uri, cursor)
                print(f"Posted thread {thread_number}/{len(episode.threads)}! URI: {root.uri}")
                logger.info(
                    f"Posted thread {thread_number} ({len(thread)} posts): {root.uri}, "
                    f"cursor at paragraph {cursor}"
                )

        print(
            f"Advanced to paragraph {episode.next_index + 1} "
            f"(consumed {episode.consumed} paragraph(s))"
        )
        print("Done!")
        return 0

    except KeyboardInterrupt:
        print("\nInterrupted")
        logger.warning("Interrupted by user")
        return 130
    except (TextSourceError, BlueskyError, OSError) as e:
        _log_exception("Posting run failed", e)
        print(f"Error: {e}")
        return 1


def _run_status_process(args: argparse.Namespace) -> int:
    """Print reading progress.

    Returns:
        Exit code (0 for success, 1 for error)
    """
    from gutenpost.poster.state import load_state
    from gutenpost.poster.text_source import TextSource, TextSourceError

    config = load_config()
    state_path: Path = args.state or config.state_path
    state = load_state(state_path)

    print("Reading Progress")
    print("=" * 40)
    print(f"State:     {state_path}")
    try:
        total = TextSource(config).total
    except (TextSourceError, OSError) as e:
        _log_exception("Failed to load book text", e)
        print(f"Error: {e}")
        return 1

    print(f"Paragraph: {min(state.current_paragraph + 1, total)} of {total}")
    if state.current_paragraph >= total:
        print("Finished:  yes")
    print(f"Last post: {state.last_post_uri or '-'}")
    print(f"Posted at: {state.last_post_at or '-'}")
    return 0


def main() -> None:
    """Run the gutenpost command line."""
    parser = _create_parser()
    args = parser.parse_args()

    if args.command is None:
        parser.print_help()
        sys.exit(0)

    _setup_logging(args.log_dir, args.verbose)

    if args.command == "post":
        exit_code = _run_post_process(args, dry_run=args.dry_run)
    elif args.command == "preview":
        exit_code = _run_post_process(args, dry_run=True)
    elif args.command == "status":
        exit_code = _run_status_process(args)
    else:
        # Unknown subcommand (shouldn't happen with argparse)
        parser.print_help()
        exit_code = 1
    sys.exit(exit_code)


if __name__ == "__main__":
    main()

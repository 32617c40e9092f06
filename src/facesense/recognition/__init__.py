"""Recognition CLI: upload a photo, wait for a person match, clean up."""

import argparse
import sys


def main() -> None:
    """CLI entry point for person recognition."""
    from facesense.config import LOG_LEVEL, POLL_INTERVAL, POLL_MAX_ATTEMPTS, POLL_SETTLE_DELAY

    parser = argparse.ArgumentParser(description="Identify the person in a photo")
    parser.add_argument("image", help="Path or http(s) URL of the image")
    parser.add_argument(
        "--max-attempts",
        type=int,
        default=POLL_MAX_ATTEMPTS,
        help=f"Recognition queries before giving up (default: {POLL_MAX_ATTEMPTS})",
    )
    parser.add_argument(
        "--interval",
        type=float,
        default=POLL_INTERVAL,
        help=f"Seconds between queries (default: {POLL_INTERVAL})",
    )
    parser.add_argument(
        "--settle",
        type=float,
        default=POLL_SETTLE_DELAY,
        help=f"Seconds to wait before the first query (default: {POLL_SETTLE_DELAY})",
    )
    parser.add_argument(
        "--announce",
        action="store_true",
        help="Print the \"name%%sentence\" line used by the voice client",
    )
    parser.add_argument(
        "--log-level", default=LOG_LEVEL, help=f"Logging level (default: {LOG_LEVEL})"
    )
    args = parser.parse_args()

    from facesense.errors import FaceSenseError
    from facesense.images import load_image
    from facesense.log import setup_logging
    from facesense.models import Resolved
    from facesense.recognition.graph_client import GraphClient
    from facesense.recognition.poller import PollerConfig
    from facesense.recognition.workflow import format_announcement, recognize

    setup_logging(args.log_level)

    try:
        config = PollerConfig(
            max_attempts=args.max_attempts,
            inter_attempt_delay=args.interval,
            settle_delay=args.settle,
        )
        image = load_image(args.image)
        outcome = recognize(image, GraphClient(), config)
    except (FaceSenseError, ValueError) as e:
        print(f"Error: {e}")
        if getattr(e, "cleanup_ok", None) is False:
            print(f"Warning: uploaded photo was not deleted: {e.cleanup_error}")
        sys.exit(1)

    result = outcome.result
    if args.announce:
        print(format_announcement(outcome))
    elif isinstance(result, Resolved):
        if result.person.is_empty:
            print(f"Face found but not recognized (photo {outcome.photo_id}).")
        else:
            print(f"{result.person.name} (id {result.person.external_id})")
    else:
        print(f"No match after {result.attempts} attempts.")

    if not outcome.cleanup_ok:
        print(f"Warning: photo {outcome.photo_id} was not deleted: {outcome.cleanup_error}")

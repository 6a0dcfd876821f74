"""CLI entry point for downloading and forwarding emails."""

import argparse
import asyncio
import logging
import os
import sys
from pathlib import Path

from dotenv import load_dotenv

from src.actions import ActionSession, DirectorySaver, EmailActions, NotificationVariant
from src.forwarding import GmailForwardTransport
from src.logging_config import configure_logging
from src.permissions import EnvCapabilityEvaluator, PermissionGate
from src.records import SORTABLE_FIELDS, GmailAuthenticator, GmailRecordSource, sort_summaries

logger = logging.getLogger(__name__)

DEFAULT_RECIPIENT_ENV = "FORWARD_DEFAULT_RECIPIENT"


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="Download or forward stored emails")
    parser.add_argument(
        "--log-level",
        choices=["DEBUG", "INFO", "WARNING", "ERROR"],
        default=None,
        help="Set logging level (overrides LOG_LEVEL env var)",
    )
    subparsers = parser.add_subparsers(dest="command", required=True)

    list_parser = subparsers.add_parser("list", help="List emails available for selection")
    list_parser.add_argument("--query", default="", help="Gmail search query")
    list_parser.add_argument("--max-results", type=int, default=50)
    list_parser.add_argument("--sort-by", choices=SORTABLE_FIELDS, default="formatted_date")
    list_parser.add_argument("--direction", choices=["asc", "desc"], default="desc")

    download_parser = subparsers.add_parser("download", help="Save emails as .eml files")
    download_parser.add_argument("ids", nargs="+", help="Email ids to download")
    download_parser.add_argument(
        "--output-dir", type=Path, default=Path("."), help="Directory for .eml files"
    )

    forward_parser = subparsers.add_parser("forward", help="Forward emails as attachments")
    forward_parser.add_argument("ids", nargs="+", help="Email ids to forward")
    forward_parser.add_argument(
        "--to",
        default=None,
        help=f"Recipient address (defaults to {DEFAULT_RECIPIENT_ENV} env var)",
    )
    return parser


def main() -> int:
    load_dotenv()
    args = build_parser().parse_args()
    configure_logging(level_override=args.log_level)

    authenticator = GmailAuthenticator()
    source = GmailRecordSource(authenticator=authenticator)

    if args.command == "list":
        rows = sort_summaries(
            source.list_records(query=args.query, max_results=args.max_results),
            field=args.sort_by,
            direction=args.direction,
        )
        for row in rows:
            print(
                f"{row.id}  {row.formatted_date:16}  {row.direction.value:8}  "
                f"{row.from_address:30.30}  {row.subject}"
            )
        print(f"\n{len(rows)} email(s)")
        return 0

    actions = EmailActions(
        source=source,
        transport=GmailForwardTransport(source=source, authenticator=authenticator),
        gate=PermissionGate(EnvCapabilityEvaluator()),
    )

    if args.command == "download":
        saver = DirectorySaver(args.output_dir)
        session = ActionSession(actions, save_file=saver)
        notification = asyncio.run(session.download(args.ids))
        for path in saver.saved:
            print(f"  saved {path}")
    else:
        recipient = args.to or os.environ.get(DEFAULT_RECIPIENT_ENV, "")
        session = ActionSession(actions, save_file=lambda document: None)
        notification = asyncio.run(session.forward(args.ids, recipient))

    if notification is None:
        logger.error("Action was not started")
        return 1

    stream = sys.stdout if notification.variant == NotificationVariant.SUCCESS else sys.stderr
    print(f"{notification.title}: {notification.message}", file=stream)
    return 0 if notification.variant == NotificationVariant.SUCCESS else 1


if __name__ == "__main__":
    sys.exit(main())

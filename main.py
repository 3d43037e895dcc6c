"""Command line entry point for publishing and reading chained articles."""

import sys
import signal
import argparse
import threading
from pathlib import Path
from dotenv import load_dotenv
from pydantic import ValidationError

from chainpress.config import load_settings, create_registry
from chainpress.logging_config import configure_logging
from chainpress.chain_reader import iter_chain
from chainpress.errors import ChainpressError, RegistryWriteFailed, PublishCancelled
from chainpress.models.article import ArticleMetadata
from chainpress.models.record import RecordKind
from chainpress.publisher import ArticlePublisher, build_metadata, build_post, list_visible


def ask_confirmation(question: str, note: str) -> bool:
    """Confirmation prompt on stdin."""
    print(question)
    print(f"  {note}")
    answer = input("Continue? [y/N] ").strip().lower()
    return answer in ("y", "yes")


def print_progress(created: int, total: int) -> None:
    print(f"  Creating record {created} of {total}...")


def read_content(path: str) -> str:
    """Read article text from a file, or stdin when path is '-'."""
    if path == "-":
        return sys.stdin.read()
    with open(path, "r", encoding="utf-8") as f:
        return f.read()


def cmd_estimate(publisher: ArticlePublisher, args) -> int:
    estimate = publisher.estimate(read_content(args.file))
    print(f"Length:  {estimate.length} characters")
    print(f"Records: {estimate.records}")
    print(f"Cost:    {estimate.cost}")
    if not estimate.fits:
        print("⚠ Content is longer than the article limit and cannot be published.")
        return 1
    return 0


def cmd_publish(publisher: ArticlePublisher, args) -> int:
    content = read_content(args.file)
    metadata: ArticleMetadata = build_metadata(
        title=args.title,
        abstract=args.abstract,
        cw=args.cw,
        tags=args.tags,
        reply_to=args.reply_to,
        quote=args.quote,
        tip_account=args.tip_account,
    )
    if args.yes:
        publisher.confirm = None

    print(f"Publishing article: {metadata.title}")
    print("-" * 50)
    segments = publisher.prepare_article(content, metadata)
    # Once writing starts, Ctrl-C stops after the record currently being written.
    cancel = threading.Event()
    previous_handler = signal.signal(signal.SIGINT, lambda signum, frame: cancel.set())
    try:
        result = publisher.writer.write(segments, metadata.to_fields(), print_progress, cancel)
    finally:
        signal.signal(signal.SIGINT, previous_handler)
    print(f"\n✓ Article published!")
    print(f"  - Address: {result.root_address}")
    print(f"  - Records: {result.records}")
    print(f"  - Cost: {result.cost}")
    return 0


def cmd_post(publisher: ArticlePublisher, args) -> int:
    post = build_post(text=args.text, cw=args.cw, tags=args.tags, reply_to=args.reply_to)
    if args.yes:
        publisher.confirm = None
    address = publisher.publish_post(post)
    print(f"✓ Post published: {address}")
    return 0


def cmd_read(publisher: ArticlePublisher, args) -> int:
    opened = publisher.open_record(args.address)
    if opened is None:
        print(f"✗ No record found at {args.address}")
        return 1
    title = opened.record.metadata.get("title")
    if title:
        print(title)
        print("=" * len(title))
    print(opened.text)
    if not opened.complete:
        print("\n⚠ This article could not be read in full; the text above is truncated.")
    return 0


def cmd_inspect(publisher: ArticlePublisher, args) -> int:
    root = publisher.registry.get(args.address)
    if root is None:
        print(f"✗ No record found at {args.address}")
        return 1
    for hop, record in enumerate(iter_chain(root, publisher.registry)):
        print(f"  [{hop}] {record.kind.name:<10} {record.address}  "
              f"{len(record.text):>4} chars  next={record.next or '-'}")
    return 0


def cmd_feed(publisher: ArticlePublisher, args) -> int:
    records = list_visible(publisher.registry)
    if not records:
        print("No content found.")
        return 0
    for record in records:
        if record.kind == RecordKind.ROOT:
            label = record.metadata.get("title") or "(untitled article)"
            print(f"  - [article] {label} ({record.address})")
        else:
            preview = record.text[:60].replace("\n", " ")
            print(f"  - [post] {preview} ({record.address})")
    print(f"\n{len(records)} item(s)")
    return 0


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        description="Publish long-form content as a chain of size-bounded registry records"
    )
    subparsers = parser.add_subparsers(dest="command", required=True)

    estimate = subparsers.add_parser("estimate", help="Show the record count and cost of a text file")
    estimate.add_argument("file", help="Path to the article text ('-' for stdin)")
    estimate.set_defaults(handler=cmd_estimate)

    publish = subparsers.add_parser("publish", help="Publish a text file as an article")
    publish.add_argument("file", help="Path to the article text ('-' for stdin)")
    publish.add_argument("--title", required=True, help="Article title (max 64 characters)")
    publish.add_argument("--abstract", default="", help="Short summary (max 200 characters)")
    publish.add_argument("--cw", default="", help="Content warning")
    publish.add_argument("--tags", default="", help="Tags")
    publish.add_argument("--reply-to", default="", help="Address of the article being replied to")
    publish.add_argument("--quote", default="", help="Address of the article being cited")
    publish.add_argument("--tip-account", default="", help="Account address that receives tips")
    publish.add_argument("--yes", action="store_true", help="Skip the confirmation prompt")
    publish.set_defaults(handler=cmd_publish)

    post = subparsers.add_parser("post", help="Publish a short standalone post")
    post.add_argument("text", help="Post text (max 512 characters)")
    post.add_argument("--cw", default="", help="Content warning")
    post.add_argument("--tags", default="", help="Tags")
    post.add_argument("--reply-to", default="", help="Address of the post being replied to")
    post.add_argument("--yes", action="store_true", help="Skip the confirmation prompt")
    post.set_defaults(handler=cmd_post)

    read = subparsers.add_parser("read", help="Print the full text of a record")
    read.add_argument("address", help="Record address")
    read.set_defaults(handler=cmd_read)

    inspect = subparsers.add_parser("inspect", help="List every record of a chain")
    inspect.add_argument("address", help="Root record address")
    inspect.set_defaults(handler=cmd_inspect)

    feed = subparsers.add_parser("feed", help="List published articles and posts")
    feed.set_defaults(handler=cmd_feed)

    return parser


def main(argv=None) -> int:
    """Main function to run the command line."""
    load_dotenv()
    args = build_parser().parse_args(argv)

    try:
        settings = load_settings()
    except ValidationError as e:
        print(f"Error: invalid configuration: {e}")
        return 1
    configure_logging(settings.log_level)

    if getattr(args, "file", None) and args.file != "-" and not Path(args.file).exists():
        print(f"Error: File not found at {args.file}")
        return 1

    try:
        registry = create_registry(settings)
    except ValueError as e:
        print(f"Error: {e}")
        return 1

    with registry:
        publisher = ArticlePublisher(registry, confirm=ask_confirmation)
        try:
            return args.handler(publisher, args)
        except RegistryWriteFailed as e:
            if isinstance(e, PublishCancelled):
                print(f"\n✗ {e.message}")
            else:
                print(f"\n✗ Failed to publish: {e.committed} of {e.total} records were written before step {e.step} failed.")
            if e.orphans:
                print("  These records are unreachable and cannot be removed:")
                for address in e.orphans:
                    print(f"    - {address}")
            return 1
        except ChainpressError as e:
            print(f"\n✗ {e.message}")
            return 1


if __name__ == "__main__":
    sys.exit(main())

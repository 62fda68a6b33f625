"""Terminal front end for capturing and browsing contacts."""
from __future__ import annotations

import argparse
import logging
import sys
from typing import List, Optional, Sequence

from ..capture import CaptureSession
from ..config import ConfigError, Settings, load_settings
from ..contacts import ContactRecord, delete_contact, list_contacts, save_contacts
from ..logs import log_commit_event
from ..parsing import ParseResult, parse

QUIT_COMMANDS = {":q", ":quit", ":exit"}


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="quick-contacts",
        description="Capture contacts from comma-separated names and #tags.",
    )
    parser.add_argument(
        "--verbose",
        action="store_true",
        help="Enable debug logging.",
    )

    subparsers = parser.add_subparsers(dest="command", required=True)

    preview_parser = subparsers.add_parser(
        "preview",
        help="Show what a line of text would parse into, without saving.",
    )
    preview_parser.add_argument("text", help='e.g. "Alice #friend, Bob"')

    add_parser = subparsers.add_parser(
        "add",
        help="Parse text and save the resulting contacts.",
    )
    add_parser.add_argument("text", help='e.g. "Alice #friend, Bob"')

    list_parser = subparsers.add_parser("list", help="List saved contacts.")
    list_parser.add_argument(
        "--limit",
        type=int,
        default=50,
        help="Maximum number of contacts to show.",
    )
    list_parser.add_argument(
        "--user",
        help="Only show contacts owned by this email.",
    )

    delete_parser = subparsers.add_parser("delete", help="Delete a saved contact.")
    delete_parser.add_argument("contact_id", help="ID shown by 'list'.")

    capture_parser = subparsers.add_parser(
        "capture",
        help="Interactive loop: each line typed is committed as contacts.",
    )
    capture_parser.add_argument(
        "--seed",
        type=int,
        help="Seed the session with N placeholder contacts (overrides QC_SEED_COUNT).",
    )

    return parser


def _format_preview(result: ParseResult) -> str:
    if result.is_empty:
        return "(nothing parsed)"
    lines = []
    if result.tags:
        lines.append("Tags: " + ", ".join(f"#{t.name}" for t in result.tags))
    for draft in result.drafts:
        lines.append(f"+ {draft.name}")
    return "\n".join(lines)


def _format_contact(contact: ContactRecord) -> str:
    tags = " ".join(f"#{t}" for t in contact.tags)
    line = f"{contact.id}  {contact.name}"
    return f"{line}  {tags}" if tags else line


def _persist(records: List[ContactRecord], settings: Settings, source: str) -> None:
    save_contacts(records)
    log_commit_event(
        records,
        environment=settings.environment,
        source=source,
        user_email=settings.user_email,
    )


def _cmd_preview(text: str) -> int:
    print(_format_preview(parse(text)))
    return 0


def _cmd_add(text: str, settings: Settings) -> int:
    session = CaptureSession(
        user_email=settings.user_email,
        on_commit=lambda records: _persist(records, settings, source="add"),
    )
    session.update_text(text.rstrip("\n"))
    records = session.commit()
    if not records:
        print("No contacts found in input.")
        return 0
    for record in records:
        print(f"Saved {_format_contact(record)}")
    return 0


def _cmd_list(limit: int, user_email: Optional[str]) -> int:
    contacts = list_contacts(user_email=user_email, limit=limit)
    if not contacts:
        print("No contacts saved yet.")
        return 0
    for contact in contacts:
        print(_format_contact(contact))
    return 0


def _cmd_delete(contact_id: str) -> int:
    if delete_contact(contact_id):
        print(f"Deleted {contact_id}")
        return 0
    print(f"Contact not found: {contact_id}", file=sys.stderr)
    return 1


def _cmd_capture(settings: Settings, seed: Optional[int]) -> int:
    count = settings.seed_count if seed is None else seed
    session = CaptureSession.seeded(
        max(count, 0),
        user_email=settings.user_email,
        on_commit=lambda records: _persist(records, settings, source="capture"),
    )
    _capture_loop(session)
    return 0


def _capture_loop(session: CaptureSession) -> None:
    print("Type names separated by commas, #tags apply to all. ':q' quits.")
    while True:
        _render_session(session)
        try:
            line = input("> ")
        except EOFError:
            print()
            return
        if line.strip() in QUIT_COMMANDS:
            return
        result = session.update_text(line)
        print(_format_preview(result))
        session.update_text(line + "\n")


def _render_session(session: CaptureSession) -> None:
    if not session.committed:
        return
    print("\n=== Contacts ===")
    for name in session.all_names():
        print(f"  {name}")


def main(argv: Optional[Sequence[str]] = None) -> int:
    parser = _build_parser()
    args = parser.parse_args(argv)

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.WARNING,
        format="%(levelname)s %(name)s: %(message)s",
    )

    if args.command == "preview":
        return _cmd_preview(args.text)

    try:
        settings = load_settings()
    except ConfigError as exc:
        print(f"Configuration error: {exc}", file=sys.stderr)
        return 1

    try:
        if args.command == "add":
            return _cmd_add(args.text, settings)
        if args.command == "list":
            return _cmd_list(args.limit, args.user)
        if args.command == "delete":
            return _cmd_delete(args.contact_id)
        if args.command == "capture":
            return _cmd_capture(settings, args.seed)
    except (OSError, RuntimeError) as exc:
        print(f"Storage error: {exc}", file=sys.stderr)
        return 1

    parser.error(f"Unknown command {args.command}")
    return 2


if __name__ == "__main__":
    raise SystemExit(main())

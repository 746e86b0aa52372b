#!/usr/bin/env python3
"""
Journal CLI - write, browse, back up and analyse journal entries

Usage:
    python -m src.journal list [--search TEXT] [--tag TAG] [--mood MOOD] [--format json|text]
    python -m src.journal add --mood MOOD [--highlights ...] [--tag TAG ...] [--emoji E]
    python -m src.journal update --id ID [--mood MOOD] [--highlights ...] [--tag TAG ...] [--clear-tags]
    python -m src.journal get --id ID
    python -m src.journal delete --id ID
    python -m src.journal export [--output PATH | --backup]
    python -m src.journal import --input PATH
    python -m src.journal stats | trend [--days N] | achievements | tags
    python -m src.journal summary [--relay-url URL]
"""

from __future__ import annotations

import argparse
import json
import sys
from pathlib import Path
from typing import Any, Dict, List, Optional

from src.mindful_journal.config import Config, StorageConfig
from src.summary_relay import SUMMARY_KEYS, RelayError, SummaryRelayClient

from .analytics import Dashboard, dashboard, mood_trend
from .analytics import achievements as evaluate_achievements
from .exceptions import ImportFormatError, PersistenceError
from .models import MOOD_EMOJIS, JournalEntry, Mood, normalize_tags
from .queries import all_tags, filter_entries, sort_newest_first
from .storage import create_slot
from .store import EntryStore, backup_filename

MOOD_CHOICES = [mood.value for mood in Mood]
TREND_BAR_WIDTH = 20


def format_entry_text(entry: JournalEntry) -> str:
    """One-line text rendering of an entry"""
    emoji = entry.emoji or MOOD_EMOJIS[entry.mood]
    tags = ", ".join(entry.tags) or "-"
    headline = entry.highlights.strip() or entry.free_text.strip() or "(no text)"
    return f"[{entry.id}] {entry.date[:10]} {emoji} {entry.mood.value} | tags: {tags} | {headline}"


def format_entry_detail(entry: JournalEntry) -> str:
    lines = [
        format_entry_text(entry),
        f"  highlights: {entry.highlights}",
        f"  challenges: {entry.challenges}",
        f"  gratitude:  {entry.gratitude}",
        f"  notes:      {entry.free_text}",
    ]
    return "\n".join(lines)


def format_dashboard_text(snapshot: Dashboard) -> str:
    weekly = snapshot.weekly
    lines = [
        f"Week {weekly.week_start[:10]} .. {weekly.week_end[:10]}",
        f"Entries this week: {weekly.total_entries}",
        f"Day streak: {weekly.streak}",
        f"Achievements unlocked: {len(snapshot.achievements)}",
        f"Total entries: {snapshot.total_entries}",
        "Mood distribution:",
    ]
    for mood, count in weekly.mood_distribution.items():
        lines.append(f"  {MOOD_EMOJIS[mood]} {mood.value:<12} {count}")
    if weekly.common_tags:
        tags = ", ".join(f"{tag.tag} ({tag.count})" for tag in weekly.common_tags)
        lines.append(f"Common tags: {tags}")
    return "\n".join(lines)


def format_summary_text(summary: Dict[str, Any]) -> str:
    lines = [str(summary.get("weekly_summary", "")).strip()]
    for key in SUMMARY_KEYS[1:]:
        items = summary.get(key) or []
        if isinstance(items, str):
            items = [items]
        if items:
            lines.append("")
            lines.append(key.replace("_", " ").title())
            lines.extend(f"- {item}" for item in items)
    return "\n".join(lines)


def print_json(data: Any) -> None:
    print(json.dumps(data, ensure_ascii=False))


def cmd_list(
    store: EntryStore,
    search: Optional[str],
    tag: Optional[str],
    mood: Optional[str],
    output_format: str,
) -> int:
    """List entries, newest first"""
    entries = store.get_all()
    matched = sort_newest_first(filter_entries(entries, search=search, tag=tag, mood=mood))
    if output_format == "json":
        print_json([entry.to_dict() for entry in matched])
        return 0
    if not entries:
        print("No reflections yet. Begin your mindfulness journey today.")
    elif not matched:
        print("No reflections match these filters.")
    else:
        for entry in matched:
            print(format_entry_text(entry))
        if len(matched) != len(entries):
            print(f"Showing {len(matched)} of {len(entries)} reflections")
    return 0


def cmd_get(store: EntryStore, entry_id: str, output_format: str) -> int:
    entry = store.get(entry_id)
    if not entry:
        print(f"Error: entry {entry_id} not found.", file=sys.stderr)
        return 1
    if output_format == "json":
        print_json(entry.to_dict())
    else:
        print(format_entry_detail(entry))
    return 0


def cmd_add(store: EntryStore, args: argparse.Namespace) -> int:
    """Create a new entry"""
    try:
        entry = JournalEntry.new(
            mood=args.mood,
            highlights=args.highlights or "",
            challenges=args.challenges or "",
            gratitude=args.gratitude or "",
            free_text=args.free_text or "",
            tags=args.tag or [],
            emoji=args.emoji,
            date=args.date,
        )
    except ValueError as exc:
        print(f"Error: invalid entry: {exc}", file=sys.stderr)
        return 1

    saved = store.save(entry)
    if args.format == "json":
        print_json(saved.to_dict())
    else:
        print(f"Saved: {format_entry_text(saved)}")
    return 0


def cmd_update(store: EntryStore, args: argparse.Namespace) -> int:
    """Update fields of an existing entry"""
    existing = store.get(args.id)
    if not existing:
        print(f"Error: entry {args.id} not found.", file=sys.stderr)
        return 1

    changes: Dict[str, Any] = {}
    for field_name in ("mood", "highlights", "challenges", "gratitude", "free_text", "emoji", "date"):
        value = getattr(args, field_name)
        if value is not None:
            changes[field_name] = value
    if args.clear_tags:
        changes["tags"] = []
    elif args.tag:
        changes["tags"] = normalize_tags(args.tag)

    try:
        revised = existing.revised(**changes)
    except ValueError as exc:
        print(f"Error: invalid entry: {exc}", file=sys.stderr)
        return 1

    saved = store.save(revised)
    if args.format == "json":
        print_json(saved.to_dict())
    else:
        print(f"Updated: {format_entry_text(saved)}")
    return 0


def cmd_delete(store: EntryStore, entry_id: str, output_format: str) -> int:
    deleted = store.delete(entry_id)
    if output_format == "json":
        print_json({"deleted": deleted, "id": entry_id})
    elif deleted:
        print(f"Deleted: {entry_id}")
    else:
        print(f"Nothing to delete: {entry_id} does not exist.")
    return 0


def cmd_export(store: EntryStore, output: Optional[str], backup: bool) -> int:
    data = store.export_all()
    if backup:
        output = backup_filename()
    if output:
        Path(output).write_text(data, encoding="utf-8")
        print(f"Exported {len(store.get_all())} entries to {output}")
    else:
        print(data)
    return 0


def cmd_import(store: EntryStore, input_path: str) -> int:
    try:
        text = Path(input_path).read_text(encoding="utf-8")
    except OSError as exc:
        print(f"Error: cannot read {input_path}: {exc}", file=sys.stderr)
        return 1
    count = store.import_all(text)
    print(f"Journal data imported successfully: {count} entries.")
    return 0


def cmd_stats(store: EntryStore, output_format: str) -> int:
    snapshot = dashboard(store.get_all())
    if output_format == "json":
        print_json(snapshot.to_dict())
    else:
        print(format_dashboard_text(snapshot))
    return 0


def cmd_trend(store: EntryStore, days: int, output_format: str) -> int:
    trend = mood_trend(store.get_all(), days)
    if output_format == "json":
        print_json([point.to_dict() for point in trend])
        return 0
    for point in trend:
        if point.has_data:
            bar = "#" * round(point.mood_score / 5 * TREND_BAR_WIDTH)
            print(f"{point.date} {bar:<{TREND_BAR_WIDTH}} {point.mood_score:.1f}")
        else:
            print(f"{point.date} {'.' * TREND_BAR_WIDTH} no entries")
    return 0


def cmd_achievements(store: EntryStore, output_format: str) -> int:
    unlocked = evaluate_achievements(store.get_all())
    if output_format == "json":
        print_json([achievement.to_dict() for achievement in unlocked])
    elif not unlocked:
        print("No achievements unlocked yet.")
    else:
        for achievement in unlocked:
            print(f"{achievement.icon} {achievement.title} - {achievement.description}")
    return 0


def cmd_tags(store: EntryStore, output_format: str) -> int:
    tags = all_tags(store.get_all())
    if output_format == "json":
        print_json(tags)
    else:
        print("\n".join(tags) if tags else "No tags yet.")
    return 0


def cmd_summary(store: EntryStore, client: SummaryRelayClient, output_format: str) -> int:
    entries = store.get_all()
    if not entries:
        print("Error: write a few entries before asking for a summary.", file=sys.stderr)
        return 1
    summary = client.summarize(entries)
    if output_format == "json":
        print_json(summary)
    else:
        print(format_summary_text(summary))
    return 0


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        description="Mindful Journal CLI",
        formatter_class=argparse.RawDescriptionHelpFormatter,
    )
    parser.add_argument("--config", type=str, help="Settings file (default: config/app_config.yaml)")
    parser.add_argument("--data-path", type=str, help="Journal storage file (overrides settings)")
    parser.add_argument(
        "--backend",
        choices=["sqlite", "file"],
        help="Storage backend for --data-path (default: from settings)",
    )

    subparsers = parser.add_subparsers(dest="command", help="Command to run", required=True)

    def with_format(sub: argparse.ArgumentParser) -> argparse.ArgumentParser:
        sub.add_argument(
            "--format",
            choices=["json", "text"],
            default="text",
            help="Output format (default: text)",
        )
        return sub

    def with_entry_fields(sub: argparse.ArgumentParser, mood_required: bool) -> None:
        sub.add_argument("--mood", choices=MOOD_CHOICES, required=mood_required, help="How the day felt")
        sub.add_argument("--highlights", help="What went well")
        sub.add_argument("--challenges", help="What was hard")
        sub.add_argument("--gratitude", help="What you are grateful for")
        sub.add_argument("--free-text", dest="free_text", help="Anything else")
        sub.add_argument("--tag", action="append", help="Tag (repeatable)")
        sub.add_argument("--emoji", help="Decorative emoji")
        sub.add_argument("--date", help="ISO 8601 date the entry is about (default: now)")

    parser_list = with_format(subparsers.add_parser("list", help="List entries"))
    parser_list.add_argument("--search", help="Case-insensitive text search")
    parser_list.add_argument("--tag", help="Only entries with this tag")
    parser_list.add_argument("--mood", choices=MOOD_CHOICES, help="Only entries with this mood")

    parser_get = with_format(subparsers.add_parser("get", help="Show one entry"))
    parser_get.add_argument("--id", required=True, help="Entry id")

    parser_add = with_format(subparsers.add_parser("add", help="Write a new entry"))
    with_entry_fields(parser_add, mood_required=True)

    parser_update = with_format(subparsers.add_parser("update", help="Edit an entry"))
    parser_update.add_argument("--id", required=True, help="Entry id")
    with_entry_fields(parser_update, mood_required=False)
    parser_update.add_argument("--clear-tags", action="store_true", help="Remove all tags")

    parser_delete = with_format(subparsers.add_parser("delete", help="Delete an entry"))
    parser_delete.add_argument("--id", required=True, help="Entry id")

    parser_export = subparsers.add_parser("export", help="Export all entries as JSON")
    parser_export.add_argument("--output", help="Write to this file instead of stdout")
    parser_export.add_argument(
        "--backup", action="store_true", help="Write journal-backup-YYYY-MM-DD.json"
    )

    parser_import = subparsers.add_parser("import", help="Replace all entries from a JSON export")
    parser_import.add_argument("--input", required=True, help="Exported JSON file")

    with_format(subparsers.add_parser("stats", help="Weekly insights"))
    parser_trend = with_format(subparsers.add_parser("trend", help="Daily mood trend"))
    parser_trend.add_argument("--days", type=int, default=7, help="Number of days (default: 7)")
    with_format(subparsers.add_parser("achievements", help="Unlocked achievements"))
    with_format(subparsers.add_parser("tags", help="All tags in use"))

    parser_summary = with_format(subparsers.add_parser("summary", help="AI weekly summary"))
    parser_summary.add_argument("--relay-url", help="Relay service URL (default: from settings)")

    return parser


def build_store(config: Config, data_path: Optional[str], backend: Optional[str]) -> EntryStore:
    storage = config.storage
    if data_path:
        storage = StorageConfig(
            backend=backend or ("file" if data_path.endswith(".json") else "sqlite"),
            path=data_path,
            key=storage.key,
            max_bytes=storage.max_bytes,
        )
    return EntryStore(create_slot(storage))


def run_command(args: argparse.Namespace, store: EntryStore, config: Config) -> int:
    if args.command == "list":
        return cmd_list(store, args.search, args.tag, args.mood, args.format)
    elif args.command == "get":
        return cmd_get(store, args.id, args.format)
    elif args.command == "add":
        return cmd_add(store, args)
    elif args.command == "update":
        return cmd_update(store, args)
    elif args.command == "delete":
        return cmd_delete(store, args.id, args.format)
    elif args.command == "export":
        return cmd_export(store, args.output, args.backup)
    elif args.command == "import":
        return cmd_import(store, args.input)
    elif args.command == "stats":
        return cmd_stats(store, args.format)
    elif args.command == "trend":
        return cmd_trend(store, args.days, args.format)
    elif args.command == "achievements":
        return cmd_achievements(store, args.format)
    elif args.command == "tags":
        return cmd_tags(store, args.format)
    elif args.command == "summary":
        client = SummaryRelayClient(
            base_url=args.relay_url or config.client.relay_url,
            timeout=config.client.timeout,
        )
        return cmd_summary(store, client, args.format)
    print(f"Error: unknown command: {args.command}", file=sys.stderr)
    return 1


def main(argv: Optional[List[str]] = None) -> int:
    """CLI entry point"""
    args = build_parser().parse_args(argv)
    config = Config.from_yaml(Path(args.config) if args.config else None)

    try:
        store = build_store(config, args.data_path, args.backend)
        return run_command(args, store, config)
    except ImportFormatError as exc:
        print(f"Error: failed to import data, please check the file format: {exc}", file=sys.stderr)
        return 1
    except PersistenceError as exc:
        print(f"Error: could not save your journal: {exc}", file=sys.stderr)
        return 1
    except RelayError as exc:
        print(f"Error: AI summary unavailable: {exc}", file=sys.stderr)
        return 1


if __name__ == "__main__":
    sys.exit(main())

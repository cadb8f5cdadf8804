"""Command-line report of cache and learning statistics.

Usage:
    answer-cache-stats               # both reports
    answer-cache-stats cache --data-dir /srv/bot/data
    answer-cache-stats learning
"""

import argparse
import dataclasses
import sys
from collections.abc import Sequence
from typing import TextIO

from answer_cache.api.dependencies import build_services
from answer_cache.config import settings
from answer_cache.entities import ActivitySnapshot

RULE = "=" * 60


def _shorten(text: str, width: int = 70) -> str:
    return text if len(text) <= width else text[:width] + "..."


def format_cache_report(snapshot: ActivitySnapshot) -> list[str]:
    """Lines of the response cache report."""
    stats = snapshot.cache
    if stats.total_entries == 0:
        return ["No cached responses yet"]

    lines = [
        "RESPONSE CACHE",
        RULE,
        f"Cached responses: {stats.total_entries}",
        f"Responses used at least once: {stats.used_entries}",
        f"Total hits (reuses): {stats.total_hits}",
        f"Average hits per entry: {stats.avg_hits_per_entry:.2f}",
        "",
        "Estimated savings:",
        f"   API calls avoided: {stats.estimated_savings.api_calls}",
        f"   Dollars saved: ${stats.estimated_savings.dollars:.3f} USD",
    ]

    if stats.popular_entries:
        lines += ["", f"Top {len(stats.popular_entries)} reused responses:"]
        for idx, entry in enumerate(stats.popular_entries, start=1):
            last_used = entry.last_used_at.strftime("%Y-%m-%d %H:%M") if entry.last_used_at else "-"
            lines.append(f"{idx}. [{entry.hits} hits] {_shorten(entry.question)}")
            lines.append(f"   Last used: {last_used}")

    activity = snapshot.cache_activity
    lines += [
        "",
        "Cache activity:",
        f"   Last 24 hours: {activity.last_24h} responses",
        f"   Last 7 days: {activity.last_7d} responses",
        f"   Last 30 days: {activity.last_30d} responses",
    ]
    return lines


def format_learning_report(snapshot: ActivitySnapshot) -> list[str]:
    """Lines of the pattern learning report."""
    stats = snapshot.learning
    if stats.total_patterns == 0:
        return [
            "No patterns learned yet",
            f"Frequency threshold: {stats.threshold} repetitions",
        ]

    lines = ["LEARNED PATTERNS", RULE]
    for category, summary in stats.categories.items():
        lines += [
            category.upper(),
            f"   Patterns: {summary.total}",
            f"   Frequent ({stats.threshold}+): {summary.frequent}",
            f"   In training: {summary.in_training}",
            "   Top questions:",
        ]
        for idx, pattern in enumerate(summary.top_questions, start=1):
            badge = "[trained]" if pattern.added_to_training else "[pending]"
            lines.append(f"   {idx}. {badge} {_shorten(pattern.question)!r} ({pattern.frequency}x)")
        lines.append("")

    lines += [
        RULE,
        "Totals:",
        f"   Patterns: {stats.total_patterns}",
        f"   Frequent: {stats.total_frequent}",
        f"   In training: {stats.total_in_training}",
        f"   Learning rate: {stats.learning_rate}%",
    ]
    if stats.pending_promotion:
        lines.append(f"   Awaiting promotion: {stats.pending_promotion}")

    activity = snapshot.learning_activity
    lines += [
        "",
        "Questions asked:",
        f"   Last 24 hours: {activity.last_24h} patterns",
        f"   Last 7 days: {activity.last_7d} patterns",
        f"   Last 30 days: {activity.last_30d} patterns",
    ]
    return lines


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="answer-cache-stats",
        description="Show response cache and learned pattern statistics.",
    )
    parser.add_argument(
        "report",
        nargs="?",
        choices=("cache", "learning", "all"),
        default="all",
        help="Which report to print (default: all)",
    )
    parser.add_argument("--data-dir", help=f"Directory holding the documents (default: {settings.data_dir})")
    return parser


def main(argv: Sequence[str] | None = None, out: TextIO | None = None) -> int:
    args = build_parser().parse_args(argv)
    out = out or sys.stdout

    config = settings
    if args.data_dir:
        config = dataclasses.replace(settings, data_dir=args.data_dir)

    snapshot = build_services(config).aggregator.snapshot()

    sections = []
    if args.report in ("cache", "all"):
        sections.append(format_cache_report(snapshot))
    if args.report in ("learning", "all"):
        sections.append(format_learning_report(snapshot))

    for idx, lines in enumerate(sections):
        if idx:
            print("", file=out)
        for line in lines:
            print(line, file=out)
    return 0


if __name__ == "__main__":
    sys.exit(main())

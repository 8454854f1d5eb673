#!/usr/bin/env python3
"""
Print the leaderboard for a group state exported as JSON.

Usage:
    python scripts/leaderboard_report.py group.json [--mode season] [--season-id season_2]
"""

import json
import logging
import os
import sys
from argparse import ArgumentParser

# Add backend to path
sys.path.append(os.path.join(os.path.dirname(__file__), ".."))

from league.api.schemas import GroupStateIn
from league.services.formatting import format_currency, format_percent, format_percent_safe
from league.services.leaderboard import leaderboard_builder
from league.services.season_service import resolve_season

logging.basicConfig(
    level=logging.INFO,
    format='%(asctime)s - %(name)s - %(levelname)s - %(message)s'
)
logger = logging.getLogger(__name__)


def render_report(payload: dict, mode: str = "allTime", season_id: str | None = None) -> str:
    """Build the text report for a group state payload."""
    state = GroupStateIn.model_validate(payload).to_model()
    season = resolve_season(state, season_id)
    board = leaderboard_builder.build(state.members, state.holdings, mode, season)

    lines = [f"{state.name or state.id} - {board.mode_label}"]
    if mode == "season" and season is not None:
        lines.append(f"{season.name} (started {season.start_time:%Y-%m-%d})")
    lines.append("")

    for e in board.entries:
        lines.append(
            f"{e.rank:>2}. {e.member.name:<20} {format_currency(e.total_value):>14} "
            f"{format_currency(e.pnl):>13} {format_percent_safe(e.pnl_percent):>9}"
        )

    lines.append("")
    lines.append(f"Group value:    {format_currency(board.total_group_value)}")
    lines.append(f"Group P/L:      {format_currency(board.total_group_pnl)} ({format_percent(board.group_pl_pct)})")
    lines.append(f"Average return: {format_percent(board.average_return)}")

    if board.best_trades:
        lines.append("")
        lines.append("Best trades:")
        for t in board.best_trades:
            lines.append(f"  {t.position.holding.symbol:<8} {t.member_name:<20} {format_percent(t.pnl_percent)}")
    if board.worst_trades:
        lines.append("")
        lines.append("Worst trades:")
        for t in board.worst_trades:
            lines.append(f"  {t.position.holding.symbol:<8} {t.member_name:<20} {format_percent(t.pnl_percent)}")

    return "\n".join(lines)


def main() -> int:
    parser = ArgumentParser(description="Print a group's leaderboard")
    parser.add_argument("path", help="Group state JSON file")
    parser.add_argument("--mode", choices=["allTime", "season"], default="allTime")
    parser.add_argument("--season-id", default=None, help="Rank an ended season instead of the active one")
    args = parser.parse_args()

    try:
        with open(args.path, encoding="utf-8") as fh:
            payload = json.load(fh)
    except (OSError, json.JSONDecodeError) as e:
        logger.error(f"Could not read {args.path}: {e}")
        return 1

    print(render_report(payload, args.mode, args.season_id))
    return 0


if __name__ == "__main__":
    sys.exit(main())

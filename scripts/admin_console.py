#!/usr/bin/env python
"""Command-line admin console for a running SkillFest API."""

import asyncio
import os
from datetime import datetime
from pathlib import Path

from skillfest.client import AdminConsole, IssueCache, IssuePoller, LocalStore, SkillFestClient
from skillfest.core.config import settings

DEFAULT_STORE = Path.home() / ".skillfest" / "local-store.json"


def print_status(console: AdminConsole) -> None:
    if console.status:
        print(f"[{console.status.type}] {console.status.text}")


async def show_users(client: SkillFestClient, args) -> None:
    rows = await client.get_admin_users(args.search, args.level, args.sort_by, args.direction)
    print(f"{'Auto':>4} {'Manual':>6}  {'Login':<24} {'Points':>6}  {'Level':<12} Hidden")
    for row in rows:
        stats = row["stats"]
        manual = stats.get("manualRank") or "-"
        print(
            f"{row['autoRank']:>4} {manual:>6}  {row['login']:<24} "
            f"{stats['points']:>6}  {stats['level']:<12} {stats['hidden']}"
        )


async def show_user(
    client: SkillFestClient,
    console: AdminConsole,
    username: str,
    since: datetime | None = None,
) -> None:
    detail = await client.get_user_details(username, since)
    print(f"{detail['login']} ({len(detail['pullRequests'])} pull requests)")
    for pr in detail["pullRequests"]:
        mark = console.review_marks.get(pr["id"]) or ""
        scope = "org" if pr["isOrg"] else "personal"
        print(f"  #{pr['id']} [{pr['state']}/{scope}] {pr['title']} {mark}")


async def watch_issues(client: SkillFestClient, store: LocalStore, seconds: float) -> None:
    poller = IssuePoller(client, IssueCache(store, settings.issue_cache_ttl_seconds))
    poller.start()
    try:
        await asyncio.sleep(seconds)
    finally:
        await poller.stop()
    print(f"{len(poller.issues)} open issues")
    for issue in poller.issues:
        print(f"  {issue['repository']['name']}: {issue['title']}")


async def run(args) -> None:
    client = SkillFestClient(args.url, os.environ.get("ADMIN_PASSWORD", settings.admin_password))
    store = LocalStore(args.store)
    console = AdminConsole(client, store)

    if args.command == "users":
        await show_users(client, args)
    elif args.command == "user":
        await show_user(client, console, args.username, args.since)
    elif args.command == "rank":
        await console.update_user_rank(args.username, args.rank, args.points)
    elif args.command == "points":
        await console.load_users()
        for value in args.values:
            console.edit_points(args.username, value)
        await console.flush_pending_edits()
    elif args.command in ("hide", "show"):
        await console.toggle_user_visibility(args.username, args.command == "hide")
    elif args.command == "clear-ranks":
        await console.load_users()
        result = await console.clear_all_manual_ranks()
        if result.failed:
            print("Failed: " + ", ".join(result.failed))
    elif args.command == "assign-top":
        await console.assign_top_ranks(args.count)
    elif args.command == "recalculate":
        await console.recalculate_points()
    elif args.command == "leaderboard":
        await console.save_leaderboard_settings(args.state == "show")
    elif args.command == "mark":
        current = console.mark_pr(args.pr_id, args.status)
        print(f"PR {args.pr_id}: {current or 'unmarked'}")
    elif args.command == "issues":
        await watch_issues(client, store, args.seconds)

    print_status(console)


if __name__ == "__main__":
    import argparse

    parser = argparse.ArgumentParser(description="SkillFest admin console")
    parser.add_argument("--url", default="http://localhost:8000", help="API base URL")
    parser.add_argument("--store", default=str(DEFAULT_STORE), help="Local store file")
    sub = parser.add_subparsers(dest="command", required=True)

    users = sub.add_parser("users", help="List participants")
    users.add_argument("--search")
    users.add_argument("--level")
    users.add_argument(
        "--sort-by",
        default="points",
        choices=["points", "prs", "mergedPrs", "contributions", "date"],
    )
    users.add_argument("--direction", default="desc", choices=["asc", "desc"])

    user = sub.add_parser("user", help="Show a participant's pull requests")
    user.add_argument("username")
    user.add_argument(
        "--since",
        type=datetime.fromisoformat,
        help="Only pull requests opened on or after this date (YYYY-MM-DD)",
    )

    rank = sub.add_parser("rank", help="Set a manual rank (omit to clear)")
    rank.add_argument("username")
    rank.add_argument("rank", type=int, nargs="?")
    rank.add_argument("--points", type=int)

    points = sub.add_parser("points", help="Edit points; successive values collapse into one write")
    points.add_argument("username")
    points.add_argument("values", type=int, nargs="+")

    for name in ("hide", "show"):
        visibility = sub.add_parser(name, help=f"{name.title()} a participant")
        visibility.add_argument("username")

    sub.add_parser("clear-ranks", help="Clear every manual rank")

    assign = sub.add_parser("assign-top", help="Assign manual ranks to the top participants")
    assign.add_argument("count", type=int, nargs="?", default=10)

    sub.add_parser("recalculate", help="Recalculate all points")

    leaderboard = sub.add_parser("leaderboard", help="Show or hide the public leaderboard")
    leaderboard.add_argument("state", choices=["show", "hide"])

    mark = sub.add_parser("mark", help="Mark a pull request (repeat to unmark)")
    mark.add_argument("pr_id", type=int)
    mark.add_argument("status", choices=["reviewed", "invalid"])

    issues = sub.add_parser("issues", help="Poll open issues for a while")
    issues.add_argument("--seconds", type=float, default=60.0)

    asyncio.run(run(parser.parse_args()))

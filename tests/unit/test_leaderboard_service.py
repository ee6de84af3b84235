from datetime import datetime, timedelta, timezone

from skillfest.services.leaderboard_service import (
    SortDirection,
    SortOption,
    build_admin_table,
    build_public_leaderboard,
    filter_users,
    rank_by_points,
    sort_users,
)

NOW = datetime(2025, 3, 1, tzinfo=timezone.utc)


def make_user(
    login: str,
    points: int = 0,
    total_prs: int = 0,
    merged_prs: int = 0,
    contributions: int = 0,
    level: str = "Newcomer",
    manual_rank: int | None = None,
    hidden: bool = False,
    last_active: datetime | None = None,
) -> dict:
    return {
        "login": login,
        "avatar_url": f"https://avatars.githubusercontent.com/{login}",
        "last_active": last_active,
        "stats": {
            "total_prs": total_prs,
            "merged_prs": merged_prs,
            "contributions": contributions,
            "org_prs": 0,
            "org_merged_prs": 0,
            "points": points,
            "level": level,
            "manual_rank": manual_rank,
            "hidden": hidden,
        },
    }


def logins(users: list[dict]) -> list[str]:
    return [u["login"] for u in users]


class TestSortUsers:
    def test_points_descending_by_default(self) -> None:
        users = [make_user("a", 10), make_user("b", 30), make_user("c", 20)]
        assert logins(sort_users(users)) == ["b", "c", "a"]

    def test_ties_keep_input_order(self) -> None:
        users = [make_user("first", 50), make_user("top", 90), make_user("second", 50)]

        assert logins(sort_users(users)) == ["top", "first", "second"]
        assert logins(sort_users(users, SortOption.POINTS, SortDirection.ASC)) == [
            "first",
            "second",
            "top",
        ]

    def test_sort_by_other_keys(self) -> None:
        users = [
            make_user("a", total_prs=1, merged_prs=5, contributions=7),
            make_user("b", total_prs=3, merged_prs=2, contributions=9),
        ]
        assert logins(sort_users(users, SortOption.PRS)) == ["b", "a"]
        assert logins(sort_users(users, SortOption.MERGED_PRS)) == ["a", "b"]
        assert logins(sort_users(users, "contributions", "asc")) == ["a", "b"]

    def test_sort_by_last_active_puts_unknown_last(self) -> None:
        users = [
            make_user("never"),
            make_user("old", last_active=NOW - timedelta(days=3)),
            make_user("recent", last_active=NOW),
        ]
        assert logins(sort_users(users, SortOption.DATE)) == ["recent", "old", "never"]

    def test_does_not_mutate_input(self) -> None:
        users = [make_user("a", 1), make_user("b", 2)]
        sort_users(users)
        assert logins(users) == ["a", "b"]


class TestRanking:
    def test_auto_rank_is_position_by_points(self) -> None:
        ranked = rank_by_points([make_user("a", 5), make_user("b", 15), make_user("c", 10)])
        assert [(u["login"], u["auto_rank"]) for u in ranked] == [("b", 1), ("c", 2), ("a", 3)]

    def test_filter_by_search_and_level(self) -> None:
        users = [
            make_user("Alice", level="Expert"),
            make_user("malice", level="Beginner"),
            make_user("bob", level="Expert"),
        ]
        assert logins(filter_users(users, search="ALI")) == ["Alice", "malice"]
        assert logins(filter_users(users, level="Expert")) == ["Alice", "bob"]
        assert logins(filter_users(users, search="ali", level="Expert")) == ["Alice"]

    def test_admin_table_keeps_points_rank_under_other_sorts(self) -> None:
        users = [
            make_user("a", points=100, total_prs=1),
            make_user("b", points=50, total_prs=9, manual_rank=1),
        ]
        rows = build_admin_table(users, sort_by=SortOption.PRS)

        assert logins(rows) == ["b", "a"]
        assert rows[0]["auto_rank"] == 2
        assert rows[0]["stats"]["manual_rank"] == 1
        assert rows[1]["auto_rank"] == 1

    def test_admin_table_manual_rank_does_not_reorder(self) -> None:
        users = [make_user("a", points=10, manual_rank=1), make_user("b", points=20)]
        assert logins(build_admin_table(users)) == ["b", "a"]

    def test_admin_table_rank_ignores_filter(self) -> None:
        users = [make_user("zed", 90), make_user("amy", 10)]
        rows = build_admin_table(users, search="amy")
        assert [(r["login"], r["auto_rank"]) for r in rows] == [("amy", 2)]


class TestPublicLeaderboard:
    def test_hidden_leaderboard_is_locked(self) -> None:
        users = [make_user("a", 10), make_user("b", 20)]
        assert build_public_leaderboard(users, visible=False) == {"visible": False, "entries": []}

    def test_visible_leaderboard_orders_by_points(self) -> None:
        view = build_public_leaderboard([make_user("a", 10), make_user("b", 20)], visible=True)

        assert view["visible"] is True
        assert [(e["login"], e["rank"]) for e in view["entries"]] == [("b", 1), ("a", 2)]
        assert view["entries"][0]["html_url"] == "https://github.com/b"

    def test_hidden_users_are_left_out(self) -> None:
        users = [make_user("a", 10), make_user("b", 20, hidden=True), make_user("c", 5)]
        view = build_public_leaderboard(users, visible=True)
        assert [(e["login"], e["auto_rank"]) for e in view["entries"]] == [("a", 1), ("c", 2)]

    def test_manual_rank_is_displayed(self) -> None:
        users = [make_user("a", 10, manual_rank=1), make_user("b", 20)]
        entries = build_public_leaderboard(users, visible=True)["entries"]

        assert entries[1]["login"] == "a"
        assert entries[1]["rank"] == 1
        assert entries[1]["auto_rank"] == 2
        assert entries[1]["manual_rank"] == 1

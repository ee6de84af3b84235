import pytest

from skillfest.services.scoring_service import (
    ContributionCounts,
    calculate_points,
    get_contribution_level,
)


class TestPointsCalculation:
    """Tests for the pull request points formula."""

    def test_mixed_org_and_general_prs(self) -> None:
        counts = ContributionCounts(total_prs=10, merged_prs=6, org_prs=4, org_merged_prs=3)

        # 4*10 + 3*15 + 6*5 + 3*7 = 40 + 45 + 30 + 21
        assert calculate_points(counts) == 136

    def test_accepts_camel_case_mapping(self) -> None:
        data = {"totalPRs": 10, "mergedPRs": 6, "orgPRs": 4, "orgMergedPRs": 3}
        assert calculate_points(data) == 136

    def test_missing_fields_count_as_zero(self) -> None:
        assert calculate_points({}) == 0
        assert calculate_points({"totalPRs": 2}) == 10
        assert calculate_points({"mergedPRs": None, "orgPRs": 1}) == 10

    def test_general_counts_floor_at_zero(self) -> None:
        # More org PRs than total must not produce negative general PRs
        counts = ContributionCounts(total_prs=1, merged_prs=0, org_prs=3, org_merged_prs=2)
        assert calculate_points(counts) == 3 * 10 + 2 * 15

    def test_only_personal_prs(self) -> None:
        counts = ContributionCounts(total_prs=4, merged_prs=2)
        assert calculate_points(counts) == 4 * 5 + 2 * 7

    def test_contributions_do_not_score(self) -> None:
        counts = ContributionCounts(total_prs=1, contributions=500)
        assert calculate_points(counts) == 5


class TestContributionLevel:
    @pytest.mark.parametrize(
        ("points", "level"),
        [
            (0, "Newcomer"),
            (49, "Newcomer"),
            (50, "Beginner"),
            (149, "Beginner"),
            (150, "Intermediate"),
            (300, "Advanced"),
            (499, "Advanced"),
            (500, "Expert"),
            (5000, "Expert"),
        ],
    )
    def test_level_bands(self, points: int, level: str) -> None:
        assert get_contribution_level(points) == level

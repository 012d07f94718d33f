"""
Tests for numbered branch selection.
"""

import pytest

from gitpusher.core.publish.prompts import (
    SelectionError,
    parse_choice,
    read_keyword,
    select_branch,
    selectable_branches,
)

BRANCHES = ["main", "develop", "feature", "release"]


class TestSelectableBranches:
    """Tests for selectable_branches."""

    @pytest.mark.parametrize("excluded", BRANCHES)
    def test_excludes_exactly_one_branch_preserving_order(self, excluded):
        """The list is the input minus the excluded branch, in order."""
        expected = [b for b in BRANCHES if b != excluded]
        assert selectable_branches(BRANCHES, excluded) == expected

    def test_no_exclusion(self):
        assert selectable_branches(BRANCHES, None) == BRANCHES

    def test_unknown_exclusion(self):
        assert selectable_branches(BRANCHES, "hotfix") == BRANCHES


class TestParseChoice:
    """Tests for parse_choice."""

    @pytest.mark.parametrize("raw,expected", [("1", 0), ("3", 2), (" 2 ", 1)])
    def test_valid_numbers(self, raw, expected):
        assert parse_choice(raw, 3) == expected

    @pytest.mark.parametrize("raw", ["0", "4", "-1", "two", "", "1.5"])
    def test_invalid_answers(self, raw):
        assert parse_choice(raw, 3) is None


class TestSelectBranch:
    """Tests for select_branch."""

    def test_number_maps_to_position(self, make_prompts):
        """Answer i returns element i-1 of the filtered list."""
        prompts = make_prompts(answers=["2"])
        assert select_branch(prompts, BRANCHES, "feature", "merge") == "develop"

    def test_excluded_branch_is_never_listed(self, make_prompts):
        prompts = make_prompts(answers=["1"])
        select_branch(prompts, BRANCHES, "feature", "merge")

        listed = [m for level, m in prompts.messages if level == "info"]
        assert listed == ["1. main", "2. develop", "3. release"]

    def test_invalid_answers_reprompt(self, make_prompts):
        """Out-of-range and non-numeric answers ask again."""
        prompts = make_prompts(answers=["0", "9", "abc", "3"])
        assert select_branch(prompts, BRANCHES, "feature", "merge") == "release"
        assert len(prompts.asked) == 4
        assert len(prompts.said("error")) == 3

    def test_no_candidates_raises(self, make_prompts):
        prompts = make_prompts()
        with pytest.raises(SelectionError):
            select_branch(prompts, ["main"], "main", "merge")

    def test_heading_mentions_purpose(self, make_prompts):
        prompts = make_prompts(answers=["1"])
        select_branch(prompts, BRANCHES, "main", "sync the commit to")
        assert "Select the branch to sync the commit to:" in prompts.said("warning")


class TestReadKeyword:
    """Tests for read_keyword."""

    @pytest.mark.parametrize("raw", ["continue", "CONTINUE", "  Continue \n"])
    def test_normalizes_case_and_whitespace(self, make_prompts, raw):
        prompts = make_prompts(answers=[raw])
        assert read_keyword(prompts) == "continue"

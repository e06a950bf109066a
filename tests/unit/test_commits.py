"""Tests for conventional commit classification and bump resolution."""

from __future__ import annotations

import pytest

from devflow.core.commits import (
    Commit,
    CommitType,
    ConventionalCommit,
    Unconventional,
    bump_for_commit,
    classify,
    classify_commits,
    resolve_bump,
)
from devflow.core.version import BumpType, Version


class TestClassify:
    """Tests for classify()."""

    def test_parse_simple_feat(self):
        """Parse a simple feat commit."""
        cc = classify("feat: add new feature", sha="abc123")

        assert isinstance(cc, ConventionalCommit)
        assert cc.commit_type is CommitType.FEAT
        assert cc.scope is None
        assert cc.description == "add new feature"
        assert cc.sha == "abc123"
        assert not cc.is_breaking
        assert cc.breaking_description is None

    def test_parse_with_scope(self):
        """Parse commit with scope."""
        cc = classify("fix(api): handle null response")

        assert cc.commit_type is CommitType.FIX
        assert cc.scope == "api"
        assert cc.description == "handle null response"

    @pytest.mark.parametrize("token", [t.value for t in CommitType if t is not CommitType.UNKNOWN])
    def test_all_types_recognized(self, token: str):
        """Every type in the fixed vocabulary is recognized."""
        cc = classify(f"{token}: something")
        assert isinstance(cc, ConventionalCommit)
        assert cc.commit_type.value == token

    def test_parse_breaking_with_scope_and_exclamation(self):
        """All header fields are captured for type(scope)!: description."""
        cc = classify("refactor(core)!: change config format")

        assert cc.commit_type is CommitType.REFACTOR
        assert cc.scope == "core"
        assert cc.is_breaking
        assert cc.description == "change config format"
        assert cc.breaking_description == "change config format"

    def test_parse_breaking_footer(self):
        """A BREAKING CHANGE footer marks the commit breaking and describes it."""
        cc = classify("feat: new parser\n\nRewrote everything.\n\nBREAKING CHANGE: old API removed")

        assert cc.is_breaking
        assert cc.breaking_description == "old API removed"
        assert cc.body == ("Rewrote everything.", "BREAKING CHANGE: old API removed")

    def test_parse_breaking_hyphen_footer(self):
        """BREAKING-CHANGE is accepted as a footer token."""
        cc = classify("fix: tweak\n\nBREAKING-CHANGE: defaults changed")
        assert cc.is_breaking
        assert cc.breaking_description == "defaults changed"

    def test_first_breaking_footer_wins(self):
        """With several breaking footers the first describes the change."""
        message = "feat: x\n\nBREAKING CHANGE: first\nBREAKING CHANGE: second"
        cc = classify(message)
        assert cc.breaking_description == "first"

    def test_footer_continuation_lines(self):
        """Continuation lines of the footer are joined until the next footer."""
        message = "feat: x\n\nBREAKING CHANGE: config moved\nto devflow.toml\nRefs: #12"
        cc = classify(message)
        assert cc.breaking_description == "config moved to devflow.toml"

    def test_lowercase_footer_not_breaking(self):
        """The footer token is case-sensitive."""
        cc = classify("feat: x\n\nbreaking change: not really")
        assert not cc.is_breaking

    def test_description_trimmed(self):
        """Whitespace around the description is trimmed."""
        cc = classify("docs:   spaced out   ")
        assert cc.description == "spaced out"

    def test_empty_scope_is_no_scope(self):
        """An empty () is treated as no scope."""
        cc = classify("feat(): empty scope")
        assert isinstance(cc, ConventionalCommit)
        assert cc.scope is None

    @pytest.mark.parametrize(
        "message",
        [
            "Updated the readme file",
            "feat add thing",
            "feat:no space",
            "feature: unknown type",
            "FEAT: uppercase type",
            "feat(scope: unbalanced",
            "feat: ",
            "",
        ],
    )
    def test_malformed_is_unconventional(self, message: str):
        """Malformed headers are Unconventional and never raise."""
        cc = classify(message, sha="abc")

        assert isinstance(cc, Unconventional)
        assert cc.raw_message == message
        assert cc.commit_type is CommitType.UNKNOWN
        assert not cc.is_breaking


class TestClassifyCommits:
    """Tests for classify_commits()."""

    def test_preserves_order_and_count(self, sample_commits: list[Commit]):
        """Every commit is classified, in order, including unconventional ones."""
        classified = classify_commits(sample_commits)

        assert len(classified) == len(sample_commits)
        assert [c.sha for c in classified] == [c.sha for c in sample_commits]
        assert isinstance(classified[-1], Unconventional)


class TestResolveBump:
    """Tests for resolve_bump()."""

    def test_empty_commits_returns_none(self):
        """Empty commit list returns NONE bump."""
        assert resolve_bump([], Version(1, 0, 0)) is BumpType.NONE

    def test_feat_and_fix_is_minor(self):
        """feat + fix on 1.2.3 is MINOR and yields 1.3.0."""
        commits = [classify("feat: add X"), classify("fix: correct Y")]
        bump = resolve_bump(commits, Version(1, 2, 3))

        assert bump is BumpType.MINOR
        assert Version(1, 2, 3).bump(bump) == Version(1, 3, 0)

    def test_fix_and_perf_are_patch(self):
        """fix and perf trigger PATCH."""
        assert resolve_bump([classify("fix: a")], Version(1, 0, 0)) is BumpType.PATCH
        assert resolve_bump([classify("perf: b")], Version(1, 0, 0)) is BumpType.PATCH

    def test_breaking_is_major(self):
        """feat! on 2.0.0 is MAJOR and yields 3.0.0."""
        bump = resolve_bump([classify("feat!: remove API")], Version(2, 0, 0))

        assert bump is BumpType.MAJOR
        assert Version(2, 0, 0).bump(bump) == Version(3, 0, 0)

    def test_breaking_before_1_0_is_minor(self):
        """feat! on 0.4.0 is MINOR and yields 0.5.0."""
        bump = resolve_bump([classify("feat!: remove API")], Version(0, 4, 0))

        assert bump is BumpType.MINOR
        assert Version(0, 4, 0).bump(bump) == Version(0, 5, 0)

    def test_breaking_chore_counts(self):
        """A breaking change bumps regardless of its type."""
        assert resolve_bump([classify("chore!: drop py3.10")], Version(1, 0, 0)) is BumpType.MAJOR

    def test_other_types_are_none(self):
        """chore, docs and unconventional commits do not bump."""
        commits = [classify("chore: update deps"), classify("docs: readme"), classify("random text")]
        assert resolve_bump(commits, Version(1, 0, 0)) is BumpType.NONE

    def test_monotonic(self, sample_commits: list[Commit]):
        """Adding a commit never decreases the bump."""
        classified = classify_commits(sample_commits)
        previous = BumpType.NONE
        for end in range(len(classified) + 1):
            bump = resolve_bump(classified[:end], Version(1, 0, 0))
            assert bump >= previous
            previous = bump
        assert previous is BumpType.MAJOR

    def test_bump_for_single_commit(self, fix_commit: Commit):
        """bump_for_commit matches the rule table."""
        cc = classify(fix_commit.message)
        assert bump_for_commit(cc, Version(1, 0, 0)) is BumpType.PATCH

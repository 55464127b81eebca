"""Tests for the domain layer."""

import pytest
from datetime import datetime, timezone
from dataclasses import FrozenInstanceError

from releaselog.domain import Commit, Tag, ReleaseBucket


class TestCommit:
    """Tests for Commit domain object."""

    def test_short_id(self):
        """Test abbreviated hash."""
        commit = Commit(id="3f2a1bc9d0e8f7a6", timestamp=0)
        assert commit.short_id == "3f2a1bc"

    def test_date_is_utc(self):
        """Test commit date is timezone-aware UTC."""
        commit = Commit(id="a" * 40, timestamp=1_700_000_000)
        assert commit.date == datetime(2023, 11, 14, 22, 13, 20, tzinfo=timezone.utc)

    def test_is_merge(self):
        """Test merge detection from parent count."""
        assert not Commit(id="a", timestamp=0).is_merge
        assert not Commit(id="b", timestamp=0, parents=("a",)).is_merge
        assert Commit(id="c", timestamp=0, parents=("a", "b")).is_merge

    def test_equality_by_id(self):
        """Test commits compare and hash by id only."""
        a = Commit(id="abc", timestamp=1, subject="one")
        b = Commit(id="abc", timestamp=2, subject="two")
        assert a == b
        assert hash(a) == hash(b)
        assert len({a, b}) == 1
        assert a != Commit(id="def", timestamp=1)

    def test_frozen(self):
        """Test commits are immutable."""
        commit = Commit(id="abc", timestamp=1)
        with pytest.raises(FrozenInstanceError):
            commit.subject = "changed"

    def test_to_dict(self):
        """Test serialization to dict."""
        commit = Commit(
            id="3f2a1bc9d0e8", timestamp=0, parents=("p1",),
            author="Ada", email="ada@example.com", subject="Fix it"
        )
        d = commit.to_dict()
        assert d['id'] == "3f2a1bc9d0e8"
        assert d['short_id'] == "3f2a1bc"
        assert d['date'] == "1970-01-01T00:00:00+00:00"
        assert d['parents'] == ["p1"]
        assert d['author'] == "Ada"
        assert d['subject'] == "Fix it"

    def test_str(self):
        """Test string representation."""
        commit = Commit(id="3f2a1bc9d0e8", timestamp=0, subject="Fix it")
        assert str(commit) == "3f2a1bc Fix it"


class TestTag:
    """Tests for Tag domain object."""

    def test_defaults_to_annotated(self):
        tag = Tag(name="v1.0", commit_id="abc")
        assert tag.annotated
        assert tag.date is None

    def test_date(self):
        """Test tag date from timestamp."""
        tag = Tag(name="v1.0", commit_id="abc", timestamp=86400)
        assert tag.date == datetime(1970, 1, 2, tzinfo=timezone.utc)

    def test_to_dict(self):
        """Test serialization to dict."""
        tag = Tag(name="v1.0", commit_id="abc", tagger="Bot", email="bot@example.com",
                  timestamp=0, message="First release")
        d = tag.to_dict()
        assert d == {
            'name': "v1.0",
            'commit': "abc",
            'annotated': True,
            'tagger': "Bot",
            'email': "bot@example.com",
            'date': "1970-01-01T00:00:00+00:00",
            'message': "First release",
        }

    def test_to_dict_lightweight(self):
        d = Tag(name="nightly", commit_id="abc", annotated=False).to_dict()
        assert d['annotated'] is False
        assert d['date'] is None

    def test_str(self):
        """Test string representation is the tag name."""
        assert str(Tag(name="v2.0.0", commit_id="abc")) == "v2.0.0"


class TestReleaseBucket:
    """Tests for ReleaseBucket domain object."""

    def test_unreleased(self):
        """Test a bucket with no tags is unreleased work."""
        bucket = ReleaseBucket(anchor=Commit(id="tip", timestamp=10))
        assert bucket.is_unreleased
        assert bucket.name == "Unreleased"
        assert bucket.commits == []

    def test_name_from_first_tag(self):
        """Test the first tag names the release."""
        anchor = Commit(id="c1", timestamp=1)
        bucket = ReleaseBucket(anchor=anchor, tags=[
            Tag(name="v1.0", commit_id="c1"),
            Tag(name="stable", commit_id="c1"),
        ])
        assert not bucket.is_unreleased
        assert bucket.name == "v1.0"

    def test_empty_bucket_is_truthy(self):
        """Test an empty bucket is still a bucket."""
        assert ReleaseBucket(anchor=Commit(id="tip", timestamp=10))

    def test_to_dict(self):
        """Test serialization to dict."""
        anchor = Commit(id="c5", timestamp=5)
        bucket = ReleaseBucket(
            anchor=anchor,
            tags=[Tag(name="v1.1", commit_id="c5")],
            commits=[anchor, Commit(id="c4", timestamp=4)]
        )
        assert bucket.to_dict() == {
            'name': "v1.1",
            'anchor': "c5",
            'timestamp': 5,
            'tags': ["v1.1"],
            'commits': ["c5", "c4"],
        }

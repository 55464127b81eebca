"""Tests for ChangelogGenerator orchestration."""

from datetime import datetime, timezone
from unittest.mock import MagicMock

import pytest

from releaselog.exit_codes import RepositoryUnavailableError
from releaselog.filters import FilterChain, MergeCommitFilter
from releaselog.services import ChangelogGenerator, EPOCH, to_timestamp

from conftest import RecordingRenderer, events, make_commit, make_tag, make_walk


class FakeClient:
    """Hands out a prepared CommitWalk instead of reading git."""

    def __init__(self, walk=None, error=None):
        self._walk = walk
        self.error = error
        self.paths = []

    def walk(self, path):
        self.paths.append(path)
        if self.error:
            raise self.error
        return self._walk


@pytest.fixture
def walk():
    c1 = make_commit("c1", 1)
    c5 = make_commit("c5", 5, "c1")
    c10 = make_commit("c10", 10, "c5")
    tags = [make_tag("v1.0", c1), make_tag("v1.1", c5)]
    return make_walk([c10, c5, c1], tags)


class TestToTimestamp:

    def test_none_is_zero(self):
        assert to_timestamp(None) == 0

    def test_epoch(self):
        assert to_timestamp(EPOCH) == 0

    def test_aware_datetime(self):
        assert to_timestamp(datetime(2023, 11, 14, 22, 13, 20, tzinfo=timezone.utc)) == 1_700_000_000

    def test_number(self):
        assert to_timestamp(6) == 6
        assert to_timestamp(6.9) == 6


class TestChangelogGenerator:

    def test_generate_newest_first(self, walk):
        journal = []
        generator = ChangelogGenerator(
            "/repo",
            renderers=[RecordingRenderer('r', journal)],
            client=FakeClient(walk)
        )
        rendered = generator.generate("Changelog")

        assert rendered == 3
        assert events(journal) == [
            ('header', "Changelog"),
            ('commit', "c10"),
            ('tag', "v1.1"),
            ('commit', "c5"),
            ('tag', "v1.0"),
            ('commit', "c1"),
            ('footer', None),
            ('close', None),
        ]

    def test_cutoff(self, walk):
        journal = []
        generator = ChangelogGenerator(
            renderers=[RecordingRenderer('r', journal)],
            client=FakeClient(walk)
        )
        generator.generate("Changelog", include_commits_after=6)
        assert events(journal) == [
            ('header', "Changelog"),
            ('commit', "c10"),
            ('footer', None),
            ('close', None),
        ]

    def test_empty_repository(self):
        journal = []
        generator = ChangelogGenerator(
            renderers=[RecordingRenderer('r', journal)],
            client=FakeClient(make_walk([]))
        )
        assert generator.generate("Changelog") == 0
        assert events(journal) == [
            ('header', "Changelog"),
            ('footer', None),
            ('close', None),
        ]

    def test_walk_disposed_before_rendering(self, walk):
        seen = []

        class Probe(RecordingRenderer):
            def render_header(self, title):
                seen.append(walk.disposed)
                super().render_header(title)

        generator = ChangelogGenerator(renderers=[Probe('p', [])], client=FakeClient(walk))
        generator.generate("Changelog")
        assert seen == [True]

    def test_path_passed_to_client(self, walk):
        client = FakeClient(walk)
        ChangelogGenerator("/some/repo", client=client).load_releases()
        assert client.paths == ["/some/repo"]

    def test_load_releases(self, walk):
        buckets = ChangelogGenerator(client=FakeClient(walk)).load_releases()
        assert [b.name for b in buckets] == ["Unreleased", "v1.1", "v1.0"]
        assert walk.disposed

    def test_renderers_closed_when_loading_fails(self):
        journal = []
        generator = ChangelogGenerator(
            "/missing",
            renderers=[RecordingRenderer('a', journal), RecordingRenderer('b', journal)],
            client=FakeClient(error=RepositoryUnavailableError("/missing"))
        )
        with pytest.raises(RepositoryUnavailableError):
            generator.generate("Changelog")
        assert journal == [('a', 'close', None), ('b', 'close', None)]

    def test_filters_applied(self):
        c1 = make_commit("c1", 1)
        side = make_commit("s1", 2, "c1")
        merge = make_commit("m1", 3, "c1", "s1", subject="Merge branch 'side'")
        journal = []
        generator = ChangelogGenerator(
            renderers=[RecordingRenderer('r', journal)],
            filters=[MergeCommitFilter()],
            client=FakeClient(make_walk([merge, side, c1]))
        )
        assert generator.generate("Changelog") == 2
        assert ('commit', "m1") not in events(journal)

    def test_accepts_filter_chain(self):
        chain = FilterChain([MergeCommitFilter()])
        assert ChangelogGenerator(filters=chain).filter_chain is chain

    def test_lightweight_tags_option(self):
        c1 = make_commit("c1", 1)
        c2 = make_commit("c2", 2, "c1")
        tags = [make_tag("nightly", c1, annotated=False)]

        default = ChangelogGenerator(client=FakeClient(make_walk([c2, c1], tags)))
        assert [b.name for b in default.load_releases()] == ["Unreleased"]

        included = ChangelogGenerator(
            client=FakeClient(make_walk([c2, c1], tags)),
            include_lightweight_tags=True
        )
        assert [b.name for b in included.load_releases()] == ["Unreleased", "nightly"]

    def test_default_client(self):
        generator = ChangelogGenerator()
        assert generator.client.timeout == 30
        assert generator.path == '.'

    def test_client_is_swappable(self, walk):
        client = MagicMock()
        client.walk.return_value = walk
        ChangelogGenerator("/r", client=client).load_releases(EPOCH)
        client.walk.assert_called_once_with("/r")

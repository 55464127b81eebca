"""
Shared fixtures for releaselog tests.

Two kinds of history are used:
- In-memory graphs built from Commit objects (fast, exact timestamps)
- Real throwaway git repositories with pinned author/committer dates
"""

import os
import shutil
import subprocess
from pathlib import Path

import pytest

from releaselog.domain import Commit, Tag
from releaselog.infra import CommitWalk
from releaselog.renderers import Renderer

GIT_AVAILABLE = shutil.which('git') is not None
requires_git = pytest.mark.skipif(not GIT_AVAILABLE, reason="git is not installed")

# Realistic base time for real repositories (2023-11-14)
BASE_TIME = 1_700_000_000


def make_commit(commit_id, timestamp, *parents, subject=None, author="Test User"):
    """Build a Commit with readable defaults."""
    return Commit(
        id=commit_id,
        timestamp=timestamp,
        parents=tuple(parents),
        author=author,
        email=f"{author.split()[0].lower()}@example.com",
        subject=subject or f"Commit {commit_id}"
    )


def make_tag(name, commit, annotated=True, timestamp=None):
    """Build a Tag pointing at commit."""
    return Tag(
        name=name,
        commit_id=commit.id,
        annotated=annotated,
        tagger="Release Bot" if annotated else "",
        timestamp=timestamp if timestamp is not None else (commit.timestamp if annotated else None),
        message=f"Release {name}" if annotated else ""
    )


def make_walk(commits, tags=(), tip=None):
    """CommitWalk over commits given newest first; tip defaults to the first."""
    tip = tip if tip is not None else (commits[0] if commits else None)
    return CommitWalk(list(commits), list(tags), tip_id=tip.id if tip else None)


class GitRepoBuilder:
    """Creates commits and tags in a real repository with pinned dates."""

    def __init__(self, path: Path):
        self.path = path
        self.path.mkdir(parents=True, exist_ok=True)
        self.git('init', '-q')
        self.git('config', 'user.name', 'Test User')
        self.git('config', 'user.email', 'test@example.com')
        self.git('config', 'commit.gpgsign', 'false')
        self.git('config', 'tag.gpgsign', 'false')

    def git(self, *args, timestamp=None):
        env = os.environ.copy()
        env['GIT_CONFIG_NOSYSTEM'] = '1'
        if timestamp is not None:
            env['GIT_AUTHOR_DATE'] = f'@{timestamp} +0000'
            env['GIT_COMMITTER_DATE'] = f'@{timestamp} +0000'
        result = subprocess.run(
            ['git', *args],
            cwd=self.path,
            capture_output=True,
            text=True,
            env=env,
            check=True
        )
        return result.stdout.strip()

    def commit(self, subject, timestamp):
        self.git('commit', '-q', '--allow-empty', '-m', subject, timestamp=timestamp)
        return self.git('rev-parse', 'HEAD')

    def tag(self, name, message=None, timestamp=None, target='HEAD'):
        """Annotated tag if message is given, lightweight otherwise."""
        if message:
            self.git('tag', '-a', name, '-m', message, target, timestamp=timestamp)
        else:
            self.git('tag', name, target)

    def branch(self, name, start='HEAD'):
        self.git('checkout', '-q', '-b', name, start)

    def checkout(self, name):
        self.git('checkout', '-q', name)

    def merge(self, branch, subject, timestamp):
        self.git('merge', '-q', '--no-ff', '-m', subject, branch, timestamp=timestamp)
        return self.git('rev-parse', 'HEAD')


@pytest.fixture
def git_repo(tmp_path):
    """An empty git repository; skips the test if git is missing."""
    if not GIT_AVAILABLE:
        pytest.skip("git is not installed")
    return GitRepoBuilder(tmp_path / 'repo')


@pytest.fixture
def released_repo(git_repo):
    """
    Repository with two annotated releases and unreleased work:

        Initial commit (v1.0) <- Add feature (v1.1) <- Work in progress (HEAD)
    """
    git_repo.commit('Initial commit', BASE_TIME)
    git_repo.tag('v1.0', 'Release 1.0', BASE_TIME + 10)
    git_repo.commit('Add feature', BASE_TIME + 100)
    git_repo.tag('v1.1', 'Release 1.1', BASE_TIME + 110)
    git_repo.commit('Work in progress', BASE_TIME + 200)
    return git_repo


@pytest.fixture(autouse=True)
def isolated_config(tmp_path, monkeypatch):
    """Keep the user's real ~/.releaselog config out of every test."""
    monkeypatch.setenv('RELEASELOG_CONFIG', str(tmp_path / 'no-config.json'))
    for key in list(os.environ):
        if key.startswith('RELEASELOG_') and key != 'RELEASELOG_CONFIG':
            monkeypatch.delenv(key)


class RecordingRenderer(Renderer):
    """Appends (name, event, detail) to a shared journal."""

    def __init__(self, name, journal, fail_on=None):
        self.name = name
        self.journal = journal
        self.fail_on = fail_on

    def _record(self, event, detail=None):
        self.journal.append((self.name, event, detail))
        if event == self.fail_on:
            raise RuntimeError(f"{self.name} failed on {event}")

    def render_header(self, title):
        self._record('header', title)

    def render_tag(self, tag):
        self._record('tag', tag.name)

    def render_commit(self, commit):
        self._record('commit', commit.id)

    def render_footer(self):
        self._record('footer')

    def close(self):
        self._record('close')


def events(journal, name=None):
    """(event, detail) pairs from the journal, optionally for one renderer."""
    return [(event, detail) for who, event, detail in journal if name in (None, who)]

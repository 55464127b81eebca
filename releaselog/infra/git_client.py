"""
Git client infrastructure for releaselog.

Provides a clean abstraction over git command execution.
All git operations go through this client, making them:
- Easy to mock for testing
- Consistent in error handling
- Isolated from business logic

Read-only: releaselog never writes to the repository.
"""

import subprocess
from typing import Optional, List, Tuple
from pathlib import Path
import logging

from ..domain import Commit, Tag
from ..exit_codes import GitCommandError, RepositoryUnavailableError
from .commit_walk import CommitWalk

logger = logging.getLogger(__name__)

# Field separator for --format strings (ASCII unit separator)
FIELD_SEP = '\x1f'

LOG_FORMAT = '%H%x1f%P%x1f%ct%x1f%an%x1f%ae%x1f%s'

TAG_FORMAT = '%1f'.join([
    '%(refname:strip=2)',
    '%(objecttype)',
    '%(objectname)',
    '%(*objecttype)',
    '%(*objectname)',
    '%(taggername)',
    '%(taggeremail)',
    '%(taggerdate:unix)',
    '%(contents:subject)',
])


class GitClient:
    """
    Abstraction over git commands.

    Provides the read operations releaselog needs: locating the
    repository, resolving HEAD, listing commits and tags, and
    loading all of them into a CommitWalk.

    Example:
        client = GitClient()
        with client.walk("/path/to/repo") as walk:
            tip = walk.resolve_tip()
            for commit in walk.list_commits():
                print(commit.short_id, walk.is_ancestor(commit, tip))
    """

    def __init__(self, timeout: int = 30):
        """
        Initialize GitClient.

        Args:
            timeout: Command timeout in seconds (default: 30)
        """
        self.timeout = timeout

    def _run(
        self,
        args: List[str],
        cwd: str,
        check: bool = True
    ) -> Tuple[str, int]:
        """
        Run a git command.

        Args:
            args: Arguments passed to git
            cwd: Working directory
            check: Raise GitCommandError on non-zero exit

        Returns:
            Tuple of (stdout, returncode)
        """
        cmd = ['git', *args]
        try:
            result = subprocess.run(
                cmd,
                cwd=cwd,
                capture_output=True,
                text=True,
                encoding='utf-8',
                errors='replace',
                timeout=self.timeout
            )
        except subprocess.TimeoutExpired as e:
            logger.warning(f"Git command timed out: {' '.join(cmd)}")
            raise GitCommandError(
                f"git {args[0]} timed out after {self.timeout}s",
                command=' '.join(cmd)
            ) from e
        except OSError as e:
            raise GitCommandError(f"Could not run git: {e}", command=' '.join(cmd)) from e

        if check and result.returncode != 0:
            stderr = result.stderr.strip()
            logger.debug(f"Git command failed: {' '.join(cmd)} - {stderr}")
            raise GitCommandError(
                f"git {args[0]} failed: {stderr or 'exit code ' + str(result.returncode)}",
                command=' '.join(cmd),
                stderr=stderr
            )

        return result.stdout, result.returncode

    def find_repository(self, path: str) -> str:
        """
        Locate the repository containing path.

        Searches upward from path, the way git itself does.

        Returns:
            Absolute path of the working tree (or git dir for bare repos)

        Raises:
            RepositoryUnavailableError: If path is not inside a repository
        """
        resolved = Path(path).expanduser()
        if not resolved.is_dir():
            raise RepositoryUnavailableError(str(path))

        output, code = self._run(['rev-parse', '--show-toplevel'], cwd=str(resolved), check=False)
        if code == 0 and output.strip():
            return output.strip()

        # Bare repositories have no working tree
        output, code = self._run(['rev-parse', '--absolute-git-dir'], cwd=str(resolved), check=False)
        if code == 0 and output.strip():
            return output.strip()

        raise RepositoryUnavailableError(str(path))

    def is_git_repo(self, path: str) -> bool:
        """Check if path is inside a git repository."""
        try:
            self.find_repository(path)
        except RepositoryUnavailableError:
            return False
        return True

    def resolve_head(self, path: str) -> Optional[str]:
        """
        Resolve HEAD to a commit hash.

        Returns:
            The commit hash, or None for a repository with no commits
        """
        output, code = self._run(
            ['rev-parse', '--verify', '--quiet', 'HEAD^{commit}'],
            cwd=path,
            check=False
        )
        if code == 0 and output.strip():
            return output.strip()
        return None

    def log(self, path: str, revisions: Optional[List[str]] = None) -> List[Commit]:
        """
        List every commit reachable from the given revisions.

        Args:
            path: Path to git repository
            revisions: Revisions to walk back from (default: HEAD)

        Returns:
            List of Commit objects in git log order (newest first)
        """
        output, _ = self._run(['log', '-z', f'--format={LOG_FORMAT}', *(revisions or ['HEAD'])], cwd=path)

        commits = []
        for record in output.split('\0'):
            record = record.strip('\n')
            if not record:
                continue

            parts = record.split(FIELD_SEP, 5)
            if len(parts) < 6:
                logger.debug(f"Skipping malformed log record: {record!r}")
                continue

            commit_hash, parents, commit_time, author, email, subject = parts
            try:
                timestamp = int(commit_time)
            except ValueError:
                logger.debug(f"Skipping commit {commit_hash} with bad timestamp {commit_time!r}")
                continue

            commits.append(Commit(
                id=commit_hash,
                timestamp=timestamp,
                parents=tuple(parents.split()),
                author=author,
                email=email,
                subject=subject
            ))

        return commits

    def tags(self, path: str) -> List[Tag]:
        """
        List tag refs, peeled to the commits they mark.

        Annotated tags carry tagger metadata. Lightweight tags are
        reported with annotated=False. Tags that do not resolve to
        a commit (trees, blobs) are skipped. Tags of tags are followed
        to the commit at the end of the chain.

        Returns:
            List of Tag objects sorted by ref name
        """
        output, _ = self._run(
            ['for-each-ref', '--sort=refname', f'--format={TAG_FORMAT}', 'refs/tags'],
            cwd=path
        )

        tags = []
        for line in output.splitlines():
            if not line or FIELD_SEP not in line:
                continue

            parts = line.split(FIELD_SEP, 8)
            if len(parts) < 9:
                logger.debug(f"Skipping malformed tag record: {line!r}")
                continue

            (name, object_type, object_name, peeled_type, peeled_name,
             tagger, email, tag_date, subject) = parts

            if object_type == 'commit':
                tags.append(Tag(name=name, commit_id=object_name, annotated=False))
                continue

            commit_id = None
            if object_type == 'tag':
                # Older git peels a tag of a tag one level only
                commit_id = peeled_name if peeled_type == 'commit' else self.peel_tag(path, name)

            if commit_id is None:
                logger.debug(f"Tag {name} does not point at a commit. Skipping")
            else:
                tags.append(Tag(
                    name=name,
                    commit_id=commit_id,
                    annotated=True,
                    tagger=tagger,
                    email=email.strip('<>'),
                    timestamp=int(tag_date) if tag_date.isdigit() else None,
                    message=subject
                ))

        return tags

    def peel_tag(self, path: str, name: str) -> Optional[str]:
        """
        Resolve a tag through any chain of tag objects.

        Returns:
            The commit hash, or None if the chain ends at a tree or blob
        """
        output, code = self._run(
            ['rev-parse', '--verify', '--quiet', f'refs/tags/{name}^{{commit}}'],
            cwd=path,
            check=False
        )
        if code == 0 and output.strip():
            return output.strip()
        return None

    def walk(self, path: str) -> CommitWalk:
        """
        Load the repository history into a CommitWalk.

        Args:
            path: Any path inside the repository

        Returns:
            A CommitWalk holding every commit reachable from HEAD,
            every tag, and the tip commit (None if there are no commits)

        Raises:
            RepositoryUnavailableError: If no repository is found
            GitCommandError: If reading commits or tags fails
        """
        logger.debug(f"About to open git repository at {path}.")
        repo_path = self.find_repository(path)
        logger.debug(f"Opened {repo_path}. About to load the commits.")

        head = self.resolve_head(repo_path)
        if head is None:
            # No commits yet. The walk will be empty.
            commits = []
        else:
            commits = self.log(repo_path)
        logger.debug(f"Loaded {len(commits)} commits. About to load the tags.")

        tags = self.tags(repo_path)
        logger.debug(f"Loaded tags: {[tag.name for tag in tags]}")

        return CommitWalk(commits, tags, tip_id=head, path=repo_path)

"""
Git client infrastructure for pkgmeta.

Provides a clean abstraction over git command execution.
All git operations go through this client, making them:
- Easy to mock for testing
- Consistent in error handling
- Isolated from business logic

Every method takes the repository path explicitly; nothing depends on
the process working directory.
"""

import subprocess
from pathlib import Path
from typing import List, Optional, Sequence, Tuple, Union
import logging

logger = logging.getLogger(__name__)

PathLike = Union[str, Path]


class GitError(Exception):
    """A git command exited with a non-zero status."""

    def __init__(self, args: Sequence[str], returncode: int, stderr: str = ""):
        self.command = list(args)
        self.returncode = returncode
        self.stderr = (stderr or "").strip()
        message = f"git {' '.join(self.command)} failed ({returncode})"
        if self.stderr:
            message += f": {self.stderr}"
        super().__init__(message)


class GitClient:
    """
    Abstraction over git commands.

    Provides the narrow set of operations the registry workflow needs:
    ref resolution, ancestry, tags, diffs, blob reads, staging,
    committing, fetching and pushing.

    Example:
        client = GitClient()
        commit = client.rev_parse("/path/to/repo", "v1.2.0^{commit}")
        if commit and client.is_ancestor("/path/to/repo", commit, "HEAD"):
            print("v1.2.0 is already merged")
    """

    def __init__(self, timeout: Optional[int] = 300):
        """
        Initialize GitClient.

        Args:
            timeout: Command timeout in seconds (None for no timeout)
        """
        self.timeout = timeout

    def _run(
        self,
        args: Sequence[str],
        cwd: PathLike,
        check: bool = False,
    ) -> Tuple[str, int]:
        """
        Run a git command.

        Args:
            args: Git arguments (e.g., ['tag', '--list'])
            cwd: Repository path
            check: Raise GitError on non-zero exit

        Returns:
            Tuple of (stripped stdout, returncode)
        """
        cmd = ['git'] + list(args)
        logger.debug(f"{cwd}: {' '.join(cmd)}")
        try:
            result = subprocess.run(
                cmd,
                cwd=str(cwd),
                capture_output=True,
                text=True,
                timeout=self.timeout
            )
        except subprocess.TimeoutExpired:
            logger.warning(f"Git command timed out: {' '.join(cmd)}")
            raise GitError(args, -1, f"timed out after {self.timeout}s")

        if check and result.returncode != 0:
            raise GitError(args, result.returncode, result.stderr)

        return result.stdout.strip(), result.returncode

    # Repository state

    def is_git_repo(self, path: PathLike) -> bool:
        """Check if path is a git repository."""
        git_dir = Path(path) / ".git"
        return git_dir.exists()

    def head(self, path: PathLike) -> str:
        """Commit id of HEAD."""
        output, _ = self._run(['rev-parse', '--verify', 'HEAD^{commit}'], cwd=path, check=True)
        return output

    def rev_parse(self, path: PathLike, ref: str) -> Optional[str]:
        """
        Resolve a ref to an object id.

        Returns:
            Full object id, or None if the ref does not resolve
        """
        output, code = self._run(['rev-parse', '--verify', '--quiet', ref], cwd=path)
        if code == 0 and output:
            return output
        return None

    def is_commit(self, path: PathLike, ref: str) -> bool:
        """Check whether ref names an existing commit."""
        _, code = self._run(['cat-file', '-e', f'{ref}^{{commit}}'], cwd=path)
        return code == 0

    def current_branch(self, path: PathLike) -> Optional[str]:
        """Get current branch name."""
        output, code = self._run(['rev-parse', '--abbrev-ref', 'HEAD'], cwd=path)
        if code == 0 and output:
            return output
        return None

    def has_uncommitted_changes(self, path: PathLike, scope: Optional[str] = None) -> bool:
        """
        Check if tracked files have staged or unstaged changes.

        Args:
            path: Path to git repository
            scope: Optional pathspec limiting the check (e.g. a package directory)
        """
        args = ['status', '--porcelain', '--untracked-files=no']
        if scope:
            args += ['--', scope]
        output, code = self._run(args, cwd=path, check=True)
        return bool(output)

    def has_staged_changes(self, path: PathLike) -> bool:
        """Check if the index differs from HEAD."""
        _, code = self._run(['diff', '--cached', '--quiet'], cwd=path)
        return code != 0

    def remote_url(self, path: PathLike, remote: str = "origin") -> Optional[str]:
        """
        Get remote URL.

        Args:
            path: Path to git repository
            remote: Remote name (default: "origin")

        Returns:
            Remote URL or None if not found
        """
        output, code = self._run(['config', '--get', f'remote.{remote}.url'], cwd=path)
        if code == 0 and output:
            return output
        return None

    # Tags and ancestry

    def tag_list(self, path: PathLike) -> List[str]:
        """List tag names."""
        output, _ = self._run(['tag', '--list'], cwd=path, check=True)
        return [line.strip() for line in output.split('\n') if line.strip()]

    def tag_create(
        self,
        path: PathLike,
        name: str,
        target: str,
        message: str = "",
        force: bool = False
    ) -> None:
        """
        Create a tag.

        An annotated tag is created when a message is given, a
        lightweight one otherwise.
        """
        args = ['tag']
        if message:
            args += ['-a', '-m', message]
        if force:
            args.append('-f')
        args += [name, target]
        self._run(args, cwd=path, check=True)

    def tag_delete(self, path: PathLike, name: str) -> None:
        self._run(['tag', '-d', name], cwd=path, check=True)

    def is_ancestor(self, path: PathLike, ancestor: str, descendant: str) -> bool:
        """Check whether `ancestor` is reachable from `descendant`."""
        _, code = self._run(['merge-base', '--is-ancestor', ancestor, descendant], cwd=path)
        if code not in (0, 1):
            raise GitError(['merge-base', '--is-ancestor', ancestor, descendant], code)
        return code == 0

    # Content

    def diff_files(self, path: PathLike, a: str, b: str) -> List[str]:
        """Paths changed between two refs."""
        output, _ = self._run(['diff', '--name-only', a, b], cwd=path, check=True)
        return [line for line in output.split('\n') if line]

    def cat_file(self, path: PathLike, ref: str, relpath: str) -> Optional[str]:
        """
        Read a file's content at a ref.

        Returns:
            File content (stripped), or None if the file does not exist there
        """
        output, code = self._run(['cat-file', 'blob', f'{ref}:{relpath}'], cwd=path)
        if code != 0:
            return None
        return output

    # Index and commits

    def add(self, path: PathLike, relpaths: Sequence[str]) -> None:
        self._run(['add', '--'] + list(relpaths), cwd=path, check=True)

    def remove(self, path: PathLike, relpaths: Sequence[str]) -> None:
        """Remove files from the index and the working tree."""
        self._run(['rm', '-q', '-f', '--ignore-unmatch', '--'] + list(relpaths), cwd=path, check=True)

    def commit(self, path: PathLike, message: str) -> str:
        """Commit the index; returns the new commit id."""
        self._run(['commit', '-q', '-m', message], cwd=path, check=True)
        return self.head(path)

    def stash_create(self, path: PathLike) -> Optional[str]:
        """Snapshot index and tracked changes without touching them."""
        output, _ = self._run(['stash', 'create'], cwd=path, check=True)
        return output or None

    def stash_apply(self, path: PathLike, stash: str) -> None:
        self._run(['stash', 'apply', '--index', '-q', stash], cwd=path, check=True)

    def reset_hard(self, path: PathLike, commit: str) -> None:
        self._run(['reset', '-q', '--hard', commit], cwd=path, check=True)

    # Remotes

    def fetch(self, path: PathLike, remote: str = "origin") -> bool:
        """
        Fetch from remote.

        Returns:
            True if successful
        """
        _, code = self._run(['fetch', '-q', remote], cwd=path)
        return code == 0

    def rev_count(self, path: PathLike, a: str, b: str) -> Tuple[int, int]:
        """
        Count commits on each side of a...b.

        Returns:
            (commits only reachable from a, commits only reachable from b)
        """
        output, _ = self._run(['rev-list', '--left-right', '--count', f'{a}...{b}'], cwd=path, check=True)
        parts = output.split()
        return int(parts[0]), int(parts[1])

    def push(
        self,
        path: PathLike,
        remote: str = "origin",
        refspecs: Optional[Sequence[str]] = None,
        force: bool = False
    ) -> Tuple[bool, str]:
        """
        Push refspecs to a remote (name or URL).

        Returns:
            Tuple of (success, git output)
        """
        args = ['push', '--porcelain']
        if force:
            args.append('--force')
        args.append(remote)
        args += list(refspecs or [])

        cmd = ['git'] + args
        try:
            result = subprocess.run(
                cmd,
                cwd=str(path),
                capture_output=True,
                text=True,
                timeout=self.timeout
            )
        except subprocess.TimeoutExpired:
            logger.warning(f"Git push timed out: {' '.join(cmd)}")
            return False, f"timed out after {self.timeout}s"

        output = (result.stdout + result.stderr).strip()
        return result.returncode == 0, output

"""
Scoped registry transactions.

A transaction snapshots a working copy when it opens, lets the caller
stage file changes, and either commits them or restores the snapshot.
Use it as a context manager; leaving the block without a successful
commit() (early return or exception) discards everything staged:

    with RegistryTransaction(git, registry_path) as txn:
        path.write_text(commit + "\\n")
        txn.stage("Foo/versions/1.0.0/sha1")
        txn.commit("Tag Foo v1.0.0")
"""

import logging
from pathlib import Path
from typing import List, Optional, Set

from .git_client import GitClient, PathLike

logger = logging.getLogger(__name__)


class RegistryTransaction:
    """
    Stage-then-commit-or-discard unit of work on a git working copy.

    Attributes:
        path: Working copy the transaction operates on
        staged: Relative paths staged (added or removed) so far
        committed: Commit id once commit() created one
    """

    def __init__(self, git: GitClient, path: PathLike):
        self.git = git
        self.path = Path(path)
        self.staged: List[str] = []
        self.committed: Optional[str] = None
        self._head: Optional[str] = None
        self._snapshot: Optional[str] = None
        self._written: Set[str] = set()
        self._open = False

    def __enter__(self) -> 'RegistryTransaction':
        self.open()
        return self

    def __exit__(self, exc_type, exc, tb) -> bool:
        if self._open:
            self.discard()
        return False

    def open(self) -> None:
        """Record the state to restore on discard."""
        self._head = self.git.head(self.path)
        self._snapshot = self.git.stash_create(self.path)
        self._open = True
        logger.debug(f"Opened transaction on {self.path} at {self._head[:10]}")

    def stage(self, relpath: str) -> None:
        """Stage a file written inside the working copy."""
        self.git.add(self.path, [relpath])
        self.staged.append(relpath)
        self._written.add(relpath)

    def unstage_remove(self, relpath: str) -> None:
        """Stage the removal of a file."""
        self.git.remove(self.path, [relpath])
        self.staged.append(relpath)

    def has_changes(self) -> bool:
        return self.git.has_staged_changes(self.path)

    def commit(self, message: str) -> Optional[str]:
        """
        Commit staged changes and close the transaction.

        Returns:
            The new commit id, or None when nothing differs from HEAD
            (no empty commit is created)
        """
        if not self._open:
            raise RuntimeError("transaction is not open")
        if not self.has_changes():
            self._open = False
            return None
        self.committed = self.git.commit(self.path, message)
        self._open = False
        return self.committed

    def discard(self) -> None:
        """Restore the working copy and index to their state at open()."""
        if not self._open:
            return
        self._open = False
        logger.debug(f"Discarding transaction on {self.path}")
        self.git.reset_hard(self.path, self._head)
        for relpath in self._written:
            # written but never tracked at HEAD: reset leaves untracked files behind
            leftover = self.path / relpath
            if leftover.is_file() and self.git.cat_file(self.path, self._head, relpath) is None:
                leftover.unlink()
        if self._snapshot:
            self.git.stash_apply(self.path, self._snapshot)

# -----------------------------------------------------------------------------
# Copyright (C) 2024 Iliyas Jorio.
# This file is part of GitLanes, distributed under the GNU GPL v3.
# For full terms, see the included LICENSE file.
# -----------------------------------------------------------------------------

"""
History provider backed by pygit2. Feeds the lane engine with commit records
in an order it can digest (children before parents).
"""

from __future__ import annotations as _annotations

import itertools as _itertools
import logging as _logging
from collections.abc import Iterable as _Iterable

from pygit2 import (
    Commit,
    GitError,
    InvalidSpecError,
    Oid,
    Repository as _VanillaRepository,
    discover_repository as _discover_repository,
)

from pygit2.enums import (
    ReferenceType,
    SortMode,
)

from gitlanes import settings as _settings
from gitlanes.graph import Commit as CommitRecord

_logger = _logging.getLogger(__name__)


class Repo(_VanillaRepository):
    """
    Drop-in replacement for pygit2.Repository with convenience functions
    to produce commit records for the lane engine.
    """

    def map_refs_to_ids(self) -> dict[str, Oid]:
        """
        Return commit oids at the tip of all branches, tags, etc. in the repository.

        To ensure a consistent outcome across multiple walks of the same commit graph,
        the oids are sorted by ascending commit time.
        """

        tips: list[tuple[str, Commit]] = []

        for refName in self.references:
            ref = self.references[refName]
            if (ref.type != ReferenceType.DIRECT  # Skip symbolic references
                    or ref.name == "refs/stash"):
                continue

            try:
                commit: Commit = ref.peel(Commit)
                tips.append((ref.name, commit))
            except InvalidSpecError as e:
                # Some refs might not be committish, e.g. tags pointing at trees
                _logger.info(f"{e} - Skipping ref '{ref.name}'")

        # Always add 'HEAD' if we have one, just before sorting, so that the
        # checked-out branch wins ties against other tips with the same timestamp.
        try:
            tips.append(("HEAD", self.head.peel(Commit)))
        except (GitError, InvalidSpecError):
            pass  # Skip unborn head

        tips.sort(key=lambda item: item[1].commit_time)
        return dict((ref, commit.id) for ref, commit in tips)

    def map_commits_to_refs(self, refsToIds: dict[str, Oid] | None = None) -> dict[str, list[str]]:
        if refsToIds is None:
            refsToIds = self.map_refs_to_ids()
        commitsToRefs: dict[str, list[str]] = {}
        for ref, commitId in refsToIds.items():
            commitsToRefs.setdefault(str(commitId), []).append(ref)
        return commitsToRefs

    def walk_commit_records(
            self,
            tips: _Iterable[Oid | str] | None = None,
            limit: int | None = None,
            chronological: bool = False,
    ) -> list[CommitRecord]:
        """
        Walk the history reachable from `tips` (default: every ref) and return
        commit records, children before parents.

        `limit` caps the number of commits (default: settings.DEFAULT_LOG_LIMIT;
        zero or negative means no cap).
        """

        if limit is None:
            limit = _settings.DEFAULT_LOG_LIMIT

        refsToIds = self.map_refs_to_ids()
        refsOfCommit = self.map_commits_to_refs(refsToIds)

        if tips is None:
            tips = refsToIds.values()
        tips = [self._resolve_tip(tip) for tip in tips]
        if not tips:
            return []

        # Strictly chronological sorting may list a commit before its children
        # (clock skew), which the lane engine can't digest. Keep TOPOLOGICAL on.
        sorting = SortMode.TOPOLOGICAL
        if chronological:
            sorting |= SortMode.TIME

        walker = self.walk(None, sorting)

        # In topological mode, the order in which the tips are pushed is
        # significant (last in, first out). The tips are in ascending
        # chronological order so that the latest modified branches come out
        # at the top of the graph.
        for tip in tips:
            walker.push(tip)

        if limit > 0:
            walker = _itertools.islice(walker, limit)

        records = []
        for commit in walker:
            hexId = str(commit.id)
            author = commit.author
            records.append(CommitRecord(
                oid=hexId,
                parents=tuple(str(p) for p in commit.parent_ids),
                author=author.name,
                email=author.email,
                timestamp=commit.commit_time,
                summary=commit.message.split("\n", 1)[0],
                message=commit.message,
                refs=tuple(refsOfCommit.get(hexId, ())),
            ))

        _logger.debug(f"Walked {len(records)} commits from {len(tips)} tips")
        return records

    def _resolve_tip(self, tip: Oid | str) -> Oid:
        if isinstance(tip, Oid):
            return tip
        # Accept hex ids as well as revspecs such as branch names
        return self.revparse_single(tip).peel(Commit).id


def open_repo(path: str) -> Repo:
    """
    Open the repository containing `path`.
    Raises GitError if there's no repository there.
    """
    gitPath = _discover_repository(path)
    if not gitPath:
        raise GitError(f"No git repository found at '{path}'")
    return Repo(gitPath)

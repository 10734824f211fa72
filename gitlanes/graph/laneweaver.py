# -----------------------------------------------------------------------------
# Copyright (C) 2024 Iliyas Jorio.
# This file is part of GitLanes, distributed under the GNU GPL v3.
# For full terms, see the included LICENSE file.
# -----------------------------------------------------------------------------

from __future__ import annotations

from collections.abc import Iterable, Sequence

from gitlanes import settings
from gitlanes.graph.graph import Commit, CommitLane, Oid, RowSnapshot, EMPTY_ROW
from gitlanes.graph.laneallocator import LaneAllocator
from gitlanes.graph.lanehints import RowHints


def computeInDegree(commits: Iterable[Commit]) -> dict[Oid, int]:
    """
    Count how many commits in the sequence name each oid as a parent.

    Every commit in the sequence gets an entry (0 if it's a tip), and so does
    every parent, even one that never shows up as a commit in the sequence.
    """

    inDegree = {}
    for commit in commits:
        inDegree.setdefault(commit.oid, 0)
        for parent in commit.parents:
            inDegree[parent] = inDegree.get(parent, 0) + 1
    return inDegree


class LaneWeaver:
    """
    Row processor. Feed it commits in graph order (children before parents)
    through newCommit; it places each commit and its parents in lanes and
    returns the layout record for the row.
    """

    allocator: LaneAllocator
    inDegree: dict[Oid, int]  # children still pending, per oid
    previousRow: RowSnapshot
    rowCount: int

    def __init__(self, inDegree: dict[Oid, int]):
        self.allocator = LaneAllocator()
        self.inDegree = dict(inDegree)
        self.previousRow = EMPTY_ROW
        self.rowCount = 0

    @property
    def peakLaneCount(self) -> int:
        return self.allocator.maxLane + 1

    def newCommit(self, me: Oid, myParents: Sequence[Oid]) -> CommitLane:
        """Place a commit and its parents, and return the layout for its row."""

        allocator = self.allocator
        inDegree = self.inDegree

        # Every decision in this row is resolved against the reservations in
        # effect at the end of the previous row, not against what we're about
        # to change below.
        snapshot = self.previousRow
        if settings.DEVDEBUG:
            assert snapshot == allocator.snapshot(), "allocator drifted from previous row"

        # Place myself. If a child of mine already reserved a lane for me, that's
        # my lane. Otherwise I'm the tip of a new branch. The very first commit
        # in the sequence is anchored to the leftmost lane.
        myLane = snapshot.laneOfOid.get(me)
        if myLane is None:
            myLane = allocator.allocate(0 if self.rowCount == 0 else None)

        # I'm drawn now: vacate my reservation before placing my parents.
        allocator.release(me)

        # Each parent wants my lane, unless a sibling of mine already opened a
        # lane for it. Work through the parents by ascending desired lane (stable,
        # so my first parent gets first dibs on my lane) to avoid crossing lines.
        placements = sorted(
            ((snapshot.laneOfOid.get(parent, myLane), i, parent) for i, parent in enumerate(myParents)),
            key=lambda placement: placement[0])

        parentLanes = [-1] * len(myParents)
        for desiredLane, i, parent in placements:
            parentLane = snapshot.laneOfOid.get(parent)
            if parentLane is None:
                parentLane = allocator.allocate(desiredLane)
            allocator.reserve(parent, parentLane)
            parentLanes[i] = parentLane

        # If none of my parents took over my lane, give it up. While a parent
        # still has other children on the way, fence my lane off so that
        # those siblings can still reach the parent without an unrelated branch
        # getting in the way.
        if myLane not in parentLanes:
            for parent in myParents:
                pending = inDegree.get(parent, 0)
                if pending > 1:
                    allocator.protect(parent, myLane)
                elif pending == 1:
                    allocator.unprotect(parent)
            allocator.free(myLane)

        for parent in myParents:
            inDegree[parent] = inDegree.get(parent, 0) - 1

        currentRow = allocator.snapshot()
        if settings.DEVDEBUG:
            allocator.checkBijection()

        hints = RowHints.compute(myLane, parentLanes, currentRow, self.previousRow)

        self.previousRow = currentRow
        self.rowCount += 1

        return CommitLane(
            lane=myLane,
            parentLanes=parentLanes,
            activeLanes=hints.activeLanes,
            branchOffLanes=hints.branchOffLanes,
            hasNoParents=not myParents,
            lanesFromAbove=hints.lanesFromAbove)

# -----------------------------------------------------------------------------
# Copyright (C) 2024 Iliyas Jorio.
# This file is part of GitLanes, distributed under the GNU GPL v3.
# For full terms, see the included LICENSE file.
# -----------------------------------------------------------------------------

from __future__ import annotations

import bisect
import collections

from gitlanes.graph.graph import Oid, RowSnapshot


class LaneAllocator:
    """
    Owns the lane reservations while the commit sequence is being processed.

    A lane is either free, or reserved by exactly one commit that is waiting
    to be drawn further down the graph. Freed lanes go into a sorted recycle
    pool. Lanes vacated by the children of a parent that still has pending
    children are "protected": they stay out of the recycle rotation until
    that parent is fully linked, so that an unrelated branch doesn't squat
    a column that a sibling branch will need at the merge point.
    """

    laneOfOid: dict[Oid, int]
    oidOfLane: dict[int, Oid]
    freeLanes: list[int]  # sorted ascending, no duplicates
    siblingLanes: collections.defaultdict[Oid, set[int]]
    maxLane: int

    def __init__(self):
        self.laneOfOid = {}
        self.oidOfLane = {}
        self.freeLanes = []
        self.siblingLanes = collections.defaultdict(set)
        self.maxLane = -1

    def __repr__(self):
        return f"LaneAllocator({self.oidOfLane}, free={self.freeLanes}, maxLane={self.maxLane})"

    # -------------------------------------------------------------------------
    # Allocation

    def allocate(self, preferred: int | None = None) -> int:
        """
        Return a lane that isn't reserved by anyone.

        The preferred lane wins if it is unreserved. Otherwise, pick the
        leftmost recycled lane that no parent is protecting. Failing that,
        open a brand-new lane on the right.
        """

        if preferred is not None and preferred not in self.oidOfLane:
            self.maxLane = max(self.maxLane, preferred)
            # It may be sitting in the recycle pool; it's spoken for now.
            self._unpool(preferred)
            return preferred

        protected = self.protectedLanes()
        for i, lane in enumerate(self.freeLanes):
            if lane not in protected:
                del self.freeLanes[i]
                return lane

        self.maxLane += 1
        return self.maxLane

    def free(self, lane: int):
        """ Put a lane back into the recycle pool (idempotent). """
        freeLanes = self.freeLanes
        i = bisect.bisect_left(freeLanes, lane)
        if i == len(freeLanes) or freeLanes[i] != lane:
            freeLanes.insert(i, lane)

    def _unpool(self, lane: int):
        freeLanes = self.freeLanes
        i = bisect.bisect_left(freeLanes, lane)
        if i < len(freeLanes) and freeLanes[i] == lane:
            del freeLanes[i]

    # -------------------------------------------------------------------------
    # Bijection

    def reserve(self, oid: Oid, lane: int):
        """
        Reserve `lane` for `oid` until `oid` gets drawn.

        Any previous reservation held by the oid, or held on the lane, is
        dropped first. Well-formed histories never need this, but it keeps
        malformed ones (duplicate commits, repeated parents) from leaving
        the mapping lopsided.
        """

        oldLane = self.laneOfOid.pop(oid, None)
        if oldLane is not None:
            del self.oidOfLane[oldLane]

        oldOid = self.oidOfLane.pop(lane, None)
        if oldOid is not None:
            del self.laneOfOid[oldOid]

        self.laneOfOid[oid] = lane
        self.oidOfLane[lane] = oid
        self.maxLane = max(self.maxLane, lane)

    def release(self, oid: Oid) -> int | None:
        """ Drop the oid's reservation. Return the lane it held, if any. """
        lane = self.laneOfOid.pop(oid, None)
        if lane is not None:
            del self.oidOfLane[lane]
        return lane

    def laneOf(self, oid: Oid) -> int | None:
        return self.laneOfOid.get(oid)

    def oidAt(self, lane: int) -> Oid | None:
        return self.oidOfLane.get(lane)

    def snapshot(self) -> RowSnapshot:
        return RowSnapshot.capture(self.laneOfOid, self.oidOfLane)

    def checkBijection(self):
        assert len(self.laneOfOid) == len(self.oidOfLane), "lane bijection out of balance"
        for oid, lane in self.laneOfOid.items():
            assert self.oidOfLane.get(lane) == oid, f"lane {lane} doesn't point back to {oid}"
        assert not set(self.freeLanes) & set(self.oidOfLane), "reserved lane found in recycle pool"
        assert self.freeLanes == sorted(set(self.freeLanes)), "recycle pool isn't sorted"

    # -------------------------------------------------------------------------
    # Sibling protection

    def protect(self, parent: Oid, lane: int):
        """ Keep `lane` out of recycling until `parent` has no pending children. """
        self.siblingLanes[parent].add(lane)

    def unprotect(self, parent: Oid):
        self.siblingLanes.pop(parent, None)

    def protectedLanes(self) -> set[int]:
        protected = set()
        for lanes in self.siblingLanes.values():
            protected.update(lanes)
        return protected

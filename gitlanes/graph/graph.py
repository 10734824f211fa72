# -----------------------------------------------------------------------------
# Copyright (C) 2024 Iliyas Jorio.
# This file is part of GitLanes, distributed under the GNU GPL v3.
# For full terms, see the included LICENSE file.
# -----------------------------------------------------------------------------

from __future__ import annotations

from collections.abc import Mapping, Sequence
from dataclasses import dataclass, field
from types import MappingProxyType

Oid = str
"Commit identifiers are handled as hex strings throughout the lane engine."


@dataclass(frozen=True)
class Commit:
    """
    A commit record, as handed over by the history provider.

    Only `oid` and `parents` take part in lane layout. The remaining fields
    are presentation data that the engine passes through untouched.
    """

    oid: Oid
    "Unique identifier of the commit"

    parents: Sequence[Oid] = ()
    "Parent identifiers. parents[0] is the mainline, the rest are merge sources"

    author: str = ""
    email: str = ""
    timestamp: int = 0
    summary: str = ""
    message: str | None = None
    refs: Sequence[str] = ()

    lane: int | None = None
    "Resolved lane, filled in by applyLaneLayout"

    def __repr__(self):
        return f"Commit({self.oid[:7]}→{','.join(p[:7] for p in self.parents)})"


@dataclass
class CommitLane:
    """ Layout record for a single row of the graph. """

    lane: int
    "Lane in which the commit itself is drawn"

    parentLanes: list[int]
    "Lanes of the commit's parents, in the same order as Commit.parents"

    activeLanes: list[int]
    "Lanes that need a line drawn through this row (sorted)"

    branchOffLanes: dict[int, int]
    "Lane -> source lane, for lines that must curve in from another lane in this row"

    hasNoParents: bool
    "True if the commit is a root (its line ends in this row)"

    lanesFromAbove: list[int] = field(default_factory=list)
    "Lanes that were active in the previous row (sorted)"


LaneLayout = dict[Oid, CommitLane]


@dataclass(frozen=True)
class RowSnapshot:
    """
    Immutable view of the oid <-> lane reservations at a row boundary.

    The snapshot taken at the end of a row is both the read-only state against
    which the next row resolves its placements and the "previous row" that the
    next row's rendering hints compare against.
    """

    laneOfOid: Mapping[Oid, int]
    oidOfLane: Mapping[int, Oid]

    @staticmethod
    def capture(laneOfOid: Mapping[Oid, int], oidOfLane: Mapping[int, Oid]) -> RowSnapshot:
        return RowSnapshot(MappingProxyType(dict(laneOfOid)), MappingProxyType(dict(oidOfLane)))

    def lanes(self) -> list[int]:
        return sorted(self.oidOfLane)

    def __len__(self):
        return len(self.oidOfLane)


EMPTY_ROW = RowSnapshot.capture({}, {})
"Row state before the first commit."


def peakLane(layout: Mapping[Oid, CommitLane]) -> int:
    """
    Return the rightmost lane occupied by any commit in the layout
    (0 for an empty layout). Renderers size the graph column with this.
    """
    return max((cl.lane for cl in layout.values()), default=0)

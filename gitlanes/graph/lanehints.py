# -----------------------------------------------------------------------------
# Copyright (C) 2024 Iliyas Jorio.
# This file is part of GitLanes, distributed under the GNU GPL v3.
# For full terms, see the included LICENSE file.
# -----------------------------------------------------------------------------

from __future__ import annotations

from collections.abc import Sequence
from dataclasses import dataclass

from gitlanes.graph.graph import RowSnapshot


@dataclass
class RowHints:
    """
    Drawing hints for a row, derived from the reservations in effect once the
    row's commit and parents have been placed, compared to the previous row.
    """

    activeLanes: list[int]
    "Lanes that need a vertical line drawn through this row"

    branchOffLanes: dict[int, int]
    "Lane -> source lane, for lines that must curve in from another column"

    lanesFromAbove: list[int]
    "Lanes that were active in the previous row"

    @staticmethod
    def compute(lane: int, parentLanes: Sequence[int], current: RowSnapshot, previous: RowSnapshot) -> RowHints:
        activeLanes = current.lanes()

        branchOffLanes = {}

        # The commit splits away from its first parent's column
        if parentLanes and lane != parentLanes[0]:
            branchOffLanes[lane] = parentLanes[0]

        # A lane changed hands since the previous row. If its new occupant was
        # sitting in another lane just above, the line has migrated.
        for laneNo in activeLanes:
            oid = current.oidOfLane[laneNo]
            if previous.oidOfLane.get(laneNo) == oid:
                continue
            prevLane = previous.laneOfOid.get(oid)
            if prevLane is not None:
                branchOffLanes[laneNo] = prevLane

        return RowHints(activeLanes=activeLanes,
                        branchOffLanes=branchOffLanes,
                        lanesFromAbove=previous.lanes())

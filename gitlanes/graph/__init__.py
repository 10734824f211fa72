# -----------------------------------------------------------------------------
# Copyright (C) 2024 Iliyas Jorio.
# This file is part of GitLanes, distributed under the GNU GPL v3.
# For full terms, see the included LICENSE file.
# -----------------------------------------------------------------------------

from gitlanes.graph.graph import (
    Commit,
    CommitLane,
    EMPTY_ROW,
    LaneLayout,
    Oid,
    RowSnapshot,
    peakLane,
)
from gitlanes.graph.laneallocator import LaneAllocator
from gitlanes.graph.lanehints import RowHints
from gitlanes.graph.laneweaver import LaneWeaver, computeInDegree
from gitlanes.graph.graphbuilder import (
    LaneBuildLoop,
    applyLaneLayout,
    computeLaneLayout,
)
from gitlanes.graph.graphdiagram import GraphDiagram, GraphDefinitionError

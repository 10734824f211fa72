# -----------------------------------------------------------------------------
# Copyright (C) 2024 Iliyas Jorio.
# This file is part of GitLanes, distributed under the GNU GPL v3.
# For full terms, see the included LICENSE file.
# -----------------------------------------------------------------------------

import dataclasses
import logging
from collections.abc import Mapping, Sequence

from gitlanes.graph.graph import Commit, CommitLane, LaneLayout, Oid
from gitlanes.graph.laneweaver import LaneWeaver, computeInDegree
from gitlanes.toolbox import Benchmark

logger = logging.getLogger(__name__)


class LaneBuildLoop:
    """
    Drives a LaneWeaver over a commit sequence and collects the layout records.

    The in-degree of every commit must be known before the first row is laid
    out, so the loop is built from the complete sequence (or from a
    precomputed in-degree map) even if commits are then sent in one by one.
    """

    def __init__(self, inDegree: dict[Oid, int]):
        self.weaver = LaneWeaver(inDegree)
        self.layout: LaneLayout = {}

    @staticmethod
    def forSequence(sequence: Sequence[Commit]):
        return LaneBuildLoop(computeInDegree(sequence))

    def sendAll(self, sequence):
        gen = self.coBuild()
        gen.send(None)  # prime it
        for c in sequence:
            gen.send(c)
        gen.close()
        return self

    def coBuild(self):
        weaver = self.weaver
        layout = self.layout

        while True:
            try:
                commit = yield
            except GeneratorExit:
                break

            layout[commit.oid] = weaver.newCommit(commit.oid, commit.parents)

        logger.debug(f"Laid out {weaver.rowCount} rows; peak lane count: {weaver.peakLaneCount}")


def computeLaneLayout(commits: Sequence[Commit]) -> LaneLayout:
    """
    Assign a lane to every commit in the sequence and compute per-row drawing hints.

    The sequence must list children before their parents (e.g. a topological
    walk from the branch tips). Each call is independent: no state survives
    from one call to the next.
    """

    if not commits:
        return {}

    with Benchmark("computeLaneLayout") as bench:
        bench.lap("in-degree")
        loop = LaneBuildLoop.forSequence(commits)
        bench.lap("rows")
        loop.sendAll(commits)

    return loop.layout


def applyLaneLayout(commits: Sequence[Commit], layout: Mapping[Oid, CommitLane]) -> list[Commit]:
    """
    Return copies of the commits with their `lane` field resolved from the layout.
    Commits missing from the layout land in lane 0.
    """

    def resolve(commit: Commit) -> int:
        record = layout.get(commit.oid)
        return record.lane if record is not None else 0

    return [dataclasses.replace(commit, lane=resolve(commit)) for commit in commits]

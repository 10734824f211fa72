# -----------------------------------------------------------------------------
# Copyright (C) 2024 Iliyas Jorio.
# This file is part of GitLanes, distributed under the GNU GPL v3.
# For full terms, see the included LICENSE file.
# -----------------------------------------------------------------------------

from __future__ import annotations

from collections.abc import Mapping, Sequence
from itertools import zip_longest

from gitlanes import settings
from gitlanes.graph.graph import Commit, CommitLane, Oid
from gitlanes.graph.graphbuilder import computeLaneLayout

PADDING = 2


def padx(x):
    assert x >= 0
    return x * PADDING


class GraphDefinitionError(ValueError):
    pass


class GraphDiagram:
    """
    Text rendition of a lane layout, for debugging and unit tests.

    Graphs are described with one-liners such as "a-b:c,d c-z d:z z":
    "a-b" makes b the first parent of a, and ":c,d" gives the last commit
    of a chain its parents (none = root commit).
    """

    @staticmethod
    def parse(text: str) -> list[Commit]:
        sequence, heads = GraphDiagram.parseDefinition(text)
        return sequence

    @staticmethod
    def parseDefinition(text: str) -> tuple[list[Commit], set[Oid]]:
        sequence = []
        defined = set()
        seen = set()
        heads = set()

        for token in text.split():
            chainStr, _, parentsStr = token.partition(":")

            if not chainStr or "," in chainStr:
                raise GraphDefinitionError(f"Bad commit chain in '{token}'")
            if ":" in parentsStr or "-" in parentsStr:
                raise GraphDefinitionError(f"Bad parent list in '{token}'")

            chain = chainStr.split("-")
            rootParents = parentsStr.split(",") if parentsStr else []
            if not all(chain) or not all(rootParents):
                raise GraphDefinitionError(f"Empty commit name in '{token}'")

            parents = [[c] for c in chain[1:]] + [rootParents]

            for commit, commitParents in zip(chain, parents):
                if commit in defined:
                    raise GraphDefinitionError(f"Commit appears twice in sequence: {commit}")
                defined.add(commit)
                sequence.append(Commit(commit, tuple(commitParents)))
                if commit not in seen:
                    heads.add(commit)
                seen.update(commitParents)

        return sequence, heads

    @staticmethod
    def diagram(
            commits: Sequence[Commit],
            layout: Mapping[Oid, CommitLane] | None = None,
            maxRows: int | None = None,
            verbose: bool = False
    ) -> str:
        if layout is None:
            layout = computeLaneLayout(commits)
        if maxRows is None:
            maxRows = settings.DIAGRAM_MAX_ROWS

        diagram = GraphDiagram()
        for commit in commits[:maxRows]:
            diagram.newRow(commit, layout[commit.oid], verbose)
        return diagram.bake()

    # -----------------------------------------------------------------

    def __init__(self):
        self.scanlines = []
        self.margins = []

    def reserve(self, x, y, fill=" "):
        assert len(fill) == 1
        for _ in range(len(self.scanlines), y + 1):
            self.scanlines.append([])
            self.margins.append([])
        scanline = self.scanlines[y]
        for _ in range(len(scanline), padx(x) + 1):
            scanline.append(fill)
        return scanline

    def plot(self, x, y, c):
        assert len(c) == 1
        scanline = self.reserve(x, y)
        scanline[padx(x)] = c

    def hline(self, x1, y, x2):
        left, right = min(x1, x2), max(x1, x2)
        scanline = self.reserve(right, y)
        for i in range(padx(left), padx(right) + 1):
            scanline[i] = "┼" if scanline[i] == "│" else "─"

    def addMarginText(self, y, text):
        self.reserve(0, y)
        self.margins[y].append(text)

    def bake(self):
        if self.margins:
            numMargins = max(len(rowMargins) for rowMargins in self.margins)
        else:
            numMargins = 0
        marginWidths = [0] * numMargins
        for margins in self.margins:
            for i, mText in enumerate(margins):
                marginWidths[i] = max(marginWidths[i], len(mText))

        lines = []
        for margins, scanline in zip(self.margins, self.scanlines):
            line = ""
            for mWidth, mText in zip_longest(reversed(marginWidths), reversed(margins), fillvalue=""):
                line += mText.rjust(mWidth) + " "
            line += "".join(scanline)
            lines.append(line.rstrip())
        return "\n".join(lines)

    def newRow(self, commit: Commit, cl: CommitLane, verbose: bool):
        upper = len(self.scanlines)
        homeLane = cl.lane
        fromAbove = set(cl.lanesFromAbove)
        below = set(cl.activeLanes)

        for lane in sorted(fromAbove & below):
            if lane != homeLane:
                self.plot(lane, upper, "│")

        commitGlyph = "╳┷┯┿"[bool(cl.parentLanes) << 1 | (homeLane in fromAbove)]
        self.plot(homeLane, upper, commitGlyph)

        self.addMarginText(upper, str(commit.oid))
        if verbose:
            self.addMarginText(upper, str(homeLane))
            self.addMarginText(upper, " ".join(f"{k}<{v}" for k, v in sorted(cl.branchOffLanes.items())))

        # Connector row, only if a parent sits in another lane
        otherLanes = [p for p in cl.parentLanes if p != homeLane]
        if not otherLanes:
            return

        lower = upper + 1
        for lane in cl.activeLanes:
            self.plot(lane, lower, "│")

        self.hline(min(otherLanes + [homeLane]), lower, max(otherLanes + [homeLane]))

        for lane in otherLanes:
            if lane in fromAbove:
                self.plot(lane, lower, "├┤"[lane > homeLane])  # joining a line that's already there
            else:
                self.plot(lane, lower, "╭╮"[lane > homeLane])  # opening a new line

        hasLeft = any(p < homeLane for p in otherLanes)
        hasRight = any(p > homeLane for p in otherLanes)
        if homeLane in cl.parentLanes:
            homeGlyph = "┼" if hasLeft and hasRight else "├" if hasRight else "┤"
        else:
            homeGlyph = "┴" if hasLeft and hasRight else "╰" if hasRight else "╯"
        self.plot(homeLane, lower, homeGlyph)

# -----------------------------------------------------------------------------
# Copyright (C) 2024 Iliyas Jorio.
# This file is part of GitLanes, distributed under the GNU GPL v3.
# For full terms, see the included LICENSE file.
# -----------------------------------------------------------------------------

import os
import tempfile

import pygit2

from gitlanes.graph import Commit, CommitLane, GraphDiagram, computeLaneLayout
from gitlanes.porcelain import Repo

TEST_SIGNATURE_NAME = "Test Person"
TEST_SIGNATURE_EMAIL = "toto@example.com"
TEST_SIGNATURE_TIME = 1672600000


def layoutOf(definition: str):
    sequence = GraphDiagram.parse(definition)
    return sequence, computeLaneLayout(sequence)


def lanesOf(definition: str) -> dict[str, int]:
    sequence, layout = layoutOf(definition)
    return {c.oid: layout[c.oid].lane for c in sequence}


def printDiagram(sequence: list[Commit], layout: dict[str, CommitLane]):
    print("\n" + GraphDiagram.diagram(sequence, layout, verbose=True))


def makeRepoFromDefinition(tempDir: tempfile.TemporaryDirectory | str, definition: str) -> tuple[Repo, dict[str, pygit2.Oid]]:
    """
    Create a repository whose history matches a graph definition one-liner.
    Every commit gets an empty tree and a message equal to its name in the
    definition. Each head of the definition gets a branch named after it.
    """

    tempDirPath = tempDir if type(tempDir) is str else tempDir.name
    path = os.path.join(tempDirPath, "TestRepo")
    pygit2.init_repository(path)
    repo = Repo(path)

    sequence, heads = GraphDiagram.parseDefinition(definition)
    emptyTree = repo.TreeBuilder().write()
    ids: dict[str, pygit2.Oid] = {}

    # Parents come after their children in the definition: create them first,
    # and make them older than their children.
    for i, commit in enumerate(reversed(sequence)):
        sig = pygit2.Signature(TEST_SIGNATURE_NAME, TEST_SIGNATURE_EMAIL, TEST_SIGNATURE_TIME + 60 * i, 0)
        parentIds = [ids[p] for p in commit.parents]
        message = f"{commit.oid}\n\nCommit {commit.oid} of the test graph.\n"
        ids[commit.oid] = repo.create_commit(None, sig, sig, message, emptyTree, parentIds)

    for head in sorted(heads):
        repo.create_branch(head, repo[ids[head]])

    if sequence:
        repo.set_head(f"refs/heads/{sequence[0].oid}")

    return repo, ids

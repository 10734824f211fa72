# -----------------------------------------------------------------------------
# Copyright (C) 2024 Iliyas Jorio.
# This file is part of GitLanes, distributed under the GNU GPL v3.
# For full terms, see the included LICENSE file.
# -----------------------------------------------------------------------------

import logging
import sys
from argparse import ArgumentParser

from gitlanes import settings
from gitlanes.toolbox import BENCHMARK_LOGGING_LEVEL

logger = logging.getLogger(__name__)


def makeParser():
    parser = ArgumentParser(prog="gitlanes", description="GitLanes ASCII graph tool")
    parser.add_argument("definition", nargs="*",
                        help="Graph definition (e.g.: \"u:z i:b m:a,b a:z b-c-z\")")
    parser.add_argument("-r", "--repo", metavar="PATH",
                        help="Lay out the history of a git repository instead of a graph definition")
    parser.add_argument("-t", "--tips", nargs="*", default=None,
                        help="Start walking the repository from these revisions (default: all refs)")
    parser.add_argument("-n", "--limit", type=int, default=settings.DEFAULT_LOG_LIMIT,
                        help="Maximum number of commits to read from the repository (0: no limit)")
    parser.add_argument("--chronological", action="store_true",
                        help="Sort the repository's commits by date (topology is still honored)")
    parser.add_argument("-m", "--max-rows", type=int, default=settings.DIAGRAM_MAX_ROWS,
                        help="Maximum number of commit rows to draw")
    parser.add_argument("-v", "--verbose", action="store_true",
                        help="Show lane numbers and branch-off hints; log debug messages")
    parser.add_argument("--debug", action="store_true",
                        help="Enable expensive consistency checks")
    parser.add_argument("--benchmark", action="store_true",
                        help="Log timing information")
    return parser


def loadCommits(args, parser):
    from gitlanes.graph import GraphDiagram, GraphDefinitionError

    if args.repo:
        from gitlanes.porcelain import GitError, InvalidSpecError, open_repo
        try:
            repo = open_repo(args.repo)
            return repo.walk_commit_records(args.tips, limit=args.limit, chronological=args.chronological)
        except (GitError, InvalidSpecError, KeyError) as e:
            logger.error(f"Can't read history: {e}")
            return None

    try:
        return GraphDiagram.parse(" ".join(args.definition))
    except GraphDefinitionError as e:
        parser.error(str(e))


def main(argv=None):
    parser = makeParser()
    args = parser.parse_args(argv)

    if bool(args.repo) == bool(args.definition):
        parser.error("pass either a graph definition or --repo")

    level = logging.WARNING
    if args.verbose:
        level = logging.DEBUG
    if args.benchmark:
        level = BENCHMARK_LOGGING_LEVEL  # below DEBUG

    logging.basicConfig(
        stream=sys.stderr,
        level=level,
        format='%(levelname).1s %(asctime)s %(filename)-16s | %(message)s',
        datefmt="%H:%M:%S")

    if args.debug:
        settings.DEVDEBUG = True

    commits = loadCommits(args, parser)
    if commits is None:
        return 1

    from gitlanes.graph import GraphDiagram, computeLaneLayout
    layout = computeLaneLayout(commits)
    print(GraphDiagram.diagram(commits, layout, maxRows=args.max_rows, verbose=args.verbose))
    return 0


if __name__ == "__main__":
    sys.exit(main())

# -----------------------------------------------------------------------------
# Copyright (C) 2024 Iliyas Jorio.
# This file is part of GitLanes, distributed under the GNU GPL v3.
# For full terms, see the included LICENSE file.
# -----------------------------------------------------------------------------

import logging
import os
import threading
import time

logger = logging.getLogger(__name__)
BENCHMARK_LOGGING_LEVEL = 5

logging.addLevelName(BENCHMARK_LOGGING_LEVEL, "BENCHMARK")

try:
    import psutil
except ModuleNotFoundError:
    logger.info("psutil isn't available. Memory usage won't be reported in benchmarks.")
    psutil = None

_perThread = threading.local()


def getRSS():
    if psutil:
        return psutil.Process(os.getpid()).memory_info().rss
    else:
        return 0


def nestingStack() -> list[str]:
    """ Names of the benchmarks currently open on the calling thread. """
    try:
        return _perThread.nesting
    except AttributeError:
        _perThread.nesting = []
        return _perThread.nesting


class Benchmark:
    """
    Context manager that logs how long a piece of code takes to run, and how
    much the process grew meanwhile.

    Call `lap("name")` inside the block to split the work into phases: each
    phase gets its own log line, followed by a line for the whole block.
    Nested benchmarks on the same thread are labeled "outer/inner".
    """

    def __init__(self, name: str):
        self.name = name
        self.label = name
        self.phase = ""
        self.startTime = 0.0
        self.startBytes = 0
        self.phaseTime = 0.0
        self.phaseBytes = 0

    def __enter__(self):
        stack = nestingStack()
        stack.append(self.name)
        self.label = "/".join(stack)
        self.startBytes = self.phaseBytes = getRSS()
        self.startTime = self.phaseTime = time.perf_counter()
        return self

    def __exit__(self, exc_type=None, exc_value=None, traceback=None):
        if self.phase:
            self._report(f"{self.label} ({self.phase})", self.phaseTime, self.phaseBytes)
        self._report(self.label, self.startTime, self.startBytes)
        nestingStack().pop()

    def lap(self, phase: str):
        """ Close the current phase (if any) and start timing a new one. """
        if self.phase:
            self._report(f"{self.label} ({self.phase})", self.phaseTime, self.phaseBytes)
        self.phase = phase
        self.phaseBytes = getRSS()
        self.phaseTime = time.perf_counter()

    @staticmethod
    def _report(description: str, sinceTime: float, sinceBytes: int):
        ms = 1000 * (time.perf_counter() - sinceTime)
        kb = (getRSS() - sinceBytes) // 1024
        logger.log(BENCHMARK_LOGGING_LEVEL, f"{ms:8.2f} ms {kb:6,d}K {description}")

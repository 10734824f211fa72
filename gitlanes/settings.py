# -----------------------------------------------------------------------------
# Copyright (C) 2024 Iliyas Jorio.
# This file is part of GitLanes, distributed under the GNU GPL v3.
# For full terms, see the included LICENSE file.
# -----------------------------------------------------------------------------

import sys

TEST_MODE = "pytest" in sys.modules
"""
Unit testing mode.
"""

DEVDEBUG = TEST_MODE
"""
Enable expensive assertions and debugging features.
Can be forced with command-line switch "--debug".
"""

DEFAULT_LOG_LIMIT = 500
"""
Maximum number of commits read from a repository when the caller doesn't
specify a limit.
"""

DIAGRAM_MAX_ROWS = 80
"Default number of commit rows drawn by the ASCII diagram tool."

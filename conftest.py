# SPDX-License-Identifier: MIT
# Copyright (c) 2025 log-relay contributors

"""Root conftest.py to ensure the log_relay package is importable from tests."""

import sys
from pathlib import Path

# Add repo root to sys.path so log_relay can be imported without installation
_repo_root = Path(__file__).parent
if str(_repo_root) not in sys.path:
    sys.path.insert(0, str(_repo_root))

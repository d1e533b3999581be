# SPDX-FileCopyrightText: 2025 Knitli Inc.
# SPDX-FileContributor: Adam Poulemanos <adam@knit.li>
#
# SPDX-License-Identifier: MIT OR Apache-2.0
"""Locate the directories that back the project and system settings scopes."""

from __future__ import annotations

import contextlib
import os
import platform
import shutil
import subprocess

from pathlib import Path


def get_user_config_dir(*, base_only: bool = False) -> Path:
    """Get the user configuration directory based on the operating system."""
    if (system := platform.system()) == "Windows":
        config_dir = Path(os.getenv("APPDATA", Path("~\\AppData\\Roaming").expanduser()))
    elif system == "Darwin":
        config_dir = Path.home() / "Library" / "Application Support"
    else:
        config_dir = Path(os.getenv("XDG_CONFIG_HOME", Path.home() / ".config"))
    return config_dir if base_only else config_dir / "toolmeter"


def try_git_rev_parse(cwd: Path | None = None) -> Path | None:
    """Attempt to use git to get the root directory of the current git repository."""
    git = shutil.which("git")
    if not git:
        return None
    with contextlib.suppress(subprocess.CalledProcessError, OSError):
        output = subprocess.run(
            [git, "rev-parse", "--show-toplevel"],
            capture_output=True,
            text=True,
            check=False,
            cwd=cwd,
        )
        if output.returncode == 0 and output.stdout.strip():
            return Path(output.stdout.strip())
    return None


def get_project_root(start: Path | None = None) -> Path:
    """Root of the current project: the enclosing git work tree, else the start directory."""
    start = (start or Path.cwd()).resolve()
    return try_git_rev_parse(start) or start


__all__ = ("get_project_root", "get_user_config_dir", "try_git_rev_parse")

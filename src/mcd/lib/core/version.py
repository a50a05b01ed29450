# SPDX-FileCopyrightText: 2025-2026 Jiri Vyskocil <jiri@vyskocil.com>
#
# SPDX-License-Identifier: Apache-2.0

"""Version and branch information for mcd.

Single source of the string printed by ``mcd --version``.
"""

import json
import subprocess
from importlib import metadata
from pathlib import Path
from typing import Any

DIST_NAME = "mcd"


def get_version_info() -> tuple[str, str | None]:
    """Get version and branch information.

    The branch is only reported when it is meaningful to the user:

      1. INSTALLED FROM A VCS URL (``pip install git+https://...``):
         -> Report the requested revision (or commit) from PEP 610 metadata.

      2. SOURCE CHECKOUT (``poetry run mcd`` inside a git working tree):
         -> Report the current branch, unless HEAD sits on a ``vX.Y.Z`` tag.

      3. RELEASE INSTALL (PyPI, local path, tarball):
         -> Version only.

    Returns:
        tuple: (version_string, branch_name) where branch_name is None for releases
               or when branch info is not available
    """
    # version.py -> core -> lib -> mcd -> src -> repo; only meaningful in a checkout
    repo_root = Path(__file__).parents[4]

    try:
        from mcd import __version__

        version = __version__
    except (ImportError, AttributeError):
        version = "unknown"

    pep610_revision = _get_pep610_revision()
    if pep610_revision:
        return version, pep610_revision

    if (repo_root / "pyproject.toml").exists():
        return version, _get_checkout_branch(repo_root)

    return version, None


def _git(repo_root: Path, *args: str) -> subprocess.CompletedProcess[str]:
    return subprocess.run(
        ["git", *args],
        capture_output=True,
        text=True,
        timeout=1,
        cwd=str(repo_root),
    )


def _get_checkout_branch(repo_root: Path) -> str | None:
    """Return the branch of a source checkout, or None on a release tag."""
    try:
        result = _git(repo_root, "rev-parse", "--is-inside-work-tree")
        if result.returncode != 0 or result.stdout.strip() != "true":
            return None
        branch_result = _git(repo_root, "branch", "--show-current")
        if branch_result.returncode != 0:
            return None
        branch = branch_result.stdout.strip()
        if not branch:
            return None
        tag_result = _git(repo_root, "describe", "--exact-match", "--tags", "HEAD")
    except (OSError, subprocess.SubprocessError):
        # git missing or hung
        return None

    tag = tag_result.stdout.strip()
    is_release = tag_result.returncode == 0 and len(tag) > 1 and tag[0] == "v" and tag[1].isdigit()
    return None if is_release else branch


def _get_pep610_revision(dist_name: str = DIST_NAME) -> str | None:
    """Return VCS revision from PEP 610 metadata, if available."""
    try:
        dist = metadata.distribution(dist_name)
        direct_url = dist.read_text("direct_url.json")
    except (metadata.PackageNotFoundError, OSError, UnicodeDecodeError):
        return None

    if not direct_url:
        return None

    try:
        data = json.loads(direct_url)
    except json.JSONDecodeError:
        return None

    vcs_info = data.get("vcs_info") if isinstance(data, dict) else None
    if not isinstance(vcs_info, dict):
        return None

    def validate_and_strip(value: Any) -> str | None:
        if isinstance(value, str):
            stripped = value.strip()
            if stripped:
                return stripped
        return None

    if result := validate_and_strip(vcs_info.get("requested_revision")):
        return result

    return validate_and_strip(vcs_info.get("commit_id"))


def format_version_string(version: str, branch: str | None) -> str:
    """Format version and branch into a display string.

    Args:
        version: The version string (e.g., "0.1.0")
        branch: The branch name or None

    Returns:
        Formatted string like "0.1.0" or "0.1.0 [feature-branch]"
    """
    if branch:
        return f"{version} [{branch}]"
    return version

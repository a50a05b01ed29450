# SPDX-FileCopyrightText: 2025-2026 Jiri Vyskocil <jiri@vyskocil.com>
#
# SPDX-License-Identifier: Apache-2.0

import json
import subprocess
import unittest
import unittest.mock
from importlib import metadata
from pathlib import Path

from mcd.lib.core import version as ver


def _dist_with(direct_url: str | None) -> unittest.mock.Mock:
    dist = unittest.mock.Mock()
    dist.read_text.return_value = direct_url
    return dist


def _completed(stdout: str, returncode: int = 0) -> subprocess.CompletedProcess:
    return subprocess.CompletedProcess(args=["git"], returncode=returncode, stdout=stdout, stderr="")


class FormatVersionTests(unittest.TestCase):
    def test_without_branch(self) -> None:
        self.assertEqual(ver.format_version_string("0.1.0", None), "0.1.0")

    def test_with_branch(self) -> None:
        self.assertEqual(ver.format_version_string("0.1.0", "feature"), "0.1.0 [feature]")


class Pep610Tests(unittest.TestCase):
    def _revision(self, direct_url: str | None) -> str | None:
        with unittest.mock.patch.object(
            ver.metadata, "distribution", return_value=_dist_with(direct_url)
        ):
            return ver._get_pep610_revision()

    def test_requested_revision_preferred(self) -> None:
        data = {"vcs_info": {"requested_revision": "main", "commit_id": "abc123"}}
        self.assertEqual(self._revision(json.dumps(data)), "main")

    def test_commit_id_fallback(self) -> None:
        data = {"vcs_info": {"requested_revision": "  ", "commit_id": "abc123"}}
        self.assertEqual(self._revision(json.dumps(data)), "abc123")

    def test_non_vcs_install(self) -> None:
        self.assertIsNone(self._revision(json.dumps({"url": "file:///src"})))
        self.assertIsNone(self._revision(None))
        self.assertIsNone(self._revision("{not json"))

    def test_not_installed(self) -> None:
        with unittest.mock.patch.object(
            ver.metadata, "distribution", side_effect=metadata.PackageNotFoundError("mcd")
        ):
            self.assertIsNone(ver._get_pep610_revision())


class CheckoutBranchTests(unittest.TestCase):
    def test_branch_reported_off_tag(self) -> None:
        results = [_completed("true\n"), _completed("feature-x\n"), _completed("", 128)]
        with unittest.mock.patch.object(ver.subprocess, "run", side_effect=results):
            self.assertEqual(ver._get_checkout_branch(Path("/repo")), "feature-x")

    def test_release_tag_suppresses_branch(self) -> None:
        results = [_completed("true\n"), _completed("main\n"), _completed("v1.2.0\n")]
        with unittest.mock.patch.object(ver.subprocess, "run", side_effect=results):
            self.assertIsNone(ver._get_checkout_branch(Path("/repo")))

    def test_non_release_tag_keeps_branch(self) -> None:
        results = [_completed("true\n"), _completed("main\n"), _completed("nightly\n")]
        with unittest.mock.patch.object(ver.subprocess, "run", side_effect=results):
            self.assertEqual(ver._get_checkout_branch(Path("/repo")), "main")

    def test_git_missing(self) -> None:
        with unittest.mock.patch.object(ver.subprocess, "run", side_effect=FileNotFoundError):
            self.assertIsNone(ver._get_checkout_branch(Path("/repo")))

    def test_not_a_work_tree(self) -> None:
        with unittest.mock.patch.object(
            ver.subprocess, "run", return_value=_completed("", 128)
        ):
            self.assertIsNone(ver._get_checkout_branch(Path("/repo")))


class GetVersionInfoTests(unittest.TestCase):
    def test_pep610_revision_wins(self) -> None:
        with (
            unittest.mock.patch.object(ver, "_get_pep610_revision", return_value="v-branch"),
            unittest.mock.patch.object(ver, "_get_checkout_branch") as mock_checkout,
        ):
            version, branch = ver.get_version_info()
        self.assertEqual(branch, "v-branch")
        self.assertIsInstance(version, str)
        mock_checkout.assert_not_called()

    def test_version_matches_package(self) -> None:
        from mcd import __version__

        with (
            unittest.mock.patch.object(ver, "_get_pep610_revision", return_value=None),
            unittest.mock.patch.object(ver, "_get_checkout_branch", return_value=None),
        ):
            version, branch = ver.get_version_info()
        self.assertEqual(version, __version__)
        self.assertIsNone(branch)

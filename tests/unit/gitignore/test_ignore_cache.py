"""Tests for git ignore matcher loading and caching."""

from __future__ import annotations

import shutil
import subprocess
import tempfile
import unittest
from pathlib import Path
from unittest import mock

from itree.gitignore import (
    IgnoreFile,
    _ls_files_ignore_args,
    clear_ignore_cache,
    get_ignore_matcher,
    load_ignore_file,
    parse_ignore_lines,
)


class IgnoreMatcherCacheTests(unittest.TestCase):
    def setUp(self) -> None:
        clear_ignore_cache()

    def tearDown(self) -> None:
        clear_ignore_cache()

    def test_get_ignore_matcher_reuses_cached_result_within_ttl(self) -> None:
        with tempfile.TemporaryDirectory() as tmp:
            root = Path(tmp).resolve()
            sentinel = mock.sentinel.matcher
            with mock.patch("itree.gitignore._load_matcher", return_value=sentinel) as load_matcher:
                first = get_ignore_matcher(root)
                second = get_ignore_matcher(root)

            self.assertIs(first, sentinel)
            self.assertIs(second, sentinel)
            self.assertEqual(load_matcher.call_count, 1)

    def test_exclude_mode_is_part_of_the_cache_key(self) -> None:
        with tempfile.TemporaryDirectory() as tmp:
            root = Path(tmp).resolve()
            with mock.patch(
                "itree.gitignore._load_matcher",
                side_effect=[mock.sentinel.with_exclude, mock.sentinel.without_exclude],
            ) as load_matcher:
                first = get_ignore_matcher(root, include_git_exclude=True)
                second = get_ignore_matcher(root, include_git_exclude=False)

            self.assertIs(first, mock.sentinel.with_exclude)
            self.assertIs(second, mock.sentinel.without_exclude)
            self.assertEqual(
                load_matcher.call_args_list,
                [mock.call(root, True), mock.call(root, False)],
            )

    def test_get_ignore_matcher_reloads_after_root_mtime_change(self) -> None:
        with tempfile.TemporaryDirectory() as tmp:
            root = Path(tmp).resolve()
            with mock.patch(
                "itree.gitignore._load_matcher",
                side_effect=[mock.sentinel.first, mock.sentinel.second],
            ) as load_matcher:
                first = get_ignore_matcher(root)
                (root / "new.txt").write_text("x\n", encoding="utf-8")
                second = get_ignore_matcher(root)

            self.assertIs(first, mock.sentinel.first)
            self.assertIs(second, mock.sentinel.second)
            self.assertEqual(load_matcher.call_count, 2)

    def test_get_ignore_matcher_reloads_after_ttl_expiry(self) -> None:
        with tempfile.TemporaryDirectory() as tmp:
            root = Path(tmp).resolve()
            with mock.patch(
                "itree.gitignore._load_matcher",
                side_effect=[mock.sentinel.first, mock.sentinel.second],
            ) as load_matcher, mock.patch(
                "itree.gitignore.time.monotonic",
                side_effect=[100.0, 103.0],
            ):
                first = get_ignore_matcher(root)
                second = get_ignore_matcher(root)

            self.assertIs(first, mock.sentinel.first)
            self.assertIs(second, mock.sentinel.second)
            self.assertEqual(load_matcher.call_count, 2)

    def test_ls_files_arguments_select_exclude_sources(self) -> None:
        self.assertEqual(_ls_files_ignore_args(True), ["--exclude-standard"])
        self.assertEqual(_ls_files_ignore_args(False), ["--exclude-per-directory=.gitignore"])


class IgnoreFileParsingTests(unittest.TestCase):
    def test_parse_skips_comments_and_reads_flags(self) -> None:
        patterns = parse_ignore_lines("# note\n\n*.log\n!keep.log\nbuild/\n/top\n\\!bang\n")

        self.assertEqual(
            [(p.pattern, p.negate, p.dir_only, p.anchored) for p in patterns],
            [
                ("*.log", False, False, False),
                ("keep.log", True, False, False),
                ("build", False, True, False),
                ("top", False, False, True),
                ("!bang", False, False, False),
            ],
        )

    def test_last_matching_pattern_wins(self) -> None:
        base = Path("/project")
        ignore_file = IgnoreFile(base, tuple(parse_ignore_lines("*.log\n!keep.log\n")))

        self.assertTrue(ignore_file.verdict(base / "a.log", False))
        self.assertFalse(ignore_file.verdict(base / "keep.log", False))
        self.assertIsNone(ignore_file.verdict(base / "a.txt", False))
        self.assertIsNone(ignore_file.verdict(Path("/elsewhere/a.log"), False))

    def test_load_missing_or_empty_file(self) -> None:
        with tempfile.TemporaryDirectory() as tmp:
            root = Path(tmp)
            self.assertIsNone(load_ignore_file(root, ".ignore"))
            (root / ".ignore").write_text("# only a comment\n", encoding="utf-8")
            self.assertIsNone(load_ignore_file(root, ".ignore"))
            (root / ".ignore").write_text("dist\n", encoding="utf-8")
            loaded = load_ignore_file(root, ".ignore")

        self.assertIsNotNone(loaded)
        self.assertEqual(loaded.base, root)
        self.assertEqual([p.pattern for p in loaded.patterns], ["dist"])


@unittest.skipIf(shutil.which("git") is None, "git is not installed")
class GitIgnoreIntegrationTests(unittest.TestCase):
    def setUp(self) -> None:
        clear_ignore_cache()
        self._tmp = tempfile.TemporaryDirectory()
        self.root = Path(self._tmp.name).resolve()
        subprocess.run(
            ["git", "init", "-q", str(self.root)],
            check=True,
            stdout=subprocess.DEVNULL,
            stderr=subprocess.DEVNULL,
        )
        (self.root / ".gitignore").write_text("build/\n*.log\n", encoding="utf-8")
        (self.root / ".git" / "info").mkdir(parents=True, exist_ok=True)
        (self.root / ".git" / "info" / "exclude").write_text("secret.txt\n", encoding="utf-8")
        (self.root / "build").mkdir()
        (self.root / "build" / "out.o").write_text("x\n", encoding="utf-8")
        for name in ("app.log", "main.c", "secret.txt"):
            (self.root / name).write_text("x\n", encoding="utf-8")

    def tearDown(self) -> None:
        clear_ignore_cache()
        self._tmp.cleanup()

    def test_gitignore_and_info_exclude_rules(self) -> None:
        matcher = get_ignore_matcher(self.root)

        self.assertIsNotNone(matcher)
        self.assertTrue(matcher.is_ignored(self.root / "build"))
        self.assertTrue(matcher.is_ignored(self.root / "build" / "out.o"))
        self.assertTrue(matcher.is_ignored(self.root / "app.log"))
        self.assertTrue(matcher.is_ignored(self.root / "secret.txt"))
        self.assertFalse(matcher.is_ignored(self.root / "main.c"))

    def test_info_exclude_is_skipped_without_git_exclude(self) -> None:
        matcher = get_ignore_matcher(self.root, include_git_exclude=False)

        self.assertIsNotNone(matcher)
        self.assertTrue(matcher.is_ignored(self.root / "app.log"))
        self.assertFalse(matcher.is_ignored(self.root / "secret.txt"))


if __name__ == "__main__":
    unittest.main()

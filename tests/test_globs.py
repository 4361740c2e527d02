"""Tests for agent_rules.globs — minimatch-style pattern matching."""

from __future__ import annotations

import pytest

from agent_rules.globs import glob_match


class TestGlobMatch:
    @pytest.mark.parametrize(
        ("pattern", "path", "expected"),
        [
            ("*.ts", "index.ts", True),
            ("*.ts", "src/index.ts", False),
            ("*.ts", "index.tsx", False),
            ("package.json", "package.json", True),
            ("package.json", "package-json", False),
            ("src/*.py", "src/app.py", True),
            ("src/*.py", "src/pkg/app.py", False),
            ("**/*.ts", "index.ts", True),
            ("**/*.ts", "src/deep/nested/index.ts", True),
            ("**/components/**/*.tsx", "src/components/Button.tsx", True),
            ("**/components/**/*.tsx", "components/forms/Input.tsx", True),
            ("**/components/**/*.tsx", "src/pages/Home.tsx", False),
            ("src/**", "src/a/b/c.txt", True),
            ("src/**", "lib/a.txt", False),
            ("file?.md", "file1.md", True),
            ("file?.md", "file10.md", False),
            ("[abc].txt", "b.txt", True),
            ("[!abc].txt", "b.txt", False),
            ("[!abc].txt", "d.txt", True),
            ("*.{ts,tsx}", "app.tsx", True),
            ("*.{ts,tsx}", "app.js", False),
            ("{src,lib}/**/*.py", "lib/x/y.py", True),
        ],
    )
    def test_patterns(self, pattern: str, path: str, expected: bool) -> None:
        assert glob_match(pattern, path) is expected

    def test_star_does_not_cross_directories(self) -> None:
        assert not glob_match("src*", "src/app.py")

    def test_regex_characters_are_literal(self) -> None:
        assert glob_match("a+b(c).txt", "a+b(c).txt")
        assert not glob_match("a.b", "axb")

    def test_unclosed_bracket_is_literal(self) -> None:
        assert glob_match("[abc", "[abc")

    def test_unbalanced_brace_is_literal(self) -> None:
        assert glob_match("{a,b", "{a,b")

    def test_invalid_range_is_literal(self) -> None:
        assert glob_match("[z-a].ts", "[z-a].ts")
        assert not glob_match("[z-a].ts", "b.ts")

    @pytest.mark.parametrize(
        ("pattern", "path"),
        [
            ("**/*.ts", "../other/a.ts"),
            ("**/*.ts", "src/../a.ts"),
            ("src/**", "src/../secret.txt"),
            ("**", ".."),
        ],
    )
    def test_double_star_skips_dot_segments(self, pattern: str, path: str) -> None:
        assert not glob_match(pattern, path)

    def test_double_star_allows_hidden_directories(self) -> None:
        assert glob_match("**/*.yml", ".github/workflows/ci.yml")

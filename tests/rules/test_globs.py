# tests/rules/test_globs.py
"""
Path/glob matching used by rule exceptions and whitelists
"""

import pytest

from constraint_monitor.core.rules import globs


class TestDoubleStar:
    @pytest.mark.parametrize("path", [
        "foo.test.js",
        "src/foo.test.js",
        "src/a/b/c/foo.test.js",
    ])
    def test_matches_any_number_of_segments_including_zero(self, path):
        assert globs.matches(path, "**/*.test.js")

    def test_trailing_double_star_matches_everything_below(self):
        assert globs.matches("db/migrations/0001_init.py", "**/migrations/**")
        assert globs.matches("migrations/0001_init.py", "**/migrations/**")
        assert not globs.matches("db/migration_notes.py", "**/migrations/**")

    def test_dotfile_under_double_star(self):
        assert globs.matches(".env.example", "**/.env.example")
        assert globs.matches("config/.env.example", "**/.env.example")


class TestSingleStarAndQuestionMark:
    def test_star_does_not_cross_separators(self):
        assert globs.matches("a.js", "*.js")
        assert not globs.matches("src/a.js", "*.js")

    def test_question_mark_is_one_non_separator_character(self):
        assert globs.matches("src/a.js", "src/?.js")
        assert not globs.matches("src/ab.js", "src/?.js")
        assert not globs.matches("src/a/b.js", "src/???.js")


class TestAnchoringAndNormalisation:
    def test_whole_path_must_match(self):
        assert not globs.matches("foo.test.js.bak", "**/*.test.js")
        assert not globs.matches("xsrc/a.js", "src/*.js")

    def test_backslash_separators_are_normalised(self):
        assert globs.matches("src\\components\\foo.test.js", "**/*.test.js")
        assert globs.matches("src/components/foo.test.js", "src\\**\\*.test.js")

    def test_leading_dot_slash_is_dropped(self):
        assert globs.matches("./src/a.js", "src/*.js")
        assert globs.matches("src/a.js", "./src/*.js")

    def test_regex_metacharacters_are_literal(self):
        assert globs.matches("a+b.js", "a+b.js")
        assert not globs.matches("aab.js", "a+b.js")


class TestHelpers:
    def test_first_match_returns_matching_glob(self):
        assert globs.first_match("src/x.example", ["**/*.md", "**/*.example"]) == "**/*.example"

    def test_no_path_never_matches(self):
        assert globs.first_match(None, ["**"]) is None
        assert not globs.matches_any("", ["**"])

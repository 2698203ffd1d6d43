from pathlib import Path

import pytest

from byteweaver.matching import is_selected, matches, matches_any, relative_to_cwd

CWD = Path("/proj")


@pytest.mark.unit
def test_suffix_pattern_matches_end_of_base_name() -> None:
    path = Path("/proj/src/app.min.js")

    assert matches(path, "*.js", cwd=CWD)
    assert matches(path, "*.min.js", cwd=CWD)
    assert not matches(Path("/proj/src/app.js"), "*.min.js", cwd=CWD)


@pytest.mark.unit
def test_suffix_pattern_is_case_sensitive() -> None:
    assert not matches(Path("/proj/README.MD"), "*.md", cwd=CWD)
    assert matches(Path("/proj/README.MD"), "*.MD", cwd=CWD)


@pytest.mark.unit
def test_suffix_pattern_ignores_directories_in_path() -> None:
    assert not matches(Path("/proj/x.js/readme"), "*.js", cwd=CWD)


@pytest.mark.unit
def test_substring_pattern_matches_base_name() -> None:
    path = Path("/proj/src/config.local.json")

    assert matches(path, "config.local.json", cwd=CWD)
    assert matches(path, ".local", cwd=CWD)


@pytest.mark.unit
def test_substring_pattern_matches_directory_in_path() -> None:
    path = Path("/proj/node_modules/lib/index.js")

    assert matches(path, "node_modules", cwd=CWD)
    assert matches(path, "node_modules/lib", cwd=CWD)
    assert not matches(path, "vendor", cwd=CWD)


@pytest.mark.unit
def test_substring_pattern_uses_path_relative_to_cwd() -> None:
    path = Path("src/app.py")

    assert relative_to_cwd(path, Path.cwd()) == "src/app.py"
    assert matches(Path("/proj/src/app.py"), "src/app", cwd=CWD)


@pytest.mark.unit
def test_matches_any_empty_lists() -> None:
    path = Path("/proj/a.txt")

    assert matches_any(path, [], exclude_mode=True, cwd=CWD) is False
    assert matches_any(path, [], exclude_mode=False, cwd=CWD) is True


@pytest.mark.unit
def test_matches_any_true_when_one_pattern_matches() -> None:
    path = Path("/proj/a.txt")

    assert matches_any(path, ["*.md", "*.txt"], exclude_mode=False, cwd=CWD)
    assert not matches_any(path, ["*.md", "zzz"], exclude_mode=True, cwd=CWD)


@pytest.mark.unit
def test_exclude_wins_over_include() -> None:
    path = Path("/proj/src/generated.py")

    assert not is_selected(path, ["generated"], ["*.py"], cwd=CWD)
    assert is_selected(Path("/proj/src/main.py"), ["generated"], ["*.py"], cwd=CWD)


@pytest.mark.unit
def test_empty_include_keeps_everything_not_excluded() -> None:
    assert is_selected(Path("/proj/any.bin"), [], [], cwd=CWD)
    assert not is_selected(Path("/proj/any.bin"), ["*.bin"], [], cwd=CWD)

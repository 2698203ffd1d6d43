from __future__ import annotations

from pathlib import Path

import pytest

from byteweaver.config import ImageMode
from byteweaver.exceptions import ConfigError
from byteweaver.settings import (
    CONFIG_ENV_VAR,
    AssemblyOptions,
    Settings,
    load_options_file,
    resolve_options,
    split_patterns,
)


@pytest.mark.unit
def test_assembly_options_defaults() -> None:
    options = AssemblyOptions()

    assert options.recursive is False
    assert options.exclude == []
    assert options.include == []
    assert options.minify is False
    assert not options.header
    assert not options.footer
    assert options.template is None
    assert options.image_mode is ImageMode.HTML


@pytest.mark.unit
def test_assembly_options_rejects_unknown_keys() -> None:
    with pytest.raises(ConfigError, match="Invalid options"):
        resolve_options({"recursve": True})


@pytest.mark.unit
def test_resolve_options_passes_through_instances() -> None:
    options = AssemblyOptions(minify=True)

    assert resolve_options(options) is options
    assert resolve_options(None) == AssemblyOptions()


@pytest.mark.unit
def test_split_patterns_accepts_strings_and_lists() -> None:
    assert split_patterns(None) == []
    assert split_patterns("a, b,,c ") == ["a", "b", "c"]
    assert split_patterns(["*.js,*.ts", "vendor"]) == ["*.js", "*.ts", "vendor"]


@pytest.mark.unit
def test_load_options_file_normalizes_dashed_keys(tmp_path: Path) -> None:
    config = tmp_path / "byteweaver.yaml"
    config.write_text("recursive: true\nimage-mode: markdown\nexclude: vendor,*.log\n", encoding="utf-8")

    data = load_options_file(config)

    assert data == {"recursive": True, "image_mode": "markdown", "exclude": "vendor,*.log"}


@pytest.mark.unit
def test_load_options_file_rejects_invalid_yaml(tmp_path: Path) -> None:
    config = tmp_path / "byteweaver.yaml"
    config.write_text("recursive: [unclosed\n", encoding="utf-8")

    with pytest.raises(ConfigError, match="Invalid YAML"):
        load_options_file(config)


@pytest.mark.unit
def test_load_options_file_rejects_non_mapping(tmp_path: Path) -> None:
    config = tmp_path / "byteweaver.yaml"
    config.write_text("- a\n- b\n", encoding="utf-8")

    with pytest.raises(ConfigError, match="must contain a mapping"):
        load_options_file(config)


@pytest.mark.unit
def test_load_options_file_missing_is_config_error(tmp_path: Path) -> None:
    with pytest.raises(ConfigError, match="Cannot read options file"):
        load_options_file(tmp_path / "missing.yaml")


@pytest.mark.unit
def test_settings_without_config_uses_defaults(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.delenv(CONFIG_ENV_VAR, raising=False)
    settings = Settings(directory=Path("src"), output=Path("out.txt"))

    assert settings.assembly_options() == AssemblyOptions()


@pytest.mark.unit
def test_settings_command_line_overrides_config_file(tmp_path: Path) -> None:
    config = tmp_path / "byteweaver.yaml"
    config.write_text(
        "recursive: true\nminify: false\nexclude: [vendor]\nheader: from file\nimage-mode: markdown\n",
        encoding="utf-8",
    )
    settings = Settings(
        directory=Path("src"),
        output=Path("out.txt"),
        config=config,
        minify=True,
        exclude=["*.log"],
        header="from cli",
    )

    options = settings.assembly_options()

    assert options.recursive is True
    assert options.minify is True
    assert options.exclude == ["vendor", "*.log"]
    assert options.header == "from cli"
    assert options.image_mode is ImageMode.MARKDOWN


@pytest.mark.unit
def test_settings_reads_config_path_from_environment(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
    config = tmp_path / "byteweaver.yaml"
    config.write_text("include: '*.py'\n", encoding="utf-8")
    monkeypatch.setenv(CONFIG_ENV_VAR, str(config))

    settings = Settings(directory=Path("src"), output=Path("out.txt"))

    assert settings.config_file() == config
    assert settings.assembly_options().include == ["*.py"]


@pytest.mark.unit
def test_settings_invalid_config_value_is_config_error(tmp_path: Path) -> None:
    config = tmp_path / "byteweaver.yaml"
    config.write_text("image-mode: ascii-art\n", encoding="utf-8")
    settings = Settings(directory=Path("src"), output=Path("out.txt"), config=config)

    with pytest.raises(ConfigError):
        settings.assembly_options()

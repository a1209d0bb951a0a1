"""Tests for settings resolution from the environment."""

import logging
from pathlib import Path

import pytest

from bpf_toolchain.settings import (
    CACHE_DIR_ENV,
    LLVM_REPO,
    ToolchainSettings,
    find_project_root,
    log_level_from_environment,
)


def test_project_root_from_manifest_dir(tmp_path: Path) -> None:
    assert find_project_root({"CARGO_MANIFEST_DIR": str(tmp_path)}) == tmp_path


def test_project_root_strips_xtask(tmp_path: Path) -> None:
    env = {"CARGO_MANIFEST_DIR": str(tmp_path / "xtask")}

    assert find_project_root(env) == tmp_path


def test_project_root_defaults_to_cwd(
    tmp_path: Path, monkeypatch: pytest.MonkeyPatch
) -> None:
    monkeypatch.chdir(tmp_path)

    assert find_project_root({}) == tmp_path


def test_cache_override(tmp_path: Path) -> None:
    env = {
        CACHE_DIR_ENV: str(tmp_path / "toolchain"),
        "CARGO_MANIFEST_DIR": str(tmp_path / "project"),
    }

    settings = ToolchainSettings.from_environment(env)

    assert settings.cache_dir == tmp_path / "toolchain"
    assert settings.project_root == tmp_path / "project"
    assert settings.llvm_repo == LLVM_REPO


def test_cache_from_xdg(tmp_path: Path) -> None:
    env = {
        "XDG_CACHE_HOME": str(tmp_path / "xdg"),
        "CARGO_MANIFEST_DIR": str(tmp_path),
    }

    settings = ToolchainSettings.from_environment(env)

    if settings.host_platform.startswith("linux"):
        assert settings.cache_dir == tmp_path / "xdg" / "u128-bpf-toolchain"


def test_layout(tmp_path: Path) -> None:
    settings = ToolchainSettings(cache_dir=tmp_path, project_root=tmp_path / "p")

    assert settings.llvm_src_dir == tmp_path / "llvm-project"
    assert settings.llvm_build_dir == tmp_path / "llvm-build"
    assert settings.llvm_config == tmp_path / "llvm-install" / "bin" / "llvm-config"
    assert settings.linker_bin == (
        tmp_path / "sbpf-linker" / "target" / "release" / "sbpf-linker"
    )
    assert settings.cargo_config_path == tmp_path / "p" / ".cargo" / "config.toml"


@pytest.mark.parametrize(
    "value,expected",
    [
        (None, logging.INFO),
        ("debug", logging.DEBUG),
        ("WARNING", logging.WARNING),
        ("chatty", logging.INFO),
    ],
)
def test_log_level(value, expected) -> None:
    env = {} if value is None else {"U128_BPF_LOG_LEVEL": value}

    assert log_level_from_environment(env) == expected


def test_relative_cache_override_ignored_with_warning(
    tmp_path: Path, caplog: pytest.LogCaptureFixture
) -> None:
    env = {
        CACHE_DIR_ENV: "relative/toolchain",
        "XDG_CACHE_HOME": str(tmp_path / "xdg"),
        "CARGO_MANIFEST_DIR": str(tmp_path),
    }

    with caplog.at_level(logging.WARNING, logger="bpf_toolchain.settings"):
        settings = ToolchainSettings.from_environment(env)

    assert settings.cache_dir != Path("relative/toolchain")
    assert "relative/toolchain" in caplog.text
    assert "not an absolute path" in caplog.text

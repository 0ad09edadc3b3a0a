"""Tests for the environment drift detection script."""

from __future__ import annotations

try:
    from . import _bootstrap  # noqa: F401
except Exception:  # pragma: no cover - fallback for direct execution
    import _bootstrap  # type: ignore # noqa: F401

from pathlib import Path

import pytest

from scripts import check_env

MANAGED_ENV_KEYS = [
    "GOOGLE_CLIENT_ID",
    "GOOGLE_CLIENT_SECRET",
    "GOOGLE_REDIRECT_URI",
    "STORE_BACKEND",
    "GEMINI_API_URL",
    "GEMINI_API_KEY",
]


def _write_env(env_path: Path, **values: str) -> None:
    contents = "\n".join(f"{key}={value}" for key, value in values.items())
    env_path.write_text(contents + "\n", encoding="utf-8")


def _clear_managed_env(monkeypatch: pytest.MonkeyPatch) -> None:
    # setenv first so monkeypatch also undoes values the script loads later.
    for key in MANAGED_ENV_KEYS:
        monkeypatch.setenv(key, "")
        monkeypatch.delenv(key)


@pytest.mark.parametrize("command", ["record", "verify", "check"])
def test_main_requires_existing_env_file(tmp_path: Path, command: str) -> None:
    env_file = tmp_path / ".missing-env"
    hash_file = tmp_path / ".env.sha256"

    argv = [command, "--env-file", str(env_file)]
    if command != "check":
        argv.extend(["--hash-file", str(hash_file)])

    exit_code = check_env.main(argv)
    assert exit_code == check_env.EXIT_RUNTIME_ERROR


def test_record_and_verify_detects_mismatched_checksum(
    tmp_path: Path, monkeypatch: pytest.MonkeyPatch
) -> None:
    env_file = tmp_path / ".env"
    hash_file = tmp_path / ".env.sha256"

    _clear_managed_env(monkeypatch)
    _write_env(
        env_file,
        GOOGLE_CLIENT_ID="abc",
        GOOGLE_CLIENT_SECRET="secret",
        STORE_BACKEND="memory",
    )

    exit_code = check_env.main(
        ["record", "--env-file", str(env_file), "--hash-file", str(hash_file)]
    )
    assert exit_code == check_env.EXIT_OK
    assert hash_file.read_text(encoding="utf-8").strip()

    _clear_managed_env(monkeypatch)
    exit_code = check_env.main(
        ["verify", "--env-file", str(env_file), "--hash-file", str(hash_file)]
    )
    assert exit_code == check_env.EXIT_OK

    _write_env(
        env_file,
        GOOGLE_CLIENT_ID="abc",
        GOOGLE_CLIENT_SECRET="different",
        STORE_BACKEND="memory",
    )

    _clear_managed_env(monkeypatch)
    exit_code = check_env.main(
        ["verify", "--env-file", str(env_file), "--hash-file", str(hash_file)]
    )
    assert exit_code == check_env.EXIT_CHECKSUM_ERROR


def test_validation_failure_for_missing_client_secret(
    tmp_path: Path, monkeypatch: pytest.MonkeyPatch
) -> None:
    env_file = tmp_path / ".env"

    _clear_managed_env(monkeypatch)
    _write_env(env_file, GOOGLE_CLIENT_ID="abc")

    exit_code = check_env.main(["check", "--env-file", str(env_file)])
    assert exit_code == check_env.EXIT_VALIDATION_ERROR


def test_validation_failure_for_unknown_store_backend(
    tmp_path: Path, monkeypatch: pytest.MonkeyPatch
) -> None:
    env_file = tmp_path / ".env"

    _clear_managed_env(monkeypatch)
    _write_env(
        env_file,
        GOOGLE_CLIENT_ID="abc",
        GOOGLE_CLIENT_SECRET="secret",
        STORE_BACKEND="redis",
    )

    exit_code = check_env.main(["check", "--env-file", str(env_file)])
    assert exit_code == check_env.EXIT_VALIDATION_ERROR


def test_require_gemini_flags_missing_chat_configuration(
    tmp_path: Path, monkeypatch: pytest.MonkeyPatch, capsys: pytest.CaptureFixture[str]
) -> None:
    env_file = tmp_path / ".env"

    _clear_managed_env(monkeypatch)
    _write_env(
        env_file,
        GOOGLE_CLIENT_ID="abc",
        GOOGLE_CLIENT_SECRET="secret",
        STORE_BACKEND="memory",
        GEMINI_API_URL="https://gemini.example.com/v1/complete",
    )

    exit_code = check_env.main(["check", "--env-file", str(env_file), "--require-gemini"])

    assert exit_code == check_env.EXIT_NOT_CONFIGURED
    assert "GEMINI_API_KEY" in capsys.readouterr().err

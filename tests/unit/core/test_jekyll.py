"""Unit tests for core/jekyll.py"""

import subprocess

import pytest

from mdblog.config import Settings
from mdblog.core.jekyll import build_command, run_generator
from mdblog.errors import GeneratorError


def test_build_command_serve():
    argv = build_command(Settings(port=4001), serve=True, drafts=True)
    assert argv == [
        "bundle", "exec", "jekyll", "serve", "--livereload",
        "--host", "0.0.0.0", "--port", "4001", "--drafts",
    ]


def test_build_command_build():
    argv = build_command(Settings(generator_command="jekyll"))
    assert argv == ["jekyll", "build", "--destination", "_site"]


def test_build_command_empty_generator():
    with pytest.raises(GeneratorError):
        build_command(Settings(generator_command=""))


def test_run_generator_returns_exit_code(monkeypatch, tmp_path):
    calls = []

    def fake_run(argv, cwd, check):
        calls.append((argv, cwd))
        return subprocess.CompletedProcess(argv, 3)

    monkeypatch.setattr(subprocess, "run", fake_run)
    assert run_generator(["jekyll", "build"], tmp_path) == 3
    assert calls == [(["jekyll", "build"], tmp_path)]


def test_run_generator_missing_executable(tmp_path):
    with pytest.raises(GeneratorError, match="not found"):
        run_generator(["definitely-not-a-real-generator-binary"], tmp_path)


def test_run_generator_not_executable(monkeypatch, tmp_path):
    def fake_run(argv, cwd, check):
        raise PermissionError(13, "Permission denied", argv[0])

    monkeypatch.setattr(subprocess, "run", fake_run)
    with pytest.raises(GeneratorError, match="Could not run generator ./jekyll"):
        run_generator(["./jekyll", "build"], tmp_path)

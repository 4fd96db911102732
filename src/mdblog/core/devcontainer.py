"""Devcontainer descriptor loading and validation"""

import json
import re
from pathlib import Path
from typing import Any

from mdblog.core.models import Issue, LintReport, Severity
from mdblog.errors import MdblogError


DEVCONTAINER_PATHS = ('.devcontainer/devcontainer.json', '.devcontainer.json')
IMAGE_KEYS = ('image', 'dockerFile', 'dockerComposeFile')
COMMAND_KEYS = ('postStartCommand', 'postCreateCommand', 'postAttachCommand')

# group 1 matches a string literal, which both passes keep
_COMMENT_RE = re.compile(r'("(?:\\.|[^"\\])*")|//[^\n]*|/\*.*?\*/', re.DOTALL)
_TRAILING_COMMA_RE = re.compile(r'("(?:\\.|[^"\\])*")|,(?=\s*[}\]])')


def _keep_strings(m: re.Match) -> str:
    return m.group(1) or ''


def strip_jsonc(text: str) -> str:
    """Reduce JSON-with-comments to plain JSON: comments first, then trailing commas."""
    return _TRAILING_COMMA_RE.sub(_keep_strings, _COMMENT_RE.sub(_keep_strings, text))


def find_devcontainer(root: Path) -> Path | None:
    for rel in DEVCONTAINER_PATHS:
        if (root / rel).is_file():
            return root / rel
    return None


def load_devcontainer(path: Path) -> dict[str, Any]:
    """Parse a devcontainer.json file. Raises MdblogError on invalid JSON or a non-object."""
    try:
        data = json.loads(strip_jsonc(path.read_text(encoding='utf-8')))
    except json.JSONDecodeError as e:
        raise MdblogError(f"Invalid devcontainer descriptor {path}: {e}") from e
    if not isinstance(data, dict):
        raise MdblogError(f"Invalid devcontainer descriptor {path}: expected a JSON object")
    return data


def check_devcontainer(config: dict[str, Any], path: str = '.devcontainer/devcontainer.json') -> LintReport:
    """Check the descriptor names a base image and a startup command."""
    report = LintReport(checked=1)
    build = config.get('build') if isinstance(config.get('build'), dict) else {}
    if not any(config.get(k) for k in IMAGE_KEYS) and not build.get('dockerfile'):
        report.issues.append(Issue(
            path=path, rule='devcontainer-image-missing', severity=Severity.error,
            message="descriptor needs an image, build.dockerfile, or dockerComposeFile",
        ))
    if not any(config.get(k) for k in COMMAND_KEYS):
        report.issues.append(Issue(
            path=path, rule='devcontainer-command-missing', severity=Severity.warning,
            message=f"no startup command set (one of {', '.join(COMMAND_KEYS)})",
        ))
    return report

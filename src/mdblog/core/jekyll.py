"""Wrappers over the external static-site generator's build and serve commands"""

import logging
import shlex
import subprocess
from pathlib import Path

from mdblog.config import Settings
from mdblog.errors import GeneratorError


logger = logging.getLogger(__name__)


def build_command(settings: Settings, serve: bool = False, drafts: bool = False) -> list[str]:
    """Return argv for `<generator> serve --livereload ...` or `<generator> build`."""
    argv = shlex.split(settings.generator_command)
    if not argv:
        raise GeneratorError("generator_command is empty")
    if serve:
        argv += ['serve', '--livereload', '--host', settings.host, '--port', str(settings.port)]
    else:
        argv += ['build', '--destination', settings.site_dir]
    if drafts:
        argv.append('--drafts')
    return argv


def run_generator(argv: list[str], cwd: Path) -> int:
    """Run the generator in cwd and return its exit code."""
    logger.info("Running %s in %s", shlex.join(argv), cwd)
    try:
        result = subprocess.run(argv, cwd=cwd, check=False)
    except FileNotFoundError as e:
        raise GeneratorError(f"Generator command not found: {argv[0]}") from e
    except OSError as e:
        raise GeneratorError(f"Could not run generator {argv[0]}: {e}") from e
    logger.debug("%s exited with %d", argv[0], result.returncode)
    return result.returncode

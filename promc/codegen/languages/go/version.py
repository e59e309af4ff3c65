"""
Build identity file generation.

Renders a small Go file holding the generator's source-control tag and
commit hash as string literals.
"""

import subprocess
from pathlib import Path
from typing import List, Optional, Union

from ...core.config import GeneratorConfig
from ...core.generator import GeneratorError
from ...core.templates import create_template_engine
from ....logging_config import get_logger
from .format import format_go_source
from .generator import TEMPLATE_DIR
from .naming import validate_go_package_name

logger = get_logger(__name__)

UNKNOWN = "unknown"
GIT_TIMEOUT_SECONDS = 10


def _git_output(args: List[str], repo: Optional[Union[str, Path]] = None) -> str:
    """Run a git command and return its trimmed output, or UNKNOWN on failure."""
    try:
        completed = subprocess.run(
            ["git", *args],
            cwd=str(repo) if repo else None,
            capture_output=True,
            text=True,
            timeout=GIT_TIMEOUT_SECONDS,
            check=True,
        )
    except (OSError, subprocess.SubprocessError) as e:
        logger.debug("git %s failed: %s", " ".join(args), e)
        return UNKNOWN

    output = completed.stdout.strip()
    return output or UNKNOWN


def get_latest_tag(repo: Optional[Union[str, Path]] = None) -> str:
    """Most recent tag reachable from HEAD."""
    return _git_output(["describe", "--tags", "--abbrev=0"], repo)


def get_commit(repo: Optional[Union[str, Path]] = None) -> str:
    """Full hash of HEAD."""
    return _git_output(["rev-parse", "HEAD"], repo)


def render_version_file(
    version: str,
    commit: str,
    package_name: str = "main",
    config: Optional[GeneratorConfig] = None,
) -> str:
    """
    Render the build identity Go file.

    Args:
        version: Source-control tag
        commit: Commit hash
        package_name: Go package of the generated file
        config: Generator settings (for the banner tool name)

    Returns:
        Formatted Go source

    Raises:
        GeneratorError: If the package name is not a valid Go package name
    """
    errors, _ = validate_go_package_name(package_name)
    if errors:
        raise GeneratorError(f"invalid Go package name '{package_name}': {'; '.join(errors)}")

    config = config or GeneratorConfig()
    engine = create_template_engine(TEMPLATE_DIR)
    code = engine.render_template(
        "version.go.j2",
        {
            "generator_name": config.generator_name,
            "package_name": package_name,
            "version": version,
            "commit": commit,
        },
    )
    return format_go_source(code)


def generate_version_file(
    package_name: str = "main",
    repo: Optional[Union[str, Path]] = None,
    config: Optional[GeneratorConfig] = None,
) -> str:
    """Render the build identity file from the state of a git checkout."""
    version = get_latest_tag(repo)
    commit = get_commit(repo)
    logger.info("Build identity: version=%s commit=%s", version, commit)
    return render_version_file(version, commit, package_name, config)

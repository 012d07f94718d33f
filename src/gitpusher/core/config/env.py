"""Seed GITPUSHER_* settings from the project's .env file.

Variables already exported in the shell always win over the file.
"""

from __future__ import annotations

from pathlib import Path

from dotenv import load_dotenv


def load_project_env(project_dir: Path | None = None) -> bool:
    """Load `<project_dir>/.env` into os.environ without overriding it.

    Args:
        project_dir: Repository root (defaults to cwd)

    Returns:
        True if the file defines at least one variable
    """
    env_path = (project_dir or Path.cwd()) / ".env"
    if not env_path.is_file():
        return False
    return load_dotenv(env_path, override=False)

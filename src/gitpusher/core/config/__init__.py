"""
Configuration models and loading.

This module provides Pydantic models for gitpusher configuration
with multi-layer merging: defaults < user < project < env vars.
"""

from .env import load_project_env
from .loader import (
    clear_cache,
    get_project_config_path,
    get_user_config_path,
    get_xdg_config_home,
    load_config,
)
from .models import GitPusherConfig, MergeRequestConfig

__all__ = [
    # Models
    "GitPusherConfig",
    "MergeRequestConfig",
    # Loader functions
    "clear_cache",
    "get_project_config_path",
    "get_user_config_path",
    "get_xdg_config_home",
    "load_config",
    "load_project_env",
]

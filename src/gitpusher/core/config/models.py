"""
Configuration data models for gitpusher.

These models define the structure of .gitpusher.json and
~/.config/gitpusher/config.json files, with validation via Pydantic.
"""

from typing import Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator


class MergeRequestConfig(BaseModel):
    """
    GitLab merge request settings.

    Controls whether the merge request step is offered and how the GitLab
    API is reached.
    """
    enabled: bool = Field(
        default=True,
        description="Offer to create a merge request after each push"
    )
    api_url: Optional[str] = Field(
        default=None,
        description="GitLab API base URL (defaults to https://<remote host>/api/v4)"
    )
    token: Optional[str] = Field(
        default=None,
        description="Access token; when unset the stored token or a prompt is used"
    )
    timeout: float = Field(
        default=30.0,
        gt=0.0,
        description="HTTP timeout in seconds for GitLab API calls"
    )
    open_browser: bool = Field(
        default=True,
        description="Open the created merge request in the default browser"
    )

    @field_validator("api_url")
    @classmethod
    def strip_trailing_slash(cls, v: Optional[str]) -> Optional[str]:
        if v is None:
            return None
        return v.rstrip("/") or None


class GitPusherConfig(BaseModel):
    """
    Root configuration for gitpusher.

    Loaded with precedence: defaults < user config < project config < env.
    """
    model_config = ConfigDict(extra="ignore")

    remote: str = Field(
        default="origin",
        min_length=1,
        description="Remote used for pull and push"
    )
    merge_request: MergeRequestConfig = Field(default_factory=MergeRequestConfig)

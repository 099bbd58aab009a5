"""Configuration definition."""

from __future__ import annotations

from pathlib import Path
from typing import Self

import yaml
from pydantic import AliasChoices, Field, HttpUrl
from pydantic.alias_generators import to_camel
from pydantic_settings import BaseSettings, SettingsConfigDict
from safir.logging import LogLevel, Profile

from .constants import TRIGGER_HISTORY_LENGTH
from .models.action import ActionConfig

__all__ = ["Configuration"]


class Configuration(BaseSettings):
    """Configuration for pushwatch."""

    model_config = SettingsConfigDict(
        alias_generator=to_camel, extra="forbid", populate_by_name=True
    )

    slack_alerts: bool = Field(
        False,
        title="Enable Slack alerts",
        description=(
            "Whether to enable Slack alerts. If true, ``alert_hook`` must"
            " also be set."
        ),
    )

    alert_hook: HttpUrl | None = Field(
        None,
        title="Slack webhook URL used for sending alerts",
        description=(
            "An https URL, which should be considered secret. If not set or"
            " set to `None`, this feature will be disabled."
        ),
        examples=["https://slack.example.com/ADFAW1452DAF41/"],
        validation_alias=AliasChoices("PUSHWATCH_ALERT_HOOK", "alertHook"),
    )

    name: str = Field(
        "pushwatch",
        title="Name of application",
        description="Doubles as the root HTTP endpoint path.",
    )

    path_prefix: str = Field(
        "/pushwatch",
        title="URL prefix for application API",
    )

    profile: Profile = Field(
        Profile.development,
        title="Application logging profile",
    )

    log_level: LogLevel = Field(
        LogLevel.INFO,
        title="Log level of the application's logger",
    )

    autostart: list[ActionConfig] = Field(
        [],
        title="Autostart config",
        description=(
            "Actions that will be started, and watch for push notifications,"
            " as soon as pushwatch starts."
        ),
    )

    trigger_history_length: int = Field(
        TRIGGER_HISTORY_LENGTH,
        title="Trigger history length",
        description="Number of trigger records retained for each action.",
        ge=0,
    )

    github_webhook_secret: str | None = Field(
        None,
        title="GitHub webhook secret",
        description=(
            "Secret used to validate GitHub push webhooks. If not set, the"
            " GitHub webhook route is not enabled."
        ),
        validation_alias=AliasChoices(
            "PUSHWATCH_GITHUB_WEBHOOK_SECRET", "githubWebhookSecret"
        ),
    )

    accepted_github_orgs: list[str] = Field(
        [],
        title="Allowed GitHub organizations",
        description=(
            "Any webhook payload request from a repo in an organization not in"
            " this list will get a 403 response."
        ),
    )

    @classmethod
    def from_file(cls, path: Path) -> Self:
        """Construct a Configuration object from a configuration file.

        Settings not given in the file may be set in the environment.

        Parameters
        ----------
        path
            Path to the configuration file in YAML.

        Returns
        -------
        Configuration
            The corresponding `Configuration` object.
        """
        with path.open("r") as f:
            return cls(**(yaml.safe_load(f) or {}))

"""Models for the repositories and branches a watcher is interested in."""

from __future__ import annotations

import re
from functools import lru_cache
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, field_validator

from ..constants import BRANCH_SEPARATOR, BRANCH_WILDCARD
from .notification import PushNotification, TriggerCause

__all__ = ["MatchTarget", "branch_matches"]


@lru_cache(maxsize=1024)
def _compile_pattern(pattern: str) -> re.Pattern[str]:
    """Translate a wildcard branch pattern into a regular expression.

    Every literal segment is escaped, so no input can produce an invalid
    expression.
    """
    segments = pattern.split(BRANCH_WILDCARD)
    return re.compile(".*".join(re.escape(s) for s in segments), re.DOTALL)


def branch_matches(pattern: str, branch: str) -> bool:
    """Test whether a configured branch pattern matches a pushed branch.

    Parameters
    ----------
    pattern
        Configured branch name, optionally containing ``*`` wildcards that
        match any sequence of characters (including none).
    branch
        Name of the branch that was pushed.

    Returns
    -------
    bool
        `True` if the pattern matches the whole branch name.
    """
    if BRANCH_WILDCARD not in pattern:
        return pattern == branch
    return _compile_pattern(pattern).fullmatch(branch) is not None


class MatchTarget(BaseModel):
    """A repository and the branches of it that should trigger an action."""

    model_config = ConfigDict(frozen=True)

    uri: str = Field(
        ...,
        title="Repository URI",
        description=(
            "Compared verbatim with the URI of each notification. No"
            " normalization of scheme, case, or trailing slashes is done, so"
            " this must be exactly the URI the notifier sends."
        ),
        examples=["https://github.com/lsst-sqre/pushwatch.git"],
    )

    branches: str = Field(
        "",
        title="Branch patterns",
        description=(
            "Comma-separated list of branch names, each of which may contain"
            " ``*`` to match any sequence of characters. If blank, any push"
            " to the repository matches, even one naming no branch."
        ),
        examples=["main,tickets/*"],
    )

    @field_validator("uri", "branches", mode="before")
    @classmethod
    def _strip(cls, v: Any) -> Any:
        if v is None:
            return ""
        if isinstance(v, str):
            return v.strip()
        return v

    @field_validator("uri")
    @classmethod
    def _validate_uri(cls, v: str) -> str:
        if not v:
            raise ValueError("uri must not be blank")
        return v

    @property
    def patterns(self) -> list[str]:
        """Configured branch patterns in order."""
        patterns = (p.strip() for p in self.branches.split(BRANCH_SEPARATOR))
        return [p for p in patterns if p]

    def matches(self, notification: PushNotification) -> TriggerCause | None:
        """Test whether a notification matches this target.

        Patterns are tried in configured order and, for each pattern, the
        notified branches in notification order. The first pair that matches
        determines the branch of the cause.

        Parameters
        ----------
        notification
            Inbound push notification.

        Returns
        -------
        TriggerCause or None
            Cause naming the matched branch, or `None` if the notification
            doesn't match.
        """
        if notification.uri != self.uri:
            return None
        if not self.branches:
            return TriggerCause(uri=notification.uri, branch="")
        for pattern in self.patterns:
            for branch in notification.branches:
                if branch_matches(pattern, branch):
                    return TriggerCause(uri=notification.uri, branch=branch)
        return None

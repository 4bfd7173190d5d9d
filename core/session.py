"""Verified caller identity handed to every core operation."""

from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True)
class SessionContext:
    """Identity already verified by the authentication layer."""

    user_id: int
    username: str

"""User profile lookup."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any

from inat_rarity.datasources.inaturalist import client
from inat_rarity.datasources.inaturalist.observations import medium_photo_url


@dataclass
class UserProfile:
    """The bits of an iNaturalist profile shown in the report header."""

    login: str
    name: str | None = None
    icon_url: str | None = None
    observations_count: int | None = None

    @property
    def url(self) -> str:
        return client.person_url(self.login)


def _parse_profile(user: dict[str, Any], fallback_login: str) -> UserProfile:
    return UserProfile(
        login=user.get("login") or fallback_login,
        name=user.get("name") or None,
        icon_url=medium_photo_url(user.get("icon_url")),
        observations_count=user.get("observations_count"),
    )


def fetch_user_profile(
    username: str,
    *,
    min_delay: float = client.DEFAULT_MIN_DELAY,
) -> UserProfile:
    """
    Look up a user's profile via autocomplete.

    Picks the result whose login matches case-insensitively, else the first
    result, else a bare profile carrying just the login.
    """
    data = client.autocomplete_users(username, min_delay)
    results: list[dict[str, Any]] = data.get("results") or []
    wanted = username.casefold()
    for user in results:
        if str(user.get("login") or "").casefold() == wanted:
            return _parse_profile(user, username)
    if results:
        return _parse_profile(results[0], username)
    return UserProfile(login=username)

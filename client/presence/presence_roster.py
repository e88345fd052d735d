"""
Presence roster module.

Holds the set of usernames currently online. Every roster-bearing event
carries the complete membership, so updates replace the roster wholesale.
"""

from typing import FrozenSet, Iterable


class PresenceRoster:
    """Current online users, replaced on every roster update."""

    def __init__(self):
        self._users: FrozenSet[str] = frozenset()

    def replace(self, snapshot: Iterable[str]) -> bool:
        """Overwrite the roster. Returns True when membership changed."""
        users = frozenset(snapshot)
        changed = users != self._users
        self._users = users
        return changed

    @property
    def users(self) -> FrozenSet[str]:
        return self._users

    def __contains__(self, username: str) -> bool:
        return username in self._users

    def __len__(self) -> int:
        return len(self._users)

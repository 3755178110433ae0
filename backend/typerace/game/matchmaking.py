from __future__ import annotations

from typing import Callable

from .errors import QueueDuplicateEntry
from .models import Participant


class MatchQueue:
    """FIFO waiting list. Not thread-safe; the owning service locks around it."""

    def __init__(self, allow_duplicates: bool = False) -> None:
        self.allow_duplicates = allow_duplicates
        self._entries: list[Participant] = []

    def __len__(self) -> int:
        return len(self._entries)

    def __contains__(self, participant_id: object) -> bool:
        return any(p.id == participant_id for p in self._entries)

    def enqueue(self, participant: Participant) -> None:
        if not self.allow_duplicates and participant.id in self:
            raise QueueDuplicateEntry(f"{participant.id} is already queued")
        self._entries.append(participant)

    def drain(
        self,
        group_size: int,
        is_busy: Callable[[str], bool] | None = None,
    ) -> list[Participant] | None:
        """Remove and return the earliest `group_size` distinct participants.

        Entries whose id is already in the group, or for which `is_busy` is
        true, are skipped and stay queued for a later drain.
        """
        if group_size < 1:
            raise ValueError("group_size must be positive")

        picked: list[int] = []
        ids: set[str] = set()
        for index, p in enumerate(self._entries):
            if p.id in ids or (is_busy is not None and is_busy(p.id)):
                continue
            picked.append(index)
            ids.add(p.id)
            if len(picked) == group_size:
                break

        if len(picked) < group_size:
            return None
        group = [self._entries[i] for i in picked]
        taken = set(picked)
        self._entries = [p for i, p in enumerate(self._entries) if i not in taken]
        return group

    def discard(self, participant_id: str) -> int:
        before = len(self._entries)
        self._entries = [p for p in self._entries if p.id != participant_id]
        return before - len(self._entries)

    def snapshot(self) -> list[Participant]:
        return list(self._entries)

"""Member store - storage contract and in-memory implementation.

The lifecycle services depend only on the MemberRepository contract:
lookup by identifier, listing, and update by value.
"""

import threading
from typing import Dict, List, Optional, Protocol

from membership_service.models.member import Member, MemberId


class MemberNotFoundError(Exception):
    """Raised when a member identifier does not exist in the store."""

    def __init__(self, member_id: MemberId):
        super().__init__("Member not found")
        self.member_id = member_id


class MemberRepository(Protocol):
    """Storage capability required by the lifecycle services."""

    def get_by_id(self, member_id: MemberId) -> Optional[Member]:
        ...

    def get_all(self) -> List[Member]:
        ...

    def update(self, member: Member) -> None:
        ...


class InMemoryMemberStore:
    """In-memory storage for member records.

    Thread-safe storage keyed by member identifier. Returns the stored
    instances themselves, so callers mutate and then pass them back to update().
    """

    def __init__(self):
        """Initialize member store with empty storage."""
        self._members: Dict[MemberId, Member] = {}
        self._lock = threading.RLock()

    def add(self, member: Member) -> None:
        """Add a member to the store.

        Args:
            member: Member to store

        Raises:
            ValueError: If the member identifier already exists
        """
        with self._lock:
            if member.member_id in self._members:
                raise ValueError(f"Member with id '{member.member_id}' already exists")
            self._members[member.member_id] = member

    def get_by_id(self, member_id: MemberId) -> Optional[Member]:
        """Find member by identifier.

        Args:
            member_id: Member identifier

        Returns:
            Member if found, None otherwise
        """
        with self._lock:
            return self._members.get(member_id)

    def get_all(self) -> List[Member]:
        """Get all members in the store.

        Returns:
            List of all Member objects
        """
        with self._lock:
            return list(self._members.values())

    def get_active(self) -> List[Member]:
        """Get members whose cached active flag is set."""
        with self._lock:
            return [m for m in self._members.values() if m.is_active]

    def update(self, member: Member) -> None:
        """Update an existing member.

        Args:
            member: Member with the values to persist

        Raises:
            MemberNotFoundError: If the member identifier is not stored
        """
        with self._lock:
            if member.member_id not in self._members:
                raise MemberNotFoundError(member.member_id)
            self._members[member.member_id] = member

    def upsert(self, member: Member) -> None:
        """Add or update a member."""
        with self._lock:
            self._members[member.member_id] = member

    def exists(self, member_id: MemberId) -> bool:
        """Check if a member identifier exists."""
        with self._lock:
            return member_id in self._members

    def count(self) -> int:
        """Get total number of members."""
        with self._lock:
            return len(self._members)

    def clear(self) -> None:
        """Clear all members from the store.

        Warning: This removes all data. Use with caution.
        """
        with self._lock:
            self._members.clear()

    def __len__(self) -> int:
        return self.count()

    def __contains__(self, member_id: MemberId) -> bool:
        return self.exists(member_id)

    def __repr__(self) -> str:
        return f"InMemoryMemberStore(members={self.count()})"


# Global store instance
_store_instance: Optional[InMemoryMemberStore] = None
_store_lock = threading.Lock()


def get_member_store() -> InMemoryMemberStore:
    """Get global member store instance (singleton).

    Returns:
        InMemoryMemberStore instance
    """
    global _store_instance
    if _store_instance is None:
        with _store_lock:
            if _store_instance is None:
                _store_instance = InMemoryMemberStore()
    return _store_instance


def reset_member_store() -> None:
    """Reset global member store (clears all data)."""
    get_member_store().clear()

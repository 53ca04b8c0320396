"""Read-only member queries."""

from typing import Optional

from membership_service.models.member import Member, MemberId
from membership_service.repositories.member_store import MemberRepository


class MemberLookup:
    """Read-only access to members.

    The active flag is returned as stored; it is not recomputed from the
    subscription end. Only renewal and the expiration sweep change it.
    """

    def __init__(self, member_store: MemberRepository):
        self.store = member_store

    def get_member(self, member_id: MemberId) -> Optional[Member]:
        """Get member by identifier, or None if it does not exist."""
        return self.store.get_by_id(member_id)

    def is_active(self, member_id: MemberId) -> bool:
        """Whether the member is entitled to service; unknown members are inactive."""
        member = self.store.get_by_id(member_id)
        if member is None:
            return False
        return member.is_active

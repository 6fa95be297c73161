"""Supabase implementation for fridge memberships."""

from dataclasses import dataclass

from supabase import Client

from myfridge.adapters.supabase_errors import remote_read
from myfridge.adapters.supabase_rows import int_column
from myfridge.services.users import MembershipRepository


@dataclass
class SupabaseMembershipRepository(MembershipRepository):
    """Supabase-backed ``fridge_members`` lookups."""

    client: Client

    def first_fridge_id(self, user_id: str) -> int | None:
        """Return the first fridge the user belongs to."""
        with remote_read("load fridge membership"):
            response = (
                self.client.table("fridge_members")
                .select("fridge_id")
                .eq("user_id", user_id)
                .limit(1)
                .execute()
            )
        found = int_column(response.data, "fridge_id")
        return found[0] if found else None

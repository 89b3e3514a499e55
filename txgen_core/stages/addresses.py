"""
Address generation stage. Exactly one address per user.
"""

from typing import List

from ..models import ADDRESS, Address
from .base import BaseStage


class AddressStage(BaseStage):
    """Generates one address for every user id it is given."""

    phase = "addresses"
    kind = ADDRESS

    def run(self, sink, user_ids: List[int]) -> int:
        """
        Write one address per user to ``sink``.

        Returns:
            Number of addresses written
        """
        total = len(user_ids)
        self._report(0, total)
        for count, user_id in enumerate(user_ids, start=1):
            address = Address(
                id=self.allocator.next(ADDRESS) if self.ctx.address_ids else None,
                user_id=user_id,
                street=self.values.street_name(),
                city=self.values.city(),
                state=self.values.state(),
                country=self.values.country(),
                postal_code=self.values.postal_code(),
            )
            self._emit(sink, address.to_record(), count, total)
        return total

"""
Transaction generation stage.

Each transaction references one user (uniform or skewed choice) and one
provider (always uniform). Amounts fall strictly inside
(min_amount, max_amount); timestamps are the wall-clock time of generation.
"""

import math
from datetime import datetime, timezone
from typing import List

from ..models import TRANSACTION, Transaction
from ..sampling import sample_provider_index, sample_user_index
from .base import BaseStage


class TransactionStage(BaseStage):
    """Generates transactions against previously generated users and providers."""

    phase = "transactions"
    kind = TRANSACTION

    def run(self, sink, total: int, user_ids: List[int], provider_ids: List[int]) -> int:
        """
        Write ``total`` transactions to ``sink``.

        Raises:
            RuntimeError: If transactions are requested without users or providers
        """
        if total > 0:
            self._require(user_ids, "user")
            self._require(provider_ids, "payment provider")

        self._report(0, total)
        for count in range(1, total + 1):
            user_index = sample_user_index(self.rng, len(user_ids), self.ctx.skewed)
            provider_index = sample_provider_index(self.rng, len(provider_ids))
            transaction = Transaction(
                id=self.allocator.next(TRANSACTION),
                user_id=user_ids[user_index],
                provider_id=provider_ids[provider_index],
                amount=self._amount(),
                timestamp=datetime.now(timezone.utc).isoformat(),
            )
            self._emit(sink, transaction.to_record(), count, total)
        return total

    def _amount(self) -> float:
        low, high = self.ctx.min_amount, self.ctx.max_amount
        amount = low + (high - low) * self.rng.random()
        if low < amount < high:
            return amount
        # Draw landed on (or rounded onto) a bound: use the smallest float above low
        return math.nextafter(low, high)

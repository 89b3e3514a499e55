"""
Payment provider generation stage.
"""

from typing import List

from ..models import PROVIDER, PaymentProvider
from ..values import PAYMENT_PROVIDER_NAMES
from .base import BaseStage


class ProviderStage(BaseStage):
    """Generates payment providers named after real payment brands.

    Names are drawn with replacement, so two providers may share a brand
    when more providers than catalog entries are requested.
    """

    phase = "providers"
    kind = PROVIDER

    def run(self, sink, total: int) -> List[int]:
        provider_ids: List[int] = []
        self._report(0, total)
        for count in range(1, total + 1):
            provider = PaymentProvider(
                id=self.allocator.next(PROVIDER),
                name=self.rng.choice(PAYMENT_PROVIDER_NAMES),
            )
            self._emit(sink, provider.to_record(), count, total)
            provider_ids.append(provider.id)
        return provider_ids

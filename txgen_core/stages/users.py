"""
User generation stage.
"""

import re
from typing import List

from ..models import USER, User
from .base import BaseStage

_WORD_RE = re.compile(r"[^\W_]+", re.UNICODE)


def email_for(name: str, domain: str) -> str:
    """
    Derive an email address from a person's name.

    The local part is the lowercased name with its words joined by dots, so
    'Dr. Jane O'Neil' at 'gmail.com' becomes 'dr.jane.o.neil@gmail.com'.
    """
    local = ".".join(_WORD_RE.findall(name.lower())) or "user"
    return f"{local}@{domain}"


class UserStage(BaseStage):
    """Generates users and keeps their ids for later stages."""

    phase = "users"
    kind = USER

    def run(self, sink, total: int) -> List[int]:
        """
        Generate ``total`` users, writing each one to ``sink``.

        Returns:
            Ids of the generated users, in generation order
        """
        user_ids: List[int] = []
        self._report(0, total)
        for count in range(1, total + 1):
            name = self.values.full_name()
            user = User(
                id=self.allocator.next(USER),
                name=name,
                email=email_for(name, self.values.email_domain()),
                phone=self.values.phone_number(),
            )
            self._emit(sink, user.to_record(), count, total)
            user_ids.append(user.id)
        return user_ids

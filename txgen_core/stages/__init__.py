"""
Generation pipeline stages.

Each stage produces the records of one entity kind.
"""

from .addresses import AddressStage
from .base import BaseStage, StageContext
from .providers import ProviderStage
from .transactions import TransactionStage
from .users import UserStage, email_for

__all__ = [
    "StageContext",
    "BaseStage",
    "UserStage",
    "AddressStage",
    "ProviderStage",
    "TransactionStage",
    "email_for",
]

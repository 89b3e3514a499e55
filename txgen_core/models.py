"""
Entity records produced by the generation pipeline.

Field declaration order is the column order of the CSV output and the key
order of the JSON output.
"""

from dataclasses import dataclass, fields
from typing import Any, Dict, List, Optional

USER = "user"
ADDRESS = "address"
PROVIDER = "provider"
TRANSACTION = "transaction"

ENTITY_KINDS = (USER, ADDRESS, PROVIDER, TRANSACTION)

# Output file stem per entity kind
FILE_STEMS = {
    USER: "users",
    ADDRESS: "addresses",
    PROVIDER: "providers",
    TRANSACTION: "transactions",
}


@dataclass
class User:
    id: int
    name: str
    email: str
    phone: str

    def to_record(self) -> Dict[str, Any]:
        return {f.name: getattr(self, f.name) for f in fields(self)}


@dataclass
class Address:
    """Address of a user. ``id`` is None when address ids are disabled."""

    id: Optional[int]
    user_id: int
    street: str
    city: str
    state: str
    country: str
    postal_code: str

    def to_record(self) -> Dict[str, Any]:
        record = {f.name: getattr(self, f.name) for f in fields(self)}
        if self.id is None:
            del record["id"]
        return record


@dataclass
class PaymentProvider:
    id: int
    name: str

    def to_record(self) -> Dict[str, Any]:
        return {f.name: getattr(self, f.name) for f in fields(self)}


@dataclass
class Transaction:
    id: int
    user_id: int
    provider_id: int
    amount: float
    timestamp: str

    def to_record(self) -> Dict[str, Any]:
        return {f.name: getattr(self, f.name) for f in fields(self)}


ENTITY_TYPES = {
    USER: User,
    ADDRESS: Address,
    PROVIDER: PaymentProvider,
    TRANSACTION: Transaction,
}


def field_names(kind: str, address_ids: bool = True) -> List[str]:
    """
    Return the declared field names for an entity kind.

    Args:
        kind: One of ENTITY_KINDS
        address_ids: Whether Address records carry their own id

    Raises:
        ValueError: If kind is unknown
    """
    if kind not in ENTITY_TYPES:
        raise ValueError(f"Unknown entity kind: '{kind}'. Must be one of: {', '.join(ENTITY_KINDS)}")
    names = [f.name for f in fields(ENTITY_TYPES[kind])]
    if kind == ADDRESS and not address_ids:
        names.remove("id")
    return names

"""
Realistic field values for generated entities.

Stages never talk to a fake-data library directly; they are handed a
ValueProvider. Faker and Mimesis backed providers ship here, tests use a
deterministic stub.
"""

from abc import ABC, abstractmethod
from typing import Optional

# Real-world payment brands providers are named after
PAYMENT_PROVIDER_NAMES = (
    "Visa",
    "Mastercard",
    "American Express",
    "PayPal",
    "Stripe",
    "Square",
    "Alipay",
    "WeChat Pay",
    "Apple Pay",
    "Google Pay",
    "Venmo",
    "Zelle",
    "Klarna",
    "Affirm",
    "Adyen",
)


class ValueProvider(ABC):
    """
    Abstract source of plausible, non-empty field values.

    Each method returns one freshly generated string.
    """

    @abstractmethod
    def full_name(self) -> str:
        """Person full name, e.g. 'Jane Smith'."""
        pass

    @abstractmethod
    def email_domain(self) -> str:
        """Domain part for an email address, e.g. 'gmail.com'."""
        pass

    @abstractmethod
    def phone_number(self) -> str:
        pass

    @abstractmethod
    def street_name(self) -> str:
        pass

    @abstractmethod
    def city(self) -> str:
        pass

    @abstractmethod
    def state(self) -> str:
        pass

    @abstractmethod
    def country(self) -> str:
        pass

    @abstractmethod
    def postal_code(self) -> str:
        pass


class FakerValueProvider(ValueProvider):
    """
    Faker-backed provider.

    Example:
        values = FakerValueProvider(locale="en_US", seed=42)
        values.full_name()
    """

    def __init__(self, locale: str = "en_US", seed: Optional[int] = None):
        from faker import Faker

        self.fake = Faker(locale)
        if seed is not None:
            self.fake.seed_instance(seed)

    def full_name(self) -> str:
        return self.fake.name()

    def email_domain(self) -> str:
        return self.fake.free_email_domain()

    def phone_number(self) -> str:
        return self.fake.phone_number()

    def street_name(self) -> str:
        return self.fake.street_name()

    def city(self) -> str:
        return self.fake.city()

    def state(self) -> str:
        # Not every Faker locale has states; fall back to the administrative unit
        if hasattr(self.fake, "state"):
            return self.fake.state()
        return self.fake.administrative_unit()

    def country(self) -> str:
        return self.fake.country()

    def postal_code(self) -> str:
        return self.fake.postcode()


class MimesisValueProvider(ValueProvider):
    """Mimesis-backed provider. Each mimesis provider gets its own derived seed."""

    def __init__(self, locale: str = "en", seed: Optional[int] = None):
        from mimesis import Address, Person
        from mimesis.locales import Locale

        mimesis_locale = Locale(locale)
        if seed is None:
            self.person = Person(mimesis_locale)
            self.address = Address(mimesis_locale)
        else:
            self.person = Person(mimesis_locale, seed=seed)
            self.address = Address(mimesis_locale, seed=seed + 1)

    def full_name(self) -> str:
        return self.person.full_name()

    def email_domain(self) -> str:
        return self.person.email().split("@", 1)[1]

    def phone_number(self) -> str:
        return self.person.phone_number()

    def street_name(self) -> str:
        return self.address.street_name()

    def city(self) -> str:
        return self.address.city()

    def state(self) -> str:
        return self.address.state()

    def country(self) -> str:
        return self.address.country()

    def postal_code(self) -> str:
        return self.address.postal_code()


VALUE_PROVIDERS = {
    "faker": FakerValueProvider,
    "mimesis": MimesisValueProvider,
}

DEFAULT_LOCALES = {
    "faker": "en_US",
    "mimesis": "en",
}


def validate_locale(name: str, locale: str) -> str:
    """
    Check that a value provider library knows ``locale``.

    Raises:
        ValueError: If the provider or the locale is unknown
    """
    if name == "faker":
        from faker.config import AVAILABLE_LOCALES

        if locale.replace("-", "_") not in AVAILABLE_LOCALES:
            raise ValueError(f"Unknown faker locale: '{locale}'")
    elif name == "mimesis":
        from mimesis.locales import Locale

        try:
            Locale(locale)
        except ValueError:
            raise ValueError(f"Unknown mimesis locale: '{locale}'") from None
    else:
        raise ValueError(f"Unknown value provider: '{name}'")
    return locale


def build_value_provider(
    name: str = "faker", locale: Optional[str] = None, seed: Optional[int] = None
) -> ValueProvider:
    """
    Create a value provider by name.

    Args:
        name: 'faker' or 'mimesis'
        locale: Library-specific locale (defaults to English for both)
        seed: Optional seed for reproducible values

    Raises:
        ValueError: If name is unknown
    """
    if name not in VALUE_PROVIDERS:
        raise ValueError(
            f"Unknown value provider: '{name}'. Must be one of: {', '.join(sorted(VALUE_PROVIDERS))}"
        )
    return VALUE_PROVIDERS[name](locale=locale or DEFAULT_LOCALES[name], seed=seed)

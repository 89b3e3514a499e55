"""
Index sampling for foreign-key assignment.

Transactions pick their user either uniformly or with a power-law skew that
favours low indices, so the earliest users become "hot" keys. Providers are
always picked uniformly.
"""

import random

# Exponent applied to a uniform draw in skewed mode
SKEW_EXPONENT = 3


def sample_user_index(rng: random.Random, n: int, skewed: bool = False) -> int:
    """
    Pick a user index in [0, n).

    Args:
        rng: Random source
        n: Number of users available
        skewed: Use the u**3 power-law draw instead of a uniform one

    Raises:
        ValueError: If n < 1 (there is no user to reference)
    """
    if n < 1:
        raise ValueError(f"Cannot sample a user index from an empty user set (n={n})")
    if not skewed:
        return rng.randrange(n)
    index = int(rng.random() ** SKEW_EXPONENT * n)
    return min(max(index, 0), n - 1)


def sample_provider_index(rng: random.Random, n: int) -> int:
    """Pick a provider index uniformly in [0, n)."""
    if n < 1:
        raise ValueError(f"Cannot sample a provider index from an empty provider set (n={n})")
    return rng.randrange(n)

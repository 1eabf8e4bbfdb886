"""
Random number generation utilities.

Generators never share a PRNG: each call to ``make_prng`` returns a fresh
Alea instance, so two generations with the same seed are independent and
reproducible. Python's ``random`` and NumPy's random module are not used
for terrain generation.
"""

from typing import Optional, Union

from ..core.alea_prng import AleaPRNG

Seed = Union[int, str]

DEFAULT_SEED = "default"


def make_prng(seed: Optional[Seed] = None) -> AleaPRNG:
    """
    Create an Alea PRNG for a map seed.

    Args:
        seed: Integer or string seed. ``None`` uses a fixed default seed.

    Returns:
        A new AleaPRNG instance
    """
    return AleaPRNG(DEFAULT_SEED if seed is None else seed)

"""
Sampling helpers backed by the OS CSPRNG.
"""

import secrets


def int_sample(upper: int, lower: int = 0) -> int:
    """
    Uniform integer in [lower, upper).
    """
    if upper <= lower:
        raise ValueError(f"Empty sampling range [{lower}, {upper})")
    return lower + secrets.randbelow(upper - lower)

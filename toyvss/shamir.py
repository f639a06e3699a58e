"""
Shamir secret sharing over a prime field.

A secret s is the constant term of a random polynomial f of degree t-1.
Participant i holds the point (i, f(i)); any t points pin down f and so f(0).
"""

from collections import namedtuple
from typing import List, Sequence

from .errors import ArithmeticPreconditionError, DuplicateIdentifier
from .modular import modular_division, rem_euclid
from .toyrand import int_sample

# 12th Mersenne prime, handy for sharing secrets outside the curve group.
MERSENNE_127 = 2**127 - 1

# id is the x coordinate of the share. It must be unique and non zero,
# f(0) is the secret.
Share = namedtuple("Share", ["id", "val"])


def evaluate(poly: Sequence[int], x: int, p: int) -> int:
    """
    Evaluate the polynomial with Horner's method.
    poly is ordered by ascending power of x.

    For example let the polynomial be y = ax^2 + bx + c, poly = [c, b, a]:
        step 0: y = a
        step 1: y = a*x + b
        step 2: y = (a*x + b)*x + c
    """
    y = 0
    for coef in reversed(poly):
        y = rem_euclid(y * x + coef, p)
    return y


def random_polynomial(secret: int, t: int, p: int) -> List[int]:
    """
    Polynomial of degree t-1 with the given constant term, the other
    coefficients uniform in [1, p).
    """
    if t < 1:
        raise ArithmeticPreconditionError(f"Threshold must be positive, got {t}")
    if p <= 1:
        raise ArithmeticPreconditionError(f"Modulus must be greater than 1, got {p}")
    return [secret] + [int_sample(p, 1) for _ in range(t - 1)]


def share_secret(secret: int, t: int, n: int, p: int) -> List[Share]:
    """
    Split secret into n shares, any t of which reconstruct it.

    Arguments:
    secret: the value to share, used as f(0).
    t: quorum, at least t shares are needed to reconstruct.
    n: total number of shares, ids run from 1 to n.
    p: prime modulus of the field.
    """
    if t > n:
        raise ArithmeticPreconditionError(f"Threshold {t} exceeds share count {n}")
    if p <= 0:
        raise ArithmeticPreconditionError(f"Modulus must be positive, got {p}")
    poly = random_polynomial(secret, t, p)
    return [Share(i, evaluate(poly, i, p)) for i in range(1, n + 1)]


def check_identifiers(ids: Sequence[int]):
    if len(set(ids)) != len(ids):
        raise DuplicateIdentifier(ids)
    if 0 in ids:
        raise ArithmeticPreconditionError("Share id 0 is the secret itself")


def lagrange_coefficient(x_i: int, ids: Sequence[int], p: int) -> int:
    """
    lambda_i = prod_{j != i} x_j / (x_j - x_i) mod p,
    the weight of share i when interpolating at x = 0.
    """
    lambda_i = 1
    for x_j in ids:
        if x_j == x_i:
            continue
        frac = modular_division(x_j, x_j - x_i, p)
        lambda_i = rem_euclid(lambda_i * frac, p)
    return lambda_i


def lagrange_interpolate(shares: Sequence[Share], p: int) -> int:
    """
    Evaluate the secret f(0) from shares.

    f(0) = sum_i y_i * prod_{j != i} x_j / (x_j - x_i)

    With fewer shares than the threshold the result is some unrelated field
    element, not an error. The caller has to know the threshold.
    """
    ids = [share.id for share in shares]
    check_identifiers(ids)
    total = 0
    for share in shares:
        lambda_i = lagrange_coefficient(share.id, ids, p)
        total = rem_euclid(total + share.val * lambda_i, p)
    return total

"""
Exact integer arithmetic modulo a prime.

Python ints are arbitrary precision, but `%` and `divmod` follow floor
division. Everything here uses the Euclidean convention instead: the
remainder is always non-negative and smaller than |divisor|, so the results
do not depend on the signs of the inputs.
"""

from collections import namedtuple

from .errors import ArithmeticPreconditionError

# gcd == a * bezout_x + b * bezout_y
# a == gcd * reduced_a and b == gcd * reduced_b
ExtendedEuclideanResult = namedtuple(
    "ExtendedEuclideanResult", ["gcd", "bezout_x", "bezout_y", "reduced_a", "reduced_b"])


def div_rem_euclid(a: int, b: int) -> (int, int):
    q, r = divmod(a, b)
    if r < 0:
        # only reachable for a negative divisor
        q, r = q + 1, r - b
    return q, r


def rem_euclid(a: int, m: int) -> int:
    return div_rem_euclid(a, m)[1]


def extended_euclidean(a: int, b: int) -> ExtendedEuclideanResult:
    """
    Iterative extended Euclidean algorithm.

    Each row keeps r_k == a * x_k + b * y_k, starting from
    r_0 = a = 1*a + 0*b and r_1 = b = 0*a + 1*b.
    When the remainder hits zero the previous row holds the gcd and the
    Bezout coefficients, and the last row holds (up to sign) b/gcd and a/gcd.
    """
    prev_r, prev_x, prev_y = a, 1, 0
    curr_r, curr_x, curr_y = b, 0, 1

    while curr_r != 0:
        q, r = div_rem_euclid(prev_r, curr_r)
        x = prev_x - q * curr_x
        y = prev_y - q * curr_y
        prev_r, prev_x, prev_y = curr_r, curr_x, curr_y
        curr_r, curr_x, curr_y = r, x, y

    # a negative divisor can leave the last non-zero remainder negative
    if prev_r < 0:
        prev_r, prev_x, prev_y = -prev_r, -prev_x, -prev_y
    # the reduced forms carry the signs of a and b
    if (a < 0) != (curr_y < 0):
        curr_y = -curr_y
    if (b < 0) != (curr_x < 0):
        curr_x = -curr_x

    return ExtendedEuclideanResult(
        gcd=prev_r,
        bezout_x=prev_x,
        bezout_y=prev_y,
        reduced_a=curr_y,
        reduced_b=curr_x,
    )


def modular_inverse(a: int, p: int) -> int:
    """
    x such that a * x == 1 (mod p), in [0, p).
    """
    if p == 0:
        raise ArithmeticPreconditionError("Modulus must not be zero")
    obj = extended_euclidean(a, p)
    if obj.gcd != 1:
        raise ArithmeticPreconditionError(f"{a} is not invertible modulo {p}")
    return rem_euclid(obj.bezout_x, p)


def modular_division(a: int, b: int, p: int) -> int:
    """
    (a / b) mod p.

    a and b are first divided by their gcd, so exact quotients such as 28/4
    never need an inverse of b.
    """
    if b == 0:
        raise ArithmeticPreconditionError("Division by zero")
    obj = extended_euclidean(a, b)
    a, b = obj.reduced_a, obj.reduced_b
    if b == 1:
        return rem_euclid(a, p)
    b_inv = modular_inverse(b, p)
    return rem_euclid(a * b_inv, p)


def modular_pow(base: int, exp: int, p: int) -> int:
    """
    base^exp mod p by square and multiply.

    Writing exp = sum(d_i * 2^i), the result is the product of
    (base^(2^i))^d_i, and after bit i the running base is base^(2^(i+1)).
    A negative exponent inverts the base first.
    """
    if p == 0:
        raise ArithmeticPreconditionError("Modulus must not be zero")
    base = rem_euclid(base, p)
    if exp < 0:
        base = modular_inverse(base, p)
        exp = -exp
    y = rem_euclid(1, p)
    while exp > 0:
        if exp & 1:
            y = rem_euclid(y * base, p)
        exp >>= 1
        base = rem_euclid(base * base, p)
    return y

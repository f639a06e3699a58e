"""
Group arithmetic on secp256k1 for the Feldman commitments.
Utilities for:
    1. EC point validation
    2. EC point addition
    3. EC point inverse.
    4. EC scalar multiplication
    5. Canonical point encodings (uncompressed, compressed, digest).

    Point addition is implementing:
    https://en.wikipedia.org/wiki/Elliptic_curve_point_multiplication#Point_addition

    Compressed encoding follows SEC1 section 2.3.3:
    https://www.secg.org/sec1-v2.pdf
"""

from collections import namedtuple
from hashlib import blake2b

# Create a simple Point class to represent points on the curve
Point = namedtuple("Point", "x y")

# The point at origin. This means generator * order = O
O = 'Origin'


# SECP256K1 domain params
p = 0xFFFFFFFFFFFFFFFFFFFFFFFFFFFFFFFFFFFFFFFFFFFFFFFFFFFFFFFEFFFFFC2F
a = 0
b = 7
order = 0xFFFFFFFFFFFFFFFFFFFFFFFFFFFFFFFEBAAEDCE6AF48A03BBFD25E8CD0364141
#############################

ZERO_POINT_TOKEN = "ZERO_POINT"
GENERATOR_TOKEN = "GENERATOR"


class Point(Point):
    def __repr__(self):
        """Uncompressed"""
        return f"04{self.x:0>64X}{self.y:0>64X}"


generator = Point(0x79BE667EF9DCBBAC55A06295CE870B07029BFCDB2DCE28D959F2815B16F81798,
                  0x483ada7726a3c4655da4fbfc0e1108a8fd17b448a68554199c47d08ffb10d4b8)


def valid(P):
    """
    wiestrass curve: y^2 = x^3 + ax + b
    Determine whether we have a valid representation of a point
    on our curve.  We assume that the x and y coordinates
    are always reduced modulo p, so that we can compare
    two points for equality with a simple ==.
    """
    if P == O:
        return True
    if not isinstance(P, Point):
        return False
    return (
        (P.y**2 - (P.x**3 + a*P.x + b)) % p == 0 and
        0 <= P.x < p and 0 <= P.y < p)


def scalar_inv_mod_p(x):
    """
    Compute an inverse for x modulo p, assuming that x
    is not divisible by p.

    It calculates the multiplicative inverse  if exponent is negative and mod is prime
    https://docs.python.org/3/library/functions.html#pow
    """
    if x % p == 0:
        raise ZeroDivisionError("Impossible inverse")
    return pow(x, -1, p)


def ec_inv(P):
    """
    Inverse of the point P on the elliptic curve y^2 = x^3 + ax + b.
    https://en.wikipedia.org/wiki/Elliptic_curve_point_multiplication#Point_negation
    """
    if P == O:
        return P

    inv = Point(P.x, (-P.y) % p)
    assert valid(inv)
    return inv


def ec_add(P, Q):
    """
    Sum of the points P and Q on the elliptic curve y^2 = x^3 + ax + b.
    https://en.wikipedia.org/wiki/Elliptic_curve_point_multiplication#Point_addition
    """
    if not (valid(P) and valid(Q)):
        raise ValueError("Invalid inputs")

    # Deal with the special cases where either P, Q, or P + Q is
    # the origin.
    if P == O:
        result = Q
    elif Q == O:
        result = P
    # A + A_inv is the point at origin, the slope below would divide by zero.
    elif Q == ec_inv(P):
        result = O
    else:
        # Cases not involving the origin.
        if P == Q:
            lambdA = (3 * P.x**2 + a) * scalar_inv_mod_p(2 * P.y)
        else:
            lambdA = (Q.y - P.y) * scalar_inv_mod_p(Q.x - P.x)
        x = (lambdA**2 - P.x - Q.x) % p
        y = (lambdA * (P.x - x) - P.y) % p
        result = Point(x, y)

    # The above computations *should* have given us another point
    # on the curve.
    assert valid(result)
    return result


def ec_sum(points):
    ret = O
    for P in points:
        ret = ec_add(ret, P)
    return ret


def ec_scalar_mul(P, scalar):
    scalar %= order
    assert valid(P)
    cache = P
    ret = O
    # keep on doubling the point and only add for binary 1.
    while scalar:
        if scalar & 1:
            ret = ec_add(ret, cache)
        cache = ec_add(cache, cache)
        scalar = scalar >> 1
    assert valid(ret)
    return ret


def pub_key_from_priv(private):
    return ec_scalar_mul(generator, private)


def compressed_hex(point) -> str:
    if point.y % 2 == 0:
        return f"02{point.x:0>64X}"
    else:
        return f"03{point.x:0>64X}"


def point_digest(point) -> str:
    """
    Canonical token for comparing points.

    The origin and the generator map to fixed tokens, every other point to the
    blake2b-128 digest of its compressed encoding.
    """
    if point == O:
        return ZERO_POINT_TOKEN
    if point == generator:
        return GENERATOR_TOKEN
    return blake2b(bytes.fromhex(compressed_hex(point)), digest_size=16).hexdigest()

"""
Tests
"""

import math
import random

import pytest

from toyvss.ec_op import order
from toyvss.errors import ArithmeticPreconditionError
from toyvss.modular import (ExtendedEuclideanResult, extended_euclidean, modular_division,
                            modular_inverse, modular_pow, rem_euclid)


def modular_pow_dumb(base, exp, p):
    base = rem_euclid(base, p)
    if exp < 0:
        base = modular_inverse(base, p)
        exp = -exp
    y = 1
    while exp > 0:
        y = (y * base) % p
        exp -= 1
    return y


def test_rem_euclid():
    assert rem_euclid(7, 3) == 1
    assert rem_euclid(-7, 3) == 2
    assert rem_euclid(7, -3) == 1
    assert rem_euclid(-7, -3) == 2


def test_extended_euclidean():
    obj = extended_euclidean(288, 396)
    assert obj == ExtendedEuclideanResult(gcd=36, bezout_x=-4, bezout_y=3, reduced_a=8, reduced_b=11)


@pytest.mark.parametrize("a,b", [(-288, 396), (288, -396), (-288, -396), (2, -1), (0, 5), (-5, 0)])
def test_extended_euclidean_signs(a, b):
    obj = extended_euclidean(a, b)
    print(f"\na={a} b={b} {obj}")
    assert obj.gcd == math.gcd(a, b)
    assert a * obj.bezout_x + b * obj.bezout_y == obj.gcd
    assert a == obj.gcd * obj.reduced_a
    assert b == obj.gcd * obj.reduced_b


def test_extended_euclidean_coprime():
    for _ in range(50):
        a = random.randint(-2**64, 2**64)
        b = random.randint(1, 2**64)
        if math.gcd(a, b) != 1:
            continue
        obj = extended_euclidean(a, b)
        assert obj.gcd == 1
        assert a * obj.bezout_x + b * obj.bezout_y == 1


def test_modular_inverse():
    assert modular_inverse(-2, 17) == 8
    for _ in range(20):
        a = random.randint(1, order - 1)
        assert (a * modular_inverse(a, order)) % order == 1
        assert modular_inverse(a, order) == pow(a, -1, order)


def test_modular_inverse_preconditions():
    pytest.raises(ArithmeticPreconditionError, modular_inverse, 3, 0)
    pytest.raises(ArithmeticPreconditionError, modular_inverse, 6, 9)
    pytest.raises(ArithmeticPreconditionError, modular_inverse, 0, 17)
    # also a ValueError for callers that do not know about toyvss
    pytest.raises(ValueError, modular_inverse, 0, 17)


def test_modular_division():
    assert modular_division(28, 8, 17) == 12
    # same fraction reduced by gcd(a, b)
    assert modular_division(7, 2, 17) == 12
    # exact division never needs an inverse of b
    assert modular_division(28, 4, 8) == 7
    assert modular_division(2, -1, 17) == 15
    pytest.raises(ArithmeticPreconditionError, modular_division, 1, 0, 17)


def test_modular_division_random():
    for _ in range(20):
        a = random.randint(-order, order)
        b = random.randint(1, order - 1)
        assert (modular_division(a, b, order) * b - a) % order == 0


@pytest.mark.parametrize("base,exp,p", [
    (114, 514, 1919),
    (-114, 514, 1919),
    (514, -114, 1919),
    (3, 0, 7),
    (0, 5, 7),
    (5, 3, 1),
])
def test_modular_pow(base, exp, p):
    est = modular_pow(base, exp, p)
    ans = modular_pow_dumb(base, exp, p)
    assert est == ans


def test_modular_pow_sign_independent():
    assert modular_pow(-114, 514, 1919) == modular_pow(-114 % 1919, 514, 1919)


def test_modular_pow_random():
    p = 7919
    for _ in range(20):
        base = random.randint(-10**6, 10**6)
        if base % p == 0:
            continue
        exp = random.randint(-500, 500)
        assert modular_pow(base, exp, p) == modular_pow_dumb(base, exp, p)
        assert modular_pow(base, exp, p) == pow(base, exp, p)


def test_modular_pow_not_invertible():
    pytest.raises(ArithmeticPreconditionError, modular_pow, 19, -1, 1919)

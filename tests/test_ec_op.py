"""
Tests
"""

import random

import pytest
from ecdsa import SECP256k1, VerifyingKey

from toyvss.ec_op import (GENERATOR_TOKEN, ZERO_POINT_TOKEN, O, Point, compressed_hex, ec_add,
                          ec_inv, ec_scalar_mul, ec_sum, generator, order, point_digest,
                          pub_key_from_priv, valid)


def test_generator():
    # check if order and generator are in sync
    assert O == ec_scalar_mul(generator, order), "Generator seems off"
    assert valid(generator)
    assert generator.x == SECP256k1.generator.x()
    assert generator.y == SECP256k1.generator.y()


def test_scalar_mul_against_ecdsa():
    for _ in range(3):
        secret = random.randint(1, order - 1)
        pub = pub_key_from_priv(secret)
        real = SECP256k1.generator * secret
        assert (pub.x, pub.y) == (real.x(), real.y())


def test_point_addition():
    secret1 = random.randint(0, order - 1)
    secret2 = random.randint(0, order - 1)
    pub1 = pub_key_from_priv(secret1)
    pub2 = pub_key_from_priv(secret2)
    master_secret = (secret1 + secret2) % order
    assert ec_add(pub1, pub2) == pub_key_from_priv(master_secret)
    assert ec_sum([pub1, pub2, O]) == pub_key_from_priv(master_secret)


def test_point_inverse():
    pub = pub_key_from_priv(random.randint(1, order - 1))
    assert ec_add(pub, ec_inv(pub)) == O
    assert ec_inv(O) == O
    assert ec_sum([]) == O


def test_invalid_point():
    assert not valid(Point(1, 1))
    assert not valid((generator.x, generator.y))
    pytest.raises(ValueError, ec_add, generator, Point(1, 1))


def test_compressed_hex():
    secret = random.randint(1, order - 1)
    pub = pub_key_from_priv(secret)
    vk = VerifyingKey.from_string(bytes.fromhex(str(pub)), curve=SECP256k1)
    assert vk.to_string("compressed").hex().upper() == compressed_hex(pub)


def test_point_digest():
    assert point_digest(O) == ZERO_POINT_TOKEN
    assert point_digest(generator) == GENERATOR_TOKEN
    assert point_digest(pub_key_from_priv(1)) == GENERATOR_TOKEN
    assert point_digest(pub_key_from_priv(order)) == ZERO_POINT_TOKEN

    pub = pub_key_from_priv(2)
    digest = point_digest(pub)
    assert len(digest) == 32
    assert digest == point_digest(ec_add(generator, generator))
    assert digest != point_digest(ec_inv(pub))

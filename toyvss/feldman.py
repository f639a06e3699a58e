"""
Feldman verifiable secret sharing on secp256k1.

Every coefficient of the dealer's polynomial is published as coef * G. A share
y = f(id) can then be checked by anyone holding the commitment:

    y * G == sum_k C_k * id^k

Please refer to https://www.cs.umd.edu/~gasarch/TOPICS/secretsharing/feldmanVSS.pdf
and section 2.8 of https://eprint.iacr.org/2020/540.pdf
"""

import logging
from typing import List, Sequence

from .ec_op import O, ec_add, ec_scalar_mul, order, point_digest, valid
from .errors import CommitmentLengthMismatch, ShareVerificationFailure
from .interop import scalar_mul_base
from .modular import rem_euclid
from .shamir import evaluate, random_polynomial
from .toyrand import int_sample

logger = logging.getLogger(__name__)


class VssCommitment(tuple):
    """
    The coefficient commitments [C_0, ..., C_{t-1}] of one participant.
    C_0 is that participant's contribution to the group public key.
    """

    def __new__(cls, points):
        points = tuple(points)
        for P in points:
            if not valid(P):
                raise ValueError(f"Commitment point is not on the curve {P!r}")
        return super().__new__(cls, points)

    def prepare_to_check(self, id: int, polyval: int) -> (str, str):
        """
        Both sides of the Feldman equation as point digests.

        Returns (poly_com, polyval_com) where poly_com is sum_k C_k * id^k
        evaluated by Horner's rule and polyval_com is polyval * G.
        """
        x = rem_euclid(id, order)
        poly_com = O
        for C_k in reversed(self):
            poly_com = ec_add(ec_scalar_mul(poly_com, x), C_k)
        polyval_com = scalar_mul_base(polyval)
        return point_digest(poly_com), point_digest(polyval_com)


def commit(poly: Sequence[int]) -> VssCommitment:
    return VssCommitment(scalar_mul_base(coef) for coef in poly)


def verify_share(commitment: VssCommitment, id: int, polyval: int) -> bool:
    poly_com, polyval_com = commitment.prepare_to_check(id, polyval)
    return poly_com == polyval_com


def check_commitment_length(commitment: Sequence, t: int, sender: int):
    """
    Reject commitments that do not have exactly t points.

    This has to run before any share from the sender is trusted: a longer
    commitment still verifies the sender's shares, but raises the threshold.
    """
    if len(commitment) != t:
        logger.error("Commitment from %d has %d points, expected %d", sender, len(commitment), t)
        raise CommitmentLengthMismatch(sender, t, len(commitment))


def check_share(commitment: VssCommitment, t: int, id: int, polyval: int, sender: int):
    check_commitment_length(commitment, t, sender)
    if not verify_share(commitment, id, polyval):
        logger.error("VSS share verification failed for %d -> %d", sender, id)
        raise ShareVerificationFailure(sender, id)
    logger.debug("VSS share from %d to %d verified", sender, id)


class VssLocalScheme:
    """
    One participant's secret polynomial. It never leaves the participant;
    only its commitment and its evaluations do.
    """

    def __init__(self, poly: List[int]):
        self.poly = [rem_euclid(coef, order) for coef in poly]

    @classmethod
    def new(cls, t: int) -> "VssLocalScheme":
        # the constant term is this participant's piece of the group secret
        return cls(random_polynomial(int_sample(order, 1), t, order))

    def t(self) -> int:
        return len(self.poly)

    @property
    def secret(self) -> int:
        return self.poly[0]

    def commit(self) -> VssCommitment:
        return commit(self.poly)

    def share_to(self, id: int) -> int:
        assert id != 0, "id 0 would reveal the secret"
        return evaluate(self.poly, id, order)

    def __repr__(self):
        return f"VssLocalScheme(t={self.t()})"

"""
Distributed key generation with Feldman VSS, and recovery of the group secret.

Protocol, run concurrently by every member j:
1. Pick a random polynomial f_j of degree t-1. f_j(0) is j's piece of the
    group secret, nobody ever learns the sum.
2. Broadcast the commitment [f_j's coefficients * G].
3. Collect one commitment per member and refuse any that is not exactly t long.
4. Send f_j(i) to every other member i.
5. Check every f_i(j) received against i's commitment.
6. x_j = sum_i f_i(j) is j's share of the group secret, and
    sum_i C_i[0] is the group public key.

Recovery publishes the x_j of a quorum and interpolates them at 0.
There is NO way to recover the group secret without exposing every x_j of the
quorum to whoever reads the broadcast. Signing without exposing the shares
needs a threshold signing protocol such as GG18, which is not provided here.
"""

import asyncio
import enum
import logging
from typing import Dict, Iterable

from .ec_op import order, point_digest
from .errors import InvalidSessionParams, KeyStoreError, ShareVerificationFailure
from .feldman import VssLocalScheme, check_commitment_length, check_share
from .interop import scalar_mul_base
from .keystore import KeyStore
from .modular import rem_euclid
from .params import BROADCAST_ID, SessionParams
from .shamir import Share, check_identifiers, lagrange_interpolate
from .transport import MessageKind, MessageStore

logger = logging.getLogger(__name__)


class DkgState(enum.Enum):
    INIT = "init"
    COMMIT_BROADCAST = "commit_broadcast"
    AWAIT_COMMITMENTS = "await_commitments"
    SHARE_DISTRIBUTION = "share_distribution"
    AWAIT_SHARES_AND_VERIFY = "await_shares_and_verify"
    AGGREGATE = "aggregate"
    FINALIZED = "finalized"
    ABORTED = "aborted"


class DkgParticipant:
    """
    State machine of one member. The KeyStore stays private to the
    participant until it is finalized.
    """

    def __init__(self, my_id: int, params: SessionParams, transport: MessageStore):
        if my_id not in params.members:
            raise InvalidSessionParams(f"{my_id} is not a member of {list(params.members)}")
        self.my_id = my_id
        self.params = params
        self.transport = transport
        self.state = DkgState.INIT
        self.keystore = KeyStore.init(my_id, params.t)

    def _enter(self, state: DkgState):
        logger.debug("participant %d: %s -> %s", self.my_id, self.state.value, state.value)
        self.state = state

    def _others(self):
        return [i for i in self.params.members if i != self.my_id]

    async def _recv(self, kind, sender, recipient):
        return await self.transport.receive(kind, sender, recipient, self.params.recv_timeout)

    async def run(self) -> KeyStore:
        try:
            return await self._run()
        except Exception:
            self._enter(DkgState.ABORTED)
            logger.exception("participant %d aborted the DKG", self.my_id)
            raise

    async def _run(self) -> KeyStore:
        t = self.params.t
        keystore = self.keystore

        # Generate random polynomial. Note that the constant term is the distributed secret.
        keystore.set_scheme(VssLocalScheme.new(t))
        scheme = keystore.vss_scheme

        self._enter(DkgState.COMMIT_BROADCAST)
        await self.transport.broadcast(MessageKind.COMMITMENT, self.my_id, scheme.commit())

        self._enter(DkgState.AWAIT_COMMITMENTS)
        for i in self.params.members:
            com = await self._recv(MessageKind.COMMITMENT, i, BROADCAST_ID)
            # A commitment longer than t means a polynomial of higher degree,
            # which would stealthily raise the threshold of the group key.
            check_commitment_length(com, t, i)
            keystore.add_commitment(i, com)

        self._enter(DkgState.SHARE_DISTRIBUTION)
        for i in self._others():
            await self.transport.publish(MessageKind.SHARE, self.my_id, i, scheme.share_to(i))

        self._enter(DkgState.AWAIT_SHARES_AND_VERIFY)
        vss_secret = scheme.share_to(self.my_id)
        for i in self._others():
            polyval_ij = await self._recv(MessageKind.SHARE, i, self.my_id)
            check_share(keystore.vss_coms[i], t, self.my_id, polyval_ij, i)
            vss_secret += polyval_ij

        self._enter(DkgState.AGGREGATE)
        keystore.set_secret(rem_euclid(vss_secret, order))

        keystore.finalize()
        self._enter(DkgState.FINALIZED)
        logger.info("participant %d finished the DKG, group key digest %s",
                    self.my_id, point_digest(keystore.pk()))
        return keystore


async def run_participant(my_id: int, params: SessionParams, transport: MessageStore) -> KeyStore:
    return await DkgParticipant(my_id, params, transport).run()


async def run_dkg(params: SessionParams, transport: MessageStore) -> Dict[int, KeyStore]:
    """
    Run every member concurrently. The first failure is re-raised after the
    remaining participants have been cancelled.
    """
    tasks = [asyncio.ensure_future(run_participant(i, params, transport))
             for i in params.members]
    try:
        keystores = await asyncio.gather(*tasks)
    except BaseException:
        for task in tasks:
            task.cancel()
        await asyncio.gather(*tasks, return_exceptions=True)
        raise
    return dict(zip(params.members, keystores))


def reconstruct_secret(shares: Iterable[Share]) -> int:
    return lagrange_interpolate(list(shares), order)


def validate_secret(secret: int, keystore: KeyStore):
    if point_digest(scalar_mul_base(secret)) != point_digest(keystore.pk()):
        logger.error("participant %d: recovered secret does not match the group public key",
                     keystore.id)
        raise ShareVerificationFailure(
            "quorum", keystore.id, "Recovered secret does not match the group public key")


async def run_recovery_participant(keystore: KeyStore, attendants, transport: MessageStore,
                                   recv_timeout=None) -> int:
    attendants = list(attendants)
    if not keystore.finalized:
        raise KeyStoreError(f"KeyStore {keystore.id} is not finalized")
    check_identifiers(attendants)
    if keystore.id not in attendants:
        raise InvalidSessionParams(f"{keystore.id} is not among the attendants {attendants}")
    if len(attendants) < keystore.t():
        raise InvalidSessionParams(
            f"{len(attendants)} attendants cannot reach the threshold {keystore.t()}")

    await transport.broadcast(MessageKind.AGGREGATED_SECRET, keystore.id, keystore.vss_secret)

    shares = []
    for i in attendants:
        vss_secret = await transport.receive(MessageKind.AGGREGATED_SECRET, i, BROADCAST_ID, recv_timeout)
        shares.append(Share(i, vss_secret))

    secret = reconstruct_secret(shares)
    validate_secret(secret, keystore)
    logger.info("participant %d recovered the group secret with quorum %s",
                keystore.id, sorted(attendants))
    return secret


async def run_recovery(keystores: Dict[int, KeyStore], attendants, transport: MessageStore,
                       recv_timeout=None) -> int:
    """
    Recovery by every attendant concurrently. All of them must agree.
    """
    attendants = list(attendants)
    recovered = await asyncio.gather(*(
        run_recovery_participant(keystores[i], attendants, transport, recv_timeout)
        for i in attendants))
    disagreeing = [i for i, secret in zip(attendants, recovered) if secret != recovered[0]]
    if disagreeing:
        logger.error("attendants %s recovered a different secret than %d", disagreeing, attendants[0])
        raise ShareVerificationFailure(
            "quorum", disagreeing[0], "Attendants recovered different secrets")
    return recovered[0]

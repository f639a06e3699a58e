"""
Per participant key material produced by the DKG.

A KeyStore starts empty, is filled while the DKG runs and is frozen once every
commitment is stored and every share verified. Only frozen records are
persisted or used for recovery.
"""

import io
import logging
import pickle
from hashlib import sha256
from types import MappingProxyType
from typing import Dict

from ecdsa import SECP256k1, VerifyingKey

from .ec_op import O, Point, ec_sum, valid
from .errors import KeyStoreError
from .feldman import VssCommitment, VssLocalScheme

logger = logging.getLogger(__name__)

FORMAT_VERSION = 1


class KeyStore:
    def __init__(self, id: int, vss_scheme: VssLocalScheme,
                 vss_coms: Dict[int, VssCommitment], vss_secret: int, finalized=False):
        self.id = id
        self.vss_scheme = vss_scheme
        self.vss_coms = dict(vss_coms)
        self.vss_secret = vss_secret
        self.finalized = finalized
        if finalized:
            self._freeze()

    def _freeze(self):
        # read-only views, so pk() can no longer drift from what was verified
        self.vss_coms = MappingProxyType(dict(self.vss_coms))
        self.vss_scheme.poly = tuple(self.vss_scheme.poly)

    @classmethod
    def init(cls, id: int, t: int) -> "KeyStore":
        """
        Empty record: a zero polynomial of length t, no commitments yet.
        """
        return cls(id, VssLocalScheme([0] * t), {}, 0)

    def n(self) -> int:
        """Count of members (shares)"""
        return len(self.vss_coms)

    def t(self) -> int:
        """Minimum count of shares to recover the secret"""
        return self.vss_scheme.t()

    def pk(self):
        """
        Group public key, the sum of every member's C_0.
        Recomputed on every call so it always matches vss_coms.
        """
        return ec_sum(com[0] for com in self.vss_coms.values())

    def verifying_key(self) -> VerifyingKey:
        pk = self.pk()
        if pk == O:
            raise KeyStoreError("The group public key is the point at origin")
        return VerifyingKey.from_string(bytes.fromhex(str(pk)), curve=SECP256k1, hashfunc=sha256)

    def _check_mutable(self):
        if self.finalized:
            raise KeyStoreError(f"KeyStore {self.id} is finalized")

    def set_scheme(self, vss_scheme: VssLocalScheme):
        self._check_mutable()
        self.vss_scheme = vss_scheme

    def add_commitment(self, sender: int, com: VssCommitment):
        self._check_mutable()
        self.vss_coms[sender] = com

    def set_secret(self, vss_secret: int):
        self._check_mutable()
        self.vss_secret = vss_secret

    def finalize(self):
        self._check_mutable()
        if self.id not in self.vss_coms:
            raise KeyStoreError(f"KeyStore {self.id} has no commitment of its own")
        self.finalized = True
        self._freeze()
        logger.info("KeyStore %d finalized with t=%d n=%d", self.id, self.t(), self.n())

    def to_bytes(self) -> bytes:
        """
        Pickle of plain built-in values only, so loading never has to import
        anything.
        """
        state = {
            "version": FORMAT_VERSION,
            "id": self.id,
            "poly": tuple(self.vss_scheme.poly),
            "coms": {
                sender: tuple(None if P == O else (P.x, P.y) for P in com)
                for sender, com in self.vss_coms.items()
            },
            "secret": self.vss_secret,
            "finalized": self.finalized,
        }
        return pickle.dumps(state, protocol=pickle.HIGHEST_PROTOCOL)

    @classmethod
    def from_bytes(cls, blob: bytes) -> "KeyStore":
        try:
            state = _PlainUnpickler(io.BytesIO(blob)).load()
            if state["version"] != FORMAT_VERSION:
                raise KeyStoreError(f"Unsupported KeyStore format {state['version']}")
            coms = {}
            for sender, points in state["coms"].items():
                points = [O if xy is None else Point(*xy) for xy in points]
                if not all(valid(P) for P in points):
                    raise KeyStoreError(f"Commitment of {sender} has a point off the curve")
                coms[sender] = VssCommitment(points)
            return cls(state["id"], VssLocalScheme(list(state["poly"])), coms,
                       state["secret"], state["finalized"])
        except (pickle.UnpicklingError, EOFError, IndexError, KeyError, TypeError, ValueError) as e:
            raise KeyStoreError(f"Malformed KeyStore blob: {e}") from e

    def __eq__(self, other):
        if not isinstance(other, KeyStore):
            return NotImplemented
        return (self.id == other.id and
                tuple(self.vss_scheme.poly) == tuple(other.vss_scheme.poly) and
                dict(self.vss_coms) == dict(other.vss_coms) and
                self.vss_secret == other.vss_secret and
                self.finalized == other.finalized)

    def __repr__(self):
        return f"KeyStore(id={self.id}, t={self.t()}, n={self.n()}, finalized={self.finalized})"


class _PlainUnpickler(pickle.Unpickler):
    def find_class(self, module, name):
        raise pickle.UnpicklingError(f"Refusing to load global {module}.{name}")


class KeyStoreDisk:
    """
    Stand-in for durable storage: member id -> serialized KeyStore.
    """

    def __init__(self):
        self._blobs = {}

    def save(self, keystore: KeyStore):
        if not keystore.finalized:
            raise KeyStoreError(f"Refusing to persist unfinished KeyStore {keystore.id}")
        self._blobs[keystore.id] = keystore.to_bytes()

    def load(self, id: int) -> KeyStore:
        if id not in self._blobs:
            raise KeyStoreError(f"No KeyStore saved for {id}")
        keystore = KeyStore.from_bytes(self._blobs[id])
        if keystore.id != id:
            raise KeyStoreError(f"KeyStore saved under {id} belongs to {keystore.id}")
        return keystore

    def __contains__(self, id):
        return id in self._blobs

    def __len__(self):
        return len(self._blobs)

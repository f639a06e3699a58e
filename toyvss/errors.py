"""
Failure kinds raised by the sharing primitives and the DKG session.

None of these are retried: an arithmetic precondition is a caller bug, and a
bad commitment or share cannot be fixed by resending it.
"""


class VssError(Exception):
    """Base class for everything raised by toyvss."""


class ArithmeticPreconditionError(VssError, ValueError):
    """Zero modulus, non-invertible element or impossible sharing parameters."""


class DuplicateIdentifier(VssError, ValueError):
    def __init__(self, ids):
        self.ids = sorted(ids)
        super().__init__(f"Share identifiers are not unique {self.ids}")


class CommitmentLengthMismatch(VssError):
    """
    A commitment does not have exactly t points.

    A longer commitment means the sender used a polynomial of higher degree,
    which silently raises the threshold of the group key:
    https://blog.trailofbits.com/2024/02/20/breaking-the-shared-key-in-threshold-signature-schemes/
    """

    def __init__(self, sender, expected, actual):
        self.sender = sender
        self.expected = expected
        self.actual = actual
        super().__init__(
            f"Commitment from {sender} has {actual} points, threshold is {expected}")


class ShareVerificationFailure(VssError):
    def __init__(self, sender, recipient, detail="VSS share verification failed"):
        self.sender = sender
        self.recipient = recipient
        super().__init__(f"{detail} for {sender} -> {recipient}")


class TransportUnavailable(VssError):
    def __init__(self, key, timeout):
        self.key = key
        self.timeout = timeout
        super().__init__(f"No message for {key} after {timeout}s")


class DuplicateMessage(VssError):
    def __init__(self, key):
        self.key = key
        super().__init__(f"Message already published for {key}")


class InvalidSessionParams(VssError, ValueError):
    pass


class KeyStoreError(VssError):
    pass

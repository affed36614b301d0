"""Error taxonomy for launch planning.

- ``ValidationError``: the caller's configuration is wrong. Never retried.
- ``ConsistencyError``: two computations that must agree did not (address
  re-derivation, proof verification). Signals a data-integrity defect.
- ``CollaboratorError``: an external service timed out or failed in transport.
  Safe to retry at the caller's discretion; never retried internally.
- ``StateError``: an object was used in the wrong lifecycle state, or the
  requested contract schema does not exist.
"""

from __future__ import annotations


class LaunchError(Exception):
    pass


class ValidationError(LaunchError, ValueError):
    def __init__(self, field: str | None, message: str):
        self.field = field
        self.message = message
        super().__init__(f"{field}: {message}" if field else message)


class InvalidValuation(ValidationError):
    def __init__(self, value: object, field: str | None = "market_cap"):
        self.value = value
        super().__init__(field, f"valuation must be a positive finite number, got {value!r}")


class InvalidAddress(ValidationError):
    def __init__(self, field: str | None, value: object):
        self.value = value
        super().__init__(field, f"invalid address {value!r}")


class AllocationSumError(ValidationError):
    """A basis-point partition does not add up.

    ``delta`` is ``actual - expected``: negative for a shortfall, positive for an
    overshoot. ``index`` points at the offending entry when one can be blamed.
    """

    def __init__(
        self,
        field: str | None,
        *,
        expected: int,
        actual: int,
        index: int | None = None,
        message: str | None = None,
    ):
        self.expected = expected
        self.actual = actual
        self.index = index
        self.delta = actual - expected
        if message is None:
            if self.delta < 0:
                message = (
                    f"shares sum to {actual} bps, {-self.delta} bps short of {expected}"
                )
            else:
                message = (
                    f"shares sum to {actual} bps, {self.delta} bps over {expected}"
                )
            if index is not None:
                message = f"entry {index}: {message}"
        super().__init__(field, message)

    @property
    def shortfall(self) -> int:
        return max(0, -self.delta)

    @property
    def overshoot(self) -> int:
        return max(0, self.delta)


class DuplicateBeneficiary(ValidationError):
    def __init__(self, account: str, field: str | None = "entries"):
        self.account = account
        super().__init__(field, f"duplicate beneficiary {account}")


class EmptyAllocationList(ValidationError):
    def __init__(self, field: str | None = "entries"):
        super().__init__(field, "allocation list is empty")


class ConsistencyError(LaunchError):
    pass


class AddressMismatch(ConsistencyError):
    def __init__(self, expected: str, actual: str):
        self.expected = expected
        self.actual = actual
        super().__init__(
            f"Derived address {actual} does not match claimed address {expected}"
        )


class VanitySuffixMismatch(ConsistencyError):
    def __init__(self, address: str, suffix: str):
        self.address = address
        self.suffix = suffix
        super().__init__(f"Derived address {address} does not end with {suffix}")


class ProofVerificationError(ConsistencyError):
    pass


class CollaboratorError(LaunchError):
    def __init__(self, service: str, message: str, *, retryable: bool = True):
        self.service = service
        self.retryable = retryable
        super().__init__(f"{service}: {message}")


class StateError(LaunchError):
    pass


class MerkleTreeNotBuilt(StateError):
    def __init__(self):
        super().__init__("Allocation tree has not been built")


class SchemaNotFound(StateError):
    def __init__(self, generation: str, chain_id: int):
        self.generation = generation
        self.chain_id = chain_id
        super().__init__(
            f"No contract schema for generation {generation!r} on chain {chain_id}"
        )

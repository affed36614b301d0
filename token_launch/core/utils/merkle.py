"""Airdrop allocation tree.

Layout and hashing follow OpenZeppelin's ``StandardMerkleTree`` ("standard-v1")
so roots and proofs verify against ``MerkleProof.verify`` on chain and against
trees produced by the JS tooling:

- leaf = keccak256(keccak256(abi.encode(address account, uint256 amount)))
- leaves are sorted by hash and stored at the end of a flat array of length
  2n - 1, in reverse order
- node i = keccak256(sorted(tree[2i + 1], tree[2i + 2])) for the remaining slots
"""

from __future__ import annotations

from collections.abc import Iterable, Mapping, Sequence
from dataclasses import dataclass
from decimal import Decimal
from typing import Any

from eth_abi import encode as abi_encode
from eth_abi.exceptions import EncodingError
from eth_utils import decode_hex, encode_hex, keccak
from loguru import logger

from token_launch.core.constants import TOKEN_DECIMALS
from token_launch.core.constants.launch_abi import AIRDROP_EXTENSION_TYPES
from token_launch.core.errors import (
    DuplicateBeneficiary,
    EmptyAllocationList,
    MerkleTreeNotBuilt,
    ProofVerificationError,
    StateError,
    ValidationError,
)
from token_launch.core.utils.addresses import checksum
from token_launch.core.utils.units import to_base_units

TREE_FORMAT = "standard-v1"
LEAF_ENCODING = ["address", "uint256"]

Recipient = tuple[str, str | int | float | Decimal] | Mapping[str, Any]


@dataclass(frozen=True)
class AllocationEntry:
    account: str
    amount: int


@dataclass(frozen=True)
class AllocationProof:
    entry: AllocationEntry
    proof: list[str]
    tree_index: int


def _as_bytes(value: str | bytes) -> bytes:
    return bytes(value) if isinstance(value, bytes | bytearray) else decode_hex(value)


def leaf_hash(entry: AllocationEntry) -> bytes:
    encoded = abi_encode(LEAF_ENCODING, [entry.account, int(entry.amount)])
    return keccak(keccak(encoded))


def hash_pair(a: bytes, b: bytes) -> bytes:
    return keccak(a + b) if a <= b else keccak(b + a)


def process_proof(leaf: bytes, proof: Iterable[str | bytes]) -> bytes:
    node = leaf
    for sibling in proof:
        node = hash_pair(node, _as_bytes(sibling))
    return node


def verify_proof(
    root: str | bytes, entry: AllocationEntry, proof: Sequence[str | bytes]
) -> bool:
    """Check ``entry`` against ``root`` using only the sibling path."""
    try:
        account = checksum(entry.account, "account")
        leaf = leaf_hash(AllocationEntry(account=account, amount=int(entry.amount)))
        return process_proof(leaf, proof) == _as_bytes(root)
    except (ValueError, TypeError, OverflowError, EncodingError):
        return False


def encode_airdrop_extension_data(
    merkle_root: str | bytes, lockup_seconds: int, vesting_seconds: int
) -> bytes:
    root = _as_bytes(merkle_root)
    if len(root) != 32:
        raise ValidationError("airdrop.merkle_root", "merkle root must be 32 bytes")
    return abi_encode(
        AIRDROP_EXTENSION_TYPES, [root, int(lockup_seconds), int(vesting_seconds)]
    )


def _sibling_index(i: int) -> int:
    return i + 1 if i % 2 else i - 1


def _parent_index(i: int) -> int:
    return (i - 1) // 2


def _parse_recipient(recipient: Recipient, where: str) -> tuple[str, Any]:
    if isinstance(recipient, Mapping):
        account = recipient.get("account", recipient.get("address"))
        amount = recipient.get("amount")
    else:
        try:
            account, amount = recipient
        except (TypeError, ValueError) as exc:
            raise ValidationError(where, "expected an (account, amount) pair") from exc
    if amount is None:
        raise ValidationError(f"{where}.amount", "amount is required")
    return account, amount


class AllocationTree:
    """Build-once commitment over (account, amount) entries.

    Amounts passed to :meth:`build` are human token amounts and are scaled by
    ``10 ** token_decimals``. Pass ``token_decimals=0`` to supply base units.

    By default an account may appear only once. With
    ``allow_multiple_entries=True`` an account may hold several distinct
    entries (for example separate vesting buckets), but an identical
    (account, amount) leaf is still rejected.
    """

    def __init__(
        self,
        *,
        token_decimals: int = TOKEN_DECIMALS,
        allow_multiple_entries: bool = False,
    ):
        if token_decimals < 0:
            raise ValidationError("token_decimals", "decimals must be non-negative")
        self.token_decimals = token_decimals
        self.allow_multiple_entries = allow_multiple_entries
        self._entries: list[AllocationEntry] = []
        self._tree: list[bytes] = []
        # position in self._entries -> index in self._tree
        self._tree_index: list[int] = []

    @property
    def is_built(self) -> bool:
        return bool(self._tree)

    def _require_built(self) -> None:
        if not self._tree:
            raise MerkleTreeNotBuilt()

    @property
    def root(self) -> str:
        self._require_built()
        return encode_hex(self._tree[0])

    @property
    def entries(self) -> list[AllocationEntry]:
        self._require_built()
        return list(self._entries)

    @property
    def total_amount(self) -> int:
        self._require_built()
        return sum(e.amount for e in self._entries)

    def __len__(self) -> int:
        return len(self._entries)

    def build(self, recipients: Iterable[Recipient], *, field: str = "entries") -> str:
        if self._tree:
            raise StateError("Allocation tree is already built")

        entries: list[AllocationEntry] = []
        for i, recipient in enumerate(recipients):
            account, amount = _parse_recipient(recipient, f"{field}.{i}")
            account = checksum(account, f"{field}.{i}.account")
            try:
                base_amount = to_base_units(amount, self.token_decimals)
            except ValueError as exc:
                raise ValidationError(f"{field}.{i}.amount", str(exc)) from exc
            entries.append(AllocationEntry(account=account, amount=base_amount))

        self._build_from_entries(entries, field)
        logger.debug(f"Built allocation tree: {len(entries)} entries, root {self.root}")
        return self.root

    def _build_from_entries(
        self, entries: list[AllocationEntry], field: str = "entries"
    ) -> None:
        if not entries:
            raise EmptyAllocationList(field)

        hashes = [leaf_hash(e) for e in entries]
        seen_accounts: set[str] = set()
        seen_leaves: set[bytes] = set()
        for entry, h in zip(entries, hashes, strict=True):
            if h in seen_leaves:
                raise DuplicateBeneficiary(entry.account, field)
            if entry.account in seen_accounts and not self.allow_multiple_entries:
                raise DuplicateBeneficiary(entry.account, field)
            seen_leaves.add(h)
            seen_accounts.add(entry.account)

        n = len(entries)
        order = sorted(range(n), key=lambda i: hashes[i])
        tree: list[bytes] = [b""] * (2 * n - 1)
        tree_index = [0] * n
        for leaf_pos, entry_pos in enumerate(order):
            idx = len(tree) - 1 - leaf_pos
            tree[idx] = hashes[entry_pos]
            tree_index[entry_pos] = idx
        for i in range(len(tree) - 1 - n, -1, -1):
            tree[i] = hash_pair(tree[2 * i + 1], tree[2 * i + 2])

        self._entries = entries
        self._tree = tree
        self._tree_index = tree_index

    def _proof_at(self, tree_index: int) -> list[str]:
        proof: list[str] = []
        i = tree_index
        while i > 0:
            proof.append(encode_hex(self._tree[_sibling_index(i)]))
            i = _parent_index(i)
        return proof

    def proofs_for(self, account: str) -> list[AllocationProof]:
        """Every entry held by ``account`` with its proof; empty if none."""
        self._require_built()
        try:
            target = checksum(account, "account")
        except ValidationError:
            return []
        return [
            AllocationProof(
                entry=entry,
                proof=self._proof_at(self._tree_index[pos]),
                tree_index=self._tree_index[pos],
            )
            for pos, entry in enumerate(self._entries)
            if entry.account == target
        ]

    def dump(self) -> dict[str, Any]:
        self._require_built()
        return {
            "format": TREE_FORMAT,
            "leafEncoding": list(LEAF_ENCODING),
            "tree": [encode_hex(node) for node in self._tree],
            "values": [
                {"value": [e.account, str(e.amount)], "treeIndex": self._tree_index[pos]}
                for pos, e in enumerate(self._entries)
            ],
        }

    @classmethod
    def load(
        cls, data: Mapping[str, Any], *, token_decimals: int = TOKEN_DECIMALS
    ) -> AllocationTree:
        """Restore a dumped tree, checking every node against the values."""
        if data.get("format") != TREE_FORMAT:
            raise ValidationError("format", f"unsupported tree format {data.get('format')!r}")
        if list(data.get("leafEncoding") or []) != LEAF_ENCODING:
            raise ValidationError("leafEncoding", f"expected {LEAF_ENCODING}")

        tree = cls(token_decimals=token_decimals, allow_multiple_entries=True)
        entries = [
            AllocationEntry(
                account=checksum(v["value"][0], f"values.{i}.value"),
                amount=int(v["value"][1]),
            )
            for i, v in enumerate(data.get("values") or [])
        ]
        tree._build_from_entries(entries, "values")

        stored = [_as_bytes(node) for node in data.get("tree") or []]
        if stored != tree._tree:
            raise ProofVerificationError("Stored tree does not match its values")
        for i, v in enumerate(data["values"]):
            if int(v["treeIndex"]) != tree._tree_index[i]:
                raise ProofVerificationError(f"values.{i}: treeIndex does not match leaf")
        return tree

from __future__ import annotations

import random

import pytest
from eth_abi import decode as abi_decode

from token_launch.core.constants.launch_abi import AIRDROP_EXTENSION_TYPES
from token_launch.core.errors import (
    DuplicateBeneficiary,
    EmptyAllocationList,
    InvalidAddress,
    MerkleTreeNotBuilt,
    ProofVerificationError,
    StateError,
    ValidationError,
)
from token_launch.core.utils.merkle import (
    AllocationEntry,
    AllocationTree,
    encode_airdrop_extension_data,
    hash_pair,
    leaf_hash,
    verify_proof,
)

ACCOUNT_A = "0x5aAeb6053F3E94C9b9A09f33669435E7Ef1BeAed"
ACCOUNT_B = "0xfB6916095ca1df60bB79Ce92cE3Ea74c37c5d359"
ACCOUNT_C = "0xdbF03B407c01E7cD3CBea99509d93f8DDDC8C6FB"
ACCOUNT_D = "0xD1220A0cf47c7B9Be7A2E6BA89F429762e7b9aDb"

ABC = [
    (ACCOUNT_A, 200000000),
    (ACCOUNT_B, 50000000),
    (ACCOUNT_C, 10000000),
]


def _built(recipients, **kwargs) -> AllocationTree:
    tree = AllocationTree(**kwargs)
    tree.build(recipients)
    return tree


def test_abc_root_is_stable_and_b_verifies():
    first = _built(ABC)
    second = _built(ABC)
    assert first.root == second.root
    assert first.root.startswith("0x")
    assert len(first.root) == 66

    [proof_b] = first.proofs_for(ACCOUNT_B)
    assert proof_b.entry == AllocationEntry(ACCOUNT_B, 50000000 * 10**18)
    assert verify_proof(first.root, proof_b.entry, proof_b.proof)


def test_every_entry_verifies_and_foreign_entries_do_not():
    tree = _built(ABC)
    for account, _ in ABC:
        for p in tree.proofs_for(account):
            assert verify_proof(tree.root, p.entry, p.proof)

    [proof_a] = tree.proofs_for(ACCOUNT_A)
    assert not verify_proof(
        tree.root, AllocationEntry(ACCOUNT_A, proof_a.entry.amount + 1), proof_a.proof
    )
    assert not verify_proof(
        tree.root, AllocationEntry(ACCOUNT_D, proof_a.entry.amount), proof_a.proof
    )


@pytest.mark.parametrize("amount", [-1, 2**256])
def test_unencodable_amount_does_not_verify(amount):
    tree = _built(ABC)
    [proof_a] = tree.proofs_for(ACCOUNT_A)
    assert verify_proof(tree.root, AllocationEntry(ACCOUNT_A, amount), proof_a.proof) is False


def test_root_independent_of_input_order():
    recipients = ABC + [(ACCOUNT_D, "12.5")]
    shuffled = list(recipients)
    random.Random(7).shuffle(shuffled)
    assert _built(recipients).root == _built(list(reversed(recipients))).root
    assert _built(recipients).root == _built(shuffled).root


def test_single_entry_root_is_leaf():
    tree = _built([(ACCOUNT_A, 1)])
    leaf = leaf_hash(AllocationEntry(ACCOUNT_A, 10**18))
    assert tree.root == "0x" + leaf.hex()
    [p] = tree.proofs_for(ACCOUNT_A)
    assert p.proof == []
    assert verify_proof(tree.root, p.entry, p.proof)


def test_two_entry_root_is_sorted_pair():
    tree = _built([(ACCOUNT_A, 1), (ACCOUNT_B, 2)], token_decimals=0)
    la = leaf_hash(AllocationEntry(ACCOUNT_A, 1))
    lb = leaf_hash(AllocationEntry(ACCOUNT_B, 2))
    assert tree.root == "0x" + hash_pair(la, lb).hex()
    assert hash_pair(la, lb) == hash_pair(lb, la)


def test_accounts_are_canonicalized():
    tree = _built([(ACCOUNT_A.lower(), 5)])
    assert tree.entries[0].account == ACCOUNT_A
    assert len(tree.proofs_for(ACCOUNT_A.lower())) == 1


def test_mapping_recipients_and_decimal_scaling():
    tree = _built(
        [{"account": ACCOUNT_A, "amount": "0.000001"}, {"address": ACCOUNT_B, "amount": 3}],
        token_decimals=6,
    )
    amounts = {e.account: e.amount for e in tree.entries}
    assert amounts == {ACCOUNT_A: 1, ACCOUNT_B: 3_000_000}
    assert tree.total_amount == 3_000_001


def test_absent_account_has_no_proofs():
    tree = _built(ABC)
    assert tree.proofs_for(ACCOUNT_D) == []
    assert tree.proofs_for("not-an-address") == []


def test_empty_list_rejected():
    with pytest.raises(EmptyAllocationList):
        AllocationTree().build([])


def test_duplicate_account_rejected():
    with pytest.raises(DuplicateBeneficiary) as exc_info:
        AllocationTree().build([(ACCOUNT_A, 1), (ACCOUNT_A.lower(), 2)])
    assert exc_info.value.account == ACCOUNT_A


def test_multiple_entries_when_allowed():
    tree = _built([(ACCOUNT_A, 1), (ACCOUNT_A, 2), (ACCOUNT_B, 3)], allow_multiple_entries=True)
    proofs = tree.proofs_for(ACCOUNT_A)
    assert sorted(p.entry.amount for p in proofs) == [10**18, 2 * 10**18]
    for p in proofs:
        assert verify_proof(tree.root, p.entry, p.proof)


def test_identical_leaf_rejected_even_when_multiple_allowed():
    with pytest.raises(DuplicateBeneficiary):
        AllocationTree(allow_multiple_entries=True).build([(ACCOUNT_A, 1), (ACCOUNT_A, 1)])


def test_invalid_inputs():
    with pytest.raises(InvalidAddress):
        AllocationTree().build([("0x123", 1)])
    with pytest.raises(ValidationError, match=r"entries\.0\.amount"):
        AllocationTree().build([(ACCOUNT_A, -1)])


def test_build_twice_is_state_error():
    tree = _built(ABC)
    with pytest.raises(StateError):
        tree.build(ABC)


def test_unbuilt_access():
    tree = AllocationTree()
    with pytest.raises(MerkleTreeNotBuilt):
        _ = tree.root
    with pytest.raises(MerkleTreeNotBuilt):
        tree.proofs_for(ACCOUNT_A)
    with pytest.raises(MerkleTreeNotBuilt):
        tree.dump()


def test_dump_layout():
    tree = _built(ABC)
    dumped = tree.dump()
    assert dumped["format"] == "standard-v1"
    assert dumped["leafEncoding"] == ["address", "uint256"]
    assert len(dumped["tree"]) == 2 * len(ABC) - 1
    assert dumped["tree"][0] == tree.root
    assert [v["value"][0] for v in dumped["values"]] == [a for a, _ in ABC]
    assert dumped["values"][1]["value"][1] == str(50000000 * 10**18)
    assert {v["treeIndex"] for v in dumped["values"]} == {2, 3, 4}


def test_load_round_trip_serves_same_proofs():
    tree = _built(ABC)
    restored = AllocationTree.load(tree.dump())
    assert restored.root == tree.root
    assert restored.proofs_for(ACCOUNT_C) == tree.proofs_for(ACCOUNT_C)


def test_load_detects_tampering():
    dumped = _built(ABC).dump()
    dumped["values"][0]["value"][1] = "1"
    with pytest.raises(ProofVerificationError):
        AllocationTree.load(dumped)


def test_load_rejects_unknown_format():
    dumped = _built(ABC).dump()
    dumped["format"] = "simple-v1"
    with pytest.raises(ValidationError):
        AllocationTree.load(dumped)


def test_airdrop_extension_data():
    tree = _built(ABC)
    data = encode_airdrop_extension_data(tree.root, 86400, 0)
    root, lockup, vesting = abi_decode(AIRDROP_EXTENSION_TYPES, data)
    assert "0x" + root.hex() == tree.root
    assert (lockup, vesting) == (86400, 0)


def test_airdrop_extension_rejects_short_root():
    with pytest.raises(ValidationError):
        encode_airdrop_extension_data("0x1234", 86400, 0)

import argparse
import asyncio
import csv
import json
import sys
from decimal import Decimal, InvalidOperation
from pathlib import Path

from loguru import logger

from token_launch.core.clients.AllocationRegistryClient import (
    AllocationRegistryClient,
    register_allocation_tree,
)
from token_launch.core.errors import LaunchError
from token_launch.core.utils.merkle import AllocationTree, verify_proof
from token_launch.core.utils.units import format_base_units


def _is_number(value: str) -> bool:
    try:
        Decimal(value)
    except InvalidOperation:
        return False
    return True


def read_allocations(path: Path) -> list[tuple[str, str]]:
    """``account,amount`` rows.

    The first row is treated as a header only when its amount column is not a
    number; every other row is passed through for validation.
    """
    rows: list[tuple[str, str]] = []
    first = True
    with path.open(newline="") as f:
        for row in csv.reader(f):
            if not row or not row[0].strip() or row[0].strip().startswith("#"):
                continue
            if len(row) < 2:
                raise ValueError(f"{path}: expected 'account,amount', got {row!r}")
            account, amount = row[0].strip(), row[1].strip()
            if first:
                first = False
                if not _is_number(amount):
                    continue
            rows.append((account, amount))
    return rows


def build(args: argparse.Namespace) -> int:
    tree = AllocationTree(
        token_decimals=args.decimals, allow_multiple_entries=args.allow_multiple
    )
    tree.build(read_allocations(args.csv))
    dumped = tree.dump()
    if args.out:
        args.out.write_text(json.dumps(dumped, indent=2))
        logger.info(f"Wrote tree to {args.out}")
    else:
        print(json.dumps(dumped, indent=2))
    print(
        f"root={tree.root} entries={len(tree)} "
        f"total={format_base_units(tree.total_amount, args.decimals)}",
        file=sys.stderr,
    )
    return 0


def proof(args: argparse.Namespace) -> int:
    tree = AllocationTree.load(json.loads(args.tree.read_text()))
    proofs = tree.proofs_for(args.account)
    if not proofs:
        print(f"{args.account} has no allocation in this tree", file=sys.stderr)
        return 1
    out = []
    for p in proofs:
        if not verify_proof(tree.root, p.entry, p.proof):
            raise LaunchError(f"Proof for {p.entry.account} does not verify")
        out.append(
            {
                "account": p.entry.account,
                "amount": str(p.entry.amount),
                "proof": p.proof,
            }
        )
    print(json.dumps({"root": tree.root, "allocations": out}, indent=2))
    return 0


def register(args: argparse.Namespace) -> int:
    tree = AllocationTree.load(json.loads(args.tree.read_text()))

    async def _run() -> bool:
        registry = AllocationRegistryClient(base_url=args.registry_url)
        try:
            return await register_allocation_tree(
                registry, token_address=args.token_address, tree=tree
            )
        finally:
            await registry.client.aclose()

    ok = asyncio.run(_run())
    print("registered" if ok else "registration failed", file=sys.stderr)
    return 0 if ok else 1


def main() -> int:
    parser = argparse.ArgumentParser(description="Build and query airdrop allocation trees")
    sub = parser.add_subparsers(dest="command", required=True)

    p_build = sub.add_parser("build", help="Build a tree from an account,amount CSV")
    p_build.add_argument("csv", type=Path)
    p_build.add_argument("--out", type=Path, default=None, help="Write the dumped tree here")
    p_build.add_argument(
        "--decimals",
        type=int,
        default=18,
        help="Scale CSV amounts by 10**decimals (0 if the CSV holds base units)",
    )
    p_build.add_argument(
        "--allow-multiple",
        action="store_true",
        help="Allow several distinct entries per account",
    )
    p_build.set_defaults(func=build)

    p_proof = sub.add_parser("proof", help="Print the proofs for an account")
    p_proof.add_argument("tree", type=Path)
    p_proof.add_argument("account")
    p_proof.set_defaults(func=proof)

    p_register = sub.add_parser(
        "register", help="Publish a dumped tree to the allocation registry"
    )
    p_register.add_argument("tree", type=Path)
    p_register.add_argument("token_address")
    p_register.add_argument("--registry-url", default=None)
    p_register.set_defaults(func=register)

    args = parser.parse_args()
    try:
        return args.func(args)
    except (LaunchError, ValueError) as exc:
        print(f"error: {exc}", file=sys.stderr)
        return 2


if __name__ == "__main__":
    raise SystemExit(main())

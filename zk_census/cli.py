"""
Command-Line Interface for zk-census

Manage a census file, extract proof requests and check them with the
inclusion circuit.

Census files are YAML:

    hash: poseidon
    depth: 3
    members:
      - "0x2b1c..."   # public values, hash1(secret)
"""

import dataclasses
import logging
import sys
from pathlib import Path
from typing import Optional, Tuple

import click
import yaml

from zk_census import DISCLAIMER, __version__
from zk_census.census_protocol import (
    CensusProtocolError,
    InclusionCircuit,
    InclusionStatement,
    MerkleTree,
    ProofRequest,
    derive_public_value,
    get_hash_function,
    pad_leaves,
)
from zk_census.census_protocol.config import HASH_BACKENDS, MAX_TREE_DEPTH
from zk_census.census_protocol.field import field_from_hex, field_to_hex
from zk_census.census_protocol.interfaces import HashFunction
from zk_census.census_protocol.security import RandomnessSource, hash_to_field
from zk_census.census_protocol.test_vectors import census_vectors

logger = logging.getLogger(__name__)

KEYGEN_DOMAIN = b"ZK_CENSUS_V1_KEYGEN"


@click.group()
@click.version_option(version=__version__)
@click.option("--verbose", is_flag=True, help="Enable debug logging")
def main(verbose):
    """
    zk-census - anonymous census membership proofs

    ⚠️  PROOF OF CONCEPT - NOT PRODUCTION READY
    """
    if verbose:
        logging.basicConfig(
            level=logging.DEBUG,
            format="%(asctime)s %(levelname)s %(name)s: %(message)s",
        )


def _fail(message: str) -> None:
    click.echo(click.style(f"✗ {message}", fg="red"), err=True)
    sys.exit(1)


def _read_census_file(path: Path) -> dict:
    if not path.exists():
        return {"members": []}
    with path.open("r", encoding="utf-8") as handle:
        data = yaml.safe_load(handle) or {}
    if not isinstance(data, dict):
        raise ValueError(f"{path}: census file must be a mapping")

    members = data.setdefault("members", [])
    if not isinstance(members, list):
        raise ValueError(f"{path}: 'members' must be a list")
    for idx, member in enumerate(members):
        if isinstance(member, bool) or not isinstance(member, (str, int)):
            raise ValueError(
                f"{path}: members[{idx}] must be a hex string or an int, "
                f"got {type(member).__name__}"
            )

    depth = data.get("depth")
    if depth is not None:
        _check_depth(depth, f"{path}: 'depth'")
    hash_name = data.get("hash")
    if hash_name is not None and not isinstance(hash_name, str):
        raise ValueError(f"{path}: 'hash' must be a string")
    return data


def _check_depth(depth, label: str) -> int:
    if isinstance(depth, bool) or not isinstance(depth, int):
        raise ValueError(f"{label} must be an int")
    if not 0 <= depth <= MAX_TREE_DEPTH:
        raise ValueError(f"{label} must be in [0, {MAX_TREE_DEPTH}], got {depth}")
    return depth


def _load_census(
    path: Path, hash_name: Optional[str] = None
) -> Tuple[MerkleTree, HashFunction]:
    data = _read_census_file(path)
    hash_function = get_hash_function(prefer=hash_name or data.get("hash"))

    members = [
        field_from_hex(member, f"members[{idx}]", hash_function.modulus)
        if isinstance(member, str)
        else member
        for idx, member in enumerate(data["members"])
    ]
    if not members:
        raise ValueError(f"{path}: census has no members")

    depth = data.get("depth")
    if depth is None:
        depth = (len(members) - 1).bit_length()
    depth = _check_depth(depth, f"{path}: 'depth'")

    leaves = pad_leaves(members, depth)
    tree = MerkleTree.build(leaves, hash_function, depth=depth)
    return tree, hash_function


@main.command()
@click.option(
    "--hash",
    "hash_name",
    type=click.Choice(HASH_BACKENDS),
    help="Hash backend (default: ZK_CENSUS_HASH or poseidon)",
)
@click.option("--seed", type=str, help="Derive the secret from a passphrase instead of randomly")
def keygen(hash_name, seed):
    """Generate a member secret and its public value."""
    hash_function = get_hash_function(prefer=hash_name)
    if seed:
        secret = hash_to_field(
            seed.encode("utf-8"), hash_function.modulus, domain_sep=KEYGEN_DOMAIN
        )
    else:
        secret = RandomnessSource().get_random_field_element(hash_function.modulus)
    public_value = derive_public_value(secret, hash_function)

    click.echo(f"secret:       0x{field_to_hex(secret)}")
    click.echo(f"public value: 0x{field_to_hex(public_value)}")
    click.echo(click.style("Keep the secret private; publish only the public value.", fg="yellow"))


@main.command()
@click.argument("census", type=click.Path(dir_okay=False, path_type=Path))
@click.option("--public-value", required=True, help="Member public value (hex)")
@click.option("--hash", "hash_name", type=click.Choice(HASH_BACKENDS))
@click.option("--depth", type=click.IntRange(0, MAX_TREE_DEPTH), help="Fixed tree depth")
def enroll(census, public_value, hash_name, depth):
    """Append a member's public value to a census file."""
    try:
        data = _read_census_file(census)
        hash_function = get_hash_function(prefer=hash_name or data.get("hash"))
        value = field_from_hex(public_value, "public value", hash_function.modulus)
    except (CensusProtocolError, ValueError) as e:
        _fail(f"Error: {e}")

    data["hash"] = hash_function.name
    if depth is not None:
        data["depth"] = depth
    data["members"] = list(data.get("members", [])) + [f"0x{field_to_hex(value)}"]

    capacity_depth = data.get("depth")
    if capacity_depth is not None and len(data["members"]) > 1 << capacity_depth:
        _fail(f"Census is full (depth {capacity_depth})")

    with census.open("w", encoding="utf-8") as handle:
        yaml.safe_dump(data, handle, sort_keys=False)
    click.echo(click.style(f"✓ Enrolled member #{len(data['members']) - 1}", fg="green"))


@main.command()
@click.argument("census", type=click.Path(exists=True, dir_okay=False, path_type=Path))
@click.option("--hash", "hash_name", type=click.Choice(HASH_BACKENDS))
def build(census, hash_name):
    """Build the census tree and print its root."""
    try:
        tree, hash_function = _load_census(census, hash_name)
    except (CensusProtocolError, ValueError) as e:
        _fail(f"Error: {e}")

    click.echo(f"hash:        {hash_function.name} ({hash_function.fingerprint[:16]}...)")
    click.echo(f"depth:       {tree.depth}")
    click.echo(f"leaves:      {len(tree)}")
    click.echo(f"root:        0x{field_to_hex(tree.root())}")


@main.command()
@click.argument("census", type=click.Path(exists=True, dir_okay=False, path_type=Path))
@click.option("--secret", required=True, help="Member secret (hex)")
@click.option(
    "--output",
    required=True,
    type=click.Path(dir_okay=False, path_type=Path),
    help="Where to write the CBOR proof request",
)
@click.option("--hash", "hash_name", type=click.Choice(HASH_BACKENDS))
def prove(census, secret, output, hash_name):
    """
    Write a proof request for the member holding SECRET.

    The request holds the private witness (secret, position, path). Hand it
    to a proving backend; never publish it.
    """
    try:
        tree, hash_function = _load_census(census, hash_name)
        secret_value = field_from_hex(secret, "secret", hash_function.modulus)
        index = tree.index_of(derive_public_value(secret_value, hash_function))
        proof = tree.proof(index, leaf_preimage=secret_value)
        request = ProofRequest.from_proof(proof, hash_function)
    except (CensusProtocolError, ValueError) as e:
        _fail(f"Error: {e}")

    output.write_bytes(request.serialize())
    statement = InclusionStatement.from_request(request)
    public = statement.public_inputs()

    click.echo(click.style(f"✓ Proof request written to: {output}", fg="green"))
    click.echo("Public inputs:")
    click.echo(f"  • root:  0x{public['root'].hex()}")
    click.echo(f"  • depth: {public['depth']}")
    click.echo(f"  • hash:  {public['hash_name']}")


@main.command()
@click.argument("request_file", type=click.Path(exists=True, dir_okay=False, path_type=Path))
@click.option(
    "--census",
    type=click.Path(exists=True, dir_okay=False, path_type=Path),
    help="Census file to take the committed root from",
)
@click.option("--root", "root_hex", help="Committed root (hex)")
@click.option("--hash", "hash_name", type=click.Choice(HASH_BACKENDS))
def verify(request_file, census, root_hex, hash_name):
    """Run the inclusion circuit on a proof request."""
    if (census is None) == (root_hex is None):
        raise click.UsageError("Pass exactly one of --census or --root")

    try:
        request = ProofRequest.deserialize(request_file.read_bytes())
        if census is not None:
            tree, hash_function = _load_census(census, hash_name)
            circuit = InclusionCircuit.for_tree(tree)
            root = tree.root()
        else:
            hash_function = get_hash_function(prefer=hash_name or request.hash_name)
            circuit = InclusionCircuit(hash_function, request.depth)
            root = field_from_hex(root_hex, "root", hash_function.modulus)
        accepted = circuit.verify_request(dataclasses.replace(request, root=root))
    except (CensusProtocolError, ValueError, OverflowError) as e:
        _fail(f"Error: {e}")

    if accepted:
        click.echo(click.style("✓ ACCEPTED: member of the census", fg="green"))
    else:
        click.echo(click.style("✗ REJECTED: not a member of this census", fg="red"))
        sys.exit(1)


@main.command()
def demo():
    """Run the 8-member worked scenario for every hash backend."""
    click.echo("\n" + "=" * 70)
    click.echo(click.style("zk-census worked scenario", fg="cyan", bold=True))
    click.echo("=" * 70)
    click.echo(click.style(DISCLAIMER, fg="yellow"))

    scenario = census_vectors.load_vectors()["vectors"]["worked_scenario"]
    keys = scenario["private_keys"]
    index = scenario["prove_index"]
    secret = scenario["secret_value"]

    for backend in HASH_BACKENDS:
        hash_function = get_hash_function(prefer=backend)
        tree = census_vectors.build_census(keys, scenario["depth"], hash_function)
        tampered = census_vectors.build_census(
            scenario["tampered_private_keys"], scenario["depth"], hash_function
        )
        circuit = InclusionCircuit.for_tree(tree)
        proof = tree.proof(index, leaf_preimage=secret)

        ok = circuit.verify(secret, proof.siblings, index, tree.root())
        forged = circuit.verify(secret, proof.siblings, index, tampered.root())

        click.echo("\n" + "-" * 70)
        click.echo(click.style(f"Backend: {backend}", fg="cyan", bold=True))
        click.echo("-" * 70)
        click.echo(f"  • private keys: {keys}")
        click.echo(f"  • root: 0x{field_to_hex(tree.root())}")
        click.echo(
            f"  • secret {secret} against census root: "
            f"{click.style('✓', fg='green') if ok else click.style('✗', fg='red')}"
        )
        click.echo(
            f"  • same proof against tampered root: "
            f"{click.style('✗ rejected', fg='green') if not forged else click.style('accepted', fg='red')}"
        )
        if not ok or forged:
            _fail(f"{backend}: worked scenario failed")

    click.echo(f"\n{click.style('✓ Worked scenario complete', fg='green')}")


if __name__ == "__main__":
    main()

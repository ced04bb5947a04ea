"""
Census Membership Example

Builds a 16-member census, extracts a proof request for one member, sends it
through CBOR and checks it with the inclusion circuit. Tree levels are hashed
on a thread pool.
"""

from concurrent.futures import ThreadPoolExecutor

from zk_census.census_protocol import (
    InclusionCircuit,
    InclusionStatement,
    MerkleTree,
    ProofRequest,
    derive_public_value,
    get_hash_function,
)
from zk_census.census_protocol.security import RandomnessSource


def main():
    print("\n" + "=" * 70)
    print("zk-census - Membership Example")
    print("=" * 70)

    hash_function = get_hash_function()
    rng = RandomnessSource()

    print("\n1. Generating 16 member secrets...")
    secrets = [rng.get_random_field_element() for _ in range(16)]
    public_values = [derive_public_value(s, hash_function) for s in secrets]

    print("2. Building the census tree...")
    with ThreadPoolExecutor(max_workers=4) as executor:
        tree = MerkleTree.build(public_values, hash_function, executor=executor)
    print(f"   Root: {tree.root():#066x}")

    print("\n3. Member #9 extracts a proof request...")
    proof = tree.proof(9, leaf_preimage=secrets[9])
    request = ProofRequest.from_proof(proof, hash_function)
    payload = request.serialize()
    print(f"   Request size: {len(payload)} bytes (private, stays with the prover)")

    statement = InclusionStatement.from_request(ProofRequest.deserialize(payload))
    print(f"   Public inputs: {sorted(statement.public_inputs())}")

    print("\n4. Running the inclusion circuit...")
    circuit = InclusionCircuit.for_tree(tree)
    result = circuit.evaluate(
        statement.secret_value, statement.siblings, statement.key, tree.root()
    )
    print(f"   Constraints: {len(result.constraints)}")
    print(f"   Accepted:    {result.accepted}")

    print("\n5. Member #9 leaves; the census is rebuilt...")
    updated = tree.replace(9, 0)
    print(f"   Old proof against old root: {circuit.verify_request(request)}")
    print(
        "   Old proof against new root: "
        f"{circuit.verify(secrets[9], proof.siblings, 9, updated.root())}"
    )


if __name__ == "__main__":
    main()

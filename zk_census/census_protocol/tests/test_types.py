"""
Tests for proof request serialization.
"""

import cbor2
import pytest

from zk_census.census_protocol.circuit import derive_public_value
from zk_census.census_protocol.config import MAX_PROOF_REQUEST_BYTES
from zk_census.census_protocol.exceptions import SerializationError
from zk_census.census_protocol.hashes.mimc import MiMCHash
from zk_census.census_protocol.merkle import MerkleTree
from zk_census.census_protocol.types import ProofRequest


@pytest.fixture(scope="module")
def h():
    return MiMCHash()


@pytest.fixture(scope="module")
def request_obj(h):
    leaves = [derive_public_value(s, h) for s in (11, 22, 33, 44)]
    tree = MerkleTree.build(leaves, h, depth=2)
    return ProofRequest.from_proof(tree.proof(2, leaf_preimage=33), h)


def test_from_proof_copies_fields(h, request_obj):
    assert request_obj.key == 2
    assert request_obj.value == 33
    assert request_obj.depth == 2
    assert request_obj.hash_name == "mimc"
    assert request_obj.hash_fingerprint == h.fingerprint


def test_from_proof_needs_secret(h):
    tree = MerkleTree.build([derive_public_value(1, h)], h, depth=0)
    with pytest.raises(ValueError, match="secret value"):
        ProofRequest.from_proof(tree.proof(0), h)
    request = ProofRequest.from_proof(tree.proof(0), h, value=1)
    assert request.value == 1


def test_serialize_uses_short_keys(request_obj):
    decoded = cbor2.loads(request_obj.serialize())
    assert set(decoded) == {"v", "k", "x", "r", "s", "h", "f"}
    assert decoded["v"] == 1
    assert all(len(sibling) == 32 for sibling in decoded["s"])


def test_deserialize_restores_request(request_obj):
    assert ProofRequest.deserialize(request_obj.serialize()) == request_obj


def test_deserialize_rejects_oversized():
    with pytest.raises(SerializationError, match="size limit"):
        ProofRequest.deserialize(b"\x00" * (MAX_PROOF_REQUEST_BYTES + 1))


def test_deserialize_rejects_garbage():
    with pytest.raises(SerializationError):
        ProofRequest.deserialize(b"\xff\xff")


def test_deserialize_rejects_non_map():
    with pytest.raises(SerializationError, match="expected a map"):
        ProofRequest.deserialize(cbor2.dumps([1, 2, 3]))


def test_deserialize_rejects_wrong_version(request_obj):
    data = cbor2.loads(request_obj.serialize())
    data["v"] = 2
    with pytest.raises(SerializationError, match="version"):
        ProofRequest.deserialize(cbor2.dumps(data))


def test_deserialize_rejects_missing_fields(request_obj):
    data = cbor2.loads(request_obj.serialize())
    del data["s"]
    with pytest.raises(SerializationError, match="missing fields"):
        ProofRequest.deserialize(cbor2.dumps(data))


@pytest.mark.parametrize(
    "field,value",
    [
        ("k", -1),
        ("k", True),
        ("x", b"\x01"),
        ("r", "not bytes"),
        ("s", b"not a list"),
        ("h", 5),
    ],
)
def test_deserialize_rejects_bad_field(request_obj, field, value):
    data = cbor2.loads(request_obj.serialize())
    data[field] = value
    with pytest.raises(SerializationError):
        ProofRequest.deserialize(cbor2.dumps(data))


def test_serialize_rejects_unencodable_value(request_obj):
    import dataclasses

    broken = dataclasses.replace(request_obj, value=1 << 300)
    with pytest.raises(SerializationError):
        broken.serialize()


def test_to_dict_is_hex(request_obj):
    view = request_obj.to_dict()
    assert view["key"] == 2
    assert len(view["root"]) == 64
    assert len(view["siblings"]) == 2
    assert view["hash_name"] == "mimc"

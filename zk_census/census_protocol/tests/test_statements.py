"""
Tests for census statement metadata and the public/witness split.
"""

import pytest

from zk_census.census_protocol.circuit import derive_public_value
from zk_census.census_protocol.field import field_to_bytes
from zk_census.census_protocol.hashes.mimc import MiMCHash
from zk_census.census_protocol.merkle import MerkleTree
from zk_census.census_protocol.statements import (
    STATEMENT_REGISTRY,
    InclusionStatement,
    PositionPolicy,
    StatementType,
    get_statement_spec,
    validate_public_inputs,
)
from zk_census.census_protocol.types import ProofRequest


@pytest.fixture(scope="module")
def request_obj():
    h = MiMCHash()
    leaves = [derive_public_value(s, h) for s in (11, 22, 33, 44)]
    tree = MerkleTree.build(leaves, h, depth=2)
    return ProofRequest.from_proof(tree.proof(2, leaf_preimage=33), h)


def test_registry_contains_inclusion():
    spec = get_statement_spec(StatementType.CENSUS_INCLUSION)
    assert spec is STATEMENT_REGISTRY[StatementType.CENSUS_INCLUSION]
    assert spec.version == 1
    assert "root" in spec.public_input_schema
    assert "secret_value" in spec.witness_schema


def test_position_hidden_by_default(request_obj):
    statement = InclusionStatement.from_request(request_obj)
    public = statement.public_inputs()
    assert statement.position_policy is PositionPolicy.HIDDEN
    assert "index" not in public
    assert "key" not in public
    assert "siblings" not in public
    assert "secret_value" not in public
    validate_public_inputs(StatementType.CENSUS_INCLUSION, public)


def test_public_inputs_contents(request_obj):
    public = InclusionStatement.from_request(request_obj).public_inputs()
    assert public["statement_type"] == "census_inclusion_v1"
    assert public["statement_version"] == 1
    assert public["root"] == field_to_bytes(request_obj.root)
    assert public["depth"] == 2
    assert public["hash_name"] == "mimc"
    assert public["hash_fingerprint"] == request_obj.hash_fingerprint


def test_position_revealed_on_request(request_obj):
    statement = InclusionStatement.from_request(request_obj, PositionPolicy.REVEALED)
    public = statement.public_inputs()
    assert public["index"] == 2
    validate_public_inputs(StatementType.CENSUS_INCLUSION, public)


def test_witness_holds_private_values(request_obj):
    witness = InclusionStatement.from_request(request_obj).witness()
    assert witness == {
        "secret_value": 33,
        "key": 2,
        "siblings": request_obj.siblings,
    }


def test_validate_rejects_missing_field(request_obj):
    public = InclusionStatement.from_request(request_obj).public_inputs()
    del public["root"]
    with pytest.raises(ValueError, match="Missing required field 'root'"):
        validate_public_inputs(StatementType.CENSUS_INCLUSION, public)


def test_validate_rejects_wrong_type(request_obj):
    public = InclusionStatement.from_request(request_obj).public_inputs()
    public["depth"] = True
    with pytest.raises(ValueError, match="'depth' must be int"):
        validate_public_inputs(StatementType.CENSUS_INCLUSION, public)


def test_validate_rejects_version_mismatch(request_obj):
    public = InclusionStatement.from_request(request_obj).public_inputs()
    public["statement_version"] = 2
    with pytest.raises(ValueError, match="version mismatch"):
        validate_public_inputs(StatementType.CENSUS_INCLUSION, public)


def test_validate_rejects_type_mismatch(request_obj):
    public = InclusionStatement.from_request(request_obj).public_inputs()
    public["statement_type"] = "census_inclusion_v0"
    with pytest.raises(ValueError, match="type mismatch"):
        validate_public_inputs(StatementType.CENSUS_INCLUSION, public)


def test_validate_rejects_non_int_index(request_obj):
    public = InclusionStatement.from_request(request_obj).public_inputs()
    public["index"] = "2"
    with pytest.raises(ValueError, match="'index'"):
        validate_public_inputs(StatementType.CENSUS_INCLUSION, public)

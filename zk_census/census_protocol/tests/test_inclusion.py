"""
⚠️ DRAFT — requires crypto review before production use

Tests for the census inclusion circuit.
"""

import dataclasses

import pytest

from zk_census.census_protocol.circuit import InclusionCircuit, derive_public_value
from zk_census.census_protocol.config import FIELD_MODULUS
from zk_census.census_protocol.exceptions import (
    ConfigurationError,
    KeyOverflowError,
    RootMismatch,
)
from zk_census.census_protocol.hashes.mimc import MiMCHash
from zk_census.census_protocol.hashes.poseidon import PoseidonHash
from zk_census.census_protocol.merkle import MerkleTree
from zk_census.census_protocol.statements import InclusionStatement
from zk_census.census_protocol.types import ProofRequest

SECRETS = [11, 22, 33, 44, 55, 66, 77, 88]


@pytest.fixture(scope="module", params=["poseidon", "mimc"])
def h(request):
    return PoseidonHash() if request.param == "poseidon" else MiMCHash()


@pytest.fixture(scope="module")
def tree(h):
    leaves = [derive_public_value(s, h) for s in SECRETS]
    return MerkleTree.build(leaves, h, depth=3)


@pytest.fixture(scope="module")
def circuit(tree):
    return InclusionCircuit.for_tree(tree)


class TestAcceptance:
    def test_every_member_verifies(self, tree, circuit):
        for index, secret in enumerate(SECRETS):
            proof = tree.proof(index)
            assert circuit.verify(secret, proof.siblings, index, tree.root())

    def test_evaluate_reports_constraints(self, tree, circuit):
        proof = tree.proof(2)
        result = circuit.evaluate(33, proof.siblings, 2, tree.root())
        assert result.accepted
        assert result.computed_root == tree.root()
        assert result.bits == (0, 1, 0)
        # bits.recompose + one boolean per level + root
        assert len(result.constraints) == 1 + 3 + 1
        assert result.constraints.violations() == []

    def test_assert_verified_returns_result(self, tree, circuit):
        proof = tree.proof(5)
        result = circuit.assert_verified(66, proof.siblings, 5, tree.root())
        assert result.accepted

    def test_depth_zero(self, h):
        single = MerkleTree.build([derive_public_value(7, h)], h, depth=0)
        circuit = InclusionCircuit.for_tree(single)
        assert circuit.depth == 0
        assert circuit.verify(7, (), 0, single.root())
        assert not circuit.verify(8, (), 0, single.root())

    def test_public_value_is_hash1(self, h):
        assert derive_public_value(33, h) == h.hash1(33)


class TestRejection:
    def test_wrong_secret_rejected(self, tree, circuit):
        proof = tree.proof(2)
        assert not circuit.verify(34, proof.siblings, 2, tree.root())

    def test_wrong_position_rejected(self, tree, circuit):
        proof = tree.proof(2)
        for index in (0, 1, 3, 6):
            assert not circuit.verify(33, proof.siblings, index, tree.root())

    @pytest.mark.parametrize("level", [0, 1, 2])
    def test_tampered_sibling_rejected(self, tree, circuit, level):
        proof = tree.proof(2)
        siblings = list(proof.siblings)
        siblings[level] = (siblings[level] + 1) % FIELD_MODULUS
        assert not circuit.verify(33, siblings, 2, tree.root())

    def test_tampered_census_root_rejected(self, h, tree, circuit):
        tampered = tree.replace(2, derive_public_value(99, h))
        proof = tree.proof(2)
        assert not circuit.verify(33, proof.siblings, 2, tampered.root())

    def test_rejection_names_root_constraint(self, tree, circuit):
        proof = tree.proof(2)
        result = circuit.evaluate(33, proof.siblings, 2, (tree.root() + 1) % FIELD_MODULUS)
        assert not result.accepted
        assert result.constraints.violations() == ["root"]

    def test_assert_verified_raises_root_mismatch(self, tree, circuit):
        proof = tree.proof(2)
        with pytest.raises(RootMismatch):
            circuit.assert_verified(34, proof.siblings, 2, tree.root())

    def test_old_proof_stays_valid_for_old_root(self, h, tree, circuit):
        proof = tree.proof(2)
        updated = tree.replace(7, derive_public_value(1, h))
        assert circuit.verify(33, proof.siblings, 2, tree.root())
        assert not circuit.verify(33, proof.siblings, 2, updated.root())


class TestInputValidation:
    def test_index_overflow_raises(self, tree, circuit):
        proof = tree.proof(2)
        with pytest.raises(KeyOverflowError):
            circuit.verify(33, proof.siblings, 8, tree.root())
        with pytest.raises(OverflowError):
            circuit.verify(33, proof.siblings, 2 + 8, tree.root())

    def test_sibling_count_must_match_depth(self, tree, circuit):
        proof = tree.proof(2)
        with pytest.raises(ValueError, match="Expected 3 siblings"):
            circuit.verify(33, proof.siblings[:2], 2, tree.root())

    def test_unreduced_root_rejected(self, tree, circuit):
        proof = tree.proof(2)
        with pytest.raises(ValueError):
            circuit.verify(33, proof.siblings, 2, FIELD_MODULUS)

    def test_circuit_depth_validation(self, h):
        with pytest.raises(ValueError):
            InclusionCircuit(h, 33)
        with pytest.raises(TypeError):
            InclusionCircuit(h, 3.0)


class TestConfiguration:
    def test_check_tree_accepts_matching_tree(self, tree, circuit):
        circuit.check_tree(tree)

    def test_check_tree_rejects_other_hash(self, tree):
        other = MiMCHash() if tree.hash_function.name == "poseidon" else PoseidonHash()
        with pytest.raises(ConfigurationError, match="mismatch"):
            InclusionCircuit(other, tree.depth).check_tree(tree)

    def test_check_tree_rejects_other_depth(self, tree):
        with pytest.raises(ConfigurationError, match="depth"):
            InclusionCircuit(tree.hash_function, 4).check_tree(tree)

    def test_other_hash_rejects_valid_witness(self, tree):
        other = MiMCHash() if tree.hash_function.name == "poseidon" else PoseidonHash()
        proof = tree.proof(2)
        circuit = InclusionCircuit(other, tree.depth)
        assert not circuit.verify(33, proof.siblings, 2, tree.root())


class TestRequests:
    def test_verify_request(self, tree, circuit):
        proof = tree.proof(2, leaf_preimage=33)
        request = ProofRequest.from_proof(proof, tree.hash_function)
        assert circuit.verify_request(request)

    def test_verify_request_wrong_root(self, tree, circuit):
        proof = tree.proof(2, leaf_preimage=33)
        request = ProofRequest.from_proof(proof, tree.hash_function)
        forged = dataclasses.replace(request, root=(request.root + 1) % FIELD_MODULUS)
        assert not circuit.verify_request(forged)

    def test_verify_request_fingerprint_mismatch(self, tree, circuit):
        proof = tree.proof(2, leaf_preimage=33)
        request = ProofRequest.from_proof(proof, tree.hash_function)
        foreign = dataclasses.replace(request, hash_fingerprint="00" * 32)
        with pytest.raises(ConfigurationError):
            circuit.verify_request(foreign)

    def test_verify_statement(self, tree, circuit):
        proof = tree.proof(4, leaf_preimage=55)
        request = ProofRequest.from_proof(proof, tree.hash_function)
        statement = InclusionStatement.from_request(request)
        assert circuit.verify_statement(statement)

    def test_verify_statement_depth_mismatch(self, tree):
        proof = tree.proof(4, leaf_preimage=55)
        request = ProofRequest.from_proof(proof, tree.hash_function)
        statement = InclusionStatement.from_request(request)
        with pytest.raises(ConfigurationError, match="depth"):
            InclusionCircuit(tree.hash_function, 2).verify_statement(statement)

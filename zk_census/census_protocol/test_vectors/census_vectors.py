# -*- coding: utf-8 -*-
from __future__ import annotations

import json
from pathlib import Path
from typing import Any, Dict, List, Optional

from ..circuit import InclusionCircuit, derive_public_value
from ..factory import get_hash_function
from ..field import field_to_hex
from ..interfaces import HashFunction
from ..merkle import MerkleTree

VECTOR_FILE = Path(__file__).with_name("census_vectors.json")


def load_vectors(path: Path = VECTOR_FILE) -> Dict[str, Any]:
    with path.open("r", encoding="utf-8") as handle:
        return json.load(handle)


def build_census(private_keys: List[int], depth: int, hash_function: HashFunction) -> MerkleTree:
    leaves = [derive_public_value(key, hash_function) for key in private_keys]
    return MerkleTree.build(leaves, hash_function, depth=depth)


def compute_expected(
    scenario: Dict[str, Any], hash_function: HashFunction, label: str = "scenario"
) -> Dict[str, str]:
    depth = _require_int(scenario.get("depth"), f"{label}.depth")
    keys = _require_int_list(scenario.get("private_keys"), f"{label}.private_keys")
    secret = _require_int(scenario.get("secret_value"), f"{label}.secret_value")

    expected = {
        "expected_leaf_hex": field_to_hex(derive_public_value(secret, hash_function)),
        "expected_root_hex": field_to_hex(build_census(keys, depth, hash_function).root()),
    }
    tampered_keys = scenario.get("tampered_private_keys")
    if tampered_keys is not None:
        tampered_keys = _require_int_list(tampered_keys, f"{label}.tampered_private_keys")
        tampered = build_census(tampered_keys, depth, hash_function)
        expected["expected_tampered_root_hex"] = field_to_hex(tampered.root())
    return expected


def check_scenario(
    scenario: Dict[str, Any], hash_function: HashFunction, label: str
) -> List[str]:
    errors: List[str] = []
    depth = _require_int(scenario.get("depth"), f"{label}.depth")
    keys = _require_int_list(scenario.get("private_keys"), f"{label}.private_keys")
    index = _require_int(scenario.get("prove_index"), f"{label}.prove_index")
    secret = _require_int(scenario.get("secret_value"), f"{label}.secret_value")

    tree = build_census(keys, depth, hash_function)
    circuit = InclusionCircuit.for_tree(tree)
    proof = tree.proof(index, leaf_preimage=secret)

    if not circuit.verify(secret, proof.siblings, index, tree.root()):
        errors.append(f"{label}: proof for index {index} rejected")

    if build_census(keys, depth, hash_function).root() != tree.root():
        errors.append(f"{label}: rebuild produced a different root")

    computed = compute_expected(scenario, hash_function, label)
    if "expected_tampered_root_hex" in computed:
        tampered_root = int(computed["expected_tampered_root_hex"], 16)
        if circuit.verify(secret, proof.siblings, index, tampered_root):
            errors.append(f"{label}: proof accepted against tampered root")

    pinned = scenario.get("expected")
    if isinstance(pinned, dict):
        pinned = pinned.get(hash_function.name)
    if not isinstance(pinned, dict):
        errors.append(f"{label}: no expected values for {hash_function.name}")
        return errors
    for name, value in computed.items():
        if pinned.get(name) != value:
            errors.append(f"{label}.{name} mismatch")

    return errors


def validate_vectors(
    data: Dict[str, Any], backends: Optional[List[str]] = None
) -> List[str]:
    errors: List[str] = []
    if data.get("version") != "1.0":
        errors.append("version must be 1.0")
    if data.get("field") != "BN254":
        errors.append("field must be BN254")

    vectors = data.get("vectors")
    if not isinstance(vectors, dict):
        errors.append("vectors must be a dict")
        return errors

    if backends is None:
        backends = data.get("backends", [])
    for backend in backends:
        hash_function = get_hash_function(prefer=backend)
        for name, scenario in vectors.items():
            try:
                errors.extend(check_scenario(scenario, hash_function, f"{backend}.{name}"))
            except (LookupError, TypeError, ValueError) as exc:
                errors.append(f"{backend}.{name}: {exc}")

    return errors


def _require_int(value: Any, field_name: str) -> int:
    if isinstance(value, bool) or not isinstance(value, int):
        raise TypeError(f"{field_name} must be an int")
    return value


def _require_int_list(value: Any, field_name: str) -> List[int]:
    if not isinstance(value, list) or not value:
        raise ValueError(f"{field_name} must be a non-empty list")
    return [_require_int(item, f"{field_name}[{idx}]") for idx, item in enumerate(value)]

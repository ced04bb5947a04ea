"""
Unit tests for the hash backend factory.
"""

import pytest

from zk_census.census_protocol import factory, feature_flags
from zk_census.census_protocol.hashes.mimc import MiMCHash
from zk_census.census_protocol.hashes.poseidon import PoseidonHash


@pytest.fixture(autouse=True)
def reset_feature_flags(monkeypatch: pytest.MonkeyPatch) -> None:
    feature_flags.set_hash_backend(None)
    monkeypatch.delenv("ZK_CENSUS_HASH", raising=False)
    yield
    feature_flags.set_hash_backend(None)


def test_default_is_poseidon() -> None:
    assert isinstance(factory.get_hash_function(), PoseidonHash)


def test_env_selects_mimc(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("ZK_CENSUS_HASH", "mimc")
    assert isinstance(factory.get_hash_function(), MiMCHash)


def test_override_beats_prefer() -> None:
    backend = factory.get_hash_function(prefer="poseidon", override="mimc")
    assert isinstance(backend, MiMCHash)


def test_prefer_beats_flags() -> None:
    feature_flags.set_hash_backend("mimc")
    assert isinstance(factory.get_hash_function(prefer="poseidon"), PoseidonHash)


def test_names_normalized_like_feature_flags(monkeypatch: pytest.MonkeyPatch) -> None:
    assert isinstance(factory.get_hash_function(prefer=" Poseidon "), PoseidonHash)
    assert isinstance(factory.get_hash_function(override="MIMC"), MiMCHash)
    monkeypatch.setenv("ZK_CENSUS_HASH", "MiMC")
    assert isinstance(factory.get_hash_function(), MiMCHash)


def test_invalid_prefer_names_source() -> None:
    with pytest.raises(ValueError, match="from prefer"):
        factory.get_hash_function(prefer="sha256")


def test_invalid_override_names_source() -> None:
    with pytest.raises(ValueError, match="from override"):
        factory.get_hash_function(override="sha256")


def test_registry_matches_backend_names() -> None:
    for name in factory.BACKEND_REGISTRY:
        assert factory.get_hash_function(prefer=name).name == name


def test_unimportable_backend_raises_import_error(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setitem(
        factory.BACKEND_REGISTRY, "poseidon", "zk_census.missing_module.PoseidonHash"
    )
    with pytest.raises(ImportError):
        factory.get_hash_function(prefer="poseidon")


def test_non_hash_class_raises_type_error(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setitem(
        factory.BACKEND_REGISTRY, "poseidon", "zk_census.census_protocol.merkle.MerkleTree"
    )
    with pytest.raises(TypeError, match="does not implement HashFunction"):
        factory.get_hash_function(prefer="poseidon")

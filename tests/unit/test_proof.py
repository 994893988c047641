"""
Proof Unit Tests
Tests for mpt/proof/proof_store.py and mpt/proof/verifier.py

Tests:
1. ProofStore mapping behaviour and serialize()/from_nodes() transport
2. prove() -> verify_proof() returns the stored value for every key
3. Absent keys, stale roots and snapshots
4. Each failure kind: incomplete, mismatch, malformed, key not proven
"""
import pytest

from mpt.crypto.hashing import keccak256
from mpt.nodes import EMPTY_NODE_HASH
from mpt.proof import ProofStore, is_valid_proof, verify_proof
from mpt.schemas.errors import (
    ErrorCodes,
    KeyNotProvenException,
    MalformedProofNodeException,
    ProofIncompleteException,
    ProofVerificationException,
    ProofVerificationMismatchException,
)
from mpt.trie import Trie

from fixtures.common import PUPPY_ITEMS


class TestProofStore:

    def test_put_get(self):
        store = ProofStore()
        store.put(b"\x01" * 32, b"\xc0")
        assert store.get(b"\x01" * 32) == b"\xc0"
        assert store[b"\x01" * 32] == b"\xc0"

    def test_get_missing_is_none(self):
        assert ProofStore().get(b"\x02" * 32) is None

    def test_getitem_missing_raises(self):
        with pytest.raises(KeyError):
            ProofStore()[b"\x02" * 32]

    def test_has_and_contains(self):
        store = ProofStore()
        store.put(b"\x01" * 32, b"\xc0")
        assert store.has(b"\x01" * 32)
        assert b"\x01" * 32 in store
        assert b"\x02" * 32 not in store
        assert "not bytes" not in store

    def test_delete(self):
        store = ProofStore()
        store.put(b"\x01" * 32, b"\xc0")
        store.delete(b"\x01" * 32)
        store.delete(b"\x01" * 32)
        assert len(store) == 0

    def test_put_overwrites(self):
        store = ProofStore()
        store.put(b"\x01" * 32, b"\xc0")
        store.put(b"\x01" * 32, b"\x80")
        assert len(store) == 1
        assert store.get(b"\x01" * 32) == b"\x80"

    def test_keys_and_iter(self):
        store = ProofStore.from_nodes([b"\x80", b"\xc0"])
        assert set(store.keys()) == {keccak256(b"\x80"), keccak256(b"\xc0")}
        assert set(store) == set(store.keys())

    def test_from_nodes_files_under_digest(self):
        store = ProofStore.from_nodes([b"\x80"])
        assert store.get(EMPTY_NODE_HASH) == b"\x80"

    def test_serialize_round_trip(self, puppy_trie):
        proof, _ = puppy_trie.prove(b"dog")
        assert ProofStore.from_nodes(proof.serialize()) == proof

    def test_equality(self):
        assert ProofStore.from_nodes([b"\x80"]) == ProofStore.from_nodes([b"\x80"])
        assert ProofStore.from_nodes([b"\x80"]) != ProofStore()

    def test_repr(self):
        assert repr(ProofStore.from_nodes([b"\x80"])) == "ProofStore(nodes=1)"


class TestProveVerify:
    """Proofs produced by Trie.prove() verify against the root."""

    def test_two_keys(self, two_key_trie):
        root = two_key_trie.hash()
        for key, value in [(bytes([1, 2, 3]), b"hello"), (bytes([1, 2, 3, 4, 5]), b"world")]:
            proof, found = two_key_trie.prove(key)
            assert found
            assert verify_proof(root, key, proof) == value

    @pytest.mark.parametrize("key,value", PUPPY_ITEMS)
    def test_puppy_every_key(self, puppy_trie, key, value):
        proof, found = puppy_trie.prove(key)
        assert found
        assert verify_proof(puppy_trie.hash(), key, proof) == value

    def test_branch_value_key(self, puppy_trie):
        # "do" is a prefix of "dog" and "doge", so its value sits in a branch
        proof, found = puppy_trie.prove(b"do")
        assert found
        assert verify_proof(puppy_trie.hash(), b"do", proof) == b"verb"

    def test_dataset_every_key(self, dataset):
        trie = Trie.from_items(dataset)
        root = trie.hash()
        for key, value in dataset:
            proof, found = trie.prove(key)
            assert found
            assert verify_proof(root, key, proof) == value

    def test_after_transport(self, dataset):
        trie = Trie.from_items(dataset)
        key, value = dataset[10]
        proof, _ = trie.prove(key)
        received = ProofStore.from_nodes(proof.serialize())
        assert verify_proof(trie.hash(), key, received) == value

    def test_hashed_nodes_recorded(self, hashed_trie):
        trie, key1, _ = hashed_trie
        proof, found = trie.prove(key1)
        # extension, branch, leaf
        assert found
        assert len(proof) == 3
        assert trie.hash() in proof

    def test_without_hash_checks(self, hashed_trie):
        trie, key1, _ = hashed_trie
        proof, _ = trie.prove(key1)
        assert verify_proof(trie.hash(), key1, proof, check_hashes=False) == b"a" * 40

    def test_snapshot_survives_mutation(self, puppy_trie):
        old_root = puppy_trie.hash()
        proof, _ = puppy_trie.prove(b"horse")

        puppy_trie.put(b"horse", b"mare")
        puppy_trie.put(b"hors", b"d'oeuvre")

        assert verify_proof(old_root, b"horse", proof) == b"stallion"
        assert puppy_trie.hash() != old_root

    def test_stale_root_fails(self, hashed_trie):
        trie, key1, _ = hashed_trie
        old_root = trie.hash()
        trie.put(key1, b"c" * 40)
        proof, _ = trie.prove(key1)

        with pytest.raises(ProofVerificationException):
            verify_proof(old_root, key1, proof)


class TestAbsentKeys:

    def test_prove_absent_key_returns_store(self, puppy_trie):
        proof, found = puppy_trie.prove(b"cat")
        assert not found
        assert len(proof) > 0
        assert puppy_trie.hash() in proof

    def test_verify_absent_key_not_proven(self, puppy_trie):
        proof, _ = puppy_trie.prove(b"cat")
        with pytest.raises(KeyNotProvenException) as exc_info:
            verify_proof(puppy_trie.hash(), b"cat", proof)
        assert exc_info.value.code == ErrorCodes.KEY_NOT_PROVEN

    def test_absent_prefix_key(self, two_key_trie):
        key = bytes([1, 2, 3, 4])
        proof, found = two_key_trie.prove(key)
        assert not found
        with pytest.raises(KeyNotProvenException):
            verify_proof(two_key_trie.hash(), key, proof)

    def test_empty_trie(self):
        trie = Trie()
        proof, found = trie.prove(b"anything")
        assert not found
        assert proof.get(EMPTY_NODE_HASH) == b"\x80"
        with pytest.raises(KeyNotProvenException):
            verify_proof(EMPTY_NODE_HASH, b"anything", proof)

    def test_empty_branch_value_reported_absent(self):
        trie = Trie()
        trie.put(b"\x01", b"")
        trie.put(b"\x01\x02", b"x" * 40)

        # the live trie still returns the value, but it cannot be proven
        assert trie.get(b"\x01") == b""
        proof, found = trie.prove(b"\x01")
        assert not found
        with pytest.raises(KeyNotProvenException):
            verify_proof(trie.hash(), b"\x01", proof)

    def test_empty_leaf_value_round_trips(self):
        trie = Trie.from_items([(b"\x01", b""), (b"\x02", b"y" * 40)])
        proof, found = trie.prove(b"\x01")
        assert found
        assert verify_proof(trie.hash(), b"\x01", proof) == b""

    def test_proof_for_other_key(self, hashed_trie):
        trie, key1, key2 = hashed_trie
        proof, _ = trie.prove(key1)
        with pytest.raises(ProofIncompleteException):
            verify_proof(trie.hash(), key2, proof)


class TestVerificationFailures:

    def test_missing_leaf_is_incomplete(self, hashed_trie):
        trie, key1, _ = hashed_trie
        proof, _ = trie.prove(key1)
        leaf_hash = trie.root.next.children[3].hash()
        proof.delete(leaf_hash)

        with pytest.raises(ProofIncompleteException) as exc_info:
            verify_proof(trie.hash(), key1, proof)
        assert exc_info.value.code == ErrorCodes.PROOF_INCOMPLETE
        assert exc_info.value.details["node_hash"] == "0x" + leaf_hash.hex()

    def test_missing_root_is_incomplete(self, hashed_trie):
        trie, key1, _ = hashed_trie
        with pytest.raises(ProofIncompleteException):
            verify_proof(trie.hash(), key1, ProofStore())

    def test_substituted_node_is_mismatch(self, hashed_trie):
        trie, key1, _ = hashed_trie
        branch = trie.root.next
        leaf1, leaf2 = branch.children[3], branch.children[4]

        proof, _ = trie.prove(key1)
        proof.put(leaf1.hash(), leaf2.serialize())

        with pytest.raises(ProofVerificationMismatchException) as exc_info:
            verify_proof(trie.hash(), key1, proof)
        assert exc_info.value.code == ErrorCodes.PROOF_VERIFICATION_MISMATCH

        # Without the hash check the substituted value is accepted
        assert verify_proof(trie.hash(), key1, proof, check_hashes=False) == b"b" * 40

    def test_undecodable_node_is_malformed(self):
        garbage = b"\x83do"
        root = keccak256(garbage)
        proof = ProofStore.from_nodes([garbage])

        with pytest.raises(MalformedProofNodeException) as exc_info:
            verify_proof(root, b"\x01", proof)
        assert exc_info.value.code == ErrorCodes.MALFORMED_PROOF_NODE
        assert exc_info.value.details["node_hash"] == "0x" + root.hex()

    def test_wrong_shape_node_is_malformed(self):
        encoded = bytes.fromhex("c3616263")
        proof = ProofStore.from_nodes([encoded])
        with pytest.raises(MalformedProofNodeException):
            verify_proof(keccak256(encoded), b"\x01", proof)

    def test_all_failures_share_base(self):
        for exc_type in (
            ProofIncompleteException,
            ProofVerificationMismatchException,
            MalformedProofNodeException,
            KeyNotProvenException,
        ):
            assert issubclass(exc_type, ProofVerificationException)


class TestIsValidProof:

    def test_valid(self, puppy_trie):
        proof, _ = puppy_trie.prove(b"doge")
        assert is_valid_proof(puppy_trie.hash(), b"doge", proof)

    def test_expected_value(self, puppy_trie):
        proof, _ = puppy_trie.prove(b"doge")
        assert is_valid_proof(puppy_trie.hash(), b"doge", proof, expected_value=b"coin")
        assert not is_valid_proof(puppy_trie.hash(), b"doge", proof, expected_value=b"bone")

    def test_invalid(self, puppy_trie):
        proof, _ = puppy_trie.prove(b"cat")
        assert not is_valid_proof(puppy_trie.hash(), b"cat", proof)

    def test_wrong_root(self, puppy_trie):
        proof, _ = puppy_trie.prove(b"dog")
        assert not is_valid_proof(b"\x00" * 32, b"dog", proof)

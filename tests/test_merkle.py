import pytest

from roughenough.merkle import MerkleTree


def _check_paths_with_num(num):
    tree = MerkleTree()
    for i in range(num):
        tree.push_leaf(bytes([i]))
    root = tree.compute_root()
    for i in range(num):
        paths = tree.get_paths(i)
        assert tree.root_from_paths(i, bytes([i]), paths) == root, i


@pytest.mark.parametrize("num", [2, 4, 8, 16])
def test_power_of_two(num):
    _check_paths_with_num(num)


@pytest.mark.parametrize("num", [1, 3, 5, 19])
def test_not_power_of_two(num):
    _check_paths_with_num(num)


def test_empty_tree_raises():
    tree = MerkleTree()
    with pytest.raises(ValueError, match="Must have at least one leaf to hash!"):
        tree.compute_root()


def test_single_leaf():
    tree = MerkleTree()
    data = bytes([1, 2, 3, 4])
    tree.push_leaf(data)
    root = tree.compute_root()
    assert root == tree.hash_leaf(data)
    assert len(root) == 32


def test_different_leaf_order():
    tree = MerkleTree()
    tree.push_leaf(bytes([1, 2, 3]))
    tree.push_leaf(bytes([4, 5, 6]))
    root1 = tree.compute_root()

    tree.clear()
    tree.push_leaf(bytes([4, 5, 6]))
    tree.push_leaf(bytes([1, 2, 3]))
    root2 = tree.compute_root()

    assert root1 != root2


def test_clear_tree():
    tree = MerkleTree()
    tree.push_leaf(bytes([1, 2, 3]))
    tree.push_leaf(bytes([4, 5, 6]))
    root = tree.compute_root()
    assert len(root) == 32
    assert not tree.is_empty()

    tree.clear()
    assert tree.is_empty()


def test_path_verification():
    tree = MerkleTree()
    leaves = [
        bytes([1, 2, 3, 4]),
        bytes([5, 6, 7, 8]),
        bytes([9, 10, 11, 12]),
        bytes([13, 14, 15, 16]),
    ]
    for leaf in leaves:
        tree.push_leaf(leaf)
    expected_root = tree.compute_root()
    for idx, leaf in enumerate(leaves):
        paths = tree.get_paths(idx)
        assert tree.root_from_paths(idx, leaf, paths) == expected_root


def test_add_leaves_after_computing_root():
    tree = MerkleTree()
    tree.push_leaf(bytes([1, 2, 3]))
    root1 = tree.compute_root()
    tree.push_leaf(bytes([4, 5, 6]))
    root2 = tree.compute_root()
    assert root1 != root2


def test_reserve_does_not_change_root():
    reserved = MerkleTree()
    reserved.reserve(64)
    plain = MerkleTree()
    for i in range(64):
        reserved.push_leaf(bytes([i]))
        plain.push_leaf(bytes([i]))
    root = reserved.compute_root()
    assert root == plain.compute_root()
    assert len(reserved.get_paths(10)) == 6


def test_reserve_negative_raises():
    with pytest.raises(ValueError):
        MerkleTree().reserve(-1)


def test_get_paths_negative_index_raises():
    tree = MerkleTree()
    tree.push_leaf(b"a")
    tree.compute_root()
    with pytest.raises(IndexError):
        tree.get_paths(-1)


def test_valid_merkle_proof_single_leaf():
    tree = MerkleTree()
    nonce = bytes.fromhex("4c16c619d7716fae49552b3393fd07cff4c6f16a1ab5a2f7ce5240f94a6d1f29")
    tree.push_leaf(nonce)
    root = tree.compute_root()
    path = tree.get_paths(0)
    assert len(path) == 0
    assert tree.root_from_paths(0, nonce, path) == root


def _two_leaf_tree():
    tree = MerkleTree()
    nonce1 = bytes.fromhex("00" * 32)
    nonce2 = bytes.fromhex("11" * 32)
    tree.push_leaf(nonce1)
    tree.push_leaf(nonce2)
    return tree, nonce1, nonce2, tree.compute_root()


def test_valid_merkle_proof_two_leaves():
    tree, nonce1, nonce2, root = _two_leaf_tree()
    path0 = tree.get_paths(0)
    assert len(path0) == 1
    assert tree.root_from_paths(0, nonce1, path0) == root
    path1 = tree.get_paths(1)
    assert len(path1) == 1
    assert tree.root_from_paths(1, nonce2, path1) == root


def test_invalid_merkle_proof_wrong_index():
    tree, nonce1, _, root = _two_leaf_tree()
    path = tree.get_paths(0)
    assert tree.root_from_paths(1, nonce1, path) != root


def test_invalid_merkle_proof_wrong_leaf_data():
    tree, _, _, root = _two_leaf_tree()
    wrong_nonce = bytes.fromhex("22" * 32)
    path = tree.get_paths(0)
    assert tree.root_from_paths(0, wrong_nonce, path) != root


def test_invalid_merkle_proof_corrupted_path():
    tree, nonce1, _, root = _two_leaf_tree()
    path = tree.get_paths(0)
    corrupted = []
    for elem in path:
        changed = bytearray(elem)
        changed[1] ^= 0xFF
        corrupted.append(bytes(changed))
    assert tree.root_from_paths(0, nonce1, corrupted) != root


def test_merkle_proof_larger_tree():
    tree = MerkleTree()
    nonces = [bytes([i]) + bytes(31) for i in range(8)]
    for nonce in nonces:
        tree.push_leaf(nonce)
    root = tree.compute_root()
    for index, nonce in enumerate(nonces):
        path = tree.get_paths(index)
        assert tree.root_from_paths(index, nonce, path) == root
        assert len(path) == 3


def test_merkle_proof_non_power_of_two():
    tree = MerkleTree()
    nonces = [bytes([i]) + bytes(31) for i in range(5)]
    for nonce in nonces:
        tree.push_leaf(nonce)
    root = tree.compute_root()
    for index, nonce in enumerate(nonces):
        path = tree.get_paths(index)
        assert tree.root_from_paths(index, nonce, path) == root


def test_path_too_long_for_index():
    tree = MerkleTree()
    tree.push_leaf(bytes(32))
    tree.push_leaf(bytes([1]) * 32)
    tree.compute_root()
    assert len(tree.get_paths(0)) == 1

    long_path = [bytes(32)] * 5
    computed_root = tree.root_from_paths(0, bytes(32), long_path)
    assert computed_root != tree.compute_root()


def test_adversarial_path_attempts():
    tree = MerkleTree()
    target_nonce = bytes.fromhex("deadbeef" * 8)
    other_nonce = bytes.fromhex("00" * 32)
    tree.push_leaf(other_nonce)
    tree.push_leaf(target_nonce)
    root = tree.compute_root()

    valid_path = tree.get_paths(1)
    fake_nonce = bytes.fromhex("ff" * 32)
    assert tree.root_from_paths(1, fake_nonce, valid_path) != root
    assert tree.root_from_paths(0, target_nonce, valid_path) != root
    assert tree.root_from_paths(1, target_nonce, valid_path) == root


def test_collision_resistance():
    tree1 = MerkleTree()
    tree2 = MerkleTree()
    tree1.push_leaf(bytes.fromhex("00" * 32))
    tree2.push_leaf(bytes.fromhex("00" * 31 + "01"))
    root1 = tree1.compute_root()
    root2 = tree2.compute_root()
    assert root1 != root2

    differing_bits = sum(bin(a ^ b).count("1") for a, b in zip(root1, root2))
    # Binomial(256, 0.5): P(<= 77 differing bits) is below 2**-32.
    assert differing_bits > 77


def test_root_is_32_bytes():
    tree = MerkleTree()
    tree.push_leaf(bytes.fromhex("4c16c619d7716fae49552b3393fd07cff4c6f16a1ab5a2f7ce5240f94a6d1f29"))
    assert len(tree.compute_root()) == 32
"""Tests for RSA-OAEP key pair management."""
import base64
import importlib
import os
import sys

from cryptography.hazmat.primitives import serialization
from cryptography.hazmat.primitives.asymmetric import ec

from hybridcrypt import codec
from hybridcrypt.config import Config, configure_logging
from hybridcrypt.exceptions import (
    CryptoOperationError,
    CryptoProviderError,
    EncodingError,
    KeyFormatError,
    KeyRoleError,
    PayloadTooLargeError
)
from hybridcrypt.key_exchange import AsymmetricKeyManager
from hybridcrypt.keys import Key, KeyAlgorithm, KeyRole

manager = AsymmetricKeyManager()
pair_a = manager.generate_key_pair()
pair_b = manager.generate_key_pair()


def test_hello_scenario():
    """Test encrypting "Hello" with an exported public key."""
    print("Testing RSA hello scenario...")

    pub = manager.export_public_key(pair_a.public_key)
    encrypted = manager.encrypt("SGVsbG8=", pub)
    decrypted = manager.decrypt(encrypted, pair_a.private_key)

    assert decrypted == "SGVsbG8=", "Decrypted payload should match"
    assert base64.b64decode(decrypted) == b"Hello"
    assert len(codec.decode(encrypted)) == 256, "Ciphertext should be one 2048-bit block"

    print("  [OK] RSA hello scenario works")


def test_payload_limit():
    """Test the OAEP payload size limit."""
    print("Testing RSA payload limit...")

    assert AsymmetricKeyManager.max_payload_size(2048) == 190

    pub = manager.export_public_key(pair_a.public_key)
    for size in (0, 1, 32, 190):
        payload = codec.encode(bytes([size % 256]) * size)
        encrypted = manager.encrypt(payload, pub)
        assert manager.decrypt(encrypted, pair_a.private_key) == payload, f"Round trip failed at {size} bytes"

    try:
        manager.encrypt(codec.encode(b"x" * 191), pub)
        assert False, "Should have raised PayloadTooLargeError"
    except PayloadTooLargeError as e:
        assert e.size == 191 and e.limit == 190

    print("  [OK] Payload limit enforced")


def test_oaep_is_randomized():
    """Test that encrypting the same payload twice gives different ciphertexts."""
    pub = manager.export_public_key(pair_a.public_key)
    assert manager.encrypt("SGVsbG8=", pub) != manager.encrypt("SGVsbG8=", pub)


def test_export_import_round_trip():
    """Test exported keys import to behaviorally identical keys."""
    print("Testing RSA export/import...")

    pub = manager.export_public_key(pair_a.public_key)
    imported_pub = manager.import_public_key(pub)
    assert imported_pub.role is KeyRole.PUBLIC
    assert imported_pub.algorithm is KeyAlgorithm.RSA_OAEP
    assert manager.export_public_key(imported_pub) == pub, "Re-export should be identical"

    prv = manager.export_private_key(pair_a.private_key)
    imported_prv = manager.import_private_key(prv)
    assert imported_prv.role is KeyRole.PRIVATE
    assert manager.export_private_key(imported_prv) == prv

    encrypted = manager.encrypt("c2VjcmV0", manager.export_public_key(imported_pub))
    assert manager.decrypt(encrypted, imported_prv) == "c2VjcmV0"
    assert manager.decrypt(encrypted, pair_a.private_key) == "c2VjcmV0"

    # DER, not PEM
    assert not codec.decode(pub).startswith(b"-----")

    print("  [OK] RSA export/import works")


def test_export_private_key_none():
    """Test that an absent private key passes through."""
    assert manager.export_private_key(None) is None


def test_independent_key_pairs():
    """Test that two generated pairs are distinct."""
    assert manager.export_private_key(pair_a.private_key) != manager.export_private_key(pair_b.private_key)
    assert manager.export_public_key(pair_a.public_key) != manager.export_public_key(pair_b.public_key)


def test_wrong_key_fails():
    """Test decrypting with an unrelated private key."""
    print("Testing RSA wrong key...")

    encrypted = manager.encrypt("SGVsbG8=", manager.export_public_key(pair_a.public_key))
    try:
        manager.decrypt(encrypted, pair_b.private_key)
        assert False, "Should have raised CryptoOperationError"
    except CryptoOperationError as e:
        assert e.original_error is not None

    tampered = bytearray(codec.decode(encrypted))
    tampered[10] ^= 0x01
    try:
        manager.decrypt(codec.encode(bytes(tampered)), pair_a.private_key)
        assert False, "Should have raised CryptoOperationError"
    except CryptoOperationError:
        pass

    print("  [OK] Wrong key rejected")


def test_corrupted_key_import_fails():
    """Test that a single flipped bit in an exported key is rejected."""
    print("Testing corrupted key import...")

    prv = manager.export_private_key(pair_a.private_key)

    # Flip a bit in the text itself
    middle = len(prv) // 2
    corrupted_text = prv[:middle] + chr(ord(prv[middle]) ^ 0x01) + prv[middle + 1:]
    try:
        manager.import_private_key(corrupted_text)
        assert False, "Should have raised KeyFormatError"
    except KeyFormatError:
        pass

    # Flip a bit in the key material
    der = bytearray(codec.decode(prv))
    der[len(der) // 2] ^= 0x01
    try:
        manager.import_private_key(codec.encode(bytes(der)))
        assert False, "Should have raised KeyFormatError"
    except KeyFormatError:
        pass

    # Flip a bit in the public key's algorithm header
    pub_der = bytearray(codec.decode(manager.export_public_key(pair_a.public_key)))
    pub_der[8] ^= 0x01
    try:
        manager.import_public_key(codec.encode(bytes(pub_der)))
        assert False, "Should have raised KeyFormatError"
    except KeyFormatError:
        pass

    print("  [OK] Corrupted keys rejected")


def test_corrupted_public_key_numbers_fail():
    """Test flipped bits in the public modulus and exponent are rejected."""
    print("Testing corrupted public key numbers...")

    numbers = pair_a.public_key.material.public_numbers()
    der = codec.decode(manager.export_public_key(pair_a.public_key))
    modulus_start = der.index(numbers.n.to_bytes(256, "big"))

    for index, bit in (
        (modulus_start + 255, 0x01),  # last modulus byte: even modulus
        (modulus_start, 0x80),  # top modulus bit: 2047-bit key
        (len(der) - 1, 0x01),  # exponent 65537 -> 65536
        (len(der) - 3, 0x02),  # exponent 65537 -> 196609
    ):
        corrupted = bytearray(der)
        corrupted[index] ^= bit
        try:
            manager.import_public_key(codec.encode(bytes(corrupted)))
            assert False, f"Should have raised KeyFormatError for byte {index}"
        except KeyFormatError:
            pass

    # A flip in the middle of the modulus keeps it odd and full length; SPKI
    # has no checksum, so that key still loads as a different valid key.

    print("  [OK] Corrupted public key numbers rejected")


def test_mismatched_format_import_fails():
    """Test importing keys in the wrong role or algorithm."""
    pub = manager.export_public_key(pair_a.public_key)
    prv = manager.export_private_key(pair_a.private_key)

    for func, value in (
        (manager.import_public_key, prv),
        (manager.import_private_key, pub),
        (manager.import_public_key, "not base64!"),
        (manager.import_private_key, codec.encode(b"\x00" * 32)),
    ):
        try:
            func(value)
            assert False, f"{func.__name__} should have raised KeyFormatError"
        except KeyFormatError:
            pass

    ec_der = ec.generate_private_key(ec.SECP256R1()).public_key().public_bytes(
        encoding=serialization.Encoding.DER,
        format=serialization.PublicFormat.SubjectPublicKeyInfo
    )
    try:
        manager.import_public_key(codec.encode(ec_der))
        assert False, "Should have raised KeyFormatError for an EC key"
    except KeyFormatError:
        pass


def test_role_checks():
    """Test operations reject keys with the wrong role."""
    for call in (
        lambda: manager.export_public_key(pair_a.private_key),
        lambda: manager.export_private_key(pair_a.public_key),
        lambda: manager.decrypt("AAAA", pair_a.public_key),
        lambda: manager.decrypt("AAAA", None),
        lambda: manager.decrypt("AAAA", manager.export_private_key(pair_a.private_key)),
        lambda: manager.export_public_key("not a key"),
        lambda: manager.export_private_key("not a key"),
        lambda: manager.decrypt("AAAA", Key(KeyAlgorithm.AES_CBC, KeyRole.SECRET, b"\x00" * 32)),
        lambda: manager.export_public_key(
            Key(KeyAlgorithm.RSA_OAEP, KeyRole.PUBLIC, pair_a.public_key.material, extractable=False)
        ),
    ):
        try:
            call()
            assert False, "Should have raised KeyRoleError"
        except KeyRoleError:
            pass


def test_invalid_base64_payload():
    """Test non-base64 payload and ciphertext inputs."""
    pub = manager.export_public_key(pair_a.public_key)
    for call in (
        lambda: manager.encrypt("Hello", pub),
        lambda: manager.decrypt("%%%%", pair_a.private_key),
    ):
        try:
            call()
            assert False, "Should have raised EncodingError"
        except EncodingError:
            pass


def test_unsupported_key_size():
    """Test generation with an unsupported modulus size."""
    config = Config()
    config.rsa_key_size = 1024
    try:
        AsymmetricKeyManager(config).generate_key_pair()
        assert False, "Should have raised CryptoProviderError"
    except CryptoProviderError:
        pass


def test_non_numeric_key_size_env():
    """Test a malformed key size setting fails at generation, not at import."""
    old_size = os.environ.get("HYBRIDCRYPT_RSA_KEY_SIZE")
    os.environ["HYBRIDCRYPT_RSA_KEY_SIZE"] = "2k"
    try:
        import hybridcrypt.aio
        importlib.reload(hybridcrypt.aio)

        config = Config()
        assert config.rsa_key_size is None
        assert config.rsa_key_size_raw == "2k"
        try:
            AsymmetricKeyManager(config).generate_key_pair()
            assert False, "Should have raised CryptoProviderError"
        except CryptoProviderError as e:
            assert "2k" in str(e)
    finally:
        if old_size is None:
            os.environ.pop("HYBRIDCRYPT_RSA_KEY_SIZE", None)
        else:
            os.environ["HYBRIDCRYPT_RSA_KEY_SIZE"] = old_size
        importlib.reload(hybridcrypt.aio)


def test_key_repr_hides_material():
    """Test that key handles never print their material."""
    text = repr(Key(KeyAlgorithm.AES_CBC, KeyRole.SECRET, b"supersecretkeymaterial0123456789"))
    assert "supersecret" not in text
    assert "AES_CBC" in text


def test_key_pair_unpacking():
    public_key, private_key = pair_a
    assert public_key is pair_a.public_key
    assert private_key is pair_a.private_key


def run_all_tests():
    """Run all RSA tests."""
    configure_logging()
    tests = [
        test_hello_scenario,
        test_payload_limit,
        test_oaep_is_randomized,
        test_export_import_round_trip,
        test_export_private_key_none,
        test_independent_key_pairs,
        test_wrong_key_fails,
        test_corrupted_key_import_fails,
        test_corrupted_public_key_numbers_fail,
        test_mismatched_format_import_fails,
        test_role_checks,
        test_invalid_base64_payload,
        test_unsupported_key_size,
        test_non_numeric_key_size_env,
        test_key_repr_hides_material,
        test_key_pair_unpacking,
    ]
    failed = 0

    for test in tests:
        try:
            test()
        except Exception as e:
            print(f"  [FAIL] {test.__name__}: {e}")
            failed += 1

    print(f"Tests passed: {len(tests) - failed}")
    print(f"Tests failed: {failed}")
    return failed == 0


if __name__ == "__main__":
    sys.exit(0 if run_all_tests() else 1)

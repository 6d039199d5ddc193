from userhub.infrastructure.passwords import PasswordHasher


def test_hash_is_salted_and_not_plaintext():
    hasher = PasswordHasher()
    first, second = hasher.hash("p"), hasher.hash("p")
    assert first != "p"
    assert first != second
    assert first.startswith("$pbkdf2-sha256$")


def test_verify_round_trip():
    hasher = PasswordHasher()
    hashed = hasher.hash("correct horse")
    assert hasher.verify("correct horse", hashed)
    assert not hasher.verify("wrong", hashed)


def test_verify_unrecognized_hash_is_false():
    assert not PasswordHasher().verify("p", "p")

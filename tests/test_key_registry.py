# tests/test_key_registry.py
from pass_jwt.adapters.memory.key_registry import InMemoryKeyRegistry
from pass_jwt.domain.keys import KeySet, OctJwk
from pass_jwt.domain.value_objects import IssuerId


def test_resolve(registry, key_set):
    assert registry.resolve(b"org-42", "k1") == key_set.get("k1")
    assert registry.resolve(b"org-42", "k-missing") is None
    assert registry.resolve(b"org-43", "k1") is None


def test_resolve_is_byte_exact(registry):
    assert registry.resolve(b"ORG-42", "k1") is None
    assert registry.resolve(b"org-42 ", "k1") is None


def test_disabled_issuer_resolves_nothing(key_set):
    disabled = KeySet(keys=key_set.keys, enabled=False)
    registry = InMemoryKeyRegistry({"org-42": disabled})

    assert registry.resolve(b"org-42", "k1") is None
    assert registry.key_set("org-42") is disabled


def test_issuer_forms_are_equivalent(key_set):
    by_str = InMemoryKeyRegistry({"org-42": key_set})
    by_bytes = InMemoryKeyRegistry({b"org-42": key_set})
    by_id = InMemoryKeyRegistry({IssuerId(b"org-42"): key_set})

    for registry in (by_str, by_bytes, by_id):
        assert registry.issuers == (b"org-42",)
        assert registry.resolve(b"org-42", "k1") is not None


def test_with_key_set_returns_new_snapshot(registry):
    extra = KeySet.of(OctJwk(kid="s1", k="c2VjcmV0"))
    updated = registry.with_key_set("org-43", extra)

    assert updated is not registry
    assert updated.resolve(b"org-43", "s1") == OctJwk(kid="s1", k="c2VjcmV0")
    assert registry.resolve(b"org-43", "s1") is None
    # existing issuers carry over
    assert updated.resolve(b"org-42", "k1") == registry.resolve(b"org-42", "k1")


def test_with_key_set_replaces_rotated_keys(registry):
    rotated = KeySet.of(OctJwk(kid="k2", k="bmV3LXNlY3JldA"))
    updated = registry.with_key_set("org-42", rotated)

    assert updated.resolve(b"org-42", "k1") is None
    assert updated.resolve(b"org-42", "k2") is not None
    assert registry.resolve(b"org-42", "k1") is not None


def test_without_issuer(registry):
    removed = registry.without_issuer("org-42")

    assert "org-42" not in removed
    assert removed.resolve(b"org-42", "k1") is None
    assert "org-42" in registry


def test_contains():
    registry = InMemoryKeyRegistry({"org-42": KeySet()})

    assert "org-42" in registry
    assert b"org-42" in registry
    assert "org-43" not in registry
    assert "" not in registry
    assert 42 not in registry


def test_from_jwks_documents(jwks_document):
    registry = InMemoryKeyRegistry.from_jwks_documents({"org-42": jwks_document})

    assert len(registry.key_set("org-42")) == 4
    assert registry.resolve(b"org-42", "k-ed").crv == "Ed25519"

"""Tests for error registry construction and lookup."""

import json
from collections.abc import ItemsView

import pytest

from resterr import (
    DescriptorSerializationError,
    DescriptorValidationError,
    ErrorDescriptor,
    RegistryConstructionError,
    build_registry,
    error_status,
    wrap,
)


class TestBuildRegistry:
    """Test building a registry from an error table."""

    def test_without_validator(self, error_table, sentinels):
        """Test that every entry is stored with its payload."""
        registry = build_registry(error_table)

        assert len(registry) == len(error_table)
        assert sentinels.foo in registry
        assert sentinels.bar in registry

        foo = registry.get(sentinels.foo)
        assert foo.serialized == b'{"status-code":418,"message":"foo err"}'

    def test_generic_error_is_prepared(self, registry):
        """Test the cached generic descriptor."""
        generic = json.loads(registry.generic.serialized)

        assert generic == {"status-code": 500, "message": "something went wrong"}

    def test_template_forms(self):
        """Test descriptor, mapping and pair templates."""
        a, b, c = ValueError("a"), ValueError("b"), ValueError("c")

        registry = build_registry({
            a: ErrorDescriptor(status_code=400, message="a"),
            b: {"status_code": 401, "message": "b"},
            c: [402, "c"],
        })

        assert [registry.get(e).status_code for e in (a, b, c)] == [400, 401, 402]

    def test_empty_table(self):
        """Test that an empty table still provides the generic error."""
        registry = build_registry({})

        assert len(registry) == 0
        assert registry.generic.serialized is not None

    def test_registry_is_a_snapshot(self):
        """Test that later changes to the table do not leak in."""
        err = ValueError("x")
        table = {err: (400, "bad")}
        registry = build_registry(table)

        table[ValueError("y")] = (401, "later")

        assert len(registry) == 1

    def test_passing_validation(self, error_table):
        """Test a validator that accepts everything."""
        seen = []

        registry = build_registry(error_table, validator=seen.append)

        assert len(registry) == len(error_table)
        assert len(seen) == len(error_table)

    def test_failing_validation_raises(self):
        """Test that a raising validator aborts construction."""
        failure = AssertionError("computer says no")

        def reject(descriptor):
            raise failure

        with pytest.raises(DescriptorValidationError) as exc_info:
            build_registry({ValueError("x"): (400, "bad")}, validator=reject)

        assert exc_info.value.__cause__ is failure
        assert "computer says no" in str(exc_info.value)

    def test_validator_returning_false_rejects(self):
        """Test rejection by returning False."""
        with pytest.raises(DescriptorValidationError, match="rejected by validator"):
            build_registry({ValueError("x"): (400, "bad")}, validator=lambda d: False)

    def test_status_range_validation(self):
        """Test that a 399 template fails a 4xx/5xx validator."""
        sentinel = ValueError("x")

        with pytest.raises(DescriptorValidationError) as exc_info:
            build_registry(
                {ValueError("ok"): (404, "missing"), sentinel: (399, "nope")},
                validator=error_status,
            )

        assert exc_info.value.sentinel is sentinel
        assert exc_info.value.descriptor.status_code == 399

    def test_invalid_template(self):
        """Test templates that are not descriptors."""
        with pytest.raises(DescriptorValidationError):
            build_registry({ValueError("x"): {"status_code": "abc", "message": "m"}})

        with pytest.raises(DescriptorValidationError):
            build_registry({ValueError("x"): (400, "m", "extra")})

        with pytest.raises(DescriptorValidationError):
            build_registry({ValueError("x"): "400 bad"})

    def test_sentinel_must_be_an_exception_instance(self):
        """Test that string keys and exception classes are refused."""
        with pytest.raises(RegistryConstructionError, match="exception instance"):
            build_registry({"not-found": (404, "missing")})

        with pytest.raises(RegistryConstructionError, match="exception instance"):
            build_registry({LookupError: (404, "missing")})

    def test_sentinel_must_be_hashable(self):
        """Test that an exception with __eq__ but no __hash__ cannot be a key."""

        class Comparable(Exception):
            def __eq__(self, other):
                return isinstance(other, Comparable)

        with pytest.raises(TypeError, match="unhashable"):
            build_registry({Comparable(): (400, "bad")})

    def test_serialization_failure(self):
        """Test that an unserializable descriptor aborts construction."""

        class BrokenDescriptor(ErrorDescriptor):
            def serialize(self):
                raise ValueError("cannot render")

        broken = BrokenDescriptor(status_code=400, message="bad")

        with pytest.raises(DescriptorSerializationError) as exc_info:
            build_registry({ValueError("x"): broken})

        assert exc_info.value.descriptor is broken
        assert isinstance(exc_info.value, RegistryConstructionError)


class TestLookup:
    """Test chain-aware lookup."""

    def test_direct_and_wrapped(self, registry, sentinels):
        """Test lookup of a sentinel and of an error wrapping it."""
        assert registry.lookup(sentinels.foo).status_code == 418
        assert registry.lookup(wrap("ctx", sentinels.not_found)).status_code == 404

    def test_match_returns_sentinel(self, registry, sentinels):
        """Test that match() reports the registered key."""
        sentinel, descriptor = registry.match(wrap("ctx", sentinels.bar))

        assert sentinel is sentinels.bar
        assert descriptor.status_code == 425

    def test_unknown_error(self, registry):
        """Test lookup of an unregistered error."""
        assert registry.lookup(RuntimeError("?")) is None
        assert registry.match(RuntimeError("?")) is None

    def test_get_does_not_walk_chains(self, registry, sentinels):
        """Test that get() is an exact lookup."""
        assert registry.get(wrap("ctx", sentinels.foo)) is None

    def test_iteration(self, registry, sentinels):
        """Test iterating over registered sentinels."""
        assert set(registry) == {sentinels.foo, sentinels.bar, sentinels.not_found}
        assert isinstance(registry.items(), ItemsView)
        assert dict(registry.items())[sentinels.foo].status_code == 418

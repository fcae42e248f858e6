"""Tests for StepSequence: uniqueness, dependency checks, ordering, branching."""

from __future__ import annotations

from dataclasses import FrozenInstanceError

import pytest

from stepchain import (
    ArgOrder,
    DuplicateNameError,
    InvalidStepError,
    Invoke,
    Observe,
    ObserveKey,
    Ok,
    PipelineBuildError,
    Put,
    StepSequence,
    UnknownDependencyError,
)


def _identity(value):
    return Ok(value)


# ------------------------------------------------------------------ #
# Construction
# ------------------------------------------------------------------ #


@pytest.mark.unit
class TestNew:
    def test_new_is_empty(self):
        seq = StepSequence.new()
        assert seq.to_list() == []
        assert seq.names() == []
        assert seq.claimed == frozenset()
        assert len(seq) == 0

    def test_new_equals_default_constructor(self):
        assert StepSequence.new() == StepSequence()

    def test_frozen(self):
        with pytest.raises(FrozenInstanceError):
            StepSequence().entries = ()  # type: ignore[misc]


# ------------------------------------------------------------------ #
# Uniqueness
# ------------------------------------------------------------------ #


@pytest.mark.unit
class TestUniqueness:
    def test_duplicate_put_raises(self):
        seq = StepSequence().put("test", "test")
        with pytest.raises(DuplicateNameError, match="'test' is already a member"):
            seq.put("test", "fails")

    def test_duplicate_across_kinds_raises(self):
        seq = StepSequence().run("run", lambda acc: Ok(None))
        with pytest.raises(DuplicateNameError) as exc_info:
            seq.append("run", Put(1))
        assert exc_info.value.name == "run"

    def test_failed_append_leaves_sequence_unchanged(self):
        seq = StepSequence().put("a", 1).put("b", 2)
        before = seq.to_list()
        with pytest.raises(DuplicateNameError):
            seq.put("a", 3)
        assert seq.to_list() == before
        assert seq.claimed == {"a", "b"}

    def test_build_errors_share_a_base(self):
        seq = StepSequence().put("a", 1)
        with pytest.raises(PipelineBuildError):
            seq.put("a", 1)
        with pytest.raises(ValueError):
            seq.put("a", 1)

    def test_names_of_any_hashable_type(self):
        seq = StepSequence().put(("tuple", 1), 1).put(42, 2).put(None, 3)
        assert seq.names() == [("tuple", 1), 42, None]

    def test_unhashable_name_rejected(self):
        with pytest.raises(InvalidStepError, match="hashable"):
            StepSequence().put(["not", "hashable"], 1)


# ------------------------------------------------------------------ #
# Dependency validation
# ------------------------------------------------------------------ #


@pytest.mark.unit
class TestDependencies:
    def test_unknown_key_rejected_at_build_time(self):
        calls = []

        def side_effect(acc):
            calls.append(acc)
            return Ok("hello world")

        seq = StepSequence().run("read", side_effect)
        with pytest.raises(UnknownDependencyError, match="'foo' does not exist") as exc_info:
            seq.run("write", _identity, ["foo"])
        assert exc_info.value.name == "write"
        assert exc_info.value.key == "foo"
        assert calls == []

    def test_first_missing_key_is_reported(self):
        seq = StepSequence().put("a", 1)
        with pytest.raises(UnknownDependencyError) as exc_info:
            seq.run("c", lambda *xs: Ok(xs), ["a", "missing", "also_missing"])
        assert exc_info.value.key == "missing"

    def test_known_keys_accepted(self):
        seq = StepSequence().put("a", 1).put("b", 2)
        seq = seq.run("c", lambda a, b: Ok(a + b), ["a", "b"])
        assert seq.names() == ["a", "b", "c"]

    def test_self_reference_rejected(self):
        with pytest.raises(UnknownDependencyError):
            StepSequence().run("a", _identity, ["a"])

    def test_observe_names_cannot_be_selected(self):
        seq = StepSequence().put("a", 1).append("peek", Observe())
        with pytest.raises(UnknownDependencyError):
            seq.run("b", _identity, ["peek"])

    def test_full_state_steps_need_no_dependencies(self):
        seq = StepSequence().run("a", lambda acc: Ok(len(acc)))
        assert seq.names() == ["a"]

    def test_checks_can_be_disabled(self):
        seq = StepSequence.new(check_dependencies=False)
        seq = seq.run("b", _identity, ["later"])
        assert seq.names() == ["b"]
        assert seq.check_dependencies is False

    def test_disabled_checks_survive_appends(self):
        seq = StepSequence(check_dependencies=False).put("a", 1)
        assert seq.check_dependencies is False


# ------------------------------------------------------------------ #
# Ordering and read access
# ------------------------------------------------------------------ #


@pytest.mark.unit
class TestOrdering:
    def test_names_follow_append_order(self):
        names = ["z", "a", "m", "b"]
        seq = StepSequence()
        for name in names:
            seq = seq.put(name, name.upper())
        assert seq.names() == names

    def test_to_list_reproduces_payloads(self):
        def read(acc):
            return Ok("read")

        def write(read_value, opts):
            return Ok(read_value)

        payload = object()
        seq = (
            StepSequence()
            .put("init", payload)
            .run("read", read)
            .run("write", write, ["read"], args=[{"upcase": True}], order="append")
        )

        assert seq.to_list() == [
            ("init", Put(payload)),
            ("read", Invoke.full_state(read)),
            ("write", Invoke.selected(write, ["read"], [{"upcase": True}], ArgOrder.APPEND)),
        ]
        assert seq.to_list()[0][1].value is payload

    def test_append_and_fluent_forms_are_equivalent(self):
        fluent = StepSequence().put("a", 1).run("b", _identity, ["a"])
        explicit = (
            StepSequence()
            .append("a", Put(1))
            .append("b", Invoke.selected(_identity, ["a"]))
        )
        assert fluent == explicit

    def test_run_with_empty_keys_is_full_state(self):
        seq = StepSequence().run("a", _identity, [])
        (_, step), = seq.to_list()
        assert step.is_full_state

    def test_iteration_and_membership(self):
        seq = StepSequence().put("a", 1).put("b", 2)
        assert [name for name, _ in seq] == ["a", "b"]
        assert "a" in seq
        assert "zzz" not in seq
        assert ["unhashable"] not in seq

    def test_claimed_matches_names(self):
        seq = StepSequence().put("a", 1).observe().put("b", 2)
        assert seq.claimed == set(seq.names())
        assert len(seq.claimed) == len(seq.names())


# ------------------------------------------------------------------ #
# Observation entries
# ------------------------------------------------------------------ #


@pytest.mark.unit
class TestObserveEntries:
    def test_observe_uses_generated_names(self):
        seq = StepSequence().put("a", 1).observe().observe(only="a")
        names = seq.names()
        assert names[0] == "a"
        assert names[1:] == [ObserveKey(1), ObserveKey(2)]

    def test_observe_carries_options(self):
        seq = StepSequence().observe(only=["a", "b"], label="debug")
        (_, step), = seq.to_list()
        assert isinstance(step, Observe)
        assert step.options.only == ("a", "b")
        assert step.options.label == "debug"

    def test_observe_key_repr(self):
        assert repr(ObserveKey(3)) == "<observe #3>"


# ------------------------------------------------------------------ #
# Immutability / branching
# ------------------------------------------------------------------ #


@pytest.mark.unit
class TestBranching:
    def test_append_returns_new_sequence(self):
        base = StepSequence().put("a", 1)
        extended = base.put("b", 2)
        assert base.names() == ["a"]
        assert extended.names() == ["a", "b"]

    def test_branches_are_independent(self):
        base = StepSequence().put("raw", 3)
        left = base.run("double", lambda x: Ok(x * 2), ["raw"])
        right = base.run("square", lambda x: Ok(x * x), ["raw"])

        assert left.names() == ["raw", "double"]
        assert right.names() == ["raw", "square"]
        assert base.names() == ["raw"]

    def test_same_name_allowed_on_separate_branches(self):
        base = StepSequence().put("raw", 3)
        left = base.put("out", "left")
        right = base.put("out", "right")
        assert left.to_list()[-1][1] == Put("left")
        assert right.to_list()[-1][1] == Put("right")

    def test_invalid_step_object_rejected(self):
        with pytest.raises(InvalidStepError, match="Put, Invoke or Observe"):
            StepSequence().append("a", lambda acc: Ok(1))  # type: ignore[arg-type]


# ------------------------------------------------------------------ #
# Key normalisation
# ------------------------------------------------------------------ #


@pytest.mark.unit
class TestKeyNormalisation:
    def test_single_string_key_is_wrapped(self):
        seq = StepSequence().put("raw", "42").run("parsed", lambda raw: Ok(int(raw)), "raw")
        (_, step) = seq.to_list()[-1]
        assert step.keys == ("raw",)
        assert seq.execute().value == {"raw": "42", "parsed": 42}

    def test_string_key_not_split_into_characters(self, make_recorder):
        recorder = make_recorder(Ok("done"))
        seq = (
            StepSequence()
            .put("r", "R")
            .put("a", "A")
            .put("w", "W")
            .put("raw", "RAW")
            .run("out", recorder, "raw")
        )
        seq.execute()
        assert recorder.calls == [("RAW",)]

    def test_single_non_string_key_is_wrapped(self):
        seq = StepSequence().put(7, "seven").run("echo", lambda v: Ok(v), 7)
        assert seq.execute().value["echo"] == "seven"

    def test_unhashable_key_rejected(self):
        seq = StepSequence().put("a", 1)
        with pytest.raises(InvalidStepError, match="hashable"):
            seq.run("b", _identity, [["a"]])
        assert seq.names() == ["a"]

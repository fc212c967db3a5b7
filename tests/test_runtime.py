"""Tests for the reference types used by the python target."""

import pytest
from capture.runtime import MutRef, SharedRef


class TestSharedRef:

    def test_value_is_same_object(self):
        data = {"k": 1}
        assert SharedRef(data).value is data

    def test_read_only(self):
        ref = SharedRef(1)
        with pytest.raises(AttributeError):
            ref.value = 2

    def test_equality_by_identity(self):
        data = []
        assert SharedRef(data) == SharedRef(data)
        assert SharedRef([]) != SharedRef([])

    def test_hashable(self):
        data = []
        assert len({SharedRef(data), SharedRef(data)}) == 1


class TestMutRef:

    def test_write_through_value(self):
        ref = MutRef(1)
        ref.value = 2
        assert ref.value == 2

    def test_replace_returns_old(self):
        ref = MutRef("a")
        assert ref.replace("b") == "a"
        assert ref.value == "b"

    def test_mutation_reaches_original(self):
        data = []
        MutRef(data).value.append(1)
        assert data == [1]

    def test_assignment_rebinds_handle_only(self):
        original = [1]
        ref = MutRef(original)
        ref.value = [2]
        ref.replace([3])
        assert original == [1]

    def test_not_hashable(self):
        with pytest.raises(TypeError):
            hash(MutRef(1))

"""Tests for the defect taxonomy."""

from typing import Literal

import pytest

from htcdl.domain.defects import (
    DefectList,
    DuplicateName,
    InvalidContext,
    InvalidReference,
    UnreachableStates,
    _Defect,
)


class TestMessages:
    def test_invalid_reference_with_location(self) -> None:
        defect = InvalidReference(
            element_type="Command",
            referenced_type="Event",
            referenced_name="done",
            location="start",
        )
        assert defect.message == "Command (start) references non-existent Event 'done'"

    def test_invalid_reference_without_location(self) -> None:
        defect = InvalidReference(element_type="Rule", referenced_type="Event", referenced_name="x")
        assert defect.message == "Rule references non-existent Event 'x'"

    def test_unreachable_states_lists_names(self) -> None:
        defect = UnreachableStates(initial_state="Idle", names=("C", "D"))
        assert defect.message == "Unreachable states from 'Idle': 'C', 'D'"

    def test_invalid_context(self) -> None:
        defect = InvalidContext(expected="dtmi:a;1", actual="dtmi:b;1")
        assert defect.message == "Invalid context: expected 'dtmi:a;1', got 'dtmi:b;1'"


class TestBaseDefect:
    def test_base_cannot_be_instantiated(self) -> None:
        with pytest.raises(TypeError):
            _Defect()

    def test_subclass_must_define_message(self) -> None:
        class Silent(_Defect):
            kind: Literal["silent"] = "silent"

        with pytest.raises(TypeError):
            Silent()


class TestDefectList:
    def test_to_dicts_attaches_message(self) -> None:
        defects = DefectList(defects=(DuplicateName(element_type="Event", name="e"),))
        assert defects.to_dicts() == [
            {
                "kind": "duplicate_name",
                "element_type": "Event",
                "name": "e",
                "message": "Duplicate Event name: 'e'",
            }
        ]

    def test_of_kind_filters(self) -> None:
        dup = DuplicateName(element_type="Event", name="e")
        ctx = InvalidContext(expected="a", actual="b")
        defects = DefectList(defects=(dup, ctx))
        assert defects.of_kind("invalid_context") == [ctx]
        assert len(defects) == 2
        assert dup in defects

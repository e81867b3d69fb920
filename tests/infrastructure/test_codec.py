"""Tests for decoding and encoding model documents."""

from __future__ import annotations

import json
from pathlib import Path

import pytest

from htcdl.domain.builders import ModelBuilder, command, prop
from htcdl.domain.model import Model
from htcdl.domain.types import ExecutionMode, IntentType
from htcdl.infrastructure.codec import (
    DECODING_ERROR,
    FILE_NOT_FOUND,
    INVALID_JSON,
    ModelDecodeError,
    decode_data,
    decode_model,
    encode_model,
    load_model,
    to_data,
    write_model,
)
from tests.conftest import CAR_MODEL_PATH, minimal_model, write_model_file


class TestDecode:
    def test_parse_car_model(self) -> None:
        model = load_model(CAR_MODEL_PATH)
        assert model.display_name == "Intelligent Simulated Car"
        assert model.id == "dtmi:htc:mobility:car;1"
        assert model.kind == "Interface"

    def test_invalid_json(self) -> None:
        with pytest.raises(ModelDecodeError) as exc_info:
            decode_model("{not json")
        assert exc_info.value.code == INVALID_JSON
        assert exc_info.value.message.startswith("Invalid JSON format")

    def test_missing_required_field(self) -> None:
        with pytest.raises(ModelDecodeError) as exc_info:
            decode_data({"@context": "dtmi:htc:context;1", "@id": "dtmi:x;1", "@type": "Interface"})
        err = exc_info.value
        assert err.code == DECODING_ERROR
        locs = {e["loc"] for e in err.detail["errors"]}
        assert {"displayName", "description"} <= locs

    def test_bad_trigger_is_a_decoding_error(self) -> None:
        data = to_data(minimal_model())
        data["stateMachine"] = {
            "initialState": "A",
            "states": [{"name": "A"}],
            "transitions": [{"from": "A", "to": "A", "trigger": {}}],
        }
        with pytest.raises(ModelDecodeError) as exc_info:
            decode_data(data)
        assert exc_info.value.code == DECODING_ERROR
        assert "exactly one" in exc_info.value.message

    def test_non_object_document(self) -> None:
        with pytest.raises(ModelDecodeError) as exc_info:
            decode_model("[1, 2, 3]")
        assert exc_info.value.code == DECODING_ERROR

    def test_missing_file(self, tmp_path: Path) -> None:
        with pytest.raises(ModelDecodeError) as exc_info:
            load_model(tmp_path / "nope.htcdl.json")
        assert exc_info.value.code == FILE_NOT_FOUND
        assert exc_info.value.detail["path"].endswith("nope.htcdl.json")

    def test_loads_from_disk(self, tmp_path: Path) -> None:
        path = write_model_file(tmp_path, encode_model(minimal_model()))
        assert load_model(path) == minimal_model()


class TestEncode:
    def test_serialize_contains_wire_names(self) -> None:
        model = (
            ModelBuilder("dtmi:test:simple;1", "Simple Test", "A simple test model")
            .with_version("1.0.0")
            .add_property(prop("testProp", "string", writable=True))
            .add_command(command("testCommand", IntentType.CONTROL, ExecutionMode.SYNC))
            .build()
        )
        text = encode_model(model)
        assert "dtmi:test:simple;1" in text
        assert "Simple Test" in text
        assert "testProp" in text
        assert "testCommand" in text
        data = json.loads(text)
        assert data["@versionInfo"] == {"version": "1.0.0"}
        assert data["commands"][0]["executionMode"] == "sync"

    def test_absent_fields_are_omitted(self) -> None:
        data = to_data(minimal_model())
        assert set(data) == {"@context", "@id", "@type", "displayName", "description"}

    def test_car_model_survives_reencoding(self, car_model: Model) -> None:
        assert decode_model(encode_model(car_model)) == car_model

    def test_triggers_keep_wire_shape(self, car_model: Model) -> None:
        transitions = to_data(car_model)["stateMachine"]["transitions"]
        assert transitions[0]["trigger"] == {"command": "startEngine"}
        assert transitions[1]["trigger"] == {"condition": "speed > 0"}

    def test_write_model_creates_parents(self, tmp_path: Path, car_model: Model) -> None:
        target = tmp_path / "out" / "car.htcdl.json"
        write_model(car_model, target)
        assert load_model(target) == car_model

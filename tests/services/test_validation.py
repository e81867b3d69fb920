"""Tests for ValidationService."""

from __future__ import annotations

from pathlib import Path

from htcdl.config.settings import HtcSettings
from htcdl.domain.builders import ModelBuilder, command, event, rule
from htcdl.domain.defects import MissingRequiredField
from htcdl.domain.model import Model
from htcdl.infrastructure.codec import DECODING_ERROR, FILE_NOT_FOUND, INVALID_JSON
from htcdl.plugins.hookspecs import hookimpl
from htcdl.plugins.manager import PluginManager
from htcdl.services.result import INVALID_DTMI, VALIDATION_FAILED
from htcdl.services.telemetry import disable_telemetry, enable_telemetry
from htcdl.services.validation import ValidationService
from tests.conftest import CAR_MODEL_PATH, chain_model, minimal_model, write_model_file


class _OwnerCheckPlugin:
    @hookimpl
    def register_checks(self):
        def require_rules(model: Model):
            if not model.rules:
                yield MissingRequiredField(element_type="Model", field_name="rules")

        return [require_rules]


class _RecordingPlugin:
    def __init__(self) -> None:
        self.calls: list[tuple[str, bool, int]] = []

    @hookimpl
    def post_validate(self, model_id: str, ok: bool, defect_count: int) -> None:
        self.calls.append((model_id, ok, defect_count))


class _BrokenPlugin:
    @hookimpl
    def register_checks(self):
        def explode(model: Model):
            raise RuntimeError("boom")

        return [explode]

    @hookimpl
    def post_validate(self, model_id: str, ok: bool, defect_count: int) -> None:
        raise RuntimeError("hook boom")


class TestValidateFile:
    def test_car_model_is_valid(self, settings: HtcSettings) -> None:
        result = ValidationService(settings).validate_file(CAR_MODEL_PATH)
        assert result.ok
        assert result.op == "validate"
        assert result.data["id"] == "dtmi:htc:mobility:car;1"
        assert result.data["display_name"] == "Intelligent Simulated Car"
        assert result.data["defect_count"] == 0
        assert result.data["source"] == str(CAR_MODEL_PATH)
        assert result.warnings == []

    def test_missing_file(self, settings: HtcSettings, tmp_path: Path) -> None:
        result = ValidationService(settings).validate_file(tmp_path / "missing.json")
        assert not result.ok
        assert result.error is not None
        assert result.error.code == FILE_NOT_FOUND

    def test_invalid_json(self, settings: HtcSettings, tmp_path: Path) -> None:
        path = write_model_file(tmp_path, "{")
        result = ValidationService(settings).validate_file(path)
        assert result.error is not None
        assert result.error.code == INVALID_JSON

    def test_decoding_error(self, settings: HtcSettings, tmp_path: Path) -> None:
        path = write_model_file(tmp_path, '{"@id": "dtmi:x;1"}')
        result = ValidationService(settings).validate_file(path)
        assert result.error is not None
        assert result.error.code == DECODING_ERROR
        assert result.error.detail["errors"]


class TestValidateModel:
    def test_defects_fail_the_result(self, settings: HtcSettings) -> None:
        result = ValidationService(settings).validate_model(chain_model(("A", "B", "go")))
        assert not result.ok
        assert result.error is not None
        assert result.error.code == VALIDATION_FAILED
        assert result.error.message == "Model validation failed with 1 defect(s)"
        (defect,) = result.error.detail["defects"]
        assert defect["kind"] == "unreachable_states"
        assert defect["names"] == ("C",)
        assert result.error.detail["source"] is None

    def test_unused_events_become_warnings(self, settings: HtcSettings) -> None:
        model = (
            ModelBuilder("dtmi:test:w;1", "T", "T")
            .add_command(command("go", on_success="done"))
            .add_event(event("done"))
            .add_event(event("orphan"))
            .build()
        )
        result = ValidationService(settings).validate_model(model)
        assert result.ok
        assert result.warnings == ["Unused event: 'orphan'"]

    def test_unused_warnings_can_be_disabled(self, monkeypatch, tmp_path: Path) -> None:
        monkeypatch.setenv("HTCDL_VALIDATION__WARN_UNUSED", "false")
        settings = HtcSettings.from_cli(start=tmp_path)
        model = ModelBuilder("dtmi:test:w;1", "T", "T").add_event(event("orphan")).build()
        result = ValidationService(settings).validate_model(model)
        assert result.ok
        assert result.warnings == []

    def test_config_disables_reachability(self, monkeypatch, tmp_path: Path) -> None:
        monkeypatch.setenv("HTCDL_VALIDATION__CHECK_REACHABILITY", "false")
        settings = HtcSettings.from_cli(start=tmp_path)
        result = ValidationService(settings).validate_model(chain_model(("A", "B", "go")))
        assert result.ok

    def test_expected_context_comes_from_settings(self, monkeypatch, tmp_path: Path) -> None:
        monkeypatch.setenv("HTCDL_VALIDATION__EXPECTED_CONTEXT", "dtmi:acme:context;1")
        settings = HtcSettings.from_cli(start=tmp_path)
        result = ValidationService(settings).validate_model(minimal_model())
        assert result.error is not None
        (defect,) = result.error.detail["defects"]
        assert defect["kind"] == "invalid_context"
        assert defect["expected"] == "dtmi:acme:context;1"

    def test_action_event_check_follows_toml(self, tmp_path: Path) -> None:
        (tmp_path / "htcdl.toml").write_text("[validation]\ncheck_action_events = false\n")
        settings = HtcSettings.from_cli(start=tmp_path)
        model = (
            ModelBuilder("dtmi:test:w;1", "T", "T")
            .add_rule(rule("Hot", "t > 100", "never_declared"))
            .build()
        )
        assert ValidationService(settings).validate_model(model).ok
        assert not ValidationService(HtcSettings()).validate_model(model).ok

    def test_verbose_attaches_telemetry(self, settings: HtcSettings) -> None:
        enable_telemetry()
        try:
            result = ValidationService(settings).validate_file(CAR_MODEL_PATH)
        finally:
            disable_telemetry()
        assert result.meta is not None
        span = result.meta["telemetry"]
        assert span["name"] == "ValidationService.validate_file"
        decode, checks = span["children"]
        assert decode["name"] == "decode"
        assert checks["name"] == "checks"
        assert checks["annotations"] == {"defects": 0}
        assert [c["name"] for c in checks["children"]] == ["structure", "references", "reachability"]

    def test_each_check_span_counts_its_defects(self, settings: HtcSettings) -> None:
        pm = PluginManager()
        pm.register_plugin(_OwnerCheckPlugin(), name="owner")
        enable_telemetry()
        try:
            result = ValidationService(settings, pm).validate_model(chain_model(("A", "B", "go")))
        finally:
            disable_telemetry()
        assert result.meta is not None
        (checks,) = result.meta["telemetry"]["children"]
        counts = {c["name"]: c["annotations"]["defects"] for c in checks["children"]}
        assert counts == {
            "structure": 0,
            "references": 0,
            "reachability": 1,
            "extra:require_rules": 1,
        }
        assert checks["annotations"] == {"defects": 2}


class TestPlugins:
    def test_plugin_checks_add_defects(self, settings: HtcSettings) -> None:
        pm = PluginManager()
        pm.register_plugin(_OwnerCheckPlugin(), name="owner")
        result = ValidationService(settings, pm).validate_model(minimal_model())
        assert not result.ok
        assert result.error is not None
        assert result.error.detail["defects"][0]["field_name"] == "rules"

    def test_post_validate_dispatched(self, settings: HtcSettings) -> None:
        pm = PluginManager()
        recorder = _RecordingPlugin()
        pm.register_plugin(recorder, name="recorder")
        ValidationService(settings, pm).validate_model(minimal_model())
        ValidationService(settings, pm).validate_model(minimal_model("bad"))
        assert recorder.calls == [("dtmi:test:minimal;1", True, 0), ("bad", False, 1)]

    def test_plugin_failures_are_warnings(self, settings: HtcSettings) -> None:
        pm = PluginManager()
        pm.register_plugin(_BrokenPlugin(), name="broken")
        result = ValidationService(settings, pm).validate_model(minimal_model())
        assert result.ok
        assert len(result.warnings) == 2
        assert result.warnings[0].startswith("Plugin check ")
        assert result.warnings[1] == "Hook dispatch failed for post_validate"

    def test_disabled_plugins_contribute_nothing(self, monkeypatch, tmp_path: Path) -> None:
        monkeypatch.setenv("HTCDL_PLUGINS__ENABLED", "false")
        settings = HtcSettings.from_cli(start=tmp_path)
        pm = PluginManager()
        pm.register_plugin(_OwnerCheckPlugin(), name="owner")
        assert ValidationService(settings, pm).validate_model(minimal_model()).ok


class TestCheckId:
    def test_valid(self, settings: HtcSettings) -> None:
        result = ValidationService(settings).check_id("dtmi:htc:test;1")
        assert result.ok
        assert result.data == {"dtmi": "dtmi:htc:test;1", "valid": True}

    def test_invalid(self, settings: HtcSettings) -> None:
        result = ValidationService(settings).check_id("dtmi:test;0")
        assert not result.ok
        assert result.error is not None
        assert result.error.code == INVALID_DTMI
        assert result.error.detail["dtmi"] == "dtmi:test;0"

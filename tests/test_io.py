"""
Tests for the io layer: migrations, validation gates, export / import,
serializers, the JSON data store and the user config loader.
"""

import json
from pathlib import Path

import pytest

from tb3_planner.core.config import CURRENT_SCHEMA_VERSION
from tb3_planner.core.engine.config_loader import (
    build_default_inventories,
    build_default_profile,
    load_user_config,
)
from tb3_planner.core.models import (
    ActiveProgram,
    AppData,
    OneRepMaxTest,
    Plate,
    PlateInventory,
    UserProfile,
)
from tb3_planner.core.schedule import regenerate_schedule_if_needed
from tb3_planner.io.data_store import DataStore
from tb3_planner.io.export_import import build_export, validate_import
from tb3_planner.io.migrations import MigrationError, migrate_data
from tb3_planner.io.serializers import (
    ValidationError,
    app_data_to_dict,
    dict_to_app_data,
    dict_to_user_profile,
)
from tb3_planner.io.validation import validate_app_data, validate_import_data


def make_max_test(**overrides) -> dict:
    test = {
        "id": "test-1",
        "date": "2025-01-01",
        "liftName": "Squat",
        "weight": 300,
        "reps": 5,
        "calculatedMax": 350,
        "maxType": "training",
        "workingMax": 315,
        "lastModified": "2025-01-01T00:00:00.000Z",
    }
    test.update(overrides)
    return test


def make_app_dict(**overrides) -> dict:
    data = app_data_to_dict(AppData())
    data.update(overrides)
    return data


def make_import(**overrides) -> str:
    doc = {
        "tb3_export": True,
        "schemaVersion": CURRENT_SCHEMA_VERSION,
        "profile": {"maxType": "training", "roundingIncrement": 5},
        "sessionHistory": [],
        "maxTestHistory": [],
    }
    doc.update(overrides)
    return json.dumps(doc)


class TestMigrations:
    def test_v1_to_v2_adds_voice_announcements(self):
        result = migrate_data({"schemaVersion": 1, "profile": {"maxType": "training"}}, 2)
        assert result["schemaVersion"] == 2
        assert result["profile"]["voiceAnnouncements"] is False

    def test_v1_to_v2_preserves_existing(self):
        data = {"schemaVersion": 1, "profile": {"voiceAnnouncements": True}}
        assert migrate_data(data, 2)["profile"]["voiceAnnouncements"] is True

    def test_v2_to_v3_adds_voice_name(self):
        result = migrate_data({"schemaVersion": 2, "profile": {}}, 3)
        assert result["schemaVersion"] == 3
        assert result["profile"]["voiceName"] is None

    def test_v2_to_v3_preserves_existing(self):
        data = {"schemaVersion": 2, "profile": {"voiceName": "Samantha"}}
        assert migrate_data(data, 3)["profile"]["voiceName"] == "Samantha"

    def test_chain(self):
        result = migrate_data({"schemaVersion": 1, "profile": {}}, 3)
        assert result["schemaVersion"] == 3
        assert result["profile"]["voiceAnnouncements"] is False
        assert result["profile"]["voiceName"] is None

    def test_at_target_unchanged(self):
        data = {"schemaVersion": 3, "profile": {"voiceAnnouncements": True, "voiceName": "Alex"}}
        assert migrate_data(data, 3) == data

    def test_missing_step(self):
        with pytest.raises(MigrationError, match="No migration from v3 to v4"):
            migrate_data({"schemaVersion": 3, "profile": {}}, 5)

    @pytest.mark.parametrize("data", [{"profile": {}}, {"schemaVersion": 0, "profile": {}}])
    def test_absent_or_zero_is_v1(self, data):
        result = migrate_data(data, 3)
        assert result["schemaVersion"] == 3
        assert result["profile"]["voiceAnnouncements"] is False

    def test_input_not_mutated(self):
        data = {"schemaVersion": 1, "profile": {}}
        migrate_data(data, 3)
        assert data == {"schemaVersion": 1, "profile": {}}

    @pytest.mark.parametrize("version", [float("nan"), 1.5, "2"])
    def test_invalid_version_raises(self, version):
        with pytest.raises(MigrationError, match="Invalid schema version"):
            migrate_data({"schemaVersion": version, "profile": {}}, 3)


class TestValidateAppData:
    def test_ok(self):
        result = validate_app_data(make_app_dict())
        assert result.severity == "ok"
        assert result.errors == []

    @pytest.mark.parametrize("data", [None, "string", {"sessionHistory": [], "maxTestHistory": []}])
    def test_fatal(self, data):
        assert validate_app_data(data).severity == "fatal"

    def test_unknown_template_recoverable(self):
        program = {"templateId": "unknown-template", "startDate": "2025-01-01"}
        result = validate_app_data(make_app_dict(activeProgram=program))
        assert result.severity == "recoverable"
        assert any("Unknown template" in e for e in result.errors)

    def test_unknown_lift_warning(self):
        result = validate_app_data(make_app_dict(maxTestHistory=[make_max_test(liftName="Not A Real Lift")]))
        assert result.severity == "warning"
        assert any("Unknown lift" in e for e in result.errors)

    def test_weight_out_of_range(self):
        result = validate_app_data(make_app_dict(maxTestHistory=[make_max_test(weight=2000)]))
        assert result.severity == "warning"
        assert any("Weight out of range" in e for e in result.errors)

    def test_reps_out_of_range(self):
        result = validate_app_data(make_app_dict(maxTestHistory=[make_max_test(reps=20)]))
        assert any("Reps out of range" in e for e in result.errors)

    def test_duplicate_session_ids(self):
        result = validate_app_data(make_app_dict(sessionHistory=[{"id": "dup"}, {"id": "dup"}]))
        assert result.severity == "warning"
        assert any("Duplicate session ID" in e for e in result.errors)

    def test_duplicate_max_test_ids(self):
        tests = [make_max_test(id="dup-test"), make_max_test(id="dup-test", liftName="Bench")]
        result = validate_app_data(make_app_dict(maxTestHistory=tests))
        assert any("Duplicate max test ID" in e for e in result.errors)

    def test_worst_severity_wins(self):
        program = {"templateId": "unknown-template", "startDate": "2025-01-01"}
        data = make_app_dict(activeProgram=program, maxTestHistory=[make_max_test(reps=20)])
        result = validate_app_data(data)
        assert result.severity == "recoverable"
        assert len(result.errors) == 2


class TestValidateImportData:
    def test_too_large(self):
        result = validate_import_data("x" * 1_000_001)
        assert not result.valid
        assert "too large" in result.error

    def test_size_counts_utf8_bytes(self):
        result = validate_import_data("é" * 500_001)
        assert "too large" in result.error

    def test_invalid_json(self):
        assert "could not parse" in validate_import_data("not json{{{").error

    def test_missing_sentinel(self):
        result = validate_import_data(json.dumps({"schemaVersion": 3, "profile": {}}))
        assert "not a TB3 backup" in result.error

    def test_sentinel_must_be_true(self):
        assert "not a TB3 backup" in validate_import_data(make_import(tb3_export="yes")).error

    def test_non_numeric_version(self):
        result = validate_import_data(json.dumps({"tb3_export": True, "schemaVersion": "x"}))
        assert "Invalid version" in result.error

    @pytest.mark.parametrize("version", ["NaN", "2.5", "-Infinity"])
    def test_non_finite_or_fractional_version(self, version):
        raw = make_import(schemaVersion=0).replace('"schemaVersion": 0', f'"schemaVersion": {version}')
        assert "Invalid version" in validate_import_data(raw).error

    def test_deep_nesting_is_a_parse_failure(self):
        result = validate_import_data("[" * 200_000 + "]" * 200_000)
        assert not result.valid
        assert "could not parse" in result.error

    def test_newer_version(self):
        result = validate_import_data(make_import(schemaVersion=CURRENT_SCHEMA_VERSION + 1))
        assert "newer version" in result.error

    @pytest.mark.parametrize(
        "extra",
        [
            {"nested": {"prototype": {"exploit": True}}},
            {"profile": {"constructor": {}}},
            {"sessionHistory": [{"id": "s1", "exercises": [{"__proto__": {}}]}]},
        ],
    )
    def test_unsafe_keys(self, extra):
        result = validate_import_data(make_import(**extra))
        assert not result.valid
        assert "unsafe" in result.error

    def test_missing_profile(self):
        doc = json.loads(make_import())
        del doc["profile"]
        assert "profile" in validate_import_data(json.dumps(doc)).error

    def test_missing_session_history(self):
        doc = json.loads(make_import())
        del doc["sessionHistory"]
        assert "session" in validate_import_data(json.dumps(doc)).error

    def test_weight_out_of_range(self):
        result = validate_import_data(make_import(maxTestHistory=[{"id": "t1", "weight": 2000, "reps": 5}]))
        assert "Weight out of range" in result.error

    def test_reps_out_of_range(self):
        result = validate_import_data(make_import(maxTestHistory=[{"id": "t1", "weight": 200, "reps": 20}]))
        assert "Reps out of range" in result.error

    def test_long_notes(self):
        result = validate_import_data(make_import(sessionHistory=[{"id": "s1", "notes": "x" * 501}]))
        assert "500 characters" in result.error

    def test_500_char_notes_ok(self):
        assert validate_import_data(make_import(sessionHistory=[{"id": "s1", "notes": "x" * 500}])).valid

    def test_duplicate_session_ids(self):
        result = validate_import_data(make_import(sessionHistory=[{"id": "dup"}, {"id": "dup"}]))
        assert "Duplicate session ID" in result.error

    def test_duplicate_max_test_ids(self):
        tests = [{"id": "dup", "weight": 200, "reps": 5}, {"id": "dup", "weight": 300, "reps": 3}]
        assert "Duplicate max test ID" in validate_import_data(make_import(maxTestHistory=tests)).error

    def test_valid(self):
        result = validate_import_data(make_import())
        assert result.valid
        assert result.data["tb3_export"] is True


class TestValidateImport:
    def test_rejects_invalid_json(self):
        result = validate_import("not json")
        assert not result.success
        assert result.error

    def test_preview_counts(self):
        raw = make_import(
            sessionHistory=[{"id": "s1", "notes": ""}, {"id": "s2", "notes": ""}],
            maxTestHistory=[
                {"id": "t1", "liftName": "Squat", "weight": 300, "reps": 5, "date": "2025-01-01"},
                {"id": "t2", "liftName": "Bench", "weight": 200, "reps": 5, "date": "2025-01-01"},
                {"id": "t3", "liftName": "Squat", "weight": 310, "reps": 5, "date": "2025-02-01"},
            ],
        )
        result = validate_import(raw)
        assert result.success
        assert result.preview == {"sessions": 2, "max_tests": 3, "lifts": 2}

    @pytest.mark.parametrize("version", [0, 1])
    def test_migrates_old_versions(self, version):
        result = validate_import(make_import(schemaVersion=version))
        assert result.success
        assert result.data["schemaVersion"] == CURRENT_SCHEMA_VERSION
        assert result.data["profile"]["voiceAnnouncements"] is False
        assert result.data["profile"]["voiceName"] is None

    def test_v2_gains_only_voice_name(self):
        result = validate_import(make_import(schemaVersion=2))
        assert result.success
        assert result.data["schemaVersion"] == CURRENT_SCHEMA_VERSION
        assert result.data["profile"]["voiceName"] is None
        assert "voiceAnnouncements" not in result.data["profile"]

    @pytest.mark.parametrize("version", [float("nan"), 2.5])
    def test_rejects_non_integral_version(self, version):
        result = validate_import(make_import(schemaVersion=version))
        assert not result.success
        assert "Invalid version" in result.error

    def test_current_version_untouched(self):
        raw = make_import(profile={"maxType": "training", "voiceAnnouncements": True, "voiceName": "Alex"})
        assert validate_import(raw).data["profile"]["voiceName"] == "Alex"


class TestSerializers:
    def _full_app_data(self) -> AppData:
        return AppData(
            profile=UserProfile(unit="kg", rounding_increment=2.5, barbell_weight=20, voice_name="Alex"),
            active_program=ActiveProgram(
                "zulu", "2025-01-01", current_week=2, lift_selections={"A": ["Squat", "Bench"]}
            ),
            max_test_history=[
                OneRepMaxTest("t1", "2025-01-01", "Squat", 140, 5, 163.3, "training", 147.0)
            ],
            session_history=[{"id": "s1", "notes": "good"}],
            barbell_inventory=PlateInventory([Plate(20, 4), Plate(10, 2)]),
        )

    def test_app_data_survives_json(self):
        data = self._full_app_data()
        regenerate_schedule_if_needed(data)
        restored = dict_to_app_data(json.loads(json.dumps(app_data_to_dict(data))))
        assert restored == data

    def test_camel_case_keys(self):
        doc = app_data_to_dict(self._full_app_data())
        assert doc["schemaVersion"] == CURRENT_SCHEMA_VERSION
        assert doc["profile"]["roundingIncrement"] == 2.5
        assert doc["profile"]["voiceName"] == "Alex"
        assert doc["activeProgram"]["liftSelections"] == {"A": ["Squat", "Bench"]}
        assert doc["maxTestHistory"][0]["liftName"] == "Squat"

    def test_partial_profile_uses_defaults(self):
        profile = dict_to_user_profile({"maxType": "true"})
        assert profile.max_type == "true"
        assert profile.unit == "lb"
        assert profile.barbell_weight == 45

    def test_invalid_profile(self):
        with pytest.raises(ValidationError):
            dict_to_user_profile({"unit": "stone"})

    def test_missing_max_test_field(self):
        with pytest.raises(ValidationError, match="liftName"):
            dict_to_app_data(make_app_dict(maxTestHistory=[{"id": "t1", "date": "2025-01-01"}]))


class TestBuildExport:
    def test_export_reimports(self):
        data = AppData(
            max_test_history=[OneRepMaxTest("t1", "2025-01-01", "Squat", 300, 5, 350.0)],
            session_history=[{"id": "s1", "notes": ""}],
        )
        doc = build_export(data, "2025-03-01T10:00:00")
        assert doc["tb3_export"] is True
        assert "computedSchedule" not in doc
        result = validate_import(json.dumps(doc))
        assert result.success
        assert result.preview == {"sessions": 1, "max_tests": 1, "lifts": 1}


class TestDataStore:
    def test_init_and_load(self, tmp_path: Path):
        store = DataStore(tmp_path / "data.json")
        created = store.init(config_path=tmp_path / "missing.yaml")
        assert store.exists()
        assert store.load() == created

    def test_save_and_load(self, tmp_path: Path):
        store = DataStore(tmp_path / "sub" / "data.json")
        data = AppData(active_program=ActiveProgram("operator", "2025-01-01"))
        regenerate_schedule_if_needed(data)
        store.save(data)
        assert store.load() == data
        assert [p.name for p in (tmp_path / "sub").iterdir()] == ["data.json"]

    def test_missing_file(self, tmp_path: Path):
        with pytest.raises(FileNotFoundError):
            DataStore(tmp_path / "none.json").load()

    def test_invalid_json(self, tmp_path: Path):
        path = tmp_path / "data.json"
        path.write_text("{not json")
        with pytest.raises(ValidationError):
            DataStore(path).load()

    def test_fatal_data(self, tmp_path: Path):
        path = tmp_path / "data.json"
        path.write_text(json.dumps({"schemaVersion": 3}))
        with pytest.raises(ValidationError, match="profile"):
            DataStore(path).load()

    def test_old_file_is_migrated(self, tmp_path: Path):
        path = tmp_path / "data.json"
        path.write_text(json.dumps({"profile": {"maxType": "true"}}))
        data = DataStore(path).load()
        assert data.schema_version == CURRENT_SCHEMA_VERSION
        assert data.profile.max_type == "true"
        assert data.profile.voice_announcements is False

    def test_warnings_do_not_block(self, tmp_path: Path):
        path = tmp_path / "data.json"
        path.write_text(json.dumps(make_app_dict(maxTestHistory=[make_max_test(reps=20)])))
        with pytest.warns(UserWarning, match="Reps out of range"):
            data = DataStore(path).load()
        assert data.max_test_history[0].reps == 20

    def test_unloadable_max_tests_dropped(self, tmp_path: Path):
        path = tmp_path / "data.json"
        tests = [make_max_test(id="bad", weight=0), make_max_test(id="good")]
        path.write_text(json.dumps(make_app_dict(maxTestHistory=tests)))
        with pytest.warns(UserWarning, match="dropped max test"):
            data = DataStore(path).load()
        assert [t.id for t in data.max_test_history] == ["good"]

    def test_failed_save_leaves_no_temp_file(self, tmp_path: Path, monkeypatch):
        def broken_dump(*args, **kwargs):
            raise TypeError("not serializable")

        monkeypatch.setattr("tb3_planner.io.data_store.json.dump", broken_dump)
        with pytest.raises(TypeError):
            DataStore(tmp_path / "data.json").save(AppData())
        assert list(tmp_path.iterdir()) == []

    def test_unknown_template_program_cleared(self, tmp_path: Path):
        path = tmp_path / "data.json"
        program = {"templateId": "retired", "startDate": "2025-01-01"}
        path.write_text(json.dumps(make_app_dict(activeProgram=program)))
        with pytest.warns(UserWarning):
            data = DataStore(path).load()
        assert data.active_program is None

    def test_replace_with_import(self, tmp_path: Path):
        store = DataStore(tmp_path / "data.json")
        result = validate_import(make_import(maxTestHistory=[make_max_test()]))
        data = store.replace_with(result.data)
        assert data.max_test_history[0].lift_name == "Squat"
        assert store.load() == data


class TestConfigLoader:
    def test_builtin_defaults(self, tmp_path: Path):
        config = load_user_config(tmp_path / "missing.yaml")
        assert build_default_profile(config) == UserProfile()
        barbell, belt = build_default_inventories(config)
        assert barbell.plates[0] == Plate(45, 4)
        assert belt.plates[0] == Plate(45, 2)

    def test_user_overrides(self, tmp_path: Path):
        path = tmp_path / "config.yaml"
        path.write_text(
            "profile:\n  unit: kg\n  rounding_increment: 2.5\n  barbell_weight: 20\n"
            "barbell_plates:\n  - [25, 4]\n  - [20, 2]\n"
        )
        config = load_user_config(path)
        profile = build_default_profile(config)
        assert (profile.unit, profile.rounding_increment, profile.barbell_weight) == ("kg", 2.5, 20)
        assert profile.max_type == "training"
        barbell, _ = build_default_inventories(config)
        assert [p.weight for p in barbell.plates] == [25, 20]

    def test_parse_error_warns(self, tmp_path: Path):
        path = tmp_path / "config.yaml"
        path.write_text("profile: [unclosed\n")
        with pytest.warns(UserWarning):
            config = load_user_config(path)
        assert build_default_profile(config) == UserProfile()

    def test_invalid_profile_warns(self, tmp_path: Path):
        path = tmp_path / "config.yaml"
        path.write_text("profile:\n  unit: stone\n")
        with pytest.warns(UserWarning, match="Invalid profile"):
            profile = build_default_profile(load_user_config(path))
        assert profile == UserProfile()

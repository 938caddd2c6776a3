"""
Tests for snapshot loading from a data directory.
"""
import pytest
import json
import pandas as pd
import sys
from pathlib import Path

sys.path.insert(0, str(Path(__file__).parent.parent))

from crm_analytics.config import MODEL_COLUMNS
from crm_analytics.data.loader import (
    find_snapshot,
    load_raw_table,
    load_table_from_dir,
    load_snapshot,
    get_data_status,
)


@pytest.fixture
def snapshot_dir(tmp_path):
    """Snapshot directory with csv deals, json stages/goals and no users."""
    pd.DataFrame([
        {"id": "d1", "pipeline_id": "p1", "stage_id": "s1", "value": "1000",
         "created_at": "2025-10-01T12:00:00Z", "closed_at": "",
         "expected_close_date": "2025-10-20", "probability": "40"},
        {"id": "d2", "pipeline_id": "p2", "stage_id": "t1", "value": "",
         "created_at": "2025-10-02T12:00:00Z", "closed_at": "",
         "expected_close_date": "", "probability": ""},
    ]).to_csv(tmp_path / "deals.csv", index=False)

    (tmp_path / "stages.json").write_text(json.dumps([
        {"id": "s1", "pipeline_id": "p1", "name": "Prospecto", "order": 1, "std_map": None},
        {"id": "t1", "pipeline_id": "p2", "name": "Contacto", "order": 1, "std_map": None},
    ]))

    (tmp_path / "goals.json").write_text(json.dumps([
        {"year": 2025, "months": {"10": 5000000}},
    ]))

    return tmp_path


class TestFindSnapshot:
    """Tests for snapshot file discovery."""

    def test_prefers_parquet(self, tmp_path):
        (tmp_path / "deals.csv").write_text("id\n")
        (tmp_path / "deals.parquet").write_bytes(b"")

        assert find_snapshot(tmp_path / "deals").suffix == ".parquet"

    def test_missing(self, tmp_path):
        assert find_snapshot(tmp_path / "deals") is None


class TestLoadTableFromDir:
    """Tests for load_table_from_dir."""

    def test_csv_keeps_text_and_parses_numbers(self, snapshot_dir):
        deals = load_table_from_dir("deals", snapshot_dir)

        assert deals["id"].tolist() == ["d1", "d2"]
        assert deals["value"].iloc[0] == 1000
        assert pd.isna(deals["value"].iloc[1])
        assert deals["expected_close_date"].iloc[0] == "2025-10-20"
        assert set(MODEL_COLUMNS["deals"]) <= set(deals.columns)

    def test_json_goals(self, snapshot_dir):
        goals = load_table_from_dir("goals", snapshot_dir)

        assert goals["months"].iloc[0] == {"10": 5000000}

    def test_missing_table_is_empty(self, snapshot_dir):
        users = load_table_from_dir("users", snapshot_dir)

        assert len(users) == 0
        assert list(users.columns) == MODEL_COLUMNS["users"]

    def test_parquet(self, tmp_path):
        pd.DataFrame([
            {"id": "s1", "name": "Prospecto", "order": 1, "std_map": None},
        ]).to_parquet(tmp_path / "stages.parquet")

        stages = load_table_from_dir("stages", tmp_path)

        assert stages["name"].tolist() == ["Prospecto"]


class TestLoadSnapshot:
    """Tests for load_snapshot."""

    def test_scoped_to_pipeline(self, snapshot_dir):
        tables = load_snapshot("p2", snapshot_dir=snapshot_dir)

        assert tables["deals"]["id"].tolist() == ["d2"]
        assert tables["stages"]["id"].tolist() == ["t1"]
        assert len(tables["goals"]) == 1

    def test_all_tables_present(self, snapshot_dir):
        tables = load_snapshot(snapshot_dir=snapshot_dir)

        assert set(tables) == {"deals", "stages", "users", "accounts", "goals", "pipelines"}


class TestDataStatus:
    """Tests for get_data_status and raw loading."""

    def test_status(self, snapshot_dir):
        status = get_data_status(snapshot_dir)

        assert status["deals"] == {"exists": True, "format": "csv", "required": True}
        assert status["stages"]["format"] == "json"
        assert status["users"] == {"exists": False, "format": None, "required": False}

    def test_raw_table_is_not_coerced(self, snapshot_dir):
        raw = load_raw_table("stages", snapshot_dir)

        assert "created_at" not in raw.columns
        assert load_raw_table("users", snapshot_dir) is None

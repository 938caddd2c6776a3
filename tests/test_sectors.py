"""
Tests for sector breakdowns: won value and won/lost counts.
"""
import pytest
import pandas as pd
import sys
from pathlib import Path

sys.path.insert(0, str(Path(__file__).parent.parent))

from crm_analytics.metrics.sectors import compute_sales_by_sector, compute_win_loss


STAGES = pd.DataFrame([
    {"id": "open", "name": "Prospecto", "order": 1, "std_map": None},
    {"id": "won", "name": "Ganado", "order": 2, "std_map": "Ganado"},
    {"id": "lost", "name": "Perdido", "order": 3, "std_map": "Perdido"},
])

ACCOUNTS = pd.DataFrame([
    {"id": "a1", "name": "Acme", "sector": "Tecnología"},
    {"id": "a2", "name": "Tiendas", "sector": "Retail"},
    {"id": "a3", "name": "Clínica", "sector": "Salud"},
    {"id": "a4", "name": "Sin sector", "sector": None},
])


def _deal(deal_id, stage_id, account_id, value=0):
    return {"id": deal_id, "stage_id": stage_id, "account_id": account_id, "value": value}


class TestComputeSalesBySector:
    """Tests for compute_sales_by_sector."""

    def test_sums_won_value_in_first_seen_order(self):
        deals = [
            _deal("d1", "won", "a2", 100),
            _deal("d2", "won", "a1", 300),
            _deal("d3", "won", "a2", 50),
            _deal("d4", "lost", "a3", 999),
        ]

        result = compute_sales_by_sector(deals, ACCOUNTS, STAGES)

        assert result == {"labels": ["Retail", "Tecnología"], "data": [150.0, 300.0]}

    def test_unspecified_sector(self):
        deals = [
            _deal("d1", "won", "a4", 10),
            _deal("d2", "won", None, 20),
            _deal("d3", "won", "a99", 30),
        ]

        result = compute_sales_by_sector(deals, ACCOUNTS, STAGES)

        assert result == {"labels": ["No especificado"], "data": [60.0]}

    def test_no_won_deals(self):
        result = compute_sales_by_sector([_deal("d1", "open", "a1", 10)], ACCOUNTS, STAGES)

        assert result == {"labels": [], "data": []}

    def test_no_accounts(self):
        result = compute_sales_by_sector([_deal("d1", "won", "a1", 10)], [], STAGES)

        assert result["labels"] == ["No especificado"]


class TestComputeWinLoss:
    """Tests for compute_win_loss."""

    def test_union_of_sectors_won_first(self):
        deals = [
            _deal("d1", "won", "a1"),
            _deal("d2", "won", "a2"),
            _deal("d3", "won", "a1"),
            _deal("d4", "lost", "a2"),
            _deal("d5", "lost", "a3"),
            _deal("d6", "open", "a4"),
        ]

        result = compute_win_loss(deals, ACCOUNTS, STAGES)

        assert result["labels"] == ["Tecnología", "Retail", "Salud"]
        assert result["datasets"] == [
            {"label": "Ganadas", "data": [2, 1, 0]},
            {"label": "Perdidas", "data": [0, 1, 1]},
        ]

    def test_only_losses(self):
        """A sector with losses and no wins still appears."""
        deals = [_deal("d1", "lost", "a3"), _deal("d2", "lost", None)]

        result = compute_win_loss(deals, ACCOUNTS, STAGES)

        assert result["labels"] == ["Salud", "No especificado"]
        assert result["datasets"][0]["data"] == [0, 0]
        assert result["datasets"][1]["data"] == [1, 1]

    def test_dataset_lengths_match_labels(self):
        deals = [_deal("d1", "won", "a1"), _deal("d2", "lost", "a2")]

        result = compute_win_loss(deals, ACCOUNTS, STAGES)

        for dataset in result["datasets"]:
            assert len(dataset["data"]) == len(result["labels"])

    def test_empty(self):
        result = compute_win_loss([], ACCOUNTS, STAGES)

        assert result["labels"] == []
        assert [d["data"] for d in result["datasets"]] == [[], []]

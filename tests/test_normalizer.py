"""Tests for raw row normalization."""

import os
import sys

import pytest

sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

from src.normalizer import normalize_row


def test_rest_shape_camel_case():
    row = normalize_row({
        "campaign": {"id": "42", "name": "Brand", "status": "ENABLED"},
        "metrics": {
            "impressions": "2000",
            "clicks": "40",
            "conversions": 1.5,
            "conversionsValue": 90.0,
            "costMicros": "30000000",
        },
    })
    assert row.campaign_id == "42"
    assert row.campaign_name == "Brand"
    assert row.status == "ENABLED"
    assert row.impressions == 2000
    assert row.clicks == 40
    assert row.conversions == 1.5
    assert row.conversions_value == 90.0
    assert row.cost == 30.0
    assert row.ctr == 2.0
    assert row.average_cpc == 0.75


def test_snake_case_matches_camel_case():
    camel = normalize_row({"name": "X", "impressions": 10, "clicks": 2,
                           "costMicros": 4_000_000, "conversionsValue": 3})
    snake = normalize_row({"campaign_name": "X", "impressions": 10, "clicks": 2,
                           "cost_micros": 4_000_000, "conversions_value": 3})
    assert camel == snake


def test_plain_cost_used_without_micros():
    row = normalize_row({"name": "X", "clicks": 4, "cost": 10})
    assert row.cost == 10.0
    assert row.average_cpc == 2.5


def test_provided_ctr_and_cpc_win():
    row = normalize_row({"name": "X", "impressions": 100, "clicks": 50,
                         "cost": 10, "ctr": 1.5, "averageCpc": 3.0})
    assert row.ctr == 1.5
    assert row.average_cpc == 3.0


def test_provided_zero_ctr_is_kept():
    row = normalize_row({"name": "X", "impressions": 100, "clicks": 50, "ctr": 0})
    assert row.ctr == 0.0


def test_missing_counters_default_to_zero():
    row = normalize_row({"campaign": {"id": 7}})
    assert row.campaign_name == "Campaign 7"
    assert row.status == "UNKNOWN"
    assert row.impressions == 0
    assert row.clicks == 0
    assert row.cost == 0.0
    assert row.ctr == 0.0
    assert row.average_cpc == 0.0


def test_non_numeric_metric_raises():
    with pytest.raises(ValueError):
        normalize_row({"name": "X", "impressions": "many"})


def test_non_dict_raises():
    with pytest.raises(TypeError):
        normalize_row(["not", "a", "row"])

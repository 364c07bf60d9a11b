import json
from datetime import date
from types import SimpleNamespace
from unittest import mock

import pytest

from generators.data_factory import DataGenerator
from models import Species, ReproEventKind


def fake_response(payload, fenced=True):
    text = json.dumps(payload)
    if fenced:
        text = f"```json\n{text}\n```"
    return SimpleNamespace(
        text=text,
        usage_metadata=SimpleNamespace(prompt_token_count=1000, candidates_token_count=2000),
    )


@pytest.fixture
def genai():
    with mock.patch("generators.data_factory.genai") as patched:
        yield patched


@pytest.fixture
def generator(genai):
    return DataGenerator(api_key="test-key")


def test_missing_api_key_rejected(genai, monkeypatch):
    monkeypatch.delenv("GOOGLE_API_KEY", raising=False)
    with pytest.raises(ValueError):
        DataGenerator()


def test_portfolio_skips_invalid_items_and_renumbers(generator):
    generator.model.generate_content.return_value = fake_response([
        {"id": "x", "name": "Luna x Atlas", "species": "dog", "locked_cycle_start": "2025-01-01"},
        {"id": "y", "species": "CAT", "earliest_cycle_start": "2025-03-10", "latest_cycle_start": "2025-03-01"},
        {"id": "z", "species": "Horse", "expected_next_cycle_start": "2025-06-01"},
    ])

    plans, cost = generator.generate_breeding_portfolio(count=3, start_date=date(2025, 1, 1))

    assert [p.id for p in plans] == ["plan_000", "plan_001"]
    assert plans[0].species is Species.DOG
    assert plans[1].species is Species.HORSE
    assert cost == pytest.approx((1000 * 0.075 + 2000 * 0.30) / 1_000_000)
    assert generator.total_cost == cost


def test_failed_batch_returns_empty(generator):
    generator.model.generate_content.side_effect = RuntimeError("quota exceeded")
    plans, cost = generator.generate_breeding_portfolio(count=3, start_date=date(2025, 1, 1))
    assert plans == []
    assert cost == 0.0


def test_histories_grouped_by_known_plan(generator):
    generator.model.generate_content.return_value = fake_response({"events": [
        {"plan_id": "plan_000", "kind": "heat_start", "date": "2024-07-01"},
        {"plan_id": "plan_000", "kind": "heat_start", "date": "2024-01-01", "note": "first"},
        {"plan_id": "ghost", "kind": "heat_start", "date": "2024-01-01"},
        {"plan_id": "plan_001", "kind": "sneeze", "date": "2024-01-01"},
    ]}, fenced=False)

    histories, _ = generator.generate_heat_histories(["plan_000", "plan_001"], start_date=date(2025, 1, 1))

    assert list(histories) == ["plan_000"]
    assert [e.kind for e in histories["plan_000"]] == [ReproEventKind.HEAT_START] * 2
    assert histories["plan_000"][1].note == "first"


def test_no_plan_ids_skips_request(generator):
    assert generator.generate_heat_histories([]) == ({}, 0.0)
    generator.model.generate_content.assert_not_called()


def test_robust_parse_handles_prose_around_array(generator):
    raw = 'Here you go:\n[{"a": 1}, {"a": 2}]\nEnjoy!'
    assert generator._robust_parse_json(raw) == [{"a": 1}, {"a": 2}]


def test_robust_parse_gives_up_on_garbage(generator):
    assert generator._robust_parse_json("not json at all") == []
    assert generator._robust_parse_json("") == []

"""
Tests for NFS payload binding.
"""

import json

import pytest

from nfs_scoring import (
    InvalidRequestError,
    NfsCalculateItem,
    load_batch_file,
    parse_batch_payload,
)


def item(**overrides):
    payload = {
        "enterpriseId": "ent-001",
        "financialData": {
            "revenue": 1000,
            "profit": 150,
            "assets": 2000,
            "liabilities": 400,
            "equity": 1000,
            "cashFlow": 100,
        },
    }
    payload.update(overrides)
    return payload


# =============================================================
# TEST: Parsing
# =============================================================

class TestParseBatchPayload:

    def test_financial_only_item(self):
        """Financial-only item leaves credit and asset empty."""
        requests = parse_batch_payload({"calculations": [item()]})

        assert len(requests) == 1
        request = requests[0]
        assert request.enterprise_id == "ent-001"
        assert request.financial.cash_flow == 100.0
        assert request.credit is None
        assert request.asset is None

    def test_full_item(self):
        """All three sections are converted to inputs."""
        requests = parse_batch_payload({"calculations": [item(
            creditData={
                "creditScore": 712,
                "riskLevel": "LOW",
                "defaultHistory": False,
                "latePayments": 1,
            },
            assetData={
                "totalAssets": 88_000_000,
                "collateralValue": 53_000_000,
                "liquidityRatio": 1.6,
            },
        )]})

        request = requests[0]
        assert request.credit.credit_score == 712.0
        assert request.credit.risk_level == "LOW"
        assert request.credit.late_payments == 1
        assert request.asset.liquidity_ratio == 1.6

    def test_bare_list_is_accepted(self):
        """A bare list is treated as the calculations array."""
        requests = parse_batch_payload([item(), item(enterpriseId="ent-002")])
        assert [r.enterprise_id for r in requests] == ["ent-001", "ent-002"]

    def test_credit_defaults(self):
        """Optional credit fields take their defaults."""
        requests = parse_batch_payload([item(creditData={"creditScore": 640})])

        credit = requests[0].credit
        assert credit.risk_level is None
        assert credit.default_history is False
        assert credit.late_payments == 0

    def test_unknown_risk_level_is_kept(self):
        """Unknown risk levels pass binding unchanged."""
        requests = parse_batch_payload([item(creditData={
            "creditScore": 640, "riskLevel": "UNRATED",
        })])
        assert requests[0].credit.risk_level == "UNRATED"

    def test_snake_case_names_are_accepted(self):
        """Field names work alongside the camelCase aliases."""
        parsed = NfsCalculateItem.model_validate({
            "enterprise_id": "ent-003",
            "financial_data": {
                "revenue": 1, "profit": 1, "assets": 1,
                "liabilities": 1, "equity": 1, "cash_flow": 1,
            },
        })
        assert parsed.to_request().enterprise_id == "ent-003"

    def test_request_snapshot_uses_camel_case(self):
        """Request snapshot keeps the payload's camelCase keys."""
        request = parse_batch_payload([item()])[0]
        snapshot = request.to_dict()

        assert snapshot["enterpriseId"] == "ent-001"
        assert snapshot["financialData"]["cashFlow"] == 100.0
        assert "creditData" not in snapshot


# =============================================================
# TEST: Validation Errors
# =============================================================

class TestValidationErrors:

    def test_missing_financial_data(self):
        """Missing financial data is reported with error details."""
        with pytest.raises(InvalidRequestError) as exc_info:
            parse_batch_payload([{"enterpriseId": "ent-001"}])

        assert exc_info.value.details["errors"]

    def test_empty_enterprise_id(self):
        """An empty enterprise id is rejected."""
        with pytest.raises(InvalidRequestError):
            parse_batch_payload([item(enterpriseId="")])

    def test_non_numeric_figure(self):
        """Non-numeric figures are rejected."""
        bad = item()
        bad["financialData"]["revenue"] = "a lot"
        with pytest.raises(InvalidRequestError):
            parse_batch_payload([bad])

    def test_negative_late_payments(self):
        """Negative late payment counts are rejected."""
        with pytest.raises(InvalidRequestError):
            parse_batch_payload([item(creditData={"creditScore": 700, "latePayments": -1})])

    def test_missing_calculations_key(self):
        """A payload without calculations is rejected."""
        with pytest.raises(InvalidRequestError):
            parse_batch_payload({"items": []})


# =============================================================
# TEST: File Loading
# =============================================================

class TestLoadBatchFile:

    def test_load_file(self, tmp_path):
        """A JSON batch file is loaded into requests."""
        path = tmp_path / "batch.json"
        path.write_text(json.dumps({"calculations": [item()]}), encoding="utf-8")

        requests = load_batch_file(path)
        assert len(requests) == 1

    def test_missing_file(self, tmp_path):
        """A missing batch file raises InvalidRequestError."""
        with pytest.raises(InvalidRequestError):
            load_batch_file(tmp_path / "nope.json")

    def test_malformed_json(self, tmp_path):
        """Malformed JSON raises InvalidRequestError."""
        path = tmp_path / "batch.json"
        path.write_text("{not json", encoding="utf-8")

        with pytest.raises(InvalidRequestError):
            load_batch_file(path)

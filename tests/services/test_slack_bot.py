"""
Unit tests for the Slack query renderer: pure functions plus one fake store.
"""
import json
from datetime import datetime, timezone
from decimal import Decimal

import pytest

from finsync.services.slack_bot import (
    NO_DATA_TEXT,
    fmt_currency,
    fmt_number,
    format_key,
    format_slack_response,
    format_timestamp,
    process_slack_command,
)
from tests.fakes import FakeStore

NOW = datetime(2026, 10, 18, 16, 5, 9, tzinfo=timezone.utc)


def _texts(response: dict) -> list[str]:
    """All section texts, skipping header/divider/footer."""
    return [b["text"]["text"] for b in response["blocks"] if b["type"] == "section"]


# ── Number formatting ────────────────────────────────────────────────────────

class TestFormatting:
    def test_grouping(self):
        assert fmt_number(1234567) == "1,234,567"

    def test_trailing_zeros_dropped(self):
        assert fmt_number(1234.50) == "1,234.5"

    def test_three_fraction_digits_max(self):
        assert fmt_number(0.12345) == "0.123"

    def test_negative(self):
        assert fmt_number(-5) == "-5"

    def test_decimal_and_string(self):
        assert fmt_number(Decimal("42.10")) == "42.1"
        assert fmt_number("17") == "17"

    def test_non_numeric_passthrough(self):
        assert fmt_number("n/a") == "n/a"

    def test_currency(self):
        assert fmt_currency(1500) == "$1,500"

    def test_format_key(self):
        assert format_key("net_revenue_change") == "Net Revenue Change"
        assert format_key("ytd_EBITDA") == "Ytd EBITDA"


# ── Empty results ────────────────────────────────────────────────────────────

class TestEmpty:
    def test_empty_list(self):
        assert format_slack_response([]) == {"response_type": "ephemeral", "text": NO_DATA_TEXT}

    def test_none(self):
        response = format_slack_response(None)
        assert response["text"] == "I couldn't find any data matching your query."
        assert "blocks" not in response


# ── Per-type rendering ───────────────────────────────────────────────────────

class TestSummary:
    def _render(self, data: dict) -> str:
        rows = [{"result_type": "summary", "result_text": "Summary", "result_data": data}]
        return _texts(format_slack_response(rows, now=NOW))[1]

    def test_negative_change(self):
        assert self._render({"net_revenue_change": -5}) == "Net Revenue Change: -5% 📉"

    def test_positive_change(self):
        assert self._render({"expense_change": 12.5}) == "Expense Change: 12.5% 📈"

    def test_change_not_grouped_or_rounded(self):
        assert self._render({"net_revenue_change": 1234.5678}) == "Net Revenue Change: 1234.5678% 📈"

    def test_change_whole_float_and_decimal(self):
        text = self._render({"revenue_change": 3.0, "expense_change": Decimal("-2.50")})
        assert text == "Revenue Change: 3% 📈\nExpense Change: -2.5% 📉"

    def test_currency_keys(self):
        text = self._render({"total_revenue": 12000, "net_profit": 3400.5})
        assert text == "Total Revenue: $12,000\nNet Profit: $3,400.5"

    def test_plain_values(self):
        assert self._render({"period": "Q3 2026", "count": 14}) == "Period: Q3 2026\nCount: 14"

    def test_non_numeric_amount_rendered_raw(self):
        assert self._render({"amount": "unknown"}) == "Amount: unknown"


class TestLists:
    def test_transactions_outflow_and_inflow(self):
        rows = [{
            "result_type": "transactions",
            "result_text": "Recent transactions",
            "result_data": [
                {"date": "2026-10-01", "name": "AWS", "amount": -1234.5},
                {"date": "2026-10-02", "name": "Stripe payout", "amount": 980},
            ],
        }]
        text = _texts(format_slack_response(rows, now=NOW))[1]

        assert text.splitlines() == [
            "• *2026-10-01* - AWS: $1,234.5 💸",
            "• *2026-10-02* - Stripe payout: $980 💰",
        ]

    def test_accounts(self):
        rows = [{
            "result_type": "accounts",
            "result_text": "Balances",
            "result_data": [{"name": "Checking", "type": "Bank", "balance": 15200.75}],
        }]
        assert _texts(format_slack_response(rows, now=NOW))[1] == "• *Checking* (Bank): $15,200.75"

    def test_categories(self):
        rows = [{
            "result_type": "categories",
            "result_text": "Top categories",
            "result_data": [{"category": "Travel", "amount": 820}],
        }]
        assert _texts(format_slack_response(rows, now=NOW))[1] == "• *Travel*: $820"


class TestChart:
    def test_chart_block(self):
        rows = [{
            "result_type": "chart",
            "result_text": "Revenue vs expenses",
            "result_data": [
                {"month": "2026-08", "revenue": 10000, "expenses": 7500},
                {"month": "2026-09", "revenue": 12000.5, "expenses": 8000},
            ],
        }]
        text = _texts(format_slack_response(rows, now=NOW))[1]

        assert text == "```2026-08: $10,000 $7,500\n2026-09: $12,000.5 $8,000\n```"


class TestLayout:
    def test_header_label_and_footer(self):
        rows = [{"result_type": "summary", "result_text": "Q3", "result_data": {"count": 1}}]
        response = format_slack_response(rows, now=NOW)

        assert response["response_type"] == "in_channel"
        assert response["blocks"][0]["text"]["text"] == "📊 Financial Data Query Results"
        assert response["blocks"][1] == {"type": "divider"}
        assert response["blocks"][2]["text"]["text"] == "*Q3*"
        assert response["blocks"][-1]["elements"][0]["text"] == "_Generated at 10/18/2026, 4:05:09 PM_"

    def test_unknown_type_renders_label_only(self):
        rows = [{"result_type": "heatmap", "result_text": "Spend heatmap", "result_data": [{"x": 1}]}]
        response = format_slack_response(rows, now=NOW)

        assert [b["type"] for b in response["blocks"]] == ["header", "divider", "section", "context"]
        assert _texts(response) == ["*Spend heatmap*"]

    def test_json_string_payload_is_decoded(self):
        rows = [{
            "result_type": "categories",
            "result_text": "Top categories",
            "result_data": json.dumps([{"category": "Meals", "amount": 64.2}]),
        }]
        assert _texts(format_slack_response(rows, now=NOW))[1] == "• *Meals*: $64.2"

    def test_footer_uses_timezone(self):
        rows = [{"result_type": "summary", "result_text": "Q3", "result_data": {"count": 1}}]
        response = format_slack_response(rows, now=NOW, tz_name="America/New_York")

        assert response["blocks"][-1]["elements"][0]["text"] == "_Generated at 10/18/2026, 12:05:09 PM_"

    def test_unknown_timezone_falls_back_to_utc(self):
        rows = [{"result_type": "summary", "result_text": "Q3", "result_data": {"count": 1}}]
        response = format_slack_response(rows, now=NOW, tz_name="Mars/Olympus")

        assert response["blocks"][-1]["elements"][0]["text"] == "_Generated at 10/18/2026, 4:05:09 PM_"

    def test_timestamp_locale_style(self):
        assert format_timestamp(datetime(2026, 1, 5, 0, 7, 3)) == "1/5/2026, 12:07:03 AM"
        assert format_timestamp(datetime(2026, 12, 31, 12, 0, 0)) == "12/31/2026, 12:00:00 PM"
        assert format_timestamp(datetime(2026, 7, 4, 21, 30, 5)) == "7/4/2026, 9:30:05 PM"


# ── process_slack_command ────────────────────────────────────────────────────

class TestProcessSlackCommand:
    @pytest.mark.asyncio
    async def test_forwards_text(self):
        store = FakeStore(rpc_results={"query_financial_data": []})

        response = await process_slack_command("revenue last month", store)

        assert store.rpc_calls == [("query_financial_data", {"query_text": "revenue last month"})]
        assert response["text"] == NO_DATA_TEXT

    @pytest.mark.asyncio
    async def test_error_is_ephemeral(self):
        store = FakeStore(rpc_results={"query_financial_data": RuntimeError("syntax error at or near")})

        response = await process_slack_command("???", store)

        assert response == {"response_type": "ephemeral", "text": "Error: syntax error at or near"}

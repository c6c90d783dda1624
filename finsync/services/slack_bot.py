"""
Slack slash-command query bot.

Free text goes to the ``query_financial_data`` procedure, which answers with
rows of (result_type, result_text, result_data). Each row becomes a labelled
section; the payload is rendered according to its result_type.
"""

import json
import logging
import re
from datetime import datetime, timezone
from decimal import Decimal

import pytz

from finsync.services.store import Store

logger = logging.getLogger(__name__)

NO_DATA_TEXT = "I couldn't find any data matching your query."
RESULTS_TITLE = "📊 Financial Data Query Results"

_CURRENCY_KEYS = ("revenue", "expense", "profit", "balance", "amount")


# ── Number formatting ────────────────────────────────────────────────────────

def _is_number(value) -> bool:
    return isinstance(value, (int, float, Decimal)) and not isinstance(value, bool)


def fmt_number(value) -> str:
    """en-US grouping, at most three fraction digits, no trailing zeros."""
    try:
        num = float(value)
    except (TypeError, ValueError):
        return str(value)
    text = f"{num:,.3f}".rstrip("0").rstrip(".")
    return "0" if text in ("-0", "") else text


def _plain_number(value) -> str:
    """The value as a JSON number would print it: no grouping, no rounding."""
    if isinstance(value, float) and value.is_integer():
        return str(int(value))
    if isinstance(value, Decimal):
        return format(value.normalize(), "f")
    return str(value)


def fmt_currency(value) -> str:
    return f"${fmt_number(value)}"


def format_key(key: str) -> str:
    """net_revenue_change → Net Revenue Change"""
    return re.sub(r"\b\w", lambda m: m.group().upper(), key.replace("_", " "))


# ── Per-type renderers ───────────────────────────────────────────────────────

def render_chart(rows: list[dict]) -> str:
    lines = []
    for item in rows:
        parts = []
        for key, value in item.items():
            if key == "month":
                parts.append(f"{value}:")
            else:
                parts.append(fmt_currency(value))
        lines.append(" ".join(parts))
    return "```" + "\n".join(lines) + "\n```"


def render_summary(data: dict) -> str:
    lines = []
    for key, value in data.items():
        label = format_key(key)
        if "change" in key and _is_number(value):
            indicator = "📈" if float(value) > 0 else "📉"
            lines.append(f"{label}: {_plain_number(value)}% {indicator}")
        elif any(k in key for k in _CURRENCY_KEYS) and _is_number(value):
            lines.append(f"{label}: {fmt_currency(value)}")
        else:
            lines.append(f"{label}: {value}")
    return "\n".join(lines)


def render_transactions(rows: list[dict]) -> str:
    lines = []
    for item in rows:
        amount = float(item.get("amount") or 0)
        indicator = "💸" if amount < 0 else "💰"
        lines.append(f"• *{item.get('date')}* - {item.get('name')}: {fmt_currency(abs(amount))} {indicator}")
    return "\n".join(lines)


def render_accounts(rows: list[dict]) -> str:
    return "\n".join(
        f"• *{item.get('name')}* ({item.get('type')}): {fmt_currency(item.get('balance'))}"
        for item in rows
    )


def render_categories(rows: list[dict]) -> str:
    return "\n".join(
        f"• *{item.get('category')}*: {fmt_currency(item.get('amount'))}"
        for item in rows
    )


RENDERERS = {
    "chart": render_chart,
    "summary": render_summary,
    "transactions": render_transactions,
    "accounts": render_accounts,
    "categories": render_categories,
}


def _section(text: str) -> dict:
    return {"type": "section", "text": {"type": "mrkdwn", "text": text}}


def _payload(row: dict):
    # json/jsonb from a raw SELECT arrives undecoded
    data = row.get("result_data")
    if isinstance(data, str):
        try:
            return json.loads(data)
        except json.JSONDecodeError:
            return data
    return data


def _localize(now: datetime | None, tz_name: str) -> datetime:
    now = now or datetime.now(timezone.utc)
    try:
        tz = pytz.timezone(tz_name)
    except pytz.UnknownTimeZoneError:
        logger.warning("Unknown timezone %r, using UTC", tz_name)
        tz = pytz.utc
    return now.astimezone(tz)


def format_timestamp(moment: datetime) -> str:
    """en-US locale style: 1/5/2026, 4:05:09 PM (no zero padding on month, day, hour)."""
    hour = moment.hour % 12 or 12
    meridiem = "AM" if moment.hour < 12 else "PM"
    return f"{moment.month}/{moment.day}/{moment.year}, {hour}:{moment:%M:%S} {meridiem}"


def format_slack_response(rows: list[dict] | None, now: datetime | None = None, tz_name: str = "UTC") -> dict:
    if not rows:
        return {"response_type": "ephemeral", "text": NO_DATA_TEXT}

    blocks = [
        {"type": "header", "text": {"type": "plain_text", "text": RESULTS_TITLE, "emoji": True}},
        {"type": "divider"},
    ]

    for row in rows:
        blocks.append(_section(f"*{row.get('result_text')}*"))

        renderer = RENDERERS.get(row.get("result_type"))
        if renderer is None:
            # Unknown result type: label only
            logger.info("No renderer for result_type %r", row.get("result_type"))
            continue

        data = _payload(row)
        if data:
            blocks.append(_section(renderer(data)))

    local_now = _localize(now, tz_name)
    blocks.append({
        "type": "context",
        "elements": [
            {"type": "mrkdwn", "text": f"_Generated at {format_timestamp(local_now)}_"}
        ],
    })

    return {"response_type": "in_channel", "blocks": blocks}


async def process_slack_command(text: str, store: Store, tz_name: str = "UTC") -> dict:
    """Answer a slash command; errors become an ephemeral reply."""
    try:
        rows = await store.rpc("query_financial_data", query_text=text)
        return format_slack_response(rows, tz_name=tz_name)
    except Exception as exc:
        logger.exception("Error processing Slack command")
        return {"response_type": "ephemeral", "text": f"Error: {str(exc) or 'Unknown error occurred'}"}

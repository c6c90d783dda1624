import logging
from datetime import datetime, timezone

from finsync.schemas.sync import AnomalyCheckResult
from finsync.services.notifications import SlackNotifier
from finsync.services.store import Store

logger = logging.getLogger(__name__)

ALERT_TITLE = "🚨 Financial Anomalies Detected"


def build_anomaly_message(anomalies: list[dict], detected_at: datetime | None = None) -> dict:
    """Slack Block Kit payload with one section per anomaly."""
    detected_at = detected_at or datetime.now(timezone.utc)
    sections = [
        {
            "type": "section",
            "text": {
                "type": "mrkdwn",
                "text": (
                    f"*{a.get('type')}*: {a.get('description')}\n"
                    f"*Severity*: {a.get('severity')}\n"
                    f"*Amount*: ${float(a.get('amount') or 0):.2f}"
                ),
            },
        }
        for a in anomalies
    ]
    return {
        "text": ALERT_TITLE,
        "blocks": [
            {"type": "header", "text": {"type": "plain_text", "text": ALERT_TITLE, "emoji": True}},
            {"type": "divider"},
            *sections,
            {
                "type": "context",
                "elements": [{"type": "mrkdwn", "text": f"Detected at {detected_at.isoformat()}"}],
            },
        ],
    }


async def check_anomalies(store: Store, notifier: SlackNotifier) -> AnomalyCheckResult:
    """Run remote anomaly detection and alert Slack when anything is flagged.

    Detection and webhook failures both propagate.
    """
    try:
        anomalies = await store.rpc("detect_financial_anomalies")
        if anomalies:
            await notifier.post(build_anomaly_message(anomalies))
    except Exception:
        logger.exception("Error checking anomalies")
        raise

    logger.info("Anomaly check found %d anomalies", len(anomalies))
    return AnomalyCheckResult(anomalies_detected=len(anomalies))

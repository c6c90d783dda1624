import hmac

from fastapi import Header, HTTPException, status

from finsync.core.config import settings


def _matches(given: str | None, expected: str) -> bool:
    # An unset secret never authorises anything
    if not given or not expected:
        return False
    return hmac.compare_digest(given.encode(), expected.encode())


async def require_bearer(authorization: str | None = Header(default=None)) -> None:
    """Bearer token must equal the QuickBooks client secret."""
    scheme, _, token = (authorization or "").partition(" ")
    if scheme != "Bearer" or not _matches(token, settings.qbo_client_secret):
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail="Unauthorized")


def verify_slack_token(token: str | None) -> bool:
    return _matches(token, settings.slack_verification_token)

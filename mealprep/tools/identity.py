import logging
from typing import Any, Dict, List, Optional

import httpx

from mealprep.app.schemas import SessionUser
from mealprep.app.settings import settings

logger = logging.getLogger(__name__)


def _is_verified(entry: Dict[str, Any]) -> bool:
    # explicit flag, or the nested {"verification": {"status": "verified"}} form; absent means unverified
    if entry.get("verified") is True:
        return True
    verification = entry.get("verification")
    return isinstance(verification, dict) and verification.get("status") == "verified"


def _verified_emails(payload: Dict[str, Any]) -> List[str]:
    emails: List[str] = []
    for entry in payload.get("email_addresses") or []:
        if isinstance(entry, str):
            # bare strings: the provider only lists verified addresses in this form
            emails.append(entry)
        elif isinstance(entry, dict) and entry.get("email_address") and _is_verified(entry):
            emails.append(entry["email_address"])
    return emails


class HttpIdentityProvider:
    """
    Resolves the signed-in user by forwarding the caller's bearer token to the
    identity provider's userinfo endpoint. Token validation happens on the
    provider's side; any failure here just means "no session".
    """

    def __init__(
        self,
        userinfo_url: Optional[str] = None,
        timeout: Optional[float] = None,
        transport: Optional[httpx.BaseTransport] = None,
    ):
        self.userinfo_url = userinfo_url if userinfo_url is not None else settings.identity_userinfo_url
        self.timeout = timeout if timeout is not None else settings.request_timeout
        self._transport = transport

    def current_user(self, authorization: Optional[str]) -> Optional[SessionUser]:
        if not authorization or not authorization.startswith("Bearer "):
            return None
        if not self.userinfo_url:
            logger.debug("No identity userinfo URL configured; skipping session lookup")
            return None

        try:
            with httpx.Client(timeout=self.timeout, transport=self._transport) as client:
                resp = client.get(self.userinfo_url, headers={"Authorization": authorization})
                resp.raise_for_status()
                payload = resp.json()
        except (httpx.HTTPError, ValueError) as exc:
            logger.error("Identity provider lookup failed for %s: %s", self.userinfo_url, exc)
            return None

        if not isinstance(payload, dict) or not payload.get("id"):
            logger.warning("Identity provider returned no user id")
            return None
        return SessionUser(id=str(payload["id"]), email_addresses=_verified_emails(payload))

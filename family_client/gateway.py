import logging

import requests

from . import config

logger = logging.getLogger(__name__)


class GatewayError(RuntimeError):
    pass


class RemoteGateway:
    """HTTP client for the family health API."""

    source = "api"

    def __init__(self, base_url=None, session=None, get_timeout=None, write_timeout=None):
        self.base_url = (base_url or config.BACKEND_BASE).rstrip("/")
        self.session = session or requests.Session()
        self.get_timeout = get_timeout or config.GET_TIMEOUT
        self.write_timeout = write_timeout or config.WRITE_TIMEOUT

    # helper to call backend with error handling
    def _request(self, method, path, **kwargs):
        timeout = self.get_timeout if method == "GET" else self.write_timeout
        try:
            resp = self.session.request(method, self.base_url + path, timeout=timeout, **kwargs)
            resp.raise_for_status()
            return resp.json()
        except (requests.RequestException, ValueError) as e:
            raise GatewayError(f"Backend {method} {path} failed: {e}") from e

    def _params(self, **params):
        return {k: v for k, v in params.items() if v}

    def ping(self):
        """Lightweight call proving the API and its database answer."""
        return self._request("GET", "/test")

    # ---------------------------
    # Family members
    # ---------------------------
    def list_family_members(self, user_id=None):
        return self._request("GET", "/family-members", params=self._params(userId=user_id))

    def create_family_member(self, data, user_id=None):
        return self._request("POST", "/family-members", json={**data, "userId": user_id or config.DEFAULT_USER_ID})

    def update_family_member(self, member_id, fields):
        return self._request("PUT", f"/family-members/{member_id}", json=fields)

    def delete_family_member(self, member_id):
        return self._request("DELETE", f"/family-members/{member_id}")

    def health_score(self, member_id):
        return self._request("GET", f"/family-members/{member_id}/health-score")

    # ---------------------------
    # Other resources
    # ---------------------------
    def list_medications(self, user_id=None, member_id=None):
        return self._request("GET", "/medications", params=self._params(userId=user_id, memberId=member_id))

    def create_medication(self, data):
        return self._request("POST", "/medications", json=data)

    def list_appointments(self, user_id=None, member_id=None):
        return self._request("GET", "/appointments", params=self._params(userId=user_id, memberId=member_id))

    def create_appointment(self, data):
        return self._request("POST", "/appointments", json=data)

    def list_reminders(self, user_id=None, member_id=None):
        return self._request("GET", "/reminders", params=self._params(userId=user_id, memberId=member_id))

    def create_reminder(self, data):
        return self._request("POST", "/reminders", json=data)

    def list_reports(self, user_id=None, member_id=None):
        return self._request("GET", "/reports", params=self._params(userId=user_id, memberId=member_id))

    def create_report(self, data):
        return self._request("POST", "/reports", json=data)

    def validate_report_text(self, text):
        return self._request("POST", "/reports/validate", json={"text": text})

    def create_insights(self, user_id, insights, member_id=None):
        return self._request(
            "POST", "/ai/insights", json={"userId": user_id, "memberId": member_id, "insights": list(insights)}
        )


class UnavailableGateway:
    """Stand-in API that refuses every call, forcing local storage."""

    source = "api"

    def _fail(self, *args, **kwargs):
        raise GatewayError("Remote API not available - using local storage")

    ping = _fail
    list_family_members = _fail
    create_family_member = _fail
    update_family_member = _fail
    delete_family_member = _fail

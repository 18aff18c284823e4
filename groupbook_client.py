"""Group Book API client.

This module defines a small client wrapper around the Group Book REST
API.  It uses the ``requests`` library internally and follows the API's
envelope convention: every response is HTTP 200 with a ``return_code``
field, and that field alone decides success.

Every high-level method returns a tuple ``(data, error)``.  On success
``data`` holds the relevant part of the response and ``error`` is
``None``.  On failure ``data`` is ``None`` (or an empty list) and
``error`` is a dictionary with the keys ``return_code`` and
``message``.  Network failures use ``return_code`` ``None``.

After a successful :meth:`GroupbookClient.login` or
:meth:`GroupbookClient.register` the client keeps the returned token
and sends it as a bearer credential on owner requests.
"""

from __future__ import annotations

import logging
from typing import Any, Dict, List, Optional, Tuple

import requests


logger = logging.getLogger(__name__)

Result = Tuple[Optional[Dict[str, Any]], Optional[Dict[str, Any]]]


class GroupbookClient:
    """Client for the Group Book API."""

    def __init__(
        self,
        *,
        base_url: str,
        token: Optional[str] = None,
        session: Optional[requests.Session] = None,
        timeout: float = 15,
    ) -> None:
        """Initialise the API client.

        Args:
            base_url: Base URL of the server, e.g. ``http://localhost:3016``.
            token: Optional access token to use for owner requests.
            session: Optional requests session.  If not supplied a
                session will be created automatically.
            timeout: Seconds to wait for each HTTP request.
        """
        self.base_url = base_url.rstrip("/")
        self.token = token
        self.session = session or requests.Session()
        self.timeout = timeout

    # ------------------------------------------------------------------
    # Low level HTTP helper
    # ------------------------------------------------------------------
    def _request(
        self,
        method: str,
        path: str,
        *,
        json_body: Any | None = None,
        auth: bool = False,
    ) -> Result:
        """Perform an HTTP request against ``/api``.

        Args:
            method: HTTP method (``GET``, ``POST``, ``PUT``, ``DELETE``).
            path: Path below ``/api`` (e.g. ``/events``).
            json_body: JSON body to send with the request.
            auth: Whether to send the stored token.
        Returns:
            A tuple ``(body, error)`` where ``body`` is the full response
            envelope when ``return_code`` is ``SUCCESS``.
        """
        url = f"{self.base_url}/api{path}"
        headers: Dict[str, str] = {}
        if auth:
            if not self.token:
                return None, {"return_code": "UNAUTHORIZED", "message": "Not logged in"}
            headers["Authorization"] = f"Bearer {self.token}"
        try:
            logger.debug("Sending %s request to %s", method, url)
            response = self.session.request(
                method=method,
                url=url,
                json=json_body,
                headers=headers,
                timeout=self.timeout,
            )
            response.raise_for_status()
            body = response.json()
        except requests.RequestException as exc:
            logger.error("API request failed: %s", exc)
            return None, {"return_code": None, "message": "Network error - please check your connection"}
        except ValueError:
            logger.error("API returned a non-JSON response for %s %s", method, url)
            return None, {"return_code": None, "message": "Unexpected response from server"}
        if not isinstance(body, dict):
            return None, {"return_code": None, "message": "Unexpected response from server"}
        return_code = body.get("return_code")
        if return_code != "SUCCESS":
            logger.info("%s %s returned %s", method, path, return_code)
            return None, {"return_code": return_code, "message": body.get("message") or "Request failed"}
        return body, None

    # ------------------------------------------------------------------
    # Account operations
    # ------------------------------------------------------------------
    def register(self, email: str, password: str, display_name: str) -> Result:
        """Create an account and remember its token.

        Returns:
            A tuple ``(account, error)``.
        """
        body, error = self._request(
            "POST",
            "/auth/register",
            json_body={"email": email, "password": password, "display_name": display_name},
        )
        if error:
            return None, error
        self.token = body["token"]
        return body["account"], None

    def login(self, email: str, password: str) -> Result:
        """Log in and remember the new token.

        Returns:
            A tuple ``(account, error)``.
        """
        body, error = self._request("POST", "/auth/login", json_body={"email": email, "password": password})
        if error:
            return None, error
        self.token = body["token"]
        return body["account"], None

    def logout(self) -> None:
        """Forget the stored token.  Tokens are not revoked server-side."""
        self.token = None

    def me(self) -> Result:
        body, error = self._request("GET", "/auth/me", auth=True)
        return (body["account"], None) if body else (None, error)

    def update_profile(self, display_name: str) -> Result:
        body, error = self._request("PUT", "/user/profile", json_body={"display_name": display_name}, auth=True)
        return (body["account"], None) if body else (None, error)

    def get_branding(self) -> Result:
        body, error = self._request("GET", "/branding", auth=True)
        return (body["branding"], None) if body else (None, error)

    def update_branding(
        self,
        logo_url: Optional[str] = None,
        hero_image_url: Optional[str] = None,
        terms_link: Optional[str] = None,
    ) -> Result:
        payload = {"logo_url": logo_url, "hero_image_url": hero_image_url, "terms_link": terms_link}
        body, error = self._request("PUT", "/branding", json_body=payload, auth=True)
        return (body["branding"], None) if body else (None, error)

    # ------------------------------------------------------------------
    # Event operations
    # ------------------------------------------------------------------
    def create_event(self, payload: Dict[str, Any]) -> Result:
        """Create an event.

        Args:
            payload: Event fields; ``event_name`` and ``event_date_time``
                (ISO-8601 string) are required.
        Returns:
            A tuple ``(event, error)``.
        """
        body, error = self._request("POST", "/events", json_body=payload, auth=True)
        return (body["event"], None) if body else (None, error)

    def list_events(self) -> Tuple[List[Dict[str, Any]], Optional[Dict[str, Any]]]:
        """Retrieve the logged-in account's events, newest first."""
        body, error = self._request("GET", "/events", auth=True)
        return (body["events"], None) if body else ([], error)

    def get_event(self, event_id: int) -> Result:
        body, error = self._request("GET", f"/events/{event_id}", auth=True)
        return (body["event"], None) if body else (None, error)

    def update_event(self, event_id: int, payload: Dict[str, Any]) -> Result:
        body, error = self._request("PUT", f"/events/{event_id}", json_body=payload, auth=True)
        return (body["event"], None) if body else (None, error)

    def set_event_lock(self, event_id: int, is_locked: bool) -> Result:
        body, error = self._request(
            "PUT", f"/events/{event_id}/lock", json_body={"is_locked": is_locked}, auth=True
        )
        return (body["event"], None) if body else (None, error)

    def delete_event(self, event_id: int) -> Tuple[bool, Optional[Dict[str, Any]]]:
        body, error = self._request("DELETE", f"/events/{event_id}", auth=True)
        return body is not None, error

    # ------------------------------------------------------------------
    # Guest operations
    # ------------------------------------------------------------------
    def get_public_event(self, link_token: str) -> Result:
        """Fetch an event's public page data.  No login needed."""
        body, error = self._request("GET", f"/events/public/{link_token}")
        return (body["event"], None) if body else (None, error)

    def add_guest(
        self,
        link_token: str,
        name: str,
        food_order: Optional[str] = None,
        dietary_notes: Optional[str] = None,
    ) -> Result:
        """Sign a guest up through an event's link token."""
        payload = {"name": name, "food_order": food_order, "dietary_notes": dietary_notes}
        body, error = self._request("POST", f"/events/public/{link_token}/guests", json_body=payload)
        return (body["guest"], None) if body else (None, error)

    def list_guests(self, event_id: int) -> Tuple[List[Dict[str, Any]], Optional[Dict[str, Any]]]:
        body, error = self._request("GET", f"/events/{event_id}/guests", auth=True)
        return (body["guests"], None) if body else ([], error)

    def remove_guest(self, event_id: int, guest_id: int) -> Tuple[bool, Optional[Dict[str, Any]]]:
        body, error = self._request("DELETE", f"/events/{event_id}/guests/{guest_id}", auth=True)
        return body is not None, error

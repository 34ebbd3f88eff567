"""
Prediction backend client — one instance per vertical.

Endpoints (relative to ``[backend] base_url``)::

    GET  {prefix}/generate   → sample accounts in the vertical's wire format
    POST {prefix}/predict    → JSON array of wire records in, scored rows out

Every response is wrapped in the same envelope::

    {"Response": {"StatusCode": 200,
                  "Message": "...",
                  "ResponseInfo": {"data": [...]}}}

Credential setup (.env, gitignored):
  PROPENSITY_ENGINE_API_TOKEN=your_token     # sent as ``Authorization: Bearer``

Failures are never retried.  A transport error, a non-2xx status or an
envelope ``StatusCode`` other than 200 raises ``BackendError``; the caller
decides what to keep.
"""

from __future__ import annotations

import logging
from typing import Any, Optional, Sequence

import httpx
from pydantic import ValidationError

from propensity_engine.config import BackendConfig
from propensity_engine.models.account import BackendPrediction, FeatureRecord
from propensity_engine.verticals.profile import VerticalProfile

logger = logging.getLogger(__name__)


class BackendError(RuntimeError):
    """The prediction backend rejected a request or returned an error envelope.

    Attributes:
        status_code: HTTP status (or envelope ``StatusCode``), when known.
        detail:      Backend-supplied explanation.
    """

    def __init__(self, message: str, status_code: Optional[int] = None, detail: str = "") -> None:
        super().__init__(message)
        self.status_code = status_code
        self.detail = detail


def _error_detail(response: httpx.Response) -> str:
    """Extract the backend ``detail`` from an error body, else the reason phrase."""
    try:
        body = response.json()
    except ValueError:
        return response.reason_phrase
    detail = body.get("detail") if isinstance(body, dict) else None
    if not detail:
        return response.reason_phrase
    if isinstance(detail, list):
        return "; ".join(
            str(item.get("msg", item)) if isinstance(item, dict) else str(item)
            for item in detail
        )
    return str(detail)


def unwrap_envelope(payload: Any) -> list[dict[str, Any]]:
    """Return ``Response.ResponseInfo.data`` from a backend envelope.

    Raises:
        BackendError: If the envelope is malformed or reports a non-200 status.
    """
    envelope = payload.get("Response") if isinstance(payload, dict) else None
    if not isinstance(envelope, dict):
        raise BackendError("Backend response is missing the 'Response' envelope.")

    status = envelope.get("StatusCode")
    if status != 200:
        message = envelope.get("Message") or "Backend returned an error"
        raise BackendError(message, status_code=status if isinstance(status, int) else None)

    data = (envelope.get("ResponseInfo") or {}).get("data")
    if not isinstance(data, list):
        raise BackendError("Backend response has no 'ResponseInfo.data' list.")
    return data


class PredictionClient:
    """HTTP client for one vertical's generate/predict endpoints.

    Usage::

        client = PredictionClient(get_profile("rpc"), config.backend)
        records = client.generate_accounts()
        predictions = client.predict(records)

    Attributes:
        profile:   Vertical whose endpoints and wire format are used.
        config:    Backend URL, timeout and token.
        transport: Optional httpx transport (``httpx.MockTransport`` in tests).
    """

    def __init__(
        self,
        profile: VerticalProfile,
        config: BackendConfig,
        transport: Optional[httpx.BaseTransport] = None,
    ) -> None:
        self.profile = profile
        self.config = config
        self.transport = transport

    def _headers(self) -> dict[str, str]:
        headers = {"Content-Type": "application/json"}
        if self.config.api_token:
            headers["Authorization"] = f"Bearer {self.config.api_token}"
        return headers

    def _request(self, method: str, path: str, json: Any = None) -> list[dict[str, Any]]:
        url = f"{self.config.base_url}{self.profile.endpoint_prefix}{path}"
        logger.debug("%s %s", method, url)
        try:
            with httpx.Client(
                timeout=self.config.timeout_seconds,
                headers=self._headers(),
                transport=self.transport,
            ) as http:
                resp = http.request(method, url, json=json)
        except httpx.HTTPError as exc:
            raise BackendError(f"{self.profile.display_name} backend unreachable: {exc}") from exc

        if resp.is_error:
            detail = _error_detail(resp)
            raise BackendError(
                f"{self.profile.display_name} request failed ({resp.status_code}): {detail}",
                status_code=resp.status_code,
                detail=detail,
            )
        try:
            payload = resp.json()
        except ValueError as exc:
            raise BackendError(
                f"Backend returned a non-JSON body ({resp.status_code}).",
                status_code=resp.status_code,
            ) from exc
        return unwrap_envelope(payload)

    # ── Endpoints ──────────────────────────────────────────────────────────────

    def generate_accounts(self) -> list[FeatureRecord]:
        """Fetch sample accounts (the backend's default batch, usually 5).

        Raises:
            BackendError: On HTTP or envelope failure.
        """
        rows = self._request("GET", "/generate")
        records: list[FeatureRecord] = []
        for row in rows:
            try:
                records.append(self.profile.from_wire(row))
            except ValueError:
                logger.warning("Skipping generated row without an identifier: %r", row)
        logger.debug("Fetched %d %s account(s).", len(records), self.profile.slug)
        return records

    def predict(self, records: Sequence[FeatureRecord]) -> list[BackendPrediction]:
        """Score ``records`` in one batch call.

        Rows without an identifier, rows that fail to parse, and rows for
        identifiers that were not sent are dropped.  Completeness (score + attributions) is left for the
        caller to judge.

        Raises:
            BackendError: On HTTP or envelope failure.
        """
        sent_ids = {rec.account_id for rec in records}
        rows = self._request("POST", "/predict", json=[self.profile.to_wire(r) for r in records])

        predictions: list[BackendPrediction] = []
        for row in rows:
            raw_id = row.get(self.profile.response_id_field) if isinstance(row, dict) else None
            if raw_id is None or str(raw_id).strip() == "":
                logger.warning("Skipping prediction row without '%s'.", self.profile.response_id_field)
                continue
            try:
                prediction = self.profile.parse_prediction(row)
            except (ValidationError, TypeError, ValueError) as exc:
                logger.warning("Skipping malformed prediction row for %s: %s", raw_id, exc)
                continue
            if prediction.account_id not in sent_ids:
                logger.warning("Skipping prediction for unrequested account %s.", prediction.account_id)
                continue
            predictions.append(prediction)

        logger.info(
            "Scored %d/%d %s account(s).", len(predictions), len(records), self.profile.slug
        )
        return predictions

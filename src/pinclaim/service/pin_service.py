"""Pinning service client - claim records and file uploads over HTTP."""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Any

import httpx

from pinclaim.errors import ConfigError, FileTooLarge, TransportError, UpstreamServiceError
from pinclaim.models.records import ClaimSubmission, UploadResult

log = logging.getLogger(__name__)


def _error_message(resp: httpx.Response) -> str:
    """Pull the service's own error message out of a failed response."""
    try:
        body = resp.json()
    except ValueError:
        body = None
    if isinstance(body, dict):
        for key in ("message", "error"):
            if body.get(key):
                return str(body[key])
    return f"HTTP {resp.status_code}"


class PinServiceClient:
    """Talks to the pinning service REST API.

    Endpoints under {pin_service_url}/ipfs/:
    - pin-status/{cid}: raw claim record, including claimTxDetails
    - pin-claim/: record a proof-of-burn/claim pair for a CID
    - unprocessed-pins: every record whose validClaim is null
    - pin-local-file/: multipart upload, returns the new CID

    One request is in flight per call and nothing is retried.
    """

    def __init__(
        self,
        pin_service_url: str,
        timeout: float | None = None,
        max_upload_size: int = 150_000_000,
    ) -> None:
        self._base_url = pin_service_url.rstrip("/")
        self._timeout = timeout
        self._max_upload_size = max_upload_size

    def _url(self, endpoint: str) -> str:
        return f"{self._base_url}/ipfs/{endpoint}"

    def _client(self) -> httpx.AsyncClient:
        if self._timeout is None:
            return httpx.AsyncClient()
        return httpx.AsyncClient(timeout=self._timeout)

    async def _request(self, method: str, endpoint: str, **kwargs: Any) -> Any:
        url = self._url(endpoint)
        log.debug("%s %s", method, url)
        try:
            async with self._client() as client:
                resp = await client.request(method, url, **kwargs)
                resp.raise_for_status()
                if not resp.content:
                    return None
                return resp.json()
        except httpx.HTTPStatusError as exc:
            message = _error_message(exc.response)
            log.error("%s %s failed: %s", method, url, message)
            raise UpstreamServiceError(message, exc.response.status_code) from exc
        except httpx.TransportError as exc:
            log.error("%s %s transport error: %s", method, url, exc)
            raise TransportError(str(exc) or type(exc).__name__) from exc
        except httpx.InvalidURL as exc:
            raise ConfigError(f"invalid pin service URL {url!r}: {exc}") from exc
        except ValueError as exc:
            raise UpstreamServiceError(f"invalid JSON from {url}") from exc

    async def get_pin_status(self, cid: str) -> Any:
        """Return the claim record exactly as the service sent it."""
        return await self._request("GET", f"pin-status/{cid}")

    async def submit_claim(self, submission: ClaimSubmission) -> dict:
        data = await self._request("POST", "pin-claim/", json=submission.to_payload())
        if not isinstance(data, dict) or not data.get("success"):
            message = data.get("message") if isinstance(data, dict) else None
            raise UpstreamServiceError(str(message or "pin claim rejected"))
        log.info("Pin claim recorded for %s", submission.cid)
        return data

    async def list_unprocessed(self) -> list[dict]:
        data = await self._request("GET", "unprocessed-pins")
        if isinstance(data, dict):
            # Some deployments wrap the list: {"success": true, "pins": [...]}
            data = data.get("pins", [])
        return [entry for entry in data or [] if isinstance(entry, dict)]

    async def upload_file(self, path: Path, filename: str) -> UploadResult:
        """Upload a local file and return the CID assigned by the network."""
        size = path.stat().st_size
        if size > self._max_upload_size:
            raise FileTooLarge(
                f"{filename} is {size} bytes (max {self._max_upload_size})"
            )

        log.info("Uploading %s (%d bytes)", filename, size)
        with open(path, "rb") as f:
            data = await self._request(
                "POST", "pin-local-file/", files={"file": (filename, f)},
            )

        if not isinstance(data, dict) or not data.get("success"):
            message = data.get("message") if isinstance(data, dict) else None
            raise UpstreamServiceError(str(message or "upload rejected"))

        cid = data.get("cid")
        if not cid:
            raise UpstreamServiceError(f"upload of {filename} returned no CID")

        log.info("Uploaded %s as %s", filename, cid)
        return UploadResult(cid=str(cid), filename=filename, size_bytes=size, raw=data)

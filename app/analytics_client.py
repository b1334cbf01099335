"""
HTTP client for the upstream analytics service
Prediction jobs and reference data are fetched live; nothing is cached or retried
"""
import logging
from dataclasses import dataclass
from typing import Optional, Dict, Any, Tuple

import requests
from pydantic import ValidationError

from app.errors import UpstreamUnavailableError, UpstreamReadError, UpstreamParseError
from app.schemas import PredictionRequest, JobResponse

logger = logging.getLogger("analytics_client")

DEFAULT_CONTENT_TYPE = "application/json"


@dataclass
class UpstreamResponse:
    """Raw upstream reply, relayed to the caller without decoding."""
    status_code: int
    content: bytes
    content_type: str = DEFAULT_CONTENT_TYPE


class AnalyticsClient:
    """
    Thin synchronous client for the analytics API.

    One requests.Session is shared by all worker threads; each call makes
    exactly one upstream request.

    Usage:
        client = AnalyticsClient("http://localhost:5000/api")
        status, job = client.start_prediction(PredictionRequest(...))
        raw = client.get_job("abc123")
    """

    def __init__(
        self,
        base_url: str,
        timeout: Optional[float] = None,
        session: Optional[requests.Session] = None,
    ):
        """
        Args:
            base_url: Analytics API root, e.g. http://localhost:5000/api
            timeout: Seconds per request; None waits indefinitely
            session: Optional pre-configured session
        """
        self.base_url = base_url.rstrip("/")
        self.timeout = timeout
        self._session = session or requests.Session()

    def _request(
        self,
        method: str,
        endpoint: str,
        params: Optional[Dict[str, Any]] = None,
        json: Optional[Dict[str, Any]] = None,
    ) -> UpstreamResponse:
        """
        Make one request to the analytics API and read the whole body.

        Raises:
            UpstreamUnavailableError: the request could not be sent or answered
            UpstreamReadError: the body could not be read
        """
        url = f"{self.base_url}/{endpoint}"

        try:
            response = self._session.request(
                method,
                url,
                params=params,
                json=json,
                timeout=self.timeout,
                stream=True,
            )
        except requests.RequestException as e:
            logger.warning(f"Analytics API unavailable ({method} {url}): {e}")
            raise UpstreamUnavailableError(str(e)) from e

        try:
            content = response.content
        except requests.RequestException as e:
            logger.warning(f"Failed to read analytics response ({method} {url}): {e}")
            raise UpstreamReadError(str(e)) from e
        finally:
            response.close()

        return UpstreamResponse(
            status_code=response.status_code,
            content=content,
            content_type=response.headers.get("Content-Type") or DEFAULT_CONTENT_TYPE,
        )

    def close(self) -> None:
        """Release pooled connections."""
        self._session.close()

    # ===== PREDICTIONS =====

    def start_prediction(self, prediction: PredictionRequest) -> Tuple[int, JobResponse]:
        """
        Submit a prediction job.

        Returns:
            The upstream status code and the parsed job status

        Raises:
            UpstreamParseError: the reply is not a job status document
        """
        upstream = self._request("POST", "predict", json=prediction.model_dump())
        try:
            job = JobResponse.model_validate_json(upstream.content)
        except ValidationError as e:
            logger.warning(f"Unparseable /predict response (status {upstream.status_code}): {e}")
            raise UpstreamParseError(str(e)) from e
        return upstream.status_code, job

    def get_job(self, job_id: str) -> UpstreamResponse:
        """Get the current status of a prediction job, ID passed through verbatim."""
        return self._request("GET", f"jobs/{job_id}")

    # ===== REFERENCE DATA =====

    def get_team_data(self, team: str) -> UpstreamResponse:
        """Historical data for one team."""
        return self._request("GET", "data/team", params={"team": team})

    def get_next_game_data(self) -> UpstreamResponse:
        """Feature data for the next scheduled game."""
        return self._request("GET", "data/next-game")

    def get_leagues(self) -> UpstreamResponse:
        """Leagues known to the analytics service."""
        return self._request("GET", "leagues")

    def get_teams(self, league: str) -> UpstreamResponse:
        """Teams playing in a league."""
        return self._request("GET", "teams", params={"league": league})

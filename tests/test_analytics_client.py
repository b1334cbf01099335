"""
Unit tests for the analytics client using a stubbed requests.Session.
"""
import pytest
import requests

from app.analytics_client import AnalyticsClient
from app.errors import UpstreamUnavailableError, UpstreamReadError, UpstreamParseError
from app.schemas import PredictionRequest


@pytest.fixture
def analytics_client(analytics):
    return AnalyticsClient(analytics.base_url + "/", timeout=5)


def test_base_url_trailing_slash_is_dropped(analytics, analytics_client):
    assert analytics_client.base_url == analytics.base_url


def test_start_prediction_posts_json_and_parses_job(analytics, analytics_client):
    analytics.reply(
        "POST", "/predict", status_code=202,
        payload={"status": "pending", "job_id": "j1", "message": "queued", "extra": 1},
    )
    prediction = PredictionRequest(
        season=2024, league="EPL", team1="A", team2="B", gameDate="2024-05-01"
    )

    status_code, job = analytics_client.start_prediction(prediction)

    assert status_code == 202
    assert job.status == "pending"
    assert job.job_id == "j1"
    assert job.message == "queued"
    assert job.result is None

    call = analytics.calls[0]
    assert call["method"] == "POST"
    assert call["url"] == analytics.base_url + "/predict"
    assert call["json"] == {
        "season": 2024, "league": "EPL", "team1": "A", "team2": "B", "gameDate": "2024-05-01",
    }
    assert call["timeout"] == 5


def test_start_prediction_unparseable_body(analytics, analytics_client):
    analytics.reply("POST", "/predict", body=b"<html>oops</html>", content_type="text/html")
    with pytest.raises(UpstreamParseError):
        analytics_client.start_prediction(PredictionRequest())


def test_start_prediction_wrong_shape(analytics, analytics_client):
    analytics.reply("POST", "/predict", payload={"status": 3, "job_id": ["x"]})
    with pytest.raises(UpstreamParseError):
        analytics_client.start_prediction(PredictionRequest())


def test_get_job_uses_id_verbatim(analytics, analytics_client):
    analytics.reply("GET", "/jobs/abc-123", payload={"status": "done"})
    upstream = analytics_client.get_job("abc-123")
    assert upstream.status_code == 200
    assert analytics.calls[0]["url"] == analytics.base_url + "/jobs/abc-123"


def test_query_parameters_are_passed(analytics, analytics_client):
    analytics_client.get_team_data("Real Madrid")
    analytics_client.get_teams("La Liga")
    assert analytics.calls[0]["url"] == analytics.base_url + "/data/team"
    assert analytics.calls[0]["params"] == {"team": "Real Madrid"}
    assert analytics.calls[1]["url"] == analytics.base_url + "/teams"
    assert analytics.calls[1]["params"] == {"league": "La Liga"}


def test_raw_body_and_status_are_kept(analytics, analytics_client):
    analytics.reply("GET", "/leagues", status_code=500, body=b'{"status":"error"}')
    upstream = analytics_client.get_leagues()
    assert upstream.status_code == 500
    assert upstream.content == b'{"status":"error"}'
    assert upstream.content_type == "application/json"


def test_missing_content_type_defaults_to_json(analytics, analytics_client):
    analytics.reply("GET", "/data/next-game", body=b"{}", content_type=None)
    assert analytics_client.get_next_game_data().content_type == "application/json"


def test_unreachable_upstream_raises_unavailable(analytics, analytics_client):
    analytics.unreachable("Connection refused")
    with pytest.raises(UpstreamUnavailableError, match="Connection refused"):
        analytics_client.get_leagues()


def test_timeout_raises_unavailable(analytics, analytics_client):
    analytics.error = requests.Timeout("read timed out")
    with pytest.raises(UpstreamUnavailableError):
        analytics_client.start_prediction(PredictionRequest())


def test_body_read_failure_raises_read_error(analytics, analytics_client):
    broken = analytics.broken()
    with pytest.raises(UpstreamReadError):
        analytics_client.get_leagues()
    assert broken.closed

"""Unit tests for the DMPHub and NSF adapters."""

import json
from pathlib import Path
from unittest.mock import Mock, patch

import pytest
import requests

from award_scanner.adapters import (
    AdapterAuthenticationError,
    AdapterConfigurationError,
    AdapterHTTPError,
    AdapterResponseError,
    AdapterTimeoutError,
    DMPHubAdapter,
    NSFAwardsAdapter,
    get_awards_adapter,
    get_dmphub_adapter,
)
from award_scanner.adapters.base import BaseAdapter
from award_scanner.adapters.nsf import PRINT_FIELDS
from award_scanner.config.environment import EnvironmentConfig
from award_scanner.config.models import AdvancedConfig, DMPHubConfig, NSFConfig
from award_scanner.domain.models import AggregatedMatch, Plan, PrincipalInvestigator

RESPONSES_DIR = Path(__file__).parent / "fixtures" / "api_responses"


def load_response(name):
    with open(RESPONSES_DIR / name) as f:
        return json.load(f)


def make_response(status_code=200, payload=None, text=None, reason="OK"):
    """Build a fake requests.Response."""
    response = Mock()
    response.status_code = status_code
    response.reason = reason
    if payload is not None:
        body = json.dumps(payload)
        response.json.return_value = payload
    else:
        body = text or ""
        response.json.side_effect = ValueError("No JSON object could be decoded")
    response.text = body
    response.content = body.encode()
    return response


# ============================================================================
# Fixtures
# ============================================================================


@pytest.fixture
def advanced_config():
    return AdvancedConfig(
        http_request_timeout=30,
        user_agent="DMPAwardScanner/1.0",
        max_candidates_per_plan=500,
    )


@pytest.fixture
def dmphub_config():
    return DMPHubConfig(base_path="http://localhost:3003")


@pytest.fixture
def nsf_adapter():
    return NSFAwardsAdapter(timeout=30)


@pytest.fixture
def dmphub_adapter():
    return DMPHubAdapter(
        plans_url="http://localhost:3003/api/v1/data_management_plans",
        awards_url="http://localhost:3003/api/v1/awards",
    )


@pytest.fixture
def authenticated_adapter():
    return DMPHubAdapter(
        plans_url="http://localhost:3003/api/v1/data_management_plans",
        awards_url="http://localhost:3003/api/v1/awards",
        token_url="http://localhost:3003/oauth/token",
        client_id="client-id",
        client_secret="client-secret",
    )


@pytest.fixture
def plan():
    return Plan(
        uri="http://localhost:3003/api/v1/data_management_plans/10.80030/yxcw-kh07",
        title="Coastal Resilience",
        authors="Jane Doe|MIT",
    )


@pytest.fixture
def match():
    return AggregatedMatch(
        title="Coastal Resilience",
        principal_investigators=[PrincipalInvestigator(name="Jane Doe", organization="MIT")],
        award_id="https://www.nsf.gov/awardsearch/showAward?AWD_ID=123",
    )


# ============================================================================
# Base Adapter Tests
# ============================================================================


class TestBaseAdapter:
    """Tests for BaseAdapter HTTP handling."""

    def test_init_with_invalid_timeout(self):
        with pytest.raises(AdapterConfigurationError):
            BaseAdapter(timeout=2)

    def test_init_with_empty_user_agent(self):
        with pytest.raises(AdapterConfigurationError):
            BaseAdapter(user_agent="   ")

    def test_session_headers(self):
        adapter = BaseAdapter(user_agent="Scanner/2.0")
        assert adapter._session.headers["User-Agent"] == "Scanner/2.0"
        assert adapter._session.headers["Accept"] == "application/json"

    def test_make_request_returns_json(self):
        adapter = BaseAdapter()
        with patch.object(requests.Session, "request", return_value=make_response(payload={"a": 1})) as mock_request:
            result = adapter._make_request("https://api.example.org/x", params={"q": "y"})

        assert result == {"a": 1}
        kwargs = mock_request.call_args.kwargs
        assert kwargs["method"] == "GET"
        assert kwargs["params"] == {"q": "y"}
        assert kwargs["timeout"] == 30

    def test_make_request_empty_body_returns_none(self):
        adapter = BaseAdapter()
        with patch.object(requests.Session, "request", return_value=make_response(status_code=201)):
            assert adapter._make_request("https://api.example.org/x", method="POST") is None

    def test_make_request_http_error(self):
        adapter = BaseAdapter()
        response = make_response(status_code=503, text="Service Unavailable", reason="Service Unavailable")
        with patch.object(requests.Session, "request", return_value=response):
            with pytest.raises(AdapterHTTPError) as exc_info:
                adapter._make_request("https://api.example.org/x")

        assert exc_info.value.status_code == 503
        assert exc_info.value.body == "Service Unavailable"
        assert exc_info.value.is_retryable

    def test_make_request_client_error_not_retryable(self):
        adapter = BaseAdapter()
        with patch.object(requests.Session, "request", return_value=make_response(status_code=404, text="nope")):
            with pytest.raises(AdapterHTTPError) as exc_info:
                adapter._make_request("https://api.example.org/x")

        assert not exc_info.value.is_retryable

    def test_make_request_timeout(self):
        adapter = BaseAdapter()
        with patch.object(requests.Session, "request", side_effect=requests.exceptions.Timeout()):
            with pytest.raises(AdapterTimeoutError) as exc_info:
                adapter._make_request("https://api.example.org/x")

        assert exc_info.value.url == "https://api.example.org/x"

    def test_make_request_connection_error(self):
        adapter = BaseAdapter()
        with patch.object(requests.Session, "request", side_effect=requests.exceptions.ConnectionError("refused")):
            with pytest.raises(AdapterHTTPError) as exc_info:
                adapter._make_request("https://api.example.org/x")

        assert exc_info.value.status_code == 0

    def test_make_request_invalid_json(self):
        adapter = BaseAdapter()
        with patch.object(requests.Session, "request", return_value=make_response(text="<html>")):
            with pytest.raises(AdapterResponseError):
                adapter._make_request("https://api.example.org/x")


# ============================================================================
# NSF Adapter Tests
# ============================================================================


class TestNSFAwardsAdapter:
    """Tests for NSFAwardsAdapter.find_candidates."""

    def test_find_candidates_parses_awards(self, nsf_adapter):
        with patch.object(nsf_adapter, "_make_request", return_value=load_response("nsf_awards_response.json")):
            candidates = nsf_adapter.find_candidates("coastal resilience sediment transport")

        assert len(candidates) == 3
        assert candidates[0].id == "1740212"
        assert candidates[0].pi_first_name == "Jane"
        assert candidates[0].pi_last_name == "Doe"
        assert candidates[0].awardee_name == "Example University"
        assert candidates[2].id == "1953340"
        assert candidates[2].pi_first_name is None

    def test_find_candidates_sends_keyword_and_fields(self, nsf_adapter):
        with patch.object(nsf_adapter, "_make_request", return_value={"response": {"award": []}}) as mock_request:
            nsf_adapter.find_candidates("coastal resilience")

        mock_request.assert_called_once_with(
            nsf_adapter.awards_url,
            params={"keyword": "coastal resilience", "printFields": PRINT_FIELDS},
        )

    def test_find_candidates_empty_response(self, nsf_adapter):
        with patch.object(nsf_adapter, "_make_request", return_value=load_response("nsf_empty_response.json")):
            assert nsf_adapter.find_candidates("coastal") == []

    def test_blank_keywords_skip_request(self, nsf_adapter):
        with patch.object(nsf_adapter, "_make_request") as mock_request:
            assert nsf_adapter.find_candidates("   ") == []

        mock_request.assert_not_called()

    @pytest.mark.parametrize(
        "error",
        [
            AdapterHTTPError("HTTP 500", status_code=500, url="u", body="boom"),
            AdapterHTTPError("HTTP 404", status_code=404, url="u"),
            AdapterTimeoutError("timed out", url="u"),
        ],
    )
    def test_failures_become_empty_results(self, nsf_adapter, error):
        with patch.object(nsf_adapter, "_make_request", side_effect=error):
            assert nsf_adapter.find_candidates("coastal") == []

    def test_malformed_payload_raises(self, nsf_adapter):
        with patch.object(nsf_adapter, "_make_request", return_value="invalid"):
            with pytest.raises(AdapterResponseError):
                nsf_adapter.find_candidates("coastal")

    def test_award_field_not_a_list_raises(self, nsf_adapter):
        with patch.object(nsf_adapter, "_make_request", return_value={"response": {"award": "x"}}):
            with pytest.raises(AdapterResponseError):
                nsf_adapter.find_candidates("coastal")

    def test_malformed_award_is_skipped(self, nsf_adapter):
        payload = {"response": {"award": ["not-an-object", {"id": "1", "title": "T", "piLastName": "Doe"}]}}
        with patch.object(nsf_adapter, "_make_request", return_value=payload):
            candidates = nsf_adapter.find_candidates("coastal")

        assert [c.id for c in candidates] == ["1"]

    def test_truncates_to_max_candidates(self):
        adapter = NSFAwardsAdapter(max_candidates=2)
        with patch.object(adapter, "_make_request", return_value=load_response("nsf_awards_response.json")):
            assert len(adapter.find_candidates("coastal")) == 2

    def test_unlimited_candidates(self):
        adapter = NSFAwardsAdapter(max_candidates=0)
        with patch.object(adapter, "_make_request", return_value=load_response("nsf_awards_response.json")):
            assert len(adapter.find_candidates("coastal")) == 3


# ============================================================================
# DMPHub Adapter Tests
# ============================================================================


class TestDMPHubAdapter:
    """Tests for DMPHubAdapter plans, registration and authentication."""

    def test_fetch_plans(self, dmphub_adapter):
        with patch.object(dmphub_adapter, "_make_request", return_value=load_response("dmphub_plans_response.json")):
            plans = dmphub_adapter.fetch_plans()

        assert len(plans) == 2
        assert plans[0].doi == "10.80030/yxcw-kh07"
        assert plans[0].authors == "Jane Doe|Example University, John Roe|State College"
        assert plans[1].authors is None

    def test_fetch_plans_accepts_bare_list(self, dmphub_adapter):
        payload = [{"uri": "http://localhost:3003/api/v1/data_management_plans/10.80030/a", "title": "T"}]
        with patch.object(dmphub_adapter, "_make_request", return_value=payload):
            plans = dmphub_adapter.fetch_plans()

        assert [p.doi for p in plans] == ["10.80030/a"]

    def test_fetch_plans_empty_body(self, dmphub_adapter):
        with patch.object(dmphub_adapter, "_make_request", return_value=None):
            assert dmphub_adapter.fetch_plans() == []

    def test_fetch_plans_malformed_payload(self, dmphub_adapter):
        with patch.object(dmphub_adapter, "_make_request", return_value={"items": "nope"}):
            with pytest.raises(AdapterResponseError):
                dmphub_adapter.fetch_plans()

    def test_fetch_plans_propagates_http_errors(self, dmphub_adapter):
        error = AdapterHTTPError("HTTP 500", status_code=500, url="u")
        with patch.object(dmphub_adapter, "_make_request", side_effect=error):
            with pytest.raises(AdapterHTTPError):
                dmphub_adapter.fetch_plans()

    def test_unauthenticated_requests_send_no_authorization(self, dmphub_adapter):
        with patch.object(dmphub_adapter, "_make_request", return_value=[]) as mock_request:
            dmphub_adapter.fetch_plans()

        assert mock_request.call_args.kwargs["headers"] == {}
        assert not dmphub_adapter.uses_authentication

    def test_register_award_posts_payload(self, dmphub_adapter, plan, match):
        with patch.object(dmphub_adapter, "_make_request", return_value={"status": "ok"}) as mock_request:
            assert dmphub_adapter.register_award(plan, match) is True

        args, kwargs = mock_request.call_args
        assert args[0] == "http://localhost:3003/api/v1/awards"
        assert kwargs["method"] == "POST"
        assert kwargs["json_data"] == {
            "dmp": plan.uri,
            "award": {
                "title": "Coastal Resilience",
                "award_id": "https://www.nsf.gov/awardsearch/showAward?AWD_ID=123",
                "principal_investigators": [{"name": "Jane Doe", "organization": "MIT"}],
            },
        }

    def test_register_award_accepts_non_json_acknowledgement(self, dmphub_adapter, plan, match):
        with patch.object(dmphub_adapter, "_make_request", side_effect=AdapterResponseError("not json")):
            assert dmphub_adapter.register_award(plan, match) is True

    @pytest.mark.parametrize(
        "error",
        [
            AdapterHTTPError("HTTP 422", status_code=422, url="u"),
            AdapterTimeoutError("timed out", url="u"),
        ],
    )
    def test_register_award_failure_returns_false(self, dmphub_adapter, plan, match, error):
        with patch.object(dmphub_adapter, "_make_request", side_effect=error):
            assert dmphub_adapter.register_award(plan, match) is False

    def test_token_fetched_once_and_sent_as_bearer(self, authenticated_adapter):
        responses = [{"access_token": "tok-1", "token_type": "Bearer"}, [], []]
        with patch.object(authenticated_adapter, "_make_request", side_effect=responses) as mock_request:
            authenticated_adapter.fetch_plans()
            authenticated_adapter.fetch_plans()

        assert mock_request.call_count == 3
        token_call = mock_request.call_args_list[0]
        assert token_call.args[0] == "http://localhost:3003/oauth/token"
        assert token_call.kwargs["data"]["grant_type"] == "client_credentials"
        assert token_call.kwargs["data"]["client_id"] == "client-id"
        for call in mock_request.call_args_list[1:]:
            assert call.kwargs["headers"] == {"Authorization": "Bearer tok-1"}

    def test_token_request_failure_raises_authentication_error(self, authenticated_adapter):
        error = AdapterHTTPError("HTTP 401", status_code=401, url="u")
        with patch.object(authenticated_adapter, "_make_request", side_effect=error):
            with pytest.raises(AdapterAuthenticationError):
                authenticated_adapter.fetch_plans()

    def test_token_response_without_token_raises(self, authenticated_adapter):
        with patch.object(authenticated_adapter, "_make_request", return_value={"error": "invalid_client"}):
            with pytest.raises(AdapterAuthenticationError):
                authenticated_adapter.fetch_plans()

    def test_register_award_authentication_failure_returns_false(self, authenticated_adapter, plan, match):
        error = AdapterHTTPError("HTTP 401", status_code=401, url="u")
        with patch.object(authenticated_adapter, "_make_request", side_effect=error):
            assert authenticated_adapter.register_award(plan, match) is False

    def test_register_award_with_non_json_token_response_returns_false(
        self, authenticated_adapter, plan, match
    ):
        error = AdapterResponseError("token body was not JSON")
        with patch.object(authenticated_adapter, "_make_request", side_effect=error) as mock_request:
            assert authenticated_adapter.register_award(plan, match) is False

        assert mock_request.call_count == 1
        assert mock_request.call_args.args[0] == "http://localhost:3003/oauth/token"

    def test_non_json_token_response_raises_authentication_error(self, authenticated_adapter):
        error = AdapterResponseError("token body was not JSON")
        with patch.object(authenticated_adapter, "_make_request", side_effect=error):
            with pytest.raises(AdapterAuthenticationError):
                authenticated_adapter.fetch_plans()

    def test_expired_token_is_renewed_once(self, authenticated_adapter):
        responses = [
            {"access_token": "tok-1"},
            AdapterHTTPError("HTTP 401", status_code=401, url="u"),
            {"access_token": "tok-2"},
            {"items": [{"uri": "http://localhost:3003/api/v1/data_management_plans/10.80030/aaaa"}]},
        ]
        with patch.object(authenticated_adapter, "_make_request", side_effect=responses) as mock_request:
            plans = authenticated_adapter.fetch_plans()

        assert [p.doi for p in plans] == ["10.80030/aaaa"]
        assert mock_request.call_count == 4
        assert mock_request.call_args_list[2].args[0] == "http://localhost:3003/oauth/token"
        assert mock_request.call_args.kwargs["headers"] == {"Authorization": "Bearer tok-2"}
        assert authenticated_adapter._access_token == "tok-2"

    def test_second_401_is_not_retried_again(self, authenticated_adapter, plan, match):
        rejected = AdapterHTTPError("HTTP 401", status_code=401, url="u")
        responses = [{"access_token": "tok-1"}, rejected, {"access_token": "tok-2"}, rejected]
        with patch.object(authenticated_adapter, "_make_request", side_effect=responses) as mock_request:
            assert authenticated_adapter.register_award(plan, match) is False

        assert mock_request.call_count == 4

    def test_401_without_credentials_is_not_retried(self, dmphub_adapter):
        error = AdapterHTTPError("HTTP 401", status_code=401, url="u")
        with patch.object(dmphub_adapter, "_make_request", side_effect=error) as mock_request:
            with pytest.raises(AdapterHTTPError):
                dmphub_adapter.fetch_plans()

        assert mock_request.call_count == 1


# ============================================================================
# Factory Tests
# ============================================================================


class TestAdapterFactory:
    """Tests for get_awards_adapter and get_dmphub_adapter."""

    def test_get_awards_adapter(self, advanced_config):
        adapter = get_awards_adapter(NSFConfig(), advanced_config)

        assert isinstance(adapter, NSFAwardsAdapter)
        assert adapter.awards_url == "https://api.nsf.gov/services/v1/awards.json"
        assert adapter.max_candidates == 500
        assert adapter.timeout == 30

    def test_get_dmphub_adapter_without_credentials(self, dmphub_config, advanced_config):
        adapter = get_dmphub_adapter(dmphub_config, advanced_config, EnvironmentConfig())

        assert isinstance(adapter, DMPHubAdapter)
        assert adapter.plans_url == "http://localhost:3003/api/v1/data_management_plans"
        assert adapter.awards_url == "http://localhost:3003/api/v1/awards"
        assert not adapter.uses_authentication

    def test_get_dmphub_adapter_with_credentials(self, dmphub_config, advanced_config):
        env_config = EnvironmentConfig(dmphub_client_id="id", dmphub_client_secret="secret")

        adapter = get_dmphub_adapter(dmphub_config, advanced_config, env_config)

        assert adapter.uses_authentication
        assert adapter.token_url == "http://localhost:3003/oauth/token"

    def test_factory_wraps_construction_errors(self, dmphub_config):
        advanced = AdvancedConfig()
        with patch("award_scanner.adapters.factory.DMPHubAdapter", side_effect=RuntimeError("boom")):
            with pytest.raises(AdapterConfigurationError):
                get_dmphub_adapter(dmphub_config, advanced)

"""
Tests for the Bugzilla source, against an httpx.MockTransport.

Tests verify:
- The request carries the API key header and the rendered query
- Response bodies are parsed into Bug records
- Every failure mode maps to a categorised FetchError
"""

import httpx
import pytest

from bugsheet.bugs.models import AdvancedQuery, BugQuery
from bugsheet.core.errors import ErrorCategory, FetchError
from bugsheet.core.secrets import SecretValue
from bugsheet.sources import BugSource
from bugsheet.sources.bugzilla import API_KEY_HEADER, BugzillaSource

ENDPOINT = "https://bugzilla.example.com"

QUERY = BugQuery(
    product=("OpenShift Container Platform",),
    status=("NEW", "ASSIGNED"),
    include_fields=("id", "component"),
    advanced=(AdvancedQuery("component", "equals", "Documentation", negate=True),),
)


def _source(handler) -> BugzillaSource:
    return BugzillaSource(SecretValue("s3cret"), ENDPOINT + "/", transport=httpx.MockTransport(handler))


class TestBugzillaSearch:
    """Test successful searches."""

    def test_request_shape(self):
        seen: list[httpx.Request] = []

        def handler(request: httpx.Request) -> httpx.Response:
            seen.append(request)
            return httpx.Response(200, json={"bugs": []})

        with _source(handler) as source:
            assert source.search(QUERY) == []

        (request,) = seen
        assert request.method == "GET"
        assert request.url.path == "/rest/bug"
        assert request.headers[API_KEY_HEADER] == "s3cret"
        assert request.url.params.get_list("status") == ["NEW", "ASSIGNED"]
        assert request.url.params["include_fields"] == "id,component"
        assert request.url.params["v1"] == "Documentation"
        assert request.url.params["n1"] == "1"

    def test_parses_bugs(self):
        body = {
            "bugs": [
                {"id": 1, "component": ["Networking"], "severity": "high", "target_release": ["4.5.0"]},
                {"id": 2, "component": ["Storage"], "keywords": ["UpcomingSprint"]},
            ]
        }
        source = _source(lambda request: httpx.Response(200, json=body))

        bugs = source.search(QUERY)

        assert [b.id for b in bugs] == [1, 2]
        assert bugs[0].primary_target_release == "4.5.0"
        assert bugs[1].has_keyword("UpcomingSprint")

    def test_satisfies_protocol(self):
        assert isinstance(_source(lambda r: httpx.Response(200, json={})), BugSource)

    def test_search_url_strips_trailing_slash(self):
        assert _source(lambda r: httpx.Response(200)).search_url == ENDPOINT + "/rest/bug"


class TestBugzillaErrors:
    """Test failure mapping."""

    def test_transport_failure(self):
        def handler(request: httpx.Request) -> httpx.Response:
            raise httpx.ConnectError("connection refused", request=request)

        with pytest.raises(FetchError) as exc_info:
            _source(handler).search(QUERY)

        error = exc_info.value
        assert error.category == ErrorCategory.NETWORK
        assert error.context.source_name == "bugzilla"
        assert error.context.url == ENDPOINT + "/rest/bug"
        assert isinstance(error.cause, httpx.ConnectError)

    @pytest.mark.parametrize("status", [401, 403])
    def test_auth_failure(self, status):
        with pytest.raises(FetchError) as exc_info:
            _source(lambda r: httpx.Response(status)).search(QUERY)

        assert exc_info.value.category == ErrorCategory.AUTH
        assert exc_info.value.context.http_status == status

    def test_server_error_uses_api_message(self):
        source = _source(lambda r: httpx.Response(400, json={"error": True, "message": "bad field"}))

        with pytest.raises(FetchError, match="bad field") as exc_info:
            source.search(QUERY)

        assert exc_info.value.category == ErrorCategory.SOURCE
        assert exc_info.value.context.http_status == 400

    def test_error_flag_in_ok_response(self):
        source = _source(lambda r: httpx.Response(200, json={"error": True, "message": "query too broad"}))
        with pytest.raises(FetchError, match="query too broad"):
            source.search(QUERY)

    def test_non_json_body(self):
        source = _source(lambda r: httpx.Response(200, text="<html>maintenance</html>"))
        with pytest.raises(FetchError) as exc_info:
            source.search(QUERY)
        assert exc_info.value.category == ErrorCategory.PARSE

    def test_non_object_body(self):
        with pytest.raises(FetchError) as exc_info:
            _source(lambda r: httpx.Response(200, json=[1, 2])).search(QUERY)
        assert exc_info.value.category == ErrorCategory.PARSE

    def test_malformed_bug(self):
        source = _source(lambda r: httpx.Response(200, json={"bugs": [{"summary": "no id"}]}))
        with pytest.raises(FetchError) as exc_info:
            source.search(QUERY)
        assert exc_info.value.category == ErrorCategory.PARSE

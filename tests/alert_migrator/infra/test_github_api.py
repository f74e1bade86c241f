"""Tests for GithubApi against a fake HTTP session."""
import base64
import gzip
from datetime import datetime, timezone

import pytest

from alert_migrator.core.domain.exceptions import CommitNotFoundError, GithubApiError
from alert_migrator.core.domain.models import Location, SarifUpload
from alert_migrator.infra.github_api import (
    GithubApi,
    encode_sarif,
    parse_analysis,
    parse_code_scanning_alert,
    parse_secret_location,
    parse_timestamp,
)
from alert_migrator.infra.github_client import GithubClient

from fakes import FakeLogger, FakeSession, make_response


API = "https://api.github.com"
REPO = f"{API}/repos/acme/app"


def _api(routes, *, api_url=API, per_page=100):
    session = FakeSession(routes)
    client = GithubClient(api_url=api_url, token="t", logger=FakeLogger(), session=session)
    return GithubApi(client=client, per_page=per_page), session


ANALYSIS = {
    "id": 201,
    "ref": "refs/heads/main",
    "commit_sha": "d99612c3e1f2970085cfbaeadf8f010ef69bad83",
    "created_at": "2022-03-30T11:28:29Z",
    "category": ".github/workflows/codeql.yml:analyze",
    "tool": {"name": "CodeQL", "version": "2.4.0"},
}


CODE_ALERT = {
    "number": 4,
    "url": f"{REPO}/code-scanning/alerts/4",
    "state": "dismissed",
    "dismissed_reason": "false positive",
    "dismissed_comment": "validated upstream",
    "rule": {"id": "js/zipslip", "severity": "error"},
    "most_recent_instance": {
        "ref": "refs/heads/main",
        "location": {"path": "lib/browser/session.ts", "start_line": 917, "end_line": 917, "start_column": 7, "end_column": 18},
    },
}


def test_parse_timestamp_utc():
    assert parse_timestamp("2022-03-30T11:28:29Z") == datetime(2022, 3, 30, 11, 28, 29, tzinfo=timezone.utc)


def test_parse_analysis():
    parsed = parse_analysis(ANALYSIS)

    assert parsed.id == 201
    assert parsed.commit_sha == ANALYSIS["commit_sha"]
    assert parsed.ref == "refs/heads/main"
    assert parsed.tool_name == "CodeQL"
    assert parsed.created_at.year == 2022


def test_parse_code_scanning_alert_uses_rule_and_location():
    alert = parse_code_scanning_alert(CODE_ALERT)

    assert alert.number == 4
    assert alert.state == "dismissed"
    assert alert.resolution_reason == "false positive"
    assert alert.resolution_comment == "validated upstream"
    assert alert.fingerprint.natural_key == ("js/zipslip",)
    assert alert.fingerprint.locations == (
        Location(path="lib/browser/session.ts", start_line=917, end_line=917, start_column=7, end_column=18),
    )


def test_parse_secret_location_ignores_non_commit_types():
    assert parse_secret_location({"type": "issue_title", "details": {"issue_title_url": "https://x"}}) is None


def test_parse_secret_location_commit():
    location = parse_secret_location({
        "type": "commit",
        "details": {"path": "/example/secrets.txt", "start_line": 1, "end_line": 1, "start_column": 1, "end_column": 64, "blob_sha": "af5626b4"},
    })

    assert location == Location(path="/example/secrets.txt", start_line=1, end_line=1, start_column=1, end_column=64, blob_sha="af5626b4")


def test_encode_sarif_is_gzip_base64():
    encoded = encode_sarif('{"version": "2.1.0"}')

    assert gzip.decompress(base64.b64decode(encoded)).decode("utf-8") == '{"version": "2.1.0"}'


def test_get_default_branch():
    api, _ = _api({("GET", REPO): make_response(body={"default_branch": "trunk"})})

    assert api.get_default_branch("acme", "app") == "trunk"


def test_get_code_scanning_analyses_filters_by_ref():
    api, session = _api({("GET", f"{REPO}/code-scanning/analyses"): make_response(body=[ANALYSIS])}, per_page=50)

    [parsed] = list(api.get_code_scanning_analyses("acme", "app", "refs/heads/main"))

    assert parsed.id == 201
    assert session.sent[0]["params"] == {"per_page": 50, "ref": "refs/heads/main"}


def test_get_code_scanning_analyses_without_ref():
    api, session = _api({("GET", f"{REPO}/code-scanning/analyses"): make_response(body=[])})

    assert list(api.get_code_scanning_analyses("acme", "app")) == []
    assert session.sent[0]["params"] == {"per_page": 100}


def test_malformed_item_raises_github_api_error():
    api, _ = _api({("GET", f"{REPO}/code-scanning/analyses"): make_response(body=[{"id": 1}])})

    with pytest.raises(GithubApiError, match="Malformed response"):
        list(api.get_code_scanning_analyses("acme", "app"))


def test_get_sarif_report_requests_sarif_media_type():
    api, session = _api({("GET", f"{REPO}/code-scanning/analyses/201"): make_response(text='{"runs": []}')})

    assert api.get_sarif_report("acme", "app", 201) == '{"runs": []}'
    assert session.sent[0]["headers"] == {"Accept": "application/sarif+json"}


def test_upload_sarif_report_posts_encoded_payload():
    api, session = _api({("POST", f"{REPO}/code-scanning/sarifs"): make_response(202, body={"id": "47177e22"})})

    api.upload_sarif_report("acme", "app", SarifUpload(sarif="SARIF", ref="refs/heads/main", commit_sha="abc"))

    body = session.sent[0]["json"]
    assert body["commit_sha"] == "abc"
    assert body["ref"] == "refs/heads/main"
    assert gzip.decompress(base64.b64decode(body["sarif"])) == b"SARIF"


def test_upload_sarif_report_404_is_commit_not_found():
    api, _ = _api({("POST", f"{REPO}/code-scanning/sarifs"): make_response(404, body={"message": "commit not found"})})

    with pytest.raises(CommitNotFoundError) as exc_info:
        api.upload_sarif_report("acme", "app", SarifUpload(sarif="S", ref="refs/heads/main", commit_sha="abc"))

    assert exc_info.value.status_code == 404


def test_upload_sarif_report_other_errors_stay_generic():
    api, _ = _api({("POST", f"{REPO}/code-scanning/sarifs"): make_response(403, body={"message": "forbidden"})})

    with pytest.raises(GithubApiError) as exc_info:
        api.upload_sarif_report("acme", "app", SarifUpload(sarif="S", ref="refs/heads/main", commit_sha="abc"))

    assert not isinstance(exc_info.value, CommitNotFoundError)


def test_only_sarif_upload_maps_404_to_commit_not_found():
    api, _ = _api({("GET", REPO): make_response(404, body={"message": "Not Found"})})

    with pytest.raises(GithubApiError) as exc_info:
        api.get_default_branch("acme", "app")

    assert not isinstance(exc_info.value, CommitNotFoundError)


def test_update_code_scanning_alert_dismissed_body():
    api, session = _api({("PATCH", f"{REPO}/code-scanning/alerts/4"): make_response(body={})})

    api.update_code_scanning_alert("acme", "app", 4, "dismissed", dismissed_reason="won't fix", dismissed_comment="legacy")

    assert session.sent[0]["json"] == {"state": "dismissed", "dismissed_reason": "won't fix", "dismissed_comment": "legacy"}


def test_update_code_scanning_alert_reopen_body():
    api, session = _api({("PATCH", f"{REPO}/code-scanning/alerts/4"): make_response(body={})})

    api.update_code_scanning_alert("acme", "app", 4, "open", dismissed_reason="won't fix")

    assert session.sent[0]["json"] == {"state": "open"}


def test_get_secret_scanning_alerts_fetches_locations_per_alert():
    api, session = _api({
        ("GET", f"{REPO}/secret-scanning/alerts"): make_response(body=[
            {
                "number": 2,
                "url": f"{REPO}/secret-scanning/alerts/2",
                "state": "resolved",
                "resolution": "revoked",
                "resolution_comment": "rotated",
                "secret_type": "adafruit_io_key",
                "secret": "aio_XXXX",
            },
        ]),
        ("GET", f"{REPO}/secret-scanning/alerts/2/locations"): make_response(body=[
            {"type": "commit", "details": {"path": "a.txt", "start_line": 1, "end_line": 1, "start_column": 1, "end_column": 9, "blob_sha": "b1"}},
            {"type": "pull_request_body", "details": {"pull_request_body_url": "https://x"}},
        ]),
    })

    [alert] = list(api.get_secret_scanning_alerts("acme", "app"))

    assert alert.state == "resolved"
    assert alert.resolution_reason == "revoked"
    assert alert.resolution_comment == "rotated"
    assert alert.fingerprint.natural_key == ("adafruit_io_key", "aio_XXXX")
    assert [loc.path for loc in alert.fingerprint.locations] == ["a.txt"]
    assert [r["url"] for r in session.sent] == [
        f"{REPO}/secret-scanning/alerts",
        f"{REPO}/secret-scanning/alerts/2/locations",
    ]


def test_update_secret_scanning_alert_resolved_body():
    api, session = _api({("PATCH", f"{REPO}/secret-scanning/alerts/2"): make_response(body={})})

    api.update_secret_scanning_alert("acme", "app", 2, "resolved", resolution="false_positive", resolution_comment="test key")

    assert session.sent[0]["json"] == {"state": "resolved", "resolution": "false_positive", "resolution_comment": "test key"}


def test_update_secret_scanning_alert_reopen_body():
    api, session = _api({("PATCH", f"{REPO}/secret-scanning/alerts/2"): make_response(body={})})

    api.update_secret_scanning_alert("acme", "app", 2, "open")

    assert session.sent[0]["json"] == {"state": "open"}


def test_update_secret_scanning_alert_reopen_drops_old_comment():
    api, session = _api({("PATCH", f"{REPO}/secret-scanning/alerts/2"): make_response(body={})})

    api.update_secret_scanning_alert("acme", "app", 2, "open", resolution="revoked", resolution_comment="old note")

    assert session.sent[0]["json"] == {"state": "open"}


def test_get_repositories_uses_enterprise_graphql_endpoint():
    graphql = "https://ghes.example.com/api/graphql"
    api, session = _api(
        {
            ("POST", graphql): [
                make_response(body={"data": {"organization": {"repositories": {
                    "pageInfo": {"hasNextPage": True, "endCursor": "Y3Vyc29y"},
                    "nodes": [{"name": "alpha"}],
                }}}}),
                make_response(body={"data": {"organization": {"repositories": {
                    "pageInfo": {"hasNextPage": False, "endCursor": None},
                    "nodes": [{"name": "beta"}],
                }}}}),
            ],
        },
        api_url="https://ghes.example.com/api/v3",
    )

    assert list(api.get_repositories("acme")) == ["alpha", "beta"]
    assert session.sent[1]["json"]["variables"]["after"] == "Y3Vyc29y"
    assert session.sent[1]["json"]["variables"]["login"] == "acme"

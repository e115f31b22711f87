"""HTTP tests for the matching API."""

from __future__ import annotations

import csv
import io

import pytest
from fastapi.testclient import TestClient

from qfmatch.api.app import create_app
from qfmatch.core.config import AppSettings
from tests.fakes import FIXTURES_DIR, MemoryDataProvider, fixture_provider, load_fixture

MATCHES_URL = "/chains/1/rounds/0x1234/matches"

EXPECTED_RESULTS = [
    {"applicationId": "application-id-1", "projectId": "project-id-1",
     "totalReceived": 15, "sumOfSqrt": 7, "matched": 13.6},
    {"applicationId": "application-id-2", "projectId": "project-id-2",
     "totalReceived": 10, "sumOfSqrt": 8, "matched": 21.6},
    {"applicationId": "application-id-3", "projectId": "project-id-3",
     "totalReceived": 34, "sumOfSqrt": 14, "matched": 64.8},
]

EXPECTED_CSV = "\n".join([
    "matched,contributionsCount,sumOfSqrt,totalReceived,projectId,applicationId,payoutAddress,projectName",
    "13.6,5,7,15,project-id-1,application-id-1,payout-address-1,Project 1",
    "21.6,4,8,10,project-id-2,application-id-2,payout-address-2,Project 2",
    "64.8,3,14,34,project-id-3,application-id-3,payout-address-3,Project 3",
])


def _client(provider=None, **settings) -> TestClient:
    app = create_app(
        AppSettings(storage_dir=str(FIXTURES_DIR), **settings),
        data_provider=provider or fixture_provider(),
    )
    return TestClient(app, raise_server_exceptions=False)


@pytest.fixture
def client():
    return _client()


def _summary(body: list[dict]) -> list[dict]:
    keys = ("applicationId", "projectId", "totalReceived", "sumOfSqrt", "matched")
    return [{k: row[k] for k in keys} for row in body]


class TestGetMatches:
    def test_renders_calculations(self, client):
        resp = client.get(MATCHES_URL)
        assert resp.status_code == 200
        assert _summary(resp.json()) == EXPECTED_RESULTS

    def test_includes_metadata(self, client):
        first = client.get(MATCHES_URL).json()[0]
        assert first["projectName"] == "Project 1"
        assert first["payoutAddress"] == "payout-address-1"
        assert first["contributionsCount"] == 5

    def test_integral_values_render_without_fraction(self, client):
        assert '"totalReceived":15,' in client.get(MATCHES_URL).text

    def test_identical_requests_give_identical_bodies(self, client):
        assert client.get(MATCHES_URL).content == client.get(MATCHES_URL).content

    def test_enable_passport_flag(self, client):
        body = client.get(MATCHES_URL, params={"enablePassport": "TRUE"}).json()
        assert [round(r["matched"], 6) for r in body] == [30, 10, 60]

    def test_non_true_passport_flag_is_off(self, client):
        body = client.get(MATCHES_URL, params={"enablePassport": "yes"}).json()
        assert _summary(body) == EXPECTED_RESULTS

    def test_minimum_amount_param(self, client):
        body = client.get(MATCHES_URL, params={"minimumAmount": "0"}).json()
        assert body[0]["totalReceived"] == 15.5

    def test_saturation_can_be_respected(self):
        provider = fixture_provider(rounds=[{"id": "0x1234", "matchAmountUSD": 1000, "minimumAmount": 1}])
        body = _client(provider).get(MATCHES_URL, params={"ignoreSaturation": "false"}).json()
        assert [r["matched"] for r in body] == [34, 54, 162]

    def test_saturation_ignored_by_default(self):
        provider = fixture_provider(rounds=[{"id": "0x1234", "matchAmountUSD": 1000, "minimumAmount": 1}])
        body = _client(provider).get(MATCHES_URL).json()
        assert [r["matched"] for r in body] == [136, 216, 648]

    def test_non_numeric_minimum_amount_is_bad_request(self):
        provider = fixture_provider()
        resp = _client(provider).get(MATCHES_URL, params={"minimumAmount": "abc"})
        assert resp.status_code == 400
        assert resp.json() == {"error": "invalid value for minimumAmount"}
        assert provider.calls == []

    def test_invalid_query_values_are_all_named(self, client):
        resp = client.get(MATCHES_URL, params={"minimumAmount": "abc", "passportThreshold": "x"})
        assert resp.status_code == 400
        assert resp.json() == {"error": "invalid value for minimumAmount, passportThreshold"}


class TestResourcesNotFound:
    def test_round_not_present(self):
        resp = _client(fixture_provider(rounds=[])).get(MATCHES_URL)
        assert resp.status_code == 404
        assert resp.json() == {"error": "round not found"}

    def test_round_without_match_amount(self):
        provider = MemoryDataProvider({
            "1/rounds/0x5678/votes.json": [],
            "1/rounds/0x5678/applications.json": [],
            "1/rounds.json": load_fixture("1/rounds.json"),
            "passport_scores.json": [],
        })
        resp = _client(provider).get("/chains/1/rounds/0x5678/matches")
        assert resp.status_code == 404
        assert resp.json() == {"error": "round match amount not found"}

    @pytest.mark.parametrize("name", ["votes", "applications", "rounds", "passport_scores"])
    def test_missing_file(self, name):
        resp = _client(fixture_provider(**{name: None})).get(MATCHES_URL)
        assert resp.status_code == 404
        assert resp.json()["error"].startswith("cannot find")

    def test_unexpected_error_is_opaque(self):
        class BrokenProvider(MemoryDataProvider):
            def load(self, description, path):
                raise RuntimeError("disk on fire at /secret/path")

        resp = _client(BrokenProvider()).get(MATCHES_URL)
        assert resp.status_code == 500
        assert resp.json() == {"error": "something went wrong"}


class TestMatchesCsv:
    def test_renders_csv(self, client):
        resp = client.get(f"{MATCHES_URL}.csv")
        assert resp.status_code == 200
        assert resp.headers["content-type"].startswith("text/csv")
        assert resp.text == EXPECTED_CSV

    def test_csv_round_trips_json_values(self, client):
        rows = list(csv.DictReader(io.StringIO(client.get(f"{MATCHES_URL}.csv").text)))
        body = client.get(MATCHES_URL).json()
        for row, record in zip(rows, body, strict=True):
            for column in ("matched", "sumOfSqrt", "totalReceived", "contributionsCount"):
                assert float(row[column]) == record[column]
            assert row["applicationId"] == record["applicationId"]

    def test_csv_not_found(self):
        resp = _client(fixture_provider(rounds=[])).get(f"{MATCHES_URL}.csv")
        assert resp.status_code == 404


class TestPostMatches:
    def _post(self, client, content: bytes):
        return client.post(MATCHES_URL, files={"overrides": ("overrides.csv", content, "text/csv")})

    def test_applies_overrides(self, client):
        resp = self._post(client, b"transactionId,coefficient\nvote-8,0\n")
        assert resp.status_code == 201
        first = resp.json()[0]
        assert first["totalReceived"] == 6
        assert first["sumOfSqrt"] == 4

    def test_include_overrides_match_read_calculation(self, client):
        resp = self._post(client, b"transactionId,coefficient\nvote-1,1\n")
        assert resp.status_code == 201
        assert resp.json() == client.get(MATCHES_URL).json()

    def test_requires_overrides_file(self, client):
        resp = client.post(MATCHES_URL)
        assert resp.status_code == 400
        assert resp.json() == {"error": "overrides param required"}

    def test_missing_coefficient_column_never_calculates(self):
        provider = fixture_provider()
        resp = self._post(_client(provider), b"transactionId,weight\nvote-1,0\n")
        assert resp.status_code == 400
        assert resp.json() == {"error": "cannot find column coefficient in the overrides file"}
        assert provider.calls == []

    def test_non_utf8_overrides_is_bad_request(self):
        provider = fixture_provider()
        resp = self._post(_client(provider), b"\xff\xfe\x00bad")
        assert resp.status_code == 400
        assert resp.json() == {"error": "overrides file is not valid UTF-8"}
        assert provider.calls == []


class TestVoteCoefficients:
    def test_exports_votes_with_coefficients(self, client):
        resp = client.get("/data/1/rounds/0x1234/vote_coefficients.csv")
        assert resp.status_code == 200
        rows = list(csv.DictReader(io.StringIO(resp.text)))
        assert len(rows) == 20
        by_id = {r["id"]: r for r in rows}
        assert by_id["vote-1"]["coefficient"] == "1"
        assert by_id["vote-1"]["voter"] == "0xaaaa000000000000000000000000000000000001"
        assert by_id["vote-3"]["coefficient"] == "0"
        assert by_id["vote-3"]["rawScore"] == "12.4"
        assert by_id["vote-7"]["coefficient"] == "0"

    def test_missing_votes_is_not_found(self):
        resp = _client(fixture_provider(votes=None)).get("/data/1/rounds/0x1234/vote_coefficients.csv")
        assert resp.status_code == 404


class TestDataFiles:
    def test_root_redirects_to_data(self, client):
        resp = client.get("/", follow_redirects=False)
        assert resp.status_code == 307
        assert resp.headers["location"] == "/data"

    def test_serves_raw_files(self, client):
        resp = client.get("/data/1/rounds.json")
        assert resp.status_code == 200
        assert resp.json()[0]["id"] == "0x1234"


class TestHealth:
    def test_health(self, client):
        assert client.get("/health").json() == {"status": "healthy"}

    def test_ready_reports_storage(self, client):
        assert client.get("/ready").json() == {"status": "ready", "storage": "filesystem"}

"""Tests for AMT profile commands."""

from __future__ import annotations

import pytest

from tests.helpers import FakeApi, run_cli

DOMAINS = "/v1/projects/demo/dm/amt/admin/domains"

DOMAIN = {
    "profileName": "corp",
    "domainSuffix": "corp.example.com",
    "provisioningCertStorageFormat": "raw",
    "expirationDate": "2030-01-01T00:00:00Z",
    "tenantId": "t-1",
}


@pytest.mark.parametrize("payload", [[DOMAIN], {"data": [DOMAIN], "totalCount": 1}])
def test_list_amt_profiles(api: FakeApi, payload: object) -> None:
    api.add("GET", DOMAINS, json=payload)

    result = run_cli(api, ["list", "amtprofiles"])

    assert result.exit_code == 0, result.output
    assert "AMT Profile Name" in result.stdout.splitlines()[0]
    assert "corp.example.com" in result.stdout


def test_get_amt_profile_is_detailed(api: FakeApi) -> None:
    api.add("GET", f"{DOMAINS}/corp", json=DOMAIN)

    result = run_cli(api, ["get", "amtprofile", "corp"])

    assert result.exit_code == 0, result.output
    assert "Domain Suffix: corp.example.com" in result.stdout
    assert "Tenant ID: t-1" in result.stdout


def test_delete_amt_profile(api: FakeApi) -> None:
    api.add("DELETE", f"{DOMAINS}/corp", status=204)

    result = run_cli(api, ["delete", "amtprofile", "corp"])

    assert result.exit_code == 0, result.output
    assert "AMT profile 'corp' deleted successfully" in result.stdout


def test_delete_missing_amt_profile(api: FakeApi) -> None:
    result = run_cli(api, ["delete", "amtprofile", "ghost"])

    assert result.exit_code == 1
    assert "error deleting AMT profile ghost" in result.stderr

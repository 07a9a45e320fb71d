"""Tests for the feature access API."""

import pytest


def test_root(api_client):
    response = api_client.get("/")

    assert response.status_code == 200


def test_free_tier_by_default(api_client):
    response = api_client.get("/features")

    assert response.status_code == 200
    data = response.json()
    assert data["tier"] == "free"
    assert data["features"]["basic-profile"] is True
    assert data["features"]["interview-practice"] is False


def test_paid_tier_unlocks_everything(api_client):
    response = api_client.get("/features", headers={"X-Subscription-Tier": "paid"})

    data = response.json()
    assert data["tier"] == "paid"
    assert all(data["features"].values())
    assert len(data["features"]) == 7


def test_tier_header_is_case_insensitive(api_client):
    response = api_client.get("/features", headers={"X-Subscription-Tier": "PAID"})

    assert response.json()["tier"] == "paid"


def test_unknown_tier(api_client):
    response = api_client.get("/features", headers={"X-Subscription-Tier": "gold"})

    assert response.status_code == 400
    assert response.json()["detail"]["error"]["code"] == "INVALID_TIER"


def test_denied_feature_has_upgrade_message(api_client):
    response = api_client.get("/features/interview-practice")

    assert response.status_code == 200
    data = response.json()
    assert data["allowed"] is False
    assert data["upgrade_message"]


def test_allowed_feature(api_client):
    response = api_client.get(
        "/features/interview-practice", headers={"X-Subscription-Tier": "paid"})

    data = response.json()
    assert data["allowed"] is True
    assert data["upgrade_message"] == ""


@pytest.mark.parametrize("feature", ["basic-profile", "limited-job-view"])
def test_free_features(api_client, feature):
    response = api_client.get(f"/features/{feature}")

    assert response.json()["allowed"] is True


def test_unknown_feature(api_client):
    response = api_client.get("/features/teleportation")

    assert response.status_code == 404
    assert response.json()["detail"]["error"]["code"] == "NOT_FOUND"

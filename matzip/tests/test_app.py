from __future__ import annotations

import pytest
from fastapi.testclient import TestClient

from matzip.app import app, get_pipeline
from matzip.recommendations.models import EnrichedRestaurant, PlaceSearchResult

client = TestClient(app)


class StubPipeline:
    def __init__(self):
        self.locations = []
        self.compared = []
        self.reviews = []
        self.estimates = []

    def recommend_near(self, location):
        self.locations.append(location)
        if not location.address.strip():
            return []
        return [
            EnrichedRestaurant(
                id=1,
                name="역삼 순대국",
                address="서울 강남구 역삼동 1",
                category="음식점>한식>순대,순댓국",
                cuisine="한식",
                area="서울 강남구",
                distance=850,
                duration=3,
                display_distance="850m (차량 3분, 도보 약 11분)",
                representative_menus=["순대국", "수육"],
                rating=4.5,
                review_count=1234,
            )
        ]

    def compare(self, restaurants, preference=None):
        self.compared.append((restaurants, preference))
        return "| 항목 | A | B |"

    def review(self, name, location=""):
        self.reviews.append((name, location))
        return f"{name} 리뷰"

    def estimate_near(self, lat, lng):
        self.estimates.append((lat, lng))
        return [EnrichedRestaurant(id=1, name="추정 식당", position_is_estimated=True)]

    def search_places(self, query):
        return [PlaceSearchResult(title="강남역", road_address="서울 강남구 강남대로 396", lat=37.49, lng=127.02)]


@pytest.fixture(autouse=True)
def stub_pipeline():
    stub = StubPipeline()
    app.dependency_overrides[get_pipeline] = lambda: stub
    yield stub
    app.dependency_overrides.clear()


# ── Health ───────────────────────────────────────────────────────────────


def test_health():
    resp = client.get("/health")
    assert resp.status_code == 200
    assert resp.json() == {"status": "ok"}


# ── Search ───────────────────────────────────────────────────────────────


def test_search_nearby_serializes_camel_case(stub_pipeline):
    resp = client.post(
        "/restaurants/search-nearby",
        json={"address": "서울 강남구 역삼동", "lat": 37.5, "lng": 127.03},
    )
    assert resp.status_code == 200
    body = resp.json()
    assert len(body) == 1
    item = body[0]
    assert item["displayDistance"] == "850m (차량 3분, 도보 약 11분)"
    assert item["representativeMenus"] == ["순대국", "수육"]
    assert item["reviewCount"] == 1234
    assert item["blogReviewCount"] is None
    assert item["positionIsEstimated"] is False
    assert "display_distance" not in item

    location = stub_pipeline.locations[0]
    assert location.lat == 37.5
    assert location.has_coordinates


def test_search_nearby_address_only():
    resp = client.post("/restaurants/search-nearby", json={"address": "서울 강남구 역삼동"})
    assert resp.status_code == 200
    assert len(resp.json()) == 1


def test_search_nearby_empty_address_returns_empty_list():
    resp = client.post("/restaurants/search-nearby", json={"address": ""})
    assert resp.status_code == 200
    assert resp.json() == []


def test_places_search():
    resp = client.get("/places/search", params={"query": "강남역"})
    assert resp.status_code == 200
    assert resp.json()[0]["roadAddress"] == "서울 강남구 강남대로 396"


def test_places_search_requires_query():
    resp = client.get("/places/search")
    assert resp.status_code == 422


# ── Compare / review ─────────────────────────────────────────────────────


def test_compare_accepts_camel_case_restaurants(stub_pipeline):
    resp = client.post(
        "/restaurants/compare",
        json={
            "restaurants": [
                {"name": "A", "displayDistance": "850m", "representativeMenus": ["냉면"]},
                {"name": "B", "rating": 4.1},
            ],
            "userPreference": "조용한 곳",
        },
    )
    assert resp.status_code == 200
    assert resp.json() == {"result": "| 항목 | A | B |"}

    restaurants, preference = stub_pipeline.compared[0]
    assert preference == "조용한 곳"
    assert restaurants[0].representative_menus == ["냉면"]
    assert restaurants[1].rating == 4.1


def test_compare_without_preference(stub_pipeline):
    resp = client.post("/restaurants/compare", json={"restaurants": [{"name": "A"}]})
    assert resp.status_code == 200
    assert stub_pipeline.compared[0][1] is None


def test_get_review(stub_pipeline):
    resp = client.post("/restaurants/get-review", json={"name": "역삼 순대국", "location": "역삼동"})
    assert resp.status_code == 200
    assert resp.json() == {"review": "역삼 순대국 리뷰"}
    assert stub_pipeline.reviews == [("역삼 순대국", "역삼동")]


# ── Estimated search ─────────────────────────────────────────────────────


def test_estimate_nearby(stub_pipeline):
    resp = client.post("/restaurants/estimate-nearby", json={"lat": 37.5, "lng": 127.0})
    assert resp.status_code == 200
    assert resp.json()[0]["positionIsEstimated"] is True
    assert stub_pipeline.estimates == [(37.5, 127.0)]


def test_estimate_nearby_requires_coordinates():
    resp = client.post("/restaurants/estimate-nearby", json={"lng": 127.0})
    assert resp.status_code == 422

import pytest
import requests

from art_curator.adapters.met import FEATURED_IDS
from art_curator.config import MET_BASE_URL
from art_curator.errors import SourceUnavailable
from fakes import FakeResponse, met_object

SEARCH_URL = f"{MET_BASE_URL}/search"


def object_url(object_id):
    return f"{MET_BASE_URL}/objects/{object_id}"


def route_objects(session, ids, without_image=()):
    for object_id in ids:
        session.route(object_url(object_id), met_object(object_id, image=object_id not in without_image))


class TestMetSearch:
    def test_fetches_only_the_page_window(self, met, session):
        ids = list(range(1, 101))
        session.route(SEARCH_URL, {"total": 100, "objectIDs": ids})
        route_objects(session, ids)

        page = met.search("sunflowers", page=2, page_size=10)

        assert [a.id for a in page.artworks] == [str(i) for i in range(11, 21)]
        detail_calls = [u for u in session.urls() if "/objects/" in u]
        assert sorted(detail_calls) == sorted(object_url(i) for i in range(11, 21))
        assert page.pagination.total == 100
        assert page.pagination.total_pages == 10
        assert page.pagination.has_more is True

    def test_page_shrinks_when_objects_lack_images(self, met, session):
        ids = list(range(1, 61))
        session.route(SEARCH_URL, {"total": 60, "objectIDs": ids})
        route_objects(session, ids, without_image={3, 7, 12})

        page = met.search("vase", page=1, page_size=20)

        # Delivered page is shorter; the total still counts the dropped ids
        assert len(page.artworks) == 17
        assert page.pagination.total == 60
        assert all(a.image_url for a in page.artworks)

    def test_preserves_upstream_order(self, met, session):
        ids = [50, 3, 41, 7]
        session.route(SEARCH_URL, {"total": 4, "objectIDs": ids})
        route_objects(session, ids)

        page = met.search("armor", page_size=4)

        assert [a.id for a in page.artworks] == ["50", "3", "41", "7"]

    def test_failed_detail_fetch_is_dropped_not_fatal(self, met, session):
        ids = [1, 2, 3]
        session.route(SEARCH_URL, {"total": 3, "objectIDs": ids})
        route_objects(session, [1, 3])
        session.route(object_url(2), FakeResponse({"message": "Not a valid object"}, status=404))

        page = met.search("bowl", page_size=3)

        assert [a.id for a in page.artworks] == ["1", "3"]

    def test_xray_exclusion_uses_query_and_rechecks_records(self, met, session):
        ids = [1, 2, 3]
        session.route(SEARCH_URL, {"total": 3, "objectIDs": ids})
        session.route(object_url(1), met_object(1))
        session.route(object_url(2), met_object(2, title="X-Ray of a Portrait"))
        session.route(object_url(3), met_object(3, objectName="Radiograph", objectDescription=""))

        page = met.search("portrait", page_size=3, exclude_xrays=True)

        query = session.calls[0][1]["q"]
        assert query.startswith("portrait ")
        assert "-xray" in query and "-radiograph" in query
        assert [a.id for a in page.artworks] == ["1"]

    def test_without_exclusion_query_is_untouched(self, met, session):
        session.route(SEARCH_URL, {"total": 1, "objectIDs": [2]})
        session.route(object_url(2), met_object(2, title="X-Ray of a Portrait"))

        page = met.search("portrait", page_size=5, exclude_xrays=False)

        assert session.calls[0][1]["q"] == "portrait"
        assert len(page.artworks) == 1

    def test_department_passed_upstream(self, met, session):
        session.route(SEARCH_URL, {"total": 0, "objectIDs": None})

        met.search("tea", department_or_classification="6")

        assert session.calls[0][1]["departmentId"] == "6"

    def test_no_matches_returns_empty_page(self, met, session):
        session.route(SEARCH_URL, {"total": 0, "objectIDs": None})

        page = met.search("zzzz")

        assert page.artworks == []
        assert page.pagination.total == 0
        assert page.pagination.has_more is False

    def test_page_past_the_end_is_empty(self, met, session):
        session.route(SEARCH_URL, {"total": 5, "objectIDs": [1, 2, 3, 4, 5]})

        page = met.search("cat", page=3, page_size=5)

        assert page.artworks == []
        assert page.pagination.has_more is False

    def test_search_endpoint_failure_raises_source_unavailable(self, met, session):
        session.route(SEARCH_URL, FakeResponse({}, status=503))

        with pytest.raises(SourceUnavailable) as exc_info:
            met.search("anything")

        assert exc_info.value.source == "metropolitan"
        assert "503" in exc_info.value.message

    def test_timeout_raises_source_unavailable(self, met, session, log_entries):
        session.route(SEARCH_URL, requests.Timeout("slow"))

        with pytest.raises(SourceUnavailable):
            met.search("anything")

        assert any(level == "ERROR" and "Timeout" in msg for level, msg in log_entries)

    def test_malformed_body_raises_source_unavailable(self, met, session):
        session.route(SEARCH_URL, FakeResponse(ValueError("not json")))

        with pytest.raises(SourceUnavailable):
            met.search("anything")

    def test_requests_carry_timeout(self, met, session):
        session.route(SEARCH_URL, {"total": 0, "objectIDs": []})

        met.search("anything")

        assert session.calls[0][2] == 5


class TestMetGetById:
    def test_returns_normalized_artwork(self, met, session):
        session.route(object_url(436535), met_object(436535, title="Wheat Field with Cypresses"))

        artwork = met.get_by_id(436535)

        assert artwork.id == "436535"
        assert artwork.source == "metropolitan"
        assert artwork.title == "Wheat Field with Cypresses"

    def test_missing_record_returns_none(self, met, session):
        session.route(object_url(1), FakeResponse({"message": "ObjectID not found"}, status=404))

        assert met.get_by_id(1) is None

    def test_record_without_image_returns_none(self, met, session):
        session.route(object_url(1), met_object(1, image=False))

        assert met.get_by_id(1) is None

    def test_network_failure_returns_none(self, met):
        assert met.get_by_id(99) is None


class TestMetFeatured:
    def test_returns_at_most_limit(self, met, session):
        route_objects(session, FEATURED_IDS)

        featured = met.get_featured(limit=4)

        assert [a.id for a in featured] == [str(i) for i in FEATURED_IDS[:4]]

    def test_degrades_to_empty_on_failure(self, met):
        assert met.get_featured(limit=5) == []

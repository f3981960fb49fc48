"""Tests for image sources."""

from unittest.mock import MagicMock, patch

import pytest
import requests

from config.settings import KNOWN_SOURCES, SearchConfig
from core.models import ImageRecord
from search.archive_source import InternetArchiveSource
from search.base import BaseSource, extract_year
from search.bing_source import BingSource
from search.flickr_source import FlickrSource
from search.google_source import GoogleSource
from search.loc_source import LibraryOfCongressSource
from search.maps_source import MAX_MAPS, HistoricalMapsSource
from search.nypl_source import NYPL_BASE, NyplSource
from search.redfin_source import RedfinSource
from search.registry import SOURCE_REGISTRY, build_sources
from search.unsplash_source import UnsplashSource
from search.wikimedia_source import WikimediaSource
from search.zillow_source import ZillowSource


def _response(json_data=None, text="", url="https://example.com/search"):
    resp = MagicMock()
    resp.json.return_value = json_data or {}
    resp.text = text
    resp.url = url
    return resp


class TestExtractYear:

    @pytest.mark.parametrize("text, expected", [
        ("ca. 1890", 1890),
        ("1923-04-01", 1923),
        ("Photographed between 1935 and 1942", 1935),
        ("2021", 2021),
        ("no date", None),
        ("12345", None),
        ("", None),
        (None, None),
    ])
    def test_extract(self, text, expected):
        assert extract_year(text) == expected


class TestSafeFetch:

    def setup_method(self):
        self.cfg = SearchConfig(per_source_limit=3)

    def test_exception_becomes_failed_outcome(self, fake_source):
        src = fake_source("google", error=requests.ConnectionError("connection reset"))
        outcome = src.safe_fetch("Boston")
        assert not outcome.ok
        assert outcome.records == []
        assert "connection reset" in outcome.error

    def test_exception_without_message_uses_type_name(self, fake_source):
        src = fake_source("google", error=KeyError())
        outcome = src.safe_fetch("Boston")
        assert outcome.error

    def test_truncates_to_limit(self, make_record):
        class Many(BaseSource):
            name = "flickr"

            def fetch_images(self, query, max_results):
                return [make_record(source="flickr") for _ in range(10)]

        outcome = Many(self.cfg).safe_fetch("Boston")
        assert outcome.ok
        assert len(outcome.records) == 3

    def test_archival_source_marks_records_historical(self, make_record):
        class Archival(BaseSource):
            name = "nypl"
            historical = True

            def fetch_images(self, query, max_results):
                return [make_record(source="nypl", year=2010)]

        outcome = Archival(self.cfg).safe_fetch("Boston")
        assert outcome.records[0].is_historical is True

    def test_none_result_is_empty(self):
        class Nothing(BaseSource):
            name = "unsplash"

            def fetch_images(self, query, max_results):
                return None

        outcome = Nothing(self.cfg).safe_fetch("Boston")
        assert outcome.ok
        assert outcome.records == []

    def test_get_applies_timeout(self):
        src = BaseSource(SearchConfig(request_timeout=4.0))
        with patch.object(requests.Session, "get") as mock_get:
            mock_get.return_value = _response()
            src.get("https://example.com")
        assert mock_get.call_args.kwargs["timeout"] == 4.0


class TestLibraryOfCongress:

    @patch("search.base.BaseSource.get")
    def test_parses_results(self, mock_get):
        mock_get.return_value = _response({
            "results": [
                {
                    "pk": "2016812345",
                    "title": "Main Street, looking north",
                    "date": "ca. 1905",
                    "link": "/pictures/item/2016812345/",
                    "image": {
                        "full": "//cdn.loc.gov/service/pnp/det/4a00000/4a12345r.jpg",
                        "thumb": "//cdn.loc.gov/service/pnp/det/4a00000/4a12345t.gif",
                    },
                },
                {"pk": "1", "title": "No image", "image": {}},
            ]
        })
        outcome = LibraryOfCongressSource(SearchConfig()).safe_fetch("Main Street")

        assert outcome.ok
        assert len(outcome.records) == 1
        rec = outcome.records[0]
        assert rec.url == "https://cdn.loc.gov/service/pnp/det/4a00000/4a12345r.jpg"
        assert rec.thumbnail.startswith("https://")
        assert rec.year == 1905
        assert rec.is_historical is True
        assert rec.source_url == "https://www.loc.gov/pictures/item/2016812345/"

    @patch("search.base.BaseSource.get")
    def test_malformed_json_is_absorbed(self, mock_get):
        resp = _response()
        resp.json.side_effect = ValueError("Expecting value")
        mock_get.return_value = resp
        outcome = LibraryOfCongressSource(SearchConfig()).safe_fetch("Main Street")
        assert not outcome.ok
        assert outcome.records == []


class TestInternetArchive:

    @patch("search.base.BaseSource.get")
    def test_parses_docs(self, mock_get):
        mock_get.return_value = _response({
            "response": {"docs": [
                {"identifier": "galena-1890", "title": ["Galena street"], "year": "1890"},
                {"identifier": "galena-post", "title": "Postcard", "date": "1952-06-01T00:00:00Z"},
                {"title": "no identifier"},
            ]}
        })
        outcome = InternetArchiveSource(SearchConfig()).safe_fetch("Galena")

        assert [r.year for r in outcome.records] == [1890, 1952]
        first = outcome.records[0]
        assert first.url == "https://archive.org/download/galena-1890/galena-1890.jpg"
        assert first.title == "Galena street"
        assert first.source_url == "https://archive.org/details/galena-1890"


class TestBing:

    @patch("search.base.BaseSource.get")
    def test_parses_iusc_anchors(self, mock_get):
        html = """
        <a class="iusc" m='{"murl": "https://img.example.com/a.jpg", "turl": "https://tse.example.com/a", "t": "Harbor", "purl": "https://page.example.com/a"}'></a>
        <a class="iusc" m='not json'></a>
        <a class="iusc" m='{"t": "missing url"}'></a>
        """
        mock_get.return_value = _response(text=html)
        outcome = BingSource(SearchConfig()).safe_fetch("Boston Harbor")

        assert len(outcome.records) == 1
        rec = outcome.records[0]
        assert rec.url == "https://img.example.com/a.jpg"
        assert rec.thumbnail == "https://tse.example.com/a"
        assert rec.title == "Harbor"
        assert rec.source_url == "https://page.example.com/a"

    @patch("search.base.BaseSource.get")
    def test_falls_back_to_thumbnails(self, mock_get):
        html = """
        <img class="mimg" src="https://tse.example.com/1.jpg" alt="One">
        <img class="mimg" src="data:image/gif;base64,R0lGOD">
        """
        mock_get.return_value = _response(text=html)
        outcome = BingSource(SearchConfig()).safe_fetch("Boston")

        assert [r.url for r in outcome.records] == ["https://tse.example.com/1.jpg"]
        assert outcome.records[0].title == "One"


class TestWikimedia:

    @patch("search.base.BaseSource.get")
    def test_search_then_imageinfo(self, mock_get):
        search = _response({"query": {"search": [
            {"title": "File:Old Town Hall 1911.jpg"},
            {"title": "File:Broken.jpg"},
        ]}})
        info = _response({"query": {"pages": {"1": {"imageinfo": [{
            "url": "https://upload.wikimedia.org/wikipedia/commons/a/ab/Old_Town_Hall_1911.jpg",
            "extmetadata": {"DateTimeOriginal": {"value": "1911"}},
        }]}}}})
        mock_get.side_effect = [search, info, requests.HTTPError("500")]

        outcome = WikimediaSource(SearchConfig()).safe_fetch("Old Town Hall")

        assert outcome.ok
        assert len(outcome.records) == 1
        rec = outcome.records[0]
        assert rec.title == "Old Town Hall 1911"
        assert rec.year == 1911
        assert rec.is_historical is True
        assert "/thumb/" in rec.thumbnail
        assert rec.source_url.startswith("https://commons.wikimedia.org/wiki/File%3A")

    @patch("search.base.BaseSource.get")
    def test_undated_file_is_not_historical(self, mock_get):
        search = _response({"query": {"search": [{"title": "File:Skyline.png"}]}})
        info = _response({"query": {"pages": {"7": {"imageinfo": [{
            "url": "https://upload.wikimedia.org/wikipedia/commons/c/cd/Skyline.png",
        }]}}}})
        mock_get.side_effect = [search, info]

        rec = WikimediaSource(SearchConfig()).safe_fetch("Skyline").records[0]
        assert rec.year is None
        assert rec.is_historical is False


class TestGoogle:

    @patch("search.base.BaseSource.get")
    def test_extracts_urls_from_scripts(self, mock_get):
        html = r"""
        <script>AF_initDataCallback({data: [
            ["https://cdn.example.com/main-st.jpg",800,600],
            ["https://encrypted-tbn0.gstatic.com/images/x.jpg",90,90],
            ["https://img.example.org/harbor.jpg?w\u003d640",640,480],
            ["https://cdn.example.com/main-st.jpg",800,600]
        ]});</script>
        """
        mock_get.return_value = _response(text=html)
        outcome = GoogleSource(SearchConfig()).safe_fetch("Main St")

        assert [r.url for r in outcome.records] == [
            "https://cdn.example.com/main-st.jpg",
            "https://img.example.org/harbor.jpg?w=640",
        ]
        assert outcome.records[0].title == "Main St - Google Image 1"

    @patch("search.base.BaseSource.get")
    def test_page_without_scripts(self, mock_get):
        mock_get.return_value = _response(text="<html><body>Our systems have detected unusual traffic</body></html>")
        outcome = GoogleSource(SearchConfig()).safe_fetch("Main St")
        assert outcome.ok
        assert outcome.records == []


class TestFlickr:

    @patch("search.base.BaseSource.get")
    def test_parses_model_export(self, mock_get):
        html = r"""
        <script>modelExport: {"photos": [
            {"url":"https:\/\/live.staticflickr.com\/65535\/111_abc_n.jpg"},
            {"url":"https:\/\/live.staticflickr.com\/65535\/222_def_m.jpg"}
        ]}</script>
        """
        mock_get.return_value = _response(text=html)
        outcome = FlickrSource(SearchConfig()).safe_fetch("Galena")

        assert len(outcome.records) == 2
        rec = outcome.records[0]
        assert rec.url == "https://live.staticflickr.com/65535/111_abc_b.jpg"
        assert rec.thumbnail == "https://live.staticflickr.com/65535/111_abc_n.jpg"

    @patch("search.base.BaseSource.get")
    def test_ignores_scripts_without_model(self, mock_get):
        html = '<script>var x = {"url":"https://live.staticflickr.com/1/2_a_n.jpg"};</script>'
        mock_get.return_value = _response(text=html)
        assert FlickrSource(SearchConfig()).safe_fetch("Galena").records == []


class TestUnsplash:

    @patch("search.base.BaseSource.get")
    def test_takes_largest_srcset_candidate(self, mock_get):
        html = """
        <img alt="Brooklyn Bridge at dusk"
             srcset="https://images.unsplash.com/photo-1?w=200 200w, https://images.unsplash.com/photo-1?w=1080 1080w">
        <img srcset="https://cdn.example.com/avatar.jpg 32w" alt="avatar">
        """
        mock_get.return_value = _response(text=html)
        outcome = UnsplashSource(SearchConfig()).safe_fetch("Brooklyn Bridge")

        assert len(outcome.records) == 1
        rec = outcome.records[0]
        assert rec.url == "https://images.unsplash.com/photo-1?w=1080"
        assert rec.thumbnail == "https://images.unsplash.com/photo-1?w=200"
        assert rec.title == "Brooklyn Bridge at dusk"
        assert rec.source_url == "https://unsplash.com/s/photos/Brooklyn%20Bridge"

    @patch("search.base.BaseSource.get")
    def test_page_without_images(self, mock_get):
        mock_get.return_value = _response(text="<div>No results</div>")
        assert UnsplashSource(SearchConfig()).safe_fetch("Nowhere").records == []


class TestZillow:

    @patch("search.base.BaseSource.get")
    def test_script_data_and_cards(self, mock_get):
        html = """
        <script>{"zpid":123,"imgSrc":"https://photos.zillowstatic.com/fp/abc-p_e.jpg"}</script>
        <img src="https://photos.zillowstatic.com/fp/def-p_e.jpg" alt="12 Elm St">
        <img src="https://www.zillowstatic.com/static/logo.png">
        """
        mock_get.return_value = _response(text=html)
        outcome = ZillowSource(SearchConfig()).safe_fetch("12 Elm St")

        assert [r.url for r in outcome.records] == [
            "https://photos.zillowstatic.com/fp/abc-p_f.jpg",
            "https://photos.zillowstatic.com/fp/def-p_e.jpg",
        ]
        assert outcome.records[0].thumbnail == "https://photos.zillowstatic.com/fp/abc-p_e.jpg"
        assert outcome.records[1].title == "12 Elm St"
        assert mock_get.call_args.args[0] == "https://www.zillow.com/homes/12-Elm-St_rb/"

    @patch("search.base.BaseSource.get")
    def test_captcha_page(self, mock_get):
        mock_get.return_value = _response(text="<h1>Press &amp; Hold to confirm you are a human</h1>")
        assert ZillowSource(SearchConfig()).safe_fetch("12 Elm St").records == []


class TestRedfin:

    AUTOCOMPLETE = '{}&&{"payload":{"sections":[{"rows":[{"url":"/city/30749/NY/New-York"}]}]}}'

    @patch("search.base.BaseSource.get")
    def test_resolves_region_then_scrapes(self, mock_get):
        page = """
        <img src="https://ssl.cdn-redfin.com/photo/1/mbphoto/123/genisys.123_1.jpg" alt="Front view">
        <img src="https://ssl.cdn-redfin.com/logos/redfin-logo.png">
        <script>var photos = ["https://ssl.cdn-redfin.com/photo/1/bigphoto/456/456_0.jpg"];</script>
        """
        mock_get.side_effect = [_response(text=self.AUTOCOMPLETE), _response(text=page)]
        outcome = RedfinSource(SearchConfig()).safe_fetch("New York")

        region = "https://www.redfin.com/city/30749/NY/New-York"
        assert mock_get.call_args_list[1].args[0] == region
        assert [r.url for r in outcome.records] == [
            "https://ssl.cdn-redfin.com/photo/1/mbphoto/123/bigphoto.123_0.jpg",
            "https://ssl.cdn-redfin.com/photo/1/bigphoto/456/456_0.jpg",
        ]
        assert outcome.records[0].title == "Front view"
        assert all(r.source_url == region for r in outcome.records)

    @patch("search.base.BaseSource.get")
    def test_falls_back_to_guessed_city_url(self, mock_get):
        mock_get.side_effect = [_response(text="<html>blocked</html>"), _response(text="<html></html>")]
        outcome = RedfinSource(SearchConfig()).safe_fetch("Main St")

        assert outcome.ok
        assert outcome.records == []
        assert mock_get.call_args_list[1].args[0] == "https://www.redfin.com/city/0/XX/Main-St"

    @pytest.mark.parametrize("text", ["", "{}&&{}", '{}&&{"payload":{"sections":[]}}', "{}&&[1]"])
    def test_first_row_url_malformed(self, text):
        assert RedfinSource._first_row_url(text) is None

    def test_first_row_url(self):
        assert RedfinSource._first_row_url(self.AUTOCOMPLETE) == "/city/30749/NY/New-York"


class TestNypl:

    @patch("search.base.BaseSource.get")
    def test_parses_result_items(self, mock_get):
        html = """
        <div class="result-item">
          <a href="/items/510d47e2"><img src="https://images.nypl.org/t/123_s.jpg" alt="Broadway at night"></a>
          <span class="date">1899</span>
        </div>
        <div class="result-item"><a href="/items/nothing">No image here</a></div>
        """
        mock_get.return_value = _response(text=html)
        outcome = NyplSource(SearchConfig()).safe_fetch("Broadway")

        assert len(outcome.records) == 1
        rec = outcome.records[0]
        assert rec.url == "https://images.nypl.org/b/123_g.jpg"
        assert rec.thumbnail == "https://images.nypl.org/t/123_s.jpg"
        assert rec.title == "Broadway at night"
        assert rec.source_url == f"{NYPL_BASE}/items/510d47e2"
        assert rec.year == 1899
        assert rec.is_historical is True

    @patch("search.base.BaseSource.get")
    def test_server_error_absorbed(self, mock_get):
        mock_get.side_effect = requests.HTTPError("503 Service Unavailable")
        outcome = NyplSource(SearchConfig()).safe_fetch("Broadway")
        assert not outcome.ok
        assert "503" in outcome.error


class TestHistoricalMaps:

    @patch("search.base.BaseSource.get")
    def test_caps_results(self, mock_get):
        html = "".join(
            f'<img src="https://www.davidrumsey.com/rumsey/Size0/RUMSEY~8~1/{i}.jpg" alt="Map of Boston, 18{i:02d}">'
            for i in range(12)
        )
        mock_get.return_value = _response(text=html)
        outcome = HistoricalMapsSource(SearchConfig(per_source_limit=12)).safe_fetch("Boston")

        assert len(outcome.records) == MAX_MAPS
        rec = outcome.records[0]
        assert rec.url == "https://www.davidrumsey.com/rumsey/Size2/RUMSEY~8~1/0.jpg"
        assert rec.year == 1800
        assert rec.is_historical is True

    @patch("search.base.BaseSource.get")
    def test_page_without_thumbnails(self, mock_get):
        mock_get.return_value = _response(text='<img src="/static/spinner.gif">')
        assert HistoricalMapsSource(SearchConfig()).safe_fetch("Boston").records == []



class TestRegistry:

    def test_registry_covers_every_known_source(self):
        assert tuple(SOURCE_REGISTRY) == KNOWN_SOURCES

    def test_adapter_names_match_keys(self):
        for name, cls in SOURCE_REGISTRY.items():
            assert cls.name == name

    def test_build_subset_in_registry_order(self):
        built = build_sources(SearchConfig(), ["archive", "google", "nope"])
        assert list(built) == ["google", "archive"]
        assert all(isinstance(s, BaseSource) for s in built.values())

    def test_historical_flags(self):
        built = build_sources(SearchConfig())
        assert {n for n, s in built.items() if s.historical} == {"loc", "archive", "nypl", "maps"}


def test_records_are_image_records(fake_source, make_record):
    outcome = fake_source("bing", records=[make_record(source="bing")]).safe_fetch("x")
    assert all(isinstance(r, ImageRecord) for r in outcome.records)

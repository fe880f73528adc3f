"""
Tests for the iOS App Store and Google Play checkers.
"""

import httpx
import pytest
from unittest.mock import patch

from name_maker.checkers.app_store import AppStoreChecker, find_exact_match, normalize_title
from name_maker.checkers.play_store import (
    PlayStoreChecker,
    PlayStoreLibraryChecker,
    classify_search_page,
    find_title_match,
    get_play_store_checker,
    play_store_search_url,
    public_store_url,
)
from name_maker.models import AvailabilityStatus


def itunes_transport(apps: list[dict], status_code: int = 200) -> httpx.MockTransport:
    def handler(request: httpx.Request) -> httpx.Response:
        assert request.url.host == "itunes.apple.com"
        assert request.url.params["entity"] == "software"
        return httpx.Response(status_code, json={"resultCount": len(apps), "results": apps})
    return httpx.MockTransport(handler)


def html_transport(page: str, status_code: int = 200) -> httpx.MockTransport:
    def handler(request: httpx.Request) -> httpx.Response:
        assert request.url.params["c"] == "apps"
        return httpx.Response(status_code, text=page)
    return httpx.MockTransport(handler)


TAGLINE_PAGE = """
<html><body>
<div class="results">
  <a href="/store/apps/details?id=com.other.notes"><div aria-label="Quick Notes"></div></a>
  <a href="/store/apps/details?id=com.lumina.photo"><div aria-label="Lumina: Photo Editor"></div></a>
</div>
</body></html>
"""

NAVIGATION_PAGE = """
<html><body>
<nav>
  <a aria-label="Google Play" href="/store/games">Google Play</a>
  <a aria-label="Apps" href="/store/apps">Apps</a>
  <a aria-label="Kids" href="/store/apps/category/FAMILY">Kids</a>
</nav>
<p>We couldn't find anything for your search</p>
</body></html>
"""

NAVIGATION_AND_RESULTS_PAGE = NAVIGATION_PAGE.replace(
    "<p>We couldn't find anything for your search</p>",
    '<div class="results"><a href="/store/apps/details?id=com.kidcraft.draw" title="Kidcraft Draw"></a></div>',
)

EMPTY_PAGE = """
<html><body>
<input type="search" value="Lumina">
<div aria-label="Search"></div>
<p>We couldn't find anything for your search</p>
</body></html>
"""


class TestTitleMatching:
    """Tests for the matching helpers."""

    def test_normalize_title(self):
        """Case and all whitespace are ignored."""
        assert normalize_title("  Swift  Hub ") == "swifthub"

    def test_exact_match_first_wins(self):
        """The first exact normalized match is returned."""
        apps = [
            {"trackName": "Lumina Pro"},
            {"trackName": "LUMINA"},
            {"trackName": "lumina"},
        ]
        assert find_exact_match("Lumina", apps) == {"trackName": "LUMINA"}

    def test_play_exact_beats_prefix(self):
        """An exact title wins over an earlier prefix match."""
        titles = ["Lumina: Photo Editor", "Lumina"]
        assert find_title_match("lumina", titles) == "Lumina"

    def test_play_prefix_match(self):
        """A title that starts with the name counts on Play."""
        assert find_title_match("Lumina", ["Lumina: Photo Editor"]) == "Lumina: Photo Editor"
        assert find_title_match("Lumina", ["My Lumina"]) is None


class TestAppStoreChecker:
    """Tests for the iOS checker."""

    @pytest.mark.asyncio
    async def test_exact_match_is_taken(self):
        """An entry titled exactly the name (normalized) is taken."""
        apps = [
            {"trackName": "Swift Hub", "trackViewUrl": "https://apps.apple.com/us/app/swift-hub/id1"},
        ]
        checker = AppStoreChecker(transport=itunes_transport(apps))

        result = await checker.check("swifthub")

        assert result.status == AvailabilityStatus.TAKEN
        assert result.existing_app == "Swift Hub"
        assert result.store_url == "https://apps.apple.com/us/app/swift-hub/id1"

    @pytest.mark.asyncio
    async def test_near_match_is_available(self):
        """Similar titles don't block a name on iOS."""
        apps = [{"trackName": "Lumina: Photo Editor", "trackViewUrl": "https://apps.apple.com/x"}]
        checker = AppStoreChecker(transport=itunes_transport(apps))

        result = await checker.check("Lumina")

        assert result.status == AvailabilityStatus.AVAILABLE
        assert result.existing_app is None
        assert result.store_url is None

    @pytest.mark.asyncio
    async def test_only_first_results_inspected(self):
        """Entries past the limit are ignored."""
        apps = [{"trackName": f"App {i}"} for i in range(10)] + [{"trackName": "Lumina"}]
        checker = AppStoreChecker(limit=10, transport=itunes_transport(apps))

        result = await checker.check("Lumina")

        assert result.status == AvailabilityStatus.AVAILABLE

    @pytest.mark.asyncio
    async def test_http_error_is_unknown(self):
        """Server errors produce UNKNOWN."""
        checker = AppStoreChecker(transport=itunes_transport([], status_code=500))

        result = await checker.check("Lumina")

        assert result.status == AvailabilityStatus.UNKNOWN

    @pytest.mark.asyncio
    async def test_bad_payload_is_unknown(self):
        """Non-JSON bodies produce UNKNOWN."""
        transport = httpx.MockTransport(lambda request: httpx.Response(200, text="<html>oops</html>"))
        checker = AppStoreChecker(transport=transport)

        result = await checker.check("Lumina")

        assert result.status == AvailabilityStatus.UNKNOWN

    @pytest.mark.asyncio
    async def test_non_object_entries_skipped(self):
        """Malformed result entries are ignored instead of failing the check."""
        apps = ["oops", None, {"trackName": "Lumina", "trackViewUrl": "https://apps.apple.com/app/id7"}]
        checker = AppStoreChecker(transport=itunes_transport(apps))

        result = await checker.check("Lumina")

        assert result.status == AvailabilityStatus.TAKEN
        assert result.existing_app == "Lumina"

    @pytest.mark.asyncio
    async def test_only_malformed_entries_is_available(self):
        apps = ["oops", 42]
        checker = AppStoreChecker(transport=itunes_transport(apps))

        result = await checker.check("Lumina")

        assert result.status == AvailabilityStatus.AVAILABLE

    @pytest.mark.asyncio
    async def test_network_error_is_unknown(self):
        """Connection failures produce UNKNOWN."""
        def handler(request):
            raise httpx.ConnectError("connection refused", request=request)

        checker = AppStoreChecker(transport=httpx.MockTransport(handler))

        result = await checker.check("Lumina")

        assert result.status == AvailabilityStatus.UNKNOWN


class TestPlayStoreChecker:
    """Tests for the Play scrape checker."""

    def test_public_store_url(self):
        """Work-profile links are rewritten and relative links made absolute."""
        assert (
            public_store_url("/work/apps/details?id=com.a.b")
            == "https://play.google.com/store/apps/details?id=com.a.b"
        )
        assert (
            public_store_url("https://play.google.com/store/apps/details?id=x")
            == "https://play.google.com/store/apps/details?id=x"
        )

    def test_classify_links_nearest_app(self):
        """The matched title links to the nearest details page."""
        result = classify_search_page("Lumina", TAGLINE_PAGE)

        assert result.status == AvailabilityStatus.TAKEN
        assert result.existing_app == "Lumina: Photo Editor"
        assert result.store_url == "https://play.google.com/store/apps/details?id=com.lumina.photo"

    def test_classify_text_node_fallback(self):
        """A text node equal to the name counts as taken."""
        page = "<html><body><span> Lumina </span></body></html>"

        result = classify_search_page("Lumina", page)

        assert result.status == AvailabilityStatus.TAKEN
        assert result.store_url == play_store_search_url("Lumina")

    def test_query_echo_is_not_a_match(self):
        """The query echoed in the search box doesn't make a name taken."""
        result = classify_search_page("Lumina", EMPTY_PAGE)

        assert result.status == AvailabilityStatus.AVAILABLE

    def test_navigation_labels_are_not_titles(self):
        """Store navigation labels don't make short names taken."""
        for name in ("App", "Kid", "Google"):
            assert classify_search_page(name, NAVIGATION_PAGE).status == AvailabilityStatus.AVAILABLE

    def test_result_card_title_still_matches(self):
        """Titles inside a result card count even when navigation is present."""
        result = classify_search_page("Kid", NAVIGATION_AND_RESULTS_PAGE)

        assert result.status == AvailabilityStatus.TAKEN
        assert result.existing_app == "Kidcraft Draw"
        assert result.store_url == "https://play.google.com/store/apps/details?id=com.kidcraft.draw"

    @pytest.mark.asyncio
    async def test_navigation_only_page_is_available(self):
        checker = PlayStoreChecker(transport=html_transport(NAVIGATION_PAGE))

        result = await checker.check("App")

        assert result.status == AvailabilityStatus.AVAILABLE

    @pytest.mark.asyncio
    async def test_prefix_match_differs_from_ios(self):
        """The same tagline title is taken on Play but available on iOS."""
        play = PlayStoreChecker(transport=html_transport(TAGLINE_PAGE))
        ios = AppStoreChecker(transport=itunes_transport([{"trackName": "Lumina: Photo Editor"}]))

        play_result = await play.check("Lumina")
        ios_result = await ios.check("Lumina")

        assert play_result.status == AvailabilityStatus.TAKEN
        assert ios_result.status == AvailabilityStatus.AVAILABLE

    @pytest.mark.asyncio
    async def test_http_error_is_unknown(self):
        """Blocked or failing fetches produce UNKNOWN."""
        checker = PlayStoreChecker(transport=html_transport("", status_code=429))

        result = await checker.check("Lumina")

        assert result.status == AvailabilityStatus.UNKNOWN

    @pytest.mark.asyncio
    async def test_empty_name_is_unknown(self):
        """Nothing to search for."""
        checker = PlayStoreChecker(transport=html_transport(TAGLINE_PAGE))

        result = await checker.check("   ")

        assert result.status == AvailabilityStatus.UNKNOWN


class TestPlayStoreLibraryChecker:
    """Tests for the google-play-scraper backend."""

    @pytest.mark.asyncio
    async def test_prefix_match_is_taken(self):
        """Same matching policy as the scrape backend."""
        hits = [
            {"title": "Quick Notes", "appId": "com.other.notes"},
            {"title": "Lumina: Photo Editor", "appId": "com.lumina.photo", "url": None},
        ]
        with patch("name_maker.checkers.play_store.play_search", return_value=hits) as search:
            result = await PlayStoreLibraryChecker(timeout=5).check("Lumina")

        search.assert_called_once()
        assert result.status == AvailabilityStatus.TAKEN
        assert result.existing_app == "Lumina: Photo Editor"
        assert result.store_url == "https://play.google.com/store/apps/details?id=com.lumina.photo"

    @pytest.mark.asyncio
    async def test_no_match_is_available(self):
        """Unrelated titles leave the name available."""
        hits = [{"title": "Photo Lumina", "appId": "com.x"}]
        with patch("name_maker.checkers.play_store.play_search", return_value=hits):
            result = await PlayStoreLibraryChecker(timeout=5).check("Lumina")

        assert result.status == AvailabilityStatus.AVAILABLE

    @pytest.mark.asyncio
    async def test_non_object_hits_skipped(self):
        hits = ["oops", {"title": "Lumina", "appId": "com.lumina"}]
        with patch("name_maker.checkers.play_store.play_search", return_value=hits):
            result = await PlayStoreLibraryChecker(timeout=5).check("Lumina")

        assert result.status == AvailabilityStatus.TAKEN

    @pytest.mark.asyncio
    async def test_client_error_is_unknown(self):
        """Client exceptions produce UNKNOWN."""
        with patch("name_maker.checkers.play_store.play_search", side_effect=RuntimeError("blocked")):
            result = await PlayStoreLibraryChecker(timeout=5).check("Lumina")

        assert result.status == AvailabilityStatus.UNKNOWN

    def test_backend_factory(self):
        """Backends are chosen by name."""
        assert isinstance(get_play_store_checker("scrape"), PlayStoreChecker)
        assert isinstance(get_play_store_checker("library"), PlayStoreLibraryChecker)
        with pytest.raises(ValueError):
            get_play_store_checker("carrier-pigeon")

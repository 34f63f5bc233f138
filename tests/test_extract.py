from consultant_scraper.etl import extract
from consultant_scraper.models import Location


def test_parse_location_three_parts():
    location = extract.parse_location("Downtown Branch. 123 Main St, Springfield, IL 62701")
    assert location == Location(
        branch="Downtown Branch",
        address="123 Main St",
        city="Springfield",
        state="IL",
        zip="62701",
    )


def test_parse_location_collapses_whitespace():
    location = extract.parse_location("  Downtown   Branch.\n   123 Main St,\tSpringfield,  IL   62701 ")
    assert location.branch == "Downtown Branch"
    assert location.address == "123 Main St"
    assert location.city == "Springfield"
    assert location.state == "IL"
    assert location.zip == "62701"


def test_parse_location_multi_word_state_keeps_last_token_as_zip():
    location = extract.parse_location("Main. 1 Road, Albany, New York 12207")
    assert location.state == "New York"
    assert location.zip == "12207"


def test_parse_location_two_parts_is_positional():
    location = extract.parse_location("Uptown. 9 Elm Rd, Shelbyville IL 60000")
    assert location.address == "9 Elm Rd"
    assert location.city == "Shelbyville"
    assert location.state == "IL"
    assert location.zip == "60000"

    short = extract.parse_location("Uptown. 9 Elm Rd, Shelbyville")
    assert short.city == "Shelbyville"
    assert short.state is None
    assert short.zip is None


def test_parse_location_single_part_is_positional():
    location = extract.parse_location("Kiosk. 12 Springfield IL 62701")
    assert location.branch == "Kiosk"
    assert (location.address, location.city, location.state, location.zip) == ("12", "Springfield", "IL", "62701")


def test_parse_location_without_period_puts_everything_in_branch():
    location = extract.parse_location("Remote office only")
    assert location.branch == "Remote office only"
    assert location.address == ""
    assert location.city is None


def test_parse_profile_id():
    assert extract.parse_profile_id("javascript:showProfile('abc123')") == "abc123"
    assert extract.parse_profile_id("/profile/abc") == ""
    assert extract.parse_profile_id(None) == ""


def test_extract_profiles(list_page_html):
    profiles = extract.extract_profiles(list_page_html)

    assert [profile.id for profile in profiles] == ["abc123", "xyz789"]
    jane = profiles[0]
    assert jane.name == "Jane Doe"
    assert jane.title == "Financial Consultant"
    assert jane.designation == "CFP"
    assert jane.phone_numbers == ["(555) 555-1234", "(555) 555-9999"]
    assert [location.branch for location in jane.locations] == ["Downtown Branch", "Uptown"]
    assert jane.locations[0].zip == "62701"

    john = profiles[1]
    assert john.designation == ""
    assert john.locations == []
    assert john.phone_numbers == []


def test_extract_profiles_is_deterministic(list_page_html):
    assert extract.extract_profiles(list_page_html) == extract.extract_profiles(list_page_html)


def test_extract_profiles_tolerates_garbage():
    assert extract.extract_profiles("") == []
    assert extract.extract_profiles(None) == []
    assert extract.extract_profiles("<div><p>No results") == []

    broken = extract.extract_profiles('<div id="fcSearchResult"><span class="mapSpan"></span></div>')
    assert len(broken) == 1
    assert broken[0].id == ""
    assert broken[0].name == ""
    assert broken[0].locations[0].branch == ""


def test_extract_detail(detail_page_html):
    detail = extract.extract_detail(detail_page_html)

    assert detail.financial_credentials == ["CFP", "Series 7"]
    assert detail.experience.years == 12
    assert detail.experience.positions == ["Financial Consultant, 2015-present", "Analyst, 2012-2015"]
    assert detail.education == ["BA, State University"]
    assert detail.branch_information.details == ["Branch details:", "123 Main St"]
    assert detail.branch_information.map_link == "https://maps.example.com/?q=springfield"


def test_extract_detail_missing_sections_are_empty():
    detail = extract.extract_detail("<html><body><h1>Profile</h1></body></html>")

    assert detail.financial_credentials == []
    assert detail.experience.years is None
    assert detail.experience.positions == []
    assert detail.education == []
    assert detail.branch_information.details == []
    assert detail.branch_information.map_link is None

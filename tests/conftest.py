import sys
from pathlib import Path

import pytest

# Ensure the `consultant_scraper` package is importable when running pytest from the repo root.
ROOT = Path(__file__).resolve().parents[1]
if str(ROOT) not in sys.path:
    sys.path.insert(0, str(ROOT))

from consultant_scraper.core.storage import ResultStore  # noqa: E402


LIST_PAGE_HTML = """
<div class="results">
  <div id="fcSearchResult">
    <a id="fcDisplayName" href="javascript:showProfile('abc123')"> Jane Doe </a>
    <span id="fcJobTitle"> Financial Consultant </span>
    <span id="fcDesignation">CFP</span>
    <span class="mapSpan">Downtown Branch.
        123 Main St, Springfield,   IL 62701</span>
    <span class="mapSpan">Uptown. 9 Elm Rd, Shelbyville IL</span>
    <span class="telSpan"> (555) 555-1234 </span>
    <span class="telSpan">(555) 555-9999</span>
  </div>
  <div id="fcSearchResult">
    <a id="fcDisplayName" href="javascript:showProfile('xyz789')">John Roe</a>
    <span id="fcJobTitle">Senior Financial Consultant</span>
  </div>
</div>
"""

DETAIL_PAGE_HTML = """
<html><body>
<div id="_Financial_credentials"><div><div><div><div>
  <ul><li>CFP</li><li> Series 7 </li></ul>
</div></div></div></div></div>
<div id="_Experience"><div><div><div><div>
  <p>12 years of professional experience</p>
  <ul><li>Financial Consultant, 2015-present</li><li>Analyst, 2012-2015</li></ul>
</div></div></div></div></div>
<div id="_Education"><div><div><div><div>
  <ul><li>BA, State University</li></ul>
</div></div></div></div></div>
<a id="_Branch_information" href="https://maps.example.com/?q=springfield">Branch information</a>
<div id="_Branch_information-body"><div><div>
  Branch details:
  123 Main St
</div></div></div>
</body></html>
"""


def profile_html(*entries):
    """Render a search results page with one block per ``(id, name)`` pair."""
    blocks = [
        f'<div id="fcSearchResult"><a id="fcDisplayName" href="javascript:showProfile(\'{identity}\')">{name}</a></div>'
        for identity, name in entries
    ]
    return "<div>" + "".join(blocks) + "</div>"


@pytest.fixture
def store(tmp_path):
    return ResultStore(tmp_path / "results_list", tmp_path / "results_details")


@pytest.fixture
def list_page_html():
    return LIST_PAGE_HTML


@pytest.fixture
def detail_page_html():
    return DETAIL_PAGE_HTML


@pytest.fixture
def make_page():
    return profile_html

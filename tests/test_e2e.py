"""Read-only checks against the live Picnic API.

Skipped unless PICNIC_TEST_USERNAME and PICNIC_TEST_PASSWORD are set.
"""

import json
import os

import pytest
from typer.testing import CliRunner

from picnic_cli.main import app

pytestmark = pytest.mark.skipif(
    not (os.environ.get("PICNIC_TEST_USERNAME") and os.environ.get("PICNIC_TEST_PASSWORD")),
    reason="PICNIC_TEST_USERNAME / PICNIC_TEST_PASSWORD not set",
)

runner = CliRunner()


@pytest.fixture(scope="module")
def logged_in(tmp_path_factory):
    path = tmp_path_factory.mktemp("picnic") / "config.json"
    mp = pytest.MonkeyPatch()
    mp.setenv("PICNIC_CLI_CONFIG", str(path))
    country = os.environ.get("PICNIC_TEST_COUNTRY", "NL")
    result = runner.invoke(app, [
        "--json", "--country", country, "login",
        "-u", os.environ["PICNIC_TEST_USERNAME"], "-p", os.environ["PICNIC_TEST_PASSWORD"],
    ])
    assert result.exit_code == 0, result.output
    yield country
    mp.undo()


def _json(*args):
    result = runner.invoke(app, ["--json", *args])
    assert result.exit_code == 0, result.output
    return json.loads(result.stdout)


class TestLive:
    def test_search(self, logged_in):
        results = _json("--country", logged_in, "search", "melk")
        assert isinstance(results, list)
        assert all("name" in r for r in results)

    def test_cart(self, logged_in):
        assert "items" in _json("--country", logged_in, "cart", "show")

    def test_slots(self, logged_in):
        assert "delivery_slots" in _json("--country", logged_in, "slots", "show")

    def test_categories(self, logged_in):
        assert isinstance(_json("--country", logged_in, "categories"), list)

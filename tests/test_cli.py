"""Test suite for the command line interface"""

import json

import httpx
import pytest
from click.testing import CliRunner

from ardemo import main
from ardemo.config import Settings
from ardemo.services.content import ContentClient

MUG_URL = (
    "com.oracle.ios.ardemo://mug?url=https%3A%2F%2Fsomeserver.com&token=123"
    "&assetID=CORE456&imageID=CONT789&mugColor=0x123123"
)


@pytest.fixture
def cli_settings(tmp_path, monkeypatch) -> Settings:
    parameters = tmp_path / "demo_parameters.yaml"
    parameters.write_text(
        "scheme: https\nhost: someserver.com\nchannel_token: abc\n"
        "mug_asset_id: CORE1\nmug_decal_id: CONT1\npanorama_asset_id: LOC1\n"
    )
    test_settings = Settings(
        data_dir=tmp_path / "data",
        demo_parameters_path=parameters,
        log_dir=tmp_path / "logs",
    )
    monkeypatch.setattr(main, "settings", test_settings)
    return test_settings


@pytest.fixture
def runner() -> CliRunner:
    return CliRunner()


def test_open_valid_link(runner, cli_settings):
    result = runner.invoke(main.cli, ["open", MUG_URL])

    assert result.exit_code == 0, result.output
    assert "CORE456" in result.output
    stored = json.loads((cli_settings.data_dir / "ARDemoMugURLCache.json").read_text())
    assert stored == [MUG_URL]


def test_open_invalid_link(runner, cli_settings):
    result = runner.invoke(main.cli, ["open", MUG_URL.replace("token=123", "token=")])

    assert result.exit_code == 1
    assert "token" in result.output


def test_recent_and_clear(runner, cli_settings):
    runner.invoke(main.cli, ["open", MUG_URL])

    listed = runner.invoke(main.cli, ["recent", "mug"])
    assert listed.exit_code == 0
    assert "CORE456" in listed.output

    cleared = runner.invoke(main.cli, ["recent", "mug", "--clear"])
    assert cleared.exit_code == 0
    stored = json.loads((cli_settings.data_dir / "ARDemoMugURLCache.json").read_text())
    assert stored == []


def test_sample_url(runner, cli_settings):
    result = runner.invoke(main.cli, ["sample-url", "panorama"])

    assert result.exit_code == 0
    assert result.output.strip() == (
        "com.oracle.ios.ardemo://panorama?url=https%3A%2F%2Fsomeserver.com&token=abc&assetID=LOC1"
    )


def test_make_mug_url_rejects_bad_color(runner, cli_settings):
    result = runner.invoke(
        main.cli,
        [
            "make-mug-url", "--url", "https://someserver.com", "--token", "123",
            "--asset-id", "CORE456", "--image-id", "CONT789", "--mug-color", "blue",
        ],
    )

    assert result.exit_code == 1
    assert "Specified color is invalid" in result.output


def test_make_panorama_url_is_remembered(runner, cli_settings):
    result = runner.invoke(
        main.cli,
        ["make-panorama-url", "--url", "https://someserver.com", "--token", "123", "--asset-id", "L1"],
    )

    assert result.exit_code == 0
    stored = json.loads((cli_settings.data_dir / "ARDemoPanoramaURLCache.json").read_text())
    assert stored == [result.output.strip()]


def test_cache_info_and_clear(runner, cli_settings):
    info = runner.invoke(main.cli, ["cache-info"])
    assert info.exit_code == 0
    assert "0 entries" in info.output

    cleared = runner.invoke(main.cli, ["clear-cache", "--yes"])
    assert cleared.exit_code == 0
    assert (cli_settings.data_dir / "savedFiles").is_dir()


def test_clear_cache_failure_exits_nonzero(runner, cli_settings):
    saved_files = cli_settings.saved_files_dir
    saved_files.mkdir(parents=True)
    (saved_files / "old.png").write_bytes(b"old")
    cli_settings.cache_listing_path.mkdir()

    result = runner.invoke(main.cli, ["clear-cache", "--yes"])

    assert result.exit_code == 1
    assert "Unable to clear the asset cache" in result.output
    assert (saved_files / "old.png").exists()


@pytest.fixture
def served_content(server, monkeypatch):
    """Route every ContentClient the CLI builds through the fake server."""

    def make_client(base_url, channel_token, timeout):
        return ContentClient(
            base_url,
            channel_token,
            timeout=timeout,
            client=httpx.Client(transport=httpx.MockTransport(server.handler)),
        )

    monkeypatch.setattr(main, "ContentClient", make_client)
    return server


def test_fetch_mug_populates_cache(runner, cli_settings, served_content):
    served_content.assets["CORE456"] = {
        "id": "CORE456",
        "name": "Coffee Mug",
        "type": "Mug",
        "fields": {
            "model": {
                "id": "CORE_MODEL",
                "name": "model",
                "fields": {
                    "primarymeshname": "mug_body",
                    "imagemeshnames": ["decal_front"],
                    "usdz": {"id": "CONT_USDZ", "name": "mug.usdz"},
                },
            },
        },
    }
    served_content.add_file("CONT789", "decal.png", b"decal", '"d1"')
    served_content.add_file("CONT_USDZ", "mug.usdz", b"usdz", '"u1"')

    result = runner.invoke(main.cli, ["fetch", MUG_URL])

    assert result.exit_code == 0, result.output
    assert "mug_body" in result.output
    listing = json.loads(cli_settings.cache_listing_path.read_text())
    assert set(listing) == {"CONT789", "CONT_USDZ"}


def test_fetch_reports_missing_model(runner, cli_settings, served_content):
    served_content.assets["CORE456"] = {
        "id": "CORE456", "name": "Coffee Mug", "type": "Mug", "fields": {}
    }
    served_content.add_file("CONT789", "decal.png", b"decal", '"d1"')

    result = runner.invoke(main.cli, ["fetch", MUG_URL])

    assert result.exit_code == 1
    assert "model" in result.output.lower()


def test_fetch_reports_non_json_response(runner, cli_settings, served_content):
    served_content.pages["CORE456"] = "<html>login</html>"

    result = runner.invoke(main.cli, ["fetch", MUG_URL])

    assert result.exit_code == 1
    assert not isinstance(result.exception, ValueError)
    assert "instead of JSON" in result.output

"""
Tests for the Riot Client settings file codec.

Tests cover:
- Golden five-cookie private settings schema
- Decoding live session files, including files without a session
- Client settings rendering
"""
from pathlib import Path

import pytest
import yaml

from nebula.session import codec

GOLDEN = Path(__file__).parent / "data" / "private_settings.golden.yaml"


def cookies_of(text: str) -> list:
    document = yaml.safe_load(text)
    return document["private"]["riot-login"]["persist"]["session"]["cookies"]


class TestPrivateSettingsSchema:
    """Tests for RiotGamesPrivateSettings.yaml output."""

    def test_matches_golden_file(self):
        """Test the rendered structure matches the pinned schema."""
        text = codec.encode_private_settings({"ssid": "S1", "sub": "abc123", "tdid": "T1"})
        assert yaml.safe_load(text) == yaml.safe_load(GOLDEN.read_text())

    def test_always_five_cookies(self):
        """Test all five cookies are written even when only ssid/sub are known."""
        entries = cookies_of(codec.encode_private_settings({"ssid": "S1", "sub": "abc123"}))
        assert [e["name"] for e in entries] == ["tdid", "ssid", "clid", "sub", "csid"]
        assert {e["name"]: e["value"] for e in entries}["clid"] == ""

    def test_http_only_flags(self):
        """Test sub is the only cookie readable by scripts."""
        entries = cookies_of(codec.encode_private_settings({"ssid": "S1", "sub": "abc123"}))
        flags = {e["name"]: e["httpOnly"] for e in entries}
        assert flags == {"tdid": True, "ssid": True, "clid": True, "sub": False, "csid": True}
        assert all(e["domain"] == "auth.riotgames.com" for e in entries)
        assert all(e["persistent"] and e["secureOnly"] for e in entries)

    def test_encode_returns_both_documents(self):
        """Test encode() renders private and client settings together."""
        private_text, client_text = codec.encode({"ssid": "S1", "sub": "abc123"}, "eu", "de_DE")
        assert "S1" in private_text
        assert "S1" not in client_text
        assert yaml.safe_load(client_text)["install"]["globals"]["region"] == "EU"


class TestDecode:
    """Tests for reading cookies out of private settings."""

    def test_decode_round_trip_keeps_ids(self):
        """Test ssid and sub survive an encode/decode cycle."""
        text = codec.encode_private_settings({"ssid": "S1", "sub": "abc123"})
        cookies = codec.decode(text)
        assert cookies["ssid"] == "S1"
        assert cookies["sub"] == "abc123"

    def test_decode_skips_empty_values(self):
        """Test empty cookie values are not collected."""
        cookies = codec.decode(codec.encode_private_settings({"ssid": "S1", "sub": "abc123"}))
        assert "clid" not in cookies
        assert "csid" not in cookies

    @pytest.mark.parametrize("raw", [
        "",
        "{}",
        "private: {}",
        "private:\n  riot-login:\n    persist: {}\n",
        "private:\n  riot-login:\n    persist:\n      session:\n        cookies: nope\n",
        "- just\n- a list\n",
        "private: [unbalanced",
    ])
    def test_decode_without_session_returns_none(self, raw):
        """Test documents without a cookie list decode to None."""
        assert codec.decode(raw) is None

    def test_decode_requires_ssid_and_sub(self):
        """Test a session missing either mandatory id decodes to None."""
        only_ssid = codec.encode_private_settings({"ssid": "S1"})
        only_sub = codec.encode_private_settings({"sub": "abc123"})
        assert codec.decode(only_ssid) is None
        assert codec.decode(only_sub) is None

    def test_decode_ignores_malformed_entries(self):
        """Test non-mapping cookie entries are skipped."""
        raw = (
            "private:\n"
            "  riot-login:\n"
            "    persist:\n"
            "      session:\n"
            "        cookies:\n"
            "        - garbage\n"
            "        - {name: ssid, value: S1}\n"
            "        - {name: sub, value: abc123}\n"
        )
        assert codec.decode(raw) == {"ssid": "S1", "sub": "abc123"}


class TestClientSettings:
    """Tests for RiotClientSettings.yaml output."""

    def test_region_upper_cased(self):
        """Test region is written upper-case with the locale."""
        document = yaml.safe_load(codec.encode_client_settings("na", "en_US"))
        assert document["install"]["globals"] == {"region": "NA", "locale": "en_US"}

    def test_live_patchline(self):
        """Test the valorant patchline is always live."""
        document = yaml.safe_load(codec.encode_client_settings())
        assert document["patchlines"] == {"valorant": "live"}

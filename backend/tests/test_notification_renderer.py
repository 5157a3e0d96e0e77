"""Tests for rendering stored notifications through a translation catalog."""

import json
from types import SimpleNamespace

from ecare.services import notification_codec as codec
from ecare.services.notification_renderer import (
    DictCatalog,
    load_catalog,
    message_keys,
    render_notification,
    title_keys,
)

CATALOG = DictCatalog(
    {
        "notif_processing_title": "Complaint {{id}} in process",
        "notif_processing_body": "{{name}} is working on {{id}} since {{date}} {{time}}.",
        "notif_processing_user_title": "Update on {{id}}",
        "notif_processing_user_body": "Technician {{name}} took over {{id}}.",
        "notif_remark_user": "A remark was added to {{id}}.",
    }
)


def _record(title, message):
    return SimpleNamespace(title=title, message=message)


class TestCandidateKeys:
    def test_body_key(self):
        assert message_keys("notif_processing_body") == [
            "notif_processing_body",
            "notif_processing_body_body",
        ]
        assert title_keys("notif_processing_body") == [
            "notif_processing_title",
            "notif_processing_body_title",
        ]

    def test_plain_key(self):
        assert message_keys("notif_processing_user") == [
            "notif_processing_user",
            "notif_processing_user_body",
        ]
        assert title_keys("notif_processing_user") == ["notif_processing_user_title"]

    def test_title_key_swaps_to_body_for_message(self):
        assert message_keys("notif_completed_title")[1] == "notif_completed_body"


class TestDictCatalog:
    def test_interpolates_params(self):
        assert CATALOG.resolve("notif_remark_user", {"id": "A00007"}) == (
            "A remark was added to A00007."
        )

    def test_unknown_placeholder_is_left_in_place(self):
        assert CATALOG.resolve("notif_remark_user", {}) == "A remark was added to {{id}}."

    def test_miss_returns_none(self):
        assert CATALOG.resolve("missing_key", {"id": "A00001"}) is None

    def test_from_json_file_flattens_namespace(self, tmp_path):
        path = tmp_path / "en.json"
        path.write_text(
            json.dumps(
                {
                    "common": {"ok": "OK"},
                    "notification": {
                        "notif_transport_user": "Transport arranged for {{id}}.",
                        "status": {"closed": "Closed"},
                    },
                }
            ),
            encoding="utf-8",
        )
        catalog = DictCatalog.from_json_file(path)
        assert catalog.entries == {
            "notif_transport_user": "Transport arranged for {{id}}.",
            "status.closed": "Closed",
        }

    def test_from_json_file_without_namespace(self, tmp_path):
        path = tmp_path / "en.json"
        path.write_text(json.dumps({"common": {"ok": "OK"}}), encoding="utf-8")
        assert DictCatalog.from_json_file(path).entries == {}


class TestRenderNotification:
    def test_legacy_message_renders_verbatim(self):
        rendered = render_notification(
            _record("Status Update: A00001", "Your complaint is in process."), CATALOG
        )
        assert rendered.title == "Status Update: A00001"
        assert rendered.message == "Your complaint is in process."
        assert rendered.structured is False

    def test_structured_body_key_resolves_title_and_message(self):
        message = codec.encode(
            codec.PROCESSING_BODY,
            {"id": "A00042", "name": "Ahmad Tech", "date": "03 Feb 2026", "time": "04:30 PM"},
        )
        rendered = render_notification(_record("Status Update: A00042", message), CATALOG)
        assert rendered.title == "Complaint A00042 in process"
        assert rendered.message == "Ahmad Tech is working on A00042 since 03 Feb 2026 04:30 PM."
        assert rendered.structured is True

    def test_structured_plain_key_uses_suffixed_entries(self):
        message = codec.encode(codec.PROCESSING_USER, {"id": "A00042", "name": "Ahmad Tech"})
        rendered = render_notification(_record("Status Update: A00042", message), CATALOG)
        assert rendered.title == "Update on A00042"
        assert rendered.message == "Technician Ahmad Tech took over A00042."

    def test_title_falls_back_independently(self):
        message = codec.encode(codec.REMARK_USER, {"id": "A00007"})
        rendered = render_notification(_record("New Remark: A00007", message), CATALOG)
        assert rendered.title == "New Remark: A00007"
        assert rendered.message == "A remark was added to A00007."

    def test_unknown_key_falls_back_to_stored_text(self):
        message = codec.encode("notif_unknown", {"id": "A00001"})
        rendered = render_notification(_record("Stored title", message), CATALOG)
        assert rendered.title == "Stored title"
        assert rendered.message == message
        assert rendered.structured is True


class TestLoadCatalog:
    def test_disabled_without_path(self):
        assert load_catalog("") is None

    def test_missing_file_is_disabled(self, tmp_path):
        assert load_catalog(str(tmp_path / "missing.json")) is None

    def test_loads_configured_file(self, tmp_path):
        path = tmp_path / "en.json"
        path.write_text(json.dumps({"notification": {"a": "b"}}), encoding="utf-8")
        catalog = load_catalog(str(path))
        assert catalog is not None
        assert catalog.resolve("a", {}) == "b"

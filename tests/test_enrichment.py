"""Tests for promoter/party enrichment and media slot resolution"""

import pytest

from contract_automation.services.enrichment import (
    MEDIA_SLOTS,
    EnrichmentService,
    ensure_valid_url,
    storage_public_url,
)
from contract_automation.utils.config import DEFAULT_PLACEHOLDER_URL, Settings

PLACEHOLDER = DEFAULT_PLACEHOLDER_URL
STORAGE = "https://proj.supabase.co/storage/v1/object/public/promoter-documents"


class FailingLookup:
    """Lookup whose every call fails, like an unreachable datastore"""

    def get_promoter(self, promoter_id):
        raise ConnectionError("datastore unreachable")

    def get_party(self, party_id):
        raise ConnectionError("datastore unreachable")


class EmptyLookup:

    def get_promoter(self, promoter_id):
        return None

    def get_party(self, party_id):
        return None


class TestEnsureValidUrl:

    @pytest.mark.parametrize("value", [
        "", "   ", None, "not a url", "ftp://files/x.png", "file:///tmp/x.png",
        "data:image/png;base64,iVBORw0KGgo=", "/relative/x.png", 42,
    ])
    def test_invalid_values_give_placeholder(self, value):
        assert ensure_valid_url(value) == PLACEHOLDER

    def test_valid_url_unchanged(self):
        url = "https://example.com/x.png"
        assert ensure_valid_url(url) == url

    def test_idempotent(self):
        for value in ["https://example.com/x.png", "", "not a url"]:
            once = ensure_valid_url(value)
            assert ensure_valid_url(once) == once

    def test_surrounding_whitespace_stripped(self):
        assert ensure_valid_url("  https://example.com/x.png ") == "https://example.com/x.png"

    def test_custom_placeholder(self):
        assert ensure_valid_url("", placeholder="https://cdn.example.com/blank.png") == \
            "https://cdn.example.com/blank.png"

    def test_storage_path_expanded(self):
        assert ensure_valid_url("prom-1/passport.png", storage_public_url=STORAGE) == \
            f"{STORAGE}/prom-1/passport.png"

    def test_storage_path_without_storage_url(self):
        assert ensure_valid_url("prom-1/passport.png") == PLACEHOLDER

    def test_storage_public_url(self):
        assert storage_public_url(Settings()) is None
        settings = Settings(supabase_url="https://proj.supabase.co/")
        assert storage_public_url(settings) == STORAGE


class TestEnrichmentService:

    def test_promoter_and_parties_merged(self, db, seeded_entities):
        data = {"job_title": "Analyst", **seeded_entities}
        result = EnrichmentService(db).enrich(data)
        enriched = result.data

        assert result.warnings == []
        assert enriched["promoter_name_en"] == "Ada Lovelace"
        assert enriched["promoter_id_card_number"] == "ID-778"
        assert enriched["id_card_number"] == "ID-778"
        assert enriched["first_party_name_en"] == "Acme LLC"
        assert enriched["first_party_crn"] == "CR-1001"
        assert enriched["second_party_name_en"] == "Globex SAOC"
        assert enriched["job_title"] == "Analyst"

    def test_media_slots_from_entities(self, db, seeded_entities):
        enriched = EnrichmentService(db).enrich(dict(seeded_entities)).data

        assert enriched["first_party_logo"] == "https://files.example.com/acme.png"
        assert enriched["stored_first_party_logo_url"] == "https://files.example.com/acme.png"
        assert enriched["promoter_id_card_url"] == "https://files.example.com/prom-1/id.png"
        assert enriched["stored_promoter_id_card_image_url"] == "https://files.example.com/prom-1/id.png"
        # stored value was not a URL, empty logo
        assert enriched["promoter_passport_url"] == PLACEHOLDER
        assert enriched["second_party_logo"] == PLACEHOLDER

    def test_input_not_mutated(self, db, seeded_entities):
        data = dict(seeded_entities)
        EnrichmentService(db).enrich(data)
        assert data == seeded_entities

    def test_caller_values_kept(self, db):
        data = {"header_logo": "https://cdn.example.com/header.png", "work_location": "Muscat"}
        enriched = EnrichmentService(db).enrich(data).data
        assert enriched["header_logo"] == "https://cdn.example.com/header.png"
        assert enriched["location_en"] == "Muscat"
        assert enriched["location_ar"] == "Muscat"

    def test_failing_lookup_still_resolves_every_slot(self):
        data = {"promoter_id": "prom-1", "first_party_id": "party-1", "second_party_id": "party-2"}
        result = EnrichmentService(FailingLookup()).enrich(data)

        assert len(result.warnings) == 3
        for slot in MEDIA_SLOTS:
            assert result.data[slot] == PLACEHOLDER, slot
        assert "promoter_name_en" not in result.data

    def test_missing_entities_warn(self):
        result = EnrichmentService(EmptyLookup()).enrich({"promoter_id": "ghost"})
        assert result.warnings == ["Promoter ghost not found"]

    def test_no_references_no_lookups(self):
        result = EnrichmentService(FailingLookup()).enrich({"client_name": "Acme"})
        assert result.warnings == []
        assert set(MEDIA_SLOTS) <= set(result.data)

    def test_storage_paths_expanded(self):
        service = EnrichmentService(EmptyLookup(), storage_url=STORAGE)
        enriched = service.enrich({"stamp": "stamps/acme.png"}).data
        assert enriched["stamp"] == f"{STORAGE}/stamps/acme.png"

    def test_configured_placeholder(self, monkeypatch):
        monkeypatch.setenv("PLACEHOLDER_IMAGE_URL", "https://cdn.example.com/blank.png")
        enriched = EnrichmentService(EmptyLookup()).enrich({}).data
        assert enriched["qr_code"] == "https://cdn.example.com/blank.png"

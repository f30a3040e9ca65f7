"""Enrichment service: merges promoter/party data into contract payloads and
guarantees every media slot carries a usable image URL."""

import logging
import re
from typing import Any, Dict, List, Optional, Tuple

from pydantic import AnyHttpUrl, TypeAdapter, ValidationError

from contract_automation.db.base import DatabaseInterface
from contract_automation.models.contract import EnrichmentResult
from contract_automation.models.entity import Party, Promoter
from contract_automation.utils.config import DEFAULT_PLACEHOLDER_URL, Settings, get_settings

logger = logging.getLogger(__name__)

_HTTP_URL = TypeAdapter(AnyHttpUrl)

# Bare storage object path, e.g. 'abc/123_passport.png'
_STORAGE_PATH = re.compile(r"^/*[\w\-./]+\.(png|jpe?g|gif|webp|svg|pdf)$", re.IGNORECASE)

# Promoter attribute -> payload keys it is copied to
PROMOTER_FIELD_ALIASES: Dict[str, Tuple[str, ...]] = {
    "name_en": ("promoter_name_en",),
    "name_ar": ("promoter_name_ar",),
    "id_card_number": ("promoter_id_card_number", "id_card_number"),
    "passport_number": ("promoter_passport_number", "passport_number"),
    "id_card_url": ("promoter_id_card_url",),
    "passport_url": ("promoter_passport_url",),
    "email": ("promoter_email",),
    "mobile_number": ("promoter_mobile_number",),
    "employer_id": ("promoter_employer_id",),
}

# Party attribute -> payload keys, formatted with the side ('first_party', 'second_party')
PARTY_FIELD_ALIASES: Dict[str, Tuple[str, ...]] = {
    "name_en": ("{side}_name_en",),
    "name_ar": ("{side}_name_ar",),
    "crn": ("{side}_crn",),
    "logo_url": ("{side}_logo", "{side}_logo_url"),
}

PARTY_SIDES = ("first_party", "second_party")

MEDIA_SLOTS: Tuple[str, ...] = (
    # header/footer
    "header_logo", "footer_logo", "header_image", "footer_image",
    # logos
    "company_logo", "company_logo_url",
    "first_party_logo", "first_party_logo_url",
    "second_party_logo", "second_party_logo_url",
    "party_1_logo", "party_2_logo",
    # signatures
    "first_party_signature", "second_party_signature",
    "party_1_signature", "party_2_signature",
    "witness_signature", "signature_1", "signature_2",
    # stamps and seals
    "stamp_image", "stamp", "official_stamp", "seal",
    # codes
    "qr_code", "barcode",
    # background
    "watermark", "background_image",
    # promoter documents
    "promoter_id_card_url", "promoter_passport_url", "id_card_url", "passport_url",
    "stored_promoter_id_card_image_url", "stored_promoter_passport_image_url",
    "stored_first_party_logo_url", "stored_second_party_logo_url",
) + tuple(f"image_{i}" for i in range(1, 13))

# Slots filled from other keys, first non-empty wins. Others read their own key.
MEDIA_SLOT_SOURCES: Dict[str, Tuple[str, ...]] = {
    "id_card_url": ("promoter_id_card_url", "id_card_url"),
    "passport_url": ("promoter_passport_url", "passport_url"),
    "stored_promoter_id_card_image_url": ("promoter_id_card_url", "id_card_url"),
    "stored_promoter_passport_image_url": ("promoter_passport_url", "passport_url"),
    "stored_first_party_logo_url": ("first_party_logo_url", "first_party_logo"),
    "stored_second_party_logo_url": ("second_party_logo_url", "second_party_logo"),
}


def _is_blank(value: Any) -> bool:
    return value is None or (isinstance(value, str) and not value.strip())


def ensure_valid_url(
    value: Any,
    placeholder: str = DEFAULT_PLACEHOLDER_URL,
    storage_public_url: Optional[str] = None,
) -> str:
    """Return value if it is an absolute http(s) URL, else the placeholder.

    Only http and https count as absolute here: the rendering service fetches
    every media slot over HTTP, so ftp:, file: or data: URLs are replaced too.

    With storage_public_url set, a bare storage object path is first
    expanded to its public URL. Applying this to its own output is a no-op.
    """
    if _is_blank(value) or not isinstance(value, str):
        return placeholder

    candidate = value.strip()
    if storage_public_url and "://" not in candidate and _STORAGE_PATH.match(candidate):
        candidate = f"{storage_public_url.rstrip('/')}/{candidate.lstrip('/')}"

    if any(ch.isspace() for ch in candidate):
        return placeholder

    try:
        _HTTP_URL.validate_python(candidate)
    except ValidationError:
        return placeholder
    return candidate


def storage_public_url(settings: Settings) -> Optional[str]:
    """Public object URL prefix for the configured storage bucket."""
    if not settings.supabase_url:
        return None
    return f"{settings.supabase_url.rstrip('/')}/storage/v1/object/public/{settings.storage_bucket}"


class EnrichmentService:
    """Best-effort enrichment: lookups that fail or miss leave fields absent."""

    def __init__(
        self,
        lookup: DatabaseInterface,
        placeholder_url: Optional[str] = None,
        storage_url: Optional[str] = None,
    ):
        settings = get_settings()
        self.lookup = lookup
        self.placeholder_url = placeholder_url or settings.placeholder_image_url
        self.storage_url = storage_url if storage_url is not None else storage_public_url(settings)

    def enrich(self, contract_data: Dict[str, Any]) -> EnrichmentResult:
        data = dict(contract_data)
        warnings: List[str] = []

        promoter_id = data.get("promoter_id")
        if promoter_id:
            promoter = self._fetch_promoter(promoter_id, warnings)
            if promoter:
                self._copy_aliases(data, promoter.model_dump(), PROMOTER_FIELD_ALIASES)

        for side in PARTY_SIDES:
            party_id = data.get(f"{side}_id")
            if not party_id:
                continue
            party = self._fetch_party(side, party_id, warnings)
            if party:
                aliases = {
                    attr: tuple(key.format(side=side) for key in keys)
                    for attr, keys in PARTY_FIELD_ALIASES.items()
                }
                self._copy_aliases(data, party.model_dump(), aliases)

        data["location_en"] = data.get("location_en") or data.get("work_location") or ""
        data["location_ar"] = data.get("location_ar") or data.get("work_location") or ""

        self._resolve_media_slots(data)
        return EnrichmentResult(data=data, warnings=warnings)

    def _fetch_promoter(self, promoter_id: str, warnings: List[str]) -> Optional[Promoter]:
        try:
            row = self.lookup.get_promoter(str(promoter_id))
        except Exception as e:
            logger.warning(f"Promoter lookup failed for {promoter_id}: {e}")
            warnings.append(f"Promoter {promoter_id} could not be loaded")
            return None
        if not row:
            logger.warning(f"Promoter not found: {promoter_id}")
            warnings.append(f"Promoter {promoter_id} not found")
            return None
        return Promoter.model_validate(row)

    def _fetch_party(self, side: str, party_id: str, warnings: List[str]) -> Optional[Party]:
        label = side.replace("_", " ")
        try:
            row = self.lookup.get_party(str(party_id))
        except Exception as e:
            logger.warning(f"Party lookup failed for {label} {party_id}: {e}")
            warnings.append(f"{label.capitalize()} {party_id} could not be loaded")
            return None
        if not row:
            logger.warning(f"Party not found for {label}: {party_id}")
            warnings.append(f"{label.capitalize()} {party_id} not found")
            return None
        return Party.model_validate(row)

    @staticmethod
    def _copy_aliases(data: dict, source: dict, aliases: Dict[str, Tuple[str, ...]]) -> None:
        for attr, keys in aliases.items():
            value = source.get(attr)
            if value is None:
                continue
            for key in keys:
                data[key] = value

    def _resolve_media_slots(self, data: dict) -> None:
        # Read sources before any slot is overwritten
        snapshot = dict(data)
        fallbacks = 0
        for slot in MEDIA_SLOTS:
            raw = next(
                (snapshot.get(k) for k in MEDIA_SLOT_SOURCES.get(slot, (slot,)) if not _is_blank(snapshot.get(k))),
                None,
            )
            resolved = ensure_valid_url(raw, self.placeholder_url, self.storage_url)
            if raw is not None and resolved == self.placeholder_url and raw != self.placeholder_url:
                logger.debug(f"Media slot '{slot}' replaced with placeholder: {raw!r}")
            if resolved == self.placeholder_url:
                fallbacks += 1
            data[slot] = resolved
        logger.debug(f"Resolved {len(MEDIA_SLOTS)} media slots, {fallbacks} using placeholder")

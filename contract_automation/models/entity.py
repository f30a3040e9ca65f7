"""Related entities read during enrichment"""

from typing import Optional

from pydantic import BaseModel


class Promoter(BaseModel):
    """Promoter (employee) record, read-only"""
    id: str
    name_en: Optional[str] = None
    name_ar: Optional[str] = None
    id_card_number: Optional[str] = None
    passport_number: Optional[str] = None
    id_card_url: Optional[str] = None
    passport_url: Optional[str] = None
    email: Optional[str] = None
    mobile_number: Optional[str] = None
    employer_id: Optional[str] = None


class Party(BaseModel):
    """Contracting party (employer, client), read-only"""
    id: str
    name_en: Optional[str] = None
    name_ar: Optional[str] = None
    crn: Optional[str] = None              # commercial registration number
    logo_url: Optional[str] = None

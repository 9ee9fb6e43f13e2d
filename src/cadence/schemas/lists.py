"""Response schemas for the two remote DNC list lookups."""

from datetime import datetime

from pydantic import BaseModel, ConfigDict, Field, StrictBool


class BlacklistLookupResponse(BaseModel):
    """Company blacklist lookup body."""

    model_config = ConfigDict(populate_by_name=True, extra="ignore")

    is_on_company_blacklist: StrictBool = Field(alias="isOnCompanyBlacklist")


class NationalContactStatus(BaseModel):
    model_config = ConfigDict(populate_by_name=True, extra="ignore")

    can_contact: StrictBool = Field(alias="canContact")
    reason: str | None = None
    expiry_date_utc: datetime | None = Field(default=None, alias="expiryDateUTC")


class NationalLookupResponse(BaseModel):
    """National registry lookup body.

    ``canContact`` false means the number must not be contacted.
    """

    model_config = ConfigDict(populate_by_name=True, extra="ignore")

    contact_status: NationalContactStatus = Field(alias="contactStatus")

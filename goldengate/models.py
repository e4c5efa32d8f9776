from enum import Enum
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field


class LeadType(str, Enum):
    BUYER = "buyer"
    SELLER = "seller"
    INVESTOR = "investor"
    NEWSLETTER = "newsletter"
    CONTACT = "contact"


class LeadStatus(str, Enum):
    NEW = "new"
    CONTACTED = "contacted"
    QUALIFIED = "qualified"
    CONVERTED = "converted"
    LOST = "lost"


class InvestorStatus(str, Enum):
    ACTIVE = "active"
    PENDING = "pending"
    INACTIVE = "inactive"


class AccreditedStatus(str, Enum):
    VERIFIED = "verified"
    SELF_CERTIFIED = "self-certified"
    PENDING = "pending"
    NOT_ACCREDITED = "not-accredited"


class InvestmentCapacity(str, Enum):
    RANGE_100K_500K = "100k-500k"
    RANGE_500K_1M = "500k-1m"
    RANGE_1M_3M = "1m-3m"
    RANGE_3M_5M = "3m-5m"
    RANGE_5M_PLUS = "5m-plus"


class InvestmentInterest(str, Enum):
    FIX_FLIP = "fix-flip"
    BUY_HOLD = "buy-hold"
    DEVELOPMENT = "development"
    SYNDICATION = "syndication"


class DocumentType(str, Enum):
    CPA_LETTER = "cpa_letter"
    TAX_RETURN = "tax_return"
    BANK_STATEMENT = "bank_statement"
    BROKERAGE_STATEMENT = "brokerage_statement"
    THIRD_PARTY = "third_party"
    OTHER = "other"


class DocumentStatus(str, Enum):
    PENDING = "pending"
    UNDER_REVIEW = "under_review"
    APPROVED = "approved"
    REJECTED = "rejected"


class ProspectusStatus(str, Enum):
    DRAFT = "draft"
    OPEN = "open"
    SUBSCRIBED = "subscribed"
    IN_PROGRESS = "in-progress"
    COMPLETED = "completed"
    CLOSED = "closed"


class LOIStatus(str, Enum):
    DRAFT = "draft"
    SUBMITTED = "submitted"
    REVIEW = "review"
    APPROVED = "approved"
    REJECTED = "rejected"
    WITHDRAWN = "withdrawn"
    CONVERTED = "converted"
    COUNTERSIGNED = "countersigned"


# An investor may hold at most one LOI in these states per prospectus
ACTIVE_LOI_STATUSES = (
    LOIStatus.SUBMITTED.value,
    LOIStatus.REVIEW.value,
    LOIStatus.APPROVED.value,
    LOIStatus.COUNTERSIGNED.value,
)

# LOIs whose amount counts as committed capital
INVESTED_LOI_STATUSES = (LOIStatus.APPROVED.value, LOIStatus.COUNTERSIGNED.value)


def values(enum_cls) -> list[str]:
    return [member.value for member in enum_cls]


class LOISubmission(BaseModel):
    """JSON body of an investor's Letter of Intent.

    Fields are optional at the schema level so that missing values get the
    handler's specific 400 messages; wrongly typed values are rejected with
    a generic 400 by the validation handler.
    """

    model_config = ConfigDict(populate_by_name=True)

    prospectus_slug: Optional[str] = Field(None, alias="prospectusSlug")
    investment_amount: Optional[float] = Field(None, alias="investmentAmount")
    funding_source: Optional[str] = Field(None, alias="fundingSource")
    investor_type: Optional[str] = Field(None, alias="investorType")
    signature_image: Optional[str] = Field(None, alias="signatureImage")
    printed_name: Optional[str] = Field(None, alias="printedName")
    investor_notes: Optional[str] = Field(None, alias="investorNotes")
    accredited_status: bool = Field(False, alias="accreditedStatus")
    risk_acknowledgment: bool = Field(False, alias="riskAcknowledgment")
    terms_accepted: bool = Field(False, alias="termsAccepted")


class CountersignSubmission(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    loi_id: Optional[str] = Field(None, alias="loiId")
    signer_name: Optional[str] = Field(None, alias="signerName")
    signer_email: Optional[str] = Field(None, alias="signerEmail")
    signer_title: Optional[str] = Field(None, alias="signerTitle")
    signature_image: Optional[str] = Field(None, alias="signatureImage")

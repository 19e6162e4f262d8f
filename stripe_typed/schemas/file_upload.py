"""File Upload Schemas — identity documents, dispute evidence and other files."""

from enum import Enum
from typing import Literal

from stripe_typed.core.codec import Timestamp, WireModel


class FilePurpose(str, Enum):
    BUSINESS_LOGO = "business_logo"
    DISPUTE_EVIDENCE = "dispute_evidence"
    IDENTITY_DOCUMENT = "identity_document"
    INCORPORATION_ARTICLE = "incorporation_article"
    INCORPORATION_DOCUMENT = "incorporation_document"
    PAYMENT_PROVIDER_TRANSFER = "payment_provider_transfer"
    PRODUCT_FEED = "product_feed"


class FileUploadInput(WireModel):
    """Form part sent next to the file itself."""
    purpose: FilePurpose


class FileUpload(WireModel):
    id: str
    object: Literal["file_upload"] = "file_upload"
    created: Timestamp
    purpose: FilePurpose
    size: int
    type: str | None = None
    url: str | None = None

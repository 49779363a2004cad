import random
from datetime import datetime, timezone
from typing import Any, Literal

from pydantic import BaseModel, ConfigDict, EmailStr, Field
from pydantic.alias_generators import to_camel


def get_timestamp_ms() -> int:
    return int(datetime.now(timezone.utc).timestamp() * 1000)


def generate_record_id(prefix: str, timestamp: int) -> str:
    return f"{prefix}:{timestamp}:{random.randrange(1_000_000)}"


class RemixFlowModel(BaseModel):
    """Base for every stored record and API schema; camelCase on the wire."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


# Users

class SocialLinks(RemixFlowModel):
    twitter: str | None = None
    instagram: str | None = None
    website: str | None = None


# Shared profile properties
class UserBase(RemixFlowModel):
    display_name: str | None = Field(default=None, max_length=255)
    profile_image: str | None = None
    bio: str | None = None
    email: EmailStr | None = Field(default=None, max_length=255)
    social_links: SocialLinks | None = None


# Properties to receive via API on creation
class UserCreate(UserBase):
    wallet_address: str = Field(min_length=1, max_length=255)


# Properties to receive via API on update, all are optional
class UserUpdate(UserBase):
    pass


class User(UserBase):
    user_id: str = Field(min_length=1)
    wallet_address: str = Field(min_length=1)
    created_at: int
    updated_at: int


# Original content

class OriginalContent(RemixFlowModel):
    content_id: str = Field(min_length=1)
    ipfs_hash: str = Field(min_length=1)
    owner_address: str = Field(min_length=1)
    title: str = Field(min_length=1)
    description: str = ""
    royalty_percentage: float = Field(default=50, ge=0, le=100)
    content_type: str = Field(min_length=1)
    created_at: int
    updated_at: int
    tags: list[str] = Field(default_factory=list)
    metadata: dict[str, Any] = Field(default_factory=dict)


class ContentUpdate(RemixFlowModel):
    ipfs_hash: str | None = Field(default=None, min_length=1)
    title: str | None = Field(default=None, min_length=1)
    description: str | None = None
    royalty_percentage: float | None = Field(default=None, ge=0, le=100)
    content_type: str | None = Field(default=None, min_length=1)
    tags: list[str] | None = None
    metadata: dict[str, Any] | None = None


# Remixes

MediaType = Literal["audio", "video"]


class Remix(RemixFlowModel):
    remix_id: str = Field(min_length=1)
    original_content_id: str = Field(min_length=1)
    creator_address: str = Field(min_length=1)
    ipfs_hash: str = Field(min_length=1)
    original_ipfs_hash: str = Field(min_length=1)
    title: str = Field(min_length=1)
    description: str = ""
    transformation: str = Field(min_length=1)
    transformation_params: dict[str, Any] = Field(default_factory=dict)
    content_type: str = Field(min_length=1)
    creation_timestamp: int
    onchain_tx_hash: str = ""
    royalty_distribution_tx_hash: str = ""
    token_id: int | None = None
    plays: int = 0
    likes: int = 0
    shares: int = 0
    earnings: float = 0
    tags: list[str] = Field(default_factory=list)
    metadata: dict[str, Any] = Field(default_factory=dict)


class RemixUpdate(RemixFlowModel):
    title: str | None = Field(default=None, min_length=1)
    description: str | None = None
    onchain_tx_hash: str | None = None
    royalty_distribution_tx_hash: str | None = None
    token_id: int | None = None
    plays: int | None = Field(default=None, ge=0)
    likes: int | None = Field(default=None, ge=0)
    shares: int | None = Field(default=None, ge=0)
    earnings: float | None = Field(default=None, ge=0)
    tags: list[str] | None = None
    metadata: dict[str, Any] | None = None


class RemixesPublic(RemixFlowModel):
    data: list[Remix]
    count: int


# Royalty splits

class SplitInput(RemixFlowModel):
    recipient: str = Field(min_length=1)
    percentage: float = Field(gt=0, le=100)


class PaymentRecord(RemixFlowModel):
    tx_hash: str
    amount: float
    timestamp: int


class RoyaltySplit(RemixFlowModel):
    split_id: str = Field(min_length=1)
    remix_id: str = Field(min_length=1)
    recipient_address: str = Field(min_length=1)
    percentage: float = Field(gt=0, le=100)
    amount_paid: float = Field(default=0, ge=0)
    created_at: int
    last_paid_at: int | None = None
    transactions: list[PaymentRecord] = Field(default_factory=list)


class RoyaltyInfo(RemixFlowModel):
    splits: list[RoyaltySplit]
    total_paid: float
    last_distribution: int | None = None


class DistributeRequest(RemixFlowModel):
    remix_id: str = Field(min_length=1)
    amount: float


class DistributeResponse(RemixFlowModel):
    success: bool = True
    tx_hash: str
    remix_id: str
    amount: float


# Provenance

ZERO_ADDRESS = "0x0000000000000000000000000000000000000000"


class ProvenanceCertificate(RemixFlowModel):
    token_id: int
    creator: str = ZERO_ADDRESS
    original_content_hash: str = ""
    remix_content_hash: str = ""
    transformation: str = ""
    token_uri: str = Field(default="", alias="tokenURI")
    metadata: dict[str, Any] = Field(default_factory=dict)


# Record factories

def new_user(user_in: UserCreate) -> User:
    timestamp = get_timestamp_ms()
    return User.model_validate(
        {
            **user_in.model_dump(exclude={"wallet_address"}),
            "user_id": user_in.wallet_address,
            "wallet_address": user_in.wallet_address,
            "created_at": timestamp,
            "updated_at": timestamp,
        }
    )


def new_content(
    *,
    ipfs_hash: str,
    owner_address: str,
    title: str,
    content_type: str,
    description: str | None = None,
    royalty_percentage: float | None = None,
    tags: list[str] | None = None,
    metadata: dict[str, Any] | None = None,
) -> OriginalContent:
    timestamp = get_timestamp_ms()
    return OriginalContent(
        content_id=generate_record_id("content", timestamp),
        ipfs_hash=ipfs_hash,
        owner_address=owner_address,
        title=title,
        description=description or "",
        royalty_percentage=50 if royalty_percentage is None else royalty_percentage,
        content_type=content_type,
        created_at=timestamp,
        updated_at=timestamp,
        tags=tags or [],
        metadata=metadata or {},
    )


def new_remix(
    *,
    original_content_id: str,
    creator_address: str,
    ipfs_hash: str,
    original_ipfs_hash: str,
    title: str,
    transformation: str,
    content_type: str,
    transformation_params: dict[str, Any] | None = None,
    description: str | None = None,
    tags: list[str] | None = None,
    metadata: dict[str, Any] | None = None,
) -> Remix:
    timestamp = get_timestamp_ms()
    return Remix(
        remix_id=generate_record_id("remix", timestamp),
        original_content_id=original_content_id,
        creator_address=creator_address,
        ipfs_hash=ipfs_hash,
        original_ipfs_hash=original_ipfs_hash,
        title=title,
        description=description or "",
        transformation=transformation,
        transformation_params=transformation_params or {},
        content_type=content_type,
        creation_timestamp=timestamp,
        tags=tags or [],
        metadata=metadata or {},
    )


def split_id_for(remix_id: str, recipient_address: str) -> str:
    return f"split:{remix_id}:{recipient_address}"


def new_split(*, remix_id: str, recipient_address: str, percentage: float) -> RoyaltySplit:
    return RoyaltySplit(
        split_id=split_id_for(remix_id, recipient_address),
        remix_id=remix_id,
        recipient_address=recipient_address,
        percentage=percentage,
        amount_paid=0,
        created_at=get_timestamp_ms(),
    )

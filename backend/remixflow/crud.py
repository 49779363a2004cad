import json
from typing import TypeVar

from redis import Redis

from remixflow.models import (
    ContentUpdate,
    OriginalContent,
    PaymentRecord,
    Remix,
    RemixFlowModel,
    RemixUpdate,
    RoyaltySplit,
    User,
    UserUpdate,
    get_timestamp_ms,
)

M = TypeVar("M", bound=RemixFlowModel)

REMIX_INDEX_KEY = "remixes"


def user_key(user_id: str) -> str:
    return f"user:{user_id}"


def user_content_key(user_id: str) -> str:
    return f"user:{user_id}:content"


def user_remixes_key(user_id: str) -> str:
    return f"user:{user_id}:remixes"


def content_remixes_key(content_id: str) -> str:
    return f"{content_id}:remixes"


def remix_splits_key(remix_id: str) -> str:
    return f"{remix_id}:splits"


def recipient_splits_key(recipient_address: str) -> str:
    return f"recipient:{recipient_address}:splits"


def token_key(token_id: int) -> str:
    return f"token:{token_id}"


def provenance_tokens_key(original_ipfs_hash: str) -> str:
    return f"provenance:{original_ipfs_hash}:tokens"


def _encode(record: RemixFlowModel) -> dict[str, str]:
    # Each field is JSON-encoded so lists, maps and numbers survive the flat hash.
    data = record.model_dump(mode="json", by_alias=True, exclude_none=True)
    return {field: json.dumps(value) for field, value in data.items()}


def _decode(model: type[M], raw: dict[str, str]) -> M | None:
    if not raw:
        return None
    return model.model_validate({field: json.loads(value) for field, value in raw.items()})


def _load(store: Redis, key: str, model: type[M]) -> M | None:
    return _decode(model, store.hgetall(key))


def _save(store: Redis, key: str, record: RemixFlowModel) -> None:
    # Replace the whole hash so fields cleared by an update do not linger.
    pipe = store.pipeline()
    pipe.delete(key)
    pipe.hset(key, mapping=_encode(record))
    pipe.execute()


def _merge(record: M, changes: dict, **extra) -> M:
    return type(record).model_validate({**record.model_dump(), **changes, **extra})


def _members(store: Redis, key: str) -> list[str]:
    return sorted(store.smembers(key))


# Users

def get_user(*, store: Redis, user_id: str) -> User | None:
    return _load(store, user_key(user_id), User)


def create_user(*, store: Redis, user: User) -> User:
    _save(store, user_key(user.user_id), user)
    return user


def update_user(*, store: Redis, user_id: str, user_in: UserUpdate) -> User | None:
    db_user = get_user(store=store, user_id=user_id)
    if not db_user:
        return None
    updated = _merge(db_user, user_in.model_dump(exclude_unset=True), updated_at=get_timestamp_ms())
    _save(store, user_key(user_id), updated)
    return updated


def get_user_remixes(*, store: Redis, user_id: str) -> list[str]:
    return _members(store, user_remixes_key(user_id))


def get_user_content(*, store: Redis, user_id: str) -> list[str]:
    return _members(store, user_content_key(user_id))


# Original content

def get_content(*, store: Redis, content_id: str) -> OriginalContent | None:
    return _load(store, content_id, OriginalContent)


def create_content(*, store: Redis, content: OriginalContent) -> OriginalContent:
    _save(store, content.content_id, content)
    store.sadd(user_content_key(content.owner_address), content.content_id)
    return content


def update_content(
    *, store: Redis, content_id: str, content_in: ContentUpdate
) -> OriginalContent | None:
    db_content = get_content(store=store, content_id=content_id)
    if not db_content:
        return None
    updated = _merge(
        db_content, content_in.model_dump(exclude_unset=True), updated_at=get_timestamp_ms()
    )
    _save(store, content_id, updated)
    return updated


def get_content_remixes(*, store: Redis, content_id: str) -> list[str]:
    return _members(store, content_remixes_key(content_id))


# Remixes

def _index_token(store: Redis, remix: Remix) -> None:
    if remix.token_id is None:
        return
    store.set(token_key(remix.token_id), remix.remix_id)
    store.sadd(provenance_tokens_key(remix.original_ipfs_hash), remix.token_id)


def _unindex_token(store: Redis, remix: Remix) -> None:
    if remix.token_id is None:
        return
    store.delete(token_key(remix.token_id))
    store.srem(provenance_tokens_key(remix.original_ipfs_hash), remix.token_id)


def get_remix(*, store: Redis, remix_id: str) -> Remix | None:
    return _load(store, remix_id, Remix)


def create_remix(*, store: Redis, remix: Remix) -> Remix:
    _save(store, remix.remix_id, remix)
    store.sadd(user_remixes_key(remix.creator_address), remix.remix_id)
    store.sadd(content_remixes_key(remix.original_content_id), remix.remix_id)
    store.zadd(REMIX_INDEX_KEY, {remix.remix_id: remix.creation_timestamp})
    _index_token(store, remix)
    return remix


def update_remix(*, store: Redis, remix_id: str, remix_in: RemixUpdate) -> Remix | None:
    db_remix = get_remix(store=store, remix_id=remix_id)
    if not db_remix:
        return None
    updated = _merge(db_remix, remix_in.model_dump(exclude_unset=True))
    _save(store, remix_id, updated)
    if updated.token_id != db_remix.token_id:
        _unindex_token(store, db_remix)
        _index_token(store, updated)
    return updated


def list_remixes(*, store: Redis, limit: int = 10, offset: int = 0) -> tuple[list[Remix], int]:
    """Newest remixes first; returns the page and the total number of remixes."""
    remix_ids = store.zrevrange(REMIX_INDEX_KEY, offset, offset + limit - 1) if limit > 0 else []
    remixes = []
    for remix_id in remix_ids:
        remix = get_remix(store=store, remix_id=remix_id)
        if remix:
            remixes.append(remix)
    return remixes, store.zcard(REMIX_INDEX_KEY)


def get_remix_by_token(*, store: Redis, token_id: int) -> Remix | None:
    remix_id = store.get(token_key(token_id))
    if not remix_id:
        return None
    return get_remix(store=store, remix_id=remix_id)


def get_tokens_by_original_hash(*, store: Redis, original_ipfs_hash: str) -> list[int]:
    return sorted(int(token) for token in store.smembers(provenance_tokens_key(original_ipfs_hash)))


# Royalty splits

def get_royalty_split(*, store: Redis, split_id: str) -> RoyaltySplit | None:
    return _load(store, split_id, RoyaltySplit)


def create_royalty_split(*, store: Redis, split: RoyaltySplit) -> RoyaltySplit:
    _save(store, split.split_id, split)
    store.sadd(remix_splits_key(split.remix_id), split.split_id)
    store.sadd(recipient_splits_key(split.recipient_address), split.split_id)
    return split


def update_royalty_split(*, store: Redis, split_id: str, changes: dict) -> RoyaltySplit | None:
    db_split = get_royalty_split(store=store, split_id=split_id)
    if not db_split:
        return None
    updated = _merge(db_split, changes, split_id=split_id)
    _save(store, split_id, updated)
    return updated


def record_payment(
    *, store: Redis, split_id: str, amount: float, tx_hash: str
) -> RoyaltySplit | None:
    db_split = get_royalty_split(store=store, split_id=split_id)
    if not db_split:
        return None
    timestamp = get_timestamp_ms()
    payment = PaymentRecord(tx_hash=tx_hash, amount=amount, timestamp=timestamp)
    return update_royalty_split(
        store=store,
        split_id=split_id,
        changes={
            "transactions": [*db_split.transactions, payment],
            "amount_paid": db_split.amount_paid + amount,
            "last_paid_at": timestamp,
        },
    )


def _load_splits(store: Redis, split_ids: list[str]) -> list[RoyaltySplit]:
    splits = []
    for split_id in split_ids:
        split = get_royalty_split(store=store, split_id=split_id)
        if split:
            splits.append(split)
    return splits


def get_remix_royalty_splits(*, store: Redis, remix_id: str) -> list[RoyaltySplit]:
    return _load_splits(store, _members(store, remix_splits_key(remix_id)))


def get_recipient_royalty_splits(*, store: Redis, recipient_address: str) -> list[RoyaltySplit]:
    return _load_splits(store, _members(store, recipient_splits_key(recipient_address)))

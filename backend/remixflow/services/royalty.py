import logging
from decimal import Decimal

from redis import Redis
from web3 import Web3

from remixflow import crud
from remixflow.models import RoyaltyInfo, SplitInput, new_split
from remixflow.services.chain import get_chain_client, to_checksum, write_or_simulate

logger = logging.getLogger(__name__)

DEFAULT_ORIGINAL_CREATOR_PERCENTAGE = 50.0


class RoyaltySplitError(ValueError):
    pass


def calculate_royalty_splits(
    original_creator: str, custom_splits: list[SplitInput] | None = None
) -> list[SplitInput]:
    """
    The original creator gets 50% unless the remixer supplies their own
    splits, which replace the default entirely.
    """
    splits = list(custom_splits or []) or [
        SplitInput(recipient=original_creator, percentage=DEFAULT_ORIGINAL_CREATOR_PERCENTAGE)
    ]

    recipients = [split.recipient for split in splits]
    if len(set(recipients)) != len(recipients):
        raise RoyaltySplitError("Each royalty recipient may appear only once")

    total_percentage = sum(split.percentage for split in splits)
    if total_percentage > 100:
        raise RoyaltySplitError("Total royalty percentage exceeds 100%")
    return splits


def register_remix_royalties(
    *, store: Redis, remix_id: str, creator: str, splits: list[SplitInput]
) -> str:
    """Registers the splits with the splitter contract, then stores one split record per recipient."""

    def send() -> str:
        client = get_chain_client()
        tx_hash, _ = client.write(
            client.royalty_splitter,
            "registerRemix",
            remix_id,
            to_checksum(creator),
            # Contract shares are basis points.
            [(to_checksum(split.recipient), round(split.percentage * 100)) for split in splits],
        )
        return tx_hash

    tx_hash = write_or_simulate("registerRemix", send)

    for split in splits:
        crud.create_royalty_split(
            store=store,
            split=new_split(
                remix_id=remix_id,
                recipient_address=split.recipient,
                percentage=split.percentage,
            ),
        )
    logger.info("Registered %s royalty splits for %s (tx %s)", len(splits), remix_id, tx_hash)
    return tx_hash


def distribute_royalties(*, store: Redis, remix_id: str, amount: float) -> str:
    """Pays `amount` ETH into the splitter and records each recipient's share."""

    def send() -> str:
        client = get_chain_client()
        tx_hash, _ = client.write(
            client.royalty_splitter,
            "splitRoyalties",
            remix_id,
            value=Web3.to_wei(Decimal(str(amount)), "ether"),
        )
        return tx_hash

    tx_hash = write_or_simulate("splitRoyalties", send)

    for split in crud.get_remix_royalty_splits(store=store, remix_id=remix_id):
        payment = amount * split.percentage / 100
        crud.record_payment(store=store, split_id=split.split_id, amount=payment, tx_hash=tx_hash)
    return tx_hash


def get_royalty_info(*, store: Redis, remix_id: str) -> RoyaltyInfo:
    splits = crud.get_remix_royalty_splits(store=store, remix_id=remix_id)
    paid_at = [split.last_paid_at for split in splits if split.last_paid_at]
    return RoyaltyInfo(
        splits=splits,
        total_paid=sum(split.amount_paid for split in splits),
        last_distribution=max(paid_at) if paid_at else None,
    )

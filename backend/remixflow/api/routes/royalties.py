import logging
from typing import Any

from fastapi import APIRouter, HTTPException

from remixflow import crud
from remixflow.api.deps import StoreDep
from remixflow.models import DistributeRequest, DistributeResponse, RoyaltyInfo, RoyaltySplit
from remixflow.services.chain import BlockchainError
from remixflow.services.royalty import distribute_royalties, get_royalty_info

router = APIRouter()
logger = logging.getLogger(__name__)


@router.post("/distribute", response_model=DistributeResponse)
def distribute(*, store: StoreDep, distribution: DistributeRequest) -> Any:
    if distribution.amount <= 0:
        raise HTTPException(status_code=400, detail="Amount must be greater than zero")

    if not crud.get_remix(store=store, remix_id=distribution.remix_id):
        raise HTTPException(status_code=404, detail="Remix not found")

    try:
        tx_hash = distribute_royalties(
            store=store, remix_id=distribution.remix_id, amount=distribution.amount
        )
    except BlockchainError as exc:
        logger.error("Error distributing royalties for %s: %s", distribution.remix_id, exc)
        raise HTTPException(status_code=500, detail="Failed to distribute royalties") from exc

    return DistributeResponse(
        tx_hash=tx_hash, remix_id=distribution.remix_id, amount=distribution.amount
    )


@router.get("/recipient/{address}", response_model=list[RoyaltySplit])
def read_recipient_splits(address: str, store: StoreDep) -> Any:
    return crud.get_recipient_royalty_splits(store=store, recipient_address=address)


@router.get("/{remix_id}", response_model=RoyaltyInfo)
def read_royalty_info(remix_id: str, store: StoreDep) -> Any:
    if not crud.get_remix(store=store, remix_id=remix_id):
        raise HTTPException(status_code=404, detail="Remix not found")
    return get_royalty_info(store=store, remix_id=remix_id)

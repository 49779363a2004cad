from typing import Any

from fastapi import APIRouter, HTTPException

from remixflow import crud
from remixflow.api.deps import StoreDep
from remixflow.models import User, UserCreate, UserUpdate, new_user

router = APIRouter()


@router.post("/", response_model=User, status_code=201)
def create_user(*, store: StoreDep, user_in: UserCreate) -> Any:
    if crud.get_user(store=store, user_id=user_in.wallet_address):
        raise HTTPException(status_code=409, detail="User already exists")
    return crud.create_user(store=store, user=new_user(user_in))


@router.get("/{user_id}", response_model=User)
def read_user(user_id: str, store: StoreDep) -> Any:
    user = crud.get_user(store=store, user_id=user_id)
    if not user:
        raise HTTPException(status_code=404, detail="User not found")
    return user


@router.put("/{user_id}", response_model=User)
def update_user(*, user_id: str, store: StoreDep, user_in: UserUpdate) -> Any:
    user = crud.update_user(store=store, user_id=user_id, user_in=user_in)
    if not user:
        raise HTTPException(status_code=404, detail="User not found")
    return user


@router.get("/{user_id}/remixes", response_model=list[str])
def read_user_remixes(user_id: str, store: StoreDep) -> Any:
    return crud.get_user_remixes(store=store, user_id=user_id)


@router.get("/{user_id}/content", response_model=list[str])
def read_user_content(user_id: str, store: StoreDep) -> Any:
    return crud.get_user_content(store=store, user_id=user_id)

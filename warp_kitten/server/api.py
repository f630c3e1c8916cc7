# -*- coding: utf-8 -*-
from __future__ import annotations

from typing import List, Optional

from fastapi import APIRouter, Depends, HTTPException, Request, Response
from pydantic import BaseModel, ConfigDict, Field

from .store import InventoryStore, PowerStore, StoreError


def get_powers(request: Request) -> PowerStore:
    return request.app.state.powers  # type: ignore[attr-defined]


def get_store(request: Request) -> InventoryStore:
    return request.app.state.store  # type: ignore[attr-defined]


class ApiModel(BaseModel):
    # camelCase on the wire, snake_case in Python
    model_config = ConfigDict(populate_by_name=True)


class WarpPower(ApiModel):
    id: int
    name: str
    description: str
    power_level: int = Field(alias="powerLevel")


class CreateWarpPower(ApiModel):
    name: str = Field(min_length=1)
    description: str
    power_level: int = Field(0, alias="powerLevel")


class InventoryEntry(ApiModel):
    id: int
    user_id: int = Field(alias="userId")
    item_id: int = Field(alias="itemId")
    quantity: int


class InventoryItem(ApiModel):
    id: int
    item_id: int = Field(alias="itemId")
    item_name: str = Field(alias="itemName")
    item_image: str = Field(alias="itemImage")
    item_value: int = Field(alias="itemValue")
    quantity: int


class User(ApiModel):
    id: int
    name: str
    credit: int
    inventories: List[InventoryEntry] = Field(default_factory=list)


class UserIn(ApiModel):
    id: Optional[int] = None
    name: str = Field(min_length=1, max_length=100)
    credit: int = 0


class Item(ApiModel):
    id: int
    name: str
    image: str
    value: int


class ItemIn(ApiModel):
    id: Optional[int] = None
    name: str = Field(min_length=1, max_length=100)
    image: str = Field("", max_length=500)
    value: int = 0


router = APIRouter(prefix="/api")


def _check_body_id(path_id: int, body_id: Optional[int]) -> None:
    if body_id is not None and body_id != path_id:
        raise HTTPException(status_code=400, detail=f"id mismatch: path {path_id}, body {body_id}")


# ----------------- powers -----------------


@router.get("/powers", response_model=List[WarpPower])
def list_powers(powers: PowerStore = Depends(get_powers)):
    return powers.list()


@router.get("/powers/{power_id}", response_model=WarpPower)
def get_power(power_id: int, powers: PowerStore = Depends(get_powers)):
    power = powers.get(power_id)
    if power is None:
        raise HTTPException(status_code=404, detail=f"power not found: {power_id}")
    return power


@router.post("/powers", response_model=WarpPower, status_code=201)
def create_power(body: CreateWarpPower, response: Response, powers: PowerStore = Depends(get_powers)):
    power = powers.create(body.name, body.description, body.power_level)
    response.headers["Location"] = f"/api/powers/{power['id']}"
    return power


# ----------------- users -----------------


@router.get("/users", response_model=List[User])
def list_users(store: InventoryStore = Depends(get_store)):
    return store.list_users()


@router.get("/users/{user_id}", response_model=User)
def get_user(user_id: int, store: InventoryStore = Depends(get_store)):
    user = store.get_user(user_id)
    if user is None:
        raise HTTPException(status_code=404, detail=f"user not found: {user_id}")
    return user


@router.get("/users/{user_id}/inventory", response_model=List[InventoryItem])
def get_user_inventory(user_id: int, store: InventoryStore = Depends(get_store)):
    rows = store.user_inventory(user_id)
    if rows is None:
        raise HTTPException(status_code=404, detail=f"user not found: {user_id}")
    return rows


@router.post("/users", response_model=User, status_code=201)
def create_user(body: UserIn, response: Response, store: InventoryStore = Depends(get_store)):
    try:
        user = store.create_user(body.name, body.credit)
    except StoreError as e:
        raise HTTPException(status_code=400, detail=str(e))
    response.headers["Location"] = f"/api/users/{user['id']}"
    return user


@router.put("/users/{user_id}", status_code=204)
def update_user(user_id: int, body: UserIn, store: InventoryStore = Depends(get_store)):
    _check_body_id(user_id, body.id)
    try:
        found = store.update_user(user_id, body.name, body.credit)
    except StoreError as e:
        raise HTTPException(status_code=400, detail=str(e))
    if not found:
        raise HTTPException(status_code=404, detail=f"user not found: {user_id}")
    return Response(status_code=204)


@router.delete("/users/{user_id}", status_code=204)
def delete_user(user_id: int, store: InventoryStore = Depends(get_store)):
    if not store.delete_user(user_id):
        raise HTTPException(status_code=404, detail=f"user not found: {user_id}")
    return Response(status_code=204)


# ----------------- items -----------------


@router.get("/items", response_model=List[Item])
def list_items(store: InventoryStore = Depends(get_store)):
    return store.list_items()


@router.get("/items/{item_id}", response_model=Item)
def get_item(item_id: int, store: InventoryStore = Depends(get_store)):
    item = store.get_item(item_id)
    if item is None:
        raise HTTPException(status_code=404, detail=f"item not found: {item_id}")
    return item


@router.post("/items", response_model=Item, status_code=201)
def create_item(body: ItemIn, response: Response, store: InventoryStore = Depends(get_store)):
    try:
        item = store.create_item(body.name, body.image, body.value)
    except StoreError as e:
        raise HTTPException(status_code=400, detail=str(e))
    response.headers["Location"] = f"/api/items/{item['id']}"
    return item


@router.put("/items/{item_id}", status_code=204)
def update_item(item_id: int, body: ItemIn, store: InventoryStore = Depends(get_store)):
    _check_body_id(item_id, body.id)
    try:
        found = store.update_item(item_id, body.name, body.image, body.value)
    except StoreError as e:
        raise HTTPException(status_code=400, detail=str(e))
    if not found:
        raise HTTPException(status_code=404, detail=f"item not found: {item_id}")
    return Response(status_code=204)


@router.delete("/items/{item_id}", status_code=204)
def delete_item(item_id: int, store: InventoryStore = Depends(get_store)):
    if not store.delete_item(item_id):
        raise HTTPException(status_code=404, detail=f"item not found: {item_id}")
    return Response(status_code=204)

from __future__ import annotations

from fastapi import APIRouter, Depends, HTTPException
from pydantic import BaseModel

from ..db import StoreHandle
from ..errors import ConflictError, NotFoundError, StoreBusyError, StoreIOError
from ..logs import LogContext
from ..services.store_svc import (
    add_restaurant,
    delete_restaurant,
    list_restaurants,
    update_restaurant,
)
from .base import get_store

router = APIRouter()


class RestaurantAdd(BaseModel):
    name: str
    category: str


class RestaurantDelete(BaseModel):
    name: str


class RestaurantUpdate(BaseModel):
    original_name: str
    name: str
    category: str


def store_error(e: StoreIOError) -> HTTPException:
    code = 503 if isinstance(e, StoreBusyError) else 500
    return HTTPException(status_code=code, detail=str(e))


@router.get("/api/restaurants/list")
def api_restaurants_list(store: StoreHandle = Depends(get_store)):
    try:
        return {"items": [r.to_dict() for r in list_restaurants(store)]}
    except StoreIOError as e:
        raise store_error(e)


@router.post("/api/restaurants/add", status_code=201)
def api_restaurants_add(body: RestaurantAdd, store: StoreHandle = Depends(get_store)):
    log = LogContext("RESTAURANT_ADD")
    log.set_payload(body.model_dump())
    try:
        add_restaurant(store, body.name, body.category, log)
        log.write("OK")
        return {"message": "ok"}
    except ConflictError as ce:
        log.write("CONFLICT", str(ce))
        raise HTTPException(status_code=409, detail=str(ce))
    except ValueError as ve:
        log.write("ERROR", str(ve))
        raise HTTPException(status_code=400, detail=str(ve))
    except StoreIOError as e:
        log.write("ERROR", str(e))
        raise store_error(e)


@router.post("/api/restaurants/delete")
def api_restaurants_delete(body: RestaurantDelete, store: StoreHandle = Depends(get_store)):
    log = LogContext("RESTAURANT_DELETE")
    log.set_payload(body.model_dump())
    try:
        delete_restaurant(store, body.name, log)
        log.write("OK")
        return {"message": "ok"}
    except StoreIOError as e:
        log.write("ERROR", str(e))
        raise store_error(e)


@router.post("/api/restaurants/update")
def api_restaurants_update(body: RestaurantUpdate, store: StoreHandle = Depends(get_store)):
    log = LogContext("RESTAURANT_UPDATE")
    log.set_payload(body.model_dump())
    try:
        update_restaurant(store, body.original_name, body.name, body.category, log)
        log.write("OK")
        return {"message": "ok"}
    except ConflictError as ce:
        log.write("CONFLICT", str(ce))
        raise HTTPException(status_code=409, detail=str(ce))
    except NotFoundError as nf:
        log.write("NOT_FOUND", str(nf))
        raise HTTPException(status_code=404, detail=str(nf))
    except ValueError as ve:
        log.write("ERROR", str(ve))
        raise HTTPException(status_code=400, detail=str(ve))
    except StoreIOError as e:
        log.write("ERROR", str(e))
        raise store_error(e)

from __future__ import annotations

from fastapi import APIRouter, Depends, HTTPException, Query
from pydantic import BaseModel

from ..db import StoreHandle
from ..errors import EmptyError, StoreIOError
from ..services.selector_svc import pick, roll
from ..services.store_svc import recent_history
from .base import get_settings, get_store
from .restaurants import store_error

router = APIRouter()


class RollBody(BaseModel):
    category: str


@router.post("/api/lunch/roll")
def api_lunch_roll(
    body: RollBody,
    store: StoreHandle = Depends(get_store),
    settings: dict = Depends(get_settings),
):
    try:
        if settings["avoid_repeats"]:
            chosen = roll(store, body.category, history_limit=settings["history_limit"])
        else:
            chosen = pick(store, body.category)
        return chosen.to_dict()
    except EmptyError as ee:
        raise HTTPException(status_code=404, detail=str(ee))
    except ValueError as ve:
        raise HTTPException(status_code=400, detail=str(ve))
    except StoreIOError as e:
        raise store_error(e)


@router.get("/api/lunch/history")
def api_lunch_history(limit: int = Query(14, ge=1, le=500), store: StoreHandle = Depends(get_store)):
    try:
        return {"items": [h.to_dict() for h in recent_history(store, limit)]}
    except StoreIOError as e:
        raise store_error(e)

from fastapi import APIRouter, Request

from .. import __version__

router = APIRouter()


def get_store(request: Request):
    return request.app.state.store


def get_settings(request: Request) -> dict:
    return request.app.state.settings


@router.get("/health")
def health():
    return {"status": "ok"}


@router.get("/version")
def version():
    return {"app": "lunch-api", "version": __version__}

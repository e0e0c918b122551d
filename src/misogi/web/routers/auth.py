"""Sign-in and sign-out routes."""

import logging

from fastapi import APIRouter, Request
from fastapi.responses import JSONResponse, RedirectResponse

from ...exceptions import SyncError
from .tracker import get_controller

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/auth", tags=["auth"])


@router.post("/sign-in")
async def sign_in(request: Request):
    """Start sign-in, following the provider's redirect if it has one."""
    controller = get_controller(request)
    try:
        url = await controller.sign_in()
    except SyncError as e:
        return JSONResponse({"error": str(e)}, status_code=400)

    return RedirectResponse(url=url or "/", status_code=303)


@router.get("/callback")
async def sign_in_callback(request: Request, code: str | None = None):
    """Redirect target of the provider's sign-in flow."""
    controller = get_controller(request)
    if code:
        try:
            await controller.complete_sign_in(code)
        except SyncError as e:
            return JSONResponse({"error": str(e)}, status_code=400)
        except Exception as e:
            logger.warning("Sign-in could not be completed: %s", e)
            return RedirectResponse(url="/?error=sign_in_failed", status_code=302)

    return RedirectResponse(url="/", status_code=302)


@router.post("/sign-out")
async def sign_out(request: Request):
    """Sign out; logged data stays on screen."""
    controller = get_controller(request)
    try:
        await controller.sign_out()
    except SyncError as e:
        return JSONResponse({"error": str(e)}, status_code=400)

    return RedirectResponse(url="/", status_code=303)

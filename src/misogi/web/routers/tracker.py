"""Tracker page and rep logging routes."""

from fastapi import APIRouter, Form, Request
from fastapi.responses import HTMLResponse, JSONResponse, RedirectResponse

from ...models.log import EXERCISES, QUICK_ADD_AMOUNTS
from ...services.sync import SyncController
from ...utils.dates import format_date, is_future, is_valid_key, parse_date, shift_date, today

router = APIRouter(tags=["tracker"])


def get_templates(request: Request):
    """Get templates from app state."""
    return request.app.state.templates


def get_controller(request: Request) -> SyncController:
    """Get the sync controller from app state."""
    return request.app.state.controller


def date_label(key: str) -> str:
    """Short label such as "Mon, Jan 5"."""
    d = parse_date(key)
    return f"{d.strftime('%a, %b')} {d.day}"


def resolve_date(value: str | None) -> str:
    """Turn a requested date into a log key, never later than today."""
    if not value or not is_valid_key(value) or is_future(value):
        return format_date(today())
    return value


@router.get("/", response_class=HTMLResponse)
async def tracker_page(request: Request, date: str | None = None):
    """Main tracker page for the selected date."""
    templates = get_templates(request)
    controller = get_controller(request)

    selected = resolve_date(date)
    next_day = shift_date(selected, 1)

    return templates.TemplateResponse(
        request,
        "tracker.html",
        {
            "controller": controller,
            "requires_sign_in": controller.requires_sign_in,
            "session": controller.session,
            "summary": controller.summary(selected),
            "selected": selected,
            "selected_label": date_label(selected),
            "is_today": selected == format_date(today()),
            "previous_day": shift_date(selected, -1),
            "next_day": None if is_future(next_day) else next_day,
            "exercises": EXERCISES,
            "quick_amounts": QUICK_ADD_AMOUNTS,
        },
    )


@router.post("/logs/{day}/{exercise}")
async def add_reps_form(
    request: Request,
    day: str,
    exercise: str,
    amount: str = Form(""),
):
    """Add reps from the tracker page, then go back to it."""
    controller = get_controller(request)
    if not controller.requires_sign_in:
        await controller.add_custom_amount(exercise, amount, day)
    return RedirectResponse(url=f"/?date={resolve_date(day)}", status_code=303)


@router.post("/api/logs/{day}/{exercise}")
async def add_reps_api(
    request: Request,
    day: str,
    exercise: str,
    amount: str = Form(""),
):
    """Add reps and return the updated day totals."""
    controller = get_controller(request)
    if controller.requires_sign_in:
        return JSONResponse({"error": "Sign in required"}, status_code=401)

    added = await controller.add_custom_amount(exercise, amount, day)
    if not added:
        return {"status": "ignored"}

    return {
        "status": "added",
        "date": day,
        "day": controller.day_totals(day).to_dict(),
    }


@router.get("/api/summary")
async def summary_api(request: Request, date: str | None = None):
    """Progress summary for a date as JSON."""
    controller = get_controller(request)
    if controller.requires_sign_in:
        return JSONResponse({"error": "Sign in required"}, status_code=401)

    return controller.summary(resolve_date(date)).to_dict()

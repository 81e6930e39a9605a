"""
API v1 routes.

Defines REST endpoints for the account registration API.
"""

import json
import logging
from typing import Any
from urllib.parse import quote

from fastapi import APIRouter, Body, Depends, status
from fastapi.responses import JSONResponse, RedirectResponse, Response

from src.api.dependencies import get_registration_service, get_session_context
from src.api.models import AlertModel, RegistrationResult
from src.domain.models import SessionContext
from src.domain.registration import RegistrationService

logger = logging.getLogger(__name__)

router = APIRouter(tags=["v1"])

ALERTS_COOKIE = "alerts"


@router.post(
    "/register",
    response_model=RegistrationResult,
    responses={
        303: {"description": "Browser request: redirect, alerts in the 'alerts' cookie"},
        422: {"description": "Body is not a JSON object"},
    },
    summary="Register a new account",
    description="Submit registration fields. Public registration requires a captcha answer; "
    "admin registration (admin=true) requires a logged-in session and its CSRF token. "
    "Set ajaxMode=true to receive a JSON result instead of a redirect.",
)
async def register(
    form: dict[str, Any] = Body(...),
    service: RegistrationService = Depends(get_registration_service),
    session: SessionContext = Depends(get_session_context),
) -> Response:
    """
    Register a new account.

    - **user_name**, **display_name**, **email**, **password**, **passwordc**: always required
    - **title**, **csrf_token**, **add_groups**, **skip_activation**: admin mode
    - **captcha**: public mode
    """
    outcome = service.register(form, session)
    alerts = [AlertModel(severity=alert.severity, message=alert.message) for alert in outcome.alerts]

    if str(form.get("ajaxMode", "")).lower() == "true":
        result = RegistrationResult(errors=outcome.errors, successes=outcome.successes, alerts=alerts)
        return JSONResponse(content=result.model_dump())

    response = RedirectResponse(outcome.redirect, status_code=status.HTTP_303_SEE_OTHER)
    response.set_cookie(
        ALERTS_COOKIE,
        quote(json.dumps([alert.model_dump() for alert in alerts]), safe=""),
        httponly=True,
        samesite="lax",
    )
    return response

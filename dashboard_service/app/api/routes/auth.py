from fastapi import APIRouter, Depends, Query, Request
from fastapi.responses import JSONResponse, Response

from app.api.dependencies import get_authenticate, get_session_auth, see_other
from app.auth.application.use_cases.authenticate import AuthenticateUseCase
from app.auth.infrastructure.session.session_auth import SessionAuth
from app.shared.domain.navigation import Redirect, is_local_path

router = APIRouter(tags=["auth"])


@router.get("/login", response_model=None)
async def login_page(
    request: Request,
    callback_url: str = Query("/dashboard", alias="callbackUrl"),
    session_auth: SessionAuth = Depends(get_session_auth),
) -> Response | dict[str, str]:
    location = session_auth.authorized(request.url.path, request.session)
    if location is not None:
        return see_other(location)
    return {"redirectTo": callback_url if is_local_path(callback_url) else "/dashboard"}


@router.post("/login")
async def login(
    request: Request,
    authenticate: AuthenticateUseCase = Depends(get_authenticate),
) -> Response:
    form = await request.form()
    try:
        message = await authenticate.execute(form, request.session)
    except Redirect as exc:
        return see_other(exc.location)
    return JSONResponse({"message": message}, status_code=400)


@router.post("/logout")
async def logout(
    request: Request,
    session_auth: SessionAuth = Depends(get_session_auth),
) -> Response:
    try:
        session_auth.sign_out(request.session)
    except Redirect as exc:
        return see_other(exc.location)

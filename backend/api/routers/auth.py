# -*- coding: utf-8 -*-

from __future__ import annotations

import logging

from fastapi import APIRouter, Depends, Request
from fastapi.responses import JSONResponse

from api.auth.domain import resolve_expected_domain
from api.auth.envelope import fail_response, ok
from api.auth.session_cookie import clear_session_cookie, set_session_cookie
from api.deps import get_deps
from api.schemas.auth import NonceResponse, SiweVerifyRequest, SiweVerifyResponse
from signin.errors import FailureReason

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/auth", tags=["auth"])

GENERIC_FAILURE = "VerificationFailed"


def _client_error(deps, reason: FailureReason) -> str:
    if deps.settings.siwe_expose_failure_reason:
        return str(reason)
    return GENERIC_FAILURE


@router.get("/nonce", response_model=NonceResponse)
def auth_nonce(request: Request, deps=Depends(get_deps)):
    cookies = deps.session_cookies
    # Same browser session keeps its key, so the new nonce replaces the old one.
    session_id = cookies.session_id_or_none(request.cookies.get(cookies.cookie_name)) or cookies.new_session_id()

    record = deps.issuer.issue(session_id)

    resp = JSONResponse(record.to_dict(), headers={"Cache-Control": "no-store"})
    set_session_cookie(deps.settings, resp, cookies.encode(session_id), deps.settings.siwe_nonce_ttl_seconds)
    return resp


async def _verify_request(request: Request) -> SiweVerifyRequest:
    # Unparseable bodies become an empty request so they surface as MissingInput.
    try:
        return SiweVerifyRequest.model_validate(await request.json())
    except ValueError:
        return SiweVerifyRequest()


@router.post(
    "/siwe",
    response_model=SiweVerifyResponse,
    responses={400: {"model": SiweVerifyResponse}, 401: {"model": SiweVerifyResponse}},
)
def auth_siwe(
    request: Request,
    req: SiweVerifyRequest = Depends(_verify_request),
    deps=Depends(get_deps),
):
    message = req.message or ""
    signature = (req.signature or "").strip()
    cookies = deps.session_cookies
    session_id = cookies.session_id_or_none(request.cookies.get(cookies.cookie_name))

    if not message or not signature or not session_id:
        logger.warning(
            "SIWE rejected: %s (message=%s signature=%s session=%s)",
            FailureReason.MISSING_INPUT,
            bool(message),
            bool(signature),
            bool(session_id),
        )
        return fail_response(400, FailureReason.MISSING_INPUT)

    record = deps.nonce_store.get(session_id)
    result = deps.verifier.verify(
        message,
        signature,
        record,
        expected_domain=resolve_expected_domain(request, deps.settings.siwe_domain),
        expected_chain_id=deps.settings.siwe_chain_id,
    )
    if not result.accepted:
        if result.failure_reason is FailureReason.MALFORMED_MESSAGE:
            return fail_response(400, FailureReason.MALFORMED_MESSAGE)
        return fail_response(401, _client_error(deps, result.failure_reason))

    deps.nonce_store.discard(session_id, record)
    resp = JSONResponse(result.to_dict())
    clear_session_cookie(deps.settings, resp)
    return resp


@router.post("/logout")
def auth_logout(request: Request, deps=Depends(get_deps)):
    cookies = deps.session_cookies
    session_id = cookies.session_id_or_none(request.cookies.get(cookies.cookie_name))
    if session_id:
        try:
            deps.nonce_store.discard(session_id)
        except Exception:
            logger.exception("logout: could not discard nonce record")

    resp = JSONResponse(ok())
    clear_session_cookie(deps.settings, resp)
    return resp

from fastapi import FastAPI, Request, Response
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from starlette.concurrency import run_in_threadpool
from starlette.exceptions import HTTPException as StarletteHTTPException

from app.api.schemas import (
    CreateCardRequest,
    UpdateCardRequest,
    card_to_json,
    parse_card_body,
    parse_scan_request,
)
from app.imaging.exceptions import InvalidImageError
from app.logging.logger import Log
from app.processor.exceptions import (
    CardNotFoundError,
    InvalidCardRequestError,
    InvalidScanRequestError,
    StorageDisabledError,
)
from app.processor.processor import CardScanProcessor

USER_HEADER = "X-User-Id"
ORGANIZATION_HEADER = "X-Organization-Id"


def create_app(processor: CardScanProcessor) -> FastAPI:
    """Build the HTTP app: POST /scan plus the /business-cards collection.

    Callers are identified by the X-User-Id and X-Organization-Id headers,
    which an authenticating proxy in front of this service sets.
    """
    app = FastAPI(title="cardscan")

    @app.exception_handler(StarletteHTTPException)
    async def http_error(_request: Request, exc: StarletteHTTPException) -> JSONResponse:
        if exc.status_code == 405:
            return JSONResponse({"error": "Method not allowed"}, status_code=405)
        return JSONResponse({"error": exc.detail}, status_code=exc.status_code)

    @app.exception_handler(RequestValidationError)
    async def validation_error(_request: Request, exc: RequestValidationError) -> JSONResponse:
        Log.warning(f"Rejected request: {exc.errors()}")
        return JSONResponse({"error": "Invalid request parameters"}, status_code=400)

    @app.exception_handler(InvalidCardRequestError)
    async def invalid_card(_request: Request, exc: InvalidCardRequestError) -> JSONResponse:
        return JSONResponse({"error": str(exc)}, status_code=400)

    @app.exception_handler(CardNotFoundError)
    async def card_not_found(_request: Request, exc: CardNotFoundError) -> JSONResponse:
        return JSONResponse({"error": str(exc)}, status_code=404)

    @app.exception_handler(StorageDisabledError)
    async def storage_disabled(_request: Request, exc: StorageDisabledError) -> JSONResponse:
        return JSONResponse({"error": str(exc)}, status_code=503)

    @app.get("/health")
    def health() -> dict[str, str]:
        return {"status": "ok"}

    @app.post("/scan")
    async def scan(request: Request) -> JSONResponse:
        try:
            image = parse_scan_request(await request.body())
            result = await run_in_threadpool(processor.process, image)
        except (InvalidScanRequestError, InvalidImageError) as exc:
            Log.warning(f"Rejected scan request: {exc}")
            return JSONResponse({"error": str(exc)}, status_code=400)
        except Exception as exc:
            Log.error(f"Scan failed: {exc}")
            return JSONResponse(
                {"error": "Failed to process image", "message": str(exc)},
                status_code=500,
            )
        return JSONResponse(processor.response_body(result))

    @app.post("/business-cards")
    async def create_card(request: Request) -> JSONResponse:
        user_id, organization_id = _caller(request)
        body = parse_card_body(CreateCardRequest, await request.body())
        card = await run_in_threadpool(
            processor.create_card,
            user_id,
            organization_id,
            body.contact_fields(),
            image_url=body.image_url,
            extracted_data=body.extracted_data,
        )
        return JSONResponse(card_to_json(card), status_code=201)

    @app.get("/business-cards/mine")
    async def my_cards(request: Request) -> JSONResponse:
        user_id, _organization_id = _caller(request)
        cards = await run_in_threadpool(processor.cards_for_user, user_id)
        return JSONResponse([card_to_json(card) for card in cards])

    @app.get("/business-cards")
    async def organization_cards(request: Request) -> JSONResponse:
        _user_id, organization_id = _caller(request)
        if organization_id is None:
            return JSONResponse([])
        cards = await run_in_threadpool(processor.cards_for_organization, organization_id)
        return JSONResponse([card_to_json(card) for card in cards])

    @app.patch("/business-cards/{card_id}")
    async def update_card(card_id: int, request: Request) -> JSONResponse:
        user_id, _organization_id = _caller(request)
        body = parse_card_body(UpdateCardRequest, await request.body())
        card = await run_in_threadpool(processor.update_card, card_id, user_id, body.changes())
        return JSONResponse(card_to_json(card))

    @app.delete("/business-cards/{card_id}")
    async def delete_card(card_id: int, request: Request) -> Response:
        user_id, _organization_id = _caller(request)
        await run_in_threadpool(processor.delete_card, card_id, user_id)
        return Response(status_code=204)

    return app


def _caller(request: Request) -> tuple[int, int | None]:
    """Read the caller's user and organization IDs from the identity headers."""
    user_id = _header_id(request, USER_HEADER)
    if user_id is None:
        raise StarletteHTTPException(status_code=401, detail=f"Missing {USER_HEADER} header")
    return user_id, _header_id(request, ORGANIZATION_HEADER)


def _header_id(request: Request, name: str) -> int | None:
    raw = request.headers.get(name, "").strip()
    if not raw:
        return None
    try:
        return int(raw)
    except ValueError:
        raise StarletteHTTPException(
            status_code=400, detail=f"{name} must be an integer"
        ) from None

import json
from contextlib import asynccontextmanager
from fastapi import Depends, FastAPI, Request
from fastapi.responses import JSONResponse, Response
from starlette.concurrency import run_in_threadpool
from dotenv import load_dotenv

from app.config import settings
from app.formatters.dialogflow import error_payload
from app.fulfillment import InvalidRequestError, handle_fulfillment
from app.serpapi.client import SerpApiClient, ProviderDecodeError, ProviderTransportError
from app.obs.logger import log_event
from app.obs.middleware import CORSHeadersMiddleware, ObservabilityMiddleware

load_dotenv()


@asynccontextmanager
async def lifespan(app: FastAPI):
    # Startup
    log_event("startup", env=settings.APP_ENV, port=settings.PORT)
    if not settings.SERPAPI_API_KEY:
        log_event("serpapi_key_missing", level="WARNING")
    app.state.serpapi = SerpApiClient()

    yield

    # Shutdown
    app.state.serpapi.close()
    log_event("shutdown")


fastapi_app = FastAPI(
    title="Flight Search Fulfillment Webhook",
    version="1.0.0",
    lifespan=lifespan
)


def get_search_client(request: Request) -> SerpApiClient:
    return request.app.state.serpapi


@fastapi_app.get("/health")
async def health():
    return {"status": "healthy", "service": "flight-search-webhook"}


@fastapi_app.get("/metrics")
async def metrics():
    from app.obs.metrics import get_metrics_snapshot
    return get_metrics_snapshot()


@fastapi_app.options("/")
async def preflight():
    return Response(status_code=204)


@fastapi_app.post("/")
async def fulfillment_webhook(request: Request, client: SerpApiClient = Depends(get_search_client)):
    raw = await request.body()
    try:
        payload = json.loads(raw)
    except ValueError as e:
        log_event("webhook_invalid_json", level="WARNING", error=str(e))
        return JSONResponse(error_payload("Invalid JSON"), status_code=400)

    try:
        reply = await run_in_threadpool(handle_fulfillment, payload, client)
    except InvalidRequestError as e:
        log_event("webhook_invalid_json", level="WARNING", error=str(e))
        return JSONResponse(error_payload("Invalid JSON"), status_code=400)
    except ProviderTransportError as e:
        log_event("webhook_provider_failure", level="ERROR", kind="transport", error=str(e))
        return JSONResponse(error_payload("Flight search request failed"), status_code=500)
    except ProviderDecodeError as e:
        log_event("webhook_provider_failure", level="ERROR", kind="decode", error=str(e))
        return JSONResponse(error_payload("Invalid flight search response"), status_code=500)

    return JSONResponse(reply)


# Apply middleware
app = ObservabilityMiddleware(CORSHeadersMiddleware(fastapi_app))


if __name__ == "__main__":
    import uvicorn
    uvicorn.run(
        "main:app",
        host="0.0.0.0",
        port=settings.PORT,
        log_level="info"
    )


from fastapi import Depends, FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from .di import orchestrator
from .exceptions import RelayError
from .logging_config import get_logger
from .models import ChatRequest, ChatResponse, ErrorResponse, HealthResponse
from .orchestrator import ChatOrchestrator

logger = get_logger(__name__)

app = FastAPI(title="HealthTalk API")

# The browser client is served from another origin
app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_methods=["*"],
    allow_headers=["*"],
)


@app.exception_handler(RelayError)
async def relay_error_handler(request: Request, exc: RelayError) -> JSONResponse:
    return JSONResponse(status_code=exc.status_code, content={"error": exc.message})


@app.exception_handler(RequestValidationError)
async def request_validation_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
    errors = exc.errors()
    first = errors[0] if errors else {}
    location = ".".join(str(p) for p in first.get("loc", ()) if p != "body")
    detail = first.get("msg", "invalid body")
    message = f"Invalid request body: {location}: {detail}" if location else f"Invalid request body: {detail}"
    logger.info("Rejected chat body (%s errors): %s", len(errors), message)
    return JSONResponse(status_code=400, content={"error": message})


@app.get("/api/health", response_model=HealthResponse)
async def health() -> HealthResponse:
    return HealthResponse()


@app.post(
    "/api/chat",
    response_model=ChatResponse,
    responses={400: {"model": ErrorResponse}, 500: {"model": ErrorResponse}},
)
async def chat_endpoint(
    req: ChatRequest,
    orch: ChatOrchestrator = Depends(orchestrator),
):
    reply = await orch.handle_chat(req.messages)
    return ChatResponse(reply=reply)


"""
curl -X POST http://localhost:5000/api/chat \
  -H "Content-Type: application/json" \
  -d '{"messages": [{"role": "user", "content": "How can someone prevent STIs?"}]}'
"""


if __name__ == "__main__":
    from .server import run

    run()

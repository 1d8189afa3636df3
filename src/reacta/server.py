"""FastAPI application exposing the agent over HTTP.

    GET  /  -> usage information
    POST /  -> {"query": "..."} (or legacy {"question": "..."}) -> {"answer": "..."}
"""

import logging

from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse, PlainTextResponse
from pydantic import BaseModel, StrictStr, ValidationError

from .agent import AgentLoop

logger = logging.getLogger(__name__)

WELCOME_MESSAGE = "Welcome to the Reacta reason/act agent!"
USAGE = 'Send a POST request with JSON body: { "query": "your question" }'
MISSING_QUERY = 'Bad Request: Missing "query" string.'


class QueryRequest(BaseModel):
    query: StrictStr | None = None
    question: StrictStr | None = None

    def text(self) -> str | None:
        """The query, falling back to the legacy ``question`` field."""
        return self.query if self.query is not None else self.question


def create_app(agent: AgentLoop) -> FastAPI:
    """Build the HTTP app around an agent loop."""
    app = FastAPI(title="Reacta", description="Reason/act agent API", version="0.1.0")

    @app.get("/")
    async def root() -> dict[str, str]:
        return {"message": WELCOME_MESSAGE, "usage": USAGE}

    @app.post("/")
    async def ask(request: Request):
        try:
            data = await request.json()
        except ValueError:
            return PlainTextResponse("Invalid JSON body", status_code=400)

        try:
            body = QueryRequest.model_validate(data)
        except ValidationError:
            return PlainTextResponse(MISSING_QUERY, status_code=400)

        query = body.text()
        if not query:
            return PlainTextResponse(MISSING_QUERY, status_code=400)

        try:
            result = await agent.run(query)
        except Exception as e:
            logger.exception("Agent error")
            return JSONResponse({"error": str(e) or type(e).__name__}, status_code=500)

        return {"answer": result.answer}

    return app

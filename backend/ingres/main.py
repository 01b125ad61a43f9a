#!/usr/bin/env python3
"""
FastAPI server for the Ingres Groundwater Chatbot
Serves the conversation API and, when present, the browser front end
"""

import logging
from typing import Optional

from fastapi import Depends, FastAPI, HTTPException, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import FileResponse, JSONResponse
from fastapi.staticfiles import StaticFiles
from pydantic import BaseModel

from ingres import __version__
from ingres.config import CORS_ORIGINS, FRONTEND_DIR, LANGUAGES, PORT, find_language
from ingres.conversation import Conversation
from ingres.dataset import GroundwaterDataset
from ingres.intelligent_qna.response_generator import render_html, speech_text

logger = logging.getLogger(__name__)

# -------------------- FastAPI App --------------------
app = FastAPI(
    title="Ingres Groundwater Chatbot",
    description="Conversational groundwater analysis, visualization and forecasting",
    version=__version__,
)

# -------------------- CORS --------------------
allow_credentials = CORS_ORIGINS != ["*"]
app.add_middleware(
    CORSMiddleware,
    allow_origins=CORS_ORIGINS,
    allow_credentials=allow_credentials,
    allow_methods=["*"],
    allow_headers=["*"],
)


# -------------------- Models --------------------
class ChatRequest(BaseModel):
    message: str
    language_code: Optional[str] = None


# -------------------- State --------------------
def get_dataset(request: Request) -> GroundwaterDataset:
    if getattr(request.app.state, "dataset", None) is None:
        request.app.state.dataset = GroundwaterDataset()
    return request.app.state.dataset


def get_conversation(request: Request, dataset: GroundwaterDataset = Depends(get_dataset)) -> Conversation:
    if getattr(request.app.state, "conversation", None) is None:
        request.app.state.conversation = Conversation(dataset)
    return request.app.state.conversation


def entry_view(entry) -> dict:
    """Transcript entry as sent to the browser, with render-ready fields."""
    view = entry.model_dump(by_alias=True)
    view["html"] = render_html(entry.text)
    view["speech_text"] = speech_text(entry)
    return view


# -------------------- API Routes --------------------
@app.get("/health")
def health_check():
    """Health check endpoint"""
    return {"status": "ok", "service": "ingres-chat", "version": __version__}


@app.get("/api/languages")
def list_languages():
    return [lang.model_dump() for lang in LANGUAGES]


@app.get("/api/districts")
def list_districts(dataset: GroundwaterDataset = Depends(get_dataset)):
    return dataset.districts


@app.get("/api/messages")
def list_messages(conversation: Conversation = Depends(get_conversation)):
    return {
        "state": conversation.state.value,
        "language": conversation.language.model_dump(),
        "entries": [entry_view(e) for e in conversation.transcript],
    }


@app.post("/api/chat")
async def chat_endpoint(body: ChatRequest, conversation: Conversation = Depends(get_conversation)):
    """Runs one chat turn and returns the transcript entries it produced"""
    message = body.message.strip()
    if not message:
        raise HTTPException(status_code=400, detail="Message cannot be empty")
    if conversation.busy:
        raise HTTPException(status_code=409, detail="Still answering the previous message")

    language = find_language(body.language_code) if body.language_code else None
    entries = await conversation.submit(message, language=language)
    logger.info(f"Turn complete. Entries appended: {len(entries)}")
    return {"entries": [entry_view(e) for e in entries]}


@app.post("/api/reset")
def reset_conversation(request: Request, dataset: GroundwaterDataset = Depends(get_dataset)):
    """Starts a new conversation holding only the greeting"""
    old = getattr(request.app.state, "conversation", None)
    if old is not None and old.busy:
        raise HTTPException(status_code=409, detail="Cannot reset while a message is being answered")
    client = old.client if old is not None else None
    request.app.state.conversation = Conversation(dataset, client=client)
    return {"entries": [entry_view(e) for e in request.app.state.conversation.transcript]}


# -------------------- FRONTEND SERVING --------------------
if FRONTEND_DIR.exists():
    app.mount("/static", StaticFiles(directory=str(FRONTEND_DIR)), name="static")

    @app.get("/", include_in_schema=False)
    async def serve_frontend():
        """Serve the main frontend page"""
        index_path = FRONTEND_DIR / "index.html"
        if index_path.exists():
            return FileResponse(str(index_path))
        return {"detail": "Frontend not found. Please check deployment paths."}
else:
    logger.warning("Frontend directory not found, only API endpoints will work.")


# -------------------- Global Exception Handler --------------------
@app.exception_handler(Exception)
async def global_exception_handler(request: Request, exc: Exception):
    logger.error(f"Unhandled exception: {exc}", exc_info=True)
    return JSONResponse(status_code=500, content={"detail": "An unexpected error occurred"})


# -------------------- Entry Point --------------------
def run():
    import uvicorn

    logging.basicConfig(
        level=logging.INFO,
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s"
    )
    logger.info("Starting Ingres chat server...")
    logger.info(f"Docs available at: http://localhost:{PORT}/docs")
    uvicorn.run(app, host="0.0.0.0", port=PORT, log_level="info")


if __name__ == "__main__":
    run()

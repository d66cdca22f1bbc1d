"""HTTP front end.

Serves the browser page and the endpoints it talks to. The browser does its
own speech recognition and synthesis; it posts the transcript to
``/command`` and gets back what to say and what to open afterwards. Remote
devices without browser speech can post WAV audio to ``/voice`` instead,
which is transcribed with Whisper before dispatch.
"""

from datetime import datetime
from pathlib import Path
from typing import Any, Dict, Optional

from fastapi import FastAPI, File, HTTPException, Query, UploadFile
from fastapi.concurrency import run_in_threadpool
from fastapi.responses import FileResponse, JSONResponse
from pydantic import BaseModel

from .actions import Action
from .assistant import NO_SPEECH_REPLY
from .config import Settings, load_settings
from .errors import RecognitionError
from .handlers import HandlerContext, greeting_for
from .protocols import Clock
from .recognizer import WhisperTranscriber
from .router import CommandRouter, default_router

STATIC_DIR = Path(__file__).parent / "static"
WAV_TYPES = ("audio/wav", "audio/x-wav", "audio/wave")


class CommandRequest(BaseModel):
    transcript: str


def _reply(transcript: str, action: Optional[Action]) -> Dict[str, Any]:
    if action is None:
        return {"transcript": transcript, "intent": None, "speech": NO_SPEECH_REPLY, "open_url": None}
    return {"transcript": transcript, **action.to_dict()}


def create_app(
    settings: Optional[Settings] = None,
    router: Optional[CommandRouter] = None,
    transcriber: Optional[WhisperTranscriber] = None,
    clock: Clock = datetime.now,
) -> FastAPI:
    settings = settings or load_settings()
    router = router or default_router(HandlerContext(settings=settings, clock=clock))
    transcriber = transcriber or WhisperTranscriber(settings.whisper_model, settings.language)

    app = FastAPI(title="Zara Voice API")
    app.state.last_transcript = ""

    @app.get("/")
    async def index():
        return FileResponse(STATIC_DIR / "index.html")

    @app.get("/greeting")
    async def greeting(hour: Optional[int] = Query(default=None, ge=0, le=23)):
        """Time-of-day greeting, for the browser's hour if it sends one."""
        if hour is None:
            hour = clock().hour
        return JSONResponse(content={"speech": greeting_for(hour)})

    @app.post("/command")
    async def command(request: CommandRequest):
        transcript = request.transcript.strip()
        if not transcript:
            raise HTTPException(status_code=422, detail="Transcript must not be empty")
        app.state.last_transcript = transcript
        return JSONResponse(content=_reply(transcript, router.route(transcript)))

    @app.post("/voice")
    async def receive_voice(file: UploadFile = File(...)):
        """Receive a WAV audio file, transcribe it, route it and return the action."""
        if file.content_type not in WAV_TYPES:
            raise HTTPException(status_code=400, detail="Only WAV audio is supported")
        content = await file.read()
        try:
            text = await run_in_threadpool(transcriber.transcribe, content)
        except RecognitionError as exc:
            raise HTTPException(status_code=502, detail=str(exc)) from exc
        app.state.last_transcript = text
        action = router.route(text) if text else None
        return JSONResponse(content=_reply(text, action))

    @app.get("/last_transcript")
    async def get_last_transcript():
        return JSONResponse(content={"last_transcript": app.state.last_transcript})

    return app

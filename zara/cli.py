"""CLI entry point for zara.

Subcommands:
    serve   - run the HTTP front end (browser page + API) with uvicorn
    listen  - run the assistant locally: microphone, Whisper, Coqui TTS
    say     - dispatch a typed transcript and print the resulting action
"""

import argparse
import asyncio
import json
import logging
import sys
from typing import Optional, Sequence

from .assistant import State, VoiceAssistant
from .config import Settings, load_settings
from .handlers import HandlerContext
from .opener import BrowserOpener
from .router import default_router


def build_parser(settings: Settings) -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="zara", description="Voice command assistant")
    parser.add_argument(
        "--log-level", default=settings.log_level, help=f"Logging level (default: {settings.log_level})"
    )
    sub = parser.add_subparsers(dest="command", required=True)

    serve = sub.add_parser("serve", help="Run the browser front end")
    serve.add_argument("--host", default=settings.host, help=f"Bind address (default: {settings.host})")
    serve.add_argument("--port", type=int, default=settings.port, help=f"Port (default: {settings.port})")

    listen = sub.add_parser("listen", help="Listen on the local microphone")
    listen.add_argument(
        "--wake-word",
        action="store_true",
        help=f"Start a listen cycle on the wake word ({settings.wake_word!r}) instead of Enter",
    )

    say = sub.add_parser("say", help="Dispatch a typed transcript")
    say.add_argument("text", nargs="+", help="Transcript to dispatch")
    return parser


def _show_state(state: State) -> None:
    if state is State.LISTENING:
        print("Listening...", flush=True)


async def _listen(settings: Settings, use_wake_word: bool) -> None:
    from .recognizer import WakeWordTrigger, WhisperRecognizer, WhisperTranscriber
    from .voice_output import CoquiSpeaker

    assistant = VoiceAssistant(
        router=default_router(HandlerContext(settings=settings)),
        recognizer=WhisperRecognizer(
            WhisperTranscriber(settings.whisper_model, settings.language),
            record_seconds=settings.record_seconds,
        ),
        speaker=CoquiSpeaker(settings.tts_model),
        opener=BrowserOpener(),
        listen_timeout=settings.listen_timeout,
        on_state_change=_show_state,
    )
    await assistant.greet()
    loop = asyncio.get_running_loop()

    if use_wake_word:
        def on_wake():
            asyncio.run_coroutine_threadsafe(assistant.listen_once(), loop).result()

        trigger = WakeWordTrigger(on_wake=on_wake, wake_word=settings.wake_word)
        print(f"Say {settings.wake_word!r} to talk (Ctrl+C to exit)")
        trigger.start()
        try:
            await asyncio.Event().wait()
        finally:
            trigger.stop()
        return

    while True:
        try:
            line = await loop.run_in_executor(None, input, "Press Enter to talk (q to quit) ")
        except EOFError:
            break
        if line.strip().lower() == "q":
            break
        await assistant.listen_once()


def _serve(settings: Settings, host: str, port: int) -> None:
    import uvicorn

    from .api_voice import create_app

    uvicorn.run(create_app(settings), host=host, port=port)


def _say(settings: Settings, text: str) -> None:
    router = default_router(HandlerContext(settings=settings))
    print(json.dumps(router.route(text).to_dict()))


def main(argv: Optional[Sequence[str]] = None) -> int:
    settings = load_settings()
    args = build_parser(settings).parse_args(argv)

    logging.basicConfig(
        level=getattr(logging, args.log_level.upper(), logging.INFO),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
        datefmt="%H:%M:%S",
    )

    if args.command == "serve":
        _serve(settings, args.host, args.port)
    elif args.command == "say":
        _say(settings, " ".join(args.text))
    elif args.command == "listen":
        try:
            asyncio.run(_listen(settings, args.wake_word))
        except KeyboardInterrupt:
            print("\nInterrupted by user, exiting.")
    return 0


if __name__ == "__main__":
    sys.exit(main())

"""Main application entry point for Voice2Note."""

import sys
import asyncio
import argparse
import logging
from pathlib import Path
from typing import List, Optional

from pubsub import pub
from rich.console import Console
from rich.panel import Panel

from voice2note import __version__
from voice2note.errors import ConfigError
from voice2note.models.events import RecordingResultEvent
from voice2note.services.recording_service import RecordingService
from voice2note.services.session_manager import RecordingSessionManager
from voice2note.storage.file_manager import FileManager
from voice2note.transcription.pipeline import TranscriptionPipeline
from voice2note.transcription.publisher import ResultPublisher, RESULT_TOPIC
from voice2note.transcription.selector import ProviderSelector

from .config import Voice2NoteConfig, ProviderConfig

logger = logging.getLogger(__name__)
console = Console()


class Server:

    def __init__(self, config_path: Optional[str], log_level: Optional[str] = None):
        # Load configuration
        self.config = Voice2NoteConfig(config_path)
        # Set up logging (command line overrides config)
        level = log_level or self.config.get('logging.level', 'INFO')
        setup_logging(self.config, level)
        self.results: List[RecordingResultEvent] = []

    def init(self):
        logger.info("Initializing services...")

        self.provider_config = ProviderConfig.from_config(self.config)
        selector = ProviderSelector(self.provider_config)
        self.pipeline = TranscriptionPipeline.from_selector(selector)

        self.publisher = ResultPublisher(RESULT_TOPIC)
        pub.subscribe(self.on_result, RESULT_TOPIC)

        self.session_manager = RecordingSessionManager(FileManager(self.config.get_output_directory()))
        self.recording_service = RecordingService(
            self.session_manager, self.pipeline, self.publisher.get_callback()
        )

    def on_result(self, event: RecordingResultEvent) -> None:
        self.results.append(event)
        render_result(event)

    async def replay(self, audio_file: str, mime_type: str, chunk_size: int) -> bool:
        """Stream an audio file through the recording signals, as a host UI would."""
        asyncio.get_running_loop().set_exception_handler(log_loop_exception)

        response = await self.recording_service.start(mime_type)
        if not response.ok:
            console.print(f"[red]Could not start recording:[/red] {response.error}")
            return False

        with open(audio_file, 'rb') as f:
            while True:
                chunk = f.read(chunk_size)
                if not chunk:
                    break
                self.recording_service.data_chunk(chunk)
                await asyncio.sleep(0)

        response = await self.recording_service.stop()
        if not response.ok:
            console.print(f"[red]Could not stop recording:[/red] {response.error}")
            return False

        console.print(f"Recording saved to [bold]{response.file_path}[/bold]")
        await self.recording_service.wait_for_results()
        return bool(self.results) and self.results[-1].error is None

    async def transcribe(self, audio_file: str, mime_type: str) -> bool:
        """Run the pipeline on an existing recording."""
        asyncio.get_running_loop().set_exception_handler(log_loop_exception)

        result = await self.pipeline.run(audio_file, mime_type)
        self.publisher.publish_result(RecordingResultEvent.from_result(result))
        return result.ok

    def cleanup(self):
        pub.unsubscribe(self.on_result, RESULT_TOPIC)


def render_result(event: RecordingResultEvent) -> None:
    """Print a result event to the console."""
    if event.error:
        console.print(Panel(event.error, title="Transcription failed", border_style="red"))
        return

    if event.info:
        console.print(f"[yellow]{event.info}[/yellow]")
    console.print(Panel(event.text or "(no speech)", title=Path(event.file_path).name, border_style="green"))


def log_loop_exception(loop, context) -> None:
    """Event loop exception handler: log, never crash."""
    exc = context.get("exception")
    logger.error(f"Unhandled event loop error: {context.get('message')}", exc_info=exc)


def setup_logging(config, level: str = "INFO") -> None:

    """Set up logging configuration from YAML config."""
    log_file_path = config.get('logging.file_path', 'logs/voice2note.log')
    console_output = config.get('logging.console_output', True)

    log_dir = Path(log_file_path).parent
    log_dir.mkdir(parents=True, exist_ok=True)

    handlers = []

    # File handler - always write to file
    file_handler = logging.FileHandler(log_file_path)
    file_handler.setLevel(logging.DEBUG)
    file_formatter = logging.Formatter(
        '%(asctime)s - %(name)s - %(levelname)s - %(funcName)s:%(lineno)d - %(message)s'
    )
    file_handler.setFormatter(file_formatter)
    handlers.append(file_handler)

    # Console handler - only if enabled in config
    if console_output:
        console_handler = logging.StreamHandler(sys.stderr)
        console_handler.setLevel(logging.WARNING)
        console_formatter = logging.Formatter('%(asctime)s - %(name)s - %(levelname)s - %(message)s')
        console_handler.setFormatter(console_formatter)
        handlers.append(console_handler)

    root_logger = logging.getLogger()
    root_logger.handlers.clear()
    root_logger.setLevel(getattr(logging, level.upper()))
    for handler in handlers:
        root_logger.addHandler(handler)

    logger = logging.getLogger(__name__)
    logger.info("="*50)
    logger.info("Voice2Note starting up")
    logger.info(f"Log file: {log_file_path}")
    logger.info(f"Log level set to: {level}")
    logger.info("="*50)


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        description="Voice2Note - dictation to formatted notes",
    )

    parser.add_argument(
        "--config",
        type=str,
        help="Path to configuration YAML file (default: built-in defaults and environment)"
    )

    parser.add_argument(
        "--log-level",
        type=str,
        choices=["DEBUG", "INFO", "WARNING", "ERROR"],
        help="Set logging level (overrides config)"
    )

    parser.add_argument(
        "--version",
        action="version",
        version=f"Voice2Note v{__version__}"
    )

    subparsers = parser.add_subparsers(dest="command", required=True)

    replay = subparsers.add_parser(
        "replay",
        help="Stream an audio file through a recording session and process it"
    )
    replay.add_argument("audio_file", help="Audio file to replay")
    replay.add_argument("--mime-type", default="audio/webm", help="Declared MIME type (default: audio/webm)")
    replay.add_argument("--chunk-size", type=int, default=4096, help="Bytes per chunk (default: 4096)")

    transcribe = subparsers.add_parser(
        "transcribe",
        help="Transcribe and format an existing recording"
    )
    transcribe.add_argument("audio_file", help="Recording to transcribe")
    transcribe.add_argument("--mime-type", default="audio/webm", help="Declared MIME type (default: audio/webm)")

    return parser


def main(argv: Optional[List[str]] = None) -> None:
    """Main entry point for Voice2Note."""
    args = build_parser().parse_args(argv)

    try:
        server = Server(args.config, args.log_level)
        server.init()
    except ConfigError as e:
        console.print(f"[red]Configuration error:[/red] {e}")
        sys.exit(2)

    try:
        if args.command == "replay":
            ok = asyncio.run(server.replay(args.audio_file, args.mime_type, args.chunk_size))
        else:
            ok = asyncio.run(server.transcribe(args.audio_file, args.mime_type))
    except KeyboardInterrupt:
        console.print("\nInterrupted")
        ok = False
    except OSError as e:
        console.print(f"[red]Error:[/red] {e}")
        logging.error(f"Application error: {e}")
        ok = False
    finally:
        server.cleanup()

    sys.exit(0 if ok else 1)


if __name__ == "__main__":
    main()

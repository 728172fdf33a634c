"""
Main entry point for LuckyWheel.

Runs a console prize draw: one spin per participant name given on the
command line, printing each winner and the stock left afterwards.
"""

import argparse
import asyncio
import logging
import sys
from pathlib import Path
from typing import List, Optional

from luckywheel.ai.client import GeminiConfig, get_gemini_client
from luckywheel.ai.commentary import CommentaryService
from luckywheel.ai.logging import get_ai_logger
from luckywheel.audio.engine import get_audio_engine
from luckywheel.config.prizes import load_prizes
from luckywheel.config.settings import Settings, get_settings
from luckywheel.core.errors import LuckyWheelError, ValidationError
from luckywheel.core.events import EventBus
from luckywheel.runner import FrameDriver
from luckywheel.wheel.commentary import CommentaryCoordinator, EnrichmentStatus
from luckywheel.wheel.controller import SpinController

logger = logging.getLogger(__name__)


def setup_logging(debug: bool = False) -> None:
    """Configure logging."""
    level = logging.DEBUG if debug else logging.INFO
    logging.basicConfig(
        level=level,
        format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
        datefmt="%H:%M:%S"
    )


def build_commentary(
    settings: Settings,
    event_bus: Optional[EventBus] = None,
    use_ai: bool = True,
    service: Optional[CommentaryService] = None,
) -> CommentaryCoordinator:
    """Create the commentary coordinator, with Gemini when configured.

    A given service is used as is; otherwise one is built when AI is
    enabled and a key is set. The service's style hint follows later
    template changes.
    """
    if service is None and use_ai and settings.ai_available:
        get_ai_logger(settings.ai.log_dir)
        client = get_gemini_client(GeminiConfig.from_settings(settings.ai))
        service = CommentaryService(
            client=client,
            model=settings.ai.commentary_model,
            language=settings.language,
            style_hint=settings.congrats_template,
        )
        logger.info(f"AI commentary enabled ({settings.ai.commentary_model})")
    elif service is None:
        logger.info("AI commentary disabled, using the template message only")

    generator = service.generate if service is not None else None
    coordinator = CommentaryCoordinator(
        template=settings.congrats_template,
        generator=generator,
        enabled=generator is not None,
        event_bus=event_bus,
        timeout=settings.ai.enrichment_timeout,
    )
    if service is not None:
        coordinator.on_template_changed(lambda template: setattr(service, "style_hint", template))
    return coordinator


def build_controller(
    settings: Settings,
    prizes_file: Optional[Path] = None,
    use_audio: bool = True,
    use_ai: bool = True,
) -> SpinController:
    """Wire a spin controller from settings."""
    templates = load_prizes(prizes_file or settings.prizes_file)

    audio = get_audio_engine()
    if use_audio and settings.audio.enabled:
        if audio.init():
            audio.set_volumes(settings.audio.music_volume, settings.audio.effects_volume)
        else:
            logger.warning("Audio unavailable, spinning silently")

    event_bus = EventBus()
    commentary = build_commentary(settings, event_bus, use_ai)
    controller = SpinController(
        templates,
        audio=audio,
        commentary=commentary,
        event_bus=event_bus,
        spin_duration_ms=settings.spin.duration_ms,
        min_rotations=settings.spin.min_rotations,
        rotation_spread=settings.spin.rotation_spread,
        ambience_track=settings.audio.ambience_track,
        ambience_duration=float(settings.audio.ambience_duration),
    )
    controller.set_muted(settings.audio.muted)
    return controller


async def wait_for_commentary(controller: SpinController, poll: float = 0.1) -> None:
    """Wait until pending generated commentary resolves or is dropped."""
    while controller.commentary_pending:
        await asyncio.sleep(poll)


async def run_draw(controller: SpinController, names: List[str], fps: int = 60) -> int:
    """Spin once per name.

    Returns:
        Number of spins completed
    """
    driver = FrameDriver(controller, fps=fps)
    completed = 0

    for name in names:
        try:
            controller.request_spin(name)
        except ValidationError as e:
            logger.error(f"Cannot spin for {name!r}: {e}")
            print(f"! {name}: {e}")
            if not controller.can_spin:
                break
            continue

        await driver.run_until_finished()
        record = controller.record
        if record is None:
            continue

        completed += 1
        print(f"* {record.participant} -> {record.prize.name}")
        print(f"  {record.message}")

        if controller.commentary_pending:
            await wait_for_commentary(controller)
            if record.enrichment is EnrichmentStatus.RESOLVED:
                print(f"  AI: {record.message}")

    print("\nRemaining prizes:")
    for entry in controller.inventory_snapshot():
        print(f"  {entry.count:>3} x {entry.name}")
    if not controller.slice_count:
        print("  (none)")

    return completed


def parse_args(argv: Optional[List[str]] = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(prog="luckywheel", description="Lucky wheel prize draw")
    parser.add_argument("names", nargs="+", help="Participant names, one spin each")
    parser.add_argument("--prizes", type=Path, default=None, help="Prize list YAML file")
    parser.add_argument("--template", type=str, default=None, help="Congratulation template")
    parser.add_argument("--duration", type=float, default=None, help="Spin duration in ms")
    parser.add_argument("--no-audio", action="store_true", help="Disable sound")
    parser.add_argument("--no-ai", action="store_true", help="Disable AI commentary")
    parser.add_argument("--debug", action="store_true", help="Verbose logging")
    return parser.parse_args(argv)


def main(argv: Optional[List[str]] = None) -> None:
    """Main entry point."""
    from dotenv import load_dotenv

    # Load environment variables
    load_dotenv()

    args = parse_args(argv)
    settings = get_settings()
    if args.template:
        settings = settings.model_copy(update={"congrats_template": args.template})
    if args.duration is not None:
        spin = settings.spin.model_copy(update={"duration_ms": args.duration})
        settings = settings.model_copy(update={"spin": spin})

    setup_logging(args.debug or settings.debug)
    logger.info("LuckyWheel starting...")

    audio = get_audio_engine()
    try:
        controller = build_controller(
            settings,
            prizes_file=args.prizes,
            use_audio=not args.no_audio,
            use_ai=not args.no_ai,
        )
        asyncio.run(run_draw(controller, args.names, fps=settings.spin.fps))
    except KeyboardInterrupt:
        logger.info("Interrupted by user")
    except LuckyWheelError as e:
        logger.error(f"Draw failed: {e}")
        sys.exit(1)
    except Exception as e:
        logger.exception(f"Fatal error: {e}")
        sys.exit(1)
    finally:
        audio.cleanup()

    logger.info("LuckyWheel stopped")


if __name__ == "__main__":
    main()

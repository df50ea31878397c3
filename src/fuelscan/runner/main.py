"""
CLI main entry point.
"""

import argparse
import asyncio
import json
import logging
import sys
from collections.abc import Callable
from pathlib import Path

from ..config import Config, create_default_config, load_config
from ..extractors import TripCandidates, extract_candidates
from ..ledger import NEW_TRIP, InMemoryTripLedger
from ..preprocessing import ImageLoadError, preprocess
from ..recognition import (
    RecognitionEngine,
    RecognitionEngineError,
    RecognitionResult,
    StaticEngine,
    TesseractEngine,
)
from ..review import DISTANCE_RANGE, KM_PER_LITER_RANGE, OcrSession, ReviewWorkflow

logger = logging.getLogger(__name__)


def setup_logging(verbose: bool = False, level_name: str = "INFO") -> None:
    """Configure logging."""
    level = logging.DEBUG if verbose else getattr(logging, level_name.upper(), logging.INFO)
    logging.basicConfig(
        level=level,
        format="%(asctime)s | %(levelname)-8s | %(name)s | %(message)s",
        datefmt="%Y-%m-%d %H:%M:%S",
    )


def create_cli() -> argparse.ArgumentParser:
    """Create CLI argument parser."""
    parser = argparse.ArgumentParser(
        prog="fuelscan",
        description="Read fuel efficiency (km/L) and trip distance (km) from a photo",
    )

    parser.add_argument(
        "-c",
        "--config",
        type=Path,
        default=Path("config.yaml"),
        help="Path to config file (default: config.yaml)",
    )
    parser.add_argument(
        "-v",
        "--verbose",
        action="store_true",
        help="Enable verbose logging",
    )

    subparsers = parser.add_subparsers(dest="command", help="Command to run")

    # scan command
    scan_parser = subparsers.add_parser("scan", help="Recognize a photo and list candidates")
    scan_parser.add_argument("image", type=Path, help="Photo of a dashboard, receipt or trip log")
    scan_parser.add_argument(
        "--json",
        action="store_true",
        help="Print the result as JSON",
    )

    # review command
    review_parser = subparsers.add_parser(
        "review", help="Review candidates interactively and apply them to a new trip"
    )
    review_parser.add_argument("image", type=Path, help="Photo of a dashboard, receipt or trip log")
    review_parser.add_argument(
        "--text",
        type=str,
        default=None,
        help="Use this text instead of running OCR on the photo",
    )
    review_parser.add_argument(
        "--confidence",
        type=float,
        default=100.0,
        help="Confidence reported with --text (default: 100)",
    )

    # init-config command
    subparsers.add_parser("init-config", help="Write a default config file")

    return parser


def create_engine(config: Config) -> TesseractEngine:
    return TesseractEngine(
        tesseract_cmd=config.engine.tesseract_cmd,
        tesseract_config=config.engine.tesseract_config,
        timeout_seconds=config.engine.timeout_seconds,
    )


async def recognize_file(engine: RecognitionEngine, image_bytes: bytes) -> RecognitionResult:
    """Preprocess and recognize one photo, outside of a review session."""
    bitmap = preprocess(image_bytes)
    try:
        return await engine.recognize(bitmap).result()
    finally:
        bitmap.release()


def print_candidates(candidates: TripCandidates) -> None:
    print(f"  Detected km/L candidates: {candidates.km_per_liter.display()}")
    print(f"  Detected distance candidates: {candidates.distance.display()}")


def cmd_scan(config: Config, image: Path, as_json: bool) -> int:
    """Recognize a photo and print the candidates."""
    try:
        image_bytes = image.read_bytes()
    except OSError as e:
        print(f"❌ Cannot read {image}: {e}")
        return 1

    engine = create_engine(config)
    try:
        result = asyncio.run(recognize_file(engine, image_bytes))
    except (ImageLoadError, RecognitionEngineError) as e:
        print(f"❌ {e}")
        return 1

    candidates = extract_candidates(result.text)

    if as_json:
        print(json.dumps({"confidence": result.confidence, **candidates.to_dict()}, indent=2))
        return 0

    print(f"📷 {image}")
    print(f"  OCR Confidence: {result.confidence:.1f}%")
    print_candidates(candidates)
    print("\nRaw OCR Text:")
    print(candidates.raw_text or "(empty)")
    return 0


def print_session(session: OcrSession) -> None:
    print("\n🔎 OCR Review")
    print("=" * 40)
    print(f"  OCR Confidence: {session.confidence_display()}")
    if session.message:
        print(f"  ⚠️  {session.message}")
    if session.extracted is not None:
        print_candidates(session.extracted.candidates)
    print(f"  {KM_PER_LITER_RANGE.describe()}. {DISTANCE_RANGE.describe()}.")
    print()


def cmd_review(
    config: Config,
    image: Path,
    text: str | None = None,
    confidence: float = 100.0,
    prompt: Callable[[str], str] = input,
) -> int:
    """Run the review workflow on a photo and apply the result to a new trip."""
    try:
        image_bytes = image.read_bytes()
    except OSError as e:
        print(f"❌ Cannot read {image}: {e}")
        return 1

    engine: RecognitionEngine
    if text is not None:
        engine = StaticEngine(text=text, confidence=confidence)
    else:
        engine = create_engine(config)

    ledger = InMemoryTripLedger()
    workflow = ReviewWorkflow(engine=engine, ledger=ledger)

    def show_progress(session: OcrSession) -> None:
        if session.is_running:
            print(f"\r  Processing image locally... {session.progress_percent}%", end="")

    unsubscribe = workflow.subscribe(show_progress)
    session = asyncio.run(workflow.import_photo(NEW_TRIP, image_bytes))
    unsubscribe()
    print_session(session)

    try:
        while True:
            extracted = workflow.session.extracted
            kpl = prompt(f"km/L [{extracted.chosen_km_per_liter}]: ").strip()
            distance = prompt(f"Distance (km) [{extracted.chosen_distance_km}]: ").strip()
            workflow.edit(km_per_liter=kpl or None, distance_km=distance or None)

            advisory = workflow.range_advisory()
            if advisory:
                print(f"  ⚠️  {advisory}")
                for issue in workflow.range_issues():
                    print(f"     - {issue}")

            answer = prompt("Apply to trip? [y/N]: ").strip().lower()
            if answer not in ("y", "yes"):
                workflow.cancel()
                print("✗ Cancelled")
                return 0

            session = workflow.apply()
            if session.is_ready:
                print(f"  ❌ {session.message}")
                continue

            trip = ledger.get(workflow.last_applied_trip_id)
            print(f"✓ Applied to trip {trip.id}: {trip.km_per_liter} km/L, {trip.distance_km} km")
            return 0
    except EOFError:
        workflow.cancel()
        print("\n✗ Cancelled")
        return 1


def cmd_init_config(config_path: Path) -> int:
    """Write the default config file."""
    if config_path.exists():
        print(f"❌ {config_path} already exists")
        return 1
    create_default_config(config_path)
    print(f"✓ Wrote {config_path}")
    return 0


def main(args: list[str] | None = None) -> int:
    """Main entry point."""
    parser = create_cli()
    parsed = parser.parse_args(args)

    if not parsed.command:
        parser.print_help()
        return 1

    if parsed.command == "init-config":
        setup_logging(parsed.verbose)
        return cmd_init_config(parsed.config)

    # Load config
    try:
        config = load_config(parsed.config)
    except Exception as e:
        print(f"❌ Failed to load config: {e}")
        return 1

    setup_logging(parsed.verbose, config.log_level)

    # Route to command
    if parsed.command == "scan":
        return cmd_scan(config, parsed.image, parsed.json)
    elif parsed.command == "review":
        return cmd_review(config, parsed.image, parsed.text, parsed.confidence)
    else:
        parser.print_help()
        return 1


if __name__ == "__main__":
    sys.exit(main())

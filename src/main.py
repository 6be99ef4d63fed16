# src/main.py — v2
"""CLI entry point: seed, status, manifest commands.

Usage:
    qalamseed seed [--start-surah N] [--end-surah N] [--backend ollama|lms] [options]
    qalamseed status [options]
    qalamseed manifest [options]

Exit codes: 0 success, 1 at least one verse failed (see the error log),
2 configuration error, 130 interrupted.
"""

from __future__ import annotations

import argparse
import asyncio
import logging
import sys
from pathlib import Path

from pydantic import ValidationError

from qalamseed.config.settings import ConfigurationError, Settings, load_settings
from qalamseed.corpus.loader import CorpusCache, CorpusNotFound, enumerate_work_units
from qalamseed.llm.client_factory import UnsupportedBackendError
from qalamseed.storage import layout
from qalamseed.version import __version__

logger = logging.getLogger(__name__)

EXIT_OK = 0
EXIT_FAILURES = 1
EXIT_CONFIG = 2
EXIT_INTERRUPTED = 130


def main(argv: list[str] | None = None) -> int:
    """Main CLI entry point."""
    parser = _build_parser()
    args = parser.parse_args(argv)

    if not hasattr(args, "func"):
        parser.print_help()
        return EXIT_FAILURES

    try:
        return asyncio.run(args.func(args))
    except KeyboardInterrupt:
        logger.warning("Interrupted by user; completed steps are checkpointed")
        return EXIT_INTERRUPTED
    except (ConfigurationError, ValidationError, CorpusNotFound, UnsupportedBackendError) as exc:
        logger.error("Configuration error: %s", exc)
        print(f"ERROR: {exc}", file=sys.stderr)
        return EXIT_CONFIG


def _build_parser() -> argparse.ArgumentParser:
    """Build CLI argument parser."""
    parser = argparse.ArgumentParser(
        prog="qalamseed",
        description=f"qalamseed v{__version__}: two-phase verse analysis generator",
    )
    parser.add_argument(
        "--version", action="version", version=f"%(prog)s {__version__}",
    )
    parser.add_argument(
        "-v", "--verbose", action="store_true",
        help="Enable debug logging",
    )

    common = argparse.ArgumentParser(add_help=False)
    common.add_argument(
        "-o", "--output", type=Path, default=None,
        help="Output root holding analysis/ (default: OUTPUT_ROOT or ./data)",
    )
    common.add_argument(
        "--corpus", type=Path, default=None,
        help="Path to quran.json (default: CORPUS_FILE or ./data/quran.json)",
    )

    subparsers = parser.add_subparsers(dest="command")

    # --- seed ---
    p_seed = subparsers.add_parser(
        "seed", parents=[common], help="Generate analyses for a surah range",
    )
    p_seed.add_argument("--start-surah", type=int, default=None, help="First surah (inclusive)")
    p_seed.add_argument("--end-surah", type=int, default=None, help="Last surah (inclusive)")
    p_seed.add_argument(
        "--backend", default=None,
        help="Generation backend: ollama or lms (default: LLM_BACKEND)",
    )
    p_seed.add_argument("--model", default=None, help="Model for the selected backend")
    p_seed.set_defaults(func=_cmd_seed)

    # --- status ---
    p_status = subparsers.add_parser(
        "status", parents=[common], help="Show generation progress",
    )
    p_status.set_defaults(func=_cmd_status)

    # --- manifest ---
    p_manifest = subparsers.add_parser(
        "manifest", parents=[common], help="Rebuild manifest.json from final artifacts",
    )
    p_manifest.set_defaults(func=_cmd_manifest)

    return parser


def _settings_from_args(args: argparse.Namespace) -> Settings:
    """Merge CLI flags over .env/environment settings."""
    overrides: dict[str, object] = {}
    if getattr(args, "output", None) is not None:
        overrides["output_root"] = args.output
    if getattr(args, "corpus", None) is not None:
        overrides["corpus_file"] = args.corpus
    if getattr(args, "start_surah", None) is not None:
        overrides["start_surah"] = args.start_surah
    if getattr(args, "end_surah", None) is not None:
        overrides["end_surah"] = args.end_surah
    backend = getattr(args, "backend", None)
    if backend is not None:
        backend = backend.lower()
        overrides["llm_backend"] = "lms" if backend == "lmstudio" else backend
    if getattr(args, "model", None) is not None:
        target = overrides.get("llm_backend") or load_settings().llm_backend
        overrides["lms_model" if target == "lms" else "ollama_model"] = args.model
    return load_settings(**overrides)


def _configure_logging(settings: Settings, verbose: bool) -> None:
    from qalamseed.logging.logger import setup_logging

    setup_logging(
        level="DEBUG" if verbose else settings.log_level,
        log_format=settings.log_format,
        log_file=str(settings.log_file) if settings.log_file else None,
        rotation=settings.log_rotation,
        retention=settings.log_retention,
    )


async def _cmd_seed(args: argparse.Namespace) -> int:
    """Run the two-phase generation over the configured surah range."""
    from qalamseed.llm.client_factory import create_client_from_settings
    from qalamseed.pipeline.orchestrator import AnalysisOrchestrator, RunContext, format_duration
    from qalamseed.storage.store_factory import create_store

    settings = _settings_from_args(args)
    _configure_logging(settings, args.verbose)

    corpus = CorpusCache(settings.corpus_file)
    loaded = corpus.get()

    client = create_client_from_settings(settings)
    store = create_store(settings)
    context = RunContext(store=store, client=client, corpus=corpus)

    _print_banner(settings, context.run_id)
    print(f"Source:       {loaded.meta.source or settings.corpus_file} ({loaded.meta.arabic_edition or 'n/a'})")

    units = enumerate_work_units(loaded, settings.start_surah, settings.end_surah)
    print(f"Work units:   {len(units)}\n")

    summary = await AnalysisOrchestrator(context).run(units)

    print("\n" + "=" * 60)
    print("SUMMARY")
    print("=" * 60)
    print(f"Processed: {summary.processed}")
    print(f"Skipped:   {summary.skipped}")
    print(f"Errors:    {summary.failed}")
    print(f"Duration:  {format_duration(summary.duration_seconds)}")
    print("=" * 60)

    if summary.failed:
        print(f"\nCheck {_error_log_location(settings)} for error details, then re-run.")
    return summary.exit_code


async def _cmd_status(args: argparse.Namespace) -> int:
    """Print generation progress against the corpus."""
    from qalamseed.storage.store_factory import create_store
    from qalamseed.tracking.status import collect_status, render_status

    settings = _settings_from_args(args)
    _configure_logging(settings, args.verbose)

    corpus = CorpusCache(settings.corpus_file).get()
    report = await collect_status(create_store(settings), corpus)
    print(render_status(report))
    return EXIT_OK


async def _cmd_manifest(args: argparse.Namespace) -> int:
    """Force a full manifest rebuild from storage."""
    from qalamseed.pipeline.manifest import ManifestTracker
    from qalamseed.storage.store_factory import create_store

    settings = _settings_from_args(args)
    _configure_logging(settings, args.verbose)

    manifest = await ManifestTracker(create_store(settings)).rebuild()
    print(f"Updated manifest.json with {len(manifest.verses)} verses")
    return EXIT_OK


def _print_banner(settings: Settings, run_id: str) -> None:
    print("=" * 60)
    print("Verse Analysis Seeder (Two-Phase)")
    print("=" * 60)
    print(f"Run:          {run_id}")
    print(f"Range:        Surah {settings.start_surah} - {settings.end_surah}")
    print(f"Backend:      {settings.llm_backend}")
    print(f"Endpoint:     {settings.active_base_url}")
    print(f"Model:        {settings.active_model}")
    print(f"Output:       {settings.output_root / layout.ANALYSIS_DIR}")
    print("=" * 60)


def _error_log_location(settings: Settings) -> str:
    if settings.store_backend == "local":
        return str(settings.output_root / layout.ERROR_LOG_KEY)
    return layout.ERROR_LOG_KEY


if __name__ == "__main__":
    sys.exit(main())

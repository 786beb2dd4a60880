"""aiprobe command line.

Examples:
  # Analyze a file
  aiprobe analyze essay.txt

  # Analyze stdin and print the JSON report
  cat essay.txt | aiprobe analyze - --json

  # Use another preset and the Danish lexicon
  aiprobe analyze essay.txt --preset statistical --language da

  # Show fusion presets
  aiprobe presets

  # Run the HTTP API
  aiprobe serve --port 8080
"""
import argparse
import asyncio
import json
import sys
from typing import Optional

from aiprobe.config import ANALYZER_NAMES, FUSION_PRESETS, load_settings
from aiprobe.errors import AnalysisError
from aiprobe.services.detector import DetectorService
from aiprobe.utils.terminal import (
    Colors, render_bar, score_color,
    print_error, print_header, print_info, print_section, print_warning,
)


def read_input(path: str) -> str:
    """Read text from a file path or stdin ("-")."""
    if path == "-":
        return sys.stdin.read()
    with open(path, "r", encoding="utf-8") as f:
        return f.read()


def print_report(report) -> None:
    """Pretty-print an analysis report."""
    print_header("AI Text Analysis")

    color = score_color(report.ai_probability)
    print(f"\n  AI probability: {Colors.colorize(f'{report.ai_probability}%', color + Colors.BOLD)}")
    print(f"  Words: {report.word_count}   Characters: {report.character_count}")
    print(f"  Preset: {report.preset}   Language: {report.language}")
    if report.oracle_score is not None:
        print(f"  Oracle: {report.oracle_score}%")
    if report.oracle_degraded:
        print_warning("Oracle unavailable, result uses local analyzers only")

    print_section("Distribution")
    d = report.distribution
    print(f"  AI-generated      {d.ai_generated:3d}%")
    print(f"  Human, AI-refined {d.human_ai_refined:3d}%")
    print(f"  Human             {d.human_pure:3d}%")

    print_section("Analyzers")
    for name in ANALYZER_NAMES:
        if name in report.metrics:
            print(f"  {name:<13} {render_bar(report.metrics[name].score)}")

    print_section("Segments")
    for segment in report.segments:
        tag = Colors.colorize(
            f"{segment.classification.value:<5}",
            Colors.RED if segment.classification.value == "AI" else Colors.GREEN,
        )
        text = segment.text if len(segment.text) <= 60 else segment.text[:57] + "..."
        print(f"  [{tag}] {segment.score:3d} {Colors.colorize(segment.confidence.value, Colors.DIM)}  {text}")
    print()


def cmd_analyze(args) -> int:
    overrides = {}
    if args.preset:
        overrides["fusion_preset"] = args.preset
    if args.language:
        overrides["language"] = args.language
    if args.oracle:
        overrides["oracle_enabled"] = True

    try:
        settings = load_settings(**overrides)
        text = read_input(args.file)
        report = asyncio.run(DetectorService(settings).analyze(text))
    except OSError as e:
        print_error(f"Cannot read input: {e}")
        return 1
    except AnalysisError as e:
        print_error(str(e))
        return 1

    if args.json:
        print(json.dumps(report.model_dump(by_alias=True, mode="json"), indent=2, ensure_ascii=False))
    else:
        print_report(report)
    return 0


def cmd_presets(args) -> int:
    print_header("Fusion Presets")
    for name, preset in FUSION_PRESETS.items():
        print_section(f"{name} (oracle share {preset['oracle_share']:.2f})")
        for analyzer, weight in preset["analyzer_weights"].items():
            print(f"  {analyzer:<13} {weight:.3f}")
    print()
    return 0


def cmd_serve(args) -> int:
    import uvicorn
    print_info(f"Serving aiprobe on http://{args.host}:{args.port}")
    uvicorn.run("aiprobe.main:app", host=args.host, port=args.port)
    return 0


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="aiprobe",
        description="aiprobe - composite AI-text detector",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog=__doc__.split("\n", 1)[1],
    )
    sub = parser.add_subparsers(dest="command", required=True)

    analyze = sub.add_parser("analyze", help="Analyze a text file or stdin")
    analyze.add_argument("file", nargs="?", default="-",
                         help="Input file, or - for stdin (default)")
    analyze.add_argument("--json", action="store_true",
                         help="Print the report as JSON")
    analyze.add_argument("--preset", choices=sorted(FUSION_PRESETS),
                         help="Fusion preset")
    analyze.add_argument("--language", type=str,
                         help="Lexicon language (e.g. en, da)")
    analyze.add_argument("--oracle", action="store_true",
                         help="Consult the configured oracle")
    analyze.set_defaults(func=cmd_analyze)

    presets = sub.add_parser("presets", help="List fusion presets")
    presets.set_defaults(func=cmd_presets)

    serve = sub.add_parser("serve", help="Run the HTTP API")
    serve.add_argument("--host", default="0.0.0.0")
    serve.add_argument("--port", type=int, default=8080)
    serve.set_defaults(func=cmd_serve)

    return parser


def main(argv: Optional[list[str]] = None) -> int:
    args = build_parser().parse_args(argv)
    return args.func(args)


if __name__ == "__main__":
    sys.exit(main())

"""
Command-line interface for quizflow.

Usage:
    quizflow export ./quiz.json -o ./build/ --format mermaid
    quizflow resolve ./quiz.json --page page1 --element elem1 --option 1
    quizflow replay ./quiz.json ./answers.json
    quizflow sync ./quiz.json -o ./flow.json
"""

import argparse
import json
import logging
import sys
from pathlib import Path
from typing import Any, List, Optional, Tuple

from quizflow.authoring.sync import sync
from quizflow.backend.graphviz import GraphvizExporter
from quizflow.backend.mermaid import MermaidExporter
from quizflow.backend.svg import SvgExporter
from quizflow.config import FlowConfig, load_config
from quizflow.core.ir import FlowGraph, Page, Trigger
from quizflow.core.serialization import JsonSerializer
from quizflow.engine.resolver import resolve_next
from quizflow.engine.runner import replay

logger = logging.getLogger(__name__)


def _read_json(path: Path) -> Any:
    with open(path, 'r', encoding='utf-8') as f:
        return json.load(f)


def load_quiz_file(path: Path) -> Tuple[List[Page], FlowGraph]:
    """Load pages and navigation graph from a quiz JSON document."""
    return JsonSerializer.load_quiz(_read_json(path))


def export_graph(graph: FlowGraph, output_path: Path, format: str, name: str = "quiz",
                 use_positions: bool = False) -> Path:
    """Export a navigation graph to the specified format.

    ``use_positions`` keeps the canvas layout in DOT and SVG output.
    """

    if format == "mermaid":
        content = MermaidExporter.to_mermaid(graph)
        ext = ".mmd"
    elif format == "graphviz" or format == "dot":
        content = GraphvizExporter.to_dot(graph, name=name, use_positions=use_positions)
        ext = ".dot"
    elif format == "svg":
        content = SvgExporter.to_svg(graph, name=name, use_positions=use_positions)
        ext = ".svg"
    elif format == "json":
        content = JsonSerializer.to_json(graph)
        ext = ".json"
    else:
        raise ValueError(f"Unknown format: {format}. Use: mermaid, graphviz, svg, json")

    safe_name = name.lower().replace(" ", "_").replace("/", "_")
    safe_name = "".join(c for c in safe_name if c.isalnum() or c == "_") or "quiz"

    output_file = output_path / f"{safe_name}{ext}"
    output_file.write_text(content)

    return output_file


def _cmd_export(args, config: FlowConfig) -> int:
    pages, graph = load_quiz_file(args.quiz)
    graph = sync(graph, pages, config)
    args.output.mkdir(parents=True, exist_ok=True)
    output_file = export_graph(
        graph, args.output, args.format, name=args.name or args.quiz.stem, use_positions=args.positions,
    )
    print(f"{output_file}")
    return 0


def _cmd_resolve(args, config: FlowConfig) -> int:
    pages, graph = load_quiz_file(args.quiz)
    trigger: Optional[Trigger] = None
    if args.element:
        trigger = Trigger(
            element_id=args.element,
            element_type=args.type,
            value=args.value,
            option_index=args.option,
        )
    print(resolve_next(graph, args.page, pages, trigger, config))
    return 0


def _cmd_replay(args, config: FlowConfig) -> int:
    pages, graph = load_quiz_file(args.quiz)
    answers = _read_json(args.answers)
    if not isinstance(answers, list):
        raise ValueError("Answers file must hold a JSON list of triggers.")
    triggers = [JsonSerializer.trigger_from_dict(a) if a else None for a in answers]
    for page_id in replay(graph, pages, triggers, start_page_id=args.start, config=config):
        print(page_id)
    return 0


def _cmd_sync(args, config: FlowConfig) -> int:
    pages, graph = load_quiz_file(args.quiz)
    content = JsonSerializer.to_json(sync(graph, pages, config))
    if args.output:
        args.output.write_text(content)
        print(f"{args.output}")
    else:
        print(content)
    return 0


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="quizflow",
        description="Inspect and export quiz navigation graphs.",
        epilog="Example: quizflow export ./quiz.json -o ./build/ -f mermaid"
    )
    parser.add_argument(
        "-c", "--config",
        type=Path,
        help="JSON config file (default: $QUIZFLOW_CONFIG)"
    )
    parser.add_argument(
        "-v", "--verbose",
        action="store_true",
        help="Verbose output"
    )

    sub = parser.add_subparsers(dest="command", required=True)

    export = sub.add_parser("export", help="Export the navigation graph")
    export.add_argument("quiz", type=Path, help="Quiz JSON document")
    export.add_argument(
        "-o", "--output",
        type=Path,
        default=Path("."),
        help="Output directory (default: current directory)"
    )
    export.add_argument(
        "-f", "--format",
        choices=["mermaid", "graphviz", "dot", "svg", "json"],
        default="mermaid",
        help="Output format (default: mermaid)"
    )
    export.add_argument("-n", "--name", type=str, help="Output file name (default: quiz file name)")
    export.add_argument(
        "--positions",
        action="store_true",
        help="Keep the canvas node positions (graphviz, dot and svg formats)"
    )
    export.set_defaults(handler=_cmd_export)

    resolve = sub.add_parser("resolve", help="Print the page that follows a page")
    resolve.add_argument("quiz", type=Path, help="Quiz JSON document")
    resolve.add_argument("--page", required=True, help="Current page id")
    resolve.add_argument("--element", help="Element that produced the answer")
    resolve.add_argument("--type", help="Element type of the answering element")
    resolve.add_argument("--value", help="Answer value")
    resolve.add_argument("--option", type=int, help="Selected option index")
    resolve.set_defaults(handler=_cmd_resolve)

    replay_cmd = sub.add_parser("replay", help="Print the path a list of answers takes")
    replay_cmd.add_argument("quiz", type=Path, help="Quiz JSON document")
    replay_cmd.add_argument("answers", type=Path, help="JSON list of triggers (null = continue)")
    replay_cmd.add_argument("--start", help="Start page id (default: first page)")
    replay_cmd.set_defaults(handler=_cmd_replay)

    sync_cmd = sub.add_parser("sync", help="Print the graph synchronized with the pages")
    sync_cmd.add_argument("quiz", type=Path, help="Quiz JSON document")
    sync_cmd.add_argument("-o", "--output", type=Path, help="Write to this file instead of stdout")
    sync_cmd.set_defaults(handler=_cmd_sync)

    return parser


def main(argv: List[str] = None) -> int:
    """Main CLI entrypoint."""
    parser = build_parser()
    args = parser.parse_args(argv)

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.WARNING,
        format="%(levelname)s %(name)s: %(message)s",
    )

    quiz_path = args.quiz
    if not quiz_path.exists():
        print(f"Error: File not found: {quiz_path}", file=sys.stderr)
        return 1
    if not quiz_path.is_file():
        print(f"Error: Not a file: {quiz_path}", file=sys.stderr)
        return 1

    config = load_config(args.config)

    try:
        return args.handler(args, config)
    except (ValueError, KeyError, OSError, RuntimeError) as e:
        logger.debug("Command failed", exc_info=True)
        print(f"Error: {e}", file=sys.stderr)
        return 1


if __name__ == "__main__":
    sys.exit(main())

"""
Command-line interface for the umlgen tool.

This module provides the entry point for command-line usage, reading a
saved class diagram and writing the generated descriptors, mobile
bundles and generation report.
"""

import os
import sys
import json
import logging
import argparse

from umlgen.config.settings import ProjectConfig, Settings
from umlgen.pipelines.code_generation import TARGETS, CodeGenerationPipeline
from umlgen.utils.data_loader import DiagramLoader, dump_json

logger = logging.getLogger(__name__)


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        description="umlgen: Generate class descriptors from a UML class diagram"
    )

    parser.add_argument(
        "--diagram",
        type=str,
        required=True,
        help="Path to a diagram JSON file with 'nodes' and 'edges'"
    )

    parser.add_argument(
        "--config",
        type=str,
        default=None,
        help="Path to a JSON settings file"
    )

    parser.add_argument(
        "--target",
        type=str,
        choices=TARGETS,
        default=None,
        help="What to generate (default: from settings, 'all')"
    )

    parser.add_argument(
        "--group-id",
        type=str,
        default=None,
        help="Group id of the generated project (e.g. com.acme)"
    )

    parser.add_argument(
        "--name",
        type=str,
        default=None,
        help="Name of the generated project"
    )

    parser.add_argument(
        "--output-dir",
        type=str,
        default=None,
        help="Output directory (default: from settings, 'output')"
    )

    parser.add_argument(
        "--verbose",
        action="store_true",
        help="Log debug output, including every diagnostic"
    )

    return parser


def main(argv=None) -> int:
    """Main entry point for the umlgen command-line interface."""
    args = build_parser().parse_args(argv)

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.INFO,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )

    settings = Settings(args.config)
    if args.group_id:
        settings.set("project", "group_id", args.group_id)
    if args.name:
        settings.set("project", "name", args.name)
    if args.target:
        settings.set("generation", "target", args.target)

    try:
        nodes, edges = DiagramLoader().load(args.diagram)
    except (OSError, ValueError) as e:
        logger.error("Cannot read diagram %s: %s", args.diagram, e)
        return 2

    pipeline = CodeGenerationPipeline(ProjectConfig.from_settings(settings), settings)
    result = pipeline.execute(nodes, edges)

    if not result.success:
        print(f"Generation failed: {result.error_message}", file=sys.stderr)
        return 1

    output_dir = args.output_dir or settings.get("output", "output_directory", default="output")
    indent = settings.get("output", "indent", default=2)
    payload = result.to_dict()

    dump_json({"descriptors": payload["descriptors"]}, os.path.join(output_dir, "descriptors.json"), indent)
    dump_json({"mobile_bundles": payload["mobile_bundles"]}, os.path.join(output_dir, "mobile.json"), indent)

    if settings.get("output", "include_report", default=True):
        report_path = os.path.join(output_dir, "generation_report.md")
        with open(report_path, "w", encoding="utf-8") as f:
            f.write(result.report)

    print(json.dumps(result.metrics, indent=2))
    logger.info("Wrote generation output to %s", output_dir)
    return 0


if __name__ == "__main__":
    sys.exit(main())

"""
Fieldline CLI - Main entry point.

Inspect templates and preview field geometry from the command line.
JSON goes to stdout, structured logs to stderr.
"""

import argparse
import json
import sys
from pathlib import Path
from typing import List, Optional

import cv2

from fieldline_catalog import TemplateNotAvailableError, TemplateRegistry, load_template
from fieldline_engine.config import EngineConfig, FieldConfiguration
from fieldline_engine.geometry import build, check_field_size, primitives_to_dicts
from fieldline_engine.logging import LogEvent, StructuredLogger
from fieldline_engine.pipeline import FieldRenderPipeline, PipelineBuilder
from fieldline_engine.template import TemplateDefinition, has_errors, validate_template


def load_engine_config(args: argparse.Namespace) -> EngineConfig:
    if args.config:
        return EngineConfig.from_yaml(Path(args.config))
    return EngineConfig(log_level=args.log_level)


def create_registry(args: argparse.Namespace, config: EngineConfig) -> TemplateRegistry:
    """Registry with built-in templates plus every configured directory."""
    logger = StructuredLogger(component="registry", level=config.log_level_value)
    if config.include_builtin_templates:
        registry = TemplateRegistry.with_builtin_templates(logger=logger)
    else:
        registry = TemplateRegistry(logger=logger)

    directories = list(config.template_dirs) + [Path(d) for d in args.templates_dir]
    for directory in directories:
        registry.load_directory(directory)
    return registry


def create_pipeline(registry: TemplateRegistry, config: EngineConfig) -> FieldRenderPipeline:
    return (
        PipelineBuilder()
        .with_templates(registry)
        .with_engine_config(config)
        .with_logger(StructuredLogger(component="pipeline", level=config.log_level_value))
        .build()
    )


def resolve_template(registry: TemplateRegistry, ref: str) -> TemplateDefinition:
    """A template file path, or the id of a registered template."""
    path = Path(ref)
    if path.suffix and path.exists():
        return load_template(path)
    return registry.get(ref)


def load_field_config(config_path: str, cli_logger: StructuredLogger) -> FieldConfiguration:
    path = Path(config_path)
    if not path.exists():
        raise FileNotFoundError(f"Field configuration not found: {config_path}")
    field_config = FieldConfiguration.from_yaml(path)
    cli_logger.info(
        event=LogEvent.CONFIG_LOADED,
        message=f"Loaded field configuration {path.name}",
        metadata={'template_id': field_config.template_id},
    )
    return field_config


def cmd_list(args, registry: TemplateRegistry) -> int:
    templates = registry.list_active(sport=args.sport)
    if args.json:
        print(json.dumps([
            {
                "id": t.template_id,
                "sport": t.sport,
                "name": t.name,
                "defaultLength": t.default_length,
                "defaultWidth": t.default_width,
            }
            for t in templates
        ], indent=2))
        return 0

    for t in templates:
        print(
            f"{t.template_id:<20} {t.sport:<12} {t.name:<28} "
            f"L {t.min_length:g}-{t.max_length:g}m  W {t.min_width:g}-{t.max_width:g}m"
        )
    return 0


def cmd_validate(args, registry: TemplateRegistry, cli_logger: StructuredLogger) -> int:
    template = resolve_template(registry, args.template)
    issues = validate_template(template)

    cli_logger.info(
        event=LogEvent.TEMPLATE_VALIDATED,
        message=f"Validated '{template.template_id}'",
        metadata={
            'template_id': template.template_id,
            'errors': sum(1 for i in issues if i.is_error),
            'warnings': sum(1 for i in issues if not i.is_error),
        },
    )

    if args.json:
        print(json.dumps([issue.to_dict() for issue in issues], indent=2))
    else:
        for issue in issues:
            where = f" [{issue.element_id}]" if issue.element_id else ""
            print(f"{issue.severity.value.upper():<8} {issue.code}{where}: {issue.message}")
        if not issues:
            print(f"{template.template_id}: valid")

    return 1 if has_errors(issues) else 0


def cmd_build(args, registry: TemplateRegistry) -> int:
    template = resolve_template(registry, args.template)
    width = args.width if args.width is not None else template.default_width
    length = args.length if args.length is not None else template.default_length
    check_field_size(width, length)

    primitives = build(template, width, length)
    print(json.dumps({
        "templateId": template.template_id,
        "widthMeters": width,
        "lengthMeters": length,
        "primitives": primitives_to_dicts(primitives),
    }, indent=2))
    return 0


def cmd_project(args, pipeline: FieldRenderPipeline, cli_logger: StructuredLogger) -> int:
    field_config = load_field_config(args.field_config, cli_logger)
    result = pipeline.render(field_config, origin=args.origin)
    print(json.dumps({
        "configuration": field_config.to_dict(),
        "scale": result.scale,
        "origin": list(result.origin),
        "primitives": primitives_to_dicts(result.primitives),
    }, indent=2))
    return 0


def cmd_render(args, pipeline: FieldRenderPipeline, cli_logger: StructuredLogger) -> int:
    field_config = load_field_config(args.field_config, cli_logger)
    frame = pipeline.draw(field_config, origin=args.origin)

    output = Path(args.output)
    if not cv2.imwrite(str(output), frame):
        raise OSError(f"Could not write image: {output}")
    print(f"Rendered {field_config.template_id} -> {output}")
    return 0


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="fieldline",
        description="Fieldline CLI - Sports-field template geometry",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  # List active templates
  fieldline list

  # Validate a template document (or a registered id)
  fieldline validate templates/futsal.yaml

  # Meter-space primitives at a custom size
  fieldline build soccer_11v11 --width 68 --length 105

  # Pixel-space primitives for a field configuration
  fieldline project config/fields/main_pitch.yaml

  # PNG preview
  fieldline render config/fields/main_pitch.yaml -o preview.png
"""
    )

    # Global arguments
    parser.add_argument(
        "--config",
        help="Engine config YAML (template dirs, cache, render settings)"
    )
    parser.add_argument(
        "--templates-dir",
        action="append",
        default=[],
        help="Extra template directory (repeatable)"
    )
    parser.add_argument(
        "--log-level",
        default="WARNING",
        help="Log level when no --config is given (default: WARNING)"
    )

    # Subcommands
    subparsers = parser.add_subparsers(dest='command', help='Available commands')

    list_cmd = subparsers.add_parser('list', help='List active templates')
    list_cmd.add_argument('--sport', help='Only templates of this sport')
    list_cmd.add_argument('--json', action='store_true', help='JSON output')

    validate_cmd = subparsers.add_parser('validate', help='Validate a template')
    validate_cmd.add_argument('template', help='Template file or registered id')
    validate_cmd.add_argument('--json', action='store_true', help='JSON output')

    build_cmd = subparsers.add_parser('build', help='Meter-space primitives as JSON')
    build_cmd.add_argument('template', help='Template file or registered id')
    build_cmd.add_argument('--width', type=float, help='Field width in meters (default: template)')
    build_cmd.add_argument('--length', type=float, help='Field length in meters (default: template)')

    for name, help_text in (('project', 'Pixel-space primitives as JSON'),
                            ('render', 'Render a PNG preview')):
        sub = subparsers.add_parser(name, help=help_text)
        sub.add_argument('field_config', help='Field configuration YAML')
        sub.add_argument(
            '--origin', type=float, nargs=2, metavar=('X', 'Y'),
            help='Render origin in pixels (default: centred on canvas)'
        )
        if name == 'render':
            sub.add_argument('-o', '--output', default='field.png', help='Output image path')

    return parser


def main(argv: Optional[List[str]] = None) -> int:
    """Main CLI entry point."""
    parser = build_parser()
    args = parser.parse_args(argv)

    if not args.command:
        parser.print_help()
        return 1

    try:
        config = load_engine_config(args)
        cli_logger = StructuredLogger(component="cli", level=config.log_level_value)
        registry = create_registry(args, config)

        if args.command == 'list':
            return cmd_list(args, registry)
        if args.command == 'validate':
            return cmd_validate(args, registry, cli_logger)
        if args.command == 'build':
            return cmd_build(args, registry)

        pipeline = create_pipeline(registry, config)
        if args.command == 'project':
            return cmd_project(args, pipeline, cli_logger)
        return cmd_render(args, pipeline, cli_logger)

    except (ValueError, OSError, TemplateNotAvailableError) as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1


if __name__ == "__main__":
    sys.exit(main())

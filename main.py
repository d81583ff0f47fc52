"""
Command-line entry point for the ReportAI console.
Usage: python main.py [--base-url URL] <command> [options]
"""

import argparse
import json
import logging
import sys
from pathlib import Path

from reportai_console.config import CONFIG, LLMProvider, configure_logging
from reportai_console.controllers.generation_controller import GenerationController
from reportai_console.controllers.reports_controller import ReportsController
from reportai_console.core.api_client import ReportApi
from reportai_console.core.errors import ReportConsoleError
from reportai_console.core.models import GenerateReportRequest, UploadedFile

logger = logging.getLogger(__name__)

def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        description='ReportAI Console - report templates and AI report generation'
    )
    parser.add_argument(
        '--base-url',
        type=str,
        default=CONFIG.api.base_url,
        help=f'Report service base URL (default: {CONFIG.api.base_url})'
    )
    parser.add_argument(
        '--debug',
        action='store_true',
        help='Enable debug logging'
    )

    commands = parser.add_subparsers(dest='command', required=True)

    list_cmd = commands.add_parser('list', help='List reports')
    list_cmd.add_argument('--page', type=int, default=1)
    list_cmd.add_argument('--page-size', type=int, default=CONFIG.pagination.default_page_size)

    filter_cmd = commands.add_parser('filter', help='Filter reports by id and email')
    filter_cmd.add_argument('--id', type=str, default='', help='Report id (lists everything when omitted)')
    filter_cmd.add_argument('--email', type=str, default='', help='Owner email')
    filter_cmd.add_argument('--page', type=int, default=1)
    filter_cmd.add_argument('--page-size', type=int, default=CONFIG.pagination.default_page_size)

    create_cmd = commands.add_parser('create', help='Create a report template')
    create_cmd.add_argument('--email', type=str, required=True, help='Owner email')
    create_source = create_cmd.add_mutually_exclusive_group(required=True)
    create_source.add_argument('--template', type=str, help='Template text')
    create_source.add_argument('--template-file', type=str, help='Read the template from a file')

    update_cmd = commands.add_parser('update', help='Replace a report template')
    update_cmd.add_argument('--id', type=int, required=True)
    update_source = update_cmd.add_mutually_exclusive_group(required=True)
    update_source.add_argument('--template', type=str, help='Template text')
    update_source.add_argument('--template-file', type=str, help='Read the template from a file')

    toggle_cmd = commands.add_parser('toggle', help='Activate or deactivate a report')
    toggle_cmd.add_argument('--id', type=int, required=True)
    toggle_state = toggle_cmd.add_mutually_exclusive_group(required=True)
    toggle_state.add_argument('--on', dest='active', action='store_true', help='Activate')
    toggle_state.add_argument('--off', dest='active', action='store_false', help='Deactivate')

    generate_cmd = commands.add_parser('generate', help='Generate an HTML report from a file')
    generate_cmd.add_argument('--report-id', type=int, required=True)
    generate_cmd.add_argument('--file', '-f', type=str, required=True, help='PDF, CSV, XLS or XLSX file')
    generate_cmd.add_argument('--prompt', type=str, default='')
    generate_cmd.add_argument('--model', type=str, default=CONFIG.generation.model_name)
    generate_cmd.add_argument(
        '--provider',
        type=str,
        default=CONFIG.generation.provider,
        choices=['', *[provider.value for provider in LLMProvider]],
        help='LLM provider (service default when empty)'
    )
    generate_cmd.add_argument(
        '--output', '-o',
        type=str,
        default=str(Path(CONFIG.output_dir) / CONFIG.generation.download_file_name),
        help='Where to write the HTML report'
    )

    commands.add_parser('health', help='Check the report service is reachable')
    return parser

def _read_template(args) -> str:
    if args.template_file:
        return Path(args.template_file).read_text(encoding='utf-8')
    return args.template

def _print_json(payload) -> None:
    print(json.dumps(payload, indent=2, default=str))

def _print_listing(controller: ReportsController) -> bool:
    if controller.error:
        logger.error(f"❌ {controller.error}")
        return False
    _print_json(controller.state.to_dict())
    return True

def run(args) -> bool:
    """Execute one parsed command."""
    client = ReportApi(base_url=args.base_url)
    try:
        if args.command == 'health':
            healthy = client.health_check()
            print(f"Report service at {client.service_root}: {'OK' if healthy else 'UNREACHABLE'}")
            return healthy

        if args.command == 'generate':
            generation = GenerationController(client=client)
            request = GenerateReportRequest(
                report_id=args.report_id,
                file=UploadedFile.from_path(args.file),
                prompt=args.prompt or None,
                model=args.model or None,
                provider=args.provider or None,
            )
            generation.generate_report(request)
            output = Path(args.output)
            download = generation.download_report(output.name)
            if download is None:
                logger.error("❌ Report service returned an empty report")
                return False
            saved = download.save(str(output.parent))
            logger.info(f"✅ Report written to {saved}")
            return True

        reports = ReportsController(client=client, autoload=False)
        if args.command == 'list':
            reports.fetch_reports(page=args.page, page_size=args.page_size)
            return _print_listing(reports)
        if args.command == 'filter':
            if args.id.strip():
                reports.filter_reports(args.id, user_mail=args.email, page=args.page, page_size=args.page_size)
            else:
                reports.fetch_reports(page=args.page, page_size=args.page_size)
            return _print_listing(reports)
        if args.command == 'create':
            report = reports.create_report(_read_template(args), args.email)
            _print_json(report.model_dump())
            return True
        if args.command == 'update':
            report = reports.update_report(args.id, _read_template(args))
            _print_json(report.model_dump())
            return True
        if args.command == 'toggle':
            reports.toggle_report_status(args.id, args.active)
            print(f"Report {args.id} {'activated' if args.active else 'deactivated'}")
            return True

        logger.error(f"Unknown command: {args.command}")
        return False

    except ReportConsoleError as e:
        logger.error(f"❌ {args.command} failed: {e}")
        return False
    except OSError as e:
        logger.error(f"❌ File error: {e}")
        return False
    finally:
        client.close()

def main():
    """Main execution entry point."""
    args = build_parser().parse_args()
    CONFIG.debug_mode = args.debug or CONFIG.debug_mode
    configure_logging(CONFIG.debug_mode)
    logger.info(f"Report service: {args.base_url}")
    return run(args)

if __name__ == "__main__":
    success = main()
    sys.exit(0 if success else 1)

"""CLI entry point: python -m sitemigrator [--url URL] [options]"""

from __future__ import annotations

import argparse
import logging
import sys
from pathlib import Path

from pydantic import ValidationError

from sitemigrator import settings
from sitemigrator.config import ImportConfig, build_config
from sitemigrator.extractors.markdown import PandocNotFoundError
from sitemigrator.mirror import MirrorError, download_site
from sitemigrator.pipeline import ImportReport, run_import

logger = logging.getLogger(__name__)


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="sitemigrator",
        description=(
            "Convert a mirrored PHP storefront into markdown with front matter,\n"
            "or into a single JSON document for a headless CMS."
        ),
        formatter_class=argparse.RawDescriptionHelpFormatter,
    )
    parser.add_argument("--url", default=None, metavar="URL",
                        help="Mirror this site with wget before converting (replaces --site-dir)")
    parser.add_argument("--site-dir", default=None, metavar="DIR",
                        help=f"Mirrored site to read (default: {settings.SITE_DIR})")
    parser.add_argument("--out", default=None, metavar="DIR",
                        help=f"Output directory (default: {settings.OUTPUT_DIR})")
    parser.add_argument("--format", dest="output_format", default=None,
                        choices=["markdown", "json"], metavar="{markdown,json}",
                        help="Write a markdown tree or one content.json (default: markdown)")
    parser.add_argument("--options", default=None, metavar="FILE",
                        help="YAML/JSON options file layered under the CLI flags")
    parser.add_argument("--converter", default=None,
                        choices=["pandoc", "markdownify"], metavar="{pandoc,markdownify}",
                        help=f"HTML to markdown engine (default: {settings.CONVERTER})")
    parser.add_argument("--categories-in-navigation", action="store_true", default=None,
                        help="Add category pages to the site navigation")
    parser.add_argument("--default-date", default=None, metavar="YYYY-MM-DD",
                        help=f"Date for blog posts without one (default: {settings.DEFAULT_DATE})")
    parser.add_argument("--keep-images", action="store_true", default=None,
                        help="Keep images downloaded by a previous run")
    parser.add_argument("--no-validate", dest="validate_output", action="store_false", default=None,
                        help="Skip the post-run validation pass")
    parser.add_argument("--log-level", default=settings.LOG_LEVEL,
                        choices=["DEBUG", "INFO", "WARNING", "ERROR"],
                        metavar="{DEBUG,INFO,WARNING,ERROR}",
                        help=f"Logging level (default: {settings.LOG_LEVEL})")
    return parser


def _print_banner(config: ImportConfig) -> None:
    from rich.console import Console
    from rich.panel import Panel

    Console().print(
        Panel.fit(
            f"[bold cyan]sitemigrator[/bold cyan]\n"
            f"Site:        [green]{config.url or config.site_dir}[/green]\n"
            f"Output:      [yellow]{config.out_dir}[/yellow]\n"
            f"Format:      {config.output_format}\n"
            f"Converter:   {config.converter}\n"
            f"Categories:  {'in navigation' if config.categories_in_navigation else 'hidden'}\n"
            f"Images:      {'keep' if config.keep_images else 'refresh'}\n"
            f"Validation:  {'on' if config.validate_output else 'off'}",
            border_style="cyan",
            title="[bold]Configuration[/bold]",
        ),
    )


def _print_summary(report: ImportReport) -> None:
    from rich import box
    from rich.console import Console
    from rich.rule import Rule
    from rich.table import Table

    console = Console()
    totals = report.totals

    console.print()
    console.print(Rule("[bold cyan]Import Summary[/bold cyan]"))

    tbl = Table(box=box.SIMPLE_HEAVY, show_lines=False)
    tbl.add_column("Step",      style="cyan",  no_wrap=True)
    tbl.add_column("Converted", style="green", justify="right")
    tbl.add_column("Failed",    style="red",   justify="right")
    tbl.add_column("Total",     justify="right")
    for name, result in report.results.items():
        tbl.add_row(name, str(result.successful), str(result.failed), str(result.total))
    tbl.add_row("[bold]All[/bold]", str(totals.successful), str(totals.failed), str(totals.total))
    console.print(tbl)

    images = report.images
    if images:
        console.print(
            f"  [bold]Images     :[/bold] {images.get('downloaded', 0)} downloaded, "
            f"[yellow]{images.get('failed', 0)}[/yellow] failed",
        )
    console.print(f"  [bold]Items      :[/bold] {report.export.total()}")
    console.print(f"  [bold]Output     :[/bold] [green]{report.output_path}[/green]")

    if report.validation_failures:
        vtbl = Table(
            title=f"[bold red]Validation Failures ({len(report.validation_failures)})[/bold red]",
            box=box.SIMPLE_HEAVY,
        )
        vtbl.add_column("#",       style="dim", justify="right", width=4, no_wrap=True)
        vtbl.add_column("Failure", style="red")
        for i, failure in enumerate(report.validation_failures, 1):
            vtbl.add_row(str(i), failure)
        console.print(vtbl)
    console.print()


def main(argv: list[str] | None = None) -> int:
    parser = _build_parser()
    args = parser.parse_args(argv)

    logging.basicConfig(level=args.log_level, format=settings.LOG_FORMAT)

    try:
        config = build_config(
            args.options,
            url=args.url,
            site_dir=args.site_dir,
            out_dir=args.out,
            output_format=args.output_format,
            converter=args.converter,
            categories_in_navigation=args.categories_in_navigation,
            default_date=args.default_date,
            keep_images=args.keep_images,
            validate_output=args.validate_output,
        )
    except (OSError, ValueError, ValidationError) as exc:
        print(f"ERROR: invalid configuration: {exc}", file=sys.stderr)
        return 1

    _print_banner(config)

    if config.url:
        try:
            download_site(config.url, config.site_dir)
        except MirrorError as exc:
            print(f"ERROR: {exc}", file=sys.stderr)
            return 1

    try:
        report = run_import(config)
    except FileNotFoundError as exc:
        print(f"ERROR: {exc}", file=sys.stderr)
        print("Mirror the site first, e.g. --url https://example.com", file=sys.stderr)
        return 1
    except PandocNotFoundError as exc:
        print(f"ERROR: {exc}", file=sys.stderr)
        print("Install pandoc or rerun with --converter markdownify", file=sys.stderr)
        return 1

    _print_summary(report)
    if not report.ok:
        logger.error(
            "Import finished with %d failed conversions and %d validation failures",
            report.totals.failed, len(report.validation_failures),
        )
        return 1
    logger.info("Import complete: %s", Path(report.output_path or config.out_dir).resolve())
    return 0


if __name__ == "__main__":
    sys.exit(main())

"""Command-line interface for jwmd."""

import argparse
import asyncio
import sys
from pathlib import Path
from typing import Any, Optional

import yaml
from pydantic import ValidationError
from rich.console import Console
from rich.markup import escape
from rich.progress import Progress, SpinnerColumn, TextColumn

from . import __version__
from .core.service import ContentService
from .logging_config import setup_logging
from .models.config import JwmdConfig
from .models.result import ExtractionResult


def create_parser() -> argparse.ArgumentParser:
    """Create argument parser for CLI."""
    parser = argparse.ArgumentParser(
        prog="jwmd",
        description="Convert jw.org and wol.jw.org articles to clean Markdown",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  # Fetch an article and print Markdown
  jwmd https://wol.jw.org/en/wol/d/r1/lp-e/2024245

  # Save to a file
  jwmd https://www.jw.org/en/library/magazines/... -o article.md

  # Convert a page saved from the browser
  jwmd --file article.html

  # Convert just the content fragment, with a title
  jwmd --file content.html --fragment --title "Why Pray?"
        """,
    )

    parser.add_argument(
        "url",
        nargs="?",
        help="Article URL (jw.org or wol.jw.org)",
    )

    parser.add_argument(
        "--version",
        action="version",
        version=f"%(prog)s {__version__}",
    )

    parser.add_argument(
        "--config",
        "-c",
        type=Path,
        default=None,
        metavar="FILE",
        help="YAML configuration file",
    )

    # Input
    input_group = parser.add_argument_group("input")
    input_group.add_argument(
        "--file",
        "-f",
        type=Path,
        default=None,
        metavar="PATH",
        help="Convert a saved HTML page instead of fetching a URL",
    )
    input_group.add_argument(
        "--fragment",
        action="store_true",
        help="Treat --file as the content fragment itself",
    )
    input_group.add_argument(
        "--title",
        type=str,
        default=None,
        help="Title to prepend when converting a fragment",
    )

    # Output
    output_group = parser.add_argument_group("output control")
    output_group.add_argument(
        "--output",
        "-o",
        type=Path,
        default=None,
        metavar="PATH",
        help="Write Markdown to this file (default: stdout)",
    )
    output_group.add_argument(
        "--no-title",
        action="store_true",
        help="Do not prepend the article title",
    )
    output_group.add_argument(
        "--raw",
        action="store_true",
        help="Skip the Markdown cleanup passes",
    )
    output_group.add_argument(
        "--verbose",
        "-v",
        action="store_true",
        help="Verbose output",
    )
    output_group.add_argument(
        "--quiet",
        "-q",
        action="store_true",
        help="Suppress status output",
    )

    # Network settings
    network_group = parser.add_argument_group("network settings")
    network_group.add_argument(
        "--timeout",
        type=float,
        default=None,
        metavar="SECONDS",
        help="Request timeout (default: 10)",
    )
    network_group.add_argument(
        "--user-agent",
        type=str,
        help="Custom User-Agent string",
    )
    network_group.add_argument(
        "--max-retries",
        type=int,
        default=None,
        help="Maximum retry attempts",
    )
    network_group.add_argument(
        "--proxy",
        type=str,
        metavar="URL",
        help="Proxy URL",
    )

    return parser


def build_config(args: argparse.Namespace) -> JwmdConfig:
    """Merge the config file (if any) with command-line overrides."""
    data: dict[str, Any] = {}
    if args.config:
        data = JwmdConfig.from_yaml_file(args.config).model_dump(exclude_unset=True)

    network = data.setdefault("network", {})
    if args.timeout is not None:
        network["timeout"] = args.timeout
    if args.user_agent:
        network["user_agent"] = args.user_agent
    if args.max_retries is not None:
        network["max_retries"] = args.max_retries
    if args.proxy:
        network["proxy"] = args.proxy

    output = data.setdefault("output", {})
    if args.no_title:
        output["include_title"] = False
    if args.raw:
        output["post_process"] = False
    if args.output:
        output["output_file"] = args.output

    if args.verbose:
        data["log_level"] = "DEBUG"
    elif args.quiet:
        data["log_level"] = "ERROR"

    return JwmdConfig.model_validate(data)


def _convert_file(service: ContentService, args: argparse.Namespace) -> ExtractionResult:
    path: Path = args.file
    if args.fragment:
        html = path.read_text(encoding="utf-8")
        markdown = service.convert_fragment(html, args.title)
        return ExtractionResult.ok(html=html, markdown=markdown, title=args.title)
    return service.convert_page(path.read_bytes())


async def _fetch(service: ContentService, url: str, console: Console, quiet: bool) -> ExtractionResult:
    async with service:
        if quiet:
            return await service.extract(url)
        with Progress(
            SpinnerColumn(),
            TextColumn("[progress.description]{task.description}"),
            console=console,
            transient=True,
        ) as progress:
            progress.add_task(f"[cyan]Fetching {url}", total=None)
            return await service.extract(url)


def run(args: argparse.Namespace) -> int:
    """Run a conversion with the given arguments."""
    console = Console(stderr=True)

    if not args.url and not args.file:
        console.print("[red]Error:[/red] Please provide a URL or --file")
        return 1
    if args.url and args.file:
        console.print("[red]Error:[/red] Provide either a URL or --file, not both")
        return 1

    try:
        config = build_config(args)
    except (ValidationError, yaml.YAMLError, OSError, ValueError) as e:
        console.print(f"[red]Configuration error:[/red] {escape(str(e))}")
        return 1

    setup_logging(
        level=config.log_level,
        log_file=str(config.log_file) if config.log_file else None,
    )
    service = ContentService(config)

    try:
        if args.file:
            result = _convert_file(service, args)
        else:
            result = asyncio.run(_fetch(service, args.url, console, args.quiet))
    except OSError as e:
        console.print(f"[red]Error:[/red] {escape(str(e))}")
        return 1

    if not result.success:
        if result.error is not None:
            console.print(f"[red]{result.error.type.value}:[/red] {escape(result.error.message)}", highlight=False)
        return 1

    markdown = result.markdown or ""
    output_file = config.output.output_file
    if output_file:
        output_file.write_text(markdown + "\n", encoding="utf-8")
        if not args.quiet:
            console.print(f"[green]Saved[/green] {output_file}")
    else:
        sys.stdout.write(markdown + "\n")
    return 0


def main(argv: Optional[list[str]] = None) -> int:
    """Main entry point."""
    parser = create_parser()
    args = parser.parse_args(argv)
    return run(args)


if __name__ == "__main__":
    sys.exit(main())

"""mdimport CLI - Main entry point.

Command-line interface for validating markdown documents and turning them
into Contentful import files:
- validate: Check a markdown URL and export line-located findings to CSV
- generate: Build an import file, optionally refusing on failed validation
- import: Push a generated import file with the Contentful CLI
"""

import logging
from pathlib import Path
from typing import Annotated

import typer
from dotenv import load_dotenv
from rich.logging import RichHandler

from mdimport.cli import output
from mdimport.cli.config import (
    CLIConfig,
    clear_credentials,
    get_config_paths,
    get_effective_config,
    get_management_token,
    load_config,
    load_credentials,
    save_credentials,
    update_config,
)
from mdimport.contentful import ContentfulImporter, is_contentful_cli_available
from mdimport.export import build_import_document, export_errors_to_csv, write_import_document
from mdimport.fetch import FetchError, fetch_markdown
from mdimport.markdown import MarkdownValidator, ValidationResult, extract_title
from mdimport.version import __version__

# Main app
app = typer.Typer(
    name="mdimport",
    help="Validate markdown documents and generate Contentful import files.",
    no_args_is_help=True,
    rich_markup_mode="rich",
)

# Config subcommand group
config_app = typer.Typer(
    name="config",
    help="Manage CLI configuration.",
    no_args_is_help=True,
)
app.add_typer(config_app, name="config")

console = output.console

# Common options as type aliases
CsvFileOption = Annotated[
    Path | None,
    typer.Option(
        "--csv",
        help="CSV file for validation errors (default: validation-errors.csv)",
    ),
]

OutputFormatOption = Annotated[
    str | None,
    typer.Option(
        "--format",
        "-f",
        help="Report format: 'text' (human-readable) or 'json' (machine-readable). "
        "Defaults to output.format",
    ),
]

TimeoutOption = Annotated[
    float | None,
    typer.Option(
        "--timeout",
        help="Download timeout in seconds",
    ),
]

VerboseOption = Annotated[
    bool,
    typer.Option(
        "--verbose",
        "-v",
        help="Show detailed output and debug logging",
    ),
]


def configure_logging(verbose: bool) -> None:
    """Route library logging through rich, at DEBUG when verbose."""
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(message)s",
        handlers=[RichHandler(console=output.err_console, show_path=False)],
        force=True,
    )


def resolve_config(**overrides) -> CLIConfig:
    """Load the effective config, exiting on invalid overrides."""
    try:
        return get_effective_config(**overrides)
    except ValueError as e:
        output.print_error(str(e))
        raise typer.Exit(1) from None


def apply_output_settings(config: CLIConfig, verbose: bool) -> bool:
    """Apply the output settings and return the effective verbose flag."""
    output.set_color(config.output.color)
    verbose = verbose or config.output.verbose
    configure_logging(verbose)
    return verbose


def download(url: str, config: CLIConfig, quiet: bool = False) -> str:
    """Fetch the markdown document, exiting with a message on failure."""
    if not quiet:
        output.print_progress(f"Fetching markdown from {url}")
    try:
        markdown = fetch_markdown(url, timeout=config.fetch.timeout)
    except FetchError as e:
        output.print_error(str(e), hint=e.detail)
        raise typer.Exit(1) from None
    if not quiet:
        output.print_success(f"Successfully fetched {len(markdown):,} characters")
    return markdown


def run_validation(markdown: str, title: str, config: CLIConfig) -> ValidationResult:
    """Validate with the thresholds from the configuration."""
    validator = MarkdownValidator(
        max_line_length=config.validation.max_line_length,
        long_line_limit=config.validation.long_line_limit,
    )
    return validator.validate(markdown, title)


def export_errors(result: ValidationResult, csv_file: Path | None, config: CLIConfig) -> None:
    """Export detailed errors to CSV and summarize the export."""
    path = export_errors_to_csv(result.detailed_errors, csv_file or config.errors_path)
    if path is None:
        output.print_info("No errors to export.")
    else:
        output.print_export_summary(path, result)


def version_callback(value: bool) -> None:
    """Print version and exit."""
    if value:
        console.print(f"mdimport version {__version__}")
        raise typer.Exit()


@app.callback()
def main(
    version: Annotated[
        bool,
        typer.Option(
            "--version",
            "-V",
            callback=version_callback,
            is_eager=True,
            help="Show version and exit",
        ),
    ] = False,
) -> None:
    """mdimport - Validate markdown and generate Contentful import files.

    Get started:
        mdimport validate https://raw.githubusercontent.com/user/repo/main/doc.md
        mdimport generate --url <markdown-url> --validate
        mdimport import
    """
    pass


@app.command()
def validate(
    url: Annotated[
        str,
        typer.Argument(help="URL of the markdown file to validate"),
    ],
    csv_file: CsvFileOption = None,
    export: Annotated[
        bool,
        typer.Option(
            "--export/--no-export",
            help="Export line-located findings to CSV",
        ),
    ] = True,
    output_format: OutputFormatOption = None,
    timeout: TimeoutOption = None,
    verbose: VerboseOption = False,
) -> None:
    """Validate a markdown document and export its issues with line numbers.

    Checks for broken links, broken images, missing alt text, multiple H1
    headings, and long lines. Exits with status 1 if critical issues are found.

    Examples:
        mdimport validate https://raw.githubusercontent.com/user/repo/main/doc.md
        mdimport validate <url> --csv reports/errors.csv
        mdimport validate <url> -f json > result.json
    """
    config = resolve_config(output_format=output_format, timeout=timeout)
    verbose = apply_output_settings(config, verbose)
    as_json = config.output.format == "json"

    markdown = download(url, config, quiet=as_json)
    title = extract_title(markdown)
    result = run_validation(markdown, title, config)
    output.print_validation_result(result, config.output.format, verbose)

    if export:
        if as_json:
            export_errors_to_csv(result.detailed_errors, csv_file or config.errors_path)
        else:
            export_errors(result, csv_file, config)

    if not result.success:
        raise typer.Exit(1)


@app.command()
def generate(
    url: Annotated[
        str | None,
        typer.Option(
            "--url",
            "-u",
            help="URL of the markdown file to import (prompted for if omitted)",
        ),
    ] = None,
    validate_first: Annotated[
        bool,
        typer.Option(
            "--validate",
            help="Validate before generating; refuse to generate on critical issues",
        ),
    ] = False,
    export_errors_flag: Annotated[
        bool,
        typer.Option(
            "--export-errors",
            help="Export validation errors to CSV (requires --validate)",
        ),
    ] = False,
    csv_file: CsvFileOption = None,
    output_file: Annotated[
        Path | None,
        typer.Option(
            "--output",
            "-o",
            help="Import file to write (default: outputs/import.json)",
        ),
    ] = None,
    publish: Annotated[
        bool | None,
        typer.Option(
            "--publish/--no-publish",
            help="Publish the entry on import",
            show_default=False,
        ),
    ] = None,
    with_content_type: Annotated[
        bool,
        typer.Option(
            "--with-content-type",
            help="Also create the 'post' content type on import",
        ),
    ] = False,
    content_type: Annotated[
        str | None,
        typer.Option(
            "--content-type",
            help="Content type ID of the generated entry",
        ),
    ] = None,
    locale: Annotated[
        str | None,
        typer.Option(
            "--locale",
            help="Locale code of the generated field values",
        ),
    ] = None,
    timeout: TimeoutOption = None,
    verbose: VerboseOption = False,
) -> None:
    """Generate a Contentful import file from a markdown URL.

    The entry title comes from the first H1 heading, with a fallback title
    when the document has none.

    Examples:
        mdimport generate --url https://raw.githubusercontent.com/user/repo/main/doc.md
        mdimport generate --url <url> --validate --export-errors
        mdimport generate                       # Prompt for the URL
    """
    config = resolve_config(
        content_type=content_type,
        locale=locale,
        publish=publish,
        timeout=timeout,
    )
    verbose = apply_output_settings(config, verbose)

    if not url:
        console.print("\n📦 Generate Contentful Import File")
        console.print("─" * 60)
        url = typer.prompt("📎 Enter the markdown URL", default="", show_default=False)
        if not url.strip():
            output.print_error("URL is required")
            raise typer.Exit(1)
        url = url.strip()

    markdown = download(url, config)
    title = extract_title(markdown)

    if validate_first:
        result = run_validation(markdown, title, config)
        output.print_validation_report(result, verbose=verbose)

        if export_errors_flag:
            export_errors(result, csv_file, config)

        if not result.success:
            output.print_error("Validation failed. Fix issues before generating import.")
            raise typer.Exit(1)
    elif export_errors_flag:
        output.print_warning("--export-errors requires --validate flag to be set.")

    document = build_import_document(
        title,
        markdown,
        content_type_id=config.contentful.content_type,
        locale=config.contentful.locale,
        publish=config.contentful.publish,
        include_content_type=with_content_type,
    )
    path = write_import_document(document, output_file or config.import_path)

    output.print_success("Import file successfully generated!")
    output.print_info(f"Location: {path}")
    output.print_info(f'Title: "{title}"')
    output.print_info(f"Publish on import: {config.contentful.publish}")
    output.print_info("Next step: run 'mdimport import' to import it into Contentful.")


@app.command("import")
def import_file(
    content_file: Annotated[
        Path | None,
        typer.Option(
            "--content-file",
            "-c",
            help="Import file to upload (default: outputs/import.json)",
        ),
    ] = None,
    space_id: Annotated[
        str | None,
        typer.Option(
            "--space-id",
            help="Contentful space ID (or CONTENTFUL_SPACE_ID)",
        ),
    ] = None,
    environment_id: Annotated[
        str | None,
        typer.Option(
            "--environment-id",
            help="Contentful environment ID (or CONTENTFUL_ENVIRONMENT_ID)",
        ),
    ] = None,
    management_token: Annotated[
        str | None,
        typer.Option(
            "--management-token",
            help="Content management token (or CONTENTFUL_MANAGEMENT_TOKEN)",
        ),
    ] = None,
    env_file: Annotated[
        Path,
        typer.Option(
            "--env-file",
            help="Environment file with Contentful settings",
        ),
    ] = Path(".env"),
    verbose: VerboseOption = False,
) -> None:
    """Import a generated file into Contentful using the Contentful CLI.

    Reads CONTENTFUL_SPACE_ID and CONTENTFUL_ENVIRONMENT_ID from the
    environment or a .env file when they are not given as options.

    Examples:
        mdimport import
        mdimport import --space-id abc123 --environment-id master
        mdimport import -c outputs/import.json --env-file prod.env
    """
    if env_file.exists():
        load_dotenv(env_file)

    config = resolve_config(space_id=space_id, environment_id=environment_id)
    apply_output_settings(config, verbose)
    content_path = content_file or config.import_path

    if not content_path.exists():
        output.print_error(
            f"{content_path} not found",
            hint="Generate it first with: mdimport generate --url <markdown-url>",
        )
        raise typer.Exit(1)

    if not config.contentful.space_id:
        output.print_error(
            "No Contentful space ID configured",
            hint="Set CONTENTFUL_SPACE_ID in .env, pass --space-id, "
            "or run 'mdimport config set contentful.space_id <id>'",
        )
        raise typer.Exit(1)

    if not is_contentful_cli_available():
        output.print_error(
            "Contentful CLI not found",
            hint="Install it with: npm install -g contentful-cli",
        )
        raise typer.Exit(1)

    console.print("📦 Starting Contentful import...")
    console.print(f"   Space ID: {config.contentful.space_id}", markup=False)
    console.print(f"   Environment: {config.contentful.environment_id}", markup=False)
    console.print(f"   Import file: {content_path}", markup=False)
    console.print("─" * 60)

    importer = ContentfulImporter(
        space_id=config.contentful.space_id,
        environment_id=config.contentful.environment_id,
        management_token=get_management_token(management_token),
    )
    result = importer.run_import(content_path)

    console.print("─" * 60)
    if not result.success:
        output.print_error(
            f"Import failed: {result.error}",
            hint="Check the Contentful CLI messages above.",
        )
        raise typer.Exit(1)

    output.print_success("Import completed successfully!")


# Config subcommands


@config_app.command("show")
def config_show(
    show_token: Annotated[
        bool,
        typer.Option(
            "--show-token",
            help="Show full management token (default: masked)",
        ),
    ] = False,
) -> None:
    """Show current configuration."""
    config = load_config()
    creds = load_credentials()

    # Merge for display
    config_dict = config.model_dump()
    config_dict["credentials"] = {"management_token": creds.management_token}

    output.print_config(config_dict, show_token)

    paths = get_config_paths()
    output.print_info(f"\nConfig directory: {paths['config_dir']}")


@config_app.command("set")
def config_set(
    key: Annotated[
        str,
        typer.Argument(help="Config key (e.g., contentful.space_id, fetch.timeout)"),
    ],
    value: Annotated[
        str,
        typer.Argument(help="New value"),
    ],
) -> None:
    """Set a configuration value.

    Examples:
        mdimport config set contentful.space_id abc123
        mdimport config set contentful.publish false
        mdimport config set validation.max_line_length 100
    """
    try:
        update_config(key, value)
        output.print_success(f"Set {key} = {value}")
    except ValueError as e:
        output.print_error(str(e))
        raise typer.Exit(1) from None


@config_app.command("path")
def config_path() -> None:
    """Show configuration file paths."""
    paths = get_config_paths()
    console.print(f"Config directory: {paths['config_dir']}", markup=False)
    console.print(f"Config file: {paths['config_file']}", markup=False)
    console.print(f"Credentials file: {paths['credentials_file']}", markup=False)


@config_app.command("set-token")
def config_set_token(
    token: Annotated[
        str,
        typer.Option(
            "--token",
            help="Contentful content management token",
            prompt="Content management token",
            hide_input=True,
        ),
    ],
) -> None:
    """Store a content management token for 'mdimport import'."""
    creds = load_credentials()
    creds.management_token = token
    save_credentials(creds)
    output.print_success("Management token saved")
    output.print_info(f"Credentials: {get_config_paths()['credentials_file']}")


@config_app.command("clear-credentials")
def config_clear_credentials(
    force: Annotated[
        bool,
        typer.Option(
            "--force",
            help="Skip confirmation",
        ),
    ] = False,
) -> None:
    """Remove stored credentials."""
    if not force:
        confirm = typer.confirm("Are you sure you want to remove stored credentials?")
        if not confirm:
            raise typer.Abort()

    clear_credentials()
    output.print_success("Credentials removed")


def cli() -> None:
    """Entry point for CLI."""
    app()


if __name__ == "__main__":
    cli()

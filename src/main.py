"""
IAM Credential Report CLI

Main entry point for the command-line interface.
"""

import sys
from typing import Optional

import click
from rich.console import Console

from .core.aws_client import AWSClient
from .core.exceptions import AWSClientError, CredentialReportError
from .core.logging import setup_logging
from .credential_report.poller import DEFAULT_INTERVAL, DEFAULT_TIMEOUT
from .credential_report.resource import CredentialReportResource
from .reporters.cli_reporter import CLIReporter
from .reporters.csv_reporter import CSVReporter
from .reporters.json_reporter import JSONReporter

console = Console()


def validate_positive(ctx, param, value: float) -> float:
    """Reject zero or negative durations."""
    if value <= 0:
        raise click.BadParameter("must be greater than zero")
    return value


@click.group()
@click.version_option(version="0.1.0", prog_name="iam-credential-report")
@click.option(
    "--log-level",
    type=click.Choice(["DEBUG", "INFO", "WARNING", "ERROR"], case_sensitive=False),
    default="WARNING",
    help="Logging verbosity (default: WARNING)",
)
@click.option(
    "--log-file",
    default=None,
    help="Also write logs to this file",
)
def cli(log_level: str, log_file: Optional[str]):
    """
    IAM Credential Report

    Generates the AWS IAM credential report, flags users with virtual MFA
    devices and prints or exports the result.
    """
    setup_logging(level=log_level, log_file=log_file)


@cli.command("read")
@click.option(
    "--profile",
    "-p",
    default=None,
    help="AWS profile name from ~/.aws/credentials",
)
@click.option(
    "--region",
    "-r",
    default="us-east-1",
    help="AWS region to sign IAM requests for (default: us-east-1)",
)
@click.option(
    "--timeout",
    default=DEFAULT_TIMEOUT,
    type=float,
    callback=validate_positive,
    help="Seconds to wait for report generation (default: 60)",
)
@click.option(
    "--poll-interval",
    default=DEFAULT_INTERVAL,
    type=float,
    callback=validate_positive,
    help="Seconds between report requests (default: 2)",
)
@click.option(
    "--format",
    "-f",
    "output_format",
    type=click.Choice(["cli", "csv", "json"]),
    default="cli",
    help="Output format (default: cli)",
)
@click.option(
    "--output",
    "-o",
    default=None,
    help="Output file path (csv and json formats only)",
)
def read_report(
    profile: Optional[str],
    region: str,
    timeout: float,
    poll_interval: float,
    output_format: str,
    output: Optional[str],
):
    """
    Generate and read the IAM credential report.

    Examples:

        # Show the report in the terminal
        iam-credential-report read

        # Export to JSON on stdout
        iam-credential-report read --format json

        # Export to a CSV file using a named profile
        iam-credential-report read -p audit -f csv -o report.csv
    """
    if output and output_format == "cli":
        raise click.UsageError("--output requires --format csv or --format json")

    cli_reporter = CLIReporter(console)

    try:
        with AWSClient(region=region, profile=profile) as client:
            resource = CredentialReportResource(
                client, timeout=timeout, poll_interval=poll_interval
            )

            with console.status("Generating credential report..."):
                state = resource.create()

        if output_format == "json":
            json_reporter = JSONReporter(output_path=output)
            if output:
                path = json_reporter.report(state)
                console.print(f"[green]Saved to {path}[/green]")
            else:
                click.echo(json_reporter.to_string(state))
        elif output_format == "csv":
            path = CSVReporter(output_path=output).report(state)
            console.print(f"[green]Saved to {path}[/green]")
        else:
            cli_reporter.report(state)

    except CredentialReportError as e:
        cli_reporter.print_error(str(e))
        sys.exit(1)
    except KeyboardInterrupt:
        console.print("\n[yellow]Cancelled by user.[/yellow]")
        sys.exit(130)


@cli.command("validate")
@click.option(
    "--profile",
    "-p",
    default=None,
    help="AWS profile name from ~/.aws/credentials",
)
@click.option(
    "--region",
    "-r",
    default="us-east-1",
    help="AWS region to use for validation",
)
def validate_credentials(profile: Optional[str], region: str):
    """Validate AWS credentials and show account info."""
    try:
        with AWSClient(region=region, profile=profile) as client:
            client.validate_credentials()
            account_id = client.get_account_id()

        console.print("\n[green bold]AWS credentials are valid![/green bold]")
        console.print(f"\n  Account ID: {account_id}")
        console.print(f"  Region: {region}")
        if profile:
            console.print(f"  Profile: {profile}")
        console.print()

    except AWSClientError as e:
        console.print(f"\n[red bold]Validation Failed:[/red bold] {str(e)}")
        sys.exit(1)


def main():
    """Main entry point."""
    cli()


if __name__ == "__main__":
    main()

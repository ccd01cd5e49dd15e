"""CLI entry point for openapi-publisher."""

import logging
from pathlib import Path

import click

from openapi_publisher.config import DEFAULT_SOURCE, PublisherSettings
from openapi_publisher.errors import PublisherError
from openapi_publisher.parser.openapi import load_document
from openapi_publisher.reconcile.engine import Reconciler
from openapi_publisher.release.publisher import ReleasePublisher


def _setup(settings: PublisherSettings) -> ReleasePublisher:
    """Load and reconcile the source document."""
    source = settings.require_source()
    click.echo(f"Reconciling {source}...")
    document = load_document(source)

    report = Reconciler(document, settings.extension_policy()).reconcile()
    click.echo(f"Kept {len(document.schemas)} schemas, removed {len(report.unused)}.")
    if report.unused:
        click.echo(f"  Unused: {', '.join(report.unused)}")

    return ReleasePublisher(document)


def _settings(**options) -> PublisherSettings:
    return PublisherSettings(
        source=options["source"],
        release_folder=options["release_folder"],
        reconciled_api=options.get("reconciled_api"),
        always_include_tag_values=list(options["always_include_tag"]),
        remove_object_extensions=list(options["remove_object_extension"]),
        remove_property_extensions=list(options["remove_property_extension"]),
        illegal_extensions=list(options["illegal_extension"]),
    )


def _policy_options(command):
    options = [
        click.option("-s", "--source", default=DEFAULT_SOURCE, envvar="OPENAPI_PUBLISHER_SOURCE", type=click.Path(path_type=Path), show_default=True, help="OpenAPI document to reconcile."),
        click.option("--release-folder", default=None, envvar="OPENAPI_PUBLISHER_RELEASE_FOLDER", type=click.Path(file_okay=False, path_type=Path), help="Folder holding releases.json and the version snapshots."),
        click.option("--always-include-tag", multiple=True, help="x-publish-include tag value that keeps an unreferenced schema."),
        click.option("--remove-object-extension", multiple=True, help="Extension to strip from every schema."),
        click.option("--remove-property-extension", multiple=True, help="Extension to strip from every schema property."),
        click.option("--illegal-extension", multiple=True, help="Extension that must not appear in a kept schema."),
    ]
    for option in reversed(options):
        command = option(command)
    return command


@click.group()
@click.option("-v", "--verbose", is_flag=True, help="Log reconciliation and release details.")
def main(verbose: bool):
    """OpenAPI Publisher — prune API documents and manage their releases."""
    logging.basicConfig(
        level=logging.INFO if verbose else logging.WARNING,
        format="%(levelname)s %(name)s: %(message)s",
    )


@main.command()
@_policy_options
@click.option("--reconciled-api", default=None, type=click.Path(dir_okay=False, path_type=Path), help="Also write the reconciled document to this path.")
def reconcile(**options):
    """Reconcile the document and record it as a release version."""
    settings = _settings(**options)
    try:
        publisher = _setup(settings)

        if settings.release_folder is not None:
            publisher.update_release(settings.release_folder)
            click.echo(f"Recorded version {publisher.version} in {settings.release_folder}")

        if settings.reconciled_api is not None:
            publisher.write_reconciliation(settings.reconciled_api)
            click.echo(f"Reconciled API saved to {settings.reconciled_api}")
    except PublisherError as e:
        raise click.ClickException(str(e)) from e


@main.command()
@_policy_options
def publish(**options):
    """Reconcile the document and mark its recorded version as published."""
    settings = _settings(**options)
    try:
        publisher = _setup(settings)

        if settings.release_folder is not None:
            publisher.publish(settings.release_folder)
            click.echo(f"Published version {publisher.version} in {settings.release_folder}")
    except PublisherError as e:
        raise click.ClickException(str(e)) from e

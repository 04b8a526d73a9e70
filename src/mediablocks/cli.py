"""Command-line interface for mediablocks."""

import shutil
from pathlib import Path

import click

from .config import CONFIG_DIR, CONFIG_FILE, Config


def get_default_config_content() -> str:
    """Get the default config.toml content from bundled defaults."""
    import importlib.resources

    config_file = importlib.resources.files("mediablocks.defaults").joinpath(
        "config.toml"
    )
    return config_file.read_text(encoding="utf-8")


@click.group()
@click.version_option(package_name="mediablocks")
def main():
    """mediablocks - Obsidian picture/figure callouts for markdown sites."""
    pass


@main.command()
@click.option("--force", "-f", is_flag=True, help="Overwrite existing files")
def init(force: bool):
    """Initialize a new mediablocks project."""
    from .templates import copy_default_templates

    project_dir = Path.cwd() / CONFIG_DIR
    config_file = project_dir / CONFIG_FILE

    if config_file.exists() and not force:
        click.echo(f"Error: {CONFIG_DIR}/{CONFIG_FILE} already exists", err=True)
        click.echo("Use --force to overwrite", err=True)
        raise SystemExit(1)

    project_dir.mkdir(exist_ok=True)
    config_file.write_text(get_default_config_content(), encoding="utf-8")
    click.echo(f"Created {config_file}")

    templates_dir = project_dir / "templates"
    created = copy_default_templates(templates_dir, force)
    if created:
        click.echo(f"Created {templates_dir}/ ({len(created)} templates)")

    click.echo("\nRun 'mediablocks build' to build your site")


@main.command()
@click.argument("source", type=click.File("r", encoding="utf-8"), default="-")
@click.option(
    "--output", "-o", type=click.File("w", encoding="utf-8"), default="-",
    help="Write the result here instead of stdout",
)
@click.option("--html", is_flag=True, help="Render to HTML instead of directives")
@click.option("--verbose", "-v", is_flag=True, help="Verbose output")
def transform(source, output, html: bool, verbose: bool):
    """Rewrite media callouts in a markdown file.

    Reads SOURCE (stdin by default) and writes the document with picture and
    figure callouts replaced by template directives, or rendered HTML with
    --html.
    """
    from .logging import ComponentLogger, setup_logging
    from .transform import transform as do_transform

    setup_logging(verbose=verbose)
    text = source.read()

    if html:
        from .markdown_utils import render_markdown

        result = render_markdown(text)
    else:
        result = do_transform(text, logger=ComponentLogger())

    output.write(result)


@main.command()
@click.option("--force", "-f", is_flag=True, help="Force full rebuild")
@click.option("--verbose", "-v", is_flag=True, help="Verbose output")
def build(force: bool, verbose: bool):
    """Build the static site."""
    from .build import build as do_build
    from .logging import setup_logging

    setup_logging(verbose=verbose)

    try:
        config = Config.find_and_load()
    except FileNotFoundError as e:
        click.echo(f"Error: {e}", err=True)
        raise SystemExit(1)

    result = do_build(config=config, force_rebuild=force)

    if result == 0:
        click.echo("No pages found to build", err=True)
        raise SystemExit(1)


@main.command()
def clean():
    """Remove build artifacts."""
    build_dir = Path.cwd() / CONFIG_DIR / "build"

    if build_dir.exists():
        shutil.rmtree(build_dir)
        click.echo(f"Removed {build_dir}")
    else:
        click.echo("Nothing to clean")


if __name__ == "__main__":
    main()

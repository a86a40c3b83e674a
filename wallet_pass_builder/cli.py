"""
Command line entry point.

Usage:
    wallet-pass check ./templates/event
    wallet-pass build ./templates/event --fields ticket.json --out ticket.pkpass

Signing credentials come from the environment, see config.py.
"""

import json
import logging
import sys
from pathlib import Path

import click

from .config import WalletSettings
from .exceptions import WalletPassError
from .template import Template

logger = logging.getLogger(__name__)


def _configure_logging(verbose: bool):
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.INFO,
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
    )


@click.group()
@click.option("--verbose", "-v", is_flag=True, help="Verbose output")
def main(verbose):
    """Build signed wallet pass bundles."""
    _configure_logging(verbose)


@main.command()
@click.argument("template_dir", type=click.Path(exists=True, file_okay=False))
@click.option("--fields", "fields_file", type=click.Path(exists=True, dir_okay=False), help="JSON file with pass fields")
@click.option("--allow-http", is_flag=True, help="Allow http:// webServiceURL")
def check(template_dir, fields_file, allow_http):
    """Validate a template folder (and optional fields) without signing."""
    try:
        settings = WalletSettings.from_env()
        template = Template.load(
            template_dir,
            allow_http=allow_http or settings.allow_http,
            max_workers=settings.image_workers,
        )
        fields = json.loads(Path(fields_file).read_text(encoding="utf-8")) if fields_file else None
        template.create_pass(fields).validate()
    except (WalletPassError, TypeError, ValueError) as e:
        click.echo(f"Validation Error: {e}", err=True)
        sys.exit(2)
    click.echo(f"Template OK: {template_dir} ({len(template.images)} images)")


@main.command()
@click.argument("template_dir", type=click.Path(exists=True, file_okay=False))
@click.option("--fields", "fields_file", type=click.Path(exists=True, dir_okay=False), help="JSON file with pass fields")
@click.option("--out", "out_path", type=click.Path(dir_okay=False), help="Output .pkpass path")
@click.option("--env-file", type=click.Path(exists=True, dir_okay=False), help="Load environment from this file")
@click.option("--allow-http", is_flag=True, help="Allow http:// webServiceURL")
def build(template_dir, fields_file, out_path, env_file, allow_http):
    """Build and sign a .pkpass from a template folder."""
    try:
        settings = WalletSettings.from_env(env_file)
        template = Template.load(
            template_dir,
            allow_http=allow_http or settings.allow_http,
            max_workers=settings.image_workers,
        )
        template.load_credentials(settings)
        fields = json.loads(Path(fields_file).read_text(encoding="utf-8")) if fields_file else None
        pass_obj = template.create_pass(fields)
        output = Path(out_path or f"{pass_obj.serial_number or 'pass'}.pkpass")
        pass_obj.write(output)
    except (WalletPassError, TypeError, ValueError) as e:
        click.echo(f"Validation Error: {e}", err=True)
        sys.exit(2)
    except FileNotFoundError as e:
        click.echo(f"File Error: {e}", err=True)
        sys.exit(3)
    click.echo(f"Created: {output}")


if __name__ == "__main__":
    main()

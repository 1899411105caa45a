"""Operator tool: generate a master key for a new deployment."""
import click

from ..conf import ENCRYPTION_KEY_ENV
from .config import generate_master_key


@click.command()
@click.option(
    "--env", "as_env", is_flag=True,
    help=f"Print as {ENCRYPTION_KEY_ENV}=<key> for an .env file",
)
def main(as_env: bool):
    """Generate a random 256-bit key for AES-256-GCM."""
    key = generate_master_key()
    if as_env:
        click.echo(f"{ENCRYPTION_KEY_ENV}={key}")
    else:
        click.echo(key)
    click.echo(
        "Keep this key secret and backed up: if it is lost or changed, "
        "every stored secret becomes unreadable.",
        err=True,
    )


if __name__ == "__main__":
    main()

import click

from biotrack.jobs.observation_links import import_globi_links
from biotrack.jobs.update_digest import email_updates


def register_commands(app):
    @app.cli.command("send-update-digests")
    def send_update_digests():
        """Email yesterday's updates to every subscriber who got some."""
        result = email_updates()
        click.echo(f"checked {result.checked}, sent {result.sent} in {result.elapsed:.2f} s")

    @app.cli.command("import-globi-links")
    @click.argument("url")
    @click.option("--debug", "-d", is_flag=True, help="Report what would change without writing.")
    def import_globi_links_command(url, debug):
        """Create ObservationLinks for observations that have been integrated into GloBI.

        URL points at a provider/consumer CSV.
        """
        result = import_globi_links(url, debug=debug)
        click.echo(
            f"{result['created']} created, {result['updated']} updated, "
            f"{result['deleted']} deleted in {result['elapsed']} s"
        )

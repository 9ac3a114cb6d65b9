"""
Flask CLI commands.

Commands:
- flask init-db: Create all tables
- flask create-company: Register a company from the command line
"""

import click
from careers.database import create_all, get_session
from careers.exceptions import CareersError


def init_cli_commands(app):
    """Register CLI commands with Flask app."""

    @app.cli.command('init-db')
    def init_db_command():
        """Create database tables."""
        create_all()
        click.echo(click.style('Database tables created.', fg='green'))

    @app.cli.command('create-company')
    @click.option('--name', prompt=True, help='Company display name')
    @click.option('--email', prompt=True, help='Login email')
    @click.option('--password', prompt=True, hide_input=True, confirmation_prompt=True, help='Login password')
    @click.option('--slug', default=None, help='Page address (derived from the name when omitted)')
    def create_company(name, email, password, slug):
        """Create a company account with the default careers page."""
        from careers.services import company_service

        try:
            company, token = company_service.signup(get_session(), name, email, password, slug=slug)
        except CareersError as e:
            click.echo(click.style(f'Could not create company: {e.message}', fg='red'))
            raise SystemExit(1)

        click.echo(click.style('Company created.', fg='green', bold=True))
        click.echo(f'   ID:    {company.id}')
        click.echo(f'   Slug:  {company.slug}')
        click.echo(f'   Page:  {app.config["SITE_BASE_URL"]}/{company.slug}/careers')
        click.echo(f'   Token: {token}')

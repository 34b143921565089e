"""
Flask CLI commands.

Commands:
- flask init-db: Create all tables
- flask create-company: Add a company to scope documents to
- flask backfill-order-lines: Fill product_code/color/size on legacy order lines
"""

import click
from solestock.database import create_all, get_session
from solestock.models import Company, SalesOrderLine
from solestock.services.size_matrix import parse_description
from solestock.utils.sizes import is_valid_size


def init_cli_commands(app):
    """Register CLI commands with Flask app."""

    @app.cli.command('init-db')
    def init_db_command():
        """Create every table that does not exist yet."""
        create_all()
        click.echo(click.style('Database tables created.', fg='green'))

    @app.cli.command('create-company')
    @click.option('--name', prompt=True, help='Company name')
    def create_company(name):
        """Create a company and print its id (used as X-Company-Id)."""
        db_session = get_session()
        try:
            company = Company(name=name.strip())
            db_session.add(company)
            db_session.commit()
            click.echo(click.style(f'Company created: id={company.id} name={company.name}', fg='green'))
        except Exception as e:
            db_session.rollback()
            click.echo(click.style(f'Could not create company: {e}', fg='red'))
            raise click.Abort()

    @app.cli.command('backfill-order-lines')
    @click.option('--dry-run', is_flag=True, help='Report what would change without saving')
    def backfill_order_lines(dry_run):
        """
        Parse the description of order lines saved before product_code,
        color and size were stored, and fill those columns in.
        """
        db_session = get_session()
        lines = db_session.query(SalesOrderLine).filter(SalesOrderLine.product_code.is_(None)).all()

        updated = 0
        skipped = 0
        for line in lines:
            product_code, color, size = parse_description(line.description)
            if not product_code or not is_valid_size(size):
                skipped += 1
                click.echo(f'  skip line id={line.id}: {line.description!r}')
                continue
            line.product_code = product_code
            line.color = color
            line.size = size
            updated += 1

        if dry_run:
            db_session.rollback()
            click.echo(f'Dry run: {updated} lines would be updated, {skipped} skipped.')
            return

        try:
            db_session.commit()
        except Exception as e:
            db_session.rollback()
            click.echo(click.style(f'Backfill failed: {e}', fg='red'))
            raise click.Abort()

        click.echo(click.style(f'{updated} lines updated, {skipped} skipped.', fg='green'))

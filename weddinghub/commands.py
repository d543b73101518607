"""
Flask CLI commands
    flask --app app init-db
    flask --app app seed
    flask --app app set-admin-password
"""
import click
from flask.cli import with_appcontext

from weddinghub.bootstrap import seed_demo_data, set_admin_password
from weddinghub.errors import Conflict
from weddinghub.models import db


@click.command('init-db')
@with_appcontext
def init_db_command():
    """Create all database tables."""
    db.create_all()
    click.echo('Database tables created.')


@click.command('seed')
@with_appcontext
def seed_command():
    """Create the admin account and the demo vendor."""
    created = seed_demo_data()
    if created:
        click.echo(f"Created: {', '.join(created)}")
    else:
        click.echo('Nothing to seed.')


@click.command('set-admin-password')
@click.password_option(help='Password for the admin account (min 8 characters).')
@click.option('--name', default='System Administrator', show_default=True)
@with_appcontext
def set_admin_password_command(password, name):
    """Set the admin password once, while the admin account has none."""
    if len(password) < 8:
        raise click.BadParameter('must be at least 8 characters', param_hint='--password')
    try:
        admin = set_admin_password(password, name)
    except Conflict as e:
        raise click.ClickException(e.message)
    click.echo(f"Admin password set for {admin.email}")


def register_commands(app):
    app.cli.add_command(init_db_command)
    app.cli.add_command(seed_command)
    app.cli.add_command(set_admin_password_command)

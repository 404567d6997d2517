# media_ops/database_setup.py
import click

from media_ops import db


def init_database(app):
    """Drops every table and creates them again from the models."""
    # Models must be imported so SQLAlchemy knows about them
    from .production.models import JobCard, JobCardHistory, DeliverySettings  # noqa: F401

    with app.app_context():
        app.logger.info("Resetting local database...")
        db.drop_all()
        db.create_all()
        app.logger.info("Local database has been successfully reset.")


def register_commands(app):
    @app.cli.command('init-db')
    def init_db_command():
        """Reset the production workflow database."""
        init_database(app)
        click.echo('Database initialised.')

from __future__ import annotations

import logging
import os

import click
from flask import Flask, jsonify, redirect, request, url_for
from flask_login import login_required

from app.core.auth import auth_bp
from app.core.config import Config
from app.core.extensions import db, login_manager, migrate
from app.core.i18n import translate
from app.core.models import User, seed_demo_data
from app.demandas.routes import demandas_bp, documentos_bp


def create_app(config_object: type[Config] | None = None) -> Flask:
    app = Flask(__name__)
    app.config.from_object(config_object or Config)
    logging.basicConfig(level=app.config.get("LOG_LEVEL", "INFO"))

    db.init_app(app)
    migrate.init_app(app, db)
    login_manager.init_app(app)

    app.register_blueprint(auth_bp)
    app.register_blueprint(demandas_bp)
    app.register_blueprint(documentos_bp)

    register_cli(app)
    register_routes(app)
    return app


def register_routes(app: Flask) -> None:
    @app.get("/")
    def home():
        return redirect(url_for("dashboard_page"))

    @app.get("/dashboard")
    @login_required
    def dashboard_page():
        from app.demandas.services import management_counters

        return jsonify(management_counters(request.args.getlist("analista")))

    @app.errorhandler(403)
    def forbidden(_error):
        return jsonify({"error": translate("error.forbidden")}), 403

    @app.errorhandler(404)
    def not_found(_error):
        return jsonify({"error": translate("error.not_found")}), 404


def register_cli(app: Flask) -> None:
    @app.cli.command("seed-demo")
    @click.option("--reset", is_flag=True, help="Delete existing data before seed.")
    def seed_demo(reset: bool) -> None:
        """Seed demo users, demands and documents."""
        if reset:
            if not _is_dev_mode(app):
                raise click.ClickException("Reset blocked outside the DEV environment.")
            db.drop_all()
            db.create_all()
        if not User.query.first():
            seed_demo_data(db.session)
            click.echo("Demo data seeded.")
        else:
            click.echo("Seed skipped: existing users found.")

    @app.cli.command("demandas-status-report")
    @click.option("--only-divergent", is_flag=True, help="Show only demands whose stored status differs.")
    def demandas_status_report(only_divergent: bool) -> None:
        """Print stored vs derived status and incomplete documents per demand."""
        from app.demandas.services import status_report

        rows = status_report()
        if only_divergent:
            rows = [row for row in rows if row["status"] != row["status_calculado"]]
        if not rows:
            click.echo("No demands found.")
            return
        for row in rows:
            click.echo(
                f"[{row['sged']}] status={row['status']} calculado={row['status_calculado']} "
                f"incompletos={row['incompletos']}"
            )


def _is_dev_mode(app: Flask) -> bool:
    if app.debug:
        return True
    flask_env = (os.getenv("FLASK_ENV") or "").strip().lower()
    app_env = (app.config.get("APP_ENV") or os.getenv("APP_ENV") or "").strip().lower()
    return flask_env == "development" or app_env in {"dev", "development"}


@login_manager.user_loader
def load_user(user_id: str) -> User | None:
    return db.session.get(User, int(user_id))


@login_manager.unauthorized_handler
def unauthorized():
    return jsonify({"error": translate("auth.login_required")}), 401

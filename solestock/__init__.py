"""Flask application factory."""
from flask import Flask, jsonify
from solestock.database import init_db
import os


def create_app(config_object='config.Config'):
    """Create and configure the Flask application."""
    app = Flask(__name__)
    app.config.from_object(config_object)

    # Sentry error tracking in production
    if os.getenv('SENTRY_DSN') and (app.config.get('ENV') == 'production' or os.getenv('FLASK_ENV') == 'production'):
        import sentry_sdk
        from sentry_sdk.integrations.flask import FlaskIntegration

        sentry_sdk.init(
            dsn=os.getenv('SENTRY_DSN'),
            integrations=[FlaskIntegration()],
            traces_sample_rate=0.1,
            environment=os.getenv('FLASK_ENV', 'production'),
            release=os.getenv('GIT_COMMIT', 'unknown')
        )

    # Redis cache for catalog reads
    from solestock.services.cache_service import init_cache
    init_cache(app)

    # Prometheus request metrics
    from solestock.blueprints.metrics import setup_metrics_instrumentation
    setup_metrics_instrumentation(app)

    # Production: trust X-Forwarded-* from the reverse proxy
    if app.config.get('ENV') == 'production':
        from werkzeug.middleware.proxy_fix import ProxyFix
        app.wsgi_app = ProxyFix(app.wsgi_app, x_for=1, x_proto=1, x_host=1, x_port=1, x_prefix=0)

    init_db(app)

    from solestock.middleware import load_company_context

    @app.before_request
    def before_request_handler():
        """Resolve the company every document request is scoped to."""
        load_company_context()

    # Error Handlers
    from solestock.exceptions import ErpError
    from werkzeug.exceptions import HTTPException

    @app.errorhandler(ErpError)
    def handle_erp_error(error):
        app.logger.warning(f"ErpError [{error.status_code}]: {error.message}")
        return jsonify(error.to_dict()), error.status_code

    @app.errorhandler(404)
    def not_found_error(error):
        return jsonify({'status': 'error', 'message': 'Not Found'}), 404

    @app.errorhandler(HTTPException)
    def http_error(error):
        return jsonify({'status': 'error', 'message': error.description}), error.code

    @app.errorhandler(500)
    @app.errorhandler(Exception)
    def internal_error(error):
        app.logger.exception(f"Unhandled Exception: {error}")
        return jsonify({'status': 'error', 'message': str(error) or 'Internal Server Error'}), 500

    # Register blueprints
    from solestock.blueprints.main import main_bp
    from solestock.blueprints.metrics import metrics_bp
    from solestock.blueprints.catalog import catalog_bp
    from solestock.blueprints.orders import orders_bp
    from solestock.blueprints.invoices import invoices_bp
    from solestock.blueprints.bills import bills_bp
    from solestock.blueprints.return_notes import return_notes_bp
    from solestock.blueprints.templates import templates_bp
    from solestock.blueprints.journals import journals_bp
    from solestock.blueprints.stock import stock_bp

    app.register_blueprint(main_bp)
    app.register_blueprint(metrics_bp)
    app.register_blueprint(catalog_bp)
    app.register_blueprint(orders_bp)
    app.register_blueprint(invoices_bp)
    app.register_blueprint(bills_bp)
    app.register_blueprint(return_notes_bp)
    app.register_blueprint(templates_bp)
    app.register_blueprint(journals_bp)
    app.register_blueprint(stock_bp)

    from solestock.cli_commands import init_cli_commands
    init_cli_commands(app)

    return app

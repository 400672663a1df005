import os
import logging
from flask import Flask, Response
from flask_limiter import Limiter
from flask_limiter.util import get_remote_address

from .detector import ClientDetector, classify_signal
from .signals import ClientSignal

__all__ = ['create_app', 'ClientDetector', 'ClientSignal', 'classify_signal']


def _configure_logging() -> str:
    level_name = os.environ.get('CLIENTSCAN_LOG_LEVEL', 'INFO').upper()
    level = getattr(logging, level_name, logging.INFO)
    logging.basicConfig(
        level=level,
        format='%(asctime)s [%(levelname)s] %(name)s: %(message)s'
    )
    # Optional rotating file handler for persistent logs (useful in production)
    log_file = os.environ.get('CLIENTSCAN_LOG_FILE')
    if log_file:
        try:
            from logging.handlers import RotatingFileHandler
            max_bytes = int(os.environ.get('CLIENTSCAN_LOG_MAX_BYTES', str(5 * 1024 * 1024)))
            backup = int(os.environ.get('CLIENTSCAN_LOG_BACKUP_COUNT', '5'))
            fh = RotatingFileHandler(log_file, maxBytes=max_bytes, backupCount=backup)
            fh.setLevel(level)
            fh.setFormatter(logging.Formatter('%(asctime)s [%(levelname)s] %(name)s: %(message)s'))
            logging.getLogger().addHandler(fh)
            logging.getLogger(__name__).info(
                'RotatingFileHandler attached path=%s max_bytes=%d backups=%d',
                log_file, max_bytes, backup)
        except (OSError, ValueError) as e:
            logging.getLogger(__name__).warning('failed attaching RotatingFileHandler for %s: %s', log_file, e)
    logging.getLogger('werkzeug').setLevel(logging.WARNING)
    return level_name


def create_app():
    app = Flask(__name__)

    level_name = _configure_logging()
    logging.getLogger(__name__).info('Logging initialized at level %s', level_name)

    # Rate limiting configuration
    default_rate = os.environ.get('CLIENTSCAN_RATE_LIMIT', '60 per minute')
    storage_uri = os.environ.get('CLIENTSCAN_LIMITER_STORAGE', 'memory://')
    limiter = Limiter(key_func=get_remote_address, app=app, default_limits=[default_rate], storage_uri=storage_uri)
    # Expose limiter for blueprints to use specific limits
    app.extensions['limiter'] = limiter

    app.config['CLIENTSCAN_VERSION'] = os.environ.get('CLIENTSCAN_VERSION', '0.1.0')

    # register blueprints
    from .routes.api_v1 import api_v1
    from .routes.system import system_bp
    from .routes.admin import admin_bp
    app.register_blueprint(api_v1)
    app.register_blueprint(system_bp)
    app.register_blueprint(admin_bp)
    # health probes and scrapes must never be throttled
    limiter.exempt(system_bp)

    @app.route('/metrics/prometheus')
    @limiter.exempt
    def _metrics_prometheus():
        from . import metrics
        return Response(metrics.get_metrics(), mimetype=metrics.get_content_type())

    rule_paths = sorted({r.rule for r in app.url_map.iter_rules()})
    logging.getLogger(__name__).info('Route map initialized count=%d sample=%s', len(rule_paths), rule_paths[:15])
    return app

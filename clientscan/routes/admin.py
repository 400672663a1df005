
from flask import Blueprint, request, jsonify
import os, logging

from ..logging_utils import get_suppressed_snapshot, reset_suppressed_state

admin_bp = Blueprint('admin', __name__, url_prefix='/admin')

_NAMESPACES = ['clientscan', 'clientscan.api', 'clientscan.detector', 'clientscan.extractors',
               'clientscan.fusion', 'clientscan.resolver', 'clientscan.cache', 'clientscan.admin']


def _check_auth():
    token_required = os.environ.get('CLIENTSCAN_ADMIN_TOKEN')
    if not token_required:  # open if not set
        return True
    provided = request.headers.get('X-Admin-Token')
    return provided == token_required

@admin_bp.before_request
def admin_auth():
    if not _check_auth():
        return jsonify({'error': 'unauthorized'}), 401

@admin_bp.route('/log_level', methods=['GET','POST'])
def log_level():
    """Get or update active root/application log level at runtime.

    GET  /admin/log_level -> { level: CURRENT }
    POST /admin/log_level {"level": "DEBUG"} (accepts DEBUG, INFO, WARNING, ERROR, CRITICAL)
    Optional header: X-Admin-Token if CLIENTSCAN_ADMIN_TOKEN set.
    Also updates env var CLIENTSCAN_LOG_LEVEL for downstream spawned processes.
    """
    current = logging.getLogger().getEffectiveLevel()
    if request.method == 'GET':
        return jsonify({'status':'ok','level': logging.getLevelName(current)})
    data = request.get_json(silent=True) or {}
    lvl = str(data.get('level') or '').upper().strip()
    mapping = {
        'DEBUG': logging.DEBUG,
        'INFO': logging.INFO,
        'WARNING': logging.WARNING,
        'WARN': logging.WARNING,
        'ERROR': logging.ERROR,
        'CRITICAL': logging.CRITICAL
    }
    if lvl not in mapping:
        return jsonify({'error': 'level must be one of DEBUG, INFO, WARNING, ERROR, CRITICAL'}), 400
    logging.getLogger().setLevel(mapping[lvl])
    # Also ensure our namespace loggers inherit / update
    for name in _NAMESPACES:
        logging.getLogger(name).setLevel(mapping[lvl])
    os.environ['CLIENTSCAN_LOG_LEVEL'] = lvl
    logging.getLogger('clientscan.admin').info('log level changed runtime level=%s', lvl)
    return jsonify({'status':'ok','level': lvl})

@admin_bp.route('/suppressed', methods=['GET','DELETE'])
def suppressed_view():
    """Inspect or reset throttled soft-failure counters (extractor failures).

    GET    -> { status, suppressed: { "logger:context:level": {count, last_emit, last_error} } }
    DELETE -> clears all counters
    """
    if request.method == 'DELETE':
        reset_suppressed_state()
        logging.getLogger('clientscan.admin').info('suppressed log counters reset')
        return jsonify({'status': 'ok', 'reset': True})
    return jsonify({'status': 'ok', 'suppressed': get_suppressed_snapshot()})

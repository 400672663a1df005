"""API v1 Blueprint - Versioned API endpoints.

All API endpoints live under the /api/v1/ prefix.
"""

from flask import Blueprint, request, jsonify
import logging

from ..cache import NullCache
from ..detector import ClientDetector
from ..exceptions import ClientScanException, SignalValidationError, error_response, make_error_response
from ..labels import BrowserLabel
from ..signals import signal_from_headers, signal_from_payload

api_v1 = Blueprint('api_v1', __name__, url_prefix='/api/v1')

logger = logging.getLogger('clientscan.api')


def _detector_for(signal) -> ClientDetector:
    # One request is one client: never serve another request's cached result.
    return ClientDetector(signal, cache=NullCache())


@api_v1.errorhandler(ClientScanException)
def _handle_clientscan_error(exc: ClientScanException):
    body, status = error_response(exc)
    logger.info('request rejected code=%s status=%d message=%s', exc.error_code, status, exc.message)
    return jsonify(body), status


# ============ Classification Endpoints ============

@api_v1.route('/classify', methods=['GET', 'POST'])
def classify():
    """Classify the calling client.

    GET:  signals read from request headers (User-Agent, Sec-CH-UA*).
    POST: JSON body with probe results, e.g.
        {"user_agent": "...", "vendor": "", "has_touch": true,
         "viewport_width": 390, "brands": [{"brand": "Microsoft Edge", "version": "120"}]}
        Missing user_agent falls back to the request header.
    """
    if request.method == 'GET':
        signal = signal_from_headers(request.headers)
    else:
        payload = request.get_json(silent=True)
        if payload is None:
            raise SignalValidationError('payload', 'expected JSON object')
        if isinstance(payload, dict) and payload.get('user_agent') is None:
            payload = dict(payload, user_agent=request.headers.get('User-Agent'))
        signal = signal_from_payload(payload)
    result = _detector_for(signal).classify()
    return jsonify(result.to_dict())


@api_v1.route('/version/<label>', methods=['POST'])
def resolve_version(label: str):
    """Resolve only the version for ``label`` from the posted signals."""
    parsed = BrowserLabel.parse(label)
    if parsed == BrowserLabel.UNKNOWN and label.lower() != 'unknown':
        return jsonify(make_error_response('UNKNOWN_LABEL', f'Unknown browser label: {label}', 404,
                                           details={'label': label})), 404
    signal = signal_from_payload(request.get_json(silent=True) or {})
    detector = _detector_for(signal)
    engine = detector.engine_info(parsed)
    return jsonify({
        'browser': parsed.value,
        'browser_version': detector.resolve_version(parsed),
        'engine': engine.engine,
        'engine_version': engine.version,
    })


@api_v1.route('/device', methods=['POST'])
def device_class():
    """Device class and OS only; no browser fusion."""
    signal = signal_from_payload(request.get_json(silent=True) or {})
    detector = _detector_for(signal)
    os_info = detector.os_info()
    device = detector.device_class()
    return jsonify({
        'device_class': device.value,
        'platform': device.platform,
        'os': os_info.os,
        'os_version': os_info.os_version,
    })


# ============ Health Endpoints ============

@api_v1.route('/health', methods=['GET'])
def health():
    """Health check endpoint."""
    from ..routes.system import health as system_health
    return system_health()


@api_v1.route('/version', methods=['GET'])
def version():
    """Get API version info."""
    from ..routes.system import version as system_version
    return system_version()

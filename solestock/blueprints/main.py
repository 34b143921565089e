"""Main blueprint with health check endpoints."""
from flask import Blueprint, jsonify
from sqlalchemy import text
from solestock.database import get_session
from solestock.services.cache_service import get_cache

main_bp = Blueprint('main', __name__)


@main_bp.route('/health')
def health():
    """
    Database health check.

    Returns:
        200: database reachable
        500: database error
    """
    try:
        row = get_session().execute(text("SELECT 1")).fetchone()
        if row and row[0] == 1:
            return jsonify({'status': 'healthy', 'database': 'connected'}), 200
        return jsonify({'status': 'unhealthy', 'database': 'error'}), 500

    except Exception as e:
        return jsonify({
            'status': 'unhealthy',
            'database': 'disconnected',
            'error': str(e),
        }), 500


@main_bp.route('/health/cache')
def health_cache():
    """
    Cache health check. Never returns 500: without Redis the app keeps
    serving from the database, so the status is only "degraded".
    """
    try:
        cache = get_cache()
        if not cache.is_available():
            return jsonify({
                'status': 'degraded',
                'cache': 'disabled' if not cache.enabled else 'unavailable',
            }), 200

        cache.set(0, 'system', 'health_check', {'test': 'ok'}, ttl=10)
        result = cache.get(0, 'system', 'health_check')
        if result and result.get('test') == 'ok':
            return jsonify({'status': 'ok', 'cache': 'connected'}), 200
        return jsonify({'status': 'degraded', 'cache': 'error'}), 200

    except Exception as e:
        return jsonify({'status': 'degraded', 'cache': 'error', 'error': str(e)}), 200

# Operational endpoints
from flask import Blueprint, jsonify

from app.extensions import get_store

misc_bp = Blueprint('misc', __name__)


@misc_bp.route('/health')
def health_check():
    """Health check endpoint for monitoring and testing."""
    store = get_store()
    return jsonify({
        'status': 'healthy',
        'database': 'connected' if store.is_connected and not store.listener.disconnected else 'disconnected',
    }), 200

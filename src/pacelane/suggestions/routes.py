"""
JSON endpoints for content suggestions
"""

from flask import jsonify, session

from ..auth import api_login_required
from ..core.logging_config import get_logger
from ..errors import ProfileNotFoundError, SuggestionGenerationError

logger = get_logger(__name__)


def add_suggestion_routes(app, generator, suggestion_store):

    @app.route('/api/content-suggestions/generate', methods=['POST'])
    @api_login_required
    def generate_content_suggestions():
        """Generate a fresh batch of suggestions for the logged-in user"""
        user_id = session['user_id']
        try:
            result = generator.generate(user_id)
        except ProfileNotFoundError:
            return jsonify({'error': 'Profile not found'}), 404
        except SuggestionGenerationError as e:
            return jsonify({'error': str(e)}), 500
        except Exception:
            logger.exception(f"Error in content suggestion generation for user {user_id}")
            return jsonify({'error': 'Internal server error'}), 500

        return jsonify(result), 200

    @app.route('/api/content-suggestions', methods=['GET'])
    @api_login_required
    def list_content_suggestions():
        user_id = session['user_id']
        try:
            suggestions = suggestion_store.list_active(user_id)
        except Exception:
            logger.exception(f"Error loading content suggestions for user {user_id}")
            return jsonify({'error': 'Internal server error'}), 500

        return jsonify({'suggestions': suggestions}), 200

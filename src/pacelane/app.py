"""
Pacelane web application

Wires the stores, the onboarding wizard, auth and the suggestion endpoints
into a single Flask app.
"""

import os
from datetime import datetime, timezone

from flask import Flask, jsonify, redirect, session
from flask_cors import CORS
from markupsafe import escape

from . import config, tasks
from .auth import UserAuthSystem, add_auth_routes, login_required
from .core.data_safety import DataEncryption
from .core.logging_config import get_logger
from .db import get_db_connection, init_database
from .errors import ProfileNotFoundError
from .inspirations import InspirationStore
from .knowledge import KnowledgeBase
from .layout import render_template_with_header
from .onboarding import steps
from .onboarding.linkedin_scraper import LinkedInScraper
from .onboarding.routes import add_onboarding_routes
from .profiles import ProfileStore
from .suggestions import ContentSuggestionGenerator, SuggestionStore, add_suggestion_routes

logger = get_logger(__name__)

# ============================================================================
# APP CONFIGURATION
# ============================================================================

app = Flask(__name__)
app.secret_key = config.SECRET_KEY
app.config.update(
    SESSION_COOKIE_HTTPONLY=True,
    SESSION_COOKIE_SECURE=config.SESSION_COOKIE_SECURE,
    SESSION_COOKIE_SAMESITE='Lax',
    # Several knowledge files can be uploaded at once
    MAX_CONTENT_LENGTH=100 * 1024 * 1024,
)
CORS(app, origins="*", supports_credentials=True)

data_encryption = DataEncryption()

profile_store = ProfileStore(get_db_connection, data_encryption)
inspiration_store = InspirationStore(get_db_connection)
knowledge_base = KnowledgeBase(get_db_connection)
suggestion_store = SuggestionStore(get_db_connection)
user_auth = UserAuthSystem(get_db_connection, profile_store, data_encryption)
linkedin_scraper = LinkedInScraper(config.FRESH_API_KEY)
suggestion_generator = ContentSuggestionGenerator(profile_store, inspiration_store, suggestion_store)


def queue_suggestion_generation(user_id: int) -> None:
    """Queue the first batch of suggestions; the dashboard can still generate on demand"""
    try:
        result = tasks.generate_content_suggestions_task.delay(user_id)
        logger.info(f"Queued suggestion generation for user {user_id}: {result.id}")
    except Exception:
        logger.error(f"Could not queue suggestion generation for user {user_id}", exc_info=True)


add_auth_routes(app, user_auth, profile_store)
add_onboarding_routes(
    app,
    login_required,
    profile_store,
    inspiration_store,
    knowledge_base,
    linkedin_scraper,
    queue_suggestion_generation,
)
add_suggestion_routes(app, suggestion_generator, suggestion_store)


# ============================================================================
# PAGES
# ============================================================================

@app.route('/')
def index():
    """Landing page"""
    if 'user_id' in session:
        return redirect('/dashboard')

    content = '''
    <div style="text-align: center; padding: 4rem 1rem;">
        <h1 style="font-size: 2.75rem; margin-bottom: 0.5rem;">Your LinkedIn content co-pilot</h1>
        <p class="muted" style="font-size: 1.15rem;">
            Tell us about your goals and your voice. We turn your expertise into post ideas,
            delivered on your schedule.
        </p>
        <p style="margin-top: 2rem;">
            <a href="/register" class="btn btn-primary">Get started</a>
            <a href="/login" class="btn btn-secondary">Log in</a>
        </p>
    </div>
    '''
    return render_template_with_header('Welcome', content)


def render_suggestion_cards(suggestions) -> str:
    if not suggestions:
        return '<p class="muted">No suggestions yet. Generate your first batch below.</p>'

    cards = ''
    for suggestion in suggestions:
        cards += f'''
        <div class="card">
            <h3 style="margin-top: 0;">{escape(suggestion['title'])}</h3>
            <p>{escape(suggestion.get('description') or '')}</p>
            <details>
                <summary class="muted">Outline</summary>
                <p style="white-space: pre-wrap;">{escape(suggestion.get('suggested_outline') or '')}</p>
            </details>
        </div>
        '''
    return cards


@app.route('/dashboard')
@login_required
def dashboard():
    user_id = session['user_id']
    try:
        profile = profile_store.get_profile(user_id)
    except ProfileNotFoundError:
        profile_store.ensure_profile(user_id)
        return redirect(f"/onboarding/{steps.FIRST_STEP}")

    if not profile.get('onboarding_completed'):
        return redirect(f"/onboarding/{steps.FIRST_STEP}")

    suggestions = suggestion_store.list_active(user_id)
    name = profile.get('linkedin_name') or session.get('user_name') or ''

    content = f'''
    <h1>Hi{", " + str(escape(name)) if name else ""}!</h1>
    <p class="muted">Content ideas based on your goals, pillars and inspirations.</p>
    <div id="suggestions">{render_suggestion_cards(suggestions)}</div>
    <button id="generate" class="btn btn-primary">Generate new suggestions</button>
    <p id="generate-status" class="muted"></p>
    <script>
        document.getElementById('generate').addEventListener('click', function() {{
            var button = this;
            var status = document.getElementById('generate-status');
            button.disabled = true;
            status.textContent = 'Generating...';
            fetch('/api/content-suggestions/generate', {{method: 'POST'}})
                .then(function(response) {{
                    return response.json().then(function(data) {{ return {{ok: response.ok, data: data}}; }});
                }})
                .then(function(result) {{
                    if (result.ok) {{
                        window.location.reload();
                    }} else {{
                        status.textContent = result.data.error || 'Something went wrong, please try again';
                        button.disabled = false;
                    }}
                }});
        }});
    </script>
    '''
    return render_template_with_header('Dashboard', content)


@app.route('/health')
def health_check():
    """Health check for deployment monitoring"""
    return jsonify({
        'status': 'healthy',
        'service': 'pacelane-onboarding',
        'timestamp': datetime.now(timezone.utc).isoformat()
    })


@app.after_request
def after_request(response):
    """Add CORS headers"""
    response.headers['Access-Control-Allow-Origin'] = '*'
    response.headers['Access-Control-Allow-Methods'] = 'GET, POST, OPTIONS'
    response.headers['Access-Control-Allow-Headers'] = 'Content-Type, Authorization'
    return response


def main():
    """Run the development server"""
    init_database()
    port = int(os.environ.get('PORT', 8080))
    app.run(host='0.0.0.0', port=port, debug=config.FLASK_ENV == 'development')


if __name__ == "__main__":
    main()

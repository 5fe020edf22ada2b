"""
User accounts and session authentication
"""

from functools import wraps
from typing import Any, Callable, Dict, Optional

import psycopg2
from flask import flash, jsonify, redirect, request, session
from markupsafe import escape
from werkzeug.security import check_password_hash, generate_password_hash

from .core.data_safety import DataEncryption
from .core.logging_config import get_logger
from .errors import ProfileNotFoundError
from .layout import render_template_with_header
from .profiles import ProfileStore

logger = get_logger(__name__)

MIN_PASSWORD_LENGTH = 6


def login_required(f):
    """Decorator to require user authentication"""
    @wraps(f)
    def decorated_function(*args, **kwargs):
        if 'user_id' not in session:
            return redirect('/login')
        return f(*args, **kwargs)
    return decorated_function


def api_login_required(f):
    """Like login_required, but answers JSON 401 instead of redirecting"""
    @wraps(f)
    def decorated_function(*args, **kwargs):
        if 'user_id' not in session:
            return jsonify({'error': 'Authentication required'}), 401
        return f(*args, **kwargs)
    return decorated_function


class UserAuthSystem:
    """Handles user authentication and account management"""

    def __init__(self, get_db_connection: Callable, profile_store: ProfileStore,
                 encryption: DataEncryption = None):
        self.get_db_connection = get_db_connection
        self.profile_store = profile_store
        self.encryption = encryption or profile_store.encryption

    def create_user(self, email: str, password: str, first_name: str = None) -> Dict[str, Any]:
        """Create user with encrypted email and an empty profile"""
        email_clean = (email or '').strip().lower()
        if not email_clean or '@' not in email_clean:
            return {'success': False, 'error': 'Please enter a valid email address'}
        if not password or len(password) < MIN_PASSWORD_LENGTH:
            return {'success': False, 'error': f'Password must be at least {MIN_PASSWORD_LENGTH} characters'}

        email_hash = self.encryption.hash_for_lookup(email_clean)

        conn = self.get_db_connection()
        try:
            cursor = conn.cursor()
            cursor.execute('SELECT id FROM users WHERE email_hash = %s', (email_hash,))
            if cursor.fetchone():
                return {'success': False, 'error': 'Email already registered'}

            cursor.execute('''
                INSERT INTO users (email_hash, email_encrypted, password_hash, first_name)
                VALUES (%s, %s, %s, %s)
                RETURNING id
            ''', (
                email_hash,
                self.encryption.encrypt_sensitive_data(email_clean),
                generate_password_hash(password),
                (first_name or '').strip() or None,
            ))
            user_id = cursor.fetchone()['id']
            conn.commit()
        except psycopg2.Error as e:
            conn.rollback()
            logger.error(f"Error creating user: {e}")
            return {'success': False, 'error': 'Account creation failed'}
        finally:
            conn.close()

        self.profile_store.ensure_profile(user_id)
        logger.info(f"Created user {user_id}")
        return {'success': True, 'user_id': user_id}

    def authenticate_user(self, email: str, password: str) -> Dict[str, Any]:
        """Authenticate user login"""
        email_hash = self.encryption.hash_for_lookup((email or '').strip().lower())

        conn = self.get_db_connection()
        try:
            cursor = conn.cursor()
            cursor.execute('''
                SELECT id, password_hash, first_name
                FROM users WHERE email_hash = %s AND is_active = TRUE
            ''', (email_hash,))
            user = cursor.fetchone()

            if not user or not check_password_hash(user['password_hash'], password or ''):
                logger.info("Failed login attempt")
                return {'success': False, 'error': 'Invalid email or password'}

            cursor.execute('UPDATE users SET last_login = CURRENT_TIMESTAMP WHERE id = %s', (user['id'],))
            conn.commit()
        finally:
            conn.close()

        return {
            'success': True,
            'user_id': user['id'],
            'first_name': user['first_name'],
        }

    def get_user_info(self, user_id: int) -> Optional[Dict[str, Any]]:
        conn = self.get_db_connection()
        try:
            cursor = conn.cursor()
            cursor.execute('''
                SELECT id, email_encrypted, first_name, created_at, last_login
                FROM users WHERE id = %s
            ''', (user_id,))
            user = cursor.fetchone()
        finally:
            conn.close()

        if not user:
            return None

        return {
            'user_id': user['id'],
            'email': self.encryption.decrypt_sensitive_data(user['email_encrypted']),
            'first_name': user['first_name'],
            'created_at': user['created_at'],
            'last_login': user['last_login'],
        }


def _render_auth_form(title: str, subtitle: str, fields: str, submit_label: str, footer: str) -> str:
    content = f'''
    <div class="card" style="max-width: 440px; margin: 3rem auto;">
        <h1 style="margin-top: 0;">{escape(title)}</h1>
        <p class="muted">{escape(subtitle)}</p>
        <form method="POST">
            {fields}
            <button type="submit" class="btn btn-primary" style="width: 100%;">{escape(submit_label)}</button>
        </form>
        <p class="muted" style="text-align: center; margin-top: 1.5rem;">{footer}</p>
    </div>
    '''
    return render_template_with_header(title, content)


def add_auth_routes(app, user_auth: UserAuthSystem, profile_store: ProfileStore):
    @app.route('/register', methods=['GET', 'POST'])
    def register():
        """User registration"""
        email = ''
        first_name = ''
        if request.method == 'POST':
            email = request.form.get('email', '').strip().lower()
            password = request.form.get('password', '')
            confirm_password = request.form.get('confirm_password', '')
            first_name = request.form.get('first_name', '').strip()

            if not email or not password:
                flash('Email and password are required', 'error')
            elif password != confirm_password:
                flash('Passwords do not match', 'error')
            else:
                result = user_auth.create_user(email, password, first_name)

                if result['success']:
                    session['user_id'] = result['user_id']
                    session['user_name'] = first_name
                    flash("Account created! Let's set up your content profile.", 'success')
                    return redirect('/onboarding/welcome')

                flash(result['error'], 'error')

        fields = f'''
            <div class="form-group">
                <label for="first_name">First name</label>
                <input type="text" id="first_name" name="first_name" value="{escape(first_name)}">
            </div>
            <div class="form-group">
                <label for="email">Email</label>
                <input type="email" id="email" name="email" value="{escape(email)}" required>
            </div>
            <div class="form-group">
                <label for="password">Password</label>
                <input type="password" id="password" name="password" required>
                <div class="help-text">At least {MIN_PASSWORD_LENGTH} characters</div>
            </div>
            <div class="form-group">
                <label for="confirm_password">Confirm password</label>
                <input type="password" id="confirm_password" name="confirm_password" required>
            </div>
        '''
        return _render_auth_form(
            'Create your account',
            'Start turning your expertise into LinkedIn content.',
            fields,
            'Sign up',
            'Already have an account? <a href="/login">Log in</a>'
        )

    @app.route('/login', methods=['GET', 'POST'])
    def user_login():
        """User login"""
        email = ''
        if request.method == 'POST':
            email = request.form.get('email', '').strip()
            password = request.form.get('password', '')

            if not email or not password:
                flash('Email and password are required', 'error')
            else:
                result = user_auth.authenticate_user(email, password)

                if result['success']:
                    user_id = result['user_id']
                    session['user_id'] = user_id
                    session['user_name'] = result['first_name']
                    flash(f'Welcome back{", " + result["first_name"] if result["first_name"] else ""}!', 'success')

                    try:
                        completed = profile_store.get_profile(user_id).get('onboarding_completed')
                    except ProfileNotFoundError:
                        profile_store.ensure_profile(user_id)
                        completed = False

                    return redirect('/dashboard' if completed else '/onboarding/welcome')

                flash(result['error'], 'error')

        fields = f'''
            <div class="form-group">
                <label for="email">Email</label>
                <input type="email" id="email" name="email" value="{escape(email)}" required>
            </div>
            <div class="form-group">
                <label for="password">Password</label>
                <input type="password" id="password" name="password" required>
            </div>
        '''
        return _render_auth_form(
            'Welcome back',
            'Log in to continue with Pacelane.',
            fields,
            'Log in',
            'New here? <a href="/register">Create an account</a>'
        )

    @app.route('/logout')
    def logout():
        """User logout"""
        session.clear()
        flash('You have been logged out successfully', 'success')
        return redirect('/')

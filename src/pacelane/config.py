"""
Application configuration

All settings come from environment variables (optionally loaded from a .env
file) and are read once at import time.
"""

import os

from dotenv import load_dotenv

# Load environment variables
load_dotenv()

# ============================================================================
# FLASK
# ============================================================================

SECRET_KEY = os.environ.get('SECRET_KEY', 'pacelane-secret-key-change-in-production')
FLASK_ENV = os.environ.get('FLASK_ENV', 'development')
SESSION_COOKIE_SECURE = FLASK_ENV == 'production'

# ============================================================================
# SUPABASE (Postgres + S3-compatible storage)
# ============================================================================

SUPABASE_S3_ENDPOINT = os.environ.get('SUPABASE_S3_ENDPOINT')
SUPABASE_S3_KEY = os.environ.get('SUPABASE_S3_KEY')
SUPABASE_S3_SECRET = os.environ.get('SUPABASE_S3_SECRET')
SUPABASE_S3_REGION = os.environ.get('SUPABASE_S3_REGION', 'us-east-1')
KNOWLEDGE_BUCKET = os.environ.get('KNOWLEDGE_BUCKET', 'knowledge-base')

# ============================================================================
# THIRD-PARTY APIS
# ============================================================================

OPENAI_API_KEY = os.environ.get('OPENAI_API_KEY')
OPENAI_MODEL = os.environ.get('OPENAI_MODEL', 'gpt-4o-mini')

FRESH_API_KEY = os.environ.get('FRESH_API_KEY')

# Product number users message to connect WhatsApp
PACELANE_WHATSAPP_NUMBER = os.environ.get('PACELANE_WHATSAPP_NUMBER', '5511999999999')

# ============================================================================
# BACKGROUND JOBS
# ============================================================================

REDIS_URL = os.environ.get('REDIS_URL', 'redis://localhost:6379/0')

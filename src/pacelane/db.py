"""
Database access for the Supabase Postgres instance

Every table row belongs to exactly one user; writes are last-write-wins.
"""

import os

import psycopg2
from psycopg2.extras import RealDictCursor

from .core.logging_config import get_logger

logger = get_logger(__name__)


# ============================================================================
# CONNECTING TO POSTGRESQL DATABASE
# ============================================================================

def get_db_connection():
    """Get PostgreSQL database connection"""
    database_url = os.environ.get('DATABASE_URL')
    if not database_url:
        raise RuntimeError("DATABASE_URL environment variable not set")

    return psycopg2.connect(database_url, cursor_factory=RealDictCursor)


SCHEMA_STATEMENTS = [
    '''
    CREATE TABLE IF NOT EXISTS users (
        id SERIAL PRIMARY KEY,
        email_hash TEXT UNIQUE NOT NULL,
        email_encrypted TEXT NOT NULL,
        password_hash TEXT NOT NULL,
        first_name TEXT,
        created_at TIMESTAMP DEFAULT CURRENT_TIMESTAMP,
        last_login TIMESTAMP,
        is_active BOOLEAN DEFAULT TRUE
    )
    ''',
    '''
    CREATE TABLE IF NOT EXISTS profiles (
        user_id INTEGER PRIMARY KEY REFERENCES users(id) ON DELETE CASCADE,
        linkedin_profile TEXT,
        linkedin_username TEXT,
        linkedin_data JSONB,
        linkedin_name TEXT,
        linkedin_headline TEXT,
        linkedin_company TEXT,
        linkedin_about TEXT,
        linkedin_scraped_at TIMESTAMP,
        whatsapp_number_encrypted TEXT,
        pacing_preferences JSONB,
        goals JSONB,
        target_audiences JSONB,
        content_guides JSONB,
        content_pillars JSONB,
        onboarding_completed BOOLEAN DEFAULT FALSE,
        created_at TIMESTAMP DEFAULT CURRENT_TIMESTAMP,
        updated_at TIMESTAMP DEFAULT CURRENT_TIMESTAMP
    )
    ''',
    '''
    CREATE TABLE IF NOT EXISTS inspirations (
        id SERIAL PRIMARY KEY,
        user_id INTEGER NOT NULL REFERENCES users(id) ON DELETE CASCADE,
        linkedin_url TEXT NOT NULL,
        linkedin_data JSONB,
        name TEXT,
        company TEXT,
        headline TEXT,
        about TEXT,
        scraped_at TIMESTAMP,
        created_at TIMESTAMP DEFAULT CURRENT_TIMESTAMP,
        UNIQUE (user_id, linkedin_url)
    )
    ''',
    '''
    CREATE TABLE IF NOT EXISTS knowledge_files (
        id SERIAL PRIMARY KEY,
        user_id INTEGER NOT NULL REFERENCES users(id) ON DELETE CASCADE,
        name TEXT NOT NULL,
        type TEXT NOT NULL CHECK (type IN ('file', 'link')),
        url TEXT,
        size BIGINT,
        storage_path TEXT,
        content_type TEXT,
        created_at TIMESTAMP DEFAULT CURRENT_TIMESTAMP
    )
    ''',
    '''
    CREATE TABLE IF NOT EXISTS content_suggestions (
        id SERIAL PRIMARY KEY,
        user_id INTEGER NOT NULL REFERENCES users(id) ON DELETE CASCADE,
        title TEXT NOT NULL,
        description TEXT,
        suggested_outline TEXT,
        context_used JSONB,
        is_active BOOLEAN DEFAULT TRUE,
        created_at TIMESTAMP DEFAULT CURRENT_TIMESTAMP
    )
    ''',
    'CREATE INDEX IF NOT EXISTS idx_inspirations_user ON inspirations(user_id)',
    'CREATE INDEX IF NOT EXISTS idx_knowledge_files_user ON knowledge_files(user_id)',
    'CREATE INDEX IF NOT EXISTS idx_content_suggestions_active ON content_suggestions(user_id, is_active)',
]


def init_database(get_connection=get_db_connection):
    """Create the onboarding tables if they do not exist"""
    conn = get_connection()
    try:
        cursor = conn.cursor()
        for statement in SCHEMA_STATEMENTS:
            cursor.execute(statement)
        conn.commit()
        logger.info("Database schema initialized")
    except psycopg2.Error:
        conn.rollback()
        logger.error("Failed to initialize database schema", exc_info=True)
        raise
    finally:
        conn.close()

import os
import sys

# Make the src/ layout importable without an editable install
sys.path.insert(0, os.path.join(os.path.dirname(__file__), 'src'))

from pacelane.app import app
from pacelane.db import init_database

# Initialize the database when the app starts
init_database()

# This is what gunicorn will look for
application = app

if __name__ == "__main__":
    # For local testing only
    port = int(os.environ.get('PORT', 8080))
    app.run(host='0.0.0.0', port=port, debug=False)

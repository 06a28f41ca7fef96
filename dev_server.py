#!/usr/bin/env python3
"""
Development server for local testing.
This bypasses the Gunicorn requirement and enables error details on error pages.
"""

import os
import sys

# Add the current directory to Python path
sys.path.insert(0, os.path.dirname(os.path.abspath(__file__)))

os.environ.setdefault('APP_ENV', 'development')

from app import create_app


def run_dev_server():
    """Run the Flask development server."""
    app = create_app()
    port = int(os.getenv('PORT', '3000'))

    print("🧪 Starting NGO Volunteer Management Development Server")
    print("=" * 50)
    print("NOTE: This is for testing only. Production uses Gunicorn.")
    print("")
    print(f"Access the application at: http://localhost:{port}")
    print(f"Impact report: http://localhost:{port}/impact")
    print("")

    app.run(
        host='0.0.0.0',
        port=port,
        debug=True,
        use_reloader=False  # The reloader would start a second metrics scheduler
    )


if __name__ == '__main__':
    run_dev_server()

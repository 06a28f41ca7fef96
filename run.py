from dotenv import load_dotenv

# Load environment variables from .env file
load_dotenv()

"""Application entry point.

Connects to MongoDB (exiting if it is unreachable) and starts the daily
project metrics scheduler as part of ``create_app()``.
"""

from app import create_app

# This app is intended to be run via Gunicorn only
app = create_app()
if __name__ == '__main__':
    import os
    import sys

    # A single worker keeps exactly one metrics scheduler thread per deployment
    command = [
        "gunicorn",
        "-w", "1",
        "--threads", os.getenv("GUNICORN_THREADS", "4"),
        "-b", f"0.0.0.0:{os.getenv('PORT', '3000')}",
        "run:app"
    ]

    print(f"🚀 Launching Gunicorn with command: {' '.join(command)}")
    try:
        os.execvp(command[0], command)
    except FileNotFoundError:
        print("Error: 'gunicorn' command not found.", file=sys.stderr)
        print("Please install Gunicorn: pip install gunicorn", file=sys.stderr)
        sys.exit(1)

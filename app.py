#!/usr/bin/env python3
"""
Main entry point for the Devkit Tools application.
This file serves as the application launcher that imports and runs the Flask app from the src directory.
"""

import sys
import os
import argparse
import logging
from pathlib import Path

# Add the src directory to the Python path so we can import from it
project_root = Path(__file__).parent
src_path = project_root / "src"
sys.path.insert(0, str(src_path))

# Now we can import the main Flask application
from main import app

logger = logging.getLogger(__name__)


def parse_args(argv=None):
    parser = argparse.ArgumentParser(description='Devkit Tools Server')
    parser.add_argument('--port', '-p', type=int, default=8000,
                        help='Port to run the server on (default: 8000)')
    parser.add_argument('--host', default='127.0.0.1',
                        help='Host to bind to (default: 127.0.0.1)')
    parser.add_argument('--debug', action='store_true',
                        help='Run Flask in debug mode')
    return parser.parse_args(argv)


if __name__ == '__main__':
    args = parse_args()

    # Change working directory to project root to ensure relative paths work correctly
    os.chdir(project_root)

    try:
        logger.info("Starting Devkit Tools on http://%s:%s", args.host, args.port)
        app.run(host=args.host, port=args.port, debug=args.debug)
    except KeyboardInterrupt:
        logger.info("Server stopped by user")

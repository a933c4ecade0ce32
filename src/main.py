import logging
from datetime import datetime
from flask import Flask, jsonify

from config.settings import load_settings, get_enabled_tools
from config.tools import TOOLS
from blueprints.text_diff import text_diff_bp
from blueprints.cron_parser import cron_parser_bp

logger = logging.getLogger(__name__)

# Blueprint registered for each tool id
TOOL_BLUEPRINTS = {
    'text-diff': text_diff_bp,
    'cron-parser': cron_parser_bp,
}


def configure_logging(level_name: str) -> None:
    """Configure root logging once for the application."""
    level = getattr(logging, str(level_name).upper(), logging.INFO)
    logging.basicConfig(
        level=level,
        format='%(asctime)s %(levelname)s [%(name)s] %(message)s'
    )


def create_app(settings=None) -> Flask:
    """Create the Flask application with every enabled tool registered."""
    settings = settings or load_settings()
    configure_logging(settings['logging']['level'])

    app = Flask(__name__)
    app.config['DEVKIT_SETTINGS'] = settings

    enabled_tools = get_enabled_tools(settings, TOOLS)
    for tool in enabled_tools:
        app.register_blueprint(TOOL_BLUEPRINTS[tool['id']])
    logger.info("Registered tools: %s", ', '.join(tool['id'] for tool in enabled_tools) or 'none')

    @app.route('/api/tools')
    def api_tools():
        return jsonify({'tools': enabled_tools})

    @app.route('/health')
    def health():
        return jsonify({
            'status': 'healthy',
            'timestamp': datetime.now().isoformat(),
            'tools_count': len(enabled_tools)
        })

    @app.errorhandler(404)
    def not_found(error):
        return jsonify({'success': False, 'error': 'Not found'}), 404

    @app.errorhandler(405)
    def method_not_allowed(error):
        return jsonify({'success': False, 'error': 'Method not allowed'}), 405

    return app


app = create_app()

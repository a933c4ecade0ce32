import logging
from flask import Blueprint, request, jsonify, current_app

from api.cron_parser import (
    check_cron_expression, describe_cron_expression, describe_cron_field,
    calculate_next_executions, get_common_cron_examples
)

logger = logging.getLogger(__name__)

cron_parser_bp = Blueprint('cron_parser', __name__)

MAX_EXECUTION_COUNT = 100


@cron_parser_bp.route('/api/cron-parser/parse', methods=['POST'])
def parse_cron():
    """Parse a cron expression and describe it"""
    try:
        data = request.get_json(silent=True)
        if data is None or not isinstance(data, dict):
            return jsonify({'success': False, 'error': 'Invalid JSON format'}), 400

        if 'expression' not in data:
            return jsonify({'success': False, 'error': 'Missing expression field'}), 400

        expression = data['expression']
        result = check_cron_expression(expression)
        if not result.success:
            return jsonify({'success': False, 'valid': False, 'error': result.error}), 400

        settings = current_app.config['DEVKIT_SETTINGS']['cron_parser']
        description = describe_cron_expression(
            expression,
            execution_count=settings['default_execution_count'],
            max_iterations=settings['max_iterations']
        )

        fields = {
            name: {'value': value, 'description': describe_cron_field(value, name)}
            for name, value in result.data.fields().items()
        }

        return jsonify({
            'success': True,
            'valid': True,
            'expression': expression.strip(),
            'fields': fields,
            **description.to_dict()
        })

    except Exception as e:
        logger.exception("Cron parsing failed")
        return jsonify({'success': False, 'error': str(e)}), 500


@cron_parser_bp.route('/api/cron-parser/next', methods=['POST'])
def next_executions():
    """List the next execution times of a cron expression"""
    try:
        data = request.get_json(silent=True)
        if data is None or not isinstance(data, dict):
            return jsonify({'success': False, 'error': 'Invalid JSON format'}), 400

        if 'expression' not in data:
            return jsonify({'success': False, 'error': 'Missing expression field'}), 400

        settings = current_app.config['DEVKIT_SETTINGS']['cron_parser']
        count = data.get('count', settings['default_execution_count'])
        if isinstance(count, bool) or not isinstance(count, int) or not 1 <= count <= MAX_EXECUTION_COUNT:
            return jsonify({
                'success': False,
                'error': f'count must be an integer between 1 and {MAX_EXECUTION_COUNT}'
            }), 400

        result = check_cron_expression(data['expression'])
        if not result.success:
            return jsonify({'success': False, 'error': result.error}), 400

        executions = calculate_next_executions(
            data['expression'], count, max_iterations=settings['max_iterations']
        )
        return jsonify({
            'success': True,
            'executions': [when.isoformat() for when in executions],
            'exhausted': len(executions) < count
        })

    except Exception as e:
        logger.exception("Cron execution lookup failed")
        return jsonify({'success': False, 'error': str(e)}), 500


@cron_parser_bp.route('/api/cron-parser/examples')
def cron_examples():
    return jsonify({'success': True, 'examples': get_common_cron_examples()})

import logging
from typing import Any, Dict, Tuple
from flask import Blueprint, request, jsonify, current_app

from api.text_diff import (
    DiffOptions, diff_texts, format_unified_diff, format_diff_with_line_numbers,
    are_texts_identical, get_similarity_percentage
)

logger = logging.getLogger(__name__)

text_diff_bp = Blueprint('text_diff', __name__)

OUTPUT_FORMATS = ('json', 'unified', 'annotated', 'stats-only')


def _read_texts() -> Tuple[Dict[str, Any], Any]:
    """Read text1/text2 from the request, returning (data, error_response)"""
    data = request.get_json(silent=True)
    if data is None or not isinstance(data, dict):
        return {}, (jsonify({'success': False, 'error': 'Invalid JSON format'}), 400)

    if 'text1' not in data or 'text2' not in data:
        return {}, (jsonify({'success': False, 'error': 'Missing text1 or text2'}), 400)

    for key in ('text1', 'text2'):
        if data[key] is not None and not isinstance(data[key], str):
            return {}, (jsonify({'success': False, 'error': f'{key} must be a string'}), 400)

    return data, None


@text_diff_bp.route('/api/text-diff/compare', methods=['POST'])
def compare_texts():
    """Compare two texts line by line

    Supports multiple output formats:
    - json: Structured diff lines with line numbers (default)
    - unified: Unified diff / patch format
    - annotated: Listing with both line numbers and change markers
    - stats-only: Just statistics

    Options:
    - ignore_whitespace: Ignore whitespace differences
    - ignore_case: Case insensitive comparison
    - filename1 / filename2: Names used in unified diff headers
    """
    try:
        data, error = _read_texts()
        if error:
            return error

        output_format = data.get('format', 'json')
        if output_format not in OUTPUT_FORMATS:
            return jsonify({'success': False, 'error': f'Unsupported format: {output_format}'}), 400

        try:
            options = DiffOptions.from_dict(data)
        except (TypeError, ValueError):
            return jsonify({'success': False, 'error': 'context_lines must be an integer'}), 400

        settings = current_app.config['DEVKIT_SETTINGS']['text_diff']
        diff_result = diff_texts(
            data['text1'], data['text2'], options,
            lcs_threshold=settings['lcs_line_threshold'],
            lookahead=settings['lookahead_window']
        )
        stats = diff_result.stats.to_dict()

        if output_format == 'unified':
            unified_diff = format_unified_diff(
                diff_result,
                data.get('filename1', 'text1'),
                data.get('filename2', 'text2')
            )
            return jsonify({
                'success': True,
                'format': 'unified',
                'diff': unified_diff,
                'stats': stats
            })
        elif output_format == 'annotated':
            return jsonify({
                'success': True,
                'format': 'annotated',
                'diff': format_diff_with_line_numbers(diff_result),
                'stats': stats
            })
        elif output_format == 'stats-only':
            return jsonify({
                'success': True,
                'format': 'stats-only',
                'stats': stats,
                'has_changes': diff_result.has_changes
            })
        else:  # Default JSON format
            return jsonify({
                'success': True,
                'format': 'json',
                'diff': [line.to_dict() for line in diff_result.lines],
                'stats': stats,
                'has_changes': diff_result.has_changes
            })

    except Exception as e:
        logger.exception("Text diff comparison failed")
        return jsonify({'success': False, 'error': str(e)}), 500


@text_diff_bp.route('/api/text-diff/similarity', methods=['POST'])
def compare_similarity():
    """Report whether two texts are identical and how similar they are"""
    try:
        data, error = _read_texts()
        if error:
            return error

        try:
            options = DiffOptions.from_dict(data)
        except (TypeError, ValueError):
            return jsonify({'success': False, 'error': 'context_lines must be an integer'}), 400

        return jsonify({
            'success': True,
            'identical': are_texts_identical(data['text1'], data['text2'], options),
            'similarity': get_similarity_percentage(data['text1'], data['text2'], options)
        })

    except Exception as e:
        logger.exception("Text similarity check failed")
        return jsonify({'success': False, 'error': str(e)}), 500

#!/usr/bin/env python3
"""
Endpoint tests for the text diff blueprint
"""

import pytest


class TestCompareEndpoint:
    """Test /api/text-diff/compare"""

    def test_default_json_format(self, client):
        response = client.post('/api/text-diff/compare', json={
            'text1': 'a\nb',
            'text2': 'a\nx\nb'
        })
        assert response.status_code == 200
        data = response.get_json()
        assert data['success'] is True
        assert data['format'] == 'json'
        assert data['has_changes'] is True
        assert data['stats'] == {'added': 1, 'removed': 0, 'unchanged': 2, 'total': 3}
        assert [line['type'] for line in data['diff']] == ['equal', 'added', 'equal']
        assert data['diff'][1] == {'type': 'added', 'content': 'x', 'line_num_1': None, 'line_num_2': 2}

    def test_unified_format_with_filenames(self, client):
        response = client.post('/api/text-diff/compare', json={
            'text1': 'a\nb\nc',
            'text2': 'a\nx\nc',
            'format': 'unified',
            'filename1': 'before.txt',
            'filename2': 'after.txt'
        })
        data = response.get_json()
        assert response.status_code == 200
        assert data['diff'] == '--- before.txt\n+++ after.txt\n@@ -1,2 +1,2 @@\n a\n-b\n+x'

    def test_annotated_format(self, client):
        response = client.post('/api/text-diff/compare', json={
            'text1': 'a\nb',
            'text2': 'a\nc',
            'format': 'annotated'
        })
        data = response.get_json()
        assert data['diff'].splitlines()[0] == '1 | 1 |   a'

    def test_stats_only(self, client):
        response = client.post('/api/text-diff/compare', json={
            'text1': 'same',
            'text2': 'same',
            'format': 'stats-only'
        })
        data = response.get_json()
        assert data['has_changes'] is False
        assert 'diff' not in data
        assert data['stats']['unchanged'] == 1

    def test_options_are_applied(self, client):
        response = client.post('/api/text-diff/compare', json={
            'text1': 'Hello   World',
            'text2': 'hello world',
            'ignore_case': True,
            'ignore_whitespace': True
        })
        data = response.get_json()
        assert data['has_changes'] is False
        assert data['diff'][0]['content'] == 'Hello   World'

    def test_threshold_comes_from_settings(self, settings):
        from main import create_app

        settings['text_diff']['lcs_line_threshold'] = 1
        client = create_app(settings).test_client()
        response = client.post('/api/text-diff/compare', json={
            'text1': 'a\nb\nc',
            'text2': 'x1\nx2\nx3\nx4\nx5\nx6\nb\nc'
        })
        assert response.get_json()['stats']['unchanged'] == 0

    @pytest.mark.parametrize('payload', [
        {'text1': 'only one side'},
        {'text2': 'only one side'},
    ])
    def test_missing_text(self, client, payload):
        response = client.post('/api/text-diff/compare', json=payload)
        assert response.status_code == 400
        assert response.get_json()['error'] == 'Missing text1 or text2'

    def test_invalid_json(self, client):
        response = client.post('/api/text-diff/compare', data='not json',
                               content_type='application/json')
        assert response.status_code == 400
        assert response.get_json()['error'] == 'Invalid JSON format'

    def test_non_string_text(self, client):
        response = client.post('/api/text-diff/compare', json={'text1': 1, 'text2': 'a'})
        assert response.status_code == 400

    def test_unsupported_format(self, client):
        response = client.post('/api/text-diff/compare', json={
            'text1': 'a', 'text2': 'b', 'format': 'side-by-side'
        })
        assert response.status_code == 400
        assert 'Unsupported format' in response.get_json()['error']

    def test_bad_context_lines(self, client):
        response = client.post('/api/text-diff/compare', json={
            'text1': 'a', 'text2': 'b', 'context_lines': 'many'
        })
        assert response.status_code == 400

    def test_null_texts_are_empty(self, client):
        response = client.post('/api/text-diff/compare', json={'text1': None, 'text2': None})
        data = response.get_json()
        assert data['success'] is True
        assert data['diff'] == []


class TestSimilarityEndpoint:
    """Test /api/text-diff/similarity"""

    def test_similarity(self, client):
        response = client.post('/api/text-diff/similarity', json={
            'text1': 'line1\nline2',
            'text2': 'line1\nline3'
        })
        data = response.get_json()
        assert data['success'] is True
        assert data['identical'] is False
        assert data['similarity'] == 50

    def test_identical_with_options(self, client):
        response = client.post('/api/text-diff/similarity', json={
            'text1': 'Hello',
            'text2': 'hello',
            'ignore_case': True
        })
        data = response.get_json()
        assert data['identical'] is True
        assert data['similarity'] == 100

    def test_missing_text(self, client):
        response = client.post('/api/text-diff/similarity', json={'text1': 'a'})
        assert response.status_code == 400

    def test_bad_context_lines(self, client):
        response = client.post('/api/text-diff/similarity', json={
            'text1': 'a', 'text2': 'a', 'context_lines': 'x'
        })
        assert response.status_code == 400
        assert response.get_json()['error'] == 'context_lines must be an integer'

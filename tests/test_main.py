import unittest
import json
import sys
import os

sys.path.insert(0, os.path.abspath(os.path.join(os.path.dirname(__file__), '..', 'src')))

from main import app, create_app
from config.settings import load_settings


class TestMain(unittest.TestCase):
    def setUp(self):
        self.app = app.test_client()

    def test_api_tools(self):
        response = self.app.get('/api/tools')
        self.assertEqual(response.status_code, 200)
        data = json.loads(response.data)
        self.assertIn('tools', data)
        self.assertEqual({tool['id'] for tool in data['tools']}, {'text-diff', 'cron-parser'})

    def test_health(self):
        response = self.app.get('/health')
        self.assertEqual(response.status_code, 200)
        data = json.loads(response.data)
        self.assertEqual(data['status'], 'healthy')
        self.assertIn('timestamp', data)
        self.assertEqual(data['tools_count'], 2)

    def test_not_found_is_json(self):
        response = self.app.get('/api/does-not-exist')
        self.assertEqual(response.status_code, 404)
        self.assertFalse(json.loads(response.data)['success'])

    def test_wrong_method_is_json(self):
        response = self.app.get('/api/text-diff/compare')
        self.assertEqual(response.status_code, 405)
        self.assertEqual(json.loads(response.data)['error'], 'Method not allowed')


def test_disabled_tool_is_not_registered(write_config):
    settings = load_settings(write_config({'tools': {'cron-parser': {'enabled': False}}}))
    client = create_app(settings).test_client()

    tools = client.get('/api/tools').get_json()['tools']
    assert [tool['id'] for tool in tools] == ['text-diff']
    assert client.post('/api/cron-parser/parse', json={'expression': '* * * * *'}).status_code == 404
    assert client.post('/api/text-diff/compare', json={'text1': 'a', 'text2': 'a'}).status_code == 200

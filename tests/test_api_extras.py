import time
import unittest
import sidebyside.api.server as server
from sidebyside.api.server import app


async def no_match(text):
    return None


class TestAPIExtras(unittest.TestCase):
    def setUp(self):
        app.testing = True
        # Clear API key and rate limiter state to avoid cross-test leakage
        app.config['API_KEY'] = None
        app.config['LOOKUP'] = no_match
        server._windows.clear()
        self.client = app.test_client()

    def tearDown(self):
        app.config.pop('LOOKUP', None)
        app.config['RATE_LIMIT_N'] = 0

    def test_rate_limit_post(self):
        app.config['RATE_LIMIT_N'] = 1
        app.config['RATE_LIMIT_WINDOW_SEC'] = 1.0
        rv1 = self.client.post('/sidebyside', json={'queryTokens': ['a']})
        self.assertEqual(rv1.status_code, 200)
        rv2 = self.client.post('/sidebyside', json={'queryTokens': ['b']})
        self.assertEqual(rv2.status_code, 429)
        self.assertEqual(rv2.get_json().get('error'), 'rate_limited')
        self.assertIn('Retry-After', rv2.headers)

    def test_rate_limit_is_per_client(self):
        app.config['RATE_LIMIT_N'] = 1
        app.config['RATE_LIMIT_WINDOW_SEC'] = 1.0
        rv1 = self.client.post('/sidebyside', json={'queryTokens': ['a']}, headers={'X-Forwarded-For': '10.0.0.1'})
        rv2 = self.client.post('/sidebyside', json={'queryTokens': ['a']}, headers={'X-Forwarded-For': '10.0.0.2'})
        self.assertEqual((rv1.status_code, rv2.status_code), (200, 200))

    def test_idle_clients_are_forgotten(self):
        windows = server.ClientWindows()
        self.assertIsNone(windows.hit('10.0.0.1', 1, 0.01))
        self.assertIsNone(windows.hit('10.0.0.2', 1, 0.01))
        self.assertEqual(len(windows), 2)
        time.sleep(0.03)
        self.assertIsNone(windows.hit('10.0.0.3', 1, 0.01))
        self.assertEqual(len(windows), 1)

    def test_over_limit_reports_wait(self):
        windows = server.ClientWindows()
        self.assertIsNone(windows.hit('10.0.0.1', 1, 5.0))
        wait = windows.hit('10.0.0.1', 1, 5.0)
        self.assertIsNotNone(wait)
        self.assertGreater(wait, 0.0)
        self.assertLessEqual(wait, 5.0)

    def test_auth_api_key(self):
        app.config['RATE_LIMIT_N'] = 0
        app.config['API_KEY'] = 'secret'
        rv = self.client.post('/sidebyside', json={'queryTokens': ['a']})
        self.assertEqual(rv.status_code, 401)
        rv2 = self.client.post('/sidebyside', json={'queryTokens': ['a']}, headers={'X-API-Key': 'secret'})
        self.assertEqual(rv2.status_code, 200)
        # health checks stay open
        self.assertEqual(self.client.get('/healthz').status_code, 200)


if __name__ == '__main__':
    unittest.main()

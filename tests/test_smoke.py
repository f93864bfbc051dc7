import json
import subprocess
import sys
import unittest
from pathlib import Path

from fastapi.testclient import TestClient

from cryptocard.main import app


class SmokeTest(unittest.TestCase):
    def test_api_docs_build_artifacts_generated(self):
        repo_root = Path(__file__).resolve().parents[1]
        subprocess.run([sys.executable, 'scripts/build_api_docs_site.py'], cwd=repo_root, check=True)

        openapi = json.loads((repo_root / 'docs/site/api/openapi.json').read_text(encoding='utf-8'))
        tools = json.loads((repo_root / 'docs/site/api/tools.json').read_text(encoding='utf-8'))

        self.assertIn('/quote', openapi['paths'])
        self.assertIn('/listings', openapi['paths'])
        self.assertIn('getCryptoPrice', [t['name'] for t in tools['tools']])

    def test_readme_documents_endpoints_and_env(self):
        repo_root = Path(__file__).resolve().parents[1]
        readme = (repo_root / 'README.md').read_text(encoding='utf-8')

        self.assertIn('COINMARKETCAP_API_KEY', readme)
        self.assertIn('GET /quote?symbol=', readme)
        self.assertIn('GET /listings', readme)

    def test_app_lifespan_starts_and_serves(self):
        with TestClient(app) as c:
            r = c.get('/health')
        self.assertEqual(r.status_code, 200)
        self.assertTrue(r.json()['ok'])


if __name__ == '__main__':
    unittest.main()

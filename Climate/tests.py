"""Weather API Unit Tests."""

import tempfile
import threading
import unittest
from pathlib import Path
from unittest import mock
from types import MappingProxyType
from werkzeug.serving import make_server
from Climate.api import create_app
from Climate.client import WeatherClient
from Climate.core import (ExecutionContext, WeatherTable, Temperature, DatasetError,
                          CountryNotFound, CityNotFound, MonthNotFound, parse, load)


COUNTRIES = ['England', 'France', 'Germany', 'Italy', 'Peru', 'Portugal', 'Spain']


class TestParse(unittest.TestCase):
    def test_nested_mapping(self):
        dataset = parse('{"Spain": {"Seville": {"June": {"high": 90, "low": 64.5}}}}')
        assert dataset['Spain']['Seville']['June'] == Temperature(high=90.0, low=64.5)
        assert isinstance(dataset['Spain']['Seville']['June'].high, float)

    def test_read_only(self):
        dataset = parse('{"Spain": {"Seville": {}}}')
        assert isinstance(dataset, MappingProxyType)
        with self.assertRaises(TypeError):
            dataset['Spain']['Madrid'] = {}

    def test_empty_document(self):
        assert len(parse('{}')) == 0

    def test_malformed_json(self):
        with self.assertRaises(DatasetError):
            parse('{"Spain": ')

    def test_wrong_shape(self):
        for text in ('[]',
                     '{"Spain": []}',
                     '{"Spain": {"Seville": {"June": 90}}}',
                     '{"Spain": {"Seville": {"June": {"high": 90}}}}',
                     '{"Spain": {"Seville": {"June": {"high": "hot", "low": 64}}}}',
                     '{"Spain": {"Seville": {"June": {"high": true, "low": 64}}}}'):
            with self.subTest(text=text), self.assertRaises(DatasetError):
                parse(text)

    def test_bundled_dataset(self):
        dataset = load()
        assert sorted(dataset) == COUNTRIES


class TestStartup(unittest.TestCase):
    def setUp(self):
        self.tmp = tempfile.TemporaryDirectory()
        self.addCleanup(self.tmp.cleanup)
        self.path = Path(self.tmp.name) / 'weather.json'

    def assertStartupFails(self, error):
        with mock.patch('Climate.core.DATA_FILE', self.path), \
                self.assertLogs('Climate', 'CRITICAL') as logs, \
                self.assertRaises(error):
            create_app()
        assert str(self.path) in logs.output[0]

    def test_malformed_document(self):
        self.path.write_text('{"Spain": {"Seville": ', encoding='utf-8')
        self.assertStartupFails(DatasetError)

    def test_wrong_shape(self):
        self.path.write_text('{"Spain": ["Seville"]}', encoding='utf-8')
        self.assertStartupFails(DatasetError)

    def test_missing_document(self):
        self.assertStartupFails(FileNotFoundError)

    def test_undecodable_document(self):
        self.path.write_bytes(b'{"Espa\xf1a": {}}')
        self.assertStartupFails(UnicodeDecodeError)


class TestWeatherTable(unittest.TestCase):
    def setUp(self):
        self.table = WeatherTable(load())

    def test_countries(self):
        countries = self.table.countries()
        assert countries == sorted(set(countries))
        assert countries == COUNTRIES

    def test_cities(self):
        assert self.table.cities('Spain') == ['Seville']
        assert self.table.cities('Italy') == sorted(self.table.cities('Italy'))

    def test_case_sensitive(self):
        with self.assertRaises(CountryNotFound):
            self.table.cities('spain')

    def test_monthly_average(self):
        assert self.table.monthly_average('England', 'London', 'January') == Temperature(45.0, 36.0)

    def test_short_circuit(self):
        with self.assertRaises(CountryNotFound) as ctx:
            self.table.monthly_average('Atlantis', 'Nowhere', 'Never')
        assert ctx.exception.detail == "Country 'Atlantis' not found"

        with self.assertRaises(CityNotFound) as ctx:
            self.table.monthly_average('England', 'Nowhere', 'Never')
        assert ctx.exception.detail == "City 'Nowhere' not found in country 'England'"

        with self.assertRaises(MonthNotFound):
            self.table.monthly_average('England', 'London', 'january')

    def test_empty_table(self):
        assert WeatherTable(parse('{}')).countries() == []


class TestApi(unittest.TestCase):
    def setUp(self):
        self.client = create_app().test_client()

    def test_root_redirects_to_docs(self):
        response = self.client.get('/')
        assert response.status_code == 301
        assert response.headers['Location'] == '/docs/'

    def test_docs_redirects_to_trailing_slash(self):
        response = self.client.get('/docs')
        assert response.status_code == 301
        assert response.headers['Location'] == '/docs/'

    def test_docs_serves_swagger_ui(self):
        for path in ('/docs/', '/docs/index.html'):
            response = self.client.get(path)
            assert response.status_code == 200
            body = response.get_data(as_text=True)
            assert 'Swagger UI' in body
            assert '/api-doc/openapi.json' in body

    def test_docs_assets_not_served(self):
        for path in ('/docs/swagger-ui.css', '/docs/swagger-ui-bundle.js'):
            response = self.client.get(path)
            assert response.status_code == 404
            assert response.content_type == 'application/json'
            assert 'detail' in response.get_json()

    def test_openapi_description(self):
        response = self.client.get('/api-doc/openapi.json')
        assert response.status_code == 200
        spec = response.get_json()
        assert set(spec['paths']) == {'/countries', '/countries/{country}',
                                      '/countries/{country}/{city}/{month}'}
        assert set(spec['components']['schemas']) == {'Temperature', 'ErrorResponse'}
        params = spec['paths']['/countries/{country}/{city}/{month}']['get']['parameters']
        assert [p['name'] for p in params] == ['country', 'city', 'month']

    def test_countries_returns_sorted_list(self):
        response = self.client.get('/countries')
        assert response.status_code == 200
        assert response.get_json() == COUNTRIES

    def test_country_cities_success(self):
        response = self.client.get('/countries/Spain')
        assert response.status_code == 200
        assert response.get_json() == ['Seville']

    def test_every_country_lists_its_cities(self):
        table = WeatherTable(load())
        for country in COUNTRIES:
            assert self.client.get(f'/countries/{country}').get_json() == table.cities(country)

    def test_country_cities_not_found(self):
        response = self.client.get('/countries/Unknownland')
        assert response.status_code == 404
        assert response.get_json() == {'detail': "Country 'Unknownland' not found"}

    def test_monthly_average_success(self):
        response = self.client.get('/countries/England/London/January')
        assert response.status_code == 200
        assert response.get_json() == {'high': 45.0, 'low': 36.0}

    def test_monthly_average_missing_month(self):
        response = self.client.get('/countries/England/London/NotAMonth')
        assert response.status_code == 404
        assert response.get_json() == {
            'detail': "Month 'NotAMonth' not found for city 'London' in country 'England'"}

    def test_monthly_average_missing_city(self):
        response = self.client.get('/countries/England/Leeds/January')
        assert response.status_code == 404
        assert response.get_json() == {'detail': "City 'Leeds' not found in country 'England'"}

    def test_monthly_average_missing_country_wins(self):
        response = self.client.get('/countries/Unknownland/Nowhere/NotAMonth')
        assert response.status_code == 404
        assert response.get_json() == {'detail': "Country 'Unknownland' not found"}

    def test_unknown_route_is_json(self):
        response = self.client.get('/countries/England/London')
        assert response.status_code == 404
        assert 'detail' in response.get_json()

    def test_method_not_allowed_is_json(self):
        response = self.client.post('/countries')
        assert response.status_code == 405
        assert 'detail' in response.get_json()
        assert 'GET' in response.headers['Allow']

    def test_miss_is_logged(self):
        with self.assertLogs('Climate', 'INFO') as logs:
            self.client.get('/countries/Unknownland')
        assert any("Country 'Unknownland' not found" in line for line in logs.output)

    def test_injected_table(self):
        table = WeatherTable(parse('{"Chile": {"Santiago": {"March": {"high": 84, "low": 53}}}}'))
        client = create_app(table=table).test_client()
        assert client.get('/countries').get_json() == ['Chile']
        assert client.get('/countries/Chile/Santiago/March').get_json() == {'high': 84.0, 'low': 53.0}


class TestWeatherClient(unittest.TestCase):
    @classmethod
    def setUpClass(cls):
        cls.server = make_server('127.0.0.1', 0, create_app(), threaded=True)
        cls.thread = threading.Thread(target=cls.server.serve_forever, daemon=True)
        cls.thread.start()

    @classmethod
    def tearDownClass(cls):
        cls.server.shutdown()
        cls.thread.join()

    def setUp(self):
        self.client = WeatherClient(base_url=f'http://127.0.0.1:{self.server.server_port}')

    def tearDown(self):
        self.client.close()

    def test_default_base_url(self):
        client = WeatherClient(ExecutionContext())
        assert client.base_url == 'http://localhost:8000'
        client.close()

    def test_countries(self):
        assert self.client.get() == COUNTRIES

    def test_cities(self):
        assert self.client.get('Spain') == ['Seville']

    def test_monthly_average(self):
        assert self.client.get('England', 'London', 'January') == {'high': 45.0, 'low': 36.0}

    def test_not_found(self):
        assert self.client.get('Unknown land') == {'detail': "Country 'Unknown land' not found"}

    def test_city_without_month(self):
        with self.assertRaises(ValueError):
            self.client.get('England', 'London')

    def test_slash_in_name(self):
        with self.assertRaises(ValueError):
            self.client.get('Un/known')
        with self.assertRaises(ValueError):
            self.client.get('England', 'London', 'Jan/Feb')


if __name__ == '__main__':
    unittest.main()

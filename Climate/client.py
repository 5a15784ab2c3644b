"""Weather API client."""


import requests
from urllib.parse import quote
from Climate.core import ExecutionContext
from Climate.log import logger


class WeatherClient:
    """Query a running weather table service."""

    def __init__(self, ectxt: ExecutionContext=None, base_url: str=None):
        self.ectxt = ectxt if ectxt else ExecutionContext()
        self.base_url = (base_url if base_url else self.ectxt.settings.get('Source', 'base_url')).rstrip('/')
        self.session = requests.Session()

    def close(self):
        self.session.close()

    def get(self, country: str=None, city: str=None, month: str=None):
        """Fetch countries, the cities of a country, or a city's monthly average.

        :param country: str
        :param city: str, requires month.
        :param month: str, capitalized month name, e.g. 'June'.
        :return: list of names, Temperature dict, or the error payload for a 404.
        :raises ValueError: a name contains "/", which the server cannot route.
        """
        if (city is None) != (month is None):
            raise ValueError('city and month must be given together.')
        if city is not None and country is None:
            raise ValueError('city requires a country.')
        if any('/' in s for s in (country, city, month) if s is not None):
            raise ValueError('names containing "/" cannot be routed.')

        segments = [s for s in (country, city, month) if s is not None]
        url = '/'.join([self.base_url, 'countries'] + [quote(s) for s in segments])
        response = self.session.get(url)
        data = response.json()

        if response.status_code == 200:
            logger.info('%s -> %s', url, data)
        else:
            logger.error(data.get('detail', response.reason) if isinstance(data, dict) else response.reason)
        return data

"""Weather Data."""


import json
import configparser
from pathlib import Path
from types import MappingProxyType
from dataclasses import dataclass
from typing import Mapping
from Climate.log import logger


HERE = Path(__file__).parent
CONFIG_FILE = HERE / 'config.ini'
DATA_FILE = HERE / 'weather.json'


class ExecutionContext:
    """Application Execution Context."""
    def __init__(self, config_file: str=None):
        self.settings = configparser.ConfigParser()
        self.settings._interpolation = configparser.ExtendedInterpolation()
        self.settings.read(config_file if config_file else CONFIG_FILE)


@dataclass(frozen=True)
class Temperature:
    """Average high and low reading for one city-month."""
    high: float
    low: float

    def to_dict(self) -> dict:
        return {'high': self.high, 'low': self.low}


CityEntry = Mapping[str, Temperature]
CountryEntry = Mapping[str, CityEntry]
WeatherDataset = Mapping[str, CountryEntry]


class DatasetError(ValueError):
    """The bundled weather document is malformed."""


class NotFound(LookupError):
    """A country, city or month is missing from the dataset."""

    def __init__(self, detail: str):
        super().__init__(detail)
        self.detail = detail


class CountryNotFound(NotFound):
    def __init__(self, country: str):
        super().__init__(f"Country '{country}' not found")


class CityNotFound(NotFound):
    def __init__(self, country: str, city: str):
        super().__init__(f"City '{city}' not found in country '{country}'")


class MonthNotFound(NotFound):
    def __init__(self, country: str, city: str, month: str):
        super().__init__(f"Month '{month}' not found for city '{city}' in country '{country}'")


def _mapping(value, where: str) -> dict:
    if not isinstance(value, dict):
        raise DatasetError(f'{where}: expected an object, got {type(value).__name__}')
    return value


def _reading(value, where: str) -> float:
    # bool is an int subclass, reject it explicitly.
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        raise DatasetError(f'{where}: expected a number, got {value!r}')
    return float(value)


def _temperature(value, where: str) -> Temperature:
    value = _mapping(value, where)
    try:
        return Temperature(high=_reading(value['high'], f'{where}.high'),
                           low=_reading(value['low'], f'{where}.low'))
    except KeyError as e:
        raise DatasetError(f'{where}: missing {e.args[0]!r}') from e


def parse(text: str) -> WeatherDataset:
    """Parse a weather document into a read-only country -> city -> month mapping.

    :param text: str, JSON document.
    :return: WeatherDataset
    :raises DatasetError: the document is not valid JSON or has the wrong shape.
    """
    try:
        document = json.loads(text)
    except json.JSONDecodeError as e:
        raise DatasetError(f'invalid JSON: {e}') from e

    return MappingProxyType({
        country: MappingProxyType({
            city: MappingProxyType({
                month: _temperature(reading, f'{country}.{city}.{month}')
                for month, reading in _mapping(months, f'{country}.{city}').items()
            })
            for city, months in _mapping(cities, country).items()
        })
        for country, cities in _mapping(document, 'dataset').items()
    })


def load() -> WeatherDataset:
    """Load the bundled weather document. Any failure is fatal."""
    try:
        dataset = parse(DATA_FILE.read_text(encoding='utf-8'))
    except (OSError, UnicodeDecodeError, DatasetError):
        logger.critical('Failed to parse weather data from %s.', DATA_FILE)
        raise
    logger.info('Loaded weather data for %d countries.', len(dataset))
    return dataset


class WeatherTable:
    """Read-only lookups over a weather dataset, shared by every request."""

    __slots__ = ['_dataset']

    def __init__(self, dataset: WeatherDataset):
        self._dataset = dataset

    def __len__(self):
        return len(self._dataset)

    def countries(self) -> list:
        """Country names in ascending order."""
        return sorted(self._dataset)

    def cities(self, country: str) -> list:
        """City names within a country in ascending order.

        :param country: str, exact country name.
        :return: list
        :raises CountryNotFound:
        """
        try:
            cities = self._dataset[country]
        except KeyError:
            raise CountryNotFound(country) from None
        return sorted(cities)

    def monthly_average(self, country: str, city: str, month: str) -> Temperature:
        """Average temperature for a city-month.
        Lookups run country, city, then month; the first miss is reported.

        :param country: str, exact country name.
        :param city: str, exact city name.
        :param month: str, capitalized month name, e.g. 'June'.
        :return: Temperature
        """
        try:
            cities = self._dataset[country]
        except KeyError:
            raise CountryNotFound(country) from None

        try:
            months = cities[city]
        except KeyError:
            raise CityNotFound(country, city) from None

        try:
            return months[month]
        except KeyError:
            raise MonthNotFound(country, city, month) from None

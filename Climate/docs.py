"""API Documentation."""


from Climate.core import ExecutionContext


OPENAPI_URL = '/api-doc/openapi.json'

SWAGGER_UI = '''<!DOCTYPE html>
<html lang="en">
<head>
  <meta charset="utf-8" />
  <title>Swagger UI</title>
  <link rel="stylesheet" href="{assets}/swagger-ui.css" />
</head>
<body>
  <div id="swagger-ui"></div>
  <script src="{assets}/swagger-ui-bundle.js" crossorigin></script>
  <script src="{assets}/swagger-ui-standalone-preset.js" crossorigin></script>
  <script>
    window.onload = function () {{
      window.ui = SwaggerUIBundle({{
        url: "{url}",
        dom_id: "#swagger-ui",
        deepLinking: true,
        presets: [SwaggerUIBundle.presets.apis, SwaggerUIStandalonePreset],
        layout: "StandaloneLayout"
      }});
    }};
  </script>
</body>
</html>
'''


def _path_param(name: str, description: str) -> dict:
    return {'name': name, 'in': 'path', 'required': True,
            'description': description, 'schema': {'type': 'string'}}


def _json(description: str, schema: dict) -> dict:
    return {'description': description, 'content': {'application/json': {'schema': schema}}}


def openapi(ectxt: ExecutionContext) -> dict:
    """OpenAPI 3.0 description of the data endpoints.

    :param ectxt: ExecutionContext, supplies title and version from [Docs].
    :return: dict
    """
    names = {'type': 'array', 'items': {'type': 'string'}}
    error = {'$ref': '#/components/schemas/ErrorResponse'}
    return {
        'openapi': '3.0.3',
        'info': {
            'title': ectxt.settings.get('Docs', 'title', fallback='Weather API'),
            'version': ectxt.settings.get('Docs', 'version', fallback='0.1.0'),
        },
        'tags': [{'name': 'Weather', 'description': 'Weather data endpoints'}],
        'paths': {
            '/countries': {
                'get': {
                    'tags': ['Weather'],
                    'operationId': 'countries',
                    'responses': {
                        '200': _json('List available countries', names),
                    },
                },
            },
            '/countries/{country}': {
                'get': {
                    'tags': ['Weather'],
                    'operationId': 'country_cities',
                    'parameters': [
                        _path_param('country', 'Country whose cities are requested'),
                    ],
                    'responses': {
                        '200': _json('List cities within the country', names),
                        '404': _json('Country not found', error),
                    },
                },
            },
            '/countries/{country}/{city}/{month}': {
                'get': {
                    'tags': ['Weather'],
                    'operationId': 'monthly_average',
                    'parameters': [
                        _path_param('country', 'Country containing the city'),
                        _path_param('city', 'City to query'),
                        _path_param('month', "Month with capitalized name, e.g. 'June'"),
                    ],
                    'responses': {
                        '200': _json('Monthly average temperature',
                                     {'$ref': '#/components/schemas/Temperature'}),
                        '404': _json('Country, city, or month not found', error),
                    },
                },
            },
        },
        'components': {
            'schemas': {
                'Temperature': {
                    'type': 'object',
                    'required': ['high', 'low'],
                    'properties': {
                        'high': {'type': 'number', 'format': 'double'},
                        'low': {'type': 'number', 'format': 'double'},
                    },
                },
                'ErrorResponse': {
                    'type': 'object',
                    'required': ['detail'],
                    'properties': {'detail': {'type': 'string'}},
                },
            },
        },
    }


def swagger_ui(ectxt: ExecutionContext) -> str:
    """Interactive documentation page backed by the OpenAPI description."""
    assets = ectxt.settings.get('Docs', 'swagger_ui', fallback='https://unpkg.com/swagger-ui-dist@5')
    return SWAGGER_UI.format(assets=assets.rstrip('/'), url=OPENAPI_URL)

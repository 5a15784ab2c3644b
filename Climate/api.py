"""Restful API."""

from Climate.core import ExecutionContext, WeatherTable, NotFound, load
from Climate.docs import OPENAPI_URL, openapi, swagger_ui
from Climate.log import logger
from flask import Flask, abort, json, jsonify, redirect
from werkzeug.exceptions import HTTPException


def create_app(table: WeatherTable=None, ectxt: ExecutionContext=None) -> Flask:
    """Build the Flask application around a single, read-only weather table.

    :param table: WeatherTable, defaults to the bundled dataset.
    :param ectxt: ExecutionContext, defaults to the bundled config.ini.
    :return: Flask
    """
    ectxt = ectxt if ectxt else ExecutionContext()
    table = table if table is not None else WeatherTable(load())
    spec = openapi(ectxt)
    page = swagger_ui(ectxt)

    app = Flask(__name__)

    @app.errorhandler(NotFound)
    def not_found(error):
        logger.info(error.detail)
        return jsonify({'detail': error.detail}), 404

    @app.errorhandler(HTTPException)
    def http_error(error):
        response = error.get_response()
        response.data = json.dumps({'detail': error.description})
        response.content_type = 'application/json'
        return response

    @app.route('/', methods=['GET'])
    def root():
        return redirect('/docs/', code=301)

    @app.route('/docs', methods=['GET'])
    def docs_redirect():
        return redirect('/docs/', code=301)

    @app.route('/docs/', methods=['GET'])
    @app.route('/docs/<path:asset>', methods=['GET'])
    def docs(asset=None):
        """Swagger UI page. Its css and js are loaded from the [Docs] swagger_ui CDN."""
        if asset not in (None, 'index.html'):
            abort(404)
        return page, 200, {'Content-Type': 'text/html; charset=utf-8'}

    @app.route(OPENAPI_URL, methods=['GET'])
    def api_doc():
        return jsonify(spec)

    @app.route('/countries', methods=['GET'])
    def countries():
        return jsonify(table.countries())

    @app.route('/countries/<string:country>', methods=['GET'])
    def country_cities(country):
        return jsonify(table.cities(country))

    @app.route('/countries/<string:country>/<string:city>/<string:month>', methods=['GET'])
    def monthly_average(country, city, month):
        return jsonify(table.monthly_average(country, city, month).to_dict())

    return app


app = create_app()


if __name__ == '__main__':
    settings = ExecutionContext().settings
    host = settings.get('Server', 'host', fallback='0.0.0.0')
    port = settings.getint('Server', 'port', fallback=8000)
    logger.info('Serving weather data on %s:%d.', host, port)
    app.run(host=host, port=port, threaded=settings.getboolean('Server', 'threaded', fallback=True))

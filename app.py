import logging
from datetime import datetime, timezone
from functools import wraps

from flask import Flask, current_app, jsonify, render_template_string, request
from flask_restx import Api, Namespace, Resource, fields
from werkzeug.routing import BaseConverter

from settings import ServerConfig
from timestamps import ParseError, Timestamp, resolve

JSON_CONTENT_TYPE = 'application/json; charset=UTF-8'
STATUS_REASON = 'Invalid date time format, refer to documentation.'

logger = logging.getLogger(__name__)

# Documentation page served at /, kept inline so it ships with the module
INDEX_PAGE = """
<!DOCTYPE html>
<html lang="en">
<head>
    <meta charset="utf-8">
    <title>Timestamp Microservice</title>
    <style>
        body {
            max-width: 720px;
            margin: 40px auto;
            font-family: 'Consolas', 'Monaco', monospace;
            color: #222;
        }
        code, pre {
            background: #f4f4f4;
            padding: 2px 4px;
        }
    </style>
</head>
<body>
    <h1>Timestamp Microservice</h1>
    <p>Pass a Unix timestamp or a natural language date as the path and get both back as JSON.</p>

    <h2>Example usage</h2>
    <pre>{{ request.host_url }}December%2015,%202015
{{ request.host_url }}1450137600</pre>

    <h2>Example output</h2>
    <pre>{"unix":1450137600,"natural":"2015-12-15 00:00:00 +0000 UTC"}</pre>

    <h2>Rules</h2>
    <ul>
        <li>Integers are read as seconds since <code>1970-01-01 00:00:00 UTC</code>; negative values are rejected.</li>
        <li>Dates must look like <code>January 2, 2006</code>: full month name, day, comma, four digit year.</li>
        <li>Dates are read as midnight UTC.</li>
        <li>Anything else returns <code>400</code> with <code>{"unix":null,"natural":null}</code>.</li>
    </ul>

    <p>Interactive documentation: <a href="/api/docs/">/api/docs/</a></p>
</body>
</html>
"""


class DigitsConverter(BaseConverter):
    """Matches an all-digit path segment and keeps it as a string."""
    regex = r'[0-9]+'
    # Same weight as werkzeug's int converter so it wins over plain strings
    weight = 50


# Create namespaces
api_v1 = Namespace('v1', description='JSON API endpoints (v1)')

# Define response models for Swagger documentation
timestamp_response = api_v1.model('Timestamp', {
    'unix': fields.Integer(description='Unix epoch seconds, null on failure', example=1450137600),
    'natural': fields.String(description='UTC rendering, null on failure', example='2015-12-15 00:00:00 +0000 UTC'),
})


@api_v1.route('/timestamp/<string:date>')
@api_v1.param('date', 'Epoch seconds (1450137600) or a date (December 15, 2015)')
class TimestampResource(Resource):
    @api_v1.doc('resolve_timestamp', description='Convert epoch seconds or a natural date into both representations')
    @api_v1.response(200, 'Success', timestamp_response)
    @api_v1.response(400, 'Invalid date time format', timestamp_response)
    def get(self, date):
        """Resolve a Unix timestamp or natural date"""
        try:
            return json_timestamp(resolve(date))
        except ParseError as e:
            return json_parse_error(e)


def json_timestamp(timestamp, status=200):
    """Serialize a Timestamp as compact JSON with an explicit charset."""
    response = jsonify(timestamp.to_dict())
    response.status_code = status
    response.headers['Content-Type'] = JSON_CONTENT_TYPE
    return response


def json_parse_error(e):
    """Every parse failure becomes a 400 with a null body."""
    current_app.logger.info("Rejected %s: %s", request.path, e.diagnostic)
    response = json_timestamp(Timestamp(), status=400)
    response.headers['X-Status-Reason'] = STATUS_REASON
    return response


def resolved(view):
    """Resolve the ``date`` route argument and hand the Timestamp to the view."""
    @wraps(view)
    def wrapper(date):
        return view(resolve(date))
    return wrapper


def create_app(config=None):
    if config is None:
        config = ServerConfig.from_env()

    app = Flask(__name__)
    app.config['SERVER_CONFIG'] = config
    app.debug = config.debug

    # Keep "unix" before "natural" and emit compact JSON
    app.json.sort_keys = False
    app.json.compact = True

    app.url_map.converters['digits'] = DigitsConverter

    # Initialize Flask-RESTX API for Swagger documentation
    api = Api(app,
              version='1.0',
              title='Timestamp Microservice API',
              description='API for converting between Unix timestamps and natural dates',
              prefix='/api',
              doc='/api/docs/')
    api.add_namespace(api_v1)

    @app.route('/')
    def index():
        """Documentation page"""
        return render_template_string(INDEX_PAGE)

    @app.route('/health')
    def health():
        """Health check endpoint for load balancers and monitoring."""
        return {"status": "healthy", "timestamp": datetime.now(timezone.utc).isoformat()}, 200

    @app.route('/<digits:date>')
    @resolved
    def unix_timestamp(timestamp):
        """Epoch seconds, e.g. /1450137600"""
        return json_timestamp(timestamp)

    @app.route('/<date>')
    @resolved
    def natural_timestamp(timestamp):
        """Natural date, e.g. /December 15, 2015"""
        return json_timestamp(timestamp)

    @app.errorhandler(ParseError)
    def handle_parse_error(e):
        return json_parse_error(e)

    return app


def main(config=None):
    if config is None:
        config = ServerConfig.from_env()

    logging.basicConfig(level=config.log_level,
                        format='%(asctime)s %(levelname)s %(name)s: %(message)s')
    app = create_app(config)
    logger.info("Server listening on port: %s", config.address)
    app.run(host=config.host, port=config.port, debug=config.debug)


app = create_app()

if __name__ == "__main__":
    main()

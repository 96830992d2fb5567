#!/usr/bin/env python3
"""
Guild Roster Server - JSON HTTP API for the guild roster
Exposes players, groups, bulk spreadsheet import and the class report.
"""

import argparse
import logging
import os
from typing import Dict, Optional

from flask import Flask, jsonify, request
from flask_cors import CORS
from werkzeug.exceptions import NotFound, RequestEntityTooLarge

import guild
import spreadsheet
from roster.errors import RosterError
from roster.services import UNSET

app = Flask(__name__)
app.config['MAX_CONTENT_LENGTH'] = guild.DEFAULT_CONFIG['max_upload_mb'] * 1024 * 1024
cors = CORS()

server_logger = logging.getLogger('guild.server')

# Global roster instance; replaced by configure()
roster: guild.GuildRoster = guild.GuildRoster()


def configure(config: Optional[Dict] = None) -> guild.GuildRoster:
    """Apply *config* to the app and start from a fresh, empty roster.

    Sets the log level, an optional timestamped log file and the upload
    size limit.  CORS is registered separately by :func:`init_cors`.
    """
    global roster
    config = dict(guild.DEFAULT_CONFIG, **(config or {}))
    log_level = config.get('log_level', 'WARNING')
    guild.setup_logging(log_level)

    log_file = config.get('log_file')
    if log_file:
        try:
            log_dir = os.path.dirname(os.path.abspath(log_file))
            os.makedirs(log_dir, exist_ok=True)
            fh = logging.FileHandler(log_file)
            fh.setFormatter(logging.Formatter('[%(asctime)s] %(levelname)s %(name)s: %(message)s'))
            fh.setLevel(getattr(logging, str(log_level).upper(), logging.INFO))
            logging.getLogger('guild').addHandler(fh)
        except OSError as e:
            server_logger.warning('Could not create log file handler: %s', e)

    app.config['MAX_CONTENT_LENGTH'] = int(config['max_upload_mb']) * 1024 * 1024
    roster = guild.GuildRoster(config)
    return roster


def init_cors(flask_app: Flask, config: Optional[Dict] = None) -> None:
    """Allow cross-origin requests from the configured origins.

    Must run before *flask_app* serves its first request.
    """
    origins = guild.parse_origins((config or {}).get('cors_origins'))
    cors.init_app(flask_app, origins=origins)
    server_logger.info('CORS enabled for %s', origins)


def _json_body() -> Dict:
    data = request.get_json(silent=True)
    return data if isinstance(data, dict) else {}


# ---------------------------------------------------------------------------
# Error handling
# ---------------------------------------------------------------------------

@app.errorhandler(RosterError)
def handle_roster_error(exc: RosterError):
    """Translate a service failure into its status code and JSON body."""
    server_logger.info('%s %s rejected: %s (%s)', request.method, request.path,
                       exc.message, exc.kind)
    return jsonify(exc.to_dict()), exc.status_code


@app.errorhandler(NotFound)
def handle_not_found(exc):
    return jsonify({'error': 'Not found'}), 404


@app.errorhandler(RequestEntityTooLarge)
def handle_too_large(exc):
    limit_mb = (app.config.get('MAX_CONTENT_LENGTH') or 0) // (1024 * 1024)
    return jsonify({'error': f'File too large (limit {limit_mb} MB)'}), 413


# ---------------------------------------------------------------------------
# Health
# ---------------------------------------------------------------------------

@app.route('/')
def index():
    return 'Guild Roster backend is running!'


@app.route('/health')
def health():
    """Liveness check with collection sizes."""
    return jsonify({'status': 'ok', **roster.stats()})


# ---------------------------------------------------------------------------
# Players API
# ---------------------------------------------------------------------------

@app.route('/players', methods=['POST'])
def api_create_player():
    """Add a player. Expects JSON ``{"name": "...", "class": "..."}``."""
    data = _json_body()
    player = roster.player_service.create(data.get('name'), data.get('class'))
    return jsonify({'message': 'Player added successfully',
                    'player': player.to_dict()}), 201


@app.route('/players', methods=['GET'])
def api_list_players():
    """List all players."""
    return jsonify([p.to_dict() for p in roster.player_service.list_all()])


@app.route('/players/<int:player_id>', methods=['PUT'])
def api_update_player(player_id: int):
    """Update a player. Expects JSON with ``name`` and/or ``class``."""
    data = _json_body()
    player = roster.player_service.update(player_id, name=data.get('name'),
                                          player_class=data.get('class'))
    return jsonify({'message': 'Player updated successfully',
                    'player': player.to_dict()})


@app.route('/players/<int:player_id>', methods=['DELETE'])
def api_delete_player(player_id: int):
    """Delete a player; groups referencing them are cleaned up."""
    roster.player_service.delete(player_id)
    return jsonify({'message': 'Player deleted successfully'})


@app.route('/players/upload_excel', methods=['POST'])
def api_upload_players():
    """Bulk import players from a multipart ``file`` upload.

    Response JSON:
      - ``message``      : summary line
      - ``added_players``: players created, in row order
      - ``errors``       : one string per rejected row
      - ``added_count``  : number of players created
    """
    f = request.files.get('file')
    if not f:
        return jsonify({'error': 'No file uploaded'}), 400
    if not spreadsheet.is_supported(f.filename):
        return jsonify({'error': 'Invalid file type. Only .xlsx, .xlsm and .csv '
                                 'are supported.'}), 400

    try:
        rows = spreadsheet.read_rows(f.read(), f.filename)
    except Exception as e:
        server_logger.exception('Error processing uploaded file %s', f.filename)
        return jsonify({'error': f'Error processing file: {e}'}), 500

    with roster.lock:
        report = roster.import_service.process(rows)
    return jsonify(report.to_dict())


# ---------------------------------------------------------------------------
# Groups API
# ---------------------------------------------------------------------------

@app.route('/groups', methods=['POST'])
def api_create_group():
    """Create a group. Expects JSON ``{"name": "...", "leaderId": <id>?}``."""
    data = _json_body()
    group = roster.group_service.create(data.get('name'),
                                        leader_id=data.get('leaderId'))
    return jsonify({'message': 'Group created successfully',
                    'group': group.to_dict()}), 201


@app.route('/groups', methods=['GET'])
def api_list_groups():
    """List all groups with member and leader player records filled in."""
    return jsonify([v.to_dict() for v in roster.integrity_service.list_group_views()])


@app.route('/groups/<int:group_id>', methods=['PUT'])
def api_update_group(group_id: int):
    """Update a group. ``leaderId: null`` clears the leader; omitting the key keeps it."""
    data = _json_body()
    leader_id = data['leaderId'] if 'leaderId' in data else UNSET
    group = roster.group_service.update(group_id, name=data.get('name'),
                                        leader_id=leader_id)
    return jsonify({'message': 'Group updated successfully',
                    'group': group.to_dict()})


@app.route('/groups/<int:group_id>', methods=['DELETE'])
def api_delete_group(group_id: int):
    """Delete a group."""
    roster.group_service.delete(group_id)
    return jsonify({'message': 'Group deleted successfully'})


@app.route('/groups/<int:group_id>/add_player/<int:player_id>', methods=['POST'])
def api_add_group_member(group_id: int, player_id: int):
    """Add a player to a group."""
    group = roster.group_service.add_member(group_id, player_id)
    return jsonify({'message': 'Player added to group successfully',
                    'group': group.to_dict()})


@app.route('/groups/<int:group_id>/remove_player/<int:player_id>', methods=['DELETE'])
def api_remove_group_member(group_id: int, player_id: int):
    """Remove a player from a group."""
    group = roster.group_service.remove_member(group_id, player_id)
    return jsonify({'message': 'Player removed from group successfully',
                    'group': group.to_dict()})


# ---------------------------------------------------------------------------
# Class distribution
# ---------------------------------------------------------------------------

@app.route('/class_distribution')
def api_class_distribution():
    """Return ``[{"class": ..., "count": ...}]`` for every catalog class."""
    return jsonify(roster.player_service.class_distribution())


# ---------------------------------------------------------------------------
# API Documentation: OpenAPI 3.0 + Swagger UI
# ---------------------------------------------------------------------------

@app.route('/api/openapi.json')
def api_openapi_spec():
    """Serve the OpenAPI 3.0 specification as JSON."""
    from openapi_spec import build_spec
    server_url = request.url_root.rstrip('/')
    return jsonify(build_spec(server_url=server_url))


@app.route('/api/docs')
def api_swagger_ui():
    """Serve an interactive Swagger UI for the REST API."""
    openapi_url = '/api/openapi.json'
    html = f"""<!DOCTYPE html>
<html lang="en">
<head>
  <meta charset="UTF-8">
  <meta name="viewport" content="width=device-width, initial-scale=1.0">
  <title>Guild Roster API Documentation</title>
  <link rel="stylesheet"
        href="https://unpkg.com/swagger-ui-dist@5/swagger-ui.css">
</head>
<body>
  <div id="swagger-ui"></div>
  <script src="https://unpkg.com/swagger-ui-dist@5/swagger-ui-bundle.js"></script>
  <script>
    SwaggerUIBundle({{
      url: "{openapi_url}",
      dom_id: "#swagger-ui",
      presets: [SwaggerUIBundle.presets.apis, SwaggerUIBundle.SwaggerUIStandalonePreset],
      layout: "BaseLayout",
      deepLinking: true,
    }});
  </script>
</body>
</html>"""
    return html, 200, {'Content-Type': 'text/html; charset=utf-8'}


def main():
    """Main entry point for the server"""
    parser = argparse.ArgumentParser(description='Guild Roster HTTP API')
    parser.add_argument('--config', default='config.json', help='Path to config file')
    parser.add_argument('--host', help='Interface to bind (overrides config)')
    parser.add_argument('--port', type=int, help='Port to listen on (overrides config)')
    args = parser.parse_args()

    config = guild.load_config(args.config)
    if args.host:
        config['host'] = args.host
    if args.port:
        config['port'] = args.port
    configure(config)
    init_cors(app, config)

    host, port = config['host'], int(config['port'])
    print("\n" + "="*60)
    print("Guild Roster server is starting...")
    print("="*60)
    print(f"\nServer running on http://{host}:{port}")
    print(f"API docs at http://{host}:{port}/api/docs")
    print("\nPress Ctrl+C to stop the server")
    print("="*60 + "\n")

    try:
        app.run(host=host, port=port, debug=False)
    except KeyboardInterrupt:
        print("\nGuild Roster server stopped\n")


if __name__ == "__main__":
    main()

"""Liveness endpoint for the hosting platform."""

import logging
import threading
from http.server import BaseHTTPRequestHandler, ThreadingHTTPServer

logger = logging.getLogger('coachbot.health')

HEALTH_PATHS = ('/', '/health')


class HealthHandler(BaseHTTPRequestHandler):
    """200 'ok' on the health paths, 404 everywhere else."""

    def do_GET(self):
        if self.path.split('?', 1)[0] in HEALTH_PATHS:
            body = b'ok'
            self.send_response(200)
            self.send_header('Content-Type', 'text/plain')
            self.send_header('Content-Length', str(len(body)))
            self.end_headers()
            self.wfile.write(body)
        else:
            self.send_response(404)
            self.send_header('Content-Length', '0')
            self.end_headers()

    def log_message(self, format, *args):
        logger.debug(f'{self.address_string()} {format % args}')


def start_health_server(port: int, host: str = '0.0.0.0') -> ThreadingHTTPServer:
    """
    Serve the health endpoint from a daemon thread.

    Args:
        port: Port to bind (0 picks a free port, see server.server_address)
        host: Interface to bind

    Returns:
        The running server; call shutdown() to stop it early
    """
    server = ThreadingHTTPServer((host, port), HealthHandler)
    server.daemon_threads = True
    thread = threading.Thread(target=server.serve_forever, name='health-server', daemon=True)
    thread.start()
    logger.info(f'Health server listening on {host}:{server.server_address[1]}')
    return server

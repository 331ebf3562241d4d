#!/usr/bin/env python3
import sys
from functools import partial
from http.server import ThreadingHTTPServer, SimpleHTTPRequestHandler
from urllib.parse import urlsplit

from deck_config import get_config_path_from_args, load_config, server_port


class DeckRequestHandler(SimpleHTTPRequestHandler):
    """Serve the static dir; "/" falls through to index.html."""

    def end_headers(self):
        # Index is rewritten on every build
        if urlsplit(self.path).path in ("/", "/index.html"):
            self.send_header("Cache-Control", "no-cache")
        super().end_headers()

    def list_directory(self, path):
        # Directories without an index.html are not browsable
        self.send_error(404, "File not found")
        return None


def make_server(cfg: dict, port: int) -> ThreadingHTTPServer:
    static_dir = cfg["static_dir"]
    if not static_dir.is_dir():
        raise FileNotFoundError(f"Static dir not found: {static_dir}")

    handler = partial(DeckRequestHandler, directory=str(static_dir))
    return ThreadingHTTPServer((cfg["host"], port), handler)


def main(argv=None) -> int:
    cfg = load_config(get_config_path_from_args(argv))
    port = server_port(cfg)

    httpd = make_server(cfg, port)
    print(f"Server running at http://localhost:{httpd.server_address[1]}")
    try:
        httpd.serve_forever()
    except KeyboardInterrupt:
        print("Shutting down.")
    finally:
        httpd.server_close()
    return 0


if __name__ == "__main__":
    sys.exit(main())

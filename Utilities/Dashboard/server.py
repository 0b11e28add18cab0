import os
import sys
import json
from http.server import ThreadingHTTPServer, SimpleHTTPRequestHandler
from urllib.parse import urlparse, unquote

# Paths
ROOT_DIR = os.path.abspath(os.path.join(os.path.dirname(__file__), "..", ".."))
# Ensure project root is importable so 'Modules' can be imported
if ROOT_DIR not in sys.path:
    sys.path.insert(0, ROOT_DIR)
DASHBOARD_DIR = os.path.abspath(os.path.join(ROOT_DIR, "Utilities", "Dashboard"))

from Modules import StudyStore
from Modules import Curriculum
from Modules.Logger import Logger
from Modules.Settings import load_settings, configure_logging

STATIC_FILES = {"index.html", "app.js", "style.css"}


class BadRequest(Exception):
    pass


class StudyHandler(SimpleHTTPRequestHandler):
    server_version = "StudyTrackerServer/1.0"
    log_requests = True

    def __init__(self, *args, **kwargs):
        super().__init__(*args, directory=DASHBOARD_DIR, **kwargs)

    def end_headers(self):
        # Every response, static files included, is readable cross-origin
        self.send_header("Access-Control-Allow-Origin", "*")
        self.send_header("Access-Control-Allow-Methods", "GET,POST,PUT,DELETE,OPTIONS")
        self.send_header("Access-Control-Allow-Headers", "Content-Type")
        super().end_headers()

    def log_message(self, format, *args):
        if self.log_requests:
            Logger.info(f"{self.address_string()} {format % args}")

    def do_OPTIONS(self):
        self.send_response(204)
        self.end_headers()

    def do_GET(self):
        self._dispatch("GET")

    def do_POST(self):
        self._dispatch("POST")

    def do_PUT(self):
        self._dispatch("PUT")

    def do_DELETE(self):
        self._dispatch("DELETE")

    def do_PATCH(self):
        self._dispatch("PATCH")

    def _dispatch(self, method):
        parsed = urlparse(self.path)
        # Split before decoding so an encoded "/" stays inside its id
        parts = [unquote(p) for p in parsed.path.split("/") if p]
        try:
            if self._route(method, parts):
                return
            if method == "GET" and self._is_static(parts):
                super().do_GET()
                return
            self._write_json(404, {"message": "Not found"})
        except BadRequest as e:
            self._write_json(400, {"message": str(e)})
        except Exception as e:
            Logger.error(f"{method} {parsed.path} failed", e)
            self._write_json(500, {"message": "Internal error"})

    def _route(self, method, parts):
        """Runs the matching API handler; returns False when nothing matched."""
        if parts == ["health"] and method == "GET":
            self._write_json(200, {"ok": True, "service": "study-tracker"})
            return True

        # === CHAPTERS API ===
        if parts[:1] == ["chapters"]:
            if len(parts) == 1 and method == "GET":
                self._write_json(200, StudyStore.load("chapters"))
                return True
            if len(parts) == 3 and method == "PUT":
                _, chapter_id, lesson_id = parts
                updated = StudyStore.update("chapters", lambda chapters: _same(
                    Curriculum.toggle_lesson(chapters, chapter_id, lesson_id)))
                self._write_json(200, updated)
                return True
            if len(parts) == 4 and parts[3] == "note" and method == "PUT":
                _, chapter_id, lesson_id, _ = parts
                payload = self._read_json()
                note = payload.get("note")
                if note is None:
                    note = ""
                if not isinstance(note, str):
                    raise BadRequest("Invalid note")
                updated = StudyStore.update("chapters", lambda chapters: _same(
                    Curriculum.set_lesson_note(chapters, chapter_id, lesson_id, note)))
                self._write_json(200, updated)
                return True

        # === DEADLINES API ===
        if parts[:1] == ["deadlines"]:
            if len(parts) == 1 and method == "GET":
                self._write_json(200, StudyStore.load("deadlines"))
                return True
            if len(parts) == 1 and method == "POST":
                payload = self._read_json()
                title = payload.get("title")
                due_date = payload.get("dueDate")
                if not isinstance(title, str) or not title.strip() \
                        or not isinstance(due_date, str) or not due_date.strip():
                    raise BadRequest("Invalid deadline")
                created = Curriculum.new_deadline(title, due_date)
                StudyStore.update("deadlines", lambda deadlines: ([*deadlines, created], None))
                self._write_json(201, created)
                return True
            if len(parts) == 2 and method == "PUT":
                deadline_id = parts[1]
                updated = StudyStore.update("deadlines", lambda deadlines: _same(
                    Curriculum.toggle_deadline(deadlines, deadline_id)))
                self._write_json(200, updated)
                return True
            if len(parts) == 2 and method == "DELETE":
                deadline_id = parts[1]
                StudyStore.update("deadlines", lambda deadlines: (
                    Curriculum.remove_deadline(deadlines, deadline_id), None))
                self._write_json(200, {"message": "Deadline removed"})
                return True

        return False

    def _is_static(self, parts):
        if not parts:
            return True
        return len(parts) == 1 and parts[0] in STATIC_FILES \
            and os.path.isfile(os.path.join(DASHBOARD_DIR, parts[0]))

    def _read_json(self):
        try:
            length = int(self.headers.get("Content-Length", "0") or 0)
        except ValueError:
            raise BadRequest("Invalid JSON")
        raw = self.rfile.read(length) if length > 0 else b""
        text = raw.decode("utf-8", errors="replace")
        try:
            payload = json.loads(text)
        except ValueError:
            raise BadRequest("Invalid JSON")
        if not isinstance(payload, dict):
            raise BadRequest("Invalid JSON")
        return payload

    def _write_json(self, code, obj):
        data = json.dumps(obj, ensure_ascii=False).encode("utf-8")
        self.send_response(code)
        self.send_header("Content-Type", "application/json; charset=utf-8")
        self.send_header("Content-Length", str(len(data)))
        self.end_headers()
        self.wfile.write(data)


def _same(records):
    """update() callback result for handlers that answer with the whole collection."""
    return records, records


def make_server(settings):
    """Applies settings, creates the data files and binds the HTTP server."""
    configure_logging(settings)
    StudyStore.set_data_dir(settings["data_dir"])
    StudyStore.ensure_files()
    StudyHandler.log_requests = settings["log_requests"]
    return ThreadingHTTPServer((settings["host"], settings["port"]), StudyHandler)


def serve(settings=None):
    settings = settings or load_settings()
    httpd = make_server(settings)
    host, port = httpd.server_address[:2]
    message = f"Study tracker server running at http://{host}:{port}"
    print(message)
    Logger.info(message)
    try:
        httpd.serve_forever()
    except KeyboardInterrupt:
        pass
    finally:
        httpd.server_close()
        Logger.info("Study tracker server stopped")


def main():
    serve()


if __name__ == "__main__":
    main()

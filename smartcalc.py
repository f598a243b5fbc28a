"""
SmartCalc
Main application entry point
"""
import tkinter as tk
import subprocess
import sys
import os
import atexit
import logging
import config
from gui import SmartCalcGUI

logger = logging.getLogger(__name__)

# Routes worth advertising on startup; the full list is served at /api
PORTAL_ENDPOINTS = [
    ("POST", "/api/solve", "solve a word problem"),
    ("POST", "/api/explain", "explain the latest calculation"),
    ("GET", "/api/history", "calculation history"),
    ("GET", "/api/state", "display and pending operation"),
]


def portal_banner(host=None, port=None):
    """Lines announcing where the web portal's endpoints can be reached"""
    host = host or config.WEB_HOST
    port = port or config.WEB_PORT
    if host == '0.0.0.0':
        host = 'localhost'
    base = f"http://{host}:{port}"
    lines = ["=" * 60, f"{config.APP_NAME} web portal: {base}/api"]
    lines += [f"  {method:<6} {base}{path}  - {summary}"
              for method, path, summary in PORTAL_ENDPOINTS]
    lines.append("=" * 60)
    return lines


class WebPortal:
    """The Flask portal (api.py) running as a child process of the GUI"""

    def __init__(self, script=None):
        self.script = script or os.path.join(
            os.path.dirname(os.path.abspath(__file__)), 'api.py')
        self.process = None

    @property
    def running(self):
        return self.process is not None and self.process.poll() is None

    def start(self):
        if self.running:
            return self.process
        try:
            self.process = subprocess.Popen(
                [sys.executable, self.script],
                stdout=subprocess.DEVNULL,
                stderr=subprocess.DEVNULL,
                creationflags=subprocess.CREATE_NEW_CONSOLE if sys.platform == 'win32' else 0
            )
        except OSError as e:
            logger.error("Failed to start web portal: %s", e)
            return None
        print(f"Web portal started (PID: {self.process.pid})")
        print("\n".join(portal_banner()))
        return self.process

    def stop(self):
        """Terminate the portal; safe to call more than once"""
        process, self.process = self.process, None
        if process is None:
            return
        try:
            process.terminate()
            process.wait(timeout=5)
            print("Web portal stopped")
        except subprocess.TimeoutExpired:
            logger.warning("Web portal did not exit, killing PID %s", process.pid)
            process.kill()
        except OSError as e:
            logger.error("Error stopping web portal: %s", e)


def main():
    logging.basicConfig(level=config.LOG_LEVEL,
                        format="%(asctime)s %(levelname)s %(name)s: %(message)s")

    portal = WebPortal()
    if config.START_WEB_PORTAL:
        portal.start()
        atexit.register(portal.stop)

    if not config.get_api_key():
        print("GEMINI_API_KEY is not set; AI mode will report an error when used.")

    root = tk.Tk()
    SmartCalcGUI(root)
    root.mainloop()

    portal.stop()


if __name__ == "__main__":
    main()

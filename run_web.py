"""
SmartCalc Web Portal Launcher
Simple script to start the web server
"""
import logging
import sys
import os

# Add current directory to path
sys.path.insert(0, os.path.dirname(os.path.abspath(__file__)))

print("Starting SmartCalc Web Portal...")
print()

try:
    import config
    import api
except ImportError as e:
    print(f"Error importing modules: {e}")
    print("\nMake sure you have installed the required dependencies:")
    print("  pip install -e .")
    sys.exit(1)

logging.basicConfig(level=config.LOG_LEVEL)
print(f"Serving on http://{config.WEB_HOST}:{config.WEB_PORT}/api")
api.app.run(host=config.WEB_HOST, port=config.WEB_PORT, debug=False)

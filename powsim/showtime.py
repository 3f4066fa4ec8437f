"""
powsim — Flask entrypoint
"""
import sys
from flask import Flask

from powsim.api.routes import bp as api_bp, settings
from powsim.logs import init_logging

app = Flask(__name__)
app.register_blueprint(api_bp)


def main(argv=None):
    argv = sys.argv[1:] if argv is None else argv
    port = settings.port
    if "--port" in argv:
        i = argv.index("--port")
        try:
            port = int(argv[i + 1])
        except (IndexError, ValueError):
            print("[powsim] --port expects an integer, using", port)
    init_logging(settings.log_level)
    print(f"[powsim] running at http://0.0.0.0:{port}")
    app.run(host="0.0.0.0", port=port, debug=False)


if __name__ == "__main__":
    main()

import argparse
import logging

from . import config
from .app import build_app


def main():
    parser = argparse.ArgumentParser(description="Serve the life expectancy & energy dashboard.")
    parser.add_argument("--data", default=config.DATA_PATH, help="dataset CSV path or URL")
    parser.add_argument("--geo-url", default=config.GEO_URL)
    parser.add_argument("--geo-cache", default=str(config.GEO_CACHE))
    parser.add_argument("--host", default="127.0.0.1")
    parser.add_argument("--port", type=int, default=8050)
    parser.add_argument("--debug", action="store_true")
    parser.add_argument("--log-level", default=config.LOG_LEVEL)
    args = parser.parse_args()

    logging.basicConfig(
        level=args.log_level.upper(),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )

    app = build_app(args.data, args.geo_url, args.geo_cache)
    # callbacks share chart state, so requests are handled one at a time
    app.run(host=args.host, port=args.port, debug=args.debug, threaded=False)


if __name__ == "__main__":
    main()

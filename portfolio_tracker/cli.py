"""
Command line entry point: run the API server with uvicorn.
"""

import argparse
from typing import List, Optional

from portfolio_tracker.config import settings


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="Run the portfolio tracker API")
    parser.add_argument("--host", default=settings.API_HOST, help="Bind address")
    parser.add_argument("--port", type=int, default=settings.PORT, help="Listening port")
    parser.add_argument(
        "--reload",
        action="store_true",
        default=False,
        help="Reload on code changes (development only)",
    )
    return parser


def main(argv: Optional[List[str]] = None) -> None:
    args = build_parser().parse_args(argv)

    import uvicorn
    uvicorn.run("portfolio_tracker.main:app", host=args.host, port=args.port, reload=args.reload)


if __name__ == "__main__":
    main()

import argparse
import asyncio
import sys

from passguard.app.core.config import settings
from passguard.app.core.logging import configure_logging
from passguard.app.db.session import init_models


def main() -> None:
    parser = argparse.ArgumentParser(description="Create the PassGuard database tables.")
    # DEV MODE ONLY: wipes every account and vault entry
    parser.add_argument("--drop", action="store_true", help="drop existing tables first")
    args = parser.parse_args()

    configure_logging(settings.LOG_LEVEL)
    if sys.platform == "win32":
        asyncio.set_event_loop_policy(asyncio.WindowsSelectorEventLoopPolicy())
    asyncio.run(init_models(drop=args.drop))


if __name__ == "__main__":
    main()

"""resmedx entrypoint.

Run with:
  python -m resmedx
"""

import os

import uvicorn
from dotenv import load_dotenv


def main() -> None:
    load_dotenv()
    host = os.getenv("RESMEDX_HOST", "0.0.0.0")
    port = int(os.getenv("PORT", "5000"))
    reload = os.getenv("RESMEDX_RELOAD", "false").lower() in {"1", "true", "yes", "y"}
    uvicorn.run("resmedx.app:app", host=host, port=port, reload=reload)


if __name__ == "__main__":
    main()

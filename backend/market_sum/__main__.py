# backend/market_sum/__main__.py
import uvicorn

from market_sum.core.config import settings


def main() -> None:
    uvicorn.run("market_sum.main:app", host=settings.HOST, port=settings.PORT, reload=settings.RELOAD)


if __name__ == "__main__":
    main()

import uvicorn

from booking_api.core import config


def main() -> None:
    uvicorn.run('booking_api.main:app', host=config.HOST, port=config.PORT, reload=config.RELOAD)


if __name__ == '__main__':
    main()

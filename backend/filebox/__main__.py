"""Run the API with uvicorn: `python -m filebox`."""
import uvicorn

from filebox.config import settings


def main():
    uvicorn.run("filebox.main:app", host=settings.API_HOST, port=settings.API_PORT)


if __name__ == "__main__":
    main()

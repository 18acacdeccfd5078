"""Run the API with uvicorn: ``python -m task_api``."""
import uvicorn

from task_api.config import settings


def main() -> None:
    uvicorn.run("task_api.main:app", host=settings.HOST, port=settings.PORT)


if __name__ == "__main__":
    main()

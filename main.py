import uvicorn

from verifyhub.app import create_app
from verifyhub.core.config import get_settings

settings = get_settings()

app = create_app()

if __name__ == "__main__":
    uvicorn.run(app, host=settings.HOST, port=settings.PORT, log_config=None)

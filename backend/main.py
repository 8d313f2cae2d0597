# main.py (в корне backend)
#!/usr/bin/env python3
"""
Точка входа для Login Logger API
"""
import uvicorn
from login_logger.config import Settings
from login_logger.main import configure_logging, create_app


def main():
    settings = Settings.from_env()
    configure_logging(settings.log_level)
    uvicorn.run(
        create_app(settings),
        host=settings.bind,
        port=settings.port,
        reload=False
    )


if __name__ == "__main__":
    main()

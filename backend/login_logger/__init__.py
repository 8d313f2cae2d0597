"""Login Logger: прием, очистка и журналирование событий входа."""

__version__ = "1.0.0"

import logging
import sys


class Log:
    """Centralized logging for the scan service.

    Keyword arguments are rendered as ``key=value`` pairs after the message so
    that reason codes and sizes stay greppable in plain stdout logs.
    """

    _logger: logging.Logger = logging.getLogger("cardscan")

    @classmethod
    def configure(cls, log_level: str) -> None:
        """Configure the service logger with the given level and a stdout handler."""
        cls._logger.setLevel(log_level.upper())
        if not cls._logger.handlers:
            handler = logging.StreamHandler(sys.stdout)
            handler.setFormatter(
                logging.Formatter("%(asctime)s [%(levelname)s] %(name)s: %(message)s")
            )
            cls._logger.addHandler(handler)

    @classmethod
    def info(cls, message: str, **context: object) -> None:
        cls._logger.info(cls._render(message, context))

    @classmethod
    def warning(cls, message: str, **context: object) -> None:
        cls._logger.warning(cls._render(message, context))

    @classmethod
    def error(cls, message: str, **context: object) -> None:
        cls._logger.error(cls._render(message, context))

    @classmethod
    def debug(cls, message: str, **context: object) -> None:
        cls._logger.debug(cls._render(message, context))

    @staticmethod
    def _render(message: str, context: dict[str, object]) -> str:
        if not context:
            return message
        pairs = " ".join(f"{key}={value}" for key, value in context.items())
        return f"{message} {pairs}"

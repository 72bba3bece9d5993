import logging

LOG_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"


def configure_logging(level: str = "INFO") -> None:
    """Configure le logging racine (une seule fois, au démarrage)."""
    logging.basicConfig(
        level=getattr(logging, level.upper(), logging.INFO),
        format=LOG_FORMAT,
    )
    # uvicorn garde ses propres handlers ; on aligne juste le niveau
    logging.getLogger("uvicorn").setLevel(level.upper())

"""Logging setup shared by the app and the operator scripts."""
import logging

LOG_FORMAT = "%(asctime)s %(levelname)s %(name)s: %(message)s"

def configure_logging(level: str = "INFO"):
    logging.basicConfig(format=LOG_FORMAT)
    logging.getLogger().setLevel(level.upper())

def get_logger(name: str):
    return logging.getLogger(name)

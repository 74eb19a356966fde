import logging
def get_logger(name:str="pyv-cache"):
    logging.basicConfig(level=logging.INFO, format="%(levelname)s %(message)s")
    return logging.getLogger(name)

def set_level(level:str):
    """Sets the level of every pyv_cache logger at once."""
    logging.getLogger("pyv_cache").setLevel(level.upper())

import sys
import logging

logging.basicConfig(
    format="[%(asctime)s] %(message)s",
    level=logging.INFO,
    stream=sys.stderr,
)

logger = logging.getLogger("mda_bound")
logger.setLevel(logging.INFO)

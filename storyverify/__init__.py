import logging

from storyverify.config import config

logging.basicConfig(
    format='%(asctime)s [%(name)s] %(levelname)s: %(message)s',
    level=logging.INFO,
)
if config.debug:
    logging.getLogger('storyverify').setLevel(logging.DEBUG)

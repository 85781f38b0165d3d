import sys

from storyverify.cli import run

if len(sys.argv) == 1:
    raise ValueError('Usage: python -m storyverify verify')
if sys.argv[1] == 'verify':
    run()
else:
    raise ValueError(f'Unknown command {sys.argv[1]}')

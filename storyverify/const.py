EXIT_OK = 0
EXIT_VERIFY_FAILED = 1
EXIT_GIT_ERROR = 2
EXIT_API_ERROR = 3

# Reported to CI consumers, must not be renumbered
EXIT_BUILD_LIMITED = 100
EXIT_SNAPSHOT_QUOTA_REACHED = 101
EXIT_PAYMENT_REQUIRED = 102

DEFAULT_INDEX_URL = 'https://index.storyverify.dev/graphql'
DEFAULT_ENVIRONMENT_WHITELIST = [r'^GERRIT', r'^TRAVIS']

ONLY_PATTERN = r'^(.*):([^:]*)$'

"""Project defaults for queues, console texts, and exit statuses."""

COMMAND_QUEUE_PREFIX = "/mqgw_command"
RESPONSE_QUEUE_PREFIX = "/mqgw_response"

# Linux caps mq_maxmsg at /proc/sys/fs/mqueue/msg_max (10 by default) for
# unprivileged users.
QUEUE_MAX_MESSAGES = 10
QUEUE_MESSAGE_SIZE = 1024
QUEUE_PERMISSIONS = 0o666
QUEUE_MESSAGE_PRIORITY = 15

MESSAGE_PROMPT = "Enter a command: "

EXIT_SUCCESS = 0
EXIT_FAILURE = 1

DEFAULT_LOG_LEVEL = "WARNING"

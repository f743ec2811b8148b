"""Canonical command IDs shared by server, client, and tests."""

from enum import Enum

CMD_GET_DOMAIN_NAME = "getdomainname"
CMD_GET_HOST_NAME = "gethostname"
CMD_GET_UNAME = "uname"
CMD_HELP = "help"
CMD_EXIT = "exit"


class CommandKind(str, Enum):
    GET_DOMAIN_NAME = CMD_GET_DOMAIN_NAME
    GET_HOST_NAME = CMD_GET_HOST_NAME
    GET_UNAME = CMD_GET_UNAME
    HELP = CMD_HELP
    EXIT = CMD_EXIT
    UNKNOWN = "unknown"

"""Built-in command modules."""

from commands.builtins import (
    domainname_cmd,
    exit_cmd,
    help_cmd,
    hostname_cmd,
    uname_cmd,
)

# Registration order is the order of the help listing.
BUILTIN_MODULES = (
    domainname_cmd,
    hostname_cmd,
    uname_cmd,
    help_cmd,
    exit_cmd,
)

from __future__ import annotations

import unittest
from unittest.mock import patch

from commands.loader import build_dispatcher, load_builtin_commands
from commands.registry import CommandDispatcher, DispatchContext
from commands.schemas import CommandSpec
from protocol.command_ids import (
    CMD_EXIT,
    CMD_GET_DOMAIN_NAME,
    CMD_GET_HOST_NAME,
    CMD_GET_UNAME,
    CMD_HELP,
    CommandKind,
)
from protocol.messages import MESSAGE_EXIT, MESSAGE_HELP
from services.system_info_service import SystemInfoResult


class CommandDispatcherTests(unittest.TestCase):
    def setUp(self) -> None:
        self.lookups: list[str] = []
        self.host = SystemInfoResult(True, "build-box")
        self.domain = SystemInfoResult(True, "lab.example")
        self.uname = SystemInfoResult(True, " System: Linux")
        self.errors: list[str] = []
        self.dispatcher = CommandDispatcher(
            DispatchContext(
                max_message_size=1024,
                get_domain_name=lambda: self._lookup("domain", self.domain),
                get_host_name=lambda: self._lookup("host", self.host),
                get_uname=lambda: self._lookup("uname", self.uname),
            ),
            logger=self.errors.append,
        )
        load_builtin_commands(self.dispatcher)

    def _lookup(self, name: str, result: SystemInfoResult) -> SystemInfoResult:
        self.lookups.append(name)
        return result

    def test_help_is_the_static_listing(self) -> None:
        result = self.dispatcher.dispatch(CMD_HELP)
        self.assertEqual(result.kind, CommandKind.HELP)
        self.assertEqual(result.text, MESSAGE_HELP)
        self.assertFalse(result.stop)

    def test_exit_says_goodbye_and_stops(self) -> None:
        result = self.dispatcher.dispatch(CMD_EXIT)
        self.assertEqual(result.text, MESSAGE_EXIT)
        self.assertTrue(result.stop)

    def test_lookups_route_to_collaborators(self) -> None:
        self.assertEqual(self.dispatcher.dispatch(CMD_GET_HOST_NAME).text, "build-box")
        self.assertEqual(self.dispatcher.dispatch(CMD_GET_DOMAIN_NAME).text, "lab.example")
        self.assertEqual(self.dispatcher.dispatch(CMD_GET_UNAME).text, " System: Linux")
        self.assertEqual(self.lookups, ["host", "domain", "uname"])

    def test_collaborator_failure_becomes_response_text(self) -> None:
        self.host = SystemInfoResult(False, "Operation not permitted")
        result = self.dispatcher.dispatch(CMD_GET_HOST_NAME)
        self.assertEqual(result.kind, CommandKind.GET_HOST_NAME)
        self.assertEqual(result.text, "Operation not permitted")
        self.assertFalse(result.stop)

    def test_unknown_command(self) -> None:
        result = self.dispatcher.dispatch("foobar")
        self.assertEqual(result.kind, CommandKind.UNKNOWN)
        self.assertEqual(result.text, 'Unknown command: "foobar"')
        self.assertFalse(result.stop)

    def test_unknown_command_fits_message_size(self) -> None:
        result = self.dispatcher.dispatch("q" * 1024)
        self.assertLessEqual(len(result.text.encode("utf-8")), 1024)
        self.assertTrue(result.text.endswith('"'))

    def test_classify_is_exact_and_case_sensitive(self) -> None:
        self.assertEqual(self.dispatcher.classify("uname"), CommandKind.GET_UNAME)
        self.assertEqual(self.dispatcher.classify("HELP"), CommandKind.UNKNOWN)
        self.assertEqual(self.dispatcher.classify(" help"), CommandKind.UNKNOWN)
        self.assertEqual(self.dispatcher.classify("exit\n"), CommandKind.UNKNOWN)
        self.assertEqual(self.dispatcher.classify(""), CommandKind.UNKNOWN)

    def test_dispatch_routes_through_classify(self) -> None:
        with patch.object(self.dispatcher, "classify", return_value=CommandKind.UNKNOWN) as classify_mock:
            result = self.dispatcher.dispatch(CMD_HELP)
        classify_mock.assert_called_once_with(CMD_HELP)
        self.assertEqual(result.text, 'Unknown command: "help"')

    def test_handler_exception_still_produces_a_response(self) -> None:
        def _boom() -> SystemInfoResult:
            raise RuntimeError("lookup exploded")

        dispatcher = CommandDispatcher(
            DispatchContext(1024, _boom, _boom, _boom),
            logger=self.errors.append,
        )
        load_builtin_commands(dispatcher)
        result = dispatcher.dispatch(CMD_GET_HOST_NAME)
        self.assertEqual(result.text, "RuntimeError: lookup exploded")
        self.assertEqual(len(self.errors), 1)

    def test_oversized_response_is_truncated(self) -> None:
        dispatcher = CommandDispatcher(
            DispatchContext(
                64,
                lambda: self.domain,
                lambda: SystemInfoResult(True, "h" * 500),
                lambda: self.uname,
            )
        )
        load_builtin_commands(dispatcher)
        self.assertEqual(dispatcher.dispatch(CMD_GET_HOST_NAME).text, "h" * 64)

    def test_duplicate_registration_is_rejected(self) -> None:
        with self.assertRaises(ValueError):
            self.dispatcher.register(
                CommandSpec(name=CMD_HELP, kind=CommandKind.HELP, summary="x"),
                lambda _ctx, _cmd: "x",
            )

    def test_list_commands_in_help_order(self) -> None:
        names = [spec.name for spec in self.dispatcher.list_commands()]
        self.assertEqual(names, [CMD_GET_DOMAIN_NAME, CMD_GET_HOST_NAME, CMD_GET_UNAME, CMD_HELP, CMD_EXIT])

    def test_build_dispatcher_uses_system_lookups(self) -> None:
        dispatcher = build_dispatcher(1024)
        self.assertEqual(dispatcher.context.max_message_size, 1024)
        self.assertEqual(dispatcher.dispatch(CMD_HELP).text, MESSAGE_HELP)


if __name__ == "__main__":
    unittest.main()

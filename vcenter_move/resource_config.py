from __future__ import annotations

import os
from argparse import Namespace
from getpass import getpass
from urllib.parse import urlparse

import attr

from vcenter_move.constants import DEFAULT_PORT, DEFAULT_SDK_PATH, PASSWORD_ENV_VAR
from vcenter_move.exceptions import InvalidAttributeException


class WaitMode:
    WATCH = "watch"
    POLL = "poll"

    ALL = (WATCH, POLL)


def _parse_url(url: str) -> tuple[str, int, str]:
    if "://" not in url:
        url = f"https://{url}"
    parsed = urlparse(url)
    if not parsed.hostname:
        raise InvalidAttributeException(f"Unable to get a host from the URL '{url}'")
    try:
        port = parsed.port or DEFAULT_PORT
    except ValueError:
        raise InvalidAttributeException(f"Port in the URL '{url}' is not valid")
    path = parsed.path.rstrip("/") or DEFAULT_SDK_PATH
    return parsed.hostname, port, path


def _validate_name(attr_name: str, value: str):
    if not value:
        raise InvalidAttributeException(f"'{attr_name}' should not be empty")


@attr.s(auto_attribs=True, frozen=True)
class VCenterMoveConfig:
    url: str
    user: str
    password: str = attr.ib(repr=False)
    entity_name: str
    folder_name: str
    timeout: float | None = None
    wait_mode: str = WaitMode.WATCH
    poll_interval: float = 2
    verify_ssl: bool = True
    strict: bool = False
    address: str = attr.ib(init=False)
    port: int = attr.ib(init=False)
    path: str = attr.ib(init=False)

    def __attrs_post_init__(self):
        _validate_name("url", self.url)
        _validate_name("username", self.user)
        _validate_name("entityname", self.entity_name)
        _validate_name("foldername", self.folder_name)
        if self.wait_mode not in WaitMode.ALL:
            raise InvalidAttributeException(
                f"Wait mode '{self.wait_mode}' is not valid, "
                f"expected one of {', '.join(WaitMode.ALL)}"
            )
        if self.timeout is not None and self.timeout <= 0:
            raise InvalidAttributeException("Timeout should be a positive number")
        if self.poll_interval <= 0:
            raise InvalidAttributeException("Poll interval should be a positive number")

        address, port, path = _parse_url(self.url)
        object.__setattr__(self, "address", address)
        object.__setattr__(self, "port", port)
        object.__setattr__(self, "path", path)

    @classmethod
    def from_args(cls, args: Namespace, environ=None) -> VCenterMoveConfig:
        """Creates the config from the parsed command line arguments.

        The password is taken from the arguments, then from the
        environment and if it's still missing the user is asked for it.
        """
        environ = os.environ if environ is None else environ
        password = args.password or environ.get(PASSWORD_ENV_VAR)
        if password is None:
            password = getpass(f"Password for {args.username}: ")

        return cls(
            url=args.url,
            user=args.username,
            password=password,
            entity_name=args.entityname,
            folder_name=args.foldername,
            timeout=args.timeout,
            wait_mode=args.wait_mode,
            poll_interval=args.poll_interval,
            verify_ssl=not args.insecure,
            strict=args.strict,
        )

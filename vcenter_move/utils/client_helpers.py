from __future__ import annotations

import ssl

from pyVim.connect import Disconnect, SmartConnect


def get_ssl_context(verify: bool = True) -> ssl.SSLContext:
    if verify:
        return ssl.create_default_context()
    context = ssl.SSLContext(ssl.PROTOCOL_TLS_CLIENT)
    context.check_hostname = False
    context.verify_mode = ssl.CERT_NONE
    return context


def get_si(
    host: str,
    user: str,
    password: str,
    port: int = 443,
    path: str = "/sdk",
    verify_ssl: bool = True,
):
    return SmartConnect(
        host=host,
        user=user,
        pwd=password,
        port=port,
        path=path,
        sslContext=get_ssl_context(verify_ssl),
    )


def disconnect_si(si) -> None:
    Disconnect(si)

"""The rendezvous server: tracks logged-in clients and relays punch requests."""

from __future__ import annotations

import os
import re
import socket
import sys

from punchchat import logger
from punchchat.endpoint import Endpoint
from punchchat.endpoint_list import PeerList
from punchchat.message import RECV_BUFSIZE, Message, MessageError, MessageType, send_text


class Server:
    """Answers client datagrams arriving on ``sock``."""

    def __init__(self, sock: socket.socket) -> None:
        self.sock = sock
        self.clients = PeerList()

    def _send(self, peer: Endpoint, mtype: MessageType, text: str | None = None) -> None:
        try:
            send_text(self.sock, peer, mtype, text)
        except (OSError, MessageError) as exc:
            logger.warn("sending %s to %s failed: %s", mtype.name, peer, exc)

    def handle(self, sender: Endpoint, message: Message) -> None:
        """React to one message from ``sender``."""
        mtype = message.mtype
        if mtype == MessageType.LOGIN:
            if self.clients.add(sender):
                logger.info("%s logged in", sender)
                self._send(sender, MessageType.REPLY, "Login success!")
            else:
                logger.warn("%s failed to login", sender)
                self._send(sender, MessageType.REPLY, "Login failed")
        elif mtype == MessageType.LOGOUT:
            if self.clients.remove(sender):
                logger.info("%s logged out", sender)
                self._send(sender, MessageType.REPLY, "Logout success")
            else:
                logger.info("%s failed to logout", sender)
                self._send(sender, MessageType.REPLY, "Logout failed")
        elif mtype == MessageType.LIST:
            logger.info("%s quering list", sender)
            text = ";".join(
                ("(you)" if entry.endpoint == sender else "") + str(entry.endpoint)
                for entry in self.clients
            )
            self._send(sender, MessageType.ADDRESS, text)
        elif mtype == MessageType.PUNCH:
            other = Endpoint.from_string(message.text())
            logger.info("punching to %s", other)
            self._send(other, MessageType.PUNCH, str(sender))
            self._send(sender, MessageType.TEXT, "punch request sent")
        elif mtype == MessageType.PING:
            self._send(sender, MessageType.PONG)
        elif mtype == MessageType.PONG:
            pass
        else:
            self._send(sender, MessageType.REPLY, "Unkown command")

    def serve_forever(self) -> None:
        """Receive and handle datagrams until receiving fails."""
        while True:
            try:
                data, address = self.sock.recvfrom(RECV_BUFSIZE)
            except OSError as exc:
                logger.error("recvfrom: %s", exc)
                break
            sender = Endpoint.from_address(address)
            if not data:
                logger.info("EOF from %s", sender)
                continue
            try:
                message = Message.unpack(data)
            except MessageError as exc:
                logger.warn("Invalid message(%d bytes): %s", len(data), exc)
                continue
            self.handle(sender, message)
        logger.info("udp_receive_loop stopped.")


def _parse_port(text: str) -> int:
    match = re.match(r"\s*[+-]?\d+", text)
    return int(match.group()) if match else 0


def main(argv: list[str] | None = None) -> int:
    """Run the server on the port given as the only argument."""
    logger.set_level(logger.LogLevel.DEBUG)
    args = sys.argv[1:] if argv is None else list(argv)
    if len(args) != 1:
        print(f"Usage: {os.path.basename(sys.argv[0])} <port>")
        return 1
    address = Endpoint("0.0.0.0", _parse_port(args[0]))
    try:
        sock = socket.socket(socket.AF_INET, socket.SOCK_DGRAM)
    except OSError as exc:
        print(f"socket: {exc}", file=sys.stderr)
        return 1
    with sock:
        try:
            sock.bind(address.to_address())
        except OSError as exc:
            print(f"bind: {exc}", file=sys.stderr)
            return 1
        logger.info("server start on %s", address)
        Server(sock).serve_forever()
    return 0


if __name__ == "__main__":
    sys.exit(main())
"""The chat client: talks to the rendezvous server, punches holes and plays Gomoku."""

from __future__ import annotations

import os
import re
import select
import socket
import sys
import threading
from typing import Iterable, TextIO

from punchchat import logger
from punchchat.endpoint import Endpoint
from punchchat.endpoint_list import PeerList
from punchchat.gomoku import GameSession, MoveResult
from punchchat.message import RECV_BUFSIZE, Message, MessageError, MessageType, send_text

PING_INTERVAL = 10

HELP = (
    "Usage:"
    "\n\n login"
    "\n     login to server so that other peer(s) can see you"
    "\n\n logout"
    "\n     logout from server"
    "\n\n list"
    "\n     list logined peers"
    "\n\n punch [index]"
    "\n     punch a hole through UDP to peer"
    "\n     host:port must have been logged in to server"
    "\n     Example:"
    "\n     >>> punch 0"
    "\n\n send data"
    "\n     send [data] to peer through UDP protocol"
    "\n     the other peer could receive your message if UDP hole punching succeed"
    "\n     Example:"
    "\n     >>> send hello"
    "\n\n game"
    "\n     invite your peer to play the Gomoku"
    "\n\n +x,y"
    "\n     set at Line x Column y"
    "\n\n y"
    "\n     accept the invitation"
    "\n\n n"
    "\n     refuse the invitation"
    "\n\n help / ?"
    "\n     print this help message"
    "\n\n quit"
    "\n     logout and quit this program"
)

_MOVE = re.compile(r"\+(\d+),(\d+)", re.ASCII)
_COMMAND = re.compile(r" *([^ ]+) ?(.*)", re.DOTALL)


def _leading_int(text: str) -> int:
    match = re.match(r"\s*[+-]?\d+", text, re.ASCII)
    return int(match.group()) if match else 0


def parse_move(text: str) -> tuple[int, int] | None:
    """Return (line, column) for a command of the form ``+x,y``, else None."""
    match = _MOVE.fullmatch(text)
    if match is None:
        return None
    return int(match.group(1)), int(match.group(2))


class Client:
    """One chat client bound to ``sock`` and registered with ``server``."""

    def __init__(self, sock: socket.socket, server: Endpoint, out: TextIO | None = None) -> None:
        self.sock = sock
        self.server = server
        self._out = out
        self.peers = PeerList()
        self.session = GameSession(out)
        self.ping_interval = PING_INTERVAL
        self._stopping = threading.Event()

    @property
    def out(self) -> TextIO:
        return self._out if self._out is not None else sys.stdout

    def _say(self, text: str) -> None:
        self.out.write(text + "\n")
        self.out.flush()

    def _log(self, level: logger.LogLevel, msg: str, *args: object) -> None:
        logger.log(level, msg, *args, stream=self._out)

    def _send(self, peer: Endpoint | None, mtype: MessageType, text: str | None = None) -> None:
        if peer is None:
            self._log(logger.LogLevel.WARN, "no peer to send %s to", mtype.name)
            return
        try:
            send_text(self.sock, peer, mtype, text)
        except (OSError, MessageError) as exc:
            self._log(logger.LogLevel.WARN, "sending %s to %s failed: %s", mtype.name, peer, exc)

    def on_message(self, sender: Endpoint, message: Message) -> None:
        """React to one message from the server or a peer."""
        mtype = message.mtype
        body = message.text()
        if sender == self.server:
            self._on_server_message(mtype, body)
            return

        self.session.add_peer(sender)
        if mtype == MessageType.TEXT:
            self._log(logger.LogLevel.INFO, "Peer(%s): %s", sender, body)
        elif mtype in (MessageType.REPLY, MessageType.PUNCH):
            if mtype == MessageType.REPLY:
                self._log(logger.LogLevel.INFO, "Peer(%s) replied, you can talk now", sender)
                self.peers.add(sender)
            # A punch can arrive directly once a tunnel already exists.
            self._send(sender, MessageType.TEXT, "I SEE YOU")
        elif mtype == MessageType.PING:
            self._send(sender, MessageType.PONG)
        elif mtype == MessageType.GAME_INVITE:
            self._log(
                logger.LogLevel.INFO,
                "Peer(%s) invites you to play Gomoku (y/n). You move First.",
                sender,
            )
            self.session.invited()
        elif mtype == MessageType.GAME_ACCEPT:
            self._log(logger.LogLevel.INFO, "Peer(%s) accepts your game invitation.", sender)
            self.session.accept(str(sender), "You", 1)
        elif mtype == MessageType.GAME_REFUSE:
            self._log(logger.LogLevel.INFO, "Peer(%s) refuses your game invitation.", sender)
            self.session.refuse()
        elif mtype == MessageType.GAME_WIN:
            self._send(sender, MessageType.TEXT, "You lose the game.")
            self.session.refuse()
        elif mtype == MessageType.GAME_LOSE:
            self._log(logger.LogLevel.INFO, "You win the game.")
            self.session.refuse()
        elif mtype == MessageType.GAME_TIE:
            self._log(logger.LogLevel.INFO, "Tie.")
            self._send(sender, MessageType.TEXT, "Tie.")
        elif mtype == MessageType.GAME_SET:
            x_text, _, y_text = body.partition(",")
            try:
                result = self.session.place_opponent(_leading_int(x_text), _leading_int(y_text))
            except RuntimeError as exc:
                self._log(logger.LogLevel.WARN, "move from %s ignored: %s", sender, exc)
                return
            if result == MoveResult.WIN:
                self.session.refuse()

    def _on_server_message(self, mtype: int, body: str) -> None:
        if mtype == MessageType.ADDRESS:
            entries = body.split(";")
            if entries and entries[-1] == "":
                entries.pop()
            self.session.set_address([entry for entry in entries if "(you)" not in entry])
            self._log(logger.LogLevel.INFO, "SERVER: index: address")
            self.session.show_addresses()
        elif mtype == MessageType.PUNCH:
            peer = Endpoint.from_string(body)
            self.session.add_peer(peer)
            self._log(logger.LogLevel.INFO, "%s on call, replying...", peer)
            self._send(peer, MessageType.REPLY)
        elif mtype == MessageType.REPLY:
            self._log(logger.LogLevel.INFO, "SERVER: %s", body)

    def handle_command(self, line: str) -> bool:
        """Carry out one console line; return False once the client should quit."""
        if line.endswith("\n"):
            line = line[:-1]
        match = _COMMAND.match(line)
        if match is None:
            return True
        cmd, rest = match.group(1), match.group(2)
        move = parse_move(line)
        session = self.session

        if cmd.startswith("list"):
            self._send(self.server, MessageType.LIST)
        elif cmd.startswith("login"):
            self._send(self.server, MessageType.LOGIN)
        elif cmd.startswith("logou"):
            self._send(self.server, MessageType.LOGOUT)
            session.delete_peer()
        elif cmd.startswith("punch"):
            index_text = rest.split(" ", 1)[0] if rest else ""
            try:
                host_port = session.address(_leading_int(index_text))
            except IndexError as exc:
                self._say(str(exc))
                return True
            peer = Endpoint.from_string(host_port)
            self._log(logger.LogLevel.INFO, "punching %s", peer)
            self._send(peer, MessageType.PUNCH)
            self._send(self.server, MessageType.PUNCH, host_port)
        elif cmd.startswith("send"):
            self._send(session.peer, MessageType.TEXT, rest or None)
        elif cmd.startswith("game"):
            if not session.invite_status():
                self._send(session.peer, MessageType.GAME_INVITE)
        elif cmd.startswith("y"):
            if session.invite_status():
                self._send(session.peer, MessageType.GAME_ACCEPT)
                session.accept("You", str(session.peer), 0)
            else:
                self._say("You are not invited.")
        elif cmd.startswith("n"):
            if session.invite_status():
                self._send(session.peer, MessageType.GAME_REFUSE)
            else:
                self._say("You are not invited.")
        elif move is not None:
            if session.is_gaming():
                x, y = move
                result = session.place(x, y)
                if result:
                    self._send(session.peer, MessageType.GAME_SET, f"{x},{y}")
                if result == MoveResult.WIN:
                    session.refuse()
            else:
                self._say("You are not in a game.")
        elif cmd.startswith("resign"):
            if session.is_gaming():
                self._send(session.peer, MessageType.GAME_LOSE)
                session.resign()
            else:
                self._say("You are not in a game.")
        elif cmd.startswith("help") or cmd.startswith("?"):
            self._say(HELP)
        elif cmd.startswith("quit"):
            self._send(self.server, MessageType.LOGOUT)
            self.stop()
            return False
        else:
            self._say(f"Unknown command {cmd}")
        return True

    def keepalive_loop(self) -> None:
        """Ping the server and every known peer each ``ping_interval`` seconds."""
        ticks = 0
        while not self._stopping.is_set():
            if ticks < self.ping_interval:
                ticks += 1
                self._stopping.wait(1)
                continue
            ticks = 0
            self._send(self.server, MessageType.PING)
            for entry in self.peers:
                self._send(entry.endpoint, MessageType.PING)
        self._log(logger.LogLevel.INFO, "quiting keepalive_loop")

    def receive_loop(self) -> None:
        """Receive and dispatch datagrams until the client stops."""
        while not self._stopping.is_set():
            try:
                ready, _, _ = select.select([self.sock], [], [], 1.0)
            except (OSError, ValueError) as exc:
                self._log(logger.LogLevel.ERROR, "select: %s", exc)
                if self.sock.fileno() == -1:
                    break
                continue
            if not ready:
                continue
            try:
                data, address = self.sock.recvfrom(RECV_BUFSIZE)
            except OSError as exc:
                self._log(logger.LogLevel.ERROR, "recvfrom: %s", exc)
                continue
            sender = Endpoint.from_address(address)
            if not data:
                self._log(logger.LogLevel.INFO, "EOF from %s", sender)
                continue
            try:
                message = Message.unpack(data)
            except MessageError as exc:
                self._log(logger.LogLevel.WARN, "Invalid message(%d bytes): %s", len(data), exc)
                continue
            self.on_message(sender, message)
        self._log(logger.LogLevel.INFO, "quiting receive_loop")

    def console_loop(self, lines: Iterable[str] | None = None) -> None:
        """Prompt for and carry out commands from ``lines`` (standard input by default)."""
        source = iter(lines if lines is not None else sys.stdin)
        while True:
            self.out.write(">>> ")
            self.out.flush()
            line = next(source, None)
            if line is None or not self.handle_command(line):
                break
        self._log(logger.LogLevel.INFO, "quiting console_loop")

    def run(self) -> None:
        """Run the keepalive and receive loops in the background and the console here."""
        workers = [
            threading.Thread(target=self.keepalive_loop, name="keepalive", daemon=True),
            threading.Thread(target=self.receive_loop, name="receive", daemon=True),
        ]
        for worker in workers:
            worker.start()
        try:
            self.console_loop()
        finally:
            self.stop()
            for worker in workers:
                worker.join()

    def stop(self) -> None:
        """Ask every loop to finish."""
        self._stopping.set()


def main(argv: list[str] | None = None) -> int:
    """Run a client against the ``server:port`` given as the only argument."""
    logger.set_level(logger.LogLevel.INFO)
    args = sys.argv[1:] if argv is None else list(argv)
    if len(args) != 1:
        print(f"Usage: {os.path.basename(sys.argv[0])} server:port", file=sys.stderr)
        return 1
    server = Endpoint.from_string(args[0])
    logger.info("setting server to %s", server)
    try:
        sock = socket.socket(socket.AF_INET, socket.SOCK_DGRAM)
    except OSError as exc:
        print(f"socket: {exc}", file=sys.stderr)
        return 1
    with sock:
        Client(sock, server).run()
    return 0


if __name__ == "__main__":
    sys.exit(main())
# punchchat

A small UDP chat system. A rendezvous server keeps a list of logged-in clients
and relays punch requests, so that two clients behind NATs can open a direct
UDP path to each other. Once connected, peers can exchange text messages and
play Gomoku on a 10×10 board.

No third-party packages are needed.

## Installation

```
pip install .
```

## Running the server

```
punchchat-server 9000
```

The server binds `0.0.0.0` on the given port and logs at debug level. It
answers:

- `LOGIN` – adds the sender to the client list (`Login success!` or `Login failed`)
- `LOGOUT` – removes the sender (`Logout success` or `Logout failed`)
- `LIST` – replies with every logged-in client as `host:port`, separated by
  `;`, with the asker's own entry prefixed by `(you)`
- `PUNCH` – forwards the sender's address to the named client and tells the
  sender `punch request sent`
- `PING` – replies `PONG`
- anything else – replies `Unkown command`

## Running a client

```
punchchat-client 203.0.113.5:9000
```

The client pings the server and every peer that has replied to it every 10
seconds, and answers pings from peers. At the `>>>` prompt it accepts these
commands:

| Command        | Effect                                                   |
|----------------|----------------------------------------------------------|
| `login`        | register with the server so other peers can see you      |
| `logout`       | leave the server's list                                  |
| `list`         | list the other logged-in peers, numbered from 0          |
| `punch N`      | punch a hole to peer number `N` from the last list       |
| `send TEXT`    | send `TEXT` to the current peer over UDP                 |
| `game`         | invite the current peer to a game of Gomoku              |
| `y` / `n`      | accept or refuse an invitation                           |
| `+X,Y`         | place a stone at line `X`, column `Y` (0–9)              |
| `resign`       | give up the current game                                 |
| `help` / `?`   | show the command summary                                 |
| `quit`         | log out and exit                                         |

The current peer is the last one a message came from, or the one the server
last asked you to reply to. A typical session: both peers `login`, one runs
`list` and then `punch 0`; once the reply arrives the two can `send` messages
or start a `game`. The player who receives the invitation plays black and
moves first.

## Wire format

Every datagram starts with an 8-byte header in network byte order: the magic
`0x7853` (16 bits), the message type (16 bits) and the body length (32 bits),
followed by the body. Datagrams are at most 1024 bytes.

```python
from punchchat.message import Message, MessageType

data = Message(MessageType.TEXT, b"hello").pack()
assert data[:2] == b"\x78\x53"
assert Message.unpack(data).text() == "hello"
```

`Message.unpack` raises `MessageError` for a datagram shorter than the header
or with the wrong magic, and truncates a body shorter than its declared length.

## Library use

- `punchchat.endpoint.Endpoint` – an IPv4 `host:port` address;
  `Endpoint.from_string("203.0.113.5:9000")`, `to_address()`, `from_address()`.
  Text lacking a host or port gives `255.255.255.255:0`.
- `punchchat.endpoint_list.PeerList` – endpoints in insertion order, each once,
  with the time they were added; `add`, `remove`, `dump`.
- `punchchat.logger` – levelled logging (`set_level`, `debug`, `info`, `warn`,
  `error`) with an `HH:MM:SS` timestamp.
- `punchchat.message` – `Message`, `MessageType`, `type_name`, `send_message`,
  `send_text`.
- `punchchat.gomoku` – `Gomoku` (the board, `place` returning a `MoveResult`)
  and `GameSession` (the client's peer, address list, invitation and game).
- `punchchat.server.Server` and `punchchat.client.Client` – the two programs;
  `Server.handle` and `Client.on_message` / `Client.handle_command` can be
  driven directly without a network loop.

## Limitations

- IPv4 only.
- A win is found only when the new stone is followed by four more of its
  colour in one direction from it; a stone placed in the middle of a line of
  five does not end the game.
- Ties are never detected; the game goes on until a win or a resignation.
- Logging in, peer lists and games are kept in memory only; nothing is stored.
- There is no authentication or encryption.
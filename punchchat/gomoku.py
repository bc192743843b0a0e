"""A ten-by-ten Gomoku board and the per-client game and peer state."""

from __future__ import annotations

import sys
from enum import IntEnum
from typing import TextIO

from punchchat.endpoint import Endpoint

SIZE = 10
EMPTY = "."
BLACK_STONE = "●"
WHITE_STONE = "○"
BLACK = 0
WHITE = 1

# Only the four stones on one side of the new stone are looked at.
_DIRECTIONS = ((-1, -1), (0, -1), (1, 1), (-1, 0), (1, 0), (-1, 1), (0, 1), (1, 1))


class MoveResult(IntEnum):
    REJECTED = 0
    PLACED = 1
    WIN = 2


class Gomoku:
    """One game between black (0) and white (1); black moves first."""

    def __init__(self, black: str, white: str, me_first: int, out: TextIO | None = None) -> None:
        self.black_name = black
        self.white_name = white
        self.my_turn = me_first
        self.my_color = BLACK_STONE if me_first else WHITE_STONE
        self.game_end = False
        self._out = out
        self._board = [[EMPTY] * SIZE for _ in range(SIZE)]
        self._header = "\n   " + "".join(f"{n}  " for n in range(SIZE))
        self.show()

    @property
    def out(self) -> TextIO:
        return self._out if self._out is not None else sys.stdout

    def _say(self, text: str) -> None:
        self.out.write(text + "\n")

    def in_board(self, x: int, y: int) -> bool:
        """Whether (x, y) lies on the board."""
        return 0 <= x < SIZE and 0 <= y < SIZE

    def place(self, x: int, y: int, who: int) -> MoveResult:
        """Put a stone of ``who`` at line x, column y if it is their turn."""
        if self.my_turn != who:
            self._say("This is not your turn.")
            return MoveResult.REJECTED
        if not self.in_board(x, y):
            self._say("Out of board.")
            return MoveResult.REJECTED
        if self._board[x][y] != EMPTY:
            self._say("Conflict.")
            return MoveResult.REJECTED
        self._board[x][y] = BLACK_STONE if who == BLACK else WHITE_STONE
        self.show()
        if self.judge(x, y, who):
            return MoveResult.WIN
        self.turnover()
        return MoveResult.PLACED

    def judge(self, x: int, y: int, who: int) -> bool:
        """Whether the stone at (x, y) is followed by four of its colour in a direction."""
        stone = BLACK_STONE if who == BLACK else WHITE_STONE
        for dx, dy in _DIRECTIONS:
            cells = [(x + step * dx, y + step * dy) for step in range(1, 5)]
            if all(self.in_board(cx, cy) and self._board[cx][cy] == stone for cx, cy in cells):
                self.win(who)
                return True
        return False

    def win(self, who: int) -> None:
        """End the game with ``who`` as the winner."""
        self.game_end = True
        if who == BLACK:
            self._say(self.black_name + "(black) wins.")
        else:
            self._say(self.white_name + "(white) wins.")

    def tie(self) -> None:
        """End the game as a tie."""
        self.game_end = True
        self._say("The game ties.")

    def render(self) -> str:
        """The names and the board as text."""
        parts = [f"\nBlack:\t{self.black_name}\tWhite:\t{self.white_name}", self._header]
        for index, row in enumerate(self._board):
            parts.append(f"\n{index}  " + "".join(f"{cell}  " for cell in row))
        return "".join(parts)

    def show(self) -> None:
        """Write the board to the output stream."""
        self._say(self.render())

    def is_end(self) -> bool:
        return self.game_end

    def turnover(self) -> None:
        """Pass the move to the other side."""
        self.my_turn = 1 - self.my_turn


class GameSession:
    """The client's current peer, known addresses, invitation and game."""

    def __init__(self, out: TextIO | None = None) -> None:
        self._out = out
        self.who = BLACK
        self.gaming = False
        self.invite_pending = False
        self.peer: Endpoint | None = None
        self.peer_valid = False
        self.addresses: list[str] = []
        self._games: list[Gomoku] = []

    @property
    def out(self) -> TextIO:
        return self._out if self._out is not None else sys.stdout

    @property
    def game(self) -> Gomoku:
        """The game in progress; RuntimeError if there is none."""
        if not self._games:
            raise RuntimeError("no game in progress")
        return self._games[0]

    def is_gaming(self) -> bool:
        return self.gaming

    def accept(self, black: str, white: str, who: int) -> None:
        """Start a game in which this side plays ``who``."""
        self.gaming = True
        self.invite_pending = False
        self.who = who
        self._games.append(Gomoku(black, white, BLACK, self._out))

    def refuse(self) -> None:
        """Drop any invitation and game."""
        self.gaming = False
        self.invite_pending = False
        self.who = BLACK
        if self._games:
            self._games.pop()

    def invited(self) -> None:
        self.invite_pending = True

    def add_peer(self, endpoint: Endpoint) -> None:
        self.peer = endpoint
        self.peer_valid = True

    def delete_peer(self) -> None:
        self.peer_valid = False

    def set_address(self, addresses: list[str]) -> None:
        self.addresses = list(addresses)

    def show_addresses(self) -> None:
        """Write the known addresses with their indexes."""
        for index, address in enumerate(self.addresses):
            self.out.write(f"{index}: {address}\n")

    def address(self, index: int) -> str:
        """The address at ``index``; IndexError if there is none."""
        if not 0 <= index < len(self.addresses):
            raise IndexError(f"no address at index {index}")
        return self.addresses[index]

    def invite_status(self) -> bool:
        return self.invite_pending

    def place(self, x: int, y: int) -> MoveResult:
        """Place this side's stone."""
        return self.game.place(x, y, self.who)

    def place_opponent(self, x: int, y: int) -> MoveResult:
        """Place the opponent's stone."""
        return self.game.place(x, y, 1 - self.who)

    def resign(self) -> None:
        """Give the game to the opponent and clear it."""
        self.game.win(1 - self.who)
        self.refuse()
"""UDP hole-punching chat: a rendezvous server, a console client and peer-to-peer Gomoku."""

__version__ = "0.1.0"